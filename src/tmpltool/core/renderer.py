"""Template rendering.

Builds a Jinja2 environment with the full catalog registered, renders one
template against the process environment variables and writes the result.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, Undefined

from .context import TemplateContext
from .contracts import Bindings
from .environment import EnvironmentProvider, OsEnvironment
from .exceptions import RenderError
from .registry import register_all
from .validator import validate_output

logger = logging.getLogger(__name__)


def _finalize(value: Any) -> Any:
    # None renders as an empty string rather than "None"
    return "" if value is None else value


def build_environment(
    context: TemplateContext,
    *,
    environ: Optional[EnvironmentProvider] = None,
    render_config: Optional[Mapping[str, Any]] = None,
) -> Environment:
    """Create a Jinja2 ``Environment`` with every catalog entry attached.

    Args:
        context: Shared per-render context (base directory, trust mode).
        environ: Environment-variable capability; the process environment
            when omitted.
        render_config: The ``render`` config section (trim_blocks,
            lstrip_blocks, keep_trailing_newline, strict_undefined).
    """
    options = dict(render_config or {})
    env = Environment(
        trim_blocks=bool(options.get("trim_blocks", False)),
        lstrip_blocks=bool(options.get("lstrip_blocks", False)),
        keep_trailing_newline=bool(options.get("keep_trailing_newline", True)),
        undefined=StrictUndefined if options.get("strict_undefined") else Undefined,
        finalize=_finalize,
        autoescape=False,
    )
    register_all(env, Bindings(context=context, environ=environ or OsEnvironment()))
    return env


def build_context(environ: EnvironmentProvider) -> Dict[str, str]:
    """Template variables: every environment variable by name."""
    return dict(environ.list())


def render_string(
    source: str,
    context: TemplateContext,
    *,
    environ: Optional[EnvironmentProvider] = None,
    render_config: Optional[Mapping[str, Any]] = None,
    variables: Optional[Mapping[str, Any]] = None,
) -> str:
    """Render template ``source``.

    Raises:
        RenderError: "Failed to parse template: ..." on syntax errors,
            "Failed to render template: ..." on evaluation errors (including
            catalog function failures).
    """
    provider = environ or OsEnvironment()
    env = build_environment(context, environ=provider, render_config=render_config)
    try:
        template = env.from_string(source)
    except TemplateSyntaxError as exc:
        raise RenderError(
            f"Failed to parse template: {exc}",
            context={"line": exc.lineno},
        ) from exc

    data = build_context(provider) if variables is None else dict(variables)
    try:
        return template.render(data)
    except Exception as exc:
        raise RenderError(f"Failed to render template: {exc}") from exc


def read_template(template_file: Optional[str]) -> str:
    """Read the template from ``template_file`` or stdin when it is None.

    Raises:
        RenderError: When the file cannot be read.
    """
    if template_file is None:
        return sys.stdin.read()
    try:
        return Path(template_file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RenderError(
            f"Failed to read template file '{template_file}': {exc}",
            context={"path": template_file},
        ) from exc


def write_output(rendered: str, output_file: Optional[str]) -> None:
    """Write to ``output_file`` (announcing it on stderr) or to stdout."""
    if output_file is None:
        sys.stdout.write(rendered)
        sys.stdout.flush()
        return
    try:
        Path(output_file).write_text(rendered, encoding="utf-8")
    except OSError as exc:
        raise RenderError(
            f"Failed to write output file '{output_file}': {exc}",
            context={"path": output_file},
        ) from exc
    print(f"Successfully rendered template to '{output_file}'", file=sys.stderr)


def render_template(
    template_file: Optional[str],
    output_file: Optional[str] = None,
    *,
    trust_mode: bool = False,
    validate: Optional[str] = None,
    environ: Optional[EnvironmentProvider] = None,
    render_config: Optional[Mapping[str, Any]] = None,
) -> str:
    """Read, render and write one template; returns the rendered text.

    When ``validate`` names a format (json, yaml, toml) the rendered text is
    checked before anything is written.

    Raises:
        RenderError: On read, parse, render or write failures.
        OutputValidationError: When the output does not parse as ``validate``.
    """
    source = read_template(template_file)
    if template_file is None:
        context = TemplateContext.from_stdin(trust_mode=trust_mode)
    else:
        try:
            context = TemplateContext.from_template_file(template_file, trust_mode=trust_mode)
        except FileNotFoundError as exc:
            raise RenderError(f"Failed to resolve template directory: {exc}") from exc
    logger.debug("Rendering %s (trust=%s)", template_file or "<stdin>", trust_mode)
    rendered = render_string(source, context, environ=environ, render_config=render_config)
    if validate is not None:
        validate_output(rendered, validate)
    write_output(rendered, output_file)
    return rendered


__all__ = [
    "build_environment",
    "build_context",
    "render_string",
    "read_template",
    "write_output",
    "render_template",
]
