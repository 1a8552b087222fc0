"""Per-render template context.

A ``TemplateContext`` is built once per render and shared read-only by every
context-aware catalog entry for the duration of that render.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


@dataclass(frozen=True)
class TemplateContext:
    """Base directory for relative paths plus the trust-mode flag.

    Trust mode gates filesystem- and process-executing helpers. Untrusted
    renders keep it False.
    """

    base_dir: Path
    trust_mode: bool = False

    @classmethod
    def from_template_file(cls, template_path: PathLike, trust_mode: bool = False) -> "TemplateContext":
        """Use the template's own directory (canonicalized) as base.

        Raises:
            FileNotFoundError: If the template's directory does not exist.
        """
        parent = Path(template_path).parent
        return cls(base_dir=parent.resolve(strict=True), trust_mode=trust_mode)

    @classmethod
    def from_stdin(cls, trust_mode: bool = False) -> "TemplateContext":
        """Templates read from stdin resolve paths against the working directory."""
        return cls(base_dir=Path.cwd(), trust_mode=trust_mode)

    def resolve_path(self, path: PathLike) -> Path:
        """Resolve ``path`` against ``base_dir`` unless it is already absolute."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.base_dir / candidate


__all__ = ["TemplateContext"]
