"""
tmpltool render command.

SUMMARY: Render a template with environment variables
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict

from tmpltool.cli._args import add_config_flag, add_format_arg, add_verbose_flag
from tmpltool.cli._output import print_error
from tmpltool.core.config import ConfigManager
from tmpltool.core.exceptions import TmplToolError
from tmpltool.core.registry import EXPORT_FORMATS, export_metadata
from tmpltool.core.renderer import render_template
from tmpltool.core.stdlib_logging import configure_stdlib_logging
from tmpltool.core.validator import VALIDATE_FORMATS

SUMMARY = "Render a template with environment variables"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "template",
        nargs="?",
        default=None,
        help="Template file to render (reads stdin when omitted)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file (prints to stdout when omitted)",
    )
    parser.add_argument(
        "--trust",
        action="store_true",
        help="Enable trust mode for filesystem- and process-executing helpers",
    )
    add_format_arg(parser, "--validate", VALIDATE_FORMATS, "Validate the rendered output as this format")
    add_format_arg(parser, "--ide", EXPORT_FORMATS, "Print function metadata for IDE tooling and exit")
    add_config_flag(parser)
    add_verbose_flag(parser)


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if getattr(args, "trust", False):
        overrides.setdefault("render", {})["trust"] = True
    if getattr(args, "verbose", False):
        overrides.setdefault("logging", {})["level"] = "DEBUG"
    return overrides


def main(args: argparse.Namespace) -> int:
    try:
        cfg = ConfigManager(config_path=args.config).load_config(overrides=_cli_overrides(args))
        log_cfg = cfg.get("logging", {})
        configure_stdlib_logging(level=log_cfg.get("level", "WARNING"), log_path=log_cfg.get("path"))

        if args.ide:
            sys.stdout.write(export_metadata(args.ide))
            sys.stdout.write("\n")
            return 0

        render_cfg = cfg.get("render", {})
        render_template(
            args.template,
            args.output,
            trust_mode=bool(render_cfg.get("trust", False)),
            validate=args.validate,
            render_config=render_cfg,
        )
        return 0
    except TmplToolError as e:
        logger.debug("Command failed", exc_info=True)
        print_error(str(e))
        return 1
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print_error(str(e) or type(e).__name__)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
