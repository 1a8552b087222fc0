"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse
from typing import Sequence


def add_config_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config flag for a user configuration file.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="YAML configuration file (default: $TMPLTOOL_CONFIG)",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr",
    )


def add_format_arg(
    parser: argparse.ArgumentParser,
    flag: str,
    choices: Sequence[str],
    help_text: str,
) -> None:
    """Add an optional flag whose value is one of ``choices``.

    Args:
        parser: ArgumentParser to add the argument to
        flag: Flag name, e.g. ``--validate``
        choices: Accepted values
        help_text: Help text for the argument
    """
    parser.add_argument(
        flag,
        choices=list(choices),
        default=None,
        metavar="{" + ",".join(choices) + "}",
        help=help_text,
    )


__all__ = ["add_config_flag", "add_verbose_flag", "add_format_arg"]
