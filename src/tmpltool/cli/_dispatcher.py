"""
CLI dispatcher for tmpltool.

tmpltool has a single top-level command, so the parser is flat: the render
command registers its arguments directly on the root parser.
"""

from __future__ import annotations

import argparse
import sys

from tmpltool.cli.commands import render


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="tmpltool",
        description=render.SUMMARY,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    render.register_args(parser)
    parser.set_defaults(_func=render.main)
    return parser


def _get_version() -> str:
    from tmpltool import __version__

    return __version__


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the tmpltool CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(list(argv))
    try:
        return int(args._func(args))
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


__all__ = ["build_parser", "main"]
