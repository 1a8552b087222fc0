"""
tmpltool CLI package.

Framework utilities for building CLI commands:
- _output: Error output
- _args: Common argument registration helpers
- _dispatcher: Parser construction and the ``tmpltool`` entry point
"""
from ._output import print_error
from ._args import add_config_flag, add_format_arg, add_verbose_flag

__all__ = [
    # Output formatting
    "print_error",
    # Argument helpers
    "add_config_flag",
    "add_format_arg",
    "add_verbose_flag",
]
