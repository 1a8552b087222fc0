"""tmpltool core library package.

The function catalog lives in ``filters`` (function + filter), ``is_tests``
(function + is-test) and ``functions`` (function only); ``registry``
attaches all three to a Jinja2 environment.
"""

from . import exceptions  # noqa: F401
from .registry import export_metadata, get_all_metadata, register_all
from .renderer import render_string, render_template

__all__ = [
    "exceptions",
    "export_metadata",
    "get_all_metadata",
    "register_all",
    "render_string",
    "render_template",
]
