"""Boolean predicates callable as ``is_x(arg=v)`` and usable as ``v is x``.

The function form is strict about argument types; the test form answers
False for anything it cannot interpret.
"""
from __future__ import annotations

from . import datetime, filesystem, network, validation

IS_TEST_FUNCTIONS = (
    *validation.ENTRIES,
    *datetime.ENTRIES,
    *network.ENTRIES,
    *filesystem.ENTRIES,
)

__all__ = ["IS_TEST_FUNCTIONS"]
