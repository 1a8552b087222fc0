"""Dual-syntax catalog entries: each is callable as ``f(arg=x)`` and ``x | f``."""
from __future__ import annotations

from . import (
    array,
    datetime,
    encoding,
    formatting,
    hash,
    kubernetes,
    math,
    object,
    path,
    serialization,
    string,
    url,
)

FILTER_FUNCTIONS = (
    *hash.ENTRIES,
    *encoding.ENTRIES,
    *serialization.ENTRIES,
    *math.ENTRIES,
    *array.ENTRIES,
    *datetime.ENTRIES,
    *path.ENTRIES,
    *url.ENTRIES,
    *object.ENTRIES,
    *kubernetes.ENTRIES,
    *formatting.ENTRIES,
    *string.ENTRIES,
)

__all__ = ["FILTER_FUNCTIONS"]
