"""Function-only catalog entries: callable as ``f(arg=x)`` and nothing else."""
from __future__ import annotations

from . import (
    array,
    datetime,
    debug,
    encoding,
    environment,
    kubernetes,
    logic,
    math,
    network,
    object,
    predicates,
    random,
    string,
    system,
    url,
    uuid,
    validation,
)

FUNCTIONS = (
    *environment.ENTRIES,
    *random.ENTRIES,
    *uuid.ENTRIES,
    *datetime.ENTRIES,
    *system.ENTRIES,
    *logic.ENTRIES,
    *predicates.ENTRIES,
    *math.ENTRIES,
    *string.ENTRIES,
    *array.ENTRIES,
    *object.ENTRIES,
    *url.ENTRIES,
    *network.ENTRIES,
    *encoding.ENTRIES,
    *kubernetes.ENTRIES,
    *validation.ENTRIES,
    *debug.ENTRIES,
)

__all__ = ["FUNCTIONS"]
