"""Canonical deep merge.

The config layer and ``object_merge`` both import from here.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, Mapping


def deep_merge(base: Any, override: Any) -> Any:
    """Recursively merge ``override`` into a copy of ``base``.

    Mappings are merged key by key. Any other value in ``override``,
    including lists, replaces the base value outright. Neither input is
    mutated.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    if not isinstance(base, Mapping) or not isinstance(override, Mapping):
        return copy.deepcopy(override)
    merged: Dict[str, Any] = {key: copy.deepcopy(value) for key, value in base.items()}
    for key, value in override.items():
        if key in merged:
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


__all__ = ["deep_merge"]
