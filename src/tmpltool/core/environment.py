"""Environment-variable access as an injectable capability.

Catalog entries never touch ``os.environ`` directly; they receive an
``EnvironmentProvider`` at registration time. ``OsEnvironment`` reads the real
process environment, ``MappingEnvironment`` serves a fixed mapping (tests,
embedding).
"""
from __future__ import annotations

import os
import re
from typing import Dict, Iterator, List, Mapping, Optional, Protocol, Tuple

# Characters escaped by glob_to_regex.
_REGEX_SPECIALS = frozenset(".+^$()[]{}|\\")


class EnvironmentProvider(Protocol):
    """Read-only view of environment variables."""

    def get(self, name: str) -> Optional[str]: ...

    def list(self) -> Iterator[Tuple[str, str]]: ...


class OsEnvironment:
    """Provider backed by the current process environment."""

    def get(self, name: str) -> Optional[str]:
        return os.environ.get(name)

    def list(self) -> Iterator[Tuple[str, str]]:
        # Snapshot so concurrent mutation does not break iteration.
        return iter(list(os.environ.items()))


class MappingEnvironment:
    """Provider backed by a fixed mapping."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: Dict[str, str] = dict(values or {})

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def list(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._values.items()))


def glob_to_regex(pattern: str) -> str:
    """Translate a glob pattern into an anchored regular expression.

    ``*`` matches any run of characters and ``?`` exactly one. Regex
    metacharacters are escaped; everything else is literal. There is no
    escape syntax for a literal ``*`` or ``?``.

    Example:
        >>> glob_to_regex("SERVER_*")
        '^SERVER_.*$'
    """
    parts: List[str] = ["^"]
    for ch in pattern:
        if ch == "*":
            parts.append(".*")
        elif ch == "?":
            parts.append(".")
        elif ch in _REGEX_SPECIALS:
            parts.append("\\" + ch)
        else:
            parts.append(ch)
    parts.append("$")
    return "".join(parts)


def filter_environment(provider: EnvironmentProvider, pattern: str) -> List[Dict[str, str]]:
    """Return ``{key, value}`` records whose key matches ``pattern``, sorted by key."""
    matcher = re.compile(glob_to_regex(pattern))
    matches = [
        {"key": key, "value": value}
        for key, value in provider.list()
        if matcher.fullmatch(key)
    ]
    matches.sort(key=lambda item: item["key"])
    return matches


__all__ = [
    "EnvironmentProvider",
    "OsEnvironment",
    "MappingEnvironment",
    "glob_to_regex",
    "filter_environment",
]
