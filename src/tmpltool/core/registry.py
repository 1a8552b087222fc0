"""Catalog assembly and registration driver.

The driver walks every catalog entry and attaches each call convention the
entry declares to a Jinja2 environment:

- function convention -> ``env.globals``
- filter convention   -> ``env.filters``
- is-test convention  -> ``env.tests``

Names are collected into ``Namespaces`` first so duplicates are rejected at
startup instead of silently overwriting each other. Catalog names may shadow
Jinja2 built-ins (``round``, ``truncate``, ``indent``...).
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import jsonschema
import tomli_w
import yaml
from jinja2 import Environment

from .contracts import Bindings, CatalogEntry, FilterFunction, Function, IsTestFunction
from .exceptions import RegistrationError
from .metadata import FunctionMetadata, check_metadata
from .values import to_plain

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "yaml", "toml")


class Namespaces:
    """Collects callables per namespace and rejects duplicate names."""

    def __init__(self) -> None:
        self.functions: Dict[str, Callable[..., Any]] = {}
        self.filters: Dict[str, Callable[..., Any]] = {}
        self.tests: Dict[str, Callable[..., Any]] = {}
        self._owners: Dict[str, Dict[str, str]] = {"function": {}, "filter": {}, "test": {}}

    def _add(self, kind: str, table: Dict[str, Callable[..., Any]], name: str, fn: Callable[..., Any], owner: str) -> None:
        owners = self._owners[kind]
        if name in table:
            raise RegistrationError(
                f"Duplicate {kind} name '{name}' registered by {owner} "
                f"(already registered by {owners[name]})",
                context={"namespace": kind, "name": name, "owner": owner, "previous": owners[name]},
            )
        table[name] = fn
        owners[name] = owner

    def add_function(self, name: str, fn: Callable[..., Any], *, owner: str = "") -> None:
        self._add("function", self.functions, name, fn, owner)

    def add_filter(self, name: str, fn: Callable[..., Any], *, owner: str = "") -> None:
        self._add("filter", self.filters, name, fn, owner)

    def add_test(self, name: str, fn: Callable[..., Any], *, owner: str = "") -> None:
        self._add("test", self.tests, name, fn, owner)

    def attach(self, env: Environment) -> None:
        """Install every collected callable into ``env``."""
        env.globals.update(self.functions)
        env.filters.update(self.filters)
        env.tests.update(self.tests)


def all_entries() -> List[type[CatalogEntry]]:
    """Return the merged catalog: dual-syntax, is-test, then function-only entries."""
    from .filters import FILTER_FUNCTIONS
    from .functions import FUNCTIONS
    from .is_tests import IS_TEST_FUNCTIONS

    return [*FILTER_FUNCTIONS, *IS_TEST_FUNCTIONS, *FUNCTIONS]


def check_catalog(entries: Sequence[type[CatalogEntry]]) -> None:
    """Validate catalog-wide invariants before anything is registered.

    Raises:
        RegistrationError: On duplicate metadata names, a mismatch between an
            entry's registration name and its metadata, or malformed metadata.
    """
    seen: Dict[str, str] = {}
    problems: List[str] = []
    for entry in entries:
        meta = entry.METADATA
        name = entry.metadata_name()
        if meta.name != name:
            problems.append(f"{entry.__name__}: metadata name '{meta.name}' != registered name '{name}'")
        if name in seen:
            problems.append(f"duplicate name '{name}' ({seen[name]} and {entry.__name__})")
        seen[name] = entry.__name__
        if issubclass(entry, FilterFunction) and not (meta.syntax.function and meta.syntax.filter):
            problems.append(f"{name}: filter entry must declare function and filter syntax")
        if issubclass(entry, IsTestFunction) and not (meta.syntax.function and meta.syntax.is_test):
            problems.append(f"{name}: is-test entry must declare function and is_test syntax")
        if issubclass(entry, Function) and (meta.syntax.filter or meta.syntax.is_test):
            problems.append(f"{name}: function-only entry declares extra syntax")
        problems.extend(check_metadata(meta))
    if problems:
        raise RegistrationError(
            "Invalid function catalog: " + "; ".join(problems),
            context={"problems": problems},
        )


def collect_namespaces(
    bindings: Bindings,
    entries: Optional[Sequence[type[CatalogEntry]]] = None,
) -> Namespaces:
    """Register ``entries`` (default: full catalog) into a fresh ``Namespaces``."""
    catalog = list(entries) if entries is not None else all_entries()
    check_catalog(catalog)
    namespaces = Namespaces()
    for entry in catalog:
        entry.register(namespaces, bindings)
    logger.debug(
        "Registered %d functions, %d filters, %d tests",
        len(namespaces.functions),
        len(namespaces.filters),
        len(namespaces.tests),
    )
    return namespaces


def register_all(
    env: Environment,
    bindings: Bindings,
    entries: Optional[Sequence[type[CatalogEntry]]] = None,
) -> Namespaces:
    """Attach the catalog to ``env`` and return the collected namespaces."""
    namespaces = collect_namespaces(bindings, entries)
    namespaces.attach(env)
    return namespaces


def get_all_metadata(entries: Optional[Iterable[type[CatalogEntry]]] = None) -> List[FunctionMetadata]:
    """Return metadata for every catalog entry, in catalog order."""
    catalog = entries if entries is not None else all_entries()
    return [entry.METADATA for entry in catalog]


def validate_metadata(metadata: Optional[Sequence[FunctionMetadata]] = None) -> None:
    """Check the metadata export against its JSON schema and uniqueness rules.

    Raises:
        RegistrationError: If the export is malformed.
    """
    from tmpltool.data import get_data_path, read_yaml

    records = metadata if metadata is not None else get_all_metadata()
    payload = [m.to_dict() for m in records]
    schema = read_yaml("schemas", "metadata.schema.yaml")
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: str(list(e.path)))
    messages = [
        f"{'.'.join(str(p) for p in e.path) or '<root>'}: {e.message}" for e in errors
    ]
    names = [m.name for m in records]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        messages.append(f"duplicate names: {', '.join(duplicates)}")
    if messages:
        raise RegistrationError(
            "Metadata validation failed against "
            f"{get_data_path('schemas', 'metadata.schema.yaml').name}: " + "; ".join(messages),
            context={"errors": messages},
        )


def _strip_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _strip_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_strip_none(v) for v in value]
    return value


def export_metadata(fmt: str = "json", metadata: Optional[Sequence[FunctionMetadata]] = None) -> str:
    """Serialize the metadata catalog for IDE tooling.

    Args:
        fmt: One of ``json``, ``yaml`` or ``toml``. TOML output is wrapped in a
            ``functions`` table array because TOML has no top-level arrays and
            no null, so absent defaults are omitted.

    Returns:
        Serialized metadata text.
    """
    records = metadata if metadata is not None else get_all_metadata()
    payload = [to_plain(m.to_dict()) for m in records]
    if fmt == "json":
        return json.dumps(payload, indent=2, ensure_ascii=False)
    if fmt == "yaml":
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    if fmt == "toml":
        return tomli_w.dumps({"functions": _strip_none(payload)})
    raise ValueError(f"Unsupported metadata format '{fmt}'. Use one of: {', '.join(EXPORT_FORMATS)}")


__all__ = [
    "EXPORT_FORMATS",
    "Namespaces",
    "all_entries",
    "check_catalog",
    "collect_namespaces",
    "register_all",
    "get_all_metadata",
    "validate_metadata",
    "export_metadata",
]
