"""Dynamic value coercion helpers.

Template-visible data arrives as plain Python objects handed over by Jinja2.
The helpers here classify those objects into the closed set of value kinds
templates can observe and convert them into concrete types, failing with a
``TemplateFunctionError`` that names the calling function.
"""
from __future__ import annotations

import json
import logging
import math
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from jinja2 import Undefined

from .exceptions import ErrorKind, TemplateFunctionError

logger = logging.getLogger(__name__)

Number = Union[int, float]


class ValueKind(str, Enum):
    UNDEFINED = "undefined"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OBJECT = "object"


def kind_of(value: Any) -> ValueKind:
    """Classify a template value into its ``ValueKind``."""
    if value is None or isinstance(value, Undefined):
        return ValueKind.UNDEFINED
    # bool is an int subclass; check it first
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, (float, Decimal)):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.OBJECT


def is_undefined(value: Any) -> bool:
    return kind_of(value) is ValueKind.UNDEFINED


def describe(value: Any) -> str:
    """Render a value the way it appears in error messages."""
    kind = kind_of(value)
    if kind is ValueKind.UNDEFINED:
        return "undefined" if isinstance(value, Undefined) else "none"
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.STRING:
        return value
    if kind in (ValueKind.INT, ValueKind.FLOAT):
        return str(value)
    try:
        return json.dumps(to_plain(value), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(value)


def to_plain(value: Any) -> Any:
    """Convert a template value tree into plain JSON-compatible Python data.

    Undefined becomes ``None``; tuples become lists; mapping keys become strings.
    """
    kind = kind_of(value)
    if kind is ValueKind.UNDEFINED:
        return None
    if kind is ValueKind.MAPPING:
        return {str(k): to_plain(v) for k, v in value.items()}
    if kind is ValueKind.SEQUENCE:
        return [to_plain(v) for v in value]
    if isinstance(value, Decimal):
        return format_number(float(value))
    if kind is ValueKind.STRING and type(value) is not str:
        # Markup and other str subclasses
        return str(value)
    return value


def _error(fn_name: str, message: str, kind: ErrorKind = ErrorKind.TYPE_MISMATCH) -> TemplateFunctionError:
    return TemplateFunctionError(message, kind=kind, function=fn_name)


def extract_string(value: Any, fn_name: str) -> str:
    """Return ``value`` when it is a string, else fail with a type mismatch."""
    if kind_of(value) is ValueKind.STRING:
        return value
    raise _error(fn_name, f"{fn_name} requires a string, found: {describe(value)}")


def extract_number(value: Any, fn_name: str) -> Number:
    """Return ``value`` as an int or float.

    Integers and floats pass through. Decimals are reinterpreted as float.
    Booleans, strings and containers fail.
    """
    kind = kind_of(value)
    if kind is ValueKind.INT:
        return value
    if kind is ValueKind.FLOAT:
        return float(value) if isinstance(value, Decimal) else value
    raise _error(fn_name, f"{fn_name} requires a numeric value, found: {describe(value)}")


def as_number(value: Any) -> Optional[Number]:
    """Best-effort numeric view of ``value`` or None."""
    kind = kind_of(value)
    if kind is ValueKind.INT:
        return value
    if kind is ValueKind.FLOAT:
        return float(value)
    return None


def to_float(value: Number, fn_name: str) -> float:
    """``float(value)``, failing with a domain violation for oversized integers."""
    try:
        return float(value)
    except OverflowError as exc:
        raise _error(fn_name, f"{fn_name}: number is out of range", ErrorKind.DOMAIN_VIOLATION) from exc


def require_finite(value: float, fn_name: str) -> float:
    if not math.isfinite(value):
        raise _error(fn_name, f"{fn_name} requires a finite number, found: {value}", ErrorKind.DOMAIN_VIOLATION)
    return value


def require_array(value: Any, fn_name: str, message: str | None = None) -> Sequence[Any]:
    """Return ``value`` unchanged when it is a sequence."""
    if kind_of(value) is ValueKind.SEQUENCE:
        return value
    raise _error(fn_name, message or f"{fn_name} requires an array")


def require_mapping(value: Any, fn_name: str, message: str | None = None) -> Mapping[str, Any]:
    """Return ``value`` unchanged when it is a mapping."""
    if kind_of(value) is ValueKind.MAPPING:
        return value
    raise _error(fn_name, message or f"{fn_name} requires an object, not an array or primitive")


def format_number(value: float) -> Number:
    """Collapse whole-number floats to ``int``.

    ``3.0`` becomes ``3`` so templates render ``3``; ``2.5`` stays a float.
    Non-finite values are returned unchanged.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if math.isfinite(value) and value == math.floor(value):
        return int(value)
    return value


def is_truthy(value: Any) -> bool:
    """Template truthiness: undefined, false, zero, empty string or container are falsy."""
    if is_undefined(value):
        return False
    return bool(value)


_MISSING = object()


class Kwargs(Mapping[str, Any]):
    """Immutable bag of named arguments for one template call.

    Undefined values are treated as absent so ``f(x=missing_var)`` behaves like
    ``f()`` for optional arguments.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, *, fn_name: str = "") -> None:
        self._values: Dict[str, Any] = {
            k: v for k, v in (values or {}).items() if not isinstance(v, Undefined)
        }
        self.fn_name = fn_name

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Kwargs({self.fn_name!r}, {self._values!r})"

    def warn_unknown(self, known: Sequence[str]) -> List[str]:
        """Log and return argument names not in ``known``."""
        extra = [k for k in self._values if k not in known]
        if extra:
            logger.debug("%s: ignoring unknown arguments %s", self.fn_name, ", ".join(extra))
        return extra

    def has(self, name: str) -> bool:
        return name in self._values and self._values[name] is not None

    def get_required(self, name: str) -> Any:
        value = self._values.get(name, _MISSING)
        if value is _MISSING:
            raise TemplateFunctionError(
                f"{self.fn_name}: missing keyword argument '{name}'",
                kind=ErrorKind.MISSING_ARGUMENT,
                function=self.fn_name,
            )
        return value

    def get_optional(self, name: str, default: Any = None) -> Any:
        value = self._values.get(name, _MISSING)
        if value is _MISSING or value is None:
            return default
        return value

    def get_str(self, name: str, default: Any = _MISSING) -> Any:
        if default is not _MISSING and not self.has(name):
            return default
        return extract_string(self.get_required(name), self.fn_name)

    def get_number(self, name: str, default: Any = _MISSING) -> Any:
        if default is not _MISSING and not self.has(name):
            return default
        return extract_number(self.get_required(name), self.fn_name)

    def get_int(self, name: str, default: Any = _MISSING) -> Any:
        if default is not _MISSING and not self.has(name):
            return default
        value = self.get_required(name)
        number = as_number(value)
        if number is None or (isinstance(number, float) and not number.is_integer()):
            raise TemplateFunctionError(
                f"{self.fn_name}: argument '{name}' must be an integer, found: {describe(value)}",
                kind=ErrorKind.TYPE_MISMATCH,
                function=self.fn_name,
            )
        return int(number)

    def get_bool(self, name: str, default: Any = _MISSING) -> Any:
        if default is not _MISSING and not self.has(name):
            return default
        value = self.get_required(name)
        if kind_of(value) is not ValueKind.BOOL:
            raise TemplateFunctionError(
                f"{self.fn_name}: argument '{name}' must be a boolean, found: {describe(value)}",
                kind=ErrorKind.TYPE_MISMATCH,
                function=self.fn_name,
            )
        return value


__all__ = [
    "Number",
    "ValueKind",
    "kind_of",
    "is_undefined",
    "describe",
    "to_plain",
    "extract_string",
    "extract_number",
    "as_number",
    "to_float",
    "require_finite",
    "require_array",
    "require_mapping",
    "format_number",
    "is_truthy",
    "Kwargs",
]
