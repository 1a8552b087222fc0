"""Array sizing, reshaping, lookup and set helpers.

Element equality matches ``array_contains``: ``1`` equals ``1.0`` while
``true`` never equals ``1``.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs, ValueKind, as_number, kind_of, require_array, to_plain
from .object import _MISSING, lookup_path
from .predicates import values_equal


class ArrayCount(Function):
    NAME = "array_count"
    METADATA = FunctionMetadata(
        name="array_count",
        category="array",
        description="Number of elements in an array",
        arguments=(arg("array", "array", "The array to count"),),
        return_type="integer",
        examples=("{{ array_count(array=items) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        return len(require_array(kwargs.get_required("array"), cls.NAME))


class ArrayChunk(Function):
    NAME = "array_chunk"
    METADATA = FunctionMetadata(
        name="array_chunk",
        category="array",
        description="Split an array into chunks of a given size (the last may be shorter)",
        arguments=(
            arg("array", "array", "The array to split"),
            arg("size", "integer", "Chunk size (> 0)"),
        ),
        return_type="array",
        examples=("{% for row in array_chunk(array=items, size=3) %}{{ row | join(',') }}\n{% endfor %}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> List[List[Any]]:
        items = list(require_array(kwargs.get_required("array"), cls.NAME))
        size = kwargs.get_int("size")
        if size <= 0:
            raise TemplateFunctionError(
                "array_chunk size must be greater than 0",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        return [items[i : i + size] for i in range(0, len(items), size)]


class ArrayZip(Function):
    NAME = "array_zip"
    METADATA = FunctionMetadata(
        name="array_zip",
        category="array",
        description="Pair up elements of two arrays, stopping at the shorter one",
        arguments=(
            arg("array1", "array", "First array"),
            arg("array2", "array", "Second array"),
        ),
        return_type="array",
        examples=("{% for k, v in array_zip(array1=keys, array2=values) %}{{ k }}={{ v }}\n{% endfor %}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> List[List[Any]]:
        first = require_array(kwargs.get_required("array1"), cls.NAME, "array_zip requires array1 to be an array")
        second = require_array(kwargs.get_required("array2"), cls.NAME, "array_zip requires array2 to be an array")
        return [[a, b] for a, b in zip(first, second)]


def _count(kwargs: Kwargs, fn_name: str) -> int:
    n = kwargs.get_int("n")
    if n < 0:
        raise TemplateFunctionError(
            f"{fn_name} n must be non-negative",
            kind=ErrorKind.DOMAIN_VIOLATION,
            function=fn_name,
        )
    return n


class ArrayTake(Function):
    NAME = "array_take"
    METADATA = FunctionMetadata(
        name="array_take",
        category="array",
        description="First N elements of an array (all of them when N exceeds the length)",
        arguments=(
            arg("array", "array", "Source array"),
            arg("n", "integer", "Number of elements to keep"),
        ),
        return_type="array",
        examples=("{{ array_take(array=[1, 2, 3, 4, 5], n=3) | tojson }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> List[Any]:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        return to_plain(list(items[: _count(kwargs, cls.NAME)]))


class ArrayDrop(Function):
    NAME = "array_drop"
    METADATA = FunctionMetadata(
        name="array_drop",
        category="array",
        description="Array without its first N elements",
        arguments=(
            arg("array", "array", "Source array"),
            arg("n", "integer", "Number of elements to skip"),
        ),
        return_type="array",
        examples=("{{ array_drop(array=[1, 2, 3, 4, 5], n=2) | tojson }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> List[Any]:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        return to_plain(list(items[_count(kwargs, cls.NAME) :]))


class ArrayIndexOf(Function):
    NAME = "array_index_of"
    METADATA = FunctionMetadata(
        name="array_index_of",
        category="array",
        description="Index of the first element equal to value, or -1",
        arguments=(
            arg("array", "array", "Array to search"),
            arg("value", "any", "Value to look for"),
        ),
        return_type="integer",
        examples=('{{ array_index_of(array=["a", "b", "c"], value="b") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        wanted = kwargs.get_optional("value")
        for index, item in enumerate(items):
            if values_equal(item, wanted):
                return index
        return -1


class ArrayPluck(Function):
    NAME = "array_pluck"
    METADATA = FunctionMetadata(
        name="array_pluck",
        category="array",
        description="Collect the value at a (dotted) key from every element; missing keys give null",
        arguments=(
            arg("array", "array", "Array of objects"),
            arg("key", "string", "Key or dot path, e.g. 'user.name'"),
        ),
        return_type="array",
        examples=('{{ array_pluck(array=users, key="name") | tojson }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> List[Any]:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        key = kwargs.get_str("key")
        plucked: List[Any] = []
        for item in items:
            found = lookup_path(item, key)
            plucked.append(None if found is _MISSING else to_plain(found))
        return plucked


class ArrayFind(Function):
    NAME = "array_find"
    METADATA = FunctionMetadata(
        name="array_find",
        category="array",
        description="First object whose key equals value, or none",
        arguments=(
            arg("array", "array", "Array of objects"),
            arg("key", "string", "Key or dot path to compare"),
            arg("value", "any", "Value to match"),
        ),
        return_type="object",
        examples=('{{ array_find(array=users, key="id", value=2).name }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        key = kwargs.get_str("key")
        wanted = kwargs.get_optional("value")
        for item in items:
            found = lookup_path(item, key)
            if found is not _MISSING and values_equal(found, wanted):
                return to_plain(item)
        return None


def _ordered(left: Any, right: Any) -> Optional[int]:
    """-1/0/1 for two numbers or two strings; None when they do not compare."""
    left_number, right_number = as_number(left), as_number(right)
    if left_number is not None and right_number is not None:
        pair: Tuple[Any, Any] = (left_number, right_number)
    elif kind_of(left) is ValueKind.STRING and kind_of(right) is ValueKind.STRING:
        pair = (left, right)
    else:
        return None
    return (pair[0] > pair[1]) - (pair[0] < pair[1])


def _contains(field: Any, value: Any) -> bool:
    kind = kind_of(field)
    if kind is ValueKind.STRING:
        return kind_of(value) is ValueKind.STRING and value in field
    if kind is ValueKind.SEQUENCE:
        return any(values_equal(item, value) for item in field)
    return False


_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "eq": values_equal,
    "ne": lambda field, value: not values_equal(field, value),
    "gt": lambda field, value: _ordered(field, value) == 1,
    "lt": lambda field, value: _ordered(field, value) == -1,
    "gte": lambda field, value: _ordered(field, value) in (0, 1),
    "lte": lambda field, value: _ordered(field, value) in (-1, 0),
    "contains": _contains,
}


class ArrayFilterBy(Function):
    NAME = "array_filter_by"
    METADATA = FunctionMetadata(
        name="array_filter_by",
        category="array",
        description="Keep objects whose key satisfies an operator (eq, ne, gt, lt, gte, lte, contains)",
        arguments=(
            arg("array", "array", "Array of objects"),
            arg("key", "string", "Key or dot path to compare"),
            arg("op", "string", "Operator: eq, ne, gt, lt, gte, lte or contains"),
            arg("value", "any", "Value to compare against"),
        ),
        return_type="array",
        examples=('{{ array_filter_by(array=items, key="price", op="gt", value=15) | length }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> List[Any]:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        key = kwargs.get_str("key")
        op = kwargs.get_str("op")
        value = kwargs.get_optional("value")
        compare = _COMPARATORS.get(op)
        if compare is None:
            raise TemplateFunctionError(
                f"Invalid operator '{op}'. Valid operators: {', '.join(_COMPARATORS)}",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        kept: List[Any] = []
        for item in items:
            # elements without the key never match, not even for "ne"
            found = lookup_path(item, key)
            if found is not _MISSING and compare(found, value):
                kept.append(to_plain(item))
        return kept


def _member(item: Any, items: Iterable[Any]) -> bool:
    return any(values_equal(item, other) for other in items)


def _unique(items: Iterable[Any], exclude: Sequence[Any] = ()) -> List[Any]:
    result: List[Any] = []
    for item in items:
        if not _member(item, exclude) and not _member(item, result):
            result.append(to_plain(item))
    return result


class _SetOperation(Function):
    """Set algebra over two arrays; results are deduplicated in first-seen order."""

    @classmethod
    def call(cls, kwargs: Kwargs) -> List[Any]:
        first = require_array(kwargs.get_required("array1"), cls.NAME, f"{cls.NAME} requires array1 to be an array")
        second = require_array(kwargs.get_required("array2"), cls.NAME, f"{cls.NAME} requires array2 to be an array")
        return cls.combine(first, second)

    @classmethod
    def combine(cls, first: Sequence[Any], second: Sequence[Any]) -> List[Any]:
        raise NotImplementedError


def _set_metadata(name: str, description: str) -> FunctionMetadata:
    return FunctionMetadata(
        name=name,
        category="array",
        description=description,
        arguments=(
            arg("array1", "array", "First array"),
            arg("array2", "array", "Second array"),
        ),
        return_type="array",
        examples=(f"{{{{ {name}(array1=[1, 2, 3], array2=[2, 3, 4]) | tojson }}}}",),
    )


class ArrayUnion(_SetOperation):
    NAME = "array_union"
    METADATA = _set_metadata("array_union", "Elements found in either array")

    @classmethod
    def combine(cls, first: Sequence[Any], second: Sequence[Any]) -> List[Any]:
        return _unique([*first, *second])


class ArrayIntersection(_SetOperation):
    NAME = "array_intersection"
    METADATA = _set_metadata("array_intersection", "Elements found in both arrays")

    @classmethod
    def combine(cls, first: Sequence[Any], second: Sequence[Any]) -> List[Any]:
        return _unique(item for item in first if _member(item, second))


class ArrayDifference(_SetOperation):
    NAME = "array_difference"
    METADATA = _set_metadata("array_difference", "Elements of array1 that are not in array2")

    @classmethod
    def combine(cls, first: Sequence[Any], second: Sequence[Any]) -> List[Any]:
        return _unique(first, exclude=second)


class ArraySymmetricDifference(_SetOperation):
    NAME = "array_symmetric_difference"
    METADATA = _set_metadata("array_symmetric_difference", "Elements found in exactly one of the arrays")

    @classmethod
    def combine(cls, first: Sequence[Any], second: Sequence[Any]) -> List[Any]:
        return _unique(first, exclude=second) + _unique(second, exclude=first)


ENTRIES = (
    ArrayCount,
    ArrayChunk,
    ArrayZip,
    ArrayTake,
    ArrayDrop,
    ArrayIndexOf,
    ArrayPluck,
    ArrayFind,
    ArrayFilterBy,
    ArrayUnion,
    ArrayIntersection,
    ArrayDifference,
    ArraySymmetricDifference,
)

__all__ = [
    "ArrayCount",
    "ArrayChunk",
    "ArrayZip",
    "ArrayTake",
    "ArrayDrop",
    "ArrayIndexOf",
    "ArrayPluck",
    "ArrayFind",
    "ArrayFilterBy",
    "ArrayUnion",
    "ArrayIntersection",
    "ArrayDifference",
    "ArraySymmetricDifference",
    "ENTRIES",
]
