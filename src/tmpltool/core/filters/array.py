"""Array statistics and reshaping filters.

Statistics accept integers and floats only; booleans and strings inside
the array fail. Results use ``format_number`` so ``[2, 4] | array_avg``
renders ``3``.
"""
from __future__ import annotations

import json
from typing import Any, List, Sequence

from ..contracts import UnaryFilterFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import (
    Kwargs,
    Number,
    ValueKind,
    as_number,
    describe,
    format_number,
    kind_of,
    require_array,
    to_float,
    to_plain,
)

_ARRAY_ARG = arg("array", "array", "The input array")


def numbers_of(items: Sequence[Any], fn_name: str) -> List[float]:
    """Return every item of ``items`` as a float or fail on the first non-number."""
    numbers: List[float] = []
    for item in items:
        number = as_number(item)
        if number is None:
            raise TemplateFunctionError(
                f"{fn_name} requires numeric values, found: {describe(item)}",
                kind=ErrorKind.TYPE_MISMATCH,
                function=fn_name,
            )
        numbers.append(to_float(number, fn_name))
    return numbers


def median(numbers: Sequence[float]) -> float:
    ordered = sorted(numbers)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2.0
    return ordered[middle]


def _array_metadata(name: str, description: str, return_type: str, extra=()) -> FunctionMetadata:
    return FunctionMetadata(
        name=name,
        category="array",
        description=description,
        arguments=(_ARRAY_ARG, *extra),
        return_type=return_type,
        examples=(f"{{{{ {name}(array=[1, 2, 3]) }}}}", f"{{{{ [1, 2, 3] | {name} }}}}"),
        syntax=FUNCTION_AND_FILTER,
    )


class _ArrayFilter(UnaryFilterFunction):
    ARGUMENT = "array"

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Any:
        return cls.compute(require_array(value, cls.NAME), kwargs)

    @classmethod
    def compute(cls, items: Sequence[Any], kwargs: Kwargs) -> Any:
        raise NotImplementedError


class ArraySum(_ArrayFilter):
    NAME = "array_sum"
    METADATA = _array_metadata("array_sum", "Sum the numbers of an array", "number")

    @classmethod
    def compute(cls, items: Sequence[Any], kwargs: Kwargs) -> Number:
        return format_number(sum(numbers_of(items, cls.NAME)))


class ArrayAvg(_ArrayFilter):
    NAME = "array_avg"
    METADATA = _array_metadata("array_avg", "Average of the numbers of an array (0 for an empty array)", "number")

    @classmethod
    def compute(cls, items: Sequence[Any], kwargs: Kwargs) -> Number:
        numbers = numbers_of(items, cls.NAME)
        if not numbers:
            return 0
        return format_number(sum(numbers) / len(numbers))


class ArrayMedian(_ArrayFilter):
    NAME = "array_median"
    METADATA = _array_metadata("array_median", "Median of the numbers of an array (0 for an empty array)", "number")

    @classmethod
    def compute(cls, items: Sequence[Any], kwargs: Kwargs) -> Number:
        numbers = numbers_of(items, cls.NAME)
        if not numbers:
            return 0
        return format_number(median(numbers))


class ArrayMin(_ArrayFilter):
    NAME = "array_min"
    METADATA = _array_metadata("array_min", "Smallest number of a non-empty array", "number")

    @classmethod
    def compute(cls, items: Sequence[Any], kwargs: Kwargs) -> Number:
        numbers = numbers_of(items, cls.NAME)
        if not numbers:
            raise TemplateFunctionError(
                f"{cls.NAME} requires a non-empty array",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        return format_number(min(numbers))


class ArrayMax(_ArrayFilter):
    NAME = "array_max"
    METADATA = _array_metadata("array_max", "Largest number of a non-empty array", "number")

    @classmethod
    def compute(cls, items: Sequence[Any], kwargs: Kwargs) -> Number:
        numbers = numbers_of(items, cls.NAME)
        if not numbers:
            raise TemplateFunctionError(
                f"{cls.NAME} requires a non-empty array",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        return format_number(max(numbers))


class ArrayUnique(_ArrayFilter):
    NAME = "array_unique"
    METADATA = _array_metadata("array_unique", "Remove duplicates, keeping first-seen order", "array")

    @classmethod
    def compute(cls, items: Sequence[Any], kwargs: Kwargs) -> List[Any]:
        seen = set()
        unique: List[Any] = []
        for item in items:
            plain = to_plain(item)
            key = json.dumps(plain, sort_keys=True, default=str)
            if key not in seen:
                seen.add(key)
                unique.append(plain)
        return unique


class ArrayFlatten(_ArrayFilter):
    NAME = "array_flatten"
    METADATA = _array_metadata(
        "array_flatten",
        "Remove one level of nesting (or `depth` levels)",
        "array",
        extra=(arg("depth", "integer", "Levels of nesting to remove", required=False, default="1"),),
    )

    @classmethod
    def compute(cls, items: Sequence[Any], kwargs: Kwargs) -> List[Any]:
        depth = kwargs.get_int("depth", 1)
        if depth < 0:
            raise TemplateFunctionError(
                f"{cls.NAME}: argument 'depth' must be non-negative, found: {depth}",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        return flatten(items, depth)


def flatten(items: Sequence[Any], depth: int) -> List[Any]:
    flattened: List[Any] = []
    for item in items:
        if depth > 0 and kind_of(item) is ValueKind.SEQUENCE:
            flattened.extend(flatten(item, depth - 1))
        else:
            flattened.append(item)
    return flattened


ENTRIES = (ArraySum, ArrayAvg, ArrayMedian, ArrayMin, ArrayMax, ArrayUnique, ArrayFlatten)

__all__ = [
    "ArraySum",
    "ArrayAvg",
    "ArrayMedian",
    "ArrayMin",
    "ArrayMax",
    "ArrayUnique",
    "ArrayFlatten",
    "numbers_of",
    "median",
    "flatten",
    "ENTRIES",
]
