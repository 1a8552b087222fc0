"""Calendar predicates."""
from __future__ import annotations

import re
from typing import Any, Optional

from ..contracts import IsTestFunction
from ..metadata import FUNCTION_AND_TEST, FunctionMetadata, arg
from ..values import Kwargs, ValueKind, kind_of

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


def is_leap(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def lenient_int(value: Any) -> Optional[int]:
    """Best-effort integer view of ``value``: ints, integral floats, digit strings."""
    kind = kind_of(value)
    if kind is ValueKind.INT:
        return value
    if kind is ValueKind.FLOAT and float(value).is_integer():
        return int(value)
    if kind is ValueKind.STRING and _INTEGER_TEXT.fullmatch(value):
        return int(value)
    return None


class LeapYear(IsTestFunction):
    """``is_leap_year(year=2024)`` raises on a non-integer year; ``"abc" is leap_year`` is False."""

    FUNCTION_NAME = "is_leap_year"
    IS_NAME = "leap_year"
    NAME = FUNCTION_NAME
    METADATA = FunctionMetadata(
        name="is_leap_year",
        category="datetime",
        description="Check whether a year is a leap year",
        arguments=(arg("year", "integer", "The year to check"),),
        return_type="boolean",
        examples=("{{ is_leap_year(year=2024) }}", "{% if 2024 is leap_year %}leap{% endif %}"),
        syntax=FUNCTION_AND_TEST,
    )

    @classmethod
    def call_as_function(cls, kwargs: Kwargs) -> bool:
        return is_leap(kwargs.get_int("year"))

    @classmethod
    def call_as_is(cls, value: Any) -> bool:
        year = lenient_int(value)
        return year is not None and is_leap(year)


ENTRIES = (LeapYear,)

__all__ = ["LeapYear", "is_leap", "lenient_int", "ENTRIES"]
