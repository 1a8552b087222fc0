"""Numeric filters: abs, round, ceil, floor.

Results go through ``format_number`` so ``round(3.7)`` renders ``4`` and
not ``4.0``.
"""
from __future__ import annotations

import math
from typing import Any

from ..contracts import UnaryFilterFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, Number, extract_number, format_number, require_finite

_NUMBER_ARG = arg("number", "number", "The number to process")


def round_half_away_from_zero(value: float, decimals: int = 0) -> float:
    """Round ``value`` to ``decimals`` places, halves away from zero.

    Python's ``round`` uses banker's rounding; templates expect
    ``round(2.5) == 3`` and ``round(-2.5) == -3``. Asking for more places
    than a float can carry returns ``value`` unchanged.
    """
    try:
        multiplier = 10.0 ** decimals
    except OverflowError:
        return value
    scaled = abs(value) * multiplier
    if not math.isfinite(scaled):
        return value
    whole = math.floor(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    return math.copysign(whole / multiplier, value)


class Abs(UnaryFilterFunction):
    NAME = "abs"
    ARGUMENT = "number"
    METADATA = FunctionMetadata(
        name="abs",
        category="math",
        description="Return absolute value of a number",
        arguments=(_NUMBER_ARG,),
        return_type="number",
        examples=("{{ abs(number=-42) }}", "{{ -42 | abs }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Number:
        number = extract_number(value, cls.NAME)
        if isinstance(number, int):
            return abs(number)
        return format_number(abs(number))


class Round(UnaryFilterFunction):
    NAME = "round"
    ARGUMENT = "number"
    METADATA = FunctionMetadata(
        name="round",
        category="math",
        description="Round a number to N decimal places (halves away from zero)",
        arguments=(
            _NUMBER_ARG,
            arg("decimals", "integer", "Number of decimal places", required=False, default="0"),
        ),
        return_type="number",
        examples=("{{ round(number=3.14159, decimals=2) }}", "{{ 3.14159 | round(decimals=2) }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Number:
        decimals = kwargs.get_int("decimals", 0)
        number = extract_number(value, cls.NAME)
        if decimals < 0:
            raise TemplateFunctionError(
                "decimals must be non-negative",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        if isinstance(number, int):
            return number
        return format_number(round_half_away_from_zero(require_finite(number, cls.NAME), decimals))


class Ceil(UnaryFilterFunction):
    NAME = "ceil"
    ARGUMENT = "number"
    METADATA = FunctionMetadata(
        name="ceil",
        category="math",
        description="Round up to the nearest integer",
        arguments=(_NUMBER_ARG,),
        return_type="integer",
        examples=("{{ ceil(number=3.2) }}", "{{ 3.2 | ceil }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> int:
        number = extract_number(value, cls.NAME)
        if isinstance(number, int):
            return number
        return math.ceil(require_finite(number, cls.NAME))


class Floor(UnaryFilterFunction):
    NAME = "floor"
    ARGUMENT = "number"
    METADATA = FunctionMetadata(
        name="floor",
        category="math",
        description="Round down to the nearest integer",
        arguments=(_NUMBER_ARG,),
        return_type="integer",
        examples=("{{ floor(number=3.8) }}", "{{ 3.8 | floor }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> int:
        number = extract_number(value, cls.NAME)
        if isinstance(number, int):
            return number
        return math.floor(require_finite(number, cls.NAME))


ENTRIES = (Abs, Round, Ceil, Floor)

__all__ = ["Abs", "Round", "Ceil", "Floor", "round_half_away_from_zero", "ENTRIES"]
