"""Two-argument numeric helpers: min, max, percentage."""
from __future__ import annotations

from typing import Any

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs, Number, as_number, describe, format_number, to_float


def _numeric(kwargs: Kwargs, name: str, message: str) -> float:
    raw: Any = kwargs.get_required(name)
    number = as_number(raw)
    if number is None:
        raise TemplateFunctionError(
            f"{message}, found: {describe(raw)}",
            kind=ErrorKind.TYPE_MISMATCH,
            function=kwargs.fn_name,
        )
    return to_float(number, kwargs.fn_name)


class Min(Function):
    NAME = "min"
    METADATA = FunctionMetadata(
        name="min",
        category="math",
        description="Smaller of two numbers",
        arguments=(arg("a", "number", "First number"), arg("b", "number", "Second number")),
        return_type="number",
        examples=("{{ min(a=replicas, b=10) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Number:
        a = _numeric(kwargs, "a", "min requires numeric values")
        b = _numeric(kwargs, "b", "min requires numeric values")
        return format_number(min(a, b))


class Max(Function):
    NAME = "max"
    METADATA = FunctionMetadata(
        name="max",
        category="math",
        description="Larger of two numbers",
        arguments=(arg("a", "number", "First number"), arg("b", "number", "Second number")),
        return_type="number",
        examples=("{{ max(a=replicas, b=1) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Number:
        a = _numeric(kwargs, "a", "max requires numeric values")
        b = _numeric(kwargs, "b", "max requires numeric values")
        return format_number(max(a, b))


class Percentage(Function):
    NAME = "percentage"
    METADATA = FunctionMetadata(
        name="percentage",
        category="math",
        description="value / total * 100",
        arguments=(arg("value", "number", "Part"), arg("total", "number", "Whole (non-zero)")),
        return_type="number",
        examples=("{{ percentage(value=25, total=200) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Number:
        value = _numeric(kwargs, "value", "percentage requires numeric value")
        total = _numeric(kwargs, "total", "percentage requires numeric total")
        if total == 0.0:
            raise TemplateFunctionError(
                "percentage total cannot be zero",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        return format_number(value / total * 100.0)


ENTRIES = (Min, Max, Percentage)

__all__ = ["Min", "Max", "Percentage", "ENTRIES"]
