"""Conditional helpers: default, coalesce, ternary, in_range."""
from __future__ import annotations

from typing import Any

from jinja2 import Undefined

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs, as_number, describe, is_truthy, is_undefined, require_array


class Default(Function):
    NAME = "default"
    METADATA = FunctionMetadata(
        name="default",
        category="logic",
        description="Return the value, or the default when the value is falsy or undefined",
        arguments=(
            arg("value", "any", "Value to test", required=False),
            arg("default", "any", "Fallback value"),
        ),
        return_type="any",
        examples=('{{ default(value=config.port, default=8080) }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        fallback = kwargs.get_required("default")
        value = kwargs.get_optional("value")
        return value if is_truthy(value) else fallback


class Coalesce(Function):
    NAME = "coalesce"
    METADATA = FunctionMetadata(
        name="coalesce",
        category="logic",
        description="First value of an array that is neither null nor undefined",
        arguments=(arg("values", "array", "Candidate values in priority order"),),
        return_type="any",
        examples=("{{ coalesce(values=[override, config.value, 'fallback']) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        values = require_array(
            kwargs.get_required("values"), cls.NAME, "coalesce requires an array of values"
        )
        for item in values:
            if not is_undefined(item):
                return item
        return Undefined(hint="coalesce found no defined value")


class Ternary(Function):
    NAME = "ternary"
    METADATA = FunctionMetadata(
        name="ternary",
        category="logic",
        description="Choose between two values based on a condition's truthiness",
        arguments=(
            arg("condition", "any", "Condition to test"),
            arg("true_val", "any", "Returned when the condition is truthy"),
            arg("false_val", "any", "Returned when the condition is falsy"),
        ),
        return_type="any",
        examples=('{{ ternary(condition=debug, true_val="DEBUG", false_val="INFO") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        condition = kwargs.get_optional("condition")
        true_val = kwargs.get_required("true_val")
        false_val = kwargs.get_required("false_val")
        return true_val if is_truthy(condition) else false_val


class InRange(Function):
    NAME = "in_range"
    METADATA = FunctionMetadata(
        name="in_range",
        category="logic",
        description="Check whether a number lies within [min, max] (inclusive)",
        arguments=(
            arg("value", "number", "Number to check"),
            arg("min", "number", "Lower bound"),
            arg("max", "number", "Upper bound"),
        ),
        return_type="boolean",
        examples=("{{ in_range(value=port, min=1024, max=65535) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        bounds = {}
        for name in ("value", "min", "max"):
            raw = kwargs.get_required(name)
            number = as_number(raw)
            if number is None:
                raise TemplateFunctionError(
                    f"in_range requires numeric {name}, found: {describe(raw)}",
                    kind=ErrorKind.TYPE_MISMATCH,
                    function=cls.NAME,
                )
            bounds[name] = number
        return bounds["min"] <= bounds["value"] <= bounds["max"]


ENTRIES = (Default, Coalesce, Ternary, InRange)

__all__ = ["Default", "Coalesce", "Ternary", "InRange", "ENTRIES"]
