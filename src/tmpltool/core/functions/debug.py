"""Debugging and assertion helpers.

``debug``, ``inspect`` and ``warn`` write to stderr so rendered output on
stdout stays clean.
"""
from __future__ import annotations

import json
import sys
from typing import Any

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs, ValueKind, describe, is_truthy, kind_of, to_plain

_TYPE_NAMES = {
    ValueKind.UNDEFINED: "undefined",
    ValueKind.BOOL: "bool",
    ValueKind.INT: "number",
    ValueKind.FLOAT: "number",
    ValueKind.STRING: "string",
    ValueKind.SEQUENCE: "array",
    ValueKind.MAPPING: "object",
}


def type_name(value: Any) -> str:
    return _TYPE_NAMES.get(kind_of(value), "unknown")


def _stderr(line: str) -> None:
    print(line, file=sys.stderr)


class Debug(Function):
    NAME = "debug"
    METADATA = FunctionMetadata(
        name="debug",
        category="debug",
        description="Print a value to stderr and return it unchanged",
        arguments=(arg("value", "any", "Value to print"),),
        return_type="any",
        examples=("{{ debug(value=config) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        value = kwargs.get_required("value")
        _stderr(f"[DEBUG] {describe(value)}")
        return value


class TypeOf(Function):
    NAME = "type_of"
    METADATA = FunctionMetadata(
        name="type_of",
        category="debug",
        description="Type name of a value: string, number, bool, array, object or undefined",
        arguments=(arg("value", "any", "Value to inspect", required=False),),
        return_type="string",
        examples=("{{ type_of(value=replicas) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        return type_name(kwargs.get_optional("value"))


class Inspect(Function):
    NAME = "inspect"
    METADATA = FunctionMetadata(
        name="inspect",
        category="debug",
        description="Pretty-print a value with its type to stderr and return it unchanged",
        arguments=(arg("value", "any", "Value to inspect"),),
        return_type="any",
        examples=("{{ inspect(value=config) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        value = kwargs.get_required("value")
        body = json.dumps(to_plain(value), indent=2, ensure_ascii=False, default=str)
        _stderr(f"[INSPECT] type={type_name(value)}\n{body}")
        return value


class Assert(Function):
    NAME = "assert"
    METADATA = FunctionMetadata(
        name="assert",
        category="debug",
        description="Fail the render when the condition is falsy",
        arguments=(
            arg("condition", "any", "Condition that must hold"),
            arg("message", "string", "Failure message", required=False, default='"Assertion failed"'),
        ),
        return_type="boolean",
        examples=('{{ assert(condition=replicas > 0, message="replicas must be positive") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        condition = kwargs.get_optional("condition")
        message = kwargs.get_str("message", "Assertion failed")
        if not is_truthy(condition):
            raise TemplateFunctionError(message, kind=ErrorKind.DOMAIN_VIOLATION, function=cls.NAME)
        return True


class Warn(Function):
    NAME = "warn"
    METADATA = FunctionMetadata(
        name="warn",
        category="debug",
        description="Print a warning to stderr; renders as an empty string",
        arguments=(arg("message", "string", "Warning text"),),
        return_type="string",
        examples=('{{ warn(message="DEBUG mode is enabled") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        _stderr(f"[WARNING] {kwargs.get_str('message')}")
        return ""


class Abort(Function):
    NAME = "abort"
    METADATA = FunctionMetadata(
        name="abort",
        category="debug",
        description="Stop rendering with an error message",
        arguments=(arg("message", "string", "Error text"),),
        return_type="never",
        examples=('{% if not api_key %}{{ abort(message="API_KEY is required") }}{% endif %}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        raise TemplateFunctionError(
            kwargs.get_str("message"),
            kind=ErrorKind.DOMAIN_VIOLATION,
            function=cls.NAME,
        )


ENTRIES = (Debug, TypeOf, Inspect, Assert, Warn, Abort)

__all__ = ["Debug", "TypeOf", "Inspect", "Assert", "Warn", "Abort", "type_name", "ENTRIES"]
