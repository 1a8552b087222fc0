"""Membership and prefix/suffix predicates."""
from __future__ import annotations

from typing import Any

from ..contracts import Function
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs, ValueKind, kind_of, require_array, to_plain


def values_equal(left: Any, right: Any) -> bool:
    """Template equality: ``1 == 1.0`` holds, ``true == 1`` does not."""
    left_bool = kind_of(left) is ValueKind.BOOL
    right_bool = kind_of(right) is ValueKind.BOOL
    if left_bool != right_bool:
        return False
    return to_plain(left) == to_plain(right)


class ArrayAny(Function):
    NAME = "array_any"
    METADATA = FunctionMetadata(
        name="array_any",
        category="predicates",
        description="True when any array element equals the predicate value",
        arguments=(
            arg("array", "array", "Array to search"),
            arg("predicate", "any", "Value to compare against"),
        ),
        return_type="boolean",
        examples=('{{ array_any(array=roles, predicate="admin") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        predicate = kwargs.get_required("predicate")
        return any(values_equal(item, predicate) for item in items)


class ArrayAll(Function):
    NAME = "array_all"
    METADATA = FunctionMetadata(
        name="array_all",
        category="predicates",
        description="True when every array element equals the predicate value (true for an empty array)",
        arguments=(
            arg("array", "array", "Array to check"),
            arg("predicate", "any", "Value to compare against"),
        ),
        return_type="boolean",
        examples=('{{ array_all(array=statuses, predicate="ready") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        predicate = kwargs.get_required("predicate")
        return all(values_equal(item, predicate) for item in items)


class ArrayContains(Function):
    NAME = "array_contains"
    METADATA = FunctionMetadata(
        name="array_contains",
        category="predicates",
        description="True when the array contains the value",
        arguments=(
            arg("array", "array", "Array to search"),
            arg("value", "any", "Value to look for"),
        ),
        return_type="boolean",
        examples=('{{ array_contains(array=features, value="metrics") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        items = require_array(kwargs.get_required("array"), cls.NAME)
        value = kwargs.get_required("value")
        return any(values_equal(item, value) for item in items)


class StartsWith(Function):
    NAME = "starts_with"
    METADATA = FunctionMetadata(
        name="starts_with",
        category="predicates",
        description="True when the string starts with the prefix",
        arguments=(
            arg("string", "string", "String to check"),
            arg("prefix", "string", "Expected prefix"),
        ),
        return_type="boolean",
        examples=('{{ starts_with(string=image, prefix="ghcr.io/") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        return kwargs.get_str("string").startswith(kwargs.get_str("prefix"))


class EndsWith(Function):
    NAME = "ends_with"
    METADATA = FunctionMetadata(
        name="ends_with",
        category="predicates",
        description="True when the string ends with the suffix",
        arguments=(
            arg("string", "string", "String to check"),
            arg("suffix", "string", "Expected suffix"),
        ),
        return_type="boolean",
        examples=('{{ ends_with(string=filename, suffix=".yaml") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        return kwargs.get_str("string").endswith(kwargs.get_str("suffix"))


ENTRIES = (ArrayAny, ArrayAll, ArrayContains, StartsWith, EndsWith)

__all__ = ["ArrayAny", "ArrayAll", "ArrayContains", "StartsWith", "EndsWith", "values_equal", "ENTRIES"]
