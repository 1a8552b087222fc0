"""Mapping inspection and flattening filters."""
from __future__ import annotations

from typing import Any, Dict, List

from ..contracts import UnaryFilterFunction
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, ValueKind, kind_of, require_mapping, to_plain

_OBJECT_ARG = arg("object", "object", "The object to inspect")


def flatten_object(value: Any, delimiter: str = ".") -> Dict[str, Any]:
    """Flatten nested mappings and arrays into ``{"a.b.0": leaf}`` form.

    Empty containers contribute no keys.
    """
    result: Dict[str, Any] = {}

    def walk(node: Any, prefix: str) -> None:
        kind = kind_of(node)
        if kind is ValueKind.MAPPING:
            items = ((str(k), v) for k, v in node.items())
        elif kind is ValueKind.SEQUENCE:
            items = ((str(i), v) for i, v in enumerate(node))
        else:
            result[prefix] = to_plain(node)
            return
        for key, child in items:
            walk(child, f"{prefix}{delimiter}{key}" if prefix else key)

    walk(value, "")
    return result


class ObjectKeys(UnaryFilterFunction):
    NAME = "object_keys"
    ARGUMENT = "object"
    METADATA = FunctionMetadata(
        name="object_keys",
        category="object",
        description="List the keys of an object",
        arguments=(_OBJECT_ARG,),
        return_type="array",
        examples=("{{ object_keys(object=config) }}", "{{ config | object_keys | join(', ') }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> List[str]:
        return [str(k) for k in require_mapping(value, cls.NAME)]


class ObjectValues(UnaryFilterFunction):
    NAME = "object_values"
    ARGUMENT = "object"
    METADATA = FunctionMetadata(
        name="object_values",
        category="object",
        description="List the values of an object",
        arguments=(_OBJECT_ARG,),
        return_type="array",
        examples=("{{ object_values(object=config) }}", "{{ config | object_values }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> List[Any]:
        return list(require_mapping(value, cls.NAME).values())


class ObjectFlatten(UnaryFilterFunction):
    NAME = "object_flatten"
    ARGUMENT = "object"
    METADATA = FunctionMetadata(
        name="object_flatten",
        category="object",
        description="Flatten a nested object into delimiter-joined keys",
        arguments=(
            arg("object", "object", "The object to flatten"),
            arg("delimiter", "string", "Key separator", required=False, default='"."'),
        ),
        return_type="object",
        examples=("{{ object_flatten(object=config) }}", '{{ config | object_flatten(delimiter="_") }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Dict[str, Any]:
        delimiter = kwargs.get_str("delimiter", ".")
        return flatten_object(require_mapping(value, cls.NAME, f"{cls.NAME} requires an object"), delimiter)


ENTRIES = (ObjectKeys, ObjectValues, ObjectFlatten)

__all__ = ["ObjectKeys", "ObjectValues", "ObjectFlatten", "flatten_object", "ENTRIES"]
