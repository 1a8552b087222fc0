"""Object (mapping) manipulation functions.

All functions return new values; inputs are never mutated. Paths are
dot-separated, with purely numeric segments indexing into arrays.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List

from jinja2 import Undefined

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..utils.merge import deep_merge
from ..values import Kwargs, ValueKind, kind_of, require_mapping, to_plain

_MISSING = object()


def lookup_path(value: Any, path: str) -> Any:
    """Walk ``path`` through nested mappings and arrays; ``_MISSING`` on a miss."""
    current = value
    for segment in path.split("."):
        kind = kind_of(current)
        if kind is ValueKind.MAPPING:
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif kind is ValueKind.SEQUENCE and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def _set_path(target: Dict[str, Any], keys: List[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[keys[-1]] = value


def _string_keys(value: Any, fn_name: str) -> List[str]:
    if kind_of(value) is not ValueKind.SEQUENCE:
        raise TemplateFunctionError(
            "keys must be an array of strings",
            kind=ErrorKind.TYPE_MISMATCH,
            function=fn_name,
        )
    return [key for key in value if kind_of(key) is ValueKind.STRING]


class ObjectMerge(Function):
    NAME = "object_merge"
    METADATA = FunctionMetadata(
        name="object_merge",
        category="object",
        description="Deep-merge two objects; values from obj2 win on conflicts",
        arguments=(
            arg("obj1", "object", "Base object"),
            arg("obj2", "object", "Overlay object"),
        ),
        return_type="object",
        examples=("{{ object_merge(obj1=defaults, obj2=overrides) | tojson }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        base = to_plain(kwargs.get_required("obj1"))
        overlay = to_plain(kwargs.get_required("obj2"))
        return deep_merge(base, overlay)


class ObjectGet(Function):
    NAME = "object_get"
    METADATA = FunctionMetadata(
        name="object_get",
        category="object",
        description="Read a nested value by dot path; undefined when the path is missing",
        arguments=(
            arg("object", "object", "Object to read from"),
            arg("path", "string", "Dot-separated path, e.g. 'server.ports.0'"),
        ),
        return_type="any",
        examples=('{{ object_get(object=config, path="server.host") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        value = kwargs.get_required("object")
        path = kwargs.get_str("path")
        found = lookup_path(value, path)
        if found is _MISSING:
            return Undefined(hint=f"object_get: path '{path}' not found")
        return found


class ObjectSet(Function):
    NAME = "object_set"
    METADATA = FunctionMetadata(
        name="object_set",
        category="object",
        description="Return a copy of the object with the value set at a dot path",
        arguments=(
            arg("object", "object", "Source object"),
            arg("path", "string", "Dot-separated path; missing levels are created"),
            arg("value", "any", "Value to set"),
        ),
        return_type="object",
        examples=('{{ object_set(object=config, path="server.port", value=9090) | tojson }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Dict[str, Any]:
        source = require_mapping(kwargs.get_required("object"), cls.NAME)
        path = kwargs.get_str("path")
        value = to_plain(kwargs.get_required("value"))
        result = to_plain(source)
        _set_path(result, path.split("."), value)
        return result


class ObjectHasKey(Function):
    NAME = "object_has_key"
    METADATA = FunctionMetadata(
        name="object_has_key",
        category="object",
        description="True when the object has the top-level key",
        arguments=(
            arg("object", "object", "Object to inspect"),
            arg("key", "string", "Key to look for"),
        ),
        return_type="boolean",
        examples=('{{ object_has_key(object=config, key="database") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        value = kwargs.get_required("object")
        key = kwargs.get_str("key")
        if kind_of(value) is not ValueKind.MAPPING:
            return False
        return key in value


class ObjectPick(Function):
    NAME = "object_pick"
    METADATA = FunctionMetadata(
        name="object_pick",
        category="object",
        description="Copy of the object with only the listed keys",
        arguments=(
            arg("object", "object", "Source object"),
            arg("keys", "array", "Keys to keep"),
        ),
        return_type="object",
        examples=('{{ object_pick(object=user, keys=["name", "email"]) | tojson }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Dict[str, Any]:
        source = require_mapping(kwargs.get_required("object"), cls.NAME, "object_pick requires an object")
        keys = _string_keys(kwargs.get_required("keys"), cls.NAME)
        return {key: to_plain(source[key]) for key in keys if key in source}


class ObjectOmit(Function):
    NAME = "object_omit"
    METADATA = FunctionMetadata(
        name="object_omit",
        category="object",
        description="Copy of the object without the listed keys",
        arguments=(
            arg("object", "object", "Source object"),
            arg("keys", "array", "Keys to drop"),
        ),
        return_type="object",
        examples=('{{ object_omit(object=user, keys=["password"]) | tojson }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Dict[str, Any]:
        source = require_mapping(kwargs.get_required("object"), cls.NAME, "object_omit requires an object")
        dropped = set(_string_keys(kwargs.get_required("keys"), cls.NAME))
        return {str(key): to_plain(value) for key, value in source.items() if key not in dropped}


class ObjectRenameKeys(Function):
    NAME = "object_rename_keys"
    METADATA = FunctionMetadata(
        name="object_rename_keys",
        category="object",
        description="Copy of the object with top-level keys renamed via a mapping",
        arguments=(
            arg("object", "object", "Source object"),
            arg("mapping", "object", "Old key to new key"),
        ),
        return_type="object",
        examples=('{{ object_rename_keys(object=row, mapping={"id": "user_id"}) | tojson }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Dict[str, Any]:
        source = require_mapping(kwargs.get_required("object"), cls.NAME, "object_rename_keys requires an object")
        mapping = require_mapping(kwargs.get_required("mapping"), cls.NAME, "mapping must be an object")
        renamed: Dict[str, Any] = {}
        for key, value in source.items():
            target = mapping.get(key, key)
            if kind_of(target) is not ValueKind.STRING:
                target = key
            renamed[str(target)] = to_plain(value)
        return renamed


class ObjectUnflatten(Function):
    NAME = "object_unflatten"
    METADATA = FunctionMetadata(
        name="object_unflatten",
        category="object",
        description="Expand delimiter-joined keys into nested objects",
        arguments=(
            arg("object", "object", "Flat object"),
            arg("delimiter", "string", "Key separator", required=False, default='"."'),
        ),
        return_type="object",
        examples=('{{ object_unflatten(object={"a.b": 1, "a.c": 2}) | tojson }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Dict[str, Any]:
        source = require_mapping(kwargs.get_required("object"), cls.NAME, "object_unflatten requires an object")
        delimiter = kwargs.get_str("delimiter", ".") or "."
        result: Dict[str, Any] = {}
        for key, value in source.items():
            _set_path(result, str(key).split(delimiter), to_plain(value))
        return result


_BRACKET = re.compile(r"\[([^\]]*)\]")


def _json_path_tokens(path: str) -> List[str]:
    """Split a JSONPath-like expression into key and ``[n]``/``[*]`` tokens."""
    tokens: List[str] = []
    buffer = ""
    i = 0
    while i < len(path):
        ch = path[i]
        if ch == ".":
            if buffer:
                tokens.append(buffer)
                buffer = ""
            i += 1
        elif ch == "[":
            if buffer:
                tokens.append(buffer)
                buffer = ""
            end = path.find("]", i)
            if end == -1:
                raise ValueError("Unclosed bracket in path")
            tokens.append(path[i : end + 1])
            i = end + 1
        else:
            buffer += ch
            i += 1
    if buffer:
        tokens.append(buffer)
    return tokens


def _walk_json_path(value: Any, tokens: List[str]) -> Any:
    if not tokens:
        return value
    token, rest = tokens[0], tokens[1:]
    bracket = _BRACKET.fullmatch(token)
    if bracket is None:
        if kind_of(value) is not ValueKind.MAPPING or token not in value:
            return None
        return _walk_json_path(value[token], rest)
    inner = bracket.group(1).strip()
    if inner == "*":
        if kind_of(value) is not ValueKind.SEQUENCE:
            return None
        return [_walk_json_path(item, rest) for item in value]
    if not inner.isdigit():
        raise ValueError(f"Invalid array index: {inner}")
    index = int(inner)
    if kind_of(value) is not ValueKind.SEQUENCE or index >= len(value):
        return None
    return _walk_json_path(value[index], rest)


class JsonPath(Function):
    NAME = "json_path"
    METADATA = FunctionMetadata(
        name="json_path",
        category="object",
        description="Query an object with a JSONPath-like expression ($.a.b[0], items[*].name)",
        arguments=(
            arg("object", "any", "Object or array to query"),
            arg("path", "string", "Path expression; a leading '$' is optional"),
        ),
        return_type="any",
        examples=('{{ json_path(object=data, path="$.users[*].name") | tojson }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        value = to_plain(kwargs.get_required("object"))
        path = kwargs.get_str("path").strip()
        if path.startswith("$."):
            path = path[2:]
        elif path.startswith("$"):
            path = path[1:]
        if not path:
            return value
        try:
            return _walk_json_path(value, _json_path_tokens(path))
        except ValueError as exc:
            raise TemplateFunctionError(
                str(exc),
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            ) from exc


ENTRIES = (
    ObjectMerge,
    ObjectGet,
    ObjectSet,
    ObjectHasKey,
    ObjectPick,
    ObjectOmit,
    ObjectRenameKeys,
    ObjectUnflatten,
    JsonPath,
)

__all__ = [
    "ObjectMerge",
    "ObjectGet",
    "ObjectSet",
    "ObjectHasKey",
    "ObjectPick",
    "ObjectOmit",
    "ObjectRenameKeys",
    "ObjectUnflatten",
    "JsonPath",
    "lookup_path",
    "ENTRIES",
]
