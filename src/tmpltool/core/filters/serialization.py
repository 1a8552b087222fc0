"""Conversions between template values and JSON, YAML and TOML text.

``parse_X(to_X(v))`` is value-equal to ``v`` for anything format X can
represent. Values X cannot represent (TOML has no null and needs a table at
the root) fail in ``to_X`` instead of being dropped.
"""
from __future__ import annotations

import datetime as _dt
import json
import tomllib
from typing import Any

import tomli_w
import yaml

from ..contracts import UnaryFilterFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, ValueKind, extract_string, kind_of, to_plain

_OBJECT_ARG = arg("object", "any", "The value to serialize")


def _format_error(name: str, message: str) -> TemplateFunctionError:
    return TemplateFunctionError(message, kind=ErrorKind.FORMAT_INCOMPATIBLE, function=name)


def _decode_error(name: str, message: str) -> TemplateFunctionError:
    return TemplateFunctionError(message, kind=ErrorKind.DECODE_FAILURE, function=name)


def _temporal_to_string(value: Any) -> str:
    if isinstance(value, _dt.datetime) and value.utcoffset() == _dt.timedelta(0):
        return value.replace(tzinfo=None).isoformat() + "Z"
    return value.isoformat()


def normalize_parsed(value: Any) -> Any:
    """Make parsed data template-friendly.

    Mapping keys become strings, dates and times become ISO strings and
    binary blobs are decoded as UTF-8 where possible.
    """
    if isinstance(value, dict):
        return {_key_to_string(k): normalize_parsed(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_parsed(v) for v in value]
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return _temporal_to_string(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _key_to_string(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (_dt.datetime, _dt.date, _dt.time)):
        return _temporal_to_string(key)
    if isinstance(key, (list, tuple, dict)):
        return json.dumps(normalize_parsed(key), separators=(",", ":"))
    return str(key)


class ToJson(UnaryFilterFunction):
    NAME = "to_json"
    ARGUMENT = "object"
    METADATA = FunctionMetadata(
        name="to_json",
        category="serialization",
        description="Serialize a value to JSON",
        arguments=(
            _OBJECT_ARG,
            arg("pretty", "boolean", "Pretty-print with 2-space indentation", required=False, default="false"),
        ),
        return_type="string",
        examples=("{{ to_json(object=config) }}", "{{ config | to_json(pretty=true) }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        pretty = kwargs.get_bool("pretty", False)
        try:
            plain = to_plain(value)
            if pretty:
                return json.dumps(plain, indent=2, ensure_ascii=False, allow_nan=False)
            return json.dumps(plain, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise _format_error(cls.NAME, f"Failed to serialize to JSON: {exc}") from exc


class ToYaml(UnaryFilterFunction):
    NAME = "to_yaml"
    ARGUMENT = "object"
    METADATA = FunctionMetadata(
        name="to_yaml",
        category="serialization",
        description="Serialize a value to YAML",
        arguments=(_OBJECT_ARG,),
        return_type="string",
        examples=("{{ to_yaml(object=config) }}", "{{ config | to_yaml }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        try:
            text = yaml.safe_dump(
                to_plain(value),
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )
        except yaml.YAMLError as exc:
            raise _format_error(cls.NAME, f"Failed to serialize to YAML: {exc}") from exc
        # Scalar roots get an explicit document end marker from PyYAML.
        if text.endswith("\n...\n"):
            text = text[: -len("...\n")]
        return text


class ToToml(UnaryFilterFunction):
    NAME = "to_toml"
    ARGUMENT = "object"
    METADATA = FunctionMetadata(
        name="to_toml",
        category="serialization",
        description="Serialize an object to TOML (null values are not supported)",
        arguments=(arg("object", "object", "The object to serialize"),),
        return_type="string",
        examples=("{{ to_toml(object=config) }}", "{{ config | to_toml }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        if kind_of(value) is not ValueKind.MAPPING:
            raise _format_error(
                cls.NAME,
                f"Failed to serialize to TOML: root value must be a table, found {kind_of(value).value}",
            )
        try:
            return tomli_w.dumps(to_plain(value))
        except (TypeError, ValueError) as exc:
            raise _format_error(cls.NAME, f"Failed to serialize to TOML: {exc}") from exc


class ParseJson(UnaryFilterFunction):
    NAME = "parse_json"
    METADATA = FunctionMetadata(
        name="parse_json",
        category="serialization",
        description="Parse a JSON string into a value",
        arguments=(arg("string", "string", "The JSON string to parse"),),
        return_type="any",
        examples=("{{ parse_json(string='{\"a\": 1}').a }}", "{{ (payload | parse_json).name }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Any:
        text = extract_string(value, cls.NAME)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise _decode_error(cls.NAME, f"Failed to parse JSON: {exc}") from exc


class ParseYaml(UnaryFilterFunction):
    NAME = "parse_yaml"
    METADATA = FunctionMetadata(
        name="parse_yaml",
        category="serialization",
        description="Parse a YAML string into a value",
        arguments=(arg("string", "string", "The YAML string to parse"),),
        return_type="any",
        examples=('{{ parse_yaml(string="a: 1").a }}', "{{ (doc | parse_yaml).items }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Any:
        text = extract_string(value, cls.NAME)
        try:
            return normalize_parsed(yaml.safe_load(text))
        except yaml.YAMLError as exc:
            raise _decode_error(cls.NAME, f"Failed to parse YAML: {exc}") from exc


class ParseToml(UnaryFilterFunction):
    NAME = "parse_toml"
    METADATA = FunctionMetadata(
        name="parse_toml",
        category="serialization",
        description="Parse a TOML string into an object",
        arguments=(arg("string", "string", "The TOML string to parse"),),
        return_type="object",
        examples=("{{ parse_toml(string='a = 1').a }}", "{{ (doc | parse_toml).package.name }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Any:
        text = extract_string(value, cls.NAME)
        try:
            return normalize_parsed(tomllib.loads(text))
        except tomllib.TOMLDecodeError as exc:
            raise _decode_error(cls.NAME, f"Failed to parse TOML: {exc}") from exc


ENTRIES = (ToJson, ToYaml, ToToml, ParseJson, ParseYaml, ParseToml)

__all__ = [
    "ToJson",
    "ToYaml",
    "ToToml",
    "ParseJson",
    "ParseYaml",
    "ParseToml",
    "normalize_parsed",
    "ENTRIES",
]
