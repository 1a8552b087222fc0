"""Binary-safe encodings and fixed-table escaping.

Escaping uses explicit substitution tables rather than a general-purpose
escaping library, so exactly these characters are rewritten.
"""
from __future__ import annotations

import base64
import binascii
from typing import Any, Dict

from ..contracts import UnaryFilterFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, extract_string

_STRING_ARG = arg("string", "string", "The string to process")

_HTML_TABLE: Dict[int, str] = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#x27;"}
)
_XML_TABLE: Dict[int, str] = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&apos;"}
)


def _decode_error(name: str, message: str) -> TemplateFunctionError:
    return TemplateFunctionError(message, kind=ErrorKind.DECODE_FAILURE, function=name)


class Base64Encode(UnaryFilterFunction):
    NAME = "base64_encode"
    METADATA = FunctionMetadata(
        name="base64_encode",
        category="encoding",
        description="Encode a string to Base64",
        arguments=(arg("string", "string", "The string to encode"),),
        return_type="string",
        examples=('{{ base64_encode(string="hello") }}', '{{ "hello" | base64_encode }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        return base64.b64encode(text.encode("utf-8")).decode("ascii")


class Base64Decode(UnaryFilterFunction):
    NAME = "base64_decode"
    METADATA = FunctionMetadata(
        name="base64_decode",
        category="encoding",
        description="Decode a Base64 string",
        arguments=(arg("string", "string", "The Base64 string to decode"),),
        return_type="string",
        examples=('{{ base64_decode(string="aGVsbG8=") }}', '{{ "aGVsbG8=" | base64_decode }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        try:
            raw = base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise _decode_error(cls.NAME, f"Failed to decode base64: {exc}") from exc
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise _decode_error(cls.NAME, f"Decoded base64 is not valid UTF-8: {exc}") from exc


class HexEncode(UnaryFilterFunction):
    NAME = "hex_encode"
    METADATA = FunctionMetadata(
        name="hex_encode",
        category="encoding",
        description="Encode a string to hexadecimal",
        arguments=(arg("string", "string", "The string to encode"),),
        return_type="string",
        examples=('{{ hex_encode(string="hello") }}', '{{ "hello" | hex_encode }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return extract_string(value, cls.NAME).encode("utf-8").hex()


class HexDecode(UnaryFilterFunction):
    NAME = "hex_decode"
    METADATA = FunctionMetadata(
        name="hex_decode",
        category="encoding",
        description="Decode a hexadecimal string",
        arguments=(arg("string", "string", "The hex string to decode"),),
        return_type="string",
        examples=('{{ hex_decode(string="68656c6c6f") }}', '{{ "68656c6c6f" | hex_decode }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        # bytes.fromhex tolerates whitespace; strict hex does not.
        if any(ch.isspace() for ch in text):
            raise _decode_error(cls.NAME, "Failed to decode hex: Invalid character in input")
        try:
            raw = bytes.fromhex(text)
        except ValueError as exc:
            raise _decode_error(cls.NAME, f"Failed to decode hex: {exc}") from exc
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise _decode_error(cls.NAME, f"Decoded hex is not valid UTF-8: {exc}") from exc


class EscapeHtml(UnaryFilterFunction):
    NAME = "escape_html"
    METADATA = FunctionMetadata(
        name="escape_html",
        category="encoding",
        description="Escape HTML entities (& < > \" ')",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=("{{ escape_html(string='<b>hi</b>') }}", "{{ '<b>hi</b>' | escape_html }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return extract_string(value, cls.NAME).translate(_HTML_TABLE)


class EscapeXml(UnaryFilterFunction):
    NAME = "escape_xml"
    METADATA = FunctionMetadata(
        name="escape_xml",
        category="encoding",
        description="Escape XML entities (& < > \" ')",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=("{{ escape_xml(string='<a href=\"x\">') }}", "{{ value | escape_xml }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return extract_string(value, cls.NAME).translate(_XML_TABLE)


class EscapeShell(UnaryFilterFunction):
    NAME = "escape_shell"
    METADATA = FunctionMetadata(
        name="escape_shell",
        category="encoding",
        description="Quote a string for safe use as a single POSIX shell word",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=("{{ escape_shell(string=\"it's\") }}", "echo {{ message | escape_shell }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        return "'" + text.replace("'", "'\\''") + "'"


ENTRIES = (Base64Encode, Base64Decode, HexEncode, HexDecode, EscapeHtml, EscapeXml, EscapeShell)

__all__ = [
    "Base64Encode",
    "Base64Decode",
    "HexEncode",
    "HexDecode",
    "EscapeHtml",
    "EscapeXml",
    "EscapeShell",
    "ENTRIES",
]
