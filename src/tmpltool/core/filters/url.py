"""Percent-encoding and URL parsing."""
from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote, unquote_to_bytes, urlsplit

from ..contracts import UnaryFilterFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, extract_string

_STRING_ARG = arg("string", "string", "The string to process")

DEFAULT_PORTS: Dict[str, int] = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}


def percent_encode(text: str) -> str:
    """Encode everything except RFC 3986 unreserved characters."""
    return quote(text, safe="")


class UrlEncode(UnaryFilterFunction):
    NAME = "url_encode"
    METADATA = FunctionMetadata(
        name="url_encode",
        category="url",
        description="Percent-encode a string for use in a URL",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ url_encode(string="hello world") }}', "{{ query | url_encode }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return percent_encode(extract_string(value, cls.NAME))


class UrlDecode(UnaryFilterFunction):
    NAME = "url_decode"
    METADATA = FunctionMetadata(
        name="url_decode",
        category="url",
        description="Decode a percent-encoded string",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ url_decode(string="hello%20world") }}', "{{ encoded | url_decode }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        try:
            return unquote_to_bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateFunctionError(
                f"Failed to decode URL string: {exc}",
                kind=ErrorKind.DECODE_FAILURE,
                function=cls.NAME,
            ) from exc


def parse_url(text: str) -> Dict[str, Any]:
    """Split ``text`` into its components.

    Raises ValueError when the URL has no scheme or an invalid port.
    """
    parts = urlsplit(text)
    if not parts.scheme or ":" not in text:
        raise ValueError("relative URL without a base")
    explicit: Optional[int] = parts.port
    scheme = parts.scheme.lower()
    path = parts.path
    if not path and scheme in DEFAULT_PORTS:
        path = "/"
    return {
        "scheme": scheme,
        "host": parts.hostname or "",
        "port": explicit if explicit is not None else DEFAULT_PORTS.get(scheme),
        "path": path,
        "query": parts.query,
        "fragment": parts.fragment,
        "username": parts.username or "",
        "password": parts.password or "",
    }


class ParseUrl(UnaryFilterFunction):
    NAME = "parse_url"
    ARGUMENT = "url"
    METADATA = FunctionMetadata(
        name="parse_url",
        category="url",
        description="Parse a URL into scheme, host, port, path, query, fragment, username and password",
        arguments=(arg("url", "string", "The URL to parse"),),
        return_type="object",
        examples=('{{ parse_url(url="https://example.com:8080/api?q=1").port }}', "{{ (endpoint | parse_url).host }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Dict[str, Any]:
        text = extract_string(value, cls.NAME)
        try:
            return parse_url(text)
        except ValueError as exc:
            raise TemplateFunctionError(
                f"Failed to parse URL '{text}': {exc}",
                kind=ErrorKind.DECODE_FAILURE,
                function=cls.NAME,
            ) from exc


ENTRIES = (UrlEncode, UrlDecode, ParseUrl)

__all__ = ["UrlEncode", "UrlDecode", "ParseUrl", "DEFAULT_PORTS", "percent_encode", "parse_url", "ENTRIES"]
