"""URL construction helpers."""
from __future__ import annotations

import base64
import json
from typing import Any, Mapping

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..filters.url import percent_encode
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs, ValueKind, describe, kind_of, to_plain


def _query_value(value: Any) -> str:
    kind = kind_of(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind in (ValueKind.INT, ValueKind.FLOAT):
        return str(value)
    if kind is ValueKind.UNDEFINED:
        return "null"
    return json.dumps(to_plain(value), separators=(",", ":"), ensure_ascii=False)


def build_query(params: Mapping[str, Any]) -> str:
    """Serialize ``params`` as ``k=v&...`` in insertion order."""
    return "&".join(
        f"{percent_encode(str(key))}={percent_encode(_query_value(value))}"
        for key, value in params.items()
    )


class BasicAuth(Function):
    NAME = "basic_auth"
    METADATA = FunctionMetadata(
        name="basic_auth",
        category="url",
        description="HTTP Basic Authorization header value",
        arguments=(
            arg("username", "string", "User name"),
            arg("password", "string", "Password"),
        ),
        return_type="string",
        examples=('Authorization: {{ basic_auth(username="admin", password=get_env(name="PASS")) }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        credentials = f"{kwargs.get_str('username')}:{kwargs.get_str('password')}"
        return "Basic " + base64.b64encode(credentials.encode("utf-8")).decode("ascii")


class BuildUrl(Function):
    NAME = "build_url"
    METADATA = FunctionMetadata(
        name="build_url",
        category="url",
        description="Assemble a URL from its components",
        arguments=(
            arg("host", "string", "Host name"),
            arg("scheme", "string", "URL scheme", required=False, default='"https"'),
            arg("port", "integer", "Port; omitted from the URL when not given", required=False),
            arg("path", "string", "Path; a leading '/' is added when missing", required=False, default='"/"'),
            arg("query", "string|object", "Query string or parameter object", required=False),
        ),
        return_type="string",
        examples=('{{ build_url(host="api.example.com", port=8443, path="v1/users", query={"page": 2}) }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        host = kwargs.get_str("host")
        scheme = kwargs.get_str("scheme", "https")
        path = kwargs.get_str("path", "/")
        if not path.startswith("/"):
            path = "/" + path
        url = f"{scheme}://{host}"
        if kwargs.has("port"):
            url += f":{kwargs.get_int('port')}"
        url += path

        query = kwargs.get_optional("query")
        if query is not None:
            kind = kind_of(query)
            if kind is ValueKind.STRING:
                query_text = query
            elif kind is ValueKind.MAPPING:
                query_text = build_query(query)
            else:
                raise TemplateFunctionError(
                    f"build_url query must be a string or object, found: {describe(query)}",
                    kind=ErrorKind.TYPE_MISMATCH,
                    function=cls.NAME,
                )
            if query_text:
                url += "?" + query_text
        return url


class QueryString(Function):
    NAME = "query_string"
    METADATA = FunctionMetadata(
        name="query_string",
        category="url",
        description="Serialize an object as a URL query string",
        arguments=(arg("params", "object", "Parameters to encode"),),
        return_type="string",
        examples=('{{ query_string(params={"q": "hello world", "page": 2}) }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        params = kwargs.get_required("params")
        if kind_of(params) is not ValueKind.MAPPING:
            raise TemplateFunctionError(
                "query parameter must be an object",
                kind=ErrorKind.TYPE_MISMATCH,
                function=cls.NAME,
            )
        return build_query(params)


ENTRIES = (BasicAuth, BuildUrl, QueryString)

__all__ = ["BasicAuth", "BuildUrl", "QueryString", "build_query", "ENTRIES"]
