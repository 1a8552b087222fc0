"""Human-oriented formatting filters.

These replace the Jinja2 built-ins of the same name so that both the
function and the filter form behave identically.
"""
from __future__ import annotations

from typing import Any
from urllib.parse import quote

from ..contracts import UnaryFilterFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, ValueKind, describe, extract_string, kind_of

SIZE_UNITS = ("bytes", "KB", "MB", "GB", "TB", "PB")
SIZE_THRESHOLD = 1024.0


def format_size(size_bytes: int) -> str:
    """Render a byte count with binary (1024) steps.

    Exact multiples print without decimals (``1024`` -> ``1 KB``); otherwise
    two decimals under 10, one under 100 and none above.
    """
    if size_bytes < SIZE_THRESHOLD:
        return f"{size_bytes} bytes"
    size = float(size_bytes)
    unit = 0
    while size >= SIZE_THRESHOLD and unit < len(SIZE_UNITS) - 1:
        size /= SIZE_THRESHOLD
        unit += 1
    if abs(size - round(size)) < 0.01:
        return f"{size:.0f} {SIZE_UNITS[unit]}"
    if size < 10.0:
        return f"{size:.2f} {SIZE_UNITS[unit]}"
    if size < 100.0:
        return f"{size:.1f} {SIZE_UNITS[unit]}"
    return f"{size:.0f} {SIZE_UNITS[unit]}"


class Filesizeformat(UnaryFilterFunction):
    NAME = "filesizeformat"
    ARGUMENT = "bytes"
    METADATA = FunctionMetadata(
        name="filesizeformat",
        category="formatting",
        description="Format a byte count as a human-readable size (KB, MB, ...)",
        arguments=(arg("bytes", "integer", "Number of bytes"),),
        return_type="string",
        examples=("{{ filesizeformat(bytes=1048576) }}", "{{ 1536 | filesizeformat }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        kind = kind_of(value)
        if kind is ValueKind.FLOAT and float(value).is_integer():
            value, kind = int(value), ValueKind.INT
        if kind is not ValueKind.INT:
            raise TemplateFunctionError(
                f"filesizeformat requires a number, found: {describe(value)}",
                kind=ErrorKind.TYPE_MISMATCH,
                function=cls.NAME,
            )
        try:
            return format_size(value)
        except OverflowError as exc:
            raise TemplateFunctionError(
                "filesizeformat: byte count is out of range",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            ) from exc


class Urlencode(UnaryFilterFunction):
    NAME = "urlencode"
    METADATA = FunctionMetadata(
        name="urlencode",
        category="formatting",
        description="Percent-encode every non-alphanumeric character",
        arguments=(arg("string", "string", "The string to encode"),),
        return_type="string",
        examples=('{{ urlencode(string="a b&c") }}', "{{ value | urlencode }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        # quote() always leaves "_.-~" alone; encode those by hand
        return "".join(
            f"%{ord(ch):02X}" if ch in "_.-~" else quote(ch, safe="") for ch in text
        )


ENTRIES = (Filesizeformat, Urlencode)

__all__ = ["Filesizeformat", "Urlencode", "format_size", "SIZE_UNITS", "ENTRIES"]
