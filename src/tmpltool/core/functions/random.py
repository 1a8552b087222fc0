"""Random numbers and random strings."""
from __future__ import annotations

import random
from typing import Dict

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs

MAX_RANDOM_STRING_LENGTH = 10000

CHARSETS: Dict[str, str] = {
    "alphanumeric": "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789",
    "alphabetic": "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz",
    "lowercase": "abcdefghijklmnopqrstuvwxyz",
    "uppercase": "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "numeric": "0123456789",
    "hex": "0123456789abcdef",
    "hex_upper": "0123456789ABCDEF",
}
CHARSET_ALIASES: Dict[str, str] = {
    "alpha": "alphabetic",
    "lower": "lowercase",
    "upper": "uppercase",
    "digits": "numeric",
    "hexadecimal": "hex",
}


def resolve_charset(name: str) -> str:
    """Map a preset name to its characters; any other string is used verbatim."""
    return CHARSETS.get(CHARSET_ALIASES.get(name, name), name)


def _domain_error(name: str, message: str) -> TemplateFunctionError:
    return TemplateFunctionError(message, kind=ErrorKind.DOMAIN_VIOLATION, function=name)


class GetRandom(Function):
    NAME = "get_random"
    METADATA = FunctionMetadata(
        name="get_random",
        category="random",
        description="Random integer in the half-open range [start, end)",
        arguments=(
            arg("start", "integer", "Inclusive lower bound", required=False, default="0"),
            arg("end", "integer", "Exclusive upper bound", required=False, default="100"),
        ),
        return_type="integer",
        examples=("{{ get_random() }}", "{{ get_random(start=1, end=7) }}"),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        start = kwargs.get_int("start", 0)
        end = kwargs.get_int("end", 100)
        if start >= end:
            raise _domain_error(cls.NAME, f"start ({start}) must be less than end ({end})")
        return random.randrange(start, end)


class RandomString(Function):
    NAME = "random_string"
    METADATA = FunctionMetadata(
        name="random_string",
        category="random",
        description="Random string drawn from a preset or custom character set",
        arguments=(
            arg("length", "integer", "Number of characters (0-10000)"),
            arg(
                "charset",
                "string",
                "alphanumeric, alphabetic, lowercase, uppercase, numeric, hex, hex_upper or custom characters",
                required=False,
                default='"alphanumeric"',
            ),
        ),
        return_type="string",
        examples=("{{ random_string(length=16) }}", '{{ random_string(length=8, charset="hex") }}'),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        length = kwargs.get_int("length")
        if length < 0:
            raise _domain_error(cls.NAME, f"random_string length must be non-negative, got {length}")
        if length == 0:
            return ""
        if length > MAX_RANDOM_STRING_LENGTH:
            raise _domain_error(
                cls.NAME,
                "random_string length must be <= 10000 to prevent excessive memory usage",
            )
        charset = resolve_charset(kwargs.get_str("charset", "alphanumeric"))
        if not charset:
            raise _domain_error(cls.NAME, "charset cannot be empty")
        return "".join(random.choices(charset, k=length))


ENTRIES = (GetRandom, RandomString)

__all__ = ["GetRandom", "RandomString", "CHARSETS", "resolve_charset", "ENTRIES"]
