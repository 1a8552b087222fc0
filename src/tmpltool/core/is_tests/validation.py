"""String-format predicates: email, url, ip, uuid."""
from __future__ import annotations

import ipaddress
import re
from typing import Any, ClassVar, Pattern

from ..contracts import IsTestFunction
from ..metadata import FUNCTION_AND_TEST, FunctionMetadata, arg
from ..values import Kwargs, ValueKind, extract_string, kind_of

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
URL_PATTERN = re.compile(r"(https?|ftp|file)://[-A-Za-z0-9+&@#/%?=~_|!:,.;]*[-A-Za-z0-9+&@#/%=~_|]")
UUID_PATTERN = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")


def is_ip(text: str) -> bool:
    """True for a literal IPv4 or IPv6 address (no zone identifiers)."""
    if "%" in text:
        return False
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def _string_metadata(function_name: str, is_name: str, label: str, sample: str) -> FunctionMetadata:
    return FunctionMetadata(
        name=function_name,
        category="validation",
        description=f"Check whether a string is a valid {label}",
        arguments=(arg("string", "string", "The string to check"),),
        return_type="boolean",
        examples=(
            f'{{{{ {function_name}(string="{sample}") }}}}',
            f'{{% if value is {is_name} %}}ok{{% endif %}}',
        ),
        syntax=FUNCTION_AND_TEST,
    )


class _StringPredicate(IsTestFunction):
    @classmethod
    def validate(cls, text: str) -> bool:
        raise NotImplementedError

    @classmethod
    def call_as_function(cls, kwargs: Kwargs) -> bool:
        return cls.validate(extract_string(kwargs.get_required("string"), cls.FUNCTION_NAME))

    @classmethod
    def call_as_is(cls, value: Any) -> bool:
        if kind_of(value) is not ValueKind.STRING:
            return False
        return cls.validate(value)


class _PatternPredicate(_StringPredicate):
    PATTERN: ClassVar[Pattern[str]]

    @classmethod
    def validate(cls, text: str) -> bool:
        return cls.PATTERN.fullmatch(text) is not None


class Email(_PatternPredicate):
    FUNCTION_NAME = "is_email"
    IS_NAME = "email"
    NAME = FUNCTION_NAME
    PATTERN = EMAIL_PATTERN
    METADATA = _string_metadata("is_email", "email", "email address", "user@example.com")


class Url(_PatternPredicate):
    FUNCTION_NAME = "is_url"
    IS_NAME = "url"
    NAME = FUNCTION_NAME
    PATTERN = URL_PATTERN
    METADATA = _string_metadata("is_url", "url", "URL (http, https, ftp or file)", "https://example.com")


class Ip(_StringPredicate):
    FUNCTION_NAME = "is_ip"
    IS_NAME = "ip"
    NAME = FUNCTION_NAME
    METADATA = _string_metadata("is_ip", "ip", "IPv4 or IPv6 address", "192.168.1.1")

    @classmethod
    def validate(cls, text: str) -> bool:
        return is_ip(text)


class Uuid(_PatternPredicate):
    FUNCTION_NAME = "is_uuid"
    IS_NAME = "uuid"
    NAME = FUNCTION_NAME
    PATTERN = UUID_PATTERN
    METADATA = _string_metadata("is_uuid", "uuid", "UUID", "550e8400-e29b-41d4-a716-446655440000")


ENTRIES = (Email, Url, Ip, Uuid)

__all__ = ["Email", "Url", "Ip", "Uuid", "is_ip", "ENTRIES"]
