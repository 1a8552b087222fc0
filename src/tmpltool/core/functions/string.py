"""Regex and substring search helpers, plus word pluralization."""
from __future__ import annotations

import re
from typing import List, Pattern

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs


def compile_pattern(pattern: str, fn_name: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise TemplateFunctionError(
            f"Invalid regex pattern '{pattern}': {exc}",
            kind=ErrorKind.DOMAIN_VIOLATION,
            function=fn_name,
        ) from exc


_STRING_ARG = arg("string", "string", "The string to search")


class RegexMatch(Function):
    NAME = "regex_match"
    METADATA = FunctionMetadata(
        name="regex_match",
        category="string",
        description="True when the pattern matches anywhere in the string",
        arguments=(_STRING_ARG, arg("pattern", "string", "Regular expression")),
        return_type="boolean",
        examples=('{{ regex_match(string=version, pattern="^v\\\\d+") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        text = kwargs.get_str("string")
        return compile_pattern(kwargs.get_str("pattern"), cls.NAME).search(text) is not None


class RegexFindAll(Function):
    NAME = "regex_find_all"
    METADATA = FunctionMetadata(
        name="regex_find_all",
        category="string",
        description="All non-overlapping matches of the pattern (whole match text)",
        arguments=(_STRING_ARG, arg("pattern", "string", "Regular expression")),
        return_type="array",
        examples=('{{ regex_find_all(string="a1b22c333", pattern="\\\\d+") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> List[str]:
        text = kwargs.get_str("string")
        compiled = compile_pattern(kwargs.get_str("pattern"), cls.NAME)
        return [match.group(0) for match in compiled.finditer(text)]


class Contains(Function):
    NAME = "contains"
    METADATA = FunctionMetadata(
        name="contains",
        category="string",
        description="True when the string contains the substring",
        arguments=(_STRING_ARG, arg("substring", "string", "Substring to look for")),
        return_type="boolean",
        examples=('{{ contains(string=hostname, substring="prod") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        return kwargs.get_str("substring") in kwargs.get_str("string")


class IndexOf(Function):
    NAME = "index_of"
    METADATA = FunctionMetadata(
        name="index_of",
        category="string",
        description="Character position of the first occurrence of the substring, or -1",
        arguments=(_STRING_ARG, arg("substring", "string", "Substring to look for")),
        return_type="integer",
        examples=('{{ index_of(string="hello world", substring="world") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        return kwargs.get_str("string").find(kwargs.get_str("substring"))


class CountOccurrences(Function):
    NAME = "count_occurrences"
    METADATA = FunctionMetadata(
        name="count_occurrences",
        category="string",
        description="Number of non-overlapping occurrences of the substring",
        arguments=(_STRING_ARG, arg("substring", "string", "Substring to count (non-empty)")),
        return_type="integer",
        examples=('{{ count_occurrences(string="banana", substring="a") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        text = kwargs.get_str("string")
        substring = kwargs.get_str("substring")
        if not substring:
            raise TemplateFunctionError(
                "substring cannot be empty",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        return text.count(substring)


class Pluralize(Function):
    NAME = "pluralize"
    METADATA = FunctionMetadata(
        name="pluralize",
        category="string",
        description="Singular form when count is 1, otherwise the plural (singular + 's' by default)",
        arguments=(
            arg("count", "number", "Quantity being described"),
            arg("singular", "string", "Singular form"),
            arg("plural", "string", "Plural form", required=False, default="singular + 's'"),
        ),
        return_type="string",
        examples=(
            '{{ count }} {{ pluralize(count=count, singular="item") }}',
            '{{ pluralize(count=2, singular="child", plural="children") }}',
        ),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        count = kwargs.get_number("count")
        singular = kwargs.get_str("singular")
        if count == 1:
            return singular
        return kwargs.get_str("plural", singular + "s")


ENTRIES = (RegexMatch, RegexFindAll, Contains, IndexOf, CountOccurrences, Pluralize)

__all__ = [
    "RegexMatch",
    "RegexFindAll",
    "Contains",
    "IndexOf",
    "CountOccurrences",
    "Pluralize",
    "compile_pattern",
    "ENTRIES",
]
