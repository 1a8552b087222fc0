"""String manipulation filters.

Lengths, offsets and widths count characters, not bytes. Line-oriented
filters split on ``\\n`` (a trailing ``\\r`` is dropped) and do not produce an
empty last line for text that ends with a newline.
"""
from __future__ import annotations

import re
from typing import Any, List

from ..contracts import UnaryFilterFunction, positional_filter
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, extract_string

_STRING_ARG = arg("string", "string", "The string to process")

_HTML_TAG = re.compile(r"<[^>]*>")
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]|\x1b\].*?\x07|\x1b[PX^_].*?\x1b\\")
_WHITESPACE_RUN = re.compile(r"\s+")
_REPLACEMENT_GROUP = re.compile(r"\$(?:\$|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")

_QUOTE_STYLES = {"single": "'", "double": '"', "backtick": "`"}


def _domain_error(name: str, message: str) -> TemplateFunctionError:
    return TemplateFunctionError(message, kind=ErrorKind.DOMAIN_VIOLATION, function=name)


def _non_negative(kwargs: Kwargs, name: str, default: Any = None) -> int:
    if default is None:
        value = kwargs.get_int(name)
    else:
        value = kwargs.get_int(name, default)
    if value < 0:
        raise _domain_error(kwargs.fn_name, f"{kwargs.fn_name}: argument '{name}' must be non-negative, found: {value}")
    return value


def _pad_char(kwargs: Kwargs) -> str:
    char = kwargs.get_str("char", " ")
    return char[0] if char else " "


def split_lines(text: str) -> List[str]:
    """Split ``text`` into lines without line terminators."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _group_text(match: re.Match[str], name: str) -> str:
    if name.isdigit():
        index = int(name)
        if index > match.re.groups:
            return ""
        return match.group(index) or ""
    if name not in match.re.groupindex:
        return ""
    return match.group(name) or ""


def expand_replacement(match: re.Match[str], replacement: str) -> str:
    """Expand ``$1``, ``${name}`` and ``$$`` in ``replacement`` for one match.

    A bare reference takes the longest run of letters, digits and ``_``
    after ``$``: all-digit names are group numbers, anything else is a group
    name, so ``$1a`` refers to a group called ``1a``. Write ``${1}a`` for
    group 1 followed by ``a``. Unknown groups and groups that did not take
    part in the match expand to an empty string. Backslashes are literal.
    """

    def _expand(reference: re.Match[str]) -> str:
        name = reference.group(1) or reference.group(2)
        return "$" if name is None else _group_text(match, name)

    return _REPLACEMENT_GROUP.sub(_expand, replacement)


class RegexReplace(UnaryFilterFunction):
    NAME = "regex_replace"
    METADATA = FunctionMetadata(
        name="regex_replace",
        category="string",
        description="Replace all matches of a regular expression ($1 / ${name} refer to groups; write ${1}a when letters follow)",
        arguments=(
            arg("string", "string", "The input string"),
            arg("pattern", "string", "Regular expression pattern"),
            arg("replacement", "string", "Replacement text"),
        ),
        return_type="string",
        examples=(
            '{{ regex_replace(string="hello world", pattern="o", replacement="0") }}',
            '{{ "v1.2.3" | regex_replace(pattern="(\\\\d+)", replacement="<$1>") }}',
        ),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        pattern = kwargs.get_str("pattern")
        replacement = kwargs.get_str("replacement")
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            raise _domain_error(cls.NAME, f"Invalid regex pattern '{pattern}': {exc}") from exc
        return compiled.sub(lambda match: expand_replacement(match, replacement), text)


class Substring(UnaryFilterFunction):
    NAME = "substring"
    METADATA = FunctionMetadata(
        name="substring",
        category="string",
        description="Extract a substring by character position (negative start counts from the end)",
        arguments=(
            _STRING_ARG,
            arg("start", "integer", "Start position"),
            arg("length", "integer", "Number of characters (defaults to the rest)", required=False),
        ),
        return_type="string",
        examples=('{{ substring(string="hello world", start=0, length=5) }}', '{{ "hello world" | substring(start=-5) }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        start = kwargs.get_int("start")
        size = len(text)
        if start < 0:
            start = max(size + start, 0)
        else:
            start = min(start, size)
        if kwargs.has("length"):
            end = min(start + _non_negative(kwargs, "length"), size)
        else:
            end = size
        return text[start:end]


class Truncate(UnaryFilterFunction):
    NAME = "truncate"
    METADATA = FunctionMetadata(
        name="truncate",
        category="string",
        description="Truncate a string to a maximum length, ending with a suffix",
        arguments=(
            _STRING_ARG,
            arg("length", "integer", "Maximum length including the suffix"),
            arg("suffix", "string", "Suffix appended when truncated", required=False, default='"..."'),
        ),
        return_type="string",
        examples=('{{ truncate(string="Hello World", length=8) }}', '{{ title | truncate(length=10, suffix="~") }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        length = _non_negative(kwargs, "length")
        suffix = kwargs.get_str("suffix", "...")
        if len(text) <= length:
            return text
        if length <= len(suffix):
            return suffix
        return text[: length - len(suffix)] + suffix


class WordCount(UnaryFilterFunction):
    NAME = "word_count"
    METADATA = FunctionMetadata(
        name="word_count",
        category="string",
        description="Count whitespace-separated words",
        arguments=(_STRING_ARG,),
        return_type="integer",
        examples=('{{ word_count(string="Hello big world") }}', "{{ text | word_count }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> int:
        return len(extract_string(value, cls.NAME).split())


class SplitLines(UnaryFilterFunction):
    NAME = "split_lines"
    METADATA = FunctionMetadata(
        name="split_lines",
        category="string",
        description="Split a string into an array of lines",
        arguments=(_STRING_ARG,),
        return_type="array",
        examples=('{{ split_lines(string="a\\nb") }}', "{% for line in text | split_lines %}{{ line }}{% endfor %}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> List[str]:
        return split_lines(extract_string(value, cls.NAME))


class Wrap(UnaryFilterFunction):
    NAME = "wrap"
    METADATA = FunctionMetadata(
        name="wrap",
        category="string",
        description="Greedily wrap text at a width; continuation lines get an optional indent",
        arguments=(
            _STRING_ARG,
            arg("width", "integer", "Maximum line width"),
            arg("indent", "string", "Prefix for continuation lines", required=False, default='""'),
        ),
        return_type="string",
        examples=('{{ wrap(string=text, width=40) }}', '{{ text | wrap(width=20, indent="  ") }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        width = _non_negative(kwargs, "width")
        indent = kwargs.get_str("indent", "")
        if width == 0:
            raise _domain_error(cls.NAME, "width must be greater than 0")
        return wrap_text(text, width, indent)


def wrap_text(text: str, width: int, indent: str = "") -> str:
    result: List[str] = []
    first_line = True

    def flush(line: str) -> None:
        nonlocal first_line
        if result:
            result.append("\n")
        if not first_line:
            result.append(indent)
        result.append(line)
        first_line = False

    for source_line in split_lines(text):
        current = ""
        for word in source_line.split():
            effective = width if first_line else max(width - len(indent), 0)
            if not current:
                current = word
            elif len(current) + 1 + len(word) <= effective:
                current = f"{current} {word}"
            else:
                flush(current)
                current = word
        if current:
            flush(current)
    return "".join(result)


class Center(UnaryFilterFunction):
    NAME = "center"
    METADATA = FunctionMetadata(
        name="center",
        category="string",
        description="Center a string within a width using a padding character",
        arguments=(
            _STRING_ARG,
            arg("width", "integer", "Total width"),
            arg("char", "string", "Padding character", required=False, default='" "'),
        ),
        return_type="string",
        examples=('{{ center(string="hi", width=6, char="*") }}', '{{ "title" | center(width=11) }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        width = _non_negative(kwargs, "width")
        char = _pad_char(kwargs)
        if len(text) >= width:
            return text
        total = width - len(text)
        left = total // 2
        return char * left + text + char * (total - left)


class StripHtml(UnaryFilterFunction):
    NAME = "strip_html"
    METADATA = FunctionMetadata(
        name="strip_html",
        category="string",
        description="Remove HTML tags from a string",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ strip_html(string="<p>Hello</p>") }}', "{{ body | strip_html }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return _HTML_TAG.sub("", extract_string(value, cls.NAME))


class StripAnsi(UnaryFilterFunction):
    NAME = "strip_ansi"
    METADATA = FunctionMetadata(
        name="strip_ansi",
        category="string",
        description="Remove ANSI escape sequences from a string",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=("{{ strip_ansi(string=colored) }}", "{{ output | strip_ansi }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return _ANSI_ESCAPE.sub("", extract_string(value, cls.NAME))


class NormalizeWhitespace(UnaryFilterFunction):
    NAME = "normalize_whitespace"
    METADATA = FunctionMetadata(
        name="normalize_whitespace",
        category="string",
        description="Collapse whitespace runs to single spaces and trim the ends",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ normalize_whitespace(string="  a   b ") }}', "{{ text | normalize_whitespace }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return _WHITESPACE_RUN.sub(" ", extract_string(value, cls.NAME)).strip()


class Slugify(UnaryFilterFunction):
    NAME = "slugify"
    METADATA = FunctionMetadata(
        name="slugify",
        category="string",
        description="Convert a string to a URL-friendly slug",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ slugify(string="Hello World!") }}', "{{ title | slugify }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        chars: List[str] = []
        for ch in extract_string(value, cls.NAME).lower():
            if ch.isascii() and ch.isalnum():
                chars.append(ch)
            elif ch.isspace() or ch in "-_":
                chars.append("-")
        return "-".join(part for part in "".join(chars).split("-") if part)


class Indent(UnaryFilterFunction):
    NAME = "indent"
    METADATA = FunctionMetadata(
        name="indent",
        category="string",
        description="Indent every non-empty line by N spaces",
        arguments=(
            _STRING_ARG,
            arg("spaces", "integer", "Number of spaces", required=False, default="4"),
        ),
        return_type="string",
        examples=('{{ indent(string=block, spaces=2) }}', "{{ block | indent(2) }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        prefix = " " * _non_negative(kwargs, "spaces", 4)
        return "\n".join(prefix + line if line else line for line in split_lines(text))

    @classmethod
    def register(cls, namespaces, bindings) -> None:
        namespaces.add_function(cls.NAME, cls.function_callable(), owner=cls.__name__)
        namespaces.add_filter(cls.NAME, positional_filter(cls, ("spaces",)), owner=cls.__name__)


class Dedent(UnaryFilterFunction):
    NAME = "dedent"
    METADATA = FunctionMetadata(
        name="dedent",
        category="string",
        description="Remove the common leading whitespace from all lines",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=("{{ dedent(string=block) }}", "{{ block | dedent }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        lines = split_lines(extract_string(value, cls.NAME))
        indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
        if not indents:
            return "\n".join(lines)
        margin = min(indents)
        return "\n".join(line[margin:] if len(line) >= margin else line for line in lines)


class Quote(UnaryFilterFunction):
    NAME = "quote"
    METADATA = FunctionMetadata(
        name="quote",
        category="string",
        description="Wrap a string in quotes",
        arguments=(
            _STRING_ARG,
            arg("style", "string", "Quote style: single, double or backtick", required=False, default='"double"'),
        ),
        return_type="string",
        examples=('{{ quote(string="hi", style="single") }}', "{{ name | quote }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        style = kwargs.get_str("style", "double")
        mark = _QUOTE_STYLES.get(style)
        if mark is None:
            raise _domain_error(
                cls.NAME, f"Invalid quote style '{style}'. Use 'single', 'double', or 'backtick'"
            )
        return f"{mark}{text}{mark}"


class EscapeQuotes(UnaryFilterFunction):
    NAME = "escape_quotes"
    METADATA = FunctionMetadata(
        name="escape_quotes",
        category="string",
        description="Backslash-escape quotes and backslashes",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=("{{ escape_quotes(string=\"it's\") }}", "{{ message | escape_quotes }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        return text.replace("\\", "\\\\").replace('"', '\\"').replace("'", "\\'")


def _separated_case(text: str, separator: str) -> str:
    result: List[str] = []
    prev_is_lower = False
    for index, ch in enumerate(text):
        if ch.isupper():
            if index > 0 and prev_is_lower:
                result.append(separator)
            result.append(ch.lower())
            prev_is_lower = False
        elif ch.isalnum():
            result.append(ch)
            prev_is_lower = ch.islower()
        elif ch in " -_":
            if result and result[-1] != separator:
                result.append(separator)
            prev_is_lower = False
    return "".join(result)


def _capitalized_case(text: str, upper_first: bool) -> str:
    result: List[str] = []
    capitalize_next = upper_first
    first_char = True
    for ch in text:
        if ch in "_- ":
            capitalize_next = True
        elif capitalize_next:
            result.append(ch.upper()[0])
            capitalize_next = False
            first_char = False
        elif first_char:
            result.append(ch.lower()[0])
            first_char = False
        else:
            result.append(ch)
    return "".join(result)


class ToSnakeCase(UnaryFilterFunction):
    NAME = "to_snake_case"
    METADATA = FunctionMetadata(
        name="to_snake_case",
        category="string",
        description="Convert a string to snake_case",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ to_snake_case(string="HelloWorld") }}', "{{ name | to_snake_case }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return _separated_case(extract_string(value, cls.NAME), "_")


class ToKebabCase(UnaryFilterFunction):
    NAME = "to_kebab_case"
    METADATA = FunctionMetadata(
        name="to_kebab_case",
        category="string",
        description="Convert a string to kebab-case",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ to_kebab_case(string="HelloWorld") }}', "{{ name | to_kebab_case }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return _separated_case(extract_string(value, cls.NAME), "-")


class ToCamelCase(UnaryFilterFunction):
    NAME = "to_camel_case"
    METADATA = FunctionMetadata(
        name="to_camel_case",
        category="string",
        description="Convert a string to camelCase",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ to_camel_case(string="hello_world") }}', "{{ name | to_camel_case }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return _capitalized_case(extract_string(value, cls.NAME), upper_first=False)


class ToPascalCase(UnaryFilterFunction):
    NAME = "to_pascal_case"
    METADATA = FunctionMetadata(
        name="to_pascal_case",
        category="string",
        description="Convert a string to PascalCase",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ to_pascal_case(string="hello_world") }}', "{{ name | to_pascal_case }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return _capitalized_case(extract_string(value, cls.NAME), upper_first=True)


class ToConstantCase(UnaryFilterFunction):
    NAME = "to_constant_case"
    METADATA = FunctionMetadata(
        name="to_constant_case",
        category="string",
        description="Convert a string to CONSTANT_CASE",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ to_constant_case(string="helloWorld") }}', "{{ setting | to_constant_case }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return _separated_case(extract_string(value, cls.NAME), "_").upper()


class SentenceCase(UnaryFilterFunction):
    NAME = "sentence_case"
    METADATA = FunctionMetadata(
        name="sentence_case",
        category="string",
        description="Uppercase the first character and lowercase the rest",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ sentence_case(string="HELLO WORLD") }}', "{{ title | sentence_case }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return extract_string(value, cls.NAME).capitalize()


class PadLeft(UnaryFilterFunction):
    NAME = "pad_left"
    METADATA = FunctionMetadata(
        name="pad_left",
        category="string",
        description="Pad a string on the left to a minimum length",
        arguments=(
            _STRING_ARG,
            arg("length", "integer", "Target length"),
            arg("char", "string", "Padding character", required=False, default='" "'),
        ),
        return_type="string",
        examples=('{{ pad_left(string="5", length=3, char="0") }}', '{{ id | pad_left(length=8, char="0") }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        length = _non_negative(kwargs, "length")
        return _pad_char(kwargs) * max(length - len(text), 0) + text


class PadRight(UnaryFilterFunction):
    NAME = "pad_right"
    METADATA = FunctionMetadata(
        name="pad_right",
        category="string",
        description="Pad a string on the right to a minimum length",
        arguments=(
            _STRING_ARG,
            arg("length", "integer", "Target length"),
            arg("char", "string", "Padding character", required=False, default='" "'),
        ),
        return_type="string",
        examples=('{{ pad_right(string="ab", length=5, char=".") }}', "{{ name | pad_right(length=20) }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        length = _non_negative(kwargs, "length")
        return text + _pad_char(kwargs) * max(length - len(text), 0)


class Repeat(UnaryFilterFunction):
    NAME = "repeat"
    METADATA = FunctionMetadata(
        name="repeat",
        category="string",
        description="Repeat a string N times",
        arguments=(_STRING_ARG, arg("count", "integer", "Number of repetitions")),
        return_type="string",
        examples=('{{ repeat(string="-", count=10) }}', '{{ "=" | repeat(count=40) }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        return text * _non_negative(kwargs, "count")


class Reverse(UnaryFilterFunction):
    NAME = "reverse"
    METADATA = FunctionMetadata(
        name="reverse",
        category="string",
        description="Reverse the characters of a string",
        arguments=(_STRING_ARG,),
        return_type="string",
        examples=('{{ reverse(string="hello") }}', "{{ word | reverse }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return extract_string(value, cls.NAME)[::-1]


ENTRIES = (
    RegexReplace,
    Substring,
    Truncate,
    WordCount,
    SplitLines,
    Wrap,
    Center,
    StripHtml,
    StripAnsi,
    NormalizeWhitespace,
    Slugify,
    Indent,
    Dedent,
    Quote,
    EscapeQuotes,
    ToSnakeCase,
    ToKebabCase,
    ToCamelCase,
    ToPascalCase,
    ToConstantCase,
    SentenceCase,
    PadLeft,
    PadRight,
    Repeat,
    Reverse,
)

__all__ = [
    "RegexReplace",
    "Substring",
    "Truncate",
    "WordCount",
    "SplitLines",
    "Wrap",
    "Center",
    "StripHtml",
    "StripAnsi",
    "NormalizeWhitespace",
    "Slugify",
    "Indent",
    "Dedent",
    "Quote",
    "EscapeQuotes",
    "ToSnakeCase",
    "ToKebabCase",
    "ToCamelCase",
    "ToPascalCase",
    "ToConstantCase",
    "SentenceCase",
    "PadLeft",
    "PadRight",
    "Repeat",
    "Reverse",
    "split_lines",
    "wrap_text",
    "expand_replacement",
    "ENTRIES",
]
