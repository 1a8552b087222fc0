from __future__ import annotations

import pytest

from tmpltool.core.exceptions import ErrorKind, TemplateFunctionError
from tmpltool.core.filters.string import split_lines


def test_regex_replace_supports_group_references(render) -> None:
    out = render(
        "{{ version | regex_replace(pattern=pat, replacement='<$1>') }}",
        version="v1.2.3",
        pat=r"(\d+)",
    )
    assert out == "v<1>.<2>.<3>"


def test_regex_replace_invalid_pattern(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Invalid regex pattern '\\('") as excinfo:
        render("{{ regex_replace(string='abc', pattern='(', replacement='') }}")
    assert excinfo.value.kind is ErrorKind.DOMAIN_VIOLATION


@pytest.mark.parametrize(
    "pattern, replacement, source, expected",
    [
        (r"(?P<major>\d+)\.(\d+)", "${major}-$2", "v1.2", "v1-2"),
        (r"(\d)", "${1}a", "5", "5a"),
        # the longest name wins, and no group is called "1a"
        (r"(\d)", "$1a", "5", ""),
        (r"(\d)", "$$1", "5", "$1"),
        (r"(\d)", "<$9>", "5", "<>"),
        (r"(a)?b", "[$1]", "b", "[]"),
        (r"x", r"a\b", "x", r"a\b"),
    ],
)
def test_regex_replace_group_reference_syntax(
    render, pattern: str, replacement: str, source: str, expected: str
) -> None:
    out = render(
        "{{ source | regex_replace(pattern=pattern, replacement=replacement) }}",
        source=source,
        pattern=pattern,
        replacement=replacement,
    )
    assert out == expected


def test_substring_with_negative_start(render) -> None:
    assert render("{{ 'hello world' | substring(start=-5) }}") == "world"
    assert render("{{ substring(string='hello world', start=0, length=5) }}") == "hello"


def test_truncate_appends_suffix(render) -> None:
    assert render("{{ 'Hello World' | truncate(length=8) }}") == "Hello..."
    assert render("{{ 'short' | truncate(length=10) }}") == "short"
    assert render("{{ 'Hello World' | truncate(length=6, suffix='~') }}") == "Hello~"


def test_truncate_rejects_negative_length(render) -> None:
    with pytest.raises(TemplateFunctionError, match="argument 'length' must be non-negative"):
        render("{{ 'abc' | truncate(length=-1) }}")


def test_slugify(render) -> None:
    assert render("{{ 'Hello World!' | slugify }}") == "hello-world"
    assert render("{{ slugify(string='  Multiple   spaces -- here ') }}") == "multiple-spaces-here"


@pytest.mark.parametrize("source", ["!!!", "@#$%^&*()", "", "  -- __ "])
def test_slugify_without_alphanumerics_is_empty(render, source: str) -> None:
    assert render("{{ value | slugify }}", value=source) == ""


@pytest.mark.parametrize(
    "name, source, expected",
    [
        ("to_snake_case", "HelloWorld", "hello_world"),
        ("to_kebab_case", "helloWorld", "hello-world"),
        ("to_camel_case", "hello_world", "helloWorld"),
        ("to_pascal_case", "hello-world", "HelloWorld"),
        ("to_constant_case", "hello world", "HELLO_WORLD"),
        ("to_constant_case", "helloWorld", "HELLO_WORLD"),
        ("to_constant_case", "hello-world", "HELLO_WORLD"),
        ("sentence_case", "HELLO WORLD", "Hello world"),
        ("sentence_case", "hello World", "Hello world"),
    ],
)
def test_case_conversions(render, name: str, source: str, expected: str) -> None:
    assert render("{{ value | " + name + " }}", value=source) == expected


def test_indent_accepts_positional_width(render) -> None:
    assert render("{{ block | indent(2) }}", block="a\n\nb") == "  a\n\n  b"
    assert render("{{ indent(string=block) }}", block="x") == "    x"


def test_pad_left_and_right(render) -> None:
    assert render("{{ '5' | pad_left(length=3, char='0') }}") == "005"
    assert render("{{ pad_right(string='ab', length=5, char='.') }}") == "ab..."
    assert render("{{ 'abcdef' | pad_left(length=3) }}") == "abcdef"


def test_quote_styles(render) -> None:
    assert render("{{ 'hi' | quote }}") == '"hi"'
    assert render("{{ quote(string='hi', style='single') }}") == "'hi'"


def test_quote_rejects_unknown_style(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Invalid quote style 'fancy'"):
        render("{{ 'hi' | quote(style='fancy') }}")


def test_repeat_and_reverse(render) -> None:
    assert render("{{ '-' | repeat(count=3) }}") == "---"
    assert render("{{ reverse(string='hello') }}") == "olleh"


def test_split_lines_drops_terminators() -> None:
    assert split_lines("a\r\nb\n") == ["a", "b"]
    assert split_lines("") == []


def test_positional_arguments_rejected_for_keyword_filters(render) -> None:
    with pytest.raises(TemplateFunctionError, match="truncate only accepts keyword arguments, got 1 positional"):
        render("{{ 'Hello World' | truncate(5) }}")


def test_new_case_conversions_as_functions(render) -> None:
    assert render("{{ to_constant_case(string='maxRetryCount') }}") == "MAX_RETRY_COUNT"
    assert render("{{ sentence_case(string='') }}") == ""
