from __future__ import annotations

import json

import pytest

from tmpltool.core.exceptions import ErrorKind, TemplateFunctionError
from tmpltool.core.functions.predicates import values_equal


def test_values_equal_keeps_booleans_apart() -> None:
    assert values_equal(1, 1.0)
    assert not values_equal(True, 1)
    assert values_equal({"a": [1]}, {"a": [1]})


def test_array_any_all_contains(render) -> None:
    assert render("{{ array_any(array=[1, 2, 3], predicate=2) }}") == "True"
    assert render("{{ array_all(array=[2, 2], predicate=2) }}") == "True"
    assert render("{{ array_all(array=[2, 3], predicate=2) }}") == "False"
    assert render("{{ array_contains(array=['a', 'b'], value='c') }}") == "False"
    assert render("{{ array_contains(array=[true], value=1) }}") == "False"


def test_array_predicates_require_array(render) -> None:
    with pytest.raises(TemplateFunctionError, match="array_any requires an array"):
        render("{{ array_any(array='abc', predicate='a') }}")


def test_starts_and_ends_with(render) -> None:
    assert render("{{ starts_with(string='hello', prefix='he') }}") == "True"
    assert render("{{ ends_with(string='hello', suffix='lo') }}") == "True"
    assert render("{{ ends_with(string='hello', suffix='he') }}") == "False"


def test_min_max_percentage(render) -> None:
    assert render("{{ min(a=3, b=1.5) }}") == "1.5"
    assert render("{{ max(a=3, b=1.0) }}") == "3"
    assert render("{{ percentage(value=1, total=4) }}") == "25"
    assert render("{{ percentage(value=1, total=3) | round(decimals=1) }}") == "33.3"


def test_percentage_of_zero_total(render) -> None:
    with pytest.raises(TemplateFunctionError, match="percentage total cannot be zero") as excinfo:
        render("{{ percentage(value=1, total=0) }}")
    assert excinfo.value.kind is ErrorKind.DOMAIN_VIOLATION


def test_min_requires_numbers(render) -> None:
    with pytest.raises(TemplateFunctionError, match="min requires numeric values, found: x"):
        render("{{ min(a='x', b=1) }}")


def test_regex_functions(render) -> None:
    assert render("{{ regex_match(string='abc123', pattern='[0-9]+') }}") == "True"
    assert render("{{ regex_find_all(string='a1b22c333', pattern='[0-9]+') | join(',') }}") == "1,22,333"
    assert render("{{ matches_regex(pattern='^v', string='v1.0') }}") == "True"


def test_regex_function_rejects_invalid_pattern(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Invalid regex pattern"):
        render("{{ regex_match(string='x', pattern='[') }}")


def test_substring_search_functions(render) -> None:
    assert render("{{ contains(string='hello', substring='ell') }}") == "True"
    assert render("{{ index_of(string='hello', substring='l') }}") == "2"
    assert render("{{ index_of(string='hello', substring='z') }}") == "-1"
    assert render("{{ count_occurrences(string='banana', substring='an') }}") == "2"


@pytest.mark.parametrize(
    "template, expected",
    [
        ("{{ pluralize(count=1, singular='item') }}", "item"),
        ("{{ pluralize(count=0, singular='item') }}", "items"),
        ("{{ pluralize(count=5, singular='item') }}", "items"),
        ("{{ pluralize(count=1.0, singular='file') }}", "file"),
        ("{{ pluralize(count=2, singular='child', plural='children') }}", "children"),
        ("{{ pluralize(count=1, singular='child', plural='children') }}", "child"),
    ],
)
def test_pluralize(render, template: str, expected: str) -> None:
    assert render(template) == expected


def test_pluralize_requires_numeric_count(render) -> None:
    with pytest.raises(TemplateFunctionError, match="pluralize requires a numeric value, found: many"):
        render("{{ pluralize(count='many', singular='item') }}")


def test_count_occurrences_rejects_empty_substring(render) -> None:
    with pytest.raises(TemplateFunctionError, match="substring cannot be empty"):
        render("{{ count_occurrences(string='abc', substring='') }}")


def test_array_count_chunk_zip(render) -> None:
    assert render("{{ array_count(array=[1, 2, 3]) }}") == "3"
    assert render("{{ array_chunk(array=[1, 2, 3, 4, 5], size=2) | to_json }}") == "[[1,2],[3,4],[5]]"
    assert render("{{ array_zip(array1=['a', 'b', 'c'], array2=[1, 2]) | to_json }}") == '[["a",1],["b",2]]'


def test_array_chunk_rejects_non_positive_size(render) -> None:
    with pytest.raises(TemplateFunctionError, match="array_chunk size must be greater than 0"):
        render("{{ array_chunk(array=[1], size=0) }}")


def test_array_zip_names_the_bad_argument(render) -> None:
    with pytest.raises(TemplateFunctionError, match="array_zip requires array2 to be an array"):
        render("{{ array_zip(array1=[1], array2='x') }}")


def test_default_and_coalesce(render) -> None:
    assert render("{{ default(value=missing, default='fallback') }}") == "fallback"
    assert render("{{ default(value='', default='fallback') }}") == "fallback"
    assert render("{{ default(value='set', default='fallback') }}") == "set"
    assert render("{{ coalesce(values=[missing, none, 'third']) }}") == "third"
    assert render("{{ coalesce(values=[none]) }}") == ""


def test_ternary_and_in_range(render) -> None:
    assert render("{{ ternary(condition=1 > 0, true_val='yes', false_val='no') }}") == "yes"
    assert render("{{ ternary(condition=missing, true_val='yes', false_val='no') }}") == "no"
    assert render("{{ in_range(value=8080, min=1024, max=65535) }}") == "True"
    assert render("{{ in_range(value=80, min=1024, max=65535) }}") == "False"


def test_in_range_requires_numbers(render) -> None:
    with pytest.raises(TemplateFunctionError, match="in_range requires numeric value, found: abc"):
        render("{{ in_range(value='abc', min=1, max=2) }}")


USERS = [{"id": 1, "name": "Alice", "team": {"name": "core"}}, {"id": 2, "name": "Bob"}]
ITEMS = [{"price": 10, "name": "Alice"}, {"price": 20, "name": "Bob"}, {"price": 30, "name": "Charlie"}]


def test_array_take_and_drop(render) -> None:
    assert render("{{ array_take(array=[1, 2, 3, 4, 5], n=3) | to_json }}") == "[1,2,3]"
    assert render("{{ array_take(array=[1, 2], n=5) | to_json }}") == "[1,2]"
    assert render("{{ array_take(array=[1, 2], n=0) | to_json }}") == "[]"
    assert render("{{ array_drop(array=[1, 2, 3, 4, 5], n=2) | to_json }}") == "[3,4,5]"
    assert render("{{ array_drop(array=[1, 2], n=5) | to_json }}") == "[]"


def test_array_take_rejects_negative_count(render) -> None:
    with pytest.raises(TemplateFunctionError, match="array_take n must be non-negative") as excinfo:
        render("{{ array_take(array=[1], n=-1) }}")
    assert excinfo.value.kind is ErrorKind.DOMAIN_VIOLATION
    with pytest.raises(TemplateFunctionError, match="array_drop requires an array"):
        render("{{ array_drop(array='abc', n=1) }}")


def test_array_index_of(render) -> None:
    assert render("{{ array_index_of(array=['a', 'b', 'c'], value='b') }}") == "1"
    assert render("{{ array_index_of(array=[1, 2, 3], value=5) }}") == "-1"
    assert render("{{ array_index_of(array=[], value='x') }}") == "-1"
    assert render("{{ array_index_of(array=[1.0, 2], value=1) }}") == "0"
    assert render("{{ array_index_of(array=[true, 1], value=1) }}") == "1"


def test_array_pluck_follows_dotted_keys(render) -> None:
    assert render("{{ array_pluck(array=users, key='name') | to_json }}", users=USERS) == '["Alice","Bob"]'
    assert render("{{ array_pluck(array=users, key='team.name') | to_json }}", users=USERS) == '["core",null]'


def test_array_find(render) -> None:
    assert render("{{ array_find(array=users, key='id', value=2).name }}", users=USERS) == "Bob"
    assert render("{{ array_find(array=users, key='id', value=99) }}", users=USERS) == ""
    assert render("{{ array_find(array=users, key='id', value=99) is none }}", users=USERS) == "True"


@pytest.mark.parametrize(
    "op, value, expected",
    [
        ("eq", 20, ["Bob"]),
        ("ne", 20, ["Alice", "Charlie"]),
        ("gt", 15, ["Bob", "Charlie"]),
        ("lt", 25, ["Alice", "Bob"]),
        ("gte", 20, ["Bob", "Charlie"]),
        ("lte", 20, ["Alice", "Bob"]),
    ],
)
def test_array_filter_by_operators(render, op: str, value: int, expected: list) -> None:
    out = render(
        "{{ array_pluck(array=array_filter_by(array=items, key='price', op=op, value=value), key='name') | to_json }}",
        items=ITEMS,
        op=op,
        value=value,
    )
    assert json.loads(out) == expected


def test_array_filter_by_contains_and_type_mismatch(render) -> None:
    source = "{{ array_filter_by(array=items, key=key, op=op, value=value) | length }}"
    assert render(source, items=ITEMS, key="name", op="contains", value="li") == "2"
    # strings never order against numbers
    assert render(source, items=ITEMS, key="price", op="gt", value="15") == "0"
    assert render(source, items=ITEMS, key="missing", op="ne", value=1) == "0"


def test_array_filter_by_rejects_unknown_operator(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Invalid operator 'like'. Valid operators: eq, ne, gt") as excinfo:
        render("{{ array_filter_by(array=[{'a': 1}], key='a', op='like', value=1) }}")
    assert excinfo.value.kind is ErrorKind.DOMAIN_VIOLATION


@pytest.mark.parametrize(
    "name, first, second, expected",
    [
        ("array_union", [1, 2, 3], [3, 4, 5], [1, 2, 3, 4, 5]),
        ("array_union", [], [1, 2], [1, 2]),
        ("array_intersection", [1, 2, 3, 4], [3, 4, 5, 6], [3, 4]),
        ("array_intersection", [1, 1, 2, 2], [1, 2, 3], [1, 2]),
        ("array_intersection", ["a", "b", "c"], ["b", "c", "d"], ["b", "c"]),
        ("array_difference", [1, 2, 3, 4], [3, 4, 5, 6], [1, 2]),
        ("array_difference", [1, 2, 3], [], [1, 2, 3]),
        ("array_symmetric_difference", [1, 2, 3, 4], [3, 4, 5, 6], [1, 2, 5, 6]),
        ("array_symmetric_difference", [1, 2], [1, 2], []),
    ],
)
def test_array_set_operations(render, name: str, first: list, second: list, expected: list) -> None:
    out = render(f"{{{{ {name}(array1=first, array2=second) | to_json }}}}", first=first, second=second)
    assert json.loads(out) == expected


def test_array_set_operations_name_the_bad_argument(render) -> None:
    with pytest.raises(TemplateFunctionError, match="array_union requires array2 to be an array"):
        render("{{ array_union(array1=[1], array2='x') }}")
