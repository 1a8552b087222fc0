from __future__ import annotations

import json
import tomllib
from pathlib import Path

import pytest
import yaml

from tmpltool.core.context import TemplateContext
from tmpltool.core.contracts import Bindings, FilterFunction, Function
from tmpltool.core.environment import MappingEnvironment
from tmpltool.core.exceptions import RegistrationError
from tmpltool.core.filters import FILTER_FUNCTIONS
from tmpltool.core.is_tests import IS_TEST_FUNCTIONS
from tmpltool.core.metadata import FunctionMetadata, arg
from tmpltool.core.registry import (
    Namespaces,
    all_entries,
    check_catalog,
    collect_namespaces,
    export_metadata,
    get_all_metadata,
    validate_metadata,
)


class _Shout(Function):
    NAME = "shout"
    METADATA = FunctionMetadata(
        name="shout",
        category="string",
        description="Uppercase a string",
        arguments=(arg("string", "string", "Input"),),
        examples=('{{ shout(string="hi") }}',),
    )

    @classmethod
    def call(cls, kwargs):
        return kwargs.get_str("string").upper()


class _Undocumented(Function):
    NAME = "undocumented"
    METADATA = FunctionMetadata(name="undocumented", category="misc", description="No examples")


class _FilterWithoutFilterSyntax(FilterFunction):
    NAME = "half"
    METADATA = FunctionMetadata(
        name="half",
        category="math",
        description="Divide by two",
        examples=("{{ 4 | half }}",),
    )


@pytest.fixture
def bindings(tmp_path: Path) -> Bindings:
    return Bindings(context=TemplateContext(base_dir=tmp_path), environ=MappingEnvironment())


def test_namespaces_reject_duplicates() -> None:
    namespaces = Namespaces()
    namespaces.add_function("shout", str.upper, owner="First")
    # same name in a different namespace is fine
    namespaces.add_filter("shout", str.upper, owner="First")
    with pytest.raises(RegistrationError, match="Duplicate function name 'shout' registered by Second") as excinfo:
        namespaces.add_function("shout", str.lower, owner="Second")
    assert excinfo.value.context["previous"] == "First"


def test_full_catalog_passes_checks() -> None:
    check_catalog(all_entries())
    validate_metadata()


def test_check_catalog_reports_every_problem() -> None:
    with pytest.raises(RegistrationError, match="Invalid function catalog") as excinfo:
        check_catalog([_Shout, _Shout, _Undocumented, _FilterWithoutFilterSyntax])
    problems = excinfo.value.context["problems"]
    assert "duplicate name 'shout' (_Shout and _Shout)" in problems
    assert "undocumented: no examples" in problems
    assert "half: filter entry must declare function and filter syntax" in problems


def test_collect_namespaces_for_custom_entries(bindings: Bindings) -> None:
    namespaces = collect_namespaces(bindings, [_Shout])
    assert list(namespaces.functions) == ["shout"]
    assert namespaces.filters == {}
    assert namespaces.functions["shout"](string="hi") == "HI"


def test_every_filter_entry_is_also_a_function(bindings: Bindings) -> None:
    namespaces = collect_namespaces(bindings)
    for entry in FILTER_FUNCTIONS:
        assert entry.NAME in namespaces.functions
        assert entry.NAME in namespaces.filters
    for entry in IS_TEST_FUNCTIONS:
        assert entry.FUNCTION_NAME in namespaces.functions
        assert entry.IS_NAME in namespaces.tests


def test_metadata_names_are_unique() -> None:
    names = [meta.name for meta in get_all_metadata()]
    assert len(names) == len(set(names))


def test_validate_metadata_rejects_duplicates() -> None:
    with pytest.raises(RegistrationError, match="duplicate names: shout"):
        validate_metadata([_Shout.METADATA, _Shout.METADATA])


def test_export_json_and_yaml_agree() -> None:
    as_json = json.loads(export_metadata("json"))
    as_yaml = yaml.safe_load(export_metadata("yaml"))
    assert as_json == as_yaml
    by_name = {item["name"]: item for item in as_json}
    assert by_name["slugify"]["syntax"] == {"function": True, "filter": True, "is_test": False}
    assert by_name["is_email"]["syntax"]["is_test"] is True


def test_export_toml_wraps_functions_table() -> None:
    data = tomllib.loads(export_metadata("toml", [_Shout.METADATA]))
    (shout,) = data["functions"]
    assert shout["name"] == "shout"
    # absent defaults are dropped because TOML has no null
    assert "default" not in shout["arguments"][0]


def test_export_rejects_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unsupported metadata format 'xml'"):
        export_metadata("xml")
