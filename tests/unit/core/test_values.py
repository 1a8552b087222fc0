from __future__ import annotations

from decimal import Decimal

import pytest
from jinja2 import Undefined

from tmpltool.core.exceptions import ErrorKind, TemplateFunctionError
from tmpltool.core.values import (
    Kwargs,
    ValueKind,
    describe,
    extract_number,
    format_number,
    is_truthy,
    kind_of,
    require_array,
    require_mapping,
    to_plain,
)


@pytest.mark.parametrize(
    "value, kind",
    [
        (None, ValueKind.UNDEFINED),
        (Undefined(name="x"), ValueKind.UNDEFINED),
        (True, ValueKind.BOOL),
        (3, ValueKind.INT),
        (Decimal("1.5"), ValueKind.FLOAT),
        ("s", ValueKind.STRING),
        ((1, 2), ValueKind.SEQUENCE),
        ({"a": 1}, ValueKind.MAPPING),
        (object(), ValueKind.OBJECT),
    ],
)
def test_kind_of(value, kind: ValueKind) -> None:
    assert kind_of(value) is kind


def test_describe() -> None:
    assert describe("abc") == "abc"
    assert describe(False) == "false"
    assert describe(None) == "none"
    assert describe(Undefined()) == "undefined"
    assert describe({"a": [1, None]}) == '{"a": [1, null]}'


def test_to_plain() -> None:
    assert to_plain({1: (Decimal("2.0"), Undefined())}) == {"1": [2, None]}


def test_format_number() -> None:
    assert format_number(3.0) == 3
    assert isinstance(format_number(3.0), int)
    assert format_number(2.5) == 2.5
    assert format_number(True) == 1
    assert format_number(float("inf")) == float("inf")


def test_is_truthy() -> None:
    assert not is_truthy(Undefined())
    assert not is_truthy("")
    assert not is_truthy(0)
    assert is_truthy([0])


def test_extract_number_rejects_bool() -> None:
    assert extract_number(Decimal("0.5"), "f") == 0.5
    with pytest.raises(TemplateFunctionError, match="f requires a numeric value, found: true") as excinfo:
        extract_number(True, "f")
    assert excinfo.value.kind is ErrorKind.TYPE_MISMATCH
    assert excinfo.value.function == "f"


def test_require_helpers_default_messages() -> None:
    with pytest.raises(TemplateFunctionError, match="^f requires an array$"):
        require_array("x", "f")
    with pytest.raises(TemplateFunctionError, match="^f requires an object, not an array or primitive$"):
        require_mapping([1], "f")
    with pytest.raises(TemplateFunctionError, match="^custom$"):
        require_mapping(1, "f", "custom")


def test_kwargs_drop_undefined() -> None:
    kwargs = Kwargs({"a": 1, "b": Undefined(), "c": None}, fn_name="f")
    assert "b" not in kwargs
    assert "c" in kwargs
    assert not kwargs.has("c")
    assert len(kwargs) == 2
    assert kwargs.get_optional("c", "fallback") == "fallback"


def test_kwargs_typed_getters() -> None:
    kwargs = Kwargs({"n": 4.0, "s": "text", "flag": True}, fn_name="f")
    assert kwargs.get_int("n") == 4
    assert kwargs.get_str("s") == "text"
    assert kwargs.get_bool("flag") is True
    assert kwargs.get_int("missing", 7) == 7
    assert kwargs.get_str("missing", None) is None


def test_kwargs_errors() -> None:
    kwargs = Kwargs({"n": 1.5, "flag": "yes"}, fn_name="f")
    with pytest.raises(TemplateFunctionError, match="f: missing keyword argument 'x'") as excinfo:
        kwargs.get_required("x")
    assert excinfo.value.kind is ErrorKind.MISSING_ARGUMENT
    with pytest.raises(TemplateFunctionError, match="f: argument 'n' must be an integer, found: 1.5"):
        kwargs.get_int("n")
    with pytest.raises(TemplateFunctionError, match="f: argument 'flag' must be a boolean, found: yes"):
        kwargs.get_bool("flag")


def test_kwargs_warn_unknown(caplog: pytest.LogCaptureFixture) -> None:
    kwargs = Kwargs({"string": "x", "colour": "red"}, fn_name="f")
    with caplog.at_level("DEBUG", logger="tmpltool.core.values"):
        assert kwargs.warn_unknown(["string"]) == ["colour"]
    assert "f: ignoring unknown arguments colour" in caplog.text


def test_unknown_arguments_are_ignored(render) -> None:
    assert render("{{ slugify(string='Hello World', colour='red') }}") == "hello-world"
