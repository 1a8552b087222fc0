from __future__ import annotations

import json

import pytest

from tmpltool.core.exceptions import ErrorKind, TemplateFunctionError
from tmpltool.core.functions.object import _MISSING, lookup_path
from tmpltool.core.utils.merge import deep_merge

CONFIG = {
    "server": {"host": "localhost", "ports": [80, 443]},
    "debug": False,
}


def _json(render, source: str, **variables):
    return json.loads(render(source, **variables))


def test_deep_merge_nested_and_overlay_wins() -> None:
    base = {"a": {"x": 1, "y": 2}, "b": [1, 2]}
    overlay = {"a": {"y": 20, "z": 30}, "b": [9]}
    assert deep_merge(base, overlay) == {"a": {"x": 1, "y": 20, "z": 30}, "b": [9]}
    # inputs are untouched
    assert base == {"a": {"x": 1, "y": 2}, "b": [1, 2]}


def test_deep_merge_non_mapping_override_replaces() -> None:
    assert deep_merge({"a": 1}, [1, 2]) == [1, 2]
    assert deep_merge("x", {"a": 1}) == {"a": 1}
    assert deep_merge({"a": {"b": 1}}, {"a": None}) == {"a": None}


def test_object_merge(render) -> None:
    out = _json(render, "{{ object_merge(obj1=a, obj2=b) | to_json }}", a={"x": {"k": 1}}, b={"x": {"j": 2}})
    assert out == {"x": {"k": 1, "j": 2}}


def test_lookup_path_walks_arrays() -> None:
    assert lookup_path(CONFIG, "server.ports.1") == 443
    assert lookup_path(CONFIG, "server.ports.5") is _MISSING
    assert lookup_path(CONFIG, "debug.nested") is _MISSING


def test_object_get(render) -> None:
    assert render("{{ object_get(object=c, path='server.host') }}", c=CONFIG) == "localhost"
    assert render("{{ object_get(object=c, path='debug') }}", c=CONFIG) == "False"


def test_object_get_missing_path_is_undefined(render) -> None:
    tpl = "{% if object_get(object=c, path='server.tls') is defined %}yes{% else %}no{% endif %}"
    assert render(tpl, c=CONFIG) == "no"


def test_object_set_returns_copy(render) -> None:
    source = {"server": {"host": "localhost"}}
    out = _json(render, "{{ object_set(object=c, path='server.port', value=9090) | to_json }}", c=source)
    assert out == {"server": {"host": "localhost", "port": 9090}}
    assert source == {"server": {"host": "localhost"}}


def test_object_set_replaces_scalar_on_path(render) -> None:
    out = _json(render, "{{ object_set(object=c, path='a.b', value=1) | to_json }}", c={"a": "flat"})
    assert out == {"a": {"b": 1}}


def test_object_has_key(render) -> None:
    assert render("{{ object_has_key(object=c, key='debug') }}", c=CONFIG) == "True"
    assert render("{{ object_has_key(object=c, key='nope') }}", c=CONFIG) == "False"
    assert render("{{ object_has_key(object=[1], key='0') }}") == "False"


def test_object_pick_and_omit(render) -> None:
    user = {"name": "ada", "email": "ada@example.com", "password": "x"}
    picked = _json(render, "{{ object_pick(object=u, keys=['name', 'missing']) | to_json }}", u=user)
    omitted = _json(render, "{{ object_omit(object=u, keys=['password']) | to_json }}", u=user)
    assert picked == {"name": "ada"}
    assert omitted == {"name": "ada", "email": "ada@example.com"}


def test_object_pick_requires_key_array(render) -> None:
    with pytest.raises(TemplateFunctionError, match="keys must be an array of strings"):
        render("{{ object_pick(object={}, keys='name') }}")


def test_object_rename_keys(render) -> None:
    out = _json(
        render,
        "{{ object_rename_keys(object=row, mapping={'id': 'user_id'}) | to_json }}",
        row={"id": 7, "name": "ada"},
    )
    assert out == {"user_id": 7, "name": "ada"}


def test_object_rename_keys_requires_mapping(render) -> None:
    with pytest.raises(TemplateFunctionError, match="mapping must be an object"):
        render("{{ object_rename_keys(object={}, mapping=['id']) }}")


def test_object_unflatten(render) -> None:
    out = _json(render, "{{ object_unflatten(object={'a.b': 1, 'a.c': 2, 'd': 3}) | to_json }}")
    assert out == {"a": {"b": 1, "c": 2}, "d": 3}
    out = _json(render, "{{ object_unflatten(object={'a_b': 1}, delimiter='_') | to_json }}")
    assert out == {"a": {"b": 1}}


def test_json_path_queries(render) -> None:
    data = {"users": [{"name": "ada", "age": 36}, {"name": "alan", "age": 41}]}
    assert render("{{ json_path(object=d, path='$.users[1].name') }}", d=data) == "alan"
    assert _json(render, "{{ json_path(object=d, path='users[*].name') | to_json }}", d=data) == ["ada", "alan"]
    assert _json(render, "{{ json_path(object=d, path='$') | to_json }}", d=data) == data


def test_json_path_miss_is_none(render) -> None:
    assert render("{{ json_path(object=d, path='$.users[5].name') }}", d={"users": []}) == ""


def test_json_path_errors(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Invalid array index: x") as excinfo:
        render("{{ json_path(object=d, path='items[x]') }}", d={"items": []})
    assert excinfo.value.kind is ErrorKind.DOMAIN_VIOLATION
    with pytest.raises(TemplateFunctionError, match="Unclosed bracket in path"):
        render("{{ json_path(object=d, path='items[0') }}", d={"items": []})
