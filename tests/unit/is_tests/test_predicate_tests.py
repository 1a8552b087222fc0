from __future__ import annotations

import socket
from pathlib import Path

import pytest

from tmpltool.core.exceptions import ErrorKind, TemplateFunctionError
from tmpltool.core.is_tests.datetime import is_leap, lenient_int
from tmpltool.core.is_tests.validation import is_ip


@pytest.mark.parametrize("year, expected", [(2024, True), (2023, False), (1900, False), (2000, True)])
def test_is_leap(year: int, expected: bool) -> None:
    assert is_leap(year) is expected


def test_lenient_int() -> None:
    assert lenient_int("2024") == 2024
    assert lenient_int(2024.0) == 2024
    assert lenient_int(2024.5) is None
    assert lenient_int(True) is None
    assert lenient_int("abc") is None


def test_leap_year_function_is_strict(render) -> None:
    assert render("{{ is_leap_year(year=2024) }}") == "True"
    with pytest.raises(TemplateFunctionError, match="argument 'year' must be an integer, found: abc") as excinfo:
        render("{{ is_leap_year(year='abc') }}")
    assert excinfo.value.kind is ErrorKind.TYPE_MISMATCH


def test_leap_year_test_is_lenient(render) -> None:
    assert render("{{ 2024 is leap_year }}") == "True"
    assert render("{{ '2024' is leap_year }}") == "True"
    assert render("{{ 'abc' is leap_year }}") == "False"
    assert render("{{ none is leap_year }}") == "False"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("192.168.1.1", True),
        ("::1", True),
        ("2001:db8::1", True),
        ("256.1.1.1", False),
        ("fe80::1%eth0", False),
        ("example.com", False),
    ],
)
def test_is_ip(text: str, expected: bool) -> None:
    assert is_ip(text) is expected


def test_string_predicates_as_functions(render) -> None:
    assert render("{{ is_email(string='user@example.com') }}") == "True"
    assert render("{{ is_email(string='user@localhost') }}") == "False"
    assert render("{{ is_url(string='https://example.com/path?q=1') }}") == "True"
    assert render("{{ is_url(string='example.com') }}") == "False"
    assert render("{{ is_uuid(string='550e8400-e29b-41d4-a716-446655440000') }}") == "True"
    assert render("{{ is_uuid(string='550e8400e29b41d4a716446655440000') }}") == "False"
    assert render("{{ is_ip(string='10.0.0.1') }}") == "True"


def test_string_predicates_as_tests(render) -> None:
    assert render("{{ 'ops@example.org' is email }}") == "True"
    assert render("{{ 'ftp://files.example.com/a.txt' is url }}") == "True"
    assert render("{{ '::1' is ip }}") == "True"
    assert render("{{ 42 is email }}") == "False"
    assert render("{{ [1] is uuid }}") == "False"


def test_string_predicate_function_rejects_non_string(render) -> None:
    with pytest.raises(TemplateFunctionError, match="is_email requires a string, found: 42"):
        render("{{ is_email(string=42) }}")


def test_port_available_range_checks(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Port must be between 1 and 65535, got 70000") as excinfo:
        render("{{ is_port_available(port=70000) }}")
    assert excinfo.value.kind is ErrorKind.DOMAIN_VIOLATION
    assert render("{{ 70000 is port_available }}") == "False"
    assert render("{{ 'http' is port_available }}") == "False"


def test_port_in_use_is_not_available(render) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as holder:
        holder.bind(("0.0.0.0", 0))
        holder.listen(1)
        port = holder.getsockname()[1]
        assert render("{{ is_port_available(port=p) }}", p=port) == "False"
        assert render("{{ p is port_available }}", p=port) == "False"


def test_filesystem_predicates_resolve_against_base_dir(render, tmp_path: Path) -> None:
    (tmp_path / "config.yaml").write_text("a: 1\n", encoding="utf-8")
    (tmp_path / "conf.d").mkdir()
    assert render("{{ is_file(path='config.yaml') }}") == "True"
    assert render("{{ is_dir(path='conf.d') }}") == "True"
    assert render("{{ is_file(path='conf.d') }}") == "False"
    assert render("{{ 'config.yaml' is file }}") == "True"
    assert render("{{ 'conf.d' is dir }}") == "True"
    assert render("{{ 'missing.txt' is file }}") == "False"
    assert render("{{ p is file }}", p=str(tmp_path / "config.yaml")) == "True"


def test_symlink_predicate(render, tmp_path: Path) -> None:
    target = tmp_path / "real.txt"
    target.write_text("x", encoding="utf-8")
    (tmp_path / "link.txt").symlink_to(target)
    assert render("{{ is_symlink(path='link.txt') }}") == "True"
    assert render("{{ 'real.txt' is symlink }}") == "False"


def test_filesystem_test_form_ignores_non_strings(render) -> None:
    assert render("{{ 42 is file }}") == "False"
    with pytest.raises(TemplateFunctionError, match="is_dir requires a string"):
        render("{{ is_dir(path=42) }}")
