from __future__ import annotations

import io
import json
import os
import sys
from pathlib import Path

import pytest

from tmpltool import __version__
from tmpltool.cli._dispatcher import main


@pytest.fixture(autouse=True)
def _clean_tmpltool_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("TMPLTOOL_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("APP_NAME", "shop")


@pytest.fixture
def template(tmp_path: Path) -> Path:
    path = tmp_path / "greeting.tmpl"
    path.write_text("Hello {{ APP_NAME }} ({{ APP_NAME | slugify }})\n", encoding="utf-8")
    return path


def test_render_to_stdout(template: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(template)]) == 0
    captured = capsys.readouterr()
    assert captured.out == "Hello shop (shop)\n"
    assert captured.err == ""


def test_render_from_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("{{ get_env(name='APP_NAME') | upper }}"))
    assert main([]) == 0
    assert capsys.readouterr().out == "SHOP"


def test_render_to_file(template: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output = tmp_path / "greeting.txt"
    assert main([str(template), "-o", str(output)]) == 0
    assert output.read_text(encoding="utf-8") == "Hello shop (shop)\n"
    captured = capsys.readouterr()
    assert captured.out == ""
    assert f"Successfully rendered template to '{output}'" in captured.err


def test_ide_metadata_export(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--ide", "json"]) == 0
    names = {item["name"] for item in json.loads(capsys.readouterr().out)}
    assert {"get_env", "filter_env", "to_json", "is_email", "k8s_env_var_ref"} <= names


def test_validate_failure_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "config.json.tmpl"
    path.write_text('{"app": "{{ APP_NAME }}",}', encoding="utf-8")
    assert main([str(path), "--validate", "json"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: JSON validation failed: ")


def test_validate_success(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "config.yaml.tmpl"
    path.write_text("app: {{ APP_NAME }}\nport: {{ get_env(name='TMPLTOOL_TEST_PORT', default='8080') }}\n", encoding="utf-8")
    assert main([str(path), "--validate", "yaml"]) == 0
    assert capsys.readouterr().out == "app: shop\nport: 8080\n"


def test_missing_template_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "missing.tmpl")]) == 1
    assert capsys.readouterr().err.startswith("Error: Failed to read template file")


def test_function_failure_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "secret.tmpl"
    path.write_text("{{ get_env(name='TMPLTOOL_TEST_UNSET_VARIABLE') }}", encoding="utf-8")
    assert main([str(path)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: Failed to render template: Environment variable 'TMPLTOOL_TEST_UNSET_VARIABLE'")


def test_evaluation_error_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "broken.tmpl"
    path.write_text("{{ 1 / 0 }}", encoding="utf-8")
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: Failed to render template: division by zero")


def test_unexpected_failure_is_reported(
    template: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _explode(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr("tmpltool.cli.commands.render.render_template", _explode)
    assert main([str(template)]) == 1
    assert capsys.readouterr().err.startswith("Error: disk on fire")


def test_config_file_options_apply(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "tmpltool.yaml"
    config.write_text("render:\n  strict_undefined: true\n", encoding="utf-8")
    path = tmp_path / "strict.tmpl"
    path.write_text("{{ NOT_DEFINED_ANYWHERE }}", encoding="utf-8")
    assert main([str(path), "--config", str(config)]) == 1
    assert "'NOT_DEFINED_ANYWHERE' is undefined" in capsys.readouterr().err


def test_unreadable_config_file(template: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(template), "--config", str(tmp_path / "nope.yaml")]) == 1
    assert capsys.readouterr().err.startswith("Error: Cannot read config file")


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == f"tmpltool {__version__}"
