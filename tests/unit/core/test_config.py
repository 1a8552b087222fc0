from __future__ import annotations

from pathlib import Path

import pytest

from tmpltool.core.config import ConfigManager
from tmpltool.core.exceptions import ConfigError
from tmpltool.core.utils.merge import deep_merge


def test_defaults_only() -> None:
    cfg = ConfigManager(environ={}).load_config()
    assert cfg["render"]["trust"] is False
    assert cfg["render"]["keep_trailing_newline"] is True
    assert cfg["logging"]["level"] == "WARNING"
    assert cfg["ide"]["default_format"] == "json"


def test_deep_merge_leaves_base_untouched() -> None:
    base = {"render": {"trust": False, "trim_blocks": False}}
    merged = deep_merge(base, {"render": {"trust": True}})
    assert merged == {"render": {"trust": True, "trim_blocks": False}}
    assert base["render"]["trust"] is False


def test_config_file_overrides_defaults(tmp_path: Path) -> None:
    path = tmp_path / "tmpltool.yaml"
    path.write_text("render:\n  trim_blocks: true\nlogging:\n  level: DEBUG\n", encoding="utf-8")
    cfg = ConfigManager(config_path=path, environ={}).load_config()
    assert cfg["render"]["trim_blocks"] is True
    assert cfg["render"]["lstrip_blocks"] is False
    assert cfg["logging"]["level"] == "DEBUG"


def test_config_path_from_environment(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text("render:\n  strict_undefined: true\n", encoding="utf-8")
    mgr = ConfigManager(environ={"TMPLTOOL_CONFIG": str(path)})
    assert mgr.config_path == path
    assert mgr.load_config()["render"]["strict_undefined"] is True


def test_empty_config_file_is_allowed(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert ConfigManager(config_path=path, environ={}).load_config()["render"]["trust"] is False


def test_env_overrides_are_coerced() -> None:
    environ = {
        "TMPLTOOL_RENDER__TRUST": "true",
        "TMPLTOOL_LOGGING__LEVEL": "INFO",
        "TMPLTOOL_VERBOSE": "1",
    }
    cfg = ConfigManager(environ=environ).load_config()
    assert cfg["render"]["trust"] is True
    assert cfg["logging"]["level"] == "INFO"


def test_cli_overrides_win_over_environment() -> None:
    mgr = ConfigManager(environ={"TMPLTOOL_LOGGING__LEVEL": "INFO"})
    cfg = mgr.load_config(overrides={"logging": {"level": "DEBUG"}})
    assert cfg["logging"]["level"] == "DEBUG"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("true", True),
        ("False", False),
        ("42", 42),
        ("-1.5", -1.5),
        ('{"a": 1}', {"a": 1}),
        ("[1, 2]", [1, 2]),
        (" text ", "text"),
    ],
)
def test_coerce_type(raw: str, expected) -> None:
    assert ConfigManager(environ={})._coerce_type(raw) == expected


def test_malformed_env_key() -> None:
    mgr = ConfigManager(environ={"TMPLTOOL_RENDER____TRUST": "true"})
    with pytest.raises(ConfigError, match="empty segment in 'RENDER____TRUST'"):
        mgr.load_config()


def test_schema_violation_from_environment() -> None:
    mgr = ConfigManager(environ={"TMPLTOOL_RENDER__TRUST": "maybe"})
    with pytest.raises(ConfigError, match="Invalid configuration: render.trust"):
        mgr.load_config()


def test_unknown_section_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text("plugins:\n  enabled: true\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid configuration"):
        ConfigManager(config_path=path, environ={}).load_config()


def test_validation_can_be_skipped() -> None:
    cfg = ConfigManager(environ={"TMPLTOOL_RENDER__TRUST": "maybe"}).load_config(validate=False)
    assert cfg["render"]["trust"] == "maybe"


@pytest.mark.parametrize(
    "content, message",
    [
        ("render: [unclosed\n", "Invalid YAML in config file"),
        ("- a\n- b\n", "must contain a mapping at the top level"),
    ],
)
def test_bad_config_files(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        ConfigManager(config_path=path, environ={}).load_config()


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read config file"):
        ConfigManager(config_path=tmp_path / "nope.yaml", environ={}).load_config()
