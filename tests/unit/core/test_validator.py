from __future__ import annotations

import pytest

from tmpltool.core.exceptions import OutputValidationError
from tmpltool.core.validator import validate_output


@pytest.mark.parametrize(
    "fmt, text",
    [
        ("json", '{"name": "app", "ports": [80, 443]}'),
        ("yaml", "name: app\nports:\n  - 80\n  - 443\n"),
        ("toml", 'name = "app"\n\n[server]\nport = 8080\n'),
    ],
)
def test_valid_output_passes(fmt: str, text: str) -> None:
    validate_output(text, fmt)


@pytest.mark.parametrize(
    "fmt, text, hint",
    [
        ("json", '{"name": "app",}', "Trailing commas (not allowed in JSON)"),
        ("yaml", "name: [app\n", "Incorrect indentation (use spaces, not tabs)"),
        ("toml", "[server\nport = 1\n", "Invalid section headers [section]"),
    ],
)
def test_invalid_output_reports_hints(fmt: str, text: str, hint: str) -> None:
    with pytest.raises(OutputValidationError) as excinfo:
        validate_output(text, fmt)
    message = str(excinfo.value)
    assert message.startswith(f"{fmt.upper()} validation failed: ")
    assert "\n\nThis usually means:\n- " in message
    assert f"- {hint}" in message
    assert excinfo.value.context == {"format": fmt}


def test_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unsupported validation format 'xml'"):
        validate_output("<a/>", "xml")
