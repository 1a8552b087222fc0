"""Validate rendered output as JSON, YAML or TOML."""
from __future__ import annotations

import json
import logging
import tomllib
from typing import Callable, Dict, Tuple

import yaml

from .exceptions import OutputValidationError

logger = logging.getLogger(__name__)

VALIDATE_FORMATS = ("json", "yaml", "toml")

_HINTS: Dict[str, Tuple[str, ...]] = {
    "json": (
        "Missing or extra commas",
        "Unclosed brackets or braces",
        "Invalid escape sequences",
        "Trailing commas (not allowed in JSON)",
        "Unquoted keys or values",
    ),
    "yaml": (
        "Incorrect indentation (use spaces, not tabs)",
        "Missing or misplaced colons",
        "Invalid list syntax (- item)",
        "Unclosed quotes",
        "Invalid escape sequences",
    ),
    "toml": (
        "Invalid section headers [section]",
        "Duplicate keys",
        "Invalid value types in arrays",
        "Missing quotes around strings",
        "Invalid datetime format",
        "Incorrect table array syntax [[array]]",
    ),
}

_PARSERS: Dict[str, Callable[[str], object]] = {
    "json": json.loads,
    "yaml": yaml.safe_load,
    "toml": tomllib.loads,
}

_PARSE_ERRORS = (ValueError, yaml.YAMLError, tomllib.TOMLDecodeError)


def validate_output(output: str, fmt: str) -> None:
    """Parse ``output`` as ``fmt`` and discard the result.

    Raises:
        OutputValidationError: When the text does not parse. The message
            carries the parser's error followed by common-cause hints.
        ValueError: When ``fmt`` is not a supported format.
    """
    parser = _PARSERS.get(fmt)
    if parser is None:
        raise ValueError(f"Unsupported validation format '{fmt}'. Use one of: {', '.join(VALIDATE_FORMATS)}")
    try:
        parser(output)
    except _PARSE_ERRORS as exc:
        hints = "\n".join(f"- {hint}" for hint in _HINTS[fmt])
        raise OutputValidationError(
            f"{fmt.upper()} validation failed: {exc}\n\nThis usually means:\n{hints}",
            context={"format": fmt},
        ) from exc
    logger.debug("Rendered output is valid %s", fmt)


__all__ = ["VALIDATE_FORMATS", "validate_output"]
