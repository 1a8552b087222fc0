from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED_KEY: tuple[str, str] | None = None
_TMPLTOOL_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = getattr(logging, str(name).upper(), None)
    if isinstance(level, int):
        return level
    return logging.WARNING


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Path | None = None) -> None:
    """Install the tmpltool handler on the root logger.

    Logs go to stderr unless ``log_path`` is given, so rendered output on
    stdout is never interleaved with log lines. Idempotent per-process: if
    already configured for the same destination and level, no-op.
    """
    global _CONFIGURED_KEY, _TMPLTOOL_HANDLER

    destination = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    key = (destination, str(level).upper())
    if _CONFIGURED_KEY == key and _TMPLTOOL_HANDLER is not None:
        return

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    # Replace the handler installed by a previous call when switching destination.
    if _TMPLTOOL_HANDLER is not None:
        root.removeHandler(_TMPLTOOL_HANDLER)
        _TMPLTOOL_HANDLER.close()
        _TMPLTOOL_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(destination, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    _TMPLTOOL_HANDLER = handler
    _CONFIGURED_KEY = key


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the installed handler."""
    global _CONFIGURED_KEY, _TMPLTOOL_HANDLER
    if _TMPLTOOL_HANDLER is not None:
        logging.getLogger().removeHandler(_TMPLTOOL_HANDLER)
        _TMPLTOOL_HANDLER.close()
    _CONFIGURED_KEY = None
    _TMPLTOOL_HANDLER = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests", "LOG_FORMAT"]
