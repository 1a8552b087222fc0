"""
tmpltool configuration management (YAML only).

Precedence (in increasing order):
  1) Bundled defaults (``tmpltool/data/config/defaults.yaml``)
  2) User config file (``--config PATH`` or ``TMPLTOOL_CONFIG``)
  3) Environment overrides (``TMPLTOOL_<SECTION>__<KEY>``)
  4) Explicit overrides passed by the caller (CLI flags)

Environment overrides:
- Path separator: double underscore ``__`` (e.g. ``TMPLTOOL_RENDER__TRUST=true``).
- Case handling: case-insensitive lookup against existing keys.
- Type coercion: bool/int/float/JSON-like strings are coerced.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import jsonschema
import yaml

from tmpltool.data import get_data_path, read_yaml

from .exceptions import ConfigError
from .utils.merge import deep_merge

logger = logging.getLogger(__name__)

ENV_PREFIX = "TMPLTOOL_"
CONFIG_PATH_VAR = "TMPLTOOL_CONFIG"


class ConfigManager:
    """Load, merge, and validate tmpltool configuration.

    Typical usage:

    ```python
    mgr = ConfigManager(config_path=args.config)
    cfg = mgr.load_config(overrides={"render": {"trust": True}})
    ```

    Attributes:
        config_path: Explicit user config file, or None to consult
            ``TMPLTOOL_CONFIG``.
        defaults_path: Bundled defaults YAML.
    """

    def __init__(self, config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ: Mapping[str, str] = environ if environ is not None else os.environ
        if config_path is None and self._environ.get(CONFIG_PATH_VAR):
            config_path = Path(self._environ[CONFIG_PATH_VAR])
        self.config_path = Path(config_path) if config_path is not None else None
        self.defaults_path = get_data_path("config", "defaults.yaml")

    # ---------- Loading ----------
    def load_yaml(self, path: Path) -> Dict[str, Any]:
        """Read a YAML mapping; a missing file is an error, an empty one is ``{}``.

        Raises:
            ConfigError: When the file is missing, unreadable, or not a mapping.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read config file '{path}': {exc}", context={"path": str(path)}) from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file '{path}': {exc}", context={"path": str(path)}) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file '{path}' must contain a mapping at the top level",
                context={"path": str(path)},
            )
        return data

    def load_config(
        self,
        *,
        overrides: Optional[Mapping[str, Any]] = None,
        validate: bool = True,
    ) -> Dict[str, Any]:
        """Return the fully merged configuration.

        Args:
            overrides: Highest-precedence values (typically from CLI flags).
            validate: Check the result against the bundled config schema.

        Raises:
            ConfigError: On unreadable files, malformed overrides or schema
                violations.
        """
        cfg = copy.deepcopy(read_yaml("config", "defaults.yaml"))
        if self.config_path is not None:
            logger.debug("Loading config file %s", self.config_path)
            cfg = deep_merge(cfg, self.load_yaml(self.config_path))
        self.apply_env_overrides(cfg)
        if overrides:
            cfg = deep_merge(cfg, overrides)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def validate_schema(self, config: Mapping[str, Any]) -> None:
        schema = read_yaml("schemas", "config.schema.yaml")
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(config), key=lambda e: str(list(e.path)))
        if errors:
            messages = [f"{'.'.join(str(p) for p in e.path) or '<root>'}: {e.message}" for e in errors]
            raise ConfigError(
                "Invalid configuration: " + "; ".join(messages),
                context={"errors": messages},
            )

    # ---------- Environment overrides ----------
    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        segments = raw.split("__")
        if any(seg == "" for seg in segments):
            raise ConfigError(f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'", context={"key": raw})
        return [seg.lower() for seg in segments]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self._environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == CONFIG_PATH_VAR:
                continue
            raw = key[len(ENV_PREFIX) :]
            if "__" not in raw:
                # single-segment TMPLTOOL_* variables are not config overrides
                continue
            yield self._parse_env_key(raw), self._coerce_type(self._environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        current = root
        for part in path[:-1]:
            candidates = {k.lower(): k for k in current if isinstance(k, str)}
            key = candidates.get(part, part)
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        candidates = {k.lower(): k for k in current if isinstance(k, str)}
        current[candidates.get(path[-1], path[-1])] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, value)


__all__ = ["ConfigManager", "ENV_PREFIX", "CONFIG_PATH_VAR"]
