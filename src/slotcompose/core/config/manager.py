"""
slotcompose configuration management (YAML-only).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema

from slotcompose.core.exceptions import ConfigError
from slotcompose.core.utils.io import iter_yaml_files, read_yaml
from slotcompose.core.utils.merge import deep_merge
from slotcompose.data import get_data_path
from slotcompose.data import read_yaml as read_bundled_yaml

from .cache import CONFIG_DIR_ENV, ENV_PREFIX

logger = logging.getLogger(__name__)


class ConfigManager:
    """Load, merge, and validate slotcompose configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: SLOTCOMPOSE_* (``__`` separates nested keys)
    2. Overlay directory: <config_dir>/*.yaml (alphabetical order)
    3. Bundled defaults: slotcompose.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.core_config_dir = get_data_path("config")
        self.config_dir = Path(config_dir) if config_dir is not None else None

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {path}",
                context={"path": str(path)},
            )
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ---------- environment overrides ----------

    def _coerce_type(self, value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return s
        return s

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == CONFIG_DIR_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            segs = raw.split("__")
            if not raw or any(seg == "" for seg in segs):
                raise ConfigError(f"Malformed {ENV_PREFIX}* key: '{key}'", context={"key": key})
            yield [seg.lower() for seg in segs], self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            # Env keys are case-insensitive; reuse the existing key spelling.
            existing = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            use_key = existing.get(part, part)
            nxt = cur.get(use_key)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[use_key] = nxt
            cur = nxt
        existing = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
        cur[existing.get(path[-1], path[-1])] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path, value in self._iter_env_overrides():
            logger.debug("env override %s=%r", ".".join(path), value)
            self._set_nested(cfg, path, value)
        return cfg

    # ---------- validation ----------

    def validate_schema(self, config: Dict[str, Any]) -> None:
        schema = read_bundled_yaml("schemas", "config.schema.yaml")
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(config), key=lambda e: [str(p) for p in e.path])
        if errors:
            first = errors[0]
            location = ".".join(str(p) for p in first.path) or "<root>"
            raise ConfigError(
                f"Invalid configuration at {location}: {first.message}",
                context={"path": location, "errors": [e.message for e in errors]},
            )

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load bundled defaults, overlays and env overrides (uncached)."""
        cfg = self._load_directory(self.core_config_dir, {})
        if self.config_dir is not None:
            if not self.config_dir.is_dir():
                raise ConfigError(
                    f"Config directory does not exist: {self.config_dir}",
                    context={"config_dir": str(self.config_dir)},
                )
            cfg = self._load_directory(self.config_dir, cfg)
        cfg = self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg


__all__ = ["ConfigManager"]
