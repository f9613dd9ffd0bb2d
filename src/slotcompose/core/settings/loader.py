"""Load component settings layers from YAML files.

Each file holds one literal settings layer and is validated against the bundled
``settings.schema.yaml`` before use.
"""
from __future__ import annotations

import logging
from typing import Any, List

import jsonschema
import yaml

from slotcompose.core.exceptions import SettingsLayerError
from slotcompose.core.utils.io import PathLike, read_yaml
from slotcompose.data import read_yaml as read_bundled_yaml

from .layers import LiteralLayer

logger = logging.getLogger(__name__)


def validate_settings(data: Any, *, source: str = "<settings>") -> None:
    """Validate a settings document; raise ``SettingsLayerError`` on the first failure."""
    schema = read_bundled_yaml("schemas", "settings.schema.yaml")
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        first = errors[0]
        location = "/".join(str(p) for p in first.path) or "<root>"
        raise SettingsLayerError(
            f"Invalid settings in {source} at {location}: {first.message}",
            context={"source": source, "path": location, "errors": [e.message for e in errors]},
        )


def load_settings_file(path: PathLike) -> LiteralLayer:
    """Read, validate and wrap one YAML settings document as a literal layer."""
    try:
        data = read_yaml(path, default={}, raise_on_error=True)
    except yaml.YAMLError as exc:
        raise SettingsLayerError(
            f"Invalid YAML in settings file {path}: {exc}",
            context={"source": str(path)},
        ) from exc
    validate_settings(data, source=str(path))
    logger.debug("loaded settings layer from %s", path)
    return LiteralLayer(data)


def load_settings_files(*paths: PathLike) -> List[LiteralLayer]:
    return [load_settings_file(p) for p in paths]


__all__ = ["validate_settings", "load_settings_file", "load_settings_files"]
