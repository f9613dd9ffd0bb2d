"""Theme values consumed by the resolution engine.

The engine treats a theme as opaque apart from one capability: looking up a
named component settings entry. ``Theme`` is the concrete value shipped with
slotcompose, but any mapping with a ``settings`` key and any object with a
``settings`` attribute work too.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Optional

from slotcompose.core.exceptions import ConfigError
from slotcompose.core.utils.io import PathLike, read_yaml
from slotcompose.core.utils.merge import deep_merge

logger = logging.getLogger(__name__)


def _freeze(value: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True, eq=False)
class Theme:
    """A named theme: component settings by key plus ramp values.

    Instances compare by identity so they can key the resolution caches.
    """

    name: str = "default"
    settings: Mapping[str, Any] = field(default_factory=dict)
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", _freeze(self.settings))
        object.__setattr__(self, "values", _freeze(self.values))

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def extend(
        self,
        *,
        name: Optional[str] = None,
        settings: Optional[Mapping[str, Any]] = None,
        values: Optional[Mapping[str, Any]] = None,
    ) -> "Theme":
        """Derive a new theme by deep-merging ``settings`` and ``values`` onto this one."""
        return Theme(
            name=name or self.name,
            settings=deep_merge(_plain(self.settings), _plain(settings or {})),
            values=deep_merge(_plain(self.values), _plain(values or {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "settings": _plain(self.settings), "values": _plain(self.values)}


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    return value


def theme_settings(theme: Any, name: str) -> Optional[Any]:
    """Return the settings entry ``name`` from ``theme``'s settings namespace, or None."""
    if theme is None:
        return None
    if isinstance(theme, Mapping):
        namespace = theme.get("settings")
    else:
        namespace = getattr(theme, "settings", None)
    if not isinstance(namespace, Mapping):
        return None
    return namespace.get(name)


def load_theme(path: PathLike, *, name: Optional[str] = None) -> Theme:
    """Load a ``Theme`` from a YAML document with ``name``, ``settings`` and ``values`` keys."""
    data = read_yaml(path, default={}, raise_on_error=True)
    if not isinstance(data, dict):
        raise ConfigError(f"Theme file must contain a mapping: {path}", context={"path": str(path)})
    for key in ("settings", "values"):
        if not isinstance(data.get(key, {}) or {}, dict):
            raise ConfigError(
                f"Theme '{key}' must be a mapping: {path}",
                context={"path": str(path), "key": key},
            )
    theme = Theme(
        name=name or str(data.get("name") or "default"),
        settings=data.get("settings") or {},
        values=data.get("values") or {},
    )
    logger.debug("loaded theme %s from %s", theme.name, path)
    return theme


__all__ = ["Theme", "theme_settings", "load_theme"]
