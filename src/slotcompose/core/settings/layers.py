"""Settings layers: one ordered contribution to a component's settings.

A layer is one of three tagged variants:

- ``LiteralLayer``: a settings mapping used as-is
- ``ThemeKeyLayer``: the name of a settings entry in the theme
- ``ThemeFunctionLayer``: a callable ``theme -> settings mapping``

``as_settings_layer`` coerces the raw shorthand (mapping / string / callable)
into a variant; ``resolve_layer`` dispatches on the variant.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Union

from slotcompose.core.exceptions import SettingsLayerError
from slotcompose.core.theme import theme_settings

logger = logging.getLogger(__name__)

Settings = Mapping[str, Any]

_EMPTY: Settings = MappingProxyType({})


class LayerKind(str, Enum):
    LITERAL = "literal"
    THEME_KEY = "theme_key"
    THEME_FUNCTION = "theme_function"


@dataclass(frozen=True, eq=False)
class LiteralLayer:
    settings: Settings = field(default_factory=dict)
    kind: LayerKind = field(default=LayerKind.LITERAL, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.settings, Mapping):
            raise SettingsLayerError(
                f"Literal settings layer must wrap a mapping, got {type(self.settings).__name__}",
                context={"kind": self.kind.value},
            )
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LiteralLayer):
            return NotImplemented
        return dict(self.settings) == dict(other.settings)

    __hash__ = object.__hash__


@dataclass(frozen=True)
class ThemeKeyLayer:
    name: str
    kind: LayerKind = field(default=LayerKind.THEME_KEY, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise SettingsLayerError(
                "Theme-key settings layer needs a non-empty string name",
                context={"kind": self.kind.value, "name": repr(self.name)},
            )


@dataclass(frozen=True)
class ThemeFunctionLayer:
    fn: Callable[[Any], Settings]
    kind: LayerKind = field(default=LayerKind.THEME_FUNCTION, init=False)

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise SettingsLayerError(
                "Theme-function settings layer needs a callable",
                context={"kind": self.kind.value},
            )


SettingsLayer = Union[LiteralLayer, ThemeKeyLayer, ThemeFunctionLayer]

_LAYER_TYPES = (LiteralLayer, ThemeKeyLayer, ThemeFunctionLayer)


def as_settings_layer(entry: Any) -> SettingsLayer:
    """Coerce a raw settings entry into a tagged ``SettingsLayer``.

    Mappings become literal layers, strings become theme-key layers and
    callables become theme-function layers. Anything else is rejected.
    """
    if isinstance(entry, _LAYER_TYPES):
        return entry
    if isinstance(entry, Mapping):
        return LiteralLayer(entry)
    if isinstance(entry, str):
        return ThemeKeyLayer(entry)
    if callable(entry):
        return ThemeFunctionLayer(entry)
    raise SettingsLayerError(
        f"Unsupported settings entry of type {type(entry).__name__}; "
        "expected a mapping, a theme key or a callable",
        context={"type": type(entry).__name__},
    )


def resolve_layer(layer: SettingsLayer, theme: Any) -> Settings:
    """Resolve one layer to a concrete settings mapping against ``theme``."""
    kind = getattr(layer, "kind", None)
    if kind is LayerKind.LITERAL:
        return layer.settings
    if kind is LayerKind.THEME_KEY:
        found = theme_settings(theme, layer.name)
        if found is None:
            # Optional per-theme hook: a missing entry is a no-op layer.
            logger.debug("theme has no settings entry '%s'; skipping layer", layer.name)
            return _EMPTY
        if not isinstance(found, Mapping):
            raise SettingsLayerError(
                f"Theme settings entry '{layer.name}' must be a mapping, got {type(found).__name__}",
                context={"kind": kind.value, "name": layer.name},
            )
        return found
    if kind is LayerKind.THEME_FUNCTION:
        result = layer.fn(theme)
        if not isinstance(result, Mapping):
            raise SettingsLayerError(
                f"Theme-function settings layer {getattr(layer.fn, '__name__', layer.fn)!s} "
                f"returned {type(result).__name__}, expected a mapping",
                context={"kind": kind.value, "returned": type(result).__name__},
            )
        return result
    raise SettingsLayerError(
        f"Not a settings layer: {type(layer).__name__}",
        context={"type": type(layer).__name__},
    )


__all__ = [
    "LayerKind",
    "LiteralLayer",
    "ThemeKeyLayer",
    "ThemeFunctionLayer",
    "SettingsLayer",
    "Settings",
    "as_settings_layer",
    "resolve_layer",
]
