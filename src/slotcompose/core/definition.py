"""Immutable component definitions and the compose/customize extension API.

A ``ComponentDefinition`` bundles slots (each with an optional style factory,
raw tokens and filter), ordered settings layers, per-slot token overrides,
statics and optional hooks. ``compose`` returns a new definition that shares
every unchanged substructure with its parent; nothing is ever mutated.

Usage:
    button = define_component(
        display_name="Button",
        slots={"root": SlotStyleEntry(factory=root_styles, tokens={"color": "black"})},
        settings=[{"root": {"className": "btn"}}, "Button"],
    )
    primary = button.customize({"root": {"className": "btn-primary"}})
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Optional, Tuple, Union

from slotcompose.core.exceptions import CompositionError
from slotcompose.core.settings import (
    LiteralLayer,
    SettingsLayer,
    SettingsLayerStack,
    ThemeFunctionLayer,
    ThemeKeyLayer,
    as_settings_layer,
    load_settings_files,
)
from slotcompose.core.settings.overrides import RESERVED_KEYS

if TYPE_CHECKING:
    from slotcompose.core.styling import OverrideLookup, RenderData

logger = logging.getLogger(__name__)

StyleFactory = Callable[[Any, Mapping[str, Any], Any], Optional[Mapping[str, Any]]]
SlotFilter = Callable[[Any], bool]

OPTION_NAMES = frozenset(
    {"slots", "settings", "tokens", "statics", "use_styling", "use_prepare_props", "display_name"}
)

_EMPTY: Mapping[str, Any] = MappingProxyType({})
_LAYER_TYPES = (LiteralLayer, ThemeKeyLayer, ThemeFunctionLayer)


def _freeze(value: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if value is None:
        return _EMPTY
    if isinstance(value, MappingProxyType):
        return value
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class SlotStyleEntry:
    """One slot: an optional style factory, its raw tokens and an optional filter."""

    factory: Optional[StyleFactory] = None
    tokens: Mapping[str, Any] = field(default_factory=dict)
    filter: Optional[SlotFilter] = None

    def __post_init__(self) -> None:
        if self.factory is not None and not callable(self.factory):
            raise CompositionError("Slot style factory must be callable")
        if self.filter is not None and not callable(self.filter):
            raise CompositionError("Slot filter must be callable")
        if not isinstance(self.tokens, Mapping):
            raise CompositionError("Slot tokens must be a mapping")
        object.__setattr__(self, "tokens", _freeze(self.tokens))

    def applies(self, props: Any) -> bool:
        """Whether the factory runs for ``props``."""
        return self.factory is not None and (self.filter is None or bool(self.filter(props)))


def as_slot_entry(slot: str, value: Any) -> SlotStyleEntry:
    if isinstance(value, SlotStyleEntry):
        return value
    if value is None:
        return SlotStyleEntry()
    if callable(value):
        return SlotStyleEntry(factory=value)
    raise CompositionError(
        f"Slot '{slot}' must be a SlotStyleEntry, a style factory or None",
        context={"slot": slot, "type": type(value).__name__},
    )


@dataclass(frozen=True, eq=False)
class ComponentDefinition:
    """An immutable, composable component description.

    Definitions compare and hash by identity: they key the resolution caches.
    """

    slots: Mapping[str, SlotStyleEntry] = field(default_factory=dict)
    settings: Tuple[SettingsLayer, ...] = ()
    tokens: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    statics: Mapping[str, Any] = field(default_factory=dict)
    use_styling: Optional[Callable[..., Dict[str, Dict[str, Any]]]] = None
    use_prepare_props: Optional[Callable[..., Any]] = None
    display_name: str = "Component"

    def __post_init__(self) -> None:
        if isinstance(self.slots, MappingProxyType) and all(
            isinstance(v, SlotStyleEntry) for v in self.slots.values()
        ):
            slots = self.slots
        else:
            if not isinstance(self.slots, Mapping):
                raise CompositionError("slots must be a mapping of slot name to entry")
            slots = MappingProxyType({k: as_slot_entry(k, v) for k, v in self.slots.items()})
        reserved = sorted(RESERVED_KEYS.intersection(slots))
        if reserved:
            raise CompositionError(
                f"Slot name(s) {', '.join(reserved)} are reserved for settings state overrides",
                context={"reserved": reserved},
            )
        object.__setattr__(self, "slots", slots)

        if isinstance(self.settings, (str, Mapping)) or callable(self.settings):
            raise CompositionError("settings must be a sequence of settings layers")
        if not (isinstance(self.settings, tuple) and all(isinstance(e, _LAYER_TYPES) for e in self.settings)):
            object.__setattr__(self, "settings", tuple(as_settings_layer(e) for e in self.settings))

        if not isinstance(self.tokens, Mapping):
            raise CompositionError("tokens must be a mapping of slot name to token definition")
        tokens = self.tokens
        if not (isinstance(tokens, MappingProxyType) and all(isinstance(v, MappingProxyType) for v in tokens.values())):
            tokens = MappingProxyType({slot: _freeze(_check_tokens(slot, d)) for slot, d in tokens.items()})
        object.__setattr__(self, "tokens", tokens)

        if not isinstance(self.statics, Mapping):
            raise CompositionError("statics must be a mapping")
        object.__setattr__(self, "statics", _freeze(self.statics))

        for hook in ("use_styling", "use_prepare_props"):
            value = getattr(self, hook)
            if value is not None and not callable(value):
                raise CompositionError(f"{hook} must be callable", context={"option": hook})

    def __repr__(self) -> str:
        return (
            f"ComponentDefinition({self.display_name!r}, slots={list(self.slots)}, "
            f"settings={len(self.settings)} layers)"
        )

    # ---------- extension ----------

    def compose(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "ComponentDefinition":
        """Return a new definition extending this one with ``options``.

        Slots and statics merge shallowly, tokens merge per slot, settings
        layers are appended, hooks and display name are replaced when given.
        """
        opts = _check_options({**(options or {}), **kwargs})

        slots = self.slots
        if opts.get("slots"):
            new_slots = {k: as_slot_entry(k, v) for k, v in opts["slots"].items()}
            slots = MappingProxyType({**self.slots, **new_slots})

        settings = self.settings
        if opts.get("settings"):
            settings = self.settings + tuple(as_settings_layer(e) for e in opts["settings"])

        tokens = self.tokens
        if opts.get("tokens"):
            merged = dict(self.tokens)
            for slot, token_def in opts["tokens"].items():
                merged[slot] = MappingProxyType({**self.tokens.get(slot, {}), **_check_tokens(slot, token_def)})
            tokens = MappingProxyType(merged)

        statics = self.statics
        if opts.get("statics"):
            statics = MappingProxyType({**self.statics, **opts["statics"]})

        child = ComponentDefinition(
            slots=slots,
            settings=settings,
            tokens=tokens,
            statics=statics,
            use_styling=opts.get("use_styling") or self.use_styling,
            use_prepare_props=opts.get("use_prepare_props") or self.use_prepare_props,
            display_name=opts.get("display_name") or self.display_name,
        )
        logger.debug(
            "composed %s: %d slots, %d settings layers (+%d)",
            child.display_name,
            len(child.slots),
            len(child.settings),
            len(child.settings) - len(self.settings),
        )
        return child

    def customize(self, *layers: Any) -> "ComponentDefinition":
        """Append settings layers; slots, tokens and statics are left untouched."""
        return self.compose(settings=layers)

    def with_settings_files(self, *paths: Union[str, Path]) -> "ComponentDefinition":
        """``customize`` with literal layers loaded from YAML settings files."""
        return self.customize(*load_settings_files(*paths))

    # ---------- accessors ----------

    @property
    def settings_stack(self) -> SettingsLayerStack:
        return SettingsLayerStack(self.settings)

    def token_definitions(self) -> Dict[str, Mapping[str, Any]]:
        """Effective raw tokens per slot: the slot entry's tokens, overridden by ``tokens[slot]``."""
        result: Dict[str, Mapping[str, Any]] = {}
        for slot, entry in self.slots.items():
            result[slot] = {**entry.tokens, **self.tokens.get(slot, {})}
        for slot, token_def in self.tokens.items():
            if slot not in result:
                result[slot] = token_def
        return result

    # ---------- rendering ----------

    def resolve(self, props: Any, theme: Any, lookup: Optional["OverrideLookup"] = None) -> Dict[str, Dict[str, Any]]:
        """Resolve the final per-slot props with the default styling resolver."""
        from slotcompose.core.styling import use_styling

        return use_styling(self, props, theme, lookup)

    def prepare(self, props: Any, theme: Any, lookup: Optional["OverrideLookup"] = None) -> "RenderData":
        """Build render data with the default styling resolver."""
        from slotcompose.core.styling import prepare_props

        return prepare_props(self, props, theme, lookup)


def _check_tokens(slot: str, token_def: Any) -> Mapping[str, Any]:
    if not isinstance(token_def, Mapping):
        raise CompositionError(
            f"Tokens for slot '{slot}' must be a mapping",
            context={"slot": slot, "type": type(token_def).__name__},
        )
    return token_def


def _check_options(opts: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(opts) - OPTION_NAMES)
    if unknown:
        raise CompositionError(
            f"Unknown compose option(s): {', '.join(unknown)}",
            context={"unknown": unknown, "allowed": sorted(OPTION_NAMES)},
        )
    for name in ("slots", "tokens", "statics"):
        value = opts.get(name)
        if value is not None and not isinstance(value, Mapping):
            raise CompositionError(f"compose option '{name}' must be a mapping", context={"option": name})
    settings = opts.get("settings")
    if settings is not None and (isinstance(settings, (str, Mapping)) or not isinstance(settings, Iterable)):
        raise CompositionError(
            "compose option 'settings' must be a sequence of settings layers",
            context={"option": "settings"},
        )
    if settings is not None:
        opts = {**opts, "settings": tuple(settings)}
    return dict(opts)


def define_component(options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> ComponentDefinition:
    """Build a root definition from compose-style options."""
    opts = _check_options({**(options or {}), **kwargs})
    return ComponentDefinition(
        slots=opts.get("slots") or {},
        settings=opts.get("settings") or (),
        tokens=opts.get("tokens") or {},
        statics=opts.get("statics") or {},
        use_styling=opts.get("use_styling"),
        use_prepare_props=opts.get("use_prepare_props"),
        display_name=opts.get("display_name") or "Component",
    )


__all__ = [
    "ComponentDefinition",
    "SlotStyleEntry",
    "StyleFactory",
    "SlotFilter",
    "as_slot_entry",
    "define_component",
]
