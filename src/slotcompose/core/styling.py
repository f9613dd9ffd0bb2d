"""Styling resolution: definition + theme + props (+ override lookup) → slot props.

Resolution order for one render pass:

1. Resolve the definition's tokens for the theme (memoized).
2. Merge the settings layers for the theme (memoized), then apply the state
   overrides enabled by the props.
3. Run each slot's style factory whose filter accepts the props and merge its
   fragment over the slot's settings.
4. Merge the override lookup's fragment for each slot last.

Every step merges with ``merge_props``: scalars are overwritten, sequences
concatenate, mappings merge recursively.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Optional

from slotcompose.core.cache import IdentityPairCache
from slotcompose.core.config.cache import register_cache_clearer
from slotcompose.core.config.domains import CacheConfig, MergeConfig
from slotcompose.core.definition import ComponentDefinition
from slotcompose.core.exceptions import (
    CompositionError,
    OverrideLookupError,
    SettingsLayerError,
    StyleFactoryError,
    UnknownSlotError,
)
from slotcompose.core.settings.overrides import (
    OVERRIDES_KEY,
    apply_state_overrides,
    is_reserved_key,
    precedence_of,
)
from slotcompose.core.tokens import ResolvedTokenMap, TokenResolver
from slotcompose.core.utils.merge import merge_props

logger = logging.getLogger(__name__)

OverrideLookup = Callable[[str], Optional[Mapping[str, Any]]]
ResolvedSlotProps = Dict[str, Dict[str, Any]]


@dataclass(frozen=True)
class RenderData:
    """Per-slot props plus derived state, handed to the rendering harness."""

    slot_props: ResolvedSlotProps = field(default_factory=dict)
    state: Dict[str, Any] = field(default_factory=dict)


class StylingResolver:
    """Resolves final slot props for component definitions.

    Holds the token and merged-settings caches; both are keyed by the
    (definition, theme) identity pair and never carry per-call state.
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        *,
        cache_enabled: Optional[bool] = None,
        join_keys: Optional[FrozenSet[str]] = None,
        concat_sequences: Optional[bool] = None,
    ) -> None:
        merge_cfg = MergeConfig(config_dir=config_dir)
        self.join_keys = frozenset(join_keys) if join_keys is not None else merge_cfg.join_keys
        self.concat_sequences = merge_cfg.concat_sequences if concat_sequences is None else concat_sequences
        self.cache_enabled = CacheConfig(config_dir=config_dir).enabled if cache_enabled is None else cache_enabled
        self.tokens = TokenResolver(cache_enabled=self.cache_enabled)
        self._settings_cache = IdentityPairCache("settings")

    def _merge(self, base: Optional[Mapping[str, Any]], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        return merge_props(base, override, join_keys=self.join_keys, concat_sequences=self.concat_sequences)

    # ---------- steps ----------

    def resolve_tokens(self, definition: ComponentDefinition, theme: Any) -> ResolvedTokenMap:
        for slot in definition.tokens:
            if slot not in definition.slots:
                raise UnknownSlotError(slot, component=definition.display_name, source="tokens")
        return self.tokens.resolve(definition, theme)

    def merged_settings(self, definition: ComponentDefinition, theme: Any) -> Mapping[str, Any]:
        """Merged settings (including reserved keys) for ``theme``; treat as read-only."""

        def _compute() -> Dict[str, Any]:
            merged = definition.settings_stack.merge(
                theme, join_keys=self.join_keys, concat_sequences=self.concat_sequences
            )
            _check_settings_slots(definition, merged)
            return merged

        if not self.cache_enabled:
            return _compute()
        return self._settings_cache.get_or_compute(definition, theme, _compute)

    # ---------- entry points ----------

    def resolve_slot_props(
        self,
        definition: ComponentDefinition,
        props: Any,
        theme: Any,
        lookup: Optional[OverrideLookup] = None,
    ) -> ResolvedSlotProps:
        """Run the full resolution for one render pass; the result belongs to the caller."""
        resolved_tokens = self.resolve_tokens(definition, theme)
        settings = apply_state_overrides(
            self.merged_settings(definition, theme),
            props,
            join_keys=self.join_keys,
            concat_sequences=self.concat_sequences,
        )

        slot_props: ResolvedSlotProps = {}
        for slot, entry in definition.slots.items():
            current = self._merge({}, settings.get(slot))
            if entry.applies(props):
                fragment = entry.factory(props, resolved_tokens.get(slot, {}), theme)
                if fragment is not None and not isinstance(fragment, Mapping):
                    raise StyleFactoryError(
                        f"Style factory for slot '{slot}' of {definition.display_name} "
                        f"returned {type(fragment).__name__}, expected a mapping",
                        context={"slot": slot, "component": definition.display_name},
                    )
                current = self._merge(current, fragment)
            slot_props[slot] = current

        if lookup is not None:
            for slot in definition.slots:
                fragment = lookup(slot)
                if fragment is None:
                    continue
                if not isinstance(fragment, Mapping):
                    raise OverrideLookupError(
                        f"Override lookup returned {type(fragment).__name__} for slot '{slot}', "
                        "expected a mapping or None",
                        context={"slot": slot, "component": definition.display_name},
                    )
                slot_props[slot] = self._merge(slot_props[slot], fragment)

        return slot_props

    def use_styling(
        self,
        definition: ComponentDefinition,
        props: Any,
        theme: Any,
        lookup: Optional[OverrideLookup] = None,
    ) -> ResolvedSlotProps:
        """Dispatch to the definition's ``use_styling`` hook, or resolve by default."""
        if definition.use_styling is not None:
            return definition.use_styling(definition, props, theme, lookup)
        return self.resolve_slot_props(definition, props, theme, lookup)

    def prepare_props(
        self,
        definition: ComponentDefinition,
        props: Any,
        theme: Any,
        lookup: Optional[OverrideLookup] = None,
    ) -> RenderData:
        """Build ``RenderData`` through the definition's ``use_prepare_props`` hook if set."""
        if definition.use_prepare_props is None:
            return RenderData(slot_props=self.use_styling(definition, props, theme, lookup))

        def styling(styling_props: Any, styling_lookup: Optional[OverrideLookup] = None) -> ResolvedSlotProps:
            return self.use_styling(definition, styling_props, theme, styling_lookup or lookup)

        result = definition.use_prepare_props(props, styling)
        if isinstance(result, RenderData):
            return result
        if isinstance(result, Mapping) and "slot_props" in result:
            return RenderData(slot_props=dict(result["slot_props"]), state=dict(result.get("state") or {}))
        raise CompositionError(
            f"use_prepare_props of {definition.display_name} must return RenderData, "
            f"got {type(result).__name__}",
            context={"component": definition.display_name},
        )

    def clear(self) -> None:
        self.tokens.clear()
        self._settings_cache.clear()


def _check_settings_slots(definition: ComponentDefinition, merged: Mapping[str, Any]) -> None:
    _check_slot_map(definition, merged, "settings")
    precedence_of(merged)
    overrides = merged.get(OVERRIDES_KEY)
    if overrides is None:
        return
    if not isinstance(overrides, Mapping):
        raise SettingsLayerError(
            f"{OVERRIDES_KEY} of {definition.display_name} must be a mapping, got {type(overrides).__name__}",
            context={"component": definition.display_name, "key": OVERRIDES_KEY},
        )
    for state, partial in overrides.items():
        source = f"settings override '{state}'"
        if partial is not None and not isinstance(partial, Mapping):
            raise SettingsLayerError(
                f"{OVERRIDES_KEY} entry '{state}' of {definition.display_name} must be a mapping, "
                f"got {type(partial).__name__}",
                context={"component": definition.display_name, "state": state},
            )
        _check_slot_map(definition, partial or {}, source)


def _check_slot_map(definition: ComponentDefinition, settings: Mapping[str, Any], source: str) -> None:
    for key, value in settings.items():
        if is_reserved_key(key):
            continue
        if key not in definition.slots:
            raise UnknownSlotError(key, component=definition.display_name, source=source)
        if value is not None and not isinstance(value, Mapping):
            raise SettingsLayerError(
                f"Settings for slot '{key}' of {definition.display_name} must be a mapping, "
                f"got {type(value).__name__}",
                context={"slot": key, "component": definition.display_name, "source": source},
            )


# Global resolver instance
_resolver: Optional[StylingResolver] = None


def get_styling_resolver() -> StylingResolver:
    """Get the global styling resolver (configured from the cached config)."""
    global _resolver
    if _resolver is None:
        _resolver = StylingResolver()
    return _resolver


def _reset_styling_resolver() -> None:
    global _resolver
    _resolver = None


register_cache_clearer("styling-resolver", _reset_styling_resolver)


def resolve_slot_props(
    definition: ComponentDefinition, props: Any, theme: Any, lookup: Optional[OverrideLookup] = None
) -> ResolvedSlotProps:
    return get_styling_resolver().resolve_slot_props(definition, props, theme, lookup)


def use_styling(
    definition: ComponentDefinition, props: Any, theme: Any, lookup: Optional[OverrideLookup] = None
) -> ResolvedSlotProps:
    return get_styling_resolver().use_styling(definition, props, theme, lookup)


def prepare_props(
    definition: ComponentDefinition, props: Any, theme: Any, lookup: Optional[OverrideLookup] = None
) -> RenderData:
    return get_styling_resolver().prepare_props(definition, props, theme, lookup)


__all__ = [
    "OverrideLookup",
    "RenderData",
    "ResolvedSlotProps",
    "StylingResolver",
    "get_styling_resolver",
    "prepare_props",
    "resolve_slot_props",
    "use_styling",
]
