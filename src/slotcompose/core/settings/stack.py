"""Ordered settings layers merged against a theme.

Layers are stored low → high precedence: a parent's layers come first and each
``compose``/``customize`` step appends its own. Merging folds ``merge_props``
over the resolved layers, so later scalars win and sequences accumulate.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Tuple

from slotcompose.core.utils.merge import DEFAULT_JOIN_KEYS, merge_props

from .layers import Settings, SettingsLayer, as_settings_layer, resolve_layer


@dataclass(frozen=True)
class SettingsLayerStack:
    """Immutable, ordered sequence of settings layers (low → high)."""

    layers: Tuple[SettingsLayer, ...] = ()

    @classmethod
    def of(cls, entries: Iterable[Any]) -> "SettingsLayerStack":
        return cls(tuple(as_settings_layer(e) for e in entries))

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[SettingsLayer]:
        return iter(self.layers)

    def extend(self, entries: Iterable[Any]) -> "SettingsLayerStack":
        """Return a new stack with ``entries`` appended above the existing layers."""
        added = tuple(as_settings_layer(e) for e in entries)
        if not added:
            return self
        return SettingsLayerStack(self.layers + added)

    def resolve(self, theme: Any) -> List[Settings]:
        """Resolve every layer against ``theme`` in order."""
        return [resolve_layer(layer, theme) for layer in self.layers]

    def merge(
        self,
        theme: Any,
        *,
        join_keys: FrozenSet[str] = DEFAULT_JOIN_KEYS,
        concat_sequences: bool = True,
    ) -> Dict[str, Any]:
        """Merge all layers against ``theme`` into one settings dict."""
        merged: Dict[str, Any] = {}
        for resolved in self.resolve(theme):
            if resolved:
                merged = merge_props(merged, resolved, join_keys=join_keys, concat_sequences=concat_sequences)
        return merged


__all__ = ["SettingsLayerStack"]
