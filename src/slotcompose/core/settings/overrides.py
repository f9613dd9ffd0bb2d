"""State overrides carried inside merged settings.

Settings may declare ``_overrides``: a mapping of state name to a partial
settings object, applied when the prop of the same name is truthy. The
optional ``_precedence`` list orders states from lowest to highest; states not
listed apply first, in declaration order.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, List

from slotcompose.core.exceptions import SettingsLayerError
from slotcompose.core.utils.merge import DEFAULT_JOIN_KEYS, merge_props

OVERRIDES_KEY = "_overrides"
PRECEDENCE_KEY = "_precedence"
RESERVED_KEYS = frozenset({OVERRIDES_KEY, PRECEDENCE_KEY})


def is_reserved_key(key: Any) -> bool:
    return key in RESERVED_KEYS


def precedence_of(settings: Mapping[str, Any]) -> List[str]:
    """Return ``_precedence`` without duplicates; it must be a list or tuple."""
    names = settings.get(PRECEDENCE_KEY)
    if names is None:
        return []
    if not isinstance(names, (list, tuple)):
        raise SettingsLayerError(
            f"{PRECEDENCE_KEY} must be a list of state names, got {type(names).__name__}",
            context={"key": PRECEDENCE_KEY, "type": type(names).__name__},
        )
    precedence: List[str] = []
    for name in names:
        if name not in precedence:
            precedence.append(name)
    return precedence


def active_states(settings: Mapping[str, Any], props: Any) -> List[str]:
    """Return the override states enabled by ``props``, lowest precedence first."""
    overrides = settings.get(OVERRIDES_KEY) or {}
    if not isinstance(overrides, Mapping):
        raise SettingsLayerError(
            f"{OVERRIDES_KEY} must be a mapping of state name to settings, got {type(overrides).__name__}",
            context={"key": OVERRIDES_KEY, "type": type(overrides).__name__},
        )
    if not overrides:
        return []

    precedence = precedence_of(settings)
    ranked = [name for name in overrides if name not in precedence]
    ranked += [name for name in precedence if name in overrides]
    return [name for name in ranked if _prop_enabled(props, name)]


def _prop_enabled(props: Any, name: str) -> bool:
    if isinstance(props, Mapping):
        return bool(props.get(name))
    return bool(getattr(props, name, False))


def apply_state_overrides(
    settings: Mapping[str, Any],
    props: Any,
    *,
    join_keys: FrozenSet[str] = DEFAULT_JOIN_KEYS,
    concat_sequences: bool = True,
) -> Dict[str, Any]:
    """Return the slot settings of ``settings`` with active state overrides applied.

    Reserved keys are dropped from the result.
    """
    result: Dict[str, Any] = {k: v for k, v in settings.items() if not is_reserved_key(k)}
    overrides = settings.get(OVERRIDES_KEY) or {}
    for state in active_states(settings, props):
        partial = overrides[state] or {}
        if not isinstance(partial, Mapping):
            raise SettingsLayerError(
                f"{OVERRIDES_KEY} entry '{state}' must be a mapping, got {type(partial).__name__}",
                context={"state": state, "type": type(partial).__name__},
            )
        partial = {k: v for k, v in partial.items() if not is_reserved_key(k)}
        result = merge_props(result, partial, join_keys=join_keys, concat_sequences=concat_sequences)
    return result


__all__ = [
    "OVERRIDES_KEY",
    "PRECEDENCE_KEY",
    "RESERVED_KEYS",
    "is_reserved_key",
    "precedence_of",
    "active_states",
    "apply_state_overrides",
]
