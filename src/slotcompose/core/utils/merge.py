"""Canonical merge utilities.

Two merge flavours live here:

- ``merge_props``: the property merge rule used for every settings layer,
  style-factory fragment and override. Scalars are overwritten by the later
  value, sequences are concatenated, mappings merge recursively, and string
  values under a join key (``className`` by default) are joined with a space.
- ``deep_merge``: the configuration overlay merge. Lists are replaced unless the
  overlay list starts with the ``"+"`` marker, in which case it is appended.

Neither function mutates its inputs.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

DEFAULT_JOIN_KEYS: FrozenSet[str] = frozenset({"className"})

_SEQUENCE_TYPES = (list, tuple)


def merge_props(
    base: Optional[Mapping[str, Any]],
    override: Optional[Mapping[str, Any]],
    *,
    join_keys: Iterable[str] = DEFAULT_JOIN_KEYS,
    concat_sequences: bool = True,
) -> Dict[str, Any]:
    """Merge ``override`` onto ``base`` with the layered property rule.

    Example:
        >>> merge_props({"color": "red", "classes": ["a"]}, {"color": "blue", "classes": ["b"]})
        {'color': 'blue', 'classes': ['a', 'b']}
    """
    keys = join_keys if isinstance(join_keys, frozenset) else frozenset(join_keys)
    result: Dict[str, Any] = dict(base or {})
    for key, value in (override or {}).items():
        if key not in result:
            result[key] = _fresh(value)
            continue
        current = result[key]
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = merge_props(current, value, join_keys=keys, concat_sequences=concat_sequences)
        elif concat_sequences and isinstance(current, _SEQUENCE_TYPES) and isinstance(value, _SEQUENCE_TYPES):
            result[key] = [*current, *value]
        elif key in keys and isinstance(current, str) and isinstance(value, str):
            result[key] = join_class_names(current, value)
        else:
            result[key] = _fresh(value)
    return result


def merge_props_many(
    fragments: Iterable[Optional[Mapping[str, Any]]],
    *,
    join_keys: Iterable[str] = DEFAULT_JOIN_KEYS,
    concat_sequences: bool = True,
) -> Dict[str, Any]:
    """Fold ``merge_props`` over ``fragments`` in order (later wins)."""
    keys = frozenset(join_keys)
    merged: Dict[str, Any] = {}
    for fragment in fragments:
        if fragment:
            merged = merge_props(merged, fragment, join_keys=keys, concat_sequences=concat_sequences)
    return merged


def join_class_names(*names: Optional[str]) -> str:
    """Join class-name strings, skipping empty parts."""
    return " ".join(part for name in names if name for part in name.split())


def _fresh(value: Any) -> Any:
    # Copy containers so merged output never aliases layer-owned structures.
    if isinstance(value, Mapping):
        return {k: _fresh(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_fresh(v) for v in value]
    return value


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge configuration dictionaries without mutating inputs.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif key in result and isinstance(result[key], list) and isinstance(value, list):
            result[key] = merge_arrays(result[key], value)
        elif isinstance(value, list):
            result[key] = merge_arrays([], value)
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge configuration arrays.

    A leading ``"+"`` appends the remaining items to ``base``; otherwise the
    override replaces ``base``.

        >>> merge_arrays(["className"], ["+", "styleClass"])
        ['className', 'styleClass']
        >>> merge_arrays(["className"], ["tw"])
        ['tw']
    """
    if override and override[0] == "+":
        return [*base, *override[1:]]
    return list(override)


__all__ = [
    "DEFAULT_JOIN_KEYS",
    "merge_props",
    "merge_props_many",
    "join_class_names",
    "deep_merge",
    "merge_arrays",
]
