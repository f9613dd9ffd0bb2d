"""Identity-keyed memoization for (definition, theme) pairs.

Entries are keyed on the identity of both objects, held through weak
references, and evicted when either one is garbage collected. Pairs where
either object cannot be weakly referenced (plain dicts, for example) are
computed on every call and never stored.

Writes are idempotent: two resolutions racing on the same pair both compute an
equal value and the last write wins.
"""
from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from slotcompose.core.config.cache import register_cache_clearer

logger = logging.getLogger(__name__)

T = TypeVar("T")


_Ref = Callable[[], Any]


class IdentityPairCache:
    """Memo table keyed by the identity pair ``(first, second)``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: Dict[Tuple[int, int], Tuple[_Ref, _Ref, Any]] = {}
        _live_caches.add(self)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"IdentityPairCache({self.name!r}, entries={len(self._entries)})"

    def get(self, first: Any, second: Any) -> Optional[Any]:
        entry = self._entries.get((id(first), id(second)))
        if entry is None:
            return None
        first_ref, second_ref, value = entry
        # A dead object's id can be reused; only trust entries whose refs still match.
        if first_ref() is first and second_ref() is second:
            return value
        return None

    def get_or_compute(self, first: Any, second: Any, compute: Callable[[], T]) -> T:
        cached = self.get(first, second)
        if cached is not None:
            return cached
        first_ref = self._ref(first, 0)
        second_ref = self._ref(second, 1)
        if first_ref is None or second_ref is None:
            logger.debug("%s cache bypassed for unreferenceable key of %r", self.name, _describe(first))
            return compute()
        logger.debug("%s cache miss for %r", self.name, _describe(first))
        value = compute()
        self._entries[(id(first), id(second))] = (first_ref, second_ref, value)
        return value

    def clear(self) -> None:
        self._entries.clear()

    def _ref(self, obj: Any, position: int) -> Optional[_Ref]:
        obj_id = id(obj)
        cache_ref = weakref.ref(self)

        def _evict(_dead: Any) -> None:
            cache = cache_ref()
            if cache is not None:
                cache._evict(obj_id, position)

        try:
            return weakref.ref(obj, _evict)
        except TypeError:
            return None

    def _evict(self, obj_id: int, position: int) -> None:
        for key in [k for k in list(self._entries) if k[position] == obj_id]:
            self._entries.pop(key, None)


def _describe(obj: Any) -> str:
    return getattr(obj, "display_name", None) or type(obj).__name__


_live_caches: "weakref.WeakSet[IdentityPairCache]" = weakref.WeakSet()


def clear_identity_caches() -> None:
    """Drop every entry of every live ``IdentityPairCache``."""
    for cache in list(_live_caches):
        cache.clear()


register_cache_clearer("identity-pair-caches", clear_identity_caches)


__all__ = ["IdentityPairCache", "clear_identity_caches"]
