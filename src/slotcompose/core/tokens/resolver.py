"""Token resolution: turn raw token definitions into concrete values for a theme.

A raw token definition maps token keys to either literal values or callables
taking the theme. Resolution replaces every callable with its result. Results
are memoized per (component definition, theme) identity pair.
"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Optional

from slotcompose.core.cache import IdentityPairCache

if TYPE_CHECKING:
    from slotcompose.core.definition import ComponentDefinition

TokenMap = Mapping[str, Any]
ResolvedTokenMap = Mapping[str, TokenMap]


def resolve_tokens(token_definition: Optional[Mapping[str, Any]], theme: Any) -> Dict[str, Any]:
    """Evaluate one slot's token definition against ``theme`` (uncached).

    Errors raised by token functions propagate to the caller.
    """
    resolved: Dict[str, Any] = {}
    for key, value in (token_definition or {}).items():
        resolved[key] = value(theme) if callable(value) else value
    return resolved


class TokenResolver:
    """Resolves and memoizes the token maps of a component definition.

    Usage:
        resolver = TokenResolver()
        tokens = resolver.resolve(definition, theme)
        tokens["root"]["color"]
    """

    def __init__(self, *, cache_enabled: bool = True) -> None:
        self.cache_enabled = cache_enabled
        self._cache = IdentityPairCache("tokens")

    def __len__(self) -> int:
        return len(self._cache)

    def resolve(self, definition: "ComponentDefinition", theme: Any) -> ResolvedTokenMap:
        """Return slot → read-only token map for ``theme``."""
        if not self.cache_enabled:
            return self._compute(definition, theme)
        return self._cache.get_or_compute(definition, theme, lambda: self._compute(definition, theme))

    def clear(self) -> None:
        self._cache.clear()

    @staticmethod
    def _compute(definition: "ComponentDefinition", theme: Any) -> ResolvedTokenMap:
        return MappingProxyType(
            {
                slot: MappingProxyType(resolve_tokens(token_def, theme))
                for slot, token_def in definition.token_definitions().items()
            }
        )


__all__ = ["TokenMap", "ResolvedTokenMap", "TokenResolver", "resolve_tokens"]
