"""Design-token resolution."""

from .resolver import ResolvedTokenMap, TokenMap, TokenResolver, resolve_tokens

__all__ = ["ResolvedTokenMap", "TokenMap", "TokenResolver", "resolve_tokens"]
