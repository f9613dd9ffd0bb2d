from __future__ import annotations

from typing import Any, Dict, Mapping


class SlotComposeError(Exception):
    """Base exception for slotcompose."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class SettingsLayerError(SlotComposeError, TypeError):
    """Raised when a settings layer is malformed or resolves to a non-mapping."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        SlotComposeError.__init__(self, message, context=context)
        TypeError.__init__(self, message)


class UnknownSlotError(SlotComposeError, KeyError):
    """Raised when settings, tokens or a style factory reference an undeclared slot."""

    def __init__(
        self,
        slot: str,
        *,
        component: str | None = None,
        source: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["slot"] = slot
        if component:
            ctx["component"] = component
        if source:
            ctx["source"] = source

        where = f" in {component}" if component else ""
        origin = f" (referenced by {source})" if source else ""
        message = f"Slot '{slot}' is not declared{where}{origin}"

        SlotComposeError.__init__(self, message, context=ctx)
        KeyError.__init__(self, message)
        self.slot = slot

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class StyleFactoryError(SlotComposeError, TypeError):
    """Raised when a slot style factory returns something other than a mapping."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        SlotComposeError.__init__(self, message, context=context)
        TypeError.__init__(self, message)


class OverrideLookupError(SlotComposeError, TypeError):
    """Raised when an override lookup returns something other than a mapping or None."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        SlotComposeError.__init__(self, message, context=context)
        TypeError.__init__(self, message)


class CompositionError(SlotComposeError, ValueError):
    """Raised when compose options are invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        SlotComposeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ConfigError(SlotComposeError, ValueError):
    """Raised when the merged configuration is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        SlotComposeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "SlotComposeError",
    "SettingsLayerError",
    "UnknownSlotError",
    "StyleFactoryError",
    "OverrideLookupError",
    "CompositionError",
    "ConfigError",
]
