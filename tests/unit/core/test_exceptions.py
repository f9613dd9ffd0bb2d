from __future__ import annotations

import pytest

from slotcompose.core.exceptions import (
    CompositionError,
    ConfigError,
    OverrideLookupError,
    SettingsLayerError,
    SlotComposeError,
    StyleFactoryError,
    UnknownSlotError,
)


@pytest.mark.parametrize(
    "exc_type, builtin",
    [
        (SettingsLayerError, TypeError),
        (StyleFactoryError, TypeError),
        (OverrideLookupError, TypeError),
        (CompositionError, ValueError),
        (ConfigError, ValueError),
    ],
)
def test_errors_are_also_builtin_exceptions(exc_type, builtin) -> None:
    err = exc_type("boom", context={"a": 1})
    assert isinstance(err, SlotComposeError)
    assert isinstance(err, builtin)
    assert err.to_json_error() == {"message": "boom", "code": exc_type.__name__, "context": {"a": 1}}


def test_context_is_copied() -> None:
    ctx = {"a": 1}
    err = SlotComposeError("x", context=ctx)
    ctx["a"] = 2
    assert err.context == {"a": 1}


def test_unknown_slot_error_message_and_context() -> None:
    err = UnknownSlotError("ghost", component="Button", source="settings")
    assert isinstance(err, KeyError)
    assert str(err) == "Slot 'ghost' is not declared in Button (referenced by settings)"
    assert err.context == {"slot": "ghost", "component": "Button", "source": "settings"}
    assert err.slot == "ghost"
