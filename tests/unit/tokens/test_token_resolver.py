from __future__ import annotations

import gc

import pytest

from slotcompose.core.definition import SlotStyleEntry, define_component
from slotcompose.core.theme import Theme
from slotcompose.core.tokens import TokenResolver, resolve_tokens


def test_resolve_tokens_evaluates_functions(theme: Theme) -> None:
    resolved = resolve_tokens({"color": lambda t: t["primary"], "padding": 2}, theme)
    assert resolved == {"color": "#0078d4", "padding": 2}


def test_resolve_tokens_handles_empty_definition(theme: Theme) -> None:
    assert resolve_tokens(None, theme) == {}


def test_token_function_errors_propagate(theme: Theme) -> None:
    def broken(t):
        raise LookupError("no ramp value")

    with pytest.raises(LookupError, match="no ramp value"):
        resolve_tokens({"color": broken}, theme)


def test_resolver_memoizes_per_definition_and_theme(theme: Theme) -> None:
    calls = []

    def color(t):
        calls.append(t.name)
        return t["primary"]

    definition = define_component(slots={"root": SlotStyleEntry(tokens={"color": color})})
    resolver = TokenResolver()

    first = resolver.resolve(definition, theme)
    second = resolver.resolve(definition, theme)
    assert first is second
    assert calls == ["light"]

    other = Theme(name="dark", values={"primary": "#111"})
    assert resolver.resolve(definition, other)["root"]["color"] == "#111"
    assert calls == ["light", "dark"]


def test_resolved_maps_are_read_only(theme: Theme) -> None:
    definition = define_component(slots={"root": SlotStyleEntry(tokens={"padding": 2})})
    resolved = TokenResolver().resolve(definition, theme)
    with pytest.raises(TypeError):
        resolved["root"]["padding"] = 3  # type: ignore[index]


def test_definition_tokens_override_slot_tokens(theme: Theme) -> None:
    definition = define_component(
        slots={"root": SlotStyleEntry(tokens={"padding": 2, "margin": 1})},
        tokens={"root": {"padding": lambda t: t["spacing"] * 2}},
    )
    assert dict(TokenResolver().resolve(definition, theme)["root"]) == {"padding": 8, "margin": 1}


def test_disabled_cache_recomputes_equal_values(theme: Theme) -> None:
    calls = []
    definition = define_component(
        slots={"root": SlotStyleEntry(tokens={"c": lambda t: calls.append(1) or "x"})}
    )
    resolver = TokenResolver(cache_enabled=False)
    first = resolver.resolve(definition, theme)
    second = resolver.resolve(definition, theme)
    assert first is not second
    assert dict(first["root"]) == dict(second["root"]) == {"c": "x"}
    assert len(calls) == 2
    assert len(resolver) == 0


def test_entries_are_dropped_when_theme_is_collected() -> None:
    definition = define_component(slots={"root": SlotStyleEntry(tokens={"c": lambda t: t["c"]})})
    resolver = TokenResolver()
    theme = Theme(values={"c": 1})
    resolver.resolve(definition, theme)
    assert len(resolver) == 1

    del theme
    gc.collect()
    assert len(resolver) == 0
