from __future__ import annotations

from types import MappingProxyType

import pytest

from slotcompose.core.exceptions import SettingsLayerError
from slotcompose.core.settings import (
    LayerKind,
    LiteralLayer,
    ThemeFunctionLayer,
    ThemeKeyLayer,
    as_settings_layer,
    resolve_layer,
)
from slotcompose.core.theme import Theme


def test_raw_entries_coerce_to_tagged_layers() -> None:
    def fn(theme):
        return {}

    assert as_settings_layer({"root": {}}).kind is LayerKind.LITERAL
    assert as_settings_layer("Button") == ThemeKeyLayer("Button")
    assert as_settings_layer(fn) == ThemeFunctionLayer(fn)


def test_existing_layers_pass_through() -> None:
    layer = LiteralLayer({"root": {"color": "red"}})
    assert as_settings_layer(layer) is layer


@pytest.mark.parametrize("entry", [42, None, ["root"], 3.5])
def test_unsupported_entries_fail_fast(entry) -> None:
    with pytest.raises(SettingsLayerError):
        as_settings_layer(entry)


def test_literal_layer_is_read_only_and_compares_by_content() -> None:
    layer = LiteralLayer({"root": {"color": "red"}})
    assert isinstance(layer.settings, MappingProxyType)
    assert layer == LiteralLayer({"root": {"color": "red"}})
    assert layer != LiteralLayer({"root": {"color": "blue"}})


def test_literal_layer_rejects_non_mapping() -> None:
    with pytest.raises(SettingsLayerError):
        LiteralLayer(["root"])  # type: ignore[arg-type]


def test_theme_key_layer_requires_name() -> None:
    with pytest.raises(SettingsLayerError):
        ThemeKeyLayer("")


def test_theme_function_layer_requires_callable() -> None:
    with pytest.raises(SettingsLayerError):
        ThemeFunctionLayer("not callable")  # type: ignore[arg-type]


def test_literal_resolves_as_is() -> None:
    layer = LiteralLayer({"root": {"color": "red"}})
    assert dict(resolve_layer(layer, Theme())) == {"root": {"color": "red"}}


def test_theme_key_resolves_from_theme_settings(theme: Theme) -> None:
    resolved = resolve_layer(ThemeKeyLayer("Button"), theme)
    assert resolved["root"]["color"] == "themed"


def test_theme_key_resolves_from_plain_mapping_theme() -> None:
    theme = {"settings": {"Button": {"root": {"color": "green"}}}}
    assert resolve_layer(ThemeKeyLayer("Button"), theme) == {"root": {"color": "green"}}


def test_missing_theme_key_resolves_to_empty(theme: Theme) -> None:
    assert dict(resolve_layer(ThemeKeyLayer("Missing"), theme)) == {}
    assert dict(resolve_layer(ThemeKeyLayer("Missing"), None)) == {}


def test_theme_key_entry_must_be_mapping() -> None:
    theme = Theme(settings={"Button": "oops"})
    with pytest.raises(SettingsLayerError):
        resolve_layer(ThemeKeyLayer("Button"), theme)


def test_theme_function_receives_theme(theme: Theme) -> None:
    layer = ThemeFunctionLayer(lambda t: {"root": {"color": t["primary"]}})
    assert resolve_layer(layer, theme) == {"root": {"color": "#0078d4"}}


def test_theme_function_returning_non_mapping_is_fatal(theme: Theme) -> None:
    layer = ThemeFunctionLayer(lambda t: ["root"])
    with pytest.raises(SettingsLayerError) as excinfo:
        resolve_layer(layer, theme)
    assert excinfo.value.context["returned"] == "list"


def test_resolve_rejects_non_layers(theme: Theme) -> None:
    with pytest.raises(SettingsLayerError):
        resolve_layer({"root": {}}, theme)  # type: ignore[arg-type]
