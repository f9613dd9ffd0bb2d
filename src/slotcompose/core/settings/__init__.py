"""Settings layers and their merge.

Default precedence (low → high):
  parent layers → layers added by each compose/customize step
"""

from .layers import (
    LayerKind,
    LiteralLayer,
    Settings,
    SettingsLayer,
    ThemeFunctionLayer,
    ThemeKeyLayer,
    as_settings_layer,
    resolve_layer,
)
from .loader import load_settings_file, load_settings_files, validate_settings
from .overrides import active_states, apply_state_overrides
from .stack import SettingsLayerStack

__all__ = [
    "LayerKind",
    "LiteralLayer",
    "Settings",
    "SettingsLayer",
    "SettingsLayerStack",
    "ThemeFunctionLayer",
    "ThemeKeyLayer",
    "active_states",
    "apply_state_overrides",
    "as_settings_layer",
    "load_settings_file",
    "load_settings_files",
    "resolve_layer",
    "validate_settings",
]
