"""
slotcompose - layered, themeable component styling

Component definitions are extended through chained ``compose``/``customize``
calls; at render time their slots, tokens and ordered settings layers are
resolved against a theme into final per-slot props.
"""

__version__ = "1.0.0"

from slotcompose.core.definition import ComponentDefinition, SlotStyleEntry, define_component
from slotcompose.core.exceptions import (
    CompositionError,
    ConfigError,
    OverrideLookupError,
    SettingsLayerError,
    SlotComposeError,
    StyleFactoryError,
    UnknownSlotError,
)
from slotcompose.core.settings import LiteralLayer, ThemeFunctionLayer, ThemeKeyLayer
from slotcompose.core.styling import RenderData, StylingResolver, prepare_props, use_styling
from slotcompose.core.theme import Theme, load_theme

__all__ = [
    "__version__",
    "ComponentDefinition",
    "CompositionError",
    "ConfigError",
    "LiteralLayer",
    "OverrideLookupError",
    "RenderData",
    "SettingsLayerError",
    "SlotComposeError",
    "SlotStyleEntry",
    "StyleFactoryError",
    "StylingResolver",
    "Theme",
    "ThemeFunctionLayer",
    "ThemeKeyLayer",
    "UnknownSlotError",
    "define_component",
    "load_theme",
    "prepare_props",
    "use_styling",
]
