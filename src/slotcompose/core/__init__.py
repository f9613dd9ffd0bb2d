"""Core resolution engine: settings layers, tokens, definitions and styling."""
