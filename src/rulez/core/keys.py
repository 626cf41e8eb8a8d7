"""Shared schema keys to avoid magic strings across rulez modules."""

from __future__ import annotations

# Rule result keys
K_SUCCESS = "success"
K_CONTENT = "content"
K_NAME = "name"
K_SOURCE = "source"
K_ERROR = "error"
K_SUGGESTIONS = "suggestions"

# Catalog entry keys
K_DISPLAY_NAME = "displayName"
K_DESCRIPTION = "description"

# Provenance markers used in place of a URL
SOURCE_OFFLINE = "offline-mode"
SOURCE_SYNTHETIC = "synthetic-content"
