"""Component identifier for the Ollama adapter resource."""

from __future__ import annotations

RESOURCE_COMPONENT_ID = "adapter_ollama"
PROVIDER_NAME = "ollama"
