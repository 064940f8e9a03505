"""Ollama adapter resource exports."""

from resources.adapters.ollama.component import PROVIDER_NAME, RESOURCE_COMPONENT_ID
from resources.adapters.ollama.config import (
    OllamaAdapterSettings,
    resolve_ollama_adapter_settings,
)
from resources.adapters.ollama.ollama_provider import OllamaProvider

__all__ = [
    "OllamaAdapterSettings",
    "OllamaProvider",
    "PROVIDER_NAME",
    "RESOURCE_COMPONENT_ID",
    "resolve_ollama_adapter_settings",
]
