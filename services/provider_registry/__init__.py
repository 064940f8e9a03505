"""Provider Registry Service: named LLM providers behind one dispatch API."""

from .adapters import LlmAdapter, new_embedding_func_float32, new_embedding_func_float64
from .boot import ProviderRuntime, bootstrap
from .component import SERVICE_COMPONENT_ID
from .config import (
    EmbedderSettings,
    ProviderRegistryServiceSettings,
    resolve_provider_registry_settings,
)
from .embedder import EmbeddingBackend, LlmEmbedder, TextContent, normalize_content
from .implementation import DefaultProviderRegistryService
from .service import (
    ProviderRegistryService,
    build_llm_embedder,
    build_provider_registry_service,
)

__all__ = [
    "DefaultProviderRegistryService",
    "EmbedderSettings",
    "EmbeddingBackend",
    "LlmAdapter",
    "LlmEmbedder",
    "ProviderRegistryService",
    "ProviderRegistryServiceSettings",
    "ProviderRuntime",
    "SERVICE_COMPONENT_ID",
    "TextContent",
    "bootstrap",
    "build_llm_embedder",
    "build_provider_registry_service",
    "new_embedding_func_float32",
    "new_embedding_func_float64",
    "normalize_content",
    "resolve_provider_registry_settings",
]
