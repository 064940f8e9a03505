"""Authoritative in-process Python API for the Provider Registry Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

from packages.switchyard_shared.config import SwitchyardSettings
from packages.switchyard_shared.llm import (
    CallContext,
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    ModelInfo,
    Provider,
)

if TYPE_CHECKING:
    from services.provider_registry.embedder import LlmEmbedder


class ProviderRegistryService(ABC):
    """Name -> provider map with uniform dispatch to the selected provider."""

    @abstractmethod
    def register_provider(self, *, provider: Provider) -> None:
        """Register one provider under its name."""

    @abstractmethod
    def get_provider(self, *, name: str) -> Provider:
        """Return the provider registered under ``name``."""

    @abstractmethod
    def list_providers(self) -> list[str]:
        """Return the names of all registered providers."""

    @abstractmethod
    def list_models(self, *, ctx: CallContext) -> dict[str, list[ModelInfo]]:
        """Return every provider's model catalog keyed by provider name."""

    @abstractmethod
    def get_model(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
    ) -> ModelInfo:
        """Return metadata for one model of one provider."""

    @abstractmethod
    def complete(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
        request: CompletionRequest,
    ) -> CompletionResponse:
        """Forward one completion request to the named provider."""

    @abstractmethod
    def chat(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
        request: ChatRequest,
    ) -> ChatResponse:
        """Forward one chat request to the named provider."""

    @abstractmethod
    def embed(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
        request: EmbeddingRequest,
    ) -> EmbeddingResponse:
        """Forward one embedding request to the named provider."""


def build_provider_registry_service(
    *,
    settings: SwitchyardSettings,
    providers: Sequence[Provider] | None = None,
) -> ProviderRegistryService:
    """Build the default registry and register providers.

    When ``providers`` is omitted, the providers named in
    ``components.service.provider_registry.providers`` are built from their
    adapter settings.
    """
    from services.provider_registry.config import resolve_provider_registry_settings
    from services.provider_registry.implementation import (
        DefaultProviderRegistryService,
    )

    if providers is None:
        service_settings = resolve_provider_registry_settings(settings)
        providers = [
            _build_provider(name=name, settings=settings)
            for name in service_settings.providers
        ]
    return DefaultProviderRegistryService(providers=providers)


def build_llm_embedder(
    *,
    settings: SwitchyardSettings,
    registry: ProviderRegistryService,
) -> LlmEmbedder:
    """Build a batch embedder bound to the configured provider and model."""
    from services.provider_registry.config import resolve_provider_registry_settings
    from services.provider_registry.embedder import LlmEmbedder

    embedder_settings = resolve_provider_registry_settings(settings).embedder
    embedder = LlmEmbedder(
        backend=registry,
        provider=embedder_settings.provider,
        model=embedder_settings.model,
        dimensions=embedder_settings.dimensions,
    )
    embedder.set_max_pool_size(embedder_settings.max_pool_size)
    return embedder


def _build_provider(*, name: str, settings: SwitchyardSettings) -> Provider:
    """Build one provider adapter from its ``components.adapter`` section."""
    if name == "ollama":
        from resources.adapters.ollama import OllamaProvider

        return OllamaProvider.from_settings(settings)
    if name == "litellm":
        from resources.adapters.litellm import LiteLlmProvider

        return LiteLlmProvider.from_settings(settings)
    raise ValueError(f"unsupported provider: {name!r}")
