"""Concrete Provider Registry Service implementation."""

from __future__ import annotations

from typing import Iterable

from packages.switchyard_shared.llm import (
    AlreadyRegisteredError,
    BackendFailureError,
    CallContext,
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    InvalidArgumentError,
    ModelInfo,
    Provider,
    ProviderNotFoundError,
)
from packages.switchyard_shared.locks import ReadWriteLock
from packages.switchyard_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from services.provider_registry.component import SERVICE_COMPONENT_ID
from services.provider_registry.service import ProviderRegistryService

_LOGGER = get_logger(__name__)
_DISPATCH_FIELDS = ("provider_name", "model_id")


class DefaultProviderRegistryService(ProviderRegistryService):
    """Registry backed by a dict guarded by a reader/writer lock.

    Provider calls are always made after the lock is released, so a slow
    backend never blocks registration or lookups.
    """

    def __init__(self, *, providers: Iterable[Provider] = ()) -> None:
        self._lock = ReadWriteLock()
        self._providers: dict[str, Provider] = {}
        for provider in providers:
            self.register_provider(provider=provider)

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def register_provider(self, *, provider: Provider) -> None:
        """Register ``provider`` under ``provider.name``.

        Fails without touching the map when the provider is missing, its name
        is empty, or the name is already taken.
        """
        if provider is None:
            raise InvalidArgumentError("provider cannot be None")
        name = provider.name
        if not name:
            raise InvalidArgumentError("provider name cannot be empty")

        with self._lock.write():
            if name in self._providers:
                raise AlreadyRegisteredError(
                    f"provider {name} already registered", provider=name
                )
            self._providers[name] = provider
        with log_context({fields.PROVIDER: name}):
            _LOGGER.info("Registered provider %s", name)

    def get_provider(self, *, name: str) -> Provider:
        with self._lock.read():
            provider = self._providers.get(name)
        if provider is None:
            _LOGGER.info("Provider lookup missed: %s", name)
            raise ProviderNotFoundError(f"provider {name} not found", provider=name)
        return provider

    def list_providers(self) -> list[str]:
        with self._lock.read():
            return list(self._providers)

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def list_models(self, *, ctx: CallContext) -> dict[str, list[ModelInfo]]:
        """Collect every provider's catalog; the first failure aborts the call."""
        with self._lock.read():
            snapshot = list(self._providers.items())

        models: dict[str, list[ModelInfo]] = {}
        for name, provider in snapshot:
            ctx.raise_if_done(operation="list_models")
            try:
                models[name] = list(provider.list_models(ctx=ctx))
            except Exception as exc:
                raise BackendFailureError(
                    f"failed to list models for provider {name}: {exc}",
                    operation="list_models",
                    provider=name,
                ) from exc
        return models

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=_DISPATCH_FIELDS,
    )
    def get_model(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
    ) -> ModelInfo:
        ctx.raise_if_done(operation="get_model")
        provider = self.get_provider(name=provider_name)
        return provider.get_model(ctx=ctx, model_id=model_id)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=_DISPATCH_FIELDS,
    )
    def complete(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
        request: CompletionRequest,
    ) -> CompletionResponse:
        ctx.raise_if_done(operation="complete")
        provider = self.get_provider(name=provider_name)
        return provider.complete(ctx=ctx, model_id=model_id, request=request)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=_DISPATCH_FIELDS,
    )
    def chat(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
        request: ChatRequest,
    ) -> ChatResponse:
        ctx.raise_if_done(operation="chat")
        provider = self.get_provider(name=provider_name)
        return provider.chat(ctx=ctx, model_id=model_id, request=request)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=_DISPATCH_FIELDS,
    )
    def embed(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
        request: EmbeddingRequest,
    ) -> EmbeddingResponse:
        ctx.raise_if_done(operation="embed")
        provider = self.get_provider(name=provider_name)
        return provider.embed(ctx=ctx, model_id=model_id, request=request)
