"""Narrow consumer-facing wrappers around a single provider."""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from packages.switchyard_shared.llm import (
    BackendFailureError,
    CallContext,
    CompletionRequest,
    EmbeddingRequest,
    Provider,
)
from packages.switchyard_shared.logging import get_logger, public_api_instrumented
from services.provider_registry.component import ADAPTER_COMPONENT_ID

_LOGGER = get_logger(__name__)

DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7

EmbeddingFunc = Callable[[CallContext, str], list[float]]


class LlmAdapter:
    """Bare "complete text" and "embed text" operations for one model."""

    def __init__(self, *, provider: Provider, model: str) -> None:
        self._provider = provider
        self._model = model

    @public_api_instrumented(logger=_LOGGER, component_id=ADAPTER_COMPONENT_ID)
    def complete(self, *, ctx: CallContext, prompt: str) -> str:
        request = CompletionRequest(
            prompt=prompt,
            max_tokens=DEFAULT_MAX_TOKENS,
            temperature=DEFAULT_TEMPERATURE,
        )
        try:
            response = self._provider.complete(
                ctx=ctx, model_id=self._model, request=request
            )
        except Exception as exc:
            raise BackendFailureError(
                f"failed to complete text: {exc}",
                operation="complete",
                provider=self._provider.name,
            ) from exc
        return response.text

    @public_api_instrumented(logger=_LOGGER, component_id=ADAPTER_COMPONENT_ID)
    def embed(self, *, ctx: CallContext, text: str) -> list[float]:
        """Embed ``text`` and round each value to single precision."""
        request = EmbeddingRequest(input=text, model=self._model)
        try:
            response = self._provider.embed(
                ctx=ctx, model_id=self._model, request=request
            )
        except Exception as exc:
            raise BackendFailureError(
                f"failed to generate embedding: {exc}",
                operation="embed",
                provider=self._provider.name,
            ) from exc
        return _as_float32(response.embedding)


def new_embedding_func_float32(provider: Provider) -> EmbeddingFunc:
    """Return ``(ctx, text) -> vector`` rounded to single precision."""

    def embed(ctx: CallContext, text: str) -> list[float]:
        response = provider.embed(
            ctx=ctx,
            model_id=provider.embed_model,
            request=EmbeddingRequest(input=text),
        )
        return _as_float32(response.embedding)

    return embed


def new_embedding_func_float64(provider: Provider) -> EmbeddingFunc:
    """Return ``(ctx, text) -> vector`` with full double precision."""

    def embed(ctx: CallContext, text: str) -> list[float]:
        response = provider.embed(
            ctx=ctx,
            model_id=provider.embed_model,
            request=EmbeddingRequest(input=text),
        )
        return list(response.embedding)

    return embed


def _as_float32(vector: Sequence[float]) -> list[float]:
    """Round a vector to single precision, returned as plain Python floats."""
    return np.asarray(vector, dtype=np.float32).tolist()
