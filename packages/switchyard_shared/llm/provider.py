"""Capability contract every LLM backend integration implements."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.switchyard_shared.llm.context import CallContext
from packages.switchyard_shared.llm.domain import (
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    ModelInfo,
)


class Provider(ABC):
    """One backend (a serving daemon, a hosted API, ...) behind a stable name.

    Implementations must honour ``ctx``: a cancelled or expired context
    makes the call fail with ``ContextCancelledError`` instead of hanging.
    Backend failures are raised as ``BackendFailureError`` with the original
    exception chained.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key for this provider, e.g. ``"ollama"``."""

    @property
    @abstractmethod
    def embed_model(self) -> str:
        """Model used when a caller asks for "the" embedding model."""

    @abstractmethod
    def list_models(self, *, ctx: CallContext) -> list[ModelInfo]:
        """Return every model the backend currently offers."""

    @abstractmethod
    def get_model(self, *, ctx: CallContext, model_id: str) -> ModelInfo:
        """Return metadata for one model."""

    @abstractmethod
    def complete(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: CompletionRequest,
    ) -> CompletionResponse:
        """Generate a text completion for a plain prompt."""

    @abstractmethod
    def chat(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: ChatRequest,
    ) -> ChatResponse:
        """Generate the next assistant message for a chat history."""

    @abstractmethod
    def embed(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: EmbeddingRequest,
    ) -> EmbeddingResponse:
        """Generate one embedding vector."""
