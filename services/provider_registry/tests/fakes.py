"""In-memory provider fakes shared by Provider Registry Service tests."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from packages.switchyard_shared.llm import (
    CallContext,
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    Message,
    ModelInfo,
    ModelNotFoundError,
    Provider,
)


@dataclass
class _Call:
    operation: str
    model_id: str
    request: object = None


@dataclass
class FakeProvider(Provider):
    """Provider double with scripted catalog, responses and failures."""

    provider_name: str = "fake"
    models: list[ModelInfo] = field(default_factory=list)
    embedding: tuple[float, ...] = (0.1, 0.2, 0.3)
    list_error: Exception | None = None
    embed_error: Exception | None = None
    embed_fn: Callable[[str], tuple[float, ...]] | None = None
    calls: list[_Call] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.provider_name

    @property
    def embed_model(self) -> str:
        return "fake-embed"

    def list_models(self, *, ctx: CallContext) -> list[ModelInfo]:
        self.calls.append(_Call(operation="list_models", model_id=""))
        if self.list_error is not None:
            raise self.list_error
        return list(self.models)

    def get_model(self, *, ctx: CallContext, model_id: str) -> ModelInfo:
        self.calls.append(_Call(operation="get_model", model_id=model_id))
        for model in self.models:
            if model.name == model_id:
                return model
        raise ModelNotFoundError(
            f"model {model_id} not found",
            provider=self.provider_name,
            model=model_id,
        )

    def complete(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: CompletionRequest,
    ) -> CompletionResponse:
        self.calls.append(
            _Call(operation="complete", model_id=model_id, request=request)
        )
        return CompletionResponse(text=f"completed:{request.prompt}")

    def chat(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: ChatRequest,
    ) -> ChatResponse:
        self.calls.append(_Call(operation="chat", model_id=model_id, request=request))
        return ChatResponse(
            message=Message(role="assistant", content=request.messages[-1].content)
        )

    def embed(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: EmbeddingRequest,
    ) -> EmbeddingResponse:
        self.calls.append(_Call(operation="embed", model_id=model_id, request=request))
        if self.embed_error is not None:
            raise self.embed_error
        if self.embed_fn is not None:
            return EmbeddingResponse(embedding=self.embed_fn(request.input))
        return EmbeddingResponse(embedding=self.embedding)


@dataclass
class GatedProvider(FakeProvider):
    """Provider whose ``list_models`` blocks until ``release`` is set."""

    entered: threading.Event = field(default_factory=threading.Event)
    release: threading.Event = field(default_factory=threading.Event)

    def list_models(self, *, ctx: CallContext) -> list[ModelInfo]:
        self.entered.set()
        self.release.wait(timeout=5.0)
        return super().list_models(ctx=ctx)

class ConcurrencyProbe:
    """Track the peak number of overlapping calls."""

    def __init__(self, *, delay_seconds: float = 0.02) -> None:
        self._lock = threading.Lock()
        self._delay_seconds = delay_seconds
        self.in_flight = 0
        self.peak = 0

    def __call__(self, text: str) -> tuple[float, ...]:
        with self._lock:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        try:
            time.sleep(self._delay_seconds)
            return (float(len(text)),)
        finally:
            with self._lock:
                self.in_flight -= 1
