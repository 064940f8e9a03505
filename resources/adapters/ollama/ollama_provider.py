"""Provider implementation for a local Ollama daemon over its HTTP API."""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from packages.switchyard_shared.config import SwitchyardSettings
from packages.switchyard_shared.http import HttpClient, HttpClientError
from packages.switchyard_shared.llm import (
    BackendFailureError,
    CallContext,
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    InvalidArgumentError,
    Message,
    ModelInfo,
    Provider,
    Usage,
)
from packages.switchyard_shared.logging import get_logger, public_api_instrumented
from resources.adapters.ollama.component import PROVIDER_NAME, RESOURCE_COMPONENT_ID
from resources.adapters.ollama.config import (
    OllamaAdapterSettings,
    is_valid_endpoint,
    resolve_ollama_adapter_settings,
)

_LOGGER = get_logger(__name__)
_MODEL_FIELDS = ("model_id",)


class OllamaProvider(Provider):
    """Ollama provider backed by non-streaming ``/api/*`` JSON calls."""

    def __init__(
        self,
        *,
        settings: OllamaAdapterSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = HttpClient(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_endpoint(
        cls,
        endpoint: str,
        *,
        timeout_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> OllamaProvider:
        """Build a provider for ``endpoint``; reject anything but an http(s) URL."""
        if not isinstance(endpoint, str) or not is_valid_endpoint(endpoint):
            raise InvalidArgumentError(f"invalid endpoint URL: {endpoint!r}")
        values: dict[str, Any] = {"base_url": endpoint}
        if timeout_seconds is not None:
            values["timeout_seconds"] = timeout_seconds
        return cls(settings=OllamaAdapterSettings(**values), transport=transport)

    @classmethod
    def from_settings(cls, settings: SwitchyardSettings) -> OllamaProvider:
        return cls(settings=resolve_ollama_adapter_settings(settings))

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    @property
    def embed_model(self) -> str:
        return self._settings.embed_model

    def close(self) -> None:
        self._client.close()

    @public_api_instrumented(logger=_LOGGER, component_id=RESOURCE_COMPONENT_ID)
    def list_models(self, *, ctx: CallContext) -> list[ModelInfo]:
        """List locally pulled models with default capability metadata."""
        payload = self._call(
            ctx=ctx, operation="list_models", method="GET", path="/api/tags"
        )
        models = payload.get("models") or []
        if not isinstance(models, list):
            raise BackendFailureError(
                "invalid ollama response: models is not a list",
                operation="list_models",
                provider=PROVIDER_NAME,
            )
        return [
            self._default_model_info(str(_field(item, "name", operation="list_models")))
            for item in models
        ]

    def get_model(self, *, ctx: CallContext, model_id: str) -> ModelInfo:
        """Return static defaults for ``model_id`` without contacting the daemon."""
        ctx.raise_if_done(operation="get_model")
        return self._default_model_info(model_id)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=RESOURCE_COMPONENT_ID,
        id_fields=_MODEL_FIELDS,
    )
    def complete(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: CompletionRequest,
    ) -> CompletionResponse:
        payload = self._call(
            ctx=ctx,
            operation="complete",
            method="POST",
            path="/api/generate",
            json={
                "model": model_id,
                "prompt": request.prompt,
                "stream": False,
                "options": _options(request),
            },
        )
        text = _field(payload, "response", operation="complete")
        return CompletionResponse(
            text=str(text),
            usage=_usage(payload),
            metadata=_metadata(payload),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=RESOURCE_COMPONENT_ID,
        id_fields=_MODEL_FIELDS,
    )
    def chat(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: ChatRequest,
    ) -> ChatResponse:
        payload = self._call(
            ctx=ctx,
            operation="chat",
            method="POST",
            path="/api/chat",
            json={
                "model": model_id,
                "messages": [
                    {"role": message.role, "content": message.content}
                    for message in request.messages
                ],
                "stream": False,
                "options": _options(request),
            },
        )
        raw_message = _field(payload, "message", operation="chat")
        return ChatResponse(
            message=Message(
                role=str(_field(raw_message, "role", operation="chat")),
                content=str(_field(raw_message, "content", operation="chat")),
            ),
            usage=_usage(payload),
            metadata=_metadata(payload),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=RESOURCE_COMPONENT_ID,
        id_fields=_MODEL_FIELDS,
    )
    def embed(
        self,
        *,
        ctx: CallContext,
        model_id: str,
        request: EmbeddingRequest,
    ) -> EmbeddingResponse:
        payload = self._call(
            ctx=ctx,
            operation="embed",
            method="POST",
            path="/api/embeddings",
            json={"model": model_id, "prompt": request.input},
        )
        raw = _field(payload, "embedding", operation="embed")
        try:
            embedding = tuple(float(value) for value in raw)
        except (TypeError, ValueError) as exc:
            raise BackendFailureError(
                "invalid ollama response: embedding values are not numeric",
                operation="embed",
                provider=PROVIDER_NAME,
            ) from exc
        # The daemon reports no token counts for embeddings.
        approx_tokens = len(request.input)
        return EmbeddingResponse(
            embedding=embedding,
            usage=Usage(prompt_tokens=approx_tokens, total_tokens=approx_tokens),
        )

    def _default_model_info(self, model_id: str) -> ModelInfo:
        return ModelInfo(
            name=model_id,
            context_window_size=self._settings.default_context_window,
            max_output_tokens=self._settings.default_max_output_tokens,
        )

    def _call(
        self,
        *,
        ctx: CallContext,
        operation: str,
        method: str,
        path: str,
        json: Mapping[str, Any] | None = None,
    ) -> Mapping[str, Any]:
        """Send one request bounded by ``ctx`` and return the decoded object."""
        kwargs: dict[str, Any] = {
            "timeout_seconds": ctx.bound_timeout(self._settings.timeout_seconds)
        }
        if json is not None:
            kwargs["json"] = dict(json)
        try:
            payload = ctx.run(
                lambda: self._client.request_json(method, path, **kwargs),
                operation=operation,
            )
        except HttpClientError as exc:
            interrupted = ctx.error(operation=operation)
            if interrupted is not None:
                raise interrupted from exc
            raise BackendFailureError(
                f"ollama {operation} request failed: {exc}",
                operation=operation,
                provider=PROVIDER_NAME,
            ) from exc

        if not isinstance(payload, Mapping):
            raise BackendFailureError(
                "invalid ollama response: expected a JSON object",
                operation=operation,
                provider=PROVIDER_NAME,
            )
        return payload


def _options(request: CompletionRequest | ChatRequest) -> dict[str, Any]:
    options: dict[str, Any] = {
        "temperature": request.temperature,
        "top_p": request.top_p,
    }
    if request.stop:
        options["stop"] = list(request.stop)
    if request.max_tokens > 0:
        options["num_predict"] = request.max_tokens
    return options


def _usage(payload: Mapping[str, Any]) -> Usage:
    prompt_tokens = int(payload.get("prompt_eval_count") or 0)
    completion_tokens = int(payload.get("eval_count") or 0)
    return Usage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )


def _metadata(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: payload[key]
        for key in ("model", "created_at", "done_reason")
        if payload.get(key) not in (None, "")
    }


def _field(payload: object, name: str, *, operation: str) -> Any:
    """Read one required field from a decoded JSON object."""
    value = payload.get(name) if isinstance(payload, Mapping) else None
    if value is None:
        raise BackendFailureError(
            f"invalid ollama response: missing {name}",
            operation=operation,
            provider=PROVIDER_NAME,
        )
    return value
