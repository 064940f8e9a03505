"""In-process provider backed by the ``litellm`` Python package."""

from __future__ import annotations

import os
from typing import Any, Mapping

import litellm

from packages.switchyard_shared.config import SwitchyardSettings
from packages.switchyard_shared.llm import (
    BackendFailureError,
    CallContext,
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    ContextCancelledError,
    EmbeddingRequest,
    EmbeddingResponse,
    InvalidArgumentError,
    Message,
    ModelInfo,
    ModelNotFoundError,
    Provider,
    Usage,
)
from packages.switchyard_shared.logging import get_logger, public_api_instrumented
from resources.adapters.litellm.component import RESOURCE_COMPONENT_ID
from resources.adapters.litellm.config import (
    LiteLlmAdapterSettings,
    LiteLlmModelSettings,
    resolve_litellm_adapter_settings,
)

_LOGGER = get_logger(__name__)
_MODEL_FIELDS = ("model_id",)


class LiteLlmProvider(Provider):
    """Provider routing every call through ``litellm`` to one backend."""

    def __init__(self, *, settings: LiteLlmAdapterSettings) -> None:
        self._settings = settings
        self._catalog = {model.name: model for model in settings.models}

    @classmethod
    def from_settings(cls, settings: SwitchyardSettings) -> LiteLlmProvider:
        return cls(settings=resolve_litellm_adapter_settings(settings))

    @property
    def name(self) -> str:
        return self._settings.name

    @property
    def embed_model(self) -> str:
        return self._settings.embed_model

    def list_models(self, *, ctx: CallContext) -> list[ModelInfo]:
        """Return the configured model catalog in declaration order."""
        ctx.raise_if_done(operation="list_models")
        return [_model_info(model) for model in self._settings.models]

    def get_model(self, *, ctx: CallContext, model_id: str) -> ModelInfo:
        ctx.raise_if_done(operation="get_model")
        model = self._catalog.get(model_id)
        if model is None:
            raise ModelNotFoundError(
                f"model {model_id} not found",
                provider=self.name,
                model=model_id,
            )
        return _model_info(model)

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
        """Send the prompt as a single user message."""
        response = self._call_completion(
            ctx=ctx,
            operation="complete",
            model_id=model_id,
            request=request,
            messages=[{"role": "user", "content": request.prompt}],
        )
        message = _first_message(response, operation="complete")
        return CompletionResponse(
            text=_content(message, operation="complete"),
            usage=_usage(response),
            metadata={"model": _qualified_model(self._settings.backend, model_id)},
            timestamp=_timestamp(response),
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
        messages = []
        for message in request.messages:
            item = {"role": message.role, "content": message.content}
            if message.name:
                item["name"] = message.name
            messages.append(item)
        response = self._call_completion(
            ctx=ctx,
            operation="chat",
            model_id=model_id,
            request=request,
            messages=messages,
        )
        message = _first_message(response, operation="chat")
        role = _optional_field(message, "role")
        return ChatResponse(
            message=Message(
                role=role if isinstance(role, str) and role else "assistant",
                content=_content(message, operation="chat"),
            ),
            usage=_usage(response),
            metadata={"model": _qualified_model(self._settings.backend, model_id)},
            timestamp=_timestamp(response),
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
        ctx.raise_if_done(operation="embed")
        module = _load_litellm_module()
        kwargs = self._request_kwargs(ctx=ctx, model_id=model_id)
        kwargs["input"] = [request.input]
        try:
            response = ctx.run(lambda: module.embedding(**kwargs), operation="embed")
        except ContextCancelledError:
            raise
        except Exception as exc:
            raise self._backend_failure(ctx=ctx, operation="embed", exc=exc) from exc

        rows = _optional_field(response, "data")
        if not isinstance(rows, list) or len(rows) == 0:
            raise self._invalid_response("embed", "missing data")
        raw = _optional_field(rows[0], "embedding")
        if not isinstance(raw, list):
            raise self._invalid_response("embed", "embedding values are missing")
        try:
            embedding = tuple(float(value) for value in raw)
        except (TypeError, ValueError) as exc:
            raise self._invalid_response(
                "embed", "embedding values are invalid"
            ) from exc
        return EmbeddingResponse(embedding=embedding, usage=_usage(response))

    def _call_completion(
        self,
        *,
        ctx: CallContext,
        operation: str,
        model_id: str,
        request: CompletionRequest | ChatRequest,
        messages: list[dict[str, str]],
    ) -> object:
        """Invoke ``litellm.completion`` with sampling parameters from ``request``."""
        ctx.raise_if_done(operation=operation)
        module = _load_litellm_module()
        kwargs = self._request_kwargs(ctx=ctx, model_id=model_id)
        kwargs["messages"] = messages
        kwargs.update(_sampling_kwargs(request))
        try:
            return ctx.run(lambda: module.completion(**kwargs), operation=operation)
        except ContextCancelledError:
            raise
        except Exception as exc:
            raise self._backend_failure(ctx=ctx, operation=operation, exc=exc) from exc

    def _request_kwargs(self, *, ctx: CallContext, model_id: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": _qualified_model(self._settings.backend, model_id),
            "timeout": ctx.bound_timeout(self._settings.timeout_seconds),
            "num_retries": self._settings.max_retries,
        }
        api_base = self._settings.api_base.strip()
        if api_base != "":
            kwargs["api_base"] = api_base
        api_key = self._resolve_api_key()
        if api_key != "":
            kwargs["api_key"] = api_key
        kwargs.update(self._settings.options)
        return kwargs

    def _resolve_api_key(self) -> str:
        """Resolve the API key from an inline value or an environment variable."""
        inline_key = self._settings.api_key.strip()
        if inline_key != "":
            return inline_key
        env_key = self._settings.api_key_env.strip()
        if env_key == "":
            return ""
        resolved = os.environ.get(env_key, "").strip()
        if resolved == "":
            raise InvalidArgumentError(
                f"provider '{self.name}' requires environment variable '{env_key}'"
            )
        return resolved

    def _backend_failure(
        self,
        *,
        ctx: CallContext,
        operation: str,
        exc: Exception,
    ) -> Exception:
        interrupted = ctx.error(operation=operation)
        if interrupted is not None:
            return interrupted
        return BackendFailureError(
            f"litellm {operation} request failed: {exc}",
            operation=operation,
            provider=self.name,
        )

    def _invalid_response(self, operation: str, detail: str) -> BackendFailureError:
        return BackendFailureError(
            f"invalid litellm response: {detail}",
            operation=operation,
            provider=self.name,
        )


def _load_litellm_module() -> Any:
    """Return the imported ``litellm`` module."""
    return litellm


def _qualified_model(backend: str, model_id: str) -> str:
    """Compose the ``<backend>/<model>`` selector LiteLLM routes on."""
    return f"{backend}/{model_id}"


def _model_info(model: LiteLlmModelSettings) -> ModelInfo:
    return ModelInfo(
        name=model.name,
        context_window_size=model.context_window_size,
        max_output_tokens=model.max_output_tokens,
        supports_image_input=model.supports_image_input,
        pricing_per_input_token=model.pricing_per_input_token,
        pricing_per_output_token=model.pricing_per_output_token,
    )


def _sampling_kwargs(request: CompletionRequest | ChatRequest) -> dict[str, Any]:
    """Forward only the sampling parameters the caller actually set."""
    kwargs: dict[str, Any] = {}
    if request.max_tokens > 0:
        kwargs["max_tokens"] = request.max_tokens
    if request.temperature:
        kwargs["temperature"] = request.temperature
    if request.top_p:
        kwargs["top_p"] = request.top_p
    if request.frequency_penalty:
        kwargs["frequency_penalty"] = request.frequency_penalty
    if request.presence_penalty:
        kwargs["presence_penalty"] = request.presence_penalty
    if request.stop:
        kwargs["stop"] = list(request.stop)
    return kwargs


def _first_message(response: object, *, operation: str) -> object:
    choices = _optional_field(response, "choices")
    if not isinstance(choices, list) or len(choices) == 0:
        raise BackendFailureError(
            "invalid litellm response: missing choices", operation=operation
        )
    message = _optional_field(choices[0], "message")
    if message is None:
        raise BackendFailureError(
            "invalid litellm response: missing message", operation=operation
        )
    return message


def _content(message: object, *, operation: str) -> str:
    content = _optional_field(message, "content")
    if not isinstance(content, str):
        raise BackendFailureError(
            "invalid litellm response: message content is invalid",
            operation=operation,
        )
    return content


def _usage(response: object) -> Usage:
    usage = _optional_field(response, "usage")
    if usage is None:
        return Usage()
    prompt_tokens = int(_optional_field(usage, "prompt_tokens") or 0)
    completion_tokens = int(_optional_field(usage, "completion_tokens") or 0)
    total_tokens = int(
        _optional_field(usage, "total_tokens") or prompt_tokens + completion_tokens
    )
    return Usage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
    )


def _timestamp(response: object) -> int:
    created = _optional_field(response, "created")
    return created if isinstance(created, int) else 0


def _optional_field(response: object, field: str) -> Any:
    """Read one field from a response mapping or object, ``None`` when absent."""
    if isinstance(response, Mapping):
        return response.get(field)
    return getattr(response, field, None)
