"""Content -> vector helper with a concurrency-bounded batch variant."""

from __future__ import annotations

import contextvars
import numbers
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Protocol, Sequence, runtime_checkable

from packages.switchyard_shared.llm import (
    BackendFailureError,
    BatchEmbeddingError,
    CallContext,
    DimensionMismatchError,
    EmbeddingRequest,
    EmbeddingResponse,
    UnsupportedContentTypeError,
)
from packages.switchyard_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from services.provider_registry.component import EMBEDDER_COMPONENT_ID
from services.provider_registry.config import DEFAULT_MAX_POOL_SIZE

_LOGGER = get_logger(__name__)


@runtime_checkable
class TextContent(Protocol):
    """Any object whose own class defines a textual representation."""

    def __str__(self) -> str: ...


class EmbeddingBackend(Protocol):
    """The slice of the registry the embedder depends on."""

    def embed(
        self,
        *,
        ctx: CallContext,
        provider_name: str,
        model_id: str,
        request: EmbeddingRequest,
    ) -> EmbeddingResponse: ...


def normalize_content(content: Any) -> str:
    """Turn embeddable content into text or raise ``UnsupportedContentTypeError``.

    Text passes through, byte strings are decoded as UTF-8 with invalid
    sequences replaced, and objects whose class defines ``__str__`` are
    rendered with ``str()``. Numbers, booleans, ``None``, mappings and
    collections are rejected even though Python can stringify them.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content).decode("utf-8", errors="replace")
    if _is_textual(content):
        return str(content)
    raise UnsupportedContentTypeError(
        f"unsupported content type: {type(content).__name__}",
        content_type=type(content).__name__,
    )


def _is_textual(content: Any) -> bool:
    if content is None or isinstance(content, (bool, numbers.Number, Mapping)):
        return False
    if isinstance(content, (list, tuple, set, frozenset)):
        return False
    return type(content).__str__ is not object.__str__


class LlmEmbedder:
    """Embeds text through one provider/model pair of a registry.

    ``dimensions`` of zero disables the vector-length check.
    """

    def __init__(
        self,
        *,
        backend: EmbeddingBackend,
        provider: str,
        model: str,
        dimensions: int = 0,
        max_pool_size: int = DEFAULT_MAX_POOL_SIZE,
    ) -> None:
        self._backend = backend
        self._provider = provider
        self._model = model
        self._dimensions = dimensions
        self._max_pool_size = DEFAULT_MAX_POOL_SIZE
        self.set_max_pool_size(max_pool_size)

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def max_pool_size(self) -> int:
        return self._max_pool_size

    def set_max_pool_size(self, size: int) -> None:
        """Set the batch concurrency ceiling; non-positive sizes restore the default."""
        self._max_pool_size = size if size > 0 else DEFAULT_MAX_POOL_SIZE

    def validate_content(self, content: Any) -> str:
        return normalize_content(content)

    @public_api_instrumented(logger=_LOGGER, component_id=EMBEDDER_COMPONENT_ID)
    def embed(self, *, ctx: CallContext, content: Any) -> list[float]:
        """Embed one piece of content and return a fresh, caller-owned vector."""
        text = normalize_content(content)
        return self._embed_text(ctx=ctx, text=text)

    @public_api_instrumented(logger=_LOGGER, component_id=EMBEDDER_COMPONENT_ID)
    def batch_embed(
        self,
        *,
        ctx: CallContext,
        contents: Sequence[Any],
    ) -> list[list[float]]:
        """Embed every item with at most ``max_pool_size`` calls in flight.

        ``result[i]`` corresponds to ``contents[i]``. If any item fails the
        whole batch fails with ``BatchEmbeddingError`` chained to the
        lowest-index failure, and no partial results are returned.
        """
        texts: list[str] = []
        for index, content in enumerate(contents):
            try:
                texts.append(normalize_content(content))
            except UnsupportedContentTypeError as exc:
                raise BatchEmbeddingError(
                    f"batch embedding failed: item {index}: {exc}",
                    operation="batch_embed",
                    provider=self._provider,
                    index=index,
                ) from exc
        if not texts:
            return []

        results: list[list[float] | None] = [None] * len(texts)
        failures: list[BaseException | None] = [None] * len(texts)

        def work(index: int) -> None:
            try:
                results[index] = self._embed_text(ctx=ctx, text=texts[index])
            except Exception as exc:  # noqa: BLE001
                failures[index] = exc

        workers = min(self._max_pool_size, len(texts))
        batch_fields = {
            fields.PROVIDER: self._provider,
            fields.MODEL: self._model,
            fields.BATCH_SIZE: len(texts),
            fields.POOL_SIZE: workers,
        }
        with log_context(batch_fields):
            with ThreadPoolExecutor(
                max_workers=workers,
                thread_name_prefix="switchyard-embed",
            ) as pool:
                pending: list[Future[None]] = [
                    pool.submit(contextvars.copy_context().run, work, index)
                    for index in range(len(texts))
                ]
            for future in pending:
                future.result()

            for index, failure in enumerate(failures):
                if failure is None:
                    continue
                with log_context({fields.ITEM_INDEX: index}):
                    _LOGGER.warning(
                        "Batch embedding item %d of %d failed: %s",
                        index,
                        len(texts),
                        failure,
                    )
                raise BatchEmbeddingError(
                    f"batch embedding failed: {failure}",
                    operation="batch_embed",
                    provider=self._provider,
                    index=index,
                ) from failure

        vectors: list[list[float]] = []
        for index, vector in enumerate(results):
            if vector is None:
                raise BatchEmbeddingError(
                    f"batch embedding failed: item {index}: no result",
                    operation="batch_embed",
                    provider=self._provider,
                    index=index,
                )
            vectors.append(vector)
        return vectors

    def _embed_text(self, *, ctx: CallContext, text: str) -> list[float]:
        request = EmbeddingRequest(input=text, model=self._model)
        try:
            response = self._backend.embed(
                ctx=ctx,
                provider_name=self._provider,
                model_id=self._model,
                request=request,
            )
        except Exception as exc:
            raise BackendFailureError(
                f"failed to get embedding: {exc}",
                operation="embed",
                provider=self._provider,
            ) from exc

        embedding = list(response.embedding)
        if self._dimensions > 0 and len(embedding) != self._dimensions:
            raise DimensionMismatchError(
                f"expected embedding dimension {self._dimensions}, "
                f"got {len(embedding)}",
                expected=self._dimensions,
                actual=len(embedding),
            )
        return embedding
