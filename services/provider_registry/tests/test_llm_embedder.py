"""Behavior tests for the bounded batch embedder."""

from __future__ import annotations

import random
import time

import pytest

from packages.switchyard_shared.config import SwitchyardSettings
from packages.switchyard_shared.llm import (
    BackendFailureError,
    BatchEmbeddingError,
    DimensionMismatchError,
    ProviderNotFoundError,
    UnsupportedContentTypeError,
    background,
)
from services.provider_registry.embedder import LlmEmbedder, normalize_content
from services.provider_registry.implementation import DefaultProviderRegistryService
from services.provider_registry.service import build_llm_embedder
from services.provider_registry.tests.fakes import ConcurrencyProbe, FakeProvider

EXPECTED = [0.1, 0.2, 0.3]


class _Note:
    def __init__(self, text: str) -> None:
        self._text = text

    def __str__(self) -> str:
        return self._text


def _embedder(
    provider: FakeProvider | None = None,
    *,
    dimensions: int = 3,
    max_pool_size: int = 10,
) -> LlmEmbedder:
    registry = DefaultProviderRegistryService(
        providers=[provider or FakeProvider(provider_name="test")]
    )
    return LlmEmbedder(
        backend=registry,
        provider="test",
        model="embed-model",
        dimensions=dimensions,
        max_pool_size=max_pool_size,
    )


def test_constructor_keeps_configuration_and_default_pool_size() -> None:
    embedder = LlmEmbedder(
        backend=DefaultProviderRegistryService(),
        provider="test",
        model="embed-model",
        dimensions=3,
    )

    assert embedder.provider == "test"
    assert embedder.model == "embed-model"
    assert embedder.dimensions == 3
    assert embedder.max_pool_size == 10


@pytest.mark.parametrize(
    ("size", "expected"),
    [(5, 5), (1, 1), (0, 10), (-1, 10)],
)
def test_set_max_pool_size(size: int, expected: int) -> None:
    embedder = _embedder()

    embedder.set_max_pool_size(size)

    assert embedder.max_pool_size == expected


def test_zero_pool_size_after_positive_restores_default() -> None:
    embedder = _embedder()
    embedder.set_max_pool_size(5)

    embedder.set_max_pool_size(0)

    assert embedder.max_pool_size == 10


@pytest.mark.parametrize(
    "content",
    ["test text", b"test bytes", bytearray(b"test bytes"), _Note("test note")],
)
def test_embed_accepts_textual_content(content: object) -> None:
    assert _embedder().embed(ctx=background(), content=content) == EXPECTED


@pytest.mark.parametrize("content", [123, 1.5, True, None, {"a": 1}, ["a"], ("a",)])
def test_embed_rejects_non_textual_content(content: object) -> None:
    provider = FakeProvider(provider_name="test")

    with pytest.raises(UnsupportedContentTypeError, match="unsupported content type"):
        _embedder(provider).embed(ctx=background(), content=content)

    assert provider.calls == []


def test_normalize_content_replaces_invalid_utf8() -> None:
    assert normalize_content(b"ok\xff") == "ok\ufffd"


def test_embed_sends_normalized_text_with_configured_model() -> None:
    provider = FakeProvider(provider_name="test")

    _embedder(provider).embed(ctx=background(), content=b"hello")

    assert provider.calls[0].model_id == "embed-model"
    assert provider.calls[0].request.input == "hello"
    assert provider.calls[0].request.model == "embed-model"


def test_embed_returns_fresh_mutable_vector() -> None:
    embedder = _embedder()

    first = embedder.embed(ctx=background(), content="x")
    first.append(9.9)
    second = embedder.embed(ctx=background(), content="x")

    assert second == EXPECTED


def test_embed_checks_expected_dimension() -> None:
    provider = FakeProvider(provider_name="test", embedding=(0.1, 0.2))

    with pytest.raises(DimensionMismatchError) as exc_info:
        _embedder(provider, dimensions=3).embed(ctx=background(), content="x")

    assert str(exc_info.value) == "expected embedding dimension 3, got 2"
    assert (exc_info.value.expected, exc_info.value.actual) == (3, 2)


def test_embed_skips_dimension_check_when_unset() -> None:
    provider = FakeProvider(provider_name="test", embedding=(0.1, 0.2))

    assert _embedder(provider, dimensions=0).embed(ctx=background(), content="x") == [
        0.1,
        0.2,
    ]


def test_embed_wraps_backend_failure_with_cause() -> None:
    cause = RuntimeError("connection refused")
    provider = FakeProvider(provider_name="test", embed_error=cause)

    with pytest.raises(BackendFailureError) as exc_info:
        _embedder(provider).embed(ctx=background(), content="x")

    assert str(exc_info.value) == "failed to get embedding: connection refused"
    assert exc_info.value.__cause__ is cause


def test_embed_wraps_unknown_provider_lookup() -> None:
    embedder = LlmEmbedder(
        backend=DefaultProviderRegistryService(),
        provider="missing",
        model="embed-model",
    )

    with pytest.raises(BackendFailureError) as exc_info:
        embedder.embed(ctx=background(), content="x")

    assert isinstance(exc_info.value.__cause__, ProviderNotFoundError)


def test_batch_embed_returns_vectors_in_input_order() -> None:
    embedder = _embedder(max_pool_size=2)

    result = embedder.batch_embed(ctx=background(), contents=["x", "y", "z"])

    assert result == [EXPECTED, EXPECTED, EXPECTED]


def test_batch_embed_preserves_order_under_random_latency() -> None:
    rng = random.Random(7)
    delays = {str(index): rng.uniform(0.0, 0.02) for index in range(20)}

    def slow_embed(text: str) -> tuple[float, ...]:
        time.sleep(delays[text])
        return (float(text),)

    provider = FakeProvider(provider_name="test", embed_fn=slow_embed)
    embedder = _embedder(provider, dimensions=1, max_pool_size=4)

    result = embedder.batch_embed(
        ctx=background(), contents=[str(index) for index in range(20)]
    )

    assert result == [[float(index)] for index in range(20)]


def test_batch_embed_never_exceeds_pool_size() -> None:
    probe = ConcurrencyProbe()
    provider = FakeProvider(provider_name="test", embed_fn=probe)
    embedder = _embedder(provider, dimensions=0, max_pool_size=3)

    result = embedder.batch_embed(ctx=background(), contents=["abc"] * 12)

    assert result == [[3.0]] * 12
    assert 1 <= probe.peak <= 3


def test_batch_embed_single_worker_runs_sequentially() -> None:
    probe = ConcurrencyProbe(delay_seconds=0.005)
    provider = FakeProvider(provider_name="test", embed_fn=probe)
    embedder = _embedder(provider, dimensions=0, max_pool_size=1)

    embedder.batch_embed(ctx=background(), contents=["a", "b", "c", "d"])

    assert probe.peak == 1


def test_batch_embed_of_empty_input_returns_empty_list() -> None:
    provider = FakeProvider(provider_name="test")

    assert _embedder(provider).batch_embed(ctx=background(), contents=[]) == []
    assert provider.calls == []


def test_batch_embed_fails_whole_batch_on_item_failure() -> None:
    def flaky(text: str) -> tuple[float, ...]:
        if text == "bad":
            raise RuntimeError("backend exploded")
        return (0.1, 0.2, 0.3)

    provider = FakeProvider(provider_name="test", embed_fn=flaky)

    with pytest.raises(BatchEmbeddingError) as exc_info:
        _embedder(provider).batch_embed(
            ctx=background(), contents=["ok", "bad", "ok"]
        )

    assert exc_info.value.index == 1
    assert str(exc_info.value).startswith("batch embedding failed: ")
    assert "backend exploded" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, BackendFailureError)
    assert isinstance(exc_info.value, BackendFailureError)


def test_batch_embed_reports_lowest_index_failure() -> None:
    def failing(text: str) -> tuple[float, ...]:
        raise RuntimeError(f"failed {text}")

    provider = FakeProvider(provider_name="test", embed_fn=failing)

    with pytest.raises(BatchEmbeddingError) as exc_info:
        _embedder(provider, max_pool_size=4).batch_embed(
            ctx=background(), contents=["a", "b", "c", "d"]
        )

    assert exc_info.value.index == 0
    assert "failed a" in str(exc_info.value)


def test_batch_embed_rejects_unsupported_item_before_any_call() -> None:
    provider = FakeProvider(provider_name="test")

    with pytest.raises(BatchEmbeddingError) as exc_info:
        _embedder(provider).batch_embed(ctx=background(), contents=["x", 42, "z"])

    assert exc_info.value.index == 1
    assert isinstance(exc_info.value.__cause__, UnsupportedContentTypeError)
    assert provider.calls == []


def test_batch_embed_dimension_mismatch_fails_batch() -> None:
    provider = FakeProvider(provider_name="test", embedding=(0.1, 0.2))

    with pytest.raises(BatchEmbeddingError) as exc_info:
        _embedder(provider, dimensions=3).batch_embed(
            ctx=background(), contents=["x", "y"]
        )

    assert isinstance(exc_info.value.__cause__, DimensionMismatchError)


def test_batch_embed_accepts_empty_string_items() -> None:
    provider = FakeProvider(provider_name="test")

    result = _embedder(provider).batch_embed(ctx=background(), contents=["", "x"])

    assert result == [EXPECTED, EXPECTED]
    assert sorted(call.request.input for call in provider.calls) == ["", "x"]


def test_batch_embed_never_returns_a_short_list(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    embedder = _embedder()
    monkeypatch.setattr(
        embedder,
        "_embed_text",
        lambda *, ctx, text: None if text == "y" else list(EXPECTED),
    )

    with pytest.raises(BatchEmbeddingError, match="item 1: no result") as exc_info:
        embedder.batch_embed(ctx=background(), contents=["x", "y", "z"])

    assert exc_info.value.index == 1


def test_build_llm_embedder_reads_service_settings() -> None:
    settings = SwitchyardSettings(
        components={
            "service": {
                "provider_registry": {
                    "embedder": {
                        "provider": "test",
                        "model": "nomic-embed-text",
                        "dimensions": 768,
                        "max_pool_size": 4,
                    }
                }
            }
        }
    )

    embedder = build_llm_embedder(
        settings=settings,
        registry=DefaultProviderRegistryService(),
    )

    assert embedder.provider == "test"
    assert embedder.model == "nomic-embed-text"
    assert embedder.dimensions == 768
    assert embedder.max_pool_size == 4
