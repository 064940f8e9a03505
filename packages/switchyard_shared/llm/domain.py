"""Request, response and model metadata shapes shared by every provider."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelInfo(BaseModel):
    """Static description of one model offered by a provider."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    context_window_size: int = 0
    max_output_tokens: int = 0
    supports_image_input: bool = False
    supports_audio_input: bool = False
    supports_vision_output: bool = False
    pricing_per_input_token: float = 0.0
    pricing_per_output_token: float = 0.0


class Message(BaseModel):
    """One chat message."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: str
    content: str
    name: str = ""
    context: dict[str, Any] = Field(default_factory=dict)


class Usage(BaseModel):
    """Token accounting for one backend call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class _GenerationParams(BaseModel):
    """Sampling parameters common to completion and chat requests."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_tokens: int = Field(default=0, ge=0)
    temperature: float = 0.0
    top_p: float = 0.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    stop: tuple[str, ...] = ()
    metadata: dict[str, Any] = Field(default_factory=dict)


class CompletionRequest(_GenerationParams):
    """Plain-prompt text completion request."""

    prompt: str


class ChatRequest(_GenerationParams):
    """Chat completion request over an ordered message history."""

    messages: tuple[Message, ...]


class EmbeddingRequest(BaseModel):
    """Embedding request for one input text."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    input: str
    model: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class CompletionResponse(BaseModel):
    """Text completion result."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str
    usage: Usage = Field(default_factory=Usage)
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: int = 0


class ChatResponse(BaseModel):
    """Chat completion result."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: Message
    usage: Usage = Field(default_factory=Usage)
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: int = 0


class EmbeddingResponse(BaseModel):
    """Embedding result; ``embedding`` is immutable, copy it to mutate."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    embedding: tuple[float, ...]
    usage: Usage = Field(default_factory=Usage)
    metadata: dict[str, Any] = Field(default_factory=dict)
