"""Provider contract, value objects and errors shared by services and adapters."""

from .domain import (
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    Message,
    ModelInfo,
    Usage,
)
from .errors import (
    AlreadyRegisteredError,
    BackendFailureError,
    BatchEmbeddingError,
    ContextCancelledError,
    DeadlineExceededError,
    DimensionMismatchError,
    InvalidArgumentError,
    ModelNotFoundError,
    NotFoundError,
    ProviderNotFoundError,
    SwitchyardError,
    UnsupportedContentTypeError,
)
from .context import CallContext, background
from .provider import Provider

__all__ = [
    "AlreadyRegisteredError",
    "BackendFailureError",
    "BatchEmbeddingError",
    "CallContext",
    "ChatRequest",
    "ChatResponse",
    "CompletionRequest",
    "CompletionResponse",
    "ContextCancelledError",
    "DeadlineExceededError",
    "DimensionMismatchError",
    "EmbeddingRequest",
    "EmbeddingResponse",
    "InvalidArgumentError",
    "Message",
    "ModelInfo",
    "ModelNotFoundError",
    "NotFoundError",
    "Provider",
    "ProviderNotFoundError",
    "SwitchyardError",
    "UnsupportedContentTypeError",
    "Usage",
    "background",
]
