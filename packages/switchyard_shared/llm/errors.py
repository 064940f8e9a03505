"""Exception hierarchy for provider registration, dispatch and embedding.

Every exception carries a human-readable ``message`` and declares the shared
error code and category it maps to, so callers can turn any failure into an
``ErrorDetail`` with ``to_error_detail()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from packages.switchyard_shared.errors import ErrorCategory, ErrorDetail, codes


@dataclass(eq=False)
class SwitchyardError(Exception):
    """Base class for all Switchyard failures."""

    message: str

    code: ClassVar[str] = codes.INTERNAL_ERROR
    category: ClassVar[ErrorCategory] = ErrorCategory.INTERNAL
    retryable: ClassVar[bool] = False

    def __str__(self) -> str:
        return self.message

    def to_error_detail(self) -> ErrorDetail:
        """Describe this failure as a shared ``ErrorDetail``."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            category=self.category,
            retryable=self.retryable,
            metadata=self._metadata(),
        )

    def _metadata(self) -> dict[str, str]:
        metadata = {"exception_type": type(self).__name__}
        cause = self.__cause__
        if cause is not None:
            metadata["cause_type"] = type(cause).__name__
        return metadata


@dataclass(eq=False)
class InvalidArgumentError(SwitchyardError):
    """A caller passed a missing or malformed argument."""

    code: ClassVar[str] = codes.INVALID_ARGUMENT
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION


@dataclass(eq=False)
class AlreadyRegisteredError(SwitchyardError):
    """A provider with the same name is already registered."""

    provider: str = ""

    code: ClassVar[str] = codes.ALREADY_EXISTS
    category: ClassVar[ErrorCategory] = ErrorCategory.CONFLICT


@dataclass(eq=False)
class NotFoundError(SwitchyardError):
    """A named provider or model does not exist."""

    code: ClassVar[str] = codes.NOT_FOUND
    category: ClassVar[ErrorCategory] = ErrorCategory.NOT_FOUND


@dataclass(eq=False)
class ProviderNotFoundError(NotFoundError):
    """No provider is registered under the requested name."""

    provider: str = ""


@dataclass(eq=False)
class ModelNotFoundError(NotFoundError):
    """A provider does not know the requested model."""

    provider: str = ""
    model: str = ""


@dataclass(eq=False)
class UnsupportedContentTypeError(SwitchyardError):
    """Embedding content is neither text, bytes nor a textual object."""

    content_type: str = ""

    code: ClassVar[str] = codes.UNSUPPORTED_CONTENT_TYPE
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION


@dataclass(eq=False)
class DimensionMismatchError(SwitchyardError):
    """A returned embedding does not have the expected number of values."""

    expected: int = 0
    actual: int = 0

    code: ClassVar[str] = codes.DIMENSION_MISMATCH
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION


@dataclass(eq=False)
class BackendFailureError(SwitchyardError):
    """A provider's underlying call failed; the original error is ``__cause__``."""

    operation: str = ""
    provider: str = ""

    code: ClassVar[str] = codes.DEPENDENCY_FAILURE
    category: ClassVar[ErrorCategory] = ErrorCategory.DEPENDENCY
    retryable: ClassVar[bool] = True

    def _metadata(self) -> dict[str, str]:
        metadata = super()._metadata()
        if self.operation:
            metadata["operation"] = self.operation
        if self.provider:
            metadata["provider"] = self.provider
        return metadata


@dataclass(eq=False)
class BatchEmbeddingError(BackendFailureError):
    """One item of a batch failed, so the whole batch failed."""

    index: int = -1


@dataclass(eq=False)
class ContextCancelledError(SwitchyardError):
    """The call context was cancelled before the call finished."""

    code: ClassVar[str] = codes.DEPENDENCY_TIMEOUT
    category: ClassVar[ErrorCategory] = ErrorCategory.DEPENDENCY


@dataclass(eq=False)
class DeadlineExceededError(ContextCancelledError):
    """The call context's deadline passed before the call finished."""
