"""Exception normalization for callers that need an ``ErrorDetail``."""

from __future__ import annotations

from . import codes
from .factories import dependency_error, internal_error, not_found_error, validation_error
from .types import ErrorDetail


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Normalize an arbitrary Python exception into an ``ErrorDetail``.

    Switchyard's own exceptions know their code and category and should be
    converted with their ``to_error_detail`` method; this function is the
    fallback for everything else.
    """
    to_detail = getattr(exc, "to_error_detail", None)
    if callable(to_detail):
        detail = to_detail()
        if isinstance(detail, ErrorDetail):
            return detail

    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, (ValueError, TypeError)):
        return validation_error(str(exc), code=codes.INVALID_ARGUMENT, metadata=metadata)

    if isinstance(exc, KeyError):
        return not_found_error(str(exc), metadata=metadata)

    if isinstance(exc, TimeoutError):
        return dependency_error(
            str(exc) or "dependency timeout",
            code=codes.DEPENDENCY_TIMEOUT,
            metadata=metadata,
        )

    if isinstance(exc, ConnectionError):
        return dependency_error(
            str(exc) or "dependency unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            metadata=metadata,
        )

    return internal_error(
        str(exc) or "unexpected exception",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )
