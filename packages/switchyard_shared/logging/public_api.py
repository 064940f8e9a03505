"""Invocation logging for public registry, embedder and provider methods.

``public_api_instrumented`` wraps a method so that each call emits one
invocation record and one completion record carrying the component id, the
method name, the caller's trace id and the call duration.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping, Protocol, Sequence

from . import fields
from .context import call_scope, log_context


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str
    trace_id: str | None
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one finished public API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str]
    error_category: str | None


class PublicApiInstrumentationConcern(Protocol):
    """Hook contract for one instrumentation concern."""

    def on_invocation(self, context: InvocationContext) -> None:
        """Handle the start of one call."""

    def on_completion(self, context: CompletionContext) -> None:
        """Handle the end of one call."""


class PublicApiLoggingConcern:
    """Log invocation and completion events through a stdlib logger."""

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        with log_context(_invocation_log_context(context)):
            self._logger.debug("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        payload = _invocation_log_context(context.invocation)
        payload.update(
            {
                fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                fields.SUCCESS: context.success,
                fields.DURATION_MS: context.duration_ms,
                fields.ERRORS: context.errors,
                fields.ERROR_CATEGORY: context.error_category,
            }
        )
        with log_context(payload):
            if context.success:
                self._logger.info("Public API completion")
            else:
                self._logger.warning("Public API completion")


def public_api_instrumented(
    *,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    concerns: Sequence[PublicApiInstrumentationConcern] | None = None,
    logger: Any | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public method with the given instrumentation concerns.

    ``id_fields`` names keyword arguments whose values are copied into the
    log context (for example ``provider_name``). The trace id is read from a
    ``ctx`` keyword argument when one is passed and stays bound, together
    with ``component_id``, for every log line emitted during the call.
    """
    resolved_concerns: tuple[PublicApiInstrumentationConcern, ...] = tuple(
        concerns or ()
    )
    if logger is not None:
        resolved_concerns = (PublicApiLoggingConcern(logger=logger), *resolved_concerns)
    if len(resolved_concerns) == 0:
        raise ValueError("public_api_instrumented requires at least one concern")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            references = {
                name: str(kwargs[name])
                for name in id_fields
                if kwargs.get(name) not in (None, "")
            }
            invocation = InvocationContext(
                component_id=component_id,
                api_name=method_name,
                trace_id=_attr_or_none(kwargs.get("ctx"), "trace_id"),
                references=references,
            )
            with call_scope(kwargs.get("ctx"), component_id=component_id):
                _emit(resolved_concerns, "on_invocation", invocation, logger)

                started = perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    completion = CompletionContext(
                        invocation=invocation,
                        success=False,
                        duration_ms=_elapsed_ms(started),
                        errors=[f"{type(exc).__name__}: {exc}"],
                        error_category=_category_of(exc),
                    )
                    _emit(resolved_concerns, "on_completion", completion, logger)
                    raise

                completion = CompletionContext(
                    invocation=invocation,
                    success=True,
                    duration_ms=_elapsed_ms(started),
                    errors=[],
                    error_category=None,
                )
                _emit(resolved_concerns, "on_completion", completion, logger)
                return result

        return wrapper

    return decorator


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 3)


def _attr_or_none(obj: object | None, name: str) -> str | None:
    """Return a string attribute value from ``obj`` when present."""
    if obj is None:
        return None
    value = getattr(obj, name, None)
    if value in (None, ""):
        return None
    return str(value)


def _category_of(exc: Exception) -> str:
    """Return the error category an exception declares, else ``internal``."""
    category = getattr(exc, "category", None)
    value = getattr(category, "value", category)
    if value in (None, ""):
        return "internal"
    return str(value)


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        fields.TRACE_ID: context.trace_id,
        **context.references,
    }


def _emit(
    concerns: Sequence[PublicApiInstrumentationConcern],
    hook: str,
    context: InvocationContext | CompletionContext,
    logger: Any | None,
) -> None:
    """Dispatch one event to every concern, isolating concern failures."""
    for concern in concerns:
        try:
            getattr(concern, hook)(context)
        except Exception as exc:  # noqa: BLE001
            if logger is not None:
                logger.warning(
                    "Public API instrumentation concern %s failed: %s",
                    type(concern).__name__,
                    exc,
                )
