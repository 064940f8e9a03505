"""Structured fields carried by every log line emitted during a call.

Fields live in a ``ContextVar`` holding a read-only mapping. Scopes never
mutate the mapping in place; they swap in a merged copy and restore the
previous one on exit, so a worker thread started with
``contextvars.copy_context().run`` keeps the fields its submitter had.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Iterator, Mapping

from . import fields

_EMPTY: Mapping[str, str] = MappingProxyType({})
_FIELDS: ContextVar[Mapping[str, str]] = ContextVar(
    "switchyard_log_fields", default=_EMPTY
)


def get_context() -> dict[str, str]:
    """Return the fields bound in the current context."""
    return dict(_FIELDS.get())


def bind_context(**values: object) -> None:
    """Bind fields for the remainder of the current context.

    Used for process-wide fields such as the service name; call-scoped fields
    belong in ``log_context`` instead. ``None`` values are skipped.
    """
    _FIELDS.set(_merged(_FIELDS.get(), values))


@contextmanager
def log_context(
    values: Mapping[str, object] | None = None, /, **extra: object
) -> Iterator[None]:
    """Bind fields for the duration of a block."""
    token = _FIELDS.set(_merged(_FIELDS.get(), {**(values or {}), **extra}))
    try:
        yield
    finally:
        _FIELDS.reset(token)


@contextmanager
def call_scope(call_ctx: object | None, *, component_id: str) -> Iterator[None]:
    """Bind the component id and the caller's trace id for one public call.

    ``call_ctx`` is any object with a ``trace_id`` attribute, normally a
    ``CallContext``; nested calls into other components rebind the component
    id while keeping the trace id.
    """
    trace_id = getattr(call_ctx, "trace_id", None) or None
    with log_context({fields.COMPONENT_ID: component_id, fields.TRACE_ID: trace_id}):
        yield


def _merged(base: Mapping[str, str], values: Mapping[str, object]) -> Mapping[str, str]:
    updates = {
        str(key): str(value) for key, value in values.items() if value is not None
    }
    if not updates:
        return base
    return MappingProxyType({**base, **updates})
