"""Cancellation and deadline token threaded through every provider call.

A ``CallContext`` is created by the outermost caller (``background()`` or
``CallContext.with_timeout``) and passed unchanged down to the backend
adapter. Cancelling a context also cancels every context derived from it;
cancelling a derived context leaves its parent untouched.
"""

from __future__ import annotations

import contextvars
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, TypeVar
from uuid import uuid4

from .errors import ContextCancelledError, DeadlineExceededError

Clock = Callable[[], float]
T = TypeVar("T")

_WAIT_INTERVAL_SECONDS = 0.05


class CallContext:
    """Cancellation flag plus optional monotonic deadline and a trace id."""

    def __init__(
        self,
        *,
        trace_id: str | None = None,
        deadline: float | None = None,
        parent: CallContext | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._parent = parent
        self._clock = parent._clock if parent is not None else clock
        self._cancelled = threading.Event()
        self.trace_id = trace_id or (parent.trace_id if parent else uuid4().hex)

        inherited = parent.deadline if parent is not None else None
        if inherited is None or (deadline is not None and deadline < inherited):
            self._deadline = deadline
        else:
            self._deadline = inherited

    @property
    def deadline(self) -> float | None:
        """Monotonic-clock deadline, or ``None`` when unbounded."""
        return self._deadline

    def with_timeout(self, seconds: float) -> CallContext:
        """Derive a child context that expires ``seconds`` from now."""
        return CallContext(parent=self, deadline=self._clock() + seconds)

    def with_cancel(self) -> CallContext:
        """Derive a child context that can be cancelled on its own."""
        return CallContext(parent=self)

    def cancel(self) -> None:
        self._cancelled.set()

    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled()

    def expired(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    def done(self) -> bool:
        return self.cancelled() or self.expired()

    def remaining_seconds(self) -> float | None:
        """Seconds until the deadline (never negative), ``None`` if unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def bound_timeout(self, timeout_seconds: float) -> float:
        """Clamp a transport timeout so it never outlives the deadline."""
        remaining = self.remaining_seconds()
        if remaining is None:
            return timeout_seconds
        return min(timeout_seconds, remaining)

    def error(self, *, operation: str = "") -> ContextCancelledError | None:
        """Return the failure a finished context stands for, else ``None``."""
        suffix = f" during {operation}" if operation else ""
        if self.cancelled():
            return ContextCancelledError(f"context cancelled{suffix}")
        if self.expired():
            return DeadlineExceededError(f"context deadline exceeded{suffix}")
        return None

    def raise_if_done(self, *, operation: str = "") -> None:
        """Raise when the context is cancelled or past its deadline."""
        error = self.error(operation=operation)
        if error is not None:
            raise error

    def run(self, call: Callable[[], T], *, operation: str = "") -> T:
        """Run a blocking ``call`` and stop waiting once this context is done.

        The call runs on a worker thread. When the context is cancelled or its
        deadline passes first, the worker is abandoned and the context error is
        raised; a result that arrives after that is discarded.
        """
        self.raise_if_done(operation=operation)
        executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="switchyard-call"
        )
        try:
            future = executor.submit(contextvars.copy_context().run, call)
            while not future.done():
                wait([future], timeout=_WAIT_INTERVAL_SECONDS)
                self.raise_if_done(operation=operation)
        finally:
            executor.shutdown(wait=False)
        self.raise_if_done(operation=operation)
        return future.result()


def background(*, trace_id: str | None = None) -> CallContext:
    """Return a fresh root context with no deadline."""
    return CallContext(trace_id=trace_id)
