"""
Cancellation contexts shared between planning threads.

A Context is a cancellation signal with an optional deadline. Derived
contexts are canceled whenever their parent is, so cancelling the caller's
context reaches every worker spawned on its behalf, while cancelling a
derived context leaves the parent untouched.
"""

import threading
import time
from typing import Optional

from axisplan.core.exceptions import PlanningCancelledError


class Context:
    """
    Cancellation signal passed to planners and IK solvers.

    Example:
        >>> ctx = Context()
        >>> child = ctx.with_timeout(5.0)
        >>> ctx.cancel()
        >>> child.done()
        True
    """

    def __init__(
        self,
        parent: Optional["Context"] = None,
        deadline: Optional[float] = None,
    ) -> None:
        self._parent = parent
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: list[Context] = []
        self._reason: Optional[str] = None

        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

        if parent is not None:
            parent._add_child(self)

    def _add_child(self, child: "Context") -> None:
        with self._lock:
            cancelled = self._event.is_set()
            if not cancelled:
                self._children.append(child)
        if cancelled:
            child._cancel(self._reason or "context canceled")

    def _remove_child(self, child: "Context") -> None:
        with self._lock:
            self._children = [c for c in self._children if c is not child]

    def _cancel(self, reason: str) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()
            children, self._children = self._children, []
        for child in children:
            child._cancel(reason)
        # A finished child is never signalled again, so the parent drops it
        if self._parent is not None:
            self._parent._remove_child(self)

    def cancel(self) -> None:
        """Cancel this context and every context derived from it."""
        self._cancel("context canceled")

    def done(self) -> bool:
        """Return True once the context is canceled or past its deadline."""
        if self._event.is_set():
            return True
        if self.deadline is not None and time.monotonic() >= self.deadline:
            self._cancel("context deadline exceeded")
            return True
        return False

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the context is done or ``timeout`` seconds pass.

        Returns:
            True if the context is done.
        """
        if self.deadline is not None:
            remaining = max(self.deadline - time.monotonic(), 0.0)
            timeout = remaining if timeout is None else min(timeout, remaining)
        self._event.wait(timeout)
        return self.done()

    def err(self) -> Optional[PlanningCancelledError]:
        """Return the cancellation error, or None while the context is live."""
        if not self.done():
            return None
        return PlanningCancelledError(self._reason or "context canceled")

    def with_cancel(self) -> "Context":
        """Derive a child context that can be canceled independently."""
        return Context(parent=self)

    def with_timeout(self, seconds: float) -> "Context":
        """Derive a child context that expires after ``seconds``."""
        return Context(parent=self, deadline=time.monotonic() + seconds)


def background() -> Context:
    """Return a fresh root context that is never canceled on its own."""
    return Context()
