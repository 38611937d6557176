"""
Tests for cancellation contexts.
"""

import threading
import time

from axisplan.core.context import Context, background
from axisplan.core.exceptions import PlanningCancelledError


class TestContext:
    """Tests for Context."""

    def test_fresh_context_not_done(self):
        ctx = background()
        assert not ctx.done()
        assert ctx.err() is None

    def test_cancel(self):
        ctx = Context()
        ctx.cancel()
        assert ctx.done()
        assert isinstance(ctx.err(), PlanningCancelledError)
        assert "canceled" in str(ctx.err())

    def test_cancel_reaches_children(self):
        """Cancelling a parent cancels every derived context."""
        parent = Context()
        child = parent.with_cancel()
        grandchild = child.with_timeout(60)
        parent.cancel()
        assert child.done()
        assert grandchild.done()

    def test_child_cancel_leaves_parent(self):
        parent = Context()
        child = parent.with_cancel()
        child.cancel()
        assert child.done()
        assert not parent.done()

    def test_derive_from_cancelled_parent(self):
        parent = Context()
        parent.cancel()
        assert parent.with_cancel().done()

    def test_deadline(self):
        ctx = Context().with_timeout(0.01)
        time.sleep(0.05)
        assert ctx.done()
        assert "deadline" in str(ctx.err())

    def test_child_inherits_parent_deadline(self):
        parent = Context().with_timeout(0.01)
        child = parent.with_timeout(60)
        assert child.deadline == parent.deadline

    def test_wait_returns_when_cancelled(self):
        ctx = Context()
        timer = threading.Timer(0.02, ctx.cancel)
        timer.start()
        try:
            assert ctx.wait(5.0)
        finally:
            timer.cancel()

    def test_wait_times_out(self):
        ctx = Context()
        assert not ctx.wait(0.01)

    def test_cancelled_children_are_released(self):
        """A long-lived parent does not keep finished children alive."""
        parent = Context()
        for _ in range(100):
            parent.with_timeout(60).cancel()
            parent.with_cancel().cancel()
        assert parent._children == []
        assert not parent.done()

    def test_expired_child_is_released(self):
        parent = Context()
        child = parent.with_timeout(0.01)
        time.sleep(0.05)
        assert child.done()
        assert parent._children == []

    def test_live_children_are_kept(self):
        parent = Context()
        live = parent.with_cancel()
        parent.with_cancel().cancel()
        assert parent._children == [live]
        parent.cancel()
        assert live.done()
