"""
Tests for RefreshCountdown and ProgressTracker.

Both take an injectable loop; FakeLoop gives the tests a manual clock so
no test sleeps.

Tests cover:
- At most one countdown is ever pending, start() replaces the old one
- cancel() prevents expiry; remaining() counts down
- Progress notifications are coalesced per loop tick and never decrease
"""

import pytest

from statusboard_core.poller import ProgressTracker, RefreshCountdown

from fakes import FakeLoop


class TestRefreshCountdown:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            RefreshCountdown(0, on_expire=lambda: None, loop=FakeLoop())

    def test_expires_once_after_interval(self):
        loop = FakeLoop()
        fired = []
        countdown = RefreshCountdown(60, on_expire=lambda: fired.append(loop.now), loop=loop)

        countdown.start()
        loop.advance(59)
        assert fired == []
        assert countdown.active
        assert countdown.remaining() == pytest.approx(1.0)

        loop.advance(1)
        assert fired == [60]
        assert not countdown.active
        assert countdown.remaining() == 0.0

    def test_restart_keeps_single_pending_timer(self):
        """A manual refresh during a countdown never leaves two timers."""
        loop = FakeLoop()
        fired = []
        countdown = RefreshCountdown(60, on_expire=lambda: fired.append(loop.now), loop=loop)

        countdown.start()
        loop.advance(30)
        countdown.start()
        countdown.start()

        assert len(loop.pending_timers()) == 1
        loop.advance(59)
        assert fired == []
        loop.advance(1)
        assert fired == [90]

    def test_cancel(self):
        loop = FakeLoop()
        fired = []
        countdown = RefreshCountdown(10, on_expire=lambda: fired.append(True), loop=loop)

        countdown.start()
        countdown.cancel()
        loop.advance(20)

        assert fired == []
        assert loop.pending_timers() == []


class TestProgressTracker:
    def test_notifications_coalesced_per_tick(self):
        loop = FakeLoop()
        ratios = []
        tracker = ProgressTracker(total=4, notify=ratios.append, loop=loop)

        tracker.settle()
        tracker.settle()
        tracker.settle()
        assert len(loop.ready) == 1

        loop.run_ready()
        assert ratios == [0.75]

        tracker.settle()
        loop.run_ready()
        assert ratios == [0.75, 1.0]

    def test_ratio_is_monotonic_and_capped(self):
        loop = FakeLoop()
        ratios = []
        tracker = ProgressTracker(total=2, notify=ratios.append, loop=loop)

        for _ in range(3):
            tracker.settle()
            loop.run_ready()

        assert ratios == sorted(ratios)
        assert ratios[-1] == 1.0

    def test_empty_cycle_is_complete(self):
        ratios = []
        tracker = ProgressTracker(total=0, notify=ratios.append, loop=FakeLoop())
        tracker.flush()
        assert ratios == [1.0]
