"""
Cycle progress tracking with coalesced notifications.

Every settled probe bumps the completed count. Instead of notifying the
render layer on each settle, the tracker schedules one notification with
loop.call_soon(); further settles before that callback runs are folded
into it. The ratio never decreases.
"""

import asyncio
from typing import Callable

ProgressCallback = Callable[[float], None]


class ProgressTracker:
    """
    Counts settled probes of one polling cycle.

    Example:
        tracker = ProgressTracker(total=2 * len(items), notify=store.set_progress)
        ...
        tracker.settle()   # after each probe, success or sentinel
        ...
        tracker.flush()    # deliver the final ratio synchronously
    """

    def __init__(
        self,
        total: int,
        notify: ProgressCallback,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """
        Initialize the tracker.

        Args:
            total: Number of probes that will settle
            notify: Receives the completion ratio (0.0 - 1.0)
            loop: Event loop for scheduling (default: running loop)
        """
        self.total = total
        self.completed = 0
        self._notify = notify
        self._loop = loop
        self._scheduled = False

    @property
    def ratio(self) -> float:
        if self.total <= 0:
            return 1.0
        return min(self.completed / self.total, 1.0)

    def settle(self) -> None:
        """Record one settled probe and schedule a notification if none is pending."""
        self.completed += 1
        if self._scheduled:
            return
        self._scheduled = True
        loop = self._loop or asyncio.get_running_loop()
        loop.call_soon(self._deliver)

    def flush(self) -> None:
        """Deliver the current ratio now."""
        self._deliver()

    def _deliver(self) -> None:
        self._scheduled = False
        self._notify(self.ratio)
