"""
RefreshCountdown: the recurring auto-refresh timer.

At most one countdown is ever pending. start() cancels the previous
handle before scheduling a new one, so a manual refresh during a
countdown cannot leave two timers running.
"""

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class RefreshCountdown:
    """
    Single pending timer that calls `on_expire` after `interval` seconds.

    Example:
        countdown = RefreshCountdown(60.0, on_expire=orchestrator.request_refresh)
        countdown.start()
        ...
        countdown.remaining()  # seconds left, for "refresh in N s" display
    """

    def __init__(
        self,
        interval: float,
        on_expire: Callable[[], object],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """
        Initialize countdown.

        Args:
            interval: Seconds between start() and expiry (default use: 60)
            on_expire: Called once when the countdown runs out
            loop: Event loop providing call_later()/time() (default: running loop)
        """
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.interval = interval
        self._on_expire = on_expire
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._deadline: float | None = None

    @property
    def active(self) -> bool:
        """True while a countdown is pending."""
        return self._handle is not None

    def start(self) -> None:
        """Cancel any pending countdown and start a new one."""
        self.cancel()
        loop = self._get_loop()
        self._deadline = loop.time() + self.interval
        self._handle = loop.call_later(self.interval, self._expire)

    def cancel(self) -> None:
        """Cancel the pending countdown, if any."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._deadline = None

    def remaining(self) -> float:
        """Seconds until expiry, 0.0 when no countdown is pending."""
        if self._deadline is None:
            return 0.0
        return max(self._deadline - self._get_loop().time(), 0.0)

    def _expire(self) -> None:
        self._handle = None
        self._deadline = None
        logger.debug("Refresh countdown expired")
        self._on_expire()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()
