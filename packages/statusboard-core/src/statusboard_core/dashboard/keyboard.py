"""
Keyboard input for the live dashboard.

Keys are read in cbreak mode on a worker thread (loop.run_in_executor)
with a select() timeout, so the reader thread returns often enough to
notice stop() and the event loop is never blocked.
"""

import asyncio
import logging
import select
import sys
import termios
import tty
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class KeyAction(str, Enum):
    REFRESH = "refresh"
    TOGGLE_EXPAND = "toggle_expand"
    NEXT_GROUP = "next_group"
    QUIT = "quit"


KEY_BINDINGS: dict[str, KeyAction] = {
    "r": KeyAction.REFRESH,
    "e": KeyAction.TOGGLE_EXPAND,
    "g": KeyAction.NEXT_GROUP,
    "\t": KeyAction.NEXT_GROUP,
    "q": KeyAction.QUIT,
    "\x1b": KeyAction.QUIT,  # bare Escape
}


def action_for_key(key: str) -> KeyAction | None:
    """Map a raw key (case-insensitive) to its action, None if unbound."""
    return KEY_BINDINGS.get(key.lower() if len(key) == 1 else key)


def _read_key(timeout: float) -> str | None:
    """
    Read one key from stdin, or None after `timeout` seconds.

    Escape sequences (arrow keys) are returned whole so they do not read
    as a bare Escape. The terminal must already be in cbreak mode.
    """
    if not select.select([sys.stdin], [], [], timeout)[0]:
        return None
    key = sys.stdin.read(1)
    if key == "\x1b":
        while select.select([sys.stdin], [], [], 0.05)[0]:
            key += sys.stdin.read(1)
            if len(key) >= 3:
                break
    return key


class KeyboardTask:
    """
    Reads keys until stopped and reports bound actions.

    Example:
        keyboard = KeyboardTask(on_action=app.handle_action)
        tg.create_task(keyboard.run())
        # Later:
        keyboard.stop()
    """

    def __init__(self, on_action: Callable[[KeyAction], None], poll_timeout: float = 0.3) -> None:
        self._on_action = on_action
        self._poll_timeout = poll_timeout
        self._shutdown = asyncio.Event()

    async def run(self) -> None:
        """
        Read keys until stop() is called.

        Returns at once when stdin is not a terminal (piped input, CI),
        leaving the dashboard non-interactive.
        """
        if not sys.stdin.isatty():
            logger.info("stdin is not a terminal, keyboard shortcuts disabled")
            return

        loop = asyncio.get_running_loop()
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            while not self._shutdown.is_set():
                key = await loop.run_in_executor(None, _read_key, self._poll_timeout)
                if key is None:
                    continue
                action = action_for_key(key)
                if action is not None:
                    self._on_action(action)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    def stop(self) -> None:
        self._shutdown.set()
