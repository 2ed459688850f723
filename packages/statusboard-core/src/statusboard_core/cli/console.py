"""Shared Rich consoles and logging setup for CLI commands."""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()
# Logs go to stderr so `check --json` output stays parseable; Live
# redirects stderr above the board while the dashboard runs
err_console = Console(stderr=True)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging through Rich, once per process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # Request lines from httpx drown the board
    logging.getLogger("httpx").setLevel(logging.WARNING)
