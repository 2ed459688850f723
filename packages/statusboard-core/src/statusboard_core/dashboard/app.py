"""
DashboardApp: the live terminal status board.

Startup order in run():
1. Register SIGINT/SIGTERM handlers before anything else, so Ctrl+C works
   during startup
2. Attach the refresh countdown and start the initial load
3. Enter the Rich Live context
4. Run the keyboard task and the render loop in a TaskGroup
5. On exit, cancel the countdown and in-flight refreshes

The app only reads the ResultStore. User actions go to the orchestrator
(refresh) or to the store's UI-flag setters (expand/collapse).
"""

import asyncio
import functools
import logging
import signal

from rich.console import Console
from rich.live import Live

from statusboard_core.catalog import PageConfig
from statusboard_core.dashboard.keyboard import KeyAction, KeyboardTask
from statusboard_core.dashboard.layout import create_layout, make_panel
from statusboard_core.dashboard.render import (
    ALL_GROUPS,
    filter_groups,
    format_footer,
    format_page_header,
    format_status_line,
    render_groups,
)
from statusboard_core.poller import PollingOrchestrator
from statusboard_core.store import ResultStore

logger = logging.getLogger(__name__)


class DashboardApp:
    """
    Runs the status board until the user quits.

    Example:
        app = DashboardApp(orchestrator, store, refresh_interval=60.0)
        await app.run()  # Runs until q or Ctrl+C
    """

    def __init__(
        self,
        orchestrator: PollingOrchestrator,
        store: ResultStore,
        refresh_interval: float = 60.0,
        group: str = ALL_GROUPS,
        console: Console | None = None,
        frame_interval: float = 0.25,
    ) -> None:
        """
        Initialize the dashboard.

        Args:
            orchestrator: Runs polling cycles
            store: Shared ResultStore the orchestrator publishes to
            refresh_interval: Seconds between automatic refreshes
            group: Name of the group to show, or "all"
            console: Rich Console to use (creates default if None)
            frame_interval: Seconds between redraws
        """
        self.orchestrator = orchestrator
        self.store = store
        self.refresh_interval = refresh_interval
        self.group = group
        self.console = console if console is not None else Console()
        self.frame_interval = frame_interval
        self._shutdown = asyncio.Event()
        self._layout = create_layout()
        self._keyboard = KeyboardTask(on_action=self.handle_action)

    @property
    def page(self) -> PageConfig:
        return self.orchestrator.catalog.page

    async def run(self) -> None:
        loop = asyncio.get_running_loop()

        # 1. Signal handlers first
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, functools.partial(self._handle_signal, sig))

        try:
            # 2. Countdown + initial load
            self.orchestrator.attach_countdown(self.refresh_interval)
            self.orchestrator.request_refresh(is_initial_load=True)

            # 3-4. Live rendering
            self.draw()
            with Live(
                self._layout,
                console=self.console,
                refresh_per_second=4,
                screen=False,
            ) as live:
                async with asyncio.TaskGroup() as tg:
                    tg.create_task(self._keyboard.run())
                    tg.create_task(self._render_loop(live))
        finally:
            # 5. Cleanup
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
            await self.orchestrator.aclose()

        self.console.print("[green]Status board stopped[/green]")

    def stop(self) -> None:
        self._shutdown.set()
        self._keyboard.stop()

    def handle_action(self, action: KeyAction) -> None:
        """Dispatch one keyboard action."""
        if action is KeyAction.REFRESH:
            logger.info("Manual refresh requested")
            self.orchestrator.request_refresh()
        elif action is KeyAction.TOGGLE_EXPAND:
            self.store.toggle_all_expanded()
        elif action is KeyAction.NEXT_GROUP:
            self.group = self._next_group()
        elif action is KeyAction.QUIT:
            self.stop()

    def draw(self) -> None:
        """Rebuild every layout region from the store."""
        countdown = self.orchestrator.countdown
        status_line = format_status_line(
            refreshing=self.store.refreshing,
            progress=self.store.progress,
            remaining=countdown.remaining() if countdown is not None else None,
            last_error=self.store.last_error,
        )
        self._layout["header"].update(
            make_panel(format_page_header(self.page, status_line, self.group), "Status", "cyan")
        )
        self._layout["board"].update(
            render_groups(filter_groups(self.store.snapshot, self.group))
        )
        self._layout["footer"].update(make_panel(format_footer(self.page), "Keys", "blue"))

    async def _render_loop(self, live: Live) -> None:
        while not self._shutdown.is_set():
            self.draw()
            live.refresh()
            try:
                await asyncio.wait_for(self._shutdown.wait(), timeout=self.frame_interval)
            except asyncio.TimeoutError:
                pass  # Next frame

    def _next_group(self) -> str:
        """Cycle "all" -> first group -> ... -> last group -> "all"."""
        choices = [ALL_GROUPS, *self.orchestrator.catalog.group_names]
        try:
            index = choices.index(self.group)
        except ValueError:
            index = -1
        return choices[(index + 1) % len(choices)]

    def _handle_signal(self, sig: signal.Signals) -> None:
        logger.info(f"Received {sig.name}, shutting down")
        self.stop()
