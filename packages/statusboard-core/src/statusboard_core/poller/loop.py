"""
PollingOrchestrator: runs polling cycles over the endpoint catalog.

One cycle:
1. Cancels the pending refresh countdown
2. Rebuilds the working snapshot from the catalog (expanded flags kept)
3. Resolves a latency target per endpoint
4. Fans out a Status Probe and a Latency Probe per endpoint, concurrently
5. Reports coalesced progress to the ResultStore
6. Waits for every probe to settle
7-9. Aggregates nodes and groups, sorts nodes by latency
10. Publishes the new snapshot in one replace
11. Restarts the refresh countdown

Cycles are never rejected: starting a cycle while another is running
supersedes it. Each cycle carries a generation number; outcomes and
progress of a cycle whose generation is no longer current are dropped,
so a slow, stale cycle can never overwrite fresher data.

The orchestrator only talks to the probes, the ResultStore and the
countdown. It knows nothing about rendering.
"""

import asyncio
import logging
from datetime import datetime

from statusboard_core.catalog import EndpointCatalog, build_snapshot
from statusboard_core.poller.aggregate import aggregate_groups
from statusboard_core.poller.countdown import RefreshCountdown
from statusboard_core.poller.progress import ProgressTracker
from statusboard_core.poller.types import (
    DEFAULT_FALLBACK_LATENCY_PORT,
    ProbeOutcome,
    WorkItem,
    flatten_work_items,
)
from statusboard_core.probes.protocols import LatencyProbeProtocol, StatusProbeProtocol
from statusboard_core.store import ResultStore
from statusboard_core.types import GroupStatus, Snapshot, StatusResult

logger = logging.getLogger(__name__)


class PollingOrchestrator:
    """
    Owns the lifecycle of polling cycles.

    Example:
        store = ResultStore()
        orchestrator = PollingOrchestrator(
            catalog=load_catalog(Path("config.json")),
            status_probe=StatusProbe(sources),
            latency_probe=TcpLatencyProbe(),
            store=store,
        )
        orchestrator.attach_countdown(60.0)
        await orchestrator.refresh(is_initial_load=True)
        # countdown now re-triggers refresh every 60s
    """

    def __init__(
        self,
        catalog: EndpointCatalog,
        status_probe: StatusProbeProtocol,
        latency_probe: LatencyProbeProtocol,
        store: ResultStore,
        countdown: RefreshCountdown | None = None,
        fallback_latency_port: int = DEFAULT_FALLBACK_LATENCY_PORT,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            catalog: Endpoints to poll
            status_probe: Any StatusProbeProtocol implementation
            latency_probe: Any LatencyProbeProtocol implementation
            store: ResultStore receiving snapshots and progress
            countdown: Auto-refresh timer (see attach_countdown)
            fallback_latency_port: Port timed for Bedrock-only nodes
        """
        self.catalog = catalog
        self.status_probe = status_probe
        self.latency_probe = latency_probe
        self.store = store
        self.countdown = countdown
        self.fallback_latency_port = fallback_latency_port

        self._generation = 0
        self._active_refreshes = 0
        self._tasks: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        """Generation of the most recently started cycle."""
        return self._generation

    def attach_countdown(
        self, interval: float, loop: asyncio.AbstractEventLoop | None = None
    ) -> RefreshCountdown:
        """Create the auto-refresh countdown, wired to request_refresh()."""
        self.countdown = RefreshCountdown(interval, on_expire=self.request_refresh, loop=loop)
        return self.countdown

    async def run_cycle(self, is_initial_load: bool = False) -> Snapshot | None:
        """
        Run one polling cycle.

        Args:
            is_initial_load: Publish a reset (TESTING) snapshot before probing

        Returns:
            The published Snapshot, or None if a newer cycle superseded
            this one before it finished

        Raises:
            Exception: Only for unexpected (non-network) errors; probe
                network failures are already absorbed into sentinels
        """
        # 1. Only one countdown may ever be pending
        if self.countdown is not None:
            self.countdown.cancel()

        # 2. Fresh working snapshot, private to this cycle
        self._generation += 1
        generation = self._generation
        expanded = self.store.expanded_keys()
        if is_initial_load or self.store.snapshot is None:
            self.store.publish(build_snapshot(self.catalog, expanded, generation))
        working = build_snapshot(self.catalog, expanded, generation)

        # 3. One work item per endpoint
        items = flatten_work_items(working.groups, self.fallback_latency_port)
        logger.info(f"Polling cycle {generation} started: {len(items)} endpoint(s)")

        # 4-6. Fan out both probes per item, wait for all of them
        tracker = ProgressTracker(
            total=2 * len(items),
            notify=lambda ratio: self._report_progress(generation, ratio),
        )
        self._report_progress(generation, 0.0)
        outcomes = await asyncio.gather(
            *(self._probe_item(generation, item, tracker) for item in items)
        )
        tracker.flush()

        if generation != self._generation:
            logger.info(
                f"Polling cycle {generation} superseded by cycle {self._generation}, "
                f"discarding {len(outcomes)} result(s)"
            )
            return None

        # 7-9. Aggregate only outcomes of this cycle
        for outcome in outcomes:
            if outcome.generation == generation:
                self._apply(outcome)
        aggregate_groups(working.groups)

        # UI flags may have changed while probes were in flight
        expanded = self.store.expanded_keys()
        for group in working.groups:
            for node in group.nodes:
                node.is_expanded = (group.name, node.name) in expanded

        # 10. Atomic publish
        snapshot = Snapshot(
            groups=working.groups,
            generation=generation,
            completed_at=datetime.now(),
        )
        self.store.publish(snapshot)
        self._log_summary(snapshot)

        # 11. Next automatic refresh
        if self.countdown is not None:
            self.countdown.start()
        return snapshot

    async def refresh(self, is_initial_load: bool = False) -> Snapshot | None:
        """
        Run a cycle for fire-and-forget callers (refresh key, countdown).

        Marks the store as refreshing while any refresh is in flight and
        always clears the flag again, also when the cycle fails. Unexpected
        errors are logged and recorded in the store instead of raised.
        """
        self._active_refreshes += 1
        self.store.set_refreshing(True)
        try:
            return await self.run_cycle(is_initial_load)
        except Exception as e:
            logger.exception("Polling cycle failed")
            self.store.set_error(f"{type(e).__name__}: {e}")
            return None
        finally:
            self._active_refreshes -= 1
            if self._active_refreshes == 0:
                self.store.set_refreshing(False)

    def request_refresh(self, is_initial_load: bool = False) -> asyncio.Task:
        """Schedule refresh() as a task and return it."""
        task = asyncio.create_task(self.refresh(is_initial_load))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def aclose(self) -> None:
        """Cancel the countdown and any refresh task still running."""
        if self.countdown is not None:
            self.countdown.cancel()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _probe_item(
        self, generation: int, item: WorkItem, tracker: ProgressTracker
    ) -> ProbeOutcome:
        """Probe status and latency of one item concurrently."""

        async def status() -> StatusResult:
            try:
                return await self.status_probe.probe(item.endpoint)
            finally:
                tracker.settle()

        async def latency() -> int:
            try:
                return await self.latency_probe.probe(
                    item.latency_target.host, item.latency_target.port
                )
            finally:
                tracker.settle()

        status_result, latency_ms = await asyncio.gather(status(), latency())
        return ProbeOutcome(
            generation=generation,
            item=item,
            status=status_result,
            latency_ms=latency_ms,
            measured_at=datetime.now(),
        )

    def _apply(self, outcome: ProbeOutcome) -> None:
        measurement = outcome.item.measurement
        measurement.latency_ms = outcome.latency_ms
        measurement.online = outcome.status.online
        measurement.players = outcome.status.players
        measurement.version = outcome.status.version
        measurement.error = outcome.status.error
        measurement.measured_at = outcome.measured_at

    def _report_progress(self, generation: int, ratio: float) -> None:
        if generation == self._generation:
            self.store.set_progress(ratio)

    def _log_summary(self, snapshot: Snapshot) -> None:
        online = sum(1 for g in snapshot.groups if g.status is GroupStatus.ONLINE)
        logger.info(
            f"Polling cycle {snapshot.generation} complete: "
            f"{online}/{len(snapshot.groups)} group(s) online"
        )
