"""Polling orchestrator, aggregation rules and refresh scheduling."""

from statusboard_core.poller.aggregate import (
    aggregate_groups,
    best_latency,
    select_representative,
    sort_nodes,
)
from statusboard_core.poller.countdown import RefreshCountdown
from statusboard_core.poller.loop import PollingOrchestrator
from statusboard_core.poller.progress import ProgressTracker
from statusboard_core.poller.types import (
    LatencyTarget,
    ProbeOutcome,
    WorkItem,
    flatten_work_items,
    resolve_latency_target,
)

__all__ = [
    "PollingOrchestrator",
    "RefreshCountdown",
    "ProgressTracker",
    "LatencyTarget",
    "ProbeOutcome",
    "WorkItem",
    "flatten_work_items",
    "resolve_latency_target",
    "aggregate_groups",
    "best_latency",
    "select_representative",
    "sort_nodes",
]
