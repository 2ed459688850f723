"""
Core data types for the status board.

This module defines the data structures shared by the catalog, the probes,
the poller and the dashboard:
- ProtocolVariant / Endpoint: one reachable address of a game server
- StatusResult: normalized answer of a Status Probe
- EndpointMeasurement / Node / Group: the per-cycle view of the catalog
- Snapshot: the immutable, published state of one polling cycle

Sentinel values stand in for "unknown" or "failed" and are never None:
- LATENCY_UNMEASURED (-1): no measurement has landed yet
- LATENCY_TIMEOUT (5000): probe failed or timed out
- NOT_AVAILABLE / UNKNOWN_VERSION / UNKNOWN_PLAYERS: missing metadata
- API_ERROR: every configured data source failed
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


LATENCY_UNMEASURED = -1
LATENCY_TIMEOUT = 5000

NOT_AVAILABLE = "N/A"
UNKNOWN_VERSION = "未知"
UNKNOWN_PLAYERS = "?/?"
API_ERROR = "API 错误"


class ProtocolVariant(str, Enum):
    """Protocol family of an endpoint."""

    JAVA = "java"  # primary protocol
    BEDROCK = "bedrock"  # alternate protocol ("PE" in configuration)

    @property
    def label(self) -> str:
        """Short display label (matches the configuration keys)."""
        return "Java" if self is ProtocolVariant.JAVA else "PE"


@dataclass(frozen=True)
class Endpoint:
    """
    One network-reachable address of a server.

    Attributes:
        variant: Protocol family spoken on this address
        host: Hostname or IP address
        port: TCP/UDP port
    """

    variant: ProtocolVariant
    host: str
    port: int

    @property
    def full_address(self) -> str:
        """Address in "host:port" form."""
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class StatusResult:
    """
    Normalized result of a Status Probe.

    Attributes:
        online: True if a data source confirmed the server is up
        players: "current/max", or a sentinel string
        version: Version string, or a sentinel string
        source: Name of the data source that answered (None if none did)
        error: True when every data source failed, so the server state
            could not be determined (as opposed to confirmed offline)
    """

    online: bool
    players: str = NOT_AVAILABLE
    version: str = UNKNOWN_VERSION
    source: str | None = None
    error: bool = False


@dataclass
class EndpointMeasurement:
    """
    Measurement of one endpoint during one polling cycle.

    Created fresh with sentinel values at the start of every cycle and
    filled in when the probes for the endpoint settle.
    """

    endpoint: Endpoint
    latency_ms: int = LATENCY_UNMEASURED
    online: bool = False
    players: str = NOT_AVAILABLE
    version: str = UNKNOWN_VERSION
    error: bool = False
    measured_at: datetime = field(default_factory=datetime.now)

    @property
    def has_latency(self) -> bool:
        """True if latency_ms is a real measurement (not a sentinel)."""
        return 0 <= self.latency_ms < LATENCY_TIMEOUT

    @property
    def timed_out(self) -> bool:
        return self.latency_ms >= LATENCY_TIMEOUT


@dataclass
class Node:
    """
    A physical server exposing one or more endpoints.

    Attributes:
        name: Display name from configuration
        measurements: One measurement per endpoint, in configuration order
        best_latency: Lowest real latency among measurements (-1 if none)
        is_expanded: UI flag, preserved across rebuilds by (group, node) name
    """

    name: str
    measurements: list[EndpointMeasurement] = field(default_factory=list)
    best_latency: int = LATENCY_UNMEASURED
    is_expanded: bool = False

    @property
    def endpoints(self) -> list[Endpoint]:
        return [m.endpoint for m in self.measurements]


class GroupStatus(str, Enum):
    """Display status of a group."""

    TESTING = "testing"
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass
class Group:
    """
    A named display section of nodes.

    status/players/version summarize the group's representative
    measurement (see poller.aggregate.select_representative).
    """

    name: str
    nodes: list[Node] = field(default_factory=list)
    status: GroupStatus = GroupStatus.TESTING
    players: str = UNKNOWN_PLAYERS
    version: str = UNKNOWN_VERSION


ExpandedKey = tuple[str, str]
"""(group name, node name) identity used to carry UI flags across rebuilds."""


@dataclass(frozen=True)
class Snapshot:
    """
    Complete status board state at a point in time.

    A Snapshot is replaced whole by the poller and never mutated after it
    has been published to the ResultStore.

    Attributes:
        groups: Groups in configuration order (nodes sorted by latency
            once a cycle has completed)
        generation: Polling cycle that produced this snapshot
        completed_at: When the cycle finished; None for a reset snapshot
            whose measurements are still sentinels
    """

    groups: tuple[Group, ...] = ()
    generation: int = 0
    completed_at: datetime | None = None

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None

    def expanded_keys(self) -> set[ExpandedKey]:
        """Return the (group, node) keys of every expanded node."""
        return {
            (group.name, node.name)
            for group in self.groups
            for node in group.nodes
            if node.is_expanded
        }

    def find_group(self, name: str) -> Group | None:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON serialization."""
        d = asdict(self)
        for group in d["groups"]:
            group["status"] = group["status"].value
            for node in group["nodes"]:
                for m in node["measurements"]:
                    m["endpoint"]["variant"] = m["endpoint"]["variant"].value
        return d
