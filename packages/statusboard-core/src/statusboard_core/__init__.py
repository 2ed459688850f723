"""
Status Board Core Library

Polls a configured list of Minecraft servers and keeps the latest status,
player count, version and latency of every endpoint. This package provides:

- Endpoint Catalog: groups -> nodes -> endpoints, loaded from JSON
- Status and Latency Probes: best-effort, failures become sentinels
- Polling Orchestrator: concurrent cycles with supersession
- Result Store: the published Snapshot plus UI flags
- Terminal dashboard and Typer-based CLI
"""

__version__ = "0.1.0"

# Re-export public types for convenient imports
from statusboard_core.catalog import (
    CatalogError,
    EndpointCatalog,
    build_snapshot,
    load_catalog,
)
from statusboard_core.config import Settings
from statusboard_core.poller import PollingOrchestrator, RefreshCountdown
from statusboard_core.store import ResultStore
from statusboard_core.types import (
    Endpoint,
    EndpointMeasurement,
    Group,
    GroupStatus,
    Node,
    ProtocolVariant,
    Snapshot,
    StatusResult,
)

__all__ = [
    "__version__",
    # Catalog
    "CatalogError",
    "EndpointCatalog",
    "build_snapshot",
    "load_catalog",
    # Data Types
    "Endpoint",
    "EndpointMeasurement",
    "Group",
    "GroupStatus",
    "Node",
    "ProtocolVariant",
    "Snapshot",
    "StatusResult",
    # Runtime
    "PollingOrchestrator",
    "RefreshCountdown",
    "ResultStore",
    "Settings",
]
