"""
Status and latency probes.

Both probe kinds are best-effort: network failures turn into sentinel
values and never escape probe().
"""

from statusboard_core.probes.latency import (
    MinetoolsLatencyProbe,
    TcpLatencyProbe,
    average_latency,
)
from statusboard_core.probes.protocols import (
    DataSourceProtocol,
    LatencyProbeProtocol,
    StatusProbeProtocol,
)
from statusboard_core.probes.retry import RetryConfig
from statusboard_core.probes.status import (
    DEFAULT_TIMEOUTS,
    StatusPolicy,
    StatusProbe,
    exhausted_result,
)

__all__ = [
    # Protocols
    "DataSourceProtocol",
    "StatusProbeProtocol",
    "LatencyProbeProtocol",
    # Status
    "StatusProbe",
    "StatusPolicy",
    "DEFAULT_TIMEOUTS",
    "RetryConfig",
    "exhausted_result",
    # Latency
    "TcpLatencyProbe",
    "MinetoolsLatencyProbe",
    "average_latency",
]
