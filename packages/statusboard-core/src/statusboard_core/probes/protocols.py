"""
Protocol definitions for probes and status data sources.

The poller only depends on these interfaces, so probes and data sources
can be swapped (or mocked in tests) without touching it:
- DataSourceProtocol: one third-party (or proxy) status API
- StatusProbeProtocol: liveness/metadata query for one endpoint
- LatencyProbeProtocol: round-trip time to one host/port
"""

from typing import Protocol, runtime_checkable

from statusboard_core.types import Endpoint, ProtocolVariant, StatusResult


@runtime_checkable
class DataSourceProtocol(Protocol):
    """
    Protocol for status data sources.

    Each data source speaks its own JSON schema and is responsible for
    normalizing it into a StatusResult. fetch() fails loudly: HTTP errors,
    timeouts and malformed payloads raise, and the Status Probe decides
    whether to fall back, race or retry.
    """

    name: str

    def supports(self, variant: ProtocolVariant) -> bool:
        """Return True if this source can query endpoints of `variant`."""
        ...

    async def fetch(self, endpoint: Endpoint, timeout: float) -> StatusResult:
        """
        Query the status of one endpoint.

        Args:
            endpoint: Endpoint to query
            timeout: Request timeout in seconds

        Returns:
            Normalized StatusResult (online or confirmed offline)

        Raises:
            httpx.HTTPError: On transport errors and non-2xx responses
            pydantic.ValidationError: On malformed response data
        """
        ...


@runtime_checkable
class StatusProbeProtocol(Protocol):
    """Protocol for status probes. probe() never raises for network failures."""

    async def probe(self, endpoint: Endpoint) -> StatusResult:
        ...


@runtime_checkable
class LatencyProbeProtocol(Protocol):
    """
    Protocol for latency probes.

    probe() returns milliseconds, or LATENCY_TIMEOUT on any failure.
    """

    async def probe(self, host: str, port: int) -> int:
        ...
