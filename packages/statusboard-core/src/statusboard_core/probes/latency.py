"""
Latency Probe: round-trip time to one host/port.

Two measurement methods are provided:
- TcpLatencyProbe: times a TCP connect
- MinetoolsLatencyProbe: asks the minetools ping API for the latency,
  for deployments that can only reach HTTP services

Both take N samples in parallel and report the rounded average of the
successful ones. Every failure path (timeout, refused, DNS, bad payload)
resolves to LATENCY_TIMEOUT; probe() never raises for network failures.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod

import httpx

from statusboard_core.probes.status import SOURCE_FAILURES
from statusboard_core.sources.types import MinetoolsResponse
from statusboard_core.types import LATENCY_TIMEOUT

logger = logging.getLogger(__name__)


def average_latency(samples: list[float | None]) -> int:
    """
    Average the successful samples.

    Args:
        samples: Milliseconds per sample, None for a failed sample

    Returns:
        Rounded average in milliseconds, or LATENCY_TIMEOUT if no
        sample succeeded
    """
    ok = [s for s in samples if s is not None]
    if not ok:
        return LATENCY_TIMEOUT
    return min(round(sum(ok) / len(ok)), LATENCY_TIMEOUT)


class _SampledLatencyProbe(ABC):
    """Shared multi-sample logic. Subclasses implement _sample()."""

    def __init__(self, timeout: float = 2.5, samples: int = 3) -> None:
        if samples < 1:
            raise ValueError(f"samples must be >= 1, got {samples}")
        self.timeout = timeout
        self.samples = samples

    async def probe(self, host: str, port: int) -> int:
        results = await asyncio.gather(
            *(self._sample(host, port) for _ in range(self.samples))
        )
        latency = average_latency(list(results))
        if latency == LATENCY_TIMEOUT:
            logger.debug(f"Latency probe to {host}:{port} timed out")
        return latency

    @abstractmethod
    async def _sample(self, host: str, port: int) -> float | None:
        """One measurement in milliseconds, None if it failed."""


class TcpLatencyProbe(_SampledLatencyProbe):
    """
    Measures TCP connect time.

    Example:
        probe = TcpLatencyProbe(timeout=2.5, samples=3)
        ms = await probe.probe("a.example.com", 25565)
    """

    async def _sample(self, host: str, port: int) -> float | None:
        start = time.perf_counter()
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=self.timeout,
            )
        except SOURCE_FAILURES as e:
            logger.debug(f"TCP connect to {host}:{port} failed: {e!r}")
            return None

        elapsed_ms = (time.perf_counter() - start) * 1000
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass  # Connection already gone, the sample still counts
        return elapsed_ms


class MinetoolsLatencyProbe(_SampledLatencyProbe):
    """
    Reads latency from the minetools ping API.

    Uses injected httpx.AsyncClient (shared with the status sources).
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str = "https://api.minetools.eu",
        timeout: float = 2.5,
        samples: int = 1,
    ) -> None:
        super().__init__(timeout=timeout, samples=samples)
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def _sample(self, host: str, port: int) -> float | None:
        try:
            response = await asyncio.wait_for(
                self.http.get(f"{self.base_url}/ping/{host}/{port}", timeout=self.timeout),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = MinetoolsResponse.model_validate(response.json())
        except SOURCE_FAILURES as e:
            logger.debug(f"minetools ping for {host}:{port} failed: {e!r}")
            return None

        if data.error or data.latency is None:
            return None
        return data.latency
