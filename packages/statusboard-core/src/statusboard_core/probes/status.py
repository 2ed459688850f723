"""
Status Probe: best-effort liveness/metadata query for one endpoint.

The probe asks one or more data sources, following a policy:
- FALLBACK: sources in registry order, pausing briefly after each failure
- RACE: every supporting source in parallel, first answer wins
- RETRY: the first supporting source only, with a bounded retry count

Network and payload failures of a source are absorbed and logged. When
every attempt fails the probe returns a distinguishable "all sources
failed" result instead of raising. Anything that is not a network or
payload failure is a programming error and propagates.
"""

import asyncio
import logging
from enum import Enum

import httpx
from pydantic import ValidationError

from statusboard_core.probes.protocols import DataSourceProtocol
from statusboard_core.probes.retry import RetryConfig
from statusboard_core.types import API_ERROR, Endpoint, StatusResult

logger = logging.getLogger(__name__)

# Failures that mean "this source could not answer", never a bug
SOURCE_FAILURES: tuple[type[BaseException], ...] = (
    httpx.HTTPError,
    ValidationError,
    ValueError,
    asyncio.TimeoutError,
    OSError,
)


class StatusPolicy(str, Enum):
    """How the Status Probe combines its data sources."""

    FALLBACK = "fallback"
    RACE = "race"
    RETRY = "retry"


# Per-source request timeout in seconds
DEFAULT_TIMEOUTS = {
    StatusPolicy.FALLBACK: 5.0,
    StatusPolicy.RACE: 2.0,
    StatusPolicy.RETRY: 5.0,
}


def exhausted_result() -> StatusResult:
    """Result returned when no data source could answer."""
    return StatusResult(online=False, players=API_ERROR, version=API_ERROR, error=True)


class StatusProbe:
    """
    Queries endpoint status through a list of data sources.

    Example:
        async with httpx.AsyncClient() as http:
            probe = StatusProbe(
                sources=create_sources(["proxy", "mcsrvstat"], http),
                policy=StatusPolicy.FALLBACK,
            )
            result = await probe.probe(endpoint)
            if result.error:
                print("every source failed")
    """

    def __init__(
        self,
        sources: list[DataSourceProtocol],
        policy: StatusPolicy = StatusPolicy.FALLBACK,
        timeout: float | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the probe.

        Args:
            sources: Data sources, in preference order
            policy: How sources are combined
            timeout: Per-source request timeout (default depends on policy)
            retry: Attempt ceiling and pause between attempts
        """
        if not sources:
            raise ValueError("StatusProbe needs at least one data source")
        self.sources = list(sources)
        self.policy = StatusPolicy(policy)
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUTS[self.policy]
        self.retry = retry or RetryConfig()

    async def probe(self, endpoint: Endpoint) -> StatusResult:
        """
        Query the status of one endpoint.

        Returns:
            The first successful answer, or exhausted_result() if every
            source failed. Never raises for network failures.
        """
        candidates = [s for s in self.sources if s.supports(endpoint.variant)]
        if not candidates:
            logger.warning(
                f"No data source supports {endpoint.variant.value} endpoint "
                f"{endpoint.full_address}"
            )
            return exhausted_result()

        if self.policy is StatusPolicy.RACE:
            result = await self._race(candidates, endpoint)
        elif self.policy is StatusPolicy.RETRY:
            result = await self._retry(candidates[0], endpoint)
        else:
            result = await self._fallback(candidates, endpoint)

        if result is None:
            logger.warning(f"All status sources failed for {endpoint.full_address}")
            return exhausted_result()
        return result

    async def _query(
        self, source: DataSourceProtocol, endpoint: Endpoint
    ) -> StatusResult | None:
        """Ask one source once. Returns None if the source failed."""
        try:
            return await asyncio.wait_for(
                source.fetch(endpoint, self.timeout),
                timeout=self.timeout,
            )
        except SOURCE_FAILURES as e:
            logger.warning(
                f"Status source {source.name} failed for {endpoint.full_address}: {e!r}"
            )
            return None

    async def _fallback(
        self, sources: list[DataSourceProtocol], endpoint: Endpoint
    ) -> StatusResult | None:
        for index, source in enumerate(sources):
            result = await self._query(source, endpoint)
            if result is not None:
                return result
            if index < len(sources) - 1:
                await asyncio.sleep(self.retry.delay_seconds)
        return None

    async def _retry(
        self, source: DataSourceProtocol, endpoint: Endpoint
    ) -> StatusResult | None:
        attempts = 0
        while True:
            result = await self._query(source, endpoint)
            attempts += 1
            if result is not None:
                return result
            if not self.retry.should_retry(attempts):
                return None
            await asyncio.sleep(self.retry.delay_seconds)

    async def _race(
        self, sources: list[DataSourceProtocol], endpoint: Endpoint
    ) -> StatusResult | None:
        tasks = [asyncio.create_task(self._query(s, endpoint)) for s in sources]
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                if result is not None:
                    return result
            return None
        finally:
            # Losers are cancelled and drained so no request outlives the race
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
