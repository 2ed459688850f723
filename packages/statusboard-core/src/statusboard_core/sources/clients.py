"""
HTTP clients for status data sources.

Each client wraps one status API and normalizes its schema into a
StatusResult:
- ProxySource: the dedicated statusboard proxy (Java and Bedrock)
- McsrvstatSource: api.mcsrvstat.us (Java and Bedrock)
- McapiSource: mcapi.us (Java only)
- MinetoolsSource: api.minetools.eu (Java only)

Key design decisions:
- Uses injected httpx.AsyncClient, shared by all sources
- Fails loudly on HTTP errors and malformed payloads; the Status Probe
  owns fallback/retry policy
- A well-formed "offline" answer is a result, not an error
"""

from dataclasses import dataclass

import httpx

from statusboard_core.sources.types import (
    McapiResponse,
    McsrvstatResponse,
    MinetoolsResponse,
    ProxyStatusResponse,
)
from statusboard_core.types import (
    NOT_AVAILABLE,
    UNKNOWN_VERSION,
    Endpoint,
    ProtocolVariant,
    StatusResult,
)


def format_players(online: int, maximum: int) -> str:
    """Format a player count as "current/max"."""
    return f"{online}/{maximum}"


def offline_result(source: str) -> StatusResult:
    """Result for a source that confirmed the server is offline."""
    return StatusResult(
        online=False,
        players=NOT_AVAILABLE,
        version=UNKNOWN_VERSION,
        source=source,
    )


@dataclass
class ProxySource:
    """
    Status proxy client.

    The proxy is a thin pass-through to the mcstatus library and speaks
    both protocol variants.

    Example:
        async with httpx.AsyncClient() as http:
            source = ProxySource(http=http, base_url="http://localhost:3001")
            result = await source.fetch(endpoint, timeout=5.0)
    """

    http: httpx.AsyncClient
    base_url: str = "http://localhost:3001"
    name: str = "proxy"

    def supports(self, variant: ProtocolVariant) -> bool:
        return True

    async def fetch(self, endpoint: Endpoint, timeout: float) -> StatusResult:
        kind = "pe" if endpoint.variant is ProtocolVariant.BEDROCK else "java"
        response = await self.http.get(
            f"{self.base_url.rstrip('/')}/api/status",
            params={"address": endpoint.full_address, "type": kind},
            timeout=timeout,
        )
        response.raise_for_status()

        data = ProxyStatusResponse.model_validate(response.json())
        if not data.online:
            return offline_result(self.name)

        players = data.players
        version = data.version.name if data.version else None
        return StatusResult(
            online=True,
            players=format_players(players.online, players.max) if players else NOT_AVAILABLE,
            version=version or UNKNOWN_VERSION,
            source=self.name,
        )


@dataclass
class McsrvstatSource:
    """api.mcsrvstat.us client (v2 API)."""

    http: httpx.AsyncClient
    base_url: str = "https://api.mcsrvstat.us"
    name: str = "mcsrvstat"

    def supports(self, variant: ProtocolVariant) -> bool:
        return True

    async def fetch(self, endpoint: Endpoint, timeout: float) -> StatusResult:
        prefix = "/bedrock/2" if endpoint.variant is ProtocolVariant.BEDROCK else "/2"
        response = await self.http.get(
            f"{self.base_url.rstrip('/')}{prefix}/{endpoint.full_address}",
            timeout=timeout,
        )
        response.raise_for_status()

        data = McsrvstatResponse.model_validate(response.json())
        if not data.online:
            return offline_result(self.name)

        players = data.players
        return StatusResult(
            online=True,
            players=format_players(players.online, players.max) if players else NOT_AVAILABLE,
            version=data.version or UNKNOWN_VERSION,
            source=self.name,
        )


@dataclass
class McapiSource:
    """mcapi.us client. Java servers only."""

    http: httpx.AsyncClient
    base_url: str = "https://mcapi.us"
    name: str = "mcapi"

    def supports(self, variant: ProtocolVariant) -> bool:
        return variant is ProtocolVariant.JAVA

    async def fetch(self, endpoint: Endpoint, timeout: float) -> StatusResult:
        response = await self.http.get(
            f"{self.base_url.rstrip('/')}/server/status",
            params={"ip": endpoint.host, "port": endpoint.port},
            timeout=timeout,
        )
        response.raise_for_status()

        data = McapiResponse.model_validate(response.json())
        if not data.online:
            return offline_result(self.name)

        players = data.players
        version = data.server.name if data.server else None
        return StatusResult(
            online=True,
            players=format_players(players.now, players.max) if players else NOT_AVAILABLE,
            version=version or UNKNOWN_VERSION,
            source=self.name,
        )


@dataclass
class MinetoolsSource:
    """api.minetools.eu ping client. Java servers only."""

    http: httpx.AsyncClient
    base_url: str = "https://api.minetools.eu"
    name: str = "minetools"

    def supports(self, variant: ProtocolVariant) -> bool:
        return variant is ProtocolVariant.JAVA

    async def fetch(self, endpoint: Endpoint, timeout: float) -> StatusResult:
        response = await self.http.get(
            f"{self.base_url.rstrip('/')}/ping/{endpoint.host}/{endpoint.port}",
            timeout=timeout,
        )
        response.raise_for_status()

        data = MinetoolsResponse.model_validate(response.json())
        if data.error:
            return offline_result(self.name)

        players = data.players
        version = data.version.name if data.version else None
        return StatusResult(
            online=True,
            players=format_players(players.online, players.max) if players else NOT_AVAILABLE,
            version=version or UNKNOWN_VERSION,
            source=self.name,
        )
