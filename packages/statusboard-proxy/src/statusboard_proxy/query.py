"""
Game server queries through mcstatus.

This module provides:
- QueryTarget / parse_target: turn (address, type) into host, port, protocol
- StatusResponse: the normalized JSON shape returned by GET /api/status
- StatusQuerier: runs the query and normalizes success and failure

Every query failure maps to offline_response(); the proxy never reports
a failed query as an HTTP error.
"""

import asyncio
import logging
from dataclasses import dataclass

from mcstatus import BedrockServer, JavaServer
from pydantic import BaseModel, Field

from .config import Settings

logger = logging.getLogger(__name__)

BEDROCK_TYPES = ("pe", "bedrock")

OFFLINE_DESCRIPTION = "Server offline or unreachable"

QUERY_FAILURES = (OSError, asyncio.TimeoutError, ValueError)


class PlayerSample(BaseModel):
    name: str
    id: str


class Players(BaseModel):
    max: int = 0
    online: int = 0
    sample: list[PlayerSample] = Field(default_factory=list)


class Version(BaseModel):
    name: str = "N/A"
    protocol: int = -1


class StatusResponse(BaseModel):
    """Response from /api/status."""

    online: bool
    description: str
    favicon: str | None = None
    latency: int = -1
    players: Players = Field(default_factory=Players)
    version: Version = Field(default_factory=Version)


class ErrorResponse(BaseModel):
    error: str


def offline_response() -> StatusResponse:
    """Fixed shape returned whenever a query fails."""
    return StatusResponse(online=False, description=OFFLINE_DESCRIPTION)


@dataclass(frozen=True)
class QueryTarget:
    host: str
    port: int
    bedrock: bool


def parse_target(
    address: str,
    type_: str = "java",
    java_default_port: int = 25565,
    bedrock_default_port: int = 19132,
) -> QueryTarget:
    """
    Resolve host, port and protocol family of a status request.

    Port precedence: a ":port" suffix on `address`, then a numeric
    `type_`, then the default port of the protocol family. The family is
    always derived from `type_` ("pe"/"bedrock", case-insensitive, select
    Bedrock; anything else, numbers included, selects Java).

    Raises:
        ValueError: If the port in `address` is not a number
    """
    host, sep, port_text = address.partition(":")
    bedrock = type_.lower() in BEDROCK_TYPES

    if sep:
        port = int(port_text)
    elif type_.isdigit():
        port = int(type_)
    else:
        port = bedrock_default_port if bedrock else java_default_port
    return QueryTarget(host=host, port=port, bedrock=bedrock)


class StatusQuerier:
    """
    Queries a game server and normalizes the answer.

    Example:
        querier = StatusQuerier.from_settings(settings)
        response = await querier.query("mc.example.com:25566", "java")
    """

    def __init__(
        self,
        timeout: float = 5.0,
        java_default_port: int = 25565,
        bedrock_default_port: int = 19132,
    ) -> None:
        self.timeout = timeout
        self.java_default_port = java_default_port
        self.bedrock_default_port = bedrock_default_port

    @classmethod
    def from_settings(cls, settings: Settings) -> "StatusQuerier":
        return cls(
            timeout=settings.query_timeout_seconds,
            java_default_port=settings.java_default_port,
            bedrock_default_port=settings.bedrock_default_port,
        )

    async def query(self, address: str, type_: str = "java") -> StatusResponse:
        """Query `address`; returns offline_response() on any query failure."""
        try:
            target = parse_target(
                address, type_, self.java_default_port, self.bedrock_default_port
            )
            if target.bedrock:
                return await self._query_bedrock(target)
            return await self._query_java(target)
        except QUERY_FAILURES as e:
            logger.warning(f"Status query for {address} (type={type_}) failed: {e!r}")
            return offline_response()

    async def _query_java(self, target: QueryTarget) -> StatusResponse:
        server = JavaServer(target.host, target.port, timeout=self.timeout)
        status = await asyncio.wait_for(server.async_status(), timeout=self.timeout)
        sample = [
            PlayerSample(name=p.name, id=p.id) for p in (status.players.sample or [])
        ]
        return StatusResponse(
            online=True,
            description=status.motd.to_plain(),
            favicon=status.icon,
            latency=round(status.latency),
            players=Players(
                max=status.players.max,
                online=status.players.online,
                sample=sample,
            ),
            version=Version(name=status.version.name, protocol=status.version.protocol),
        )

    async def _query_bedrock(self, target: QueryTarget) -> StatusResponse:
        server = BedrockServer(target.host, target.port, timeout=self.timeout)
        status = await asyncio.wait_for(server.async_status(), timeout=self.timeout)
        return StatusResponse(
            online=True,
            description=status.motd.to_plain(),
            latency=round(status.latency),
            players=Players(max=status.players.max, online=status.players.online),
            version=Version(
                name=status.version.name or "N/A",
                protocol=status.version.protocol or -1,
            ),
        )
