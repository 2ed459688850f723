"""
Pydantic response types for status data sources.

Every data source answers "is this server online, how many players, what
version" with its own JSON schema. These models validate the raw payloads;
each data source then normalizes its model into a StatusResult.

Notes:
- Player counts are optional in every schema, default them to 0
- mcsrvstat returns version as a bare string, the others nest it
- minetools signals "offline" with an "error" field instead of a flag
"""

from pydantic import BaseModel


# =============================================================================
# Status proxy (statusboard_proxy)
# =============================================================================
# GET /api/status?address=host:port&type=java


class ProxyPlayers(BaseModel):
    max: int = 0
    online: int = 0


class ProxyVersion(BaseModel):
    name: str | None = None
    protocol: int = -1


class ProxyStatusResponse(BaseModel):
    """
    Response from the status proxy.

    Example response:
    {
        "online": true,
        "description": "A Minecraft Server",
        "favicon": null,
        "latency": 42.0,
        "players": {"max": 20, "online": 3, "sample": []},
        "version": {"name": "1.20.1", "protocol": 763}
    }
    """

    online: bool
    latency: float = -1
    players: ProxyPlayers | None = None
    version: ProxyVersion | None = None


# =============================================================================
# api.mcsrvstat.us
# =============================================================================
# GET /2/{address} (Java) or /bedrock/2/{address} (Bedrock)


class McsrvstatPlayers(BaseModel):
    online: int = 0
    max: int = 0


class McsrvstatResponse(BaseModel):
    """
    Response from api.mcsrvstat.us.

    Example response:
    {"online": true, "players": {"online": 5, "max": 20}, "version": "1.20.1"}
    """

    online: bool
    players: McsrvstatPlayers | None = None
    version: str | None = None


# =============================================================================
# mcapi.us
# =============================================================================
# GET /server/status?ip={host}&port={port}


class McapiPlayers(BaseModel):
    max: int = 0
    now: int = 0


class McapiServer(BaseModel):
    name: str | None = None
    protocol: int | None = None


class McapiResponse(BaseModel):
    """
    Response from mcapi.us.

    Example response:
    {
        "status": "success",
        "online": true,
        "players": {"max": 20, "now": 5},
        "server": {"name": "1.20.1", "protocol": 763}
    }
    """

    status: str = "success"
    online: bool = False
    players: McapiPlayers | None = None
    server: McapiServer | None = None


# =============================================================================
# api.minetools.eu
# =============================================================================
# GET /ping/{host}/{port}


class MinetoolsPlayers(BaseModel):
    online: int = 0
    max: int = 0


class MinetoolsVersion(BaseModel):
    name: str | None = None
    protocol: int | None = None


class MinetoolsResponse(BaseModel):
    """
    Response from api.minetools.eu ping.

    Example response:
    {
        "latency": 33.1,
        "players": {"online": 5, "max": 20},
        "version": {"name": "1.20.1", "protocol": 763}
    }

    An unreachable server is reported as {"error": "..."}.
    """

    error: str | None = None
    latency: float | None = None
    players: MinetoolsPlayers | None = None
    version: MinetoolsVersion | None = None
