"""Status query endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import settings
from ..query import ErrorResponse, StatusQuerier, StatusResponse

status_router = APIRouter(prefix="/api", tags=["status"])


def get_querier() -> StatusQuerier:
    """Dependency to get StatusQuerier instance."""
    return StatusQuerier.from_settings(settings)


@status_router.get(
    "/status",
    response_model=StatusResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_status(
    address: str | None = None,
    type: str = "java",
    querier: StatusQuerier = Depends(get_querier),
) -> StatusResponse | JSONResponse:
    """
    Return the normalized status of one game server.

    Query parameters:
    - address: "host" or "host:port" (required)
    - type: "java", "pe"/"bedrock", or a port number (default "java")

    Always answers 200 once an address is given; unreachable servers
    get the fixed offline shape.
    """
    if not address:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Server address is required").model_dump(),
        )
    return await querier.query(address, type)
