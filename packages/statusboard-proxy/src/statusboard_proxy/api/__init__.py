"""API routers for the status proxy."""

from .status import get_querier, status_router

__all__ = ["status_router", "get_querier"]
