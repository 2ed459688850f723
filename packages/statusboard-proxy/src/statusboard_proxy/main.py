"""FastAPI application for the status proxy."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import status_router
from .config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    logger.info(
        f"Status proxy ready: query timeout {settings.query_timeout_seconds}s, "
        f"default ports java={settings.java_default_port} "
        f"bedrock={settings.bedrock_default_port}"
    )
    yield
    logger.info("Status proxy stopped")


app = FastAPI(
    title="Status Proxy",
    description="Normalized Minecraft Java/Bedrock server status",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(status_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "statusboard_proxy.main:app",
        host=settings.host,
        port=settings.port,
    )
