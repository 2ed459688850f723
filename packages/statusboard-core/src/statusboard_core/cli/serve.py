"""Status proxy CLI command.

Imports the proxy lazily so the dashboard commands do not load FastAPI.
"""

import typer

from statusboard_core.cli.console import configure_logging, console


def proxy(
    host: str = typer.Option(
        None, "--host", envvar="STATUSBOARD_PROXY_HOST", help="Interface to bind (default 0.0.0.0)"
    ),
    port: int = typer.Option(
        None, "--port", envvar="STATUSBOARD_PROXY_PORT", help="Port to listen on (default 3001)"
    ),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """
    Serve the status proxy (GET /api/status).

    Environment variables:
        STATUSBOARD_PROXY_HOST: Interface to bind
        STATUSBOARD_PROXY_PORT: Port to listen on
        STATUSBOARD_PROXY_QUERY_TIMEOUT_SECONDS: Per-query timeout
    """
    import uvicorn

    from statusboard_proxy.config import settings

    configure_logging(log_level)
    host = host or settings.host
    port = port or settings.port
    console.print(f"Starting status proxy on http://{host}:{port}")

    uvicorn.run(
        "statusboard_proxy.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )
