"""
Factory for wiring probes and the orchestrator from Settings.

The CLI owns the shared httpx.AsyncClient and the ResultStore; this module
only assembles the pieces around them.
"""

import httpx

from statusboard_core.catalog import EndpointCatalog
from statusboard_core.config import Settings
from statusboard_core.poller import PollingOrchestrator
from statusboard_core.probes import (
    MinetoolsLatencyProbe,
    RetryConfig,
    StatusPolicy,
    StatusProbe,
    TcpLatencyProbe,
)
from statusboard_core.probes.protocols import LatencyProbeProtocol
from statusboard_core.sources import create_sources
from statusboard_core.store import ResultStore

AVAILABLE_LATENCY_METHODS = ["tcp", "minetools"]


def create_status_probe(settings: Settings, http: httpx.AsyncClient) -> StatusProbe:
    """
    Build the Status Probe described by `settings`.

    Raises:
        ValueError: If a configured source name is unknown
    """
    sources = create_sources(settings.status_sources, http, proxy_url=settings.proxy_url)
    return StatusProbe(
        sources=sources,
        policy=StatusPolicy(settings.status_policy),
        timeout=settings.source_timeout_seconds,
        retry=RetryConfig(
            max_attempts=settings.retry_attempts,
            delay_seconds=settings.retry_delay_seconds,
        ),
    )


def create_latency_probe(
    settings: Settings, http: httpx.AsyncClient
) -> LatencyProbeProtocol:
    """
    Build the Latency Probe described by `settings`.

    Raises:
        ValueError: If settings.latency_method is not recognized
    """
    if settings.latency_method == "tcp":
        return TcpLatencyProbe(
            timeout=settings.latency_timeout_seconds,
            samples=settings.latency_samples,
        )
    elif settings.latency_method == "minetools":
        return MinetoolsLatencyProbe(
            http=http,
            timeout=settings.latency_timeout_seconds,
            samples=settings.latency_samples,
        )
    else:
        raise ValueError(
            f"Unknown latency method '{settings.latency_method}'. "
            f"Available methods: {', '.join(AVAILABLE_LATENCY_METHODS)}"
        )


def create_orchestrator(
    settings: Settings,
    catalog: EndpointCatalog,
    store: ResultStore,
    http: httpx.AsyncClient,
) -> PollingOrchestrator:
    """
    Build a PollingOrchestrator with probes from `settings`.

    The countdown is not attached; callers that want auto-refresh call
    attach_countdown(settings.refresh_interval_seconds).
    """
    return PollingOrchestrator(
        catalog=catalog,
        status_probe=create_status_probe(settings, http),
        latency_probe=create_latency_probe(settings, http),
        store=store,
        fallback_latency_port=settings.fallback_latency_port,
    )
