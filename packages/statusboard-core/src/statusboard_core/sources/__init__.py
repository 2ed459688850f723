"""
Status data sources.

Data sources are registered by name in SOURCE_REGISTRY. Adding a source
means implementing DataSourceProtocol and registering the class here; the
Status Probe and the poller never branch on a concrete source.
"""

from typing import TYPE_CHECKING, Any

import httpx

from statusboard_core.sources.clients import (
    McapiSource,
    McsrvstatSource,
    MinetoolsSource,
    ProxySource,
    format_players,
    offline_result,
)

if TYPE_CHECKING:
    from statusboard_core.probes.protocols import DataSourceProtocol

SOURCE_REGISTRY: dict[str, type] = {
    "proxy": ProxySource,
    "mcsrvstat": McsrvstatSource,
    "mcapi": McapiSource,
    "minetools": MinetoolsSource,
}


def create_sources(
    names: list[str],
    http: httpx.AsyncClient,
    **overrides: Any,
) -> list["DataSourceProtocol"]:
    """
    Build data source instances in the given order.

    Args:
        names: Registered source names (e.g., ["proxy", "mcsrvstat"])
        http: Shared HTTP client
        **overrides: Per-source base URLs, keyed "<name>_url"
            (e.g., proxy_url="http://localhost:3001")

    Returns:
        List of data sources, same order as `names`

    Raises:
        ValueError: If a name is not registered or `names` is empty
    """
    if not names:
        raise ValueError("At least one status data source is required")

    sources: list["DataSourceProtocol"] = []
    for name in names:
        cls = SOURCE_REGISTRY.get(name)
        if cls is None:
            raise ValueError(
                f"Unknown data source '{name}'. "
                f"Available sources: {', '.join(SOURCE_REGISTRY)}"
            )
        base_url = overrides.get(f"{name}_url")
        if base_url:
            sources.append(cls(http=http, base_url=base_url))
        else:
            sources.append(cls(http=http))
    return sources


def get_available_sources() -> list[str]:
    """Return list of registered source names."""
    return list(SOURCE_REGISTRY)


__all__ = [
    "SOURCE_REGISTRY",
    "create_sources",
    "get_available_sources",
    "ProxySource",
    "McsrvstatSource",
    "McapiSource",
    "MinetoolsSource",
    "format_players",
    "offline_result",
]
