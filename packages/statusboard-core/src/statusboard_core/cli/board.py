"""Status board CLI commands.

This module provides:
- watch: live dashboard with auto-refresh and keyboard control
- check: run one polling cycle and print the result

Options left unset fall back to Settings (STATUSBOARD_* environment
variables, then defaults).
"""

import asyncio
import json
from pathlib import Path

import httpx
import typer
from pydantic import ValidationError
from rich.markup import escape

from statusboard_core.catalog import CatalogError, EndpointCatalog, load_catalog
from statusboard_core.cli.console import configure_logging, console
from statusboard_core.cli.factory import create_orchestrator
from statusboard_core.config import Settings
from statusboard_core.dashboard import ALL_GROUPS, DashboardApp, filter_groups, make_group_panel
from statusboard_core.store import ResultStore
from statusboard_core.types import Snapshot


def _build_settings(**overrides) -> Settings:
    """Settings with every non-None CLI option applied on top."""
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        console.print(f"[red]Invalid settings:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _load_catalog_or_exit(path: Path) -> EndpointCatalog:
    try:
        return load_catalog(path)
    except CatalogError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _check_group(catalog: EndpointCatalog, group: str) -> None:
    if group != ALL_GROUPS and group not in catalog.group_names:
        console.print(
            f"[red]Error:[/red] Unknown group '{escape(group)}'. "
            f"Available groups: {escape(', '.join(catalog.group_names))}"
        )
        raise typer.Exit(1)


def watch(
    config: Path = typer.Option(
        None, "--config", "-c", envvar="STATUSBOARD_CONFIG_PATH", help="Server list (JSON)"
    ),
    group: str = typer.Option(ALL_GROUPS, "--group", "-g", help="Show only this group"),
    interval: float = typer.Option(
        None, "--interval", "-i", help="Auto-refresh interval in seconds"
    ),
    policy: str = typer.Option(None, "--policy", "-p", help="fallback, race or retry"),
    proxy_url: str = typer.Option(
        None, "--proxy", envvar="STATUSBOARD_PROXY_URL", help="Status proxy base URL"
    ),
    log_level: str = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """
    Show the live status board.

    Loads the server list, probes every endpoint and refreshes
    automatically. Keys: r refresh, e expand/collapse, g next group,
    q quit.
    """
    settings = _build_settings(
        config_path=config,
        refresh_interval_seconds=interval,
        status_policy=policy,
        proxy_url=proxy_url,
        log_level=log_level,
    )
    configure_logging(settings.log_level)
    catalog = _load_catalog_or_exit(settings.config_path)
    _check_group(catalog, group)

    async def _run() -> None:
        store = ResultStore()
        async with httpx.AsyncClient() as http:
            try:
                orchestrator = create_orchestrator(settings, catalog, store, http)
            except ValueError as e:
                console.print(f"[red]Error:[/red] {escape(str(e))}")
                raise typer.Exit(1)

            app = DashboardApp(
                orchestrator,
                store,
                refresh_interval=settings.refresh_interval_seconds,
                group=group,
                console=console,
            )
            await app.run()

    asyncio.run(_run())


def check(
    config: Path = typer.Option(
        None, "--config", "-c", envvar="STATUSBOARD_CONFIG_PATH", help="Server list (JSON)"
    ),
    group: str = typer.Option(ALL_GROUPS, "--group", "-g", help="Show only this group"),
    policy: str = typer.Option(None, "--policy", "-p", help="fallback, race or retry"),
    proxy_url: str = typer.Option(
        None, "--proxy", envvar="STATUSBOARD_PROXY_URL", help="Status proxy base URL"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    log_level: str = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Probe every server once and print the result."""
    settings = _build_settings(
        config_path=config,
        status_policy=policy,
        proxy_url=proxy_url,
        log_level=log_level,
    )
    configure_logging(settings.log_level)
    catalog = _load_catalog_or_exit(settings.config_path)
    _check_group(catalog, group)

    async def _check() -> Snapshot | None:
        store = ResultStore()
        async with httpx.AsyncClient() as http:
            try:
                orchestrator = create_orchestrator(settings, catalog, store, http)
            except ValueError as e:
                console.print(f"[red]Error:[/red] {escape(str(e))}")
                raise typer.Exit(1)

            await orchestrator.run_cycle(is_initial_load=True)
        store.toggle_all_expanded()
        return store.snapshot

    snapshot = asyncio.run(_check())
    if snapshot is None:
        console.print("[red]Error:[/red] polling cycle did not complete")
        raise typer.Exit(1)

    if json_output:
        data = snapshot.to_dict()
        if group != ALL_GROUPS:
            data["groups"] = [g for g in data["groups"] if g["name"] == group]
        print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        return

    console.print(f"[bold cyan]{escape(catalog.page.title)}[/bold cyan]")
    for g in filter_groups(snapshot, group):
        console.print(make_group_panel(g))
