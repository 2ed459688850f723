"""
Formatting functions for the status board.

This module turns store contents into Rich markup and renderables:
- Latency classes and text for nodes and endpoints
- Group header, group table, latency chart and group panel
- Page header (title, progress bar, countdown) and footer

All functions are pure: they read a Snapshot (or parts of it) and never
touch the ResultStore or the orchestrator. Offline and unreachable
endpoints are always rendered, never hidden.
"""

import math

from rich.console import Group as RenderGroup
from rich.console import RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from sparklines import sparklines

from statusboard_core.catalog import PageConfig
from statusboard_core.types import (
    LATENCY_TIMEOUT,
    UNKNOWN_PLAYERS,
    UNKNOWN_VERSION,
    EndpointMeasurement,
    Group,
    GroupStatus,
    Node,
    Snapshot,
)

GOOD_LATENCY_MS = 150
MEDIUM_LATENCY_MS = 300
MIN_CHART_SCALE_MS = 100

LATENCY_STYLES = {
    "good": "green",
    "medium": "yellow",
    "bad": "red",
}

STATUS_LABELS = {
    GroupStatus.TESTING: "[cyan]Testing[/cyan]",
    GroupStatus.ONLINE: "[green]● Online[/green]",
    GroupStatus.OFFLINE: "[red]✗ Offline[/red]",
}

STATUS_BORDERS = {
    GroupStatus.TESTING: "cyan",
    GroupStatus.ONLINE: "green",
    GroupStatus.OFFLINE: "red",
}

ALL_GROUPS = "all"


def latency_class(latency_ms: int) -> str:
    """
    Classify a latency for colouring.

    Sentinels (unmeasured or timeout) count as "bad".

    Returns:
        "good" (< 150 ms), "medium" (< 300 ms) or "bad"
    """
    if latency_ms < 0 or latency_ms >= LATENCY_TIMEOUT:
        return "bad"
    if latency_ms < GOOD_LATENCY_MS:
        return "good"
    if latency_ms < MEDIUM_LATENCY_MS:
        return "medium"
    return "bad"


def format_latency(latency_ms: int) -> str:
    """Endpoint latency text: "-" unmeasured, "timeout", or "N ms"."""
    if latency_ms < 0:
        return "-"
    if latency_ms >= LATENCY_TIMEOUT:
        return "timeout"
    return f"{latency_ms} ms"


def format_endpoint_latency(measurement: EndpointMeasurement) -> str:
    style = LATENCY_STYLES[latency_class(measurement.latency_ms)]
    return f"[{style}]{format_latency(measurement.latency_ms)}[/{style}]"


def format_node_latency(group: Group, node: Node) -> str:
    """
    Node summary latency with Rich markup.

    While the group is testing the summary reads "testing..."; nodes of an
    offline group are dimmed.
    """
    if group.status is GroupStatus.TESTING:
        return "[dim]testing...[/dim]"
    text = f"{node.best_latency} ms" if node.best_latency >= 0 else "timeout"
    if group.status is GroupStatus.OFFLINE:
        return f"[dim]{text}[/dim]"
    style = LATENCY_STYLES[latency_class(node.best_latency)]
    return f"[{style}]{text}[/{style}]"


def format_group_header(group: Group) -> str:
    """
    One-line group summary: status, then players and version when known.

    Players and version are left out while the group is offline or the
    values are still unknown.
    """
    parts = [f"[bold]{escape(group.name)}[/bold]", STATUS_LABELS[group.status]]
    if group.status is not GroupStatus.OFFLINE:
        if group.players != UNKNOWN_PLAYERS:
            parts.append(f"players {escape(group.players)}")
        if group.version != UNKNOWN_VERSION:
            parts.append(f"version {escape(group.version)}")
    return "  ".join(parts)


def make_group_table(group: Group) -> Table:
    """
    Table of a group's nodes.

    Expanded nodes are followed by one indented row per endpoint with its
    address, protocol, latency, players and version.
    """
    table = Table(expand=True, box=None, show_header=False, padding=(0, 1))
    table.add_column("Node", ratio=3)
    table.add_column("Protocol", ratio=1)
    table.add_column("Latency", justify="right", ratio=1)
    table.add_column("Players", justify="right", ratio=1)
    table.add_column("Version", ratio=2)

    for node in group.nodes:
        marker = "▾" if node.is_expanded else "▸"
        table.add_row(
            f"{marker} {escape(node.name)}",
            "",
            format_node_latency(group, node),
            "",
            "",
        )
        if not node.is_expanded:
            continue
        for m in node.measurements:
            table.add_row(
                f"    [dim]{escape(m.endpoint.full_address)}[/dim]",
                m.endpoint.variant.label,
                format_endpoint_latency(m),
                escape(m.players),
                escape(m.version),
            )
    return table


def make_latency_chart(group: Group) -> str | None:
    """
    One-line latency chart of a group: a bar per node, coloured by latency class.

    Bars are scaled against max(100 ms, slowest node). Nodes without a real
    latency are left out; returns None when no node has one.
    """
    nodes = [n for n in group.nodes if 0 <= n.best_latency < LATENCY_TIMEOUT]
    if group.status is GroupStatus.TESTING or not nodes:
        return None

    values = [n.best_latency for n in nodes]
    lines = list(sparklines(values, minimum=0, maximum=max(MIN_CHART_SCALE_MS, *values)))
    bars = lines[0] if lines else ""
    cells = []
    for node, bar in zip(nodes, bars):
        style = LATENCY_STYLES[latency_class(node.best_latency)]
        cells.append(f"[{style}]{bar}[/{style}] {escape(node.name)} {node.best_latency}ms")
    return "  ".join(cells)


def make_group_panel(group: Group) -> Panel:
    chart = make_latency_chart(group)
    table = make_group_table(group)
    return Panel(
        RenderGroup(table, Text.from_markup(chart)) if chart else table,
        title=format_group_header(group),
        title_align="left",
        border_style=STATUS_BORDERS[group.status],
        padding=(0, 1),
    )


def filter_groups(snapshot: Snapshot | None, group_name: str = ALL_GROUPS) -> list[Group]:
    """Groups to display: all of them, or the one named `group_name`."""
    if snapshot is None:
        return []
    if group_name == ALL_GROUPS:
        return list(snapshot.groups)
    return [g for g in snapshot.groups if g.name == group_name]


def format_progress_bar(ratio: float, width: int = 20) -> str:
    """Progress bar markup: filled cells, dimmed remainder, percentage."""
    ratio = min(max(ratio, 0.0), 1.0)
    filled = round(ratio * width)
    bar = "█" * filled + "[dim]" + "─" * (width - filled) + "[/dim]"
    return f"[cyan]{bar}[/cyan] {round(ratio * 100):3d}%"


def format_countdown(seconds: float) -> str:
    return f"next refresh in {math.ceil(seconds)}s"


def format_status_line(
    refreshing: bool,
    progress: float,
    remaining: float | None,
    last_error: str | None = None,
) -> str:
    """
    Header status line: progress while refreshing, countdown otherwise.

    The last cycle error, if any, is appended in red.
    """
    if refreshing:
        line = f"refreshing {format_progress_bar(progress)}"
    elif remaining is not None and remaining > 0:
        line = f"[dim]{format_countdown(remaining)}[/dim]"
    else:
        line = "[dim]idle[/dim]"
    if last_error:
        line += f"  [red]error: {escape(last_error)}[/red]"
    return line


def format_page_header(page: PageConfig, status_line: str, group_name: str = ALL_GROUPS) -> str:
    lines = [f"[bold cyan]{escape(page.title)}[/bold cyan]"]
    if page.subtitle:
        lines.append(f"[dim]{escape(page.subtitle)}[/dim]")
    lines.append(f"group: [bold]{escape(group_name)}[/bold]  {status_line}")
    return "\n".join(lines)


def format_footer(page: PageConfig) -> str:
    keys = "[bold]r[/bold] refresh  [bold]e[/bold] expand/collapse  [bold]g[/bold] next group  [bold]q[/bold] quit"
    if page.footer:
        return f"{keys}\n[dim]{escape(page.footer)}[/dim]"
    return keys


def render_groups(groups: list[Group]) -> RenderableType:
    """Stack group panels vertically; placeholder text when there are none."""
    if not groups:
        return Text("Loading...", style="dim")
    return RenderGroup(*(make_group_panel(g) for g in groups))
