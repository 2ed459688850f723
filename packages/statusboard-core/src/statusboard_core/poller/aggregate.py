"""
Aggregation rules applied once every probe of a cycle has settled.

Pure functions over the cycle's working groups:
- best_latency(): lowest real latency of a node
- select_representative(): the measurement that summarizes a group
- sort_nodes(): latency order, unknown last, stable on ties
- aggregate_groups(): all of the above for a whole snapshot

Because aggregation only runs after the fan-in barrier, the result is
deterministic (catalog order, then latency order) no matter in which
order the network answered.
"""

from typing import Iterable

from statusboard_core.types import (
    LATENCY_UNMEASURED,
    UNKNOWN_PLAYERS,
    UNKNOWN_VERSION,
    EndpointMeasurement,
    Group,
    GroupStatus,
    Node,
)


def best_latency(measurements: Iterable[EndpointMeasurement]) -> int:
    """
    Lowest latency among measurements with 0 <= latency < LATENCY_TIMEOUT.

    Returns:
        Milliseconds, or LATENCY_UNMEASURED (-1) if none qualifies
    """
    qualifying = [m.latency_ms for m in measurements if m.has_latency]
    return min(qualifying) if qualifying else LATENCY_UNMEASURED


def select_representative(group: Group) -> EndpointMeasurement | None:
    """
    Pick the measurement that summarizes a group.

    Scans nodes in their current order and measurements in endpoint order;
    the first online measurement wins. If none is online, the first node's
    first measurement is returned (offline). Returns None only for a group
    without any endpoint on its first node.
    """
    for node in group.nodes:
        for measurement in node.measurements:
            if measurement.online:
                return measurement
    if group.nodes and group.nodes[0].measurements:
        return group.nodes[0].measurements[0]
    return None


def summarize_group(group: Group) -> None:
    """Set status, players and version of `group` from its representative."""
    representative = select_representative(group)
    if representative is not None and representative.online:
        group.status = GroupStatus.ONLINE
        group.players = representative.players
        group.version = representative.version
    else:
        group.status = GroupStatus.OFFLINE
        group.players = UNKNOWN_PLAYERS
        group.version = UNKNOWN_VERSION


def latency_sort_key(node: Node) -> tuple[bool, int]:
    """Sort key: known latencies ascending, unknown (-1) after all of them."""
    return (node.best_latency < 0, node.best_latency)


def sort_nodes(nodes: list[Node]) -> list[Node]:
    """Return nodes ordered by best_latency; ties keep their relative order."""
    return sorted(nodes, key=latency_sort_key)


def aggregate_groups(groups: Iterable[Group]) -> None:
    """
    Run per-node and per-group aggregation in place.

    Only ever called on a cycle's private working groups, before they are
    published.
    """
    for group in groups:
        for node in group.nodes:
            node.best_latency = best_latency(node.measurements)
        summarize_group(group)
        group.nodes = sort_nodes(group.nodes)
