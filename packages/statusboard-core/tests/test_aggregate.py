"""
Tests for cycle aggregation rules.

Tests cover:
- best_latency ignores sentinels (-1 and >= 5000)
- Group is OFFLINE iff no measurement is online
- Representative: first online measurement in catalog order
- Node sort: ascending best latency, unknown last, stable on ties
- Latency target resolution for Bedrock endpoints
"""

from statusboard_core.poller import (
    aggregate_groups,
    best_latency,
    flatten_work_items,
    resolve_latency_target,
    select_representative,
    sort_nodes,
)
from statusboard_core.types import (
    LATENCY_TIMEOUT,
    LATENCY_UNMEASURED,
    UNKNOWN_PLAYERS,
    UNKNOWN_VERSION,
    Endpoint,
    EndpointMeasurement,
    Group,
    GroupStatus,
    Node,
    ProtocolVariant,
)


def measurement(
    latency: int = LATENCY_UNMEASURED,
    online: bool = False,
    players: str = "N/A",
    version: str = "未知",
    variant: ProtocolVariant = ProtocolVariant.JAVA,
    host: str = "h.example.com",
    port: int = 25565,
) -> EndpointMeasurement:
    return EndpointMeasurement(
        endpoint=Endpoint(variant, host, port),
        latency_ms=latency,
        online=online,
        players=players,
        version=version,
    )


def node(name: str, *measurements: EndpointMeasurement, best: int = LATENCY_UNMEASURED) -> Node:
    return Node(name=name, measurements=list(measurements), best_latency=best)


class TestBestLatency:
    def test_minimum_of_real_latencies(self):
        assert best_latency([measurement(120), measurement(80), measurement(300)]) == 80

    def test_sentinels_ignored(self):
        ms = [measurement(LATENCY_UNMEASURED), measurement(LATENCY_TIMEOUT), measurement(7000)]
        assert best_latency(ms) == LATENCY_UNMEASURED

    def test_zero_is_real(self):
        assert best_latency([measurement(0), measurement(LATENCY_TIMEOUT)]) == 0

    def test_empty(self):
        assert best_latency([]) == LATENCY_UNMEASURED


class TestGroupSummary:
    def test_offline_when_nothing_online(self):
        group = Group(
            name="G",
            nodes=[node("A", measurement(50)), node("B", measurement(LATENCY_TIMEOUT))],
        )

        aggregate_groups([group])

        assert group.status is GroupStatus.OFFLINE
        assert group.players == UNKNOWN_PLAYERS
        assert group.version == UNKNOWN_VERSION

    def test_online_when_any_measurement_online(self):
        group = Group(
            name="G",
            nodes=[
                node("A", measurement(50)),
                node("B", measurement(LATENCY_TIMEOUT), measurement(90, online=True, players="1/10", version="1.21")),
            ],
        )

        aggregate_groups([group])

        assert group.status is GroupStatus.ONLINE
        assert group.players == "1/10"
        assert group.version == "1.21"

    def test_representative_is_first_online_in_catalog_order(self):
        """The slower first node still represents the group."""
        first = measurement(250, online=True, players="3/20", version="first")
        second = measurement(20, online=True, players="9/20", version="second")
        group = Group(name="G", nodes=[node("Slow", first), node("Fast", second)])

        assert select_representative(group) is first

        aggregate_groups([group])

        assert group.version == "first"
        assert [n.name for n in group.nodes] == ["Fast", "Slow"]

    def test_representative_falls_back_to_first_measurement(self):
        m = measurement(LATENCY_TIMEOUT)
        group = Group(name="G", nodes=[node("A", m), node("B", measurement(10))])
        assert select_representative(group) is m

    def test_empty_group_is_offline(self):
        group = Group(name="Empty")
        aggregate_groups([group])
        assert group.status is GroupStatus.OFFLINE


class TestSortNodes:
    def test_ascending_unknown_last_stable(self):
        nodes = [
            node("u1", best=LATENCY_UNMEASURED),
            node("b", best=200),
            node("a1", best=40),
            node("u2", best=LATENCY_UNMEASURED),
            node("a2", best=40),
        ]

        assert [n.name for n in sort_nodes(nodes)] == ["a1", "a2", "b", "u1", "u2"]

    def test_aggregate_recomputes_best_latency_before_sorting(self):
        group = Group(
            name="G",
            nodes=[
                node("X", measurement(LATENCY_TIMEOUT)),
                node("Y", measurement(300), measurement(100)),
            ],
        )

        aggregate_groups([group])

        assert [(n.name, n.best_latency) for n in group.nodes] == [
            ("Y", 100),
            ("X", LATENCY_UNMEASURED),
        ]


class TestLatencyTargets:
    def test_java_is_its_own_target(self):
        java = measurement(port=25566)
        n = node("N", java)
        target = resolve_latency_target(n, java.endpoint)
        assert (target.host, target.port) == ("h.example.com", 25566)

    def test_bedrock_uses_java_sibling(self):
        java = measurement(port=25565)
        pe = measurement(variant=ProtocolVariant.BEDROCK, port=19132)
        n = node("N", java, pe)
        assert resolve_latency_target(n, pe.endpoint).port == 25565

    def test_bedrock_only_uses_fallback_port(self):
        pe = measurement(variant=ProtocolVariant.BEDROCK, host="pe.example.com", port=19132)
        n = node("N", pe)
        target = resolve_latency_target(n, pe.endpoint, fallback_port=8080)
        assert target.address == "pe.example.com:8080"

    def test_flatten_in_catalog_order(self, board_catalog):
        from statusboard_core.catalog import build_snapshot

        items = flatten_work_items(build_snapshot(board_catalog).groups)

        assert [(i.group_name, i.node.name, i.endpoint.port, i.latency_target.port) for i in items] == [
            ("Survival", "Main", 25565, 25565),
            ("Survival", "Main", 19132, 25565),
            ("Survival", "Backup", 25566, 25566),
            ("Pocket", "PE", 19133, 80),
        ]
