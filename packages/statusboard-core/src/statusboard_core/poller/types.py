"""
Work item types for the polling cycle.

This module defines:
- LatencyTarget: where the latency of an endpoint is measured
- WorkItem: one (node, endpoint) pair of a cycle
- ProbeOutcome: probe results tagged with the cycle that produced them
- resolve_latency_target / flatten_work_items: cycle step 3
"""

from dataclasses import dataclass
from datetime import datetime

from statusboard_core.types import (
    Endpoint,
    EndpointMeasurement,
    Group,
    Node,
    ProtocolVariant,
    StatusResult,
)

# Bedrock-only nodes are timed against this port on the same host
DEFAULT_FALLBACK_LATENCY_PORT = 80


@dataclass(frozen=True)
class LatencyTarget:
    host: str
    port: int

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class WorkItem:
    """
    One endpoint to probe in a cycle.

    Attributes:
        group_name: Group the node belongs to
        node: Working node (private to the cycle)
        measurement: Working measurement that receives the results
        latency_target: Address the latency probe is sent to
    """

    group_name: str
    node: Node
    measurement: EndpointMeasurement
    latency_target: LatencyTarget

    @property
    def endpoint(self) -> Endpoint:
        return self.measurement.endpoint


@dataclass(frozen=True)
class ProbeOutcome:
    """Results for one WorkItem, tagged with the generation of its cycle."""

    generation: int
    item: WorkItem
    status: StatusResult
    latency_ms: int
    measured_at: datetime


def resolve_latency_target(
    node: Node,
    endpoint: Endpoint,
    fallback_port: int = DEFAULT_FALLBACK_LATENCY_PORT,
) -> LatencyTarget:
    """
    Decide where the latency of `endpoint` is measured.

    Bedrock (UDP) latency cannot be measured reliably with a connect, so a
    Bedrock endpoint is timed against its node's Java endpoint when the
    node has one, and against `fallback_port` on the same host otherwise.
    Java endpoints are timed against themselves.
    """
    if endpoint.variant is not ProtocolVariant.BEDROCK:
        return LatencyTarget(endpoint.host, endpoint.port)

    for sibling in node.endpoints:
        if sibling.variant is ProtocolVariant.JAVA:
            return LatencyTarget(sibling.host, sibling.port)
    return LatencyTarget(endpoint.host, fallback_port)


def flatten_work_items(
    groups: tuple[Group, ...] | list[Group],
    fallback_port: int = DEFAULT_FALLBACK_LATENCY_PORT,
) -> list[WorkItem]:
    """List every (node, endpoint) pair of `groups` in catalog order."""
    items = []
    for group in groups:
        for node in group.nodes:
            for measurement in node.measurements:
                items.append(
                    WorkItem(
                        group_name=group.name,
                        node=node,
                        measurement=measurement,
                        latency_target=resolve_latency_target(
                            node, measurement.endpoint, fallback_port
                        ),
                    )
                )
    return items
