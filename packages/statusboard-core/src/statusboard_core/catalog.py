"""
Endpoint catalog derived from the dashboard configuration file.

This module provides:
- Pydantic models for the JSON configuration document
- EndpointCatalog: the static group -> node -> endpoint mapping
- load_catalog(): read and validate a configuration file
- build_snapshot(): (re)build a reset Snapshot from the catalog

Configuration format:
    {
        "pageConfig": {"title": "...", "subtitle": "...", "footer": "..."},
        "MCServerList": [
            {
                "name": "Alpha",
                "servers": [
                    {"name": "N1", "address": "a.example.com",
                     "port-java": 25565, "port-pe": 19132}
                ]
            }
        ]
    }

A missing or malformed configuration is fatal at startup: load_catalog()
raises CatalogError and nothing retries it.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from statusboard_core.types import (
    Endpoint,
    EndpointMeasurement,
    ExpandedKey,
    Group,
    Node,
    ProtocolVariant,
    Snapshot,
)


class CatalogError(Exception):
    """
    Raised when the configuration cannot be loaded.

    Attributes:
        path: Configuration file that failed (None for in-memory documents)
        reason: What went wrong
    """

    def __init__(self, reason: str, path: Path | None = None) -> None:
        self.path = path
        self.reason = reason
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Failed to load configuration{where}: {reason}")


# =============================================================================
# Configuration document
# =============================================================================


class ServerConfig(BaseModel):
    """One server entry; each configured port becomes one endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    address: str
    port_java: int | None = Field(default=None, alias="port-java", gt=0, lt=65536)
    port_pe: int | None = Field(default=None, alias="port-pe", gt=0, lt=65536)


class GroupConfig(BaseModel):
    name: str
    servers: list[ServerConfig] = Field(default_factory=list)


class PageConfig(BaseModel):
    """Dashboard page texts."""

    title: str = "MC Server Status"
    subtitle: str = "A Minecraft server status board"
    footer: str = ""


class BoardConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(populate_by_name=True)

    page: PageConfig = Field(default_factory=PageConfig, alias="pageConfig")
    groups: list[GroupConfig] = Field(alias="MCServerList")


# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True)
class NodeSpec:
    name: str
    endpoints: tuple[Endpoint, ...]


@dataclass(frozen=True)
class GroupSpec:
    name: str
    nodes: tuple[NodeSpec, ...]


@dataclass(frozen=True)
class EndpointCatalog:
    """
    Static group -> node -> endpoint mapping.

    Pure data, derived once from configuration. Every endpoint belongs to
    exactly one node and every node to exactly one group.
    """

    groups: tuple[GroupSpec, ...]
    page: PageConfig = field(default_factory=PageConfig)

    @classmethod
    def from_config(cls, config: BoardConfig) -> "EndpointCatalog":
        groups = []
        for group in config.groups:
            nodes = []
            for server in group.servers:
                endpoints = []
                if server.port_java:
                    endpoints.append(
                        Endpoint(ProtocolVariant.JAVA, server.address, server.port_java)
                    )
                if server.port_pe:
                    endpoints.append(
                        Endpoint(ProtocolVariant.BEDROCK, server.address, server.port_pe)
                    )
                nodes.append(NodeSpec(name=server.name, endpoints=tuple(endpoints)))
            groups.append(GroupSpec(name=group.name, nodes=tuple(nodes)))
        return cls(groups=tuple(groups), page=config.page)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EndpointCatalog":
        """
        Build a catalog from an already-parsed configuration document.

        Raises:
            CatalogError: If the document does not match the schema
        """
        try:
            config = BoardConfig.model_validate(data)
        except ValidationError as e:
            raise CatalogError(str(e)) from e
        return cls.from_config(config)

    @property
    def group_names(self) -> list[str]:
        return [g.name for g in self.groups]

    def endpoints(self) -> Iterable[Endpoint]:
        for group in self.groups:
            for node in group.nodes:
                yield from node.endpoints

    def __len__(self) -> int:
        return sum(1 for _ in self.endpoints())


def load_catalog(path: Path) -> EndpointCatalog:
    """
    Load and validate the configuration file.

    Args:
        path: Path to the JSON configuration

    Returns:
        EndpointCatalog built from the file

    Raises:
        CatalogError: If the file is missing, not JSON, or not a valid
            configuration document
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"cannot read file: {e.strerror or e}", path) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CatalogError(f"invalid JSON: {e}", path) from e

    if not isinstance(data, dict):
        raise CatalogError("top-level value must be an object", path)

    try:
        config = BoardConfig.model_validate(data)
    except ValidationError as e:
        raise CatalogError(str(e), path) from e

    return EndpointCatalog.from_config(config)


def build_snapshot(
    catalog: EndpointCatalog,
    expanded: set[ExpandedKey] | None = None,
    generation: int = 0,
) -> Snapshot:
    """
    Build a reset Snapshot from the catalog.

    Every group starts in TESTING and every measurement holds sentinel
    values. Nodes keep catalog order. The is_expanded flag of a node is
    restored from `expanded`, keyed by (group name, node name).

    Args:
        catalog: Source of groups, nodes and endpoints
        expanded: Keys of nodes that were expanded before the rebuild
        generation: Polling cycle the snapshot belongs to

    Returns:
        New Snapshot sharing no mutable objects with any previous one
    """
    expanded = expanded or set()
    groups = []
    for group_spec in catalog.groups:
        nodes = [
            Node(
                name=node_spec.name,
                measurements=[EndpointMeasurement(endpoint=ep) for ep in node_spec.endpoints],
                is_expanded=(group_spec.name, node_spec.name) in expanded,
            )
            for node_spec in group_spec.nodes
        ]
        groups.append(Group(name=group_spec.name, nodes=nodes))
    return Snapshot(groups=tuple(groups), generation=generation)
