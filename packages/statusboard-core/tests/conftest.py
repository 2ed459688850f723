"""Shared fixtures for statusboard-core tests."""

import pytest

from statusboard_core.catalog import EndpointCatalog


@pytest.fixture
def alpha_config() -> dict:
    """One group "Alpha" with one Java-only node "N1"."""
    return {
        "MCServerList": [
            {
                "name": "Alpha",
                "servers": [
                    {"name": "N1", "address": "a.example.com", "port-java": 25565},
                ],
            }
        ]
    }


@pytest.fixture
def board_config() -> dict:
    """Two groups with Java-only, dual-protocol and Bedrock-only nodes."""
    return {
        "pageConfig": {"title": "Test Board", "subtitle": "", "footer": "bye"},
        "MCServerList": [
            {
                "name": "Survival",
                "servers": [
                    {"name": "Main", "address": "main.example.com", "port-java": 25565, "port-pe": 19132},
                    {"name": "Backup", "address": "backup.example.com", "port-java": 25566},
                ],
            },
            {
                "name": "Pocket",
                "servers": [
                    {"name": "PE", "address": "pe.example.com", "port-pe": 19133},
                ],
            },
        ],
    }


@pytest.fixture
def alpha_catalog(alpha_config) -> EndpointCatalog:
    return EndpointCatalog.from_dict(alpha_config)


@pytest.fixture
def board_catalog(board_config) -> EndpointCatalog:
    return EndpointCatalog.from_dict(board_config)
