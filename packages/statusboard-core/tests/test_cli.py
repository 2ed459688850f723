"""
Tests for the statusboard CLI and probe factory.

Probes are replaced by mocks through a patched create_orchestrator, so
no test touches the network.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from typer.testing import CliRunner

from statusboard_core.cli.factory import (
    create_latency_probe,
    create_orchestrator,
    create_status_probe,
)
from statusboard_core.cli.main import app
from statusboard_core.config import Settings
from statusboard_core.poller import PollingOrchestrator
from statusboard_core.probes import (
    LatencyProbeProtocol,
    MinetoolsLatencyProbe,
    StatusPolicy,
    StatusProbeProtocol,
    TcpLatencyProbe,
)
from statusboard_core.store import ResultStore
from statusboard_core.types import StatusResult

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path, board_config):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(board_config), encoding="utf-8")
    return path


@pytest.fixture
def mocked_orchestrator(monkeypatch):
    """Patch the CLI to build orchestrators with mocked probes."""

    def fake_create_orchestrator(settings, catalog, store, http):
        status = MagicMock(spec=StatusProbeProtocol)
        status.probe = AsyncMock(
            return_value=StatusResult(online=True, players="5/50", version="1.20.1", source="fake")
        )
        latency = MagicMock(spec=LatencyProbeProtocol)
        latency.probe = AsyncMock(return_value=42)
        return PollingOrchestrator(catalog, status, latency, store)

    monkeypatch.setattr(
        "statusboard_core.cli.board.create_orchestrator", fake_create_orchestrator
    )


class TestCheckCommand:
    def test_json_output(self, config_file, mocked_orchestrator):
        result = runner.invoke(
            app, ["check", "--config", str(config_file), "--json", "--log-level", "ERROR"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [g["name"] for g in data["groups"]] == ["Survival", "Pocket"]
        survival = data["groups"][0]
        assert survival["status"] == "online"
        assert survival["players"] == "5/50"
        assert survival["nodes"][0]["best_latency"] == 42
        assert survival["nodes"][0]["is_expanded"] is True
        assert survival["nodes"][0]["measurements"][0]["endpoint"]["variant"] == "java"

    def test_json_output_single_group(self, config_file, mocked_orchestrator):
        result = runner.invoke(
            app, ["check", "-c", str(config_file), "-g", "Pocket", "--json", "--log-level", "ERROR"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [g["name"] for g in data["groups"]] == ["Pocket"]

    def test_table_output(self, config_file, mocked_orchestrator):
        result = runner.invoke(app, ["check", "-c", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "Test Board" in result.stdout
        assert "Pocket" in result.stdout

    def test_unknown_group(self, config_file, mocked_orchestrator):
        result = runner.invoke(app, ["check", "-c", str(config_file), "-g", "Creative"])

        assert result.exit_code == 1
        assert "Unknown group 'Creative'" in result.stdout

    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["check", "-c", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Failed to load configuration" in result.stdout

    def test_invalid_policy(self, config_file):
        result = runner.invoke(app, ["check", "-c", str(config_file), "--policy", "fastest"])

        assert result.exit_code == 1
        assert "Invalid settings" in result.stdout


class TestFactory:
    @pytest.mark.asyncio
    async def test_status_probe_from_settings(self):
        settings = Settings(status_policy="race", status_sources=["mcsrvstat", "mcapi"])
        async with httpx.AsyncClient() as http:
            probe = create_status_probe(settings, http)

        assert probe.policy is StatusPolicy.RACE
        assert [s.name for s in probe.sources] == ["mcsrvstat", "mcapi"]

    @pytest.mark.asyncio
    async def test_unknown_source(self):
        settings = Settings(status_sources=["mcsrvstat", "nope"])
        async with httpx.AsyncClient() as http:
            with pytest.raises(ValueError, match="Unknown data source 'nope'"):
                create_status_probe(settings, http)

    @pytest.mark.asyncio
    async def test_latency_methods(self):
        async with httpx.AsyncClient() as http:
            assert isinstance(create_latency_probe(Settings(), http), TcpLatencyProbe)
            assert isinstance(
                create_latency_probe(Settings(latency_method="minetools"), http),
                MinetoolsLatencyProbe,
            )

    @pytest.mark.asyncio
    async def test_orchestrator_uses_fallback_port(self, alpha_catalog):
        async with httpx.AsyncClient() as http:
            orchestrator = create_orchestrator(
                Settings(fallback_latency_port=8080), alpha_catalog, ResultStore(), http
            )

        assert orchestrator.fallback_latency_port == 8080
        assert orchestrator.countdown is None
