"""
Tests for status query parsing and normalization.

mcstatus servers are replaced with fakes through monkeypatch, so no test
opens a socket.
"""

import asyncio
from types import SimpleNamespace

import pytest

from statusboard_proxy import query as query_module
from statusboard_proxy.query import (
    OFFLINE_DESCRIPTION,
    QueryTarget,
    StatusQuerier,
    parse_target,
)


def java_status(**overrides) -> SimpleNamespace:
    status = SimpleNamespace(
        motd=SimpleNamespace(to_plain=lambda: "A Minecraft Server"),
        icon="data:image/png;base64,AAAA",
        latency=41.6,
        players=SimpleNamespace(
            max=50,
            online=5,
            sample=[SimpleNamespace(name="Steve", id="069a79f4-44e9-4726-a5be-fca90e38aaf5")],
        ),
        version=SimpleNamespace(name="1.20.1", protocol=763),
    )
    for key, value in overrides.items():
        setattr(status, key, value)
    return status


def bedrock_status() -> SimpleNamespace:
    return SimpleNamespace(
        motd=SimpleNamespace(to_plain=lambda: "Bedrock level"),
        latency=12.2,
        players=SimpleNamespace(max=10, online=2),
        version=SimpleNamespace(name="1.20.80", protocol=None),
    )


class FakeServer:
    """Stands in for JavaServer/BedrockServer; records constructor args."""

    created: list[tuple] = []
    result = None

    def __init__(self, host, port=None, timeout=3):
        FakeServer.created.append((type(self).__name__, host, port))

    async def async_status(self):
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


@pytest.fixture
def fake_servers(monkeypatch):
    class FakeJava(FakeServer):
        result = java_status()

    class FakeBedrock(FakeServer):
        result = bedrock_status()

    FakeServer.created = []
    monkeypatch.setattr(query_module, "JavaServer", FakeJava)
    monkeypatch.setattr(query_module, "BedrockServer", FakeBedrock)
    return FakeJava, FakeBedrock


class TestParseTarget:
    @pytest.mark.parametrize(
        "address,type_,expected",
        [
            ("mc.example.com", "java", QueryTarget("mc.example.com", 25565, False)),
            ("mc.example.com", "pe", QueryTarget("mc.example.com", 19132, True)),
            ("mc.example.com", "Bedrock", QueryTarget("mc.example.com", 19132, True)),
            ("mc.example.com:25566", "java", QueryTarget("mc.example.com", 25566, False)),
            ("mc.example.com:19133", "pe", QueryTarget("mc.example.com", 19133, True)),
            ("mc.example.com", "25570", QueryTarget("mc.example.com", 25570, False)),
            ("mc.example.com", "unknown", QueryTarget("mc.example.com", 25565, False)),
        ],
    )
    def test_targets(self, address, type_, expected):
        assert parse_target(address, type_) == expected

    def test_address_port_beats_numeric_type(self):
        assert parse_target("mc.example.com:25566", "25570").port == 25566

    def test_custom_defaults(self):
        target = parse_target("mc.example.com", "pe", bedrock_default_port=19200)
        assert target.port == 19200

    def test_bad_port(self):
        with pytest.raises(ValueError):
            parse_target("mc.example.com:abc")


class TestStatusQuerier:
    @pytest.mark.asyncio
    async def test_java_status_normalized(self, fake_servers):
        response = await StatusQuerier().query("mc.example.com:25566", "java")

        assert FakeServer.created == [("FakeJava", "mc.example.com", 25566)]
        assert response.online is True
        assert response.description == "A Minecraft Server"
        assert response.favicon.startswith("data:image/png")
        assert response.latency == 42
        assert response.players.online == 5
        assert response.players.max == 50
        assert response.players.sample[0].name == "Steve"
        assert response.version.name == "1.20.1"
        assert response.version.protocol == 763

    @pytest.mark.asyncio
    async def test_java_without_sample(self, fake_servers):
        fake_java, _ = fake_servers
        fake_java.result = java_status(
            players=SimpleNamespace(max=20, online=0, sample=None)
        )

        response = await StatusQuerier().query("mc.example.com")

        assert response.players.sample == []

    @pytest.mark.asyncio
    async def test_bedrock_status_normalized(self, fake_servers):
        response = await StatusQuerier().query("pe.example.com", "pe")

        assert FakeServer.created == [("FakeBedrock", "pe.example.com", 19132)]
        assert response.online is True
        assert response.favicon is None
        assert response.players.online == 2
        assert response.version.name == "1.20.80"
        assert response.version.protocol == -1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [ConnectionRefusedError(), OSError("unreachable"), asyncio.TimeoutError()],
    )
    async def test_failure_is_offline_shape(self, fake_servers, error):
        fake_java, _ = fake_servers
        fake_java.result = error

        response = await StatusQuerier().query("mc.example.com")

        assert response.online is False
        assert response.description == OFFLINE_DESCRIPTION
        assert response.latency == -1
        assert response.players.online == 0
        assert response.version.name == "N/A"

    @pytest.mark.asyncio
    async def test_bad_port_is_offline_shape(self, fake_servers):
        response = await StatusQuerier().query("mc.example.com:notaport")

        assert response.online is False
        assert FakeServer.created == []
