"""
Tests for latency probes.

Tests cover:
- average_latency: rounding, failed samples ignored, all failed -> 5000
- TcpLatencyProbe against a local server, a refused port, a hang and a
  malformed hostname
- MinetoolsLatencyProbe payload handling
"""

import asyncio

import httpx
import pytest

from statusboard_core.probes import (
    LatencyProbeProtocol,
    MinetoolsLatencyProbe,
    TcpLatencyProbe,
    average_latency,
)
from statusboard_core.types import LATENCY_TIMEOUT


class TestAverageLatency:
    def test_rounded_mean_of_successes(self):
        assert average_latency([10.0, 20.0, 31.0]) == 20
        assert average_latency([10.4, None, 10.8]) == 11

    def test_no_success_is_timeout(self):
        assert average_latency([None, None, None]) == LATENCY_TIMEOUT
        assert average_latency([]) == LATENCY_TIMEOUT

    def test_capped_at_timeout(self):
        assert average_latency([9000.0]) == LATENCY_TIMEOUT


class TestTcpLatencyProbe:
    def test_implements_protocol(self):
        assert isinstance(TcpLatencyProbe(), LatencyProbeProtocol)

    def test_rejects_zero_samples(self):
        with pytest.raises(ValueError):
            TcpLatencyProbe(samples=0)

    @pytest.mark.asyncio
    async def test_measures_local_server(self):
        async def handle(reader, writer):
            writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            latency = await TcpLatencyProbe(timeout=2.0, samples=3).probe("127.0.0.1", port)
        finally:
            server.close()
            await server.wait_closed()

        assert 0 <= latency < LATENCY_TIMEOUT

    @pytest.mark.asyncio
    async def test_refused_connection_is_timeout(self, monkeypatch):
        async def refuse(host, port):
            raise ConnectionRefusedError(111, "Connection refused")

        monkeypatch.setattr(asyncio, "open_connection", refuse)

        latency = await TcpLatencyProbe(timeout=1.0).probe("h", 1)

        assert latency == LATENCY_TIMEOUT

    @pytest.mark.asyncio
    async def test_hanging_connect_is_timeout(self, monkeypatch):
        async def hang(host, port):
            await asyncio.sleep(10)

        monkeypatch.setattr(asyncio, "open_connection", hang)

        latency = await TcpLatencyProbe(timeout=0.05, samples=2).probe("h", 1)

        assert latency == LATENCY_TIMEOUT

    @pytest.mark.asyncio
    async def test_malformed_host_is_timeout(self):
        """Empty DNS label fails IDNA encoding with UnicodeError."""
        latency = await TcpLatencyProbe(timeout=1.0, samples=1).probe("mc..example.com", 25565)

        assert latency == LATENCY_TIMEOUT

    @pytest.mark.asyncio
    async def test_value_error_from_resolver_is_timeout(self, monkeypatch):
        async def bad_label(host, port):
            raise UnicodeError("encoding with 'idna' codec failed (label empty or too long)")

        monkeypatch.setattr(asyncio, "open_connection", bad_label)

        latency = await TcpLatencyProbe(timeout=1.0).probe("h" * 64 + ".example.com", 1)

        assert latency == LATENCY_TIMEOUT

    def test_base_probe_is_abstract(self):
        from statusboard_core.probes.latency import _SampledLatencyProbe

        with pytest.raises(TypeError):
            _SampledLatencyProbe()


class MockResponse:
    def __init__(self, json_data, status_code: int = 200):
        self._json_data = json_data
        self.status_code = status_code

    def json(self):
        return self._json_data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {self.status_code}",
                request=httpx.Request("GET", "http://test"),
                response=self,
            )


class MockAsyncClient:
    def __init__(self, response: MockResponse):
        self.response = response
        self.urls: list[str] = []

    async def get(self, url: str, timeout: float = None) -> MockResponse:
        self.urls.append(url)
        return self.response


class TestMinetoolsLatencyProbe:
    @pytest.mark.asyncio
    async def test_reported_latency(self):
        http = MockAsyncClient(MockResponse({"latency": 41.6}))
        probe = MinetoolsLatencyProbe(http=http)

        assert await probe.probe("a.example.com", 25565) == 42
        assert http.urls == ["https://api.minetools.eu/ping/a.example.com/25565"]

    @pytest.mark.asyncio
    async def test_error_payload_is_timeout(self):
        http = MockAsyncClient(MockResponse({"error": "timed out"}))

        assert await MinetoolsLatencyProbe(http=http).probe("h", 1) == LATENCY_TIMEOUT

    @pytest.mark.asyncio
    async def test_http_error_is_timeout(self):
        http = MockAsyncClient(MockResponse({}, 502))

        assert await MinetoolsLatencyProbe(http=http).probe("h", 1) == LATENCY_TIMEOUT
