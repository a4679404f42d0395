"""Tests for the Prometheus endpoint wrapper."""

from __future__ import annotations

import httpx
from prometheus_client import CollectorRegistry, Counter

from moving.rpc.metrics_server import NOT_OPERATIONAL, PROMETHEUS, MetricsServer


class TestMetricsServer:
    def test_disabled_is_not_operational(self, registry: CollectorRegistry) -> None:
        server = MetricsServer(enabled=False, port=0, registry=registry)
        assert server.name == NOT_OPERATIONAL == "not operational"
        assert not server.is_operational
        server.start()
        server.stop()
        assert server.port == 0

    def test_serves_registry(self, registry: CollectorRegistry) -> None:
        Counter("sample_events", "Sample.", registry=registry).inc()
        server = MetricsServer(enabled=True, port=0, host="127.0.0.1", registry=registry)
        assert server.name == PROMETHEUS
        server.start()
        try:
            assert server.port != 0
            response = httpx.get(f"http://127.0.0.1:{server.port}/metrics", timeout=5)
        finally:
            server.stop()
        assert response.status_code == 200
        assert "sample_events_total 1.0" in response.text
