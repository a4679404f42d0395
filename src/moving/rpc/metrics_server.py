"""Pull-based metrics endpoint.

Disabled, the server reports the ``not operational`` name and never binds
a port; ``start`` and ``stop`` are no-ops.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from prometheus_client import REGISTRY, CollectorRegistry, start_http_server

if TYPE_CHECKING:
    import threading
    from wsgiref.simple_server import WSGIServer

NOT_OPERATIONAL = "not operational"
PROMETHEUS = "prometheus"

log = structlog.get_logger(__name__)


class MetricsServer:
    def __init__(
        self,
        *,
        enabled: bool,
        port: int,
        host: str = "0.0.0.0",
        registry: CollectorRegistry = REGISTRY,
    ) -> None:
        self.name = PROMETHEUS if enabled else NOT_OPERATIONAL
        self.port = port
        self._host = host
        self._registry = registry
        self._httpd: WSGIServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def is_operational(self) -> bool:
        return self.name != NOT_OPERATIONAL

    def start(self) -> None:
        if not self.is_operational:
            return
        self._httpd, self._thread = start_http_server(
            self.port, addr=self._host, registry=self._registry
        )
        self.port = self._httpd.server_port
        log.info("starting http metrics server", port=self.port)

    def stop(self) -> None:
        if self._httpd is None:
            return
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._httpd = None
        self._thread = None
