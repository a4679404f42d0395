"""Process wiring: build every resource from settings, run, shut down in order.

Shutdown order matters: both transports stop accepting calls, then drain
in-flight ones (gRPC grace period, gateway). After that the metrics
endpoint stops, pending notifications drain, the connection pool is
disposed and logging is flushed.
"""

from __future__ import annotations

import logging
import signal
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from prometheus_client import REGISTRY, CollectorRegistry

from moving.config.logging import flush_logging
from moving.infrastructure.database.engine import create_db_engine
from moving.infrastructure.repositories.orders import OrderRepository
from moving.infrastructure.repositories.reviews import ReviewRepository
from moving.plugins.builtins.telegram import TelegramPlugin
from moving.plugins.event_bus import EventBus
from moving.plugins.manager import PluginManager
from moving.rpc.dispatch import Dispatcher
from moving.rpc.gateway import Gateway
from moving.rpc.handlers import MovingHandlers
from moving.rpc.interceptors import (
    AuthInterceptor,
    InterceptorChain,
    LoggingInterceptor,
    MetricsInterceptor,
    PanicInterceptor,
    TracingInterceptor,
)
from moving.rpc.metrics_server import MetricsServer
from moving.rpc.server import GrpcServer
from moving.services.orders import OrderService
from moving.services.reviews import ReviewService
from moving.services.telemetry import Tracer

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from moving.config.settings import MovingSettings

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGHUP", "SIGQUIT")
    if hasattr(signal, name)
)


def build_chain(
    settings: MovingSettings,
    tracer: Tracer,
    *,
    registry: CollectorRegistry = REGISTRY,
) -> InterceptorChain:
    """metrics → tracing → logging → auth → panic guard."""
    return InterceptorChain(
        [
            MetricsInterceptor(
                enabled=settings.metrics.enabled,
                service_name=settings.service_name,
                registry=registry,
            ),
            TracingInterceptor(tracer, settings.service_name),
            LoggingInterceptor(debug=settings.debug),
            AuthInterceptor(
                client_tokens=settings.auth.client_tokens,
                admin_tokens=settings.auth.admin_tokens,
                admin_methods=settings.auth.admin_methods,
            ),
            PanicInterceptor(settings.service_name, registry=registry),
        ]
    )


@dataclass
class Resources:
    """Everything ``serve`` owns, in construction order."""

    settings: MovingSettings
    engine: Engine
    plugins: PluginManager
    event_bus: EventBus
    telegram: TelegramPlugin
    tracer: Tracer
    orders: OrderService
    reviews: ReviewService
    dispatcher: Dispatcher
    grpc_server: GrpcServer
    gateway: Gateway | None
    metrics_server: MetricsServer

    @classmethod
    def build(
        cls,
        settings: MovingSettings,
        *,
        registry: CollectorRegistry = REGISTRY,
        sync_events: bool = False,
    ) -> Resources:
        db = settings.database
        engine = create_db_engine(db.url, echo=db.echo, pool_size=db.pool_size)

        plugins = PluginManager(disabled=settings.plugins.disabled)
        telegram = TelegramPlugin(settings.telegram)
        plugins.register_plugin(telegram, name="telegram")
        plugins.discover_and_load()
        event_bus = EventBus(plugins, sync=sync_events)

        orders = OrderService(
            OrderRepository(engine, empty_result=db.empty_result),
            event_bus=event_bus,
        )
        reviews = ReviewService(
            ReviewRepository(engine, cache=db.cache_reviews, empty_result=db.empty_result)
        )

        tracer = Tracer(enabled=settings.tracing.enabled, service_name=settings.service_name)
        dispatcher = Dispatcher(
            MovingHandlers(orders, reviews).routes(),
            build_chain(settings, tracer, registry=registry),
        )
        grpc_server = GrpcServer(
            dispatcher,
            service_name=settings.service_name,
            host=settings.grpc.host,
            port=settings.grpc.port,
            max_workers=settings.grpc.max_workers,
            enable_reflection=settings.grpc.reflection,
        )
        gateway = (
            Gateway(dispatcher, cors_enabled=settings.gateway.cors_enabled)
            if settings.gateway.enabled
            else None
        )
        metrics_server = MetricsServer(
            enabled=settings.metrics.enabled,
            port=settings.metrics.port,
            host=settings.metrics.host,
            registry=registry,
        )
        return cls(
            settings=settings,
            engine=engine,
            plugins=plugins,
            event_bus=event_bus,
            telegram=telegram,
            tracer=tracer,
            orders=orders,
            reviews=reviews,
            dispatcher=dispatcher,
            grpc_server=grpc_server,
            gateway=gateway,
            metrics_server=metrics_server,
        )

    def start(self) -> None:
        settings = self.settings
        logger.info(
            "Starting %s on %s (grpc :%d)",
            settings.service_name,
            settings.host_name,
            settings.grpc.port,
        )
        self.grpc_server.start()
        if self.gateway is not None:
            self.gateway.start(settings.gateway.host, settings.gateway.port)
        self.metrics_server.start()

    def shutdown(self) -> None:
        """Release everything in dependency order. Safe to call once per start."""
        logger.info("Shutting down service...")
        grace = self.settings.grpc.grace_period
        if self.gateway is not None:
            self.gateway.begin_shutdown()
        self.grpc_server.stop(grace)
        if self.gateway is not None:
            self.gateway.stop(grace)
        self.metrics_server.stop()
        self.event_bus.shutdown()
        self.telegram.close()
        self.engine.dispose()
        self.tracer.shutdown()
        logger.info("Service has been shut down")
        flush_logging()


def wait_for_signal(stop: threading.Event | None = None) -> int:
    """Block until one of :data:`SHUTDOWN_SIGNALS` arrives; return its number."""
    stop = stop or threading.Event()
    received: list[int] = []

    def _handle(signum: int, _frame: object) -> None:
        received.append(signum)
        stop.set()

    previous = {sig: signal.signal(sig, _handle) for sig in SHUTDOWN_SIGNALS}
    try:
        stop.wait()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return received[0] if received else 0
