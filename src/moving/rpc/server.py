"""gRPC server: MovingService, health checking and reflection.

Interceptors are not grpc.ServerInterceptor instances: each method handler
builds a :class:`CallContext` and runs the shared :class:`Dispatcher`,
which applies the chain. Health and reflection calls bypass the chain.
"""

from __future__ import annotations

from concurrent import futures
from typing import TYPE_CHECKING

import grpc
import structlog
from grpc_health.v1 import health, health_pb2, health_pb2_grpc
from grpc_reflection.v1alpha import reflection

from moving.infrastructure.database.deadlines import client_timeout
from moving.rpc.errors import RpcError
from moving.rpc.interceptors.base import CallContext
from moving.rpc.protos import METHODS, SERVICE_NAME, MethodSpec

if TYPE_CHECKING:
    from google.protobuf.message import Message

    from moving.rpc.dispatch import Dispatcher

log = structlog.get_logger(__name__)


def call_context(spec: MethodSpec, context: grpc.ServicerContext) -> CallContext:
    """Snapshot the servicer context; binary (``-bin``) metadata is skipped."""
    metadata = tuple(
        (item.key.lower(), item.value)
        for item in context.invocation_metadata() or ()
        if isinstance(item.value, str)
    )
    return CallContext(
        full_method=spec.full_method,
        metadata=metadata,
        timeout=client_timeout(context.time_remaining()),
        peer=context.peer(),
    )


class GrpcServer:
    """Owns the ``grpc.Server`` and its health servicer.

    Parameters:
        dispatcher: Chain-wrapped handlers, shared with the gateway.
        service_name: Extra health-check name (the configured service name).
        max_workers: Thread pool size, the bound on concurrent calls.
        enable_reflection: Register the server reflection service.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        *,
        service_name: str,
        host: str = "0.0.0.0",
        port: int = 50051,
        max_workers: int = 10,
        enable_reflection: bool = True,
    ) -> None:
        self._dispatcher = dispatcher
        self._service_name = service_name
        self._address = f"{host}:{port}"
        self._server = grpc.server(
            futures.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="moving-grpc")
        )
        self._health = health.HealthServicer()
        self.port: int | None = None

        self._server.add_generic_rpc_handlers((self._service_handler(),))
        health_pb2_grpc.add_HealthServicer_to_server(self._health, self._server)
        if enable_reflection:
            service_names = (
                SERVICE_NAME,
                health_pb2.DESCRIPTOR.services_by_name["Health"].full_name,
                reflection.SERVICE_NAME,
            )
            reflection.enable_server_reflection(service_names, self._server)

    def _service_handler(self) -> grpc.GenericRpcHandler:
        method_handlers = {
            name: grpc.unary_unary_rpc_method_handler(
                self._behavior(spec),
                request_deserializer=spec.request_type.FromString,
                response_serializer=spec.response_type.SerializeToString,
            )
            for name, spec in METHODS.items()
        }
        return grpc.method_handlers_generic_handler(SERVICE_NAME, method_handlers)

    def _behavior(self, spec: MethodSpec):  # noqa: ANN202
        def behavior(request: Message, context: grpc.ServicerContext) -> Message:
            try:
                return self._dispatcher(spec.name, call_context(spec, context), request)
            except RpcError as exc:
                exc.abort(context)

        return behavior

    def start(self) -> int:
        """Bind, start serving and mark both health names SERVING."""
        self.port = self._server.add_insecure_port(self._address)
        if self.port == 0:
            raise RuntimeError(f"cannot bind grpc server to {self._address}")
        self._server.start()
        for name in ("", self._service_name, SERVICE_NAME):
            self._health.set(name, health_pb2.HealthCheckResponse.SERVING)
        log.info("starting grpc server", port=self.port)
        return self.port

    def stop(self, grace: float | None = None) -> None:
        """Refuse new calls, let in-flight ones finish within *grace* seconds."""
        self._health.enter_graceful_shutdown()
        self._server.stop(grace).wait()
        log.info("grpc server stopped")
