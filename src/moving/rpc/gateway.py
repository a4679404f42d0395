"""HTTP/JSON gateway for MovingService (Starlette, served by uvicorn).

Routes transcode JSON into the protobuf request, run the call through the
same :class:`Dispatcher` as gRPC (on a worker thread) and render the
response with ``json_format``. Gateway calls carry the
``grpcgateway-user-agent`` metadata key, so metrics and logs label them
``http``.
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any

import structlog
import uvicorn
from google.protobuf import json_format
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.routing import Route
from starlette.types import ASGIApp, Receive, Scope, Send

from moving.rpc.errors import RpcError
from moving.rpc.interceptors.base import GATEWAY_HEADER, CallContext
from moving.rpc.protos import METHODS

if TYPE_CHECKING:
    from google.protobuf.message import Message

    from moving.rpc.dispatch import Dispatcher

log = structlog.get_logger(__name__)

# Headers forwarded into call metadata.
_FORWARDED_HEADERS = ("authorization",)
_FILTER_FIELDS = (
    "order_status",
    "property_size",
    "created_from",
    "created_to",
    "move_date_from",
    "move_date_to",
)


class TrailingSlashRedirect:
    """``/v1/orders/`` → 308 ``/v1/orders``; the root path is left alone."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        path = scope.get("path", "")
        if scope["type"] == "http" and len(path) > 1 and path.endswith("/"):
            target = path.rstrip("/") or "/"
            query = scope.get("query_string", b"").decode("latin-1")
            if query:
                target = f"{target}?{query}"
            response = RedirectResponse(target, status_code=308)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


def _filter_from_query(request: Request) -> dict[str, Any]:
    """Accept both ``?order_status=..`` and grpc-gateway style ``?filter.order_status=..``."""
    params = request.query_params
    bounds: dict[str, Any] = {}
    for name in _FILTER_FIELDS:
        value = params.get(f"filter.{name}", params.get(name))
        if value:
            bounds[name] = value
    return {"filter": bounds} if bounds else {}


async def _json_body(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = await request.json()
    except ValueError as exc:
        raise RpcError.validation(f"invalid JSON body: {exc}") from exc
    if not isinstance(body, dict):
        raise RpcError.validation("request body must be a JSON object")
    return body


def _parse(method: str, payload: dict[str, Any]) -> Message:
    message = METHODS[method].request_type()
    try:
        json_format.ParseDict(payload, message)
    except json_format.ParseError as exc:
        raise RpcError.validation(str(exc)) from exc
    return message


class Gateway:
    """Builds the Starlette app and optionally serves it on a background thread."""

    def __init__(self, dispatcher: Dispatcher, *, cors_enabled: bool = False) -> None:
        self._dispatcher = dispatcher
        self._cors_enabled = cors_enabled
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self.app = self._build_app()

    # ------------------------------------------------------------------
    # App
    # ------------------------------------------------------------------

    def _build_app(self) -> Starlette:
        middleware = [Middleware(TrailingSlashRedirect)]
        if self._cors_enabled:
            middleware.append(
                Middleware(
                    CORSMiddleware,
                    allow_origins=["*"],
                    allow_methods=["*"],
                    allow_headers=["*"],
                )
            )
        routes = [
            Route("/v1/orders", self._create_order, methods=["POST"]),
            Route("/v1/orders", self._list_orders, methods=["GET"]),
            Route("/v1/orders/{id:int}", self._get_order, methods=["GET"]),
            Route("/v1/orders/{id:int}", self._update_order, methods=["PATCH"]),
            Route("/v1/reviews", self._list_reviews, methods=["GET"]),
        ]
        return Starlette(routes=routes, middleware=middleware)

    async def _create_order(self, request: Request) -> Response:
        return await self._call(request, "CreateOrder", _json_body(request))

    async def _list_orders(self, request: Request) -> Response:
        return await self._call(request, "ListOrders", _filter_from_query(request))

    async def _get_order(self, request: Request) -> Response:
        return await self._call(request, "GetOrder", {"id": request.path_params["id"]})

    async def _update_order(self, request: Request) -> Response:
        async def payload() -> dict[str, Any]:
            body = await _json_body(request)
            body["id"] = request.path_params["id"]
            return body

        return await self._call(request, "UpdateOrder", payload())

    async def _list_reviews(self, request: Request) -> Response:
        return await self._call(request, "ListReviews", {})

    async def _call(
        self,
        request: Request,
        method: str,
        payload: dict[str, Any] | Awaitable[dict[str, Any]],
    ) -> Response:
        try:
            if inspect.isawaitable(payload):
                payload = await payload
            message = _parse(method, payload)
            ctx = CallContext(
                full_method=METHODS[method].full_method,
                metadata=self._metadata(request),
                peer=request.client.host if request.client else "",
            )
            response = await run_in_threadpool(self._dispatcher, method, ctx, message)
        except RpcError as exc:
            return JSONResponse(exc.to_json(), status_code=exc.http_status)
        return JSONResponse(json_format.MessageToDict(response, preserving_proto_field_name=True))

    @staticmethod
    def _metadata(request: Request) -> tuple[tuple[str, str], ...]:
        pairs = [
            (name, value)
            for name in _FORWARDED_HEADERS
            for value in request.headers.getlist(name)
        ]
        pairs.append((GATEWAY_HEADER, request.headers.get("user-agent", "")))
        return tuple(pairs)

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    def start(self, host: str, port: int) -> None:
        """Serve on a daemon thread until :meth:`stop`."""
        config = uvicorn.Config(self.app, host=host, port=port, log_config=None, lifespan="off")
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run, name="moving-gateway", daemon=True
        )
        self._thread.start()
        log.info("starting http server", port=port)

    def begin_shutdown(self) -> None:
        """Stop accepting new requests; in-flight ones keep running."""
        if self._server is not None:
            self._server.should_exit = True

    def stop(self, timeout: float | None = None) -> None:
        """Ask uvicorn to finish in-flight requests and wait for it to exit."""
        if self._server is None or self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout)
        self._server = None
        self._thread = None
        log.info("http server stopped")
