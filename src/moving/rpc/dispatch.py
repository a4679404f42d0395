"""Method dispatch shared by the gRPC server and the JSON gateway.

Both transports hand a :class:`CallContext` and a decoded request to the
same :class:`Dispatcher`, so gateway calls pass through the full
interceptor chain exactly like native gRPC calls.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

import grpc

from moving.infrastructure.database.deadlines import call_deadline
from moving.rpc.errors import RpcError

if TYPE_CHECKING:
    from google.protobuf.message import Message

    from moving.rpc.handlers import Handler
    from moving.rpc.interceptors.base import CallContext, InterceptorChain


class Dispatcher:
    """Routes a call by short method name to its chain-wrapped handler.

    The caller's remaining deadline is bound for the duration of the call so
    repositories can forward it to the store.
    """

    def __init__(self, handlers: Mapping[str, Handler], chain: InterceptorChain) -> None:
        self._wrapped = {name: chain.wrap(handler) for name, handler in handlers.items()}

    @property
    def methods(self) -> list[str]:
        return sorted(self._wrapped)

    def __call__(self, method: str, ctx: CallContext, request: Message) -> Message:
        wrapped = self._wrapped.get(method)
        if wrapped is None:
            raise RpcError(
                grpc.StatusCode.UNIMPLEMENTED, "UNIMPLEMENTED", f"method {method} not implemented"
            )
        with call_deadline(ctx.timeout):
            return wrapped(ctx, request)
