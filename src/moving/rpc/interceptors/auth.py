"""Bearer-token authentication with admin and client token pools."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from moving.rpc.errors import RpcError
from moving.rpc.interceptors.base import CallContext, CallNext, Interceptor

if TYPE_CHECKING:
    from google.protobuf.message import Message

AUTH_KEY = "authorization"
BEARER_PREFIX = "Bearer "

NO_TOKEN = "no auth token provided"
INVALID_TOKEN = "invalid auth token"

DEFAULT_ADMIN_METHODS = frozenset({"ListOrders", "GetOrder", "UpdateOrder"})


class AuthInterceptor(Interceptor):
    """Fails closed with ``UNAUTHENTICATED``.

    Exactly one ``authorization`` value of the form ``Bearer <token>`` is
    required. Admin tokens may call anything; client tokens anything but
    *admin_methods*. Unknown tokens are always rejected.
    """

    def __init__(
        self,
        *,
        client_tokens: Iterable[str],
        admin_tokens: Iterable[str],
        admin_methods: Iterable[str] = DEFAULT_ADMIN_METHODS,
    ) -> None:
        self._client_tokens = frozenset(t for t in client_tokens if t)
        self._admin_tokens = frozenset(t for t in admin_tokens if t)
        self._admin_methods = frozenset(admin_methods)

    def invoke(self, ctx: CallContext, request: Message, call_next: CallNext) -> Message:
        self.authorize(ctx)
        return call_next(ctx, request)

    def authorize(self, ctx: CallContext) -> None:
        values = ctx.metadata_values(AUTH_KEY)
        if len(values) != 1:
            raise RpcError.unauthenticated(NO_TOKEN)

        header = values[0]
        if not header.startswith(BEARER_PREFIX):
            raise RpcError.unauthenticated(INVALID_TOKEN)

        token = header.removeprefix(BEARER_PREFIX)
        if token in self._admin_tokens:
            return
        if token in self._client_tokens and ctx.method not in self._admin_methods:
            return
        raise RpcError.unauthenticated(INVALID_TOKEN)
