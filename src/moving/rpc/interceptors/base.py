"""Call context, the interceptor contract and the chain that composes them.

An interceptor wraps one unary invocation: it may inspect the context
before calling ``call_next`` and inspect the response or exception after.
The chain folds the ordered list right-to-left around the terminal
handler, so the first interceptor in the list is the outermost.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google.protobuf.message import Message

GATEWAY_HEADER = "grpcgateway-user-agent"
UNKNOWN_METHOD = "unknown"

CallNext = Callable[["CallContext", "Message"], "Message"]


def short_method_name(full_method: str) -> str:
    """``/moving.v1.MovingService/GetOrder`` → ``GetOrder``."""
    _, sep, name = full_method.rpartition("/")
    if not sep or not name:
        return UNKNOWN_METHOD
    return name


@dataclass(frozen=True)
class CallContext:
    """Per-call facts shared by every interceptor.

    Attributes:
        full_method: ``/package.Service/Method``.
        metadata: Request metadata as ``(key, value)`` pairs, keys lowercased.
        timeout: Seconds left before the caller's deadline, if one was set.
    """

    full_method: str
    metadata: tuple[tuple[str, str], ...] = ()
    timeout: float | None = None
    peer: str = ""
    extras: dict[str, object] = field(default_factory=dict, compare=False)

    @property
    def method(self) -> str:
        return short_method_name(self.full_method)

    @property
    def protocol(self) -> str:
        """``http`` for calls that came through the JSON gateway, else ``grpc``."""
        return "http" if self.metadata_values(GATEWAY_HEADER) else "grpc"

    def metadata_values(self, key: str) -> list[str]:
        key = key.lower()
        return [value for k, value in self.metadata if k == key]


class Interceptor:
    """Base class for chain members. Subclasses override :meth:`invoke`."""

    def invoke(self, ctx: CallContext, request: Message, call_next: CallNext) -> Message:
        return call_next(ctx, request)


class InterceptorChain:
    """An ordered, inspectable pipeline of interceptors."""

    def __init__(self, interceptors: Sequence[Interceptor]) -> None:
        self._interceptors = tuple(interceptors)

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return self._interceptors

    def wrap(self, handler: CallNext) -> CallNext:
        """Compose every interceptor around *handler*, outermost first."""
        wrapped = handler
        for interceptor in reversed(self._interceptors):
            wrapped = functools.partial(_step, interceptor, wrapped)
        return wrapped

    def __call__(self, ctx: CallContext, request: Message, handler: CallNext) -> Message:
        return self.wrap(handler)(ctx, request)


def _step(
    interceptor: Interceptor, call_next: CallNext, ctx: CallContext, request: Message
) -> Message:
    return interceptor.invoke(ctx, request, call_next)
