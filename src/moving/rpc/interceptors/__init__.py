"""Interceptor chain: metrics → tracing → logging → auth → panic guard → handler."""

from moving.rpc.interceptors.auth import AuthInterceptor
from moving.rpc.interceptors.base import CallContext, Interceptor, InterceptorChain
from moving.rpc.interceptors.logging import LoggingInterceptor
from moving.rpc.interceptors.metrics import MetricsInterceptor
from moving.rpc.interceptors.panics import PanicInterceptor
from moving.rpc.interceptors.tracing import TracingInterceptor

__all__ = [
    "AuthInterceptor",
    "CallContext",
    "Interceptor",
    "InterceptorChain",
    "LoggingInterceptor",
    "MetricsInterceptor",
    "PanicInterceptor",
    "TracingInterceptor",
]
