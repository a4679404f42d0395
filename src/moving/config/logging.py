"""structlog setup shared by every ``moving`` command.

Output goes to stderr either as colored key/value lines or, with
``--log-json``, one JSON object per line. structlog loggers (interceptors,
tracer, notifier) and stdlib loggers (repositories, services, third-party
libraries) share one ProcessorFormatter, so both come out identically and
each line carries the ``service`` name.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS = ("alembic", "httpx", "httpcore", "grpc", "uvicorn.access")


def _add_service(service_name: str) -> Processor:
    def processor(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def configure_logging(
    *,
    debug: bool = False,
    log_json: bool = False,
    service_name: str | None = None,
) -> None:
    """Route all logging through structlog.

    ``moving.*`` logs at DEBUG with *debug* and INFO otherwise; everything
    else stays at WARNING.
    """
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if service_name:
        pre_chain.append(_add_service(service_name))
    pre_chain += [structlog.processors.StackInfoRenderer(), structlog.processors.UnicodeDecoder()]

    renderer: Processor
    if log_json:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger("moving").setLevel(logging.DEBUG if debug else logging.INFO)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def flush_logging() -> None:
    """Flush every root handler. Last step of shutdown."""
    for handler in logging.getLogger().handlers:
        handler.flush()
