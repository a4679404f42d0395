"""serve: run the gRPC server, the HTTP gateway and the metrics endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from moving.commands._base import MovingCommand

if TYPE_CHECKING:
    from moving.commands._context import AppContext


@click.command(
    cls=MovingCommand,
    sections=("grpc", "gateway", "database", "metrics", "tracing", "auth", "telegram"),
    examples="""\
  # Defaults: gRPC on :50051, gateway on :8080
  moving serve

  # Apply migrations first, custom ports
  moving serve --migrate --port 6000 --gateway-port 6080

  # gRPC only
  moving serve --no-gateway""",
)
@click.option("--host", default=None, help="gRPC bind address.")
@click.option("--port", default=None, type=int, help="gRPC listen port.")
@click.option("--gateway-port", default=None, type=int, help="HTTP gateway listen port.")
@click.option(
    "--gateway/--no-gateway", "gateway_enabled", default=None, help="Serve the HTTP gateway."
)
@click.option("--migrate", is_flag=True, help="Apply database migrations before serving.")
@click.pass_obj
def serve(
    app: AppContext,
    host: str | None,
    port: int | None,
    gateway_port: int | None,
    gateway_enabled: bool | None,
    migrate: bool,
) -> None:
    """Serve MovingService until SIGINT, SIGTERM, SIGHUP or SIGQUIT."""
    from moving.app import Resources, wait_for_signal

    settings = app.with_overrides(
        grpc={"host": host, "port": port},
        gateway={"port": gateway_port, "enabled": gateway_enabled},
    )
    if migrate:
        from moving.infrastructure.database.migrations import upgrade_head

        upgrade_head(settings.database.url)

    resources = Resources.build(settings)
    resources.start()
    try:
        wait_for_signal()
    finally:
        resources.shutdown()
