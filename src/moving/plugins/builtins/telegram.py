"""Built-in Telegram notifier for new orders.

Sends an HTML-formatted summary of every created order to each allowed
chat through the Bot API ``sendMessage`` method. A failure for one chat is
logged and does not stop delivery to the others. When disabled every hook
returns immediately.
"""

from __future__ import annotations

import html
import threading
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from moving.config.models import TelegramConfig
from moving.plugins.hookspecs import hookimpl

if TYPE_CHECKING:
    from moving.services.contracts import Order

log = structlog.get_logger(__name__)


def format_order_message(order: Order) -> str:
    """Render *order* as Telegram HTML. All user-supplied text is escaped."""
    lines = [
        f"<b>NEW ORDER</b> #{order.id}",
        "",
        f"<b>From:</b> {html.escape(order.move_from)}",
        f"<b>To:</b> {html.escape(order.move_to)}",
    ]
    if order.move_date is not None:
        lines.append(f"<b>Date:</b> {order.move_date.isoformat()}")
    if order.phone:
        lines.append(f"<b>Phone:</b> {html.escape(order.phone)}")
    if order.email:
        lines.append(f"<b>Email:</b> {html.escape(order.email)}")
    if order.additional_info:
        lines.extend(["", "<b>Description:</b>", html.escape(order.additional_info)])
    return "\n".join(lines)


class TelegramPlugin:
    """Notifies allowed Telegram chats about new orders."""

    def __init__(
        self,
        config: TelegramConfig | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config or TelegramConfig()
        self._client = client
        self._owns_client = client is None
        self._client_lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._config.enabled and bool(self._config.token)

    @hookimpl
    def post_create_order(self, order: Order) -> None:
        if not self.enabled:
            return
        text = format_order_message(order)
        for chat_id in self._config.allowed_chat_ids:
            try:
                self._send(chat_id, text)
            except (httpx.HTTPError, ValueError) as exc:
                log.error(
                    "send new order to telegram",
                    error=str(exc),
                    chat_id=chat_id,
                    order_id=order.id,
                )

    def close(self) -> None:
        with self._client_lock:
            if self._client is not None and self._owns_client:
                self._client.close()
            self._client = None

    def _http(self) -> httpx.Client:
        """Shared client, built once even when event workers race on the first send."""
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    base_url=self._config.api_url,
                    timeout=self._config.timeout,
                )
            return self._client

    def _send(self, chat_id: int, text: str) -> None:
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text, "parse_mode": "HTML"}
        response = self._http().post(f"/bot{self._config.token}/sendMessage", json=payload)
        response.raise_for_status()
        body = response.json()
        if not body.get("ok", False):
            raise ValueError(body.get("description", "telegram rejected the message"))
