"""
New-order alert sinks

Staff are told about every newly inserted order through a structured log
event and, when a bot token and admin chat are configured, a Telegram
message.
"""

import html
import logging

from telegram import Bot
from telegram.error import TelegramError

from chiya.application.interfaces.alert_sink import OrderAlertSink
from chiya.domain.entities.order_entity import Order
from chiya.domain.entities.shop_entity import Shop
from chiya.infrastructure.logging.logging_config import get_structured_logger
from chiya.infrastructure.utilities.exceptions import ExternalServiceError


def format_new_order_message(order: Order, shop: Shop) -> str:
    """HTML message body for a new order"""
    lines = [
        f"🔔 <b>New order at {html.escape(shop.name)}</b>",
        "",
        f"🪑 Table: <b>{order.table_number}</b>",
        f"⏳ Status: <b>{order.status.label}</b>",
    ]
    if order.created_at:
        lines.append(f"📅 {order.created_at.strftime('%d/%m/%Y %H:%M')}")
    lines.append("")
    lines.append("🛒 <b>Items:</b>")
    for item in order.items:
        lines.append(
            f"• {item.quantity}x {html.escape(item.name)} - {item.line_total}"
        )
    lines.append("")
    lines.append(f"💳 <b>Total:</b> {order.total_amount}")
    return "\n".join(lines)


class LoggingAlertSink(OrderAlertSink):
    """Emits a structured ``new_order`` event per alert"""

    def __init__(self):
        self._events = get_structured_logger("chiya.alerts")

    async def new_order_alert(self, order: Order, shop: Shop) -> None:
        self._events.info(
            "new_order",
            shop_id=shop.id,
            shop=shop.slug.value,
            order_id=order.id,
            table_number=order.table_number,
            total=str(order.total_amount.amount),
            items=order.item_count,
            sound=shop.sound_alerts,
            browser=shop.browser_notifications,
        )


class TelegramAlertSink(OrderAlertSink):
    """Sends new-order alerts to the admin Telegram chat"""

    def __init__(self, bot: Bot, admin_chat_id: int):
        self._bot = bot
        self._admin_chat_id = admin_chat_id
        self._logger = logging.getLogger(self.__class__.__name__)

    async def new_order_alert(self, order: Order, shop: Shop) -> None:
        self._logger.info(
            "📨 SENDING ADMIN NOTIFICATION: Order %s to chat %s",
            order.id,
            self._admin_chat_id,
        )
        message = format_new_order_message(order, shop)
        try:
            result = await self._bot.send_message(
                chat_id=self._admin_chat_id, text=message, parse_mode="HTML"
            )
        except TelegramError as e:
            self._logger.error("❌ TELEGRAM ERROR: %s", e)
            raise ExternalServiceError(
                f"Telegram alert for order {order.id} failed: {e}", "telegram"
            ) from e
        self._logger.info("✅ NOTIFICATION SENT: Msg ID %s", result.message_id)
