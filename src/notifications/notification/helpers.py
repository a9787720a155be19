"""Operator notifications for storefront events.

Provides the common pattern: read a settings snapshot → build the transport
from the bot credentials → build the template context → dispatch to the
configured channels.
"""

from collections.abc import Callable

import structlog

from notifications.channel import get_transport
from notifications.channel.channel import EventClass
from notifications.channel.port import MessagingPort
from notifications.notification.dispatch import NotificationDispatcher
from notifications.notification.submissions import CustomerMessage, ReviewSubmission
from notifications.templates import BotTestMessageTemplate, LowStockAlertTemplate
from ordering.order.order import Order
from shared.config import Config
from shared.settings import SettingsProvider

logger = structlog.get_logger(__name__)


def order_context(order: Order, currency_label: str) -> dict:
    """Template context for new-order and status-change messages."""
    return {
        "order_number": order.order_number,
        "customer_name": order.customer.name,
        "customer_phone": order.customer.phone,
        "customer_address": order.customer.address,
        "delivery_type": order.delivery_type,
        "items": [
            {"name": item.name, "quantity": item.quantity, "subtotal": item.subtotal}
            for item in order.items
        ],
        "subtotal": order.subtotal,
        "delivery_fee": order.delivery_fee,
        "discount": order.discount,
        "discount_code": order.discount_code,
        "total": order.total,
        "payment_method": order.payment_method,
        "notes": order.notes,
        "new_status": order.status,
        "currency": currency_label,
    }


class OperatorNotifier:
    """Sends operator notifications using the current site settings."""

    def __init__(
        self,
        settings_provider: SettingsProvider,
        config: Config,
        dispatcher: NotificationDispatcher | None = None,
        transport_factory: Callable[[str, Config], MessagingPort] = get_transport,
    ):
        self.settings_provider = settings_provider
        self.config = config
        self.dispatcher = dispatcher or NotificationDispatcher(timeout=config.notification_timeout)
        self.transport_factory = transport_factory

    async def _notify(self, event_class: EventClass, context: dict, template=None) -> bool:
        settings = self.settings_provider.get()
        channels = settings.active_channels()
        if not channels:
            logger.info(
                "Operator notifications not configured",
                event_class=event_class.value,
                enabled=settings.notifications_enabled,
            )
            return False

        sender = self.transport_factory(settings.bot_token, self.config)
        return await self.dispatcher.dispatch(event_class, context, channels, sender, template=template)

    def _currency_label(self) -> str:
        return self.settings_provider.get().currency_label or self.config.currency_label

    async def notify_new_order(self, order: Order) -> bool:
        return await self._notify(EventClass.ORDERS, order_context(order, self._currency_label()))

    async def notify_status_change(self, order: Order) -> bool:
        return await self._notify(EventClass.ORDER_STATUS, order_context(order, self._currency_label()))

    async def notify_new_message(self, message: CustomerMessage) -> bool:
        return await self._notify(EventClass.MESSAGES, message.model_dump())

    async def notify_contact(self, message: CustomerMessage) -> bool:
        return await self._notify(EventClass.CONTACT, message.model_dump())

    async def notify_new_review(self, review: ReviewSubmission) -> bool:
        return await self._notify(EventClass.REVIEWS, review.model_dump())

    async def notify_low_stock(self, product_id: str, product_name: str) -> bool:
        return await self._notify(
            EventClass.ORDERS,
            {"product_id": product_id, "product_name": product_name},
            template=LowStockAlertTemplate,
        )

    async def send_test_message(self, chat_id: str | None = None) -> bool:
        """Send the bot test message to ``chat_id`` or the first enabled chat.

        Unlike event notifications this ignores channel permissions and the
        global on/off switch; it only needs a bot token and a target chat.
        """
        settings = self.settings_provider.get()
        if chat_id is None:
            chat_id = next((c.chat_id for c in settings.notification_channels if c.enabled), None)

        if not settings.bot_token or not chat_id:
            logger.info("Test message skipped, bot token or chat missing", has_token=bool(settings.bot_token))
            return False

        sender = self.transport_factory(settings.bot_token, self.config)
        text = BotTestMessageTemplate.render({})
        return await self.dispatcher.send_to_chat(chat_id, text, sender)

    async def bot_profile(self) -> dict | None:
        """The configured bot's profile, or None when no bot token is set.

        Raises:
            NotificationDeliveryError: the Bot API rejected the token or could
                not be reached.
        """
        settings = self.settings_provider.get()
        if not settings.bot_token:
            return None
        return await self.transport_factory(settings.bot_token, self.config).get_bot_info()
