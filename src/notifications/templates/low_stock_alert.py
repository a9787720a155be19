"""Low stock alert template — internal notification to operations."""

from notifications.channel.channel import EventClass, MessageType
from notifications.templates.formatting import bold, code, escape, join_lines


class LowStockAlertTemplate:
    message_type = MessageType.LOW_STOCK_ALERT.value
    event_class = EventClass.ORDERS

    @staticmethod
    def render(context: dict) -> str:
        return join_lines(
            f"⚠️ {bold('Low stock alert!')}",
            "",
            f"🍫 Product: {escape(context.get('product_name', 'N/A'))}",
            f"🆔 ID: {code(context.get('product_id', 'N/A'))}",
            "",
            "Please restock as soon as possible.",
        )
