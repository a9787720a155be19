"""Order status template — sent to operators when an order changes status."""

from notifications.channel.channel import EventClass, MessageType
from notifications.templates.formatting import bold, code, escape, join_lines, status_label


class OrderStatusTemplate:
    message_type = MessageType.ORDER_STATUS.value
    event_class = EventClass.ORDER_STATUS

    @staticmethod
    def render(context: dict) -> str:
        return join_lines(
            f"📦 {bold('Order status update')}",
            "",
            f"📋 Order number: {code(context.get('order_number', 'N/A'))}",
            f"👤 Customer: {escape(context.get('customer_name', 'N/A'))}",
            f"📱 Phone: {escape(context.get('customer_phone', 'N/A'))}",
            "",
            f"✅ New status: {bold(status_label(context.get('new_status', 'N/A')))}",
        )
