"""New order template — sent to operators when a customer places an order."""

from notifications.channel.channel import EventClass, MessageType
from notifications.templates.formatting import (
    bold,
    code,
    escape,
    format_price,
    join_lines,
    payment_method_label,
)


class NewOrderTemplate:
    message_type = MessageType.NEW_ORDER.value
    event_class = EventClass.ORDERS

    @staticmethod
    def render(context: dict) -> str:
        currency = context.get("currency", "LYD")
        items = context.get("items", [])
        item_lines = [
            f"• {escape(item.get('name', 'N/A'))} x{item.get('quantity', 1)} - "
            f"{format_price(item.get('subtotal', 0), currency)}"
            for item in items
        ]
        notes = context.get("notes")
        discount_code = context.get("discount_code")

        return join_lines(
            f"🛒 {bold('New order!')}",
            "",
            f"📋 Order number: {code(context.get('order_number', 'N/A'))}",
            f"👤 Customer: {escape(context.get('customer_name', 'N/A'))}",
            f"📱 Phone: {escape(context.get('customer_phone', 'N/A'))}",
            f"📍 Address: {escape(context.get('customer_address', 'N/A'))}",
            f"🚚 Delivery: {escape(context.get('delivery_type', 'N/A'))}",
            "",
            f"🛍️ {bold('Items:')}",
            *item_lines,
            "",
            f"💰 Subtotal: {format_price(context.get('subtotal', 0), currency)}",
            f"🚚 Delivery fee: {format_price(context.get('delivery_fee', 0), currency)}",
            f"💸 Discount: {format_price(context.get('discount', 0), currency)}"
            + (f" ({code(discount_code)})" if discount_code else ""),
            f"💵 {bold('Total: ' + format_price(context.get('total', 0), currency))}",
            "",
            f"💳 Payment method: {escape(payment_method_label(context.get('payment_method', 'N/A')))}",
            f"📝 Notes: {escape(notes)}" if notes else None,
        )
