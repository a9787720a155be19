"""New message template — a customer message left through the storefront."""

from notifications.channel.channel import EventClass, MessageType
from notifications.templates.formatting import NOT_PROVIDED, bold, escape, join_lines


class NewMessageTemplate:
    message_type = MessageType.NEW_MESSAGE.value
    event_class = EventClass.MESSAGES

    @staticmethod
    def render(context: dict) -> str:
        subject = context.get("subject")
        return join_lines(
            f"📨 {bold('New message!')}",
            "",
            f"👤 Name: {escape(context.get('name', 'N/A'))}",
            f"📧 Email: {escape(context.get('email') or NOT_PROVIDED)}",
            f"📱 Phone: {escape(context.get('phone') or NOT_PROVIDED)}",
            f"📋 Subject: {escape(subject)}" if subject else None,
            "",
            f"💬 {bold('Message:')}",
            escape(context.get("message", "")),
        )
