"""Contact form template — a submission from the contact page."""

from notifications.channel.channel import EventClass, MessageType
from notifications.templates.formatting import NOT_PROVIDED, bold, escape, join_lines


class ContactMessageTemplate:
    message_type = MessageType.CONTACT.value
    event_class = EventClass.CONTACT

    @staticmethod
    def render(context: dict) -> str:
        return join_lines(
            f"📞 {bold('New contact request')}",
            "",
            f"👤 Name: {escape(context.get('name', 'N/A'))}",
            f"📧 Email: {escape(context.get('email') or NOT_PROVIDED)}",
            f"📱 Phone: {escape(context.get('phone') or NOT_PROVIDED)}",
            "",
            f"💬 {bold('Message:')}",
            escape(context.get("message", "")),
        )
