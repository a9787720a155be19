"""Test message template — sent from the admin panel to check a chat."""

from notifications.channel.channel import MessageType
from notifications.templates.formatting import bold, join_lines


class BotTestMessageTemplate:
    message_type = MessageType.TEST_MESSAGE.value
    # Sent to an explicitly chosen chat, regardless of its permissions
    event_class = None

    @staticmethod
    def render(context: dict) -> str:
        return join_lines(
            f"🧪 {bold('Bot test')}",
            "",
            "This is a test message from the admin panel! ✅",
        )
