"""Fake messaging adapter — records sent messages for testing."""

from uuid import uuid4

from notifications.channel.port import DeliveryResult, MessagingPort
from shared.exceptions import NotificationDeliveryError


class FakeMessagingAdapter(MessagingPort):
    """Messaging adapter that records messages in memory for test assertions.

    Individual chats can be made to fail with ``fail_chat`` while the rest
    keep succeeding.
    """

    def __init__(self):
        self.sent_messages: list[dict] = []
        self.attempts: list[str] = []
        self.should_succeed = True
        self.failure_reason = "Message delivery failed"
        self.failing_chats: set[str] = set()
        self.bot_profile = {"id": 1, "is_bot": True, "first_name": "Storefront", "username": "storefront_bot"}

    def configure(self, should_succeed: bool = True, failure_reason: str = "Message delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def fail_chat(self, chat_id: str) -> None:
        self.failing_chats.add(chat_id)

    async def send(self, chat_id: str, text: str, parse_mode: str = "HTML") -> DeliveryResult:
        self.attempts.append(chat_id)

        if not self.should_succeed or chat_id in self.failing_chats:
            return DeliveryResult(success=False, chat_id=chat_id, error=self.failure_reason)

        message_id = f"msg-{uuid4().hex[:12]}"
        self.sent_messages.append(
            {
                "message_id": message_id,
                "chat_id": chat_id,
                "text": text,
                "parse_mode": parse_mode,
            }
        )
        return DeliveryResult(success=True, chat_id=chat_id, message_id=message_id)

    async def get_bot_info(self) -> dict:
        if not self.should_succeed:
            raise NotificationDeliveryError("-", self.failure_reason)
        return dict(self.bot_profile)

    def messages_for(self, chat_id: str) -> list[dict]:
        return [m for m in self.sent_messages if m["chat_id"] == chat_id]

    def reset(self):
        """Clear sent messages (useful between tests)."""
        self.sent_messages.clear()
        self.attempts.clear()
        self.failing_chats.clear()
        self.should_succeed = True
        self.failure_reason = "Message delivery failed"
