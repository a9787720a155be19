"""Messaging channel port — abstract interface for operator chat delivery.

Adapters deliver one formatted text to one chat. They report failures through
``DeliveryResult`` rather than raising, so a single bad chat never disturbs
delivery to the others.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DeliveryResult:
    """Result of a single send attempt."""

    success: bool
    chat_id: str
    message_id: str | None = None
    error: str | None = None


class MessagingPort(ABC):
    """Abstract interface for messaging dispatch adapters."""

    @abstractmethod
    async def send(self, chat_id: str, text: str, parse_mode: str = "HTML") -> DeliveryResult:
        """Send ``text`` to ``chat_id``, formatted according to ``parse_mode``."""
        ...

    @abstractmethod
    async def get_bot_info(self) -> dict:
        """Profile of the bot account the adapter sends as.

        Raises:
            NotificationDeliveryError: the profile could not be fetched.
        """
        ...
