"""Messaging transport factory — builds the transport for a bot token.

- TelegramAdapter, built per settings snapshot from the bot token
- FakeMessagingAdapter for development and testing, injected through
  ``OperatorNotifier(transport_factory=...)``
"""

from notifications.channel.port import MessagingPort
from notifications.channel.telegram import TelegramAdapter
from shared.config import Config, get_config


def get_transport(bot_token: str, config: Config | None = None) -> MessagingPort:
    """Return a Telegram transport for ``bot_token``."""
    config = config or get_config()
    return TelegramAdapter(
        bot_token=bot_token,
        api_base=config.telegram_api_base,
        timeout=config.notification_timeout,
    )
