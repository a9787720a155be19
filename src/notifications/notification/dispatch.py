"""Notification fan-out — delivers one rendered message to many chats.

``NotificationDispatcher.dispatch`` filters the configured channels by their
permission for the event class, renders the message once and sends it to
every eligible chat concurrently. Each send is isolated and bounded by a
timeout: one chat failing or hanging never affects the others. The overall
result is True when at least one chat received the message.

Delivery is best-effort: one attempt per chat, no retries. Failures are
logged and never raised to the caller.

``BackgroundNotifier`` runs dispatches as tracked background tasks so that
business operations (placing an order, changing its status) can confirm
success without waiting for notifications.
"""

import asyncio
from collections.abc import Coroutine

import structlog

from notifications.channel.channel import EventClass, NotificationChannel, eligible_channels
from notifications.channel.port import MessagingPort
from notifications.templates import DEFAULT_TEMPLATES
from shared.exceptions import NotificationDeliveryError

logger = structlog.get_logger(__name__)

DEFAULT_SEND_TIMEOUT = 10.0
PARSE_MODE = "HTML"


class NotificationDispatcher:
    """Renders a message and fans it out to every eligible channel."""

    def __init__(self, timeout: float = DEFAULT_SEND_TIMEOUT):
        self.timeout = timeout

    async def dispatch(
        self,
        event_class: EventClass,
        context: dict,
        channels: list[NotificationChannel],
        sender: MessagingPort,
        template=None,
    ) -> bool:
        """Deliver the ``event_class`` message to every channel subscribed to it.

        Args:
            event_class: Permission a channel needs to receive the message.
            context: Values interpolated into the template.
            channels: All configured channels; filtered here.
            sender: Transport used for every send.
            template: Template class to render; defaults to the event class's.

        Returns:
            True if at least one channel received the message, False if all
            sends failed or no channel was eligible.
        """
        targets = eligible_channels(channels, event_class)
        if not targets:
            logger.info("No eligible channels for notification", event_class=event_class.value)
            return False

        template_cls = template or DEFAULT_TEMPLATES[event_class]
        text = template_cls.render(context)

        results = await asyncio.gather(*(self._deliver(sender, channel.chat_id, text) for channel in targets))

        delivered = sum(1 for ok in results if ok)
        logger.info(
            "Notification dispatched",
            event_class=event_class.value,
            message_type=template_cls.message_type,
            eligible=len(targets),
            delivered=delivered,
        )
        return delivered > 0

    async def send_to_chat(self, chat_id: str, text: str, sender: MessagingPort) -> bool:
        """Send ``text`` to a single chat, ignoring channel permissions."""
        return await self._deliver(sender, chat_id, text)

    async def _deliver(self, sender: MessagingPort, chat_id: str, text: str) -> bool:
        """One isolated send attempt. Never raises."""
        try:
            async with asyncio.timeout(self.timeout):
                result = await sender.send(chat_id, text, parse_mode=PARSE_MODE)
        except TimeoutError:
            error = NotificationDeliveryError(chat_id, f"timed out after {self.timeout}s")
        except Exception as e:
            error = NotificationDeliveryError(chat_id, f"{type(e).__name__}: {e}")
        else:
            if result.success:
                return True
            error = NotificationDeliveryError(chat_id, result.error or "Unknown delivery error")

        logger.warning("Notification delivery failed", chat_id=chat_id, error=error.reason)
        return False


class BackgroundNotifier:
    """Runs notification coroutines as tracked, fire-and-forget tasks.

    ``schedule`` returns immediately. Tasks are kept until they finish so
    failures are logged rather than lost, and ``drain`` waits for everything
    still in flight (used at shutdown and in tests).
    """

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, coro: Coroutine, description: str = "notification") -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=description)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Background notification cancelled", task=task.get_name())
            return

        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background notification crashed",
                task=task.get_name(),
                error=f"{type(exc).__name__}: {exc}",
            )
        elif task.result() is False:
            logger.info("Background notification reached no channel", task=task.get_name())

    async def drain(self) -> None:
        """Wait for all scheduled notifications to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
