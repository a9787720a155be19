"""Service wiring — builds the object graph the HTTP layer and callers use.

Every component receives its collaborators explicitly. Orders are reached
through ``current_domain.repository_for(Order)``, so callers run inside an
``ordering`` domain context. The FastAPI app keeps one ``Services`` instance
on ``app.state``; handlers obtain it through the ``get_services`` dependency.
"""

from dataclasses import dataclass

from fastapi import Request

from notifications.notification.dispatch import BackgroundNotifier, NotificationDispatcher
from notifications.notification.helpers import OperatorNotifier
from ordering.order.creation import CheckoutService
from ordering.order.status import OrderStatusService
from shared.config import Config, get_config
from shared.settings import InMemorySettingsProvider, SettingsProvider


@dataclass
class Services:
    config: Config
    settings_provider: SettingsProvider
    background: BackgroundNotifier
    notifier: OperatorNotifier
    checkout: CheckoutService
    order_status: OrderStatusService


def build_services(
    config: Config | None = None,
    settings_provider: SettingsProvider | None = None,
    notifier: OperatorNotifier | None = None,
) -> Services:
    config = config or get_config()
    settings_provider = settings_provider or InMemorySettingsProvider()
    background = BackgroundNotifier()
    notifier = notifier or OperatorNotifier(
        settings_provider,
        config,
        dispatcher=NotificationDispatcher(timeout=config.notification_timeout),
    )

    return Services(
        config=config,
        settings_provider=settings_provider,
        background=background,
        notifier=notifier,
        checkout=CheckoutService(settings_provider, notifier, background, config),
        order_status=OrderStatusService(notifier, background),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
