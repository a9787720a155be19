"""Order status updates — operator action moving an order through its lifecycle."""

from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain
from pydantic import BaseModel, ConfigDict

from notifications.notification.dispatch import BackgroundNotifier
from notifications.notification.helpers import OperatorNotifier
from ordering.order.order import Order, OrderStatus
from ordering.order.repository import OrderRepository

logger = structlog.get_logger(__name__)


class UpdateOrderStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: str
    new_status: OrderStatus


class OrderStatusService:
    def __init__(self, notifier: OperatorNotifier, background: BackgroundNotifier):
        self.notifier = notifier
        self.background = background

    async def update_status(self, command: UpdateOrderStatus, now: datetime | None = None) -> Order:
        """Apply a status change, persist it and notify operators in the background.

        Raises:
            OrderNotFound: no order with ``command.order_id``.
            TransitionError: the change is not allowed; nothing is written.
            RepositoryError: the change could not be stored.
        """
        repository: OrderRepository = current_domain.repository_for(Order)
        order = repository.get_or_raise(command.order_id)
        previous = order.status

        order.transition_to(command.new_status, now=now or datetime.now(UTC))
        repository.update(order.id, order.status_patch())

        logger.info(
            "Order status changed",
            order_id=order.id,
            order_number=order.order_number,
            from_status=previous,
            to_status=order.status,
        )

        self.background.schedule(
            self.notifier.notify_status_change(order),
            description=f"order-status:{order.order_number}",
        )
        return order
