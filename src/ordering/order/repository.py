"""Order persistence through the ordering domain's default provider.

``OrderRepository`` is what ``current_domain.repository_for(Order)`` hands
out. Every read rebuilds ``Order`` aggregates from stored records; a record
that no longer validates surfaces as ``RepositoryError`` instead of leaking
partial data into the domain.
"""

from contextlib import contextmanager
from typing import Any

import structlog
from protean.exceptions import DatabaseError, ExpectedVersionError, ObjectNotFoundError
from protean.exceptions import ValidationError as RecordValidationError

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from shared.exceptions import OrderNotFound, RepositoryError

logger = structlog.get_logger(__name__)

_SORTABLE_FIELDS = {"created_at", "updated_at", "total", "order_number"}


@contextmanager
def _stored_records():
    try:
        yield
    except RecordValidationError as exc:
        raise RepositoryError(f"Stored order is malformed: {exc}") from exc


@ordering.repository(part_of=Order)
class OrderRepository:
    def create(self, order: Order) -> str:
        """Persist a new order and return its id.

        Raises:
            RepositoryError: the id or order number is already taken, or the
                write failed.
        """
        if self.get_order(order.id) is not None:
            raise RepositoryError(f"Order {order.id} already exists")
        with _stored_records():
            taken = self.query.filter(order_number=order.order_number).all().total
        if taken:
            raise RepositoryError(f"Order number {order.order_number} is already taken")

        self._write(order)
        logger.debug("Order stored", order_id=order.id, order_number=order.order_number)
        return order.id

    def update(self, order_id: str, patch: dict[str, Any]) -> None:
        """Apply ``patch`` to the stored order.

        Raises:
            OrderNotFound: no order with ``order_id``.
            RepositoryError: the write failed.
        """
        order = self.get_or_raise(order_id)
        for field_name, value in patch.items():
            setattr(order, field_name, value)

        self._write(order)
        logger.debug("Order updated", order_id=order_id, fields=sorted(patch))

    def get_order(self, order_id: str) -> Order | None:
        with _stored_records():
            return self.get_or_none(order_id)

    def get_or_raise(self, order_id: str) -> Order:
        try:
            with _stored_records():
                return self.get(order_id)
        except ObjectNotFoundError:
            raise OrderNotFound(order_id) from None

    def query_orders(
        self,
        status: OrderStatus | None = None,
        sort: str = "-created_at",
        limit: int | None = None,
    ) -> list[Order]:
        """Orders filtered by status, sorted by ``sort`` (``-`` prefix for descending).

        Raises:
            ValueError: ``sort`` names an unsortable field, or ``limit`` is negative.
        """
        field = sort.lstrip("-")
        if field not in _SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort orders by {field!r}")
        if limit is not None and limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")
        if limit == 0:
            return []

        queryset = self.query.order_by(sort)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        if limit is not None:
            queryset = queryset.limit(limit)

        with _stored_records():
            return queryset.all().items

    def _write(self, order: Order) -> None:
        try:
            self.add(order)
        except (DatabaseError, ExpectedVersionError) as exc:
            raise RepositoryError(f"Could not store order {order.id}: {exc}") from exc
