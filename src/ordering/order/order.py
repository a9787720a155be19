"""Order aggregate — a priced, committed snapshot of a cart and its lifecycle.

Line items freeze product name, image and price at checkout so later
catalogue edits never alter a recorded order. After creation only the
lifecycle fields (``status``, ``updated_at``, ``delivered_at``) change.

State Machine (6 states):
    PENDING → CONFIRMED → PREPARING → OUT_FOR_DELIVERY → DELIVERED
    CANCELLED (from any non-terminal state)

Forward jumps (e.g. PENDING → DELIVERED) are allowed because operators pick
the new status from an unconstrained list. Backward moves are not.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Decimal,
    Integer,
    List,
    String,
    Text,
    ValueObject,
)

from ordering.cart.cart import CartLine
from ordering.domain import ordering
from ordering.order.pricing import DeliveryType, PriceBreakdown
from shared.exceptions import InvalidTransition, OrderAlreadyFinalized

PICKUP_ADDRESS = "Store pickup"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out-for-delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CASH = "cash"
    CARD = "card"
    ONLINE = "online"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.CONFIRMED,
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.CONFIRMED: {
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PREPARING: {
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset(status for status, targets in _VALID_TRANSITIONS.items() if not targets)


def allowed_transitions(status: OrderStatus) -> set[OrderStatus]:
    return set(_VALID_TRANSITIONS[status])


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class Customer:
    """Contact and delivery details captured at checkout time."""

    name = String(required=True, max_length=200, sanitize=False)
    phone = String(required=True, max_length=50, sanitize=False)
    email = String(max_length=254, sanitize=False)
    address = Text(default="", sanitize=False)


@ordering.value_object(part_of="Order")
class OrderItem:
    """A line item frozen at the moment the order was placed."""

    product_id = String(required=True, max_length=100)
    name = String(default="", sanitize=False)
    image = Text(default="", sanitize=False)
    quantity = Integer(required=True, min_value=1)
    price = Decimal(required=True, min_value=0)
    subtotal = Decimal(required=True, min_value=0)

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderItem":
        return cls(
            product_id=line.product_id,
            name=line.name,
            image=line.image,
            quantity=line.quantity,
            price=line.effective_unit_price,
            subtotal=line.line_total,
        )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate(limit=-1)
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer = ValueObject(Customer, required=True)
    delivery_type = String(choices=DeliveryType, required=True)
    items = List(content_type=ValueObject(OrderItem))
    subtotal = Decimal(required=True, min_value=0)
    delivery_fee = Decimal(required=True, min_value=0)
    discount = Decimal(required=True, min_value=0)
    discount_code = String(max_length=100)
    total = Decimal(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    notes = Text(sanitize=False)
    created_at = DateTime(required=True)
    updated_at = DateTime(required=True)
    delivered_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order needs at least one item"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_number: str,
        customer: Customer,
        delivery_type: DeliveryType,
        lines: list[CartLine],
        pricing: PriceBreakdown,
        payment_method: PaymentMethod,
        discount_code: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> "Order":
        """Create a new PENDING order from checkout data.

        Pickup orders without an address are recorded with ``PICKUP_ADDRESS``.
        """
        now = now or datetime.now(UTC)

        if delivery_type == DeliveryType.PICKUP and not (customer.address or "").strip():
            customer = customer.replace(address=PICKUP_ADDRESS)

        return cls(
            order_number=order_number,
            customer=customer,
            delivery_type=delivery_type.value,
            items=[OrderItem.from_cart_line(line) for line in lines],
            subtotal=pricing.subtotal,
            delivery_fee=pricing.delivery_fee,
            discount=pricing.discount_amount,
            discount_code=discount_code,
            total=pricing.total,
            payment_method=payment_method.value,
            notes=notes or None,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    @property
    def is_finalized(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATES

    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if current in TERMINAL_STATES:
            raise OrderAlreadyFinalized(current.value, target_status.value)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition(current.value, target_status.value)

    def transition_to(self, target_status: OrderStatus, now: datetime | None = None) -> None:
        """Move the order to ``target_status``.

        ``updated_at`` is always refreshed; ``delivered_at`` is set only when
        entering DELIVERED.

        Raises:
            OrderAlreadyFinalized: the order is DELIVERED or CANCELLED.
            InvalidTransition: the target is the current status or lies behind it.
        """
        self._assert_can_transition(target_status)

        now = now or datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        if target_status == OrderStatus.DELIVERED:
            self.delivered_at = now

    def status_patch(self) -> dict:
        """Fields written back to the store after a status change."""
        patch = {"status": self.status, "updated_at": self.updated_at}
        if self.delivered_at is not None:
            patch["delivered_at"] = self.delivered_at
        return patch
