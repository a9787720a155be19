"""Order placement — turns a checkout submission into a persisted order.

The order is committed before the customer is told it succeeded; the
operator notification is scheduled in the background afterwards and never
delays or fails the checkout.
"""

from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain
from pydantic import BaseModel, ConfigDict

from notifications.notification.dispatch import BackgroundNotifier
from notifications.notification.helpers import OperatorNotifier
from ordering.cart.cart import CartLine
from ordering.cart.coupons import DiscountCode, validate_discount_code
from ordering.order.order import Customer, Order, PaymentMethod
from ordering.order.pricing import DeliveryType, PriceBreakdown, compute_subtotal, price
from ordering.order.repository import OrderRepository
from shared.config import Config
from shared.exceptions import StorefrontError, ValidationError
from shared.settings import SettingsProvider, StoreSettings

logger = structlog.get_logger(__name__)


class PlaceOrder(BaseModel):
    """Checkout form contents plus the cart."""

    model_config = ConfigDict(frozen=True)

    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    customer_address: str = ""
    delivery_type: DeliveryType = DeliveryType.DELIVERY
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = None
    items: tuple[CartLine, ...]
    discount_code: str | None = None


class OrderNumberGenerator:
    """Issues ``ORD-<epoch ms>`` numbers, strictly increasing within the process."""

    def __init__(self):
        self._last = 0

    def next(self, now: datetime) -> str:
        millis = max(int(now.timestamp() * 1000), self._last + 1)
        self._last = millis
        return f"ORD-{millis}"


def validate_customer(command: PlaceOrder) -> None:
    errors: dict[str, list[str]] = {}
    if not command.customer_name.strip():
        errors["customer_name"] = ["Full name is required"]
    if not command.customer_phone.strip():
        errors["customer_phone"] = ["Phone number is required"]
    if command.delivery_type == DeliveryType.DELIVERY and not command.customer_address.strip():
        errors["customer_address"] = ["Address is required for delivery"]
    if errors:
        raise ValidationError(errors)


class CheckoutService:
    def __init__(
        self,
        settings_provider: SettingsProvider,
        notifier: OperatorNotifier,
        background: BackgroundNotifier,
        config: Config,
    ):
        self.settings_provider = settings_provider
        self.notifier = notifier
        self.background = background
        self.config = config
        self.order_numbers = OrderNumberGenerator()

    def _apply_discount(
        self,
        code: str | None,
        lines: list[CartLine],
        settings: StoreSettings,
        now: datetime,
    ) -> DiscountCode | None:
        if not code:
            return None
        subtotal = compute_subtotal(lines)
        return validate_discount_code(code, list(settings.discount_codes), subtotal, now)

    def quote(
        self,
        lines: list[CartLine],
        delivery_type: DeliveryType,
        discount_code: str | None = None,
        now: datetime | None = None,
    ) -> PriceBreakdown:
        """Price a cart without placing an order.

        Raises:
            InvalidCartLine: the cart is empty or has a malformed line.
            DiscountError: the discount code cannot be applied.
        """
        now = now or datetime.now(UTC)
        settings = self.settings_provider.get()
        discount = self._apply_discount(discount_code, lines, settings, now)
        return price(
            lines,
            discount,
            delivery_type,
            settings.delivery_schedule,
            allow_negative_total=self.config.allow_negative_total,
        )

    async def place_order(self, command: PlaceOrder, now: datetime | None = None) -> Order:
        """Validate, price and persist an order, then notify operators in the background.

        Raises:
            ValidationError: missing customer details, a bad cart line or an
                unusable discount code. Nothing is persisted.
            RepositoryError: the order could not be stored. No discount use
                is recorded and no notification is sent.
        """
        now = now or datetime.now(UTC)
        validate_customer(command)

        # No await from validation through recording the use: concurrent
        # checkouts on this loop cannot interleave inside the check-and-increment.
        order = self._commit(command, list(command.items), now)
        if order.discount_code:
            self._record_discount_use(order)

        self.background.schedule(
            self.notifier.notify_new_order(order),
            description=f"new-order:{order.order_number}",
        )
        return order

    def _commit(self, command: PlaceOrder, lines: list[CartLine], now: datetime) -> Order:
        settings = self.settings_provider.get()
        discount = self._apply_discount(command.discount_code, lines, settings, now)
        pricing = price(
            lines,
            discount,
            command.delivery_type,
            settings.delivery_schedule,
            allow_negative_total=self.config.allow_negative_total,
        )

        order = Order.create(
            order_number=self.order_numbers.next(now),
            customer=Customer(
                name=command.customer_name.strip(),
                phone=command.customer_phone.strip(),
                email=command.customer_email or None,
                address=command.customer_address.strip(),
            ),
            delivery_type=command.delivery_type,
            lines=lines,
            pricing=pricing,
            payment_method=command.payment_method,
            discount_code=discount.code if discount else None,
            notes=command.notes,
            now=now,
        )
        repository: OrderRepository = current_domain.repository_for(Order)
        repository.create(order)

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            total=str(order.total),
            discount_code=order.discount_code,
            clamped=pricing.clamped,
        )
        return order

    def _record_discount_use(self, order: Order) -> None:
        # The order is already committed, so a failure here must not fail the checkout
        try:
            self.settings_provider.record_discount_use(order.discount_code)
        except StorefrontError as e:
            logger.error(
                "Failed to record discount code use",
                order_id=order.id,
                discount_code=order.discount_code,
                error=str(e),
            )
