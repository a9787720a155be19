"""Pricing — derives subtotal, discount, delivery fee and total for a cart.

All arithmetic is ``Decimal`` and no rounding is applied; amounts are only
rounded to two places when formatted for display. The same inputs always
produce the same breakdown.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ordering.cart.cart import CartLine
from ordering.cart.coupons import DiscountCode, DiscountType
from shared.exceptions import InvalidCartLine

_ZERO = Decimal(0)
_HUNDRED = Decimal(100)


class DeliveryType(Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class DeliveryFeeSchedule(BaseModel):
    """Delivery fee charged for ``delivery`` orders.

    ``free_delivery_minimum`` waives the fee once the subtotal reaches it;
    0 disables the waiver.
    """

    model_config = ConfigDict(frozen=True)

    fee: Decimal = _ZERO
    free_delivery_minimum: Decimal = _ZERO


class PriceBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    discount_amount: Decimal
    delivery_fee: Decimal
    total: Decimal
    # True when a discount larger than the order value was floored to a zero total
    clamped: bool = False


def _validate_lines(lines: list[CartLine]) -> None:
    if not lines:
        raise InvalidCartLine({"items": ["Cart is empty"]})

    errors: dict[str, list[str]] = {}
    for index, line in enumerate(lines):
        messages = []
        if line.unit_price < 0:
            messages.append("Unit price must not be negative")
        if line.quantity < 1:
            messages.append("Quantity must be at least 1")
        if line.discount_percent is not None and not (_ZERO <= line.discount_percent <= _HUNDRED):
            messages.append("Discount percent must be between 0 and 100")
        if messages:
            errors[f"items.{index}"] = messages

    if errors:
        raise InvalidCartLine(errors)


def compute_subtotal(lines: list[CartLine]) -> Decimal:
    _validate_lines(lines)
    return sum((line.line_total for line in lines), _ZERO)


def compute_discount(subtotal: Decimal, discount: DiscountCode | None) -> Decimal:
    """Discount amount for ``subtotal``.

    Percentage discounts are capped by ``max_discount`` when it is positive.
    Fixed discounts are applied as-is, even when they exceed the subtotal.
    """
    if discount is None:
        return _ZERO

    if discount.discount_type == DiscountType.PERCENTAGE:
        amount = subtotal * discount.discount_value / _HUNDRED
        if discount.max_discount > 0:
            amount = min(amount, discount.max_discount)
        return amount

    return discount.discount_value


def compute_delivery_fee(
    subtotal: Decimal,
    delivery_type: DeliveryType,
    schedule: DeliveryFeeSchedule,
) -> Decimal:
    if delivery_type != DeliveryType.DELIVERY:
        return _ZERO
    if schedule.free_delivery_minimum > 0 and subtotal >= schedule.free_delivery_minimum:
        return _ZERO
    return schedule.fee


def price(
    lines: list[CartLine],
    discount: DiscountCode | None,
    delivery_type: DeliveryType,
    schedule: DeliveryFeeSchedule,
    allow_negative_total: bool = False,
) -> PriceBreakdown:
    """Price a cart.

    ``total = subtotal - discount_amount + delivery_fee``. When that is
    negative and ``allow_negative_total`` is False, the total is floored at
    zero and ``clamped`` is set.

    Raises:
        InvalidCartLine: empty cart, negative price, quantity below one or a
            product discount percent outside 0-100.
    """
    subtotal = compute_subtotal(lines)
    discount_amount = compute_discount(subtotal, discount)
    delivery_fee = compute_delivery_fee(subtotal, delivery_type, schedule)

    total = subtotal - discount_amount + delivery_fee
    clamped = False
    if total < 0 and not allow_negative_total:
        total = _ZERO
        clamped = True

    return PriceBreakdown(
        subtotal=subtotal,
        discount_amount=discount_amount,
        delivery_fee=delivery_fee,
        total=total,
        clamped=clamped,
    )
