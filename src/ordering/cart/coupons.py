"""Discount codes and their validation against the current cart.

Codes live in the site settings document and are edited by operators. A code
is usable for an order when it is active, the current instant lies inside its
validity window, the cart subtotal reaches its minimum purchase and its usage
limit (if any) has not been reached.

Validation never mutates the code: ``used_count`` is incremented by the
checkout at commit time (see ``SettingsProvider.record_discount_use``).
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from shared.exceptions import (
    DiscountCodeExpired,
    DiscountCodeNotFound,
    DiscountUsageExhausted,
    MinimumPurchaseNotMet,
)


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    """Lookup key for a discount code: stripped and case-folded."""
    return code.strip().casefold()


class DiscountCode(BaseModel):
    """An operator-defined rule reducing the order total."""

    model_config = ConfigDict(frozen=True)

    id: str
    code: str
    discount_type: DiscountType
    discount_value: Decimal = Field(ge=0)
    min_purchase: Decimal = Field(default=Decimal(0), ge=0)  # 0 = no minimum
    max_discount: Decimal = Field(default=Decimal(0), ge=0)  # 0 = uncapped, percentage only
    valid_from: AwareDatetime
    valid_until: AwareDatetime
    active: bool = True
    usage_limit: int = Field(default=0, ge=0)  # 0 = unlimited
    used_count: int = Field(default=0, ge=0)
    created_at: AwareDatetime | None = None
    updated_at: AwareDatetime | None = None

    def matches(self, code: str) -> bool:
        return normalize_code(self.code) == normalize_code(code)

    def is_within_validity(self, now: datetime) -> bool:
        return self.valid_from <= now <= self.valid_until

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit > 0 and self.used_count >= self.usage_limit


def find_discount_code(code: str, catalog: list[DiscountCode]) -> DiscountCode | None:
    """Case-insensitive exact match on ``code``; inactive codes are included."""
    return next((c for c in catalog if c.matches(code)), None)


def validate_discount_code(
    code: str,
    catalog: list[DiscountCode],
    subtotal: Decimal,
    now: datetime,
) -> DiscountCode:
    """Return the catalog entry for ``code`` if it can be applied to this order.

    Raises:
        DiscountCodeNotFound: no such code, or the code is inactive.
        DiscountCodeExpired: ``now`` is outside ``[valid_from, valid_until]``.
        MinimumPurchaseNotMet: ``subtotal`` is below the code's minimum purchase.
        DiscountUsageExhausted: the usage limit has been reached.
    """
    if not code or not code.strip():
        raise DiscountCodeNotFound(code or "")

    discount = find_discount_code(code, catalog)
    if discount is None or not discount.active:
        raise DiscountCodeNotFound(code.strip())

    if not discount.is_within_validity(now):
        raise DiscountCodeExpired(discount.code)

    if subtotal < discount.min_purchase:
        raise MinimumPurchaseNotMet(discount.code, discount.min_purchase)

    if discount.is_exhausted:
        raise DiscountUsageExhausted(discount.code)

    return discount
