"""Site settings — delivery fee, discount codes and notification channels.

Settings are read as a snapshot per operation; nothing holds on to a
``StoreSettings`` instance between requests. The provider stores the raw
settings document and parses it on every read, so a malformed document
surfaces as ``RepositoryError`` at this boundary.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from notifications.channel.channel import NotificationChannel
from ordering.cart.coupons import DiscountCode, find_discount_code
from ordering.order.pricing import DeliveryFeeSchedule
from shared.exceptions import DiscountCodeNotFound, DiscountUsageExhausted, RepositoryError

logger = structlog.get_logger(__name__)


class StoreSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    delivery_fee: Decimal = Decimal(0)
    # 0 disables free delivery
    free_delivery_minimum: Decimal = Decimal(0)
    currency_label: str = "LYD"
    discount_codes: tuple[DiscountCode, ...] = ()
    notification_channels: tuple[NotificationChannel, ...] = ()
    bot_token: str = ""
    notifications_enabled: bool = False

    @property
    def delivery_schedule(self) -> DeliveryFeeSchedule:
        return DeliveryFeeSchedule(fee=self.delivery_fee, free_delivery_minimum=self.free_delivery_minimum)

    @property
    def notifications_configured(self) -> bool:
        return self.notifications_enabled and bool(self.bot_token)

    def active_channels(self) -> list[NotificationChannel]:
        """Channels that may receive notifications; empty while the bot is off."""
        if not self.notifications_configured:
            return []
        return list(self.notification_channels)


def parse_settings(document: dict[str, Any]) -> StoreSettings:
    try:
        return StoreSettings.model_validate(document)
    except PydanticValidationError as exc:
        raise RepositoryError(f"Site settings document is malformed: {exc}") from exc


class SettingsProvider(ABC):
    """Abstract interface for the site settings store."""

    @abstractmethod
    def get(self) -> StoreSettings:
        ...

    @abstractmethod
    def record_discount_use(self, code: str) -> DiscountCode:
        """Increment ``used_count`` of ``code`` if its usage limit allows it.

        Check and increment happen as a single step.

        Raises:
            DiscountCodeNotFound: the code no longer exists.
            DiscountUsageExhausted: the usage limit was reached in the meantime.
        """
        ...


class InMemorySettingsProvider(SettingsProvider):
    """Settings document kept in memory."""

    def __init__(self, document: dict[str, Any] | StoreSettings | None = None):
        if isinstance(document, StoreSettings):
            document = document.model_dump(mode="json")
        self.document: dict[str, Any] = document or {}

    def get(self) -> StoreSettings:
        return parse_settings(self.document)

    def replace(self, settings: StoreSettings) -> None:
        self.document = settings.model_dump(mode="json")

    def record_discount_use(self, code: str) -> DiscountCode:
        settings = self.get()
        discount = find_discount_code(code, list(settings.discount_codes))
        if discount is None:
            raise DiscountCodeNotFound(code)
        if discount.is_exhausted:
            raise DiscountUsageExhausted(discount.code)

        updated = discount.model_copy(
            update={"used_count": discount.used_count + 1, "updated_at": datetime.now(UTC)}
        )
        codes = tuple(updated if c.id == discount.id else c for c in settings.discount_codes)
        self.replace(settings.model_copy(update={"discount_codes": codes}))

        logger.info("Discount code used", code=updated.code, used_count=updated.used_count)
        return updated
