"""Operator notification channels and the event classes they subscribe to."""

from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class EventClass(Enum):
    """Kinds of operator notification; values match the permission flag names."""

    ORDERS = "orders"
    ORDER_STATUS = "order_status"
    MESSAGES = "messages"
    REVIEWS = "reviews"
    CONTACT = "contact"


class ChannelPermissions(BaseModel):
    model_config = ConfigDict(frozen=True)

    orders: bool = True
    order_status: bool = True
    messages: bool = True
    reviews: bool = True
    contact: bool = True

    def allows(self, event_class: EventClass) -> bool:
        return getattr(self, event_class.value)


class NotificationChannel(BaseModel):
    """An operator-facing chat that can receive event notifications."""

    model_config = ConfigDict(frozen=True)

    id: str
    chat_id: str = Field(min_length=1)
    name: str = ""
    enabled: bool = True
    permissions: ChannelPermissions = ChannelPermissions()
    created_at: AwareDatetime | None = None
    updated_at: AwareDatetime | None = None

    def accepts(self, event_class: EventClass) -> bool:
        return self.enabled and self.permissions.allows(event_class)


def eligible_channels(channels: list[NotificationChannel], event_class: EventClass) -> list[NotificationChannel]:
    return [channel for channel in channels if channel.accepts(event_class)]


class MessageType(Enum):
    """Rendered message kinds; each maps to one template."""

    NEW_ORDER = "NewOrder"
    ORDER_STATUS = "OrderStatus"
    NEW_MESSAGE = "NewMessage"
    NEW_REVIEW = "NewReview"
    CONTACT = "Contact"
    LOW_STOCK_ALERT = "LowStockAlert"
    TEST_MESSAGE = "TestMessage"
