"""Message templates — one class per operator message.

Each template knows the event class its recipients must subscribe to and how
to render message text from a context dict.
"""

from notifications.channel.channel import EventClass
from notifications.templates.bot_test_message import BotTestMessageTemplate
from notifications.templates.contact_message import ContactMessageTemplate
from notifications.templates.low_stock_alert import LowStockAlertTemplate
from notifications.templates.new_message import NewMessageTemplate
from notifications.templates.new_order import NewOrderTemplate
from notifications.templates.new_review import NewReviewTemplate
from notifications.templates.order_status import OrderStatusTemplate

# Template used when a dispatch names only the event class
DEFAULT_TEMPLATES: dict[EventClass, type] = {
    EventClass.ORDERS: NewOrderTemplate,
    EventClass.ORDER_STATUS: OrderStatusTemplate,
    EventClass.MESSAGES: NewMessageTemplate,
    EventClass.REVIEWS: NewReviewTemplate,
    EventClass.CONTACT: ContactMessageTemplate,
}

__all__ = [
    "DEFAULT_TEMPLATES",
    "BotTestMessageTemplate",
    "ContactMessageTemplate",
    "LowStockAlertTemplate",
    "NewMessageTemplate",
    "NewOrderTemplate",
    "NewReviewTemplate",
    "OrderStatusTemplate",
]
