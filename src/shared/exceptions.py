"""Error taxonomy shared by the ordering and notifications contexts.

``ValidationError`` and ``TransitionError`` are local, recoverable errors that
callers surface to the customer or operator. ``RepositoryError`` is fatal to
the triggering operation. ``NotificationDeliveryError`` is only ever logged.
"""

from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.exceptions import ValidationError as DomainValidationError


class StorefrontError(Exception):
    """Base class for all storefront errors."""


class ValidationError(StorefrontError, DomainValidationError):
    """Invalid input, carrying field-keyed error messages.

    ``messages`` maps a field name to a list of human-readable messages,
    e.g. ``{"code": ["Discount code has expired"]}``.
    """


class InvalidCartLine(ValidationError):
    """A cart line has a negative price, bad quantity or bad discount percent."""


class DiscountError(ValidationError):
    """A discount code could not be applied to the order."""

    field = "discount_code"

    def __init__(self, message: str):
        super().__init__({self.field: [message]})


class DiscountCodeNotFound(DiscountError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Discount code '{code}' is not valid")


class DiscountCodeExpired(DiscountError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Discount code '{code}' is not valid at this time")


class MinimumPurchaseNotMet(DiscountError):
    def __init__(self, code: str, required_minimum: Decimal):
        self.code = code
        self.required_minimum = required_minimum
        super().__init__(f"Minimum purchase not met: need at least {required_minimum:.2f}")


class DiscountUsageExhausted(DiscountError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Discount code '{code}' has reached its usage limit")


class TransitionError(StorefrontError):
    """An order status change is not allowed. The order is left unchanged."""

    def __init__(self, current: str, target: str, message: str):
        self.current = current
        self.target = target
        super().__init__(message)


class InvalidTransition(TransitionError):
    def __init__(self, current: str, target: str):
        super().__init__(current, target, f"Cannot transition from {current} to {target}")


class OrderAlreadyFinalized(TransitionError):
    def __init__(self, current: str, target: str):
        super().__init__(current, target, f"Order is already {current} and cannot move to {target}")


class RepositoryError(StorefrontError):
    """Persistence failed, or a stored document does not match its schema."""


class OrderNotFound(RepositoryError, ObjectNotFoundError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class NotificationDeliveryError(StorefrontError):
    """Delivery to a single notification channel failed."""

    def __init__(self, chat_id: str, reason: str):
        self.chat_id = chat_id
        self.reason = reason
        super().__init__(f"Delivery to chat {chat_id} failed: {reason}")
