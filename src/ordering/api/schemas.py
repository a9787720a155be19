"""Pydantic request/response schemas for the Ordering API.

These are external contracts — separate from the internal command models.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ordering.cart.cart import CartLine
from ordering.order.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from ordering.order.pricing import DeliveryType


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    product_id: str
    name: str = ""
    image: str = ""
    unit_price: Decimal
    discount_percent: Decimal | None = None
    quantity: int = 1

    def to_cart_line(self) -> CartLine:
        return CartLine(**self.model_dump())


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    customer_address: str = ""
    delivery_type: DeliveryType = DeliveryType.DELIVERY
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = None
    items: list[CartLineSchema]
    discount_code: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_name": "Sara Ali",
                    "customer_phone": "0912345678",
                    "customer_address": "12 Garden St, Tripoli",
                    "delivery_type": "delivery",
                    "payment_method": "cash",
                    "items": [
                        {
                            "product_id": "prod-001",
                            "name": "Dark Chocolate Box",
                            "unit_price": "45.00",
                            "discount_percent": "10",
                            "quantity": 2,
                        }
                    ],
                    "discount_code": "SAVE10",
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: OrderStatus


class ValidateDiscountRequest(BaseModel):
    code: str = Field(min_length=1)
    items: list[CartLineSchema]
    delivery_type: DeliveryType = DeliveryType.DELIVERY


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class QuoteResponse(BaseModel):
    code: str
    subtotal: Decimal
    discount_amount: Decimal
    delivery_fee: Decimal
    total: Decimal


class CustomerSchema(BaseModel):
    name: str
    phone: str
    email: str | None = None
    address: str = ""


class OrderItemSchema(BaseModel):
    product_id: str
    name: str
    image: str = ""
    quantity: int
    price: Decimal
    subtotal: Decimal


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer: CustomerSchema
    delivery_type: DeliveryType
    items: list[OrderItemSchema]
    subtotal: Decimal
    delivery_fee: Decimal
    discount: Decimal
    discount_code: str | None = None
    total: Decimal
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    delivered_at: datetime | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls.model_validate(order.to_dict())
