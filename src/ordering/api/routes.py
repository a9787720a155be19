"""FastAPI routes for the Ordering domain — checkout, order queries and status updates."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    CheckoutRequest,
    OrderResponse,
    QuoteResponse,
    UpdateStatusRequest,
    ValidateDiscountRequest,
)
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order, OrderStatus
from ordering.order.status import UpdateOrderStatus
from shared.services import Services, get_services

# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: CheckoutRequest, services: Services = Depends(get_services)) -> OrderResponse:
    command = PlaceOrder(
        customer_name=body.customer_name,
        customer_phone=body.customer_phone,
        customer_email=body.customer_email,
        customer_address=body.customer_address,
        delivery_type=body.delivery_type,
        payment_method=body.payment_method,
        notes=body.notes,
        items=tuple(item.to_cart_line() for item in body.items),
        discount_code=body.discount_code,
    )
    order = await services.checkout.place_order(command)
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(
    status: OrderStatus | None = None,
    limit: int | None = Query(default=None, ge=1),
) -> list[OrderResponse]:
    repository = current_domain.repository_for(Order)
    orders = repository.query_orders(status=status, sort="-created_at", limit=limit)
    return [OrderResponse.from_order(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return OrderResponse.from_order(current_domain.repository_for(Order).get_or_raise(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    services: Services = Depends(get_services),
) -> OrderResponse:
    command = UpdateOrderStatus(order_id=order_id, new_status=body.status)
    order = await services.order_status.update_status(command)
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Discount Code Router
# ---------------------------------------------------------------------------
discount_router = APIRouter(prefix="/discount-codes", tags=["discount-codes"])


@discount_router.post("/validate", response_model=QuoteResponse)
async def validate_discount(
    body: ValidateDiscountRequest,
    services: Services = Depends(get_services),
) -> QuoteResponse:
    breakdown = services.checkout.quote(
        [item.to_cart_line() for item in body.items],
        body.delivery_type,
        discount_code=body.code,
    )
    return QuoteResponse(code=body.code.strip(), **breakdown.model_dump(exclude={"clamped"}))
