"""Shared BDD fixtures and step definitions for the Ordering domain."""

import asyncio
from datetime import timedelta
from decimal import Decimal

import pytest
from ordering.order.creation import PlaceOrder
from ordering.order.order import OrderStatus
from ordering.order.status import UpdateOrderStatus
from pytest_bdd import given, parsers, then
from shared.exceptions import TransitionError, ValidationError


@pytest.fixture()
def error():
    """Container for the error raised by a When step."""
    return {"exc": None}


@pytest.fixture()
def clock(now):
    """Each call returns a time one hour after the previous one."""
    ticks = {"now": now}

    def _tick():
        ticks["now"] += timedelta(hours=1)
        return ticks["now"]

    return _tick


@pytest.fixture()
def move_order(order_status, background):
    """Run a status update the way the API does, waiting for its notification."""

    def _move(order_id, status, now):
        async def run():
            updated = await order_status.update_status(
                UpdateOrderStatus(order_id=order_id, new_status=OrderStatus(status)), now=now
            )
            await background.drain()
            return updated

        return asyncio.run(run())

    return _move


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a cart with a subtotal of {amount:d}"), target_fixture="cart")
def cart_with_subtotal(make_line, amount):
    return [make_line(str(amount))]


@given("a placed order", target_fixture="order")
def placed_order(checkout, background, make_line, now):
    command = PlaceOrder(
        customer_name="Sara Ali",
        customer_phone="0912345678",
        customer_address="12 Garden St, Tripoli",
        items=(make_line("100"),),
    )

    async def run():
        order = await checkout.place_order(command, now=now)
        await background.drain()
        return order

    return asyncio.run(run())


@given("the order was delivered", target_fixture="order")
def delivered_order(order, move_order, clock):
    return move_order(order.id, "delivered", clock())


@given("the order is being prepared", target_fixture="order")
def preparing_order(order, move_order, clock):
    return move_order(order.id, "preparing", clock())


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the discount is {amount:d}"))
def discount_is(breakdown, amount):
    assert breakdown.discount_amount == Decimal(amount)


@then(parsers.cfparse("the total is {amount:d}"))
def total_is(breakdown, amount):
    assert breakdown.total == Decimal(amount)


@then(parsers.cfparse('the code is rejected with "{message}"'))
def code_rejected(error, message):
    assert isinstance(error["exc"], ValidationError)
    assert error["exc"].messages == {"discount_code": [message]}


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(repository, order, status):
    assert repository.get_order(order.id).status == status


@then("the status change is rejected")
def status_change_rejected(error):
    assert isinstance(error["exc"], TransitionError)
