"""Tests for OrderStatusService — operator status changes."""

import asyncio
from datetime import timedelta

import pytest
from ordering.order.creation import PlaceOrder
from ordering.order.order import OrderStatus
from ordering.order.status import UpdateOrderStatus
from shared.exceptions import InvalidTransition, OrderAlreadyFinalized, OrderNotFound
from structlog.testing import capture_logs


@pytest.fixture()
def placed_order(checkout, background, fake_transport, make_line, now):
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

    order = asyncio.run(run())
    fake_transport.reset()
    return order


def _update(order_status, background, order_id, status, now=None):
    async def run():
        updated = await order_status.update_status(UpdateOrderStatus(order_id=order_id, new_status=status), now=now)
        await background.drain()
        return updated

    return asyncio.run(run())


class TestUpdateStatus:
    def test_status_is_persisted(self, order_status, background, repository, placed_order):
        updated = _update(order_status, background, placed_order.id, OrderStatus.CONFIRMED)

        assert updated.status == "confirmed"
        assert repository.get_order(placed_order.id).status == "confirmed"

    def test_delivered_sets_delivered_at(self, order_status, background, repository, placed_order, now):
        delivered_time = now + timedelta(hours=2)
        _update(order_status, background, placed_order.id, OrderStatus.OUT_FOR_DELIVERY, now=now)
        _update(order_status, background, placed_order.id, OrderStatus.DELIVERED, now=delivered_time)

        stored = repository.get_order(placed_order.id)
        assert stored.delivered_at == delivered_time
        assert stored.updated_at == delivered_time

    def test_status_change_is_logged(self, order_status, background, placed_order):
        with capture_logs() as logs:
            _update(order_status, background, placed_order.id, OrderStatus.PREPARING)

        changed = next(e for e in logs if e["event"] == "Order status changed")
        assert changed["from_status"] == "pending"
        assert changed["to_status"] == "preparing"


class TestRejectedUpdates:
    def test_unknown_order(self, order_status, background):
        with pytest.raises(OrderNotFound):
            _update(order_status, background, "missing", OrderStatus.CONFIRMED)

    def test_backward_move_leaves_store_untouched(self, order_status, background, repository, placed_order):
        _update(order_status, background, placed_order.id, OrderStatus.PREPARING)
        before = repository.get_order(placed_order.id)

        with pytest.raises(InvalidTransition):
            _update(order_status, background, placed_order.id, OrderStatus.CONFIRMED)

        stored = repository.get_order(placed_order.id)
        assert stored.status == "preparing"
        assert stored.updated_at == before.updated_at

    def test_cancelled_order_is_final(self, order_status, background, fake_transport, placed_order):
        _update(order_status, background, placed_order.id, OrderStatus.CANCELLED)
        fake_transport.reset()

        with pytest.raises(OrderAlreadyFinalized):
            _update(order_status, background, placed_order.id, OrderStatus.DELIVERED)
        assert fake_transport.attempts == []


class TestStatusNotification:
    def test_only_channels_with_status_permission_are_notified(
        self, order_status, background, fake_transport, placed_order
    ):
        _update(order_status, background, placed_order.id, OrderStatus.CONFIRMED)

        assert fake_transport.attempts == ["1001"]
        text = fake_transport.sent_messages[0]["text"]
        assert placed_order.order_number in text
        assert "Order confirmed" in text

    def test_notification_failure_does_not_fail_the_update(
        self, order_status, background, repository, fake_transport, placed_order
    ):
        fake_transport.configure(should_succeed=False)
        updated = _update(order_status, background, placed_order.id, OrderStatus.CONFIRMED)
        assert repository.get_order(updated.id).status == "confirmed"
