"""Shared BDD fixtures and step definitions for the Notifications domain."""

from decimal import Decimal

import pytest
from notifications.channel.channel import ChannelPermissions, NotificationChannel
from ordering.order.order import Customer, Order, PaymentMethod
from ordering.order.pricing import DeliveryType, PriceBreakdown
from pytest_bdd import given, parsers, then


@pytest.fixture()
def channels():
    return []


@pytest.fixture()
def order(make_line, now):
    return Order.create(
        order_number="ORD-1749988800000",
        customer=Customer(name="Sara Ali", phone="0912345678", address="12 Garden St"),
        delivery_type=DeliveryType.DELIVERY,
        lines=[make_line("45", quantity=2)],
        pricing=PriceBreakdown(
            subtotal=Decimal("90"),
            discount_amount=Decimal("0"),
            delivery_fee=Decimal("10"),
            total=Decimal("100"),
        ),
        payment_method=PaymentMethod.CASH,
        now=now,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a chat "{chat_id}" that receives orders'))
def permitted_chat(channels, chat_id):
    channels.append(NotificationChannel(id=f"chan-{chat_id}", chat_id=chat_id))


@given(parsers.cfparse('a chat "{chat_id}" that does not receive orders'))
def unpermitted_chat(channels, chat_id):
    channels.append(
        NotificationChannel(id=f"chan-{chat_id}", chat_id=chat_id, permissions=ChannelPermissions(orders=False))
    )


@given(parsers.cfparse('a disabled chat "{chat_id}"'))
def disabled_chat(channels, chat_id):
    channels.append(NotificationChannel(id=f"chan-{chat_id}", chat_id=chat_id, enabled=False))


@given(parsers.cfparse('chat "{chat_id}" rejects messages'))
def failing_chat(fake_transport, chat_id):
    fake_transport.fail_chat(chat_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the notification is delivered")
def delivered(outcome):
    assert outcome is True


@then("the notification is not delivered")
def not_delivered(outcome):
    assert outcome is False


@then(parsers.cfparse("the message reaches {count:d} chat"))
@then(parsers.cfparse("the message reaches {count:d} chats"))
def reaches(fake_transport, count):
    assert len({m["chat_id"] for m in fake_transport.sent_messages}) == count


@then(parsers.cfparse('chat "{chat_id}" receives nothing'))
def receives_nothing(fake_transport, chat_id):
    assert fake_transport.messages_for(chat_id) == []
