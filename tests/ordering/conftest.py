from decimal import Decimal

import pytest
from notifications.channel.channel import ChannelPermissions, NotificationChannel
from notifications.notification.dispatch import BackgroundNotifier
from ordering.cart.coupons import DiscountType
from ordering.order.creation import CheckoutService
from ordering.order.order import Order
from ordering.order.status import OrderStatusService
from protean.utils.globals import current_domain
from shared.settings import InMemorySettingsProvider, StoreSettings


@pytest.fixture()
def store_settings(make_discount):
    return StoreSettings(
        delivery_fee=Decimal("10"),
        discount_codes=(
            make_discount("SAVE10", DiscountType.PERCENTAGE, "10", max_discount=Decimal("15")),
            make_discount("MIN100", DiscountType.FIXED, "20", min_purchase=Decimal("100")),
            make_discount("ONCE", DiscountType.FIXED, "5", usage_limit=1),
        ),
        notification_channels=(
            NotificationChannel(id="c1", chat_id="1001", name="Owner"),
            NotificationChannel(
                id="c2",
                chat_id="1002",
                name="Kitchen",
                permissions=ChannelPermissions(orders=True, order_status=False),
            ),
        ),
        bot_token="123:abc",
        notifications_enabled=True,
    )


@pytest.fixture()
def settings_provider(store_settings):
    return InMemorySettingsProvider(store_settings)


@pytest.fixture()
def repository():
    return current_domain.repository_for(Order)


@pytest.fixture()
def background():
    return BackgroundNotifier()


@pytest.fixture()
def checkout(settings_provider, notifier, background, config):
    return CheckoutService(settings_provider, notifier, background, config)


@pytest.fixture()
def order_status(notifier, background):
    return OrderStatusService(notifier, background)
