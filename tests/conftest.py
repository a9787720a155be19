import os
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture

os.environ.setdefault("STOREFRONT_ENVIRONMENT", "test")
# Domain.init() leaves logging to shared.logging
os.environ.setdefault("PROTEAN_NO_AUTO_LOGGING", "1")

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    """Run every test inside the ordering domain with empty stores."""
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def make_line():
    from ordering.cart.cart import CartLine

    def _make(unit_price="100", quantity=1, discount_percent=None, product_id="prod-001", name="Dark Chocolate Box"):
        return CartLine(
            product_id=product_id,
            name=name,
            image=f"https://img.example.com/{product_id}.jpg",
            unit_price=Decimal(unit_price),
            discount_percent=Decimal(discount_percent) if discount_percent is not None else None,
            quantity=quantity,
        )

    return _make


@pytest.fixture()
def make_discount():
    from ordering.cart.coupons import DiscountCode, DiscountType

    def _make(code="SAVE10", discount_type=DiscountType.PERCENTAGE, discount_value="10", **overrides):
        fields = {
            "id": f"dc-{code.lower()}",
            "code": code,
            "discount_type": discount_type,
            "discount_value": Decimal(discount_value),
            "valid_from": NOW - timedelta(days=30),
            "valid_until": NOW + timedelta(days=30),
        }
        fields.update(overrides)
        return DiscountCode(**fields)

    return _make


@pytest.fixture()
def make_channel():
    from notifications.channel.channel import ChannelPermissions, NotificationChannel

    def _make(chat_id, enabled=True, **permissions):
        return NotificationChannel(
            id=f"chan-{chat_id}",
            chat_id=chat_id,
            name=f"Chat {chat_id}",
            enabled=enabled,
            permissions=ChannelPermissions(**permissions),
        )

    return _make


@pytest.fixture()
def fake_transport():
    from notifications.channel.fake_messaging import FakeMessagingAdapter

    return FakeMessagingAdapter()


@pytest.fixture()
def config():
    from shared.config import Config

    return Config(environment="test", notification_timeout=1.0)


@pytest.fixture()
def notifier(settings_provider, config, fake_transport):
    from notifications.notification.dispatch import NotificationDispatcher
    from notifications.notification.helpers import OperatorNotifier

    return OperatorNotifier(
        settings_provider,
        config,
        dispatcher=NotificationDispatcher(timeout=config.notification_timeout),
        transport_factory=lambda token, cfg: fake_transport,
    )
