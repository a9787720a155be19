import pytest
from notifications.notification.dispatch import NotificationDispatcher


@pytest.fixture()
def dispatcher():
    return NotificationDispatcher(timeout=0.5)
