"""Integration tests for the Notifications API endpoints."""

import pytest
from app import create_app
from fastapi.testclient import TestClient
from notifications.channel.channel import ChannelPermissions, NotificationChannel
from shared.services import build_services
from shared.settings import InMemorySettingsProvider, StoreSettings


@pytest.fixture()
def settings_provider():
    return InMemorySettingsProvider(
        StoreSettings(
            notification_channels=(
                NotificationChannel(id="c1", chat_id="1001"),
                NotificationChannel(
                    id="c2",
                    chat_id="1002",
                    permissions=ChannelPermissions(messages=False, contact=False),
                ),
            ),
            bot_token="123:abc",
            notifications_enabled=True,
        )
    )


@pytest.fixture()
def app(config, settings_provider, notifier):
    return create_app(build_services(config=config, settings_provider=settings_provider, notifier=notifier))


class TestSendTestMessage:
    def test_send_to_explicit_chat(self, app, fake_transport):
        with TestClient(app) as client:
            response = client.post("/notifications/test", json={"chat_id": "1002"})

        assert response.status_code == 200
        assert response.json() == {"delivered": True}
        assert fake_transport.attempts == ["1002"]

    def test_send_to_default_chat(self, app, fake_transport):
        with TestClient(app) as client:
            response = client.post("/notifications/test", json={})

        assert response.json() == {"delivered": True}
        assert fake_transport.attempts == ["1001"]

    def test_failed_delivery(self, app, fake_transport):
        fake_transport.configure(should_succeed=False, failure_reason="Bad Request: chat not found")
        with TestClient(app) as client:
            response = client.post("/notifications/test", json={"chat_id": "999"})

        assert response.status_code == 200
        assert response.json() == {"delivered": False}


class TestBotProfile:
    def test_returns_profile(self, app):
        with TestClient(app) as client:
            response = client.get("/notifications/bot")

        assert response.status_code == 200
        assert response.json() == {"id": 1, "username": "storefront_bot", "first_name": "Storefront", "is_bot": True}

    def test_rejected_token_is_bad_gateway(self, app, fake_transport):
        fake_transport.configure(should_succeed=False, failure_reason="Unauthorized")
        with TestClient(app) as client:
            response = client.get("/notifications/bot")

        assert response.status_code == 502
        assert response.json() == {"error": "Unauthorized"}

    def test_without_token(self, app, settings_provider):
        settings_provider.replace(settings_provider.get().model_copy(update={"bot_token": ""}))
        with TestClient(app) as client:
            response = client.get("/notifications/bot")

        assert response.status_code == 404


class TestSubmissions:
    def test_message_is_accepted_and_delivered(self, app, fake_transport):
        with TestClient(app) as client:
            response = client.post(
                "/notifications/messages",
                json={"name": "Omar", "email": "omar@example.com", "message": "Do you ship?"},
            )

        assert response.status_code == 202
        assert response.json() == {"status": "accepted"}
        assert fake_transport.attempts == ["1001"]

    def test_contact(self, app, fake_transport):
        with TestClient(app) as client:
            response = client.post("/notifications/contact", json={"name": "Omar", "message": "Call me"})

        assert response.status_code == 202
        assert fake_transport.attempts == ["1001"]

    def test_review_goes_to_both_chats(self, app, fake_transport):
        with TestClient(app) as client:
            response = client.post(
                "/notifications/reviews",
                json={"product_name": "Truffles", "user_name": "Lina", "rating": 5, "comment": "Lovely"},
            )

        assert response.status_code == 202
        assert sorted(fake_transport.attempts) == ["1001", "1002"]

    def test_invalid_rating_rejected(self, app, fake_transport):
        with TestClient(app) as client:
            response = client.post(
                "/notifications/reviews",
                json={"product_name": "Truffles", "user_name": "Lina", "rating": 6},
            )

        assert response.status_code == 422
        assert fake_transport.attempts == []

    def test_low_stock(self, app, fake_transport):
        with TestClient(app) as client:
            response = client.post("/notifications/low-stock", json={"product_id": "prod-001", "product_name": "Truffles"})

        assert response.status_code == 202
        assert "prod-001" in fake_transport.sent_messages[0]["text"]

    def test_delivery_failure_still_accepted(self, app, fake_transport):
        fake_transport.configure(should_succeed=False)
        with TestClient(app) as client:
            response = client.post("/notifications/messages", json={"name": "Omar", "message": "Hello"})
        assert response.status_code == 202
