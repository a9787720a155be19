"""Telegram Bot API adapter.

Delivers messages with ``sendMessage``. A send counts as successful only when
the HTTP status is 2xx and the response body carries ``"ok": true``.
"""

import httpx
import structlog

from notifications.channel.port import DeliveryResult, MessagingPort
from shared.exceptions import NotificationDeliveryError

logger = structlog.get_logger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"


class TelegramAdapter(MessagingPort):
    """Sends operator notifications through a Telegram bot."""

    def __init__(
        self,
        bot_token: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.bot_token = bot_token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._client = client

    def _method_url(self, method: str) -> str:
        return f"{self.api_base}/bot{self.bot_token}/{method}"

    async def _request(self, http_method: str, api_method: str, payload: dict | None = None) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(http_method, self._method_url(api_method), json=payload)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.request(http_method, self._method_url(api_method), json=payload)

    async def send(self, chat_id: str, text: str, parse_mode: str = "HTML") -> DeliveryResult:
        payload = {"chat_id": chat_id, "text": text, "parse_mode": parse_mode}
        try:
            response = await self._request("POST", "sendMessage", payload)
        except httpx.HTTPError as exc:
            return DeliveryResult(success=False, chat_id=chat_id, error=f"{type(exc).__name__}: {exc}")

        body = _json_object(response)
        if response.is_success and body.get("ok") is True:
            result = body.get("result") or {}
            message_id = result.get("message_id") if isinstance(result, dict) else None
            return DeliveryResult(
                success=True,
                chat_id=chat_id,
                message_id=str(message_id) if message_id is not None else None,
            )

        description = body.get("description") or f"HTTP {response.status_code}"
        return DeliveryResult(success=False, chat_id=chat_id, error=description)

    async def get_bot_info(self) -> dict:
        """Return the bot's ``getMe`` profile.

        Raises:
            NotificationDeliveryError: the token was rejected, the API was
                unreachable or it answered without a profile.
        """
        try:
            response = await self._request("GET", "getMe")
        except httpx.HTTPError as exc:
            raise NotificationDeliveryError("-", f"Bot API unreachable: {exc}") from exc

        body = _json_object(response)
        if not response.is_success or body.get("ok") is not True:
            raise NotificationDeliveryError("-", body.get("description") or f"HTTP {response.status_code}")

        profile = body.get("result")
        if not isinstance(profile, dict):
            raise NotificationDeliveryError("-", "Bot API returned no bot profile")

        logger.debug("Bot profile fetched", username=profile.get("username"))
        return profile


def _json_object(response: httpx.Response) -> dict:
    """The response body as a JSON object; anything else reads as empty."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
