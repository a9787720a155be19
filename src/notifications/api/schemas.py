"""Pydantic request/response models for the Notifications API."""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class SendTestMessageRequest(BaseModel):
    chat_id: str | None = Field(
        default=None,
        description="Chat to send to; defaults to the first enabled chat",
    )


class LowStockRequest(BaseModel):
    product_id: str
    product_name: str


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class DeliveryResponse(BaseModel):
    delivered: bool


class AcceptedResponse(BaseModel):
    status: str = "accepted"


class BotProfileResponse(BaseModel):
    id: int
    username: str | None = None
    first_name: str = ""
    is_bot: bool = True
