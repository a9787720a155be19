"""FastAPI routes for the Notifications domain.

Customer-facing submissions (messages, contact requests, reviews) only
schedule the operator notification and answer 202 at once; delivery results
are logged. The admin endpoints (test-send, bot profile) wait for the result
so the operator sees it.
"""

from fastapi import APIRouter, Depends, HTTPException

from notifications.api.schemas import (
    AcceptedResponse,
    BotProfileResponse,
    DeliveryResponse,
    LowStockRequest,
    SendTestMessageRequest,
)
from notifications.notification.submissions import CustomerMessage, ReviewSubmission
from shared.services import Services, get_services

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/test", response_model=DeliveryResponse)
async def send_test_message(
    body: SendTestMessageRequest,
    services: Services = Depends(get_services),
) -> DeliveryResponse:
    delivered = await services.notifier.send_test_message(chat_id=body.chat_id)
    return DeliveryResponse(delivered=delivered)


@router.get("/bot", response_model=BotProfileResponse)
async def get_bot_profile(services: Services = Depends(get_services)) -> BotProfileResponse:
    profile = await services.notifier.bot_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="No bot token configured")
    return BotProfileResponse.model_validate(profile)


@router.post("/messages", status_code=202, response_model=AcceptedResponse)
async def notify_new_message(
    body: CustomerMessage,
    services: Services = Depends(get_services),
) -> AcceptedResponse:
    services.background.schedule(services.notifier.notify_new_message(body), description="new-message")
    return AcceptedResponse()


@router.post("/contact", status_code=202, response_model=AcceptedResponse)
async def notify_contact(
    body: CustomerMessage,
    services: Services = Depends(get_services),
) -> AcceptedResponse:
    services.background.schedule(services.notifier.notify_contact(body), description="contact")
    return AcceptedResponse()


@router.post("/reviews", status_code=202, response_model=AcceptedResponse)
async def notify_new_review(
    body: ReviewSubmission,
    services: Services = Depends(get_services),
) -> AcceptedResponse:
    services.background.schedule(services.notifier.notify_new_review(body), description="new-review")
    return AcceptedResponse()


@router.post("/low-stock", status_code=202, response_model=AcceptedResponse)
async def notify_low_stock(
    body: LowStockRequest,
    services: Services = Depends(get_services),
) -> AcceptedResponse:
    services.background.schedule(
        services.notifier.notify_low_stock(body.product_id, body.product_name),
        description=f"low-stock:{body.product_id}",
    )
    return AcceptedResponse()
