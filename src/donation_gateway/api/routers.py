from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    Header,
    Request,
)
from starlette.concurrency import run_in_threadpool
from typing import Optional
import logging

from donation_gateway.core.dependencies import (
    get_checkout_service,
    get_notification_service,
    get_portal_service,
    get_webhook_service,
)
from donation_gateway.api.schemas import (
    DonationCheckoutRequest,
    ErrorResponse,
    PortalSessionRequest,
    SessionUrlResponse,
    WebhookAck,
)
from donation_gateway.services.checkout_service import CheckoutService
from donation_gateway.services.notification_service import NotificationService
from donation_gateway.services.portal_service import PortalService
from donation_gateway.services.webhook_service import WebhookService
from donation_gateway.workers.notification_worker import dispatch_donation_emails

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

router = APIRouter(responses=ERROR_RESPONSES)
logger = logging.getLogger(__name__)

# Stripe and SMTP calls block, so the JSON routes are plain `def` and run in
# Starlette's threadpool. DonationGatewayError is rendered by the app handler.

@router.post(
    "/create-checkout-session",
    response_model=SessionUrlResponse
)
def create_checkout_session(
    body: DonationCheckoutRequest,
    checkout_service: CheckoutService = Depends(get_checkout_service)
):
    url = checkout_service.create_one_time_session(
        amount=body.amount,
        email=body.email,
        name=body.name
    )
    return SessionUrlResponse(url=url)


@router.post(
    "/create-subscription-session",
    response_model=SessionUrlResponse
)
def create_subscription_session(
    body: DonationCheckoutRequest,
    checkout_service: CheckoutService = Depends(get_checkout_service)
):
    url = checkout_service.create_subscription_session(
        amount=body.amount,
        email=body.email,
        name=body.name
    )
    return SessionUrlResponse(url=url)


@router.post(
    "/create-customer-portal-session",
    response_model=SessionUrlResponse
)
def create_customer_portal_session(
    body: PortalSessionRequest,
    portal_service: PortalService = Depends(get_portal_service)
):
    url = portal_service.create_portal_session(body.customer_id)
    return SessionUrlResponse(url=url)


@router.post("/webhook", response_model=WebhookAck)
async def handle_stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    stripe_signature: Optional[str] = Header(None),
    webhook_service: WebhookService = Depends(get_webhook_service),
    notification_service: NotificationService = Depends(get_notification_service)
):
    """
    Receives Stripe events on the raw body, verifies them and acknowledges.

    Donation emails go out as a background task after the response, so a
    slow or failing mail provider never causes Stripe to redeliver.
    """
    payload = await request.body()

    event = webhook_service.verify_event(
        payload=payload,
        signature_header=stripe_signature
    )

    notification = await run_in_threadpool(webhook_service.build_notification, event)
    if notification is not None:
        background_tasks.add_task(
            dispatch_donation_emails,
            notification_service,
            notification
        )

    return WebhookAck(received=True)
