import stripe
import logging

from donation_gateway.core.exceptions import SignatureError
from donation_gateway.models.donation import (
    CHECKOUT_COMPLETED,
    CompletedCheckout,
    DonationNotification,
)

logger = logging.getLogger(__name__)


def _as_dict(stripe_object) -> dict:
    if hasattr(stripe_object, "to_dict"):
        return stripe_object.to_dict()
    return dict(stripe_object)


class WebhookService:
    """
    Verifies Stripe webhook deliveries and turns completed checkouts into
    donation notifications.

    Verification fails closed: an event that does not verify is never looked
    at. Stripe's own redelivery policy covers anything we reject.
    """

    def __init__(self, stripe_api_key: str, stripe_webhook_secret: str):
        self.stripe_api_key = stripe_api_key
        self.stripe_webhook_secret = stripe_webhook_secret

    def verify_event(self, payload: bytes, signature_header: str | None):
        if not signature_header:
            logger.warning("Webhook error: missing stripe-signature header")
            raise SignatureError("Webhook Error: Missing stripe-signature header")

        try:
            return stripe.Webhook.construct_event(
                payload=payload,
                sig_header=signature_header,
                secret=self.stripe_webhook_secret
            )
        except ValueError as e:
            logger.warning(f"Webhook error: Invalid payload - {e}")
            raise SignatureError(f"Webhook Error: {e}") from e
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Webhook error: Invalid signature - {e}")
            raise SignatureError(f"Webhook Error: {e.user_message or e}") from e

    def build_notification(self, event) -> DonationNotification | None:
        """
        Returns the emails to send for a verified event, or None when there is
        nothing to send (other event types, or no resolvable donor email).
        """
        if event["type"] != CHECKOUT_COMPLETED:
            logger.info(f"Ignoring webhook event type: {event['type']}")
            return None

        checkout = CompletedCheckout.model_validate(_as_dict(event["data"]["object"]))

        email = checkout.customer_email
        if not email and checkout.customer:
            email = self._lookup_customer_email(checkout.customer)

        if not email:
            logger.error(f"Email missing after customer lookup (customer={checkout.customer}).")
            return None

        return DonationNotification(
            email=email,
            amount_cents=checkout.amount_total or 0,
            donation_type=checkout.donation_type,
            customer_id=checkout.customer,
        )

    def _lookup_customer_email(self, customer_id: str) -> str | None:
        try:
            customer = stripe.Customer.retrieve(customer_id, api_key=self.stripe_api_key)
        except stripe.StripeError as e:
            logger.error(f"Failed to retrieve customer email for {customer_id}: {e}")
            return None
        return getattr(customer, "email", None)
