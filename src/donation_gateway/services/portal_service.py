import stripe
import logging

from donation_gateway.core.exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

class PortalService:
    def __init__(self, stripe_api_key: str, client_url: str):
        self.stripe_api_key = stripe_api_key
        self.return_url = f"{client_url.rstrip('/')}/donation-success"

    def create_portal_session(self, customer_id: str | None) -> str:
        """Returns a Stripe billing-portal URL where the customer manages their subscription."""
        if not customer_id:
            raise ValidationError("Customer ID required")

        try:
            portal_session = stripe.billing_portal.Session.create(
                api_key=self.stripe_api_key,
                customer=customer_id,
                return_url=self.return_url,
            )
            return portal_session.url
        except stripe.StripeError as e:
            logger.error(f"Customer portal error: {e}")
            raise UpstreamError(e.user_message or str(e)) from e
