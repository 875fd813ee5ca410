import stripe
import logging

from donation_gateway.core.exceptions import (
    InvalidDonationAmountError,
    UpstreamError,
    ValidationError,
)
from donation_gateway.models.donation import format_usd
from donation_gateway.models.price_catalog import PriceCatalog

logger = logging.getLogger(__name__)

CURRENCY = "usd"

class CheckoutService:
    def __init__(
        self,
        stripe_api_key: str,
        client_url: str,
        price_catalog: PriceCatalog
    ):
        self.stripe_api_key = stripe_api_key
        self.client_url = client_url.rstrip("/")
        self.price_catalog = price_catalog

    @property
    def success_url(self) -> str:
        return f"{self.client_url}/donation-success"

    @property
    def cancel_url(self) -> str:
        return f"{self.client_url}/donate"

    def create_one_time_session(self, amount: int, email: str | None, name: str | None = None) -> str:
        if not email:
            raise ValidationError("Email is required")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("Amount must be a positive integer number of cents")

        try:
            session = stripe.checkout.Session.create(
                api_key=self.stripe_api_key,
                payment_method_types=["card"],
                mode="payment",
                customer_email=email,
                line_items=[{
                    "price_data": {
                        "currency": CURRENCY,
                        "product_data": {
                            "name": f"One-Time Donation - ${format_usd(amount)}"
                        },
                        "unit_amount": amount,
                    },
                    "quantity": 1,
                }],
                success_url=self.success_url,
                cancel_url=self.cancel_url,
            )
            return session.url
        except stripe.StripeError as e:
            logger.error(f"One-time donation error: {e}")
            raise UpstreamError(e.user_message or str(e)) from e

    def create_subscription_session(self, amount: int, email: str | None, name: str | None = None) -> str:
        if not email:
            raise ValidationError("Email is required")

        price_id = self.price_catalog.price_for(amount)
        if not price_id:
            logger.error(f"Subscription error: no price configured for amount {amount!r}")
            raise InvalidDonationAmountError("Invalid donation amount")

        try:
            # A new customer per request; Stripe may end up with duplicates per email
            customer = stripe.Customer.create(
                api_key=self.stripe_api_key,
                email=email,
                name=name,
            )

            session = stripe.checkout.Session.create(
                api_key=self.stripe_api_key,
                mode="subscription",
                customer=customer.id,
                payment_method_types=["card"],
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=f"{self.success_url}?subscribed=true&customerId={customer.id}",
                cancel_url=self.cancel_url,
            )
            return session.url
        except stripe.StripeError as e:
            logger.error(f"Subscription error: {e}")
            raise UpstreamError(e.user_message or str(e)) from e
