from pydantic import BaseModel, ConfigDict
from typing import Literal


DonationType = Literal["One-Time", "Monthly"]

CHECKOUT_COMPLETED = "checkout.session.completed"

class CompletedCheckout(BaseModel):
    """The fields we read from a completed Stripe Checkout Session object."""

    model_config = ConfigDict(extra="ignore")

    customer_email: str | None = None
    amount_total: int | None = None
    mode: str | None = None
    customer: str | None = None

    @property
    def donation_type(self) -> DonationType:
        return "Monthly" if self.mode == "subscription" else "One-Time"

class DonationNotification(BaseModel):
    email: str
    amount_cents: int
    donation_type: DonationType
    customer_id: str | None = None


def format_usd(amount_cents: int) -> str:
    return f"{(amount_cents / 100):.2f}"
