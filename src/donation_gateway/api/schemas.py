from pydantic import BaseModel, Field
from typing import Any, Optional

class DonationCheckoutRequest(BaseModel):
    # Loosely typed so the services decide what a usable amount or email is
    amount: Optional[Any] = None
    email: Optional[str] = None
    name: Optional[str] = None

class PortalSessionRequest(BaseModel):
    customer_id: Optional[str] = Field(default=None, alias="customerId")

class SessionUrlResponse(BaseModel):
    url: str

class WebhookAck(BaseModel):
    received: bool = True

class ErrorResponse(BaseModel):
    error: str
