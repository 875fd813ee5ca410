"""
Pytest configuration and shared fixtures.
"""

import os

# The app module builds a default app from the environment at import time
os.environ.setdefault("SMTP_VERIFY_ON_STARTUP", "false")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_123")
os.environ.setdefault("CLIENT_URL", "https://donate.example.org")

import pytest
from fastapi.testclient import TestClient

from donation_gateway.api.main import create_app
from donation_gateway.core.config import Settings
from donation_gateway.core.dependencies import (
    get_checkout_service,
    get_notification_service,
    get_portal_service,
    get_webhook_service,
)
from donation_gateway.core.exceptions import MailError
from donation_gateway.models.price_catalog import PriceCatalog
from donation_gateway.services.checkout_service import CheckoutService
from donation_gateway.services.notification_service import NotificationService
from donation_gateway.services.portal_service import PortalService
from donation_gateway.services.webhook_service import WebhookService


CLIENT_URL = "https://donate.example.org"
ADMIN_EMAIL = "admin@example.org"


class FakeTransport:
    """In-memory stand-in for SmtpTransport that records every message."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to, subject, html):
        if to in self.fail_for:
            raise MailError(f"Failed to send '{subject}' to {to}: 550 rejected")
        self.sent.append({"to": to, "subject": subject, "html": html})

    def verify(self):
        return None


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        STRIPE_SECRET_KEY="sk_test_123",
        STRIPE_WEBHOOK_SECRET="whsec_test_123",
        PRICE_ID_5="price_5",
        PRICE_ID_25="price_25",
        PRICE_ID_50="price_50",
        PRICE_ID_92="price_92",
        EMAIL_USERNAME="donations@example.org",
        EMAIL_PASSWORD="app-password",
        ADMIN_EMAIL=ADMIN_EMAIL,
        CLIENT_URL=CLIENT_URL,
        SMTP_VERIFY_ON_STARTUP=False,
    )


@pytest.fixture
def price_catalog(settings):
    return PriceCatalog.from_settings(settings)


@pytest.fixture
def checkout_service(settings, price_catalog):
    return CheckoutService(
        stripe_api_key=settings.STRIPE_SECRET_KEY,
        client_url=settings.CLIENT_URL,
        price_catalog=price_catalog,
    )


@pytest.fixture
def portal_service(settings):
    return PortalService(
        stripe_api_key=settings.STRIPE_SECRET_KEY,
        client_url=settings.CLIENT_URL,
    )


@pytest.fixture
def webhook_service(settings):
    return WebhookService(
        stripe_api_key=settings.STRIPE_SECRET_KEY,
        stripe_webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
    )


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def notification_service(settings, transport, portal_service):
    return NotificationService(
        transport=transport,
        portal_service=portal_service,
        admin_email=settings.ADMIN_EMAIL,
        site_name=settings.SITE_NAME,
    )


@pytest.fixture
def app(settings, checkout_service, portal_service, webhook_service, notification_service):
    app = create_app(settings)
    app.dependency_overrides[get_checkout_service] = lambda: checkout_service
    app.dependency_overrides[get_portal_service] = lambda: portal_service
    app.dependency_overrides[get_webhook_service] = lambda: webhook_service
    app.dependency_overrides[get_notification_service] = lambda: notification_service
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def completed_checkout_event(**session_fields):
    session = {
        "id": "cs_test_123",
        "object": "checkout.session",
        "customer_email": "donor@example.com",
        "amount_total": 2500,
        "mode": "payment",
        "customer": None,
    }
    session.update(session_fields)
    return {
        "id": "evt_test_123",
        "object": "event",
        "type": "checkout.session.completed",
        "data": {"object": session},
    }
