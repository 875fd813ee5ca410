from functools import lru_cache

from donation_gateway.core.config import Settings, get_settings
from donation_gateway.models.price_catalog import PriceCatalog
from donation_gateway.services.checkout_service import CheckoutService
from donation_gateway.services.notification_service import NotificationService, SmtpTransport
from donation_gateway.services.portal_service import PortalService
from donation_gateway.services.webhook_service import WebhookService

# Each provider builds its object once per process. Routes receive them through
# FastAPI's Depends, so tests replace them with app.dependency_overrides.

@lru_cache()
def get_price_catalog() -> PriceCatalog:
    return PriceCatalog.from_settings(get_settings())

def build_smtp_transport(settings: Settings) -> SmtpTransport:
    return SmtpTransport(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.EMAIL_USERNAME,
        password=settings.EMAIL_PASSWORD,
        from_name=settings.MAIL_FROM_NAME
    )

@lru_cache()
def get_smtp_transport() -> SmtpTransport:
    return build_smtp_transport(get_settings())

@lru_cache()
def get_portal_service() -> PortalService:
    settings = get_settings()
    return PortalService(
        stripe_api_key=settings.STRIPE_SECRET_KEY,
        client_url=settings.CLIENT_URL
    )

@lru_cache()
def get_checkout_service() -> CheckoutService:
    settings = get_settings()
    return CheckoutService(
        stripe_api_key=settings.STRIPE_SECRET_KEY,
        client_url=settings.CLIENT_URL,
        price_catalog=get_price_catalog()
    )

@lru_cache()
def get_webhook_service() -> WebhookService:
    settings = get_settings()
    return WebhookService(
        stripe_api_key=settings.STRIPE_SECRET_KEY,
        stripe_webhook_secret=settings.STRIPE_WEBHOOK_SECRET
    )

@lru_cache()
def get_notification_service() -> NotificationService:
    settings = get_settings()
    return NotificationService(
        transport=get_smtp_transport(),
        portal_service=get_portal_service(),
        admin_email=settings.ADMIN_EMAIL,
        site_name=settings.SITE_NAME
    )
