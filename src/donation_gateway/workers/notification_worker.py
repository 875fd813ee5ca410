import logging

from donation_gateway.models.donation import DonationNotification
from donation_gateway.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

def dispatch_donation_emails(
    notification_service: NotificationService,
    notification: DonationNotification
) -> bool:
    """
    Background job scheduled after a webhook has been acknowledged.

    Nothing is waiting on the outcome, so this is where failures end up:
    each one is logged exactly once and never re-raised.
    """
    try:
        notification_service.send_donation_emails(
            email=notification.email,
            amount_cents=notification.amount_cents,
            donation_type=notification.donation_type,
            customer_id=notification.customer_id
        )
    except Exception:
        logger.exception(
            f"Email error: {notification.donation_type} donation notification "
            f"for {notification.email} failed"
        )
        return False

    logger.info(f"Email sent for {notification.donation_type} donation by {notification.email}")
    return True
