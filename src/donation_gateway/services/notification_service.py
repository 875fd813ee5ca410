import smtplib
import logging
from email.message import EmailMessage
from email.utils import formataddr

from donation_gateway.core.exceptions import MailError
from donation_gateway.models.donation import DonationType, format_usd
from donation_gateway.services.portal_service import PortalService

logger = logging.getLogger(__name__)

SMTPS_PORT = 465

class SmtpTransport:
    """
    Sends HTML mail through one SMTP account. Every send is its own
    connection, so a single instance can be shared by concurrent requests.
    """

    def __init__(self, host: str, port: int, username: str, password: str, from_name: str):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_name = from_name

    @property
    def sender(self) -> str:
        return formataddr((self.from_name, self.username))

    def _connect(self) -> smtplib.SMTP:
        implicit_tls = self.port == SMTPS_PORT
        if implicit_tls:
            server = smtplib.SMTP_SSL(self.host, self.port)
        else:
            server = smtplib.SMTP(self.host, self.port)

        try:
            if not implicit_tls:
                server.starttls()
            server.login(self.username, self.password)
        except smtplib.SMTPException:
            server.close()
            raise
        return server

    def verify(self) -> None:
        try:
            with self._connect() as server:
                server.noop()
        except (smtplib.SMTPException, OSError) as e:
            raise MailError(f"SMTP verification failed: {e}") from e

    def send(self, to: str, subject: str, html: str) -> None:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.set_content(html, subtype="html")

        try:
            with self._connect() as server:
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailError(f"Failed to send '{subject}' to {to}: {e}") from e


class NotificationService:
    def __init__(
        self,
        transport: SmtpTransport,
        portal_service: PortalService,
        admin_email: str,
        site_name: str
    ):
        self.transport = transport
        self.portal_service = portal_service
        self.admin_email = admin_email
        self.site_name = site_name

    def send_donation_emails(
        self,
        email: str,
        amount_cents: int,
        donation_type: DonationType,
        customer_id: str | None = None
    ) -> None:
        """
        Sends the donor receipt, then the admin notice.

        Monthly donors get a fresh billing-portal link in their receipt. A
        failed receipt raises MailError before the admin notice is tried; a
        failed admin notice is only logged.
        """
        usd = format_usd(amount_cents)
        is_monthly = donation_type == "Monthly"

        portal_url = None
        if is_monthly and customer_id:
            portal_url = self.portal_service.create_portal_session(customer_id)

        self.transport.send(
            to=email,
            subject=f"Your {donation_type} Donation to {self.site_name}",
            html=self._donor_html(donation_type, usd, is_monthly, portal_url),
        )
        logger.info(f"Sent {donation_type} donation receipt to {email}")

        try:
            self.transport.send(
                to=self.admin_email,
                subject=f"New {donation_type} Donation",
                html=f"<p>{donation_type} donation of ${usd} by {email}.</p>",
            )
        except MailError as e:
            logger.error(f"Admin notification failed after donor receipt was sent: {e}")

    @staticmethod
    def _donor_html(donation_type: str, usd: str, is_monthly: bool, portal_url: str | None) -> str:
        parts = [
            "<h2>Thank You!</h2>",
            f"<p>We have received your <strong>{donation_type}</strong> donation "
            f"of <strong>${usd}</strong>.</p>",
        ]
        if is_monthly:
            parts.append("<p>This amount will be deducted monthly.</p>")
        if portal_url:
            parts.append(
                "<p>You can manage or cancel your subscription here: "
                f'<a href="{portal_url}">Manage Subscription</a></p>'
            )
        parts.append("<p>May Allah reward you for your support!</p>")
        return "\n".join(parts)
