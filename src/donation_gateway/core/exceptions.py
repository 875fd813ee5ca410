class DonationGatewayError(Exception):
    """Base error; `status_code` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DonationGatewayError):
    """A caller-supplied field is missing or unusable."""

    status_code = 400


class InvalidDonationAmountError(ValidationError):
    """The amount has no recurring price configured."""

    # The subscription endpoint has always answered 500 for unknown tiers
    status_code = 500


class UpstreamError(DonationGatewayError):
    """Stripe rejected a call. The message is Stripe's, passed through as-is."""

    status_code = 500


class SignatureError(DonationGatewayError):
    """A webhook payload could not be verified against the signing secret."""

    status_code = 400


class MailError(DonationGatewayError):
    """The SMTP provider refused a message or the connection."""

    status_code = 500
