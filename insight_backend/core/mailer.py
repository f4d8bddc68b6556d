"""
Email sender module for transactional emails via the Mailgun HTTP API.

The sender is resolved once per process (see get_email_sender) and injected
into the endpoints that need it. When MAILGUN_API_KEY or MAILGUN_DOMAIN is
missing the sender stays in an unconfigured state: is_configured() returns
False and send() refuses to touch the network.
"""

import httpx
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from insight_backend.core.config import Settings, get_settings, DEFAULT_MAILGUN_API_BASE
from insight_backend.models.email import OutboundEmail

logger = logging.getLogger(__name__)


class EmailSenderError(Exception):
    """Base class for email sender failures"""


class EmailConfigurationError(EmailSenderError):
    """Raised when sending is attempted without provider credentials or domain"""


class EmailDeliveryError(EmailSenderError):
    """Raised when the provider rejects a message or cannot be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class MailgunSender:
    """
    Sends messages through Mailgun's /messages endpoint.

    Args:
        api_key: Mailgun private API key
        domain: Mailgun sending domain
        api_base: API base URL (EU accounts use https://api.eu.mailgun.net/v3)
        timeout: Request timeout in seconds
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        api_key: Optional[str],
        domain: Optional[str],
        api_base: str = DEFAULT_MAILGUN_API_BASE,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.domain = domain
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "MailgunSender":
        return cls(
            api_key=settings.mailgun_api_key,
            domain=settings.mailgun_domain,
            api_base=settings.mailgun_api_base,
            timeout=settings.mail_timeout,
            **kwargs,
        )

    def is_configured(self) -> bool:
        return bool(self.api_key and self.domain)

    @property
    def messages_url(self) -> str:
        return f"{self.api_base}/{self.domain}/messages"

    async def send(self, email: OutboundEmail) -> Dict[str, Any]:
        """
        Submit one message to Mailgun.

        Returns:
            dict: Mailgun response body, e.g. {"id": "<...>", "message": "Queued. Thank you."}

        Raises:
            EmailConfigurationError: if the sender is not configured
            EmailDeliveryError: on transport errors, non-2xx responses or unreadable bodies
        """
        if not self.is_configured():
            raise EmailConfigurationError("Mailgun config missing (MAILGUN_DOMAIN or MAILGUN_API_KEY).")

        data = {
            "from": email.from_address,
            "to": email.to,
            "subject": email.subject,
            "html": email.html,
        }
        if email.reply_to:
            data["h:Reply-To"] = email.reply_to

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(
                    self.messages_url,
                    data=data,
                    auth=("api", self.api_key),
                )
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Mailgun request failed: {e.__class__.__name__}: {e}") from e

        if not response.is_success:
            raise EmailDeliveryError(
                f"Mailgun API error: {response.status_code}",
                status_code=response.status_code,
                detail=response.text,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise EmailDeliveryError(
                "Mailgun returned a non-JSON response",
                status_code=response.status_code,
                detail=response.text,
            ) from e

        if not isinstance(result, dict):
            raise EmailDeliveryError(
                "Mailgun returned an unexpected response",
                status_code=response.status_code,
                detail=result,
            )

        logger.debug(f"Mailgun accepted message to {email.to}: {result.get('id')}")
        return result


@lru_cache
def get_email_sender() -> MailgunSender:
    """Returns the process-wide email sender"""
    sender = MailgunSender.from_settings(get_settings())
    if not sender.is_configured():
        logger.warning(
            "⚠️ MAILGUN_API_KEY or MAILGUN_DOMAIN not set - email sending is disabled. "
            "Copy .env.example to .env and fill MAILGUN_API_KEY and MAILGUN_DOMAIN to enable Mailgun."
        )
    return sender
