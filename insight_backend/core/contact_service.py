"""
Contact form processing: validation, address resolution and email dispatch.

A submission is either rejected before anything is sent, or it triggers two
sends in order - the confirmation to the submitter, then the notification
to CONTACT_EMAIL. If the first send fails the second is never attempted.
"""

import logging
import re
from typing import Any, Dict, Optional

from insight_backend.core.config import Settings
from insight_backend.core.email_templates import render_confirmation_html, render_notification_html
from insight_backend.core.mailer import MailgunSender
from insight_backend.models.contact import ContactSubmission
from insight_backend.models.email import OutboundEmail

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MISSING_FIELDS = "Missing required fields"
INVALID_EMAIL = "Invalid email address"
CONFIGURATION_ERROR = "Email configuration error."
SERVICE_NOT_CONFIGURED = "Email service not configured on server."
SERVER_ERROR = "Server error"


class ContactRequestError(Exception):
    """A rejection that is safe to show to the caller"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _required_text(value: Any) -> str:
    """Required fields must be text; anything else counts as missing"""
    return value if isinstance(value, str) else ""


def validate_submission(raw: Optional[Dict[str, Any]]) -> ContactSubmission:
    """
    Build a ContactSubmission from a parsed request body.

    Name and email are stripped. The message keeps its original whitespace
    so line breaks survive into the rendered bodies.

    Raises:
        ContactRequestError: 400 when a required field is missing or the email is malformed
    """
    raw = raw if isinstance(raw, dict) else {}

    name = _required_text(raw.get("name")).strip()
    email = _required_text(raw.get("email")).strip()
    message = _required_text(raw.get("message"))

    if not name or not email or not message.strip():
        raise ContactRequestError(400, MISSING_FIELDS)

    if not EMAIL_PATTERN.match(email):
        raise ContactRequestError(400, INVALID_EMAIL)

    return ContactSubmission(
        name=name,
        email=email,
        phone=_clean(raw.get("phone")) or None,
        company=_clean(raw.get("company")) or None,
        message=message,
    )


def resolve_from_address(settings: Settings) -> str:
    from_address = settings.effective_from_address
    if "@" not in from_address:
        logger.error("Invalid from address, check COMPANY_EMAIL / MAILGUN_DOMAIN env vars")
        raise ContactRequestError(500, CONFIGURATION_ERROR)
    return from_address


def resolve_notification_recipient(settings: Settings) -> str:
    recipient = _clean(settings.contact_email)
    if "@" not in recipient:
        logger.error("Invalid notification recipient, check CONTACT_EMAIL env var")
        raise ContactRequestError(500, CONFIGURATION_ERROR)
    return recipient


async def process_contact(raw: Optional[Dict[str, Any]], sender: MailgunSender, settings: Settings) -> ContactSubmission:
    """
    Validate a submission and send the confirmation and notification emails.

    Checks run in this order: required fields, email format, sender address,
    sender configured, notification recipient.

    Raises:
        ContactRequestError: for rejections with a public status code and message
        EmailSenderError: when a send fails
    """
    submission = validate_submission(raw)
    from_address = resolve_from_address(settings)

    if not sender.is_configured():
        logger.warning(f"Contact form from {submission.email} rejected: email service not configured")
        raise ContactRequestError(503, SERVICE_NOT_CONFIGURED)

    recipient = resolve_notification_recipient(settings)

    confirmation = OutboundEmail(
        from_address=from_address,
        to=submission.email,
        subject=f"Thanks for contacting {settings.company_name}",
        html=render_confirmation_html(submission, settings.company_name),
    )
    notification = OutboundEmail(
        from_address=from_address,
        to=recipient,
        subject=f"New contact from {submission.name}",
        html=render_notification_html(submission),
        reply_to=submission.email,
    )

    await sender.send(confirmation)
    await sender.send(notification)

    logger.info(f"✅ Contact form submitted: {submission.name} <{submission.email}>")
    return submission
