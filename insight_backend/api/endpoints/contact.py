"""
Contact form endpoint.

Accepts JSON or form-encoded submissions, sends a confirmation to the
submitter and a notification to CONTACT_EMAIL. Provider errors are logged
here and never returned to the caller.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict
import logging

from insight_backend.core.config import Settings, get_settings
from insight_backend.core.contact_service import ContactRequestError, SERVER_ERROR, process_contact
from insight_backend.core.mailer import EmailDeliveryError, MailgunSender, get_email_sender
from insight_backend.models.contact import ContactResponse

router = APIRouter()
logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_submission_body(request: Request) -> Dict[str, Any]:
    """
    Parse the request body as a form or JSON object.

    Returns:
        dict: Submitted fields, empty if the body is missing or unreadable
    """
    content_type = request.headers.get("content-type", "")

    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            return {key: value for key, value in form.items() if isinstance(value, str)}

        body = await request.body()
        if not body:
            return {}
        data = await request.json()
    except Exception as e:
        logger.warning(f"Unreadable contact form body ({content_type or 'no content-type'}): {str(e)}")
        return {}

    return data if isinstance(data, dict) else {}


@router.post("/contact", status_code=status.HTTP_200_OK, response_model=ContactResponse, response_model_exclude_none=True)
async def submit_contact(
    request: Request,
    sender: MailgunSender = Depends(get_email_sender),
    settings: Settings = Depends(get_settings),
):
    """
    Handle a contact form submission.

    Returns:
        200 {"success": true} once both emails were accepted by the provider
        400 on missing fields or a malformed email address
        500 on configuration or delivery errors
        503 when the email service is not configured
    """
    try:
        raw = await read_submission_body(request)
        await process_contact(raw, sender, settings)
        return ContactResponse(success=True)

    except ContactRequestError:
        raise
    except EmailDeliveryError as e:
        logger.error(f"❌ Contact error: {str(e)} (status={e.status_code}) {e.detail}")
    except Exception as e:
        logger.exception(f"❌ Contact error: {str(e)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ContactResponse(success=False, message=SERVER_ERROR).model_dump(),
    )
