"""
HTML bodies for the contact form emails.

Every user-supplied value is escaped before it is interpolated, and newlines
in the message become <br> line breaks.
"""

from html import escape

from insight_backend.models.contact import ContactSubmission


def format_multiline(text: str) -> str:
    """Escape text and turn newlines into <br>"""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return escape(normalized).replace("\n", "<br>")


def render_confirmation_html(submission: ContactSubmission, company_name: str = "Insight RTLS") -> str:
    return (
        f"<p>Hi {escape(submission.name)},</p>\n"
        f"<p>Thanks for contacting {escape(company_name)} - we've received your message "
        f"and will respond shortly.</p>\n"
        "<hr>\n"
        "<p><strong>Message:</strong></p>\n"
        f"<p>{format_multiline(submission.message)}</p>\n"
    )


def render_notification_html(submission: ContactSubmission) -> str:
    fields = [("Name", submission.name), ("Email", submission.email)]
    # Optional fields only appear when provided
    if submission.phone:
        fields.append(("Phone", submission.phone))
    if submission.company:
        fields.append(("Company", submission.company))

    items = "\n".join(
        f"  <li><strong>{label}:</strong> {escape(value)}</li>" for label, value in fields
    )
    return (
        "<p>New contact form submission</p>\n"
        f"<ul>\n{items}\n</ul>\n"
        f"<p><strong>Message:</strong><br>{format_multiline(submission.message)}</p>\n"
    )
