"""
Outbound email model handed to the email sender.
"""

from pydantic import BaseModel, Field
from typing import Optional


class OutboundEmail(BaseModel):
    """A single transactional email"""
    from_address: str = Field(..., description="Sender, e.g. 'Insight RTLS <noreply@mg.example.com>'")
    to: str
    subject: str
    html: str
    reply_to: Optional[str] = None  # Sent as the h:Reply-To header
