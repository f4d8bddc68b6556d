from pydantic import BaseModel
from typing import Optional


class ContactSubmission(BaseModel):
    """A validated contact form payload. Never persisted."""
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    message: str


class ContactResponse(BaseModel):
    success: bool
    message: Optional[str] = None
