"""Common test fixtures for the contact backend."""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from insight_backend.core.config import Settings, get_settings
from insight_backend.core.mailer import EmailDeliveryError, get_email_sender
from insight_backend.main import app
from insight_backend.models.email import OutboundEmail


class FakeSender:
    """Records sends instead of calling Mailgun."""

    def __init__(self, configured: bool = True, fail_on: Optional[int] = None):
        self.configured = configured
        self.fail_on = fail_on  # 1-based index of the send that should fail
        self.sent: List[OutboundEmail] = []
        self.attempts = 0

    def is_configured(self) -> bool:
        return self.configured

    async def send(self, email: OutboundEmail):
        self.attempts += 1
        if self.fail_on == self.attempts:
            raise EmailDeliveryError("Mailgun API error: 401", status_code=401, detail="Forbidden")
        self.sent.append(email)
        return {"id": f"<{self.attempts}@mg.example.com>", "message": "Queued. Thank you."}


def make_settings(**overrides) -> Settings:
    values = {
        "mailgun_api_key": "key-test",
        "mailgun_domain": "mg.example.com",
        "company_email": None,
        "company_name": "Insight RTLS",
        "contact_email": "team@example.com",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def client(settings, sender):
    """Test client with settings and sender overridden."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_email_sender] = lambda: sender
    yield TestClient(app)
    app.dependency_overrides.clear()
