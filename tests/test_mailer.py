"""Unit tests for the Mailgun sender."""

import base64
from urllib.parse import parse_qs

import httpx
import pytest

from conftest import make_settings
from insight_backend.core.mailer import (
    EmailConfigurationError,
    EmailDeliveryError,
    MailgunSender,
)
from insight_backend.models.email import OutboundEmail

EMAIL = OutboundEmail(
    from_address="Insight RTLS <noreply@mg.example.com>",
    to="team@example.com",
    subject="New contact from Jo",
    html="<p>Hi</p>",
    reply_to="jo@x.com",
)


def make_sender(handler, **kwargs):
    return MailgunSender(
        api_key="key-test",
        domain="mg.example.com",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_send_posts_form_to_messages_endpoint():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json={"id": "<abc@mg.example.com>", "message": "Queued. Thank you."})

    result = await make_sender(handler).send(EMAIL)

    request = captured["request"]
    assert request.method == "POST"
    assert str(request.url) == "https://api.mailgun.net/v3/mg.example.com/messages"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert request.headers["authorization"] == "Basic " + base64.b64encode(b"api:key-test").decode()

    form = parse_qs(request.content.decode())
    assert form["from"] == ["Insight RTLS <noreply@mg.example.com>"]
    assert form["to"] == ["team@example.com"]
    assert form["subject"] == ["New contact from Jo"]
    assert form["html"] == ["<p>Hi</p>"]
    assert form["h:Reply-To"] == ["jo@x.com"]
    assert result["id"] == "<abc@mg.example.com>"


@pytest.mark.asyncio
async def test_send_without_reply_to_omits_header():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"id": "<1>", "message": "Queued. Thank you."})

    await make_sender(handler).send(EMAIL.model_copy(update={"reply_to": None}))

    assert "h:Reply-To" not in captured["form"]


@pytest.mark.asyncio
async def test_eu_api_base():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        return httpx.Response(200, json={"id": "<1>"})

    await make_sender(handler, api_base="https://api.eu.mailgun.net/v3/").send(EMAIL)

    assert captured["url"] == "https://api.eu.mailgun.net/v3/mg.example.com/messages"


@pytest.mark.asyncio
async def test_provider_rejection_raises_delivery_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="Forbidden")

    with pytest.raises(EmailDeliveryError) as exc_info:
        await make_sender(handler).send(EMAIL)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Forbidden"


@pytest.mark.asyncio
async def test_transport_error_raises_delivery_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(EmailDeliveryError):
        await make_sender(handler).send(EMAIL)


@pytest.mark.asyncio
async def test_non_json_response_raises_delivery_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(EmailDeliveryError):
        await make_sender(handler).send(EMAIL)


@pytest.mark.asyncio
async def test_unconfigured_sender_never_calls_network():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    sender = MailgunSender(api_key=None, domain="mg.example.com", transport=httpx.MockTransport(handler))

    assert sender.is_configured() is False
    with pytest.raises(EmailConfigurationError):
        await sender.send(EMAIL)
    assert calls == []


@pytest.mark.parametrize(
    "api_key, domain, expected",
    [
        ("key-test", "mg.example.com", True),
        (None, "mg.example.com", False),
        ("key-test", None, False),
        ("", "", False),
    ],
)
def test_is_configured(api_key, domain, expected):
    assert MailgunSender(api_key=api_key, domain=domain).is_configured() is expected


@pytest.mark.asyncio
async def test_configured_timeout_reaches_request():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["timeout"] = request.extensions["timeout"]
        return httpx.Response(200, json={"id": "<1>"})

    await make_sender(handler, timeout=3.5).send(EMAIL)

    assert captured["timeout"] == {"connect": 3.5, "read": 3.5, "write": 3.5, "pool": 3.5}


def test_from_settings_uses_timeout_and_base():
    settings = make_settings(mail_timeout=3.5, mailgun_api_base="https://api.eu.mailgun.net/v3")
    sender = MailgunSender.from_settings(settings)

    assert sender.timeout == 3.5
    assert sender.messages_url == "https://api.eu.mailgun.net/v3/mg.example.com/messages"
