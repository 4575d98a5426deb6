"""Tests for the Resend email service."""

import json

import httpx
import pytest

from src.config import get_settings
from src.services.email_service import EmailService


@pytest.fixture
def settings():
    return get_settings().model_copy(
        update={"resend_api_key": "re_test_key", "resend_api_url": "https://resend.test"}
    )


def _service(settings, handler) -> EmailService:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return EmailService(settings, client=client)


def test_send_posts_message_to_resend(settings):
    """Test that a successful send posts the message and returns True."""
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "email_123"})

    service = _service(settings, handler)
    sent = service.send("Tracker <r@example.com>", "a@example.com", "Hi", "<p>Hi</p>")

    assert sent is True
    assert captured["url"] == "https://resend.test/emails"
    assert captured["auth"] == "Bearer re_test_key"
    assert captured["body"] == {
        "from": "Tracker <r@example.com>",
        "to": ["a@example.com"],
        "subject": "Hi",
        "html": "<p>Hi</p>",
    }


def test_provider_error_returns_false(settings):
    """Test that an HTTP error from the provider is reported, not raised."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "internal"})

    assert _service(settings, handler).send("f", "t@example.com", "s", "h") is False


def test_timeout_returns_false(settings):
    """Test that a timed out send is a failure for that message only."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    assert _service(settings, handler).send("f", "t@example.com", "s", "h") is False


def test_connection_error_returns_false(settings):
    """Test that an unreachable provider is reported, not raised."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    assert _service(settings, handler).send("f", "t@example.com", "s", "h") is False


def test_unconfigured_service_does_not_send():
    """Test that without an API key nothing is sent."""
    settings = get_settings().model_copy(update={"resend_api_key": None})

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("should not be called")

    service = _service(settings, handler)

    assert service.is_configured is False
    assert service.send("f", "t@example.com", "s", "h") is False


def test_timeout_comes_from_settings(settings):
    """Test that the per-send timeout is configurable."""
    service = EmailService(settings.model_copy(update={"email_send_timeout_seconds": 2.5}))
    assert service.timeout == 2.5
