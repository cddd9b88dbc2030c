from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from parkingslot.application.interfaces import EmailMessage
from parkingslot.domain.users.exceptions import NotificationDispatchError
from parkingslot.infrastructure.email.sendgrid_sender import SendGridEmailSender
from parkingslot.infrastructure.resilience import CircuitBreaker
from parkingslot.shared.config.settings import MailConfig, ResilienceConfig

MESSAGE = EmailMessage(
    to_email="alice@example.com",
    to_name="Alice Tan",
    subject="ParkingSlot Password Reset Link",
    html_body="<a href='http://localhost:8080/resetpassword/1/abc'>reset</a>",
)


def _mail_config(**overrides) -> MailConfig:
    data = {
        "SENDGRID_API_KEY": "SG.unit-test",
        "SENDGRID_API_URL": "https://mail.test/v3/mail/send",
        "MAIL_FROM_EMAIL": "no-reply@parkingslot.test",
        "MAIL_FROM_NAME": "ParkingSlot",
        "MAIL_TIMEOUT": 2.0,
    }
    data.update(overrides)
    return MailConfig(**data)


def _resilience(retries: int = 2) -> ResilienceConfig:
    return ResilienceConfig(
        RESILIENCE_RETRIES=retries,
        RESILIENCE_BACKOFF_BASE=0.0,
        RESILIENCE_BACKOFF_CAP=0.0,
        RESILIENCE_CIRCUIT_THRESHOLD=5,
        RESILIENCE_CIRCUIT_RESET=60.0,
    )


def _sender(handler, *, retries: int = 2, **mail_overrides) -> SendGridEmailSender:
    return SendGridEmailSender(
        _mail_config(**mail_overrides),
        _resilience(retries),
        transport=httpx.MockTransport(handler),
    )


def test_send_posts_sendgrid_payload() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(202)

    asyncio.run(_sender(handler).send(MESSAGE))

    assert len(captured) == 1
    request = captured[0]
    assert str(request.url) == "https://mail.test/v3/mail/send"
    assert request.headers["Authorization"] == "Bearer SG.unit-test"
    payload = json.loads(request.content)
    assert payload["personalizations"][0]["to"] == [
        {"email": "alice@example.com", "name": "Alice Tan"}
    ]
    assert payload["subject"] == MESSAGE.subject
    assert payload["content"][0]["type"] == "text/html"
    assert payload["tracking_settings"]["click_tracking"] == {"enable": False, "enable_text": False}


def test_transient_failures_are_retried() -> None:
    responses = iter([httpx.Response(503), httpx.Response(429), httpx.Response(202)])
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return next(responses)

    asyncio.run(_sender(handler).send(MESSAGE))

    assert len(calls) == 3


def test_retries_are_bounded() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NotificationDispatchError):
        asyncio.run(_sender(handler, retries=2).send(MESSAGE))

    assert len(calls) == 3


def test_rejected_message_is_not_retried() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(400, json={"errors": [{"message": "bad from"}]})

    with pytest.raises(NotificationDispatchError) as exc_info:
        asyncio.run(_sender(handler).send(MESSAGE))

    assert len(calls) == 1
    assert exc_info.value.context == {"reason": "rejected"}


def test_missing_api_key_fails_without_calling_provider() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(202)

    with pytest.raises(NotificationDispatchError):
        asyncio.run(_sender(handler, SENDGRID_API_KEY="").send(MESSAGE))

    assert calls == []


def test_open_circuit_short_circuits_delivery() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503)

    breaker = CircuitBreaker(failure_threshold=1, reset_timeout=60.0)
    sender = SendGridEmailSender(
        _mail_config(), _resilience(retries=0), transport=httpx.MockTransport(handler), breaker=breaker
    )

    with pytest.raises(NotificationDispatchError):
        asyncio.run(sender.send(MESSAGE))
    with pytest.raises(NotificationDispatchError) as exc_info:
        asyncio.run(sender.send(MESSAGE))

    assert len(calls) == 1
    assert breaker.is_open
    assert exc_info.value.context == {"reason": "unavailable"}


def test_breaker_half_opens_after_reset_timeout() -> None:
    now = [0.0]
    breaker = CircuitBreaker(failure_threshold=2, reset_timeout=30.0, clock=lambda: now[0])

    breaker.on_failure()
    assert breaker.allow()
    breaker.on_failure()
    assert breaker.is_open
    assert not breaker.allow()

    now[0] = 31.0
    assert breaker.allow()
    assert not breaker.is_open


def test_rejections_do_not_open_the_circuit() -> None:
    responses = [httpx.Response(400) for _ in range(5)] + [httpx.Response(202)]
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return responses[len(calls) - 1]

    breaker = CircuitBreaker(failure_threshold=5, reset_timeout=60.0)
    sender = SendGridEmailSender(
        _mail_config(), _resilience(), transport=httpx.MockTransport(handler), breaker=breaker
    )

    for _ in range(5):
        with pytest.raises(NotificationDispatchError):
            asyncio.run(sender.send(MESSAGE))

    assert not breaker.is_open
    asyncio.run(sender.send(MESSAGE))
    assert len(calls) == 6
