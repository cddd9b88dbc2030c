# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transactional email through the SendGrid v3 HTTP API."""

from __future__ import annotations

from typing import Any

import httpx

from parkingslot.application.interfaces import EmailMessage, EmailSender
from parkingslot.domain.users.exceptions import NotificationDispatchError
from parkingslot.infrastructure.resilience import CircuitBreaker, CircuitOpenError, resilient_call
from parkingslot.shared.config.settings import MailConfig, ResilienceConfig
from parkingslot.shared.logging import logger


class DeliveryError(Exception):
    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"mail provider answered {status_code}")
        self.status_code = status_code
        self.body = body


class TransientDeliveryError(DeliveryError):
    pass


class DeliveryRejectedError(DeliveryError):
    pass


class SendGridEmailSender(EmailSender):
    def __init__(
        self,
        config: MailConfig,
        resilience: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._config = config
        self._resilience = resilience
        self._transport = transport
        self._breaker = breaker or CircuitBreaker.from_config(resilience)

    def _payload(self, message: EmailMessage) -> dict[str, Any]:
        recipient: dict[str, str] = {"email": message.to_email}
        if message.to_name:
            recipient["name"] = message.to_name
        return {
            "personalizations": [{"to": [recipient]}],
            "from": {"email": self._config.from_email, "name": self._config.from_name},
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html_body}],
            # reset links must reach the user unrewritten
            "tracking_settings": {"click_tracking": {"enable": False, "enable_text": False}},
        }

    async def _post(self, http: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        response = await http.post(
            self._config.sendgrid_api_url,
            json=payload,
            headers={"Authorization": f"Bearer {self._config.sendgrid_api_key}"},
        )
        if response.status_code == 429 or response.status_code >= 500:
            raise TransientDeliveryError(response.status_code, response.text[:200])
        if response.status_code >= 400:
            raise DeliveryRejectedError(response.status_code, response.text[:200])
        return response

    async def send(self, message: EmailMessage) -> None:
        if not self._config.sendgrid_api_key:
            logger.error("mail.send: SENDGRID_API_KEY is not configured")
            raise NotificationDispatchError(context={"reason": "not_configured"})

        payload = self._payload(message)
        async with httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport) as http:
            try:
                response = await resilient_call(
                    self._post,
                    http,
                    payload,
                    config=self._resilience,
                    breaker=self._breaker,
                    timeout=self._config.timeout,
                    retry_on=(httpx.TransportError, TransientDeliveryError, TimeoutError),
                )
            except DeliveryError as exc:
                logger.warning(
                    f"mail.send: provider refused message code={exc.status_code} body={exc.body}"
                )
                raise NotificationDispatchError(context={"reason": "rejected"}) from exc
            except (httpx.HTTPError, TimeoutError, CircuitOpenError) as exc:
                logger.warning(f"mail.send: delivery failed {type(exc).__name__}")
                raise NotificationDispatchError(context={"reason": "unavailable"}) from exc

        logger.info(f"mail.send: accepted status={response.status_code} subject={message.subject!r}")


__all__ = [
    "DeliveryError",
    "DeliveryRejectedError",
    "SendGridEmailSender",
    "TransientDeliveryError",
]
