"""Notification transports.

The marketplace core only knows :class:`NotificationDispatcher`. Which
implementation runs is chosen by the ``NOTIFICATION_DISPATCHER`` setting so
a deployment can swap the logging stub for a real SMS gateway without code
changes.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

import requests
from django.conf import settings
from django.utils.module_loading import import_string

from contact_requests.exceptions import DeliveryError

from .templates import render

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Send one templated message to one phone number."""

    def notify(self, recipient_phone: str, template_id: str, params: Mapping[str, Any]) -> None:
        """Deliver the message or raise :class:`DeliveryError`."""

        raise NotImplementedError


class LoggingNotificationDispatcher(NotificationDispatcher):
    """Render messages and write them to the log instead of sending them."""

    def notify(self, recipient_phone: str, template_id: str, params: Mapping[str, Any]) -> None:
        text = render(template_id, params)
        logger.info("SMS to %s [%s]: %s", recipient_phone, template_id, text)


class HttpSmsNotificationDispatcher(NotificationDispatcher):
    """POST rendered messages to an HTTP SMS gateway."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        sender_id: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.url = url if url is not None else settings.SMS_GATEWAY_URL
        self.api_key = api_key if api_key is not None else settings.SMS_GATEWAY_API_KEY
        self.sender_id = sender_id if sender_id is not None else settings.SMS_SENDER_ID
        self.timeout = timeout if timeout is not None else settings.NOTIFICATION_TIMEOUT

    def notify(self, recipient_phone: str, template_id: str, params: Mapping[str, Any]) -> None:
        if not self.url:
            raise DeliveryError("SMS_GATEWAY_URL is not configured")

        payload = {
            "to": [recipient_phone],
            "from": self.sender_id,
            "message": render(template_id, params),
        }
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise DeliveryError(f"SMS gateway request failed: {exc}") from exc

        if response.status_code >= 300:
            raise DeliveryError(
                f"SMS gateway rejected message for {recipient_phone}: "
                f"{response.status_code} {response.text[:200]}"
            )


def get_dispatcher() -> NotificationDispatcher:
    """Instantiate the dispatcher configured in settings."""

    dispatcher_class = import_string(settings.NOTIFICATION_DISPATCHER)
    return dispatcher_class()
