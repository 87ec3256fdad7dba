"""Notification intents and their hand-off to the task queue."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from django.db import transaction

from .tasks import send_notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationIntent:
    audience: str
    recipient_phone: str
    template_id: str
    params: Dict[str, Any] = field(default_factory=dict)


def enqueue(intent: NotificationIntent) -> None:
    """Queue one intent; failures are logged and never reach the caller."""

    if not intent.recipient_phone:
        logger.info("No phone number for %s, skipping %s", intent.audience, intent.template_id)
        return
    try:
        send_notification.delay(intent.recipient_phone, intent.template_id, intent.params)
    except Exception:
        logger.exception(
            "Could not queue %s notification for %s", intent.template_id, intent.audience
        )


def publish(intents: Iterable[NotificationIntent]) -> List[NotificationIntent]:
    """Queue each intent independently once the current transaction commits."""

    queued = list(intents)
    for intent in queued:
        transaction.on_commit(lambda intent=intent: enqueue(intent))
    return queued
