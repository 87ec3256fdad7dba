"""Background tasks that deliver notifications."""
from __future__ import annotations

import logging
from typing import Any, Dict

from celery import shared_task

from contact_requests.exceptions import DeliveryError

from .dispatcher import get_dispatcher

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=5, soft_time_limit=30)
def send_notification(self, recipient_phone: str, template_id: str, params: Dict[str, Any]) -> bool:
    """Deliver one notification intent, retrying transport failures."""

    try:
        get_dispatcher().notify(recipient_phone, template_id, params)
    except DeliveryError as exc:
        if self.request.retries >= self.max_retries:
            logger.error(
                "Giving up on %s notification to %s after %s retries: %s",
                template_id,
                recipient_phone,
                self.request.retries,
                exc,
            )
            return False
        logger.warning("Delivery of %s to %s failed: %s", template_id, recipient_phone, exc)
        raise self.retry(exc=exc, countdown=min(60, 2 ** self.request.retries))

    logger.info("Delivered %s notification to %s", template_id, recipient_phone)
    return True
