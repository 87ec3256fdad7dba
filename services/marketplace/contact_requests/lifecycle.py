"""State machine for contact requests and the side effects of approval."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from audit.logger import AuditLogger
from messaging.ledger import MessageLedger
from notifications import templates
from notifications.intents import NotificationIntent, publish

from .exceptions import InvalidTransition, StorageError, ValidationError
from .models import ContactRequest
from .store import RequestStore

logger = logging.getLogger(__name__)

APPROVAL_MESSAGE = "Hello {client_name}, your request has been approved. Terms & 50% deposit apply."

Publisher = Callable[[Iterable[NotificationIntent]], List[NotificationIntent]]


class LifecycleManager:
    """Apply ``pending -> approved | rejected`` transitions exactly once."""

    def __init__(
        self,
        store: Optional[RequestStore] = None,
        ledger: Optional[MessageLedger] = None,
        audit: Optional[AuditLogger] = None,
        publisher: Optional[Publisher] = None,
    ) -> None:
        self.store = store or RequestStore()
        self.ledger = ledger or MessageLedger()
        self.audit = audit or AuditLogger()
        self.publisher = publisher or publish

    def transition(
        self, request_id: int, target_status: str, actor: Optional[str] = None
    ) -> ContactRequest:
        if target_status not in ContactRequest.TERMINAL_STATUSES:
            raise ValidationError(
                f"status must be one of {list(ContactRequest.TERMINAL_STATUSES)}"
            )

        try:
            with transaction.atomic():
                contact_request = self.store.get(request_id)
                if contact_request.status != ContactRequest.PENDING:
                    raise InvalidTransition(
                        f"Request {request_id} is already {contact_request.status}"
                    )

                now = timezone.now()
                if not self.store.resolve(request_id, target_status, now):
                    # Another handler resolved it between our read and the update.
                    raise InvalidTransition(f"Request {request_id} is no longer pending")
                contact_request.refresh_from_db()

                if target_status == ContactRequest.APPROVED:
                    self.ledger.append_system(
                        contact_request,
                        APPROVAL_MESSAGE.format(client_name=contact_request.client_name),
                    )
                self.audit.record(
                    f"Request {target_status}",
                    f"{target_status} for {contact_request.client_name} (request #{request_id})",
                    actor=actor,
                )
        except InvalidTransition as exc:
            self.audit.failure(f"Request {target_status}", str(exc), actor=actor)
            raise
        except DatabaseError as exc:
            logger.exception("Transition of request %s to %s failed", request_id, target_status)
            raise StorageError(f"Could not update request {request_id}") from exc

        logger.info("Request %s moved to %s", request_id, target_status)
        if target_status == ContactRequest.APPROVED:
            self.publisher(self.approval_intents(contact_request))
        return contact_request

    def approval_intents(self, contact_request: ContactRequest) -> List[NotificationIntent]:
        params = {
            "request_id": contact_request.pk,
            "client_name": contact_request.client_name,
            "provider_name": contact_request.provider_name,
        }
        return [
            NotificationIntent(
                "admin", settings.ADMIN_PHONE_NUMBER, templates.REQUEST_APPROVED_ADMIN, params
            ),
            NotificationIntent(
                "client",
                contact_request.client.phone_number,
                templates.REQUEST_APPROVED_CLIENT,
                params,
            ),
            NotificationIntent(
                "provider",
                contact_request.provider.phone_number,
                templates.REQUEST_APPROVED_PROVIDER,
                params,
            ),
        ]
