"""Append-only message threads attached to contact requests."""
from __future__ import annotations

import logging

from django.db.models import QuerySet
from django.utils import timezone

from accounts.models import User
from contact_requests.exceptions import NotFound, ValidationError
from contact_requests.models import ContactRequest

from .models import Message

logger = logging.getLogger(__name__)

PARTICIPANT_ROLES = {Message.CLIENT, Message.PROVIDER}


class MessageLedger:
    """Write and read the message thread of each contact request."""

    def append(
        self,
        request_id: int,
        sender_id: int,
        sender_role: str,
        text: str,
        sender_name: str = "",
    ) -> Message:
        """Add a participant's message to the request's thread."""

        if not text or not text.strip():
            raise ValidationError("message must not be empty")
        if sender_role not in PARTICIPANT_ROLES:
            raise ValidationError(f"sender_role must be one of {sorted(PARTICIPANT_ROLES)}")

        contact_request = ContactRequest.objects.filter(pk=request_id).first()
        if contact_request is None:
            raise NotFound(f"Contact request {request_id} not found")

        expected_sender = (
            contact_request.client_id if sender_role == Message.CLIENT else contact_request.provider_id
        )
        if sender_id != expected_sender:
            raise ValidationError(
                f"User {sender_id} is not the {sender_role.lower()} of request {request_id}"
            )

        return Message.objects.create(
            contact_request=contact_request,
            sender_id=sender_id,
            sender_name=sender_name,
            sender_role=sender_role,
            message=text,
        )

    def append_system(self, contact_request: ContactRequest, text: str) -> Message:
        """Add a platform-authored message; reserved for lifecycle side effects."""

        system = User.objects.system_account()
        message = Message.objects.create(
            contact_request=contact_request,
            sender=system,
            sender_name=system.name,
            sender_role=Message.SYSTEM,
            message=text,
        )
        logger.info("System message %s added to request %s", message.pk, contact_request.pk)
        return message

    def list_for(self, request_id: int) -> QuerySet:
        return Message.objects.filter(contact_request_id=request_id).order_by("created_at", "id")

    def mark_read(self, message_id: int) -> Message:
        """Stamp ``read_at`` the first time; later calls leave it untouched."""

        Message.objects.filter(pk=message_id, read_at__isnull=True).update(read_at=timezone.now())
        try:
            return Message.objects.get(pk=message_id)
        except Message.DoesNotExist as exc:
            raise NotFound(f"Message {message_id} not found") from exc
