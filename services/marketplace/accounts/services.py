"""Account operations that carry audit and notification side effects."""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction

from audit.logger import AuditLogger
from contact_requests.exceptions import NotFound, ValidationError
from notifications import templates
from notifications.intents import NotificationIntent, publish

from .models import User

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, audit: Optional[AuditLogger] = None, publisher=None) -> None:
        self.audit = audit or AuditLogger()
        self.publisher = publisher or publish

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: str,
        phone_number: str = "",
        service: str = "",
        location: str = "",
    ) -> User:
        """Create an account; providers wait for admin approval."""

        if role == User.SYSTEM:
            raise ValidationError("The system account cannot be registered")
        status = User.PENDING if role == User.PROVIDER else User.ACTIVE
        try:
            with transaction.atomic():
                user = User.objects.create(
                    name=name,
                    email=email,
                    password=make_password(password),
                    role=role,
                    status=status,
                    phone_number=phone_number,
                    service=service,
                    location=location,
                )
        except IntegrityError as exc:
            raise ValidationError("User already exists") from exc
        logger.info("Registered %s account %s (%s)", role, user.pk, status)
        return user

    def set_provider_status(self, provider_id: int, status: str) -> User:
        if status not in {User.ACTIVE, User.REJECTED}:
            raise ValidationError("status must be 'active' or 'rejected'")
        provider = User.objects.filter(pk=provider_id, role=User.PROVIDER).first()
        if provider is None:
            raise NotFound(f"Provider {provider_id} not found")

        approved = status == User.ACTIVE
        with transaction.atomic():
            provider.status = status
            provider.save(update_fields=["status", "updated_at"])
            self.audit.record(
                "Approve Provider" if approved else "Reject Provider",
                f"{'Approved' if approved else 'Rejected'} provider: {provider.name} ({provider.email})",
            )

            params = {
                "name": provider.name,
                "email": provider.email,
                "status_text": "APPROVED" if approved else "REJECTED",
            }
            self.publisher(
                [
                    NotificationIntent(
                        "admin", settings.ADMIN_PHONE_NUMBER, templates.PROVIDER_STATUS_ADMIN, params
                    ),
                    NotificationIntent(
                        "provider", provider.phone_number, templates.PROVIDER_STATUS_PROVIDER, params
                    ),
                ]
            )
        return provider

    def delete_user(self, user_id: int) -> None:
        """Delete an account, its contact requests and their message threads."""

        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise NotFound(f"User {user_id} not found")
        if user.is_system:
            raise ValidationError("The system account cannot be deleted")

        with transaction.atomic():
            self.audit.record("Delete User", f"Deleted: {user.name}")
            user.delete()
