"""Audit trail collaborator handed to services that change marketplace state."""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings

from .models import AuditLogEntry

logger = logging.getLogger(__name__)


class AuditLogger:
    """Persist audit entries and mirror them to the service log.

    Callers receive an instance instead of reaching for a module global, so
    tests can pass a recorder of their own.
    """

    def __init__(self, default_actor: Optional[str] = None) -> None:
        self.default_actor = default_actor or settings.ADMIN_EMAIL

    def record(
        self,
        action: str,
        detail: str = "",
        status: str = AuditLogEntry.SUCCESS,
        actor: Optional[str] = None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry.objects.create(
            action=action,
            actor=actor or self.default_actor,
            status=status,
            detail=detail,
        )
        logger.info("audit: %s by %s [%s] %s", action, entry.actor, status, detail)
        return entry

    def failure(self, action: str, detail: str = "", actor: Optional[str] = None) -> AuditLogEntry:
        return self.record(action, detail, status=AuditLogEntry.FAILURE, actor=actor)
