"""Database models for the audit trail."""
from __future__ import annotations

from django.db import models


class AuditLogEntry(models.Model):
    """One administrative action and how it turned out."""

    SUCCESS = "Success"
    FAILURE = "Failure"

    STATUS_CHOICES = [
        (SUCCESS, "Success"),
        (FAILURE, "Failure"),
    ]

    action = models.CharField(max_length=255)
    actor = models.CharField(max_length=255)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=SUCCESS)
    detail = models.TextField(blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-timestamp", "-id"]

    def __str__(self) -> str:
        return f"{self.action} by {self.actor} ({self.status})"
