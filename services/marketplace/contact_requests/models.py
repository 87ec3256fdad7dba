"""Database models for contact requests."""
from __future__ import annotations

from django.db import models


class ContactRequest(models.Model):
    """A client's request to engage a provider, pending admin approval."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (APPROVED, "Approved"),
        (REJECTED, "Rejected"),
    ]

    TERMINAL_STATUSES = (APPROVED, REJECTED)

    client = models.ForeignKey(
        "accounts.User",
        on_delete=models.CASCADE,
        related_name="client_requests",
    )
    client_name = models.CharField(max_length=255, blank=True)
    provider = models.ForeignKey(
        "accounts.User",
        on_delete=models.CASCADE,
        related_name="provider_requests",
    )
    provider_name = models.CharField(max_length=255, blank=True)
    message = models.TextField(blank=True)
    task_description = models.TextField(blank=True)
    estimated_budget = models.CharField(max_length=64, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["client", "status"], name="contact_req_client_idx"),
            models.Index(fields=["provider", "status"], name="contact_req_provider_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.pk} {self.client_name} -> {self.provider_name} ({self.status})"

    @property
    def is_resolved(self) -> bool:
        return self.status in self.TERMINAL_STATUSES
