"""Database models for contact request message threads."""
from __future__ import annotations

from django.db import models


class Message(models.Model):
    """A chat entry in the thread of one contact request."""

    CLIENT = "CLIENT"
    PROVIDER = "PROVIDER"
    SYSTEM = "SYSTEM"

    SENDER_ROLE_CHOICES = [
        (CLIENT, "Client"),
        (PROVIDER, "Provider"),
        (SYSTEM, "System"),
    ]

    contact_request = models.ForeignKey(
        "contact_requests.ContactRequest",
        on_delete=models.CASCADE,
        related_name="messages",
    )
    sender = models.ForeignKey(
        "accounts.User",
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    sender_name = models.CharField(max_length=255, blank=True)
    sender_role = models.CharField(max_length=16, choices=SENDER_ROLE_CHOICES)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.sender_role} #{self.sender_id} on request {self.contact_request_id}"
