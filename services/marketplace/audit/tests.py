"""Tests for the audit trail."""
from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from .logger import AuditLogger
from .models import AuditLogEntry


class AuditLoggerTests(TestCase):
    def test_record_uses_default_actor(self) -> None:
        entry = AuditLogger().record("Request approved", "approved for Amina")
        self.assertEqual(entry.actor, "admin@kind.com")
        self.assertEqual(entry.status, AuditLogEntry.SUCCESS)

    def test_failure_entries(self) -> None:
        entry = AuditLogger(default_actor="ops@kind.com").failure("Request rejected", "already approved")
        self.assertEqual(entry.actor, "ops@kind.com")
        self.assertEqual(entry.status, AuditLogEntry.FAILURE)


class AuditApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()
        audit = AuditLogger()
        self.first = audit.record("Approve Provider", "Approved provider: Otieno")
        self.second = audit.record("Delete User", "Deleted: Eve")

    def test_list_newest_first(self) -> None:
        response = self.client.get(reverse("audit-log-list"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["id"] for item in response.data], [self.second.id, self.first.id])

    def test_delete_one_and_clear(self) -> None:
        response = self.client.delete(reverse("audit-log-detail", args=[self.first.id]))
        self.assertEqual(response.status_code, 204)
        self.assertEqual(AuditLogEntry.objects.count(), 1)

        response = self.client.delete(reverse("audit-log-list"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Cleared")
        self.assertFalse(AuditLogEntry.objects.exists())
