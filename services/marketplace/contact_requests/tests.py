"""Tests for the contact request store, lifecycle and API."""
from __future__ import annotations

from datetime import timedelta
from typing import List
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from audit.models import AuditLogEntry
from messaging.ledger import MessageLedger
from messaging.models import Message
from notifications import templates
from notifications.intents import NotificationIntent

from .exceptions import InvalidTransition, NotFound, StorageError, ValidationError
from .lifecycle import LifecycleManager
from .models import ContactRequest
from .store import RequestStore


class MarketplaceFixtures:
    def create_parties(self) -> None:
        self.client_user = User.objects.create(
            id=10,
            name="Amina Client",
            email="amina@example.com",
            role=User.CLIENT,
            phone_number="+254700000010",
        )
        self.provider_user = User.objects.create(
            id=20,
            name="Baraka Plumbing",
            email="baraka@example.com",
            role=User.PROVIDER,
            phone_number="+254700000020",
            service="Plumbing",
        )

    def create_request(self, **overrides) -> ContactRequest:
        fields = {
            "client_id": self.client_user.id,
            "provider_id": self.provider_user.id,
            "message": "Kitchen sink is leaking",
            "task_description": "Replace the trap under the sink",
            "estimated_budget": "2500",
        }
        fields.update(overrides)
        return RequestStore().create(**fields)


class RecordingPublisher:
    def __init__(self) -> None:
        self.intents: List[NotificationIntent] = []

    def __call__(self, intents):
        queued = list(intents)
        self.intents.extend(queued)
        return queued


class LifecycleManagerTests(MarketplaceFixtures, TestCase):
    def setUp(self) -> None:
        self.create_parties()
        self.publisher = RecordingPublisher()
        self.manager = LifecycleManager(publisher=self.publisher)

    def system_messages(self, contact_request: ContactRequest):
        return Message.objects.filter(contact_request=contact_request, sender_role=Message.SYSTEM)

    def test_approve_then_reject_scenario(self) -> None:
        contact_request = self.create_request()
        self.assertEqual(contact_request.status, ContactRequest.PENDING)
        self.assertIsNone(contact_request.approved_at)

        approved = self.manager.transition(contact_request.id, ContactRequest.APPROVED)
        self.assertEqual(approved.status, ContactRequest.APPROVED)
        self.assertIsNotNone(approved.approved_at)

        thread = list(MessageLedger().list_for(contact_request.id))
        self.assertEqual(len(thread), 1)
        self.assertEqual(thread[0].sender_role, Message.SYSTEM)
        self.assertIn("Amina Client", thread[0].message)
        self.assertIn("50% deposit", thread[0].message)

        with self.assertRaises(InvalidTransition):
            self.manager.transition(contact_request.id, ContactRequest.REJECTED)

        contact_request.refresh_from_db()
        self.assertEqual(contact_request.status, ContactRequest.APPROVED)
        self.assertEqual(contact_request.approved_at, approved.approved_at)
        self.assertEqual(self.system_messages(contact_request).count(), 1)

    def test_unknown_request_is_not_found(self) -> None:
        with self.assertRaises(NotFound):
            self.manager.transition(999, ContactRequest.APPROVED)
        self.assertFalse(AuditLogEntry.objects.exists())

    def test_second_transition_fails_for_any_status(self) -> None:
        for first, second in [
            (ContactRequest.APPROVED, ContactRequest.APPROVED),
            (ContactRequest.REJECTED, ContactRequest.REJECTED),
            (ContactRequest.REJECTED, ContactRequest.APPROVED),
        ]:
            contact_request = self.create_request()
            self.manager.transition(contact_request.id, first)
            with self.assertRaises(InvalidTransition):
                self.manager.transition(contact_request.id, second)
            contact_request.refresh_from_db()
            self.assertEqual(contact_request.status, first)

    def test_reject_creates_no_system_message(self) -> None:
        contact_request = self.create_request()
        rejected = self.manager.transition(contact_request.id, ContactRequest.REJECTED)

        self.assertEqual(rejected.status, ContactRequest.REJECTED)
        self.assertIsNone(rejected.approved_at)
        self.assertIsNotNone(rejected.resolved_at)
        self.assertEqual(self.system_messages(contact_request).count(), 0)
        self.assertEqual(self.publisher.intents, [])

    def test_unsupported_target_status(self) -> None:
        contact_request = self.create_request()
        with self.assertRaises(ValidationError):
            self.manager.transition(contact_request.id, ContactRequest.PENDING)
        contact_request.refresh_from_db()
        self.assertEqual(contact_request.status, ContactRequest.PENDING)

    def test_every_transition_is_audited(self) -> None:
        contact_request = self.create_request()
        self.manager.transition(contact_request.id, ContactRequest.APPROVED, actor="ops@kind.com")
        with self.assertRaises(InvalidTransition):
            self.manager.transition(contact_request.id, ContactRequest.REJECTED)

        success = AuditLogEntry.objects.get(status=AuditLogEntry.SUCCESS)
        self.assertEqual(success.action, "Request approved")
        self.assertEqual(success.actor, "ops@kind.com")
        self.assertIn("Amina Client", success.detail)

        failure = AuditLogEntry.objects.get(status=AuditLogEntry.FAILURE)
        self.assertEqual(failure.action, "Request rejected")
        self.assertEqual(failure.actor, "admin@kind.com")

    def test_approval_publishes_three_intents(self) -> None:
        contact_request = self.create_request()
        self.manager.transition(contact_request.id, ContactRequest.APPROVED)

        by_audience = {intent.audience: intent for intent in self.publisher.intents}
        self.assertEqual(set(by_audience), {"admin", "client", "provider"})
        self.assertEqual(by_audience["admin"].template_id, templates.REQUEST_APPROVED_ADMIN)
        self.assertEqual(by_audience["admin"].recipient_phone, "+254700000001")
        self.assertEqual(by_audience["client"].recipient_phone, "+254700000010")
        self.assertEqual(by_audience["provider"].recipient_phone, "+254700000020")
        self.assertEqual(by_audience["client"].params["request_id"], contact_request.id)

    def test_lost_race_is_an_invalid_transition(self) -> None:
        contact_request = self.create_request()

        class RacingStore(RequestStore):
            def resolve(self, request_id, status, at):
                ContactRequest.objects.filter(pk=request_id).update(status=ContactRequest.REJECTED)
                return super().resolve(request_id, status, at)

        manager = LifecycleManager(store=RacingStore(), publisher=self.publisher)
        with self.assertRaises(InvalidTransition):
            manager.transition(contact_request.id, ContactRequest.APPROVED)
        self.assertEqual(self.system_messages(contact_request).count(), 0)
        self.assertEqual(self.publisher.intents, [])

    def test_storage_failure_rolls_back_everything(self) -> None:
        contact_request = self.create_request()

        class BrokenLedger(MessageLedger):
            def append_system(self, contact_request, text):
                raise DatabaseError("disk full")

        manager = LifecycleManager(ledger=BrokenLedger(), publisher=self.publisher)
        with self.assertRaises(StorageError):
            manager.transition(contact_request.id, ContactRequest.APPROVED)

        contact_request.refresh_from_db()
        self.assertEqual(contact_request.status, ContactRequest.PENDING)
        self.assertIsNone(contact_request.approved_at)
        self.assertFalse(AuditLogEntry.objects.exists())
        self.assertEqual(self.publisher.intents, [])

    def test_queue_failure_does_not_undo_approval(self) -> None:
        contact_request = self.create_request()
        manager = LifecycleManager()

        with mock.patch("notifications.intents.send_notification") as send_notification:
            send_notification.delay.side_effect = ConnectionError("broker unavailable")
            with self.captureOnCommitCallbacks(execute=True):
                manager.transition(contact_request.id, ContactRequest.APPROVED)

        self.assertEqual(send_notification.delay.call_count, 3)
        contact_request.refresh_from_db()
        self.assertEqual(contact_request.status, ContactRequest.APPROVED)
        self.assertTrue(
            AuditLogEntry.objects.filter(action="Request approved", status=AuditLogEntry.SUCCESS).exists()
        )

    def test_notifications_wait_for_commit(self) -> None:
        contact_request = self.create_request()
        manager = LifecycleManager()

        with mock.patch("notifications.intents.send_notification") as send_notification:
            with self.captureOnCommitCallbacks() as callbacks:
                manager.transition(contact_request.id, ContactRequest.APPROVED)
            send_notification.delay.assert_not_called()
            self.assertEqual(len(callbacks), 3)

            for callback in callbacks:
                callback()
        sent_templates = {call.args[1] for call in send_notification.delay.call_args_list}
        self.assertEqual(
            sent_templates,
            {
                templates.REQUEST_APPROVED_ADMIN,
                templates.REQUEST_APPROVED_CLIENT,
                templates.REQUEST_APPROVED_PROVIDER,
            },
        )


class RequestStoreTests(MarketplaceFixtures, TestCase):
    def setUp(self) -> None:
        self.create_parties()
        self.store = RequestStore()

    def test_create_requires_both_parties(self) -> None:
        with self.assertRaises(ValidationError):
            self.store.create(client_id=None, provider_id=self.provider_user.id)
        with self.assertRaises(ValidationError):
            self.store.create(client_id=self.client_user.id, provider_id=None)
        with self.assertRaises(ValidationError):
            self.store.create(client_id=self.client_user.id, provider_id=404)
        with self.assertRaises(ValidationError):
            self.store.create(client_id=self.provider_user.id, provider_id=self.client_user.id)

    def test_create_starts_pending_and_fills_names(self) -> None:
        contact_request = self.create_request(estimated_budget=1500)
        self.assertEqual(contact_request.status, ContactRequest.PENDING)
        self.assertEqual(contact_request.client_name, "Amina Client")
        self.assertEqual(contact_request.provider_name, "Baraka Plumbing")
        self.assertEqual(contact_request.estimated_budget, "1500")

    def test_get_unknown_request(self) -> None:
        with self.assertRaises(NotFound):
            self.store.get(12345)

    def test_client_listing_puts_unresolved_first(self) -> None:
        now = timezone.now()
        resolved_early = self.create_request(message="early")
        resolved_late = self.create_request(message="late")
        pending_old = self.create_request(message="pending old")
        pending_new = self.create_request(message="pending new")
        ContactRequest.objects.filter(pk=pending_old.pk).update(created_at=now - timedelta(days=2))
        ContactRequest.objects.filter(pk=pending_new.pk).update(created_at=now - timedelta(days=1))

        self.assertTrue(
            self.store.resolve(resolved_early.id, ContactRequest.APPROVED, now - timedelta(hours=5))
        )
        self.assertTrue(
            self.store.resolve(resolved_late.id, ContactRequest.REJECTED, now - timedelta(hours=1))
        )

        ordered = [item.id for item in self.store.list_for_client(self.client_user.id)]
        self.assertEqual(
            ordered, [pending_new.id, pending_old.id, resolved_late.id, resolved_early.id]
        )

    def test_provider_listing_is_approved_only(self) -> None:
        now = timezone.now()
        first = self.create_request()
        second = self.create_request()
        rejected = self.create_request()
        self.create_request()
        self.store.resolve(first.id, ContactRequest.APPROVED, now - timedelta(days=1))
        self.store.resolve(second.id, ContactRequest.APPROVED, now)
        self.store.resolve(rejected.id, ContactRequest.REJECTED, now)

        listed = [item.id for item in self.store.list_for_provider(self.provider_user.id)]
        self.assertEqual(listed, [second.id, first.id])

    def test_resolve_only_touches_pending_rows(self) -> None:
        contact_request = self.create_request()
        now = timezone.now()
        self.assertTrue(self.store.resolve(contact_request.id, ContactRequest.REJECTED, now))
        self.assertFalse(self.store.resolve(contact_request.id, ContactRequest.APPROVED, now))
        contact_request.refresh_from_db()
        self.assertEqual(contact_request.status, ContactRequest.REJECTED)
        self.assertIsNone(contact_request.approved_at)

    def test_delete_cascades_messages(self) -> None:
        contact_request = self.create_request()
        LifecycleManager(publisher=RecordingPublisher()).transition(
            contact_request.id, ContactRequest.APPROVED
        )
        MessageLedger().append(
            contact_request.id, self.client_user.id, Message.CLIENT, "When can you come?"
        )
        self.assertEqual(Message.objects.filter(contact_request_id=contact_request.id).count(), 2)

        self.store.delete(contact_request.id)

        self.assertFalse(ContactRequest.objects.filter(pk=contact_request.id).exists())
        self.assertFalse(Message.objects.filter(contact_request_id=contact_request.id).exists())
        with self.assertRaises(NotFound):
            self.store.delete(contact_request.id)


class ContactRequestApiTests(MarketplaceFixtures, TestCase):
    def setUp(self) -> None:
        self.create_parties()
        self.client = APIClient()

    def submit(self, **overrides):
        payload = {
            "client_id": self.client_user.id,
            "client_name": "Amina Client",
            "provider_id": self.provider_user.id,
            "provider_name": "Baraka Plumbing",
            "message": "Kitchen sink is leaking",
            "task_description": "Replace the trap under the sink",
            "estimated_budget": 2500,
        }
        payload.update(overrides)
        return self.client.post(reverse("contact-request-list"), payload, format="json")

    def test_create_contact_request(self) -> None:
        response = self.submit()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "pending")
        self.assertTrue(ContactRequest.objects.filter(pk=response.data["id"]).exists())

    def test_create_requires_client(self) -> None:
        response = self.client.post(
            reverse("contact-request-list"),
            {"provider_id": self.provider_user.id, "message": "Hi"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("client_id", response.data)

    def test_create_rejects_non_provider(self) -> None:
        response = self.submit(provider_id=self.client_user.id)
        self.assertEqual(response.status_code, 400)

    def test_approve_over_http(self) -> None:
        request_id = self.submit().data["id"]
        url = reverse("contact-request-detail", args=[request_id])

        response = self.client.put(url, {"status": "approved"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Request approved")

        again = self.client.put(url, {"status": "rejected"}, format="json")
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.data["code"], "InvalidTransition")

        detail = self.client.get(url)
        self.assertEqual(detail.data["status"], "approved")
        self.assertIsNotNone(detail.data["approved_at"])

    def test_transition_unknown_request(self) -> None:
        response = self.client.put(
            reverse("contact-request-detail", args=[999]), {"status": "approved"}, format="json"
        )
        self.assertEqual(response.status_code, 404)

    def test_transition_rejects_bad_status(self) -> None:
        request_id = self.submit().data["id"]
        response = self.client.put(
            reverse("contact-request-detail", args=[request_id]), {"status": "done"}, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_client_and_provider_listings(self) -> None:
        approved_id = self.submit().data["id"]
        pending_id = self.submit().data["id"]
        self.client.put(
            reverse("contact-request-detail", args=[approved_id]), {"status": "approved"}, format="json"
        )

        client_list = self.client.get(
            reverse("contact-request-for-client", args=[self.client_user.id])
        )
        self.assertEqual(client_list.status_code, 200)
        self.assertEqual([item["id"] for item in client_list.data], [pending_id, approved_id])

        provider_list = self.client.get(
            reverse("contact-request-for-provider", args=[self.provider_user.id])
        )
        self.assertEqual(provider_list.status_code, 200)
        self.assertEqual([item["id"] for item in provider_list.data], [approved_id])

    def test_delete_contact_request(self) -> None:
        request_id = self.submit().data["id"]
        url = reverse("contact-request-detail", args=[request_id])

        self.assertEqual(self.client.delete(url).status_code, 204)
        self.assertEqual(self.client.delete(url).status_code, 404)

    def test_health(self) -> None:
        response = self.client.get(reverse("kind-health"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "ok")
