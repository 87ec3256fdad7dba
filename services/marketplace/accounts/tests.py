"""Tests for account registration, provider approval and deletion."""
from __future__ import annotations

from unittest import mock

from django.contrib.auth.hashers import check_password
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from audit.models import AuditLogEntry
from contact_requests.exceptions import ValidationError
from contact_requests.lifecycle import LifecycleManager
from contact_requests.models import ContactRequest
from contact_requests.store import RequestStore
from messaging.ledger import MessageLedger
from messaging.models import Message
from notifications import templates

from .models import User
from .services import AccountService


class UserApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    def register(self, **overrides):
        payload = {
            "name": "Casey Provider",
            "email": "casey@example.com",
            "password": "s3cret-pass",
            "role": "provider",
            "phone_number": "+254700000030",
            "service": "Electrician",
        }
        payload.update(overrides)
        return self.client.post(reverse("user-register"), payload, format="json")

    def test_register_provider_starts_pending(self) -> None:
        response = self.register()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["user"]["role"], "PROVIDER")
        self.assertEqual(response.data["user"]["status"], "pending")
        self.assertNotIn("password", response.data["user"])

        user = User.objects.get(email="casey@example.com")
        self.assertTrue(check_password("s3cret-pass", user.password))

    def test_register_client_is_active(self) -> None:
        response = self.register(email="client@example.com", role="client")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["user"]["status"], "active")

    def test_register_rejects_duplicates_and_system_role(self) -> None:
        self.assertEqual(self.register().status_code, 201)
        self.assertEqual(self.register().status_code, 400)
        self.assertEqual(self.register(email="bot@example.com", role="system").status_code, 400)
        self.assertEqual(self.register(email="", name="").status_code, 400)

    def test_list_users_by_role(self) -> None:
        self.register()
        self.register(email="client@example.com", role="client", name="Abby Client")

        response = self.client.get(reverse("user-list"), {"role": "provider"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["email"] for item in response.data], ["casey@example.com"])

    def test_update_profile(self) -> None:
        user_id = self.register().data["user"]["id"]
        response = self.client.patch(
            reverse("user-detail", args=[user_id]), {"location": "Nairobi"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["location"], "Nairobi")
        self.assertEqual(response.data["status"], "pending")

    def test_update_provider_profile(self) -> None:
        user_id = self.register().data["user"]["id"]
        response = self.client.put(
            reverse("user-detail", args=[user_id]),
            {
                "name": "Casey Provider",
                "email": "casey@example.com",
                "motivation": "Ten years wiring homes in Kisumu",
                "qualifications": "Licensed electrician, class A",
                "rating": "4.90",
                "jobs_done": 250,
            },
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["motivation"], "Ten years wiring homes in Kisumu")
        self.assertEqual(response.data["qualifications"], "Licensed electrician, class A")

        user = User.objects.get(pk=user_id)
        self.assertEqual(user.qualifications, "Licensed electrician, class A")
        self.assertEqual(user.rating, 0)
        self.assertEqual(user.jobs_done, 0)

        listed = self.client.get(reverse("user-list"), {"role": "provider"}).data[0]
        self.assertEqual(listed["motivation"], "Ten years wiring homes in Kisumu")
        self.assertIn("rating", listed)
        self.assertIn("jobs_done", listed)

    def test_update_email_is_normalized_and_unique(self) -> None:
        casey_id = self.register().data["user"]["id"]
        other_id = self.register(email="amina@example.com", role="client").data["user"]["id"]

        clash = self.client.patch(
            reverse("user-detail", args=[other_id]), {"email": "Casey@Example.com"}, format="json"
        )
        self.assertEqual(clash.status_code, 400)
        self.assertIn("email", clash.data)

        own = self.client.patch(
            reverse("user-detail", args=[casey_id]), {"email": "CASEY@example.com"}, format="json"
        )
        self.assertEqual(own.status_code, 200)
        self.assertEqual(own.data["email"], "casey@example.com")

    def test_register_duplicate_email_in_service(self) -> None:
        service = AccountService()
        service.register("Casey", "casey@example.com", "s3cret-pass", User.PROVIDER)
        with self.assertRaises(ValidationError):
            service.register("Casey Again", "casey@example.com", "s3cret-pass", User.CLIENT)
        self.assertEqual(User.objects.filter(email="casey@example.com").count(), 1)


class ProviderApprovalTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()
        self.provider = User.objects.create(
            name="Otieno Electric",
            email="otieno@example.com",
            role=User.PROVIDER,
            status=User.PENDING,
            phone_number="+254700000040",
        )

    def test_pending_providers(self) -> None:
        User.objects.create(name="Active", email="active@example.com", role=User.PROVIDER)
        response = self.client.get(reverse("pending-providers"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["id"] for item in response.data], [self.provider.id])

    def test_approve_provider_audits_and_notifies(self) -> None:
        with mock.patch("notifications.intents.send_notification") as send_notification:
            with self.captureOnCommitCallbacks(execute=True):
                response = self.client.put(
                    reverse("provider-status", args=[self.provider.id]),
                    {"status": "active"},
                    format="json",
                )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Provider active")

        self.provider.refresh_from_db()
        self.assertEqual(self.provider.status, User.ACTIVE)
        entry = AuditLogEntry.objects.get()
        self.assertEqual(entry.action, "Approve Provider")
        self.assertIn("otieno@example.com", entry.detail)

        sent = {call.args[1]: call.args for call in send_notification.delay.call_args_list}
        self.assertEqual(
            set(sent), {templates.PROVIDER_STATUS_ADMIN, templates.PROVIDER_STATUS_PROVIDER}
        )
        self.assertEqual(sent[templates.PROVIDER_STATUS_PROVIDER][0], "+254700000040")
        self.assertEqual(sent[templates.PROVIDER_STATUS_PROVIDER][2]["status_text"], "APPROVED")

    def test_reject_provider(self) -> None:
        response = self.client.put(
            reverse("provider-status", args=[self.provider.id]), {"status": "rejected"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.provider.refresh_from_db()
        self.assertEqual(self.provider.status, User.REJECTED)
        self.assertEqual(AuditLogEntry.objects.get().action, "Reject Provider")

    def test_provider_status_errors(self) -> None:
        client_user = User.objects.create(name="Client", email="c@example.com", role=User.CLIENT)
        not_provider = self.client.put(
            reverse("provider-status", args=[client_user.id]), {"status": "active"}, format="json"
        )
        self.assertEqual(not_provider.status_code, 404)

        bad_status = self.client.put(
            reverse("provider-status", args=[self.provider.id]), {"status": "pending"}, format="json"
        )
        self.assertEqual(bad_status.status_code, 400)


class UserDeletionTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()
        self.client_user = User.objects.create(name="Amina", email="amina@example.com", role=User.CLIENT)
        self.provider = User.objects.create(
            name="Baraka", email="baraka@example.com", role=User.PROVIDER
        )
        self.contact_request = RequestStore().create(
            client_id=self.client_user.id, provider_id=self.provider.id, message="Fix the tap"
        )
        MessageLedger().append(
            self.contact_request.id, self.client_user.id, Message.CLIENT, "Are you free today?"
        )

    def test_delete_user_cascades_requests_and_messages(self) -> None:
        response = self.client.delete(reverse("user-detail", args=[self.provider.id]))
        self.assertEqual(response.status_code, 200)

        self.assertFalse(User.objects.filter(pk=self.provider.id).exists())
        self.assertFalse(ContactRequest.objects.filter(pk=self.contact_request.id).exists())
        self.assertFalse(Message.objects.filter(contact_request_id=self.contact_request.id).exists())
        self.assertTrue(User.objects.filter(pk=self.client_user.id).exists())
        self.assertEqual(AuditLogEntry.objects.get().action, "Delete User")

    def test_system_account_cannot_be_deleted(self) -> None:
        system = User.objects.system_account()
        response = self.client.delete(reverse("user-detail", args=[system.id]))
        self.assertEqual(response.status_code, 400)
        self.assertTrue(User.objects.filter(pk=system.id).exists())

    def test_system_account_cannot_be_modified(self) -> None:
        system = User.objects.system_account()
        url = reverse("user-detail", args=[system.id])

        patched = self.client.patch(
            url, {"email": "hijack@example.com", "name": "Mallory"}, format="json"
        )
        self.assertEqual(patched.status_code, 400)
        replaced = self.client.put(
            url, {"email": "hijack@example.com", "name": "Mallory"}, format="json"
        )
        self.assertEqual(replaced.status_code, 400)

        system.refresh_from_db()
        self.assertEqual(system.email, "system@kind.app")
        self.assertEqual(system.name, "KIND App")

        LifecycleManager(publisher=lambda intents: list(intents)).transition(
            self.contact_request.id, ContactRequest.APPROVED
        )
        self.assertEqual(User.objects.filter(role=User.SYSTEM).count(), 1)
        system_message = Message.objects.get(
            contact_request=self.contact_request, sender_role=Message.SYSTEM
        )
        self.assertEqual(system_message.sender_id, system.id)

    def test_system_account_lookup_survives_email_change(self) -> None:
        system = User.objects.system_account()
        User.objects.filter(pk=system.id).update(email="renamed@kind.app")
        self.assertEqual(User.objects.system_account().pk, system.pk)
        self.assertEqual(User.objects.filter(role=User.SYSTEM).count(), 1)

    def test_delete_unknown_user(self) -> None:
        response = self.client.delete(reverse("user-detail", args=[987654]))
        self.assertEqual(response.status_code, 404)
