"""Tests for the message ledger and its API."""
from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from accounts.models import User
from contact_requests.exceptions import NotFound, ValidationError
from contact_requests.lifecycle import LifecycleManager
from contact_requests.models import ContactRequest
from contact_requests.store import RequestStore

from .ledger import MessageLedger
from .models import Message


class LedgerFixtures:
    def setUp(self) -> None:
        self.client_user = User.objects.create(
            name="Wanjiru", email="wanjiru@example.com", role=User.CLIENT
        )
        self.provider_user = User.objects.create(
            name="Otieno Electric", email="otieno@example.com", role=User.PROVIDER
        )
        self.contact_request = RequestStore().create(
            client_id=self.client_user.id,
            provider_id=self.provider_user.id,
            message="Rewire the living room",
        )
        self.ledger = MessageLedger()


class MessageLedgerTests(LedgerFixtures, TestCase):
    def test_append_and_list_in_order(self) -> None:
        texts = ["Hello", "Hi, when works for you?", "Saturday morning", "Booked"]
        for index, text in enumerate(texts):
            if index % 2 == 0:
                self.ledger.append(self.contact_request.id, self.client_user.id, Message.CLIENT, text)
            else:
                self.ledger.append(
                    self.contact_request.id, self.provider_user.id, Message.PROVIDER, text
                )

        thread = list(self.ledger.list_for(self.contact_request.id))
        self.assertEqual([item.message for item in thread], texts)
        timestamps = [item.created_at for item in thread]
        self.assertEqual(timestamps, sorted(timestamps))

        # A second read starts from the beginning again.
        self.assertEqual(len(list(self.ledger.list_for(self.contact_request.id))), 4)

    def test_empty_text_is_rejected(self) -> None:
        for text in ["", "   "]:
            with self.assertRaises(ValidationError):
                self.ledger.append(self.contact_request.id, self.client_user.id, Message.CLIENT, text)
        self.assertFalse(Message.objects.exists())

    def test_users_cannot_author_system_messages(self) -> None:
        with self.assertRaises(ValidationError):
            self.ledger.append(
                self.contact_request.id, self.client_user.id, Message.SYSTEM, "Approved!"
            )

    def test_sender_must_be_a_party(self) -> None:
        outsider = User.objects.create(name="Eve", email="eve@example.com", role=User.CLIENT)
        with self.assertRaises(ValidationError):
            self.ledger.append(self.contact_request.id, outsider.id, Message.CLIENT, "Hi")
        with self.assertRaises(ValidationError):
            self.ledger.append(self.contact_request.id, self.client_user.id, Message.PROVIDER, "Hi")

    def test_unknown_request(self) -> None:
        with self.assertRaises(NotFound):
            self.ledger.append(4040, self.client_user.id, Message.CLIENT, "Hi")
        self.assertEqual(list(self.ledger.list_for(4040)), [])

    def test_mark_read_is_idempotent(self) -> None:
        message = self.ledger.append(
            self.contact_request.id, self.provider_user.id, Message.PROVIDER, "On my way"
        )
        self.assertIsNone(message.read_at)

        first = self.ledger.mark_read(message.id)
        self.assertIsNotNone(first.read_at)
        second = self.ledger.mark_read(message.id)
        self.assertEqual(second.read_at, first.read_at)

        with self.assertRaises(NotFound):
            self.ledger.mark_read(999999)

    def test_system_message_comes_from_the_platform_account(self) -> None:
        LifecycleManager(publisher=lambda intents: list(intents)).transition(
            self.contact_request.id, ContactRequest.APPROVED
        )
        message = self.ledger.list_for(self.contact_request.id).get()
        self.assertEqual(message.sender_role, Message.SYSTEM)
        self.assertEqual(message.sender.email, "system@kind.app")
        self.assertEqual(message.sender_name, "KIND App")


class MessageApiTests(LedgerFixtures, TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()

    def post_message(self, **overrides):
        payload = {
            "contact_request_id": self.contact_request.id,
            "sender_id": self.client_user.id,
            "sender_name": "Wanjiru",
            "sender_role": "CLIENT",
            "message": "Is Saturday fine?",
        }
        payload.update(overrides)
        return self.client.post(reverse("message-list"), payload, format="json")

    def test_post_and_fetch_thread(self) -> None:
        response = self.post_message()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["sender_role"], "CLIENT")
        self.assertEqual(response.data["contact_request_id"], self.contact_request.id)

        self.post_message(
            sender_id=self.provider_user.id, sender_role="PROVIDER", message="Saturday works"
        )

        thread = self.client.get(reverse("message-thread", args=[self.contact_request.id]))
        self.assertEqual(thread.status_code, 200)
        self.assertEqual(
            [item["message"] for item in thread.data], ["Is Saturday fine?", "Saturday works"]
        )

    def test_post_rejects_blank_and_system_messages(self) -> None:
        self.assertEqual(self.post_message(message="").status_code, 400)
        self.assertEqual(self.post_message(message="   ").status_code, 400)
        self.assertEqual(self.post_message(sender_role="SYSTEM").status_code, 400)
        self.assertFalse(Message.objects.exists())

    def test_post_to_unknown_request(self) -> None:
        response = self.post_message(contact_request_id=31337)
        self.assertEqual(response.status_code, 404)

    def test_mark_read_endpoint(self) -> None:
        message_id = self.post_message().data["id"]
        response = self.client.post(reverse("message-read", args=[message_id]))
        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(response.data["read_at"])

        missing = self.client.post(reverse("message-read", args=[999999]))
        self.assertEqual(missing.status_code, 404)
