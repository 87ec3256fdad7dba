"""Tests for notification transports and delivery tasks."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple
from unittest import mock

import requests
from django.test import SimpleTestCase, TestCase, override_settings

from contact_requests.exceptions import DeliveryError

from . import templates
from .dispatcher import (
    HttpSmsNotificationDispatcher,
    LoggingNotificationDispatcher,
    get_dispatcher,
)
from .intents import NotificationIntent, enqueue
from .tasks import send_notification

APPROVAL_PARAMS: Dict[str, Any] = {
    "request_id": 7,
    "client_name": "Amina",
    "provider_name": "Baraka Plumbing",
}


class RecordingDispatcher(LoggingNotificationDispatcher):
    sent: List[Tuple[str, str, Mapping[str, Any]]] = []

    def notify(self, recipient_phone, template_id, params):
        super().notify(recipient_phone, template_id, params)
        self.sent.append((recipient_phone, template_id, params))


class FailingDispatcher(LoggingNotificationDispatcher):
    attempts = 0

    def notify(self, recipient_phone, template_id, params):
        type(self).attempts += 1
        raise DeliveryError("gateway down")


class TemplateTests(SimpleTestCase):
    def test_render_client_approval(self) -> None:
        text = templates.render(templates.REQUEST_APPROVED_CLIENT, APPROVAL_PARAMS)
        self.assertIn("Hello Amina", text)
        self.assertIn("Baraka Plumbing", text)

    def test_unknown_template_and_missing_params(self) -> None:
        with self.assertRaises(DeliveryError):
            templates.render("no-such-template", {})
        with self.assertRaises(DeliveryError):
            templates.render(templates.REQUEST_APPROVED_ADMIN, {"client_name": "Amina"})


class HttpSmsDispatcherTests(SimpleTestCase):
    def dispatcher(self) -> HttpSmsNotificationDispatcher:
        return HttpSmsNotificationDispatcher(
            url="https://sms.example.com/send", api_key="key-123", sender_id="KIND", timeout=3
        )

    @mock.patch("notifications.dispatcher.requests.post")
    def test_posts_rendered_message(self, mock_post: mock.Mock) -> None:
        mock_post.return_value = mock.Mock(status_code=201, text="queued")

        self.dispatcher().notify("+254700000010", templates.REQUEST_APPROVED_CLIENT, APPROVAL_PARAMS)

        mock_post.assert_called_once()
        _, kwargs = mock_post.call_args
        self.assertEqual(kwargs["json"]["to"], ["+254700000010"])
        self.assertIn("Hello Amina", kwargs["json"]["message"])
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer key-123")
        self.assertEqual(kwargs["timeout"], 3)

    @mock.patch("notifications.dispatcher.requests.post")
    def test_transport_errors_become_delivery_errors(self, mock_post: mock.Mock) -> None:
        mock_post.side_effect = requests.Timeout("timed out")
        with self.assertRaises(DeliveryError):
            self.dispatcher().notify("+254700000010", templates.REQUEST_APPROVED_CLIENT, APPROVAL_PARAMS)

    @mock.patch("notifications.dispatcher.requests.post")
    def test_gateway_rejection(self, mock_post: mock.Mock) -> None:
        mock_post.return_value = mock.Mock(status_code=502, text="bad gateway")
        with self.assertRaises(DeliveryError):
            self.dispatcher().notify("+254700000010", templates.REQUEST_APPROVED_CLIENT, APPROVAL_PARAMS)

    def test_missing_gateway_url(self) -> None:
        dispatcher = HttpSmsNotificationDispatcher(url="")
        with self.assertRaises(DeliveryError):
            dispatcher.notify("+254700000010", templates.REQUEST_APPROVED_CLIENT, APPROVAL_PARAMS)


class SendNotificationTaskTests(TestCase):
    def setUp(self) -> None:
        RecordingDispatcher.sent = []
        FailingDispatcher.attempts = 0

    @override_settings(NOTIFICATION_DISPATCHER="notifications.tests.RecordingDispatcher")
    def test_task_uses_configured_dispatcher(self) -> None:
        self.assertIsInstance(get_dispatcher(), RecordingDispatcher)

        result = send_notification.apply(
            args=["+254700000020", templates.REQUEST_APPROVED_PROVIDER, APPROVAL_PARAMS]
        )
        self.assertTrue(result.get())
        self.assertEqual(
            RecordingDispatcher.sent,
            [("+254700000020", templates.REQUEST_APPROVED_PROVIDER, APPROVAL_PARAMS)],
        )

    @override_settings(NOTIFICATION_DISPATCHER="notifications.tests.FailingDispatcher")
    def test_task_gives_up_after_retries(self) -> None:
        # Called directly, a retry re-raises the delivery error.
        with self.assertRaises(DeliveryError):
            send_notification.run("+254700000020", templates.REQUEST_APPROVED_PROVIDER, APPROVAL_PARAMS)
        self.assertEqual(FailingDispatcher.attempts, 1)

        send_notification.push_request(retries=send_notification.max_retries)
        try:
            delivered = send_notification.run(
                "+254700000020", templates.REQUEST_APPROVED_PROVIDER, APPROVAL_PARAMS
            )
        finally:
            send_notification.pop_request()
        self.assertFalse(delivered)
        self.assertEqual(FailingDispatcher.attempts, 2)


class EnqueueTests(SimpleTestCase):
    def test_skips_intents_without_phone(self) -> None:
        with mock.patch("notifications.intents.send_notification") as task:
            enqueue(NotificationIntent("client", "", templates.REQUEST_APPROVED_CLIENT, APPROVAL_PARAMS))
        task.delay.assert_not_called()

    def test_queue_errors_are_contained(self) -> None:
        with mock.patch("notifications.intents.send_notification") as task:
            task.delay.side_effect = ConnectionError("broker unavailable")
            enqueue(
                NotificationIntent(
                    "client", "+254700000010", templates.REQUEST_APPROVED_CLIENT, APPROVAL_PARAMS
                )
            )
        task.delay.assert_called_once()
