"""SMS text templates keyed by template id."""
from __future__ import annotations

from typing import Any, Dict, Mapping

from contact_requests.exceptions import DeliveryError

REQUEST_APPROVED_ADMIN = "request_approved_admin"
REQUEST_APPROVED_CLIENT = "request_approved_client"
REQUEST_APPROVED_PROVIDER = "request_approved_provider"
PROVIDER_STATUS_ADMIN = "provider_status_admin"
PROVIDER_STATUS_PROVIDER = "provider_status_provider"

TEMPLATES: Dict[str, str] = {
    REQUEST_APPROVED_ADMIN: (
        "KIND Alert: Request #{request_id} APPROVED!\n"
        "Client: {client_name}\nProvider: {provider_name}"
    ),
    REQUEST_APPROVED_CLIENT: (
        "Hello {client_name}, your request to {provider_name} has been APPROVED. "
        "Terms & 50% deposit apply."
    ),
    REQUEST_APPROVED_PROVIDER: (
        "Hello {provider_name}, {client_name} has a new approved job for you. "
        "Open KIND to start the conversation."
    ),
    PROVIDER_STATUS_ADMIN: "KIND Alert: Provider {status_text}!\nName: {name}\nEmail: {email}",
    PROVIDER_STATUS_PROVIDER: "Hello {name}, your account has been {status_text}.",
}


def render(template_id: str, params: Mapping[str, Any]) -> str:
    try:
        template = TEMPLATES[template_id]
    except KeyError as exc:
        raise DeliveryError(f"Unknown notification template {template_id!r}") from exc
    try:
        return template.format(**params)
    except KeyError as exc:
        raise DeliveryError(f"Template {template_id!r} is missing parameter {exc}") from exc
