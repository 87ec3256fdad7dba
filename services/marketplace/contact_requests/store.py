"""Persistence for contact requests."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from django.db.models import Case, F, IntegerField, QuerySet, Value, When

from accounts.models import User

from .exceptions import NotFound, ValidationError
from .models import ContactRequest


class RequestStore:
    """Repository over :class:`ContactRequest` rows."""

    def queryset(self) -> QuerySet:
        return ContactRequest.objects.select_related("client", "provider")

    def create(
        self,
        client_id: Optional[int],
        provider_id: Optional[int],
        message: str = "",
        task_description: str = "",
        estimated_budget: Any = "",
        client_name: str = "",
        provider_name: str = "",
    ) -> ContactRequest:
        if client_id is None:
            raise ValidationError("client_id is required")
        if provider_id is None:
            raise ValidationError("provider_id is required")

        client = User.objects.filter(pk=client_id).first()
        if client is None:
            raise ValidationError(f"Unknown client {client_id}")
        provider = User.objects.filter(pk=provider_id).first()
        if provider is None:
            raise ValidationError(f"Unknown provider {provider_id}")
        if provider.role != User.PROVIDER:
            raise ValidationError(f"User {provider_id} is not a provider")

        return ContactRequest.objects.create(
            client=client,
            client_name=client_name or client.name,
            provider=provider,
            provider_name=provider_name or provider.name,
            message=message or "",
            task_description=task_description or "",
            estimated_budget="" if estimated_budget is None else str(estimated_budget),
            status=ContactRequest.PENDING,
        )

    def get(self, request_id: int) -> ContactRequest:
        try:
            return self.queryset().get(pk=request_id)
        except ContactRequest.DoesNotExist as exc:
            raise NotFound(f"Contact request {request_id} not found") from exc

    def list_all(self) -> QuerySet:
        return self.queryset().order_by("-created_at", "-id")

    def list_for_client(self, client_id: int) -> QuerySet:
        """Pending requests first, then resolved ones, most recently resolved first."""

        return (
            self.queryset()
            .filter(client_id=client_id)
            .annotate(
                resolved_rank=Case(
                    When(status=ContactRequest.PENDING, then=Value(0)),
                    default=Value(1),
                    output_field=IntegerField(),
                )
            )
            .order_by(
                "resolved_rank",
                F("resolved_at").desc(nulls_last=True),
                "-created_at",
                "-id",
            )
        )

    def list_for_provider(self, provider_id: int) -> QuerySet:
        return (
            self.queryset()
            .filter(provider_id=provider_id, status=ContactRequest.APPROVED)
            .order_by(F("approved_at").desc(nulls_last=True), "-id")
        )

    def resolve(self, request_id: int, status: str, at: datetime) -> bool:
        """Move a pending request to ``status``; False when it was no longer pending."""

        updated = ContactRequest.objects.filter(
            pk=request_id, status=ContactRequest.PENDING
        ).update(
            status=status,
            resolved_at=at,
            approved_at=at if status == ContactRequest.APPROVED else None,
            updated_at=at,
        )
        return updated == 1

    def delete(self, request_id: int) -> None:
        """Delete a request together with its message thread."""

        deleted, _ = ContactRequest.objects.filter(pk=request_id).delete()
        if not deleted:
            raise NotFound(f"Contact request {request_id} not found")
