"""Serializers for contact request entities."""
from __future__ import annotations

from rest_framework import serializers

from .models import ContactRequest


class ContactRequestSerializer(serializers.ModelSerializer):
    client_id = serializers.IntegerField(read_only=True)
    provider_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = ContactRequest
        fields = [
            "id",
            "client_id",
            "client_name",
            "provider_id",
            "provider_name",
            "message",
            "task_description",
            "estimated_budget",
            "status",
            "created_at",
            "approved_at",
            "resolved_at",
        ]
        read_only_fields = fields


class ContactRequestCreateSerializer(serializers.Serializer):
    client_id = serializers.IntegerField()
    client_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    provider_id = serializers.IntegerField()
    provider_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    message = serializers.CharField(required=False, allow_blank=True, default="")
    task_description = serializers.CharField(required=False, allow_blank=True, default="")
    estimated_budget = serializers.CharField(
        max_length=64, required=False, allow_blank=True, allow_null=True, default=""
    )


class TransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=list(ContactRequest.TERMINAL_STATUSES))
