"""Serializers for marketplace accounts."""
from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "status",
            "phone_number",
            "service",
            "location",
            "motivation",
            "qualifications",
            "rating",
            "jobs_done",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "role",
            "status",
            "rating",
            "jobs_done",
            "created_at",
            "updated_at",
        ]

    def validate_email(self, value: str) -> str:
        others = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if others.exists():
            raise serializers.ValidationError("User already exists.")
        return value.lower()


class RegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.CharField()
    phone_number = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    service = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate_role(self, value: str) -> str:
        role = value.upper()
        if role not in {User.CLIENT, User.PROVIDER, User.ADMIN}:
            raise serializers.ValidationError("Role must be CLIENT, PROVIDER or ADMIN.")
        return role

    def validate_email(self, value: str) -> str:
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("User already exists.")
        return value.lower()

    def to_internal_value(self, data: Dict[str, Any]) -> Dict[str, Any]:  # type: ignore[override]
        """Strip surrounding whitespace from the display name."""

        internal = super().to_internal_value(data)
        internal["name"] = internal["name"].strip()
        return internal


class ProviderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[User.ACTIVE, User.REJECTED])
