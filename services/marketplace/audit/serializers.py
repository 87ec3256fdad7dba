"""Serializers for audit entries."""
from __future__ import annotations

from rest_framework import serializers

from .models import AuditLogEntry


class AuditLogEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = AuditLogEntry
        fields = ["id", "action", "actor", "status", "detail", "timestamp"]
        read_only_fields = fields
