"""Serializers for thread messages."""
from __future__ import annotations

from rest_framework import serializers

from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    contact_request_id = serializers.IntegerField(read_only=True)
    sender_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "contact_request_id",
            "sender_id",
            "sender_name",
            "sender_role",
            "message",
            "created_at",
            "read_at",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    contact_request_id = serializers.IntegerField()
    sender_id = serializers.IntegerField()
    sender_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    sender_role = serializers.ChoiceField(choices=[Message.CLIENT, Message.PROVIDER])
    message = serializers.CharField(trim_whitespace=False)
