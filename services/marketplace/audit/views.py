"""API views for browsing and pruning the audit trail."""
from __future__ import annotations

from rest_framework import mixins, status, viewsets
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response

from .models import AuditLogEntry
from .serializers import AuditLogEntrySerializer


class AuditLogViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = AuditLogEntry.objects.all()
    serializer_class = AuditLogEntrySerializer
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ["action", "actor", "detail"]
    ordering_fields = ["timestamp"]
    ordering = ["-timestamp", "-id"]

    def clear(self, request: Request) -> Response:
        """Remove every audit entry."""

        deleted, _ = AuditLogEntry.objects.all().delete()
        return Response({"message": "Cleared", "deleted": deleted}, status=status.HTTP_200_OK)
