"""Route registration for audit endpoints."""
from __future__ import annotations

from django.urls import path

from .views import AuditLogViewSet

audit_log_list = AuditLogViewSet.as_view({"get": "list", "delete": "clear"})
audit_log_detail = AuditLogViewSet.as_view({"get": "retrieve", "delete": "destroy"})

urlpatterns = [
    path("logs/", audit_log_list, name="audit-log-list"),
    path("logs/<int:pk>/", audit_log_detail, name="audit-log-detail"),
]
