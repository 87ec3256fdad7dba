"""Route registration for account endpoints."""
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import UserViewSet, pending_providers, provider_status, register

router = SimpleRouter()
router.register("users", UserViewSet, basename="user")

urlpatterns = [
    path("register/", register, name="user-register"),
    path("admin/pending-providers/", pending_providers, name="pending-providers"),
    path(
        "admin/providers/<int:provider_id>/status/",
        provider_status,
        name="provider-status",
    ),
    path("", include(router.urls)),
]
