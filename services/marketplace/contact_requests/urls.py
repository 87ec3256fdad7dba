"""Route registration for contact request endpoints."""
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ContactRequestViewSet, health

router = DefaultRouter()
router.register("contact-requests", ContactRequestViewSet, basename="contact-request")

urlpatterns = [
    path("healthz/", health, name="kind-health"),
    path("", include(router.urls)),
]
