"""URL configuration for the KIND marketplace service."""
from django.urls import include, path

urlpatterns = [
    path("api/", include("accounts.urls")),
    path("api/", include("audit.urls")),
    path("api/", include("contact_requests.urls")),
    path("api/", include("messaging.urls")),
]
