"""Message thread routes."""
from __future__ import annotations

from django.urls import path

from . import views

urlpatterns = [
    path("messages/", views.MessageCollectionView.as_view(), name="message-list"),
    path(
        "messages/<int:contact_request_id>/",
        views.MessageThreadView.as_view(),
        name="message-thread",
    ),
    path("messages/<int:message_id>/read/", views.MessageReadView.as_view(), name="message-read"),
]
