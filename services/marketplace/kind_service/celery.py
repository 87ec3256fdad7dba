"""Celery application for the KIND marketplace service."""
from __future__ import annotations

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "kind_service.settings")

app = Celery("kind_service")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
