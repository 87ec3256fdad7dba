"""ASGI config for the KIND marketplace service."""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "kind_service.settings")

application = get_asgi_application()
