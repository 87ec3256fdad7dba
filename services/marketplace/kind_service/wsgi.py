"""WSGI config for the KIND marketplace service."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "kind_service.settings")

application = get_wsgi_application()
