"""WSGI entry point for the GridShare API."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "gridshare.settings")

application = get_wsgi_application()
