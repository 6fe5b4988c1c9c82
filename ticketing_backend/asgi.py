"""
ASGI entry point for the ticketing backend.

The default settings module is the development configuration; deployments
override DJANGO_SETTINGS_MODULE.
"""

import os

from django.conf import settings
from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ticketing_backend.settings.dev")

application = get_asgi_application()

if settings.DEBUG:
    from django.contrib.staticfiles.handlers import ASGIStaticFilesHandler

    application = ASGIStaticFilesHandler(application)
