"""
Test settings.

SQLite database, eager Celery, in-memory mail and file storage so the
suite runs without Postgres, Redis, SMTP or S3.
"""
from .base import *  # noqa

DEBUG = False
SECRET_KEY = "test-secret"
ALLOWED_HOSTS = ["*"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}}

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}
MEDIA_URL = "/media/"

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

APP_BASE_URL = "https://tickets.test"
FRONTEND_URL = "https://app.tickets.test"
FEDAPAY_SECRET_KEY = "sk_sandbox_test"
FEDAPAY_API_URL = "https://sandbox-api.fedapay.test"
FEDAPAY_WEBHOOK_SECRET = ""
GUEST_FREE_TICKET_LIMIT = 5

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_CLASSES": [],
}
