from django.apps import AppConfig


class CommonConfig(AppConfig):
    """Shared error taxonomy and API plumbing."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "common"
