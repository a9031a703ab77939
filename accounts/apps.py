"""Django app configuration for analyst accounts."""

from __future__ import annotations

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """AppConfig for analyst profiles and API token sessions."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"

    def ready(self) -> None:
        """Register account signal handlers."""

        from accounts import signals  # noqa: F401
