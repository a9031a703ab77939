"""Database models for analyst profiles and REST API sessions."""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone


class AnalystProfile(models.Model):
    """Display metadata attached one-to-one to each auth user."""

    class Role(models.TextChoices):
        """Coarse roles surfaced in the UI and API payloads."""

        ADMIN = "admin", "Admin"
        MANAGER = "manager", "Manager"
        ANALYST = "analyst", "Analyst"
        USER = "user", "User"

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    display_name = models.CharField(max_length=120, blank=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.USER)

    class Meta:
        verbose_name = "Analyst Profile"
        verbose_name_plural = "Analyst Profiles"

    def __str__(self) -> str:
        """Return the display name, falling back to the username."""

        return self.display_name or self.user.get_username()


class ApiSessionQuerySet(models.QuerySet):
    """QuerySet helpers for API token sessions."""

    def active(self, *, now=None) -> "ApiSessionQuerySet":
        """Return sessions whose expiry instant is still in the future."""

        return self.filter(expires_at__gt=now or timezone.now())

    def expired(self, *, now=None) -> "ApiSessionQuerySet":
        """Return sessions that have reached their expiry instant."""

        return self.filter(expires_at__lte=now or timezone.now())


class ApiSession(models.Model):
    """An opaque bearer token mapped to a user with an expiry instant."""

    token = models.CharField(max_length=64, unique=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="api_sessions")
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()

    objects = ApiSessionQuerySet.as_manager()

    class Meta:
        verbose_name = "API Session"
        verbose_name_plural = "API Sessions"

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"ApiSession(user={self.user_id}, token={self.token[:8]}…, expires_at={self.expires_at.isoformat()})"

    @property
    def is_expired(self) -> bool:
        """Return True when the session can no longer authenticate requests."""

        return self.expires_at <= timezone.now()
