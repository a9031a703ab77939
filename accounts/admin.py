"""Admin registrations for analyst accounts."""

from __future__ import annotations

from django.contrib import admin

from accounts.models import AnalystProfile, ApiSession


@admin.register(AnalystProfile)
class AnalystProfileAdmin(admin.ModelAdmin):
    """Admin configuration for AnalystProfile."""

    list_display = ("user", "display_name", "role")
    list_filter = ("role",)
    search_fields = ("user__username", "display_name")


@admin.register(ApiSession)
class ApiSessionAdmin(admin.ModelAdmin):
    """Admin configuration for ApiSession.

    Tokens are never shown in full.
    """

    list_display = ("user", "short_token", "created_at", "expires_at")
    list_filter = ("expires_at",)
    search_fields = ("user__username",)
    exclude = ("token",)
    readonly_fields = ("user", "created_at", "expires_at")

    @admin.display(description="Token")
    def short_token(self, obj: ApiSession) -> str:
        """Return a truncated token for display."""

        return f"{obj.token[:8]}…"
