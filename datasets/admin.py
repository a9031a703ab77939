"""Admin registrations for uploaded datasets."""

from __future__ import annotations

from django.contrib import admin

from datasets.models import UploadedDataset


@admin.register(UploadedDataset)
class UploadedDatasetAdmin(admin.ModelAdmin):
    """Admin configuration for UploadedDataset."""

    list_display = ("user", "filename", "row_count", "column_count", "imported_at")
    search_fields = ("user__username", "filename")
    readonly_fields = ("payload",)
