"""Database models for persisted spreadsheet uploads."""

from __future__ import annotations

from django.conf import settings
from django.db import models

from analysis.tabular import TabularData, decode_tabular_data, encode_tabular_data


class UploadedDataset(models.Model):
    """The latest upload for a user.

    Each user has at most one row; a new upload overwrites the previous one
    rather than adding a version.
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="dataset")
    filename = models.CharField(max_length=255)
    payload = models.JSONField(default=dict)
    row_count = models.PositiveIntegerField(default=0)
    column_count = models.PositiveIntegerField(default=0)
    imported_at = models.DateTimeField()

    class Meta:
        verbose_name = "Uploaded Dataset"
        verbose_name_plural = "Uploaded Datasets"

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"UploadedDataset(user={self.user_id}, filename={self.filename!r}, rows={self.row_count})"

    def to_table(self) -> TabularData:
        """Decode the stored payload.

        Raises:
            ValueError: When the stored payload is malformed.
        """

        return decode_tabular_data(self.payload)

    @staticmethod
    def fields_for(table: TabularData) -> dict[str, object]:
        """Return model field values for persisting `table`."""

        return {
            "filename": table.source_name[:255],
            "payload": encode_tabular_data(table),
            "row_count": table.row_count,
            "column_count": table.column_count,
            "imported_at": table.imported_at,
        }
