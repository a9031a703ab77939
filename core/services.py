"""Service-layer functions for the core app.

Services in `core` coordinate persistence concerns (session, ORM,
transactions) with the pure parsing/analysis modules.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Protocol

from django.db import transaction
from django.http import HttpRequest

from analysis.tabular import TabularData, decode_tabular_data, encode_tabular_data
from core.demo import DEMO_DATASET_SESSION_KEY, demo_mode_enabled
from core.parsers.spreadsheet import parse_workbook
from datasets.models import UploadedDataset

logger = logging.getLogger(__name__)


class DatasetStore(Protocol):
    """Holder of the current user's latest upload."""

    def load(self) -> TabularData | None:
        """Return the stored upload, or None when nothing is stored."""

    def save(self, table: TabularData) -> None:
        """Replace the stored upload with `table`."""

    def clear(self) -> None:
        """Remove the stored upload."""


class SessionDatasetStore:
    """Keep the upload in the browser session (demo mode)."""

    def __init__(self, session) -> None:
        """Initialize the store.

        Args:
            session: Django session for the current request.
        """

        self._session = session

    def load(self) -> TabularData | None:
        """Return the session-held upload, dropping it when malformed."""

        payload = self._session.get(DEMO_DATASET_SESSION_KEY)
        if payload is None:
            return None
        try:
            return decode_tabular_data(payload)
        except ValueError:
            logger.warning("Discarding malformed session dataset payload")
            self.clear()
            return None

    def save(self, table: TabularData) -> None:
        """Replace the session-held upload."""

        self._session[DEMO_DATASET_SESSION_KEY] = encode_tabular_data(table)
        self._session.modified = True

    def clear(self) -> None:
        """Remove the session-held upload."""

        self._session.pop(DEMO_DATASET_SESSION_KEY, None)
        self._session.modified = True


class DatabaseDatasetStore:
    """Keep the upload in the `UploadedDataset` table, one row per user."""

    def __init__(self, user) -> None:
        """Initialize the store.

        Args:
            user: Owning authenticated user.
        """

        self._user = user

    def load(self) -> TabularData | None:
        """Return the persisted upload, or None when there is none."""

        record = UploadedDataset.objects.filter(user=self._user).first()
        if record is None:
            return None
        try:
            return record.to_table()
        except ValueError:
            logger.exception("Stored dataset for user %s is malformed", self._user.pk)
            return None

    def save(self, table: TabularData) -> None:
        """Overwrite the user's upload."""

        with transaction.atomic():
            UploadedDataset.objects.update_or_create(user=self._user, defaults=UploadedDataset.fields_for(table))

    def clear(self) -> None:
        """Delete the user's upload."""

        UploadedDataset.objects.filter(user=self._user).delete()


def dataset_store_for_request(request: HttpRequest) -> DatasetStore:
    """Return the store backing the browser UI for this request.

    Demo mode keeps uploads in the session; otherwise they are persisted.
    """

    if demo_mode_enabled():
        return SessionDatasetStore(request.session)
    return DatabaseDatasetStore(request.user)


def import_spreadsheet(source: bytes | BinaryIO, *, source_name: str, store: DatasetStore) -> TabularData:
    """Parse a workbook and replace the stored upload with it.

    The store is only written after the whole workbook parses, so a failed
    upload leaves the previous data untouched.

    Args:
        source: Workbook bytes or binary file-like object.
        source_name: Original upload file name.
        store: Destination store.

    Returns:
        The parsed TabularData.

    Raises:
        SpreadsheetParseError: When the workbook cannot be parsed.
    """

    table = parse_workbook(source, source_name=source_name)
    store.save(table)
    logger.info(
        "Imported %s (%d rows, %d columns)",
        table.source_name,
        table.row_count,
        table.column_count,
    )
    return table
