"""In-memory tabular data parsed from an uploaded spreadsheet.

`TabularData` is produced once per upload and replaced wholesale on the next
one. It is never mutated in place, so downstream transforms can treat it as a
plain value.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union

Cell = Union[int, float, str, None]
"""A single spreadsheet cell: numeric, textual, or absent (`None`)."""

TABULAR_PAYLOAD_VERSION = 1


@dataclass(frozen=True, slots=True)
class TabularData:
    """Column headers plus rectangular rows from the first worksheet.

    Args:
        headers: Ordered column names. Uniqueness is not required; lookups use
            the first matching header.
        rows: Ordered rows, each holding exactly `len(headers)` cells.
        source_name: Base file name of the uploaded workbook.
        imported_at: Timezone-aware instant the workbook was parsed.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[Cell, ...], ...]
    source_name: str
    imported_at: datetime

    @property
    def row_count(self) -> int:
        """Return the number of data rows (the header row is not counted)."""

        return len(self.rows)

    @property
    def column_count(self) -> int:
        """Return the number of columns."""

        return len(self.headers)

    def column_index(self, name: str | None) -> int | None:
        """Return the position of the first header equal to `name`.

        Args:
            name: Header name, or None when the column is unset.

        Returns:
            Zero-based column index, or None when unset or missing.
        """

        if not name:
            return None
        try:
            return self.headers.index(name)
        except ValueError:
            return None

    def preview(self, limit: int) -> tuple[tuple[Cell, ...], ...]:
        """Return at most `limit` leading rows for display."""

        return self.rows[: max(0, limit)]

    def records(self) -> list[dict[str, Cell]]:
        """Return rows as header-keyed dictionaries.

        Later duplicate headers overwrite earlier ones, matching the shape the
        JSON API has always returned.
        """

        return [dict(zip(self.headers, row)) for row in self.rows]


def build_tabular_data(
    *,
    headers: Sequence[str],
    rows: Iterable[Sequence[Cell]],
    source_name: str,
    imported_at: datetime | None = None,
) -> TabularData:
    """Build a TabularData, padding or truncating rows to the header width.

    Args:
        headers: Column names in order.
        rows: Data rows; short rows are padded with None.
        source_name: Base file name of the source workbook.
        imported_at: Optional import instant; defaults to now (UTC).

    Returns:
        A rectangular TabularData.
    """

    width = len(headers)
    normalized = tuple(_fit_row(row, width) for row in rows)
    return TabularData(
        headers=tuple(str(h) for h in headers),
        rows=normalized,
        source_name=source_name,
        imported_at=imported_at or datetime.now(timezone.utc),
    )


def _fit_row(row: Sequence[Cell], width: int) -> tuple[Cell, ...]:
    cells = tuple(row[:width])
    if len(cells) < width:
        cells = cells + (None,) * (width - len(cells))
    return cells


def is_blank_cell(cell: object) -> bool:
    """Return True when a cell is absent or an empty/whitespace-only string."""

    if cell is None:
        return True
    return isinstance(cell, str) and not cell.strip()


def is_blank_row(row: Iterable[object]) -> bool:
    """Return True when every cell in `row` is blank."""

    return all(is_blank_cell(cell) for cell in row)


def encode_tabular_data(table: TabularData) -> dict[str, Any]:
    """Encode a TabularData into a JSON-serializable dictionary.

    Args:
        table: TabularData to encode.

    Returns:
        Dict payload safe for session or JSONField storage.
    """

    return {
        "version": TABULAR_PAYLOAD_VERSION,
        "headers": list(table.headers),
        "rows": [list(row) for row in table.rows],
        "source_name": table.source_name,
        "imported_at": table.imported_at.isoformat(),
    }


def decode_tabular_data(payload: dict[str, Any]) -> TabularData:
    """Decode a TabularData from a payload produced by `encode_tabular_data`.

    Args:
        payload: Stored payload dictionary.

    Returns:
        TabularData instance.

    Raises:
        ValueError: When required fields are missing or malformed.
    """

    if not isinstance(payload, dict):
        raise ValueError("Tabular payload must be a mapping.")
    headers = payload.get("headers")
    rows = payload.get("rows")
    if not isinstance(headers, list) or not isinstance(rows, list):
        raise ValueError("Tabular payload requires `headers` and `rows` lists.")
    for row in rows:
        if not isinstance(row, list):
            raise ValueError("Tabular payload rows must be lists.")

    raw_imported_at = payload.get("imported_at")
    try:
        imported_at = datetime.fromisoformat(str(raw_imported_at))
    except ValueError as exc:
        raise ValueError(f"Invalid imported_at: {raw_imported_at!r}.") from exc
    if imported_at.tzinfo is None:
        imported_at = imported_at.replace(tzinfo=timezone.utc)

    return build_tabular_data(
        headers=[str(h) for h in headers],
        rows=[tuple(_decode_cell(cell) for cell in row) for row in rows],
        source_name=str(payload.get("source_name") or ""),
        imported_at=imported_at,
    )


def _decode_cell(cell: object) -> Cell:
    if isinstance(cell, bool):
        return "TRUE" if cell else "FALSE"
    if cell is None or isinstance(cell, (int, float, str)):
        return cell
    return str(cell)
