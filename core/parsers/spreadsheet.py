"""Spreadsheet parsing for uploaded Excel workbooks.

Parsing is all-or-nothing: a workbook either becomes a fully populated
`TabularData` or raises `SpreadsheetParseError`. Rules:

- Only the first worksheet is read.
- The first row supplies the headers; trailing blank header cells are dropped.
- Every later row is kept unless all of its cells are blank.
"""

from __future__ import annotations

import io
import math
import numbers
from datetime import date, datetime, time
from pathlib import PurePath
from typing import BinaryIO

import numpy as np
import pandas as pd

from analysis.coercion import cell_text
from analysis.tabular import Cell, TabularData, build_tabular_data, is_blank_cell, is_blank_row

READER_ENGINES: dict[str, str] = {
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


class SpreadsheetParseError(ValueError):
    """Raised when an uploaded workbook cannot be turned into tabular data."""


def safe_source_name(filename: str | None) -> str:
    """Return the base name of an uploaded file, dropping any path components."""

    raw = (filename or "").replace("\\", "/")
    return PurePath(raw).name.strip()


def file_extension(filename: str | None) -> str:
    """Return the lower-cased extension of `filename`, including the dot."""

    return PurePath(safe_source_name(filename)).suffix.lower()


def parse_workbook(
    source: bytes | BinaryIO,
    *,
    source_name: str,
    imported_at: datetime | None = None,
) -> TabularData:
    """Parse the first worksheet of an Excel workbook.

    Args:
        source: Workbook bytes or a binary file-like object.
        source_name: Original upload name; its extension selects the reader.
        imported_at: Optional import instant (defaults to now).

    Returns:
        TabularData with headers from the first row and non-blank data rows.

    Raises:
        SpreadsheetParseError: When the extension is unsupported, the reader
            fails, or the first worksheet has no header row.
    """

    name = safe_source_name(source_name)
    extension = file_extension(name)
    engine = READER_ENGINES.get(extension)
    if engine is None:
        raise SpreadsheetParseError("Invalid file type. Only .xls and .xlsx files are allowed.")

    buffer = io.BytesIO(source if isinstance(source, bytes) else source.read())
    try:
        frame = pd.read_excel(buffer, sheet_name=0, header=None, dtype=object, engine=engine)
    except Exception as exc:
        raise SpreadsheetParseError(
            "Failed to parse Excel file. Please ensure it is a valid spreadsheet."
        ) from exc

    grid = [[normalize_cell(value) for value in row] for row in frame.itertuples(index=False, name=None)]
    if not grid:
        raise SpreadsheetParseError("The first worksheet is empty.")

    headers = [cell_text(value) for value in grid[0]]
    while headers and headers[-1] == "":
        headers.pop()
    if not headers:
        raise SpreadsheetParseError("The first row must contain column headers.")

    width = len(headers)
    rows = [row[:width] for row in grid[1:] if not is_blank_row(row[:width])]
    return build_tabular_data(headers=headers, rows=rows, source_name=name, imported_at=imported_at)


def normalize_cell(value: object) -> Cell:
    """Convert a raw reader value into a numeric, textual, or absent cell.

    Args:
        value: Value produced by the Excel reader (Python or numpy scalar).

    Returns:
        `None` for missing/blank values, `int`/`float` for numbers, the text
        `TRUE`/`FALSE` for booleans, ISO strings for dates and times, and
        `str` for everything else.
    """

    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return "TRUE" if bool(value) else "FALSE"
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        number = float(value)
        return number if math.isfinite(number) else None
    if value is pd.NaT:
        return None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    text = str(value)
    return None if is_blank_cell(text) else text
