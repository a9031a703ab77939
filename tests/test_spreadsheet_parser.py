"""Integration tests for Excel workbook parsing."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from pathlib import Path

import pytest
from openpyxl import Workbook

from core.parsers.spreadsheet import (
    SpreadsheetParseError,
    file_extension,
    normalize_cell,
    parse_workbook,
    safe_source_name,
)

pytestmark = pytest.mark.integration

XLS_FIXTURE = Path(__file__).parent / "fixtures" / "deposits.xls"


def test_parse_workbook_reads_headers_and_rows(xlsx_bytes) -> None:
    """The first row becomes headers and later rows become data."""

    imported_at = datetime(2025, 3, 1, tzinfo=timezone.utc)
    content = xlsx_bytes([["Month", "Deposits"], ["Jan", 100], ["Feb", 250.5]])
    table = parse_workbook(content, source_name="deposits.xlsx", imported_at=imported_at)

    assert table.headers == ("Month", "Deposits")
    assert table.rows == (("Jan", 100), ("Feb", 250.5))
    assert table.source_name == "deposits.xlsx"
    assert table.imported_at == imported_at


def test_parse_workbook_drops_blank_rows(xlsx_bytes) -> None:
    """Rows whose cells are all blank are excluded."""

    content = xlsx_bytes([["Month", "Deposits"], ["Jan", 1], [None, None], ["Mar", 3]])
    table = parse_workbook(content, source_name="d.xlsx")
    assert [row[0] for row in table.rows] == ["Jan", "Mar"]


def test_parse_workbook_header_then_blank_row_has_no_rows(xlsx_bytes) -> None:
    """A header followed only by a blank row parses to zero data rows."""

    content = xlsx_bytes([["Month", "Deposits"], [None, None]])
    table = parse_workbook(content, source_name="d.xlsx")
    assert table.headers == ("Month", "Deposits")
    assert table.row_count == 0


def test_parse_workbook_reads_only_first_sheet() -> None:
    """Later worksheets are ignored."""

    workbook = Workbook()
    workbook.active.append(["First"])
    workbook.active.append([1])
    other = workbook.create_sheet("Other")
    other.append(["Second"])
    buffer = io.BytesIO()
    workbook.save(buffer)

    table = parse_workbook(buffer.getvalue(), source_name="two.xlsx")
    assert table.headers == ("First",)
    assert table.rows == ((1,),)


def test_parse_workbook_normalizes_cell_types(xlsx_bytes) -> None:
    """Booleans, dates, and numeric headers become portable cells."""

    content = xlsx_bytes([[2024, "Open", "Flag"], [datetime(2025, 1, 31), "yes", True]])
    table = parse_workbook(content, source_name="types.xlsx")
    assert table.headers == ("2024", "Open", "Flag")
    assert table.rows[0][0].startswith("2025-01-31")
    assert table.rows[0][2] == "TRUE"


def test_parse_workbook_pads_short_rows(xlsx_bytes) -> None:
    """Rows shorter than the header are padded with absent cells."""

    content = xlsx_bytes([["A", "B", "C"], ["x"]])
    table = parse_workbook(content, source_name="short.xlsx")
    assert table.rows == (("x", None, None),)


def test_parse_workbook_accepts_file_objects(xlsx_bytes) -> None:
    """Binary file-like objects are accepted as well as bytes."""

    table = parse_workbook(io.BytesIO(xlsx_bytes([["A"], [1]])), source_name="f.xlsx")
    assert table.row_count == 1


def test_parse_workbook_rejects_empty_sheet() -> None:
    """A first worksheet without any cells has no header row."""

    buffer = io.BytesIO()
    Workbook().save(buffer)
    with pytest.raises(SpreadsheetParseError):
        parse_workbook(buffer.getvalue(), source_name="empty.xlsx")


@pytest.mark.parametrize("name", ["broken.xlsx", "broken.xls"])
def test_parse_workbook_rejects_corrupt_bytes(name: str) -> None:
    """Bytes that are not a workbook raise a typed parse error."""

    with pytest.raises(SpreadsheetParseError, match="Failed to parse Excel file"):
        parse_workbook(b"definitely not a spreadsheet", source_name=name)


def test_parse_workbook_rejects_other_extensions(xlsx_bytes) -> None:
    """Only .xls and .xlsx names are parsed."""

    with pytest.raises(SpreadsheetParseError, match="Invalid file type"):
        parse_workbook(xlsx_bytes([["A"]]), source_name="data.csv")


def test_source_name_helpers_strip_paths() -> None:
    """Client-supplied paths are reduced to a base name."""

    assert safe_source_name("C:\\Users\\me\\Book1.XLSX") == "Book1.XLSX"
    assert file_extension("../reports/Book1.XLSX") == ".xlsx"
    assert file_extension(None) == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, None), (float("nan"), None), ("  ", None), (3, 3), (False, "FALSE"), ("x", "x")],
)
def test_normalize_cell(value, expected) -> None:
    """Reader values map onto the portable cell types."""

    assert normalize_cell(value) == expected


def test_parse_workbook_reads_legacy_xls() -> None:
    """A BIFF8 `.xls` workbook parses through the xlrd reader."""

    table = parse_workbook(XLS_FIXTURE.read_bytes(), source_name="deposits.xls")

    assert table.headers == ("Month", "Deposits")
    assert table.rows == (("Jan", 100), ("Mar", 300.5))
    assert table.source_name == "deposits.xls"
