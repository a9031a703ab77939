"""Integration tests for the upload page and dataset stores."""

from __future__ import annotations

from pathlib import Path

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from datasets.models import UploadedDataset

pytestmark = pytest.mark.integration

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _upload(content: bytes, name: str = "deposits.xlsx") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, content, content_type=XLSX_CONTENT_TYPE)


@pytest.mark.django_db
def test_upload_page_renders_empty_state(auth_client) -> None:
    """Without data the page shows only the form."""

    response = auth_client.get(reverse("core:upload"))
    assert response.status_code == 200
    assert response.context["table"] is None
    assert 'enctype="multipart/form-data"' in response.content.decode("utf-8")


@pytest.mark.django_db
def test_demo_upload_is_kept_in_session(auth_client, demo_mode, xlsx_bytes) -> None:
    """Demo mode stores the parsed workbook in the browser session only."""

    content = xlsx_bytes([["Month", "Deposits"], ["Jan", 100], ["Feb", 200]])
    response = auth_client.post(reverse("core:upload"), {"file": _upload(content)}, follow=True)

    assert response.status_code == 200
    html = response.content.decode("utf-8")
    assert "Imported deposits.xlsx: 2 rows, 2 columns." in html
    assert response.context["table"].headers == ("Month", "Deposits")
    assert not UploadedDataset.objects.exists()


@pytest.mark.django_db
def test_server_upload_overwrites_single_dataset(auth_client, server_mode, user, xlsx_bytes) -> None:
    """Server mode keeps exactly one dataset per user and replaces it."""

    first = xlsx_bytes([["Month", "Deposits"], ["Jan", 100]])
    second = xlsx_bytes([["Branch", "Loans", "Rate"], ["North", 5, 1.5], ["South", 6, 2.5]])
    auth_client.post(reverse("core:upload"), {"file": _upload(first, "first.xlsx")})
    auth_client.post(reverse("core:upload"), {"file": _upload(second, "second.xlsx")})

    assert UploadedDataset.objects.filter(user=user).count() == 1
    record = UploadedDataset.objects.get(user=user)
    assert record.filename == "second.xlsx"
    assert (record.row_count, record.column_count) == (2, 3)
    assert record.to_table().headers == ("Branch", "Loans", "Rate")


@pytest.mark.django_db
def test_upload_preview_is_truncated(auth_client, settings, xlsx_bytes) -> None:
    """Only the leading preview rows are rendered for large uploads."""

    settings.BANK_PREVIEW_ROWS = 3
    rows = [["Id", "Amount"], *[[i, i * 10] for i in range(1, 8)]]
    response = auth_client.post(reverse("core:upload"), {"file": _upload(xlsx_bytes(rows))}, follow=True)

    assert len(response.context["preview_rows"]) == 3
    assert response.context["preview_truncated"] is True
    assert "Showing first 3 of 7 rows" in response.content.decode("utf-8")


@pytest.mark.django_db
def test_upload_rejects_wrong_extension(auth_client, xlsx_bytes) -> None:
    """Non-Excel file names are rejected before parsing."""

    response = auth_client.post(
        reverse("core:upload"),
        {"file": SimpleUploadedFile("data.csv", b"a,b\n1,2\n", content_type="text/csv")},
    )
    assert response.status_code == 200
    assert "Invalid file type. Only .xls and .xlsx files are allowed." in response.content.decode("utf-8")


@pytest.mark.django_db
def test_upload_rejects_oversized_file(auth_client, settings, xlsx_bytes) -> None:
    """Files above the configured limit are rejected."""

    settings.BANK_UPLOAD_MAX_BYTES = 16
    response = auth_client.post(reverse("core:upload"), {"file": _upload(xlsx_bytes([["A"], [1]]))})
    assert "File size exceeds" in response.content.decode("utf-8")


@pytest.mark.django_db
def test_failed_upload_keeps_previous_data(auth_client, demo_mode, xlsx_bytes) -> None:
    """A corrupt workbook reports an error and leaves the stored data alone."""

    auth_client.post(reverse("core:upload"), {"file": _upload(xlsx_bytes([["Month"], ["Jan"]]), "good.xlsx")})
    response = auth_client.post(reverse("core:upload"), {"file": _upload(b"garbage", "bad.xlsx")})

    assert response.status_code == 200
    assert "Failed to parse Excel file" in response.content.decode("utf-8")
    assert response.context["table"].source_name == "good.xlsx"


@pytest.mark.django_db
def test_clear_data_requires_post_and_removes_upload(auth_client, server_mode, user, xlsx_bytes) -> None:
    """Clearing is POST-only and deletes the stored dataset."""

    auth_client.post(reverse("core:upload"), {"file": _upload(xlsx_bytes([["A"], [1]]))})
    assert auth_client.get(reverse("core:clear_data")).status_code == 405

    response = auth_client.post(reverse("core:clear_data"))
    assert response.status_code == 302
    assert response["Location"] == reverse("core:upload")
    assert not UploadedDataset.objects.filter(user=user).exists()


@pytest.mark.django_db
def test_dashboard_reports_upload_stats(auth_client, demo_mode, xlsx_bytes) -> None:
    """The dashboard counts the current upload and available chart kinds."""

    auth_client.post(reverse("core:upload"), {"file": _upload(xlsx_bytes([["A"], [1]]))})
    response = auth_client.get(reverse("core:dashboard"))

    stats = {stat["label"]: stat["value"] for stat in response.context["stats"]}
    assert stats["Files Uploaded"] == "1"
    assert stats["Charts Available"] == "7"
    assert stats["Storage"] == "Browser session"
    assert "Welcome back, alice!" in response.content.decode("utf-8")


@pytest.mark.django_db
def test_upload_accepts_legacy_xls(auth_client, demo_mode) -> None:
    """Legacy `.xls` uploads are parsed and previewed like `.xlsx` ones."""

    content = (Path(__file__).parent / "fixtures" / "deposits.xls").read_bytes()
    upload = SimpleUploadedFile("deposits.xls", content, content_type="application/vnd.ms-excel")
    response = auth_client.post(reverse("core:upload"), {"file": upload}, follow=True)

    assert "Imported deposits.xls: 2 rows, 2 columns." in response.content.decode("utf-8")
    assert response.context["table"].rows == (("Jan", 100), ("Mar", 300.5))
