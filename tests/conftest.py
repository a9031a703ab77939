"""Pytest fixtures shared across Django integration tests."""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence

import pytest
from django.contrib.auth import get_user_model
from openpyxl import Workbook

from analysis.tabular import TabularData, build_tabular_data

WorkbookFactory = Callable[[Sequence[Sequence[object]]], bytes]


@pytest.fixture
def user(db):
    """Return a logged-in capable User with an associated AnalystProfile."""

    user_model = get_user_model()
    return user_model.objects.create_user(username="alice", password="password")


@pytest.fixture
def auth_client(client, user):
    """Return a Django test client authenticated as the default test user."""

    client.force_login(user)
    return client


@pytest.fixture
def server_mode(settings):
    """Disable demo mode so uploads persist to the database."""

    settings.BANK_DEMO_MODE = False
    return settings


@pytest.fixture
def demo_mode(settings):
    """Enable demo mode so allowlisted credentials and session storage apply."""

    settings.BANK_DEMO_MODE = True
    return settings


def build_xlsx(rows: Sequence[Sequence[object]]) -> bytes:
    """Return `.xlsx` bytes whose first sheet holds `rows` starting at A1."""

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Accounts"
    for row in rows:
        sheet.append(list(row))
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_bytes() -> WorkbookFactory:
    """Return a factory producing `.xlsx` bytes from row sequences."""

    return build_xlsx


@pytest.fixture
def branch_table() -> TabularData:
    """Return a small branch-balance table used across analysis tests."""

    return build_tabular_data(
        headers=["Branch", "Balance", "Notes"],
        rows=[
            ("North", 100, "ok"),
            ("South", "", None),
            ("East", 250.5, "watch"),
            ("West", "n/a", None),
            ("Central", " 75 ", "text number"),
        ],
        source_name="branches.xlsx",
    )


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite is runnable by intent:
    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, commands, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
