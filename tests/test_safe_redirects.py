"""Unit tests for centralized safe redirects."""

from __future__ import annotations

import pytest
from django.test import RequestFactory

from core.redirects import is_safe_next, redirect_to_next

pytestmark = pytest.mark.unit


def test_redirect_to_next_allows_relative_url() -> None:
    """Relative paths are treated as safe and are redirected to directly."""

    request = RequestFactory().get("/source", {"next": "/graphs/"})
    response = redirect_to_next(request, fallback="/fallback")
    assert response.status_code == 302
    assert response["Location"] == "/graphs/"


def test_redirect_to_next_prefers_post_value() -> None:
    """A `next` field in the POST body wins over the query string."""

    request = RequestFactory().post("/source?next=/from-query/", {"next": "/from-body/"})
    response = redirect_to_next(request, fallback="/fallback")
    assert response["Location"] == "/from-body/"


def test_redirect_to_next_rejects_external_url() -> None:
    """External hosts are rejected and fall back to the provided safe URL."""

    request = RequestFactory().get("/source", {"next": "https://example.invalid/evil"})
    response = redirect_to_next(request, fallback="/fallback")
    assert response.status_code == 302
    assert response["Location"] == "/fallback"


def test_is_safe_next_rejects_http_when_secure_request() -> None:
    """HTTPS requests reject `http://` redirect targets."""

    request = RequestFactory().get("/source", secure=True)
    assert is_safe_next(request, "http://testserver/insecure") is False


def test_is_safe_next_rejects_blank_values() -> None:
    """Missing or whitespace-only values are never followed."""

    request = RequestFactory().get("/source")
    assert is_safe_next(request, None) is False
    assert is_safe_next(request, "   ") is False
