"""JSON REST endpoints for token-authenticated clients.

Every endpoint responds with JSON. Failures use the shape
`{"success": false, "error": "<message>"}` with an appropriate status code.
Authentication uses `Authorization: Bearer <token>` headers issued by the
login endpoint, so these views are exempt from CSRF checks.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from functools import wraps

from django.contrib.auth import authenticate
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from accounts.tokens import ApiAuthError, bearer_token, issue_token, resolve_token, revoke_token
from analysis.chart_config import CHART_KINDS, DEFAULT_CHART_KIND, ChartConfig, build_series, validate_chart_config
from analysis.tabular import TabularData
from core.demo import demo_mode_enabled
from core.forms import ApiLoginForm, SpreadsheetUploadForm
from core.parsers.spreadsheet import SpreadsheetParseError
from core.services import DatabaseDatasetStore, import_spreadsheet

logger = logging.getLogger(__name__)

ApiView = Callable[..., JsonResponse]


def error_response(message: str, status: int = 400) -> JsonResponse:
    """Return the standard JSON error payload."""

    return JsonResponse({"success": False, "error": message}, status=status)


def api_endpoint(*methods: str, auth: bool = True) -> Callable[[ApiView], ApiView]:
    """Wrap a JSON view with method checks, token auth, and error translation.

    Args:
        methods: Allowed HTTP methods.
        auth: When True, resolve the bearer token and set `request.api_user`.

    Returns:
        A decorator producing a CSRF-exempt view.
    """

    def decorator(view: ApiView) -> ApiView:
        @csrf_exempt
        @wraps(view)
        def wrapped(request: HttpRequest, *args, **kwargs) -> JsonResponse:
            if request.method not in methods:
                response = error_response("Method not allowed", 405)
                response["Allow"] = ", ".join(methods)
                return response
            try:
                if auth:
                    session = resolve_token(bearer_token(request))
                    request.api_user = session.user
                return view(request, *args, **kwargs)
            except ApiAuthError as exc:
                return error_response(exc.message, exc.status)
            except Exception:
                logger.exception("%s failed", view.__name__)
                return error_response("Request failed. Please try again.", 500)

        return wrapped

    return decorator


def _json_body(request: HttpRequest) -> dict[str, object] | None:
    try:
        payload = json.loads(request.body or b"null")
    except (ValueError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def _user_payload(user) -> dict[str, object]:
    profile = getattr(user, "profile", None)
    return {
        "id": user.pk,
        "username": user.get_username(),
        "name": (profile.display_name if profile else "") or user.get_username(),
        "role": profile.role if profile else "user",
        "email": user.email or None,
    }


def _table_payload(table: TabularData | None) -> dict[str, object]:
    if table is None:
        return {"data": [], "headers": [], "filename": None, "rowCount": 0}
    return {
        "data": table.records(),
        "headers": list(table.headers),
        "filename": table.source_name,
        "rowCount": table.row_count,
        "uploadedAt": table.imported_at.isoformat(),
    }


@api_endpoint("GET", auth=False)
def status(request: HttpRequest) -> JsonResponse:
    """Report whether the portal runs in demo mode."""

    demo = demo_mode_enabled()
    return JsonResponse({"isDemoMode": demo, "isConfigured": not demo})


@api_endpoint("POST", auth=False)
def login(request: HttpRequest) -> JsonResponse:
    """Exchange a username/password pair for a bearer token."""

    payload = _json_body(request)
    if payload is None:
        return error_response("Invalid JSON input")

    missing = [name for name in ("username", "password") if not payload.get(name)]
    if missing:
        return error_response(f"Missing required fields: {', '.join(missing)}")

    form = ApiLoginForm(data={"username": str(payload["username"]).strip(), "password": payload["password"]})
    if not form.is_valid():
        if "username" in form.errors:
            return error_response("Invalid username format")
        return error_response("Invalid username or password", 401)

    user = authenticate(
        request,
        username=form.cleaned_data["username"],
        password=form.cleaned_data["password"],
    )
    if user is None:
        return error_response("Invalid username or password", 401)

    session = issue_token(user)
    logger.info("Issued API token for %s", user.get_username())
    return JsonResponse({"success": True, "user": _user_payload(user), "token": session.token})


@api_endpoint("POST", auth=False)
def logout(request: HttpRequest) -> JsonResponse:
    """Delete the session for the presented bearer token."""

    revoke_token(bearer_token(request))
    return JsonResponse({"success": True})


@api_endpoint("GET")
def session(request: HttpRequest) -> JsonResponse:
    """Return the user behind the presented bearer token."""

    return JsonResponse({"user": _user_payload(request.api_user)})


@api_endpoint("POST")
def upload(request: HttpRequest) -> JsonResponse:
    """Parse an uploaded workbook and overwrite the user's stored data."""

    if "file" not in request.FILES:
        return error_response("No file uploaded")

    form = SpreadsheetUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        return error_response(" ".join(form.errors.get("file", ["Upload error"])))

    upload_file = form.cleaned_data["file"]
    try:
        table = import_spreadsheet(
            upload_file,
            source_name=upload_file.name,
            store=DatabaseDatasetStore(request.api_user),
        )
    except SpreadsheetParseError as exc:
        logger.warning("Rejected API upload %r: %s", upload_file.name, exc)
        return error_response(str(exc))

    return JsonResponse({"success": True, **_table_payload(table)})


@api_endpoint("GET", "DELETE")
def data(request: HttpRequest) -> JsonResponse:
    """Return (GET) or clear (DELETE) the user's latest upload."""

    store = DatabaseDatasetStore(request.api_user)
    if request.method == "DELETE":
        store.clear()
        return JsonResponse({"success": True})
    return JsonResponse(_table_payload(store.load()))


@api_endpoint("POST")
def series(request: HttpRequest) -> JsonResponse:
    """Compute a chart series over the user's stored upload."""

    payload = _json_body(request)
    if payload is None:
        return error_response("Invalid JSON input")

    try:
        min_filter = _optional_float(payload.get("min"))
        max_filter = _optional_float(payload.get("max"))
    except (TypeError, ValueError):
        return error_response("Filters must be numbers")

    chart_kind = str(payload.get("chartKind") or DEFAULT_CHART_KIND)
    if chart_kind not in CHART_KINDS:
        return error_response(f"Unknown chart kind: {chart_kind!r}")

    config = ChartConfig(
        chart_kind=chart_kind,  # type: ignore[arg-type]
        category_column=_optional_str(payload.get("categoryColumn")),
        value_column=_optional_str(payload.get("valueColumn")),
        min_filter=min_filter,
        max_filter=max_filter,
    )
    table = DatabaseDatasetStore(request.api_user).load()
    validation = validate_chart_config(config, table=table)
    points = build_series(table, config) if validation.is_valid else ()
    return JsonResponse(
        {
            "series": [{"label": point.label, "value": point.value} for point in points],
            "errors": list(validation.errors),
            "warnings": list(validation.warnings),
        },
        status=200 if validation.is_valid else 400,
    )


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("Boolean is not a number.")
    return float(value)  # type: ignore[arg-type]


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None
