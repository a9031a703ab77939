"""Views for sign-in, the dashboard, spreadsheet upload, and charts."""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth import login as auth_login
from django.contrib.auth.decorators import login_required
from django.contrib.auth.forms import AuthenticationForm
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_GET, require_POST

from analysis.chart_config import CHART_KIND_LABELS, CHART_KINDS
from analysis.columns import value_range
from analysis.tabular import TabularData
from core.charting.export import export_filename, series_csv
from core.charting.render import RenderedChart, render_chart
from core.demo import demo_mode_enabled
from core.forms import ChartConfigForm, SpreadsheetUploadForm
from core.parsers.spreadsheet import SpreadsheetParseError
from core.redirects import redirect_to_next
from core.services import dataset_store_for_request, import_spreadsheet

logger = logging.getLogger(__name__)


def login_view(request: HttpRequest) -> HttpResponse:
    """Render and process the sign-in form.

    In demo mode the allowlisted credentials are accepted by
    `DemoCredentialsBackend`; otherwise passwords are checked against the
    stored hashes.
    """

    if request.user.is_authenticated:
        return redirect(settings.LOGIN_REDIRECT_URL)

    next_url = request.POST.get("next") or request.GET.get("next", "")
    form = AuthenticationForm(request, data=request.POST if request.method == "POST" else None)
    if request.method == "POST" and form.is_valid():
        user = form.get_user()
        auth_login(request, user)
        logger.info("User %s signed in", user.get_username())
        return redirect_to_next(request, fallback=settings.LOGIN_REDIRECT_URL)

    return render(request, "registration/login.html", {"form": form, "next": next_url})


@login_required
def dashboard(request: HttpRequest) -> HttpResponse:
    """Render the landing dashboard with upload/chart shortcuts and stats."""

    table = dataset_store_for_request(request).load()
    profile = getattr(request.user, "profile", None)
    display_name = (profile.display_name if profile else "") or request.user.get_username()
    stats = [
        {"label": "Files Uploaded", "value": "1" if table is not None else "0"},
        {"label": "Charts Available", "value": str(len(CHART_KINDS))},
        {"label": "Storage", "value": "Browser session" if demo_mode_enabled() else "Database"},
        {"label": "Session Status", "value": "Active"},
    ]
    return render(
        request,
        "core/dashboard.html",
        {
            "display_name": display_name,
            "role": profile.get_role_display() if profile else "",
            "stats": stats,
            "table": table,
        },
    )


@login_required
def upload(request: HttpRequest) -> HttpResponse:
    """Accept an Excel upload and preview the current data.

    A successful upload replaces the stored data wholesale. A failed upload
    leaves the previous data untouched and reports a single message.
    """

    store = dataset_store_for_request(request)
    form = SpreadsheetUploadForm()

    if request.method == "POST":
        form = SpreadsheetUploadForm(request.POST, request.FILES)
        if form.is_valid():
            upload_file = form.cleaned_data["file"]
            try:
                table = import_spreadsheet(upload_file, source_name=upload_file.name, store=store)
            except SpreadsheetParseError as exc:
                logger.warning("Rejected upload %r: %s", upload_file.name, exc)
                form.add_error("file", str(exc))
            else:
                messages.success(
                    request,
                    f"Imported {table.source_name}: {table.row_count} rows, {table.column_count} columns.",
                )
                return redirect("core:upload")

    table = store.load()
    preview_limit = settings.BANK_PREVIEW_ROWS
    return render(
        request,
        "core/upload.html",
        {
            "form": form,
            "table": table,
            "preview_rows": table.preview(preview_limit) if table is not None else (),
            "preview_limit": preview_limit,
            "preview_truncated": table is not None and table.row_count > preview_limit,
            "max_upload_bytes": settings.BANK_UPLOAD_MAX_BYTES,
        },
    )


@login_required
@require_POST
def clear_data(request: HttpRequest) -> HttpResponse:
    """Remove the current upload."""

    dataset_store_for_request(request).clear()
    messages.success(request, "Uploaded data cleared.")
    return redirect_to_next(request, fallback=reverse("core:upload"))


def _chart_for_request(request: HttpRequest) -> tuple[ChartConfigForm, RenderedChart, TabularData | None]:
    """Bind chart controls from the query string and render the chart."""

    table = dataset_store_for_request(request).load()
    form = ChartConfigForm(request.GET or None, table=table)
    if form.is_bound:
        form.is_valid()
    rendered = render_chart(config=form.to_config(), table=table)
    return form, rendered, table


@login_required
@require_GET
def graphs(request: HttpRequest) -> HttpResponse:
    """Render chart controls plus the Chart.js payload for the current upload."""

    form, rendered, table = _chart_for_request(request)
    config = rendered.config
    return render(
        request,
        "core/graphs.html",
        {
            "form": form,
            "table": table,
            "rendered": rendered,
            "chart_payload": rendered.as_json(),
            "chart_kinds": [(kind, CHART_KIND_LABELS[kind]) for kind in CHART_KINDS],
            "value_range": value_range(table, config.value_column) if table is not None else None,
            "query": request.GET.urlencode(),
        },
    )


@login_required
@require_GET
def graphs_data(request: HttpRequest) -> JsonResponse:
    """Return the chart payload for the current query as JSON."""

    _form, rendered, _table = _chart_for_request(request)
    status = 400 if rendered.errors else 200
    return JsonResponse(rendered.as_json(), status=status)


@login_required
@require_GET
def export_series_csv(request: HttpRequest) -> HttpResponse:
    """Export the rendered chart series as CSV."""

    _form, rendered, _table = _chart_for_request(request)
    if rendered.is_empty:
        return HttpResponse(
            "No chart data to export. Upload data and select both axes, then try again.\n",
            content_type="text/plain; charset=utf-8",
            status=400,
        )

    response = HttpResponse(series_csv(rendered), content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{export_filename(rendered)}"'
    return response
