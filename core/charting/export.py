"""CSV export of rendered chart series."""

from __future__ import annotations

import csv
import io
import re

from core.charting.render import RenderedChart

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def series_csv(rendered: RenderedChart) -> str:
    """Return the rendered series as CSV text.

    The header row names the category and value columns (or `bin`/`count`
    for histograms).
    """

    config = rendered.config
    if config.chart_kind == "histogram":
        header = ["bin", "count"]
    else:
        header = [config.category_column or "label", config.value_column or "value"]

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(header)
    for point in rendered.series:
        value = int(point.value) if config.chart_kind == "histogram" else point.value
        writer.writerow([point.label, value])
    return buffer.getvalue()


def export_filename(rendered: RenderedChart) -> str:
    """Return a download file name for a rendered chart's CSV."""

    stem = f"bank-analytics-chart-{rendered.config.chart_kind}"
    return _UNSAFE_FILENAME_CHARS.sub("-", stem) + ".csv"
