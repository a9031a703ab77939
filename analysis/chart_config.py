"""Chart configuration DTO, validation, and series selection.

A `ChartConfig` is owned by the UI session and never persisted. Every change
(axis pick, filter edit, kind switch) produces a new config and a fresh call
to `build_series`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

from .histogram import bin_series
from .series import SeriesPoint, transform
from .tabular import TabularData

ChartKind = Literal["line", "bar", "pie", "doughnut", "area", "scatter", "histogram"]

CHART_KINDS: tuple[ChartKind, ...] = get_args(ChartKind)
CHART_KIND_LABELS: dict[str, str] = {
    "line": "Line Chart",
    "bar": "Bar Chart",
    "pie": "Pie Chart",
    "doughnut": "Doughnut Chart",
    "area": "Area Chart",
    "scatter": "Scatter Plot",
    "histogram": "Histogram",
}
DEFAULT_CHART_KIND: ChartKind = "bar"

COLOR_PRESETS: tuple[tuple[str, str], ...] = (
    ("Navy", "hsl(213, 56%, 20%)"),
    ("Gold", "hsl(43, 74%, 47%)"),
    ("Emerald", "hsl(142, 76%, 36%)"),
    ("Amber", "hsl(38, 92%, 50%)"),
    ("Rose", "hsl(0, 84%, 60%)"),
    ("Purple", "hsl(262, 83%, 58%)"),
    ("Cyan", "hsl(190, 90%, 50%)"),
    ("Pink", "hsl(340, 82%, 52%)"),
    ("Teal", "hsl(172, 66%, 50%)"),
    ("Indigo", "hsl(234, 89%, 74%)"),
    ("Orange", "hsl(25, 95%, 53%)"),
    ("Lime", "hsl(84, 81%, 44%)"),
)
COLOR_BY_NAME: dict[str, str] = dict(COLOR_PRESETS)
DEFAULT_COLOR = COLOR_PRESETS[0][0]

ZOOM_MIN = 50
ZOOM_MAX = 150
ZOOM_STEP = 10
ZOOM_DEFAULT = 100


@dataclass(frozen=True, slots=True)
class ChartConfig:
    """UI-held chart configuration.

    Args:
        chart_kind: Visualization type.
        category_column: Header used for labels, or None when unset.
        value_column: Header used for values, or None when unset.
        min_filter: Optional inclusive lower bound on values.
        max_filter: Optional inclusive upper bound on values.
        color: Name of the leading color preset.
        zoom: Chart zoom in percent.
    """

    chart_kind: ChartKind = DEFAULT_CHART_KIND
    category_column: str | None = None
    value_column: str | None = None
    min_filter: float | None = None
    max_filter: float | None = None
    color: str = DEFAULT_COLOR
    zoom: int = ZOOM_DEFAULT

    @property
    def axes_selected(self) -> bool:
        """Return True when both axes have been picked."""

        return bool(self.category_column) and bool(self.value_column)


@dataclass(frozen=True, slots=True)
class ChartConfigValidationResult:
    """Validation result for a ChartConfig.

    Args:
        is_valid: True when no errors exist.
        errors: Fatal validation errors.
        warnings: Non-fatal notes intended for UI display.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_chart_config(config: ChartConfig, *, table: TabularData | None) -> ChartConfigValidationResult:
    """Validate a ChartConfig against the current upload.

    Unset axes are not an error: the UI shows a neutral "select axes" state.

    Args:
        config: Configuration to check.
        table: Current upload, or None when nothing is uploaded.

    Returns:
        ChartConfigValidationResult with errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []

    if config.chart_kind not in CHART_KINDS:
        errors.append(f"Unknown chart kind: {config.chart_kind!r}.")
    if config.color not in COLOR_BY_NAME:
        errors.append(f"Unknown color preset: {config.color!r}.")
    if not ZOOM_MIN <= config.zoom <= ZOOM_MAX:
        errors.append(f"Zoom must be between {ZOOM_MIN}% and {ZOOM_MAX}%.")
    if (
        config.min_filter is not None
        and config.max_filter is not None
        and config.min_filter > config.max_filter
    ):
        errors.append("Minimum filter must be less than or equal to the maximum filter.")

    if table is None:
        warnings.append("Upload a spreadsheet to generate charts.")
    elif not config.axes_selected:
        warnings.append("Select a category column and a value column.")
    else:
        for label, column in (("Category", config.category_column), ("Value", config.value_column)):
            if table.column_index(column) is None:
                errors.append(f"{label} column not found: {column!r}.")

    return ChartConfigValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def build_series(table: TabularData | None, config: ChartConfig) -> tuple[SeriesPoint, ...]:
    """Return the chart series for `config`, binned for histograms.

    Args:
        table: Current upload, or None.
        config: Chart configuration.

    Returns:
        Pointwise series, or frequency buckets when the kind is `histogram`.
    """

    if table is None:
        return ()
    points = transform(
        table,
        config.category_column,
        config.value_column,
        config.min_filter,
        config.max_filter,
    )
    if config.chart_kind == "histogram":
        return bin_series(points)
    return points
