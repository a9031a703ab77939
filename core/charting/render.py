"""Chart.js payload rendering for ChartConfig-driven charts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict

from analysis.chart_config import (
    CHART_KIND_LABELS,
    COLOR_BY_NAME,
    COLOR_PRESETS,
    DEFAULT_COLOR,
    ChartConfig,
    build_series,
    validate_chart_config,
)
from analysis.series import SeriesPoint
from analysis.tabular import TabularData

BASE_CHART_HEIGHT = 400
MAX_SLICES = 8

_CHARTJS_TYPES: dict[str, str] = {
    "line": "line",
    "area": "line",
    "bar": "bar",
    "histogram": "bar",
    "pie": "pie",
    "doughnut": "doughnut",
    "scatter": "scatter",
}


class ChartDataset(TypedDict, total=False):
    """A Chart.js dataset payload."""

    label: str
    data: list[Any]
    borderColor: str
    backgroundColor: str | list[str]
    borderWidth: int
    borderRadius: int
    pointBackgroundColor: str
    pointRadius: int
    fill: bool
    tension: float
    barPercentage: float
    categoryPercentage: float


class ChartData(TypedDict):
    """The full Chart.js payload (labels + datasets)."""

    labels: list[str]
    datasets: list[ChartDataset]


@dataclass(frozen=True, slots=True)
class RenderedChart:
    """A rendered chart panel produced from a ChartConfig."""

    config: ChartConfig
    chart_type: str
    data: ChartData
    series: tuple[SeriesPoint, ...]
    height: int
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Return True when there is nothing to draw."""

        return not self.series

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable payload for the browser."""

        return {
            "type": self.chart_type,
            "title": CHART_KIND_LABELS.get(self.config.chart_kind, self.config.chart_kind),
            "data": self.data,
            "height": self.height,
            "series": [{"label": point.label, "value": point.value} for point in self.series],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


def palette(color: str) -> list[str]:
    """Return the preset colors with the selected one first."""

    lead = COLOR_BY_NAME.get(color, COLOR_BY_NAME[DEFAULT_COLOR])
    return [lead, *(value for _name, value in COLOR_PRESETS if value != lead)]


def chart_height(zoom: int) -> int:
    """Return the chart height in pixels for a zoom percentage."""

    return round(BASE_CHART_HEIGHT * zoom / 100)


def render_chart(*, config: ChartConfig, table: TabularData | None) -> RenderedChart:
    """Render a chart payload for `config` over the current upload.

    Invalid configurations render empty with their validation errors; an
    unset axis renders empty with a neutral warning.

    Args:
        config: Chart configuration from the UI.
        table: Current upload, or None.

    Returns:
        RenderedChart with Chart.js labels/datasets and the underlying series.
    """

    validation = validate_chart_config(config, table=table)
    chart_type = _CHARTJS_TYPES.get(config.chart_kind, "bar")
    height = chart_height(config.zoom) if validation.is_valid else BASE_CHART_HEIGHT
    if not validation.is_valid:
        return RenderedChart(
            config=config,
            chart_type=chart_type,
            data={"labels": [], "datasets": []},
            series=(),
            height=height,
            errors=validation.errors,
            warnings=validation.warnings,
        )

    series = build_series(table, config)
    return RenderedChart(
        config=config,
        chart_type=chart_type,
        data=_chart_data(config=config, series=series),
        series=series,
        height=height,
        warnings=validation.warnings,
    )


def _chart_data(*, config: ChartConfig, series: tuple[SeriesPoint, ...]) -> ChartData:
    colors = palette(config.color)
    label = config.value_column or "value"
    kind = config.chart_kind

    if kind in ("pie", "doughnut"):
        sliced = series[:MAX_SLICES]
        return {
            "labels": [point.label for point in sliced],
            "datasets": [
                {
                    "label": label,
                    "data": [point.value for point in sliced],
                    "backgroundColor": [colors[i % len(colors)] for i in range(len(sliced))],
                    "borderWidth": 1,
                }
            ],
        }

    labels = [point.label for point in series]
    values = [point.value for point in series]
    if kind == "scatter":
        return {
            "labels": labels,
            "datasets": [
                {
                    "label": label,
                    "data": [{"x": index, "y": value} for index, value in enumerate(values)],
                    "backgroundColor": colors[0],
                    "pointRadius": 5,
                }
            ],
        }
    if kind == "histogram":
        return {
            "labels": labels,
            "datasets": [
                {
                    "label": "Frequency",
                    "data": values,
                    "backgroundColor": colors[2],
                    "borderRadius": 4,
                    "barPercentage": 1.0,
                    "categoryPercentage": 1.0,
                }
            ],
        }
    if kind == "bar":
        return {
            "labels": labels,
            "datasets": [{"label": label, "data": values, "backgroundColor": colors[0], "borderRadius": 4}],
        }

    return {
        "labels": labels,
        "datasets": [
            {
                "label": label,
                "data": values,
                "borderColor": colors[0],
                "backgroundColor": colors[0],
                "pointBackgroundColor": colors[0],
                "borderWidth": 2,
                "tension": 0.3,
                "fill": kind == "area",
            }
        ],
    }
