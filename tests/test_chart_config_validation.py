"""Unit tests for ChartConfig validation and series selection."""

from __future__ import annotations

import pytest

from analysis.chart_config import (
    CHART_KINDS,
    ChartConfig,
    build_series,
    validate_chart_config,
)

pytestmark = pytest.mark.unit


def test_chart_kinds_cover_every_supported_visualization() -> None:
    """All seven chart kinds are selectable."""

    assert set(CHART_KINDS) == {"line", "bar", "pie", "doughnut", "area", "scatter", "histogram"}


def test_validation_warns_without_upload() -> None:
    """No upload is a neutral state, not an error."""

    result = validate_chart_config(ChartConfig(), table=None)
    assert result.is_valid is True
    assert result.warnings == ("Upload a spreadsheet to generate charts.",)


def test_validation_warns_when_axes_unset(branch_table) -> None:
    """Unset axes prompt the user instead of failing."""

    result = validate_chart_config(ChartConfig(category_column="Branch"), table=branch_table)
    assert result.is_valid is True
    assert result.warnings == ("Select a category column and a value column.",)


def test_validation_rejects_unknown_columns(branch_table) -> None:
    """Columns must exist in the current upload."""

    config = ChartConfig(category_column="Branch", value_column="Missing")
    result = validate_chart_config(config, table=branch_table)
    assert result.is_valid is False
    assert any("Value column not found" in error for error in result.errors)


def test_validation_rejects_crossed_filters(branch_table) -> None:
    """Minimum above maximum is a configuration error."""

    config = ChartConfig(category_column="Branch", value_column="Balance", min_filter=10, max_filter=5)
    result = validate_chart_config(config, table=branch_table)
    assert result.is_valid is False
    assert any("Minimum filter" in error for error in result.errors)


@pytest.mark.parametrize(
    "config",
    [
        ChartConfig(chart_kind="radar"),  # type: ignore[arg-type]
        ChartConfig(color="Chartreuse"),
        ChartConfig(zoom=40),
        ChartConfig(zoom=160),
    ],
)
def test_validation_rejects_unknown_kind_color_and_zoom(config: ChartConfig) -> None:
    """Kind, color, and zoom must come from the supported sets."""

    assert validate_chart_config(config, table=None).is_valid is False


def test_build_series_bins_histograms(branch_table) -> None:
    """Histogram configs return frequency buckets instead of raw points."""

    config = ChartConfig(chart_kind="histogram", category_column="Branch", value_column="Balance")
    series = build_series(branch_table, config)
    assert sum(point.value for point in series) == 3
    assert len(series) == 2


def test_build_series_applies_filters(branch_table) -> None:
    """Pointwise kinds return filtered raw points."""

    config = ChartConfig(chart_kind="line", category_column="Branch", value_column="Balance", max_filter=100)
    assert [point.label for point in build_series(branch_table, config)] == ["North", "Central"]


def test_build_series_without_table_is_empty() -> None:
    """Without an upload there is nothing to chart."""

    assert build_series(None, ChartConfig(category_column="a", value_column="b")) == ()
