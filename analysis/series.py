"""Series Transformer: tabular rows to ordered `(label, value)` points."""

from __future__ import annotations

from dataclasses import dataclass

from .coercion import cell_number, cell_text, is_number
from .tabular import TabularData


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    """A single chart-ready point.

    Args:
        label: Category label (or bin range for histograms).
        value: Numeric value (or bin count for histograms).
    """

    label: str
    value: float


def transform(
    table: TabularData,
    category_column: str | None,
    value_column: str | None,
    min_value: float | None = None,
    max_value: float | None = None,
) -> tuple[SeriesPoint, ...]:
    """Project two columns of `table` into an ordered series.

    Rows with an empty label or a non-numeric value are dropped, then the
    optional inclusive bounds are applied. Row order is preserved and
    duplicate labels are kept as separate points.

    Args:
        table: Parsed upload.
        category_column: Header used for labels.
        value_column: Header used for values.
        min_value: Optional lower bound; points below it are dropped.
        max_value: Optional upper bound; points above it are dropped.

    Returns:
        A tuple of SeriesPoint, empty when either column is unset or unknown.
    """

    label_index = table.column_index(category_column)
    value_index = table.column_index(value_column)
    if label_index is None or value_index is None:
        return ()

    points: list[SeriesPoint] = []
    for row in table.rows:
        label = cell_text(row[label_index])
        value = cell_number(row[value_index])
        if label == "" or not is_number(value):
            continue
        if min_value is not None and value < min_value:
            continue
        if max_value is not None and value > max_value:
            continue
        points.append(SeriesPoint(label=label, value=value))
    return tuple(points)
