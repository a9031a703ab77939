"""Column introspection used to populate chart controls."""

from __future__ import annotations

import math

from .coercion import cell_number, is_number
from .tabular import TabularData

DEFAULT_VALUE_RANGE: tuple[int, int] = (0, 100)


def numeric_columns(table: TabularData) -> tuple[str, ...]:
    """Return headers with at least one numeric-coercible cell.

    Args:
        table: Parsed upload.

    Returns:
        Header names in column order.
    """

    names: list[str] = []
    for index, header in enumerate(table.headers):
        if any(is_number(cell_number(row[index])) for row in table.rows):
            names.append(header)
    return tuple(names)


def column_values(table: TabularData, column: str | None) -> tuple[float, ...]:
    """Return the numeric values of a column, skipping non-numeric cells."""

    index = table.column_index(column)
    if index is None:
        return ()
    values = (cell_number(row[index]) for row in table.rows)
    return tuple(value for value in values if is_number(value))


def value_range(table: TabularData, column: str | None) -> tuple[int, int]:
    """Return `(floor(min), ceil(max))` over a column's numeric values.

    Args:
        table: Parsed upload.
        column: Value column header.

    Returns:
        Integer bounds, or `DEFAULT_VALUE_RANGE` when there are no values.
    """

    values = column_values(table, column)
    if not values:
        return DEFAULT_VALUE_RANGE
    return math.floor(min(values)), math.ceil(max(values))
