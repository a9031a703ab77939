"""Cell coercion helpers shared by the series pipeline.

Coercion is total: every cell maps to a label string and to either a finite
float or NaN. Nothing here raises.
"""

from __future__ import annotations

import math

from .tabular import Cell, is_blank_cell

NOT_A_NUMBER = math.nan


def cell_text(cell: Cell) -> str:
    """Return the display label for a cell.

    Args:
        cell: Spreadsheet cell value.

    Returns:
        `""` for absent or whitespace-only cells, integral floats without a
        trailing `.0`, and `str(cell)` otherwise.
    """

    if is_blank_cell(cell):
        return ""
    if isinstance(cell, float):
        if math.isfinite(cell) and cell.is_integer():
            return str(int(cell))
        return repr(cell)
    return str(cell)


def cell_number(cell: Cell) -> float:
    """Coerce a cell to a finite float, or NaN when it is not numeric.

    Args:
        cell: Spreadsheet cell value.

    Returns:
        The numeric value. Text is parsed after stripping whitespace; blank
        text, absent cells, unparseable text, digit-grouped text such as
        `1_000` and non-finite values are NaN.
    """

    if cell is None:
        return NOT_A_NUMBER
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        value = float(cell)
    else:
        text = str(cell).strip()
        if not text or "_" in text:
            return NOT_A_NUMBER
        try:
            value = float(text)
        except ValueError:
            return NOT_A_NUMBER
    return value if math.isfinite(value) else NOT_A_NUMBER


def is_number(value: float) -> bool:
    """Return True when a coerced value is usable (not NaN)."""

    return not math.isnan(value)
