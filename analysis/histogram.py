"""Histogram Binner for series values.

Bins are equal-width over `[min, max]` with a square-root bin count capped at
ten. The last bin includes its upper edge so every value is counted once.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from .series import SeriesPoint

MAX_BINS = 10
_LABEL_STEP = Decimal("0.1")


def histogram_bin_count(n: int) -> int:
    """Return the bin count for `n` values (`min(10, ceil(sqrt(n)))`, at least 1)."""

    if n <= 0:
        return 1
    return max(1, min(MAX_BINS, math.ceil(math.sqrt(n))))


def bin_series(points: Sequence[SeriesPoint]) -> tuple[SeriesPoint, ...]:
    """Replace a series with equal-width frequency buckets.

    Args:
        points: Already filtered series points.

    Returns:
        One SeriesPoint per bin in increasing order. Labels are
        `"<start>-<end>"` rounded to one decimal; values are counts.
    """

    if not points:
        return ()

    values = [point.value for point in points]
    lo = min(values)
    hi = max(values)
    bin_count = histogram_bin_count(len(values))
    width = (hi - lo) / bin_count if hi != lo else 1.0

    # Shared edges keep adjacent bins contiguous.
    edges = [lo + i * width for i in range(bin_count + 1)]
    counts = [0] * bin_count
    for value in values:
        counts[_bin_index(value, edges)] += 1

    return tuple(
        SeriesPoint(label=f"{edge_label(edges[i])}-{edge_label(edges[i + 1])}", value=float(counts[i]))
        for i in range(bin_count)
    )


def edge_label(edge: float) -> str:
    """Format a bin edge to one decimal, rounding halves away from zero.

    The exact binary value of `edge` is rounded, so `0.25` becomes `0.3`
    while `1.45` (stored just below the half) becomes `1.4`.
    """

    if edge == 0:
        edge = 0.0
    rounded = Decimal(edge).quantize(_LABEL_STEP, rounding=ROUND_HALF_UP)
    return format(rounded, "f")


def _bin_index(value: float, edges: list[float]) -> int:
    last = len(edges) - 2
    for i in range(last):
        if edges[i] <= value < edges[i + 1]:
            return i
    return last
