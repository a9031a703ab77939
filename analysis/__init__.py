"""Pure analysis package for the bank analytics portal.

This package contains deterministic, testable computations over uploaded
tables: value coercion, series transformation, histogram binning, and chart
configuration validation. It must not import Django or perform any
database I/O.
"""

from .histogram import bin_series
from .series import SeriesPoint, transform
from .tabular import TabularData

__all__ = ["SeriesPoint", "TabularData", "bin_series", "transform"]
