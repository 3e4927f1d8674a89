"""
Numeric building blocks for big-data charts.

Pure functions over ``Series``: range helpers, the three decimation algorithms
and viewport windowing. Nothing here knows about charts.
"""

from pybdchart.decimate.downsampling import (
    DEFAULT_LENGTH,
    downsample_alerts,
    downsample_by_averaging,
    downsample_by_dropping_at_random,
)
from pybdchart.decimate.errors import (
    ChartDataError,
    InvalidBinWidthError,
    InvalidProportionError,
    InvalidRangeError,
    LengthMismatchError,
    MultipleAlertValuesError,
)
from pybdchart.decimate.range_math import (
    SimpleRange,
    common_range,
    parameterized_position,
    skip_repeats,
    value_range,
)
from pybdchart.decimate.series import Datapoint, Series, zip_arrays
from pybdchart.decimate.windowing import get_visible_slice

__all__ = [
    "DEFAULT_LENGTH",
    "downsample_alerts",
    "downsample_by_averaging",
    "downsample_by_dropping_at_random",
    "ChartDataError",
    "InvalidBinWidthError",
    "InvalidProportionError",
    "InvalidRangeError",
    "LengthMismatchError",
    "MultipleAlertValuesError",
    "SimpleRange",
    "common_range",
    "parameterized_position",
    "skip_repeats",
    "value_range",
    "Datapoint",
    "Series",
    "zip_arrays",
    "get_visible_slice",
]
