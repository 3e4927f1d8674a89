"""
pybdchart: big-data charts for Python

Decimates very large time series to what a chart can draw, re-derives the
decimation from the visible window on every pan or zoom, and keeps linked
charts on the same horizontal viewport.
"""

# Import from charts subpackage
from pybdchart.charts.adjustments import Strategy, bind_update, chart_updater
from pybdchart.charts.chart_manager import ChartSyncManager
from pybdchart.charts.config import DecimationConfig, configure_logging
from pybdchart.charts.dataset import ChartData, DatasetMaker, RenderableDataset
from pybdchart.charts.handle import ChartHandle, HeadlessChart
from pybdchart.charts.mpl_chart import MplChart
from pybdchart.charts.scheduler import FrameScheduler, TimerFrameScheduler

# Import from decimate subpackage
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
)
from pybdchart.decimate.series import Datapoint, Series, zip_arrays
from pybdchart.decimate.windowing import get_visible_slice

__all__ = [
    # Charts and synchronisation
    "Strategy",
    "bind_update",
    "chart_updater",
    "ChartSyncManager",
    "DecimationConfig",
    "configure_logging",
    "ChartData",
    "DatasetMaker",
    "RenderableDataset",
    "ChartHandle",
    "HeadlessChart",
    "MplChart",
    "FrameScheduler",
    "TimerFrameScheduler",
    # Decimation and helpers
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
    "Datapoint",
    "Series",
    "zip_arrays",
    "get_visible_slice",
]
