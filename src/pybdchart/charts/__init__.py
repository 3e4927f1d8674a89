"""
Chart adapter components for pybdchart.

Bindings that keep each dataset's decimation in step with the viewport, the
manager that links charts together, and the chart implementations.
"""

from pybdchart.charts.adjustments import (
    AlertBinding,
    AveragingBinding,
    BindingState,
    DatasetBinding,
    FixedYAlertBinding,
    RandomDropBinding,
    Strategy,
    bind_update,
    chart_updater,
)
from pybdchart.charts.chart_manager import ChartSyncManager, RegistryEntry
from pybdchart.charts.config import (
    DEFAULT_ALERT_LENGTH,
    DecimationConfig,
    configure_logging,
)
from pybdchart.charts.dataset import (
    ChartData,
    DatasetMaker,
    RenderableDataset,
    unique_plottable_alerts,
)
from pybdchart.charts.handle import ChartHandle, HeadlessChart
from pybdchart.charts.mpl_chart import MplChart
from pybdchart.charts.scheduler import FrameScheduler, TimerFrameScheduler

__all__ = [
    "AlertBinding",
    "AveragingBinding",
    "BindingState",
    "DatasetBinding",
    "FixedYAlertBinding",
    "RandomDropBinding",
    "Strategy",
    "bind_update",
    "chart_updater",
    "ChartSyncManager",
    "RegistryEntry",
    "DEFAULT_ALERT_LENGTH",
    "DecimationConfig",
    "configure_logging",
    "ChartData",
    "DatasetMaker",
    "RenderableDataset",
    "unique_plottable_alerts",
    "ChartHandle",
    "HeadlessChart",
    "MplChart",
    "FrameScheduler",
    "TimerFrameScheduler",
]
