"""
Per-dataset update bindings.

A binding owns the immutable full-resolution series of one dataset together
with its decimation options. Each call to ``update`` re-derives what the chart
shows from the slice of the series that is currently visible, so zooming in
reveals detail that the initial, whole-series decimation had to drop.
"""

import math
from enum import Enum
from typing import Callable, Mapping, Optional, Sequence, Union

import numpy as np
from loguru import logger

from pybdchart.decimate.downsampling import (
    DEFAULT_LENGTH,
    RandomSource,
    downsample_alerts,
    downsample_by_averaging,
    downsample_by_dropping_at_random,
)
from pybdchart.decimate.range_math import SimpleRange, parameterized_position
from pybdchart.decimate.series import Series
from pybdchart.decimate.windowing import get_visible_slice

from .config import DEFAULT_ALERT_LENGTH, DecimationConfig
from .handle import ChartHandle

ChartUpdate = Callable[[ChartHandle], None]


class Strategy(Enum):
    AVERAGE = "average"
    RANDOM_DROP = "random_drop"
    ALERT = "alert"
    FIXED_Y_ALERT = "fixed_y_alert"


class BindingState(Enum):
    INITIAL = "initial"
    ADJUSTED = "adjusted"


class DatasetBinding:
    """
    Base class for the update bindings.

    Subclasses provide ``_decimate_initial`` (whole series, at bind time) and
    ``_decimate_visible`` (visible slice, on every update).
    """

    strategy: Strategy
    default_max_points = DEFAULT_LENGTH

    def __init__(self, full: Series, config: Optional[DecimationConfig] = None):
        # The canonical series is never written to
        self.full = full if full.is_frozen else full.frozen()
        self.config = config if config is not None else DecimationConfig()
        self.state = BindingState.INITIAL
        self.update_count = 0
        self._initial = self._decimate_initial(self._initial_source())
        logger.debug(
            f"{type(self).__name__}: bound {len(self.full)} points, initial {len(self._initial)}"
        )

    @property
    def max_points(self) -> int:
        return self.config.max_points(self.default_max_points)

    def initial_data(self) -> Series:
        """Decimation of the whole series computed at bind time."""
        return self._initial

    def update(self, chart: ChartHandle, dataset_id: int) -> None:
        """
        Replace the render buffer of ``dataset_id`` for the chart's current viewport.

        Parameters
        ----------
        chart : ChartHandle
            Chart whose viewport is read and whose buffer is replaced.
        dataset_id : int
            Dataset to replace.
        """
        viewport = chart.get_viewport_x()
        source = self._prepare_source(chart, dataset_id)
        visible = get_visible_slice(source, viewport.min, viewport.max)

        if len(visible) > self.max_points:
            data = self._decimate_visible(visible, viewport)
        else:
            data = visible

        chart.set_dataset_buffer(dataset_id, data)
        self.state = BindingState.ADJUSTED
        self.update_count += 1
        logger.debug(
            f"{type(self).__name__} dataset {dataset_id}: visible={len(visible)}, shown={len(data)}"
        )

    __call__ = update

    def _initial_source(self) -> Series:
        return self.full

    def _prepare_source(self, chart: ChartHandle, dataset_id: int) -> Series:
        return self.full

    def _stride_for(self, visible: Series) -> int:
        if self.config.stride is not None:
            return self.config.stride
        return math.ceil(len(visible) / self.max_points)

    def _decimate_initial(self, full: Series) -> Series:
        raise NotImplementedError

    def _decimate_visible(self, visible: Series, viewport: SimpleRange) -> Series:
        raise NotImplementedError


class AveragingBinding(DatasetBinding):
    """Continuous signals: chunk averaging."""

    strategy = Strategy.AVERAGE

    def _decimate_initial(self, full: Series) -> Series:
        return downsample_by_averaging(full, self._stride_for(full), self.max_points)

    def _decimate_visible(self, visible: Series, viewport: SimpleRange) -> Series:
        return downsample_by_averaging(visible, self._stride_for(visible), self.max_points)


class RandomDropBinding(DatasetBinding):
    """Scatter data: keep one original point per chunk."""

    strategy = Strategy.RANDOM_DROP

    def __init__(
        self,
        full: Series,
        config: Optional[DecimationConfig] = None,
        rng: RandomSource = None,
    ):
        self.rng = np.random.default_rng(rng)
        super().__init__(full, config)

    def _decimate_initial(self, full: Series) -> Series:
        return downsample_by_dropping_at_random(
            full, self._stride_for(full), self.max_points, rng=self.rng
        )

    def _decimate_visible(self, visible: Series, viewport: SimpleRange) -> Series:
        return downsample_by_dropping_at_random(
            visible, self._stride_for(visible), self.max_points, rng=self.rng
        )


class AlertBinding(DatasetBinding):
    """Sparse categorical events (gaps + one label): run-binning."""

    strategy = Strategy.ALERT
    default_max_points = DEFAULT_ALERT_LENGTH

    def _decimate_initial(self, full: Series) -> Series:
        return downsample_alerts(full, self.config.target_chunk_width, self.max_points)

    def _decimate_visible(self, visible: Series, viewport: SimpleRange) -> Series:
        width = self.config.target_chunk_width
        if width is None:
            width = viewport.span / self.max_points
        return downsample_alerts(visible, width, self.max_points)


class FixedYAlertBinding(AlertBinding):
    """
    Alert band pinned to a fraction of the vertical viewport.

    The band keeps its on-screen position under vertical pan and zoom. Its
    points live in a private working copy of the series whose set values are
    moved to ``target_range.min`` of the current y viewport before every update;
    the band is filled up to ``target_range.max`` of the same viewport.
    """

    strategy = Strategy.FIXED_Y_ALERT

    def __init__(
        self,
        full: Series,
        target_range: SimpleRange,
        init_y_range: Optional[SimpleRange] = None,
        config: Optional[DecimationConfig] = None,
    ):
        # Validates that both ends are proportions
        parameterized_position(target_range.min, SimpleRange(0.0, 1.0))
        parameterized_position(target_range.max, SimpleRange(0.0, 1.0))

        self.target_range = target_range
        self._working = full.copy()
        self._set_mask = ~self._working.gap_mask()
        self.fill_value: Optional[float] = None
        if init_y_range is not None:
            self._project(init_y_range)
        super().__init__(full, config)

    @property
    def working_copy(self) -> Series:
        return self._working

    def _project(self, y_viewport: SimpleRange) -> None:
        self._working.y[self._set_mask] = parameterized_position(
            self.target_range.min, y_viewport
        )
        self.fill_value = parameterized_position(self.target_range.max, y_viewport)

    def _initial_source(self) -> Series:
        return self._working

    def _prepare_source(self, chart: ChartHandle, dataset_id: int) -> Series:
        self._project(chart.get_viewport_y())
        chart.set_dataset_fill(dataset_id, self.fill_value)
        return self._working


_BINDINGS = {
    Strategy.AVERAGE: AveragingBinding,
    Strategy.RANDOM_DROP: RandomDropBinding,
    Strategy.ALERT: AlertBinding,
    Strategy.FIXED_Y_ALERT: FixedYAlertBinding,
}


def bind_update(
    full: Series,
    strategy: Union[Strategy, str],
    config: Optional[DecimationConfig] = None,
    **kwargs,
) -> DatasetBinding:
    """
    Create the update binding for one dataset.

    Parameters
    ----------
    full : Series
        Full-resolution series. A frozen copy is taken if it is writable.
    strategy : Union[Strategy, str]
        Decimation strategy.
    config : Optional[DecimationConfig], default=None
        Decimation options.
    **kwargs
        Strategy-specific arguments: ``rng`` for random drop, ``target_range``
        and ``init_y_range`` for fixed-y alerts.

    Returns
    -------
    DatasetBinding
        Callable as ``binding(chart, dataset_id)``.
    """
    try:
        cls = _BINDINGS[Strategy(strategy)]
    except ValueError:
        raise ValueError(
            f"Unknown strategy: {strategy!r}. Expected one of {[s.value for s in Strategy]}"
        ) from None
    return cls(full, config=config, **kwargs)


def chart_updater(
    bindings: Union[Sequence[DatasetBinding], Mapping[int, DatasetBinding]],
) -> ChartUpdate:
    """
    Combine dataset bindings into the chart-level update registered for sync.

    Parameters
    ----------
    bindings : Union[Sequence[DatasetBinding], Mapping[int, DatasetBinding]]
        Bindings in dataset order, or a mapping of dataset id to binding.
    """
    if isinstance(bindings, Mapping):
        items = list(bindings.items())
    else:
        items = list(enumerate(bindings))

    def update(chart: ChartHandle) -> None:
        for dataset_id, binding in items:
            binding.update(chart, dataset_id)

    return update
