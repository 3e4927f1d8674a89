from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
from loguru import logger

from pybdchart.decimate.downsampling import RandomSource
from pybdchart.decimate.range_math import SimpleRange, parameterized_position, skip_repeats
from pybdchart.decimate.series import Series, _as_float_array, zip_arrays

from .adjustments import (
    AlertBinding,
    AveragingBinding,
    DatasetBinding,
    FixedYAlertBinding,
    RandomDropBinding,
)
from .config import DecimationConfig

ArrayLike = Union[np.ndarray, Sequence[Optional[float]]]

# Default colors for alert bands without an entry in color_dict
DEFAULT_COLORS = [
    "red",
    "orange",
    "purple",
    "brown",
    "blue",
    "green",
    "pink",
    "gray",
    "olive",
    "black",
]


@dataclass
class RenderableDataset:
    """
    What a renderer needs to draw one dataset.

    ``data`` is the initial decimation; later buffers arrive through
    ``ChartHandle.set_dataset_buffer``.
    """

    label: str
    kind: str
    data: Series
    color: Any = "black"
    width: float = 1.0
    fill: bool = False
    fill_value: Optional[float] = None
    marker: str = "o"
    radius: float = 1.0
    alpha: float = 1.0
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ChartData:
    """A renderable dataset paired with the binding that keeps it up to date."""

    dataset: RenderableDataset
    update: DatasetBinding


def unique_plottable_alerts(
    alerts: ArrayLike, skip_alerts: Iterable[float] = ()
) -> List[float]:
    """Sorted distinct alert labels, ignoring gaps and ``skip_alerts``."""
    values = _as_float_array(alerts)
    labels = np.unique(values[~np.isnan(values)])
    skip = set(skip_alerts)
    return [float(a) for a in labels if a not in skip]


def _check_time(time: ArrayLike, label: str) -> None:
    t = np.asarray(time, dtype=np.float64)
    if len(t) > 1 and np.any(np.diff(t) < 0):
        logger.warning(
            f"Time array for '{label}' is not monotonic non-decreasing. "
            f"Viewport windowing will return wrong slices."
        )


def _alert_label(alert: float, label_dict: Optional[Mapping[Any, str]]) -> str:
    if label_dict is None:
        return f"Alert {alert:g}"
    # 7.0 and 7 hash alike, so integer alert codes work as keys
    return label_dict.get(alert, f"Alert {alert:g}")


def _alert_color(alert: float, index: int, color_dict: Optional[Mapping[Any, Any]]) -> Any:
    default = DEFAULT_COLORS[index % len(DEFAULT_COLORS)]
    if color_dict is None:
        return default
    return color_dict.get(alert, default)


def _indicator_series(time: ArrayLike, alerts: ArrayLike, alert: float, value: float) -> Series:
    """Series that is ``value`` where ``alerts == alert`` and a gap elsewhere."""
    paired = zip_arrays(time, alerts)
    y = np.where(paired.y == alert, value, np.nan)
    return skip_repeats(Series(paired.x, y))


class DatasetMaker:
    """
    Factories for the four dataset kinds.

    Each factory returns the renderable dataset(s) together with the binding
    that recomputes the decimation on every viewport change.
    """

    @staticmethod
    def line_plot(
        time: ArrayLike,
        values: ArrayLike,
        label: str,
        width: float = 1.0,
        color: Any = "black",
        fill: bool = False,
        config: Optional[DecimationConfig] = None,
    ) -> ChartData:
        """
        A standard line plot, decimated by averaging.

        Parameters
        ----------
        time : ArrayLike
            Time vector.
        values : ArrayLike
            Values; None or NaN marks a gap.
        label : str
            Dataset label.
        width, color, fill
            Line styling.
        config : Optional[DecimationConfig], default=None
            Decimation options.
        """
        _check_time(time, label)
        binding = AveragingBinding(zip_arrays(time, values), config)
        dataset = RenderableDataset(
            label=label,
            kind="line",
            data=binding.initial_data(),
            color=color,
            width=width,
            fill=fill,
            alpha=0.6 if fill else 1.0,
        )
        return ChartData(dataset, binding)

    @staticmethod
    def scatter_plot(
        time: ArrayLike,
        values: ArrayLike,
        label: str,
        marker: str = "o",
        radius: float = 1.0,
        width: float = 1.0,
        color: Any = "black",
        rng: RandomSource = None,
        config: Optional[DecimationConfig] = None,
    ) -> ChartData:
        """A standard scatter plot, decimated by random drop."""
        _check_time(time, label)
        binding = RandomDropBinding(zip_arrays(time, values), config, rng=rng)
        dataset = RenderableDataset(
            label=label,
            kind="scatter",
            data=binding.initial_data(),
            color=color,
            width=width,
            marker=marker,
            radius=radius,
            alpha=0.6,
        )
        return ChartData(dataset, binding)

    @staticmethod
    def standard_alert_plot(
        time: ArrayLike,
        alerts: ArrayLike,
        skip_alerts: Iterable[float] = (),
        label_dict: Optional[Mapping[Any, str]] = None,
        color_dict: Optional[Mapping[Any, Any]] = None,
        config: Optional[DecimationConfig] = None,
    ) -> List[ChartData]:
        """
        One band per alert label, stacked at ``y = k .. k + 1``.

        Parameters
        ----------
        time : ArrayLike
            Time vector.
        alerts : ArrayLike
            Alert label per sample; None or NaN means no alert.
        skip_alerts : Iterable[float], default=()
            Labels not to plot.
        label_dict : Optional[Mapping], default=None
            Display name per label.
        color_dict : Optional[Mapping], default=None
            Color per label.
        config : Optional[DecimationConfig], default=None
            Decimation options.

        Returns
        -------
        List[ChartData]
            One entry per plotted label, in sorted label order.
        """
        _check_time(time, "alerts")
        result = []
        for index, alert in enumerate(unique_plottable_alerts(alerts, skip_alerts)):
            binding = AlertBinding(_indicator_series(time, alerts, alert, index), config)
            color = _alert_color(alert, index, color_dict)
            dataset = RenderableDataset(
                label=_alert_label(alert, label_dict),
                kind="alert",
                data=binding.initial_data(),
                color=color,
                width=1.0,
                fill=True,
                fill_value=float(index + 1),
                extra={"alert": alert},
            )
            result.append(ChartData(dataset, binding))
        logger.debug(f"Created {len(result)} standard alert datasets")
        return result

    @staticmethod
    def fixed_y_alert_plot(
        time: ArrayLike,
        alerts: ArrayLike,
        init_y_range: SimpleRange,
        target_range: SimpleRange,
        skip_alerts: Iterable[float] = (),
        label_dict: Optional[Mapping[Any, str]] = None,
        color_dict: Optional[Mapping[Any, Any]] = None,
        config: Optional[DecimationConfig] = None,
    ) -> List[ChartData]:
        """
        Alert bands pinned to a fixed part of the vertical viewport.

        Parameters
        ----------
        time : ArrayLike
            Time vector.
        alerts : ArrayLike
            Alert label per sample; None or NaN means no alert.
        init_y_range : SimpleRange
            Initial y viewport of the chart.
        target_range : SimpleRange
            Band position as proportions (both in ``[0, 1]``) of the y viewport.
        skip_alerts, label_dict, color_dict, config
            As for ``standard_alert_plot``.

        Returns
        -------
        List[ChartData]
            One entry per plotted label.
        """
        _check_time(time, "fixed-y alerts")
        start_y = parameterized_position(target_range.min, init_y_range)
        result = []
        for index, alert in enumerate(unique_plottable_alerts(alerts, skip_alerts)):
            binding = FixedYAlertBinding(
                _indicator_series(time, alerts, alert, start_y),
                target_range,
                init_y_range=init_y_range,
                config=config,
            )
            dataset = RenderableDataset(
                label=_alert_label(alert, label_dict),
                kind="alert",
                data=binding.initial_data(),
                color=_alert_color(alert, index, color_dict),
                width=0.0,
                fill=True,
                fill_value=binding.fill_value,
                extra={"alert": alert},
            )
            result.append(ChartData(dataset, binding))
        logger.debug(f"Created {len(result)} fixed-y alert datasets")
        return result
