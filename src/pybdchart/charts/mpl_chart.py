from typing import Any, Dict, List, Optional, Sequence, Tuple

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np
from loguru import logger

from pybdchart.decimate.range_math import SimpleRange
from pybdchart.decimate.series import Series

from .dataset import RenderableDataset
from .handle import GestureCallback

PAN_MODE = "pan/zoom"
ZOOM_MODE = "zoom rect"


class MplChart:
    """
    ``ChartHandle`` implementation on top of a matplotlib ``Axes``.

    Draws line, scatter and alert-band datasets and turns toolbar pan/zoom
    releases and mouse-wheel zooms into gesture-completion callbacks.
    """

    # Default styling constants
    DEFAULT_FIGSIZE = (10, 4)
    DEFAULT_BAND_ALPHA = 0.6
    SCROLL_ZOOM_FACTOR = 1.2

    def __init__(
        self,
        ax: mpl.axes.Axes,
        datasets: Optional[Sequence[RenderableDataset]] = None,
        navigable: bool = True,
        registry_index: Optional[int] = None,
        name: Optional[str] = None,
    ):
        """
        Initialise the chart.

        Parameters
        ----------
        ax : mpl.axes.Axes
            Axes to draw into.
        datasets : Optional[Sequence[RenderableDataset]], default=None
            Datasets to add; their ids follow the sequence order.
        navigable : bool, default=True
            Whether pan and zoom gestures are handled.
        registry_index : Optional[int], default=None
            Index of this chart in a ``ChartSyncManager`` registry.
        name : Optional[str], default=None
            Name used in log messages.
        """
        self.ax = ax
        self.fig = ax.figure
        self.navigable = navigable
        self.registry_index = registry_index
        self.name = name if name is not None else (ax.get_title() or "chart")

        self._datasets: List[Dict[str, Any]] = []
        self._pan_callbacks: List[GestureCallback] = []
        self._zoom_callbacks: List[GestureCallback] = []
        self._cids: List[int] = []
        self._pending_timer = None

        if self.navigable:
            self._connect_callbacks()

        for dataset in datasets or []:
            self.add_dataset(dataset)

    @classmethod
    def create(
        cls,
        datasets: Sequence[RenderableDataset],
        title: Optional[str] = None,
        y_label: Optional[str] = None,
        ylim: Optional[Tuple[float, float]] = None,
        ax: Optional[mpl.axes.Axes] = None,
        **kwargs,
    ) -> "MplChart":
        """
        Create a chart with a time x-axis, optionally in a new figure.

        Parameters
        ----------
        datasets : Sequence[RenderableDataset]
            Datasets to draw.
        title : Optional[str], default=None
            Axes title.
        y_label : Optional[str], default=None
            Y-axis label.
        ylim : Optional[Tuple[float, float]], default=None
            Fixed y limits; autoscaled if None.
        ax : Optional[mpl.axes.Axes], default=None
            Axes to use; a new figure is created if None.
        """
        if ax is None:
            _, ax = plt.subplots(figsize=cls.DEFAULT_FIGSIZE)
        if title:
            ax.set_title(title)
        ax.set_xlabel("Time")
        if y_label:
            ax.set_ylabel(y_label)
        chart = cls(ax, datasets, **kwargs)
        if ylim is not None:
            ax.set_ylim(*ylim)
        return chart

    def __repr__(self) -> str:
        return f"MplChart({self.name!r})"

    # --- ChartHandle ---

    def get_viewport_x(self) -> SimpleRange:
        lo, hi = sorted(self.ax.get_xlim())
        return SimpleRange(float(lo), float(hi))

    def get_viewport_y(self) -> SimpleRange:
        lo, hi = sorted(self.ax.get_ylim())
        return SimpleRange(float(lo), float(hi))

    def set_viewport_x(self, vmin: float, vmax: float) -> None:
        self.ax.set_xlim(vmin, vmax)

    def set_dataset_buffer(self, dataset_id: int, data: Series) -> None:
        entry = self._entry(dataset_id)
        entry["data"] = data
        kind = entry["dataset"].kind
        if kind == "scatter":
            keep = ~np.isnan(data.y)
            entry["artist"].set_offsets(np.column_stack((data.x[keep], data.y[keep])))
        else:
            entry["artist"].set_data(data.x, data.y)
        if entry["fill_value"] is not None:
            self._rebuild_band(entry)
        self.redraw()

    def set_dataset_fill(self, dataset_id: int, value: float) -> None:
        entry = self._entry(dataset_id)
        entry["fill_value"] = value
        self._rebuild_band(entry)

    def redraw(self) -> None:
        self.fig.canvas.draw_idle()

    def on_pan_complete(self, callback: GestureCallback) -> None:
        self._pan_callbacks.append(callback)

    def on_zoom_complete(self, callback: GestureCallback) -> None:
        self._zoom_callbacks.append(callback)

    def destroy(self) -> None:
        """
        Disconnect the chart and remove its axes.

        The figure is closed once it holds no axes, so charts sharing a figure
        can be destroyed one at a time.
        """
        for cid in self._cids:
            self.fig.canvas.mpl_disconnect(cid)
        self._cids.clear()
        self._pan_callbacks.clear()
        self._zoom_callbacks.clear()
        if self._pending_timer is not None:
            self._pending_timer.stop()
            self._pending_timer = None
        self._datasets.clear()
        self.ax.remove()
        if not self.fig.axes:
            plt.close(self.fig)
        logger.debug(f"{self!r} destroyed")

    # --- datasets ---

    @property
    def num_datasets(self) -> int:
        return len(self._datasets)

    def get_dataset_buffer(self, dataset_id: int) -> Series:
        return self._entry(dataset_id)["data"]

    def add_dataset(self, dataset: RenderableDataset) -> int:
        """
        Draw a dataset and return its id.

        Lines and alert bands become a ``Line2D``; scatter datasets become a
        ``PathCollection``. Datasets with a fill value also get a band filled
        from the line to that value.
        """
        data = dataset.data
        if dataset.kind == "scatter":
            keep = ~np.isnan(data.y)
            artist = self.ax.scatter(
                data.x[keep],
                data.y[keep],
                s=(2 * dataset.radius) ** 2,
                marker=dataset.marker,
                linewidths=dataset.width,
                color=dataset.color,
                alpha=dataset.alpha,
                label=dataset.label,
            )
        elif dataset.kind in ("line", "alert"):
            (artist,) = self.ax.plot(
                data.x,
                data.y,
                color=dataset.color,
                linewidth=dataset.width,
                label=dataset.label,
            )
        else:
            raise ValueError(f"Unknown dataset kind: {dataset.kind!r}")

        fill_value = dataset.fill_value
        if fill_value is None and dataset.kind == "line" and dataset.fill:
            fill_value = 0.0

        entry = {
            "dataset": dataset,
            "artist": artist,
            "band": None,
            "fill_value": fill_value,
            "data": data,
        }
        self._datasets.append(entry)
        if fill_value is not None:
            self._rebuild_band(entry)

        dataset_id = len(self._datasets) - 1
        logger.debug(
            f"{self!r}: added {dataset.kind} dataset {dataset_id} ('{dataset.label}', {len(data)} points)"
        )
        return dataset_id

    def _entry(self, dataset_id: int) -> Dict[str, Any]:
        if dataset_id < 0 or dataset_id >= len(self._datasets):
            raise ValueError(
                f"Invalid dataset id: {dataset_id}. Must be between 0 and {len(self._datasets) - 1}."
            )
        return self._datasets[dataset_id]

    def _rebuild_band(self, entry: Dict[str, Any]) -> None:
        if entry["band"] is not None:
            entry["band"].remove()
            entry["band"] = None
        data = entry["data"]
        if len(data) == 0:
            return
        dataset = entry["dataset"]
        entry["band"] = self.ax.fill_between(
            data.x,
            data.y,
            entry["fill_value"],
            color=dataset.color,
            alpha=self.DEFAULT_BAND_ALPHA,
            linewidth=0,
        )

    # --- gestures ---

    def _connect_callbacks(self) -> None:
        """Connect matplotlib callbacks."""
        canvas = self.fig.canvas
        self._cids.append(canvas.mpl_connect("button_release_event", self._on_release))
        self._cids.append(canvas.mpl_connect("scroll_event", self._on_scroll))

    def _toolbar_mode(self) -> str:
        toolbar = getattr(self.fig.canvas, "toolbar", None)
        if toolbar is None:
            return ""
        return str(getattr(toolbar, "mode", ""))

    def _on_release(self, event) -> None:
        if event.inaxes is not self.ax:
            return
        mode = self._toolbar_mode()
        if mode == PAN_MODE:
            callbacks = self._pan_callbacks
        elif mode == ZOOM_MODE:
            callbacks = self._zoom_callbacks
        else:
            return
        # The toolbar applies the final limits in its own release handler,
        # which runs after this one
        timer = self.fig.canvas.new_timer(interval=0)
        timer.single_shot = True
        timer.add_callback(self._fire, callbacks)
        timer.start()
        self._pending_timer = timer

    def _on_scroll(self, event) -> None:
        if event.inaxes is not self.ax:
            return
        factor = 1 / self.SCROLL_ZOOM_FACTOR if event.button == "up" else self.SCROLL_ZOOM_FACTOR
        axis = "y" if event.key is not None and "alt" in event.key else "x"
        center = event.ydata if axis == "y" else event.xdata
        self.zoom(factor, center=center, axis=axis)

    def zoom(self, factor: float, center: Optional[float] = None, axis: str = "x") -> None:
        """
        Scale the viewport of ``axis`` by ``factor`` around ``center`` and fire
        the zoom-complete callbacks.

        ``factor < 1`` zooms in. ``center`` defaults to the middle of the view.
        """
        if not self.navigable:
            logger.warning(f"{self!r}: zoom ignored, chart is not navigable")
            return
        if factor <= 0:
            raise ValueError(f"Zoom factor must be positive. Got {factor}")
        rng = self.get_viewport_x() if axis == "x" else self.get_viewport_y()
        if center is None:
            center = (rng.min + rng.max) / 2
        new_min = center - (center - rng.min) * factor
        new_max = center + (rng.max - center) * factor
        if axis == "x":
            self.ax.set_xlim(new_min, new_max)
        else:
            self.ax.set_ylim(new_min, new_max)
        logger.debug(f"{self!r}: zoomed {axis} to [{new_min:.6g}, {new_max:.6g}]")
        self._fire(self._zoom_callbacks)

    def pan(self, dx: float) -> None:
        """Shift the x viewport by ``dx`` and fire the pan-complete callbacks."""
        if not self.navigable:
            logger.warning(f"{self!r}: pan ignored, chart is not navigable")
            return
        rng = self.get_viewport_x()
        self.ax.set_xlim(rng.min + dx, rng.max + dx)
        self._fire(self._pan_callbacks)

    def _fire(self, callbacks: List[GestureCallback]) -> None:
        self._pending_timer = None
        for callback in list(callbacks):
            callback(self)
        self.redraw()
