from typing import Callable, Dict, List, Optional, Protocol

from loguru import logger

from pybdchart.decimate.range_math import SimpleRange
from pybdchart.decimate.series import Series

GestureCallback = Callable[["ChartHandle"], None]


class ChartHandle(Protocol):
    """
    What the bindings and the sync manager need from a rendering engine.

    Writing the viewport through ``set_viewport_x`` must not fire the gesture
    callbacks; only real user gestures do.
    """

    navigable: bool
    registry_index: Optional[int]

    def get_viewport_x(self) -> SimpleRange: ...

    def get_viewport_y(self) -> SimpleRange: ...

    def set_viewport_x(self, vmin: float, vmax: float) -> None: ...

    def set_dataset_buffer(self, dataset_id: int, data: Series) -> None: ...

    def set_dataset_fill(self, dataset_id: int, value: float) -> None: ...

    def redraw(self) -> None: ...

    def on_pan_complete(self, callback: GestureCallback) -> None: ...

    def on_zoom_complete(self, callback: GestureCallback) -> None: ...

    def destroy(self) -> None: ...


class HeadlessChart:
    """
    In-memory chart with no drawing backend.

    Keeps viewports, render buffers and fill values in plain attributes so that
    callers driving their own renderer (and the tests) can inspect them.
    ``pan_to`` and ``zoom_to`` stand in for user gestures.
    """

    def __init__(
        self,
        x_range: SimpleRange,
        y_range: Optional[SimpleRange] = None,
        navigable: bool = True,
        registry_index: Optional[int] = None,
        name: str = "chart",
    ):
        self.name = name
        self.navigable = navigable
        self.registry_index = registry_index
        self._viewport_x = x_range
        self._viewport_y = y_range if y_range is not None else SimpleRange(0.0, 1.0)
        self.buffers: Dict[int, Series] = {}
        self.fills: Dict[int, float] = {}
        self.redraw_count = 0
        self.destroyed = False
        self._pan_callbacks: List[GestureCallback] = []
        self._zoom_callbacks: List[GestureCallback] = []

    def __repr__(self) -> str:
        return f"HeadlessChart({self.name!r}, x={self._viewport_x}, y={self._viewport_y})"

    def get_viewport_x(self) -> SimpleRange:
        return self._viewport_x

    def get_viewport_y(self) -> SimpleRange:
        return self._viewport_y

    def set_viewport_x(self, vmin: float, vmax: float) -> None:
        self._viewport_x = SimpleRange(vmin, vmax)

    def set_viewport_y(self, vmin: float, vmax: float) -> None:
        self._viewport_y = SimpleRange(vmin, vmax)

    def set_dataset_buffer(self, dataset_id: int, data: Series) -> None:
        self.buffers[dataset_id] = data

    def set_dataset_fill(self, dataset_id: int, value: float) -> None:
        self.fills[dataset_id] = value

    def redraw(self) -> None:
        self.redraw_count += 1

    def on_pan_complete(self, callback: GestureCallback) -> None:
        self._pan_callbacks.append(callback)

    def on_zoom_complete(self, callback: GestureCallback) -> None:
        self._zoom_callbacks.append(callback)

    def destroy(self) -> None:
        self.destroyed = True
        self._pan_callbacks.clear()
        self._zoom_callbacks.clear()
        self.buffers.clear()

    def pan_to(self, vmin: float, vmax: float) -> None:
        """Simulate a pan gesture ending at ``[vmin, vmax]``."""
        self._gesture(vmin, vmax, self._pan_callbacks, "pan")

    def zoom_to(self, vmin: float, vmax: float) -> None:
        """Simulate a zoom gesture ending at ``[vmin, vmax]``."""
        self._gesture(vmin, vmax, self._zoom_callbacks, "zoom")

    def _gesture(
        self, vmin: float, vmax: float, callbacks: List[GestureCallback], kind: str
    ) -> None:
        if not self.navigable:
            logger.warning(f"{self.name}: {kind} ignored, chart is not navigable")
            return
        self.set_viewport_x(vmin, vmax)
        for callback in list(callbacks):
            callback(self)
