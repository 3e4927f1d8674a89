from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from .adjustments import ChartUpdate
from .handle import ChartHandle
from .scheduler import FrameScheduler


@dataclass
class RegistryEntry:
    """A chart, its chart-level update and its position in the registry."""

    chart: ChartHandle
    update: ChartUpdate
    index: int


class ChartSyncManager:
    """
    Registry of linked charts that share a horizontal viewport.

    When the user finishes panning or zooming one chart, that chart is updated
    at once and the new x viewport is pushed to every other chart on the next
    frame. Propagated viewports are written directly, never replayed through
    the gesture handlers, so charts do not re-trigger each other.
    """

    def __init__(self, scheduler: Optional[FrameScheduler] = None):
        """
        Initialise the manager.

        Parameters
        ----------
        scheduler : Optional[FrameScheduler], default=None
            Frame scheduler used to defer propagation. A plain
            ``FrameScheduler`` is created if None; its owner is then expected
            to call ``run_frame``.
        """
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.entries: List[RegistryEntry] = []
        self._attached: List[ChartHandle] = []

    def register(self, chart: ChartHandle, update: ChartUpdate) -> RegistryEntry:
        """Add a chart and its update to the synchronisation group."""
        entry = RegistryEntry(chart, update, len(self.entries))
        self.entries.append(entry)
        logger.info(f"Registered chart {entry.index}: {chart!r}")
        return entry

    def destroy(self) -> None:
        """Destroy every registered chart and empty the registry."""
        if not self.entries:
            return
        for entry in self.entries:
            entry.chart.destroy()
        logger.info(f"Destroyed {len(self.entries)} charts")
        self.entries = []
        self._attached = []

    def attach_sync(self) -> None:
        """
        Install gesture-completion handlers on every navigable chart.

        Safe to call again after registering more charts: charts that already
        carry the handlers are left alone.
        """
        attached = 0
        for entry in self.entries:
            chart = entry.chart
            if not getattr(chart, "navigable", True):
                logger.debug(f"Chart {entry.index} has no pan/zoom, not attaching sync")
                continue
            if any(chart is done for done in self._attached):
                continue
            chart.on_pan_complete(self._on_gesture_complete)
            chart.on_zoom_complete(self._on_gesture_complete)
            self._attached.append(chart)
            attached += 1
        logger.info(
            f"Attached synchronisation to {attached} new charts ({len(self._attached)} of {len(self.entries)} in total)"
        )

    def _on_gesture_complete(self, chart: ChartHandle) -> None:
        self._update_own_entries(chart)
        self.synchronize_axes(chart)

    def _update_own_entries(self, chart: ChartHandle) -> None:
        index = getattr(chart, "registry_index", None)
        if index is not None:
            self.entries[index].update(chart)
            return
        for entry in self.entries:
            if entry.chart is chart:
                entry.update(chart)

    def synchronize_axes(self, source: ChartHandle) -> None:
        """
        Push the x viewport of ``source`` to every other chart on the next frame.

        The viewport is read when the frame runs, after the source chart has
        finished its own update.
        """

        def propagate() -> None:
            viewport = source.get_viewport_x()
            logger.debug(
                f"Propagating x viewport [{viewport.min:.6g}, {viewport.max:.6g}] from {source!r}"
            )
            for target in self.entries:
                if target.chart is source:
                    continue
                target.chart.set_viewport_x(viewport.min, viewport.max)
                target.chart.redraw()
                target.update(target.chart)

        self.scheduler.request_frame(propagate)
