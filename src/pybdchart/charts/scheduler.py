from collections import deque
from typing import Callable, Deque

from loguru import logger

FrameCallback = Callable[[], None]


class FrameScheduler:
    """
    Single-threaded queue of callbacks to run on the next rendering frame.

    Callbacks run in the order they were requested. A callback requested while
    a frame is running waits for the following frame.
    """

    def __init__(self):
        self._queue: Deque[FrameCallback] = deque()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def request_frame(self, callback: FrameCallback) -> None:
        """Queue ``callback`` for the next frame."""
        self._queue.append(callback)

    def run_frame(self) -> int:
        """
        Run every callback queued before this call.

        Returns
        -------
        int
            Number of callbacks that ran.
        """
        n = len(self._queue)
        for _ in range(n):
            callback = self._queue.popleft()
            try:
                callback()
            except Exception as e:
                logger.exception(f"Error in frame callback {callback!r}: {e}")
        return n

    def clear(self) -> None:
        """Drop all pending callbacks."""
        self._queue.clear()


class TimerFrameScheduler(FrameScheduler):
    """
    Frame scheduler driven by a matplotlib canvas timer.

    The first request after an idle period arms a single-shot timer; when it
    fires, the queued frame runs.
    """

    def __init__(self, canvas, interval_ms: int = 16):
        super().__init__()
        self._timer = canvas.new_timer(interval=interval_ms)
        self._timer.single_shot = True
        self._timer.add_callback(self._on_timer)
        self._armed = False

    def request_frame(self, callback: FrameCallback) -> None:
        super().request_frame(callback)
        if not self._armed:
            self._armed = True
            self._timer.start()

    def _on_timer(self) -> None:
        self._armed = False
        self.run_frame()
        if self.pending and not self._armed:
            self._armed = True
            self._timer.start()

    def clear(self) -> None:
        super().clear()
        self._timer.stop()
        self._armed = False
