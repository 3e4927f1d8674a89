import matplotlib.pyplot as plt

from pybdchart import FrameScheduler, TimerFrameScheduler


class TestFrameScheduler:
    def test_runs_in_request_order(self):
        scheduler = FrameScheduler()
        calls = []
        for i in range(3):
            scheduler.request_frame(lambda i=i: calls.append(i))
        assert scheduler.pending == 3
        assert scheduler.run_frame() == 3
        assert calls == [0, 1, 2]
        assert scheduler.pending == 0

    def test_request_during_frame_waits_for_next(self):
        scheduler = FrameScheduler()
        calls = []

        def first():
            calls.append("first")
            scheduler.request_frame(lambda: calls.append("second"))

        scheduler.request_frame(first)
        scheduler.run_frame()
        assert calls == ["first"]
        assert scheduler.pending == 1

        scheduler.run_frame()
        assert calls == ["first", "second"]

    def test_failing_callback_does_not_stop_frame(self):
        scheduler = FrameScheduler()
        calls = []

        def broken():
            raise RuntimeError("boom")

        scheduler.request_frame(broken)
        scheduler.request_frame(lambda: calls.append("after"))
        assert scheduler.run_frame() == 2
        assert calls == ["after"]

    def test_clear(self):
        scheduler = FrameScheduler()
        scheduler.request_frame(lambda: None)
        scheduler.clear()
        assert scheduler.pending == 0
        assert scheduler.run_frame() == 0


class TestTimerFrameScheduler:
    def test_timer_flushes_frame(self):
        scheduler = TimerFrameScheduler(plt.figure().canvas)
        calls = []
        scheduler.request_frame(lambda: calls.append(1))
        scheduler.request_frame(lambda: calls.append(2))
        assert scheduler._armed
        assert calls == []

        scheduler._on_timer()
        assert calls == [1, 2]
        assert not scheduler._armed
        assert scheduler.pending == 0

    def test_rearms_for_callbacks_queued_during_frame(self):
        scheduler = TimerFrameScheduler(plt.figure().canvas)
        calls = []

        def first():
            calls.append("first")
            scheduler.request_frame(lambda: calls.append("second"))

        scheduler.request_frame(first)
        scheduler._on_timer()
        assert calls == ["first"]
        assert scheduler._armed and scheduler.pending == 1

        scheduler._on_timer()
        assert calls == ["first", "second"]
        assert not scheduler._armed

    def test_clear_disarms(self):
        scheduler = TimerFrameScheduler(plt.figure().canvas)
        scheduler.request_frame(lambda: None)
        scheduler.clear()
        assert not scheduler._armed
        assert scheduler.pending == 0
