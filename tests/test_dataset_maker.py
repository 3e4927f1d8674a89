import numpy as np
import pytest

from pybdchart import DatasetMaker, LengthMismatchError, SimpleRange
from pybdchart.charts.adjustments import (
    AlertBinding,
    AveragingBinding,
    FixedYAlertBinding,
    RandomDropBinding,
)
from pybdchart.charts.dataset import unique_plottable_alerts


@pytest.fixture
def alerts():
    return [None] * 5 + [1] * 5 + [None] * 5 + [2] * 5


def set_values(series):
    return set(series.y[~np.isnan(series.y)].tolist())


class TestUniquePlottableAlerts:
    def test_sorted_without_gaps(self):
        assert unique_plottable_alerts([3, None, 1, 3, np.nan]) == [1.0, 3.0]

    def test_skip(self):
        assert unique_plottable_alerts([3, None, 1, 3], skip_alerts=[1]) == [3.0]

    def test_no_alerts(self):
        assert unique_plottable_alerts([None, None]) == []


class TestLinePlot:
    def test_decimated_line(self, ramp):
        chart_data = DatasetMaker.line_plot(ramp.x, ramp.y, "signal", color="blue")
        assert isinstance(chart_data.update, AveragingBinding)
        assert chart_data.dataset.kind == "line"
        assert chart_data.dataset.label == "signal"
        assert chart_data.dataset.color == "blue"
        assert len(chart_data.dataset.data) == 2000

    def test_short_line_unchanged(self):
        chart_data = DatasetMaker.line_plot([0, 1, 2], [5, None, 7], "short")
        assert chart_data.dataset.data.x.tolist() == [0, 1, 2]
        assert np.isnan(chart_data.dataset.data.y[1])

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            DatasetMaker.line_plot([0, 1, 2], [1, 2], "bad")


class TestScatterPlot:
    def test_decimated_scatter(self, ramp):
        chart_data = DatasetMaker.scatter_plot(ramp.x, ramp.y, "points", rng=0)
        assert isinstance(chart_data.update, RandomDropBinding)
        assert chart_data.dataset.kind == "scatter"
        assert chart_data.dataset.alpha == 0.6
        assert len(chart_data.dataset.data) == 2000


class TestStandardAlertPlot:
    def test_one_band_per_label(self, alerts):
        result = DatasetMaker.standard_alert_plot(
            np.arange(20), alerts, label_dict={1: "Low"}, color_dict={2: "teal"}
        )
        assert len(result) == 2
        low, other = result
        assert all(isinstance(r.update, AlertBinding) for r in result)

        assert low.dataset.label == "Low"
        assert other.dataset.label == "Alert 2"
        assert other.dataset.color == "teal"
        assert low.dataset.extra["alert"] == 1.0

        assert set_values(low.dataset.data) == {0.0}
        assert low.dataset.fill_value == 1.0
        assert set_values(other.dataset.data) == {1.0}
        assert other.dataset.fill_value == 2.0

    def test_skip_alerts(self, alerts):
        result = DatasetMaker.standard_alert_plot(np.arange(20), alerts, skip_alerts=[1])
        assert [r.dataset.extra["alert"] for r in result] == [2.0]
        assert set_values(result[0].dataset.data) == {0.0}

    def test_band_covers_alert_times(self, alerts):
        low = DatasetMaker.standard_alert_plot(np.arange(20), alerts)[0]
        data = low.dataset.data
        assert data.x[~np.isnan(data.y)].tolist() == [5, 9]


class TestFixedYAlertPlot:
    def test_bands_follow_initial_viewport(self, alerts):
        result = DatasetMaker.fixed_y_alert_plot(
            np.arange(20), alerts, SimpleRange(0, 10), SimpleRange(0.8, 0.9)
        )
        assert len(result) == 2
        for chart_data in result:
            assert isinstance(chart_data.update, FixedYAlertBinding)
            assert set_values(chart_data.dataset.data) == {8.0}
            assert chart_data.dataset.fill_value == pytest.approx(9.0)

    def test_update_moves_band(self, alerts, make_chart):
        chart_data = DatasetMaker.fixed_y_alert_plot(
            np.arange(20), alerts, SimpleRange(0, 10), SimpleRange(0.5, 1.0)
        )[0]
        chart = make_chart(0, 19, -4, 4)
        chart_data.update(chart, 0)
        assert set_values(chart.buffers[0]) == {0.0}
        assert chart.fills[0] == 4.0
