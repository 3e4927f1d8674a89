import numpy as np
import pytest

from pybdchart import DecimationConfig, Series, SimpleRange
from pybdchart.charts.adjustments import (
    AlertBinding,
    AveragingBinding,
    BindingState,
    FixedYAlertBinding,
    RandomDropBinding,
    Strategy,
    bind_update,
    chart_updater,
)


def alert_series(n=5000, start=100, stop=110, code=7.0):
    y = np.full(n, np.nan)
    y[start : stop + 1] = code
    return Series(np.arange(n, dtype=np.float64), y)


class TestAveragingBinding:
    def test_initial_decimation(self, ramp):
        binding = AveragingBinding(ramp)
        assert binding.state is BindingState.INITIAL
        assert len(binding.initial_data()) == 2000

    def test_full_view_update(self, ramp, make_chart):
        chart = make_chart(0, 9999)
        binding = AveragingBinding(ramp)
        binding.update(chart, 0)
        assert len(chart.buffers[0]) == 2000
        assert binding.state is BindingState.ADJUSTED

    def test_zoomed_in_passes_slice_through(self, ramp, make_chart):
        chart = make_chart(1000, 1999)
        AveragingBinding(ramp)(chart, 0)
        assert chart.buffers[0].x.tolist() == list(range(999, 2001))

    def test_stride_follows_visible_slice(self, ramp, make_chart):
        chart = make_chart(0, 5999)
        AveragingBinding(ramp).update(chart, 0)
        # 6001 visible points, stride ceil(6001 / 2000) = 4
        assert len(chart.buffers[0]) == 1501

    def test_config_threshold(self, ramp, make_chart):
        chart = make_chart(0, 999)
        binding = AveragingBinding(ramp, DecimationConfig(max_points_to_display=100))
        binding.update(chart, 0)
        assert len(chart.buffers[0]) <= 100

    def test_canonical_series_is_isolated(self, make_chart):
        source = Series(np.arange(10.0), np.arange(10.0))
        binding = AveragingBinding(source)
        source.y[:] = -1
        assert binding.full.is_frozen
        assert binding.full.y.tolist() == list(range(10))


class TestRandomDropBinding:
    def test_seeded_bindings_agree(self, ramp, make_chart):
        first = RandomDropBinding(ramp, rng=3)
        second = RandomDropBinding(ramp, rng=3)
        np.testing.assert_array_equal(first.initial_data().x, second.initial_data().x)

    def test_points_come_from_source(self, ramp, make_chart):
        chart = make_chart(0, 7999)
        RandomDropBinding(ramp, rng=0).update(chart, 2)
        shown = chart.buffers[2]
        assert len(shown) <= 2000
        np.testing.assert_array_equal(shown.x, shown.y)
        assert np.all(np.isin(shown.x, ramp.x))


class TestAlertBinding:
    def test_bins_visible_window(self, make_chart):
        chart = make_chart(0, 4999)
        AlertBinding(alert_series()).update(chart, 0)
        shown = chart.buffers[0]
        assert len(shown) < 5000
        labelled = shown.x[shown.y == 7.0]
        assert labelled.min() <= 100 and labelled.max() >= 110

    def test_zoomed_alert_passthrough(self, make_chart):
        chart = make_chart(95, 115)
        AlertBinding(alert_series()).update(chart, 0)
        assert chart.buffers[0].x.tolist() == list(range(94, 117))


class TestFixedYAlertBinding:
    def test_projects_onto_vertical_viewport(self, make_chart):
        full = alert_series(n=50, start=10, stop=20, code=3.0)
        binding = FixedYAlertBinding(full, SimpleRange(0.8, 0.9))
        chart = make_chart(0, 49, 0, 10)

        binding.update(chart, 1)
        shown = chart.buffers[1]
        assert set(shown.y[~np.isnan(shown.y)].tolist()) == {8.0}
        assert chart.fills[1] == pytest.approx(9.0)

        chart.set_viewport_y(100, 200)
        binding.update(chart, 1)
        shown = chart.buffers[1]
        assert set(shown.y[~np.isnan(shown.y)].tolist()) == {180.0}
        assert chart.fills[1] == pytest.approx(190.0)

    def test_canonical_series_untouched(self, make_chart):
        full = alert_series(n=50, start=10, stop=20, code=3.0)
        binding = FixedYAlertBinding(full, SimpleRange(0.8, 0.9))
        binding.update(make_chart(0, 49, 0, 10), 0)
        assert set(binding.full.y[~np.isnan(binding.full.y)].tolist()) == {3.0}
        assert binding.working_copy.y[15] == 8.0

    def test_initial_projection(self):
        binding = FixedYAlertBinding(
            alert_series(n=50, start=10, stop=20), SimpleRange(0.5, 1.0), init_y_range=SimpleRange(0, 4)
        )
        assert binding.fill_value == 4.0
        data = binding.initial_data()
        assert set(data.y[~np.isnan(data.y)].tolist()) == {2.0}

    def test_target_range_must_be_proportions(self):
        from pybdchart import InvalidProportionError

        with pytest.raises(InvalidProportionError):
            FixedYAlertBinding(alert_series(n=50), SimpleRange(0.5, 1.5))


class TestBindUpdate:
    @pytest.mark.parametrize(
        "strategy, cls, make_series",
        [
            (Strategy.AVERAGE, AveragingBinding, None),
            ("random_drop", RandomDropBinding, None),
            (Strategy.ALERT, AlertBinding, alert_series),
        ],
    )
    def test_dispatch(self, ramp, strategy, cls, make_series):
        series = ramp if make_series is None else make_series()
        assert type(bind_update(series, strategy)) is cls

    def test_alert_strategy_rejects_continuous_series(self, ramp):
        from pybdchart import MultipleAlertValuesError

        with pytest.raises(MultipleAlertValuesError):
            bind_update(ramp, Strategy.ALERT)

    def test_fixed_y_kwargs(self):
        binding = bind_update(
            alert_series(n=50), Strategy.FIXED_Y_ALERT, target_range=SimpleRange(0, 0.1)
        )
        assert isinstance(binding, FixedYAlertBinding)

    def test_unknown_strategy(self, ramp):
        with pytest.raises(ValueError, match="Unknown strategy"):
            bind_update(ramp, "lttb")


class TestChartUpdater:
    def test_updates_each_dataset(self, ramp, make_chart):
        chart = make_chart(0, 9999)
        update = chart_updater([AveragingBinding(ramp), AlertBinding(alert_series())])
        update(chart)
        assert sorted(chart.buffers) == [0, 1]

    def test_mapping_ids(self, ramp, make_chart):
        chart = make_chart(0, 9999)
        chart_updater({5: AveragingBinding(ramp)})(chart)
        assert list(chart.buffers) == [5]


class TestDecimationConfig:
    def test_defaults(self):
        config = DecimationConfig()
        assert config.max_points(123) == 123
        assert config.with_options(max_points_to_display=10).max_points(123) == 10

    def test_invalid_stride(self):
        with pytest.raises(ValueError):
            DecimationConfig(stride=0)
