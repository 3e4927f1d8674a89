import numpy as np
import pytest

from pybdchart import Series, get_visible_slice


@pytest.fixture
def ten():
    return Series(np.arange(10), np.arange(10) * 10.0).frozen()


class TestVisibleSlice:
    @pytest.mark.parametrize(
        "vmin, vmax, expected",
        [
            (2.5, 6.5, [2, 3, 4, 5, 6, 7]),
            (3, 6, [2, 3, 4, 5, 6, 7]),
            (-5, 2, [0, 1, 2, 3]),
            (8, 20, [7, 8, 9]),
            (0, 9, list(range(10))),
        ],
    )
    def test_includes_one_point_beyond_each_edge(self, ten, vmin, vmax, expected):
        assert get_visible_slice(ten, vmin, vmax).x.tolist() == expected

    @pytest.mark.parametrize("vmin, vmax", [(20, 30), (-10, -5), (4.2, 4.4)])
    def test_never_empty(self, ten, vmin, vmax):
        assert len(get_visible_slice(ten, vmin, vmax)) > 0

    def test_empty_input(self):
        assert len(get_visible_slice(Series.empty(), 0, 1)) == 0

    def test_slice_of_frozen_series_is_read_only(self, ten):
        visible = get_visible_slice(ten, 2, 5)
        assert visible.is_frozen
        with pytest.raises(ValueError):
            visible.y[0] = 1.0

    def test_repeated_timestamps(self):
        series = Series([0, 1, 1, 1, 2, 3], np.zeros(6))
        assert get_visible_slice(series, 1, 1).x.tolist() == [0, 1, 1, 1, 2]
