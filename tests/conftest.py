import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402

from pybdchart import HeadlessChart, Series, SimpleRange  # noqa: E402


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def ramp():
    """10,000 evenly spaced samples with y == x."""
    x = np.arange(10_000, dtype=np.float64)
    return Series(x, x.copy())


@pytest.fixture
def make_chart():
    def factory(xmin=0.0, xmax=10_000.0, ymin=0.0, ymax=1.0, **kwargs):
        return HeadlessChart(SimpleRange(xmin, xmax), SimpleRange(ymin, ymax), **kwargs)

    return factory
