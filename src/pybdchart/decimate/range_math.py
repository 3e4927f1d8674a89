from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from .errors import InvalidProportionError, InvalidRangeError
from .series import Series, _as_float_array


@dataclass(frozen=True)
class SimpleRange:
    """Closed interval ``[min, max]`` with ``min <= max``."""

    min: float
    max: float

    def __post_init__(self):
        if not (self.min <= self.max):
            raise InvalidRangeError(
                f"Invalid range: min ({self.min}) must be <= max ({self.max})"
            )

    @property
    def span(self) -> float:
        return self.max - self.min


def skip_repeats(series: Series) -> Series:
    """
    Remove interior points whose value equals both neighbours' values.

    Flat runs (for example long stretches without an alert) collapse to their
    boundary points. Gaps compare equal to gaps. The first and last points are
    always kept.

    Parameters
    ----------
    series : Series
        Series to compress.

    Returns
    -------
    Series
        Compressed series, never longer than the input.
    """
    if len(series) < 3:
        return series

    y = series.y
    gaps = np.isnan(y)
    with np.errstate(invalid="ignore"):
        same_prev = (y[1:-1] == y[:-2]) | (gaps[1:-1] & gaps[:-2])
        same_next = (y[1:-1] == y[2:]) | (gaps[1:-1] & gaps[2:])

    keep = np.ones(len(series), dtype=np.bool_)
    keep[1:-1] = ~(same_prev & same_next)
    return Series(series.x[keep], y[keep])


def value_range(
    values: Union[np.ndarray, Sequence[Optional[float]]],
) -> Optional[SimpleRange]:
    """
    Range of the non-null values.

    Returns
    -------
    Optional[SimpleRange]
        None if no value is left after dropping None/NaN.
    """
    arr = _as_float_array(values)
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return None
    return SimpleRange(float(np.min(arr)), float(np.max(arr)))


def common_range(
    series_list: Iterable[Union[np.ndarray, Sequence[Optional[float]]]],
) -> SimpleRange:
    """
    Overall range spanned by several value sequences.

    Sequences with no values are ignored. When nothing is left the default
    ``SimpleRange(0, 1)`` is returned instead of failing.

    Examples
    --------
    >>> common_range([[1, 2, None, 3], [10, None]])
    SimpleRange(min=1.0, max=10.0)
    """
    ranges = [r for r in map(value_range, series_list) if r is not None]
    if not ranges:
        return SimpleRange(0.0, 1.0)
    return SimpleRange(
        min(r.min for r in ranges),
        max(r.max for r in ranges),
    )


def parameterized_position(t: float, rng: SimpleRange) -> float:
    """
    Position inside ``rng`` that is a proportion ``t`` of the way through it.

    Raises
    ------
    InvalidProportionError
        If ``t`` is outside ``[0, 1]``.
    """
    if not (0 <= t <= 1):
        raise InvalidProportionError(f"Proportion must be between 0 and 1. Got {t}")
    return rng.min + t * (rng.max - rng.min)
