from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Union

import numpy as np

from .errors import LengthMismatchError


class Datapoint(NamedTuple):
    """A single chart point. ``y`` is None for a gap."""

    x: float
    y: Optional[float]


def _as_float_array(values: Union[np.ndarray, Sequence[Optional[float]]]) -> np.ndarray:
    """Convert values to a float64 array, mapping None to NaN."""
    if isinstance(values, np.ndarray):
        return np.asarray(values, dtype=np.float64)
    return np.array(
        [np.nan if v is None else v for v in values], dtype=np.float64
    )


class Series:
    """
    Ordered sequence of datapoints stored as two parallel numpy arrays.

    ``x`` is assumed non-decreasing. Gaps in ``y`` are stored as NaN. A frozen
    series has read-only arrays and is safe to share between updates.
    """

    __slots__ = ("x", "y")

    def __init__(
        self,
        x: Union[np.ndarray, Sequence[float]],
        y: Union[np.ndarray, Sequence[Optional[float]]],
    ):
        """
        Initialise the series.

        Parameters
        ----------
        x : Union[np.ndarray, Sequence[float]]
            Horizontal positions (usually timestamps).
        y : Union[np.ndarray, Sequence[Optional[float]]]
            Values. None or NaN marks a gap.

        Raises
        ------
        LengthMismatchError
            If ``x`` and ``y`` have different lengths.
        """
        x_arr = _as_float_array(x)
        y_arr = _as_float_array(y)
        if x_arr.ndim != 1 or y_arr.ndim != 1:
            raise ValueError(
                f"Series arrays must be one-dimensional. Got x.ndim={x_arr.ndim}, y.ndim={y_arr.ndim}"
            )
        if len(x_arr) != len(y_arr):
            raise LengthMismatchError(
                f"x and y must have the same length. Got x={len(x_arr)}, y={len(y_arr)}"
            )
        self.x = x_arr
        self.y = y_arr

    @classmethod
    def from_points(cls, points: Iterable[Datapoint]) -> "Series":
        """Build a series from ``(x, y)`` pairs."""
        pts = list(points)
        return cls([p[0] for p in pts], [p[1] for p in pts])

    @classmethod
    def empty(cls) -> "Series":
        return cls(np.empty(0), np.empty(0))

    def __len__(self) -> int:
        return len(self.x)

    def __getitem__(self, key: slice) -> "Series":
        if not isinstance(key, slice):
            raise TypeError("Series only supports slice indexing; use points() for items")
        # Bypass __init__ so slices stay views (and stay read-only when frozen)
        out = Series.__new__(Series)
        out.x = self.x[key]
        out.y = self.y[key]
        return out

    def __iter__(self) -> Iterator[Datapoint]:
        return self.points()

    def __repr__(self) -> str:
        return f"Series(len={len(self)}, frozen={self.is_frozen})"

    def points(self) -> Iterator[Datapoint]:
        """Yield datapoints, mapping NaN gaps back to None."""
        for xv, yv in zip(self.x.tolist(), self.y.tolist()):
            yield Datapoint(xv, None if yv != yv else yv)

    def to_list(self) -> List[Datapoint]:
        return list(self.points())

    @property
    def is_frozen(self) -> bool:
        return not (self.x.flags.writeable or self.y.flags.writeable)

    def frozen(self) -> "Series":
        """Return a read-only copy."""
        out = self.copy()
        out.x.flags.writeable = False
        out.y.flags.writeable = False
        return out

    def copy(self) -> "Series":
        """Return a writable copy."""
        return Series(self.x.copy(), self.y.copy())

    def gap_mask(self) -> np.ndarray:
        """Boolean mask, True where ``y`` is a gap."""
        return np.isnan(self.y)


def zip_arrays(
    xs: Union[np.ndarray, Sequence[float]],
    ys: Union[np.ndarray, Sequence[Optional[float]]],
) -> Series:
    """
    Pair two sequences into a series, preserving order.

    Raises
    ------
    LengthMismatchError
        If the sequences have different lengths.
    """
    if len(xs) != len(ys):
        raise LengthMismatchError(
            f"Arrays must have the same length. Got {len(xs)} and {len(ys)}"
        )
    return Series(xs, ys)
