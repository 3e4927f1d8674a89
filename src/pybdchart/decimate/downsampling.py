import math
from typing import Optional, Tuple, Union

import numpy as np
from loguru import logger
from numba import njit

from .errors import InvalidBinWidthError, MultipleAlertValuesError
from .range_math import skip_repeats
from .series import Series

# Number of points a chart is expected to draw smoothly
DEFAULT_LENGTH = 2000

RandomSource = Union[None, int, np.random.Generator]


@njit
def _average_chunks_numba(
    x: np.ndarray, y: np.ndarray, stride: int, n_out: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Numba-optimized chunk averaging.

    Parameters
    ----------
    x : np.ndarray
        Input positions (float64).
    y : np.ndarray
        Input values (float64, NaN for gaps).
    stride : int
        Chunk size.
    n_out : int
        Number of chunks, ``ceil(len(x) / stride)``.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        Mean position and mean non-gap value of every chunk. A chunk with no
        values yields NaN.
    """
    n = len(x)
    x_out = np.empty(n_out, dtype=np.float64)
    y_out = np.empty(n_out, dtype=np.float64)

    for i in range(n_out):
        start_idx = i * stride
        end_idx = min(start_idx + stride, n)

        x_sum = 0.0
        y_sum = 0.0
        y_count = 0
        for j in range(start_idx, end_idx):
            x_sum += x[j]
            if not np.isnan(y[j]):
                y_sum += y[j]
                y_count += 1

        x_out[i] = x_sum / (end_idx - start_idx)
        if y_count > 0:
            y_out[i] = y_sum / y_count
        else:
            y_out[i] = np.nan

    return x_out, y_out


@njit
def _bin_alerts_numba(
    x: np.ndarray, y: np.ndarray, width: float, alert: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Numba-optimized alert run-binning.

    Scans the input once. A bin starting at ``i0`` closes at ``i`` when ``i`` is
    the last index or the bin spans at least ``width``. Every bin emits its two
    boundary points, labelled ``alert`` if any point of the bin is set.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        Boundary positions and labels (NaN for empty bins).
    """
    n = len(x)
    x_out = np.empty(2 * n, dtype=np.float64)
    y_out = np.empty(2 * n, dtype=np.float64)
    k = 0

    i0 = 0
    t0 = x[0]
    for i in range(1, n):
        if i == n - 1 or x[i] - t0 >= width:
            labelled = False
            for j in range(i0, i + 1):
                if not np.isnan(y[j]):
                    labelled = True
                    break
            label = alert if labelled else np.nan

            x_out[k] = x[i0]
            y_out[k] = label
            x_out[k + 1] = x[i]
            y_out[k + 1] = label
            k += 2

            i0 = i + 1
            if i0 < n:
                t0 = x[i0]

    return x_out[:k], y_out[:k]


def _resolve_stride(n: int, stride: Optional[int]) -> int:
    if stride is None:
        return math.ceil(n / DEFAULT_LENGTH)
    return int(stride)


def downsample_by_averaging(
    data: Series,
    stride: Optional[int] = None,
    max_points_to_display: int = DEFAULT_LENGTH,
) -> Series:
    """
    Downsample by averaging consecutive points in chunks of ``stride``.

    Parameters
    ----------
    data : Series
        Series to downsample.
    stride : Optional[int], default=None
        Chunk size. The output has ``ceil(len(data) / stride)`` points. If None,
        ``ceil(len(data) / DEFAULT_LENGTH)`` is used.
    max_points_to_display : int, default=DEFAULT_LENGTH
        Series of at most this many points are returned unchanged.

    Returns
    -------
    Series
        Downsampled series, or ``data`` itself when no reduction applies.
    """
    stride = _resolve_stride(len(data), stride)
    if stride <= 1 or len(data) <= max_points_to_display:
        return data

    n_out = math.ceil(len(data) / stride)
    x_out, y_out = _average_chunks_numba(
        np.ascontiguousarray(data.x), np.ascontiguousarray(data.y), stride, n_out
    )
    logger.debug(f"Averaged {len(data)} points to {n_out} (stride={stride})")
    return Series(x_out, y_out)


def downsample_alerts(
    data: Series,
    target_chunk_width: Optional[float] = None,
    max_points_to_display: int = DEFAULT_LENGTH // 2,
) -> Series:
    """
    Downsample a sparse alert series by binning it in time.

    The values are assumed to be either gaps or one single alert label. The
    x-range is cut into bins of about ``target_chunk_width``; a bin is labelled
    with the alert if any of its points carries it, otherwise it is a gap. Each
    bin contributes its two boundary points and adjacent flat runs are merged
    afterwards.

    Parameters
    ----------
    data : Series
        Alert series (gaps + one label).
    target_chunk_width : Optional[float], default=None
        Bin width in x units. If None, ``(last.x - first.x) / (DEFAULT_LENGTH / 2)``.
    max_points_to_display : int, default=DEFAULT_LENGTH // 2
        Series of at most this many points are returned unchanged.

    Returns
    -------
    Series
        Downsampled alert series.

    Raises
    ------
    InvalidBinWidthError
        If the bin width is not positive.
    MultipleAlertValuesError
        If the series holds more than one distinct alert label.
    """
    if len(data) <= 2:
        return data

    if target_chunk_width is None:
        target_chunk_width = (data.x[-1] - data.x[0]) / (DEFAULT_LENGTH / 2)

    if not target_chunk_width > 0:
        raise InvalidBinWidthError(
            f"Target chunk width must be greater than 0. Got {target_chunk_width}"
        )

    labels = np.unique(data.y[~data.gap_mask()])
    if len(labels) > 1:
        raise MultipleAlertValuesError(
            f"Cannot downsample alerts with more than one unique alert. Got {labels[:10].tolist()}"
        )
    if len(labels) == 0:
        return data

    if len(data) <= max_points_to_display:
        return data

    x_out, y_out = _bin_alerts_numba(
        np.ascontiguousarray(data.x),
        np.ascontiguousarray(data.y),
        float(target_chunk_width),
        float(labels[0]),
    )
    result = skip_repeats(Series(x_out, y_out))
    logger.debug(
        f"Binned {len(data)} alert points to {len(result)} (width={target_chunk_width:.6g})"
    )
    return result


def downsample_by_dropping_at_random(
    data: Series,
    stride: Optional[int] = None,
    max_points_to_display: int = DEFAULT_LENGTH,
    rng: RandomSource = None,
) -> Series:
    """
    Downsample by keeping one randomly chosen point per chunk of ``stride``.

    Unlike averaging, every emitted point is an original point, which suits
    scatter plots. Within a chunk the choice is uniform among points with a
    value, or among all points when the chunk only holds gaps.

    Parameters
    ----------
    data : Series
        Series to downsample.
    stride : Optional[int], default=None
        Chunk size. If None, ``ceil(len(data) / DEFAULT_LENGTH)``.
    max_points_to_display : int, default=DEFAULT_LENGTH
        Series of at most this many points are returned unchanged.
    rng : Union[None, int, np.random.Generator], default=None
        Random source or seed. None draws from a fresh unseeded generator, so
        the output is not reproducible.

    Returns
    -------
    Series
        Downsampled series.
    """
    stride = _resolve_stride(len(data), stride)
    if stride <= 1 or len(data) <= max_points_to_display:
        return data

    generator = np.random.default_rng(rng)
    n = len(data)
    n_out = math.ceil(n / stride)
    has_value = ~data.gap_mask()
    picked = np.empty(n_out, dtype=np.int64)

    for i in range(n_out):
        start_idx = i * stride
        end_idx = min(start_idx + stride, n)
        candidates = np.flatnonzero(has_value[start_idx:end_idx])
        if len(candidates) > 0:
            picked[i] = start_idx + candidates[generator.integers(len(candidates))]
        else:
            picked[i] = start_idx + generator.integers(end_idx - start_idx)

    logger.debug(f"Dropped {n} points to {n_out} at random (stride={stride})")
    return Series(data.x[picked], data.y[picked])
