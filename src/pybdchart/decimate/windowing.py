import numpy as np
from loguru import logger

from .series import Series


def get_visible_slice(full: Series, viewport_min: float, viewport_max: float) -> Series:
    """
    Extract the part of ``full`` that is visible in ``[viewport_min, viewport_max]``.

    One point just outside each edge is kept when available so that lines drawn
    from the slice reach the edges of the viewport. ``full.x`` must be
    non-decreasing.

    Parameters
    ----------
    full : Series
        Full-resolution series.
    viewport_min, viewport_max : float
        Current horizontal viewport.

    Returns
    -------
    Series
        A view into ``full``. Never empty when ``full`` is not.
    """
    n = len(full)
    # last index with x < viewport_min, or 0
    i0 = max(int(np.searchsorted(full.x, viewport_min, side="left")) - 1, 0)
    # first index with x > viewport_max, or the end
    i_end = int(np.searchsorted(full.x, viewport_max, side="right"))
    i_stop = n if i_end >= n else i_end + 1

    logger.debug(
        f"Visible slice for [{viewport_min:.6g}, {viewport_max:.6g}]: [{i0}, {i_stop}) of {n}"
    )
    return full[i0:i_stop]
