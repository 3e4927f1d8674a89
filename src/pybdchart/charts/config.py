import sys
from dataclasses import dataclass, replace
from typing import Optional

from loguru import logger

from pybdchart.decimate.downsampling import DEFAULT_LENGTH

# Alert bands emit two points per bin, so they get half the budget
DEFAULT_ALERT_LENGTH = DEFAULT_LENGTH // 2


@dataclass(frozen=True)
class DecimationConfig:
    """
    Options recognised by the dataset bindings.

    Attributes
    ----------
    stride : Optional[int]
        Fixed chunk size for averaging and random drop. None derives it from
        the visible slice on every update.
    max_points_to_display : Optional[int]
        Slices up to this length are passed through untouched. None uses the
        strategy default (``DEFAULT_LENGTH``, or ``DEFAULT_ALERT_LENGTH`` for
        alerts).
    target_chunk_width : Optional[float]
        Fixed alert bin width in x units. None derives it from the viewport.
    """

    stride: Optional[int] = None
    max_points_to_display: Optional[int] = None
    target_chunk_width: Optional[float] = None

    def __post_init__(self):
        if self.stride is not None and self.stride < 1:
            raise ValueError(f"stride must be >= 1. Got {self.stride}")
        if self.max_points_to_display is not None and self.max_points_to_display < 1:
            raise ValueError(
                f"max_points_to_display must be >= 1. Got {self.max_points_to_display}"
            )

    def max_points(self, default: int) -> int:
        """Display threshold, falling back to ``default``."""
        if self.max_points_to_display is None:
            return default
        return self.max_points_to_display

    def with_options(self, **changes) -> "DecimationConfig":
        return replace(self, **changes)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure loguru logging with specified level.

    Parameters
    ----------
    log_level : str, default="INFO"
        Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )
