class ChartDataError(ValueError):
    """Base class for invalid chart data or decimation parameters."""


class InvalidRangeError(ChartDataError):
    """A range was constructed with ``min > max``."""


class LengthMismatchError(ChartDataError):
    """Paired sequences have different lengths."""


class InvalidProportionError(ChartDataError):
    """An interpolation parameter lies outside ``[0, 1]``."""


class InvalidBinWidthError(ChartDataError):
    """A computed or supplied alert bin width is not positive."""


class MultipleAlertValuesError(ChartDataError):
    """Alert binning received more than one distinct alert label."""
