"""
Error taxonomy for the log section analysis engine.

Every per-image error derives from LogSectionError so the batch orchestrator
can isolate it and report it with the originating filename.
"""


class LogSectionError(Exception):
    """Base class for all engine errors."""


class DecodeError(LogSectionError, ValueError):
    """Malformed or unreadable raster input."""


class NoRegionFound(LogSectionError, RuntimeError):
    """Binarization produced no foreground contour of positive area."""


class InvalidCalibration(LogSectionError, ValueError):
    """Calibration height resolved to a non-positive or non-finite scale."""


class DegenerateRegion(LogSectionError, ArithmeticError):
    """The rebuilt region mask has no pixels (zeroth moment is zero)."""


class DegenerateExtremeFiber(LogSectionError, ArithmeticError):
    """Distance from the centroid to the extreme fiber is zero or non-finite."""


class ExportError(LogSectionError, IOError):
    """The tabular exporter failed to serialize the results."""


class BatchCancelled(LogSectionError):
    """The batch was abandoned before this image was started."""
