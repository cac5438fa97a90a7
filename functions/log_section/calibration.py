"""
Calibration functions for converting between pixel and millimeter units.
"""

import logging
import math
import re
from typing import Optional

from . import config
from .errors import InvalidCalibration
from .models import BoundingBox

logger = logging.getLogger(__name__)

_HEIGHT_RE = re.compile(config.HEIGHT_PATTERN, re.IGNORECASE)

SOURCE_EXPLICIT = "explicit"
SOURCE_OCR = "ocr"
SOURCE_DEFAULT = "default"


def parse_height_from_text(text: Optional[str],
                           min_mm: float = config.MIN_HEIGHT_MM,
                           max_mm: float = config.MAX_HEIGHT_MM) -> Optional[int]:
    """
    Find a height label such as "342mm" or "342 MM" in recognized text.

    The first "<integer> mm" match strictly between min_mm and max_mm wins.

    Args:
        text (str): Free-form OCR output, may be empty or None.
        min_mm (float): Exclusive lower bound.
        max_mm (float): Exclusive upper bound.

    Returns:
        int: Detected height in mm, or None when nothing acceptable is found.
    """
    if not text:
        return None
    for match in _HEIGHT_RE.finditer(text):
        value = int(match.group(1))
        if min_mm < value < max_mm:
            return value
    return None


def validate_height(height_mm) -> float:
    """Return height_mm as float, rejecting non-positive or non-finite values."""
    try:
        value = float(height_mm)
    except (TypeError, ValueError):
        raise InvalidCalibration(f"Calibration height is not a number: {height_mm!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidCalibration(f"Calibration height must be positive and finite, got {value}")
    return value


def resolve_calibration_height(explicit_mm: Optional[float] = None,
                               detected_mm: Optional[float] = None,
                               fallback_mm: Optional[float] = config.DEFAULT_HEIGHT_MM) -> tuple[float, str]:
    """
    Pick the calibration height: explicit, then OCR-detected, then fallback.

    Args:
        explicit_mm (float): Height supplied by the caller for this image.
        detected_mm (float): Height parsed from OCR text.
        fallback_mm (float): Batch fallback; None disables the fallback.

    Returns:
        tuple[float, str]: (height_mm, source) with source one of
        'explicit', 'ocr', 'default'.
    """
    if explicit_mm is not None:
        return validate_height(explicit_mm), SOURCE_EXPLICIT
    if detected_mm is not None:
        return validate_height(detected_mm), SOURCE_OCR
    if fallback_mm is not None:
        return validate_height(fallback_mm), SOURCE_DEFAULT
    raise InvalidCalibration("No calibration height supplied or detected and no fallback configured")


def compute_scale(height_mm: float, bbox: BoundingBox) -> float:
    """
    Millimeters per pixel from a known real-world height and the contour's
    bounding-box height in pixels.
    """
    if bbox.height <= 0:
        raise InvalidCalibration(f"Bounding box has no height: {bbox}")
    scale = float(height_mm) / bbox.height
    if not math.isfinite(scale) or scale <= 0:
        raise InvalidCalibration(f"Invalid scale {scale} mm/px from height {height_mm} mm over {bbox.height} px")
    logger.debug(f"Scale: {scale:.6f} mm/px ({height_mm} mm / {bbox.height} px)")
    return scale
