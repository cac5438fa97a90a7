"""
Contour extraction and selection of the dominant foreground region.
"""

import logging

import cv2
import numpy as np

from .errors import NoRegionFound
from .models import BoundingBox

logger = logging.getLogger(__name__)


def find_contours(binary: np.ndarray) -> list:
    """
    Extract the external boundaries of all 8-connected foreground components.

    Args:
        binary (numpy.ndarray): uint8 mask {0, 255}.

    Returns:
        list: Contours as (N, 2) int32 arrays of (x, y) points.
    """
    cs, _ = cv2.findContours(binary, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
    return [c[:, 0, :].astype(np.int32) for c in cs]


def scan_position(contour: np.ndarray) -> tuple[int, int]:
    """Topmost-then-leftmost point of a contour, as a (y, x) sort key."""
    idx = np.lexsort((contour[:, 0], contour[:, 1]))[0]
    return int(contour[idx, 1]), int(contour[idx, 0])


def select_largest_contour(contours: list) -> np.ndarray:
    """
    Pick the contour enclosing the largest area (shoelace formula).

    Ties go to the contour found first in a top-to-bottom, left-to-right scan.

    Args:
        contours (list): Contours from find_contours.

    Returns:
        numpy.ndarray: The selected (N, 2) contour.
    """
    if not contours:
        raise NoRegionFound("No foreground contour found")

    ordered = sorted(contours, key=scan_position)
    areas = [cv2.contourArea(c.reshape(-1, 1, 2)) for c in ordered]
    best = int(np.argmax(areas))  # argmax keeps the first maximum

    if areas[best] <= 0:
        raise NoRegionFound("Largest foreground contour has zero area")

    logger.debug(f"{len(contours)} contours, largest area={areas[best]:.1f} px")
    return ordered[best]


def largest_contour(binary: np.ndarray) -> np.ndarray:
    """
    Extract the largest contour from a binary mask {0,255}.
    Returns contour as (N, 2) int32 array.
    """
    return select_largest_contour(find_contours(binary))


def bounding_box(contour: np.ndarray) -> BoundingBox:
    """Integer bounding box of a contour; width and height count pixels."""
    x, y, w, h = cv2.boundingRect(contour.reshape(-1, 1, 2))
    return BoundingBox(int(x), int(y), int(w), int(h))
