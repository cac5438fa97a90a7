"""
Raster moments and second moment of area of a region mask.

Pixel (row, col) is treated as a unit square whose centre sits at
(col + 0.5, row + 0.5), so a region covering columns 0..W-1 has its centroid
at W/2 and its moments match the continuous shape the pixels tile.
"""

import logging

import numpy as np

from .errors import DegenerateRegion
from .models import Moments, SectionProperties

logger = logging.getLogger(__name__)


def region_coordinates(mask: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Pixel-centre (x, y) coordinates of every 'on' pixel, as float64."""
    rows, cols = np.nonzero(mask)
    return cols.astype(np.float64) + 0.5, rows.astype(np.float64) + 0.5


def compute_moments(mask: np.ndarray) -> Moments:
    """
    Zeroth and first raster moments of a mask.

    Args:
        mask (numpy.ndarray): Membership mask, nonzero means on.

    Returns:
        Moments: m00 (pixel count), m10 and m01 (sums of x and y).
    """
    xs, ys = region_coordinates(mask)
    return Moments(m00=float(xs.size), m10=float(xs.sum()), m01=float(ys.sum()))


def second_moment_xx(ys_px: np.ndarray, scale: float, centroid_y_mm: float) -> float:
    """
    Second moment of area about the horizontal centroidal axis, in mm^4.

    Each pixel contributes (y * scale - centroid_y_mm)^2 * scale^2. Terms are
    accumulated in float64 with numpy's pairwise summation.
    """
    dy = ys_px * scale - centroid_y_mm
    return float(np.sum(dy * dy)) * scale * scale


def compute_section_properties(mask: np.ndarray, scale: float) -> tuple[Moments, SectionProperties]:
    """
    Area, centroid and Ixx of the region in millimetres.

    Args:
        mask (numpy.ndarray): Authoritative region mask.
        scale (float): Millimeters per pixel.

    Returns:
        tuple: (Moments, SectionProperties).
    """
    xs, ys = region_coordinates(mask)
    moments = Moments(m00=float(xs.size), m10=float(xs.sum()), m01=float(ys.sum()))
    if moments.m00 == 0:
        raise DegenerateRegion("Region mask has no pixels")

    cx_px, cy_px = moments.centroid_px
    area_mm2 = moments.m00 * scale * scale
    centroid_x_mm = cx_px * scale
    centroid_y_mm = cy_px * scale
    ixx_mm4 = second_moment_xx(ys, scale, centroid_y_mm)

    logger.debug(f"m00={moments.m00:.0f}, centroid=({cx_px:.2f}, {cy_px:.2f}) px, Ixx={ixx_mm4:.4g} mm^4")
    return moments, SectionProperties(area_mm2, centroid_x_mm, centroid_y_mm, ixx_mm4)
