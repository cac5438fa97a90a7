"""
Diagnostic rendering of an analyzed section: stray pixels cleared, centroid
marker and dashed centroidal axes drawn over a copy of the source raster.
"""

import io
import math
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from . import config
from .binarization import as_raster
from .masking import build_region_mask, clear_outside


def to_rgba(image) -> np.ndarray:
    """Copy of a raster as a contiguous (H, W, 4) RGBA uint8 array."""
    raster = as_raster(image)
    if raster.ndim == 3 and raster.shape[2] == 1:
        raster = raster[:, :, 0]
    if raster.ndim == 2:
        return cv2.cvtColor(raster, cv2.COLOR_GRAY2RGBA)
    if raster.shape[2] == 3:
        return cv2.cvtColor(raster, cv2.COLOR_RGB2RGBA)
    return np.ascontiguousarray(raster).copy()


def draw_dashed_line(image, start, end, color, thickness=config.AXIS_THICKNESS,
                     dash=config.DASH_LENGTH, gap=config.DASH_GAP):
    """Draw a dashed straight line from start to end in place."""
    x0, y0 = start
    x1, y1 = end
    length = math.hypot(x1 - x0, y1 - y0)
    if length == 0:
        return image
    ux, uy = (x1 - x0) / length, (y1 - y0) / length
    pos = 0.0
    while pos < length:
        seg_end = min(pos + dash, length)
        p = (int(round(x0 + ux * pos)), int(round(y0 + uy * pos)))
        q = (int(round(x0 + ux * seg_end)), int(round(y0 + uy * seg_end)))
        cv2.line(image, p, q, color, thickness)
        pos += dash + gap
    return image


def _put_label(image, text, org):
    height, width = image.shape[:2]
    x = int(min(max(org[0], 0), max(width - 1, 0)))
    y = int(min(max(org[1], 0), max(height - 1, 0)))
    cv2.putText(image, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX, config.FONT_SCALE,
                config.LABEL_COLOR, config.FONT_THICKNESS, cv2.LINE_AA)


def annotate(image, contour: np.ndarray, centroid_px: tuple[float, float],
             mask: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Render the diagnostic image.

    Args:
        image (numpy.ndarray): Source raster; it is not modified.
        contour (numpy.ndarray): Selected (N, 2) contour.
        centroid_px (tuple): Centroid (x, y) in pixel-centre coordinates.
        mask (numpy.ndarray): Region mask of the contour, rebuilt when omitted.

    Returns:
        numpy.ndarray: RGBA raster, pixels outside the contour transparent.
    """
    rgba = to_rgba(image)
    height, width = rgba.shape[:2]

    if mask is None:
        mask = build_region_mask(contour, rgba.shape)
    annotated = clear_outside(rgba, mask, config.CLEARED_COLOR)

    cx = int(math.floor(centroid_px[0]))
    cy = int(math.floor(centroid_px[1]))

    draw_dashed_line(annotated, (0, cy), (width - 1, cy), config.AXIS_COLOR)
    draw_dashed_line(annotated, (cx, 0), (cx, height - 1), config.AXIS_COLOR)

    radius = max(config.MIN_MARKER_RADIUS, int(math.hypot(width, height) * config.MARKER_RADIUS_RATIO))
    cv2.circle(annotated, (cx, cy), radius, config.MARKER_COLOR, -1)

    offset = config.LABEL_OFFSET
    _put_label(annotated, "C", (cx + radius + 4, cy - radius - 4))
    _put_label(annotated, "X", (width - 2 * offset, cy - offset))
    _put_label(annotated, "Y", (cx + offset, 2 * offset))
    return annotated


def encode_png(image: np.ndarray) -> bytes:
    """Encode an RGBA/RGB/gray uint8 raster as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(image).save(buffer, format="PNG")
    return buffer.getvalue()
