import math

from .errors import DegenerateExtremeFiber
from .models import BoundingBox


def extreme_fiber_distance(bbox: BoundingBox, centroid_y_mm: float, scale: float) -> float:
    """
    Largest vertical distance (mm) from the centroid to the top or bottom edge
    of the bounding box.
    """
    top_mm = bbox.top * scale
    bottom_mm = bbox.bottom * scale
    return max(bottom_mm - centroid_y_mm, centroid_y_mm - top_mm)


def section_modulus(ixx_mm4: float, bbox: BoundingBox, centroid_y_mm: float, scale: float) -> float:
    """
    Section modulus Ixx / c in mm^3.

    Args:
        ixx_mm4 (float): Second moment of area about the centroidal x axis.
        bbox (BoundingBox): Bounding box of the selected contour.
        centroid_y_mm (float): Centroid y in mm.
        scale (float): Millimeters per pixel.

    Returns:
        float: Section modulus.
    """
    c_mm = extreme_fiber_distance(bbox, centroid_y_mm, scale)
    if not math.isfinite(c_mm) or c_mm <= 0:
        raise DegenerateExtremeFiber(f"Extreme fiber distance is {c_mm}")
    return ixx_mm4 / c_mm
