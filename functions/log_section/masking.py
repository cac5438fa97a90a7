import cv2
import numpy as np


def build_region_mask(contour: np.ndarray, shape) -> np.ndarray:
    """
    Rasterize a contour into a filled membership mask.

    Everything outside the contour is off, including foreground pixels of
    stray text or noise. Boundary pixels are on.

    Args:
        contour (numpy.ndarray): (N, 2) contour of (x, y) points.
        shape (tuple): Raster shape; only (height, width) is used.

    Returns:
        numpy.ndarray: uint8 mask {0, 255} of size (height, width).
    """
    height, width = shape[:2]
    mask = np.zeros((height, width), dtype=np.uint8)
    cv2.drawContours(mask, [contour.reshape(-1, 1, 2).astype(np.int32)], -1, 255, thickness=cv2.FILLED)
    return mask


def clear_outside(image: np.ndarray, mask: np.ndarray, fill) -> np.ndarray:
    """
    Copy of an image with every pixel outside the mask set to fill.

    Args:
        image (numpy.ndarray): Raster of the same height and width as mask.
        mask (numpy.ndarray): Membership mask, nonzero means keep.
        fill: Pixel value (scalar or per-channel tuple) for cleared pixels.

    Returns:
        numpy.ndarray: Masked copy.
    """
    result = image.copy()
    result[mask == 0] = fill
    return result
