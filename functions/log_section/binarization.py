import logging

import cv2
import numpy as np

from .errors import DecodeError

logger = logging.getLogger(__name__)


def as_raster(image) -> np.ndarray:
    """
    Validate a decoded pixel buffer and return it as uint8.

    Accepts (H, W) intensity, (H, W, 1), (H, W, 3) RGB or (H, W, 4) RGBA arrays
    of any depth. Buffers whose values leave 0..255 (16-bit scans, wide
    integers, unnormalized floats) are stretched onto 0..255 rather than clipped.

    Args:
        image (numpy.ndarray): Decoded raster.

    Returns:
        numpy.ndarray: uint8 raster with the same shape.
    """
    if not isinstance(image, np.ndarray):
        raise DecodeError(f"Expected a numpy array, got {type(image).__name__}")
    if image.ndim not in (2, 3):
        raise DecodeError(f"Unsupported raster shape {image.shape}")
    if image.ndim == 3 and image.shape[2] not in (1, 3, 4):
        raise DecodeError(f"Unsupported channel count {image.shape[2]}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise DecodeError(f"Empty raster {image.shape}")

    if image.dtype == np.uint8:
        return image
    if image.dtype == np.bool_:
        return image.astype(np.uint8) * 255
    if np.issubdtype(image.dtype, np.floating):
        if not np.all(np.isfinite(image)):
            raise DecodeError("Raster contains non-finite values")
        low, high = float(image.min()), float(image.max())
        # Values in [0, 1] are treated as normalized intensities
        if low >= 0 and high <= 1:
            return np.rint(image * 255).astype(np.uint8)
        if low >= 0 and high <= 255:
            return np.rint(image).astype(np.uint8)
        return _rescale(image, low, high)
    if np.issubdtype(image.dtype, np.integer):
        low, high = int(image.min()), int(image.max())
        if low >= 0 and high <= 255:
            return image.astype(np.uint8)
        # Stretch the values present, low-contrast 16-bit scans would collapse otherwise
        return _rescale(image, low, high)
    raise DecodeError(f"Unsupported raster dtype {image.dtype}")


def _rescale(image: np.ndarray, low: float, high: float) -> np.ndarray:
    """Map [low, high] linearly onto 0..255 and cast to uint8."""
    if high == low:
        return np.zeros(image.shape, dtype=np.uint8)
    scaled = (image.astype(np.float64) - low) * (255.0 / (float(high) - float(low)))
    return np.clip(np.rint(scaled), 0, 255).astype(np.uint8)


def to_grayscale(image) -> np.ndarray:
    """
    Convert an RGB/RGBA/intensity raster to a single channel.
    Transparent RGBA pixels are composited onto white so they read as background.
    """
    raster = as_raster(image)
    if raster.ndim == 2:
        return raster
    channels = raster.shape[2]
    if channels == 1:
        return raster[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(raster, cv2.COLOR_RGB2GRAY)

    alpha = raster[:, :, 3:4].astype(np.float32) / 255.0
    rgb = raster[:, :, :3].astype(np.float32) * alpha + 255.0 * (1.0 - alpha)
    return cv2.cvtColor(np.rint(rgb).astype(np.uint8), cv2.COLOR_RGB2GRAY)


def border_on_fraction(binary: np.ndarray) -> float:
    """Fraction of image-border pixels that are 'on'."""
    border = np.concatenate([binary[0, :], binary[-1, :], binary[:, 0], binary[:, -1]])
    return float(np.count_nonzero(border)) / border.size


def binarize(image) -> np.ndarray:
    """
    Binarize a raster with Otsu's threshold and normalize polarity.

    The class that dominates the image border is taken as background, so the
    shape is 'on' (255) whether it is dark on light or light on dark. On a tie
    the dark class is foreground.

    Args:
        image (numpy.ndarray): Decoded raster.

    Returns:
        numpy.ndarray: uint8 mask {0, 255} of the same height and width.
    """
    gray = to_grayscale(image)

    # Otsu is undefined on a constant image; there is no foreground to find
    if gray.min() == gray.max():
        logger.debug("Constant raster, binarized to an empty mask")
        return np.zeros(gray.shape, dtype=np.uint8)

    threshold, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)

    fraction = border_on_fraction(binary)
    if fraction >= 0.5:
        binary = cv2.bitwise_not(binary)

    logger.debug(f"Otsu threshold={threshold:.1f}, border on-fraction={fraction:.2f}")
    return binary
