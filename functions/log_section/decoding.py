"""
Decoding of encoded images (PNG, JPEG, ...) into raster buffers.
"""

import base64
import binascii
import io
import re

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .binarization import as_raster
from .errors import DecodeError

_DATA_URL_RE = re.compile(r"^data:image/[\w.+-]+;base64,")


def decode_base64(data: str) -> bytes:
    """
    Decode a base64 string, with or without a data:image/...;base64, prefix.
    """
    payload = _DATA_URL_RE.sub("", data.strip())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 image data: {e}")


def decode_image(data) -> np.ndarray:
    """
    Decode image bytes into an RGB, RGBA or grayscale uint8 array.

    EXIF orientation is applied so the raster is upright.

    Args:
        data (bytes | str): Encoded image bytes or a base64 / data URL string.

    Returns:
        numpy.ndarray: (H, W), (H, W, 3) or (H, W, 4) uint8 raster.
    """
    if isinstance(data, str):
        data = decode_base64(data)
    if not isinstance(data, (bytes, bytearray)) or len(data) == 0:
        raise DecodeError("No image data")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            img = ImageOps.exif_transpose(img)
            if img.mode.startswith("I") or img.mode == "F":
                # 16-bit and float images keep their depth until rescaled
                return as_raster(np.array(img))
            if img.mode in ("LA", "PA") or (img.mode == "P" and "transparency" in img.info):
                img = img.convert("RGBA")
            elif img.mode not in ("L", "RGB", "RGBA"):
                img = img.convert("RGB")
            return np.array(img)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Unreadable image: {e}")
