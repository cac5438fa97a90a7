"""
Data model for the log section analysis engine.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np


@dataclass(frozen=True)
class BoundingBox:
    """Integer bounding box of the selected contour, in pixels."""
    x: int
    y: int
    width: int
    height: int

    @property
    def top(self) -> int:
        return self.y

    @property
    def bottom(self) -> int:
        # Pixel-edge coordinate, one past the last row
        return self.y + self.height


@dataclass(frozen=True)
class Moments:
    """Raw, unscaled raster moments over pixel centres."""
    m00: float
    m10: float
    m01: float

    @property
    def centroid_px(self) -> tuple[float, float]:
        return self.m10 / self.m00, self.m01 / self.m00


@dataclass(frozen=True)
class SectionProperties:
    """Geometric section properties in millimetres."""
    area_mm2: float
    centroid_x_mm: float
    centroid_y_mm: float
    Ixx_mm4: float


@dataclass(frozen=True)
class AnalysisResult:
    """Measurement record for one image."""
    filename: str
    area_mm2: float
    centroid_x_mm: float
    centroid_y_mm: float
    Ixx_mm4: float
    section_modulus_mm3: float
    detected_height_mm: Optional[float]
    processed_image: bytes = field(repr=False)  # PNG encoded
    calibration_height_mm: Optional[float] = None
    height_source: Optional[str] = None

    def to_dict(self, include_image: bool = False) -> dict:
        """
        Plain dict of the numeric fields, suitable for JSON.

        Args:
            include_image (bool): Include the raw PNG bytes under 'processed_image'.

        Returns:
            dict: Field name to value.
        """
        data = {
            "filename": self.filename,
            "area_mm2": self.area_mm2,
            "centroid_x_mm": self.centroid_x_mm,
            "centroid_y_mm": self.centroid_y_mm,
            "Ixx_mm4": self.Ixx_mm4,
            "section_modulus_mm3": self.section_modulus_mm3,
            "detected_height_mm": self.detected_height_mm,
            "calibration_height_mm": self.calibration_height_mm,
            "height_source": self.height_source,
        }
        if include_image:
            data["processed_image"] = self.processed_image
        return data


@dataclass(frozen=True)
class AnalysisFailure:
    """Tagged failure for one image of a batch."""
    index: int
    filename: str
    error: str
    message: str

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "filename": self.filename,
            "error": self.error,
            "message": self.message,
        }


@dataclass
class BatchItem:
    """
    One batch input: a decoded raster (numpy array) or encoded image bytes,
    the filename, and an optional explicit calibration height in mm.
    """
    image: Union[np.ndarray, bytes, str]
    filename: str
    height_mm: Optional[float] = None


@dataclass
class BatchReport:
    """Ordered batch outcome; one entry per input item."""
    outcomes: list = field(default_factory=list)

    @property
    def results(self) -> list[AnalysisResult]:
        return [o for o in self.outcomes if isinstance(o, AnalysisResult)]

    @property
    def failures(self) -> list[AnalysisFailure]:
        return [o for o in self.outcomes if isinstance(o, AnalysisFailure)]

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "failures": [f.to_dict() for f in self.failures],
        }
