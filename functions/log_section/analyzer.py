import logging
from typing import Optional

from . import config
from .annotation import annotate, encode_png
from .binarization import as_raster, binarize
from .calibration import SOURCE_EXPLICIT, compute_scale, resolve_calibration_height, validate_height
from .contours import bounding_box, largest_contour
from .decoding import decode_image
from .masking import build_region_mask
from .models import AnalysisResult
from .moments import compute_section_properties
from .ocr import detect_height
from .section_modulus import section_modulus

logger = logging.getLogger(__name__)


class SectionAnalyzer:
    """
    Runs the geometric analysis of one log cross-section image: binarize,
    select the largest region, calibrate, measure and annotate.
    Holds no per-image state, so one instance can serve many worker threads.
    """

    def __init__(self, ocr=None, fallback_height_mm: Optional[float] = config.DEFAULT_HEIGHT_MM,
                 ocr_preprocess: bool = True):
        """
        Initialize the SectionAnalyzer.

        Args:
            ocr: OCR collaborator with read_text(image) -> str, or None to skip OCR.
            fallback_height_mm (float): Height used when none is supplied or
                detected; None makes such images fail with InvalidCalibration.
            ocr_preprocess (bool): Enhance images before OCR.
        """
        self.ocr = ocr
        self.fallback_height_mm = fallback_height_mm
        self.ocr_preprocess = ocr_preprocess

    def analyze(self, image, filename: str, calibration_height_mm: float,
                detected_height_mm: Optional[float] = None,
                height_source: str = SOURCE_EXPLICIT) -> AnalysisResult:
        """
        Measure a decoded raster with an already resolved calibration height.

        Args:
            image (numpy.ndarray): Decoded raster (intensity, RGB or RGBA).
            filename (str): Name reported in the result.
            calibration_height_mm (float): Real-world height of the section.
            detected_height_mm (float): OCR-detected height, reported as-is.
            height_source (str): Where calibration_height_mm came from.

        Returns:
            AnalysisResult: Section properties and the annotated PNG.
        """
        height_mm = validate_height(calibration_height_mm)
        raster = as_raster(image)

        binary = binarize(raster)
        contour = largest_contour(binary)
        bbox = bounding_box(contour)
        mask = build_region_mask(contour, raster.shape)

        scale = compute_scale(height_mm, bbox)
        moments, props = compute_section_properties(mask, scale)
        modulus = section_modulus(props.Ixx_mm4, bbox, props.centroid_y_mm, scale)

        processed = encode_png(annotate(raster, contour, moments.centroid_px, mask=mask))

        logger.debug(f"{filename}: area={props.area_mm2:.2f} mm2, Ixx={props.Ixx_mm4:.4g} mm4, W={modulus:.4g} mm3")
        return AnalysisResult(
            filename=filename,
            area_mm2=props.area_mm2,
            centroid_x_mm=props.centroid_x_mm,
            centroid_y_mm=props.centroid_y_mm,
            Ixx_mm4=props.Ixx_mm4,
            section_modulus_mm3=modulus,
            detected_height_mm=None if detected_height_mm is None else float(detected_height_mm),
            processed_image=processed,
            calibration_height_mm=height_mm,
            height_source=height_source,
        )

    def resolve_height(self, raster, explicit_mm: Optional[float] = None) -> tuple[float, str, Optional[int]]:
        """
        Resolve the calibration height of one image.

        Returns:
            tuple: (height_mm, source, detected_height_mm).
        """
        detected = None
        if explicit_mm is None and self.ocr is not None:
            detected = detect_height(raster, self.ocr, preprocess=self.ocr_preprocess)
        height_mm, source = resolve_calibration_height(explicit_mm, detected, self.fallback_height_mm)
        return height_mm, source, detected

    def process(self, image, filename: str, height_mm: Optional[float] = None) -> AnalysisResult:
        """
        Complete per-image pipeline: decode if needed, resolve calibration, analyze.

        Args:
            image (numpy.ndarray | bytes | str): Raster, encoded bytes or base64.
            filename (str): Name reported in the result.
            height_mm (float): Explicit calibration height, optional.

        Returns:
            AnalysisResult
        """
        if isinstance(image, (bytes, bytearray, str)):
            raster = decode_image(image)
        else:
            raster = as_raster(image)

        calibration_mm, source, detected = self.resolve_height(raster, height_mm)
        logger.debug(f"{filename}: calibration {calibration_mm} mm ({source})")
        return self.analyze(raster, filename, calibration_mm, detected, source)


def analyze_log_section(image, height_mm: float, filename: str = "") -> AnalysisResult:
    """
    Convenience function to analyze one decoded image with a known height.

    Args:
        image (numpy.ndarray): Decoded raster.
        height_mm (float): Real-world height of the section in mm.
        filename (str): Name reported in the result.

    Returns:
        AnalysisResult
    """
    return SectionAnalyzer(ocr=None).analyze(image, filename, height_mm)
