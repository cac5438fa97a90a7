"""
Log Section Analysis Library
Geometric section properties (area, centroid, Ixx, section modulus) of log
cross-sections measured from calibrated raster images.
"""

from .binarization import (
    as_raster,
    to_grayscale,
    binarize
)

from .contours import (
    find_contours,
    select_largest_contour,
    largest_contour,
    bounding_box
)

from .masking import (
    build_region_mask,
    clear_outside
)

from .calibration import (
    parse_height_from_text,
    resolve_calibration_height,
    compute_scale
)

from .moments import (
    compute_moments,
    compute_section_properties
)

from .section_modulus import (
    extreme_fiber_distance,
    section_modulus
)

from .annotation import (
    annotate,
    encode_png
)

from .decoding import decode_image

from .ocr import (
    OCRReaderHandle,
    OCRReaderPool,
    detect_height
)

from .errors import (
    LogSectionError,
    DecodeError,
    NoRegionFound,
    InvalidCalibration,
    DegenerateRegion,
    DegenerateExtremeFiber,
    ExportError,
    BatchCancelled
)

from .models import (
    BoundingBox,
    Moments,
    SectionProperties,
    AnalysisResult,
    AnalysisFailure,
    BatchItem,
    BatchReport
)

from .analyzer import SectionAnalyzer, analyze_log_section
from .batch import analyze_batch

from .export import (
    results_to_rows,
    write_csv,
    to_csv_string,
    records_to_csv,
    write_xlsx
)

__version__ = '1.0.0'

__all__ = [
    'as_raster',
    'to_grayscale',
    'binarize',
    'find_contours',
    'select_largest_contour',
    'largest_contour',
    'bounding_box',
    'build_region_mask',
    'clear_outside',
    'parse_height_from_text',
    'resolve_calibration_height',
    'compute_scale',
    'compute_moments',
    'compute_section_properties',
    'extreme_fiber_distance',
    'section_modulus',
    'annotate',
    'encode_png',
    'decode_image',
    'OCRReaderHandle',
    'OCRReaderPool',
    'detect_height',
    'LogSectionError',
    'DecodeError',
    'NoRegionFound',
    'InvalidCalibration',
    'DegenerateRegion',
    'DegenerateExtremeFiber',
    'ExportError',
    'BatchCancelled',
    'BoundingBox',
    'Moments',
    'SectionProperties',
    'AnalysisResult',
    'AnalysisFailure',
    'BatchItem',
    'BatchReport',
    'SectionAnalyzer',
    'analyze_log_section',
    'analyze_batch',
    'results_to_rows',
    'write_csv',
    'to_csv_string',
    'records_to_csv',
    'write_xlsx',
]
