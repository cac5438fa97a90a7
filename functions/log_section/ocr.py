#!/usr/bin/env python3
"""
OCR Height Label Module

Reads the printed height label (e.g. "342 mm") from a log section image with
easyocr. Readers are expensive to build, so each one is constructed once in
the background and shared: callers block on a single readiness future instead
of polling, and concurrent workers borrow readers from a bounded pool.
"""

import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Optional

import cv2
import numpy as np

from . import config
from .binarization import to_grayscale
from .calibration import parse_height_from_text

logger = logging.getLogger(__name__)


class OCRReaderHandle:
    """
    One easyocr reader behind an initialization barrier.

    Construction starts loading the reader on a background thread; get()
    waits for it once and then returns immediately. An initialization error is
    re-raised by every get().
    """

    def __init__(self, languages=None, gpu=config.OCR_GPU, factory=None):
        """
        Args:
            languages (list): easyocr language codes (default config.OCR_LANGUAGES).
            gpu (bool): Run easyocr on the GPU.
            factory (callable): Zero-argument reader factory, replaces easyocr.
        """
        self.languages = list(languages or config.OCR_LANGUAGES)
        self.gpu = gpu
        self._factory = factory or self._create_reader
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ocr-init")
        self._future = executor.submit(self._factory)
        executor.shutdown(wait=False)

    def _create_reader(self):
        import easyocr
        logger.info(f"Loading easyocr reader {self.languages} (gpu={self.gpu})")
        reader = easyocr.Reader(self.languages, gpu=self.gpu)
        logger.info("easyocr reader loaded")
        return reader

    @property
    def ready(self) -> bool:
        return self._future.done()

    def get(self, timeout: Optional[float] = None):
        """Block until the reader is built and return it."""
        return self._future.result(timeout=timeout)

    def read_text(self, image: np.ndarray) -> str:
        """Recognize all text in an image and join it with spaces."""
        reader = self.get()
        detections = reader.readtext(image, detail=0)
        return " ".join(str(text) for text in detections)


class OCRReaderPool:
    """Bounded pool of reader handles shared by batch workers."""

    def __init__(self, size=config.OCR_POOL_SIZE, languages=None, gpu=config.OCR_GPU, factory=None):
        if size < 1:
            raise ValueError("OCR pool size must be at least 1")
        self.size = size
        self._handles = queue.Queue()
        for _ in range(size):
            self._handles.put(OCRReaderHandle(languages, gpu, factory))

    @contextmanager
    def acquire(self, timeout: Optional[float] = None):
        handle = self._handles.get(timeout=timeout)
        try:
            yield handle
        finally:
            self._handles.put(handle)

    def read_text(self, image: np.ndarray) -> str:
        with self.acquire() as handle:
            return handle.read_text(image)


def preprocess_image_for_ocr(image: np.ndarray) -> np.ndarray:
    """Preprocess a grayscale image for better OCR results."""
    clahe = cv2.createCLAHE(clipLimit=config.OCR_CLAHE_CLIP_LIMIT, tileGridSize=config.OCR_CLAHE_TILE_GRID)
    enhanced = clahe.apply(image.astype(np.uint8))

    denoised = cv2.bilateralFilter(enhanced, 9, 75, 75)

    kernel = np.array([[-1, -1, -1],
                       [-1, 9, -1],
                       [-1, -1, -1]])
    sharpened = cv2.filter2D(denoised, -1, kernel)

    return sharpened


def detect_height(image, ocr, preprocess: bool = True) -> Optional[int]:
    """
    Read the height label of an image.

    OCR failures are logged and treated as "no calibration detected".

    Args:
        image (numpy.ndarray): Decoded raster.
        ocr: Object with a read_text(image) -> str method (pool or handle).
        preprocess (bool): Enhance contrast and sharpen before recognition.

    Returns:
        int: Height in mm, or None.
    """
    gray = to_grayscale(image)
    if preprocess:
        gray = preprocess_image_for_ocr(gray)
    rgb = cv2.cvtColor(gray, cv2.COLOR_GRAY2RGB)

    try:
        text = ocr.read_text(rgb)
    except Exception as e:
        logger.warning(f"OCR failed, no height detected: {e}")
        return None

    height = parse_height_from_text(text)
    logger.debug(f"OCR text {text!r} -> height {height}")
    return height
