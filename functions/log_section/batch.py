"""
Batch orchestration: analyze many images on a bounded worker pool, keep the
input order and isolate per-image failures.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Optional

from tqdm import tqdm

from . import config
from .analyzer import SectionAnalyzer
from .errors import BatchCancelled, LogSectionError
from .models import AnalysisFailure, BatchItem, BatchReport

logger = logging.getLogger(__name__)


def as_batch_item(item) -> BatchItem:
    """Accept a BatchItem or an (image, filename[, height_mm]) tuple."""
    if isinstance(item, BatchItem):
        return item
    if isinstance(item, (tuple, list)) and len(item) in (2, 3):
        return BatchItem(*item)
    raise TypeError(f"Expected BatchItem or (image, filename[, height_mm]), got {type(item).__name__}")


def _failure(index: int, item: BatchItem, error: Exception) -> AnalysisFailure:
    name = type(error).__name__ if isinstance(error, LogSectionError) else "InternalError"
    return AnalysisFailure(index=index, filename=item.filename, error=name, message=str(error))


def analyze_batch(items: Iterable, analyzer: Optional[SectionAnalyzer] = None,
                  max_workers: int = config.MAX_WORKERS,
                  cancel_event: Optional[threading.Event] = None,
                  show_progress: bool = True) -> BatchReport:
    """
    Analyze a sequence of images.

    Every image yields exactly one outcome, in input order: an AnalysisResult
    or an AnalysisFailure tagged with the filename. One image failing never
    stops the others. When cancel_event is set, images that have not started
    yet are reported as BatchCancelled failures; finished results are kept.

    Args:
        items (Iterable): BatchItem or (image, filename[, height_mm]) tuples.
        analyzer (SectionAnalyzer): Shared analyzer (default: no OCR, default fallback).
        max_workers (int): Size of the worker pool.
        cancel_event (threading.Event): Set to abandon the remaining images.
        show_progress (bool): Display a tqdm progress bar.

    Returns:
        BatchReport: Ordered outcomes with results and failures views.
    """
    batch = [as_batch_item(item) for item in items]
    analyzer = analyzer or SectionAnalyzer()
    outcomes = [None] * len(batch)

    if not batch:
        return BatchReport(outcomes=[])

    logger.info(f"Analyzing {len(batch)} images with {max_workers} workers")

    def run(item: BatchItem):
        if cancel_event is not None and cancel_event.is_set():
            raise BatchCancelled("Batch cancelled before this image was started")
        return analyzer.process(item.image, item.filename, item.height_mm)

    workers = max(1, min(max_workers, len(batch)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="log-section") as executor:
        futures = {executor.submit(run, item): index for index, item in enumerate(batch)}
        with tqdm(total=len(batch), desc=config.PROGRESS_DESC, disable=not show_progress) as pbar:
            for future in as_completed(futures):
                index = futures[future]
                item = batch[index]
                try:
                    outcomes[index] = future.result()
                except LogSectionError as e:
                    logger.warning(f"{item.filename}: {type(e).__name__}: {e}")
                    outcomes[index] = _failure(index, item, e)
                except Exception as e:
                    logger.warning(f"{item.filename}: unexpected error", exc_info=True)
                    outcomes[index] = _failure(index, item, e)
                pbar.update(1)

    report = BatchReport(outcomes=outcomes)
    logger.info(f"Batch finished: {len(report.results)} results, {len(report.failures)} failures")
    return report
