"""
Tabular export of analysis results (CSV and XLSX with embedded pictures).
"""

import csv
import io
import logging
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.drawing.image import Image as XLImage
from openpyxl.utils import get_column_letter
from PIL import Image

from . import config
from .errors import ExportError
from .models import AnalysisFailure, AnalysisResult

logger = logging.getLogger(__name__)


def result_to_row(result: AnalysisResult) -> list:
    """One export row, in config.EXPORT_HEADERS order."""
    return [
        result.filename,
        result.area_mm2,
        result.centroid_x_mm,
        result.centroid_y_mm,
        result.Ixx_mm4,
        result.section_modulus_mm3,
        "" if result.detected_height_mm is None else result.detected_height_mm,
        "" if result.calibration_height_mm is None else result.calibration_height_mm,
        result.height_source or "",
    ]


def results_to_rows(results: Iterable[AnalysisResult]) -> list[list]:
    return [result_to_row(r) for r in results]


def write_csv(results: Iterable[AnalysisResult], destination=config.CSV_FILENAME):
    """
    Write results to a CSV file or text stream.

    Args:
        results (Iterable[AnalysisResult]): Results in batch order.
        destination (str | file-like): Output path or writable text stream.
    """
    rows = results_to_rows(results)
    try:
        if hasattr(destination, "write"):
            _write_rows(destination, rows)
        else:
            with open(destination, "w", newline="", encoding="utf-8") as f:
                _write_rows(f, rows)
    except (OSError, csv.Error) as e:
        raise ExportError(f"Failed to write CSV: {e}")
    logger.info(f"Exported {len(rows)} results to CSV")


def _write_rows(stream, rows):
    writer = csv.writer(stream)
    writer.writerow(config.EXPORT_HEADERS)
    writer.writerows(rows)


def to_csv_string(results: Iterable[AnalysisResult]) -> str:
    buffer = io.StringIO()
    write_csv(results, buffer)
    return buffer.getvalue()


def records_to_csv(records: list[dict], filename: Optional[str] = None) -> dict:
    """
    Serialize arbitrary string-keyed rows to CSV. Headers come from the first row.

    Returns:
        dict: {'content': csv text, 'filename': name}
    """
    if not records:
        raise ExportError("Data array cannot be empty")
    headers = list(records[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for record in records:
        writer.writerow(["" if record.get(h) is None else record.get(h) for h in headers])
    return {"content": buffer.getvalue().rstrip("\n"), "filename": filename or config.CSV_FILENAME}


def _thumbnail_png(png_bytes: bytes, size) -> tuple[io.BytesIO, int]:
    with Image.open(io.BytesIO(png_bytes)) as img:
        img.thumbnail(size)
        out = io.BytesIO()
        img.save(out, format="PNG")
        height = img.height
    out.seek(0)
    return out, height


def write_xlsx(results: Iterable[AnalysisResult], destination=config.XLSX_FILENAME,
               failures: Optional[Iterable[AnalysisFailure]] = None,
               thumbnail_size=config.XLSX_THUMBNAIL_SIZE):
    """
    Write results to an Excel workbook, embedding each processed image
    next to its row. Failures, when given, go to a second sheet.

    Args:
        results (Iterable[AnalysisResult]): Results in batch order.
        destination (str | file-like): Output path or writable binary stream.
        failures (Iterable[AnalysisFailure]): Optional failure list.
        thumbnail_size (tuple): Max (width, height) of embedded pictures.
    """
    results = list(results)
    try:
        wb = Workbook()
        ws = wb.active
        ws.title = "Results"
        ws.append(config.EXPORT_HEADERS + ["Processed Image"])
        image_col = get_column_letter(len(config.EXPORT_HEADERS) + 1)
        ws.column_dimensions[image_col].width = thumbnail_size[0] / 7

        streams = []
        for row_idx, result in enumerate(results, start=2):
            ws.append(result_to_row(result))
            if not result.processed_image:
                continue
            stream, height = _thumbnail_png(result.processed_image, thumbnail_size)
            streams.append(stream)
            ws.add_image(XLImage(stream), f"{image_col}{row_idx}")
            ws.row_dimensions[row_idx].height = height * 0.75  # px to points

        if failures:
            fs = wb.create_sheet("Failures")
            fs.append(["Index", "Filename", "Error", "Message"])
            for failure in failures:
                fs.append([failure.index, failure.filename, failure.error, failure.message])

        wb.save(destination)
    except (OSError, ValueError) as e:
        raise ExportError(f"Failed to write XLSX: {e}")
    logger.info(f"Exported {len(results)} results to XLSX")
