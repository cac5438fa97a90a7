# Cloud Functions for Firebase entry points of the log section analyzer.
# Deploy with `firebase deploy`

from firebase_functions import https_fn, options
import base64
import json
import logging
import requests

from log_section import SectionAnalyzer, OCRReaderPool, BatchItem, analyze_batch, records_to_csv
from log_section import config
from log_section.errors import ExportError

logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s')
logger = logging.getLogger(__name__)

# Built lazily on the first request; every later request reuses the same readers
_ocr_pool = None


def get_ocr_pool():
    global _ocr_pool
    if _ocr_pool is None:
        _ocr_pool = OCRReaderPool(size=config.OCR_POOL_SIZE)
    return _ocr_pool


def download_image(link: str, filename: str) -> bytes:
    """Fetch an image link; a failed download yields no data so only that image fails."""
    try:
        response = requests.get(link, timeout=30)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Could not download {filename} from {link}: {e}")
        return b""
    return response.content


def parse_images(body_json: dict) -> list:
    """
    Build batch items from the request body. Each image carries base64 'data'
    (or a data URL) or a 'link' to download, a 'filename' and an optional
    'height_mm'.
    """
    images = body_json.get("images")
    if not isinstance(images, list):
        raise ValueError("'images' must be a list")

    items = []
    for index, image in enumerate(images):
        filename = image.get("filename") or f"image{index}"
        if image.get("data"):
            payload = image["data"]
        elif image.get("link"):
            payload = download_image(image["link"], filename)
        else:
            payload = b""  # reported as a DecodeError for this image only
        height = image.get("height_mm")
        items.append(BatchItem(payload, filename, None if height is None else float(height)))
    return items


def result_to_json(result) -> dict:
    data = result.to_dict()
    data["processed_image"] = "data:image/png;base64," + base64.b64encode(result.processed_image).decode("ascii")
    return data


# HTTP function that analyzes a batch of log section images
@https_fn.on_request(
    timeout_sec=300,
    memory=options.MemoryOption.GB_1,
    cors=options.CorsOptions(
        cors_origins=["*"],
        cors_methods=["get", "post"],
    ))
def analyze_log_sections(req: https_fn.Request) -> https_fn.Response:
    try:
        body_json = json.loads(req.get_data().decode('utf-8').strip())
        items = parse_images(body_json)
        fallback = body_json.get("logHeightMm", config.DEFAULT_HEIGHT_MM)
        fallback = None if fallback is None else float(fallback)
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Bad request: {e}")
        return https_fn.Response(json.dumps({"error": str(e)}), status=400)

    analyzer = SectionAnalyzer(ocr=get_ocr_pool(), fallback_height_mm=fallback)
    report = analyze_batch(items, analyzer=analyzer, show_progress=False)

    body = {
        "results": [result_to_json(r) for r in report.results],
        "failures": [f.to_dict() for f in report.failures],
    }
    return https_fn.Response(response=json.dumps(body), status=200, content_type="application/json")


# HTTP function that converts rows to CSV text
@https_fn.on_request(cors=options.CorsOptions(
        cors_origins=["*"],
        cors_methods=["get", "post"],
    ))
def create_csv(req: https_fn.Request) -> https_fn.Response:
    try:
        body_json = json.loads(req.get_data().decode('utf-8').strip())
        csv_body = records_to_csv(body_json.get("data") or [], body_json.get("filename"))
    except (ValueError, AttributeError, ExportError) as e:
        logger.warning(f"Error creating CSV: {e}")
        return https_fn.Response(json.dumps({"error": str(e)}), status=400)
    return https_fn.Response(response=json.dumps(csv_body), status=200, content_type="application/json")
