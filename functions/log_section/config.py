# Configuration file for the log section analysis engine

# Calibration
DEFAULT_HEIGHT_MM = 300.0  # Fallback calibration height when none is supplied or detected
HEIGHT_PATTERN = r"(?<!\d)(\d{1,4})\s*mm"  # "<integer> mm" label printed on the image
MIN_HEIGHT_MM = 0  # Exclusive lower bound for an OCR-detected height
MAX_HEIGHT_MM = 1000  # Exclusive upper bound for an OCR-detected height

# OCR collaborator
OCR_LANGUAGES = ['en']
OCR_GPU = False
OCR_POOL_SIZE = 1  # easyocr readers are expensive, share them across workers
OCR_CLAHE_CLIP_LIMIT = 3.0
OCR_CLAHE_TILE_GRID = (8, 8)

# Batch processing
MAX_WORKERS = 4
PROGRESS_DESC = "Analyzing log sections"

# Annotation (RGBA)
CLEARED_COLOR = (255, 255, 255, 0)  # Pixels outside the selected contour
MARKER_COLOR = (255, 0, 0, 255)
AXIS_COLOR = (0, 0, 255, 255)
LABEL_COLOR = (0, 0, 0, 255)
MARKER_RADIUS_RATIO = 0.01  # Centroid marker radius as ratio of the image diagonal
MIN_MARKER_RADIUS = 3
DASH_LENGTH = 10
DASH_GAP = 6
AXIS_THICKNESS = 2
FONT_SCALE = 0.8
FONT_THICKNESS = 2
LABEL_OFFSET = 12

# Export
CSV_FILENAME = "log_analysis_results.csv"
XLSX_FILENAME = "log_analysis_results.xlsx"
EXPORT_HEADERS = [
    "Filename",
    "Area (mm2)",
    "Centroid X (mm)",
    "Centroid Y (mm)",
    "Ixx (mm4)",
    "Section Modulus (mm3)",
    "Detected Height (mm)",
    "Calibration Height (mm)",
    "Height Source",
]
XLSX_THUMBNAIL_SIZE = (160, 160)  # Max size of the embedded processed image
