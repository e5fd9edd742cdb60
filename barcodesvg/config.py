# config.py
# Layout constants and environment-driven settings shared by the endpoint and the batch page.

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ---------- Font asset ----------
FONT_FAMILY = "OCR-B"
FONT_FAMILY_STACK = "OCR-B, OCRB, 'OCR B', monospace"
FONT_PATH = Path(os.getenv("BARCODESVG_FONT_PATH", PROJECT_ROOT / "fonts" / "ocrb" / "ocr-b-10-bt.ttf"))
# the API serves FONT_PATH.parent under FONT_ROUTE; FONT_URL is used when the font cannot be inlined
FONT_ROUTE = "/fonts/ocrb"
FONT_URL = os.getenv("BARCODESVG_FONT_URL", f"{FONT_ROUTE}/{FONT_PATH.name}")

# ---------- EAN-13 canvas ----------
SVG_WIDTH = 346
SVG_HEIGHT = 220
BAR_WIDTH = 3
GUARD_BAR_HEIGHT = 200
DATA_BAR_HEIGHT = 165
TEXT_Y = 185
START_X = 30

# ---------- Request defaults ----------
DEFAULT_QUIET_ZONE = 6.5  # mm, python-barcode's own default
DEFAULT_EAN13_FONT_SIZE = 31
DEFAULT_FONT_SIZE = 16
DEFAULT_MODULE_HEIGHT = 15.0  # mm
CSS_DPI = 96

# ---------- Batch ----------
MAX_BARCODES = 50
DEFAULT_CONTENTS = "8809560223070"

# ---------- Runtime ----------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", 5000))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "false").lower() == "true"
