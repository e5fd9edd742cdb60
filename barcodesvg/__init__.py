"""
barcodesvg

SVG barcodes for EAN-13, Code128, Code39, EAN-8 and UPC-A.

- EAN-13 is drawn by a dedicated encoder (ean13.py) with OCR-B digits and guard bars.
- The other symbologies come from python-barcode's SVGWriter and are resized,
  given the embedded font and a centered label (render.py).
- Batch output is packaged by export.py; server.py exposes the HTTP API and
  app.py at the project root is the Streamlit batch page.
"""

from barcodesvg.ean13 import decode_bits, encode_bits, render_ean13_svg, scan_svg
from barcodesvg.errors import (BarcodeSVGError, EncodingLengthError, FontLoadError, InputValidationError,
                               UpstreamRenderError)
from barcodesvg.render import RENDER_STRATEGIES, BarcodeRenderRequest, RenderStrategy, render_barcode
from barcodesvg.validation import Symbology, ValidationResult, validate_barcode_input

__all__ = [
    "BarcodeRenderRequest",
    "BarcodeSVGError",
    "EncodingLengthError",
    "FontLoadError",
    "InputValidationError",
    "RENDER_STRATEGIES",
    "RenderStrategy",
    "Symbology",
    "UpstreamRenderError",
    "ValidationResult",
    "decode_bits",
    "encode_bits",
    "render_barcode",
    "render_ean13_svg",
    "scan_svg",
    "validate_barcode_input",
]
