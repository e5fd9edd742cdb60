# render.py
# Request model and symbology dispatch: EAN-13 goes through the hand-built encoder,
# everything else through python-barcode's SVGWriter plus lxml post-processing.

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import barcode
from barcode.errors import BarcodeError
from barcode.writer import SVGWriter

from barcodesvg import config
from barcodesvg.ean13 import render_ean13_svg
from barcodesvg.errors import InputValidationError, UpstreamRenderError
from barcodesvg.fonts import FontCache, default_font_cache
from barcodesvg.svg import add_center_text, add_font_style, add_svg_dimensions, parse_svg, to_string
from barcodesvg.validation import Symbology, require_valid

logger = logging.getLogger(__name__)


class RenderStrategy(str, Enum):
    EXTERNAL = "external"
    CUSTOM_EAN13 = "custom_ean13"


RENDER_STRATEGIES: Dict[Symbology, RenderStrategy] = {
    Symbology.EAN13: RenderStrategy.CUSTOM_EAN13,
    Symbology.CODE128: RenderStrategy.EXTERNAL,
    Symbology.CODE39: RenderStrategy.EXTERNAL,
    Symbology.EAN8: RenderStrategy.EXTERNAL,
    Symbology.UPCA: RenderStrategy.EXTERNAL,
}

# python-barcode class names and constructor kwargs
PYBARCODE_NAMES: Dict[Symbology, str] = {
    Symbology.CODE128: "code128",
    Symbology.CODE39: "code39",
    Symbology.EAN8: "ean8",
    Symbology.UPCA: "upca",
}
PYBARCODE_KWARGS: Dict[Symbology, Dict[str, Any]] = {
    Symbology.CODE39: {"add_checksum": False},
}


def _number(payload: Mapping, key: str, default):
    value = payload.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InputValidationError(f"{key} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InputValidationError(f"{key} must be a number") from None


@dataclass(frozen=True)
class BarcodeRenderRequest:
    contents: str
    symbology: Symbology
    quiet_zone: float = config.DEFAULT_QUIET_ZONE
    font_size: Optional[float] = None
    offset_left: float = 0
    offset_middle: float = 0
    offset_right: float = 0

    @property
    def effective_font_size(self) -> float:
        if self.font_size is not None:
            return self.font_size
        if self.symbology == Symbology.EAN13:
            return config.DEFAULT_EAN13_FONT_SIZE
        return config.DEFAULT_FONT_SIZE

    @classmethod
    def from_payload(cls, payload) -> "BarcodeRenderRequest":
        """Build a request from the camelCase JSON body of the preview endpoint."""
        if not isinstance(payload, Mapping):
            raise InputValidationError("Request body must be a JSON object")
        contents = payload.get("contents")
        if not isinstance(contents, str) or not contents.strip():
            raise InputValidationError("contents must be a non-empty string")
        font_size = _number(payload, "fontSize", None)
        if font_size is not None and font_size <= 0:
            raise InputValidationError("fontSize must be positive")
        quiet_zone = _number(payload, "quietZone", config.DEFAULT_QUIET_ZONE)
        if quiet_zone < 0:
            raise InputValidationError("quietZone must not be negative")
        return cls(
            contents=contents,
            symbology=Symbology.parse(payload.get("symbology", Symbology.EAN13.value)),
            quiet_zone=quiet_zone,
            font_size=font_size,
            offset_left=_number(payload, "offsetLeft", 0),
            offset_middle=_number(payload, "offsetMiddle", 0),
            offset_right=_number(payload, "offsetRight", 0),
        )


# ---------------- python-barcode path ----------------
def render_library_svg(symbology: Symbology, contents: str, quiet_zone: float = config.DEFAULT_QUIET_ZONE,
                       writer_options: Optional[dict] = None) -> bytes:
    """Bars-only SVG from python-barcode, exactly as the library writes it."""
    name = PYBARCODE_NAMES.get(symbology)
    if name is None:
        raise UpstreamRenderError(f"{symbology.value} is not rendered by python-barcode")
    options = {
        "write_text": False,
        "quiet_zone": quiet_zone,
        "module_height": config.DEFAULT_MODULE_HEIGHT,
        "background": "white",
        "foreground": "black",
    }
    options.update(writer_options or {})
    try:
        bclass = barcode.get_barcode_class(name)
        obj = bclass(contents, writer=SVGWriter(), **PYBARCODE_KWARGS.get(symbology, {}))
        bio = io.BytesIO()
        obj.write(bio, options)
    except (BarcodeError, ValueError, KeyError) as e:
        raise UpstreamRenderError(f"{symbology.name} rendering failed: {e}") from e
    return bio.getvalue()


def decorate_library_svg(raw: bytes, label: str, font_size: float,
                         font_cache: Optional[FontCache] = None) -> str:
    """Explicit size, embedded font-face and a centered label under the bars."""
    cache = font_cache or default_font_cache
    try:
        root = parse_svg(raw)
        add_svg_dimensions(root)
    except ValueError as e:
        raise UpstreamRenderError(f"unusable SVG from python-barcode: {e}") from e
    add_font_style(root, cache.font_face_css())
    add_center_text(root, label, font_size)
    return to_string(root)


# ---------------- Dispatch ----------------
def render_barcode(request: BarcodeRenderRequest, font_cache: Optional[FontCache] = None,
                   validate: bool = True) -> str:
    """
    Render a request to a complete SVG document.

    With validate=True the contents first go through the per-symbology validator
    and the processed value (check digit appended/repaired, Code39 uppercased) is drawn.
    """
    contents = request.contents
    if validate:
        contents = require_valid(contents, request.symbology)

    strategy = RENDER_STRATEGIES[request.symbology]
    font_size = request.effective_font_size
    logger.debug("Rendering %s %s via %s", request.symbology.value, contents, strategy.value)

    if strategy == RenderStrategy.CUSTOM_EAN13:
        return render_ean13_svg(
            contents,
            font_size=font_size,
            offset_left=request.offset_left,
            offset_middle=request.offset_middle,
            offset_right=request.offset_right,
            font_cache=font_cache,
        )

    raw = render_library_svg(request.symbology, contents, request.quiet_zone)
    return decorate_library_svg(raw, contents, font_size, font_cache=font_cache)
