# api.py
# Preview / export API and the OCR-B font route the fallback @font-face points at.
#
#   POST /api/preview  -> image/svg+xml, or {"error": ...} with 400
#   POST /api/export   -> application/zip
#   GET  /api/health
#   GET  /fonts/ocrb/<filename>

import logging

from flask import Blueprint, Response, current_app, jsonify, request, send_from_directory

from barcodesvg import config
from barcodesvg.errors import BarcodeSVGError, InputValidationError
from barcodesvg.export import archive_name, barcode_basename, bundle_zip, export_filenames, safe_filename
from barcodesvg.render import BarcodeRenderRequest, render_barcode
from barcodesvg.validation import Symbology

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")
fonts_bp = Blueprint("fonts", __name__, url_prefix=config.FONT_ROUTE)

GENERIC_ERROR = "Barcode generation failed."


def _font_cache():
    return current_app.config.get("FONT_CACHE")


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


@api_bp.route("/health", methods=["GET"])
def health():
    return jsonify({
        "status": "ok",
        "symbologies": [s.value for s in Symbology],
    }), 200


@api_bp.route("/preview", methods=["POST"])
def preview():
    """
    Render one barcode.

    Request:
        {"contents": "8809560223070", "symbology": "ean13", "quietZone": 10,
         "fontSize": 31, "offsetLeft": 0, "offsetMiddle": 0, "offsetRight": 0}
    """
    payload = request.get_json(silent=True)
    try:
        render_request = BarcodeRenderRequest.from_payload(payload)
        svg = render_barcode(render_request, font_cache=_font_cache())
    except BarcodeSVGError as e:
        logger.warning("Preview rejected: %s", e)
        return _error(str(e))
    except ValueError as e:
        logger.warning("Preview failed: %s", e)
        return _error(str(e) or GENERIC_ERROR)
    except Exception:
        logger.exception("Preview error")
        return _error(GENERIC_ERROR)

    return Response(svg, mimetype="image/svg+xml")


@api_bp.route("/export", methods=["POST"])
def export_zip():
    """
    Package already generated SVGs into one archive.

    Request:
        {"items": [{"symbology": "ean13", "contents": "8809560223070", "svg": "<svg ..."},
                   {"filename": "custom", "svg": "<svg ..."}]}
    """
    payload = request.get_json(silent=True) or {}
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return _error("items must be a list")

    pairs = []
    try:
        for item in items:
            if not isinstance(item, dict):
                raise InputValidationError("each item must be an object")
            if item.get("filename"):
                base = safe_filename(str(item["filename"]))
                if base.lower().endswith(".svg"):
                    base = base[:-4]
            else:
                base = barcode_basename(str(item.get("symbology", "barcode")), str(item.get("contents", "")),
                                        item.get("processedContents"))
            pairs.append((base, item.get("svg") if isinstance(item.get("svg"), str) else ""))
    except BarcodeSVGError as e:
        return _error(str(e))

    named = export_filenames(pairs)
    if not named:
        return _error("No barcodes to export.")

    name = archive_name()
    return Response(
        bundle_zip(named),
        mimetype="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{name}"'},
    )


@fonts_bp.route("/<path:filename>", methods=["GET"])
def font_file(filename):
    """Serve the font directory so the url() fallback in rendered SVGs resolves."""
    return send_from_directory(current_app.config["FONT_DIR"], filename, mimetype="font/ttf")
