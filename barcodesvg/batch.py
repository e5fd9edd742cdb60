# batch.py
# Batch item helpers behind the Streamlit page: line and data-file parsing, per-item rendering, zip building.

import logging
import uuid
from typing import Callable, List, Optional

import pandas as pd
from lxml import etree

from barcodesvg import config
from barcodesvg.errors import BarcodeSVGError
from barcodesvg.export import barcode_basename, bundle_zip, export_filenames, svg_to_pdf_bytes
from barcodesvg.fonts import FontCache
from barcodesvg.render import BarcodeRenderRequest, render_barcode
from barcodesvg.validation import Symbology, validate_barcode_input

logger = logging.getLogger(__name__)

SYMBOLOGIES = [s.value for s in Symbology]

DEFAULT_SETTINGS = {
    "quiet_zone": config.DEFAULT_QUIET_ZONE,
    "ean13_font_size": float(config.DEFAULT_EAN13_FONT_SIZE),
    "label_font_size": float(config.DEFAULT_FONT_SIZE),
    "offset_left": 0.0,
    "offset_middle": 0.0,
    "offset_right": 0.0,
}


def _decode_bytes(b: bytes) -> str:
    for enc in ("utf-8", "utf-8-sig", "latin-1", "cp1252"):
        try:
            return b.decode(enc)
        except UnicodeDecodeError:
            pass
    return b.decode("utf-8", errors="ignore")


def new_item(contents: str = "", symbology: str = Symbology.EAN13.value) -> dict:
    """A batch row. `id` never changes, widgets are keyed on it."""
    return {"id": uuid.uuid4().hex, "contents": contents, "symbology": symbology, "svg": None,
            "error": None, "processed": None, "selected": False}


def parse_lines(text: str, default_symbology: str) -> List[dict]:
    """One item per line: `contents` or `symbology,contents`."""
    items = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        symbology = default_symbology
        if "," in line:
            head, tail = line.split(",", 1)
            if head.strip().lower() in SYMBOLOGIES:
                symbology, line = head.strip().lower(), tail.strip()
        items.append(new_item(line, symbology))
    return items


def load_data_file(data_file, default_symbology: str) -> List[dict]:
    """
    Items from an uploaded CSV or XML file.

    CSV needs a `contents` column; XML rows are the children of the root element,
    each row's child tags acting as columns. An optional `symbology` column
    overrides the default per row.
    """
    if data_file.name.lower().endswith(".csv"):
        try:
            df = pd.read_csv(data_file, dtype=str)
        except UnicodeDecodeError:
            data_file.seek(0)
            df = pd.read_csv(data_file, dtype=str, encoding="latin-1")
    else:
        txt = _decode_bytes(data_file.read())
        root = etree.fromstring(txt.encode("utf-8"))
        records = [{child.tag: child.text for child in row} for row in root]
        df = pd.DataFrame(records)
    df.columns = [str(c).strip().lower() for c in df.columns]
    if "contents" not in df.columns:
        raise ValueError("Data file needs a 'contents' column.")
    items = []
    for _, row in df.iterrows():
        contents = "" if pd.isna(row["contents"]) else str(row["contents"]).strip()
        if not contents:
            continue
        symbology = default_symbology
        if "symbology" in df.columns and not pd.isna(row["symbology"]):
            symbology = str(row["symbology"]).strip().lower() or default_symbology
        items.append(new_item(contents, symbology))
    return items


def generate_item(item: dict, settings: dict, font_cache: Optional[FontCache] = None) -> dict:
    """Validate, then render through the same service as the preview API. Errors stay on the item."""
    result = validate_barcode_input(item["contents"], item["symbology"])
    if not result.valid:
        return {**item, "svg": None, "error": result.message, "processed": None}
    symbology = Symbology.parse(item["symbology"])
    font_size = settings["ean13_font_size"] if symbology == Symbology.EAN13 else settings["label_font_size"]
    request = BarcodeRenderRequest(
        contents=result.processed_contents,
        symbology=symbology,
        quiet_zone=settings["quiet_zone"],
        font_size=font_size,
        offset_left=settings["offset_left"],
        offset_middle=settings["offset_middle"],
        offset_right=settings["offset_right"],
    )
    try:
        svg = render_barcode(request, font_cache=font_cache, validate=False)
    except (BarcodeSVGError, ValueError) as e:
        logger.warning("Item %s (%s) failed: %s", item["contents"], item["symbology"], e)
        return {**item, "svg": None, "error": str(e), "processed": None}
    return {**item, "svg": svg, "error": None, "processed": result.processed_contents}


def item_basename(item: dict) -> str:
    return barcode_basename(item["symbology"], item["contents"], item.get("processed"))


def capped(items: List[dict], incoming: List[dict], limit: int = config.MAX_BARCODES):
    """Append as many of `incoming` as fit under `limit`; returns (items, number dropped)."""
    room = max(limit - len(items), 0)
    return items + incoming[:room], max(len(incoming) - room, 0)


def build_zip(items: List[dict], with_pdf: bool = False,
              on_error: Optional[Callable[[str, Exception], None]] = None) -> bytes:
    """Zip the generated SVGs (unique names), plus one PDF per SVG when asked."""
    named = export_filenames([(item_basename(i), i["svg"]) for i in items])
    files = list(named)
    if with_pdf:
        for fname, svg in named:
            try:
                files.append((fname[:-4] + ".pdf", svg_to_pdf_bytes(svg)))
            except Exception as e:
                logger.warning("PDF export of %s failed: %s", fname, e)
                if on_error:
                    on_error(fname, e)
    return bundle_zip(files)
