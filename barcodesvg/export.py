# export.py
# Zip packaging with collision-free filenames, and cairosvg conversions for previews / PDF export.

import io
import logging
import re
import zipfile
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def safe_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub("_", name).strip() or "barcode"


def barcode_basename(symbology: str, contents: str, processed_contents: Optional[str] = None) -> str:
    return safe_filename(f"{symbology}_{processed_contents or contents}")


def unique_filenames(basenames: Iterable[str], ext: str = ".svg") -> List[str]:
    """
    First occurrence keeps <base><ext>; later ones become <base>_1<ext>, <base>_2<ext>, ...
    """
    counters = {}
    taken = set()
    out = []
    for base in basenames:
        name = f"{base}{ext}"
        count = counters.get(base, 0)
        while name in taken:
            count += 1
            name = f"{base}_{count}{ext}"
        counters[base] = count
        taken.add(name)
        out.append(name)
    return out


def export_filenames(items: Iterable[Tuple[str, str]], ext: str = ".svg") -> List[Tuple[str, str]]:
    """(basename, svg) pairs -> (unique filename, svg), dropping entries without SVG text."""
    kept = [(base, svg) for base, svg in items if svg and svg.strip()]
    names = unique_filenames([base for base, _ in kept], ext)
    return [(name, svg) for name, (_, svg) in zip(names, kept)]


def bundle_zip(named_files: List[Tuple[str, Union[bytes, str]]]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for fname, data in named_files:
            if isinstance(data, str):
                data = data.encode("utf-8")
            zf.writestr(fname, data)
    archive = buf.getvalue()
    logger.info("Bundled %d files into zip (%d bytes)", len(named_files), len(archive))
    return archive


def archive_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"barcodes_{now.strftime('%Y-%m-%dT%H-%M-%S')}.zip"


# ---------- cairosvg ----------
# imported on use: cairosvg needs the system cairo library, the zip path does not
def svg_to_png_bytes(svg_text: str, scale: float = 1.0) -> bytes:
    import cairosvg

    internal_scale = max(1.0, scale * 2.0)
    return cairosvg.svg2png(bytestring=svg_text.encode("utf-8"), scale=internal_scale)


def svg_to_pdf_bytes(svg_text: str) -> bytes:
    import cairosvg

    return cairosvg.svg2pdf(bytestring=svg_text.encode("utf-8"))
