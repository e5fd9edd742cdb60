# svg.py
# lxml helpers for building and post-processing barcode SVG documents.

import re
from typing import Tuple, Union

from lxml import etree

from barcodesvg import config

SVG_NS = "http://www.w3.org/2000/svg"

_LENGTH_RE = re.compile(r"^\s*([0-9.+\-eE]+)\s*([a-zA-Z%]*)\s*$")

# CSS absolute units expressed in px
_UNIT_TO_PX = {
    "": 1.0,
    "px": 1.0,
    "pt": config.CSS_DPI / 72.0,
    "pc": config.CSS_DPI / 6.0,
    "in": float(config.CSS_DPI),
    "cm": config.CSS_DPI / 2.54,
    "mm": config.CSS_DPI / 25.4,
}


def svg_tag(name: str) -> str:
    return f"{{{SVG_NS}}}{name}"


def fmt(value) -> str:
    """Compact number formatting for attributes: 9 not 9.0, 40.5 stays 40.5."""
    value = round(float(value), 3)
    if value.is_integer():
        return str(int(value))
    return str(value)


def mm_to_px(mm: float, dpi: int = config.CSS_DPI) -> float:
    return mm / 25.4 * dpi


def length_to_px(value):
    """Convert an SVG length attribute ("40mm", "12pt", "300") to px; None when not absolute."""
    if value is None:
        return None
    m = _LENGTH_RE.match(str(value))
    if not m:
        return None
    factor = _UNIT_TO_PX.get(m.group(2).lower())
    if factor is None:
        return None
    try:
        return float(m.group(1)) * factor
    except ValueError:
        return None


# ---------- Parsing / serialization ----------
def _parser() -> etree.XMLParser:
    return etree.XMLParser(ns_clean=True, recover=True, remove_blank_text=True,
                           resolve_entities=False, no_network=True)


def parse_svg(svg: Union[str, bytes]) -> etree._Element:
    if isinstance(svg, str):
        svg = svg.encode("utf-8")
    if not svg or not svg.strip():
        raise ValueError("Empty SVG input")
    root = etree.fromstring(svg, parser=_parser())
    if root is None or not (isinstance(root.tag, str) and root.tag.lower().endswith("svg")):
        raise ValueError("No <svg> element found")
    return root


def to_string(root: etree._Element) -> str:
    return etree.tostring(root, encoding="unicode", pretty_print=True)


def new_svg(width, height) -> etree._Element:
    root = etree.Element(svg_tag("svg"), nsmap={None: SVG_NS})
    root.set("width", fmt(width))
    root.set("height", fmt(height))
    root.set("viewBox", f"0 0 {fmt(width)} {fmt(height)}")
    return root


# ---------- Dimensions ----------
def _view_box(root):
    vb = root.get("viewBox")
    if not vb:
        return None
    try:
        parts = [float(p) for p in re.split(r"[\s,]+", vb.strip())]
    except ValueError:
        return None
    if len(parts) != 4:
        return None
    return parts


def svg_dimensions(root: etree._Element) -> Tuple[float, float]:
    """
    Return (width_px, height_px) for an SVG root. Uses viewBox first, then width/height attrs.
    Raises ValueError when neither gives absolute dimensions.
    """
    vb = _view_box(root)
    if vb:
        return vb[2], vb[3]
    w = length_to_px(root.get("width"))
    h = length_to_px(root.get("height"))
    if w and h:
        return w, h
    raise ValueError("SVG has neither a viewBox nor absolute width/height")


def add_svg_dimensions(root: etree._Element) -> Tuple[float, float]:
    """Write explicit numeric width/height (and a viewBox when missing) onto the root."""
    w, h = svg_dimensions(root)
    if _view_box(root) is None:
        root.set("viewBox", f"0 0 {fmt(w)} {fmt(h)}")
    root.set("width", fmt(w))
    root.set("height", fmt(h))
    return w, h


# ---------- Decoration ----------
def add_font_style(root: etree._Element, css: str) -> etree._Element:
    defs = etree.Element(svg_tag("defs"))
    style = etree.SubElement(defs, svg_tag("style"))
    style.set("type", "text/css")
    style.text = css
    root.insert(0, defs)
    return defs


def text_element(parent, text: str, x, y, font_size, **attrs) -> etree._Element:
    el = etree.SubElement(parent, svg_tag("text"))
    el.set("x", fmt(x))
    el.set("y", fmt(y))
    el.set("font-family", config.FONT_FAMILY_STACK)
    el.set("font-size", fmt(font_size))
    for key, val in attrs.items():
        el.set(key.replace("_", "-"), str(val))
    el.set("fill", "#000000")
    el.text = text
    return el


def add_center_text(root: etree._Element, text: str, font_size, gap: float = 4) -> etree._Element:
    """Append a centered label under the existing drawing, growing the canvas by the label band."""
    vb = _view_box(root)
    if vb is None:
        add_svg_dimensions(root)
        vb = _view_box(root)
    min_x, min_y, w, h = vb
    new_h = h + float(font_size) + gap
    root.set("viewBox", f"{fmt(min_x)} {fmt(min_y)} {fmt(w)} {fmt(new_h)}")
    root.set("height", fmt(new_h))
    return text_element(root, text, min_x + w / 2, min_y + h + float(font_size), font_size,
                        text_anchor="middle")
