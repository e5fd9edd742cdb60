# ean13.py
# Hand-built EAN-13 renderer: bit pattern from the L/G/R tables, one compound path for the bars,
# OCR-B digits laid out under the bars. python-barcode is not involved for this symbology.

import logging
import re
from typing import List, Optional, Tuple, Union

from lxml import etree

from barcodesvg import config
from barcodesvg.errors import EncodingLengthError
from barcodesvg.fonts import FontCache, default_font_cache
from barcodesvg.svg import (add_font_style, fmt, new_svg, parse_svg, svg_tag, text_element,
                            to_string)

logger = logging.getLogger(__name__)

# ---------------- Code tables (indexed by digit) ----------------
L_CODES = (
    "0001101", "0011001", "0010011", "0111101", "0100011",
    "0110001", "0101111", "0111011", "0110111", "0001011",
)

G_CODES = (
    "0100111", "0110011", "0011011", "0100001", "0011101",
    "0111001", "0000101", "0010001", "0001001", "0010111",
)

R_CODES = (
    "1110010", "1100110", "1101100", "1000010", "1011100",
    "1001110", "1010000", "1000100", "1001000", "1110100",
)

# left-group parity per leading digit
PARITY_PATTERNS = (
    "LLLLLL", "LLGLGG", "LLGGLG", "LLGGGL", "LGLLGG",
    "LGGLLG", "LGGGLL", "LGLGLG", "LGLGGL", "LGGLGL",
)

START_GUARD = "101"
CENTER_GUARD = "01010"
END_GUARD = "101"

EAN13_LENGTH = 13
BIT_COUNT = 95
# inclusive bit-index ranges drawn at guard height
GUARD_RANGES = ((0, 2), (42, 46), (92, 94))

_L_LOOKUP = {code: str(d) for d, code in enumerate(L_CODES)}
_G_LOOKUP = {code: str(d) for d, code in enumerate(G_CODES)}
_R_LOOKUP = {code: str(d) for d, code in enumerate(R_CODES)}
_PARITY_LOOKUP = {pattern: str(d) for d, pattern in enumerate(PARITY_PATTERNS)}

_SEGMENT_RE = re.compile(r"M\s*([0-9.+\-eE]+)[\s,]+[0-9.+\-eE]+\s*L\s*[0-9.+\-eE]+[\s,]+([0-9.+\-eE]+)")


# ---------------- Encoding ----------------
def encode_bits(text: str) -> str:
    """Return the 95-module bit string for a 13-character EAN-13 value."""
    if len(text) != EAN13_LENGTH:
        raise EncodingLengthError(f"EAN-13 must be 13 digits, got {len(text)} characters")

    pattern = PARITY_PATTERNS[int(text[0])]
    parts = [START_GUARD]
    for parity, ch in zip(pattern, text[1:7]):
        table = L_CODES if parity == "L" else G_CODES
        parts.append(table[int(ch)])
    parts.append(CENTER_GUARD)
    # right half ignores parity
    parts.extend(R_CODES[int(ch)] for ch in text[7:13])
    parts.append(END_GUARD)
    return "".join(parts)


def is_guard_index(index: int) -> bool:
    return any(lo <= index <= hi for lo, hi in GUARD_RANGES)


def bar_segments(bits: str, start_x: float = config.START_X,
                 bar_width: float = config.BAR_WIDTH) -> List[Tuple[float, int]]:
    """(x, bottom) for every dark module, left to right."""
    segments = []
    x = start_x
    for i, bit in enumerate(bits):
        if bit == "1":
            bottom = config.GUARD_BAR_HEIGHT if is_guard_index(i) else config.DATA_BAR_HEIGHT
            segments.append((x, bottom))
        x += bar_width
    return segments


def bar_path(bits: str) -> str:
    return " ".join(f"M{fmt(x)} 0L{fmt(x)} {bottom}" for x, bottom in bar_segments(bits))


# ---------------- Rendering ----------------
def render_ean13_svg(text: str, font_size: float = config.DEFAULT_EAN13_FONT_SIZE,
                     offset_left: float = 0, offset_middle: float = 0, offset_right: float = 0,
                     font_cache: Optional[FontCache] = None) -> str:
    """
    Render a 13-digit EAN-13 value as a standalone 346x220 SVG document.

    The digits are not checked here; callers pass contents that went through
    validation.validate_barcode_input first. Only the length is enforced.
    """
    bits = encode_bits(text)
    cache = font_cache or default_font_cache

    root = new_svg(config.SVG_WIDTH, config.SVG_HEIGHT)
    add_font_style(root, cache.font_face_css())

    bg = etree.SubElement(root, svg_tag("rect"))
    bg.set("width", fmt(config.SVG_WIDTH))
    bg.set("height", fmt(config.SVG_HEIGHT))
    bg.set("fill", "#FFFFFF")

    bars = etree.SubElement(root, svg_tag("g"), id="barcode-bars")
    path = etree.SubElement(bars, svg_tag("path"))
    path.set("stroke", "#000000")
    path.set("stroke-width", fmt(config.BAR_WIDTH))
    path.set("d", bar_path(bits))

    text_y = config.TEXT_Y + 10
    start_x = config.START_X

    first = etree.SubElement(root, svg_tag("g"), id="first-digit")
    text_element(first, text[0], start_x - 16 - 5 + offset_left, text_y, font_size - 1,
                 text_anchor="start")

    left = etree.SubElement(root, svg_tag("g"), id="left-group")
    text_element(left, text[1:7], start_x + 27 - 17 + offset_middle, text_y, font_size,
                 letter_spacing="-0.025em")

    right = etree.SubElement(root, svg_tag("g"), id="right-group")
    text_element(right, text[7:13], start_x + 174 - 25 + 3 + offset_right, text_y, font_size,
                 letter_spacing="-0.025em")

    logger.debug("Rendered EAN-13 %s (%d bars)", text, bits.count("1"))
    return to_string(root)


# ---------------- Decoding ----------------
def decode_bits(bits: str) -> str:
    """Recover the 13 digits from a 95-module EAN-13 bit string."""
    if len(bits) != BIT_COUNT:
        raise ValueError(f"EAN-13 bit string must be {BIT_COUNT} modules, got {len(bits)}")
    if bits[:3] != START_GUARD or bits[45:50] != CENTER_GUARD or bits[92:] != END_GUARD:
        raise ValueError("guard pattern mismatch")

    left_digits = []
    parity = []
    for i in range(6):
        chunk = bits[3 + 7 * i:10 + 7 * i]
        if chunk in _L_LOOKUP:
            left_digits.append(_L_LOOKUP[chunk])
            parity.append("L")
        elif chunk in _G_LOOKUP:
            left_digits.append(_G_LOOKUP[chunk])
            parity.append("G")
        else:
            raise ValueError(f"unknown left-hand pattern {chunk} at position {i + 1}")

    lead = _PARITY_LOOKUP.get("".join(parity))
    if lead is None:
        raise ValueError(f"unknown parity pattern {''.join(parity)}")

    right_digits = []
    for i in range(6):
        chunk = bits[50 + 7 * i:57 + 7 * i]
        if chunk not in _R_LOOKUP:
            raise ValueError(f"unknown right-hand pattern {chunk} at position {i + 7}")
        right_digits.append(_R_LOOKUP[chunk])

    return lead + "".join(left_digits) + "".join(right_digits)


def scan_bits(svg: Union[str, bytes], bar_width: float = config.BAR_WIDTH) -> str:
    """Read the bar path of a rendered EAN-13 SVG back into a module string, first bar = module 0."""
    root = parse_svg(svg)
    path = root.find(f".//{svg_tag('g')}[@id='barcode-bars']/{svg_tag('path')}")
    if path is None:
        raise ValueError("no barcode-bars path in SVG")
    xs = [float(m.group(1)) for m in _SEGMENT_RE.finditer(path.get("d", ""))]
    if not xs:
        raise ValueError("barcode path has no bars")
    origin = min(xs)
    indexes = {int(round((x - origin) / bar_width)) for x in xs}
    modules = ["0"] * (max(indexes) + 1)
    for i in indexes:
        modules[i] = "1"
    return "".join(modules)


def scan_svg(svg: Union[str, bytes]) -> str:
    return decode_bits(scan_bits(svg))
