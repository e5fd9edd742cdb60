from lxml import etree

from barcodesvg.svg import SVG_NS

NS = {"svg": SVG_NS}

FONT_BYTES = b"\x00\x01\x00\x00FAKE-OCR-B-TRUETYPE"


def parse(svg) -> etree._Element:
    if isinstance(svg, str):
        svg = svg.encode("utf-8")
    return etree.fromstring(svg)
