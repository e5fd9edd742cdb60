import io
import zipfile
from unittest.mock import patch

import pytest

from barcodesvg import config
from barcodesvg.batch import (DEFAULT_SETTINGS, build_zip, capped, generate_item, item_basename, load_data_file,
                              new_item, parse_lines)
from barcodesvg.ean13 import scan_svg
from barcodesvg.fonts import FontCache


class Upload(io.BytesIO):
    """Stand-in for a Streamlit UploadedFile: a byte stream with a name."""

    def __init__(self, data: bytes, name: str):
        super().__init__(data)
        self.name = name


def contents_of(items):
    return [(i["symbology"], i["contents"]) for i in items]


class TestNewItem:
    def test_ids_are_unique_and_stable(self) -> None:
        a, b = new_item("1"), new_item("1")
        assert a["id"] != b["id"]
        assert {**a, "contents": "2"}["id"] == a["id"]

    def test_defaults(self) -> None:
        item = new_item()
        assert (item["contents"], item["symbology"], item["svg"], item["selected"]) == ("", "ean13", None, False)


class TestParseLines:
    def test_plain_and_prefixed_lines(self) -> None:
        text = "8809560223070\n\n  code39,abc-1 \nupca, 03600029145\nfoo,bar\n"
        assert contents_of(parse_lines(text, "ean13")) == [
            ("ean13", "8809560223070"),
            ("code39", "abc-1"),
            ("upca", "03600029145"),
            ("ean13", "foo,bar"),
        ]

    def test_default_symbology(self) -> None:
        assert contents_of(parse_lines("HELLO", "code128")) == [("code128", "HELLO")]

    def test_empty(self) -> None:
        assert parse_lines(" \n\n", "ean13") == []


class TestLoadDataFile:
    def test_csv(self) -> None:
        data = b"Contents,Symbology\n0036000291452,\n880956022307,EAN13\n,code39\nabc,code39\n"
        items = load_data_file(Upload(data, "items.CSV"), "upca")
        assert contents_of(items) == [("upca", "0036000291452"), ("ean13", "880956022307"), ("code39", "abc")]

    def test_csv_latin1(self) -> None:
        data = "contents\nCAFÉ\n".encode("latin-1")
        assert contents_of(load_data_file(Upload(data, "x.csv"), "code128")) == [("code128", "CAFÉ")]

    def test_xml_rows(self) -> None:
        data = (b"<rows><row><contents>880956022307</contents><symbology>ean13</symbology></row>"
                b"<row><contents>ABC-1</contents></row></rows>")
        items = load_data_file(Upload(data, "items.xml"), "code39")
        assert contents_of(items) == [("ean13", "880956022307"), ("code39", "ABC-1")]

    def test_missing_contents_column(self) -> None:
        with pytest.raises(ValueError, match="contents"):
            load_data_file(Upload(b"code\n123\n", "x.csv"), "ean13")


class TestGenerateItem:
    def test_renders_processed_contents(self, font_cache: FontCache) -> None:
        item = new_item("880956022307")
        out = generate_item(item, DEFAULT_SETTINGS, font_cache=font_cache)
        assert out["id"] == item["id"]
        assert out["error"] is None
        assert out["processed"] == "8809560223070"
        assert scan_svg(out["svg"]) == "8809560223070"

    def test_validation_error_stays_on_item(self, font_cache: FontCache) -> None:
        out = generate_item(new_item("123"), DEFAULT_SETTINGS, font_cache=font_cache)
        assert out["svg"] is None
        assert "12 or 13 digits" in out["error"]

    def test_render_error_stays_on_item(self, font_cache: FontCache) -> None:
        with patch("barcodesvg.batch.render_barcode", side_effect=ValueError("broken")):
            out = generate_item(new_item("HELLO", "code128"), DEFAULT_SETTINGS, font_cache=font_cache)
        assert (out["svg"], out["error"], out["processed"]) == (None, "broken", None)

    def test_settings_reach_the_renderer(self, font_cache: FontCache) -> None:
        settings = {**DEFAULT_SETTINGS, "label_font_size": 11.0, "quiet_zone": 2.0}
        with patch("barcodesvg.batch.render_barcode", return_value="<svg/>") as render:
            generate_item(new_item("abc", "code39"), settings, font_cache=font_cache)
        request = render.call_args.args[0]
        assert (request.contents, request.font_size, request.quiet_zone) == ("ABC", 11.0, 2.0)


class TestCapped:
    def test_fills_up_to_limit(self) -> None:
        items, dropped = capped([new_item()] * 48, [new_item(str(i)) for i in range(5)])
        assert len(items) == config.MAX_BARCODES
        assert dropped == 3

    def test_full_list(self) -> None:
        full = [new_item()] * config.MAX_BARCODES
        assert capped(full, [new_item()]) == (full, 1)


class TestBuildZip:
    def _items(self):
        a = {**new_item("8809560223070"), "svg": "<svg>a</svg>", "processed": "8809560223070"}
        b = {**new_item("880956022307"), "svg": "<svg>b</svg>", "processed": "8809560223070"}
        return [a, b]

    def test_unique_names(self) -> None:
        with zipfile.ZipFile(io.BytesIO(build_zip(self._items()))) as zf:
            assert zf.namelist() == ["ean13_8809560223070.svg", "ean13_8809560223070_1.svg"]
        assert item_basename(self._items()[1]) == "ean13_8809560223070"

    def test_with_pdf(self) -> None:
        with patch("barcodesvg.batch.svg_to_pdf_bytes", return_value=b"%PDF"):
            blob = build_zip(self._items(), with_pdf=True)
        with zipfile.ZipFile(io.BytesIO(blob)) as zf:
            assert zf.namelist()[2:] == ["ean13_8809560223070.pdf", "ean13_8809560223070_1.pdf"]

    def test_pdf_failure_is_reported(self) -> None:
        failures = []
        with patch("barcodesvg.batch.svg_to_pdf_bytes", side_effect=OSError("no cairo")):
            blob = build_zip(self._items(), with_pdf=True, on_error=lambda name, e: failures.append(name))
        assert failures == ["ean13_8809560223070.svg", "ean13_8809560223070_1.svg"]
        with zipfile.ZipFile(io.BytesIO(blob)) as zf:
            assert len(zf.namelist()) == 2
