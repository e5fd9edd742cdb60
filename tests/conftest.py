import base64
from pathlib import Path

import pytest

from barcodesvg.fonts import FontCache
from barcodesvg.server import create_app
from tests.helpers import FONT_BYTES


@pytest.fixture
def font_file(tmp_path: Path) -> Path:
    path = tmp_path / "ocr-b-10-bt.ttf"
    path.write_bytes(FONT_BYTES)
    return path


@pytest.fixture
def font_cache(font_file: Path) -> FontCache:
    return FontCache(font_file)


@pytest.fixture
def font_b64() -> str:
    return base64.b64encode(FONT_BYTES).decode("ascii")


@pytest.fixture
def missing_font_cache(tmp_path: Path) -> FontCache:
    return FontCache(tmp_path / "missing.ttf")


@pytest.fixture
def app(font_cache: FontCache):
    return create_app({"TESTING": True, "FONT_CACHE": font_cache})


@pytest.fixture
def client(app):
    return app.test_client()

