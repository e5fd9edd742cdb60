# fonts.py
# Process-wide OCR-B font cache and the @font-face rule embedded in every rendered SVG.

import base64
import logging
import threading
from pathlib import Path
from typing import Optional, Union

from barcodesvg import config
from barcodesvg.errors import FontLoadError

logger = logging.getLogger(__name__)

FONT_FACE_TEMPLATE = """
      @font-face {{
        font-family: '{family}';
        src: url({src}) format('truetype');
        font-weight: normal;
        font-style: normal;
      }}
    """


class FontCache:
    """
    Lazily reads a TrueType file once and keeps its base64 payload for the process lifetime.

    Readers never take the lock; a miss takes it, re-checks, and reads the file.
    Failed reads are not cached so a later call can still pick the font up.
    """

    def __init__(self, path: Union[str, Path], fallback_url: str = config.FONT_URL,
                 family: str = config.FONT_FAMILY):
        self.path = Path(path)
        self.fallback_url = fallback_url
        self.family = family
        self._base64: Optional[str] = None
        self._lock = threading.Lock()
        self._warned = False

    def load(self) -> str:
        """Return the base64 payload, raising FontLoadError when the file is unreadable."""
        cached = self._base64
        if cached is not None:
            return cached
        with self._lock:
            if self._base64 is None:
                try:
                    data = self.path.read_bytes()
                except OSError as e:
                    raise FontLoadError(f"cannot read font {self.path}: {e}") from e
                self._base64 = base64.b64encode(data).decode("ascii")
                logger.debug("Cached font %s (%d bytes)", self.path, len(data))
            return self._base64

    def base64(self) -> str:
        """Like load(), but an unreadable font yields an empty string."""
        try:
            return self.load()
        except FontLoadError as e:
            # retried on every call, reported once
            log = logger.debug if self._warned else logger.warning
            self._warned = True
            log("%s; falling back to %s", e, self.fallback_url)
            return ""

    @property
    def is_loaded(self) -> bool:
        return self._base64 is not None

    def font_url(self) -> str:
        payload = self.base64()
        if payload:
            return f"data:font/truetype;charset=utf-8;base64,{payload}"
        return f"'{self.fallback_url}'"

    def font_face_css(self) -> str:
        return FONT_FACE_TEMPLATE.format(family=self.family, src=self.font_url())


default_font_cache = FontCache(config.FONT_PATH)
