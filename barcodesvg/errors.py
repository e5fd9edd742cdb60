class BarcodeSVGError(Exception):
    """Base class for every failure raised by barcodesvg."""


class InputValidationError(BarcodeSVGError, ValueError):
    """Contents, symbology or request fields are malformed."""


class EncodingLengthError(BarcodeSVGError, ValueError):
    """EAN-13 input is not exactly 13 characters."""


class FontLoadError(BarcodeSVGError):
    """The OCR-B font asset could not be read."""


class UpstreamRenderError(BarcodeSVGError):
    """python-barcode rejected the contents for the chosen symbology."""
