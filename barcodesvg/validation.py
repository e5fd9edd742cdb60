# validation.py
# Per-symbology input normalization: GS1 check digits for EAN/UPC, character sets for Code39/Code128.

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from barcodesvg.errors import InputValidationError


class Symbology(str, Enum):
    EAN13 = "ean13"
    CODE128 = "code128"
    CODE39 = "code39"
    EAN8 = "ean8"
    UPCA = "upca"

    @classmethod
    def parse(cls, value) -> "Symbology":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise InputValidationError(f"Unsupported symbology {value!r}. Allowed: {allowed}") from None


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: Optional[str] = None
    processed_contents: Optional[str] = None


# full length including the check digit
GTIN_LENGTHS = {
    Symbology.EAN13: 13,
    Symbology.EAN8: 8,
    Symbology.UPCA: 12,
}

CODE39_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-.$/+% ")
CODE128_MAX_LENGTH = 80


# ---------------- Check digits ----------------
def _is_digits(s: str) -> bool:
    return s.isascii() and s.isdigit()


def calculate_check_digit(body: str) -> str:
    """
    GS1 mod-10 check digit for a numeric body (EAN-13, EAN-8 and UPC-A alike).
    Weights alternate 3,1,3,... starting from the rightmost body digit.
    """
    if not _is_digits(body):
        raise InputValidationError("check digit requires a numeric body")
    total = 0
    for i, ch in enumerate(reversed(body)):
        d = ord(ch) - 48
        total += d * (3 if i % 2 == 0 else 1)
    return str((10 - (total % 10)) % 10)


def calculate_ean13_checksum(number12: str) -> str:
    number12 = ''.join(ch for ch in str(number12) if _is_digits(ch))
    if len(number12) != 12:
        raise InputValidationError("checksum requires 12 digits")
    return calculate_check_digit(number12)


def normalize_gtin(value: str, length: int) -> Optional[str]:
    """
    Normalize to a canonical GTIN string of `length` digits.
    - accepts length-1 digits (check digit appended) or length digits
    - a wrong check digit is replaced
    - returns None for non-digits or other lengths
    """
    s = str(value).strip()
    if not _is_digits(s):
        return None
    if len(s) == length - 1:
        return s + calculate_check_digit(s)
    if len(s) == length:
        chk = calculate_check_digit(s[:-1])
        return s if chk == s[-1] else s[:-1] + chk
    return None


def normalize_to_ean13(value: str) -> Optional[str]:
    return normalize_gtin(value, 13)


def has_valid_check_digit(value: str) -> bool:
    return len(value) > 1 and _is_digits(value) and calculate_check_digit(value[:-1]) == value[-1]


# ---------------- Input validation ----------------
def validate_barcode_input(contents: str, symbology) -> ValidationResult:
    """Check contents for a symbology and return the contents that should actually be encoded."""
    try:
        symbology = Symbology.parse(symbology)
    except InputValidationError as e:
        return ValidationResult(False, str(e))

    text = (contents or "").strip()
    if not text:
        return ValidationResult(False, "Barcode contents must not be empty.")

    if symbology in GTIN_LENGTHS:
        length = GTIN_LENGTHS[symbology]
        name = symbology.name
        if not _is_digits(text):
            return ValidationResult(False, f"{name} requires digits only.")
        normalized = normalize_gtin(text, length)
        if normalized is None:
            return ValidationResult(False, f"{name} must be {length - 1} or {length} digits.")
        return ValidationResult(True, None, normalized)

    if symbology == Symbology.CODE39:
        text = text.upper()
        if not all(c in CODE39_CHARS for c in text):
            return ValidationResult(False, "CODE39 supports only A-Z, 0-9, space and -.$/+% chars.")
        return ValidationResult(True, None, text)

    # Code128
    if len(text) > CODE128_MAX_LENGTH:
        return ValidationResult(False, f"CODE128 data too long (max {CODE128_MAX_LENGTH}).")
    if not all(32 <= ord(c) < 127 for c in text):
        return ValidationResult(False, "CODE128 supports printable ASCII characters only.")
    return ValidationResult(True, None, text)


def require_valid(contents: str, symbology) -> str:
    result = validate_barcode_input(contents, symbology)
    if not result.valid:
        raise InputValidationError(result.message)
    return result.processed_contents
