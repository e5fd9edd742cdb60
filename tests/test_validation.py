import pytest

from barcodesvg.errors import InputValidationError
from barcodesvg.validation import (Symbology, calculate_check_digit, calculate_ean13_checksum,
                                   has_valid_check_digit, normalize_gtin, normalize_to_ean13, require_valid,
                                   validate_barcode_input)


class TestCheckDigits:
    @pytest.mark.parametrize(
        "body,expected",
        [
            ("880956022307", "0"),  # EAN-13
            ("400638133393", "1"),  # EAN-13
            ("9638507", "4"),  # EAN-8
            ("03600029145", "2"),  # UPC-A
        ],
    )
    def test_calculate_check_digit(self, body: str, expected: str) -> None:
        assert calculate_check_digit(body) == expected

    def test_ean13_checksum_strips_non_digits(self) -> None:
        assert calculate_ean13_checksum("880-956-022-307") == "0"

    def test_ean13_checksum_requires_12_digits(self) -> None:
        with pytest.raises(InputValidationError, match="12 digits"):
            calculate_ean13_checksum("12345")

    def test_non_numeric_body(self) -> None:
        with pytest.raises(InputValidationError):
            calculate_check_digit("12A")

    def test_has_valid_check_digit(self) -> None:
        assert has_valid_check_digit("8809560223070")
        assert not has_valid_check_digit("8809560223071")
        assert not has_valid_check_digit("7")


class TestNormalize:
    def test_appends_check_digit(self) -> None:
        assert normalize_to_ean13("880956022307") == "8809560223070"

    def test_repairs_check_digit(self) -> None:
        assert normalize_to_ean13("8809560223079") == "8809560223070"

    def test_keeps_valid_value(self) -> None:
        assert normalize_to_ean13("8809560223070") == "8809560223070"

    @pytest.mark.parametrize("value", ["123", "88095602230700", "88095602230A"])
    def test_rejects_other_input(self, value: str) -> None:
        assert normalize_to_ean13(value) is None

    def test_ean8_and_upca(self) -> None:
        assert normalize_gtin("9638507", 8) == "96385074"
        assert normalize_gtin("03600029145", 12) == "036000291452"


class TestValidateBarcodeInput:
    @pytest.mark.parametrize(
        "symbology,contents,processed",
        [
            ("ean13", "880956022307", "8809560223070"),
            ("ean13", " 8809560223070 ", "8809560223070"),
            ("ean8", "96385070", "96385074"),
            ("upca", "03600029145", "036000291452"),
            ("code39", "abc-123", "ABC-123"),
            ("code128", "Hello World 42", "Hello World 42"),
        ],
    )
    def test_valid(self, symbology: str, contents: str, processed: str) -> None:
        result = validate_barcode_input(contents, symbology)
        assert result.valid
        assert result.message is None
        assert result.processed_contents == processed

    @pytest.mark.parametrize(
        "symbology,contents,message",
        [
            ("ean13", "", "empty"),
            ("ean13", "12345", "12 or 13 digits"),
            ("ean13", "12345678901A", "digits only"),
            ("ean8", "123", "7 or 8 digits"),
            ("upca", "1234567890123", "11 or 12 digits"),
            ("code39", "ABC@1", "CODE39"),
            ("code128", "café", "ASCII"),
            ("code128", "X" * 81, "too long"),
            ("qrcode", "123", "Unsupported symbology"),
        ],
    )
    def test_invalid(self, symbology: str, contents: str, message: str) -> None:
        result = validate_barcode_input(contents, symbology)
        assert not result.valid
        assert message in result.message
        assert result.processed_contents is None

    def test_accepts_enum(self) -> None:
        assert validate_barcode_input("880956022307", Symbology.EAN13).valid

    def test_require_valid(self) -> None:
        assert require_valid("880956022307", "ean13") == "8809560223070"
        with pytest.raises(InputValidationError, match="digits only"):
            require_valid("abc", "ean13")


class TestSymbology:
    def test_parse(self) -> None:
        assert Symbology.parse(" EAN13 ") is Symbology.EAN13
        assert Symbology.parse(Symbology.UPCA) is Symbology.UPCA

    def test_parse_unknown(self) -> None:
        with pytest.raises(InputValidationError, match="code128"):
            Symbology.parse("pdf417")
