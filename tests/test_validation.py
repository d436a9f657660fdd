"""Tests for boundary validation helpers."""
import pytest

from tx_confirmation.validation import is_valid_hex, normalize_value


class TestIsValidHex:
    """Test destination address validation."""

    @pytest.mark.parametrize(
        "value", ["0xabc", "0x" + "ab" * 20, "0XABCDEF", "deadbeef", "0x0"]
    )
    def test_valid(self, value) -> None:
        assert is_valid_hex(value)

    @pytest.mark.parametrize(
        "value", ["", "0x", "0xzz", "hello", "0x12 34", None, 123, b"0xab"]
    )
    def test_invalid(self, value) -> None:
        assert not is_valid_hex(value)


class TestNormalizeValue:
    """Test transaction value normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("0x0de0b6b3a7640000", 10**18),
            ("0x0", 0),
            ("1500", 1500),
            (42, 42),
            (None, 0),
        ],
    )
    def test_normalizes(self, raw, expected) -> None:
        assert normalize_value(raw) == expected

    @pytest.mark.parametrize("raw", ["0xzz", "1.5", "-3", -1, True, 1.5, "abc"])
    def test_rejects(self, raw) -> None:
        with pytest.raises(ValueError):
            normalize_value(raw)
