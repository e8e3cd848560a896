"""
Tests for input validation at the call boundary.
"""

import pytest

from tendersecure.utils.validation import (
    MAX_AMOUNT,
    validate_address,
    validate_amount,
    validate_hex_string,
    validate_proposal,
)


class TestAddress:

    def test_valid(self):
        assert validate_address(b"\x01" * 20) == (True, "")

    @pytest.mark.parametrize("value", [b"\x01" * 19, b"\x01" * 21, "0x" + "01" * 20, None])
    def test_invalid(self, value):
        is_valid, err = validate_address(value)
        assert not is_valid
        assert err.startswith("address")

    def test_custom_name(self):
        _, err = validate_address(b"", "winner")
        assert err.startswith("winner")


class TestAmount:

    @pytest.mark.parametrize("value", [0, 1, MAX_AMOUNT])
    def test_valid(self, value):
        assert validate_amount(value)[0]

    @pytest.mark.parametrize("value", [-1, MAX_AMOUNT + 1, 1.5, "10", True])
    def test_invalid(self, value):
        assert not validate_amount(value)[0]


class TestProposal:

    def test_empty_allowed(self):
        assert validate_proposal("")[0]

    def test_too_long(self):
        is_valid, err = validate_proposal("x" * 11, max_length=10)
        assert not is_valid
        assert "max length" in err

    def test_lone_surrogate(self):
        """Strings that cannot be encoded as UTF-8 are refused."""
        is_valid, err = validate_proposal("doc://\udcff")
        assert not is_valid
        assert "UTF-8" in err

    def test_non_ascii_allowed(self):
        assert validate_proposal("doc://appalto/città")[0]

    def test_not_a_string(self):
        is_valid, err = validate_proposal(b"doc://1")
        assert not is_valid
        assert "must be str" in err


class TestHexString:

    def test_with_prefix(self):
        assert validate_hex_string("0x" + "ab" * 20, "address", expected_bytes=20)[0]

    def test_odd_length(self):
        assert not validate_hex_string("abc", "address")[0]

    def test_bad_characters(self):
        assert not validate_hex_string("zz", "address")[0]

    @pytest.mark.parametrize("value", ["ab" * 19 + "  ", "ab cd", "0x" + "ab" * 19 + "\n", "+abc"])
    def test_whitespace_and_signs_rejected(self, value):
        """bytes.fromhex would skip whitespace; it must not pass as hex."""
        is_valid, err = validate_hex_string(value, "address", expected_bytes=20)
        assert not is_valid
        assert "invalid hex" in err

    def test_wrong_size(self):
        is_valid, err = validate_hex_string("ab" * 19, "address", expected_bytes=20)
        assert not is_valid
        assert "20 bytes" in err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
