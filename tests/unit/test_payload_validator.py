"""
tests/unit/test_payload_validator.py

Unit tests for image payload validation.

Verifies:
✔ Short raw input is padded to a multiple of 4
✔ Whitespace and stray characters are removed
✔ Cleaning is idempotent
✔ Data URLs are unwrapped (";base64," and plain "," forms)
✔ Data URL without separator raises ParseError
✔ Empty, too short and malformed payloads raise InvalidPayload
"""

import base64

import pytest

from services.payload import (
    InvalidPayload,
    MIN_PAYLOAD_LENGTH,
    ParseError,
    PayloadError,
    clean,
    encode_image,
    extract,
    is_valid,
    prepare,
    split_data_url,
    to_data_url,
)


IMAGE_B64 = base64.b64encode(bytes(range(256))).decode("ascii")


# ─────────────────────────────────────────────────────
# clean()
# ─────────────────────────────────────────────────────


class TestClean:
    """Tests for whitespace removal, filtering and padding."""

    def test_short_input_is_padded(self):
        assert clean("abc", min_length=0) == "abc="

    def test_two_char_remainder_gets_double_padding(self):
        assert clean("abcdef", min_length=0) == "abcdef=="

    def test_whitespace_and_line_breaks_removed(self):
        assert clean("ab c\nd\te\r\nfgh", min_length=0) == "abcdefgh"

    def test_stray_characters_removed(self):
        assert clean("ab$c!d#", min_length=0) == "abcd"

    @pytest.mark.parametrize("raw", ["abc", "abcd", "ab cd ef", "abcdefg", IMAGE_B64])
    def test_output_length_is_multiple_of_four(self, raw):
        assert len(clean(raw, min_length=0)) % 4 == 0

    @pytest.mark.parametrize("raw", ["abc", "ab\ncd ef", IMAGE_B64])
    def test_clean_is_idempotent(self, raw):
        once = clean(raw, min_length=0)
        assert clean(once, min_length=0) == once

    def test_real_payload_passes_default_minimum(self):
        assert clean(IMAGE_B64) == IMAGE_B64

    def test_wrapped_payload_is_reassembled(self):
        wrapped = "\n".join(IMAGE_B64[i:i + 76] for i in range(0, len(IMAGE_B64), 76))
        assert clean(wrapped) == IMAGE_B64

    def test_empty_input_raises(self):
        with pytest.raises(InvalidPayload):
            clean("")

    def test_nothing_left_after_cleaning_raises(self):
        with pytest.raises(InvalidPayload, match="No valid base64 data found"):
            clean("!!! ###", min_length=0)

    def test_too_short_raises(self):
        with pytest.raises(InvalidPayload, match="too short"):
            clean("abcd")
        assert MIN_PAYLOAD_LENGTH == 100

    def test_single_char_remainder_is_malformed(self):
        """Length 4n+1 would need three padding characters."""
        with pytest.raises(InvalidPayload):
            clean("abcde", min_length=0)

    def test_padding_in_the_middle_is_malformed(self):
        with pytest.raises(InvalidPayload):
            clean("ab=cdefg", min_length=0)


# ─────────────────────────────────────────────────────
# Data URLs
# ─────────────────────────────────────────────────────


class TestDataUrls:
    """Tests for data URL unwrapping."""

    def test_base64_data_url_is_unwrapped(self):
        assert prepare(to_data_url(IMAGE_B64)) == IMAGE_B64

    def test_plain_comma_data_url_is_unwrapped(self):
        assert extract(f"data:image/png,{IMAGE_B64}") == IMAGE_B64

    def test_split_reports_mime_type(self):
        mime, payload = split_data_url("data:image/png;base64,QUJD")
        assert mime == "image/png"
        assert payload == "QUJD"

    def test_missing_mime_defaults_to_jpeg(self):
        mime, _ = split_data_url("data:;base64,QUJD")
        assert mime == "image/jpeg"

    def test_data_url_without_separator_raises(self):
        with pytest.raises(ParseError):
            extract("data:image/png")

    def test_repeated_separator_raises(self):
        with pytest.raises(ParseError):
            extract("data:image/png;base64,QUJD;base64,QUJD")
        with pytest.raises(ParseError):
            extract("data:,QUJD,QUJD")

    def test_parse_error_is_payload_error(self):
        assert issubclass(ParseError, PayloadError)
        assert issubclass(InvalidPayload, PayloadError)

    def test_raw_base64_returned_unchanged(self):
        assert extract("QUJD") == "QUJD"

    def test_to_data_url_format(self):
        assert to_data_url("QUJD", "image/png") == "data:image/png;base64,QUJD"


# ─────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────


class TestHelpers:
    def test_is_valid(self):
        assert is_valid(IMAGE_B64) is True
        assert is_valid("abcd") is False
        assert is_valid("data:nothing") is False

    def test_encode_image(self):
        assert encode_image(b"ABC") == "QUJD"

    def test_encode_empty_image_raises(self):
        with pytest.raises(InvalidPayload):
            encode_image(b"")
