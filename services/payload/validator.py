"""
Image payload validation.

Role: base64 text → cleaned, padded base64 text that the inference service
will accept in its `images` array.

Rules:
- Pure transformation (no I/O, no state)
- Data URLs (data:<mime>;base64,<data> or data:...,<data>) are unwrapped first
- Whitespace and characters outside the base64 alphabet are dropped
- Output length is always a multiple of 4
- All failures are explicit and typed
"""

import base64
import logging
import re
from typing import Tuple

logger = logging.getLogger(__name__)

# Shortest payload that can plausibly be an encoded image
MIN_PAYLOAD_LENGTH = 100

_DATA_PREFIX = "data:"
_BASE64_SEPARATOR = ";base64,"
_PLAIN_SEPARATOR = ","

_WHITESPACE_RE = re.compile(r"\s")
_NON_BASE64_RE = re.compile(r"[^A-Za-z0-9+/=]")
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")


class PayloadError(Exception):
    """Image payload could not be prepared for transmission."""
    pass


class InvalidPayload(PayloadError):
    """Payload fails base64 validation."""
    pass


class ParseError(PayloadError):
    """Data URL has no usable separator between header and data."""
    pass


def split_data_url(data: str) -> Tuple[str, str]:
    """
    Split a data URL into (mime_type, payload).

    Raises:
        ParseError: No separator, or the separator occurs more than once
    """
    if _BASE64_SEPARATOR in data:
        separator = _BASE64_SEPARATOR
    elif _PLAIN_SEPARATOR in data:
        separator = _PLAIN_SEPARATOR
    else:
        raise ParseError("Invalid data URL format: no data separator found")

    if data.count(separator) > 1:
        raise ParseError("Invalid data URL format: more than one data separator")

    header, _, payload = data.partition(separator)
    mime_type = header[len(_DATA_PREFIX):] or "image/jpeg"
    return mime_type, payload


def extract(data: str) -> str:
    """
    Return the base64 part of `data`.

    Strings that are not data URLs are treated as raw base64 and returned
    unchanged.
    """
    if not isinstance(data, str) or not data:
        raise InvalidPayload("Empty or invalid base64 data")

    if not data.startswith(_DATA_PREFIX):
        return data

    _, payload = split_data_url(data)
    return payload


def clean(raw: str, min_length: int = MIN_PAYLOAD_LENGTH) -> str:
    """
    Clean and validate base64 image data.

    Args:
        raw: Base64 text, possibly with whitespace, line breaks or stray characters
        min_length: Minimum accepted length after padding

    Returns:
        Base64 text padded to a multiple of 4

    Raises:
        InvalidPayload: Empty input, nothing left after cleaning, too short,
            or not well-formed base64 after padding
    """
    if not isinstance(raw, str) or not raw:
        raise InvalidPayload("Empty or invalid base64 data")

    cleaned = _NON_BASE64_RE.sub("", _WHITESPACE_RE.sub("", raw))
    if not cleaned:
        raise InvalidPayload("No valid base64 data found")

    remainder = len(cleaned) % 4
    if remainder:
        cleaned += "=" * (4 - remainder)

    if not _BASE64_RE.match(cleaned):
        raise InvalidPayload("Base64 data contains invalid characters after cleaning")

    if len(cleaned) < min_length:
        raise InvalidPayload("Base64 data is too short to be a valid image")

    logger.debug("Base64 data cleaned: %d characters", len(cleaned))
    return cleaned


def prepare(data: str, min_length: int = MIN_PAYLOAD_LENGTH) -> str:
    """Unwrap a data URL if needed, then clean the payload."""
    return clean(extract(data), min_length=min_length)


def is_valid(data: str, min_length: int = MIN_PAYLOAD_LENGTH) -> bool:
    try:
        prepare(data, min_length=min_length)
        return True
    except PayloadError:
        return False


def encode_image(image_bytes: bytes) -> str:
    """Base64-encode raw image bytes."""
    if not image_bytes:
        raise InvalidPayload("No image data received")
    return base64.b64encode(image_bytes).decode("ascii")


def to_data_url(payload: str, mime_type: str = "image/jpeg") -> str:
    return f"{_DATA_PREFIX}{mime_type}{_BASE64_SEPARATOR}{payload}"
