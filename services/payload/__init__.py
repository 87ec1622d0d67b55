"""
Image payload service exports.

Clean interface for the inference layer to import payload validation.
"""

from .validator import (
    PayloadError,
    InvalidPayload,
    ParseError,
    MIN_PAYLOAD_LENGTH,
    split_data_url,
    clean,
    extract,
    prepare,
    is_valid,
    encode_image,
    to_data_url,
)

__all__ = [
    "PayloadError",
    "InvalidPayload",
    "ParseError",
    "MIN_PAYLOAD_LENGTH",
    "split_data_url",
    "clean",
    "extract",
    "prepare",
    "is_valid",
    "encode_image",
    "to_data_url",
]
