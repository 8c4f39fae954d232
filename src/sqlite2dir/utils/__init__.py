"""Utility modules for sqlite2dir."""

from sqlite2dir.utils.row_codec import (
    encode_row,
    encode_value,
    RowEncodingError,
    TextEncodingError,
    UnsupportedInputError,
)

__all__ = [
    "encode_row",
    "encode_value",
    "RowEncodingError",
    "TextEncodingError",
    "UnsupportedInputError",
]
