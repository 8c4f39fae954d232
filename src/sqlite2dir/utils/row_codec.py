"""Row to JSON line encoding.

Each exported row becomes one compact JSON array terminated by a newline.
Only the four SQLite storage classes that map onto JSON are accepted:

- NULL -> ``null``
- INTEGER -> JSON integer (exact, Python ints have no 64-bit limit)
- REAL -> JSON number
- TEXT -> JSON string, the stored bytes must be valid UTF-8

BLOB values are rejected with :class:`UnsupportedInputError`.
"""

import json
import math
from typing import Any, List

from sqlite2dir.models.schema import RawText, Row, Value


class RowEncodingError(ValueError):
    """Raised when a row cannot be encoded as a JSON line."""

    def __init__(self, message: str, column: int):
        super().__init__(message)
        self.column = column


class TextEncodingError(RowEncodingError):
    """Raised when a text column does not hold valid UTF-8."""

    pass


class UnsupportedInputError(RowEncodingError):
    """Raised for values the export format cannot represent (blobs)."""

    def __init__(self, kind: str, column: int):
        super().__init__(f"{kind}s not yet supported (column {column})", column)
        self.kind = kind


def encode_value(value: Value, column: int = 0) -> Any:
    """Convert one column value into its JSON-compatible form.

    Args:
        value: Column value as returned by the table reader
        column: Column index, used for error reporting

    Returns:
        Value suitable for ``json.dumps``

    Raises:
        TextEncodingError: If a text value is not valid UTF-8
        UnsupportedInputError: If the value is a blob
    """
    if value is None:
        return None
    # bool is an int subclass, sqlite never hands one back but callers might
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        return value
    if isinstance(value, RawText):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise TextEncodingError(
                f"invalid UTF-8 in text column {column}: {e.reason}", column
            ) from e
    if isinstance(value, (bytes, bytearray, memoryview)):
        raise UnsupportedInputError("blob", column)
    raise UnsupportedInputError(type(value).__name__, column)


def encode_row(row: Row) -> str:
    """Encode a row as a newline-terminated JSON array.

    Values keep the order of the row, which is the table's column order.
    """
    values: List[Any] = [encode_value(value, i) for i, value in enumerate(row)]
    return json.dumps(values, ensure_ascii=False, separators=(",", ":")) + "\n"
