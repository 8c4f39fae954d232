"""Data models for sqlite2dir."""

from .base import Sqlite2dirBaseModel
from .schema import SchemaEntry, RawText, Row, Value

__all__ = [
    "Sqlite2dirBaseModel",
    "SchemaEntry",
    "RawText",
    "Row",
    "Value",
]
