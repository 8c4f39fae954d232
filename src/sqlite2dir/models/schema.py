"""Schema entry and row models for sqlite2dir."""

from typing import List, Optional, Sequence, Union

from pydantic import Field

from .base import Sqlite2dirBaseModel


class RawText(bytes):
    """Text column value as stored by SQLite, not yet decoded.

    Used as the connection's ``text_factory`` so that text and blob values
    stay distinguishable: blobs come back as plain ``bytes``.
    """

    __slots__ = ()


# Column values a table reader may produce
Value = Union[None, int, float, str, bytes]
Row = Sequence[Value]


class SchemaEntry(Sqlite2dirBaseModel):
    """One row of the database catalog (``sqlite_master``)."""

    kind: str = Field(description="Object type, e.g. table, index, view")
    name: str = Field(description="Object name")
    tbl_name: str = Field(description="Name of the table the object belongs to")
    column_names: List[str] = Field(
        default_factory=list, description="Ordered column identifiers"
    )
    sql: Optional[str] = Field(
        default=None, description="Original SQL text, absent for implicit objects"
    )

    @property
    def is_table(self) -> bool:
        """Whether rows should be exported for this entry."""
        return self.kind == "table"
