"""Base models for sqlite2dir."""

from pydantic import BaseModel, ConfigDict


class Sqlite2dirBaseModel(BaseModel):
    """Base model for immutable export metadata."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )
