"""Persisted catalog versions.

Every updater session that produced changes stores one row holding the full
catalog as JSON together with the change notes and the command transcript.
"""

from datetime import UTC, datetime

from sqlmodel import Column, Field, SQLModel, Text


class CatalogVersionRecord(SQLModel, table=True):
    __tablename__ = "catalog_versions"

    id: int | None = Field(default=None, primary_key=True)
    version: int = Field(index=True, unique=True)
    structure_version: int = 1
    game_version: str = ""
    catalog_json: str = Field(default="{}", sa_column=Column(Text))
    change_notes: str = Field(default="", sa_column=Column(Text))
    transcript: str = Field(default="", sa_column=Column(Text))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
