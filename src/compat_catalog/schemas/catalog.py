"""Response schemas for the catalog API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CatalogSummary(BaseModel):
    version: str
    updated: datetime | None
    game_version: str
    note: str
    mod_count: int
    author_count: int
    group_count: int
    compatibility_count: int


class CatalogVersionOut(BaseModel):
    version: int
    game_version: str
    created_at: datetime


class ImportedFileOut(BaseModel):
    name: str
    commands: int
    errors: int
    renamed_to: str


class UpdaterRunResult(BaseModel):
    saved: bool
    version: str
    summary: str
    errors: int
    files: list[ImportedFileOut]
    retirement_changes: int
    cancelled: bool
