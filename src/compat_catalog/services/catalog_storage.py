"""Load and save versioned catalogs in the database."""

from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlmodel import Session, col, select

from compat_catalog.models.catalog import Catalog
from compat_catalog.models.records import CatalogVersionRecord

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    def __init__(self, version: int, reason: str) -> None:
        self.version = version
        self.reason = reason
        super().__init__(f"Catalog version {version} could not be loaded: {reason}")


def latest_record(session: Session) -> CatalogVersionRecord | None:
    return session.exec(
        select(CatalogVersionRecord).order_by(col(CatalogVersionRecord.version).desc())
    ).first()


def load_latest_catalog(session: Session) -> Catalog | None:
    """Return the newest stored catalog, or None when nothing was saved yet.

    Raises ``CatalogLoadError`` when the stored catalog cannot be read.
    """
    record = latest_record(session)
    if record is None:
        return None
    try:
        catalog = Catalog.model_validate_json(record.catalog_json)
    except ValidationError as exc:
        logger.exception("Stored catalog version %d is invalid", record.version)
        raise CatalogLoadError(record.version, str(exc)) from exc
    logger.info(
        "Loaded catalog %s with %d mods, %d authors and %d groups",
        catalog.version_string,
        len(catalog.mods),
        len(catalog.authors),
        len(catalog.groups),
    )
    return catalog


def save_catalog_version(
    session: Session,
    catalog: Catalog,
    *,
    change_notes: str = "",
    transcript: str = "",
) -> CatalogVersionRecord:
    record = CatalogVersionRecord(
        version=catalog.version,
        structure_version=catalog.structure_version,
        game_version=catalog.game_version,
        catalog_json=catalog.model_dump_json(),
        change_notes=change_notes,
        transcript=transcript,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    logger.info("Saved catalog %s", catalog.version_string)
    return record
