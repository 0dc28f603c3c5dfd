from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from sqlmodel import Session, col, select

from compat_catalog.database import get_session
from compat_catalog.models.catalog import Author, Mod
from compat_catalog.models.records import CatalogVersionRecord
from compat_catalog.routers.deps import get_catalog_or_404
from compat_catalog.schemas.catalog import CatalogSummary, CatalogVersionOut
from compat_catalog.services.catalog_storage import latest_record
from compat_catalog.utils.conversions import parse_id

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/", response_model=CatalogSummary)
def catalog_summary(session: Session = Depends(get_session)) -> CatalogSummary:
    catalog = get_catalog_or_404(session)
    return CatalogSummary(
        version=catalog.version_string,
        updated=catalog.updated,
        game_version=catalog.game_version,
        note=catalog.note,
        mod_count=len(catalog.mods),
        author_count=len(catalog.authors),
        group_count=len(catalog.groups),
        compatibility_count=len(catalog.compatibilities),
    )


@router.get("/versions", response_model=list[CatalogVersionOut])
def list_versions(session: Session = Depends(get_session)) -> list[CatalogVersionOut]:
    rows = session.exec(
        select(CatalogVersionRecord).order_by(col(CatalogVersionRecord.version).desc())
    ).all()
    return [
        CatalogVersionOut(version=r.version, game_version=r.game_version, created_at=r.created_at)
        for r in rows
    ]


@router.get("/mods/{mod_id}", response_model=Mod)
def get_mod(mod_id: int, session: Session = Depends(get_session)) -> Mod:
    mod = get_catalog_or_404(session).get_mod(mod_id)
    if mod is None:
        raise HTTPException(404, f"Mod {mod_id} not found")
    return mod


@router.get("/authors/{key}", response_model=Author)
def get_author(key: str, session: Session = Depends(get_session)) -> Author:
    """Look up an author by numeric id or custom URL."""
    author = get_catalog_or_404(session).get_author(parse_id(key) or None, key)
    if author is None:
        raise HTTPException(404, f"Author '{key}' not found")
    return author


@router.get("/change-notes", response_class=PlainTextResponse)
def latest_change_notes(session: Session = Depends(get_session)) -> str:
    record = latest_record(session)
    if record is None:
        raise HTTPException(404, "No catalog has been saved yet")
    return record.change_notes


@router.get("/transcript", response_class=PlainTextResponse)
def latest_transcript(session: Session = Depends(get_session)) -> str:
    record = latest_record(session)
    if record is None:
        raise HTTPException(404, "No catalog has been saved yet")
    return record.transcript
