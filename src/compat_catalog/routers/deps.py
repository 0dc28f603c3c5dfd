"""Shared FastAPI dependencies used across routers."""

from fastapi import HTTPException
from sqlmodel import Session

from compat_catalog.models.catalog import Catalog
from compat_catalog.services.catalog_storage import CatalogLoadError, load_latest_catalog


def get_catalog_or_404(session: Session) -> Catalog:
    """Load the newest stored catalog, raising 404 if none exists yet."""
    try:
        catalog = load_latest_catalog(session)
    except CatalogLoadError as exc:
        raise HTTPException(500, str(exc)) from exc
    if catalog is None:
        raise HTTPException(404, "No catalog has been saved yet")
    return catalog
