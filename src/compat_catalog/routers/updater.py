import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from compat_catalog.config import settings
from compat_catalog.database import get_session
from compat_catalog.schemas.catalog import ImportedFileOut, UpdaterRunResult
from compat_catalog.services.catalog_storage import CatalogLoadError
from compat_catalog.services.updater_session import run_updater_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/updater", tags=["updater"])


@router.post("/run", response_model=UpdaterRunResult)
def run_updater(session: Session = Depends(get_session)) -> UpdaterRunResult:
    """Import the command files in the configured updater directory."""
    try:
        result = run_updater_session(session, updater_dir=settings.updater_dir)
    except CatalogLoadError as exc:
        logger.error("Updater aborted: %s", exc)
        raise HTTPException(500, str(exc)) from exc

    imported = result.import_result
    return UpdaterRunResult(
        saved=result.saved,
        version=result.catalog.version_string,
        summary=imported.summary if imported else "no command files",
        errors=imported.errors if imported else 0,
        files=[
            ImportedFileOut(
                name=f.name, commands=f.commands, errors=f.errors, renamed_to=f.renamed_to
            )
            for f in (imported.files if imported else [])
        ],
        retirement_changes=result.retirement_changes,
        cancelled=result.cancelled,
    )
