"""One updater session: load, crawl, import, derive, save.

The crawler facts and the command files are applied as sequential phases
against a single loaded catalog. When anything changed, the catalog gets a
new version that is stored with its change notes and the command transcript.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from sqlmodel import Session

from compat_catalog.config import settings
from compat_catalog.models.catalog import Catalog
from compat_catalog.services.catalog_storage import load_latest_catalog, save_catalog_version
from compat_catalog.services.change_ledger import ChangeLedger
from compat_catalog.services.crawler_sync import (
    CrawlResult,
    ListingFact,
    ModPageFact,
    run_crawler_phase,
)
from compat_catalog.services.import_driver import ImportResult, import_command_files
from compat_catalog.services.mutations.engine import MutationEngine
from compat_catalog.services.progress import ProgressCallback, noop_progress

logger = logging.getLogger(__name__)

_TOTAL_STEPS = 5


@dataclass
class SessionResult:
    catalog: Catalog
    saved: bool
    change_notes: str = ""
    import_result: ImportResult | None = None
    crawl_result: CrawlResult | None = None
    retirement_changes: int = 0
    cancelled: bool = False


def run_updater_session(
    session: Session,
    *,
    updater_dir: Path | None = None,
    listing: list[ListingFact] | None = None,
    pages: list[ModPageFact] | None = None,
    now: datetime | None = None,
    on_progress: ProgressCallback = noop_progress,
    cancel: threading.Event | None = None,
) -> SessionResult:
    """Run a complete session and save a new catalog version if anything changed.

    Raises ``CatalogLoadError`` when the stored catalog cannot be loaded; in
    that case nothing is applied.
    """
    now = now or datetime.now()
    updater_dir = updater_dir or settings.updater_dir

    on_progress(1, _TOTAL_STEPS, "Loading catalog")
    catalog = load_latest_catalog(session)
    first_catalog = catalog is None
    if catalog is None:
        logger.info("No stored catalog found, starting a first catalog")
        catalog = Catalog.first_catalog()

    ledger = ChangeLedger()
    engine = MutationEngine(catalog, ledger, review_date=now.date())
    result = SessionResult(catalog=catalog, saved=False)

    on_progress(2, _TOTAL_STEPS, "Applying crawler facts")
    if listing or pages:
        result.crawl_result = run_crawler_phase(
            engine.updater,
            listing or [],
            pages or [],
            on_progress=lambda current, total, msg: on_progress(2, _TOTAL_STEPS, msg),
            cancel=cancel,
        )
        result.cancelled = result.crawl_result.cancelled

    on_progress(3, _TOTAL_STEPS, "Importing command files")
    if not result.cancelled and updater_dir.is_dir():
        result.import_result = import_command_files(
            updater_dir,
            engine,
            suppressed_warnings_filename=settings.suppressed_warnings_filename,
            debug_mode=settings.debug_mode,
            on_progress=lambda current, total, msg: on_progress(3, _TOTAL_STEPS, msg),
            cancel=cancel,
        )
        result.cancelled = result.import_result.cancelled

    on_progress(4, _TOTAL_STEPS, "Updating author retirement")
    result.retirement_changes = engine.updater.derive_retirement(
        now.date(), settings.inactivity_months
    )

    on_progress(5, _TOTAL_STEPS, "Saving catalog")
    if not (first_catalog or ledger.has_changes() or ledger.catalog_changes):
        logger.info("No changes found, catalog %s not updated", catalog.version_string)
        return result

    catalog.new_version(now)
    ledger.convert_updated(catalog, now)
    result.change_notes = ledger.render(catalog)
    transcript = result.import_result.transcript if result.import_result else ""
    save_catalog_version(session, catalog, change_notes=result.change_notes, transcript=transcript)
    result.saved = True
    logger.info("Updater session finished with catalog %s", catalog.version_string)
    return result
