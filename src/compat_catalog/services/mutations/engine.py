"""MutationEngine: validates typed operations and applies them to a catalog."""

from __future__ import annotations

import logging
from datetime import date

from compat_catalog.models.catalog import Catalog
from compat_catalog.schemas.commands import Operation
from compat_catalog.services.change_ledger import ChangeLedger
from compat_catalog.services.mutations import (  # noqa: F401 - registers all handlers
    author_handlers,
    catalog_handlers,
    compatibility_handlers,
    group_handlers,
    link_handlers,
    mod_handlers,
)
from compat_catalog.services.mutations.registry import get_handler
from compat_catalog.services.mutations.updater import CatalogUpdater

logger = logging.getLogger(__name__)


class MutationEngine:
    """Applies one operation at a time to a catalog owned by the caller.

    Every handler validates first and only then edits, so a rejected
    operation leaves the catalog and the ledger untouched. Rejections are
    returned as short human-readable strings rather than raised.
    """

    def __init__(
        self,
        catalog: Catalog,
        ledger: ChangeLedger | None = None,
        *,
        review_date: date | None = None,
    ) -> None:
        self.catalog = catalog
        self.ledger = ledger if ledger is not None else ChangeLedger()
        self.updater = CatalogUpdater(catalog, self.ledger, review_date=review_date)

    def apply(self, op: Operation) -> str | None:
        """Apply ``op``. Returns None on success or the reason it was rejected."""
        handler = get_handler(type(op))
        if handler is None:
            raise TypeError(f"No handler registered for {type(op).__name__}")
        error = handler(self, op)
        if error:
            logger.debug("%s rejected: %s", type(op).__name__, error)
        return error
