"""Applies facts extracted by the workshop crawler to the catalog.

Downloading and scraping pages happens elsewhere; this module receives the
already-extracted values and routes them through the same ``CatalogUpdater``
the command importer uses, with ``updated_by_importer=False``. Manual
exclusions are honoured: an automated value only replaces an excluded one
when it is a strict improvement.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, Field

from compat_catalog.models.catalog import Mod
from compat_catalog.models.enums import Dlc, LinkKind, Stability, Status
from compat_catalog.services.mutations.updater import CatalogUpdater
from compat_catalog.services.progress import ProgressCallback, noop_progress
from compat_catalog.utils.conversions import parse_game_version

logger = logging.getLogger(__name__)


class ListingFact(BaseModel):
    """One mod as seen on a workshop listing page."""

    mod_id: int
    name: str = ""
    author_id: int | None = None
    author_url: str = ""
    incompatible: bool = False


class ModPageFact(BaseModel):
    """Values scraped from a mod's own workshop page."""

    mod_id: int
    found: bool = True
    name: str = ""
    author_id: int | None = None
    author_url: str = ""
    author_name: str = ""
    published: date | None = None
    updated: date | None = None
    version_tag: str | None = None
    required_dlcs: list[Dlc] = Field(default_factory=list)
    required_mods: list[int] = Field(default_factory=list)
    has_description: bool = True
    source_url: str | None = None


@dataclass
class CrawlResult:
    listed: int = 0
    pages: int = 0
    cancelled: bool = False


# ---------------------------------------------------------------------------
# Listing pass
# ---------------------------------------------------------------------------


def apply_listing(updater: CatalogUpdater, fact: ListingFact) -> Mod:
    catalog = updater.catalog
    if fact.author_id or fact.author_url:
        updater.get_or_add_author(fact.author_id, fact.author_url)

    mod = catalog.get_mod(fact.mod_id)
    if mod is None:
        mod = updater.add_mod(
            fact.mod_id,
            name=fact.name,
            author_id=fact.author_id,
            author_url=fact.author_url,
        )
    else:
        for status in (Status.removed_from_workshop, Status.unlisted_in_workshop):
            if status in mod.statuses:
                updater.remove_status(mod, status)
        updater.update_mod(mod, name=fact.name or None)

    if not mod.name and mod.steam_id not in catalog.suppressed_warnings:
        logger.warning("Mod %d has no name on the workshop listing", mod.steam_id)

    incompatible = Stability.incompatible_according_to_workshop
    if fact.incompatible and mod.stability is not incompatible:
        updater.update_mod(mod, stability=incompatible)
    elif not fact.incompatible and mod.stability is incompatible:
        updater.update_mod(mod, stability=Stability.not_reviewed)
    return mod


# ---------------------------------------------------------------------------
# Mod page pass
# ---------------------------------------------------------------------------


def _apply_version_tag(updater: CatalogUpdater, mod: Mod, tag_text: str) -> None:
    tag = parse_game_version(tag_text)
    if tag is None:
        return
    if mod.exclusion_for_game_version:
        current = parse_game_version(mod.game_version)
        if current is not None and tag <= current:
            return
        mod.exclusion_for_game_version = False
    updater.update_mod(mod, game_version=str(tag))


def _apply_required_dlcs(updater: CatalogUpdater, mod: Mod, found: list[Dlc]) -> None:
    excluded = mod.exclusion_for_required_dlcs
    for dlc in found:
        if dlc in mod.required_dlcs:
            if dlc in excluded:
                excluded.remove(dlc)
        elif dlc not in excluded:
            updater.add_required_dlc(mod, dlc)
    for dlc in list(mod.required_dlcs):
        if dlc not in found and dlc not in excluded:
            updater.remove_required_dlc(mod, dlc)


def _apply_required_mods(updater: CatalogUpdater, mod: Mod, found: list[int]) -> None:
    catalog = updater.catalog
    targets: list[int] = []
    for required_id in found:
        group = catalog.get_group_of(required_id)
        if group is not None:
            required_id = group.group_id
        elif catalog.get_mod(required_id) is None:
            logger.info("Mod %d requires unknown mod %d", mod.steam_id, required_id)
            continue
        if required_id != mod.steam_id and required_id not in targets:
            targets.append(required_id)

    excluded = mod.exclusion_for_required_mods
    for target in targets:
        kind = mod.link_kind_of(target)
        if kind is not None and kind is not LinkKind.required:
            logger.info(
                "Mod %d keeps %d as %s over the required-mod fact", mod.steam_id, target, kind
            )
            continue
        if target in mod.required_mods:
            if target in excluded:
                excluded.remove(target)
        elif target not in excluded:
            updater.add_link(mod, LinkKind.required, target)
    for target in list(mod.required_mods):
        if target not in targets and target not in excluded:
            updater.remove_link(mod, LinkKind.required, target)


def apply_mod_page(updater: CatalogUpdater, fact: ModPageFact, *, listed: bool = True) -> None:
    catalog = updater.catalog
    mod = catalog.get_mod(fact.mod_id)
    if mod is None:
        mod = updater.add_mod(fact.mod_id, name=fact.name)

    if not fact.found:
        if not mod.is_removed:
            updater.add_status(mod, Status.removed_from_workshop)
        return

    if mod.is_removed:
        updater.remove_status(mod, Status.removed_from_workshop)
    if not listed and Status.unlisted_in_workshop not in mod.statuses:
        updater.add_status(mod, Status.unlisted_in_workshop)

    updater.update_mod(
        mod,
        name=fact.name or None,
        published=fact.published,
        updated=fact.updated,
        author_id=fact.author_id,
        author_url=fact.author_url or None,
    )

    if fact.author_id or fact.author_url:
        author = updater.get_or_add_author(fact.author_id, fact.author_url, fact.author_name)
        seen = fact.updated or fact.published
        newer = seen is not None and (author.last_seen is None or seen > author.last_seen)
        updater.update_author(
            author,
            name=fact.author_name or None,
            last_seen=seen if newer else None,
        )

    if fact.version_tag:
        _apply_version_tag(updater, mod, fact.version_tag)
    _apply_required_dlcs(updater, mod, fact.required_dlcs)
    _apply_required_mods(updater, mod, fact.required_mods)

    if not mod.exclusion_for_no_description:
        has_flag = Status.no_description in mod.statuses
        if fact.has_description and has_flag:
            updater.remove_status(mod, Status.no_description)
        elif not fact.has_description and not has_flag:
            updater.add_status(mod, Status.no_description)

    if fact.source_url and not mod.exclusion_for_source_url:
        updater.update_mod(mod, source_url=fact.source_url)


def run_crawler_phase(
    updater: CatalogUpdater,
    listing: list[ListingFact],
    pages: list[ModPageFact],
    *,
    on_progress: ProgressCallback = noop_progress,
    cancel: threading.Event | None = None,
) -> CrawlResult:
    """Apply a full crawl: the listing first, then the individual mod pages."""
    result = CrawlResult()
    listed_ids: set[int] = set()
    for fact in listing:
        apply_listing(updater, fact)
        listed_ids.add(fact.mod_id)
        result.listed += 1

    total = len(pages)
    for index, page in enumerate(pages, start=1):
        if cancel is not None and cancel.is_set():
            logger.warning("Crawler phase cancelled after %d of %d pages", index - 1, total)
            result.cancelled = True
            break
        apply_mod_page(updater, page, listed=page.mod_id in listed_ids)
        result.pages += 1
        if index % 100 == 0 or index == total:
            on_progress(index, total, f"Processed {index} of {total} mod pages")

    logger.info("Crawler facts applied: %d listed mods, %d pages", result.listed, result.pages)
    return result
