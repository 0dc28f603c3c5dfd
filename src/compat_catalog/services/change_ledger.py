"""Session change notes: per-entity fragments plus grouped report sections."""

from __future__ import annotations

import logging
from datetime import datetime

from compat_catalog.models.catalog import Author, Catalog
from compat_catalog.utils.conversions import format_date

logger = logging.getLogger(__name__)


def transition(label: str, old: object, new: object) -> str:
    """Describe a property change as ``<label> added|removed|changed``.

    Empty or default values count as absent. Returns ``""`` when nothing changed.
    """
    if old == new or (not old and not new):
        return ""
    if not old:
        return f"{label} added"
    if not new:
        return f"{label} removed"
    return f"{label} changed"


def _accumulate(entries: dict, key: int | str, fragment: str) -> None:
    if not fragment:
        return
    existing = entries.get(key)
    if existing is None:
        entries[key] = fragment
    elif fragment not in existing.split(", "):
        entries[key] = f"{existing}, {fragment}"


class ChangeLedger:
    """Accumulates the change notes of one updater session.

    Updates are collected per mod or author and deduplicated by entry, so
    repeating an edit never produces a second identical fragment. Entities
    added this session only appear in the "added" section.
    """

    def __init__(self) -> None:
        self.catalog_changes: list[str] = []
        self.new_mods: list[str] = []
        self.new_groups: list[str] = []
        self.new_compatibilities: list[str] = []
        self.new_authors: list[str] = []
        self.removed_mods: list[str] = []
        self.removed_groups: list[str] = []
        self.removed_compatibilities: list[str] = []
        self.updated_mods_by_id: dict[int, str] = {}
        self.updated_authors_by_id: dict[int, str] = {}
        self.updated_authors_by_url: dict[str, str] = {}
        self.added_mod_ids: set[int] = set()
        self.added_author_keys: set[int | str] = set()
        self._updated_mod_lines: list[str] = []
        self._updated_author_lines: list[str] = []

    # -----------------------------------------------------------------------
    # Recording
    # -----------------------------------------------------------------------

    def catalog_change(self, text: str) -> None:
        self.catalog_changes.append(text)

    def new_mod(self, mod_id: int, text: str) -> None:
        self.added_mod_ids.add(mod_id)
        self.new_mods.append(text)

    def new_group(self, text: str) -> None:
        self.new_groups.append(text)

    def new_compatibility(self, text: str) -> None:
        self.new_compatibilities.append(text)

    def new_author(self, author: Author, text: str) -> None:
        self.added_author_keys.add(author.key)
        self.new_authors.append(text)

    def removed_mod(self, text: str) -> None:
        self.removed_mods.append(text)

    def removed_group(self, text: str) -> None:
        self.removed_groups.append(text)

    def removed_compatibility(self, text: str) -> None:
        self.removed_compatibilities.append(text)

    def update_mod(self, mod_id: int, fragment: str) -> None:
        if mod_id in self.added_mod_ids:
            return
        _accumulate(self.updated_mods_by_id, mod_id, fragment)

    def update_author(self, author: Author, fragment: str) -> None:
        if author.key in self.added_author_keys:
            return
        if author.steam_id:
            _accumulate(self.updated_authors_by_id, author.steam_id, fragment)
        else:
            _accumulate(self.updated_authors_by_url, author.custom_url, fragment)

    def rekey_author(self, author: Author, old_url: str) -> None:
        """Move fragments collected under a custom URL to the author's new id."""
        if old_url in self.added_author_keys and author.steam_id:
            self.added_author_keys.add(author.steam_id)
        fragment = self.updated_authors_by_url.pop(old_url, None)
        if fragment and author.steam_id:
            for part in fragment.split(", "):
                _accumulate(self.updated_authors_by_id, author.steam_id, part)

    def mod_fragment(self, mod_id: int) -> str:
        return self.updated_mods_by_id.get(mod_id, "")

    def has_changes(self) -> bool:
        """Whether anything besides catalog-level notes changed."""
        return any(
            (
                self.new_mods,
                self.new_groups,
                self.new_compatibilities,
                self.new_authors,
                self.updated_mods_by_id,
                self.updated_authors_by_id,
                self.updated_authors_by_url,
                self.removed_mods,
                self.removed_groups,
                self.removed_compatibilities,
            )
        )

    # -----------------------------------------------------------------------
    # Session end
    # -----------------------------------------------------------------------

    def convert_updated(self, catalog: Catalog, when: datetime) -> None:
        """Write dated change notes onto every updated mod and author."""
        stamp = format_date(when.date())
        self._updated_mod_lines = []
        self._updated_author_lines = []

        for mod_id in sorted(self.updated_mods_by_id, reverse=True):
            mod = catalog.get_mod(mod_id)
            if mod is None:
                continue
            notes = self.updated_mods_by_id[mod_id]
            mod.add_change_note(f"{stamp}: {notes}")
            self._updated_mod_lines.append(f"Updated mod {mod}: {notes}")

        for author_id in sorted(self.updated_authors_by_id, reverse=True):
            author = catalog.get_author(author_id)
            if author is None:
                continue
            notes = self.updated_authors_by_id[author_id]
            author.add_change_note(f"{stamp}: {notes}")
            self._updated_author_lines.append(f"Updated author {author}: {notes}")

        for author_url, notes in self.updated_authors_by_url.items():
            author = catalog.get_author(None, author_url)
            if author is None:
                continue
            author.add_change_note(f"{stamp}: {notes}")
            self._updated_author_lines.append(f"Updated author {author}: {notes}")

        logger.info(
            "Change notes written for %d mods and %d authors",
            len(self._updated_mod_lines),
            len(self._updated_author_lines),
        )

    def render(self, catalog: Catalog) -> str:
        when = catalog.updated or datetime.now()
        lines = [
            f"Change Notes for Catalog {catalog.version_string}",
            "-------------------------------",
            f"{when:%A, %d %B %Y}, {when:%H:%M}",
            "These change notes were automatically created by the updater process.",
            "",
        ]

        def section(header: str, *parts: list[str]) -> None:
            body = [line for part in parts for line in part]
            if body:
                lines.append(header)
                lines.extend(body)
                lines.append("")

        section("*** CATALOG CHANGES: ***", self.catalog_changes)
        section(
            "*** ADDED: ***",
            self.new_mods,
            self.new_groups,
            self.new_compatibilities,
            self.new_authors,
        )
        section("*** UPDATED: ***", self._updated_mod_lines, self._updated_author_lines)
        section(
            "*** REMOVED: ***",
            self.removed_mods,
            self.removed_groups,
            self.removed_compatibilities,
        )
        return "\n".join(lines).rstrip() + "\n"
