"""Edit primitives shared by the command importer and the crawler.

``CatalogUpdater`` performs already-validated edits on the catalog and
records what changed in the session's ``ChangeLedger``. Methods that can be
driven by either fact source take ``updated_by_importer``: manual edits set
exclusion flags so that later automated facts do not undo them.
"""

from __future__ import annotations

import logging
from datetime import date

from compat_catalog.models.catalog import Author, Catalog, Compatibility, Group, Mod
from compat_catalog.models.enums import (
    CLEARED_BY_REMOVAL,
    LINK_LABELS,
    CompatibilityStatus,
    Dlc,
    LinkKind,
    Stability,
    Status,
    status_family,
)
from compat_catalog.services.change_ledger import ChangeLedger, transition
from compat_catalog.utils.conversions import format_date, months_before

logger = logging.getLogger(__name__)

_MOD_FIELD_LABELS = {
    "name": "name",
    "published": "published date",
    "updated": "update date",
    "author_id": "author ID",
    "author_url": "author URL",
    "source_url": "source URL",
    "game_version": "game version",
    "stability": "stability",
    "stability_note": "stability note",
    "generic_note": "note",
}

_CATALOG_TEXT_LABELS = {
    "note": "note",
    "header_text": "header text",
    "footer_text": "footer text",
}


def status_label(status: Status) -> str:
    return status.value.replace("_", " ")


def status_label_compat(status: CompatibilityStatus) -> str:
    return status.value.replace("_", " ")


def dlc_label(dlc: Dlc) -> str:
    return dlc.name.replace("_", " ").title()


def _comparable(field: str, value: object) -> object:
    # The default stability counts as "no value" for change classification.
    if field == "stability" and value == Stability.not_reviewed:
        return None
    return value


class CatalogUpdater:
    def __init__(
        self,
        catalog: Catalog,
        ledger: ChangeLedger,
        *,
        review_date: date | None = None,
    ) -> None:
        self.catalog = catalog
        self.ledger = ledger
        self.review_date = review_date or date.today()

    def note_mod(self, mod: Mod | int, fragment: str) -> None:
        mod_id = mod if isinstance(mod, int) else mod.steam_id
        self.ledger.update_mod(mod_id, fragment)

    def _mark_reviewed(self, mod: Mod, updated_by_importer: bool) -> None:
        if updated_by_importer:
            mod.review_date = self.review_date
        else:
            mod.auto_review_date = self.review_date

    # -----------------------------------------------------------------------
    # Mods
    # -----------------------------------------------------------------------

    def add_mod(
        self,
        mod_id: int,
        *,
        name: str = "",
        published: date | None = None,
        author_id: int | None = None,
        author_url: str = "",
        status: Status | None = None,
        updated_by_importer: bool = False,
    ) -> Mod:
        mod = self.catalog.add_mod(mod_id)
        mod.name = name
        mod.published = published
        mod.updated = published
        mod.author_id = author_id
        mod.author_url = author_url
        self._mark_reviewed(mod, updated_by_importer)
        self.ledger.new_mod(mod_id, f"Added mod {mod}")
        if status is not None:
            self.add_status(mod, status, updated_by_importer=updated_by_importer)
        logger.debug("Added mod %d", mod_id)
        return mod

    def update_mod(
        self,
        mod: Mod,
        *,
        name: str | None = None,
        published: date | None = None,
        updated: date | None = None,
        author_id: int | None = None,
        author_url: str | None = None,
        source_url: str | None = None,
        game_version: str | None = None,
        stability: Stability | None = None,
        stability_note: str | None = None,
        generic_note: str | None = None,
        updated_by_importer: bool = False,
    ) -> bool:
        """Change any supplied property. ``None`` leaves a property alone, ``""`` clears it.

        Returns whether anything changed.
        """
        changes = {
            "name": name,
            "published": published,
            "updated": updated,
            "author_id": author_id,
            "author_url": author_url,
            "source_url": source_url,
            "game_version": game_version,
            "stability": stability,
            "stability_note": stability_note,
            "generic_note": generic_note,
        }
        changed = False
        for field, new in changes.items():
            if new is None:
                continue
            old = getattr(mod, field)
            if old == new:
                continue
            setattr(mod, field, new)
            self.note_mod(
                mod,
                transition(
                    _MOD_FIELD_LABELS[field], _comparable(field, old), _comparable(field, new)
                ),
            )
            changed = True

        if mod.published and mod.updated and mod.updated < mod.published:
            mod.updated = mod.published

        if updated_by_importer:
            if source_url is not None:
                mod.exclusion_for_source_url = True
            if game_version is not None:
                mod.exclusion_for_game_version = bool(game_version)

        if source_url and Status.source_unavailable in mod.statuses:
            self.remove_status(
                mod, Status.source_unavailable, updated_by_importer=updated_by_importer
            )

        if changed:
            self._mark_reviewed(mod, updated_by_importer)
        return changed

    def update_review(self, mod: Mod) -> None:
        mod.review_date = self.review_date

    def remove_mod(self, mod: Mod) -> None:
        for compat in self.catalog.compatibilities_of(mod.steam_id):
            self.remove_compatibility(compat)
        self.catalog.remove_mod(mod)
        self.ledger.removed_mod(f"Removed mod {mod}")

    # -----------------------------------------------------------------------
    # Statuses
    # -----------------------------------------------------------------------

    def add_status(self, mod: Mod, status: Status, *, updated_by_importer: bool = False) -> None:
        for other in status_family(status):
            if other is not status and other in mod.statuses:
                self.remove_status(mod, other, updated_by_importer=False)

        if status is Status.removed_from_workshop:
            for cleared in CLEARED_BY_REMOVAL:
                if cleared in mod.statuses:
                    self.remove_status(mod, cleared, updated_by_importer=False)
            mod.exclusion_for_no_description = False

        mod.statuses.append(status)
        self.note_mod(mod, f"{status_label(status)} status added")
        if status is Status.no_description and updated_by_importer:
            mod.exclusion_for_no_description = True

    def remove_status(self, mod: Mod, status: Status, *, updated_by_importer: bool = False) -> None:
        mod.statuses.remove(status)
        self.note_mod(mod, f"{status_label(status)} status removed")
        if status is Status.no_description and updated_by_importer:
            mod.exclusion_for_no_description = True

    # -----------------------------------------------------------------------
    # Required DLC
    # -----------------------------------------------------------------------

    def add_required_dlc(self, mod: Mod, dlc: Dlc, *, updated_by_importer: bool = False) -> None:
        mod.required_dlcs.append(dlc)
        self.note_mod(mod, f"required DLC {dlc_label(dlc)} added")
        if updated_by_importer and dlc not in mod.exclusion_for_required_dlcs:
            mod.exclusion_for_required_dlcs.append(dlc)

    def remove_required_dlc(
        self, mod: Mod, dlc: Dlc, *, updated_by_importer: bool = False
    ) -> None:
        mod.required_dlcs.remove(dlc)
        self.note_mod(mod, f"required DLC {dlc_label(dlc)} removed")
        if updated_by_importer and dlc in mod.exclusion_for_required_dlcs:
            mod.exclusion_for_required_dlcs.remove(dlc)

    # -----------------------------------------------------------------------
    # Required mods, successors, alternatives and recommendations
    # -----------------------------------------------------------------------

    def _pin_required_exclusion(self, mod: Mod, target: int) -> None:
        if target not in mod.exclusion_for_required_mods:
            mod.exclusion_for_required_mods.append(target)

    def add_link(
        self, mod: Mod, kind: LinkKind, target: int, *, updated_by_importer: bool = False
    ) -> None:
        for cleared in mod.set_link(kind, target):
            self.note_mod(mod, f"{LINK_LABELS[cleared]} {target} removed")
            if cleared is LinkKind.required and updated_by_importer:
                self._pin_required_exclusion(mod, target)
        self.note_mod(mod, f"{LINK_LABELS[kind]} {target} added")
        if kind is LinkKind.required and updated_by_importer:
            self._pin_required_exclusion(mod, target)

    def remove_link(
        self, mod: Mod, kind: LinkKind, target: int, *, updated_by_importer: bool = False
    ) -> None:
        mod.links(kind).remove(target)
        self.note_mod(mod, f"{LINK_LABELS[kind]} {target} removed")
        if kind is LinkKind.required and updated_by_importer:
            # A manual addition is undone cleanly; an automated one is blocked from returning.
            if target in mod.exclusion_for_required_mods:
                mod.exclusion_for_required_mods.remove(target)
            else:
                mod.exclusion_for_required_mods.append(target)

    # -----------------------------------------------------------------------
    # Groups
    # -----------------------------------------------------------------------

    def add_group(self, name: str, member_ids: list[int]) -> Group:
        group = self.catalog.add_group(name, member_ids)
        members = ", ".join(str(m) for m in member_ids)
        self.ledger.new_group(f"Added group {group}: {members}")
        for member_id in member_ids:
            self.note_mod(member_id, f"added to group {group.group_id}")
        return group

    def add_group_member(self, group: Group, mod_id: int) -> None:
        group.members.append(mod_id)
        self.note_mod(mod_id, f"added to group {group.group_id}")

    def remove_group_member(self, group: Group, mod_id: int) -> None:
        """Drop a member; a group left with one member is removed entirely.

        On that cascade every reference to the group is replaced by its last
        remaining member.
        """
        group.members.remove(mod_id)
        self.note_mod(mod_id, f"removed from group {group.group_id}")
        if len(group.members) < 2:
            remaining = group.members[0] if group.members else None
            logger.info("Group %d fell below two members and is removed", group.group_id)
            self.remove_group(group, replacement_id=remaining)

    def remove_group(self, group: Group, replacement_id: int | None = None) -> None:
        for mod in self.catalog.referencing_mods(group.group_id):
            touched, cleared = mod.replace_link_target(group.group_id, replacement_id)
            for kind in touched:
                self.note_mod(mod, f"{LINK_LABELS[kind]} {group.group_id} removed")
                if replacement_id is not None and replacement_id != mod.steam_id:
                    self.note_mod(mod, f"{LINK_LABELS[kind]} {replacement_id} added")
            for kind in cleared:
                self.note_mod(mod, f"{LINK_LABELS[kind]} {replacement_id} removed")
        for member_id in group.members:
            self.note_mod(member_id, f"removed from group {group.group_id}")
        self.catalog.remove_group(group)
        self.ledger.removed_group(f"Removed group {group}")

    # -----------------------------------------------------------------------
    # Compatibilities
    # -----------------------------------------------------------------------

    def _describe(self, compat: Compatibility) -> str:
        first = self.catalog.get_mod(compat.first_id) or compat.first_id
        second = self.catalog.get_mod(compat.second_id) or compat.second_id
        return f"{first} and {second}: {status_label_compat(compat.status)}"

    def add_compatibility(
        self, first_id: int, second_id: int, status: CompatibilityStatus, note: str = ""
    ) -> Compatibility:
        compat = self.catalog.add_compatibility(first_id, second_id, status, note)
        self.ledger.new_compatibility(f"Added compatibility between {self._describe(compat)}")
        return compat

    def remove_compatibility(self, compat: Compatibility) -> None:
        self.catalog.remove_compatibility(compat)
        self.ledger.removed_compatibility(f"Removed compatibility between {self._describe(compat)}")

    # -----------------------------------------------------------------------
    # Authors
    # -----------------------------------------------------------------------

    def add_author(
        self, author_id: int | None, author_url: str, name: str = "", *, retired: bool = False
    ) -> Author:
        author = self.catalog.add_author(author_id, author_url, name)
        author.retired = retired
        self.ledger.new_author(author, f"Added author {author}")
        return author

    def get_or_add_author(self, author_id: int | None, author_url: str, name: str = "") -> Author:
        author = self.catalog.get_author(author_id, author_url)
        if author is None:
            author = self.add_author(author_id, author_url, name)
        return author

    def update_author(
        self,
        author: Author,
        *,
        name: str | None = None,
        author_id: int | None = None,
        custom_url: str | None = None,
        last_seen: date | None = None,
        retired: bool | None = None,
        exclusion_for_retired: bool | None = None,
    ) -> None:
        """Change any supplied author property and keep mods and indexes in step."""
        if name and name != author.name and name != str(author.steam_id):
            old_name = author.name
            author.name = name
            self.ledger.update_author(author, transition("name", old_name, name))

        if author_id and author_id != author.steam_id:
            author.steam_id = author_id
            self.catalog.reindex_author(author)
            self.ledger.rekey_author(author, author.custom_url)
            self.ledger.update_author(author, "author ID added")
            for mod in self.catalog.mods_by_author(author):
                if mod.author_id != author_id:
                    self.update_mod(mod, author_id=author_id)

        if custom_url is not None and custom_url != author.custom_url:
            old_url = author.custom_url
            linked = self.catalog.mods_by_author(author)
            author.custom_url = custom_url
            self.catalog.reindex_author(author, old_url=old_url)
            self.ledger.update_author(author, transition("custom URL", old_url, custom_url))
            for mod in linked:
                self.update_mod(mod, author_url=custom_url)

        if last_seen is not None and last_seen != author.last_seen:
            old_seen = author.last_seen
            author.last_seen = last_seen
            self.ledger.update_author(author, transition("last seen date", old_seen, last_seen))

        if retired is not None and retired != author.retired:
            author.retired = retired
            self.ledger.update_author(author, "retired" if retired else "no longer retired")

        if exclusion_for_retired is not None:
            author.exclusion_for_retired = exclusion_for_retired

    def merge_authors(self, id_author: Author, url_author: Author) -> None:
        """Fold a URL-only author into an id-only author.

        The id author keeps its name unless that is empty or just its own id, or
        the URL author was seen more recently. Mods pointing at the URL are
        re-linked to the surviving id.
        """
        id_name_usable = bool(id_author.name) and id_author.name != str(id_author.steam_id)
        url_more_recent = bool(url_author.last_seen) and (
            not id_author.last_seen or url_author.last_seen > id_author.last_seen
        )
        name = id_author.name
        if url_author.name and (not id_name_usable or url_more_recent):
            name = url_author.name

        last_seen = max(
            (d for d in (id_author.last_seen, url_author.last_seen) if d), default=None
        )
        linked = self.catalog.mods_by_author(url_author)
        url = url_author.custom_url

        self.catalog.remove_author(url_author)
        self.update_author(id_author, name=name, custom_url=url, last_seen=last_seen)
        if url_author.exclusion_for_retired:
            id_author.exclusion_for_retired = True
        self.ledger.update_author(id_author, f"merged with author {url}")

        for mod in linked:
            self.update_mod(mod, author_id=id_author.steam_id, author_url=url)

    def derive_retirement(self, today: date, inactivity_months: int) -> int:
        """Recompute the retired flag of every author. Returns how many changed."""
        cutoff = months_before(today, inactivity_months)
        changed = 0
        for author in list(self.catalog.authors):
            active_mods = [m for m in self.catalog.mods_by_author(author) if not m.is_removed]
            inactive = author.last_seen is None or author.last_seen < cutoff
            # A pin only lapses once a known activity date falls out of the window.
            pin_lapsed = author.last_seen is not None and author.last_seen < cutoff

            if not active_mods:
                retired, exclusion = True, False
            elif author.exclusion_for_retired and pin_lapsed:
                retired, exclusion = True, False
            elif author.exclusion_for_retired:
                retired, exclusion = author.retired, True
            else:
                retired, exclusion = inactive, False

            if retired != author.retired:
                changed += 1
            self.update_author(author, retired=retired, exclusion_for_retired=exclusion)

        logger.info(
            "Retirement derived for %d authors, %d changed", len(self.catalog.authors), changed
        )
        return changed

    # -----------------------------------------------------------------------
    # Catalog
    # -----------------------------------------------------------------------

    def set_catalog_text(self, field: str, text: str) -> None:
        old = getattr(self.catalog, field)
        setattr(self.catalog, field, text)
        self.ledger.catalog_change(
            "Catalog " + transition(_CATALOG_TEXT_LABELS[field], old, text) + "."
        )

    def set_catalog_game_version(self, version: str) -> None:
        self.catalog.game_version = version
        self.ledger.catalog_change(f"Catalog was updated to game version {version}.")

    def set_suppressed_warning(self, mod_id: int, *, remove: bool = False) -> None:
        if remove:
            self.catalog.remove_suppressed_warning(mod_id)
            self.ledger.catalog_change(f"Warnings no longer suppressed for mod {mod_id}.")
        else:
            self.catalog.add_suppressed_warning(mod_id)
            self.ledger.catalog_change(f"Warnings suppressed for mod {mod_id}.")

    def set_review_date(self, review_date: date) -> None:
        self.review_date = review_date
        logger.info("Review date set to %s", format_date(review_date))

