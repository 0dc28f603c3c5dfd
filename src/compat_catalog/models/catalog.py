"""In-memory catalog graph: mods, authors, groups and compatibilities.

The ``Catalog`` owns every entity for the lifetime of one updater session and
keeps private lookup indexes that are rebuilt on load. It performs no I/O and
writes no change notes; that is the job of the mutation layer.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, PrivateAttr

from compat_catalog.constants import (
    BUILTIN_MODS,
    CATALOG_STRUCTURE_VERSION,
    FAKE_DEVELOPER_AUTHOR_ID,
    FAKE_DEVELOPER_AUTHOR_NAME,
    HIGHEST_BUILTIN_ID,
    HIGHEST_LOCAL_MOD_ID,
    LOWEST_BUILTIN_ID,
    LOWEST_GROUP_ID,
    LOWEST_LOCAL_MOD_ID,
)
from compat_catalog.models.enums import (
    CompatibilityStatus,
    Dlc,
    LinkKind,
    Stability,
    Status,
)


class Mod(BaseModel):
    steam_id: int
    name: str = ""
    published: date | None = None
    updated: date | None = None
    author_id: int | None = None
    author_url: str = ""
    source_url: str = ""
    game_version: str = ""
    required_dlcs: list[Dlc] = Field(default_factory=list)
    required_mods: list[int] = Field(default_factory=list)
    successors: list[int] = Field(default_factory=list)
    alternatives: list[int] = Field(default_factory=list)
    recommendations: list[int] = Field(default_factory=list)
    stability: Stability = Stability.not_reviewed
    stability_note: str = ""
    generic_note: str = ""
    statuses: list[Status] = Field(default_factory=list)
    review_date: date | None = None
    auto_review_date: date | None = None
    change_notes: list[str] = Field(default_factory=list)

    # Manual overrides that automated updates may not regress.
    exclusion_for_source_url: bool = False
    exclusion_for_game_version: bool = False
    exclusion_for_no_description: bool = False
    exclusion_for_required_dlcs: list[Dlc] = Field(default_factory=list)
    exclusion_for_required_mods: list[int] = Field(default_factory=list)

    def __str__(self) -> str:
        if LOWEST_BUILTIN_ID <= self.steam_id <= HIGHEST_BUILTIN_ID:
            id_string = f"[builtin mod {self.steam_id}]"
        elif LOWEST_LOCAL_MOD_ID <= self.steam_id <= HIGHEST_LOCAL_MOD_ID:
            id_string = f"[local mod {self.steam_id}]"
        else:
            id_string = f"[Steam ID {self.steam_id:>10}]"
        return f"{id_string} {self.name}".rstrip()

    @property
    def is_removed(self) -> bool:
        return Status.removed_from_workshop in self.statuses

    def links(self, kind: LinkKind) -> list[int]:
        return {
            LinkKind.required: self.required_mods,
            LinkKind.successor: self.successors,
            LinkKind.alternative: self.alternatives,
            LinkKind.recommendation: self.recommendations,
        }[kind]

    def link_kind_of(self, target: int) -> LinkKind | None:
        for kind in LinkKind:
            if target in self.links(kind):
                return kind
        return None

    def set_link(self, kind: LinkKind, target: int) -> list[LinkKind]:
        """Point this mod at ``target`` with ``kind``, dropping any other link to it.

        This is the single place where the four relationship lists are kept
        mutually exclusive. Returns the kinds the target was removed from.
        """
        cleared: list[LinkKind] = []
        for other in LinkKind:
            if other is not kind and target in self.links(other):
                self.links(other).remove(target)
                cleared.append(other)
        if target not in self.links(kind):
            self.links(kind).append(target)
        return cleared

    def replace_link_target(
        self, old: int, new: int | None
    ) -> tuple[list[LinkKind], list[LinkKind]]:
        """Swap ``old`` for ``new`` in every list, or drop it when ``new`` is None.

        Returns the kinds that pointed at ``old`` and the kinds ``new`` was
        dropped from to keep the lists exclusive.
        """
        touched: list[LinkKind] = []
        cleared: list[LinkKind] = []
        for kind in LinkKind:
            targets = self.links(kind)
            if old not in targets:
                continue
            targets.remove(old)
            touched.append(kind)
            if new is not None and new != self.steam_id:
                cleared.extend(self.set_link(kind, new))
        if old in self.exclusion_for_required_mods:
            self.exclusion_for_required_mods.remove(old)
        return touched, cleared

    def add_change_note(self, note: str) -> None:
        self.change_notes.append(note)


class Author(BaseModel):
    """A mod author, known by a numeric profile id, a custom URL, or both."""

    steam_id: int | None = None
    custom_url: str = ""
    name: str = ""
    last_seen: date | None = None
    retired: bool = False
    exclusion_for_retired: bool = False
    change_notes: list[str] = Field(default_factory=list)

    def __str__(self) -> str:
        return f"[{self.steam_id if self.steam_id else self.custom_url}] {self.name}".rstrip()

    @property
    def key(self) -> int | str:
        return self.steam_id if self.steam_id else self.custom_url

    def add_change_note(self, note: str) -> None:
        self.change_notes.append(note)


class Group(BaseModel):
    group_id: int
    name: str
    members: list[int] = Field(default_factory=list)

    def __str__(self) -> str:
        return f"[Group {self.group_id}] {self.name}"


class Compatibility(BaseModel):
    first_id: int
    second_id: int
    status: CompatibilityStatus
    note: str = ""

    def __str__(self) -> str:
        return f"{self.first_id} / {self.second_id}: {self.status}"


class Catalog(BaseModel):
    structure_version: int = CATALOG_STRUCTURE_VERSION
    version: int = 0
    updated: datetime | None = None
    game_version: str = ""
    note: str = ""
    header_text: str = ""
    footer_text: str = ""
    mods: list[Mod] = Field(default_factory=list)
    groups: list[Group] = Field(default_factory=list)
    compatibilities: list[Compatibility] = Field(default_factory=list)
    authors: list[Author] = Field(default_factory=list)
    suppressed_warnings: list[int] = Field(default_factory=list)

    _mod_index: dict[int, Mod] = PrivateAttr(default_factory=dict)
    _group_index: dict[int, Group] = PrivateAttr(default_factory=dict)
    _author_ids: dict[int, Author] = PrivateAttr(default_factory=dict)
    _author_urls: dict[str, Author] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: object) -> None:
        self.rebuild_indexes()

    @classmethod
    def first_catalog(cls) -> Catalog:
        """An empty catalog seeded with the game's built-in mods."""
        catalog = cls()
        developer = catalog.add_author(FAKE_DEVELOPER_AUTHOR_ID, "", FAKE_DEVELOPER_AUTHOR_NAME)
        developer.exclusion_for_retired = True
        for mod_id, info in BUILTIN_MODS.items():
            mod = catalog.add_mod(mod_id)
            mod.name = info["name"]
            mod.author_id = info["author_id"]
            mod.stability = Stability.stable
        return catalog

    def rebuild_indexes(self) -> None:
        self._mod_index = {mod.steam_id: mod for mod in self.mods}
        self._group_index = {group.group_id: group for group in self.groups}
        self._author_ids = {a.steam_id: a for a in self.authors if a.steam_id}
        self._author_urls = {a.custom_url: a for a in self.authors if a.custom_url}

    @property
    def version_string(self) -> str:
        return f"{self.structure_version}.{self.version}"

    def new_version(self, when: datetime) -> None:
        self.version += 1
        self.updated = when

    # -----------------------------------------------------------------------
    # Mods
    # -----------------------------------------------------------------------

    def get_mod(self, mod_id: int) -> Mod | None:
        return self._mod_index.get(mod_id)

    def is_valid_id(
        self, mod_id: int, *, allow_builtin: bool = True, should_exist: bool = True
    ) -> bool:
        """Check that ``mod_id`` is a usable mod id and (does not) exist yet."""
        if mod_id <= 0 or mod_id in self._group_index:
            return False
        if not allow_builtin and LOWEST_BUILTIN_ID <= mod_id <= HIGHEST_BUILTIN_ID:
            return False
        return (mod_id in self._mod_index) == should_exist

    def add_mod(self, mod_id: int) -> Mod:
        mod = Mod(steam_id=mod_id)
        self.mods.append(mod)
        self._mod_index[mod_id] = mod
        return mod

    def remove_mod(self, mod: Mod) -> None:
        self.mods.remove(mod)
        del self._mod_index[mod.steam_id]
        if mod.steam_id in self.suppressed_warnings:
            self.suppressed_warnings.remove(mod.steam_id)

    def referencing_mods(self, target: int) -> list[Mod]:
        """Mods that require, recommend, succeed or offer ``target`` as an alternative."""
        return [m for m in self.mods if m.steam_id != target and m.link_kind_of(target)]

    # -----------------------------------------------------------------------
    # Groups
    # -----------------------------------------------------------------------

    def get_group(self, group_id: int) -> Group | None:
        return self._group_index.get(group_id)

    def get_group_of(self, mod_id: int) -> Group | None:
        for group in self.groups:
            if mod_id in group.members:
                return group
        return None

    def is_group_member(self, mod_id: int) -> bool:
        return self.get_group_of(mod_id) is not None

    def find_group_by_name(self, name: str) -> Group | None:
        lowered = name.lower()
        return next((g for g in self.groups if g.name.lower() == lowered), None)

    def add_group(self, name: str, members: list[int]) -> Group:
        new_id = max(self._group_index, default=LOWEST_GROUP_ID - 1) + 1
        while new_id in self._mod_index:
            new_id += 1
        group = Group(group_id=new_id, name=name, members=list(members))
        self.groups.append(group)
        self._group_index[new_id] = group
        return group

    def remove_group(self, group: Group) -> None:
        self.groups.remove(group)
        del self._group_index[group.group_id]

    # -----------------------------------------------------------------------
    # Compatibilities
    # -----------------------------------------------------------------------

    def find_compatibility(
        self, first_id: int, second_id: int, status: CompatibilityStatus
    ) -> Compatibility | None:
        for compat in self.compatibilities:
            if (compat.first_id, compat.second_id, compat.status) == (first_id, second_id, status):
                return compat
        return None

    def compatibilities_between(self, a: int, b: int) -> list[Compatibility]:
        return [c for c in self.compatibilities if {c.first_id, c.second_id} == {a, b}]

    def compatibilities_of(self, mod_id: int) -> list[Compatibility]:
        return [c for c in self.compatibilities if mod_id in (c.first_id, c.second_id)]

    def add_compatibility(
        self, first_id: int, second_id: int, status: CompatibilityStatus, note: str = ""
    ) -> Compatibility:
        compat = Compatibility(first_id=first_id, second_id=second_id, status=status, note=note)
        self.compatibilities.append(compat)
        return compat

    def remove_compatibility(self, compat: Compatibility) -> None:
        self.compatibilities.remove(compat)

    # -----------------------------------------------------------------------
    # Authors
    # -----------------------------------------------------------------------

    def get_author(self, author_id: int | None, author_url: str = "") -> Author | None:
        """Look up an author by numeric id first, then by custom URL."""
        if author_id and author_id in self._author_ids:
            return self._author_ids[author_id]
        if author_url:
            return self._author_urls.get(author_url)
        return None

    def add_author(self, author_id: int | None, author_url: str, name: str = "") -> Author:
        author = Author(steam_id=author_id or None, custom_url=author_url, name=name)
        self.authors.append(author)
        self.reindex_author(author)
        return author

    def remove_author(self, author: Author) -> None:
        self.authors.remove(author)
        if author.steam_id and self._author_ids.get(author.steam_id) is author:
            del self._author_ids[author.steam_id]
        if author.custom_url and self._author_urls.get(author.custom_url) is author:
            del self._author_urls[author.custom_url]

    def reindex_author(self, author: Author, old_url: str = "") -> None:
        if old_url and self._author_urls.get(old_url) is author:
            del self._author_urls[old_url]
        if author.steam_id:
            self._author_ids[author.steam_id] = author
        if author.custom_url:
            self._author_urls[author.custom_url] = author

    def mods_by_author(self, author: Author) -> list[Mod]:
        return [
            m
            for m in self.mods
            if (author.steam_id and m.author_id == author.steam_id)
            or (author.custom_url and m.author_url == author.custom_url)
        ]

    # -----------------------------------------------------------------------
    # Suppressed warnings
    # -----------------------------------------------------------------------

    def add_suppressed_warning(self, mod_id: int) -> None:
        if mod_id not in self.suppressed_warnings:
            self.suppressed_warnings.append(mod_id)

    def remove_suppressed_warning(self, mod_id: int) -> None:
        if mod_id in self.suppressed_warnings:
            self.suppressed_warnings.remove(mod_id)
