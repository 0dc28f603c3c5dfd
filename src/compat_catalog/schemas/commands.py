"""Typed operations produced by the command parser.

Each command verb maps to exactly one of these frozen dataclasses; paired
verbs such as ``add_status``/``remove_status`` share a class with a
``remove`` flag. ``None`` on an optional field always means "not supplied"
or "clear", never an empty placeholder string.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from compat_catalog.models.enums import (
    CompatibilityStatus,
    Dlc,
    ExclusionCategory,
    LinkKind,
    Stability,
    Status,
)
from compat_catalog.utils.conversions import GameVersion


class ModNoteField(StrEnum):
    stability_note = "stability_note"
    generic_note = "generic_note"


class CatalogTextField(StrEnum):
    note = "note"
    header_text = "header_text"
    footer_text = "footer_text"


@dataclass(frozen=True, slots=True)
class AuthorRef:
    """An author reference from a command line: a numeric id or a custom URL."""

    author_id: int | None = None
    author_url: str | None = None

    def __str__(self) -> str:
        return str(self.author_id) if self.author_id else self.author_url or ""


# ---------------------------------------------------------------------------
# Mods
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SetReviewDate:
    review_date: date


@dataclass(frozen=True, slots=True)
class AddMod:
    mod_id: int
    status: Status | None = None
    author: AuthorRef = AuthorRef()
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RemoveMod:
    mod_id: int


@dataclass(frozen=True, slots=True)
class SetStability:
    mod_id: int
    stability: Stability


@dataclass(frozen=True, slots=True)
class SetModNote:
    mod_id: int
    field: ModNoteField
    note: str | None


@dataclass(frozen=True, slots=True)
class UpdateReview:
    mod_id: int


@dataclass(frozen=True, slots=True)
class SetSourceUrl:
    mod_id: int
    url: str | None


@dataclass(frozen=True, slots=True)
class SetGameVersion:
    mod_id: int
    version: GameVersion | None


@dataclass(frozen=True, slots=True)
class ChangeStatus:
    mod_id: int
    status: Status
    remove: bool = False


@dataclass(frozen=True, slots=True)
class ChangeRequiredDlc:
    mod_id: int
    dlc: Dlc
    remove: bool = False


@dataclass(frozen=True, slots=True)
class ChangeLink:
    mod_id: int
    kind: LinkKind
    target_id: int
    remove: bool = False


@dataclass(frozen=True, slots=True)
class RemoveExclusion:
    mod_id: int
    category: ExclusionCategory
    item_id: int | None = None


# ---------------------------------------------------------------------------
# Compatibilities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AddCompatibility:
    first_id: int
    second_id: int
    status: CompatibilityStatus
    note: str | None = None


@dataclass(frozen=True, slots=True)
class RemoveCompatibility:
    first_id: int
    second_id: int
    status: CompatibilityStatus


@dataclass(frozen=True, slots=True)
class AddCompatibilitiesForOne:
    first_id: int
    status: CompatibilityStatus
    second_ids: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class AddCompatibilitiesForAll:
    status: CompatibilityStatus
    mod_ids: tuple[int, ...]


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AddGroup:
    name: str
    member_ids: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class RemoveGroup:
    group_id: int
    replacement_id: int | None = None


@dataclass(frozen=True, slots=True)
class ChangeGroupMember:
    group_id: int
    mod_id: int
    remove: bool = False


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AddAuthor:
    author: AuthorRef
    name: str


@dataclass(frozen=True, slots=True)
class MergeAuthor:
    author_id: int
    author_url: str


@dataclass(frozen=True, slots=True)
class SetAuthorId:
    author_url: str
    new_id: int


@dataclass(frozen=True, slots=True)
class SetAuthorUrl:
    author: AuthorRef
    new_url: str | None


@dataclass(frozen=True, slots=True)
class SetLastSeen:
    author: AuthorRef
    last_seen: date


@dataclass(frozen=True, slots=True)
class SetRetired:
    author: AuthorRef
    retired: bool


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SetCatalogGameVersion:
    version: GameVersion


@dataclass(frozen=True, slots=True)
class SetCatalogText:
    field: CatalogTextField
    text: str | None


@dataclass(frozen=True, slots=True)
class ChangeSuppressedWarning:
    mod_id: int
    remove: bool = False


Operation = (
    SetReviewDate
    | AddMod
    | RemoveMod
    | SetStability
    | SetModNote
    | UpdateReview
    | SetSourceUrl
    | SetGameVersion
    | ChangeStatus
    | ChangeRequiredDlc
    | ChangeLink
    | RemoveExclusion
    | AddCompatibility
    | RemoveCompatibility
    | AddCompatibilitiesForOne
    | AddCompatibilitiesForAll
    | AddGroup
    | RemoveGroup
    | ChangeGroupMember
    | AddAuthor
    | MergeAuthor
    | SetAuthorId
    | SetAuthorUrl
    | SetLastSeen
    | SetRetired
    | SetCatalogGameVersion
    | SetCatalogText
    | ChangeSuppressedWarning
)
