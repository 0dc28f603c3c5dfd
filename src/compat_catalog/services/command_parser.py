"""Parser for the line-oriented catalog command language.

One line holds one edit: a verb followed by comma-separated fields. Blank
lines and ``#`` comments are ignored. Format problems (unknown verb, short
line, unparseable enum, date, URL or version) raise ``CommandParseError``;
whether referenced ids exist is left to the mutation engine.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from compat_catalog.constants import COMMENT_MARKER, FIELD_DELIMITER
from compat_catalog.models.enums import (
    PLATFORM_STATUSES,
    CompatibilityStatus,
    Dlc,
    ExclusionCategory,
    LinkKind,
    Stability,
    Status,
)
from compat_catalog.schemas.commands import (
    AddAuthor,
    AddCompatibilitiesForAll,
    AddCompatibilitiesForOne,
    AddCompatibility,
    AddGroup,
    AddMod,
    AuthorRef,
    CatalogTextField,
    ChangeGroupMember,
    ChangeLink,
    ChangeRequiredDlc,
    ChangeStatus,
    ChangeSuppressedWarning,
    MergeAuthor,
    ModNoteField,
    Operation,
    RemoveCompatibility,
    RemoveExclusion,
    RemoveGroup,
    RemoveMod,
    SetAuthorId,
    SetAuthorUrl,
    SetCatalogGameVersion,
    SetCatalogText,
    SetGameVersion,
    SetLastSeen,
    SetModNote,
    SetRetired,
    SetReviewDate,
    SetSourceUrl,
    SetStability,
    UpdateReview,
)
from compat_catalog.utils.conversions import (
    parse_date,
    parse_enum,
    parse_game_version,
    parse_id,
)

logger = logging.getLogger(__name__)


class CommandParseError(ValueError):
    """A command line that cannot be turned into an operation."""


VerbParser = Callable[[str, list[str]], Operation]

_VERBS: dict[str, tuple[int, VerbParser]] = {}


def _verb(*names: str, min_fields: int) -> Callable[[VerbParser], VerbParser]:
    """Register a field parser for one or more verbs.

    ``min_fields`` counts the fields after the verb itself.
    """

    def decorator(func: VerbParser) -> VerbParser:
        for name in names:
            _VERBS[name] = (min_fields, func)
        return func

    return decorator


def known_verbs() -> list[str]:
    return sorted(_VERBS)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


class _Fields(list[str]):
    """Trimmed fields that remember their raw text for free-text rejoins."""

    def __init__(self, raw: list[str]) -> None:
        super().__init__(part.strip() for part in raw)
        self.raw = raw

    def drop_trailing_empty(self) -> None:
        while self and not self[-1]:
            self.pop()
            self.raw = self.raw[: len(self)]


def _text(fields: list[str], start: int) -> str | None:
    """Rejoin the free-text tail of a line; a ``#`` tail is a comment, not text."""
    raw = fields.raw if isinstance(fields, _Fields) else fields
    tail = FIELD_DELIMITER.join(raw[start:]).strip()
    if not tail or tail.startswith(COMMENT_MARKER):
        return None
    return tail.replace("\\n", "\n")


def _id_list(fields: list[str]) -> tuple[int, ...]:
    ids: list[int] = []
    for field in fields:
        if field.startswith(COMMENT_MARKER):
            break
        if field:
            ids.append(parse_id(field))
    return tuple(ids)


def _optional_id(field: str) -> int | None:
    return parse_id(field) or None


def _author_ref(field: str) -> AuthorRef:
    if author_id := parse_id(field):
        return AuthorRef(author_id=author_id)
    return AuthorRef(author_url=field or None)


def _stability(field: str) -> Stability:
    stability = parse_enum(Stability, field)
    if stability is None or stability is Stability.undefined:
        raise CommandParseError("Invalid stability.")
    return stability


def _status(field: str) -> Status:
    status = parse_enum(Status, field)
    if status is None:
        raise CommandParseError("Invalid status.")
    return status


def _compat_status(field: str) -> CompatibilityStatus:
    status = parse_enum(CompatibilityStatus, field)
    if status is None:
        raise CommandParseError("Invalid compatibility status.")
    return status


def _dlc(field: str) -> Dlc:
    if app_id := parse_id(field):
        try:
            return Dlc(app_id)
        except ValueError:
            raise CommandParseError("Invalid DLC.") from None
    dlc = parse_enum(Dlc, field)
    if dlc is None:
        raise CommandParseError("Invalid DLC.")
    return dlc


def _date(field: str) -> date:
    parsed = parse_date(field)
    if parsed is None:
        raise CommandParseError("Invalid date.")
    return parsed


# ---------------------------------------------------------------------------
# Mod verbs
# ---------------------------------------------------------------------------


@_verb("reviewdate", min_fields=1)
def _parse_review_date(verb: str, fields: list[str]) -> Operation:
    return SetReviewDate(_date(fields[0]))


@_verb("add_mod", min_fields=1)
def _parse_add_mod(verb: str, fields: list[str]) -> Operation:
    padded = fields + [""] * (4 - len(fields))
    status_text = padded[1].lower()
    if status_text == "unlisted":
        status = Status.unlisted_in_workshop
    elif status_text == "removed":
        status = Status.removed_from_workshop
    elif not status_text:
        status = None
    else:
        raise CommandParseError("Invalid status, must be 'unlisted' or 'removed'.")
    author_id = _optional_id(padded[2])
    author = AuthorRef(author_id=author_id, author_url=padded[3] or None)
    return AddMod(
        mod_id=parse_id(padded[0]),
        status=status,
        author=author,
        name=_text(fields, 4),
    )


@_verb("remove_mod", min_fields=1)
def _parse_remove_mod(verb: str, fields: list[str]) -> Operation:
    return RemoveMod(parse_id(fields[0]))


@_verb("set_stability", min_fields=2)
def _parse_set_stability(verb: str, fields: list[str]) -> Operation:
    return SetStability(parse_id(fields[0]), _stability(fields[1]))


@_verb("set_stabilitynote", "set_genericnote", min_fields=2)
@_verb("remove_stabilitynote", "remove_genericnote", min_fields=1)
def _parse_mod_note(verb: str, fields: list[str]) -> Operation:
    field = ModNoteField.stability_note if "stability" in verb else ModNoteField.generic_note
    note = _text(fields, 1) if verb.startswith("set_") else None
    if verb.startswith("set_") and note is None:
        raise CommandParseError("Not enough parameters.")
    return SetModNote(parse_id(fields[0]), field, note)


@_verb("update_review", min_fields=1)
def _parse_update_review(verb: str, fields: list[str]) -> Operation:
    return UpdateReview(parse_id(fields[0]))


@_verb("set_sourceurl", min_fields=2)
@_verb("remove_sourceurl", min_fields=1)
def _parse_source_url(verb: str, fields: list[str]) -> Operation:
    if verb == "remove_sourceurl":
        return SetSourceUrl(parse_id(fields[0]), None)
    url = fields[1]
    if not url.startswith(("http://", "https://")):
        raise CommandParseError("Invalid URL.")
    return SetSourceUrl(parse_id(fields[0]), url)


@_verb("set_gameversion", min_fields=2)
@_verb("remove_gameversion", min_fields=1)
def _parse_game_version(verb: str, fields: list[str]) -> Operation:
    if verb == "remove_gameversion":
        return SetGameVersion(parse_id(fields[0]), None)
    version = parse_game_version(fields[1])
    if version is None:
        raise CommandParseError("Invalid gameversion.")
    return SetGameVersion(parse_id(fields[0]), version)


@_verb("add_status", "remove_status", min_fields=2)
def _parse_status(verb: str, fields: list[str]) -> Operation:
    status = _status(fields[1])
    remove = verb == "remove_status"
    if status in PLATFORM_STATUSES:
        action = "removed" if remove else "added"
        raise CommandParseError(f"This status cannot be manually {action}.")
    return ChangeStatus(parse_id(fields[0]), status, remove=remove)


@_verb("add_requireddlc", "remove_requireddlc", min_fields=2)
def _parse_required_dlc(verb: str, fields: list[str]) -> Operation:
    return ChangeRequiredDlc(
        parse_id(fields[0]), _dlc(fields[1]), remove=verb.startswith("remove_")
    )


_LINK_VERBS = {
    "requiredmod": LinkKind.required,
    "successor": LinkKind.successor,
    "alternative": LinkKind.alternative,
    "recommendation": LinkKind.recommendation,
}


@_verb(*(f"{op}_{noun}" for noun in _LINK_VERBS for op in ("add", "remove")), min_fields=2)
def _parse_link(verb: str, fields: list[str]) -> Operation:
    op, noun = verb.split("_", 1)
    return ChangeLink(
        mod_id=parse_id(fields[0]),
        kind=_LINK_VERBS[noun],
        target_id=parse_id(fields[1]),
        remove=op == "remove",
    )


@_verb("remove_exclusion", min_fields=2)
def _parse_remove_exclusion(verb: str, fields: list[str]) -> Operation:
    category = parse_enum(ExclusionCategory, fields[1])
    if category is None:
        raise CommandParseError("Invalid category.")
    item_id: int | None = None
    if category in (ExclusionCategory.required_dlc, ExclusionCategory.required_mod):
        if len(fields) < 3:
            raise CommandParseError("Not enough parameters.")
        if category is ExclusionCategory.required_dlc:
            item_id = int(_dlc(fields[2]))
        else:
            item_id = parse_id(fields[2])
    return RemoveExclusion(parse_id(fields[0]), category, item_id)


# ---------------------------------------------------------------------------
# Compatibility verbs
# ---------------------------------------------------------------------------


@_verb("add_compatibility", min_fields=3)
def _parse_add_compatibility(verb: str, fields: list[str]) -> Operation:
    return AddCompatibility(
        first_id=parse_id(fields[0]),
        second_id=parse_id(fields[1]),
        status=_compat_status(fields[2]),
        note=_text(fields, 3),
    )


@_verb("remove_compatibility", min_fields=3)
def _parse_remove_compatibility(verb: str, fields: list[str]) -> Operation:
    return RemoveCompatibility(
        parse_id(fields[0]), parse_id(fields[1]), _compat_status(fields[2])
    )


@_verb("add_compatibilitiesforone", min_fields=4)
def _parse_compatibilities_for_one(verb: str, fields: list[str]) -> Operation:
    second_ids = _id_list(fields[2:])
    if len(second_ids) < 2:
        raise CommandParseError("Not enough parameters.")
    return AddCompatibilitiesForOne(parse_id(fields[0]), _compat_status(fields[1]), second_ids)


@_verb("add_compatibilitiesforall", min_fields=4)
def _parse_compatibilities_for_all(verb: str, fields: list[str]) -> Operation:
    mod_ids = _id_list(fields[1:])
    if len(mod_ids) < 3:
        raise CommandParseError("Not enough parameters.")
    return AddCompatibilitiesForAll(_compat_status(fields[0]), mod_ids)


# ---------------------------------------------------------------------------
# Group verbs
# ---------------------------------------------------------------------------


@_verb("add_group", min_fields=3)
def _parse_add_group(verb: str, fields: list[str]) -> Operation:
    member_ids = _id_list(fields[1:])
    if not fields[0] or len(member_ids) < 2:
        raise CommandParseError("Not enough parameters.")
    return AddGroup(fields[0], member_ids)


@_verb("remove_group", min_fields=1)
def _parse_remove_group(verb: str, fields: list[str]) -> Operation:
    replacement = _optional_id(fields[1]) if len(fields) > 1 else None
    return RemoveGroup(parse_id(fields[0]), replacement)


@_verb("add_groupmember", "remove_groupmember", min_fields=2)
def _parse_group_member(verb: str, fields: list[str]) -> Operation:
    return ChangeGroupMember(
        parse_id(fields[0]), parse_id(fields[1]), remove=verb.startswith("remove_")
    )


# ---------------------------------------------------------------------------
# Author verbs
# ---------------------------------------------------------------------------


@_verb("add_author", min_fields=2)
def _parse_add_author(verb: str, fields: list[str]) -> Operation:
    name = _text(fields, 1)
    if name is None:
        raise CommandParseError("Not enough parameters.")
    return AddAuthor(_author_ref(fields[0]), name)


@_verb("merge_author", min_fields=2)
def _parse_merge_author(verb: str, fields: list[str]) -> Operation:
    return MergeAuthor(parse_id(fields[0]), fields[1])


@_verb("set_authorid", min_fields=2)
def _parse_set_author_id(verb: str, fields: list[str]) -> Operation:
    return SetAuthorId(fields[0], parse_id(fields[1]))


@_verb("set_authorurl", min_fields=2)
@_verb("remove_authorurl", min_fields=1)
def _parse_author_url(verb: str, fields: list[str]) -> Operation:
    if verb == "remove_authorurl":
        return SetAuthorUrl(_author_ref(fields[0]), None)
    if not fields[1]:
        raise CommandParseError("Invalid custom URL.")
    return SetAuthorUrl(_author_ref(fields[0]), fields[1])


@_verb("set_lastseen", min_fields=2)
def _parse_last_seen(verb: str, fields: list[str]) -> Operation:
    return SetLastSeen(_author_ref(fields[0]), _date(fields[1]))


@_verb("set_retired", "remove_retired", min_fields=1)
def _parse_retired(verb: str, fields: list[str]) -> Operation:
    return SetRetired(_author_ref(fields[0]), retired=verb == "set_retired")


# ---------------------------------------------------------------------------
# Catalog verbs
# ---------------------------------------------------------------------------


@_verb("set_cataloggameversion", min_fields=1)
def _parse_catalog_game_version(verb: str, fields: list[str]) -> Operation:
    version = parse_game_version(fields[0])
    if version is None:
        raise CommandParseError("Incorrect gameversion.")
    return SetCatalogGameVersion(version)


_CATALOG_TEXT_VERBS = {
    "catalognote": CatalogTextField.note,
    "catalogheadertext": CatalogTextField.header_text,
    "catalogfootertext": CatalogTextField.footer_text,
}


@_verb(*(f"set_{noun}" for noun in _CATALOG_TEXT_VERBS), min_fields=1)
@_verb(*(f"remove_{noun}" for noun in _CATALOG_TEXT_VERBS), min_fields=0)
def _parse_catalog_text(verb: str, fields: list[str]) -> Operation:
    op, noun = verb.split("_", 1)
    if op == "remove":
        return SetCatalogText(_CATALOG_TEXT_VERBS[noun], None)
    text = _text(fields, 0)
    if text is None:
        raise CommandParseError("Not enough parameters.")
    return SetCatalogText(_CATALOG_TEXT_VERBS[noun], text)


@_verb("add_suppressedwarning", "remove_suppressedwarning", min_fields=1)
def _parse_suppressed_warning(verb: str, fields: list[str]) -> Operation:
    return ChangeSuppressedWarning(parse_id(fields[0]), remove=verb.startswith("remove_"))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def parse_line(line: str) -> Operation | None:
    """Turn one command line into an operation.

    Returns None for blank and comment lines. Raises ``CommandParseError``
    for lines that cannot be parsed.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_MARKER):
        return None

    verb, *raw = stripped.split(FIELD_DELIMITER)
    verb = verb.strip().lower()
    entry = _VERBS.get(verb)
    if entry is None:
        raise CommandParseError("Invalid action.")

    min_fields, parser = entry
    rest = _Fields(raw)
    # Trailing empty fields only come from stray delimiters.
    rest.drop_trailing_empty()
    if len(rest) < min_fields:
        raise CommandParseError("Not enough parameters.")
    return parser(verb, rest)
