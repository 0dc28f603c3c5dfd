"""Handlers for author identity, activity and retirement."""

from __future__ import annotations

from typing import TYPE_CHECKING

from compat_catalog.models.catalog import Author
from compat_catalog.schemas.commands import (
    AddAuthor,
    AuthorRef,
    MergeAuthor,
    SetAuthorId,
    SetAuthorUrl,
    SetLastSeen,
    SetRetired,
)
from compat_catalog.services.mutations.registry import handles

if TYPE_CHECKING:
    from compat_catalog.services.mutations.engine import MutationEngine


def _resolve(engine: MutationEngine, ref: AuthorRef) -> tuple[Author | None, str | None]:
    author = engine.catalog.get_author(ref.author_id, ref.author_url or "")
    if author is not None:
        return author, None
    if ref.author_id or not ref.author_url:
        return None, "Invalid author ID."
    return None, "Invalid author custom URL."


def _both_identifiers(key: int | str) -> str:
    return f"Author has both an ID and Custom URL: {key}"


@handles(AddAuthor)
def add_author(engine: MutationEngine, op: AddAuthor) -> str | None:
    if not op.author.author_id and not op.author.author_url:
        return "Invalid author ID."
    if engine.catalog.get_author(op.author.author_id, op.author.author_url or ""):
        return "Author already exists."
    # Without any mods yet, a new author starts out retired.
    engine.updater.add_author(
        op.author.author_id, op.author.author_url or "", op.name, retired=True
    )
    return None


@handles(MergeAuthor)
def merge_author(engine: MutationEngine, op: MergeAuthor) -> str | None:
    catalog = engine.catalog
    id_author = catalog.get_author(op.author_id)
    if id_author is None:
        return "Invalid author ID."
    if id_author.custom_url:
        return _both_identifiers(op.author_id)
    url_author = catalog.get_author(None, op.author_url)
    if url_author is None:
        return "Invalid author custom URL."
    if url_author.steam_id:
        return _both_identifiers(op.author_url)
    engine.updater.merge_authors(id_author, url_author)
    return None


@handles(SetAuthorId)
def set_author_id(engine: MutationEngine, op: SetAuthorId) -> str | None:
    author = engine.catalog.get_author(None, op.author_url)
    if author is None:
        return "Invalid author custom URL."
    if author.steam_id:
        return "Author already has an author ID."
    if not op.new_id:
        return "Invalid author ID."
    if engine.catalog.get_author(op.new_id):
        return "Author already exists."
    engine.updater.update_author(author, author_id=op.new_id)
    return None


@handles(SetAuthorUrl)
def set_author_url(engine: MutationEngine, op: SetAuthorUrl) -> str | None:
    author, error = _resolve(engine, op.author)
    if author is None:
        return error
    if op.new_url is None:
        if not author.custom_url:
            return "No custom URL active."
        if not author.steam_id:
            return "Cannot remove the custom URL of an author without an author ID."
        engine.updater.update_author(author, custom_url="")
        return None
    if author.custom_url == op.new_url:
        return "This custom URL is already active."
    if author.custom_url:
        return "Author already has a custom URL."
    if engine.catalog.get_author(None, op.new_url):
        return "Author already exists."
    engine.updater.update_author(author, custom_url=op.new_url)
    return None


@handles(SetLastSeen)
def set_last_seen(engine: MutationEngine, op: SetLastSeen) -> str | None:
    author, error = _resolve(engine, op.author)
    if author is None:
        return error
    if author.last_seen == op.last_seen:
        return "Author already has this last seen date."
    engine.updater.update_author(author, last_seen=op.last_seen)
    return None


@handles(SetRetired)
def set_retired(engine: MutationEngine, op: SetRetired) -> str | None:
    author, error = _resolve(engine, op.author)
    if author is None:
        return error
    if op.retired:
        if author.retired:
            return "Author already retired."
        engine.updater.update_author(author, retired=True, exclusion_for_retired=True)
        return None
    if not author.retired:
        return "Author was not retired."
    if not author.exclusion_for_retired:
        return (
            "Author retirement is automatic and cannot be removed. "
            "Try adding a recent 'last seen' date."
        )
    # Pinned as active until the inactivity window elapses.
    engine.updater.update_author(author, retired=False, exclusion_for_retired=True)
    return None
