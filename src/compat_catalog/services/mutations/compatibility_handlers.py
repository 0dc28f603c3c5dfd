"""Handlers for compatibility records.

Multi-pair verbs validate every pair before adding any, so a rejected line
leaves no half-applied compatibilities behind.
"""

from __future__ import annotations

from itertools import combinations
from typing import TYPE_CHECKING

from compat_catalog.models.enums import (
    NOT_FOR_ALL_STATUSES,
    NOTE_REQUIRED_STATUSES,
    CompatibilityStatus,
    statuses_conflict,
)
from compat_catalog.schemas.commands import (
    AddCompatibilitiesForAll,
    AddCompatibilitiesForOne,
    AddCompatibility,
    RemoveCompatibility,
)
from compat_catalog.services.mutations.registry import handles, invalid_mod

if TYPE_CHECKING:
    from compat_catalog.services.mutations.engine import MutationEngine

_NOTE_NEEDED_IN_BATCH = (
    "This compatibility status needs a note and cannot be used in an action with "
    "multiple compatibilities."
)


def check_pair(
    engine: MutationEngine, first_id: int, second_id: int, status: CompatibilityStatus
) -> str | None:
    """Return why ``(first_id, second_id, status)`` cannot be added, if anything."""
    catalog = engine.catalog
    for mod_id in (first_id, second_id):
        if catalog.get_mod(mod_id) is None:
            return invalid_mod(mod_id)
    if first_id == second_id:
        return f"Duplicate Steam ID {first_id}."
    if catalog.find_compatibility(first_id, second_id, status):
        return "Compatibility already exists."
    if catalog.find_compatibility(second_id, first_id, status):
        return (
            f"Compatibility already exists, with {second_id} as first and {first_id} "
            "as second mod."
        )
    for existing in catalog.compatibilities_between(first_id, second_id):
        if statuses_conflict(existing.status, status):
            return (
                f"Compatibility conflicts with the existing '{existing.status}' compatibility "
                f"between {existing.first_id} and {existing.second_id}."
            )
    return None


def _add_all(
    engine: MutationEngine, pairs: list[tuple[int, int]], status: CompatibilityStatus
) -> str | None:
    for first_id, second_id in pairs:
        if error := check_pair(engine, first_id, second_id, status):
            return error
    for first_id, second_id in pairs:
        engine.updater.add_compatibility(first_id, second_id, status)
    return None


@handles(AddCompatibility)
def add_compatibility(engine: MutationEngine, op: AddCompatibility) -> str | None:
    if op.status in NOTE_REQUIRED_STATUSES and not op.note:
        return "A note is mandatory for this compatibility."
    if error := check_pair(engine, op.first_id, op.second_id, op.status):
        return error
    engine.updater.add_compatibility(op.first_id, op.second_id, op.status, op.note or "")
    return None


@handles(RemoveCompatibility)
def remove_compatibility(engine: MutationEngine, op: RemoveCompatibility) -> str | None:
    compat = engine.catalog.find_compatibility(op.first_id, op.second_id, op.status)
    if compat is None:
        return "Compatibility does not exist."
    engine.updater.remove_compatibility(compat)
    return None


@handles(AddCompatibilitiesForOne)
def add_compatibilities_for_one(
    engine: MutationEngine, op: AddCompatibilitiesForOne
) -> str | None:
    if op.status in NOTE_REQUIRED_STATUSES:
        return _NOTE_NEEDED_IN_BATCH
    ids = (op.first_id, *op.second_ids)
    if len(set(ids)) != len(ids):
        return "Duplicate Steam ID."
    return _add_all(engine, [(op.first_id, second) for second in op.second_ids], op.status)


@handles(AddCompatibilitiesForAll)
def add_compatibilities_for_all(
    engine: MutationEngine, op: AddCompatibilitiesForAll
) -> str | None:
    if op.status in NOT_FOR_ALL_STATUSES:
        return 'This compatibility status cannot be used for "CompatibilitiesForAll".'
    if op.status in NOTE_REQUIRED_STATUSES:
        return _NOTE_NEEDED_IN_BATCH
    if len(set(op.mod_ids)) != len(op.mod_ids):
        return "Duplicate Steam ID."
    return _add_all(engine, list(combinations(op.mod_ids, 2)), op.status)
