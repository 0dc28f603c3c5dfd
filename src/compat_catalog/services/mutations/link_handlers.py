"""Handlers for required mods, successors, alternatives and recommendations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from compat_catalog.models.enums import LinkKind
from compat_catalog.schemas.commands import ChangeLink
from compat_catalog.services.mutations.registry import handles, invalid_mod

if TYPE_CHECKING:
    from compat_catalog.services.mutations.engine import MutationEngine

_ALREADY = {
    LinkKind.required: "Mod is already required.",
    LinkKind.successor: "Already a successor.",
    LinkKind.alternative: "Already an alternative mod.",
    LinkKind.recommendation: "Already a recommended mod.",
}

_NOT_FOUND = {
    LinkKind.required: "Mod is not required.",
    LinkKind.successor: "Successor not found.",
    LinkKind.alternative: "Alternative mod not found.",
    LinkKind.recommendation: "Recommended mod not found.",
}

# Only these may point at a group instead of a single mod.
_GROUP_TARGETS = frozenset({LinkKind.required, LinkKind.recommendation})


@handles(ChangeLink)
def change_link(engine: MutationEngine, op: ChangeLink) -> str | None:
    catalog = engine.catalog
    mod = catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)

    if op.remove:
        if op.target_id not in mod.links(op.kind):
            return _NOT_FOUND[op.kind]
        engine.updater.remove_link(mod, op.kind, op.target_id, updated_by_importer=True)
        return None

    target_exists = catalog.get_mod(op.target_id) is not None or (
        op.kind in _GROUP_TARGETS and catalog.get_group(op.target_id) is not None
    )
    if not target_exists:
        return invalid_mod(op.target_id)
    if op.target_id == op.mod_id:
        return f"Duplicate Steam ID {op.target_id}."
    if op.target_id in mod.links(op.kind):
        return _ALREADY[op.kind]
    engine.updater.add_link(mod, op.kind, op.target_id, updated_by_importer=True)
    return None
