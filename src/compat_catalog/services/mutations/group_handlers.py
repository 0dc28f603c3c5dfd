from __future__ import annotations

from typing import TYPE_CHECKING

from compat_catalog.schemas.commands import AddGroup, ChangeGroupMember, RemoveGroup
from compat_catalog.services.mutations.registry import handles, invalid_mod

if TYPE_CHECKING:
    from compat_catalog.services.mutations.engine import MutationEngine


def _already_grouped(mod_id: int) -> str:
    return f"Mod {mod_id} is already in a group and a mod can only be in one."


@handles(AddGroup)
def add_group(engine: MutationEngine, op: AddGroup) -> str | None:
    catalog = engine.catalog
    if catalog.find_group_by_name(op.name):
        return "A group with that name already exists."
    if len(set(op.member_ids)) != len(op.member_ids):
        return "Duplicate Steam ID."
    for mod_id in op.member_ids:
        if catalog.get_mod(mod_id) is None:
            return invalid_mod(mod_id)
        if catalog.is_group_member(mod_id):
            return _already_grouped(mod_id)
    engine.updater.add_group(op.name, list(op.member_ids))
    return None


@handles(RemoveGroup)
def remove_group(engine: MutationEngine, op: RemoveGroup) -> str | None:
    group = engine.catalog.get_group(op.group_id)
    if group is None:
        return "Invalid group ID."
    if op.replacement_id is not None and engine.catalog.get_mod(op.replacement_id) is None:
        return invalid_mod(op.replacement_id)
    engine.updater.remove_group(group, replacement_id=op.replacement_id)
    return None


@handles(ChangeGroupMember)
def change_group_member(engine: MutationEngine, op: ChangeGroupMember) -> str | None:
    catalog = engine.catalog
    group = catalog.get_group(op.group_id)
    if group is None:
        return "Invalid group ID."
    if op.remove:
        if op.mod_id not in group.members:
            return f"Mod {op.mod_id} is not a member of this group."
        engine.updater.remove_group_member(group, op.mod_id)
        return None
    if catalog.get_mod(op.mod_id) is None:
        return invalid_mod(op.mod_id)
    if catalog.is_group_member(op.mod_id):
        return _already_grouped(op.mod_id)
    engine.updater.add_group_member(group, op.mod_id)
    return None
