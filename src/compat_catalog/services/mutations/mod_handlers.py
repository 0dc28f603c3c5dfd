"""Handlers for mod-level operations: properties, statuses, DLC and exclusions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from compat_catalog.models.enums import (
    CLEARED_BY_REMOVAL,
    Dlc,
    ExclusionCategory,
    Stability,
)
from compat_catalog.schemas.commands import (
    AddMod,
    ChangeRequiredDlc,
    ChangeStatus,
    RemoveExclusion,
    RemoveMod,
    SetGameVersion,
    SetModNote,
    SetReviewDate,
    SetSourceUrl,
    SetStability,
    UpdateReview,
)
from compat_catalog.services.mutations.registry import handles, invalid_mod

if TYPE_CHECKING:
    from compat_catalog.services.mutations.engine import MutationEngine


@handles(SetReviewDate)
def set_review_date(engine: MutationEngine, op: SetReviewDate) -> str | None:
    engine.updater.set_review_date(op.review_date)
    return None


@handles(AddMod)
def add_mod(engine: MutationEngine, op: AddMod) -> str | None:
    catalog = engine.catalog
    if not catalog.is_valid_id(op.mod_id, allow_builtin=False, should_exist=False):
        return "Invalid Steam ID or mod already exists."

    author_id = op.author.author_id
    author_url = op.author.author_url or ""
    if author_id or author_url:
        author = engine.updater.get_or_add_author(author_id, author_url)
        author_id = author.steam_id
        author_url = author.custom_url

    engine.updater.add_mod(
        op.mod_id,
        name=op.name or "",
        author_id=author_id,
        author_url=author_url,
        status=op.status,
        updated_by_importer=True,
    )
    return None


@handles(RemoveMod)
def remove_mod(engine: MutationEngine, op: RemoveMod) -> str | None:
    catalog = engine.catalog
    mod = catalog.get_mod(op.mod_id)
    if mod is None:
        return "Invalid Steam ID or mod does not exist."
    if not mod.is_removed:
        return "Mod can't be removed because it is not removed from the Steam Workshop."
    if catalog.is_group_member(mod.steam_id):
        return "Mod can't be removed because it is still in a group."
    if catalog.referencing_mods(mod.steam_id):
        return (
            "Mod can't be removed because it is still referenced by other mods "
            "(required, successor, alternative or recommendation)."
        )
    engine.updater.remove_mod(mod)
    return None


@handles(SetStability)
def set_stability(engine: MutationEngine, op: SetStability) -> str | None:
    mod = engine.catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)
    if mod.stability == op.stability:
        return "Mod already has this stability."
    incompatible = Stability.incompatible_according_to_workshop
    if op.stability is incompatible and not mod.is_removed:
        return "The Incompatible stability can only be set on a removed mod."
    if mod.stability is incompatible and not mod.is_removed:
        return "Mod has the Incompatible stability and that can only be changed for a removed mod."
    engine.updater.update_mod(mod, stability=op.stability, updated_by_importer=True)
    return None


@handles(SetModNote)
def set_mod_note(engine: MutationEngine, op: SetModNote) -> str | None:
    mod = engine.catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)
    current = getattr(mod, op.field.value)
    if op.note is None:
        if not current:
            return "Note already empty."
        new = ""
    else:
        if op.note == current:
            return "Note already added."
        new = op.note
    engine.updater.update_mod(mod, **{op.field.value: new}, updated_by_importer=True)
    return None


@handles(UpdateReview)
def update_review(engine: MutationEngine, op: UpdateReview) -> str | None:
    mod = engine.catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)
    engine.updater.update_review(mod)
    return None


@handles(SetSourceUrl)
def set_source_url(engine: MutationEngine, op: SetSourceUrl) -> str | None:
    mod = engine.catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)
    if op.url is None:
        if not mod.source_url:
            return "No source URL to remove."
        engine.updater.update_mod(mod, source_url="", updated_by_importer=True)
        return None
    if op.url == mod.source_url:
        return "Mod already has this source URL."
    engine.updater.update_mod(mod, source_url=op.url, updated_by_importer=True)
    return None


@handles(SetGameVersion)
def set_game_version(engine: MutationEngine, op: SetGameVersion) -> str | None:
    mod = engine.catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)
    if op.version is None:
        if not mod.exclusion_for_game_version:
            return "Cannot remove compatible gameversion because it was not manually added."
        engine.updater.update_mod(mod, game_version="", updated_by_importer=True)
        return None
    version = str(op.version)
    if version == mod.game_version:
        return "Mod already has this game version."
    engine.updater.update_mod(mod, game_version=version, updated_by_importer=True)
    return None


@handles(ChangeStatus)
def change_status(engine: MutationEngine, op: ChangeStatus) -> str | None:
    mod = engine.catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)
    if op.remove:
        if op.status not in mod.statuses:
            return "Status not found for this mod."
        engine.updater.remove_status(mod, op.status, updated_by_importer=True)
        return None
    if op.status in mod.statuses:
        return "Mod already has this status."
    if mod.is_removed and op.status in CLEARED_BY_REMOVAL:
        return "Status cannot be combined with existing 'RemovedFromWorkshop' status."
    engine.updater.add_status(mod, op.status, updated_by_importer=True)
    return None


@handles(ChangeRequiredDlc)
def change_required_dlc(engine: MutationEngine, op: ChangeRequiredDlc) -> str | None:
    mod = engine.catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)
    if op.remove:
        if op.dlc not in mod.required_dlcs:
            return "DLC is not required."
        if op.dlc not in mod.exclusion_for_required_dlcs:
            return "Cannot remove required DLC because it was not manually added."
        engine.updater.remove_required_dlc(mod, op.dlc, updated_by_importer=True)
        return None
    if op.dlc in mod.required_dlcs:
        return "DLC is already required."
    engine.updater.add_required_dlc(mod, op.dlc, updated_by_importer=True)
    return None


_EXCLUSION_FLAGS = {
    ExclusionCategory.source_url: ("exclusion_for_source_url", "source URL"),
    ExclusionCategory.game_version: ("exclusion_for_game_version", "game version"),
    ExclusionCategory.no_description: ("exclusion_for_no_description", "no description"),
}


@handles(RemoveExclusion)
def remove_exclusion(engine: MutationEngine, op: RemoveExclusion) -> str | None:
    mod = engine.catalog.get_mod(op.mod_id)
    if mod is None:
        return invalid_mod(op.mod_id)

    if op.category is ExclusionCategory.required_dlc:
        try:
            dlc = Dlc(op.item_id)
        except ValueError:
            return "Invalid DLC or no exclusion exists."
        if dlc not in mod.exclusion_for_required_dlcs:
            return "Invalid DLC or no exclusion exists."
        mod.exclusion_for_required_dlcs.remove(dlc)
        engine.updater.note_mod(mod, f"exclusion for required DLC {int(dlc)} removed")
        return None

    if op.category is ExclusionCategory.required_mod:
        if op.item_id not in mod.exclusion_for_required_mods:
            return "Invalid required mod ID or no exclusion exists."
        mod.exclusion_for_required_mods.remove(op.item_id)
        engine.updater.note_mod(mod, f"exclusion for required mod {op.item_id} removed")
        return None

    attribute, label = _EXCLUSION_FLAGS[op.category]
    if not getattr(mod, attribute):
        return "No exclusion exists."
    setattr(mod, attribute, False)
    engine.updater.note_mod(mod, f"exclusion for {label} removed")
    return None
