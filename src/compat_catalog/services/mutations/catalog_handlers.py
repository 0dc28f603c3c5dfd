from __future__ import annotations

from typing import TYPE_CHECKING

from compat_catalog.schemas.commands import (
    ChangeSuppressedWarning,
    SetCatalogGameVersion,
    SetCatalogText,
)
from compat_catalog.services.mutations.registry import handles, invalid_mod
from compat_catalog.utils.conversions import parse_game_version

if TYPE_CHECKING:
    from compat_catalog.services.mutations.engine import MutationEngine


@handles(SetCatalogGameVersion)
def set_catalog_game_version(engine: MutationEngine, op: SetCatalogGameVersion) -> str | None:
    current = parse_game_version(engine.catalog.game_version)
    if current is not None and op.version <= current:
        return "Could not update game version, it should be higher than the current game version."
    engine.updater.set_catalog_game_version(str(op.version))
    return None


@handles(SetCatalogText)
def set_catalog_text(engine: MutationEngine, op: SetCatalogText) -> str | None:
    field = op.field.value
    label = field.replace("_", " ")
    current = getattr(engine.catalog, field)
    if op.text is None:
        if not current:
            return f"Catalog {label} already empty."
        engine.updater.set_catalog_text(field, "")
        return None
    if op.text == current:
        return f"Catalog already has this {label}."
    engine.updater.set_catalog_text(field, op.text)
    return None


@handles(ChangeSuppressedWarning)
def change_suppressed_warning(
    engine: MutationEngine, op: ChangeSuppressedWarning
) -> str | None:
    suppressed = op.mod_id in engine.catalog.suppressed_warnings
    if op.remove:
        if not suppressed:
            return "Mod has no suppressed warnings."
    else:
        if engine.catalog.get_mod(op.mod_id) is None:
            return invalid_mod(op.mod_id)
        if suppressed:
            return "Mod already has suppressed warnings."
    engine.updater.set_suppressed_warning(op.mod_id, remove=op.remove)
    return None
