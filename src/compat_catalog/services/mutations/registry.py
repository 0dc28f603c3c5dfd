"""Handler registry mapping each operation type to the function that applies it."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from compat_catalog.services.mutations.engine import MutationEngine

Handler = Callable[["MutationEngine", Any], "str | None"]

_HANDLERS: dict[type, Handler] = {}


def handles(*op_types: type) -> Callable[[Handler], Handler]:
    """Function decorator that registers a handler for one or more operation types."""

    def decorator(func: Handler) -> Handler:
        for op_type in op_types:
            if op_type in _HANDLERS:
                raise ValueError(f"Duplicate handler for {op_type.__name__}")
            _HANDLERS[op_type] = func
        return func

    return decorator


def get_handler(op_type: type) -> Handler | None:
    return _HANDLERS.get(op_type)


def registered_operations() -> set[type]:
    return set(_HANDLERS)


def invalid_mod(mod_id: int) -> str:
    return f"Invalid mod ID {mod_id}."
