"""Shared progress callback type for updater phases."""

from collections.abc import Callable

ProgressCallback = Callable[[int, int, str], None]


def noop_progress(_current: int, _total: int, _msg: str) -> None:
    pass
