"""Imports manual command files from the updater directory.

Files are processed in sorted filename order. Each non-blank line goes
through the parser and the mutation engine; every line lands in the audit
transcript, failed ones behind an error marker followed by the reason.
Processed files are renamed so they are not applied again next session,
except for the suppressed-warnings file which is re-read every time.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

from compat_catalog.constants import (
    COMMAND_FILE_PATTERN,
    COMMENT_MARKER,
    ERROR_MARKER,
    PARTIALLY_PROCESSED_SUFFIX,
    PROCESSED_SUFFIX,
)
from compat_catalog.services.command_parser import CommandParseError, parse_line
from compat_catalog.services.mutations.engine import MutationEngine
from compat_catalog.services.progress import ProgressCallback, noop_progress

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    name: str
    commands: int = 0
    errors: int = 0
    renamed_to: str = ""


@dataclass
class ImportResult:
    files: list[FileResult] = field(default_factory=list)
    transcript_lines: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def errors(self) -> int:
        return sum(f.errors for f in self.files)

    @property
    def commands(self) -> int:
        return sum(f.commands for f in self.files)

    @property
    def transcript(self) -> str:
        return "\n".join(self.transcript_lines) + "\n" if self.transcript_lines else ""

    @property
    def summary(self) -> str:
        if not self.errors:
            return "success"
        return f"success with {self.errors} error{'s' if self.errors != 1 else ''}"


def apply_line(engine: MutationEngine, line: str) -> str | None:
    """Parse and apply one command line. Returns the error text, if any."""
    try:
        op = parse_line(line)
    except CommandParseError as exc:
        return str(exc)
    if op is None:
        return None
    return engine.apply(op)


def _process_file(path: Path, engine: MutationEngine, result: ImportResult) -> FileResult:
    file_result = FileResult(name=path.name)
    result.transcript_lines.append(f"{COMMENT_MARKER}### FILE: {path.name}")

    text = path.read_text(encoding="utf-8-sig", errors="replace")
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        if line.lstrip().startswith(COMMENT_MARKER):
            result.transcript_lines.append(line)
            continue

        file_result.commands += 1
        error = apply_line(engine, line)
        if error:
            file_result.errors += 1
            logger.error("%s line %d: %s | %s", path.name, line_number, error, line.strip())
            result.transcript_lines.append(f"{ERROR_MARKER}{line}")
            result.transcript_lines.append(f"{COMMENT_MARKER}         {error}")
        else:
            result.transcript_lines.append(line)

    result.transcript_lines.append("")
    return file_result


def _mark_processed(path: Path, file_result: FileResult) -> None:
    suffix = PARTIALLY_PROCESSED_SUFFIX if file_result.errors else PROCESSED_SUFFIX
    target = path.with_name(path.name + suffix)
    try:
        path.rename(target)
    except OSError:
        logger.warning("Could not rename %s to %s", path.name, target.name, exc_info=True)
        return
    file_result.renamed_to = target.name


def import_command_files(
    directory: Path,
    engine: MutationEngine,
    *,
    suppressed_warnings_filename: str = "",
    debug_mode: bool = False,
    on_progress: ProgressCallback = noop_progress,
    cancel: threading.Event | None = None,
) -> ImportResult:
    """Apply every command file in ``directory`` to the engine's catalog.

    ``cancel`` is checked between files; whatever was applied before it was
    set stays applied.
    """
    result = ImportResult()
    paths = sorted(directory.glob(COMMAND_FILE_PATTERN), key=lambda p: p.name)
    if not paths:
        logger.info("No command files found in %s", directory)
        return result

    start = time.perf_counter()
    total = len(paths)
    for index, path in enumerate(paths, start=1):
        if cancel is not None and cancel.is_set():
            logger.warning("Import cancelled before %s", path.name)
            result.cancelled = True
            break

        on_progress(index, total, f"Importing {path.name}")
        file_result = _process_file(path, engine, result)
        result.files.append(file_result)

        if path.name == suppressed_warnings_filename or debug_mode:
            logger.info(
                "%s: %d commands, %d errors", path.name, file_result.commands, file_result.errors
            )
            continue
        _mark_processed(path, file_result)
        log = logger.warning if file_result.errors else logger.info
        log(
            "%s: %d commands, %d errors, renamed to %s",
            path.name,
            file_result.commands,
            file_result.errors,
            file_result.renamed_to or "(not renamed)",
        )

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    logger.info(
        "Imported %d files with %d commands in %dms: %s",
        len(result.files),
        result.commands,
        elapsed_ms,
        result.summary,
    )
    return result
