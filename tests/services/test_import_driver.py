import threading

import pytest

from compat_catalog.services.import_driver import import_command_files


@pytest.fixture
def updater_dir(tmp_path):
    d = tmp_path / "updater"
    d.mkdir()
    return d


def _write(directory, name: str, *lines: str) -> None:
    (directory / name).write_text("\n".join(lines) + "\n", encoding="utf-8")


class TestImportCommandFiles:
    def test_clean_file_is_marked_processed(self, updater_dir, mut, catalog):
        _write(updater_dir, "01.csv", "# new mods", "add_mod, 12345, , , , Roads", "")
        result = import_command_files(updater_dir, mut)

        assert catalog.get_mod(12345).name == "Roads"
        assert result.summary == "success"
        assert result.commands == 1
        assert result.files[0].renamed_to == "01.csv.processed"
        assert (updater_dir / "01.csv.processed").exists()
        assert not (updater_dir / "01.csv").exists()

    def test_errors_mark_file_partially_processed(self, updater_dir, mut, catalog):
        _write(
            updater_dir,
            "01.csv",
            "add_mod, 12345",
            "set_stability, 99999, Stable",
            "bogus_verb, 1",
            "set_stability, 12345, Stable",
        )
        result = import_command_files(updater_dir, mut)

        assert result.errors == 2
        assert result.summary == "success with 2 errors"
        assert (updater_dir / "01.csv.partially_processed").exists()
        assert catalog.get_mod(12345).stability == "stable"

    def test_transcript_marks_failed_lines(self, updater_dir, mut):
        _write(updater_dir, "01.csv", "# header comment", "add_mod, 12345", "remove_mod, 777")
        result = import_command_files(updater_dir, mut)

        lines = result.transcript.splitlines()
        assert lines[0] == "#### FILE: 01.csv"
        assert "# header comment" in lines
        assert "add_mod, 12345" in lines
        failed = lines.index("# [ERROR] remove_mod, 777")
        assert lines[failed + 1].lstrip("# ") == "Invalid Steam ID or mod does not exist."

    def test_files_processed_in_name_order(self, updater_dir, mut, catalog):
        _write(updater_dir, "b.csv", "set_stability, 12345, Stable")
        _write(updater_dir, "a.csv", "add_mod, 12345")
        result = import_command_files(updater_dir, mut)

        assert [f.name for f in result.files] == ["a.csv", "b.csv"]
        assert result.errors == 0

    def test_suppressed_warnings_file_is_not_renamed(self, updater_dir, mut):
        _write(updater_dir, "suppressed.csv", "add_suppressedwarning, 1")
        result = import_command_files(
            updater_dir, mut, suppressed_warnings_filename="suppressed.csv"
        )

        assert result.files[0].renamed_to == ""
        assert (updater_dir / "suppressed.csv").exists()

    def test_debug_mode_keeps_files(self, updater_dir, mut):
        _write(updater_dir, "01.csv", "add_mod, 12345")
        import_command_files(updater_dir, mut, debug_mode=True)
        assert (updater_dir / "01.csv").exists()

    def test_other_files_are_ignored(self, updater_dir, mut):
        _write(updater_dir, "notes.txt", "add_mod, 12345")
        _write(updater_dir, "old.csv.processed", "add_mod, 12346")
        result = import_command_files(updater_dir, mut)
        assert result.files == []

    def test_progress_reported_per_file(self, updater_dir, mut):
        _write(updater_dir, "01.csv", "add_mod, 12345")
        _write(updater_dir, "02.csv", "add_mod, 12346")
        calls = []
        import_command_files(updater_dir, mut, on_progress=lambda *args: calls.append(args))
        assert calls == [(1, 2, "Importing 01.csv"), (2, 2, "Importing 02.csv")]

    def test_cancel_stops_between_files(self, updater_dir, mut, catalog):
        _write(updater_dir, "01.csv", "add_mod, 12345")
        _write(updater_dir, "02.csv", "add_mod, 12346")
        cancel = threading.Event()

        result = import_command_files(
            updater_dir, mut, on_progress=lambda *args: cancel.set(), cancel=cancel
        )

        assert result.cancelled
        assert [f.name for f in result.files] == ["01.csv"]
        assert catalog.get_mod(12345) is not None
        assert catalog.get_mod(12346) is None
        assert (updater_dir / "02.csv").exists()
