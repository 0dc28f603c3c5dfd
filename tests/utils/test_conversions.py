from datetime import date

import pytest

from compat_catalog.models.enums import CompatibilityStatus, Stability, Status
from compat_catalog.utils.conversions import (
    GameVersion,
    format_date,
    months_before,
    parse_date,
    parse_enum,
    parse_game_version,
    parse_id,
)


class TestParseId:
    def test_plain_number(self):
        assert parse_id(" 12345 ") == 12345

    @pytest.mark.parametrize("text", ["", "abc", "-5", "12a", "1.5"])
    def test_invalid_becomes_zero(self, text):
        assert parse_id(text) == 0


class TestDates:
    def test_parse_iso_date(self):
        assert parse_date("2023-02-28") == date(2023, 2, 28)

    def test_parse_invalid_date(self):
        assert parse_date("28/02/2023") is None
        assert parse_date("2023-02-30") is None

    def test_format_date(self):
        assert format_date(date(2021, 1, 9)) == "2021-01-09"
        assert format_date(None) == ""

    def test_months_before_simple(self):
        assert months_before(date(2024, 5, 15), 12) == date(2023, 5, 15)

    def test_months_before_clamps_to_month_end(self):
        assert months_before(date(2024, 3, 31), 1) == date(2024, 2, 29)

    def test_months_before_crosses_year(self):
        assert months_before(date(2024, 2, 10), 3) == date(2023, 11, 10)


class TestParseEnum:
    def test_pascal_case(self):
        assert parse_enum(Status, "UnlistedInWorkshop") is Status.unlisted_in_workshop

    def test_snake_case(self):
        assert parse_enum(Stability, "minor_issues") is Stability.minor_issues

    def test_lowercase_run_together(self):
        assert parse_enum(CompatibilityStatus, "majorissues") is CompatibilityStatus.major_issues

    def test_unknown(self):
        assert parse_enum(Status, "NotAStatus") is None
        assert parse_enum(Status, "") is None


class TestGameVersion:
    def test_parse_full_version(self):
        assert parse_game_version("1.13.3-f9") == GameVersion(1, 13, 3, 9)

    def test_parse_dotted_version(self):
        assert parse_game_version("1.14.0.8") == GameVersion(1, 14, 0, 8)

    def test_parse_short_version(self):
        assert parse_game_version("1.15") == GameVersion(1, 15, 0, 0)

    @pytest.mark.parametrize("text", ["", "1", "a.b", "1.2.3.4.5", "v1.2"])
    def test_parse_invalid(self, text):
        assert parse_game_version(text) is None

    def test_str(self):
        assert str(GameVersion(1, 13, 3, 9)) == "1.13.3-f9"

    def test_ordering(self):
        assert GameVersion(1, 13, 3, 9) < GameVersion(1, 14, 0, 0)
        assert GameVersion(1, 13, 3, 9) < GameVersion(1, 13, 3, 10)
