"""Classification enums shared by the catalog entities and the command language."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Stability(StrEnum):
    """Stability of a mod, ordered from unknown to fully working."""

    undefined = "undefined"
    not_reviewed = "not_reviewed"
    not_enough_information = "not_enough_information"
    incompatible_according_to_workshop = "incompatible_according_to_workshop"
    requires_incompatible_mod = "requires_incompatible_mod"
    game_breaking = "game_breaking"
    broken = "broken"
    major_issues = "major_issues"
    minor_issues = "minor_issues"
    users_report_issues = "users_report_issues"
    stable = "stable"


class Status(StrEnum):
    unlisted_in_workshop = "unlisted_in_workshop"
    removed_from_workshop = "removed_from_workshop"
    no_comment_section = "no_comment_section"
    no_description = "no_description"
    no_longer_needed = "no_longer_needed"
    deprecated = "deprecated"
    abandoned = "abandoned"
    reupload = "reupload"
    saves_cant_load_without = "saves_cant_load_without"
    breaks_editors = "breaks_editors"
    test_version = "test_version"
    dependency_mod = "dependency_mod"
    mod_for_modders = "mod_for_modders"
    source_unavailable = "source_unavailable"
    source_bundled = "source_bundled"
    source_not_updated = "source_not_updated"
    source_obfuscated = "source_obfuscated"
    music_copyright_free = "music_copyright_free"
    music_copyrighted = "music_copyrighted"
    music_copyright_unknown = "music_copyright_unknown"


STATUS_FAMILIES: tuple[frozenset[Status], ...] = (
    frozenset({Status.unlisted_in_workshop, Status.removed_from_workshop}),
    frozenset({Status.abandoned, Status.deprecated, Status.no_longer_needed}),
    frozenset(
        {Status.music_copyrighted, Status.music_copyright_free, Status.music_copyright_unknown}
    ),
    frozenset({Status.source_unavailable, Status.source_bundled, Status.source_obfuscated}),
)

# Only the automated fact source may add or remove these.
PLATFORM_STATUSES = frozenset({Status.unlisted_in_workshop, Status.removed_from_workshop})

# A removed mod has no workshop page, so page-derived statuses make no sense on it.
CLEARED_BY_REMOVAL = frozenset({Status.no_description, Status.no_comment_section})


def status_family(status: Status) -> frozenset[Status]:
    for family in STATUS_FAMILIES:
        if status in family:
            return family
    return frozenset({status})


class CompatibilityStatus(StrEnum):
    newer_version = "newer_version"
    functionality_covered = "functionality_covered"
    same_mod_different_release_type = "same_mod_different_release_type"
    same_functionality = "same_functionality"
    incompatible_according_to_author = "incompatible_according_to_author"
    incompatible_according_to_users = "incompatible_according_to_users"
    compatible_according_to_author = "compatible_according_to_author"
    major_issues = "major_issues"
    minor_issues = "minor_issues"
    requires_specific_settings = "requires_specific_settings"


NOTE_REQUIRED_STATUSES = frozenset(
    {
        CompatibilityStatus.major_issues,
        CompatibilityStatus.minor_issues,
        CompatibilityStatus.requires_specific_settings,
    }
)

# Directional statuses make no sense when every mod in a list is paired with every other.
NOT_FOR_ALL_STATUSES = frozenset(
    {
        CompatibilityStatus.newer_version,
        CompatibilityStatus.functionality_covered,
        CompatibilityStatus.incompatible_according_to_author,
        CompatibilityStatus.incompatible_according_to_users,
        CompatibilityStatus.compatible_according_to_author,
    }
)

_IDENTITY = frozenset(
    {
        CompatibilityStatus.newer_version,
        CompatibilityStatus.functionality_covered,
        CompatibilityStatus.same_mod_different_release_type,
        CompatibilityStatus.same_functionality,
    }
)
_VERDICT = frozenset(
    {
        CompatibilityStatus.incompatible_according_to_author,
        CompatibilityStatus.incompatible_according_to_users,
        CompatibilityStatus.compatible_according_to_author,
    }
)
_INCOMPATIBLE = frozenset(
    {
        CompatibilityStatus.incompatible_according_to_author,
        CompatibilityStatus.incompatible_according_to_users,
    }
)


def statuses_conflict(a: CompatibilityStatus, b: CompatibilityStatus) -> bool:
    """Whether two statuses may not both exist for the same pair of mods."""
    if a == b:
        return False
    if a in _IDENTITY and b in _IDENTITY:
        return True
    if a in _VERDICT and b in _VERDICT:
        return True
    return (a in NOTE_REQUIRED_STATUSES and b in _INCOMPATIBLE) or (
        b in NOTE_REQUIRED_STATUSES and a in _INCOMPATIBLE
    )


class Dlc(IntEnum):
    """Paid expansions, valued by their store app id."""

    deluxe_edition = 346791
    after_dark = 369150
    snowfall = 420610
    match_day = 456200
    content_creator_pack_art_deco = 515190
    natural_disasters = 515191
    stadiums_europe = 536610
    content_creator_pack_high_tech_buildings = 547500
    relaxation_station = 547501
    mass_transit = 547502
    pearls_from_the_east = 563850
    green_cities = 614580
    concerts = 614581
    rock_city_radio = 614582
    content_creator_pack_european_suburbia = 715190
    park_life = 715191
    carols_candles_and_candy = 715192
    all_that_jazz = 715193
    industries = 715194
    country_road_radio = 815380
    synthetic_dawn_radio = 944070
    campus = 944071
    content_creator_pack_university_city = 1059820
    deep_focus_radio = 1065490
    campus_radio = 1065491
    sunset_harbor = 1146930
    content_creator_pack_modern_city_center = 1148020
    downtown_radio = 1148021
    content_creator_pack_modern_japan = 1148022
    coast_to_coast_radio = 1196100
    content_creator_pack_train_station = 1531470
    content_creator_pack_bridges_and_piers = 1531471
    rail_hawk_radio = 1531472
    sunny_breeze_radio = 1531473


class LinkKind(StrEnum):
    """The four mutually exclusive ways one mod can point at another."""

    required = "required"
    successor = "successor"
    alternative = "alternative"
    recommendation = "recommendation"


LINK_LABELS: dict[LinkKind, str] = {
    LinkKind.required: "required mod",
    LinkKind.successor: "successor",
    LinkKind.alternative: "alternative",
    LinkKind.recommendation: "recommendation",
}


class ExclusionCategory(StrEnum):
    source_url = "source_url"
    game_version = "game_version"
    no_description = "no_description"
    required_dlc = "required_dlc"
    required_mod = "required_mod"
