import threading
from datetime import date

import pytest

from compat_catalog.models.enums import Dlc, LinkKind, Stability, Status
from compat_catalog.services.crawler_sync import (
    ListingFact,
    ModPageFact,
    apply_listing,
    apply_mod_page,
    run_crawler_phase,
)


class TestListing:
    def test_new_mod_and_author(self, mut, catalog, ledger):
        apply_listing(mut.updater, ListingFact(mod_id=2000000, name="Roads", author_url="maker"))
        mod = catalog.get_mod(2000000)
        assert mod.name == "Roads"
        assert mod.author_url == "maker"
        assert mod.auto_review_date == mut.updater.review_date
        assert mod.review_date is None
        assert catalog.get_author(None, "maker") is not None
        assert len(ledger.new_mods) == 1

    def test_relisted_mod_loses_platform_statuses(self, mut, make_mod):
        mod = make_mod(2000000)
        mod.statuses.append(Status.removed_from_workshop)
        apply_listing(mut.updater, ListingFact(mod_id=2000000, name="Roads"))
        assert mod.statuses == []

    def test_workshop_incompatible_toggles(self, mut, make_mod):
        mod = make_mod(2000000)
        apply_listing(mut.updater, ListingFact(mod_id=2000000, incompatible=True))
        assert mod.stability is Stability.incompatible_according_to_workshop
        apply_listing(mut.updater, ListingFact(mod_id=2000000))
        assert mod.stability is Stability.not_reviewed


class TestModPage:
    def test_missing_page_marks_removed(self, mut, make_mod):
        mod = make_mod(2000000)
        mod.statuses.extend([Status.no_description, Status.no_comment_section])
        mod.exclusion_for_no_description = True
        apply_mod_page(mut.updater, ModPageFact(mod_id=2000000, found=False))
        assert mod.statuses == [Status.removed_from_workshop]
        assert not mod.exclusion_for_no_description

    def test_unlisted_when_missing_from_listing(self, mut, make_mod):
        mod = make_mod(2000000)
        apply_mod_page(mut.updater, ModPageFact(mod_id=2000000), listed=False)
        assert Status.unlisted_in_workshop in mod.statuses

    def test_updates_properties_and_author(self, mut, catalog, make_mod, make_author):
        mod = make_mod(2000000, author_id=555)
        author = make_author(555, name="Old", last_seen=date(2023, 1, 1))
        apply_mod_page(
            mut.updater,
            ModPageFact(
                mod_id=2000000,
                name="Roads 2",
                author_id=555,
                author_name="New",
                published=date(2022, 1, 1),
                updated=date(2024, 3, 1),
                source_url="https://github.com/a/b",
            ),
        )
        assert mod.name == "Roads 2"
        assert mod.updated == date(2024, 3, 1)
        assert mod.source_url == "https://github.com/a/b"
        assert not mod.exclusion_for_source_url
        assert author.name == "New"
        assert author.last_seen == date(2024, 3, 1)

    def test_older_activity_does_not_move_last_seen(self, mut, make_mod, make_author):
        make_mod(2000000, author_id=555)
        author = make_author(555, last_seen=date(2024, 6, 1))
        apply_mod_page(
            mut.updater, ModPageFact(mod_id=2000000, author_id=555, updated=date(2024, 1, 1))
        )
        assert author.last_seen == date(2024, 6, 1)

    def test_higher_version_tag_overrides_exclusion(self, mut, make_mod):
        mod = make_mod(2000000)
        mod.game_version = "1.13.0-f1"
        mod.exclusion_for_game_version = True
        apply_mod_page(mut.updater, ModPageFact(mod_id=2000000, version_tag="1.14.0-f8"))
        assert mod.game_version == "1.14.0-f8"
        assert not mod.exclusion_for_game_version

    def test_required_dlc_follows_page_unless_excluded(self, mut, make_mod):
        mod = make_mod(2000000)
        mod.required_dlcs.extend([Dlc.snowfall, Dlc.campus])
        mod.exclusion_for_required_dlcs.append(Dlc.campus)
        apply_mod_page(
            mut.updater, ModPageFact(mod_id=2000000, required_dlcs=[Dlc.after_dark])
        )
        assert set(mod.required_dlcs) == {Dlc.campus, Dlc.after_dark}

    def test_required_mods_map_to_groups(self, mut, catalog, make_mod):
        mod = make_mod(2000000)
        make_mod(10)
        make_mod(20)
        group = catalog.add_group("Choices", [10, 20])
        apply_mod_page(mut.updater, ModPageFact(mod_id=2000000, required_mods=[20, 424242]))
        assert mod.required_mods == [group.group_id]

    def test_automated_value_confirms_manual_required_mod(self, mut, make_mod):
        mod = make_mod(2000000)
        make_mod(10)
        mod.required_mods.append(10)
        mod.exclusion_for_required_mods.append(10)
        apply_mod_page(mut.updater, ModPageFact(mod_id=2000000, required_mods=[10]))
        assert mod.required_mods == [10]
        assert mod.exclusion_for_required_mods == []

    @pytest.mark.parametrize("verb", ["successor", "alternative", "recommendation"])
    def test_required_mod_fact_keeps_manual_link(self, mut, run, make_mod, verb):
        mod = make_mod(2000000)
        make_mod(2000001)
        assert run(f"add_{verb}, 2000000, 2000001") is None

        apply_mod_page(mut.updater, ModPageFact(mod_id=2000000, required_mods=[2000001]))

        assert mod.links(LinkKind(verb)) == [2000001]
        assert mod.required_mods == []

    def test_no_description_respects_exclusion(self, mut, make_mod):
        mod = make_mod(2000000)
        apply_mod_page(mut.updater, ModPageFact(mod_id=2000000, has_description=False))
        assert Status.no_description in mod.statuses

        mod.exclusion_for_no_description = True
        apply_mod_page(mut.updater, ModPageFact(mod_id=2000000, has_description=True))
        assert Status.no_description in mod.statuses


class TestCrawlerPhase:
    def test_listing_then_pages(self, mut, catalog):
        result = run_crawler_phase(
            mut.updater,
            [ListingFact(mod_id=2000000, name="Roads")],
            [ModPageFact(mod_id=2000000, name="Roads"), ModPageFact(mod_id=2000001, name="Rails")],
        )
        assert (result.listed, result.pages) == (1, 2)
        assert Status.unlisted_in_workshop in catalog.get_mod(2000001).statuses
        assert Status.unlisted_in_workshop not in catalog.get_mod(2000000).statuses

    def test_cancel_between_pages(self, mut, catalog):
        cancel = threading.Event()
        cancel.set()
        result = run_crawler_phase(
            mut.updater, [], [ModPageFact(mod_id=2000000)], cancel=cancel
        )
        assert result.cancelled
        assert catalog.get_mod(2000000) is None
