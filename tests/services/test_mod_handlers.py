from datetime import date

from compat_catalog.models.enums import Dlc, Stability, Status


class TestAddMod:
    def test_adds_mod_and_author(self, run, catalog, ledger):
        assert run("add_mod, 12345, unlisted, 999, , MyMod") is None
        mod = catalog.get_mod(12345)
        assert mod.name == "MyMod"
        assert mod.author_id == 999
        assert mod.statuses == [Status.unlisted_in_workshop]
        assert catalog.get_author(999) is not None
        assert ledger.new_mods == [f"Added mod {mod}"]

    def test_sets_review_date(self, run, catalog, mut):
        run("add_mod, 12345")
        assert catalog.get_mod(12345).review_date == mut.updater.review_date

    def test_reuses_existing_author(self, run, catalog, make_author):
        author = make_author(author_url="maker")
        run("add_mod, 12345, , , maker")
        assert catalog.get_mod(12345).author_url == "maker"
        assert catalog.authors.count(author) == 1

    def test_existing_mod(self, run, make_mod):
        make_mod(12345)
        assert run("add_mod, 12345") == "Invalid Steam ID or mod already exists."

    def test_builtin_id_refused(self, run):
        assert run("add_mod, 3") == "Invalid Steam ID or mod already exists."


class TestRemoveMod:
    def test_only_removed_mods(self, run, make_mod):
        make_mod(100)
        assert run("remove_mod, 100") == (
            "Mod can't be removed because it is not removed from the Steam Workshop."
        )

    def test_refused_while_referenced(self, run, make_mod):
        make_mod(100).statuses.append(Status.removed_from_workshop)
        make_mod(200).successors.append(100)
        assert run("remove_mod, 100").startswith(
            "Mod can't be removed because it is still referenced"
        )

    def test_refused_while_grouped(self, run, catalog, make_mod):
        make_mod(100).statuses.append(Status.removed_from_workshop)
        make_mod(200)
        catalog.add_group("Pair", [100, 200])
        assert run("remove_mod, 100") == "Mod can't be removed because it is still in a group."

    def test_removes_mod_and_its_compatibilities(self, run, catalog, ledger, make_mod):
        make_mod(100).statuses.append(Status.removed_from_workshop)
        make_mod(200)
        run("add_compatibility, 100, 200, SameFunctionality")
        assert run("remove_mod, 100") is None
        assert catalog.get_mod(100) is None
        assert catalog.compatibilities == []
        assert len(ledger.removed_mods) == 1
        assert len(ledger.removed_compatibilities) == 1

    def test_unknown_mod(self, run):
        assert run("remove_mod, 100") == "Invalid Steam ID or mod does not exist."


class TestStability:
    def test_set_and_repeat(self, run, catalog, ledger, make_mod):
        make_mod(100)
        assert run("set_stability, 100, Stable") is None
        assert catalog.get_mod(100).stability is Stability.stable
        assert ledger.mod_fragment(100) == "stability added"
        assert run("set_stability, 100, Stable") == "Mod already has this stability."
        assert ledger.mod_fragment(100) == "stability added"

    def test_incompatible_only_on_removed_mods(self, run, make_mod):
        make_mod(100)
        assert run("set_stability, 100, IncompatibleAccordingToWorkshop") == (
            "The Incompatible stability can only be set on a removed mod."
        )

    def test_incompatible_is_sticky_on_listed_mods(self, run, make_mod):
        make_mod(100).stability = Stability.incompatible_according_to_workshop
        assert run("set_stability, 100, Stable") == (
            "Mod has the Incompatible stability and that can only be changed for a removed mod."
        )

    def test_unknown_mod(self, run):
        assert run("set_stability, 100, Stable") == "Invalid mod ID 100."


class TestNotes:
    def test_set_and_remove(self, run, catalog, make_mod):
        make_mod(100)
        assert run("set_stabilitynote, 100, Crashes on load, sometimes") is None
        assert catalog.get_mod(100).stability_note == "Crashes on load, sometimes"
        assert run("set_stabilitynote, 100, Crashes on load, sometimes") == "Note already added."
        assert run("remove_stabilitynote, 100") is None
        assert catalog.get_mod(100).stability_note == ""
        assert run("remove_stabilitynote, 100") == "Note already empty."


class TestSourceUrl:
    def test_manual_source_url_sets_exclusion(self, run, catalog, make_mod):
        make_mod(100)
        assert run("set_sourceurl, 100, https://github.com/a/b") is None
        mod = catalog.get_mod(100)
        assert mod.source_url == "https://github.com/a/b"
        assert mod.exclusion_for_source_url

    def test_source_url_clears_source_unavailable(self, run, catalog, make_mod):
        make_mod(100).statuses.append(Status.source_unavailable)
        run("set_sourceurl, 100, https://github.com/a/b")
        assert Status.source_unavailable not in catalog.get_mod(100).statuses

    def test_same_url(self, run, make_mod):
        make_mod(100).source_url = "https://github.com/a/b"
        assert run("set_sourceurl, 100, https://github.com/a/b") == (
            "Mod already has this source URL."
        )

    def test_remove(self, run, catalog, ledger, make_mod):
        make_mod(100).source_url = "https://github.com/a/b"
        assert run("remove_sourceurl, 100") is None
        assert catalog.get_mod(100).source_url == ""
        assert ledger.mod_fragment(100) == "source URL removed"
        assert run("remove_sourceurl, 100") == "No source URL to remove."


class TestGameVersion:
    def test_set_and_remove(self, run, catalog, make_mod):
        make_mod(100)
        assert run("set_gameversion, 100, 1.13.3-f9") is None
        mod = catalog.get_mod(100)
        assert mod.game_version == "1.13.3-f9"
        assert mod.exclusion_for_game_version
        assert run("set_gameversion, 100, 1.13.3.9") == "Mod already has this game version."
        assert run("remove_gameversion, 100") is None
        assert mod.game_version == ""
        assert not mod.exclusion_for_game_version

    def test_remove_requires_manual_version(self, run, make_mod):
        make_mod(100).game_version = "1.13.3-f9"
        assert run("remove_gameversion, 100") == (
            "Cannot remove compatible gameversion because it was not manually added."
        )


class TestStatuses:
    def test_family_members_replace_each_other(self, run, catalog, ledger, make_mod):
        make_mod(100)
        run("add_status, 100, Abandoned")
        assert run("add_status, 100, Deprecated") is None
        assert catalog.get_mod(100).statuses == [Status.deprecated]
        assert "abandoned status removed" in ledger.mod_fragment(100)

    def test_duplicate_status(self, run, make_mod):
        make_mod(100).statuses.append(Status.reupload)
        assert run("add_status, 100, Reupload") == "Mod already has this status."

    def test_removed_mod_refuses_page_statuses(self, run, make_mod):
        make_mod(100).statuses.append(Status.removed_from_workshop)
        assert run("add_status, 100, NoDescription") == (
            "Status cannot be combined with existing 'RemovedFromWorkshop' status."
        )

    def test_manual_no_description_sets_exclusion(self, run, catalog, make_mod):
        make_mod(100)
        run("add_status, 100, NoDescription")
        assert catalog.get_mod(100).exclusion_for_no_description

    def test_remove_missing_status(self, run, make_mod):
        make_mod(100)
        assert run("remove_status, 100, Abandoned") == "Status not found for this mod."

    def test_add_mod_as_removed(self, run, catalog):
        run("add_mod, 12345, removed")
        assert catalog.get_mod(12345).statuses == [Status.removed_from_workshop]

    def test_removal_clears_page_statuses_and_exclusion(self, mut, ledger, make_mod):
        mod = make_mod(100)
        mod.statuses.extend([Status.no_description, Status.no_comment_section])
        mod.exclusion_for_no_description = True

        mut.updater.add_status(mod, Status.removed_from_workshop)

        assert mod.statuses == [Status.removed_from_workshop]
        assert not mod.exclusion_for_no_description
        assert "no comment section status removed" in ledger.mod_fragment(100)


class TestRequiredDlc:
    def test_manual_dlc_can_be_removed(self, run, catalog, make_mod):
        make_mod(100)
        assert run("add_requireddlc, 100, AfterDark") is None
        mod = catalog.get_mod(100)
        assert mod.required_dlcs == [Dlc.after_dark]
        assert mod.exclusion_for_required_dlcs == [Dlc.after_dark]
        assert run("add_requireddlc, 100, AfterDark") == "DLC is already required."
        assert run("remove_requireddlc, 100, AfterDark") is None
        assert mod.required_dlcs == []
        assert mod.exclusion_for_required_dlcs == []

    def test_automated_dlc_cannot_be_removed(self, run, make_mod):
        make_mod(100).required_dlcs.append(Dlc.snowfall)
        assert run("remove_requireddlc, 100, Snowfall") == (
            "Cannot remove required DLC because it was not manually added."
        )

    def test_remove_missing_dlc(self, run, make_mod):
        make_mod(100)
        assert run("remove_requireddlc, 100, Snowfall") == "DLC is not required."


class TestExclusions:
    def test_remove_flag_exclusion(self, run, catalog, make_mod):
        make_mod(100).exclusion_for_source_url = True
        assert run("remove_exclusion, 100, SourceUrl") is None
        assert not catalog.get_mod(100).exclusion_for_source_url
        assert run("remove_exclusion, 100, SourceUrl") == "No exclusion exists."

    def test_remove_dlc_exclusion(self, run, catalog, make_mod):
        make_mod(100).exclusion_for_required_dlcs.append(Dlc.campus)
        assert run("remove_exclusion, 100, RequiredDlc, Campus") is None
        assert catalog.get_mod(100).exclusion_for_required_dlcs == []
        assert run("remove_exclusion, 100, RequiredDlc, Campus") == (
            "Invalid DLC or no exclusion exists."
        )

    def test_remove_required_mod_exclusion(self, run, make_mod):
        make_mod(100)
        assert run("remove_exclusion, 100, RequiredMod, 200") == (
            "Invalid required mod ID or no exclusion exists."
        )


class TestReview:
    def test_review_date_command_applies_to_later_lines(self, run, catalog, make_mod):
        make_mod(100)
        run("reviewdate, 2023-07-01")
        run("update_review, 100")
        assert catalog.get_mod(100).review_date == date(2023, 7, 1)
