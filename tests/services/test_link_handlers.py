import pytest

from compat_catalog.models.enums import LinkKind

LINK_VERBS = ["requiredmod", "successor", "alternative", "recommendation"]


@pytest.fixture
def pair(make_mod):
    return make_mod(100), make_mod(200)


class TestAddLink:
    def test_add_required_mod(self, run, pair, ledger):
        mod, _ = pair
        assert run("add_requiredmod, 100, 200") is None
        assert mod.required_mods == [200]
        assert mod.exclusion_for_required_mods == [200]
        assert ledger.mod_fragment(100) == "required mod 200 added"

    def test_already_linked(self, run, pair):
        run("add_alternative, 100, 200")
        assert run("add_alternative, 100, 200") == "Already an alternative mod."

    def test_unknown_target(self, run, pair):
        assert run("add_successor, 100, 300") == "Invalid mod ID 300."

    def test_self_link(self, run, pair):
        assert run("add_recommendation, 100, 100") == "Duplicate Steam ID 100."

    def test_group_may_be_required(self, run, catalog, pair, make_mod):
        make_mod(300)
        group = catalog.add_group("Choices", [200, 300])
        assert run(f"add_requiredmod, 100, {group.group_id}") is None
        assert pair[0].required_mods == [group.group_id]

    def test_group_cannot_be_successor(self, run, catalog, pair, make_mod):
        make_mod(300)
        group = catalog.add_group("Choices", [200, 300])
        assert run(f"add_successor, 100, {group.group_id}") == (
            f"Invalid mod ID {group.group_id}."
        )

    @pytest.mark.parametrize(
        "sequence",
        [
            LINK_VERBS,
            list(reversed(LINK_VERBS)),
            ["successor", "requiredmod", "successor", "alternative"],
        ],
    )
    def test_target_in_at_most_one_list(self, run, pair, sequence):
        mod, _ = pair
        for verb in sequence:
            run(f"add_{verb}, 100, 200")
            assert sum(200 in mod.links(kind) for kind in LinkKind) == 1

    def test_moving_off_required_pins_exclusion(self, run, pair):
        mod, _ = pair
        mod.required_mods.append(200)
        run("add_successor, 100, 200")
        assert mod.required_mods == []
        assert 200 in mod.exclusion_for_required_mods


class TestRemoveLink:
    def test_remove_manual_required_mod(self, run, pair):
        mod, _ = pair
        run("add_requiredmod, 100, 200")
        assert run("remove_requiredmod, 100, 200") is None
        assert mod.required_mods == []
        assert mod.exclusion_for_required_mods == []

    def test_remove_automated_required_mod_pins_absence(self, run, pair):
        mod, _ = pair
        mod.required_mods.append(200)
        assert run("remove_requiredmod, 100, 200") is None
        assert mod.exclusion_for_required_mods == [200]

    @pytest.mark.parametrize(
        ("verb", "message"),
        [
            ("requiredmod", "Mod is not required."),
            ("successor", "Successor not found."),
            ("alternative", "Alternative mod not found."),
            ("recommendation", "Recommended mod not found."),
        ],
    )
    def test_remove_missing(self, run, pair, verb, message):
        assert run(f"remove_{verb}, 100, 200") == message

    def test_remove_unknown_mod(self, run):
        assert run("remove_successor, 100, 200") == "Invalid mod ID 100."
