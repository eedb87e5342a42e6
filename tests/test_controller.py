"""Controller operations: shadows, stacks, corpses, tools and ability cards."""
from __future__ import annotations

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from shadow_data import CUSTOM_BUFF_DEFAULT_DESC, REROLL_PLACEHOLDER, SELF_TARGET_ID, STUB_ABILITIES
from shadow_fruit.controller import ShadowFruitController


@pytest.fixture
def ctrl(store) -> ShadowFruitController:
    return ShadowFruitController.load(store)


def test_fresh_state_has_self_target_and_default_catalog(ctrl: ShadowFruitController) -> None:
    assert list(ctrl.state.targets) == [SELF_TARGET_ID]
    assert ctrl.state.ui.current_target_id == SELF_TARGET_ID
    assert "temp20" in ctrl.state.catalog
    assert ctrl.spu_totals().total == 0


def test_add_shadow_scores_and_persists(ctrl: ShadowFruitController) -> None:
    sh = ctrl.add_shadow("  ", 20, 9, 9)
    assert sh.id == "shadow-1"
    assert sh.name == "Unnamed Shadow"
    assert (sh.shadow_level, sh.power_units) == (10, 1000)
    assert ctrl.store.document["shadows"][0]["spu"] == 1000
    assert ctrl.add_shadow("Second", 0, 0, 0).id == "shadow-2"


def test_update_shadow_rescores(ctrl: ShadowFruitController) -> None:
    sh = ctrl.add_shadow("Ryuma", 20, 9, 9)
    ctrl.update_shadow(sh.id, raw_might=0, proficiency_tier=0, template_tier=0)
    assert (sh.shadow_level, sh.power_units) == (1, 4)
    assert ctrl.update_shadow("shadow-99", name="x") is None


def test_deactivating_shadow_shrinks_pool_but_keeps_spend(ctrl: ShadowFruitController) -> None:
    sh = ctrl.add_shadow("Ryuma", 20, 9, 9)
    ctrl.adjust_stack(SELF_TARGET_ID, "move10", 2)
    assert ctrl.spu_totals().spent == 25

    ctrl.set_shadow_active(sh.id, False)

    totals = ctrl.spu_totals()
    assert totals.total == 0
    assert totals.spent == 25
    assert totals.available == 0
    assert ctrl.state.targets[SELF_TARGET_ID].stacks.get("move10") == 2


def test_remove_shadow_cascades_to_corpses(ctrl: ShadowFruitController) -> None:
    a = ctrl.add_shadow("A", 20, 9, 9)
    b = ctrl.add_shadow("B", 0, 0, 0)
    corpse = ctrl.generate_corpse("Brute", 3)
    assert corpse.shadow_ids == [a.id, b.id]
    before = corpse.stats.spu_sum

    assert ctrl.remove_shadow(a.id)
    assert corpse.shadow_ids == [b.id]
    regenerated = ctrl.generate_corpse("Brute", 3)
    assert regenerated.stats.spu_sum < before
    assert regenerated.stats.spu_sum == b.power_units
    assert not ctrl.remove_shadow(a.id)


def test_generate_corpse_upserts_by_name(ctrl: ShadowFruitController) -> None:
    ctrl.add_shadow("A", 20, 9, 9)
    first = ctrl.generate_corpse("Brute", 1)
    ctrl.adjust_stack(first.id, "temp20", 1)

    again = ctrl.generate_corpse("Brute", 4)

    assert again is first
    assert len(ctrl.state.corpses) == 1
    assert again.durability_tier == 4
    assert ctrl.state.targets[first.id].stacks.get("temp20") == 1

    other = ctrl.generate_corpse("Husk", 1)
    assert other.id != first.id
    assert ctrl.state.targets[other.id].kind == "corpse"


def test_regenerating_corpse_is_idempotent(ctrl: ShadowFruitController) -> None:
    ctrl.add_shadow("A", 12, 4, 6)
    first = ctrl.generate_corpse("Brute", 2).stats
    second = ctrl.generate_corpse("Brute", 2).stats
    assert first == second


def test_corpse_modes_pick_shadows(ctrl: ShadowFruitController) -> None:
    a = ctrl.add_shadow("A", 20, 9, 9)
    b = ctrl.add_shadow("B", 10, 5, 5)
    ctrl.set_shadow_active(b.id, False)
    assert ctrl.generate_corpse("Active", 1, mode="active").shadow_ids == [a.id]
    assert ctrl.generate_corpse("Picked", 1, mode="selected", selected_ids=[b.id]).shadow_ids == [b.id]


def test_corpse_lash_dc_follows_dc_helper(ctrl: ShadowFruitController) -> None:
    assert ctrl.compute_dc(6, 3, 4) == 18
    corpse = ctrl.generate_corpse("", 1)
    assert corpse.name == "Unnamed Corpse"
    assert corpse.stats.shadow_lash_save_dc == 18


def test_edit_buffs_for_corpse_selects_its_target(ctrl: ShadowFruitController) -> None:
    corpse = ctrl.generate_corpse("Brute", 1)
    assert ctrl.edit_buffs_for_corpse("Brute") == corpse.id
    assert ctrl.state.ui.current_target_id == corpse.id
    assert ctrl.edit_buffs_for_corpse("Nobody") is None


def test_adjust_stack_clamps_at_zero_and_ignores_unknowns(ctrl: ShadowFruitController) -> None:
    assert ctrl.adjust_stack(SELF_TARGET_ID, "temp20", 2) == 2
    assert ctrl.adjust_stack(SELF_TARGET_ID, "temp20", -5) == 0
    assert "temp20" not in ctrl.state.targets[SELF_TARGET_ID].stacks

    saves = ctrl.store.saves
    assert ctrl.adjust_stack("ally-404", "temp20", 1) == 0
    assert ctrl.adjust_stack(SELF_TARGET_ID, "no-such-buff", 1) == 0
    assert ctrl.store.saves == saves


def test_spend_is_unbounded_unless_cap_requested(ctrl: ShadowFruitController) -> None:
    ctrl.add_shadow("Tiny", 0, 0, 0)  # 4 SPU
    assert ctrl.adjust_stack(SELF_TARGET_ID, "temp50", 1) == 1
    assert ctrl.spu_totals().overspent

    assert ctrl.adjust_stack(SELF_TARGET_ID, "temp50", 1, enforce_cap=True) == 1
    assert ctrl.adjust_stack(SELF_TARGET_ID, "temp50", -1, enforce_cap=True) == 0


def test_cap_allows_spend_within_balance(ctrl: ShadowFruitController) -> None:
    ctrl.add_shadow("Big", 20, 9, 9)
    assert ctrl.adjust_stack(SELF_TARGET_ID, "temp20", 3, enforce_cap=True) == 3
    assert ctrl.spu_totals().spent == 8 + 12 + 24


def test_add_ally_and_select(ctrl: ShadowFruitController) -> None:
    assert ctrl.add_ally("   ") is None
    ally_id = ctrl.add_ally("Kaya")
    assert ally_id == "ally-1"
    assert ctrl.state.targets[ally_id].kind == "ally"
    ctrl.select_target(ally_id)
    assert ctrl.state.current_target.name == "Kaya"
    ctrl.select_target("missing")
    assert ctrl.state.ui.current_target_id == ally_id


def test_custom_buff_validation(ctrl: ShadowFruitController) -> None:
    assert ctrl.add_custom_buff("", 10) is None
    assert ctrl.add_custom_buff("Gloom", 0) is None
    assert ctrl.add_custom_buff("Gloom", "abc") is None

    definition = ctrl.add_custom_buff("  Gloom  ", "12")
    assert definition.id == "custom-1"
    assert definition.name == "Gloom"
    assert definition.base_cost == 12
    assert definition.description == CUSTOM_BUFF_DEFAULT_DESC
    assert ctrl.state.catalog["custom-1"] is definition


def test_target_notes_and_ui_prefs(ctrl: ShadowFruitController) -> None:
    ctrl.set_target_notes(SELF_TARGET_ID, "Keep to the shadows")
    ctrl.set_buff_tools_view("both")
    ctrl.set_buff_tools_view("bogus")
    ctrl.set_panel_collapsed("3", True)
    doc = ctrl.store.document
    assert doc["buffTargets"][SELF_TARGET_ID]["notes"] == "Keep to the shadows"
    assert doc["ui"]["buffToolsView"] == "both"
    assert doc["ui"]["collapsedPanels"]["3"] is True


def test_stub_abilities_replace_list_and_use_last_dc(ctrl: ShadowFruitController) -> None:
    ctrl.add_empty_ability()
    cards = ctrl.generate_stub_abilities()
    assert len(ctrl.state.abilities) == len(STUB_ABILITIES)
    assert cards[0].dc == "17"

    ctrl.compute_dc(4, 2, 3)
    cards = ctrl.generate_stub_abilities()
    assert cards[0].dc == "15"
    assert all(c.target_id == SELF_TARGET_ID for c in cards)


def test_ability_card_edit_rebind_reroll_delete(ctrl: ShadowFruitController) -> None:
    ally_id = ctrl.add_ally("Kaya")
    card = ctrl.add_empty_ability()
    assert card.target_id == SELF_TARGET_ID

    ctrl.update_ability(card.id, name="Night Fang", dc="14")
    assert (card.name, card.dc) == ("Night Fang", "14")
    with pytest.raises(ValueError):
        ctrl.update_ability(card.id, power_level="9000")

    ctrl.set_ability_target(card.id, ally_id)
    assert ctrl.abilities_for(ally_id) == [card]
    ctrl.set_ability_target(card.id, "nowhere")
    assert card.target_id == ally_id

    ctrl.reroll_ability(card.id)
    assert card.description == REROLL_PLACEHOLDER
    ctrl.update_ability(card.id, description="Bites from the dark")
    ctrl.reroll_ability(card.id)
    assert card.description == "Bites from the dark"

    assert ctrl.delete_ability(card.id)
    assert not ctrl.delete_ability(card.id)
    assert ctrl.state.abilities == []


def test_generation_request_payload(ctrl: ShadowFruitController) -> None:
    ctrl.add_shadow("Ryuma", 20, 9, 9)
    ctrl.adjust_stack(SELF_TARGET_ID, "temp20", 1)
    body = ctrl.generation_request("undead samurai")
    assert body["shadows"][0]["name"] == "Ryuma"
    assert body["shadows"][0]["shadowLevel"] == 10
    assert body["totalAsp"] == 1000
    assert body["spentAsp"] == 8
    assert body["availableAsp"] == 992
    assert body["selectedBuffIds"] == ["temp20"]
    assert body["notes"] == "undead samurai"


def test_reset_restores_defaults(ctrl: ShadowFruitController) -> None:
    ctrl.add_shadow("Ryuma", 20, 9, 9)
    ctrl.add_ally("Kaya")
    ctrl.reset()
    assert ctrl.state.shadows == []
    assert list(ctrl.state.targets) == [SELF_TARGET_ID]
    assert ctrl.store.document is None


def test_ability_role_is_editable_and_saved(ctrl: ShadowFruitController) -> None:
    card = ctrl.add_empty_ability()
    assert card.role == ""
    ctrl.update_ability(card.id, role="Control")
    assert ctrl.store.document["abilities"][0]["role"] == "Control"


def test_only_generated_corpses_become_corpse_targets(ctrl: ShadowFruitController) -> None:
    ally_id = ctrl.add_ally("Kaya")
    corpse = ctrl.generate_corpse("Brute", 2)
    assert not hasattr(ctrl, "create_target")
    corpse_targets = [t.id for t in ctrl.state.targets.values() if t.kind == "corpse"]
    assert corpse_targets == [corpse.id] == ["corpse-1"]
    assert ctrl.state.targets[ally_id].kind == "ally"
