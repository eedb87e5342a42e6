from __future__ import annotations

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from shadow_data import SELF_TARGET_ID, SHADOW_ARMOR_NIGHT_ID, SHADOW_ARMOR_NIGHT_POWER, TAG_META
from shadow_fruit.controller import ShadowFruitController
from shadow_fruit.summary import corpse_actions, corpse_traits, project_summaries, summary_markdown


@pytest.fixture
def ctrl(store) -> ShadowFruitController:
    return ShadowFruitController.load(store)


def by_id(ctrl: ShadowFruitController):
    return {s.target_id: s for s in project_summaries(ctrl.state)}


def test_self_summary_without_buffs_points_to_character_sheet(ctrl: ShadowFruitController) -> None:
    s = by_id(ctrl)[SELF_TARGET_ID]
    assert s.kind_label == "PRIMARY USER"
    assert s.pills() == [
        "AC: use character sheet",
        "HP: use character sheet",
        "Speed: use character sheet",
        "Shadow Power: 0 SPU",
        "Shadow DC: use spell save DC or DC helper",
    ]
    assert s.glance == {}
    assert s.power_lines == []
    assert s.inherited_techniques is None


def test_self_summary_reports_buff_modifiers(ctrl: ShadowFruitController) -> None:
    ctrl.add_shadow("Ryuma", 20, 9, 9)
    ctrl.adjust_stack(SELF_TARGET_ID, "shadowCarapace", 2)
    ctrl.adjust_stack(SELF_TARGET_ID, "temp20", 1)
    ctrl.adjust_stack(SELF_TARGET_ID, "move10", 1)
    ctrl.compute_dc(6, 3, 4)

    s = by_id(ctrl)[SELF_TARGET_ID]

    assert s.ac_text() == "Your AC +2 from buffs"
    assert s.hp_text() == "Your HP +20 temp HP"
    assert s.speed_text() == "Your speed +10 ft"
    assert s.spu_text() == "Shadow Power: 1000 SPU"
    assert s.dc_text() == "Shadow DC: 18"
    assert s.glance["Defenses"] == ["+20 temp HP", "+2 AC"]
    assert s.glance["Mobility"] == ["+10 ft speed"]


def test_corpse_summary_adds_buffs_to_base_stats(ctrl: ShadowFruitController) -> None:
    ctrl.add_shadow("A", 20, 9, 9)
    corpse = ctrl.generate_corpse("Brute", 3)
    ctrl.adjust_stack(corpse.id, "shadowCarapace", 2)
    ctrl.adjust_stack(corpse.id, "move10", 1)

    s = by_id(ctrl)[corpse.id]
    base_ac = corpse.stats.armor_class

    assert s.kind_label == "CORPSE"
    assert s.armor_class == base_ac + 2
    assert s.ac_text() == f"AC {base_ac + 2} (base {base_ac} +2 from buffs)"
    assert s.hp_text() == f"HP ~{corpse.stats.hit_points}"
    assert s.speed_text() == f"Speed {corpse.stats.speed + 10} ft (base {corpse.stats.speed} +10)"
    assert s.spu_text() == f"Shadow Power: {corpse.stats.spu_sum} SPU"
    assert s.inherited_techniques == []


def test_tags_and_advantages_are_grouped(ctrl: ShadowFruitController) -> None:
    ctrl.adjust_stack(SELF_TARGET_ID, "shadowStep30", 2)
    ctrl.adjust_stack(SELF_TARGET_ID, "mundaneResist", 1)
    ctrl.adjust_stack(SELF_TARGET_ID, "shadowWeapon", 1)
    ctrl.adjust_stack(SELF_TARGET_ID, "adv_wis_save", 3)
    ctrl.adjust_stack(SELF_TARGET_ID, "adv_dex_save", 1)
    ctrl.adjust_stack(SELF_TARGET_ID, "plus2_con_save", 2)

    s = by_id(ctrl)[SELF_TARGET_ID]

    assert s.glance["Mobility"] == ["Shadow Step 30 ft"]
    assert s.glance["Defenses"] == ["Resist non-magical weapons"]
    assert s.glance["Other"] == ["Shadow Weapon"]
    assert s.glance["Saves & Checks"] == ["+4 CON saves", "Advantage on DEX, WIS saves"]
    assert TAG_META["shadow_weapon"]["power"] in s.power_lines
    assert len(s.power_lines) == 3


def test_shadow_armor_of_night_gets_its_own_power_line(ctrl: ShadowFruitController) -> None:
    ctrl.adjust_stack(SELF_TARGET_ID, SHADOW_ARMOR_NIGHT_ID, 2)
    s = by_id(ctrl)[SELF_TARGET_ID]
    assert s.glance["Defenses"] == ["+2 AC in dim light/darkness"]
    assert s.glance["Other"] == ["Shadow Armor of Night"]
    assert s.power_lines == [SHADOW_ARMOR_NIGHT_POWER]


def test_breakdown_lists_spend_per_buff(ctrl: ShadowFruitController) -> None:
    ctrl.adjust_stack(SELF_TARGET_ID, "move10", 4)
    ctrl.set_target_notes(SELF_TARGET_ID, "Fast")
    s = by_id(ctrl)[SELF_TARGET_ID]
    line = s.breakdown[0]
    assert (line.name, line.count, line.spu_spent) == ("+10 ft Movement", 4, 110)
    assert line.effect_text == "Total +40 ft speed."
    assert s.notes == "Fast"


def test_corpse_card_text(ctrl: ShadowFruitController) -> None:
    a = ctrl.add_shadow("A", 20, 9, 9)
    ctrl.set_shadow_techniques(a.id, "Shadow Slash")
    corpse = ctrl.generate_corpse("Brute", 3)

    traits = corpse_traits(corpse, ctrl.corpse_shadows(corpse))
    actions = corpse_actions(corpse)

    assert traits[0].startswith("Corpse Durability: Tier 3")
    assert "Powered by 1 shadow(s)" in traits[1]
    assert f"DC {corpse.stats.shadow_lash_save_dc}" in actions[2]
    assert f"+{corpse.stats.melee_attack_bonus} to hit" in actions[1]
    assert by_id(ctrl)[corpse.id].inherited_techniques == ["Shadow Slash"]


def test_markdown_export_covers_every_target(ctrl: ShadowFruitController) -> None:
    ctrl.add_ally("Kaya")
    ctrl.generate_corpse("Brute", 1)
    card = ctrl.add_empty_ability()
    ctrl.update_ability(card.id, name="Night Fang", dc="14")

    text = summary_markdown(project_summaries(ctrl.state))

    assert "## Elren (Primary User) (PRIMARY USER)" in text
    assert "## Kaya (ALLY)" in text
    assert "## Brute (CORPSE)" in text
    assert "Night Fang" in text
    assert "**Inherited Shadow Techniques**" in text
