"""Saved document: file store, merge over defaults and repair on load."""
from __future__ import annotations

import json
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from shadow_data import SELF_TARGET_ID, STORAGE_KEY
from shadow_fruit import app_state
from shadow_fruit.app_state import default_document, merge_over_defaults, state_from_document
from shadow_fruit.controller import ShadowFruitController
from shadow_fruit.persistence import JsonDocumentStore


def test_store_path_uses_storage_key(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    assert store.path == tmp_path / f"{STORAGE_KEY}.json"
    assert store.load() is None


def test_round_trip_through_file(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path / "data")
    ctrl = ShadowFruitController.load(store)
    sh = ctrl.add_shadow("Ryuma", 20, 9, 9)
    ctrl.set_shadow_techniques(sh.id, "Shadow Slash\n\n  Night Fog  ")
    ally_id = ctrl.add_ally("Kaya")
    ctrl.adjust_stack(ally_id, "move10", 2)
    corpse = ctrl.generate_corpse("Brute", 3)
    ctrl.compute_dc(6, 3, 2)
    ctrl.generate_stub_abilities()

    reloaded = ShadowFruitController.load(JsonDocumentStore(tmp_path / "data"))

    assert reloaded.state.to_dict() == ctrl.state.to_dict()
    assert reloaded.state.shadow(sh.id).technique_lines == ["Shadow Slash", "Night Fog"]
    assert reloaded.state.targets[ally_id].stacks.get("move10") == 2
    assert reloaded.state.corpse(corpse.id).stats == corpse.stats
    assert reloaded.spu_totals() == ctrl.spu_totals()


def test_counters_continue_after_reload(tmp_path: Path) -> None:
    ctrl = ShadowFruitController.load(JsonDocumentStore(tmp_path))
    ctrl.add_shadow("A", 1, 1, 1)
    ctrl.add_shadow("B", 1, 1, 1)

    reloaded = ShadowFruitController.load(JsonDocumentStore(tmp_path))
    assert reloaded.add_shadow("C", 1, 1, 1).id == "shadow-3"


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    store.path.write_text("{not json", encoding="utf-8")
    assert store.load() is None

    ctrl = ShadowFruitController.load(store)
    assert ctrl.state.shadows == []
    assert SELF_TARGET_ID in ctrl.state.targets


def test_non_object_document_is_rejected(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    store.path.write_text("[1, 2, 3]", encoding="utf-8")
    assert store.load() is None


def test_clear_is_safe_when_nothing_saved(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    store.clear()
    assert store.save({"shadows": []})
    store.clear()
    assert not store.path.exists()


def test_merge_is_shallow_except_ui() -> None:
    merged = merge_over_defaults({"shadows": [{"id": "shadow-1"}], "ui": {"lastDC": 14}})
    defaults = default_document()
    assert merged["shadows"] == [{"id": "shadow-1"}]
    assert merged["buffsCatalog"] == defaults["buffsCatalog"]
    assert merged["ui"]["lastDC"] == 14
    assert merged["ui"]["buffToolsView"] == defaults["ui"]["buffToolsView"]
    assert merge_over_defaults(None) == defaults


def test_load_repairs_references() -> None:
    saved = {
        "shadows": [{"id": "shadow-4", "name": "Old", "raw": 20, "profTier": 9, "templateTier": 9}],
        "buffTargets": {
            "ally-2": {"id": "ally-2", "name": "Kaya", "type": "self", "buffs": {"temp20": 1, "zero": 0}},
        },
        "corpses": [{"id": "corpse-7", "name": "Brute", "durability": 2, "shadowIds": ["shadow-4", "shadow-9"]}],
        "abilities": [{"id": "ability-3", "name": "Fang", "targetId": "gone"}],
        "ui": {"currentBuffTargetId": "gone", "lastDC": 16},
    }

    state = state_from_document(saved)

    assert state.targets[SELF_TARGET_ID].kind == "self"
    assert state.targets["ally-2"].kind == "ally"
    assert state.targets["ally-2"].stacks == {"temp20": 1}
    assert state.targets["corpse-7"].kind == "corpse"
    assert state.ui.current_target_id in state.targets
    assert state.abilities[0].target_id == state.ui.current_target_id

    corpse = state.corpse("corpse-7")
    assert corpse.shadow_ids == ["shadow-4"]
    assert corpse.stats.sl_sum == 10
    assert corpse.stats.shadow_lash_save_dc == 16

    assert state.next_id("shadow") == "shadow-5"
    assert state.next_id("ally") == "ally-3"
    assert state.next_id("corpse") == "corpse-8"
    assert state.next_id("ability") == "ability-4"


def test_saved_file_is_plain_json(tmp_path: Path) -> None:
    ctrl = ShadowFruitController.load(JsonDocumentStore(tmp_path))
    ctrl.add_shadow("Ryuma", 20, 9, 9)
    doc = json.loads((tmp_path / f"{STORAGE_KEY}.json").read_text(encoding="utf-8"))
    assert set(doc) == {"shadows", "buffsCatalog", "buffTargets", "corpses", "abilities", "ui"}
    assert doc["shadows"][0]["sl"] == 10


def test_wrongly_shaped_records_are_repaired_on_load(tmp_path: Path) -> None:
    saved = {
        "shadows": [{"id": "shadow-1", "name": "Ryuma", "raw": 20, "profTier": 9, "templateTier": 9,
                     "techniquesText": ["Night Emperor"]}],
        "buffTargets": {"self": {"id": "self", "name": "Me", "type": "self", "buffs": ["temp20"]}},
        "corpses": [{"id": "corpse-1", "name": "Brute", "durability": 2, "shadowIds": 7}],
    }
    store = JsonDocumentStore(tmp_path)
    store.save(saved)

    ctrl = ShadowFruitController.load(store)

    assert ctrl.state.shadows[0].technique_lines == []
    assert ctrl.state.shadows[0].power_units == 1000
    assert ctrl.state.targets[SELF_TARGET_ID].stacks == {}
    assert ctrl.state.corpse("corpse-1").shadow_ids == []
    assert ctrl.state.targets["corpse-1"].kind == "corpse"


def test_unreadable_document_shape_falls_back_to_defaults(monkeypatch) -> None:
    real_from_dict = app_state.AppState.from_dict

    def picky_from_dict(d):
        if d.get("shadows"):
            raise TypeError("unexpected shape")
        return real_from_dict(d)

    monkeypatch.setattr(app_state.AppState, "from_dict", staticmethod(picky_from_dict))

    state = state_from_document({"shadows": [{"id": "shadow-1"}]})

    assert state.shadows == []
    assert list(state.targets) == [SELF_TARGET_ID]
