# app_state.py
"""
Estado da aplicação (documento único) e conversão de/para o JSON salvo.

O formato salvo segue o da versão browser:
  {shadows, buffsCatalog, buffTargets, corpses, abilities, ui}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shadow_data import DEFAULT_BUFFS, DEFAULT_SELF_NAME, SELF_TARGET_ID
from shadow_engine import (
    AbilityCard,
    BuffDefinition,
    BuffTarget,
    Corpse,
    Shadow,
    coerce_int,
)
from shadow_fruit.logger import get_logger

log = get_logger("state")

ID_KINDS = ("shadow", "corpse", "ally", "ability", "custom")
PANEL_IDS = ("1", "2", "3", "4", "5", "6")


def default_catalog() -> Dict[str, BuffDefinition]:
    return {b["id"]: BuffDefinition.from_dict(b) for b in DEFAULT_BUFFS}


def default_self_target() -> BuffTarget:
    return BuffTarget(id=SELF_TARGET_ID, name=DEFAULT_SELF_NAME, kind="self")


@dataclass
class UiPrefs:
    collapsed_panels: Dict[str, bool] = field(default_factory=lambda: {p: False for p in PANEL_IDS})
    current_target_id: str = SELF_TARGET_ID
    buff_tools_view: str = "hide"
    last_dc: Optional[int] = None
    next_ids: Dict[str, int] = field(default_factory=lambda: {k: 1 for k in ID_KINDS})

    def to_dict(self) -> dict:
        return {
            "collapsedPanels": dict(self.collapsed_panels),
            "currentBuffTargetId": self.current_target_id,
            "buffToolsView": self.buff_tools_view,
            "lastDC": self.last_dc,
            "nextIds": dict(self.next_ids),
        }

    @staticmethod
    def from_dict(d: dict) -> "UiPrefs":
        ui = UiPrefs()
        panels = d.get("collapsedPanels")
        if isinstance(panels, dict):
            ui.collapsed_panels.update({str(k): bool(v) for k, v in panels.items()})
        ui.current_target_id = str(d.get("currentBuffTargetId") or SELF_TARGET_ID)
        if d.get("buffToolsView") in ("hide", "custom", "dc", "both"):
            ui.buff_tools_view = d["buffToolsView"]
        last_dc = d.get("lastDC")
        ui.last_dc = coerce_int(last_dc) if last_dc not in (None, "") else None
        next_ids = d.get("nextIds")
        if isinstance(next_ids, dict):
            for kind, n in next_ids.items():
                ui.next_ids[str(kind)] = coerce_int(n, 1, lo=1)
        return ui


@dataclass
class AppState:
    """Documento inteiro em memória; só o controller deve mutá-lo."""
    shadows: List[Shadow] = field(default_factory=list)
    catalog: Dict[str, BuffDefinition] = field(default_factory=dict)
    targets: Dict[str, BuffTarget] = field(default_factory=dict)
    corpses: List[Corpse] = field(default_factory=list)
    abilities: List[AbilityCard] = field(default_factory=list)
    ui: UiPrefs = field(default_factory=UiPrefs)

    def next_id(self, kind: str) -> str:
        """Ids monotônicos por tipo ("shadow-1", "ally-2"...), nunca reutilizados."""
        n = self.ui.next_ids.get(kind, 1)
        self.ui.next_ids[kind] = n + 1
        return f"{kind}-{n}"

    def shadow(self, shadow_id: str) -> Optional[Shadow]:
        return next((sh for sh in self.shadows if sh.id == shadow_id), None)

    def corpse(self, corpse_id: str) -> Optional[Corpse]:
        return next((c for c in self.corpses if c.id == corpse_id), None)

    def corpse_by_name(self, name: str) -> Optional[Corpse]:
        return next((c for c in self.corpses if c.name == name), None)

    def ability(self, ability_id: str) -> Optional[AbilityCard]:
        return next((ab for ab in self.abilities if ab.id == ability_id), None)

    @property
    def current_target(self) -> Optional[BuffTarget]:
        return self.targets.get(self.ui.current_target_id)

    def to_dict(self) -> dict:
        return {
            "shadows": [sh.to_dict() for sh in self.shadows],
            "buffsCatalog": {bid: b.to_dict() for bid, b in self.catalog.items()},
            "buffTargets": {tid: t.to_dict() for tid, t in self.targets.items()},
            "corpses": [c.to_dict() for c in self.corpses],
            "abilities": [ab.to_dict() for ab in self.abilities],
            "ui": self.ui.to_dict(),
        }

    @staticmethod
    def from_dict(d: dict) -> "AppState":
        shadows = [Shadow.from_dict(x) for x in _as_list(d.get("shadows")) if isinstance(x, dict)]
        ui = UiPrefs.from_dict(d.get("ui") if isinstance(d.get("ui"), dict) else {})

        catalog: Dict[str, BuffDefinition] = {}
        for raw in _as_records(d.get("buffsCatalog")):
            b = BuffDefinition.from_dict(raw)
            if b.id:
                catalog[b.id] = b

        targets: Dict[str, BuffTarget] = {}
        for raw in _as_records(d.get("buffTargets")):
            t = BuffTarget.from_dict(raw)
            if t.id:
                targets[t.id] = t

        corpses = [
            Corpse.from_dict(x, shadows, last_dc=ui.last_dc)
            for x in _as_list(d.get("corpses"))
            if isinstance(x, dict)
        ]
        abilities = [AbilityCard.from_dict(x) for x in _as_list(d.get("abilities")) if isinstance(x, dict)]

        return AppState(
            shadows=shadows,
            catalog=catalog,
            targets=targets,
            corpses=corpses,
            abilities=abilities,
            ui=ui,
        )


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_records(value: Any) -> List[dict]:
    """Aceita tanto {id: registro} quanto [registro, ...]."""
    if isinstance(value, dict):
        return [v for v in value.values() if isinstance(v, dict)]
    return [v for v in _as_list(value) if isinstance(v, dict)]


# ─────────────────────────────────────────────
# Defaults & merge
# ─────────────────────────────────────────────

def default_document() -> dict:
    return AppState(ui=UiPrefs()).to_dict()


def merge_over_defaults(saved: Optional[dict]) -> dict:
    """
    Merge raso: chaves de topo salvas sobrescrevem os defaults;
    ``ui`` é mesclado um nível abaixo (como no loadState da versão browser).
    """
    doc = default_document()
    if not isinstance(saved, dict):
        return doc
    for key, value in saved.items():
        if key == "ui" and isinstance(value, dict):
            doc["ui"] = {**doc["ui"], **value}
        else:
            doc[key] = value
    return doc


def ensure_base_state(state: AppState) -> AppState:
    """
    Garante o mínimo para a UI funcionar:
    catálogo padrão se vazio, alvo "self" sempre presente, um alvo de buff
    para cada cadáver e um alvo atual válido.
    """
    if not state.catalog:
        state.catalog = default_catalog()

    if SELF_TARGET_ID not in state.targets:
        state.targets = {SELF_TARGET_ID: default_self_target(), **state.targets}
    for target in state.targets.values():
        if target.kind == "self" and target.id != SELF_TARGET_ID:
            target.kind = "ally"
    state.targets[SELF_TARGET_ID].kind = "self"

    for corpse in state.corpses:
        if corpse.id not in state.targets:
            state.targets[corpse.id] = BuffTarget(id=corpse.id, name=corpse.name, kind="corpse")

    if state.ui.current_target_id not in state.targets:
        state.ui.current_target_id = next(iter(state.targets))

    for ab in state.abilities:
        if ab.target_id not in state.targets:
            ab.target_id = state.ui.current_target_id

    # ids salvos precisam ficar à frente de qualquer id já usado
    _bump_counter(state, "shadow", [sh.id for sh in state.shadows])
    _bump_counter(state, "corpse", [c.id for c in state.corpses])
    _bump_counter(state, "ally", list(state.targets))
    _bump_counter(state, "ability", [ab.id for ab in state.abilities])
    _bump_counter(state, "custom", list(state.catalog))
    return state


def _bump_counter(state: AppState, kind: str, ids: List[str]) -> None:
    highest = 0
    for raw in ids:
        prefix, _, num = raw.rpartition("-")
        if prefix == kind and num.isdigit():
            highest = max(highest, int(num))
    if state.ui.next_ids.get(kind, 1) <= highest:
        state.ui.next_ids[kind] = highest + 1


def state_from_document(saved: Optional[dict]) -> AppState:
    if saved is None:
        log.info("No saved state, starting from defaults")
    try:
        return ensure_base_state(AppState.from_dict(merge_over_defaults(saved)))
    except (TypeError, AttributeError, ValueError) as exc:
        if saved is None:
            raise
        log.error("Saved state is malformed, starting from defaults: %s", exc)
        return state_from_document(None)
