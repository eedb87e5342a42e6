# controller.py
"""
ShadowFruitController: dono único do AppState.

Cada operação da UI é um método aqui. Operações que mutam validam/calculam
tudo antes de tocar no estado e terminam em ``_commit()``, que reescreve o
documento inteiro no store (último a escrever vence).
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol

from shadow_data import (
    CUSTOM_BUFF_DEFAULT_DESC,
    DEFAULT_STUB_DC,
    REROLL_PLACEHOLDER,
    STUB_ABILITIES,
    UNNAMED_CORPSE,
    UNNAMED_SHADOW,
)
from shadow_engine import (
    AbilityCard,
    BuffDefinition,
    BuffTarget,
    Corpse,
    Shadow,
    ShadowScore,
    SpuTotals,
    Tagged,
    build_corpse_stats,
    coerce_int,
    compute_buff_totals,
    compute_shadow_score,
    compute_spu_totals,
    gather_inherited_techniques,
    next_stack_cost,
    select_corpse_shadows,
    split_technique_lines,
    suggested_dc,
)
from shadow_fruit.app_state import AppState, state_from_document
from shadow_fruit.logger import get_logger

log = get_logger("state")


class DocumentStore(Protocol):
    def load(self) -> Optional[dict]: ...
    def save(self, document: dict) -> bool: ...
    def clear(self) -> None: ...


class ShadowFruitController:

    def __init__(self, state: AppState, store: DocumentStore):
        self.state = state
        self.store = store

    @classmethod
    def load(cls, store: DocumentStore) -> "ShadowFruitController":
        return cls(state_from_document(store.load()), store)

    def _commit(self) -> None:
        self.store.save(self.state.to_dict())

    def save_now(self) -> bool:
        return self.store.save(self.state.to_dict())

    def reset(self) -> None:
        """Apaga o documento salvo e volta ao estado padrão (irreversível)."""
        self.store.clear()
        self.state = state_from_document(None)
        log.warning("State reset to defaults")

    # ─────────────────────────────────────────────
    # Totais
    # ─────────────────────────────────────────────

    def spu_totals(self) -> SpuTotals:
        return compute_spu_totals(self.state.shadows, self.state.targets.values(), self.state.catalog)

    # ─────────────────────────────────────────────
    # Sombras
    # ─────────────────────────────────────────────

    @staticmethod
    def score_preview(raw_might: Any, proficiency_tier: Any, template_tier: Any) -> ShadowScore:
        return compute_shadow_score(raw_might, proficiency_tier, template_tier)

    def add_shadow(self, name: str, raw_might: Any, proficiency_tier: Any, template_tier: Any) -> Shadow:
        shadow = Shadow(
            id=self.state.next_id("shadow"),
            name=(name or "").strip() or UNNAMED_SHADOW,
            raw_might=raw_might,
            proficiency_tier=proficiency_tier,
            template_tier=template_tier,
        )
        shadow.rescore()
        self.state.shadows.append(shadow)
        log.info("Shadow %s added: SL %s, %s SPU", shadow.id, shadow.shadow_level, shadow.power_units)
        self._commit()
        return shadow

    def update_shadow(
        self,
        shadow_id: str,
        *,
        name: Optional[str] = None,
        raw_might: Any = None,
        proficiency_tier: Any = None,
        template_tier: Any = None,
    ) -> Optional[Shadow]:
        shadow = self.state.shadow(shadow_id)
        if shadow is None:
            return None
        if name is not None:
            shadow.name = name.strip() or UNNAMED_SHADOW
        if raw_might is not None:
            shadow.raw_might = raw_might
        if proficiency_tier is not None:
            shadow.proficiency_tier = proficiency_tier
        if template_tier is not None:
            shadow.template_tier = template_tier
        shadow.rescore()
        self._commit()
        return shadow

    def set_shadow_active(self, shadow_id: str, active: bool) -> None:
        shadow = self.state.shadow(shadow_id)
        if shadow is None:
            return
        shadow.active = bool(active)
        self._commit()

    def set_shadow_techniques(self, shadow_id: str, text: str) -> None:
        shadow = self.state.shadow(shadow_id)
        if shadow is None:
            return
        shadow.technique_lines = split_technique_lines(text)
        self._commit()

    def remove_shadow(self, shadow_id: str) -> bool:
        """Remove a sombra e tira o id dela de todos os cadáveres."""
        if self.state.shadow(shadow_id) is None:
            return False
        self.state.shadows = [sh for sh in self.state.shadows if sh.id != shadow_id]
        for corpse in self.state.corpses:
            corpse.shadow_ids = [sid for sid in corpse.shadow_ids if sid != shadow_id]
        log.info("Shadow %s removed", shadow_id)
        self._commit()
        return True

    # ─────────────────────────────────────────────
    # Alvos de buff
    # ─────────────────────────────────────────────

    def select_target(self, target_id: str) -> None:
        if target_id not in self.state.targets:
            return
        self.state.ui.current_target_id = target_id
        self._commit()

    def add_ally(self, name: str) -> Optional[str]:
        """Alvos "corpse" só nascem em generate_corpse, junto com o cadáver."""
        name = (name or "").strip()
        if not name:
            return None
        new_id = self.state.next_id("ally")
        self.state.targets[new_id] = BuffTarget(id=new_id, name=name, kind="ally")
        self._commit()
        return new_id

    def adjust_stack(self, target_id: str, buff_id: str, delta: int, enforce_cap: bool = False) -> int:
        """
        Soma ``delta`` aos stacks (mínimo 0; zero remove a chave).
        Alvo ou buff desconhecido: nada muda. O gasto não é limitado pelo
        SPU disponível, a não ser que ``enforce_cap`` seja pedido.
        """
        target = self.state.targets.get(target_id)
        definition = self.state.catalog.get(buff_id)
        if target is None or definition is None:
            return 0
        current = target.stacks.get(buff_id)
        if enforce_cap and delta > 0:
            cost = sum(next_stack_cost(definition.base_cost, current + i) for i in range(delta))
            if cost > self.spu_totals().balance:
                log.info("Stack of %s on %s blocked by SPU cap", buff_id, target_id)
                return current
        count = target.stacks.adjust(buff_id, delta)
        self._commit()
        return count

    def set_target_notes(self, target_id: str, notes: str) -> None:
        target = self.state.targets.get(target_id)
        if target is None:
            return
        target.notes = notes or ""
        self._commit()

    def buff_totals(self, target_id: str):
        target = self.state.targets.get(target_id)
        if target is None:
            return None
        return compute_buff_totals(target, self.state.catalog)

    # ─────────────────────────────────────────────
    # Catálogo / ferramentas
    # ─────────────────────────────────────────────

    def add_custom_buff(self, name: str, base_cost: Any, description: str = "") -> Optional[BuffDefinition]:
        name = (name or "").strip()
        cost = coerce_int(base_cost, 0)
        if not name or cost <= 0:
            return None
        definition = BuffDefinition(
            id=self.state.next_id("custom"),
            name=name,
            category="custom",
            base_cost=cost,
            description=(description or "").strip() or CUSTOM_BUFF_DEFAULT_DESC,
            effect=Tagged("custom"),
        )
        self.state.catalog[definition.id] = definition
        self._commit()
        return definition

    def compute_dc(self, shadow_level: Any, proficiency_mod: Any, ability_mod: Any) -> int:
        dc = suggested_dc(shadow_level, proficiency_mod, ability_mod)
        self.state.ui.last_dc = dc
        self._commit()
        return dc

    def set_buff_tools_view(self, view: str) -> None:
        if view not in ("hide", "custom", "dc", "both"):
            return
        self.state.ui.buff_tools_view = view
        self._commit()

    def set_panel_collapsed(self, panel_id: str, collapsed: bool) -> None:
        self.state.ui.collapsed_panels[str(panel_id)] = bool(collapsed)
        self._commit()

    # ─────────────────────────────────────────────
    # Cadáveres
    # ─────────────────────────────────────────────

    def generate_corpse(
        self,
        name: str,
        durability_tier: Any,
        mode: str = "all",
        selected_ids: Optional[Iterable[str]] = None,
    ) -> Corpse:
        """
        Gera ou regenera um cadáver. A identidade é o **nome**: mesmo nome
        sobrescreve durabilidade, sombras, stats e técnicas no lugar,
        mantendo id e buffs; nome novo cria cadáver + alvo "corpse".
        """
        name = (name or "").strip() or UNNAMED_CORPSE
        durability = coerce_int(durability_tier, 1, lo=0)
        powering = select_corpse_shadows(self.state.shadows, mode, selected_ids)
        stats = build_corpse_stats(name, durability, powering, last_dc=self.state.ui.last_dc)
        techniques = gather_inherited_techniques(powering)
        shadow_ids = [sh.id for sh in powering]

        corpse = self.state.corpse_by_name(name)
        if corpse is None:
            corpse = Corpse(
                id=self.state.next_id("corpse"),
                name=name,
                durability_tier=durability,
                shadow_ids=shadow_ids,
                stats=stats,
                inherited_techniques=techniques,
            )
            self.state.corpses.append(corpse)
            log.info("Corpse %s created (%s)", corpse.id, name)
        else:
            corpse.durability_tier = durability
            corpse.shadow_ids = shadow_ids
            corpse.stats = stats
            corpse.inherited_techniques = techniques

        if corpse.id not in self.state.targets:
            self.state.targets[corpse.id] = BuffTarget(id=corpse.id, name=corpse.name, kind="corpse")
        self._commit()
        return corpse

    def corpse_shadows(self, corpse: Corpse) -> List[Shadow]:
        wanted = set(corpse.shadow_ids)
        return [sh for sh in self.state.shadows if sh.id in wanted]

    def edit_buffs_for_corpse(self, name: str) -> Optional[str]:
        corpse = self.state.corpse_by_name((name or "").strip())
        if corpse is None:
            return None
        self.select_target(corpse.id)
        return corpse.id

    # ─────────────────────────────────────────────
    # Cards de habilidade
    # ─────────────────────────────────────────────

    def add_empty_ability(self) -> AbilityCard:
        card = AbilityCard(id=self.state.next_id("ability"), target_id=self.state.ui.current_target_id)
        self.state.abilities.append(card)
        self._commit()
        return card

    def generate_stub_abilities(self) -> List[AbilityCard]:
        """Substitui a lista inteira pelos três cards-modelo."""
        dc = str(self.state.ui.last_dc or DEFAULT_STUB_DC)
        cards = []
        for template in STUB_ABILITIES:
            fields = {k: v.replace("{dc}", dc) for k, v in template.items()}
            cards.append(AbilityCard(
                id=self.state.next_id("ability"),
                target_id=self.state.ui.current_target_id,
                **fields,
            ))
        self.state.abilities = cards
        self._commit()
        return cards

    def update_ability(self, ability_id: str, **fields: str) -> Optional[AbilityCard]:
        card = self.state.ability(ability_id)
        if card is None:
            return None
        unknown = set(fields) - set(AbilityCard.TEXT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown ability fields: {sorted(unknown)}")
        for key, value in fields.items():
            setattr(card, key, "" if value is None else str(value))
        self._commit()
        return card

    def set_ability_target(self, ability_id: str, target_id: str) -> None:
        card = self.state.ability(ability_id)
        if card is None or target_id not in self.state.targets:
            return
        card.target_id = target_id
        self._commit()

    def reroll_ability(self, ability_id: str) -> None:
        card = self.state.ability(ability_id)
        if card is None:
            return
        card.description = card.description or REROLL_PLACEHOLDER
        self._commit()

    def delete_ability(self, ability_id: str) -> bool:
        before = len(self.state.abilities)
        self.state.abilities = [ab for ab in self.state.abilities if ab.id != ability_id]
        if len(self.state.abilities) == before:
            return False
        self._commit()
        return True

    def abilities_for(self, target_id: str) -> List[AbilityCard]:
        return [ab for ab in self.state.abilities if ab.target_id == target_id]

    # ─────────────────────────────────────────────
    # Geração de texto (payload)
    # ─────────────────────────────────────────────

    def generation_request(self, notes: str = "") -> Dict[str, Any]:
        """Payload enviado ao gerador de habilidades (ver ability_gen)."""
        totals = self.spu_totals()
        target = self.state.current_target
        return {
            "shadows": [
                {
                    "name": sh.name,
                    "shadowLevel": sh.shadow_level,
                    "rawMight": sh.raw_might,
                    "ttLabel": sh.template_label,
                    "active": sh.active,
                }
                for sh in self.state.shadows
            ],
            "totalAsp": totals.total,
            "spentAsp": totals.spent,
            "availableAsp": totals.available,
            "selectedBuffIds": list(target.stacks) if target else [],
            "notes": notes or "",
        }
