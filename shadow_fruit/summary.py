# summary.py
"""
Painel 6: resumo por alvo.

Composição pura (sem estado novo): stats base (ficha para self/ally,
stat block para cadáver) + totais dos buffs como modificadores, poderes
das tags, cards de habilidade e breakdown de stacks/SPU. Tudo recalculado
a cada chamada.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from shadow_data import (
    ABILITIES,
    CORPSE_STATIC_TRAITS,
    SHADOW_ARMOR_NIGHT_ID,
    SHADOW_ARMOR_NIGHT_POWER,
    TAG_META,
    TARGET_KIND_LABELS,
)
from shadow_engine import (
    BuffTarget,
    BuffTotals,
    Corpse,
    Shadow,
    SpuTotals,
    compute_buff_totals,
    compute_spu_totals,
    cumulative_cost,
    describe_stack_effect,
    ordered_abilities,
)
from shadow_fruit.app_state import AppState

GLANCE_GROUPS = ("Defenses", "Mobility", "Saves & Checks", "Other")


@dataclass
class BreakdownLine:
    buff_id: str
    name: str
    count: int
    spu_spent: int
    effect_text: str

    def text(self) -> str:
        return f"{self.name} ×{self.count} ({self.spu_spent} SPU spent). {self.effect_text}".rstrip()


@dataclass
class TargetSummary:
    target_id: str
    name: str
    kind: str
    kind_label: str
    totals: BuffTotals
    # corpse: base do stat block; self/ally: None (usa a ficha)
    base_armor_class: Optional[int] = None
    base_hit_points: Optional[int] = None
    base_speed: Optional[int] = None
    shadow_power: int = 0
    shadow_dc: Optional[int] = None
    glance: Dict[str, List[str]] = field(default_factory=dict)
    power_lines: List[str] = field(default_factory=list)
    ability_lines: List[str] = field(default_factory=list)
    inherited_techniques: Optional[List[str]] = None
    breakdown: List[BreakdownLine] = field(default_factory=list)
    notes: str = ""

    @property
    def armor_class(self) -> Optional[int]:
        if self.base_armor_class is None:
            return None
        return self.base_armor_class + self.totals.ac_bonus

    @property
    def speed(self) -> Optional[int]:
        if self.base_speed is None:
            return None
        return self.base_speed + self.totals.speed

    # ── pills ──

    def ac_text(self) -> str:
        bonus = self.totals.ac_bonus
        if self.base_armor_class is not None:
            if bonus:
                return f"AC {self.armor_class} (base {self.base_armor_class} +{bonus} from buffs)"
            return f"AC {self.base_armor_class}"
        if bonus:
            return f"Your AC +{bonus} from buffs"
        return "AC: use character sheet"

    def hp_text(self) -> str:
        temp = self.totals.temp_hp
        if self.base_hit_points is not None:
            if temp:
                return f"HP ~{self.base_hit_points} +{temp} temp HP"
            return f"HP ~{self.base_hit_points}"
        if temp:
            return f"Your HP +{temp} temp HP"
        return "HP: use character sheet"

    def speed_text(self) -> str:
        bonus = self.totals.speed
        if self.base_speed is not None:
            if bonus:
                return f"Speed {self.speed} ft (base {self.base_speed} +{bonus})"
            return f"Speed {self.base_speed} ft"
        if bonus:
            return f"Your speed +{bonus} ft"
        return "Speed: use character sheet"

    def spu_text(self) -> str:
        return f"Shadow Power: {self.shadow_power} SPU"

    def dc_text(self) -> str:
        if self.shadow_dc:
            return f"Shadow DC: {self.shadow_dc}"
        return "Shadow DC: use spell save DC or DC helper"

    def pills(self) -> List[str]:
        return [self.ac_text(), self.hp_text(), self.speed_text(), self.spu_text(), self.dc_text()]


def _glance(target: BuffTarget, totals: BuffTotals) -> Dict[str, List[str]]:
    defenses: List[str] = []
    mobility: List[str] = []
    saves: List[str] = []
    other: List[str] = []

    if totals.temp_hp:
        defenses.append(f"+{totals.temp_hp} temp HP")
    if totals.armor_class:
        defenses.append(f"+{totals.armor_class} AC")
    if totals.armor_class_in_darkness:
        defenses.append(f"+{totals.armor_class_in_darkness} AC in dim light/darkness")
    if totals.speed:
        mobility.append(f"+{totals.speed} ft speed")
    for ab, val in totals.saves.items():
        if val:
            saves.append(f"+{val} {ab} saves")

    # um nome por tag, agrupado pela categoria da tag
    by_category: Dict[str, List[str]] = {"mobility": [], "defense": [], "other": []}
    for tag_id in totals.tags:
        meta = TAG_META.get(tag_id)
        if not meta:
            continue
        bucket = by_category.get(meta["category"], by_category["other"])
        if meta["short"] not in bucket:
            bucket.append(meta["short"])
    mobility.extend(by_category["mobility"])
    defenses.extend(by_category["defense"])
    other.extend(by_category["other"])

    if SHADOW_ARMOR_NIGHT_ID in target.stacks and totals.armor_class_in_darkness:
        other.append("Shadow Armor of Night")

    if totals.advantage_saves:
        saves.append(f"Advantage on {', '.join(ordered_abilities(totals.advantage_saves))} saves")
    if totals.advantage_checks:
        saves.append(f"Advantage on {', '.join(ordered_abilities(totals.advantage_checks))} checks")

    groups = dict(zip(GLANCE_GROUPS, (defenses, mobility, saves, other)))
    return {k: v for k, v in groups.items() if v}


def _power_lines(target: BuffTarget, totals: BuffTotals) -> List[str]:
    lines = [TAG_META[t]["power"] for t in totals.tags if TAG_META.get(t, {}).get("power")]
    if SHADOW_ARMOR_NIGHT_ID in target.stacks and totals.armor_class_in_darkness:
        lines.append(SHADOW_ARMOR_NIGHT_POWER)
    return lines


def _breakdown(target: BuffTarget, state: AppState) -> List[BreakdownLine]:
    lines = []
    for buff_id, count in target.stacks.items():
        definition = state.catalog.get(buff_id)
        if definition is None:
            continue
        lines.append(BreakdownLine(
            buff_id=buff_id,
            name=definition.name,
            count=count,
            spu_spent=cumulative_cost(definition.base_cost, count),
            effect_text=describe_stack_effect(definition.effect, count),
        ))
    return lines


def project_summary(state: AppState, target: BuffTarget, spu: SpuTotals) -> TargetSummary:
    totals = compute_buff_totals(target, state.catalog)
    corpse = state.corpse(target.id) if target.kind == "corpse" else None

    summary = TargetSummary(
        target_id=target.id,
        name=target.name,
        kind=target.kind,
        kind_label=TARGET_KIND_LABELS.get(target.kind, target.kind.upper()),
        totals=totals,
        shadow_power=spu.total,
        shadow_dc=state.ui.last_dc,
        glance=_glance(target, totals),
        power_lines=_power_lines(target, totals),
        ability_lines=[ab.summary_line() for ab in state.abilities if ab.target_id == target.id],
        breakdown=_breakdown(target, state),
        notes=target.notes,
    )
    if corpse is not None:
        summary.base_armor_class = corpse.stats.armor_class
        summary.base_hit_points = corpse.stats.hit_points
        summary.base_speed = corpse.stats.speed
        summary.shadow_power = corpse.stats.spu_sum
        summary.inherited_techniques = list(corpse.inherited_techniques)
    return summary


def project_summaries(state: AppState) -> List[TargetSummary]:
    spu = compute_spu_totals(state.shadows, state.targets.values(), state.catalog)
    return [project_summary(state, t, spu) for t in state.targets.values()]


# ─────────────────────────────────────────────
# Card do cadáver (painel 4)
# ─────────────────────────────────────────────

def corpse_traits(corpse: Corpse, powering: List[Shadow]) -> List[str]:
    stats = corpse.stats
    return [
        f"Corpse Durability: Tier {stats.durability} body; very hard to destroy for its size.",
        f"Infused Shadows: Powered by {len(powering)} shadow(s); total SL {stats.sl_sum}, "
        f"total {stats.spu_sum} SPU. Personality and aggression are shaped by those shadows.",
        *CORPSE_STATIC_TRAITS,
    ]


def corpse_actions(corpse: Corpse) -> List[str]:
    stats = corpse.stats
    return [
        "Multiattack: The reanimated corpse makes two attacks: one Slam and one Shadow Lash "
        "(or two Slams, DM's choice).",
        f"Slam: Melee Weapon Attack: +{stats.melee_attack_bonus} to hit, reach 5 ft., one target. "
        f"Hit: 1d10 + {stats.melee_attack_bonus} bludgeoning damage.",
        f"Shadow Lash: Melee spell-like attack: +{stats.shadow_lash_attack_bonus} to hit, reach 10 ft., "
        f"one target. Hit: 2d8 necrotic damage, and the target must succeed on a STR or DEX save "
        f"(DC {stats.shadow_lash_save_dc}) or be grappled and restrained by writhing shadow chains.",
    ]


def corpse_score_line(corpse: Corpse) -> str:
    return " · ".join(f"{ab} {corpse.stats.scores.get(ab, 10)}" for ab in ABILITIES)


# ─────────────────────────────────────────────
# Export (Markdown / "print")
# ─────────────────────────────────────────────

def summary_markdown(summaries: List[TargetSummary]) -> str:
    out: List[str] = ["# Shadow Fruit Summary", ""]
    for s in summaries:
        out.append(f"## {s.name} ({s.kind_label})")
        out.append(" · ".join(s.pills()))
        out.append("")
        out.append("**At a Glance**")
        if s.glance:
            out.extend(f"- **{group}:** {'; '.join(items)}" for group, items in s.glance.items())
        else:
            out.append("- No buffs yet.")
        out.append("")
        out.append("**Powers from Buffs**")
        out.extend(f"- {ln}" for ln in s.power_lines or ["No special powers from buffs beyond numeric bonuses."])
        out.append("")
        out.append("**Abilities & Techniques**")
        out.extend(f"- {ln}" for ln in s.ability_lines or ["No AI or custom ability cards assigned yet."])
        if s.inherited_techniques is not None:
            out.append("")
            out.append("**Inherited Shadow Techniques**")
            out.extend(f"- {t}" for t in s.inherited_techniques or ["None recorded."])
        if s.breakdown:
            out.append("")
            out.append("**Buff breakdown**")
            out.extend(f"- {ln.text()}" for ln in s.breakdown)
        if s.notes:
            out.append("")
            out.append(f"**Notes:** {s.notes}")
        out.append("")
    return "\n".join(out)
