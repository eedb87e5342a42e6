# shadow_engine.py
"""
Engine do Shadow Fruit: modelo de dados, pontuação de sombras, curva de
custo de stacks, agregação de buffs e stat block de cadáveres.

Tudo aqui é puro ou opera só nos objetos recebidos; o estado da
aplicação e a persistência ficam em ``shadow_fruit``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Set, Tuple, Union

from shadow_data import (
    ABILITIES,
    DEFAULT_SHADOW_LASH_DC,
    PROF_TIERS,
    RAW_MIGHT_MAX,
    TEMPLATE_TIERS,
    UNNAMED_CORPSE,
    UNNAMED_SHADOW,
)


# ─────────────────────────────────────────────
# Helpers de coerção
# ─────────────────────────────────────────────

def round_half_up(x: float) -> int:
    """Arredonda .5 para cima (round() do Python arredonda para o par)."""
    return int(math.floor(x + 0.5))


def coerce_int(value: Any, default: int = 0, lo: Optional[int] = None, hi: Optional[int] = None) -> int:
    """
    Converte entrada de formulário em int (``default`` se não for numérica)
    e limita ao intervalo [lo, hi].
    """
    try:
        n = int(float(value))
    except (TypeError, ValueError, OverflowError):
        n = default
    if lo is not None:
        n = max(lo, n)
    if hi is not None:
        n = min(hi, n)
    return n


def split_technique_lines(text: str) -> List[str]:
    """Uma técnica por linha; linhas vazias e espaços nas pontas são descartados."""
    return [ln.strip() for ln in (text or "").split("\n") if ln.strip()]


# ─────────────────────────────────────────────
# Efeitos de buff (variante fechada)
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class TempHP:
    amount: int
    type: ClassVar[str] = "tempHP"


@dataclass(frozen=True)
class Speed:
    amount: int
    type: ClassVar[str] = "speed"


@dataclass(frozen=True)
class ArmorClass:
    amount: int
    type: ClassVar[str] = "armorClass"


@dataclass(frozen=True)
class ArmorClassInDarkness:
    amount: int
    type: ClassVar[str] = "armorClassInDarkness"


@dataclass(frozen=True)
class SaveBonus:
    ability: str
    amount_per_stack: int
    type: ClassVar[str] = "saveBonus"


@dataclass(frozen=True)
class AdvantageOnSave:
    ability: str
    type: ClassVar[str] = "advantageOnSave"


@dataclass(frozen=True)
class AdvantageOnCheck:
    ability: str
    type: ClassVar[str] = "advantageOnCheck"


@dataclass(frozen=True)
class Tagged:
    tag: str
    type: ClassVar[str] = "tagged"


BuffEffect = Union[
    TempHP, Speed, ArmorClass, ArmorClassInDarkness,
    SaveBonus, AdvantageOnSave, AdvantageOnCheck, Tagged,
]

# nomes usados por saves antigos da versão browser
EFFECT_TYPE_ALIASES = {
    "ac": "armorClass",
    "acDark": "armorClassInDarkness",
    "advSave": "advantageOnSave",
    "advCheck": "advantageOnCheck",
    "other": "tagged",
}


def effect_from_dict(d: Optional[dict]) -> BuffEffect:
    """Lê um efeito salvo; tipo desconhecido vira tag "custom"."""
    d = d or {}
    etype = EFFECT_TYPE_ALIASES.get(d.get("type"), d.get("type"))
    amount = coerce_int(d.get("amount"), 0)
    ability = str(d.get("ability") or "STR").upper()

    if etype == "tempHP":
        return TempHP(amount)
    if etype == "speed":
        return Speed(amount)
    if etype == "armorClass":
        return ArmorClass(amount)
    if etype == "armorClassInDarkness":
        return ArmorClassInDarkness(amount)
    if etype == "saveBonus":
        return SaveBonus(ability, coerce_int(d.get("amountPerStack"), 0))
    if etype == "advantageOnSave":
        return AdvantageOnSave(ability)
    if etype == "advantageOnCheck":
        return AdvantageOnCheck(ability)
    return Tagged(str(d.get("tag") or "custom"))


def effect_to_dict(effect: BuffEffect) -> dict:
    if isinstance(effect, (TempHP, Speed, ArmorClass, ArmorClassInDarkness)):
        return {"type": effect.type, "amount": effect.amount}
    if isinstance(effect, SaveBonus):
        return {"type": effect.type, "ability": effect.ability, "amountPerStack": effect.amount_per_stack}
    if isinstance(effect, (AdvantageOnSave, AdvantageOnCheck)):
        return {"type": effect.type, "ability": effect.ability}
    if isinstance(effect, Tagged):
        return {"type": effect.type, "tag": effect.tag}
    raise TypeError(f"Unhandled buff effect: {effect!r}")


def describe_stack_effect(effect: BuffEffect, count: int) -> str:
    """Texto curto do efeito total de ``count`` stacks (breakdown)."""
    if isinstance(effect, TempHP):
        return f"Total +{effect.amount * count} temp HP."
    if isinstance(effect, Speed):
        return f"Total +{effect.amount * count} ft speed."
    if isinstance(effect, ArmorClass):
        return f"Total +{effect.amount * count} AC."
    if isinstance(effect, ArmorClassInDarkness):
        return f"Total +{effect.amount * count} AC in dim light/darkness."
    if isinstance(effect, SaveBonus):
        return f"Total +{effect.amount_per_stack * count} to {effect.ability} saves."
    if isinstance(effect, AdvantageOnSave):
        return f"Advantage on {effect.ability} saves."
    if isinstance(effect, AdvantageOnCheck):
        return f"Advantage on {effect.ability} checks."
    if isinstance(effect, Tagged):
        return ""
    raise TypeError(f"Unhandled buff effect: {effect!r}")


# ─────────────────────────────────────────────
# Modelo de Dados
# ─────────────────────────────────────────────

@dataclass
class BuffDefinition:
    """Um buff comprável do catálogo."""
    id: str
    name: str
    category: str
    base_cost: int
    description: str = ""
    effect: BuffEffect = field(default_factory=lambda: Tagged("custom"))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "baseCost": self.base_cost,
            "description": self.description,
            "effect": effect_to_dict(self.effect),
        }

    @staticmethod
    def from_dict(d: dict) -> "BuffDefinition":
        return BuffDefinition(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            category=str(d.get("category", "custom")),
            base_cost=coerce_int(d.get("baseCost"), 1, lo=1),
            description=str(d.get("description", "")),
            effect=effect_from_dict(d.get("effect")),
        )


class StackMap:
    """
    Mapa esparso buffId -> número de stacks.

    Zero nunca é guardado: ``set`` e ``adjust`` removem a chave quando o
    resultado chega a 0, e ``get`` devolve 0 para chaves ausentes.
    """

    def __init__(self, counts: Optional[Dict[str, Any]] = None):
        self._counts: Dict[str, int] = {}
        if not isinstance(counts, dict):
            counts = {}
        for buff_id, count in counts.items():
            self.set(buff_id, count)

    def get(self, buff_id: str) -> int:
        return self._counts.get(buff_id, 0)

    def set(self, buff_id: str, count: Any) -> int:
        n = coerce_int(count, 0, lo=0)
        if n == 0:
            self._counts.pop(buff_id, None)
        else:
            self._counts[buff_id] = n
        return n

    def adjust(self, buff_id: str, delta: int) -> int:
        return self.set(buff_id, self.get(buff_id) + delta)

    def items(self) -> List[Tuple[str, int]]:
        return list(self._counts.items())

    def to_dict(self) -> Dict[str, int]:
        return dict(self._counts)

    def __contains__(self, buff_id: object) -> bool:
        return buff_id in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._counts))

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StackMap):
            return self._counts == other._counts
        if isinstance(other, dict):
            return self._counts == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"StackMap({self._counts!r})"


@dataclass
class BuffTarget:
    """Usuário, aliado ou cadáver que recebe stacks de buff."""
    id: str
    name: str
    kind: str = "ally"                       # "self" | "ally" | "corpse"
    stacks: StackMap = field(default_factory=StackMap)
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "buffs": self.stacks.to_dict(),
            "notes": self.notes,
        }

    @staticmethod
    def from_dict(d: dict) -> "BuffTarget":
        kind = d.get("type") or d.get("kind") or "ally"
        if kind not in ("self", "ally", "corpse"):
            kind = "ally"
        return BuffTarget(
            id=str(d.get("id", "")),
            name=str(d.get("name") or d.get("id", "")),
            kind=kind,
            stacks=StackMap(d.get("buffs")),
            notes=str(d.get("notes") or ""),
        )


@dataclass
class Shadow:
    """Sombra armazenada; shadow_level e power_units vêm de rescore()."""
    id: str
    name: str = UNNAMED_SHADOW
    raw_might: int = 0
    proficiency_tier: int = 0
    template_tier: int = 0
    shadow_level: int = 1
    power_units: int = 1
    active: bool = True
    technique_lines: List[str] = field(default_factory=list)

    def rescore(self) -> "ShadowScore":
        score = compute_shadow_score(self.raw_might, self.proficiency_tier, self.template_tier)
        self.raw_might = score.raw_might
        self.proficiency_tier = score.proficiency_tier
        self.template_tier = score.template_tier
        self.shadow_level = score.shadow_level
        self.power_units = score.power_units
        return score

    @property
    def techniques_text(self) -> str:
        return "\n".join(self.technique_lines)

    @property
    def template_label(self) -> str:
        return TEMPLATE_TIERS[self.template_tier]

    @property
    def proficiency_label(self) -> str:
        return PROF_TIERS[self.proficiency_tier]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "raw": self.raw_might,
            "profTier": self.proficiency_tier,
            "templateTier": self.template_tier,
            "sl": self.shadow_level,
            "spu": self.power_units,
            "active": self.active,
            "techniquesText": self.techniques_text,
        }

    @staticmethod
    def from_dict(d: dict) -> "Shadow":
        techniques = d.get("techniquesText")
        sh = Shadow(
            id=str(d.get("id", "")),
            name=str(d.get("name") or UNNAMED_SHADOW),
            raw_might=d.get("raw", 0),
            proficiency_tier=d.get("profTier", 0),
            template_tier=d.get("templateTier", 0),
            active=bool(d.get("active", True)),
            technique_lines=split_technique_lines(techniques if isinstance(techniques, str) else ""),
        )
        sh.rescore()
        return sh


@dataclass
class CorpseStats:
    """Stat block derivado de um cadáver reanimado."""
    name: str
    durability: int
    sl_sum: int
    spu_sum: int
    armor_class: int
    hit_points: int
    speed: int
    scores: Dict[str, int]
    melee_attack_bonus: int
    shadow_lash_attack_bonus: int
    shadow_lash_save_dc: int

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "durability": self.durability,
            "slSum": self.sl_sum,
            "spuSum": self.spu_sum,
            "ac": self.armor_class,
            "hp": self.hit_points,
            "speed": self.speed,
            "meleeAttackBonus": self.melee_attack_bonus,
            "shadowLashAttackBonus": self.shadow_lash_attack_bonus,
            "shadowLashSaveDC": self.shadow_lash_save_dc,
        }
        d.update(self.scores)
        return d

    @staticmethod
    def from_dict(d: dict, name: str, durability: int) -> "CorpseStats":
        scores = {ab: coerce_int(d.get(ab), 10) for ab in ABILITIES}
        sl_sum = coerce_int(d.get("slSum"), 0, lo=0)
        return CorpseStats(
            name=str(d.get("name") or name),
            durability=coerce_int(d.get("durability"), durability, lo=0),
            sl_sum=sl_sum,
            spu_sum=coerce_int(d.get("spuSum"), 0, lo=0),
            armor_class=coerce_int(d.get("ac"), 10),
            hit_points=coerce_int(d.get("hp"), 0),
            speed=coerce_int(d.get("speed"), 30),
            scores=scores,
            melee_attack_bonus=coerce_int(d.get("meleeAttackBonus"), (scores["STR"] - 10) // 2 + 5),
            shadow_lash_attack_bonus=coerce_int(d.get("shadowLashAttackBonus"), 5 + sl_sum // 4),
            shadow_lash_save_dc=coerce_int(d.get("shadowLashSaveDC"), DEFAULT_SHADOW_LASH_DC),
        )


@dataclass
class Corpse:
    id: str
    name: str
    durability_tier: int
    shadow_ids: List[str]
    stats: CorpseStats
    inherited_techniques: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "durability": self.durability_tier,
            "shadowIds": list(self.shadow_ids),
            "stats": self.stats.to_dict(),
            "inheritedTechniques": list(self.inherited_techniques),
        }

    @staticmethod
    def from_dict(d: dict, shadows: Iterable["Shadow"], last_dc: Optional[int] = None) -> "Corpse":
        """
        Lê o cadáver salvo. Ids de sombras que não existem mais são descartados;
        o stat block salvo é mantido (só muda ao regenerar) e, se faltar,
        é recalculado a partir das sombras.
        """
        durability = coerce_int(d.get("durability"), 1, lo=0)
        by_id = {sh.id: sh for sh in shadows}
        raw_ids = d.get("shadowIds")
        if not isinstance(raw_ids, list):
            raw_ids = []
        shadow_ids = [sid for sid in raw_ids if isinstance(sid, str) and sid in by_id]
        powering = [by_id[sid] for sid in shadow_ids]
        name = str(d.get("name") or UNNAMED_CORPSE)

        raw_stats = d.get("stats")
        if isinstance(raw_stats, dict) and raw_stats:
            stats = CorpseStats.from_dict(raw_stats, name, durability)
        else:
            stats = build_corpse_stats(name, durability, powering, last_dc=last_dc)

        techniques = d.get("inheritedTechniques")
        if not isinstance(techniques, list):
            techniques = gather_inherited_techniques(powering)

        return Corpse(
            id=str(d.get("id", "")),
            name=name,
            durability_tier=durability,
            shadow_ids=shadow_ids,
            stats=stats,
            inherited_techniques=[str(t) for t in techniques],
        )


@dataclass
class AbilityCard:
    """Card de habilidade (texto livre) ligado a um alvo de buff."""
    id: str
    target_id: str
    name: str = ""
    role: str = ""
    description: str = ""
    action: str = ""
    range: str = ""
    target: str = ""
    save: str = ""
    dc: str = ""
    damage: str = ""
    mechanical_effect: str = ""
    combo_notes: str = ""

    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = (
        "name", "role", "description", "action", "range", "target",
        "save", "dc", "damage", "mechanical_effect", "combo_notes",
    )

    def as_text(self) -> str:
        return (
            f"{self.name}\n{self.description}\n"
            f"Action: {self.action} | Range: {self.range} | Target: {self.target} | "
            f"Save: {self.save} DC {self.dc}\n"
            f"Damage: {self.damage}\n{self.mechanical_effect}\n{self.combo_notes}"
        )

    def summary_line(self) -> str:
        dc_text = f" (DC {self.dc})" if self.dc else ""
        return (
            f"{self.name}: {self.action or 'Action'}; Range {self.range or '—'}; "
            f"Target {self.target or '—'}; Save {self.save or '—'}{dc_text}; "
            f"Damage {self.damage or '—'}."
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "description": self.description,
            "action": self.action,
            "range": self.range,
            "target": self.target,
            "save": self.save,
            "dc": self.dc,
            "damage": self.damage,
            "mechanical": self.mechanical_effect,
            "combo": self.combo_notes,
            "targetId": self.target_id,
        }

    @staticmethod
    def from_dict(d: dict) -> "AbilityCard":
        return AbilityCard(
            id=str(d.get("id", "")),
            target_id=str(d.get("targetId") or ""),
            name=str(d.get("name") or ""),
            role=str(d.get("role") or ""),
            description=str(d.get("description") or ""),
            action=str(d.get("action") or ""),
            range=str(d.get("range") or ""),
            target=str(d.get("target") or ""),
            save=str(d.get("save") or ""),
            dc=str(d.get("dc") or ""),
            damage=str(d.get("damage") or ""),
            mechanical_effect=str(d.get("mechanical") or ""),
            combo_notes=str(d.get("combo") or ""),
        )


# ─────────────────────────────────────────────
# Shadow Scoring
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class ShadowScore:
    raw_might: int
    proficiency_tier: int
    template_tier: int
    raw_factor: float
    prof_factor: float
    template_factor: float
    overall: float
    shadow_level: int
    power_units: int


def _factor(norm: float) -> float:
    return 0.4 + 0.6 * norm


def compute_shadow_score(raw_might: Any, proficiency_tier: Any, template_tier: Any) -> ShadowScore:
    """
    Calcula Shadow Level (1–10) e SPU (1–1000).

    Cada entrada é normalizada em [0, 1] e passa por f(x) = 0.4 + 0.6x;
    os três fatores são multiplicados:
      SL  = max(1, round(overall × 10))
      SPU = max(1, round(overall² × 1000))
    SPU 1000 só com as três entradas no máximo.
    """
    prof_max = len(PROF_TIERS) - 1
    templ_max = len(TEMPLATE_TIERS) - 1
    raw = coerce_int(raw_might, 0, 0, RAW_MIGHT_MAX)
    prof = coerce_int(proficiency_tier, 0, 0, prof_max)
    templ = coerce_int(template_tier, 0, 0, templ_max)

    r = _factor(raw / RAW_MIGHT_MAX)
    p = _factor(prof / (prof_max or 1))
    t = _factor(templ / (templ_max or 1))
    overall = r * p * t

    return ShadowScore(
        raw_might=raw,
        proficiency_tier=prof,
        template_tier=templ,
        raw_factor=r,
        prof_factor=p,
        template_factor=t,
        overall=overall,
        shadow_level=max(1, round_half_up(overall * 10)),
        power_units=max(1, round_half_up(overall * overall * 1000)),
    )


def suggested_dc(shadow_level: Any, proficiency_mod: Any, ability_mod: Any) -> int:
    """DC helper: 8 + prof + ability mod + floor(SL / 2)."""
    sl = coerce_int(shadow_level, 0)
    return 8 + coerce_int(proficiency_mod, 0) + coerce_int(ability_mod, 0) + sl // 2


# ─────────────────────────────────────────────
# Cost Engine
# ─────────────────────────────────────────────

def incremental_cost(base_cost: int, stack_index: int) -> int:
    """
    Custo da k-ésima cópia de um buff:
      k = 1  -> base
      k >= 2 -> round(base × (1 + 0.5 × (k − 1)²))
    """
    if stack_index < 1:
        return 0
    if stack_index == 1:
        return base_cost
    return round_half_up(base_cost * (1 + 0.5 * (stack_index - 1) ** 2))


def cumulative_cost(base_cost: int, count: int) -> int:
    # cada passo é arredondado separadamente (sem fórmula fechada)
    total = 0
    for i in range(1, count + 1):
        total += incremental_cost(base_cost, i)
    return total


def next_stack_cost(base_cost: int, current_count: int) -> int:
    return incremental_cost(base_cost, max(0, current_count) + 1)


def spent_on_target(target: BuffTarget, catalog: Dict[str, BuffDefinition]) -> int:
    spent = 0
    for buff_id, count in target.stacks.items():
        definition = catalog.get(buff_id)
        if definition is None:
            continue
        spent += cumulative_cost(definition.base_cost, count)
    return spent


@dataclass(frozen=True)
class SpuTotals:
    total: int
    spent: int

    @property
    def balance(self) -> int:
        return self.total - self.spent

    @property
    def available(self) -> int:
        return max(0, self.balance)

    @property
    def overspent(self) -> bool:
        return self.spent > self.total


def compute_spu_totals(
    shadows: Iterable[Shadow],
    targets: Iterable[BuffTarget],
    catalog: Dict[str, BuffDefinition],
) -> SpuTotals:
    """Pool global: SPU das sombras ativas menos o gasto em todos os alvos."""
    total = sum(sh.power_units for sh in shadows if sh.active)
    spent = sum(spent_on_target(t, catalog) for t in targets)
    return SpuTotals(total=total, spent=spent)


# ─────────────────────────────────────────────
# Aggregation Engine
# ─────────────────────────────────────────────

@dataclass
class TagBucket:
    count: int
    definition: BuffDefinition


@dataclass
class BuffTotals:
    temp_hp: int = 0
    speed: int = 0
    armor_class: int = 0
    armor_class_in_darkness: int = 0
    saves: Dict[str, int] = field(default_factory=lambda: {ab: 0 for ab in ABILITIES})
    advantage_saves: Set[str] = field(default_factory=set)
    advantage_checks: Set[str] = field(default_factory=set)
    tags: Dict[str, TagBucket] = field(default_factory=dict)

    @property
    def ac_bonus(self) -> int:
        return self.armor_class + self.armor_class_in_darkness

    @property
    def is_empty(self) -> bool:
        return not (
            self.temp_hp or self.speed or self.armor_class or self.armor_class_in_darkness
            or any(self.saves.values()) or self.advantage_saves
            or self.advantage_checks or self.tags
        )


def ordered_abilities(abilities: Iterable[str]) -> List[str]:
    """Ordena atributos na ordem da ficha (STR, DEX, ...); desconhecidos no fim."""
    rank = {ab: i for i, ab in enumerate(ABILITIES)}
    return sorted(set(abilities), key=lambda ab: (rank.get(ab, len(rank)), ab))


def compute_buff_totals(target: BuffTarget, catalog: Dict[str, BuffDefinition]) -> BuffTotals:
    """
    Soma os stacks de um alvo em totais tipados.

    Advantage é flag: stacks extras não somam nada. Buffs com a mesma tag
    juntam a contagem num bucket só; o custo continua independente.
    Stacks de buffs fora do catálogo são ignorados.
    """
    totals = BuffTotals()
    for buff_id, count in target.stacks.items():
        definition = catalog.get(buff_id)
        if definition is None:
            continue
        eff = definition.effect

        if isinstance(eff, TempHP):
            totals.temp_hp += eff.amount * count
        elif isinstance(eff, Speed):
            totals.speed += eff.amount * count
        elif isinstance(eff, ArmorClass):
            totals.armor_class += eff.amount * count
        elif isinstance(eff, ArmorClassInDarkness):
            totals.armor_class_in_darkness += eff.amount * count
        elif isinstance(eff, SaveBonus):
            totals.saves[eff.ability] = totals.saves.get(eff.ability, 0) + eff.amount_per_stack * count
        elif isinstance(eff, AdvantageOnSave):
            totals.advantage_saves.add(eff.ability)
        elif isinstance(eff, AdvantageOnCheck):
            totals.advantage_checks.add(eff.ability)
        elif isinstance(eff, Tagged):
            bucket = totals.tags.setdefault(eff.tag, TagBucket(count=0, definition=definition))
            bucket.count += count
        else:
            raise TypeError(f"Unhandled buff effect: {eff!r}")

    return totals


# ─────────────────────────────────────────────
# Corpse Stat Builder
# ─────────────────────────────────────────────

def build_corpse_stats(
    name: str,
    durability_tier: Any,
    shadows: Iterable[Shadow],
    last_dc: Optional[int] = None,
) -> CorpseStats:
    """
    Monta o stat block do cadáver.

      AC    = 10 + d//2 + sl//3
      HP    = 10d + round(spu / 8)
      Speed = 30 + sl//2
      STR 10+d+sl//4 · DEX 8+sl//3 · CON 10+d+sl//5
      INT 6+sl//5 · WIS 8+sl//5 · CHA 6+sl//6
    """
    d = coerce_int(durability_tier, 1, lo=0)
    powering = list(shadows)
    sl = sum(sh.shadow_level for sh in powering)
    spu = sum(sh.power_units for sh in powering)

    scores = {
        "STR": 10 + d + sl // 4,
        "DEX": 8 + sl // 3,
        "CON": 10 + d + sl // 5,
        "INT": 6 + sl // 5,
        "WIS": 8 + sl // 5,
        "CHA": 6 + sl // 6,
    }
    return CorpseStats(
        name=name,
        durability=d,
        sl_sum=sl,
        spu_sum=spu,
        armor_class=10 + d // 2 + sl // 3,
        hit_points=d * 10 + round_half_up(spu / 8),
        speed=30 + sl // 2,
        scores=scores,
        melee_attack_bonus=(scores["STR"] - 10) // 2 + 5,
        shadow_lash_attack_bonus=5 + sl // 4,
        shadow_lash_save_dc=last_dc if last_dc else DEFAULT_SHADOW_LASH_DC,
    )


def gather_inherited_techniques(shadows: Iterable[Shadow]) -> List[str]:
    """União das linhas de técnica, na ordem em que aparecem."""
    seen: Dict[str, None] = {}
    for sh in shadows:
        for line in sh.technique_lines:
            seen.setdefault(line, None)
    return list(seen)


def select_corpse_shadows(
    shadows: List[Shadow],
    mode: str,
    selected_ids: Optional[Iterable[str]] = None,
) -> List[Shadow]:
    """Sombras que alimentam o cadáver: "all", "active" ou "selected"."""
    if mode == "all":
        return list(shadows)
    if mode == "active":
        return [sh for sh in shadows if sh.active]
    if mode == "selected":
        wanted = set(selected_ids or [])
        return [sh for sh in shadows if sh.id in wanted]
    return []
