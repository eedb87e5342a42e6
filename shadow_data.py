# shadow_data.py
# Static catalog for the Shadow Fruit system
# Used by shadow_engine and the Streamlit panels

# =============================================
# STORAGE / DEFAULTS
# =============================================
STORAGE_KEY = "shadowFruitSystem_v2"

SELF_TARGET_ID = "self"
DEFAULT_SELF_NAME = "Elren (Primary User)"
UNNAMED_SHADOW = "Unnamed Shadow"
UNNAMED_CORPSE = "Unnamed Corpse"

DEFAULT_SHADOW_LASH_DC = 15
DEFAULT_STUB_DC = 17

# =============================================
# TIER TABLES
# =============================================
RAW_MIGHT_MAX = 20

PROF_TIERS = [
    "0 – Untrained (civilian, fodder)",
    "1 – Basic training (rookie fighter)",
    "2 – Seasoned fighter",
    "3 – Veteran specialist",
    "4 – Elite commander",
    "5 – Master combatant",
    "6 – Legendary master",
    "7 – Mythic prodigy",
    "8 – World-class monster",
    "9 – Beyond mortal limits",
]

TEMPLATE_TIERS = [
    "0 – Ordinary human (no training)",
    "1 – Trained fighter (martial)",
    "2 – Trained fighter (elite)",
    "3 – Advanced fighter with basic Haki",
    "4 – Advanced fighter with strong Haki / unique style",
    "5 – Devil Fruit user (standard)",
    "6 – Advanced fighter + Devil Fruit user",
    "7 – Mythical Devil Fruit user",
    "8 – Big Boss (Emperor-tier threat)",
    "9 – Final world boss / divine monster",
]

ABILITIES = ["STR", "DEX", "CON", "INT", "WIS", "CHA"]

TARGET_KIND_LABELS = {
    "self": "PRIMARY USER",
    "ally": "ALLY",
    "corpse": "CORPSE",
}

CORPSE_SHADOW_MODES = {
    "all": "All stored shadows",
    "active": "Active shadows only",
    "selected": "Selected shadows",
}

BUFF_TOOLS_VIEWS = {
    "hide": "Hide tools",
    "custom": "Custom buff",
    "dc": "DC helper",
    "both": "Custom buff + DC helper",
}

# =============================================
# TAGS (special powers without numeric effect)
# =============================================
TAG_META = {
    "shadow_step_30": {
        "category": "mobility",
        "short": "Shadow Step 30 ft",
        "power": (
            "Shadow Step 30 ft: As a bonus action, teleport up to 30 ft between areas "
            "of dim light or darkness (uses/round determined by DM)."
        ),
    },
    "shadow_step_60": {
        "category": "mobility",
        "short": "Shadow Step 60 ft",
        "power": (
            "Shadow Step 60 ft: As a bonus action, teleport up to 60 ft between shadows "
            "(uses/round determined by DM)."
        ),
    },
    "shadow_dash": {
        "category": "mobility",
        "short": "Shadow Dash",
        "power": (
            "Shadow Dash: Once per turn, move extra distance without provoking "
            "opportunity attacks (exact distance/uses by DM)."
        ),
    },
    "shadow_weapon": {
        "category": "other",
        "short": "Shadow Weapon",
        "power": (
            "Shadow Weapon: Conjured shadow-forged weapon counts as magical for "
            "overcoming resistance and can take any form you choose."
        ),
    },
    "shadow_redirect": {
        "category": "other",
        "short": "Shadow Redirect",
        "power": (
            "Shadow Redirect: Use a reaction to reduce damage you or a nearby creature "
            "takes and redirect some of it to another target (DM adjudicates exact values)."
        ),
    },
    "shadow_shackles": {
        "category": "other",
        "short": "Shadow Shackles",
        "power": (
            "Shadow Shackles: You can restrain foes with shadow chains that use your "
            "Shadow DC to escape or avoid."
        ),
    },
    "resistance_mundane": {
        "category": "defense",
        "short": "Resist non-magical weapons",
        "power": (
            "Resistance to Non-magical Weapons: You resist bludgeoning, piercing, and "
            "slashing damage from non-magical weapon attacks."
        ),
    },
    "custom": {
        "category": "other",
        "short": "Custom shadow effect",
        "power": (
            "Custom shadow effect: A unique shadow-based ability defined by you on the buff card."
        ),
    },
}

SHADOW_ARMOR_NIGHT_ID = "shadowArmorNight"
SHADOW_ARMOR_NIGHT_POWER = (
    "Shadow Armor of Night: While in dim light or darkness, your AC increases by "
    "the amount shown above."
)

# =============================================
# BUFF CATALOG (defaults)
# =============================================
# effect "type" values are the keys handled by shadow_engine.effect_from_dict
DEFAULT_BUFFS = [
    # ── Defensive / HP ──
    {
        "id": "temp20", "name": "+20 Temp HP", "category": "defense", "baseCost": 8,
        "description": "Gain 20 temporary hit points. Stacks add more temp HP.",
        "effect": {"type": "tempHP", "amount": 20},
    },
    {
        "id": "temp50", "name": "+50 Temp HP", "category": "defense", "baseCost": 16,
        "description": "Gain 50 temporary hit points. Stacks add more temp HP.",
        "effect": {"type": "tempHP", "amount": 50},
    },
    {
        "id": "shadowCarapace", "name": "Shadow Carapace", "category": "defense", "baseCost": 18,
        "description": "Your shadow plates harden, granting +1 AC per stack.",
        "effect": {"type": "armorClass", "amount": 1},
    },
    {
        "id": SHADOW_ARMOR_NIGHT_ID, "name": "Shadow Armor of Night", "category": "defense",
        "baseCost": 14,
        "description": "In dim light or darkness, gain +1 AC per stack.",
        "effect": {"type": "armorClassInDarkness", "amount": 1},
    },
    {
        "id": "mundaneResist", "name": "Resistance to Non-magical Weapons", "category": "defense",
        "baseCost": 20,
        "description": (
            "Gain resistance to bludgeoning, piercing, and slashing from non-magical attacks. "
            "Stacks grant extra uses per day or extra targets (DM adjudicates)."
        ),
        "effect": {"type": "tagged", "tag": "resistance_mundane"},
    },

    # ── Mobility ──
    {
        "id": "move10", "name": "+10 ft Movement", "category": "mobility", "baseCost": 10,
        "description": "Shadow-slick footing. Gain +10 ft walking speed per stack.",
        "effect": {"type": "speed", "amount": 10},
    },
    {
        "id": "shadowStep30", "name": "Shadow Step (30 ft)", "category": "mobility", "baseCost": 18,
        "description": (
            "As a bonus action, teleport up to 30 ft between areas of dim light or darkness. "
            "Stacks grant more uses per round or more targets."
        ),
        "effect": {"type": "tagged", "tag": "shadow_step_30"},
    },
    {
        "id": "shadowStep60", "name": "Shadow Step (60 ft)", "category": "mobility", "baseCost": 28,
        "description": (
            "As a bonus action, teleport up to 60 ft. Stacks increase uses or distance "
            "(DM adjudicates)."
        ),
        "effect": {"type": "tagged", "tag": "shadow_step_60"},
    },
    {
        "id": "shadowDash", "name": "Shadow Dash", "category": "mobility", "baseCost": 15,
        "description": (
            "Once per turn, move an additional distance without provoking opportunity attacks. "
            "Stacks improve distance or uses."
        ),
        "effect": {"type": "tagged", "tag": "shadow_dash"},
    },

    # ── Save bonuses ──
    {
        "id": "plus2_str_save", "name": "+2 STR Save Bonus", "category": "saves", "baseCost": 25,
        "description": (
            "Your muscles remember the shadows' strength. Gain +2 to Strength saving throws "
            "per stack."
        ),
        "effect": {"type": "saveBonus", "ability": "STR", "amountPerStack": 2},
    },
    {
        "id": "plus2_dex_save", "name": "+2 DEX Save Bonus", "category": "saves", "baseCost": 30,
        "description": "Shadow reflexes. Gain +2 to Dexterity saving throws per stack.",
        "effect": {"type": "saveBonus", "ability": "DEX", "amountPerStack": 2},
    },
    {
        "id": "plus2_con_save", "name": "+2 CON Save Bonus", "category": "saves", "baseCost": 35,
        "description": "Shadow-fortified body. Gain +2 to Constitution saving throws per stack.",
        "effect": {"type": "saveBonus", "ability": "CON", "amountPerStack": 2},
    },
]

# Advantage on saves / checks (same cost for every ability)
for _ab in ABILITIES:
    DEFAULT_BUFFS.append({
        "id": f"adv_{_ab.lower()}_save", "name": f"Advantage on {_ab} saves",
        "category": "saves", "baseCost": 25,
        "description": (
            f"Your shadow anticipates threats. You have advantage on {_ab} saving throws."
        ),
        "effect": {"type": "advantageOnSave", "ability": _ab},
    })
for _ab in ABILITIES:
    DEFAULT_BUFFS.append({
        "id": f"adv_{_ab.lower()}_check", "name": f"Advantage on {_ab} checks",
        "category": "checks", "baseCost": 25,
        "description": f"Your shadow guides your {_ab} ability checks, granting advantage.",
        "effect": {"type": "advantageOnCheck", "ability": _ab},
    })
del _ab

DEFAULT_BUFFS.extend([
    # ── Offensive / utility ──
    {
        "id": "shadowWeapon", "name": "Shadow Weapon", "category": "offense", "baseCost": 14,
        "description": (
            "Conjure a shadow-forged weapon that counts as magical for overcoming resistance. "
            "Stacks can add riders (extra damage, reach, etc.)."
        ),
        "effect": {"type": "tagged", "tag": "shadow_weapon"},
    },
    {
        "id": "shadowRedirect", "name": "Shadow Redirect", "category": "offense", "baseCost": 20,
        "description": (
            "When you or a creature within 5 ft would take damage, you can use your reaction to "
            "reduce it and redirect some to another target (DM adjudicates exact values). "
            "Stacks add more uses."
        ),
        "effect": {"type": "tagged", "tag": "shadow_redirect"},
    },
    {
        "id": "shadowShackles", "name": "Shadow Shackles", "category": "control", "baseCost": 22,
        "description": (
            "Gain an at-will restraining effect: shadow chains attempt to grapple and restrain "
            "foes. Stacks can boost the save DC or number of targets."
        ),
        "effect": {"type": "tagged", "tag": "shadow_shackles"},
    },
])

CUSTOM_BUFF_DEFAULT_DESC = "Custom shadow buff."

# =============================================
# CORPSE STAT BLOCK TEXT
# =============================================
CORPSE_STATIC_TRAITS = [
    "Shadow Instincts: Gains advantage on one type of save (STR, DEX, or CON) chosen when created.",
    "Shadow Resilience (DM option): Once per long rest, when reduced to 0 HP, it instead drops to 1 HP.",
    "Damage Resistances (DM option): Necrotic; bludgeoning, piercing, and slashing from "
    "non-magical attacks.",
    "Condition Immunities (DM option): Charmed, frightened, poisoned.",
    "Senses: Darkvision 60 ft., passive Perception ??. Languages: understands any languages it "
    "knew in life (if any).",
    "Loyalty: Obeys the shadow fruit user's commands to the best of its ability.",
]

# =============================================
# ABILITY CARDS (stub generator)
# =============================================
ABILITY_FIELDS = [
    ("Action", "action"),
    ("Range", "range"),
    ("Target", "target"),
    ("Save", "save"),
    ("DC", "dc"),
    ("Damage", "damage"),
]

REROLL_PLACEHOLDER = (
    "Shadow power surges, causing a fresh variation of the attack. "
    "Describe how the shadows change form."
)

# "{dc}" is replaced with the last computed DC (or DEFAULT_STUB_DC)
STUB_ABILITIES = [
    {
        "name": "Shadow Gale Barrage",
        "description": (
            "Conjure a flurry of razor-sharp shadow blades that slice through enemies "
            "in a 15-foot cone."
        ),
        "action": "Action",
        "range": "15-ft cone",
        "target": "All creatures in cone",
        "save": "DEX save",
        "dc": "{dc}",
        "damage": "6d8 necrotic",
        "mechanical_effect": (
            "On a failed save, full damage and targets are briefly outlined in violet shadow "
            "(no benefit from invisibility for 1 round). On a success, half damage and no outline."
        ),
        "combo_notes": "Pairs well with restraining effects or fear-based control.",
    },
    {
        "name": "Shadow Asgard Ascendant",
        "description": (
            "The user swells with stolen shadows, taking on a towering Night Emperor form "
            "wreathed in black-and-violet flames."
        ),
        "action": "Action",
        "range": "Self",
        "target": "Self",
        "save": "—",
        "dc": "",
        "damage": "Melee attacks +3d8 necrotic",
        "mechanical_effect": (
            "For 1 minute, your size increases by one category, your reach increases by 5 ft, "
            "and your melee weapon attacks deal an extra 3d8 necrotic damage."
        ),
        "combo_notes": (
            "Use when many buffs are active to maximize impact; stacks well with movement "
            "and defense buffs."
        ),
    },
    {
        "name": "Grasping Coffin",
        "description": (
            "Shadows surge up from the ground to form a coffin of chains and blades around "
            "a single target."
        ),
        "action": "Action",
        "range": "60 ft",
        "target": "One creature",
        "save": "STR or DEX save",
        "dc": "{dc}",
        "damage": "4d10 necrotic on fail, 2d10 on success",
        "mechanical_effect": (
            "On a failed save, target is restrained inside a cage of shadow chains until it "
            "escapes (action to repeat save at end of each turn). On a success, the coffin "
            "partially forms but the target slips free."
        ),
        "combo_notes": (
            "Perfect setup for multi-attack corpses or allies; can pin down bosses."
        ),
    },
]
