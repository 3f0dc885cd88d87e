"""
Purchasable qualities (positive DP), grouped by rulebook section.
"""

from src.qualities.quality_data import (
    QualityCategory as C,
    QualityChoice,
    QualityTemplate,
    QualityType,
    any_of,
    quality,
)

BUY = QualityType.PURCHASABLE

# Rank caps shared by the stage-limited offensive and boosting qualities
STAGE_LIMITED_THREE = {"rookie": 1, "champion": 2, "ultimate": 3, "mega": 3, "ultra": 3}
STAGE_LIMITED_TWO = {"rookie": 1, "champion": 1, "ultimate": 2, "mega": 2, "ultra": 2}

DIGIZOID_ARMOR_IDS = (
    "digizoid-armor-chrome",
    "digizoid-armor-black",
    "digizoid-armor-brown",
    "digizoid-armor-blue",
    "digizoid-armor-gold",
    "digizoid-armor-obsidian",
    "digizoid-armor-red",
)
DIGIZOID_WEAPON_IDS = (
    "digizoid-weapon-chrome",
    "digizoid-weapon-black",
    "digizoid-weapon-brown",
    "digizoid-weapon-blue",
    "digizoid-weapon-gold",
    "digizoid-weapon-obsidian",
    "digizoid-weapon-red",
)
GAIN_FORCE_IDS = (
    "overwrite",
    "undying-inforce",
    "temporal-inforce",
    "omniscient-inforce",
    "digital-hazard",
    "zero-unit",
)
DOMAIN_CONTROL_IDS = (
    "domain-control-treacherous-fire",
    "domain-control-volatile-element",
    "domain-control-shadow-vale",
    "domain-control-sapping-strength",
    "domain-control-gusty-garden",
    "domain-control-cleansing-mist",
    "domain-control-rejuvenating-light",
    "domain-control-thunder-justice",
    "domain-control-natural-limitation",
    "domain-control-dg-dimension",
)


def _others(ids: tuple, own: str) -> tuple:
    return tuple(i for i in ids if i != own)


def _attack_effect(id: str, name: str, dp_cost: int, description: str, effect: str) -> QualityTemplate:
    """An Attack Effect quality: grants its tag to one attack."""
    return quality(
        id,
        name,
        BUY,
        C.ATTACK_EFFECTS,
        dp_cost=dp_cost,
        type_tags=("attack",),
        description=description,
        effect=effect,
    )


def _domain(id: str, name: str, dp_cost: int, description: str, effect: str) -> QualityTemplate:
    """A Domain Control quality of the Element Master tree."""
    return quality(
        id,
        f"Domain Control: {name}",
        BUY,
        C.ADVANCED,
        dp_cost=dp_cost,
        type_tags=("trigger",),
        prerequisites=("Element Master",),
        description=description,
        effect=effect,
    )


# =============================================================================
# DATA OPTIMIZATION (3.03)
# =============================================================================

DATA_OPTIMIZATION_QUALITIES: list[QualityTemplate] = [
    quality(
        "data-optimization",
        "Data Optimization",
        BUY,
        C.DATA_OPTIMIZATION,
        dp_cost=1,
        description="Choose a combat role optimization. Can only take once.",
        effect="Choose one optimization to define your Digimon's combat role.",
        choices=(
            QualityChoice("close-combat", "Close Combat", "+2 Accuracy with [Melee], -1 with [Ranged].", 1),
            QualityChoice("ranged-striker", "Ranged Striker", "+2 Accuracy with [Ranged], -1 Dodge vs [Melee].", 1),
            QualityChoice("guardian", "Guardian", "+2 Armor, -1 Base Movement.", 1),
            QualityChoice("brawler", "Brawler", "+2 to Clash checks, one Size Class larger when Clashing.", 2),
            QualityChoice("speed-striker", "Speed Striker", "+2 Base Movement.", 1),
            QualityChoice("effect-warrior", "Effect Warrior", "+1 to base Spec Values, -2 Armor.", 2),
        ),
    ),
    quality(
        "data-specialization",
        "Data Specialization",
        BUY,
        C.DATA_SPECIALIZATION,
        dp_cost=2,
        max_ranks=2,
        type_tags=("static", "attack", "trigger"),
        prerequisites=("Data Optimization",),
        stage_requirement="ultimate",
        max_ranks_by_stage={"ultimate": 1, "mega": 1, "ultra": 2},
        description="Advanced specialization based on your Data Optimization. Rank 2 requires Ultra.",
        effect="Choose a specialization from the tree of your Data Optimization.",
        choices=(
            QualityChoice("fistful-of-force", "Fistful of Force", "Melee hits push the target.", 2, ("close-combat",)),
            QualityChoice("flurry", "Flurry", "Split a melee attack across adjacent targets.", 3, ("close-combat",)),
            QualityChoice("sniper", "Sniper", "Ignore cover penalties at long range.", 2, ("ranged-striker",)),
            QualityChoice("mobile-artillery", "Mobile Artillery", "Move and fire without penalty.", 3, ("ranged-striker",)),
            QualityChoice("what-goes-around", "What Goes Around", "Reflect damage when guarding.", 2, ("guardian",)),
            QualityChoice("true-guardian", "True Guardian", "Intercede for allies at any range.", 3, ("guardian",)),
            QualityChoice("power-throw", "Power Throw", "Throw grappled targets.", 2, ("brawler",)),
            QualityChoice("wrestlemania", "Wrestlemania", "Grapple as a Simple Action.", 3, ("brawler",)),
            QualityChoice("hit-and-run", "Hit and Run", "Move after attacking.", 2, ("speed-striker",)),
            QualityChoice("uncatchable-target", "Uncatchable Target", "Bonus Dodge after moving.", 3, ("speed-striker",)),
            QualityChoice("black-mage", "Black Mage", "Negative effects last longer.", 3, ("effect-warrior",)),
            QualityChoice("white-mage", "White Mage", "Positive effects last longer.", 2, ("effect-warrior",)),
        ),
    ),
    quality(
        "hybrid-drive",
        "Hybrid Drive",
        BUY,
        C.DATA_OPTIMIZATION,
        dp_cost=3,
        max_ranks=2,
        prerequisites=("Data Optimization",),
        stage_requirement="ultimate",
        description="Access Data Specializations from adjacent optimization trees.",
        effect="Per Rank: treat one adjacent Data Optimization as owned for Data Specialization.",
    ),
]


# =============================================================================
# EXTRA MOVEMENT (3.03a)
# =============================================================================

EXTRA_MOVEMENT_QUALITIES: list[QualityTemplate] = [
    quality(
        "extra-movement",
        "Extra Movement",
        BUY,
        C.EXTRA_MOVEMENT,
        dp_cost=1,
        max_ranks=5,
        description="Gain a new movement type. Champion+ gets 1 DP discount on first rank.",
        effect="Choose a movement type. Move in that terrain at Speed score.",
        choices=(
            QualityChoice("digger", "Digger", "Burrow through dirt, snow, or sand at Movement speed.", 1),
            QualityChoice("swimmer", "Swimmer", "Move through water at Movement speed.", 1),
            QualityChoice("flight", "Flight", "Fly through the air.", 2),
            QualityChoice("wallclimber", "Wallclimber", "Scale vertical surfaces (not ceilings).", 1),
            QualityChoice("jumper", "Jumper", "Jump height and length equal to Movement.", 1),
        ),
    ),
    quality(
        "advanced-mobility",
        "Advanced Mobility",
        BUY,
        C.EXTRA_MOVEMENT,
        dp_cost=2,
        max_ranks=6,
        prerequisites=("Extra Movement",),
        description="Enhance an Extra Movement type.",
        effect="Choose an Extra Movement type you have. Gain enhanced benefits.",
        choices=(
            QualityChoice("adv-movement", "Movement", "Speedy can now triple Base Movement.", 2, ("speedy",)),
            QualityChoice("adv-flight", "Flight", "Not slowed by harsh winds. Flight speed +RAM.", 2, ("flight",)),
            QualityChoice("adv-digger", "Digger", "Dig through most surfaces. Dig speed +RAM.", 2, ("digger",)),
            QualityChoice("adv-swimmer", "Swimmer", "Not slowed by harsh currents. Swim speed +RAM.", 2, ("swimmer",)),
            QualityChoice("adv-wallclimber", "Wallclimber", "Walk on ceilings. Climb speed +RAM.", 2, ("wallclimber",)),
            QualityChoice("adv-jumper", "Jumper", "Jump height +CPU x5. Jump length +CPU.", 2, ("jumper",)),
        ),
    ),
    quality(
        "speedy",
        "Speedy",
        BUY,
        C.EXTRA_MOVEMENT,
        dp_cost=1,
        max_ranks=10,
        description="+2 Movement per rank. Cannot more than double Base Movement.",
        effect="Per Rank: +2 Movement. Cannot exceed 2x Base Movement.",
    ),
    quality(
        "teleport",
        "Teleport",
        BUY,
        C.EXTRA_MOVEMENT,
        dp_cost=3,
        type_tags=("trigger",),
        prerequisites=("Speedy Rank 3",),
        description="Instant teleportation with dodge ability.",
        effect=(
            "Teleport Base Movement+2 meters within line of sight. Once per battle, teleport to "
            "avoid an attack and forfeit a Simple Action next round."
        ),
    ),
    quality(
        "transporter",
        "Transporter",
        BUY,
        C.EXTRA_MOVEMENT,
        dp_cost=2,
        prerequisites=("Teleport",),
        description="Bring allies with Teleport.",
        effect="Teleport adjacent allies with you. Transported allies forfeit one Simple Action.",
    ),
]


# =============================================================================
# OFFENSIVE (3.04), COUNTERATTACK (3.04a), STEALTH (3.04b)
# =============================================================================

OFFENSIVE_QUALITIES: list[QualityTemplate] = [
    quality(
        "armor-piercing",
        "Armor Piercing",
        BUY,
        C.OFFENSIVE,
        dp_cost=1,
        max_ranks=3,
        type_tags=("attack",),
        limited_tag=True,
        max_ranks_by_stage=STAGE_LIMITED_THREE,
        description="Ignore armor on one attack. Ranks limited by stage.",
        effect="[LIMITED] Per Rank: the tagged attack ignores 2 points of Armor.",
    ),
    quality(
        "charge-attack",
        "Charge Attack",
        BUY,
        C.OFFENSIVE,
        dp_cost=1,
        type_tags=("attack",),
        description="Move and attack as one Simple Action.",
        effect="The tagged melee attack includes a move of up to Movement in a straight line.",
    ),
    quality(
        "mighty-blow",
        "Mighty Blow",
        BUY,
        C.OFFENSIVE,
        dp_cost=2,
        type_tags=("attack",),
        stage_requirement="champion",
        description="Stun on high damage.",
        effect="If the tagged attack deals damage of at least the target's CPU, the target is Stunned.",
    ),
    quality(
        "certain-strike",
        "Certain Strike",
        BUY,
        C.OFFENSIVE,
        dp_cost=2,
        max_ranks=2,
        type_tags=("attack",),
        limited_tag=True,
        max_ranks_by_stage=STAGE_LIMITED_TWO,
        description="Automatic successes on one attack.",
        effect="[LIMITED] Per Rank: the tagged attack gains one automatic Accuracy success.",
    ),
    quality(
        "weapon",
        "Weapon",
        BUY,
        C.OFFENSIVE,
        dp_cost=1,
        max_ranks=3,
        type_tags=("attack",),
        limited_tag=True,
        exclusive_with=("instinct",),
        max_ranks_by_stage=STAGE_LIMITED_THREE,
        description="Bonus to weapon attacks. Ranks limited by stage.",
        effect="[LIMITED] Per Rank: +1 Accuracy and +1 Damage with the [Weapon] tagged attack.",
    ),
    quality(
        "slayer",
        "Slayer",
        BUY,
        C.OFFENSIVE,
        dp_cost=1,
        description="Bonus vs specific enemy type.",
        effect="Choose a Family or Attribute. +Stage Bonus Damage against Digimon of that kind.",
    ),
    quality(
        "huge-power",
        "Huge Power",
        BUY,
        C.OFFENSIVE,
        dp_cost=2,
        type_tags=("trigger", "attack"),
        description="Reroll 1s on Accuracy.",
        effect="Reroll Accuracy dice showing 1 once per attack.",
    ),
    quality(
        "overkill",
        "Overkill",
        BUY,
        C.OFFENSIVE,
        dp_cost=2,
        type_tags=("trigger", "attack"),
        prerequisites=("Huge Power",),
        description="Reroll 2s on Accuracy.",
        effect="Reroll Accuracy dice showing 2 once per attack.",
    ),
    quality(
        "aggressive-flank",
        "Aggressive Flank",
        BUY,
        C.OFFENSIVE,
        dp_cost=2,
        description="Accuracy bonus when near allies.",
        effect="+1 Accuracy for each ally adjacent to your target, maximum +Stage Bonus.",
    ),
    quality(
        "coordinated-assault",
        "Coordinated Assault",
        BUY,
        C.OFFENSIVE,
        dp_cost=3,
        type_tags=("trigger",),
        prerequisites=("Aggressive Flank",),
        description="Mark a target for increased penalties.",
        effect="Mark a target as a Simple Action. Allies attacking it gain the Aggressive Flank bonus.",
    ),
    quality(
        "area-attack",
        "Area Attack",
        BUY,
        C.OFFENSIVE,
        dp_cost=2,
        max_ranks=6,
        type_tags=("trigger", "attack"),
        description="Add an area tag to an attack. Different tag per rank.",
        effect="Apply an [Area Tag] to an Attack. Each rank = different tag and attack.",
        choices=(
            QualityChoice("blast", "Blast", "[Ranged only] Circle at range. 3m diameter +BIT."),
            QualityChoice("burst", "Burst", "[Melee/Ranged] Circle from user. 1m radius +BIT+1."),
            QualityChoice("close-blast", "Close Blast", "[Melee/Ranged] Circle adjacent to user. 2m radius +BIT."),
            QualityChoice("cone", "Cone", "[Melee/Ranged] Triangle from user. 3m length +BIT."),
            QualityChoice("line", "Line", "[Melee/Ranged] Pillar from user. 5m length +BIT x2."),
            QualityChoice("pass", "Pass", "[Melee only] Charge in line, hit all targets."),
        ),
    ),
    quality(
        "counterattack",
        "Counterattack",
        BUY,
        C.COUNTERATTACK,
        dp_cost=2,
        type_tags=("trigger", "attack"),
        description="Free attack when enemy misses.",
        effect="Once per combat, if an enemy misses, make a free single-target attack. Target rolls half Dodge.",
    ),
    quality(
        "counterblow",
        "Counterblow",
        BUY,
        C.COUNTERATTACK,
        dp_cost=3,
        type_tags=("trigger", "attack"),
        prerequisites=("Counterattack",),
        description="Counter attack ignores half armor.",
        effect="Counterattacks ignore half of the target's Armor.",
    ),
    quality(
        "cross-counter",
        "Cross Counter",
        BUY,
        C.COUNTERATTACK,
        dp_cost=3,
        type_tags=("trigger", "attack"),
        prerequisites=("Counterattack",),
        exclusive_with=("combat-monster",),
        description="Counter melee without using once-per-fight.",
        effect="Counterattack against [Melee] attacks does not use the once-per-combat allowance.",
    ),
    quality(
        "hide-in-plain-sight",
        "Hide in Plain Sight",
        BUY,
        C.STEALTH,
        dp_cost=2,
        description="Harder to spot.",
        effect="+Stage Bonus to Stealth checks. May hide while observed if in cover.",
    ),
    quality(
        "shade-cloak",
        "Shade Cloak",
        BUY,
        C.STEALTH,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Hide in Plain Sight",),
        description="Extend hiding bonus to allies.",
        effect="Adjacent allies share your Hide in Plain Sight bonus.",
    ),
    quality(
        "sneak-attack",
        "Sneak Attack",
        BUY,
        C.STEALTH,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Hide in Plain Sight",),
        description="Bonus damage from stealth.",
        effect="Attacks made while hidden deal +Stage Bonus damage.",
    ),
    quality(
        "glamor",
        "Glamor",
        BUY,
        C.STEALTH,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Shade Cloak",),
        exclusive_with=("illusionary-overlay",),
        description="Disguise allies.",
        effect="Disguise yourself or an ally as another Digimon of the same size.",
    ),
    quality(
        "illusionary-overlay",
        "Illusionary Overlay",
        BUY,
        C.STEALTH,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Shade Cloak",),
        exclusive_with=("glamor",),
        description="Create environmental illusions.",
        effect="Overlay an area with an illusion of terrain or objects.",
    ),
    quality(
        "substitute",
        "Substitute",
        BUY,
        C.STEALTH,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Sneak Attack",),
        description="Escape hit with a decoy.",
        effect="Once per battle, a hit instead strikes a decoy and you move up to Movement.",
    ),
]


# =============================================================================
# DEFENSIVE (3.05), COMBAT MONSTER (3.05a)
# =============================================================================

DEFENSIVE_QUALITIES: list[QualityTemplate] = [
    quality(
        "absolute-evasion",
        "Absolute Evasion",
        BUY,
        C.DEFENSIVE,
        dp_cost=3,
        max_ranks=2,
        limited_tag=True,
        exclusive_with=("uncatchable-target",),
        max_ranks_by_stage=STAGE_LIMITED_TWO,
        description="Auto-successes on dodge that diminish.",
        effect="Per Rank: gain automatic Dodge successes that diminish by one per attack this round.",
    ),
    quality(
        "agility",
        "Agility",
        BUY,
        C.DEFENSIVE,
        dp_cost=2,
        type_tags=("trigger",),
        description="Reroll 1s on Dodge.",
        effect="Reroll Dodge dice showing 1 once per attack.",
    ),
    quality(
        "avoidance",
        "Avoidance",
        BUY,
        C.DEFENSIVE,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Agility",),
        description="Reroll 2s on Dodge.",
        effect="Reroll Dodge dice showing 2 once per attack.",
    ),
    quality(
        "combat-awareness",
        "Combat Awareness",
        BUY,
        C.DEFENSIVE,
        dp_cost=1,
        max_ranks=3,
        description="First round bonuses.",
        effect="Per Rank: +1 Initiative and +1 Dodge during the first round of combat.",
    ),
    quality(
        "combat-monster",
        "Combat Monster",
        BUY,
        C.COMBAT_MONSTER,
        dp_cost=2,
        description="Damage taken adds to next attack.",
        effect="Wound Boxes lost since your last turn add to the Damage of your next attack.",
    ),
    quality(
        "berserker",
        "Berserker",
        BUY,
        C.COMBAT_MONSTER,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Combat Monster",),
        exclusive_with=("braveheart", "positive-reinforcement"),
        description="Rage meter for bonuses and penalties.",
        effect="Gain a Rage Meter that fills when hit and grants Damage at the cost of Dodge.",
    ),
    quality(
        "boiling-blood",
        "Boiling Blood",
        BUY,
        C.COMBAT_MONSTER,
        dp_cost=1,
        max_ranks=3,
        prerequisites=("Berserker",),
        description="Slower rage decay.",
        effect="Per Rank: Rage decays one round later.",
    ),
    quality(
        "you-wont-like-me-when-im-angry",
        "You Won't Like Me When I'm Angry",
        BUY,
        C.COMBAT_MONSTER,
        dp_cost=3,
        prerequisites=("Boiling Blood",),
        description="Double rage meter capacity.",
        effect="The Rage Meter uses 4d6 (range 4-24); adjust its thresholds to match.",
    ),
    quality(
        "braveheart",
        "Braveheart",
        BUY,
        C.COMBAT_MONSTER,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Combat Monster",),
        exclusive_with=("berserker", "gain-force-overwrite", "undying-inforce"),
        description="Guard stance when low HP.",
        effect="Below half Wound Boxes, take [Brave Stance] as a Simple Action.",
    ),
    quality(
        "one-for-all",
        "One for All",
        BUY,
        C.COMBAT_MONSTER,
        dp_cost=2,
        type_tags=("static", "trigger"),
        prerequisites=("Combat Monster", "Braveheart"),
        stage_requirement="ultimate",
        description="Combat Monster shares with allies.",
        effect="Damage taken by adjacent allies also counts toward your Combat Monster bonus.",
    ),
]


# =============================================================================
# BOOSTING (3.06), UTILITY (3.07), SUPPORT (3.08)
# =============================================================================

BOOSTING_QUALITIES: list[QualityTemplate] = [
    quality(
        "improved-derived-stat",
        "Improved Derived Stat",
        BUY,
        C.BOOSTING,
        dp_cost=1,
        max_ranks=30,
        description='+1 to a Derived Stat. Makes stat "trained".',
        effect="Per Rank: +1 to a Derived Stat, up to 10 per stat.",
    ),
    quality(
        "system-boost",
        "System Boost",
        BUY,
        C.BOOSTING,
        dp_cost=3,
        max_ranks=9,
        description="+1 to a Spec Value. Max 3 per stat, cannot exceed 2x base.",
        effect="Per Rank: +1 to BIT, RAM or CPU.",
    ),
    quality(
        "prodigious-skill",
        "Prodigious Skill",
        BUY,
        C.BOOSTING,
        dp_cost=2,
        max_ranks=15,
        prerequisites=("Improved Derived Stat",),
        description="Use full Derived Stat for a specific skill.",
        effect="Per Rank: choose a skill; checks with it use the full Derived Stat.",
    ),
    quality(
        "instinct",
        "Instinct",
        BUY,
        C.BOOSTING,
        dp_cost=1,
        max_ranks=3,
        limited_tag=True,
        exclusive_with=("weapon",),
        max_ranks_by_stage=STAGE_LIMITED_THREE,
        description="+Rank to Dodge, Health, Base Movement. Ranks limited by stage.",
        effect="Per Rank: +1 Dodge, +1 Health and +1 Base Movement.",
    ),
    quality(
        "reach",
        "Reach",
        BUY,
        C.BOOSTING,
        dp_cost=2,
        max_ranks=3,
        description="Extended melee range.",
        effect="Per Rank: [Melee] attacks reach one additional meter.",
    ),
    quality(
        "technician",
        "Technician",
        BUY,
        C.UTILITY,
        dp_cost=1,
        max_ranks=3,
        description="Bonus to repair and code work.",
        effect="Per Rank: +1 to checks to repair machines or edit code.",
    ),
    quality(
        "firewall",
        "Firewall",
        BUY,
        C.UTILITY,
        dp_cost=2,
        prerequisites=("Technician Rank 1",),
        description="Bonus to protect code. Unlock more Technician ranks.",
        effect="+2 to resist intrusion. Technician may exceed its normal rank cap by one.",
    ),
    quality(
        "trojan",
        "Trojan",
        BUY,
        C.UTILITY,
        dp_cost=2,
        prerequisites=("Technician Rank 1",),
        description="Bonus to infiltrate systems. Unlock more Technician ranks.",
        effect="+2 to infiltrate systems. Technician may exceed its normal rank cap by one.",
    ),
    quality(
        "tracker",
        "Tracker",
        BUY,
        C.UTILITY,
        dp_cost=1,
        max_ranks=3,
        description="Bonus to finding targets.",
        effect="Per Rank: +1 to checks to track or locate a target.",
    ),
    quality(
        "tumbler",
        "Tumbler",
        BUY,
        C.UTILITY,
        dp_cost=1,
        description="Reduced fall/throw damage.",
        effect="Halve damage from falls and throws.",
    ),
    quality(
        "naturewalk",
        "Naturewalk",
        BUY,
        C.UTILITY,
        dp_cost=0,
        max_ranks=2,
        type_tags=("static", "trigger"),
        description="At home in certain terrain. First rank free.",
        effect="Choose a terrain. Ignore difficult terrain of that type and gain +1 Dodge within it.",
    ),
    quality(
        "quick-healer",
        "Quick Healer",
        BUY,
        C.SUPPORT,
        dp_cost=1,
        type_tags=("trigger",),
        description="Reroll 1s on Recovery checks.",
        effect="Reroll Recovery dice showing 1.",
    ),
    quality(
        "regenerator",
        "Regenerator",
        BUY,
        C.SUPPORT,
        dp_cost=1,
        max_ranks=3,
        prerequisites=("Quick Healer",),
        description="Guaranteed recovery.",
        effect="Per Rank: recover one Wound Box at the end of each battle.",
    ),
    quality(
        "second-wind",
        "Second Wind",
        BUY,
        C.SUPPORT,
        dp_cost=1,
        type_tags=("trigger",),
        prerequisites=("Quick Healer", "Regenerator Rank 1"),
        description="Recovery during combat.",
        effect="Once per battle, as a Complex Action, recover Regenerator rank Wound Boxes.",
    ),
    quality(
        "resistant",
        "Resistant",
        BUY,
        C.SUPPORT,
        dp_cost=1,
        max_ranks=3,
        description="Shorter effect durations.",
        effect="Per Rank: effects on this Digimon last one round less (minimum 1).",
    ),
    quality(
        "decisive-defenses",
        "Decisive Defenses",
        BUY,
        C.SUPPORT,
        dp_cost=2,
        prerequisites=("Resistant Rank 3",),
        description="Resistant only affects negative effects.",
        effect="Resistant no longer shortens positive effects.",
    ),
    quality(
        "selective-targeting",
        "Selective Targeting",
        BUY,
        C.SUPPORT,
        dp_cost=2,
        description="Area attacks don't hit allies.",
        effect="Allies inside your Area Attacks are not targeted.",
    ),
    quality(
        "crybaby",
        "Crybaby",
        BUY,
        C.SUPPORT,
        dp_cost=1,
        type_tags=("trigger",),
        description="Allies intercede without penalty.",
        effect="Allies interceding for this Digimon do not lose actions.",
    ),
    quality(
        "pack-master",
        "Pack Master",
        BUY,
        C.SUPPORT,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Crybaby",),
        description="Allies intercede from further away.",
        effect="Allies may intercede from up to RAM meters away.",
    ),
]


# =============================================================================
# ATTACK EFFECTS (3.09), SIGNATURE MOVE (3.11)
# =============================================================================

ATTACK_EFFECT_QUALITIES: list[QualityTemplate] = [
    quality(
        "signature-move",
        "Signature Move",
        BUY,
        C.SIGNATURE_MOVE,
        dp_cost=3,
        type_tags=("trigger", "attack"),
        description="Powerful attack with cooldown.",
        effect=(
            "Available Round 3+. [Damage] attacks add the attack count to Accuracy and Damage; "
            "[Support] attacks add +2 to the favored Spec Value. Two full rounds of cooldown."
        ),
    ),
    # [P] positive, [N/A] non-aligned, [N] negative
    _attack_effect(
        "effect-immobilize", "Immobilize", 1,
        "[N] Reduces target movement.",
        "Target suffers a BIT-based movement penalty for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-taunt", "Taunt", 1,
        "[N] Forces target to attack you.",
        "Target must focus its attacks on you for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-fear", "Fear", 1,
        "[N] Accuracy penalty on target.",
        "Target suffers a BIT-based Accuracy penalty for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-knockback", "Knockback", 1,
        "[N/A] Push target away.",
        "Push the target away from you by the effect's potency.",
    ),
    _attack_effect(
        "effect-pull", "Pull", 1,
        "[N/A] Pull target toward you.",
        "Pull the target toward you by the effect's potency.",
    ),
    _attack_effect(
        "effect-poison", "Poison", 2,
        "[N] Damage over time, min 3 rounds.",
        "Target takes damage each round for at least 3 rounds; Resistant cannot cut it below 3.",
    ),
    _attack_effect(
        "effect-confuse", "Confuse", 2,
        "[N] Random targeting.",
        "Target may attack its allies at random for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-stun", "Stun", 2,
        "[N] Target loses actions.",
        "Target loses actions for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-lifesteal", "Lifesteal", 2,
        "[N/A] Heal from damage dealt.",
        "Recover Wound Boxes equal to the damage dealt after Armor.",
    ),
    _attack_effect(
        "effect-vigor", "Vigor", 2,
        "[P] Boost ally damage.",
        "Support attack: ally gains a Damage bonus. Single target rolls Health for duration, minimum 1 round.",
    ),
    _attack_effect(
        "effect-fury", "Fury", 2,
        "[P] Boost ally accuracy.",
        "Support attack: ally gains an Accuracy bonus. Single target rolls Health for duration, minimum 1 round.",
    ),
    _attack_effect(
        "effect-cleanse", "Cleanse", 2,
        "[P] Remove negative effects.",
        "Support attack: every negative effect on the ally drops to 1 round remaining, Poison included.",
    ),
    _attack_effect(
        "effect-haste", "Haste", 2,
        "[P] Grant extra action.",
        "Support attack: ally gains an extra Simple Action. Single target needs no Health roll.",
    ),
    _attack_effect(
        "effect-strengthen", "Strengthen", 2,
        "[P] Boost ally armor.",
        "Support attack: ally gains an Armor bonus. Single target rolls Health for duration.",
    ),
    _attack_effect(
        "effect-weaken", "Weaken", 2,
        "[N] Reduce target armor.",
        "Target suffers an Armor penalty for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-swiftness", "Swiftness", 2,
        "[P] Boost ally dodge.",
        "Support attack: ally gains a Dodge bonus. Single target rolls Health for duration.",
    ),
    _attack_effect(
        "effect-vigilance", "Vigilance", 2,
        "[P] Boost ally movement.",
        "Support attack: ally gains a Movement bonus. Single target rolls Health for duration.",
    ),
    _attack_effect(
        "effect-distract", "Distract", 2,
        "[N] Reduce target dodge.",
        "Target suffers a Dodge penalty for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-exploit", "Exploit", 2,
        "[N] Reduce target damage.",
        "Target suffers a Damage penalty for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-pacify", "Pacify", 2,
        "[N] Prevent target attacks.",
        "Target cannot attack for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-blind", "Blind", 3,
        "[N] Severe accuracy/dodge penalty.",
        "Target suffers severe Accuracy and Dodge penalties for leftover Accuracy successes in rounds.",
    ),
    _attack_effect(
        "effect-paralysis", "Paralysis", 3,
        "[N] Target cannot act.",
        "Target cannot take actions for leftover Accuracy successes in rounds. Breaks Overwrite.",
    ),
    _attack_effect(
        "effect-dot", "DOT", 3,
        "[N] Damage over time (severe).",
        "Target takes heavy damage each round. Breaks Overwrite.",
    ),
    _attack_effect(
        "effect-shield", "Shield", 3,
        "[P] Grant temporary wound boxes.",
        "Support attack: ally gains Temporary Wound Boxes. Cannot target yourself without [Area Attack].",
    ),
    _attack_effect(
        "effect-regenerate", "Regenerate", 3,
        "[P] Heal over time.",
        "Support attack: ally recovers Wound Boxes each round. Single target rolls Health for duration.",
    ),
    _attack_effect(
        "effect-lag", "Lag", 3,
        "[N] Move target to end of initiative.",
        "Target moves to the end of the initiative order. Breaks Overwrite and blocks Temporal InForce.",
    ),
    _attack_effect(
        "effect-burn", "Burn", 3,
        "[N] Damage over time (fire).",
        "Target takes fire damage each round. Naturewalk: Fire prevents it.",
    ),
]


# =============================================================================
# ADVANCED (3.10)
# =============================================================================

ADVANCED_QUALITIES: list[QualityTemplate] = [
    quality(
        "element-master",
        "Element Master",
        BUY,
        C.ADVANCED,
        dp_cost=2,
        type_tags=("trigger",),
        prerequisites=("Naturewalk",),
        description="Manipulate your element.",
        effect="Choose an element. Shape it as a Simple Action within RAM meters.",
    ),
    _domain(
        "domain-control-treacherous-fire", "Treacherous Fire", 1,
        "[Stationary] Fire/Water: Difficult terrain + Burn.",
        "Stationary domain for Stage Bonus rounds. Terrain is difficult and those inside suffer [Burn] at BIT/2.",
    ),
    _domain(
        "domain-control-volatile-element", "Volatile Element", 2,
        "[Aura] Fire/Water: Attacks treated as Exploit.",
        "Aura domain for Stage Bonus rounds. Every target inside counts as having [Exploit] at BIT/2.",
    ),
    _domain(
        "domain-control-shadow-vale", "Shadow Vale", 1,
        "[Aura] Earth/Darkness: Fear at round start.",
        "Aura domain for Stage Bonus rounds. [Fear] at BIT/2 hits everyone inside at the start of each round.",
    ),
    _domain(
        "domain-control-sapping-strength", "Sapping Strength", 2,
        "[Stationary] Earth/Darkness: Lifesteal chance.",
        "Stationary domain. Roll 1d6 per target, up to BIT targets; on 5+ steal 1 Wound Box with [Lifesteal].",
    ),
    _domain(
        "domain-control-gusty-garden", "Gusty Garden", 1,
        "[Aura] Wind/Ice: Difficult terrain + Knockback.",
        "Aura domain. Terrain is difficult without Advanced Flight; [Knockback] of CPU at the start of each round.",
    ),
    _domain(
        "domain-control-cleansing-mist", "Cleansing Mist", 2,
        "[Aura] Wind/Ice: Cleanse all effects.",
        "Aura domain. [Cleanse] on entry and at each round start sets every effect to 1 round, Poison included.",
    ),
    _domain(
        "domain-control-rejuvenating-light", "Rejuvenating Light", 1,
        "[Stationary] Thunder/Light: Regenerate.",
        "Stationary domain. [Regenerate] applies to everyone inside at the start of each round.",
    ),
    _domain(
        "domain-control-thunder-justice", "Thunder Justice", 2,
        "[Aura] Thunder/Light: Paralysis chance.",
        "Aura domain. Roll 1d6 per target, up to BIT targets; on 5+ inflict [Paralysis] for that turn.",
    ),
    _domain(
        "domain-control-natural-limitation", "Natural Limitation", 1,
        "[Stationary] Wood/Steel: Only your minions allowed.",
        "Stationary domain. Foreign minions contest 1d6 each round; a loss removes one permanently.",
    ),
    _domain(
        "domain-control-dg-dimension", "DG Dimension", 2,
        "[Stationary] Wood/Steel: DOT on failed contest.",
        "Stationary domain. Up to BIT/2 targets contest 1d6; losers suffer [DOT] for 1 round. Re-contest every other round.",
    ),
    quality(
        "adaptive-element",
        "Adaptive Element",
        BUY,
        C.ADVANCED,
        dp_cost=1,
        prerequisites=("Element Master", any_of("Domain Control", *DOMAIN_CONTROL_IDS)),
        description="Apply any domain type to your element.",
        effect="Use any Domain Control type with your Element Master element.",
    ),
    quality(
        "conjurer",
        "Conjurer",
        BUY,
        C.ADVANCED,
        dp_cost=3,
        type_tags=("trigger",),
        exclusive_with=("summoner",),
        description="Create objects from nothing.",
        effect="As a Complex Action, create an object no larger than your Size.",
    ),
    quality(
        "summoner",
        "Summoner",
        BUY,
        C.ADVANCED,
        dp_cost=3,
        type_tags=("trigger",),
        exclusive_with=("conjurer",),
        description="Create minions to fight.",
        effect="As a Complex Action, summon BIT minions with one Wound Box each.",
    ),
    quality(
        "mixed-summoner",
        "Mixed Summoner",
        BUY,
        C.ADVANCED,
        dp_cost=3,
        prerequisites=("Summoner", "Conjurer"),
        requires_gm_approval=True,
        description="Use both Summoner and Conjurer.",
        effect="Ignore the exclusivity of Summoner and Conjurer.",
    ),
    quality(
        "elemental-summoner",
        "Elemental Summoner",
        BUY,
        C.ADVANCED,
        dp_cost=3,
        prerequisites=("Summoner",),
        exclusive_with=("specialized-summoning",),
        description="Minions explode on death.",
        effect="When a minion is deleted, adjacent enemies take 1 damage.",
    ),
    quality(
        "specialized-summoning",
        "Specialized Summoning",
        BUY,
        C.ADVANCED,
        dp_cost=3,
        type_tags=("trigger",),
        prerequisites=("Summoner",),
        stage_requirement="ultimate",
        exclusive_with=("elemental-summoner",),
        description="Create specialized minions.",
        effect="Summoned minions may each carry one of your Attack Effects.",
    ),
    quality(
        "mode-change",
        "Mode Change",
        BUY,
        C.ADVANCED,
        dp_cost=1,
        max_ranks=2,
        type_tags=("trigger",),
        description="Swap stats as Simple Action.",
        effect="Per Rank: define an alternate mode that swaps two stats.",
    ),
    quality(
        "mode-change-x0",
        "Mode Change X.0",
        BUY,
        C.ADVANCED,
        dp_cost=2,
        max_ranks=2,
        type_tags=("trigger",),
        prerequisites=("Mode Change",),
        description="Flexible stat swapping.",
        effect="Per Rank: redistribute up to Stage Bonus points between stats when changing mode.",
    ),
]


# =============================================================================
# DIGIZOID (3.12), GAIN FORCE (3.13), BURST POWER (3.14)
# =============================================================================

def _digizoid_armor(id: str, name: str, dp_cost: int, stage: str, description: str, effect: str) -> QualityTemplate:
    return quality(
        id,
        f"Digizoid Armor: {name}",
        BUY,
        C.DIGIZOID,
        dp_cost=dp_cost,
        type_tags=("static", "trigger"),
        stage_requirement=stage,
        exclusive_with=_others(DIGIZOID_ARMOR_IDS, id),
        description=description,
        effect=effect,
    )


def _digizoid_weapon(id: str, name: str, dp_cost: int, stage: str, description: str, effect: str) -> QualityTemplate:
    return quality(
        id,
        f"Digizoid Weaponry: {name}",
        BUY,
        C.DIGIZOID,
        dp_cost=dp_cost,
        type_tags=("static", "trigger"),
        prerequisites=("Weapon Rank 1",),
        stage_requirement=stage,
        exclusive_with=_others(DIGIZOID_WEAPON_IDS, id),
        description=description,
        effect=effect,
    )


def _gain_force(id: str, name: str, dp_cost: int, stage: str, type_tags: tuple, description: str, effect: str,
                exclusive_with: tuple = ()) -> QualityTemplate:
    return quality(
        id,
        name,
        BUY,
        C.GAIN_FORCE,
        dp_cost=dp_cost,
        type_tags=type_tags,
        prerequisites=("Instinct Rank 1",),
        stage_requirement=stage,
        exclusive_with=exclusive_with + _others(GAIN_FORCE_IDS, id),
        description=description,
        effect=effect,
    )


LATE_STAGE_QUALITIES: list[QualityTemplate] = [
    # Digizoid Armor (3.12a)
    _digizoid_armor(
        "digizoid-armor-chrome", "Chrome", 1, "ultimate",
        "+2 Armor, +1 Health.",
        "+2 Armor, +1 Health. Available at Ultimate+.",
    ),
    _digizoid_armor(
        "digizoid-armor-black", "Black", 2, "mega",
        "+2 Armor + random bonus each round.",
        "+2 Armor. Each round roll 1d6: 1-2 +4 Armor, 3-4 +4 Dodge, 5-6 +2 Armor and +2 Dodge.",
    ),
    _digizoid_armor(
        "digizoid-armor-brown", "Brown", 3, "mega",
        "+2 Armor, auto dodge success, Clash bonus.",
        "+2 Armor, one automatic Dodge success, +RAM to Clash avoidance and escape checks.",
    ),
    _digizoid_armor(
        "digizoid-armor-blue", "Blue", 3, "mega",
        "+2 Armor, +2 Dodge, +4 Movement.",
        "+2 Armor, +2 Dodge, +4 Base Movement.",
    ),
    _digizoid_armor(
        "digizoid-armor-gold", "Gold", 2, "mega",
        "+2 Armor, +1 Health, reflect ranged.",
        "+2 Armor, +1 Health. A [Ranged] attacker that hits you takes CPUx2 damage less its Armor, minimum 1.",
    ),
    _digizoid_armor(
        "digizoid-armor-obsidian", "Obsidian", 2, "mega",
        "+2 Armor, +1 Health, reflect melee.",
        "+2 Armor, +1 Health. A [Melee] attacker that hits you takes CPUx2 damage less its Armor, minimum 1.",
    ),
    _digizoid_armor(
        "digizoid-armor-red", "Red", 2, "mega",
        "+4 Armor, +2 Health.",
        "+4 Armor, +2 Health.",
    ),
    # Digizoid Weaponry (3.12b)
    _digizoid_weapon(
        "digizoid-weapon-chrome", "Chrome", 1, "ultimate",
        "+2 Accuracy, +1 Damage on [Weapon] attacks.",
        "[Weapon] attacks gain +2 Accuracy and +1 Damage. Available at Ultimate+.",
    ),
    _digizoid_weapon(
        "digizoid-weapon-black", "Black", 2, "mega",
        "+2 Accuracy + random bonus each round.",
        "[Weapon] attacks gain +2 Accuracy. Each round roll 1d6: 1-2 +4 Damage, 3-4 +4 Accuracy, 5-6 +2 of each.",
    ),
    _digizoid_weapon(
        "digizoid-weapon-brown", "Brown", 3, "mega",
        "+2 Dodge, +2 Damage, +2 Reach.",
        "+2 Dodge. [Weapon] attacks gain +2 Damage and 2 ranks of Reach.",
    ),
    _digizoid_weapon(
        "digizoid-weapon-blue", "Blue", 3, "mega",
        "+2 Accuracy, +2 Damage, auto success.",
        "[Weapon] attacks gain +2 Accuracy, +2 Damage and one automatic success.",
    ),
    _digizoid_weapon(
        "digizoid-weapon-gold", "Gold", 3, "mega",
        "+4 Accuracy, +1 Damage, +5m range.",
        "[Weapon] attacks gain +4 Accuracy and +1 Damage; [Ranged] [Weapon] attacks gain +5 meters range.",
    ),
    _digizoid_weapon(
        "digizoid-weapon-obsidian", "Obsidian", 3, "mega",
        "+2 Accuracy, +2 Damage, +1 Armor Piercing.",
        "[Weapon] attacks gain +2 Accuracy, +2 Damage and one more rank of Armor Piercing.",
    ),
    _digizoid_weapon(
        "digizoid-weapon-red", "Red", 3, "mega",
        "+6 Damage on [Weapon] attacks.",
        "[Weapon] attacks gain +6 Damage.",
    ),
    # Gain Force / InForce (3.13)
    _gain_force(
        "overwrite", "Overwrite", 1, "ultimate", ("static", "attack", "trigger"),
        "Immune to cheap effects, take CPU damage/round.",
        "Simple Action to activate. Take unalterable CPU damage each round; immune to effects costing under 3 DP. "
        "DOT, Paralysis, Blind, Lag and Frenzy break it.",
        exclusive_with=("braveheart",),
    ),
    _gain_force(
        "undying-inforce", "Undying InForce", 2, "mega", ("static",),
        "Passive regenerating Shield.",
        "Passive [Shield] of CPU + Instinct ranks. After the first hit the cap halves; every other round refresh a quarter.",
    ),
    _gain_force(
        "temporal-inforce", "Temporal InForce", 2, "mega", ("trigger", "attack"),
        "Control initiative, reroll attacks.",
        "Choose your initiative position after others roll and adjust it every other turn unless Lagged. "
        "Once per battle reroll Huge Power or Overkill.",
    ),
    _gain_force(
        "omniscient-inforce", "Omniscient InForce", 2, "mega", ("trigger",),
        "Ready Actions, reroll dodges.",
        "Once per round declare a Ready Action that resolves for free if it comes true. "
        "Once per battle reroll Agility or Avoidance.",
    ),
    _gain_force(
        "digital-hazard", "Digital Hazard", 3, "mega", ("trigger", "attack"),
        "Automatic damage in burst radius.",
        "One attack gains [Hazard]: automatic damage in a Ranged Burst, reduced by Armor. "
        "Effects need 4+ damage to apply.",
    ),
    _gain_force(
        "zero-unit", "Zero Unit", 3, "mega", ("trigger", "attack"),
        "Powerful heal and revival.",
        "Gain [Revitalize] without a Health roll. Heals BIT Wound Boxes; once per battle revives a deleted ally "
        "on a Tamer Willpower check.",
    ),
    # Burst Power (3.14)
    quality(
        "burst-power",
        "Burst Power",
        BUY,
        C.BURST_POWER,
        dp_cost=1,
        type_tags=("trigger",),
        prerequisites=("Mode Change X.0 Rank 2",),
        stage_requirement="mega",
        requires_gm_approval=True,
        description="Transform into Burst Mode.",
        effect=(
            "Build an alternate stat spread. On a Tamer Bravery check enter Burst Mode for 3 turns and heal "
            "5 Wound Boxes. Available Round 3+, once per session."
        ),
        choices=(
            QualityChoice("agility-future", "Agility: The Future is Now", "+5 Damage, Accuracy and Movement. May buy a second Digizoid Weaponry."),
            QualityChoice("agility-boiling", "Agility: Boiling Power", "+5 Damage, Accuracy and Movement. Charge Attack adds +1 Damage per space moved."),
            QualityChoice("body-vision", "Body: One Vision", "+5 Armor, Accuracy and Temporary Wound Boxes. Reflect half of heavy hits."),
            QualityChoice("body-dreamer", "Body: The Biggest Dreamer", "+5 Armor, Accuracy and Temporary Wound Boxes. May buy a second Digizoid Armor."),
            QualityChoice("charisma-butterfly", "Charisma: Butter-Fly Effect", "+5 Accuracy and Dodge. Spend Burst rounds to reset initiative turns."),
            QualityChoice("charisma-light", "Charisma: Be My Light", "+5 Accuracy and Dodge. Your [P] effects on one ally have BITx2 potency."),
            QualityChoice("intelligence-war", "Intelligence: War Game", "+5 Dodge, Damage and range. One Area Attack has double range."),
            QualityChoice("intelligence-beat", "Intelligence: Beat Hit", "+5 Dodge, Damage and range. A second attack gains [Signature Move]."),
            QualityChoice("willpower-endless", "Willpower: Endless Tale", "+5 Damage and Armor. At 0 Wound Boxes leave Burst Mode with 10."),
            QualityChoice("willpower-courage", "Willpower: Those Who Inherit Courage", "+5 Damage and Armor. At 0 Wound Boxes all allies heal 5 and you leave the battle."),
        ),
    ),
]


PURCHASABLE_QUALITIES: list[QualityTemplate] = (
    DATA_OPTIMIZATION_QUALITIES
    + EXTRA_MOVEMENT_QUALITIES
    + OFFENSIVE_QUALITIES
    + DEFENSIVE_QUALITIES
    + BOOSTING_QUALITIES
    + ATTACK_EFFECT_QUALITIES
    + ADVANCED_QUALITIES
    + LATE_STAGE_QUALITIES
)
