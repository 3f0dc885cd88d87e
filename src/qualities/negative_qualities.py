"""
Negative qualities.

Each refunds DP (negative dp_cost). The total refund a Digimon may take is
capped per stage by NEGATIVE_QUALITY_LIMITS.
"""

from src.qualities.quality_data import QualityCategory, QualityTemplate, QualityType, quality

NEG = QualityType.NEGATIVE
CAT = QualityCategory.NEGATIVE


NEGATIVE_QUALITIES: list[QualityTemplate] = [
    quality(
        "bulky",
        "Bulky",
        NEG,
        CAT,
        dp_cost=-1,
        max_ranks=3,
        description="Reduced movement speed.",
        effect="Per Rank: -2 Base Movement. Cannot reduce Base Movement below 2.",
    ),
    quality(
        "vulnerable",
        "Vulnerable",
        NEG,
        CAT,
        dp_cost=-2,
        description="Negative effects last longer, positive effects shorter.",
        effect="Negative effects on this Digimon last 1 round longer; positive effects last 1 round less.",
    ),
    quality(
        "disobedient",
        "Disobedient",
        NEG,
        CAT,
        dp_cost=-1,
        description="Tamer Directs are less effective.",
        effect="Tamer Direct actions grant half their normal bonus, rounded down.",
    ),
    quality(
        "rebellious-stage",
        "Rebellious Stage",
        NEG,
        CAT,
        dp_cost=-1,
        type_tags=("static", "trigger"),
        prerequisites=("Disobedient",),
        description="May refuse to listen to Tamer.",
        effect="When given an order, roll 1d6. On a 1 the Digimon ignores the order and acts on its own.",
    ),
    quality(
        "full-action",
        "Full Action",
        NEG,
        CAT,
        dp_cost=-3,
        type_tags=("attack",),
        prerequisites=("Signature Move",),
        description="Signature Move requires Complex Action.",
        effect="Using the Signature Move costs a Complex Action instead of a Simple Action.",
    ),
    quality(
        "light-hit",
        "Light Hit",
        NEG,
        CAT,
        dp_cost=-1,
        max_ranks=3,
        type_tags=("attack",),
        prerequisites=("Armor Piercing Rank X",),
        description="Armor Piercing requires extra successes.",
        effect="Per Rank: Armor Piercing only applies if the attack scores one extra success.",
    ),
    quality(
        "klutz",
        "Klutz",
        NEG,
        CAT,
        dp_cost=-2,
        prerequisites=("Selective Targeting",),
        description="Area attacks may hit allies.",
        effect="Roll 1d6 for each ally inside an Area Attack. On a 1 that ally is hit.",
    ),
    quality(
        "underwhelming",
        "Underwhelming",
        NEG,
        CAT,
        dp_cost=-2,
        max_ranks=2,
        type_tags=("trigger",),
        prerequisites=("Huge Power (Rank 1)", "Overkill (Rank 2)"),
        description="Must reroll successful dice. Only applies to [Damage] attacks.",
        effect="Per Rank: reroll one successful Accuracy die on [Damage] attacks.",
    ),
    quality(
        "broadside",
        "Broadside",
        NEG,
        CAT,
        dp_cost=-2,
        max_ranks=2,
        type_tags=("trigger",),
        prerequisites=("Agility (Rank 1)", "Avoidance (Rank 2)"),
        description="Must reroll successful dodge dice.",
        effect="Per Rank: reroll one successful Dodge die.",
    ),
    quality(
        "decreased-derived-stat",
        "Decreased Derived Stat",
        NEG,
        CAT,
        dp_cost=-1,
        max_ranks=5,
        prerequisites=("Improved Derived Stat",),
        description="Lower a Derived Stat.",
        effect="Per Rank: -1 to a Derived Stat that has not been improved.",
    ),
]
