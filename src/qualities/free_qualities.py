"""
Free qualities (0 DP).

Flavor-heavy qualities any Digimon may take at no cost; several trade a
random upside for a random downside.
"""

from src.qualities.purchasable_qualities import DIGIZOID_ARMOR_IDS
from src.qualities.quality_data import QualityCategory, QualityTemplate, QualityType, any_of, quality

FREE = QualityType.FREE
CAT = QualityCategory.FREE


FREE_QUALITIES: list[QualityTemplate] = [
    quality(
        "job-well-done",
        "A Job Well Done",
        FREE,
        CAT,
        dp_cost=0,
        type_tags=("trigger",),
        description="Roll 1d6 at start of combat for random benefit or penalty.",
        effect=(
            "At the start of combat, roll 1d6. On a 6 gain Temporary Wound Boxes and a Damage "
            "bonus equal to Stage Bonus. On a 2 take a Stage Bonus penalty to Armor. On a 1 take "
            "a Stage Bonus penalty to the highest stat and immediate damage equal to Stage Bonus."
        ),
    ),
    quality(
        "ammo",
        "Ammo",
        FREE,
        CAT,
        dp_cost=0,
        type_tags=("attack",),
        description="Gain use of [Ammo] tag for consecutive attacks (up to 5 times).",
        effect=(
            "Gain use of the [Ammo] Tag on a move with three Attack Tags. The move may be used up "
            "to 5 times consecutively within a round; once out of ammo it cannot be used for the "
            "rest of battle. Cannot apply to [Signature Move]."
        ),
    ),
    quality(
        "fragile-equipment",
        "Fragile Equipment",
        FREE,
        CAT,
        dp_cost=0,
        type_tags=("static", "attack"),
        prerequisites=(any_of("Weapon or Armor Increasing Quality", "weapon", *DIGIZOID_ARMOR_IDS),),
        description="Equipment may break but can deal extra damage. Check cannot be rerolled.",
        effect=(
            "Roll 1d6 on a successful [Weapon] hit: on 1 the weapon breaks for the battle, on 6 "
            "deal +Stage Bonus damage. Armor works the same way when hit."
        ),
    ),
    quality(
        "inconsistent-size",
        "Inconsistent Size",
        FREE,
        CAT,
        dp_cost=0,
        type_tags=("trigger",),
        description="Random size upon evolution.",
        effect="Upon evolution roll 1d6: 1-2 Medium, 3-4 Large, 5-6 Huge. Size lasts until devolving.",
    ),
    quality(
        "violent-overwrite",
        "Violent Overwrite",
        FREE,
        CAT,
        dp_cost=0,
        type_tags=("trigger",),
        description="Random damage or healing each round.",
        effect=(
            "At start of every round roll 1d6. On 1 take unalterable damage equal to Stage Bonus "
            "+1. On 6 recover Wound Boxes equal to Stage Bonus."
        ),
    ),
    quality(
        "merciful-mode",
        "Merciful Mode",
        FREE,
        CAT,
        dp_cost=0,
        description="Attacks are non-lethal by default.",
        effect=(
            "All attacks are non-lethal by default. Must declare lethal intent to delete enemies. "
            "Cannot take Offensive Stance."
        ),
    ),
    quality(
        "positive-reinforcement",
        "Positive Reinforcement",
        FREE,
        CAT,
        dp_cost=0,
        type_tags=("static", "trigger"),
        exclusive_with=("berserker",),
        description="Mood meter affects stats based on combat performance.",
        effect=(
            "Gain a Mood Meter (1d6) starting at 3. Landing or dodging an attack raises Mood; "
            "missing or getting hit lowers it. High Mood grants Dodge and Damage, low Mood costs "
            "Accuracy and Armor."
        ),
    ),
    quality(
        "mind-over-matter",
        "Mind over Matter",
        FREE,
        CAT,
        dp_cost=0,
        description="Trade stats for Prodigious Skills.",
        effect=(
            "-1 to all stats. Select two skills from a single Attribute Category (excluding "
            "Agility) to treat as Prodigious Skills."
        ),
    ),
    quality(
        "justice-is-blind",
        "Justice is Blind",
        FREE,
        CAT,
        dp_cost=0,
        description="Blind Digimon with unique combat rules.",
        effect=(
            "The Digimon is blind. It is immune to visual effects and illusions but suffers "
            "penalties against targets it cannot hear or otherwise sense."
        ),
    ),
]
