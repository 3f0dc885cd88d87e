"""
Derived stat calculation.

One canonical formula set is used for Digimon (the simple rule variant):

    agility     = accuracy + dodge
    body        = floor((damage + armor + health) / 3)
    wound_boxes = health + stage wound bonus
    bit         = stage brains
    ram         = floor(agility / 2)
    cpu         = floor(body / 2)
    movement    = stage base movement

Body and agility are clamped at zero. All divisions round down.
"""

from src.data_models import (
    BaseStats,
    DerivedStats,
    Stage,
    TamerAttributes,
    TamerDerivedStats,
    TamerSkills,
    get_stage_config,
)


def compute_derived(base_stats: BaseStats, stage: Stage) -> DerivedStats:
    """Compute a Digimon's derived stats. Pure; no failure mode for a valid stage."""
    config = get_stage_config(stage)

    agility = max(0, base_stats.accuracy + base_stats.dodge)
    body = max(0, (base_stats.damage + base_stats.armor + base_stats.health) // 3)

    return DerivedStats(
        agility=agility,
        body=body,
        wound_boxes=base_stats.health + config.wound_bonus,
        bit=config.brains,
        ram=agility // 2,
        cpu=body // 2,
        movement=config.movement,
    )


def compute_tamer_derived(attributes: TamerAttributes, skills: TamerSkills) -> TamerDerivedStats:
    """Compute a Tamer's derived stats from attributes and skills."""
    return TamerDerivedStats(
        wound_boxes=max(2, attributes.body + skills.endurance),
        speed=attributes.agility + skills.survival,
        accuracy_pool=attributes.agility + skills.fight,
        dodge_pool=attributes.agility + skills.dodge,
        armor=attributes.body + skills.endurance,
        damage=attributes.body + skills.fight,
    )


def max_inspiration(attributes: TamerAttributes) -> int:
    return max(1, attributes.willpower)
