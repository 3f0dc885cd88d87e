"""
Advancement system for the Digimon GM Assistant.

Tracks evolution lines: requirement-gated evolution, devolution and the
progress counters (battles, XP, bond, items) that feed the gates.
"""

from src.advancement.evolution_manager import (
    EvolutionManager,
    EvolveCheck,
    RequirementCheck,
    add_battles_won,
    add_xp,
    can_evolve,
    check_requirement,
    collect_item,
    create_evolution_line,
    current_stage,
    devolve,
    evolve,
    increase_bond,
    next_stage,
    update_progress,
)

__all__ = [
    "EvolutionManager",
    "EvolveCheck",
    "RequirementCheck",
    "add_battles_won",
    "add_xp",
    "can_evolve",
    "check_requirement",
    "collect_item",
    "create_evolution_line",
    "current_stage",
    "devolve",
    "evolve",
    "increase_bond",
    "next_stage",
    "update_progress",
]
