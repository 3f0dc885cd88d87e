"""
Combat for the Digimon GM Assistant.

This module provides:
- roll_initiative: 3d6 + agility with an injectable random source
- PhaseMachine: forward-only encounter phases
- EncounterEngine: roster, turn order, rounds, effects and hazards
- Hazard catalogue: ready-made environmental hazards
"""

from src.combat.initiative import InitiativeResult, roll_initiative
from src.combat.encounter_phases import (
    InvalidTransitionError,
    PhaseMachine,
    PhaseTransition,
    VALID_PHASE_TRANSITIONS,
)
from src.combat.combat_engine import EncounterEngine, create_participant
from src.combat.hazard_catalog import (
    HAZARD_CATALOG,
    HazardTemplate,
    get_hazard_template,
    get_hazards_by_category,
    get_hazards_by_severity,
    hazard_from_template,
    search_hazards,
)

__all__ = [
    # Initiative
    "InitiativeResult",
    "roll_initiative",
    # Phases
    "InvalidTransitionError",
    "PhaseMachine",
    "PhaseTransition",
    "VALID_PHASE_TRANSITIONS",
    # Engine
    "EncounterEngine",
    "create_participant",
    # Hazards
    "HAZARD_CATALOG",
    "HazardTemplate",
    "get_hazard_template",
    "get_hazards_by_category",
    "get_hazards_by_severity",
    "hazard_from_template",
    "search_hazards",
]
