"""
Attack catalogue for the Digimon GM Assistant.

This module provides:
- AttackTemplate: canonical attack definition
- AttackRegistry: lookup by id, stage, range, type and search
- attack_from_template: make an owned Attack copy for a Digimon
"""

from src.attacks.attack_data import ANY_STAGE, AttackTemplate, attack_from_template
from src.attacks.attack_registry import (
    AttackLookupResult,
    AttackRegistry,
    get_attack_registry,
    reset_attack_registry,
)

__all__ = [
    "ANY_STAGE",
    "AttackTemplate",
    "attack_from_template",
    "AttackLookupResult",
    "AttackRegistry",
    "get_attack_registry",
    "reset_attack_registry",
]
