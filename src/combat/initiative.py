"""
Initiative rolling.

Initiative is 3d6 + Agility. The roll goes through DiceRoller so it is
recorded in the run log and can be made deterministic with a seed or an
injected random source.
"""

from dataclasses import dataclass
from typing import Any

from src.data_models import DiceRoller


@dataclass(frozen=True)
class InitiativeResult:
    roll: int
    total: int


def roll_initiative(agility: int, rng: Any = None, reason: str = "initiative") -> InitiativeResult:
    """
    Roll initiative.

    Args:
        agility: Added to the dice total
        rng: Optional random source exposing randint(a, b); defaults to the
            shared DiceRoller source

    Returns:
        InitiativeResult with the raw 3d6 roll and roll + agility
    """
    result = DiceRoller.roll("3d6", reason, rng=rng)
    return InitiativeResult(roll=result.total, total=result.total + agility)
