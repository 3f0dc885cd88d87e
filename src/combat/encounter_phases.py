"""
Encounter phase machine.

Phases only move forward: setup -> initiative -> combat -> ended. The
initiative phase is advisory, so combat may start straight from setup, and
an encounter may be ended from any non-terminal phase.

All transitions are validated against VALID_PHASE_TRANSITIONS and logged to
the RunLog.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from src.data_models import EncounterPhase
from src.observability.run_log import get_run_log

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseTransition:
    """Defines a valid phase transition."""

    from_phase: EncounterPhase
    to_phase: EncounterPhase
    trigger: str
    description: str = ""


VALID_PHASE_TRANSITIONS: list[PhaseTransition] = [
    PhaseTransition(
        EncounterPhase.SETUP,
        EncounterPhase.INITIATIVE,
        "request_initiative",
        "GM asks everyone to roll initiative",
    ),
    PhaseTransition(
        EncounterPhase.SETUP,
        EncounterPhase.COMBAT,
        "start_combat",
        "Combat starts with the initiative already set",
    ),
    PhaseTransition(
        EncounterPhase.INITIATIVE,
        EncounterPhase.COMBAT,
        "start_combat",
        "Initiative is in; first round begins",
    ),
    PhaseTransition(
        EncounterPhase.SETUP,
        EncounterPhase.ENDED,
        "end_combat",
        "Encounter abandoned before combat",
    ),
    PhaseTransition(
        EncounterPhase.INITIATIVE,
        EncounterPhase.ENDED,
        "end_combat",
        "Encounter abandoned during initiative",
    ),
    PhaseTransition(
        EncounterPhase.COMBAT,
        EncounterPhase.ENDED,
        "end_combat",
        "Combat resolved",
    ),
]


class InvalidTransitionError(Exception):
    """Raised when an invalid phase transition is attempted."""

    pass


class PhaseMachine:
    """
    Validates and logs phase transitions for one encounter.

    The machine holds no encounter state beyond the current phase; the
    engine copies the resulting phase back onto the Encounter record.
    """

    _transitions: dict[tuple[EncounterPhase, str], EncounterPhase] = {
        (t.from_phase, t.trigger): t.to_phase for t in VALID_PHASE_TRANSITIONS
    }

    def __init__(self, encounter_id: str, phase: EncounterPhase = EncounterPhase.SETUP):
        self.encounter_id = encounter_id
        self._phase = EncounterPhase(phase)

    @property
    def phase(self) -> EncounterPhase:
        return self._phase

    @property
    def is_terminal(self) -> bool:
        return not self.get_valid_triggers()

    def can_transition(self, trigger: str) -> bool:
        return (self._phase, trigger) in self._transitions

    def get_valid_triggers(self) -> list[str]:
        """Get all valid triggers from the current phase."""
        return [trigger for (phase, trigger) in self._transitions if phase == self._phase]

    def transition(self, trigger: str, context: Optional[dict[str, Any]] = None) -> EncounterPhase:
        """
        Move to the next phase.

        Args:
            trigger: The trigger event causing the transition
            context: Optional context data for the run log

        Returns:
            The new phase

        Raises:
            InvalidTransitionError: If the transition is not valid
        """
        key = (self._phase, trigger)
        if key not in self._transitions:
            raise InvalidTransitionError(
                f"Invalid transition: Cannot trigger '{trigger}' from phase "
                f"'{self._phase.value}'. Valid triggers: {self.get_valid_triggers()}"
            )

        old_phase = self._phase
        self._phase = self._transitions[key]

        logger.info(f"Encounter {self.encounter_id}: {old_phase.value} -> {self._phase.value} ({trigger})")
        get_run_log().log_transition(
            encounter_id=self.encounter_id,
            from_state=old_phase.value,
            to_state=self._phase.value,
            trigger=trigger,
            context=context,
        )
        return self._phase
