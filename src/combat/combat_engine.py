"""
Encounter engine for the Digimon GM Assistant.

Owns the combat lifecycle of an Encounter:
1. Set up the roster (participants, initiative, hazards)
2. Optionally call for initiative
3. Start combat: round 1, cursor on the highest initiative
4. Advance turns; on wraparound start a new round, reset action budgets and
   age every active effect
5. End combat (terminal)

Every operation loads the Encounter from the entity store, changes that
fresh copy and saves it back, so a refused operation never leaves a
half-changed record. Operations are tolerant: an unknown encounter yields
None and an unknown participant or an illegal phase change returns the
encounter unchanged, with a warning in the log.
"""

import logging
from datetime import datetime
from typing import Any, Optional, Union

from src.combat.encounter_phases import InvalidTransitionError, PhaseMachine
from src.combat.initiative import roll_initiative
from src.data_models import (
    ActiveEffect,
    BattleLogEntry,
    CombatParticipant,
    Digimon,
    Encounter,
    EncounterPhase,
    Hazard,
    ParticipantType,
    Stance,
    Tamer,
    ValidationError,
    new_id,
)
from src.observability.run_log import get_run_log
from src.storage.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)

# Participant fields a GM may overwrite directly
UPDATABLE_PARTICIPANT_FIELDS = {
    "name",
    "current_stance",
    "current_wounds",
    "max_wounds",
    "is_active",
    "has_acted",
    "actions_remaining",
}


def create_participant(
    entity: Union[Tamer, Digimon],
    initiative: Optional[int] = None,
    rng: Any = None,
) -> CombatParticipant:
    """
    Build a participant wrapping a Tamer or Digimon.

    Max wounds come from the entity's derived wound boxes. Initiative is
    rolled as 3d6 + agility unless given.
    """
    if isinstance(entity, Digimon):
        participant_type = ParticipantType.DIGIMON
        agility = entity.derived_stats.agility
        stance = entity.current_stance
    elif isinstance(entity, Tamer):
        participant_type = ParticipantType.TAMER
        agility = entity.attributes.agility
        stance = Stance.NEUTRAL
    else:
        raise ValidationError(
            f"Participants must wrap a Tamer or Digimon, got {type(entity).__name__}", field="entity"
        )

    if initiative is None:
        rolled = roll_initiative(agility, rng=rng, reason=f"initiative: {entity.name}")
        initiative, initiative_roll = rolled.total, rolled.roll
    else:
        initiative_roll = 0

    return CombatParticipant(
        participant_type=participant_type,
        entity_id=entity.id,
        name=entity.name,
        initiative=initiative,
        initiative_roll=initiative_roll,
        current_stance=stance,
        current_wounds=entity.current_wounds,
        max_wounds=entity.derived_stats.wound_boxes,
    )


class EncounterEngine:
    """
    Turn-based combat state machine over stored Encounters.

    Usage:
        engine = EncounterEngine(store)
        encounter = engine.create_encounter("Ambush at File Island")
        engine.add_participant(encounter.id, create_participant(agumon))
        engine.start_combat(encounter.id)
        engine.next_turn(encounter.id)
    """

    def __init__(self, store: EntityStore):
        self.store = store

    # =========================================================================
    # LOAD / SAVE
    # =========================================================================

    def get_encounter(self, encounter_id: str) -> Optional[Encounter]:
        return self.store.get(EntityKind.ENCOUNTER, encounter_id)

    def _load(self, encounter_id: str, operation: str) -> Optional[Encounter]:
        encounter = self.store.get(EntityKind.ENCOUNTER, encounter_id)
        if encounter is None:
            logger.warning(f"{operation}: encounter {encounter_id} not found")
        return encounter

    def _commit(self, encounter: Encounter) -> Encounter:
        encounter.updated_at = datetime.now()
        self.store.save(encounter)
        return encounter

    def _participant(
        self, encounter: Encounter, participant_id: str, operation: str
    ) -> Optional[CombatParticipant]:
        participant = encounter.get_participant(participant_id)
        if participant is None:
            logger.warning(f"{operation}: participant {participant_id} not in encounter {encounter.id}")
        return participant

    def _transition(self, encounter: Encounter, trigger: str) -> bool:
        machine = PhaseMachine(encounter.id, encounter.phase)
        try:
            encounter.phase = machine.transition(trigger, {"round": encounter.round})
        except InvalidTransitionError as e:
            logger.warning(str(e))
            return False
        return True

    def _reorder(self, encounter: Encounter) -> None:
        """Recompute turn order, keeping the cursor on the current actor during combat."""
        current = encounter.get_current_participant()
        encounter.recompute_turn_order()
        if encounter.phase != EncounterPhase.COMBAT:
            encounter.current_turn_index = 0
            return
        if current is not None and current.id in encounter.turn_order:
            encounter.current_turn_index = encounter.turn_order.index(current.id)
        else:
            self._clamp_cursor(encounter)

    @staticmethod
    def _clamp_cursor(encounter: Encounter) -> None:
        if not encounter.turn_order:
            encounter.current_turn_index = 0
        else:
            encounter.current_turn_index = max(
                0, min(encounter.current_turn_index, len(encounter.turn_order) - 1)
            )

    # =========================================================================
    # SETUP
    # =========================================================================

    def create_encounter(self, name: str, description: str = "") -> Encounter:
        """Create and store a new encounter in the setup phase."""
        if not name or not name.strip():
            raise ValidationError("Encounter name is required", field="name")
        encounter = Encounter(name=name.strip(), description=description)
        self.store.insert(encounter)
        logger.info(f"Created encounter {encounter.name} ({encounter.id})")
        return encounter

    def add_participant(self, encounter_id: str, participant: CombatParticipant) -> Optional[Encounter]:
        """Append a participant and rebuild the turn order."""
        encounter = self._load(encounter_id, "add_participant")
        if encounter is None:
            return None
        if encounter.phase == EncounterPhase.ENDED:
            logger.warning(f"add_participant: encounter {encounter_id} has ended")
            return encounter
        if encounter.get_participant(participant.id) is not None:
            logger.warning(f"add_participant: {participant.id} already in encounter {encounter_id}")
            return encounter

        encounter.participants.append(participant)
        self._reorder(encounter)
        return self._commit(encounter)

    def remove_participant(self, encounter_id: str, participant_id: str) -> Optional[Encounter]:
        """
        Remove a participant from the roster and the turn order.

        Removing someone before the cursor shifts the cursor back so the same
        participant keeps the turn. Removing the current actor hands the turn
        to whoever follows, clamped into the shorter order.
        """
        encounter = self._load(encounter_id, "remove_participant")
        if encounter is None:
            return None
        if self._participant(encounter, participant_id, "remove_participant") is None:
            return encounter

        removed_index = (
            encounter.turn_order.index(participant_id) if participant_id in encounter.turn_order else None
        )
        was_current = removed_index == encounter.current_turn_index

        encounter.participants = [p for p in encounter.participants if p.id != participant_id]
        encounter.turn_order = [pid for pid in encounter.turn_order if pid != participant_id]

        if removed_index is not None and removed_index < encounter.current_turn_index:
            encounter.current_turn_index -= 1
        self._clamp_cursor(encounter)

        if was_current and encounter.phase == EncounterPhase.COMBAT:
            successor = encounter.get_current_participant()
            if successor is not None:
                successor.is_active = True

        return self._commit(encounter)

    def set_initiative(
        self,
        encounter_id: str,
        participant_id: str,
        initiative: int,
        initiative_roll: Optional[int] = None,
    ) -> Optional[Encounter]:
        """Overwrite a participant's initiative and rebuild the turn order."""
        encounter = self._load(encounter_id, "set_initiative")
        if encounter is None:
            return None
        participant = self._participant(encounter, participant_id, "set_initiative")
        if participant is None:
            return encounter

        participant.initiative = initiative
        if initiative_roll is not None:
            participant.initiative_roll = initiative_roll
        self._reorder(encounter)
        return self._commit(encounter)

    def update_participant(self, encounter_id: str, participant_id: str, **fields: Any) -> Optional[Encounter]:
        """
        Overwrite participant fields (stance, wounds, flags, action budget).

        Raises:
            ValidationError: a field is not updatable
        """
        unknown = set(fields) - UPDATABLE_PARTICIPANT_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update participant fields: {sorted(unknown)}", field=sorted(unknown)[0])

        encounter = self._load(encounter_id, "update_participant")
        if encounter is None:
            return None
        participant = self._participant(encounter, participant_id, "update_participant")
        if participant is None:
            return encounter

        for key, value in fields.items():
            if key == "current_stance":
                value = Stance(value)
            setattr(participant, key, value)
        return self._commit(encounter)

    def add_effect(self, encounter_id: str, participant_id: str, effect: ActiveEffect) -> Optional[Encounter]:
        """
        Attach a timed effect to a participant.

        Raises:
            ValidationError: duration is not a positive number of rounds
        """
        if effect.duration <= 0:
            raise ValidationError("Effect duration must be at least 1 round", field="duration")

        encounter = self._load(encounter_id, "add_effect")
        if encounter is None:
            return None
        participant = self._participant(encounter, participant_id, "add_effect")
        if participant is None:
            return encounter

        participant.active_effects.append(effect)
        return self._commit(encounter)

    def remove_effect(self, encounter_id: str, participant_id: str, effect_id: str) -> Optional[Encounter]:
        encounter = self._load(encounter_id, "remove_effect")
        if encounter is None:
            return None
        participant = self._participant(encounter, participant_id, "remove_effect")
        if participant is None:
            return encounter

        participant.active_effects = [e for e in participant.active_effects if e.id != effect_id]
        return self._commit(encounter)

    # =========================================================================
    # PHASES AND TURNS
    # =========================================================================

    def request_initiative(self, encounter_id: str) -> Optional[Encounter]:
        """Move setup -> initiative. Advisory; combat may also start from setup."""
        encounter = self._load(encounter_id, "request_initiative")
        if encounter is None:
            return None
        if not self._transition(encounter, "request_initiative"):
            return encounter
        return self._commit(encounter)

    def start_combat(self, encounter_id: str) -> Optional[Encounter]:
        """Enter combat: round 1, cursor 0, fresh action budgets."""
        encounter = self._load(encounter_id, "start_combat")
        if encounter is None:
            return None
        if not self._transition(encounter, "start_combat"):
            return encounter

        encounter.round = 1
        encounter.current_turn_index = 0
        for participant in encounter.participants:
            participant.actions_remaining.reset()
            participant.has_acted = False
            participant.is_active = False

        first = encounter.get_current_participant()
        if first is not None:
            first.is_active = True
            get_run_log().log_turn(
                encounter_id=encounter.id,
                round=encounter.round,
                participant_id=first.id,
                participant_name=first.name,
                new_round=True,
            )
        return self._commit(encounter)

    def next_turn(self, encounter_id: str) -> Optional[Encounter]:
        """
        Advance the cursor to the next participant.

        On wraparound the round increments and, for every participant, the
        action budget resets, has_acted clears and each effect ages by one
        round (expired effects are dropped). Only then is the participant
        who just finished marked as having acted and the next one marked
        active.
        """
        encounter = self._load(encounter_id, "next_turn")
        if encounter is None:
            return None
        if encounter.phase != EncounterPhase.COMBAT:
            logger.warning(f"next_turn: encounter {encounter_id} is in phase {encounter.phase.value}")
            return encounter
        if not encounter.turn_order:
            logger.warning(f"next_turn: encounter {encounter_id} has no participants")
            return encounter

        old_index = encounter.current_turn_index
        new_index = (old_index + 1) % len(encounter.turn_order)
        new_round = new_index == 0

        expired_names: list[str] = []
        if new_round:
            encounter.round += 1
            for participant in encounter.participants:
                participant.actions_remaining.reset()
                participant.has_acted = False
                expired = participant.age_effects()
                expired_names.extend(f"{participant.name}: {e.name}" for e in expired)

        finished = encounter.get_participant(encounter.turn_order[old_index % len(encounter.turn_order)])
        if finished is not None:
            finished.has_acted = True
            finished.is_active = False

        encounter.current_turn_index = new_index
        upcoming = encounter.get_current_participant()
        if upcoming is not None:
            upcoming.is_active = True

        get_run_log().log_turn(
            encounter_id=encounter.id,
            round=encounter.round,
            participant_id=upcoming.id if upcoming else "",
            participant_name=upcoming.name if upcoming else "",
            new_round=new_round,
            expired_effects=expired_names,
        )
        if expired_names:
            logger.info(f"Round {encounter.round}: effects expired: {', '.join(expired_names)}")
        return self._commit(encounter)

    def end_combat(self, encounter_id: str) -> Optional[Encounter]:
        """End the encounter. Terminal."""
        encounter = self._load(encounter_id, "end_combat")
        if encounter is None:
            return None
        if not self._transition(encounter, "end_combat"):
            return encounter
        for participant in encounter.participants:
            participant.is_active = False
        return self._commit(encounter)

    def get_current_participant(self, encounter_id: str) -> Optional[CombatParticipant]:
        encounter = self._load(encounter_id, "get_current_participant")
        if encounter is None:
            return None
        return encounter.get_current_participant()

    # =========================================================================
    # BATTLE LOG
    # =========================================================================

    def append_battle_log_entry(self, encounter_id: str, entry: BattleLogEntry) -> Optional[Encounter]:
        """Append a log entry with a fresh id and timestamp. The log is append-only."""
        encounter = self._load(encounter_id, "append_battle_log_entry")
        if encounter is None:
            return None

        entry.id = new_id()
        entry.timestamp = datetime.now()
        encounter.battle_log.append(entry)
        return self._commit(encounter)

    # =========================================================================
    # HAZARDS
    # =========================================================================

    def add_hazard(self, encounter_id: str, hazard: Hazard) -> Optional[Encounter]:
        encounter = self._load(encounter_id, "add_hazard")
        if encounter is None:
            return None
        if encounter.get_hazard(hazard.id) is not None:
            logger.warning(f"add_hazard: hazard {hazard.id} already present")
            return encounter
        encounter.hazards.append(hazard)
        return self._commit(encounter)

    def remove_hazard(self, encounter_id: str, hazard_id: str) -> Optional[Encounter]:
        encounter = self._load(encounter_id, "remove_hazard")
        if encounter is None:
            return None
        if encounter.get_hazard(hazard_id) is None:
            logger.warning(f"remove_hazard: hazard {hazard_id} not found")
            return encounter
        encounter.hazards = [h for h in encounter.hazards if h.id != hazard_id]
        return self._commit(encounter)

    def update_hazard(self, encounter_id: str, hazard_id: str, **fields: Any) -> Optional[Encounter]:
        """Overwrite hazard fields (name, description, effect, affected_area, duration)."""
        encounter = self._load(encounter_id, "update_hazard")
        if encounter is None:
            return None
        hazard = encounter.get_hazard(hazard_id)
        if hazard is None:
            logger.warning(f"update_hazard: hazard {hazard_id} not found")
            return encounter

        for key, value in fields.items():
            if key == "id" or not hasattr(hazard, key):
                raise ValidationError(f"Cannot update hazard field: {key}", field=key)
            setattr(hazard, key, value)
        return self._commit(encounter)

    def decrement_hazard_durations(self, encounter_id: str) -> Optional[Encounter]:
        """
        Age timed hazards by one round and drop those that run out.

        Permanent hazards (duration None) are untouched. Not called by
        next_turn; the GM decides when hazards tick.
        """
        encounter = self._load(encounter_id, "decrement_hazard_durations")
        if encounter is None:
            return None

        remaining = []
        for hazard in encounter.hazards:
            if hazard.tick():
                logger.info(f"Hazard expired: {hazard.name}")
            else:
                remaining.append(hazard)
        encounter.hazards = remaining
        return self._commit(encounter)
