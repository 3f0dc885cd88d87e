"""
Unit tests for the encounter engine.

Tests roster management, turn order, round wraparound, effects, hazards and
phase handling in src/combat/combat_engine.py.
"""

import pytest

from src.combat import create_participant, get_hazard_template, hazard_from_template
from src.data_models import (
    ActiveEffect,
    BattleLogEntry,
    EncounterPhase,
    Hazard,
    ParticipantType,
    Stance,
    ValidationError,
)
from src.observability import get_run_log
from tests.helpers import make_participant


@pytest.fixture
def encounter(engine):
    """Encounter in setup."""
    return engine.create_encounter("Ambush at File Island")


@pytest.fixture
def trio(engine, encounter):
    """Encounter with P1 (10), P2 (15) and P3 (8), still in setup."""
    participants = {
        "P1": make_participant("P1", 10),
        "P2": make_participant("P2", 15),
        "P3": make_participant("P3", 8),
    }
    for participant in participants.values():
        engine.add_participant(encounter.id, participant)
    return encounter.id, participants


@pytest.fixture
def in_combat(engine, trio):
    encounter_id, participants = trio
    engine.start_combat(encounter_id)
    return encounter_id, participants


def current_name(engine, encounter_id):
    return engine.get_current_participant(encounter_id).name


class TestCreateParticipant:
    """Tests for create_participant."""

    def test_from_digimon_rolls_initiative(self, rookie, max_rng):
        """Three sixes plus agility 9."""
        participant = create_participant(rookie, rng=max_rng)
        assert participant.participant_type == ParticipantType.DIGIMON
        assert participant.entity_id == rookie.id
        assert participant.initiative_roll == 18
        assert participant.initiative == 27
        assert participant.max_wounds == 7

    def test_from_tamer_uses_agility_attribute(self, sample_tamer, min_rng):
        participant = create_participant(sample_tamer, rng=min_rng)
        assert participant.participant_type == ParticipantType.TAMER
        assert participant.initiative == 6
        assert participant.max_wounds == 4
        assert participant.current_stance == Stance.NEUTRAL

    def test_given_initiative_not_rolled(self, rookie):
        participant = create_participant(rookie, initiative=12)
        assert participant.initiative == 12
        assert participant.initiative_roll == 0
        assert get_run_log().get_rolls() == []

    def test_rejects_other_types(self):
        with pytest.raises(ValidationError):
            create_participant("Agumon", initiative=5)


class TestSetup:
    """Tests for encounter creation and roster edits."""

    def test_create(self, engine, encounter):
        stored = engine.get_encounter(encounter.id)
        assert stored.name == "Ambush at File Island"
        assert stored.phase == EncounterPhase.SETUP
        assert stored.round == 0

    def test_blank_name(self, engine):
        with pytest.raises(ValidationError):
            engine.create_encounter("  ")

    def test_turn_order_by_initiative(self, engine, trio):
        encounter_id, p = trio
        encounter = engine.get_encounter(encounter_id)
        assert encounter.turn_order == [p["P2"].id, p["P1"].id, p["P3"].id]
        assert encounter.current_turn_index == 0

    def test_duplicate_participant_ignored(self, engine, trio):
        encounter_id, p = trio
        encounter = engine.add_participant(encounter_id, p["P1"])
        assert len(encounter.participants) == 3

    def test_unknown_encounter(self, engine):
        assert engine.add_participant("missing", make_participant("X", 1)) is None
        assert engine.next_turn("missing") is None
        assert engine.get_current_participant("missing") is None

    def test_unknown_participant_unchanged(self, engine, trio):
        encounter_id, _ = trio
        before = engine.get_encounter(encounter_id)
        after = engine.set_initiative(encounter_id, "missing", 30)
        assert after.turn_order == before.turn_order

    def test_set_initiative_reorders(self, engine, trio):
        encounter_id, p = trio
        encounter = engine.set_initiative(encounter_id, p["P3"].id, 20, initiative_roll=14)
        assert encounter.turn_order[0] == p["P3"].id
        assert encounter.get_participant(p["P3"].id).initiative_roll == 14

    def test_update_participant(self, engine, trio):
        encounter_id, p = trio
        encounter = engine.update_participant(encounter_id, p["P1"].id, current_stance="brave", current_wounds=2)
        participant = encounter.get_participant(p["P1"].id)
        assert participant.current_stance == Stance.BRAVE
        assert participant.current_wounds == 2

    def test_update_unknown_field(self, engine, trio):
        encounter_id, p = trio
        with pytest.raises(ValidationError):
            engine.update_participant(encounter_id, p["P1"].id, initiative=99)

    def test_ended_encounter_refuses_participants(self, engine, trio):
        encounter_id, _ = trio
        engine.end_combat(encounter_id)
        encounter = engine.add_participant(encounter_id, make_participant("Late", 20))
        assert len(encounter.participants) == 3


class TestStartCombat:
    """Tests for start_combat."""

    def test_start(self, engine, in_combat):
        encounter_id, p = in_combat
        encounter = engine.get_encounter(encounter_id)
        assert encounter.phase == EncounterPhase.COMBAT
        assert encounter.round == 1
        assert encounter.current_turn_index == 0
        assert encounter.get_participant(p["P2"].id).is_active

    def test_start_from_initiative(self, engine, trio):
        encounter_id, _ = trio
        engine.request_initiative(encounter_id)
        assert engine.start_combat(encounter_id).phase == EncounterPhase.COMBAT

    def test_cannot_start_twice(self, engine, in_combat):
        """A second start is refused and leaves the encounter as it was."""
        encounter_id, _ = in_combat
        engine.next_turn(encounter_id)
        encounter = engine.start_combat(encounter_id)
        assert encounter.current_turn_index == 1

    def test_transition_logged(self, engine, in_combat):
        encounter_id, _ = in_combat
        [event] = get_run_log().get_transitions()
        assert event.encounter_id == encounter_id
        assert event.to_state == "combat"


class TestNextTurn:
    """Tests for turn advancement and round wraparound."""

    def test_order_of_turns(self, engine, in_combat):
        encounter_id, _ = in_combat
        assert current_name(engine, encounter_id) == "P2"
        engine.next_turn(encounter_id)
        assert current_name(engine, encounter_id) == "P1"
        engine.next_turn(encounter_id)
        assert current_name(engine, encounter_id) == "P3"

    def test_full_cycle_starts_next_round(self, engine, in_combat):
        """len(order) advances return the cursor to 0 and add exactly one round."""
        encounter_id, _ = in_combat
        for _ in range(3):
            encounter = engine.next_turn(encounter_id)
        assert encounter.current_turn_index == 0
        assert encounter.round == 2

    def test_flags(self, engine, in_combat):
        encounter_id, p = in_combat
        encounter = engine.next_turn(encounter_id)
        assert encounter.get_participant(p["P2"].id).has_acted
        assert not encounter.get_participant(p["P2"].id).is_active
        assert encounter.get_participant(p["P1"].id).is_active

    def test_wraparound_resets_budgets(self, engine, in_combat):
        encounter_id, p = in_combat
        engine.update_participant(encounter_id, p["P1"].id, has_acted=True)
        encounter = engine.get_encounter(encounter_id)
        participant = encounter.get_participant(p["P1"].id)
        participant.actions_remaining.simple = 0
        participant.actions_remaining.complex = 0
        engine.store.save(encounter)

        for _ in range(3):
            encounter = engine.next_turn(encounter_id)
        participant = encounter.get_participant(p["P1"].id)
        assert (participant.actions_remaining.simple, participant.actions_remaining.complex) == (2, 1)
        assert not participant.has_acted

    def test_last_actor_marked_after_wraparound(self, engine, in_combat):
        """The participant ending the round still shows as having acted."""
        encounter_id, p = in_combat
        for _ in range(3):
            encounter = engine.next_turn(encounter_id)
        assert encounter.get_participant(p["P3"].id).has_acted
        assert not encounter.get_participant(p["P1"].id).has_acted

    def test_one_round_effect_expires_on_wraparound(self, engine, in_combat):
        """A 1-round effect survives the turns of a round and is gone when the next starts."""
        encounter_id, p = in_combat
        engine.add_effect(encounter_id, p["P1"].id, ActiveEffect("Burn", 1))
        for _ in range(2):
            encounter = engine.next_turn(encounter_id)
            assert [e.name for e in encounter.get_participant(p["P1"].id).active_effects] == ["Burn"]
        encounter = engine.next_turn(encounter_id)
        assert encounter.get_participant(p["P1"].id).active_effects == []

    def test_expired_effects_logged(self, engine, in_combat):
        encounter_id, p = in_combat
        engine.add_effect(encounter_id, p["P3"].id, ActiveEffect("Stun", 1))
        for _ in range(3):
            engine.next_turn(encounter_id)
        last_turn = get_run_log().get_turns()[-1]
        assert last_turn.new_round
        assert last_turn.round == 2
        assert last_turn.expired_effects == ["P3: Stun"]

    def test_longer_effect_counts_down(self, engine, in_combat):
        encounter_id, p = in_combat
        engine.add_effect(encounter_id, p["P1"].id, ActiveEffect("Shield", 3))
        for _ in range(3):
            encounter = engine.next_turn(encounter_id)
        [effect] = encounter.get_participant(p["P1"].id).active_effects
        assert effect.duration == 2

    def test_outside_combat_unchanged(self, engine, trio):
        encounter_id, _ = trio
        encounter = engine.next_turn(encounter_id)
        assert encounter.current_turn_index == 0
        assert encounter.round == 0

    def test_empty_order_unchanged(self, engine, encounter):
        engine.start_combat(encounter.id)
        assert engine.next_turn(encounter.id).round == 1

    def test_single_participant_wraps_every_turn(self, engine, encounter):
        engine.add_participant(encounter.id, make_participant("Solo", 10))
        engine.start_combat(encounter.id)
        assert engine.next_turn(encounter.id).round == 2
        assert engine.next_turn(encounter.id).round == 3


class TestInitiativeChangesDuringCombat:
    """Tests that reordering keeps the turn with the current actor."""

    def test_cursor_follows_current_actor(self, engine, in_combat):
        encounter_id, p = in_combat
        engine.next_turn(encounter_id)
        encounter = engine.set_initiative(encounter_id, p["P3"].id, 30)
        assert encounter.turn_order == [p["P3"].id, p["P2"].id, p["P1"].id]
        assert current_name(engine, encounter_id) == "P1"

    def test_late_joiner(self, engine, in_combat):
        encounter_id, _ = in_combat
        engine.next_turn(encounter_id)
        engine.add_participant(encounter_id, make_participant("Fast", 40))
        assert current_name(engine, encounter_id) == "P1"


class TestRemoveParticipant:
    """Tests for removing participants."""

    def test_remove_before_cursor(self, engine, in_combat):
        encounter_id, p = in_combat
        engine.next_turn(encounter_id)
        encounter = engine.remove_participant(encounter_id, p["P2"].id)
        assert encounter.current_turn_index == 0
        assert current_name(engine, encounter_id) == "P1"

    def test_remove_after_cursor(self, engine, in_combat):
        encounter_id, p = in_combat
        encounter = engine.remove_participant(encounter_id, p["P3"].id)
        assert current_name(engine, encounter_id) == "P2"
        assert len(encounter.turn_order) == 2

    def test_remove_current_hands_turn_on(self, engine, in_combat):
        encounter_id, p = in_combat
        engine.next_turn(encounter_id)
        encounter = engine.remove_participant(encounter_id, p["P1"].id)
        assert current_name(engine, encounter_id) == "P3"
        assert encounter.get_participant(p["P3"].id).is_active

    def test_remove_last_clamps(self, engine, in_combat):
        encounter_id, p = in_combat
        engine.next_turn(encounter_id)
        engine.next_turn(encounter_id)
        encounter = engine.remove_participant(encounter_id, p["P3"].id)
        assert encounter.current_turn_index == 1

    def test_remove_everyone(self, engine, in_combat):
        encounter_id, p = in_combat
        for participant in p.values():
            encounter = engine.remove_participant(encounter_id, participant.id)
        assert encounter.turn_order == []
        assert encounter.current_turn_index == 0
        assert engine.get_current_participant(encounter_id) is None


class TestEffects:
    """Tests for add_effect and remove_effect."""

    def test_non_positive_duration(self, engine, trio):
        encounter_id, p = trio
        with pytest.raises(ValidationError):
            engine.add_effect(encounter_id, p["P1"].id, ActiveEffect("Nothing", 0))

    def test_remove_effect(self, engine, trio):
        encounter_id, p = trio
        effect = ActiveEffect("Burn", 2)
        engine.add_effect(encounter_id, p["P1"].id, effect)
        encounter = engine.remove_effect(encounter_id, p["P1"].id, effect.id)
        assert encounter.get_participant(p["P1"].id).active_effects == []


class TestEndCombat:
    """Tests for end_combat."""

    def test_end(self, engine, in_combat):
        encounter_id, _ = in_combat
        encounter = engine.end_combat(encounter_id)
        assert encounter.phase == EncounterPhase.ENDED
        assert not any(p.is_active for p in encounter.participants)

    def test_ended_is_terminal(self, engine, in_combat):
        encounter_id, _ = in_combat
        engine.end_combat(encounter_id)
        assert engine.start_combat(encounter_id).phase == EncounterPhase.ENDED
        assert engine.next_turn(encounter_id).phase == EncounterPhase.ENDED


class TestBattleLog:
    """Tests for the battle log."""

    def test_append(self, engine, in_combat):
        encounter_id, p = in_combat
        entry = BattleLogEntry(round=1, actor_id=p["P2"].id, actor_name="P2", action="Pepper Breath",
                               target="P1", result="hit", damage=3)
        engine.append_battle_log_entry(encounter_id, entry)
        engine.append_battle_log_entry(encounter_id, BattleLogEntry(round=1, actor_id=p["P1"].id, actor_name="P1", action="Guard"))
        encounter = engine.get_encounter(encounter_id)
        assert [e.action for e in encounter.battle_log] == ["Pepper Breath", "Guard"]
        assert encounter.battle_log[0].id != encounter.battle_log[1].id


class TestHazards:
    """Tests for encounter hazards."""

    def test_add_and_remove(self, engine, encounter):
        hazard = hazard_from_template(get_hazard_template("lava-pool"))
        assert engine.add_hazard(encounter.id, hazard).hazards[0].name == "Lava Pool"
        assert engine.add_hazard(encounter.id, hazard).hazards == [hazard]
        assert engine.remove_hazard(encounter.id, hazard.id).hazards == []

    def test_update(self, engine, encounter):
        hazard = Hazard(name="Fog", duration=2)
        engine.add_hazard(encounter.id, hazard)
        encounter = engine.update_hazard(encounter.id, hazard.id, duration=5, effect="Blinds")
        assert encounter.hazards[0].duration == 5
        assert encounter.hazards[0].effect == "Blinds"

    def test_update_bad_field(self, engine, encounter):
        hazard = Hazard(name="Fog", duration=2)
        engine.add_hazard(encounter.id, hazard)
        with pytest.raises(ValidationError):
            engine.update_hazard(encounter.id, hazard.id, id="other")
        with pytest.raises(ValidationError):
            engine.update_hazard(encounter.id, hazard.id, strength=3)

    def test_decrement(self, engine, encounter):
        """Timed hazards count down and drop out; permanent ones stay."""
        engine.add_hazard(encounter.id, Hazard(name="Lava Pool"))
        engine.add_hazard(encounter.id, Hazard(name="Sandstorm", duration=2))
        encounter = engine.decrement_hazard_durations(encounter.id)
        assert [(h.name, h.duration) for h in encounter.hazards] == [("Lava Pool", None), ("Sandstorm", 1)]
        encounter = engine.decrement_hazard_durations(encounter.id)
        assert [h.name for h in encounter.hazards] == ["Lava Pool"]

    def test_turns_do_not_tick_hazards(self, engine, in_combat):
        encounter_id, _ = in_combat
        engine.add_hazard(encounter_id, Hazard(name="Sandstorm", duration=1))
        for _ in range(3):
            encounter = engine.next_turn(encounter_id)
        assert encounter.hazards[0].duration == 1
