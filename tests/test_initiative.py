"""
Tests for initiative rolls and the encounter phase machine.
"""

import pytest

from src.combat import InvalidTransitionError, PhaseMachine, roll_initiative
from src.data_models import DiceRoller, EncounterPhase
from src.observability import get_run_log
from tests.helpers import SequenceRng


class TestRollInitiative:
    """Tests for roll_initiative."""

    def test_max_roll(self, max_rng):
        """Three sixes roll 18, and agility is added on top."""
        result = roll_initiative(4, rng=max_rng)
        assert result.roll == 18
        assert result.total == 22

    def test_min_roll(self, min_rng):
        result = roll_initiative(0, rng=min_rng)
        assert result.roll == 3
        assert result.total == 3

    def test_uses_three_dice(self, max_rng):
        roll_initiative(2, rng=max_rng)
        assert max_rng.calls == 3

    def test_sequence(self):
        result = roll_initiative(1, rng=SequenceRng([2, 5, 4]))
        assert result.roll == 11
        assert result.total == 12

    def test_seeded_rolls_repeat(self):
        DiceRoller.set_seed(99)
        first = [roll_initiative(3).total for _ in range(5)]
        DiceRoller.set_seed(99)
        second = [roll_initiative(3).total for _ in range(5)]
        assert first == second

    def test_roll_logged(self, max_rng):
        """Initiative rolls are recorded with their reason."""
        roll_initiative(2, rng=max_rng, reason="initiative: Agumon")
        [event] = get_run_log().get_rolls()
        assert event.notation == "3d6"
        assert event.total == 18
        assert event.reason == "initiative: Agumon"


class TestPhaseMachine:
    """Tests for PhaseMachine."""

    def test_starts_in_setup(self):
        machine = PhaseMachine("enc-1")
        assert machine.phase == EncounterPhase.SETUP
        assert set(machine.get_valid_triggers()) == {"request_initiative", "start_combat", "end_combat"}

    def test_full_lifecycle(self):
        machine = PhaseMachine("enc-1")
        assert machine.transition("request_initiative") == EncounterPhase.INITIATIVE
        assert machine.transition("start_combat") == EncounterPhase.COMBAT
        assert machine.transition("end_combat") == EncounterPhase.ENDED
        assert machine.is_terminal

    def test_setup_straight_to_combat(self):
        machine = PhaseMachine("enc-1")
        assert machine.transition("start_combat") == EncounterPhase.COMBAT

    def test_no_backwards_transition(self):
        machine = PhaseMachine("enc-1", EncounterPhase.COMBAT)
        assert not machine.can_transition("request_initiative")
        with pytest.raises(InvalidTransitionError):
            machine.transition("request_initiative")
        assert machine.phase == EncounterPhase.COMBAT

    def test_ended_is_terminal(self):
        machine = PhaseMachine("enc-1", EncounterPhase.ENDED)
        assert machine.get_valid_triggers() == []
        with pytest.raises(InvalidTransitionError):
            machine.transition("end_combat")

    def test_transition_logged(self):
        machine = PhaseMachine("enc-1")
        machine.transition("start_combat", context={"participants": 2})
        [event] = get_run_log().get_transitions()
        assert event.encounter_id == "enc-1"
        assert (event.from_state, event.to_state, event.trigger) == ("setup", "combat", "start_combat")
