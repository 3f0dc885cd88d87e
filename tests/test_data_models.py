"""
Unit tests for core data models.

Tests the stage table, error taxonomy and the combat/evolution records in
src/data_models.py.
"""

import pytest

from src.data_models import (
    ActiveEffect,
    ActionBudget,
    Aspect,
    AspectType,
    BattleLogEntry,
    CombatParticipant,
    Digimon,
    Encounter,
    EvolutionLine,
    Hazard,
    NotFoundError,
    OwnedQuality,
    ParticipantType,
    RuleCode,
    RuleViolation,
    STAGE_CONFIG,
    STAGE_ORDER,
    Stage,
    Torment,
    TormentSeverity,
    ValidationError,
    compare_stages,
    get_stage_config,
    max_negative_dp,
)
from tests.helpers import make_participant


class TestStageTable:
    """Tests for stage constants and ordering."""

    def test_stage_order_is_progression(self):
        """Stages run fresh through ultra."""
        assert STAGE_ORDER[0] == Stage.FRESH
        assert STAGE_ORDER[-1] == Stage.ULTRA
        assert len(STAGE_ORDER) == 7

    def test_every_stage_has_config(self):
        """Every stage has a config entry."""
        assert set(STAGE_CONFIG) == set(Stage)

    def test_rookie_constants(self):
        """Rookie constants match the rulebook table."""
        config = get_stage_config(Stage.ROOKIE)
        assert config.dp == 25
        assert config.movement == 6
        assert config.wound_bonus == 2
        assert config.brains == 3
        assert config.attacks == 2
        assert config.stage_bonus == 1

    def test_values_never_decrease_with_stage(self):
        """DP, movement and brains grow monotonically."""
        configs = [STAGE_CONFIG[s] for s in STAGE_ORDER]
        for lower, higher in zip(configs, configs[1:]):
            assert lower.dp < higher.dp
            assert lower.movement <= higher.movement
            assert lower.brains <= higher.brains

    def test_get_stage_config_accepts_string(self):
        """Stage values can be passed as plain strings."""
        assert get_stage_config("in-training").dp == 15

    def test_compare_stages(self):
        """compare_stages orders by progression, not alphabetically."""
        assert compare_stages(Stage.CHAMPION, Stage.ULTIMATE) < 0
        assert compare_stages(Stage.MEGA, Stage.CHAMPION) > 0
        assert compare_stages(Stage.ROOKIE, Stage.ROOKIE) == 0

    def test_negative_allowance(self):
        """Negative DP allowance is zero before rookie."""
        assert max_negative_dp(Stage.FRESH) == 0
        assert max_negative_dp(Stage.IN_TRAINING) == 0
        assert max_negative_dp(Stage.ROOKIE) == 1
        assert max_negative_dp(Stage.ULTRA) == 5


class TestErrors:
    """Tests for the error taxonomy."""

    def test_validation_error_carries_field(self):
        """ValidationError names the offending field."""
        error = ValidationError("Name is required", field="name")
        assert error.field == "name"
        assert str(error) == "Name is required"

    def test_not_found_error_message(self):
        """NotFoundError carries kind and id."""
        error = NotFoundError("digimon", "abc")
        assert error.kind == "digimon"
        assert error.entity_id == "abc"
        assert "abc" in str(error)

    def test_rule_violation_to_dict(self):
        """RuleViolation serializes code, message and details."""
        violation = RuleViolation(RuleCode.RANK_CAP, "capped", {"max_ranks": 2})
        assert violation.to_dict() == {
            "code": "rank_cap",
            "message": "capped",
            "details": {"max_ranks": 2},
        }


class TestTamerRecords:
    """Tests for aspect and torment defaults."""

    def test_aspect_uses_by_type(self):
        """Major aspects get one use, minor aspects two."""
        assert Aspect("Leader", AspectType.MAJOR).uses_remaining == 1
        assert Aspect("Quick").uses_remaining == 2

    def test_torment_boxes_by_severity(self):
        """Torment box counts follow severity."""
        assert Torment("Fear").total_boxes == 5
        assert Torment("Grief", TormentSeverity.TERRIBLE).total_boxes == 10

    def test_torment_overcome(self):
        """A torment is overcome once every box is marked."""
        torment = Torment("Fear", marked_boxes=5)
        assert torment.is_overcome


class TestDigimonRecord:
    """Tests for the Digimon record."""

    def test_total_dp(self):
        """Total DP is stage DP plus bonus DP."""
        digimon = Digimon(name="Agumon", species="Agumon", stage=Stage.ROOKIE, base_dp=25, bonus_dp=3)
        assert digimon.total_dp == 28

    def test_get_quality(self):
        """Owned qualities are found by catalogue id."""
        digimon = Digimon(
            name="Agumon",
            species="Agumon",
            stage=Stage.ROOKIE,
            qualities=[OwnedQuality(id="weapon", name="Weapon", ranks=1, dp_cost=1)],
        )
        assert digimon.get_quality("weapon").ranks == 1
        assert digimon.get_quality("speedy") is None

    def test_dict_round_trip_keeps_links(self):
        """Serialization keeps evolution links and stage."""
        digimon = Digimon(
            name="Greymon",
            species="Greymon",
            stage=Stage.CHAMPION,
            evolves_from_id="parent",
            evolution_path_ids=["child"],
        )
        restored = Digimon.from_dict(digimon.to_dict())
        assert restored.id == digimon.id
        assert restored.stage == Stage.CHAMPION
        assert restored.evolves_from_id == "parent"
        assert restored.evolution_path_ids == ["child"]


class TestCombatRecords:
    """Tests for participants, effects and hazards."""

    def test_action_budget_reset(self):
        """Reset restores two simple and one complex action."""
        budget = ActionBudget(simple=0, complex=0)
        budget.reset()
        assert (budget.simple, budget.complex) == (2, 1)

    def test_effect_tick(self):
        """An effect expires when its duration reaches zero."""
        effect = ActiveEffect(name="Stun", duration=2)
        assert effect.tick() is False
        assert effect.tick() is True

    def test_age_effects_drops_expired(self):
        """Aging keeps only effects with rounds remaining."""
        participant = CombatParticipant(
            participant_type=ParticipantType.DIGIMON,
            entity_id="d1",
            active_effects=[ActiveEffect("Burn", 1), ActiveEffect("Shield", 3)],
        )
        expired = participant.age_effects()
        assert [e.name for e in expired] == ["Burn"]
        assert [(e.name, e.duration) for e in participant.active_effects] == [("Shield", 2)]

    def test_permanent_hazard_never_expires(self):
        """A hazard without a duration never ticks down."""
        hazard = Hazard(name="Lava Pool")
        assert hazard.tick() is False
        assert hazard.duration is None

    def test_timed_hazard_expires(self):
        """A timed hazard expires after its duration."""
        hazard = Hazard(name="Sandstorm", duration=1)
        assert hazard.tick() is True

    def test_battle_log_entry_str(self):
        """Log entries render round, actor, action and damage."""
        entry = BattleLogEntry(round=2, actor_id="a", actor_name="Agumon", action="Pepper Breath",
                               target="Gabumon", result="hit", damage=4)
        assert str(entry) == "[Round 2] Agumon: Pepper Breath -> Gabumon (hit) [4 dmg]"


class TestEncounterRecord:
    """Tests for turn order helpers on Encounter."""

    def test_turn_order_sorted_descending(self):
        """Turn order is initiative descending."""
        p1, p2, p3 = make_participant("P1", 10), make_participant("P2", 15), make_participant("P3", 8)
        encounter = Encounter(name="Test", participants=[p1, p2, p3])
        encounter.recompute_turn_order()
        assert encounter.turn_order == [p2.id, p1.id, p3.id]

    def test_turn_order_ties_keep_insertion_order(self):
        """Equal initiatives keep the order participants were added in."""
        first, second = make_participant("First", 12), make_participant("Second", 12)
        encounter = Encounter(name="Tie", participants=[first, second])
        encounter.recompute_turn_order()
        assert encounter.turn_order == [first.id, second.id]

    def test_current_participant_out_of_range(self):
        """An out-of-range cursor yields no participant."""
        encounter = Encounter(name="Empty")
        assert encounter.get_current_participant() is None
        encounter.turn_order = ["ghost"]
        encounter.current_turn_index = 3
        assert encounter.get_current_participant() is None

    def test_encounter_round_trip(self):
        """Encounters survive serialization with their participants."""
        encounter = Encounter(name="Ambush", participants=[make_participant("P1", 10)])
        encounter.recompute_turn_order()
        restored = Encounter.from_dict(encounter.to_dict())
        assert restored.turn_order == encounter.turn_order
        assert restored.participants[0].name == "P1"


class TestEvolutionLineRecord:
    """Tests for the evolution line record."""

    def test_defaults(self):
        """A new line starts at index 0 with empty progress."""
        line = EvolutionLine(name="Empty")
        assert line.current_stage_index == 0
        assert line.evolution_progress.battles_won == 0
        assert line.evolution_progress.items_collected == []
