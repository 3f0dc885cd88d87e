"""
Tests for quality eligibility and acquisition.
"""

from dataclasses import replace

import pytest

from src.data_models import NotFoundError, OwnedQuality, RuleCode, RuleViolation, Stage
from src.observability import get_run_log
from src.qualities import (
    Prerequisite,
    QualityType,
    acquire_quality,
    available_qualities,
    check_acquisition,
    get_quality_manager,
    negative_dp_taken,
    prerequisites_met,
    total_dp_spent,
    validate_qualities,
)


def owned(quality_id: str, ranks: int = 1, choice_id: str = None) -> OwnedQuality:
    """Build an owned quality from the catalogue."""
    template = get_quality_manager().get(quality_id)
    return OwnedQuality(
        id=quality_id,
        name=template.name,
        ranks=ranks,
        choice_id=choice_id,
        dp_cost=template.cost_for(choice_id),
    )


def available_ids(stage, qualities) -> set[str]:
    return {q.id for q in available_qualities(stage, qualities)}


class TestAvailableQualities:
    """Tests for available_qualities."""

    def test_weapon_at_cap_hidden_at_champion(self):
        """Weapon rank 2 is the champion cap, so no further rank is offered."""
        assert "weapon" not in available_ids(Stage.CHAMPION, [owned("weapon", 2)])

    def test_weapon_below_cap_offered_at_ultimate(self):
        """The same build at ultimate may take a third rank."""
        assert "weapon" in available_ids(Stage.ULTIMATE, [owned("weapon", 2)])

    def test_zero_cap_hides_unowned(self):
        """Weapon has no rank available before rookie."""
        assert "weapon" not in available_ids(Stage.IN_TRAINING, [])
        assert "weapon" in available_ids(Stage.ROOKIE, [])

    def test_stage_gate(self):
        assert "mighty-blow" not in available_ids(Stage.ROOKIE, [])
        assert "mighty-blow" in available_ids(Stage.CHAMPION, [])

    def test_prerequisite_hides_until_met(self):
        """Berserker needs Combat Monster."""
        assert "berserker" not in available_ids(Stage.ROOKIE, [])
        assert "berserker" in available_ids(Stage.ROOKIE, [owned("combat-monster")])

    def test_ranked_prerequisite(self):
        """Teleport needs Speedy at rank 3."""
        assert "teleport" not in available_ids(Stage.ROOKIE, [owned("speedy", 2)])
        assert "teleport" in available_ids(Stage.ROOKIE, [owned("speedy", 3)])

    def test_exclusion_checked_both_ways(self):
        """Berserker and Braveheart block each other whichever is owned."""
        base = [owned("combat-monster")]
        assert "braveheart" not in available_ids(Stage.ROOKIE, base + [owned("berserker")])
        assert "berserker" not in available_ids(Stage.ROOKIE, base + [owned("braveheart")])

    def test_undeclared_exclusion_side(self):
        """Owning Combat Monster hides Cross Counter even though only Cross Counter declares it."""
        counter = [owned("counterattack")]
        assert "cross-counter" in available_ids(Stage.ROOKIE, counter)
        assert "cross-counter" not in available_ids(Stage.ROOKIE, counter + [owned("combat-monster")])

    def test_exclusions_are_not_transitive(self):
        """Braveheart and Positive Reinforcement share Berserker as a conflict, nothing more."""
        build = [owned("combat-monster"), owned("braveheart")]
        assert "positive-reinforcement" in available_ids(Stage.ROOKIE, build)

    def test_type_filter(self):
        """Filtering by type returns only that cost class."""
        result = available_qualities(Stage.ROOKIE, [], quality_type=QualityType.FREE)
        assert result
        assert all(q.quality_type == QualityType.FREE for q in result)

    def test_results_follow_catalogue_order(self):
        """Available qualities keep catalogue order."""
        catalogue = get_quality_manager().get_all_ids()
        result = [q.id for q in available_qualities(Stage.ROOKIE, [])]
        assert result == [qid for qid in catalogue if qid in set(result)]


class TestPrerequisites:
    """Tests for prerequisites_met."""

    def test_all_prerequisites_required(self):
        """One for All needs both Combat Monster and Braveheart."""
        template = get_quality_manager().get("one-for-all")
        check = prerequisites_met(template, [owned("combat-monster")])
        assert not check.met
        assert check.missing == ["Braveheart"]

    def test_family_prerequisite_enforced(self):
        """Fragile Equipment needs a weapon or armor quality before it is offered."""
        template = get_quality_manager().get("fragile-equipment")
        check = prerequisites_met(template, [])
        assert not check.met
        assert check.missing == ["Weapon or Armor Increasing Quality"]
        assert "fragile-equipment" not in available_ids(Stage.ROOKIE, [])

    @pytest.mark.parametrize("quality_id", ["weapon", "digizoid-armor-red"])
    def test_family_prerequisite_any_member(self, quality_id):
        """Owning any one member of the family satisfies it."""
        template = get_quality_manager().get("fragile-equipment")
        assert prerequisites_met(template, [owned(quality_id)]).met

    def test_unresolved_reference_reported_missing(self):
        """A prerequisite naming no catalogue quality can never be met."""
        template = get_quality_manager().get("teleport")
        vague = Prerequisite(quality_ref="Something Vague", text="Something Vague")
        check = prerequisites_met(replace(template, prerequisites=(vague,)), [owned("speedy", 3)])
        assert not check.met
        assert check.missing == ["Something Vague"]


class TestCheckAcquisition:
    """Tests for check_acquisition rule codes."""

    def test_unknown_quality(self):
        with pytest.raises(NotFoundError):
            check_acquisition(Stage.ROOKIE, [], "no-such-quality")

    def test_stage_gate_code(self):
        with pytest.raises(RuleViolation) as exc_info:
            check_acquisition(Stage.ROOKIE, [], "mighty-blow")
        assert exc_info.value.code == RuleCode.STAGE_GATE

    def test_rank_cap_code(self):
        with pytest.raises(RuleViolation) as exc_info:
            check_acquisition(Stage.CHAMPION, [owned("weapon", 2)], "weapon")
        assert exc_info.value.code == RuleCode.RANK_CAP
        assert exc_info.value.details["max_ranks"] == 2

    def test_exclusive_conflict_code(self):
        build = [owned("combat-monster"), owned("berserker")]
        with pytest.raises(RuleViolation) as exc_info:
            check_acquisition(Stage.ROOKIE, build, "braveheart")
        assert exc_info.value.code == RuleCode.EXCLUSIVE_CONFLICT
        assert exc_info.value.details["conflicts"] == ["berserker"]

    def test_prerequisite_code(self):
        with pytest.raises(RuleViolation) as exc_info:
            check_acquisition(Stage.ROOKIE, [owned("speedy", 2)], "teleport")
        assert exc_info.value.code == RuleCode.PREREQUISITE_UNMET

    def test_unknown_choice(self):
        with pytest.raises(RuleViolation) as exc_info:
            check_acquisition(Stage.ROOKIE, [], "data-optimization", choice_id="wizard")
        assert exc_info.value.code == RuleCode.UNKNOWN_CHOICE

    def test_choice_prerequisite(self):
        """Flurry needs the close-combat optimization."""
        build = [owned("data-optimization", choice_id="guardian")]
        with pytest.raises(RuleViolation) as exc_info:
            check_acquisition(Stage.ULTIMATE, build, "data-specialization", choice_id="flurry")
        assert exc_info.value.code == RuleCode.CHOICE_PREREQUISITE_UNMET

    def test_choice_prerequisite_met(self):
        build = [owned("data-optimization", choice_id="close-combat")]
        template = check_acquisition(Stage.ULTIMATE, build, "data-specialization", choice_id="flurry")
        assert template.cost_for("flurry") == 3

    def test_negative_limit(self):
        """A rookie may recover at most 1 DP from negative qualities."""
        check_acquisition(Stage.ROOKIE, [], "bulky")
        with pytest.raises(RuleViolation) as exc_info:
            check_acquisition(Stage.ROOKIE, [owned("bulky")], "bulky")
        assert exc_info.value.code == RuleCode.NEGATIVE_LIMIT

    def test_negative_refused_before_rookie(self):
        with pytest.raises(RuleViolation) as exc_info:
            check_acquisition(Stage.IN_TRAINING, [], "disobedient")
        assert exc_info.value.code == RuleCode.NEGATIVE_LIMIT


class TestAcquireQuality:
    """Tests for acquire_quality."""

    def test_adds_first_rank(self, rookie):
        updated = acquire_quality(rookie, "speedy")
        assert updated.get_quality("speedy").ranks == 1
        assert rookie.get_quality("speedy") is None

    def test_increments_rank(self, rookie):
        updated = acquire_quality(acquire_quality(rookie, "speedy"), "speedy")
        assert updated.get_quality("speedy").ranks == 2
        assert len(updated.qualities) == 1

    def test_choice_recorded(self, rookie):
        """The chosen optimization is stored on the quality and the Digimon."""
        updated = acquire_quality(rookie, "data-optimization", choice_id="brawler")
        owned_quality = updated.get_quality("data-optimization")
        assert owned_quality.choice_id == "brawler"
        assert owned_quality.dp_cost == 2
        assert updated.data_optimization == "brawler"

    def test_refusal_leaves_input_unchanged(self, champion):
        """A refused acquisition changes nothing."""
        build = acquire_quality(acquire_quality(champion, "weapon"), "weapon")
        with pytest.raises(RuleViolation):
            acquire_quality(build, "weapon")
        assert build.get_quality("weapon").ranks == 2

    def test_refusal_logged_as_rule_check(self, rookie):
        """Refusals are recorded in the run log."""
        with pytest.raises(RuleViolation):
            acquire_quality(rookie, "mighty-blow")
        [event] = get_run_log().get_rule_checks()
        assert event.code == "stage_gate"
        assert event.subject_id == rookie.id


class TestBuildValidation:
    """Tests for DP totals and validate_qualities."""

    def test_dp_totals(self):
        build = [owned("speedy", 3), owned("bulky")]
        assert total_dp_spent(build) == 2
        assert negative_dp_taken(build) == 1

    def test_legal_build_has_no_violations(self, ultimate):
        build = acquire_quality(acquire_quality(ultimate, "weapon"), "weapon")
        assert validate_qualities(build) == []

    def test_devolved_build_reports_rank_cap(self, ultimate):
        """Dropping to champion leaves Weapon over its cap."""
        build = ultimate
        for _ in range(3):
            build = acquire_quality(build, "weapon")
        build.stage = Stage.CHAMPION
        codes = [v.code for v in validate_qualities(build)]
        assert codes == [RuleCode.RANK_CAP]

    def test_conflicting_pair_reported_once(self, rookie):
        rookie.qualities = [owned("combat-monster"), owned("berserker"), owned("braveheart")]
        codes = [v.code for v in validate_qualities(rookie)]
        assert codes.count(RuleCode.EXCLUSIVE_CONFLICT) == 1
