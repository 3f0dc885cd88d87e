"""
Tests for the quality catalogue.

Covers prerequisite parsing, rank caps by stage, the QualityManager indexes
and the symmetric exclusion table.
"""

import pytest

from src.data_models import STAGE_ORDER, Stage
from src.qualities import (
    Prerequisite,
    QualityCategory,
    QualityManager,
    QualityType,
    get_quality_manager,
    parse_prerequisite,
)
from src.qualities.free_qualities import FREE_QUALITIES
from src.qualities.negative_qualities import NEGATIVE_QUALITIES
from src.qualities.purchasable_qualities import (
    DIGIZOID_ARMOR_IDS,
    DIGIZOID_WEAPON_IDS,
    DOMAIN_CONTROL_IDS,
    GAIN_FORCE_IDS,
)
from src.qualities.quality_data import any_of


@pytest.fixture
def manager() -> QualityManager:
    return get_quality_manager()


class TestPrerequisiteParsing:
    """Tests for parse_prerequisite."""

    def test_bare_name(self):
        """A bare name needs rank 1."""
        prereq = parse_prerequisite("Combat Monster")
        assert prereq.quality_ref == "Combat Monster"
        assert prereq.min_rank == 1

    def test_ranked(self):
        """A trailing 'Rank N' sets the minimum rank."""
        prereq = parse_prerequisite("Speedy Rank 3")
        assert prereq.quality_ref == "Speedy"
        assert prereq.min_rank == 3

    def test_parenthesized_rank(self):
        prereq = parse_prerequisite("Huge Power (Rank 1)")
        assert prereq.quality_ref == "Huge Power"
        assert prereq.min_rank == 1

    def test_rank_x_means_any(self):
        """'Rank X' accepts any owned rank."""
        assert parse_prerequisite("Armor Piercing Rank X").min_rank == 1

    def test_unresolved_has_no_accepted_ids(self):
        """A prerequisite without a quality id accepts nothing."""
        prereq = Prerequisite("Something Vague")
        assert not prereq.is_resolved
        assert prereq.accepted_ids() == ()

    def test_any_of_accepts_each_member(self):
        prereq = any_of("Sword or Shield", "sword", "shield")
        assert prereq.is_resolved
        assert prereq.accepted_ids() == ("sword", "shield")
        assert str(prereq) == "Sword or Shield"


class TestRankCaps:
    """Tests for QualityTemplate.max_ranks_at_stage."""

    def test_weapon_caps_by_stage(self, manager):
        """Weapon is capped 0/0/1/2/3/3/3 from fresh to ultra."""
        weapon = manager.get("weapon")
        caps = [weapon.max_ranks_at_stage(stage) for stage in STAGE_ORDER]
        assert caps == [0, 0, 1, 2, 3, 3, 3]

    def test_unstaged_quality_uses_max_ranks(self, manager):
        """Without a stage table the cap is max_ranks everywhere."""
        speedy = manager.get("speedy")
        assert all(speedy.max_ranks_at_stage(stage) == 10 for stage in STAGE_ORDER)

    def test_caps_are_monotonic_and_bounded(self, manager):
        """For every staged quality, caps never shrink and never exceed max_ranks."""
        staged = [q for q in manager.get_all() if q.max_ranks_by_stage]
        assert staged
        for template in staged:
            caps = [template.max_ranks_at_stage(stage) for stage in STAGE_ORDER]
            assert caps == sorted(caps), template.id
            assert max(caps) <= template.max_ranks, template.id

    def test_data_specialization_caps(self, manager):
        """Data Specialization opens at ultimate with one rank, two at ultra."""
        template = manager.get("data-specialization")
        assert template.max_ranks_at_stage(Stage.CHAMPION) == 0
        assert template.max_ranks_at_stage(Stage.ULTIMATE) == 1
        assert template.max_ranks_at_stage(Stage.ULTRA) == 2


class TestQualityManager:
    """Tests for QualityManager loading and queries."""

    def test_singleton(self):
        """QualityManager is a singleton."""
        assert QualityManager() is get_quality_manager()

    def test_all_catalogues_loaded(self, manager):
        """Free and negative qualities are all registered."""
        for template in FREE_QUALITIES + NEGATIVE_QUALITIES:
            assert template.id in manager

    def test_ids_are_unique(self, manager):
        """Every id maps to exactly one template."""
        ids = manager.get_all_ids()
        assert len(ids) == len(set(ids)) == len(manager)

    def test_get_unknown_returns_none(self, manager):
        assert manager.get("no-such-quality") is None
        assert not manager.is_valid_quality("no-such-quality")

    def test_lookup_by_name(self, manager):
        """Lookup accepts display names, case-insensitively."""
        result = manager.lookup("combat monster")
        assert result.found
        assert result.quality.id == "combat-monster"

    def test_lookup_miss_is_sentinel(self, manager):
        """A miss is reported through the result, never raised."""
        result = manager.lookup("Imaginary")
        assert not result.found
        assert result.quality is None
        assert "Imaginary" in result.error

    def test_by_type(self, manager):
        """Type index matches each template's type."""
        negatives = manager.by_type(QualityType.NEGATIVE)
        assert len(negatives) == len(NEGATIVE_QUALITIES)
        assert all(q.dp_cost < 0 for q in negatives)

    def test_by_category(self, manager):
        combat_monster = manager.by_category(QualityCategory.COMBAT_MONSTER)
        assert {"berserker", "braveheart"} <= {q.id for q in combat_monster}

    def test_search(self, manager):
        """Search matches names case-insensitively."""
        assert "teleport" in [q.id for q in manager.search("TELEPORT")]

    def test_available_at_stage_applies_gate(self, manager):
        """Stage-gated qualities only appear once the stage is reached."""
        rookie_ids = {q.id for q in manager.available_at_stage(Stage.ROOKIE)}
        champion_ids = {q.id for q in manager.available_at_stage(Stage.CHAMPION)}
        assert "mighty-blow" not in rookie_ids
        assert "mighty-blow" in champion_ids

    def test_categories_listed_with_names(self, manager):
        """Categories with qualities are listed with display names."""
        categories = {c["id"]: c["name"] for c in manager.get_categories()}
        assert categories["negative"] == "Negative Qualities"


class TestPrerequisiteResolution:
    """Tests for load-time prerequisite resolution."""

    def test_ranked_prerequisite_resolved(self, manager):
        """Teleport's 'Speedy Rank 3' resolves to the speedy id."""
        [prereq] = manager.get("teleport").prerequisites
        assert prereq.quality_id == "speedy"
        assert prereq.min_rank == 3

    def test_family_reference_resolves_to_members(self, manager):
        """Fragile Equipment accepts Weapon or any Digizoid armor."""
        [prereq] = manager.get("fragile-equipment").prerequisites
        assert prereq.accepted_ids() == ("weapon",) + DIGIZOID_ARMOR_IDS

    def test_domain_control_family(self, manager):
        """Adaptive Element needs Element Master plus any Domain Control."""
        master, domain = manager.get("adaptive-element").prerequisites
        assert master.quality_id == "element-master"
        assert domain.accepted_ids() == DOMAIN_CONTROL_IDS
        assert all(manager.get(qid).name.startswith("Domain Control: ") for qid in DOMAIN_CONTROL_IDS)

    def test_every_reference_resolves(self, manager):
        """Every catalogue prerequisite names a known quality."""
        for template in manager.get_all():
            for prereq in template.prerequisites:
                assert prereq.is_resolved, f"{template.id}: {prereq}"
                assert all(manager.is_valid_quality(qid) for qid in prereq.accepted_ids())


class TestExclusions:
    """Tests for the symmetric exclusion table."""

    def test_declared_side(self, manager):
        assert "braveheart" in manager.exclusive_with("berserker")

    def test_undeclared_side(self, manager):
        """Combat Monster never declares Cross Counter, yet excludes it both ways."""
        assert "cross-counter" not in manager.get("combat-monster").exclusive_with
        assert "cross-counter" in manager.exclusive_with("combat-monster")
        assert "combat-monster" in manager.exclusive_with("cross-counter")

    def test_relation_is_symmetric(self, manager):
        """a excludes b iff b excludes a, for the whole catalogue."""
        for quality_id in manager.get_all_ids():
            for other in manager.exclusive_with(quality_id):
                assert quality_id in manager.exclusive_with(other)

    def test_not_transitive(self, manager):
        """Sharing an exclusion partner does not make two qualities exclusive."""
        assert "positive-reinforcement" not in manager.exclusive_with("braveheart")

    def test_unknown_ids_ignored(self, manager):
        """Exclusions naming unknown qualities are dropped."""
        assert "gain-force-overwrite" not in manager.exclusive_with("braveheart")

    @pytest.mark.parametrize("family", [DIGIZOID_ARMOR_IDS, DIGIZOID_WEAPON_IDS, GAIN_FORCE_IDS])
    def test_family_members_exclude_each_other(self, manager, family):
        """Only one Digizoid armor, one Digizoid weapon and one Gain Force may be owned."""
        for quality_id in family:
            assert set(family) - {quality_id} <= manager.exclusive_with(quality_id)
