"""
Tests for the hazard catalogue.
"""

from src.combat import (
    HAZARD_CATALOG,
    get_hazard_template,
    get_hazards_by_category,
    get_hazards_by_severity,
    hazard_from_template,
    search_hazards,
)
from src.data_models import HazardCategory, HazardSeverity


class TestHazardCatalog:
    """Tests for catalogue queries."""

    def test_ids_unique(self):
        ids = [h.id for h in HAZARD_CATALOG]
        assert len(ids) == len(set(ids))

    def test_every_category_populated(self):
        """Each category except 'other' has at least one hazard."""
        for category in HazardCategory:
            if category != HazardCategory.OTHER:
                assert get_hazards_by_category(category), category

    def test_get_template(self):
        sandstorm = get_hazard_template("sandstorm")
        assert sandstorm.duration == 5
        assert sandstorm.category == HazardCategory.WEATHER
        assert sandstorm.severity == HazardSeverity.MODERATE

    def test_get_unknown(self):
        assert get_hazard_template("dense-fog") is None

    def test_by_category_accepts_string(self):
        assert get_hazards_by_category("weather") == get_hazards_by_category(HazardCategory.WEATHER)

    def test_by_severity(self):
        severe = get_hazards_by_severity(HazardSeverity.SEVERE)
        assert "lava-pool" in {h.id for h in severe}
        assert all(h.severity == HazardSeverity.SEVERE for h in severe)

    def test_search_effect_text(self):
        """Search looks at effect text as well as names."""
        ids = {h.id for h in search_hazards("movement through this area costs double")}
        assert {"quicksand", "difficult-terrain"} <= ids


class TestHazardFromTemplate:
    """Tests for hazard_from_template."""

    def test_copies_fields(self):
        hazard = hazard_from_template(get_hazard_template("lava-pool"))
        assert hazard.name == "Lava Pool"
        assert hazard.affected_area == "10ft radius"
        assert hazard.duration is None

    def test_fresh_ids(self):
        template = get_hazard_template("spike-pit")
        assert hazard_from_template(template).id != hazard_from_template(template).id

    def test_duration_override(self):
        """An explicit duration replaces the template's."""
        hazard = hazard_from_template(get_hazard_template("heavy-rain"), duration=2)
        assert hazard.duration == 2

    def test_template_duration_kept(self):
        hazard = hazard_from_template(get_hazard_template("blizzard"))
        assert hazard.duration == 4
