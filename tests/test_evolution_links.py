"""
Tests for evolution links between stored Digimon.
"""

import pytest

from src.characters import add_child, ancestors, create_digimon, descendants, evolution_tree, remove_child
from src.data_models import NotFoundError, ValidationError
from src.storage import EntityKind


@pytest.fixture
def family(store, digimon_data):
    """Store Koromon, Agumon, Greymon and Geogreymon; return them by species."""
    stored = {}
    for species, stage in [
        ("Koromon", "in-training"),
        ("Agumon", "rookie"),
        ("Greymon", "champion"),
        ("GeoGreymon", "champion"),
    ]:
        digimon = create_digimon({**digimon_data, "name": species, "species": species, "stage": stage})
        store.insert(digimon)
        stored[species] = digimon
    return stored


def reload(store, digimon):
    return store.get(EntityKind.DIGIMON, digimon.id)


class TestAddChild:
    """Tests for add_child."""

    def test_both_sides_updated(self, store, family):
        parent, child = add_child(store, family["Agumon"].id, family["Greymon"].id)
        assert family["Greymon"].id in parent.evolution_path_ids
        assert child.evolves_from_id == family["Agumon"].id
        assert reload(store, family["Greymon"]).evolves_from_id == family["Agumon"].id
        assert reload(store, family["Agumon"]).evolution_path_ids == [family["Greymon"].id]

    def test_link_is_idempotent(self, store, family):
        add_child(store, family["Agumon"].id, family["Greymon"].id)
        parent, _ = add_child(store, family["Agumon"].id, family["Greymon"].id)
        assert parent.evolution_path_ids == [family["Greymon"].id]

    def test_branching(self, store, family):
        add_child(store, family["Agumon"].id, family["Greymon"].id)
        parent, _ = add_child(store, family["Agumon"].id, family["GeoGreymon"].id)
        assert parent.evolution_path_ids == [family["Greymon"].id, family["GeoGreymon"].id]

    def test_reparent_detaches_old_parent(self, store, family):
        add_child(store, family["Koromon"].id, family["Greymon"].id)
        add_child(store, family["Agumon"].id, family["Greymon"].id)
        assert reload(store, family["Koromon"]).evolution_path_ids == []
        assert reload(store, family["Greymon"]).evolves_from_id == family["Agumon"].id

    def test_self_link(self, store, family):
        with pytest.raises(ValidationError):
            add_child(store, family["Agumon"].id, family["Agumon"].id)

    def test_cycle_refused(self, store, family):
        add_child(store, family["Koromon"].id, family["Agumon"].id)
        add_child(store, family["Agumon"].id, family["Greymon"].id)
        with pytest.raises(ValidationError):
            add_child(store, family["Greymon"].id, family["Koromon"].id)

    def test_missing_digimon(self, store, family):
        with pytest.raises(NotFoundError):
            add_child(store, family["Agumon"].id, "missing")


class TestRemoveChild:
    """Tests for remove_child."""

    def test_both_sides_cleared(self, store, family):
        add_child(store, family["Agumon"].id, family["Greymon"].id)
        remove_child(store, family["Agumon"].id, family["Greymon"].id)
        assert reload(store, family["Agumon"]).evolution_path_ids == []
        assert reload(store, family["Greymon"]).evolves_from_id is None

    def test_tolerates_missing_child(self, store, family):
        """A dangling id can still be cleared from the parent."""
        parent = reload(store, family["Agumon"])
        parent.evolution_path_ids = ["ghost"]
        store.save(parent)
        remove_child(store, family["Agumon"].id, "ghost")
        assert reload(store, family["Agumon"]).evolution_path_ids == []


class TestTreeWalks:
    """Tests for ancestors, descendants and evolution_tree."""

    @pytest.fixture
    def linked(self, store, family):
        add_child(store, family["Koromon"].id, family["Agumon"].id)
        add_child(store, family["Agumon"].id, family["Greymon"].id)
        add_child(store, family["Agumon"].id, family["GeoGreymon"].id)
        return family

    def test_ancestors_nearest_first(self, store, linked):
        names = [d.name for d in ancestors(store, linked["Greymon"].id)]
        assert names == ["Agumon", "Koromon"]

    def test_descendants_depth_first(self, store, linked):
        names = [d.name for d in descendants(store, linked["Koromon"].id)]
        assert names == ["Agumon", "Greymon", "GeoGreymon"]

    def test_tree(self, store, linked):
        tree = evolution_tree(store, linked["Agumon"].id)
        assert [d.name for d in tree["ancestors"]] == ["Koromon"]
        assert tree["digimon"].name == "Agumon"
        assert [d.name for d in tree["descendants"]] == ["Greymon", "GeoGreymon"]

    def test_tree_missing(self, store):
        with pytest.raises(NotFoundError):
            evolution_tree(store, "missing")

    def test_walks_stop_on_cycle(self, store, linked):
        """Corrupt data with a cycle still terminates."""
        koromon = reload(store, linked["Koromon"])
        koromon.evolves_from_id = linked["Greymon"].id
        store.save(koromon)
        names = [d.name for d in ancestors(store, linked["Greymon"].id)]
        assert names == ["Agumon", "Koromon"]
