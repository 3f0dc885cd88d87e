"""
Tests for the SQLite entity store.
"""

import sqlite3

import pytest

from src.data_models import Encounter, Stage, StorageFailure, ValidationError
from src.storage import EntityKind, EntityStore


class TestEntityStore:
    """Tests for the collaborator contract."""

    def test_insert_and_get(self, store, rookie):
        store.insert(rookie)
        loaded = store.get(EntityKind.DIGIMON, rookie.id)
        assert loaded.name == "Agumon"
        assert loaded.derived_stats == rookie.derived_stats

    def test_get_missing(self, store):
        assert store.get(EntityKind.TAMER, "missing") is None

    def test_kind_as_string(self, store, sample_tamer):
        store.insert(sample_tamer)
        assert store.get("tamer", sample_tamer.id).name == "Tai Kamiya"

    def test_kinds_are_separate(self, store, rookie):
        store.insert(rookie)
        assert store.get(EntityKind.TAMER, rookie.id) is None

    def test_duplicate_insert(self, store, rookie):
        store.insert(rookie)
        with pytest.raises(StorageFailure) as exc_info:
            store.insert(rookie)
        assert exc_info.value.__cause__ is not None

    def test_save_upserts(self, store, rookie):
        store.save(rookie)
        rookie.notes = "Loves meat"
        store.save(rookie)
        assert store.get(EntityKind.DIGIMON, rookie.id).notes == "Loves meat"
        assert store.count(EntityKind.DIGIMON) == 1

    def test_rejects_unknown_object(self, store):
        with pytest.raises(ValidationError):
            store.save({"id": "x"})

    def test_list_with_filters(self, store, rookie, champion):
        champion.is_enemy = True
        store.insert(rookie)
        store.insert(champion)
        assert len(store.list_all(EntityKind.DIGIMON)) == 2
        assert [d.name for d in store.list_all(EntityKind.DIGIMON, is_enemy=True)] == ["Greymon"]
        assert [d.name for d in store.list_all(EntityKind.DIGIMON, stage=Stage.ROOKIE)] == ["Agumon"]

    def test_update_keeps_other_fields(self, store, rookie):
        store.insert(rookie)
        updated = store.update(EntityKind.DIGIMON, rookie.id, {"notes": "Partner of Tai"})
        assert updated.notes == "Partner of Tai"
        assert updated.species == "Agumon"
        assert store.get(EntityKind.DIGIMON, rookie.id).notes == "Partner of Tai"

    def test_update_cannot_change_id(self, store, rookie):
        store.insert(rookie)
        assert store.update(EntityKind.DIGIMON, rookie.id, {"id": "other"}).id == rookie.id

    def test_update_missing(self, store):
        assert store.update(EntityKind.DIGIMON, "missing", {"notes": "x"}) is None

    def test_update_invalid_value(self, store, rookie):
        store.insert(rookie)
        with pytest.raises(ValidationError):
            store.update(EntityKind.DIGIMON, rookie.id, {"stage": "legendary"})
        assert store.get(EntityKind.DIGIMON, rookie.id).stage == Stage.ROOKIE

    def test_delete(self, store, rookie):
        store.insert(rookie)
        assert store.delete(EntityKind.DIGIMON, rookie.id)
        assert not store.delete(EntityKind.DIGIMON, rookie.id)
        assert store.count(EntityKind.DIGIMON) == 0

    def test_encounter_round_trip(self, store):
        encounter = Encounter(name="Ambush")
        store.insert(encounter)
        assert store.get(EntityKind.ENCOUNTER, encounter.id).name == "Ambush"

    def test_file_database_persists(self, tmp_path, sample_tamer):
        path = tmp_path / "nested" / "gm.db"
        first = EntityStore(path)
        first.insert(sample_tamer)
        first.close()

        second = EntityStore(path)
        assert second.get(EntityKind.TAMER, sample_tamer.id).name == "Tai Kamiya"
        second.close()

    def test_file_connections_closed(self, tmp_path, monkeypatch, rookie):
        """Each operation on a file database closes the connection it opened."""
        opened = []
        connect = sqlite3.connect

        def tracking_connect(*args, **kwargs):
            conn = connect(*args, **kwargs)
            opened.append(conn)
            return conn

        monkeypatch.setattr(sqlite3, "connect", tracking_connect)
        store = EntityStore(tmp_path / "gm.db")
        store.insert(rookie)
        with pytest.raises(StorageFailure):
            store.insert(rookie)
        assert store.get(EntityKind.DIGIMON, rookie.id).name == "Agumon"

        assert len(opened) == 4
        for conn in opened:
            with pytest.raises(sqlite3.ProgrammingError):
                conn.execute("SELECT 1")
