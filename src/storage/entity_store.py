"""
Entity store for the Digimon GM Assistant.

SQLite-backed persistence for the four entity kinds (tamers, Digimon,
encounters, evolution lines). Each entity is stored as its to_dict() JSON
under (kind, id). The rules engine talks to this class only through
get / list_all / insert / update / save / delete and never issues joins or
transactions spanning several entities.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from src.data_models import (
    Digimon,
    Encounter,
    EvolutionLine,
    StorageFailure,
    Tamer,
    ValidationError,
)

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    """Kinds of persisted entity."""

    TAMER = "tamer"
    DIGIMON = "digimon"
    ENCOUNTER = "encounter"
    EVOLUTION_LINE = "evolution_line"


ENTITY_CLASSES: dict[EntityKind, type] = {
    EntityKind.TAMER: Tamer,
    EntityKind.DIGIMON: Digimon,
    EntityKind.ENCOUNTER: Encounter,
    EntityKind.EVOLUTION_LINE: EvolutionLine,
}

Entity = Union[Tamer, Digimon, Encounter, EvolutionLine]


class EntityStore:
    """
    Load/save-by-id and query-by-filter storage for game entities.

    Every sqlite3 error is re-raised as StorageFailure; nothing is swallowed.
    """

    def __init__(self, db_path: Optional[Union[Path, str]] = None):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file. If None, uses in-memory database.
        """
        self.db_path = Path(db_path) if db_path else Path(":memory:")
        self._memory_conn: Optional[sqlite3.Connection] = None
        self._init_database()
        logger.info(f"EntityStore initialized with database: {self.db_path}")

    def _init_database(self) -> None:
        """Initialize the SQLite database schema."""
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS entities (
                        kind TEXT NOT NULL,
                        entity_id TEXT NOT NULL,
                        data_json TEXT NOT NULL,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL,
                        PRIMARY KEY (kind, entity_id)
                    )
                """)
                cursor.execute("""
                    CREATE INDEX IF NOT EXISTS idx_entities_kind
                    ON entities(kind)
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise StorageFailure(f"Could not initialize database {self.db_path}: {e}") from e

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """
        Open a connection for one unit of work.

        Commits on success and rolls back on error. The in-memory database keeps
        one shared connection; a file database gets a fresh connection that is
        closed when the block exits.
        """
        if str(self.db_path) == ":memory:":
            if self._memory_conn is None:
                self._memory_conn = sqlite3.connect(":memory:")
            with self._memory_conn:
                yield self._memory_conn
            return
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def close(self) -> None:
        if self._memory_conn is not None:
            self._memory_conn.close()
            self._memory_conn = None

    # =========================================================================
    # CODEC
    # =========================================================================

    @staticmethod
    def _decode(kind: EntityKind, data: dict[str, Any]) -> Entity:
        try:
            return ENTITY_CLASSES[kind].from_dict(data)
        except (KeyError, ValueError, TypeError) as e:
            raise ValidationError(f"Invalid {kind.value} record: {e}") from e

    @staticmethod
    def _kind_of(entity: Entity) -> EntityKind:
        for kind, cls in ENTITY_CLASSES.items():
            if isinstance(entity, cls):
                return kind
        raise ValidationError(f"Cannot store object of type {type(entity).__name__}", field="entity")

    # =========================================================================
    # COLLABORATOR CONTRACT
    # =========================================================================

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        """
        Get an entity by id.

        Returns:
            The entity, or None if not found
        """
        kind = EntityKind(kind)
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT data_json FROM entities WHERE kind = ? AND entity_id = ?",
                    (kind.value, entity_id),
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StorageFailure(f"Could not read {kind.value} {entity_id}: {e}") from e

        if row is None:
            return None
        return self._decode(kind, json.loads(row[0]))

    def list_all(self, kind: EntityKind, **filters: Any) -> list[Entity]:
        """
        List every entity of a kind, optionally filtered.

        Filters are equality checks on top-level record fields,
        e.g. list_all(EntityKind.DIGIMON, is_enemy=True).
        """
        kind = EntityKind(kind)
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT data_json FROM entities WHERE kind = ? ORDER BY created_at, entity_id",
                    (kind.value,),
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StorageFailure(f"Could not list {kind.value} records: {e}") from e

        results = []
        for (data_json,) in rows:
            data = json.loads(data_json)
            if all(data.get(key) == _plain(value) for key, value in filters.items()):
                results.append(self._decode(kind, data))
        return results

    def insert(self, entity: Entity) -> Entity:
        """
        Insert a new entity.

        Raises:
            StorageFailure: the id already exists or the write failed
        """
        kind = self._kind_of(entity)
        now = datetime.now().isoformat()
        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO entities (kind, entity_id, data_json, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (kind.value, entity.id, json.dumps(entity.to_dict()), now, now),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StorageFailure(f"Could not insert {kind.value} {entity.id}: {e}") from e

        logger.debug(f"Inserted {kind.value}/{entity.id}")
        return entity

    def save(self, entity: Entity) -> Entity:
        """Insert or fully replace an entity."""
        kind = self._kind_of(entity)
        now = datetime.now().isoformat()
        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO entities (kind, entity_id, data_json, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(kind, entity_id)
                    DO UPDATE SET data_json = excluded.data_json, updated_at = excluded.updated_at
                    """,
                    (kind.value, entity.id, json.dumps(entity.to_dict()), now, now),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StorageFailure(f"Could not save {kind.value} {entity.id}: {e}") from e

        logger.debug(f"Saved {kind.value}/{entity.id}")
        return entity

    def update(self, kind: EntityKind, entity_id: str, fields: dict[str, Any]) -> Optional[Entity]:
        """
        Merge `fields` into a stored entity, keeping every other field.

        Returns:
            The updated entity, or None if not found

        Raises:
            ValidationError: the merged record is not a valid entity
        """
        kind = EntityKind(kind)
        current = self.get(kind, entity_id)
        if current is None:
            return None

        data = current.to_dict()
        data.update({key: _plain(value) for key, value in fields.items() if key != "id"})
        data["updated_at"] = datetime.now().isoformat()
        updated = self._decode(kind, data)
        self.save(updated)
        return updated

    def delete(self, kind: EntityKind, entity_id: str) -> bool:
        """
        Delete an entity.

        Returns:
            True if an entity was deleted
        """
        kind = EntityKind(kind)
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "DELETE FROM entities WHERE kind = ? AND entity_id = ?",
                    (kind.value, entity_id),
                )
                conn.commit()
                deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StorageFailure(f"Could not delete {kind.value} {entity_id}: {e}") from e

        if deleted:
            logger.debug(f"Deleted {kind.value}/{entity_id}")
        return deleted

    def count(self, kind: EntityKind) -> int:
        kind = EntityKind(kind)
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM entities WHERE kind = ?", (kind.value,))
                return cursor.fetchone()[0]
        except sqlite3.Error as e:
            raise StorageFailure(f"Could not count {kind.value} records: {e}") from e


def _plain(value: Any) -> Any:
    """Convert enums and records to their stored JSON form."""
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value
