"""
Test helpers for the Digimon GM Assistant test suite.

Provides deterministic random sources and small builders for encounter
participants.
"""

from typing import Optional

from src.data_models import CombatParticipant, ParticipantType


# =============================================================================
# DETERMINISTIC RANDOM SOURCES
# =============================================================================


class FixedRng:
    """Random source that always returns the same face (clamped to the die)."""

    def __init__(self, face: int):
        self.face = face
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        self.calls += 1
        return max(a, min(b, self.face))


class SequenceRng:
    """Random source that returns the given faces in order, cycling."""

    def __init__(self, faces: list[int]):
        self.faces = list(faces)
        self.index = 0

    def randint(self, a: int, b: int) -> int:
        face = self.faces[self.index % len(self.faces)]
        self.index += 1
        return face


# =============================================================================
# PARTICIPANT BUILDERS
# =============================================================================


def make_participant(
    name: str,
    initiative: int,
    participant_type: ParticipantType = ParticipantType.DIGIMON,
    entity_id: Optional[str] = None,
) -> CombatParticipant:
    """Build a participant with a fixed initiative."""
    return CombatParticipant(
        participant_type=participant_type,
        entity_id=entity_id or f"entity-{name.lower()}",
        name=name,
        initiative=initiative,
    )
