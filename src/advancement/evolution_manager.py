"""
Evolution progress tracker for the Digimon GM Assistant.

An EvolutionLine is an ordered chain of stage slots (Fresh -> ... -> Mega)
with a cursor on the current slot and progress counters. Moving the cursor
forward is gated by the next slot's requirement:

- battles: battles won must reach the value
- xp: XP earned must reach the value
- bond: bond level must reach the value
- item: the named item must have been collected
- special: a GM call; blocks unless the GM overrides

Moving back (devolution) is always allowed above the first slot.

The pure functions below take a line and return an updated copy. The
EvolutionManager wraps them with load/save through the entity store.
"""

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional, Union

from src.data_models import (
    EvolutionChainEntry,
    EvolutionLine,
    EvolutionProgress,
    EvolutionRequirement,
    RequirementType,
    RuleCode,
    RuleViolation,
    Stage,
    ValidationError,
)
from src.observability.run_log import get_run_log
from src.storage.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT DATACLASSES
# =============================================================================


@dataclass
class RequirementCheck:
    """Outcome of checking the next slot's requirement."""
    met: bool = True
    message: str = ""               # Shortfall message for a refused evolve
    reason: str = ""                # Preview text for the GM screen
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class EvolveCheck:
    """Preview of whether a line can evolve right now."""
    can_evolve: bool
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"can_evolve": self.can_evolve, "reason": self.reason}


# =============================================================================
# CONSTRUCTION
# =============================================================================


def _coerce_chain(chain: Iterable[Union[EvolutionChainEntry, dict[str, Any]]]) -> list[EvolutionChainEntry]:
    entries = []
    for index, entry in enumerate(chain):
        if isinstance(entry, EvolutionChainEntry):
            entries.append(copy.deepcopy(entry))
            continue
        try:
            entries.append(EvolutionChainEntry.from_dict(entry))
        except (KeyError, ValueError, TypeError) as e:
            raise ValidationError(f"Invalid chain entry {index}: {e}", field="chain") from e
    return entries


def create_evolution_line(
    name: str,
    chain: Iterable[Union[EvolutionChainEntry, dict[str, Any]]],
    description: str = "",
    partner_id: Optional[str] = None,
    current_stage_index: int = 0,
    progress: Optional[EvolutionProgress] = None,
) -> EvolutionLine:
    """
    Build a new evolution line.

    Args:
        name: Display name (required)
        chain: Stage slots in evolution order (at least one)
        description: Free text
        partner_id: Tamer that owns this line
        current_stage_index: Starting slot
        progress: Starting counters

    Raises:
        ValidationError: empty name, empty chain or out-of-range index
    """
    if not name or not name.strip():
        raise ValidationError("Evolution line name is required", field="name")
    entries = _coerce_chain(chain)
    if not entries:
        raise ValidationError("Evolution line needs at least one stage", field="chain")
    if not 0 <= current_stage_index < len(entries):
        raise ValidationError(
            f"Stage index {current_stage_index} outside chain of {len(entries)}",
            field="current_stage_index",
        )

    return EvolutionLine(
        name=name.strip(),
        chain=entries,
        current_stage_index=current_stage_index,
        evolution_progress=progress or EvolutionProgress(),
        description=description,
        partner_id=partner_id,
    )


# =============================================================================
# QUERIES
# =============================================================================


def current_stage(line: EvolutionLine) -> Optional[EvolutionChainEntry]:
    """Get the slot the line is currently at."""
    if 0 <= line.current_stage_index < len(line.chain):
        return line.chain[line.current_stage_index]
    return None


def next_stage(line: EvolutionLine) -> Optional[EvolutionChainEntry]:
    """Get the slot the line would evolve into, or None at the end of the chain."""
    index = line.current_stage_index + 1
    if 0 <= index < len(line.chain):
        return line.chain[index]
    return None


def check_requirement(
    requirement: Optional[EvolutionRequirement],
    progress: EvolutionProgress,
    gm_override: bool = False,
) -> RequirementCheck:
    """
    Check one slot requirement against the line's progress.

    Both evolve() and can_evolve() go through here, so a preview can never
    disagree with the real attempt.
    """
    if requirement is None:
        return RequirementCheck(reason="Ready to evolve")

    required = requirement.value or 0
    req_type = RequirementType(requirement.requirement_type)

    if req_type == RequirementType.BATTLES and progress.battles_won < required:
        return RequirementCheck(
            met=False,
            message=f"Need {required} battles won (have {progress.battles_won})",
            reason=f"Need {required - progress.battles_won} more battles",
            details={"requirement_type": req_type.value, "required": required,
                     "current": progress.battles_won, "shortfall": required - progress.battles_won},
        )
    if req_type == RequirementType.XP and progress.xp_earned < required:
        return RequirementCheck(
            met=False,
            message=f"Need {required} XP (have {progress.xp_earned})",
            reason=f"Need {required - progress.xp_earned} more XP",
            details={"requirement_type": req_type.value, "required": required,
                     "current": progress.xp_earned, "shortfall": required - progress.xp_earned},
        )
    if req_type == RequirementType.BOND and progress.bond_level < required:
        return RequirementCheck(
            met=False,
            message=f"Need bond level {required} (have {progress.bond_level})",
            reason=f"Need bond level {required}",
            details={"requirement_type": req_type.value, "required": required,
                     "current": progress.bond_level, "shortfall": required - progress.bond_level},
        )
    if (
        req_type == RequirementType.ITEM
        and requirement.item_name
        and requirement.item_name not in progress.items_collected
    ):
        return RequirementCheck(
            met=False,
            message=f"Need item: {requirement.item_name}",
            reason=f"Need item: {requirement.item_name}",
            details={"requirement_type": req_type.value, "item_name": requirement.item_name},
        )
    if req_type == RequirementType.SPECIAL and not gm_override:
        reason = requirement.description or "Special requirement not met"
        return RequirementCheck(
            met=False,
            message=reason,
            reason=reason,
            details={"requirement_type": req_type.value, "description": requirement.description},
        )

    return RequirementCheck(reason="Ready to evolve")


def can_evolve(line: EvolutionLine, gm_override: bool = False) -> EvolveCheck:
    """Preview an evolution without changing the line."""
    upcoming = next_stage(line)
    if upcoming is None:
        return EvolveCheck(can_evolve=False, reason="Maximum evolution reached")
    check = check_requirement(upcoming.requirements, line.evolution_progress, gm_override)
    return EvolveCheck(can_evolve=check.met, reason=check.reason)


# =============================================================================
# MUTATIONS (copy-returning)
# =============================================================================


def _touched(line: EvolutionLine) -> EvolutionLine:
    updated = copy.deepcopy(line)
    updated.updated_at = datetime.now()
    return updated


def _refuse(line: EvolutionLine, violation: RuleViolation) -> RuleViolation:
    get_run_log().log_rule_check(
        code=violation.code.value,
        message=violation.message,
        subject_id=line.id,
        context=violation.details,
    )
    logger.info(f"{line.name}: {violation.message}")
    return violation


def evolve(line: EvolutionLine, gm_override: bool = False) -> EvolutionLine:
    """
    Advance the line one slot.

    Raises:
        RuleViolation: ALREADY_MAX_STAGE at the end of the chain,
            REQUIREMENT_UNMET when the next slot's requirement is not met
    """
    upcoming = next_stage(line)
    if upcoming is None:
        raise _refuse(line, RuleViolation(
            RuleCode.ALREADY_MAX_STAGE,
            "Already at maximum evolution stage",
            {"current_stage_index": line.current_stage_index},
        ))

    check = check_requirement(upcoming.requirements, line.evolution_progress, gm_override)
    if not check.met:
        raise _refuse(line, RuleViolation(RuleCode.REQUIREMENT_UNMET, check.message, check.details))

    updated = _touched(line)
    updated.current_stage_index += 1
    logger.info(f"{line.name} evolved to {upcoming.species} ({Stage(upcoming.stage).value})")
    return updated


def devolve(line: EvolutionLine) -> EvolutionLine:
    """
    Move the line back one slot.

    Raises:
        RuleViolation: ALREADY_MIN_STAGE at the first slot
    """
    if line.current_stage_index <= 0:
        raise _refuse(line, RuleViolation(
            RuleCode.ALREADY_MIN_STAGE,
            "Already at minimum evolution stage",
            {"current_stage_index": line.current_stage_index},
        ))

    updated = _touched(line)
    updated.current_stage_index -= 1
    entry = current_stage(updated)
    logger.info(f"{line.name} devolved to {entry.species if entry else updated.current_stage_index}")
    return updated


PROGRESS_FIELDS = ("battles_won", "xp_earned", "bond_level", "items_collected")


def update_progress(line: EvolutionLine, **fields: Any) -> EvolutionLine:
    """Overwrite progress counters; unspecified counters are kept."""
    unknown = set(fields) - set(PROGRESS_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown progress fields: {sorted(unknown)}", field=sorted(unknown)[0])

    updated = _touched(line)
    for key, value in fields.items():
        if key == "items_collected":
            value = list(value)
        elif value < 0:
            raise ValidationError(f"{key} cannot be negative", field=key)
        setattr(updated.evolution_progress, key, value)
    return updated


def add_battles_won(line: EvolutionLine, count: int = 1) -> EvolutionLine:
    return update_progress(line, battles_won=line.evolution_progress.battles_won + count)


def add_xp(line: EvolutionLine, amount: int) -> EvolutionLine:
    return update_progress(line, xp_earned=line.evolution_progress.xp_earned + amount)


def increase_bond(line: EvolutionLine, amount: int = 1) -> EvolutionLine:
    return update_progress(line, bond_level=line.evolution_progress.bond_level + amount)


def collect_item(line: EvolutionLine, item_name: str) -> EvolutionLine:
    """Record an item; collecting the same item twice changes nothing."""
    if item_name in line.evolution_progress.items_collected:
        return line
    return update_progress(
        line, items_collected=line.evolution_progress.items_collected + [item_name]
    )


# =============================================================================
# EVOLUTION MANAGER
# =============================================================================


class EvolutionManager:
    """
    Persists evolution lines through the entity store.

    Lookups by id return None for unknown lines; rule failures raise
    RuleViolation and leave the stored line untouched.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def create(self, name: str, chain: Iterable[Any], **kwargs: Any) -> EvolutionLine:
        line = create_evolution_line(name, chain, **kwargs)
        self.store.insert(line)
        logger.info(f"Created evolution line {line.name} ({len(line.chain)} stages)")
        return line

    def get(self, line_id: str) -> Optional[EvolutionLine]:
        return self.store.get(EntityKind.EVOLUTION_LINE, line_id)

    def list_lines(self, partner_id: Optional[str] = None) -> list[EvolutionLine]:
        if partner_id is None:
            return self.store.list_all(EntityKind.EVOLUTION_LINE)
        return self.store.list_all(EntityKind.EVOLUTION_LINE, partner_id=partner_id)

    def delete(self, line_id: str) -> bool:
        return self.store.delete(EntityKind.EVOLUTION_LINE, line_id)

    def _apply(self, line_id: str, operation, *args: Any, **kwargs: Any) -> Optional[EvolutionLine]:
        line = self.get(line_id)
        if line is None:
            logger.warning(f"Evolution line {line_id} not found")
            return None
        updated = operation(line, *args, **kwargs)
        if updated is not line:
            self.store.save(updated)
        return updated

    def evolve(self, line_id: str, gm_override: bool = False) -> Optional[EvolutionLine]:
        return self._apply(line_id, evolve, gm_override=gm_override)

    def devolve(self, line_id: str) -> Optional[EvolutionLine]:
        return self._apply(line_id, devolve)

    def can_evolve(self, line_id: str, gm_override: bool = False) -> Optional[EvolveCheck]:
        line = self.get(line_id)
        if line is None:
            return None
        return can_evolve(line, gm_override)

    def update_progress(self, line_id: str, **fields: Any) -> Optional[EvolutionLine]:
        return self._apply(line_id, update_progress, **fields)

    def add_battles_won(self, line_id: str, count: int = 1) -> Optional[EvolutionLine]:
        return self._apply(line_id, add_battles_won, count)

    def add_xp(self, line_id: str, amount: int) -> Optional[EvolutionLine]:
        return self._apply(line_id, add_xp, amount)

    def increase_bond(self, line_id: str, amount: int = 1) -> Optional[EvolutionLine]:
        return self._apply(line_id, increase_bond, amount)

    def collect_item(self, line_id: str, item_name: str) -> Optional[EvolutionLine]:
        return self._apply(line_id, collect_item, item_name)
