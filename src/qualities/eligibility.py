"""
Quality eligibility resolver.

Decides which catalogue qualities a Digimon may legally take next given its
stage and the qualities it already owns, and enforces the same rules when a
quality is actually acquired:

- stage gate (stage_requirement)
- effective rank cap at the current stage
- mutual exclusion with owned qualities (checked in both directions)
- prerequisites, including rank-qualified ones
- choice validity and choice prerequisites
- the per-stage allowance for negative-quality DP
"""

import copy
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from src.data_models import (
    Digimon,
    NotFoundError,
    OwnedQuality,
    RuleCode,
    RuleViolation,
    Stage,
    max_negative_dp,
)
from src.observability.run_log import get_run_log
from src.qualities.quality_data import QualityCategory, QualityTemplate, QualityType
from src.qualities.quality_manager import QualityManager, get_quality_manager

logger = logging.getLogger(__name__)


@dataclass
class PrerequisiteCheck:
    """Outcome of a prerequisite check."""

    met: bool = True
    missing: list[str] = field(default_factory=list)


def _index(owned: Iterable[OwnedQuality]) -> dict[str, OwnedQuality]:
    return {q.id: q for q in owned}


def effective_max_ranks(template: QualityTemplate, stage: Stage) -> int:
    """Rank cap for `template` at `stage` (0 when not yet obtainable)."""
    return template.max_ranks_at_stage(Stage(stage))


def prerequisites_met(template: QualityTemplate, owned: Iterable[OwnedQuality]) -> PrerequisiteCheck:
    """
    Check every prerequisite of `template` against the owned qualities.

    All prerequisites are required. A rank-qualified prerequisite needs the
    referenced quality at that rank or better; an any-of prerequisite needs
    one of its qualities. A reference that matches no catalogue quality is
    always reported missing.
    """
    owned_by_id = _index(owned)
    check = PrerequisiteCheck()
    for prereq in template.prerequisites:
        satisfied = any(
            (owned_by_id[qid].ranks or 1) >= prereq.min_rank
            for qid in prereq.accepted_ids()
            if qid in owned_by_id
        )
        if not satisfied:
            check.missing.append(str(prereq))
    check.met = not check.missing
    return check


def exclusive_conflicts(
    template: QualityTemplate,
    owned: Iterable[OwnedQuality],
    manager: Optional[QualityManager] = None,
) -> list[str]:
    """Get owned quality ids that are mutually exclusive with `template`."""
    manager = manager or get_quality_manager()
    excluded = manager.exclusive_with(template.id) | template.exclusive_with
    return [q.id for q in owned if q.id in excluded and q.id != template.id]


def available_qualities(
    stage: Stage,
    owned: Iterable[OwnedQuality],
    quality_type: Optional[QualityType] = None,
    category: Optional[QualityCategory] = None,
    manager: Optional[QualityManager] = None,
) -> list[QualityTemplate]:
    """
    Get the catalogue qualities that may be selected next, in catalogue order.

    An owned quality is offered again only while its rank is below the cap
    at `stage`. An unowned one is offered when the stage gate passes, its cap
    at `stage` is above zero, nothing owned excludes it and its prerequisites
    are met.
    """
    manager = manager or get_quality_manager()
    stage = Stage(stage)
    owned = list(owned)
    owned_by_id = _index(owned)

    candidates = manager.get_all()
    if quality_type is not None:
        candidates = [q for q in candidates if q.quality_type == QualityType(quality_type)]
    if category is not None:
        candidates = [q for q in candidates if q.category == QualityCategory(category)]

    available = []
    for template in candidates:
        if not template.is_available_at_stage(stage):
            continue

        cap = effective_max_ranks(template, stage)
        existing = owned_by_id.get(template.id)
        if existing is not None:
            if (existing.ranks or 1) >= cap:
                continue
        else:
            if cap <= 0:
                continue
            if exclusive_conflicts(template, owned, manager):
                continue

        if not prerequisites_met(template, owned).met:
            continue

        available.append(template)
    return available


def quality_cost(template: QualityTemplate, choice_id: Optional[str] = None) -> int:
    """DP cost of one rank of `template`, honouring a choice's override."""
    return template.cost_for(choice_id)


def total_dp_spent(owned: Iterable[OwnedQuality]) -> int:
    """Sum of rank x per-rank cost over owned qualities (negatives refund)."""
    return sum((q.ranks or 1) * q.dp_cost for q in owned)


def negative_dp_taken(owned: Iterable[OwnedQuality]) -> int:
    """DP recovered through negative qualities, as a positive number."""
    return sum(-(q.ranks or 1) * q.dp_cost for q in owned if q.dp_cost < 0)


def _owned_choice_ids(owned: Iterable[OwnedQuality]) -> set[str]:
    return {q.choice_id for q in owned if q.choice_id}


def check_acquisition(
    stage: Stage,
    owned: Iterable[OwnedQuality],
    quality_id: str,
    choice_id: Optional[str] = None,
    manager: Optional[QualityManager] = None,
) -> QualityTemplate:
    """
    Verify that one more rank of `quality_id` may be taken.

    Returns:
        The catalogue template

    Raises:
        NotFoundError: quality_id is not in the catalogue
        RuleViolation: a build rule would be broken
    """
    manager = manager or get_quality_manager()
    stage = Stage(stage)
    owned = list(owned)
    template = manager.get(quality_id)
    if template is None:
        raise NotFoundError("quality", quality_id)

    if not template.is_available_at_stage(stage):
        raise RuleViolation(
            RuleCode.STAGE_GATE,
            f"{template.name} requires stage {template.stage_requirement.value} (current: {stage.value})",
            {"quality_id": template.id, "required_stage": template.stage_requirement.value, "stage": stage.value},
        )

    existing = _index(owned).get(template.id)
    current_ranks = (existing.ranks or 1) if existing else 0
    cap = effective_max_ranks(template, stage)
    if current_ranks >= cap:
        raise RuleViolation(
            RuleCode.RANK_CAP,
            f"{template.name} is capped at {cap} rank(s) at {stage.value} (have {current_ranks})",
            {"quality_id": template.id, "max_ranks": cap, "current_ranks": current_ranks},
        )

    if existing is None:
        conflicts = exclusive_conflicts(template, owned, manager)
        if conflicts:
            raise RuleViolation(
                RuleCode.EXCLUSIVE_CONFLICT,
                f"{template.name} cannot be taken with: {', '.join(conflicts)}",
                {"quality_id": template.id, "conflicts": conflicts},
            )

    prereqs = prerequisites_met(template, owned)
    if not prereqs.met:
        raise RuleViolation(
            RuleCode.PREREQUISITE_UNMET,
            f"{template.name} requires: {', '.join(prereqs.missing)}",
            {"quality_id": template.id, "missing": prereqs.missing},
        )

    if choice_id:
        choice = template.get_choice(choice_id)
        if choice is None:
            raise RuleViolation(
                RuleCode.UNKNOWN_CHOICE,
                f"{template.name} has no option '{choice_id}'",
                {"quality_id": template.id, "choice_id": choice_id},
            )
        have_choices = _owned_choice_ids(owned) | set(_index(owned))
        missing_choices = [p for p in choice.prerequisites if p not in have_choices]
        if missing_choices:
            raise RuleViolation(
                RuleCode.CHOICE_PREREQUISITE_UNMET,
                f"{choice.name} requires: {', '.join(missing_choices)}",
                {"quality_id": template.id, "choice_id": choice_id, "missing": missing_choices},
            )

    cost = quality_cost(template, choice_id)
    if cost < 0:
        limit = max_negative_dp(stage)
        taken = negative_dp_taken(owned)
        if taken - cost > limit:
            raise RuleViolation(
                RuleCode.NEGATIVE_LIMIT,
                f"Negative qualities are limited to {limit} DP at {stage.value} (have {taken})",
                {"quality_id": template.id, "limit": limit, "taken": taken, "refund": -cost},
            )

    return template


def acquire_quality(
    digimon: Digimon,
    quality_id: str,
    choice_id: Optional[str] = None,
    manager: Optional[QualityManager] = None,
) -> Digimon:
    """
    Add one rank of a quality to a copy of `digimon`.

    The input is never modified; on failure nothing changes.

    Raises:
        NotFoundError, RuleViolation: see check_acquisition
    """
    try:
        template = check_acquisition(digimon.stage, digimon.qualities, quality_id, choice_id, manager)
    except RuleViolation as e:
        get_run_log().log_rule_check(code=e.code.value, message=e.message, subject_id=digimon.id)
        raise

    updated = copy.deepcopy(digimon)
    existing = updated.get_quality(template.id)
    if existing is not None:
        existing.ranks = (existing.ranks or 1) + 1
    else:
        choice = template.get_choice(choice_id) if choice_id else None
        updated.qualities.append(
            OwnedQuality(
                id=template.id,
                name=template.name,
                ranks=1,
                choice_id=choice.id if choice else None,
                choice_name=choice.name if choice else None,
                dp_cost=quality_cost(template, choice_id),
            )
        )
        if template.id == "data-optimization" and choice is not None:
            updated.data_optimization = choice.id
    updated.updated_at = datetime.now()

    logger.info(f"{digimon.name} acquired {template.name} (choice={choice_id})")
    return updated


def validate_qualities(digimon: Digimon, manager: Optional[QualityManager] = None) -> list[RuleViolation]:
    """
    Re-check every owned quality against the Digimon's current stage.

    Stage changes do not re-validate automatically; callers run this after
    devolving to list rank caps, stage gates, exclusions and prerequisites
    that no longer hold. Returns an empty list when the build is legal.
    """
    manager = manager or get_quality_manager()
    stage = Stage(digimon.stage)
    owned = list(digimon.qualities)
    owned_ids = {q.id for q in owned}
    violations: list[RuleViolation] = []
    reported_pairs: set[frozenset[str]] = set()

    for owned_quality in owned:
        template = manager.get(owned_quality.id)
        if template is None:
            logger.warning(f"{digimon.name} owns unknown quality {owned_quality.id}")
            continue

        if not template.is_available_at_stage(stage):
            violations.append(
                RuleViolation(
                    RuleCode.STAGE_GATE,
                    f"{template.name} requires stage {template.stage_requirement.value}",
                    {"quality_id": template.id, "required_stage": template.stage_requirement.value},
                )
            )

        cap = effective_max_ranks(template, stage)
        if (owned_quality.ranks or 1) > cap:
            violations.append(
                RuleViolation(
                    RuleCode.RANK_CAP,
                    f"{template.name} has {owned_quality.ranks} rank(s), cap at {stage.value} is {cap}",
                    {"quality_id": template.id, "max_ranks": cap, "current_ranks": owned_quality.ranks},
                )
            )

        for other in manager.exclusive_with(template.id) & owned_ids:
            pair = frozenset((template.id, other))
            if pair in reported_pairs:
                continue
            reported_pairs.add(pair)
            violations.append(
                RuleViolation(
                    RuleCode.EXCLUSIVE_CONFLICT,
                    f"{template.name} cannot be owned with {other}",
                    {"quality_id": template.id, "conflicts": [other]},
                )
            )

        prereqs = prerequisites_met(template, owned)
        if not prereqs.met:
            violations.append(
                RuleViolation(
                    RuleCode.PREREQUISITE_UNMET,
                    f"{template.name} requires: {', '.join(prereqs.missing)}",
                    {"quality_id": template.id, "missing": prereqs.missing},
                )
            )

    taken = negative_dp_taken(owned)
    limit = max_negative_dp(stage)
    if taken > limit:
        violations.append(
            RuleViolation(
                RuleCode.NEGATIVE_LIMIT,
                f"Negative qualities total {taken} DP, limit at {stage.value} is {limit}",
                {"limit": limit, "taken": taken},
            )
        )

    for violation in violations:
        logger.debug(f"{digimon.name}: {violation.code.value}: {violation.message}")
    return violations
