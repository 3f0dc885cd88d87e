"""
Digimon creation and editing.

Every function takes a Digimon and returns an updated copy; the input is
left untouched, so a failed edit never leaves a half-changed record. Derived
stats are recomputed whenever base stats or stage change.
"""

import copy
import logging
from datetime import datetime
from typing import Any, Optional, Union

from src.attacks.attack_data import AttackTemplate, attack_from_template
from src.attacks.attack_registry import get_attack_registry
from src.characters.derived_stats import compute_derived
from src.data_models import (
    Attack,
    BaseStats,
    Digimon,
    DigimonAttribute,
    NotFoundError,
    Stage,
    Stance,
    ValidationError,
    get_stage_config,
    new_id,
)
from src.qualities.eligibility import acquire_quality

logger = logging.getLogger(__name__)

BASE_STAT_NAMES = ("accuracy", "damage", "dodge", "armor", "health")


def _parse_stage(value: Any) -> Stage:
    try:
        return Stage(value)
    except ValueError as e:
        raise ValidationError(f"Unknown stage: {value}", field="stage") from e


def _parse_base_stats(data: Any) -> BaseStats:
    if isinstance(data, BaseStats):
        data = data.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Base stats are required", field="base_stats")

    values = {}
    for name in BASE_STAT_NAMES:
        value = data.get(name)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError(f"Base stat '{name}' must be an integer", field=f"base_stats.{name}")
        if value < 0:
            raise ValidationError(f"Base stat '{name}' cannot be negative", field=f"base_stats.{name}")
        values[name] = value
    return BaseStats(**values)


def _touch(digimon: Digimon) -> Digimon:
    digimon.updated_at = datetime.now()
    return digimon


def refresh_derived(digimon: Digimon) -> Digimon:
    """Recompute the cached derived stats and stage DP budget in place."""
    digimon.derived_stats = compute_derived(digimon.base_stats, digimon.stage)
    digimon.base_dp = get_stage_config(digimon.stage).dp
    return digimon


def create_digimon(data: dict[str, Any]) -> Digimon:
    """
    Create a Digimon from validated input.

    Required keys: name, species, stage, base_stats. Optional keys include
    attribute, family, digimon_type, attacks (template ids or attack dicts),
    qualities (dicts with id, optional ranks and choice_id), partner_id,
    is_enemy, notes and sprite_url. Initial qualities go through the normal
    acquisition rules, one rank at a time, in the order given.

    Raises:
        ValidationError: a required field is missing or malformed
        RuleViolation / NotFoundError: an initial quality cannot be taken
    """
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Name is required", field="name")
    species = (data.get("species") or "").strip()
    if not species:
        raise ValidationError("Species is required", field="species")
    if data.get("stage") is None:
        raise ValidationError("Stage is required", field="stage")
    stage = _parse_stage(data["stage"])
    base_stats = _parse_base_stats(data.get("base_stats"))

    try:
        attribute = DigimonAttribute(data.get("attribute", DigimonAttribute.DATA))
    except ValueError as e:
        raise ValidationError(f"Unknown attribute: {data.get('attribute')}", field="attribute") from e

    digimon = Digimon(
        name=name,
        species=species,
        stage=stage,
        base_stats=base_stats,
        attribute=attribute,
        family=data.get("family", "unknown"),
        digimon_type=data.get("digimon_type", ""),
        bonus_dp=data.get("bonus_dp", 0),
        partner_id=data.get("partner_id"),
        is_enemy=bool(data.get("is_enemy", False)),
        notes=data.get("notes", ""),
        sprite_url=data.get("sprite_url"),
    )
    refresh_derived(digimon)

    for entry in data.get("attacks", []):
        digimon = add_attack(digimon, entry)

    for entry in data.get("qualities", []):
        for _ in range(entry.get("ranks", 1)):
            digimon = acquire_quality(digimon, entry["id"], entry.get("choice_id"))

    logger.info(f"Created {stage.value} Digimon {digimon.name} ({digimon.species})")
    return digimon


def add_quality(digimon: Digimon, quality_id: str, choice_id: Optional[str] = None) -> Digimon:
    """Add one rank of a quality, enforcing the build rules."""
    return acquire_quality(digimon, quality_id, choice_id)


def remove_quality(digimon: Digimon, quality_id: str, all_ranks: bool = False) -> Digimon:
    """
    Remove one rank of an owned quality (or every rank).

    Other qualities that listed it as a prerequisite are not removed; run
    validate_qualities to find them.

    Raises:
        NotFoundError: the quality is not owned
    """
    if digimon.get_quality(quality_id) is None:
        raise NotFoundError("quality", quality_id)

    updated = copy.deepcopy(digimon)
    owned = updated.get_quality(quality_id)
    if all_ranks or (owned.ranks or 1) <= 1:
        updated.qualities = [q for q in updated.qualities if q.id != quality_id]
        if quality_id == "data-optimization":
            updated.data_optimization = None
    else:
        owned.ranks -= 1
    return _touch(updated)


def change_stage(digimon: Digimon, stage: Stage) -> Digimon:
    """
    Move a Digimon to another stage and recompute derived stats.

    Owned qualities are not re-validated; callers may run validate_qualities.
    """
    stage = _parse_stage(stage)
    updated = copy.deepcopy(digimon)
    updated.stage = stage
    refresh_derived(updated)
    logger.info(f"{digimon.name}: stage {Stage(digimon.stage).value} -> {stage.value}")
    return _touch(updated)


def set_base_stats(digimon: Digimon, base_stats: Union[BaseStats, dict[str, int]]) -> Digimon:
    """Replace base stats and recompute derived stats."""
    parsed = _parse_base_stats(base_stats)
    updated = copy.deepcopy(digimon)
    updated.base_stats = parsed
    refresh_derived(updated)
    updated.current_wounds = min(updated.current_wounds, updated.derived_stats.wound_boxes)
    return _touch(updated)


def add_attack(digimon: Digimon, attack: Union[str, AttackTemplate, Attack, dict[str, Any]]) -> Digimon:
    """
    Give a Digimon an attack.

    Accepts a catalogue template id, a template, an Attack or an attack dict.
    The Digimon always receives its own copy with a fresh id.

    Raises:
        NotFoundError: an unknown template id was given
        ValidationError: an attack dict is malformed
    """
    if isinstance(attack, str):
        result = get_attack_registry().lookup(attack)
        if not result.found:
            raise NotFoundError("attack", attack)
        owned = attack_from_template(result.attack)
    elif isinstance(attack, AttackTemplate):
        owned = attack_from_template(attack)
    elif isinstance(attack, Attack):
        owned = copy.deepcopy(attack)
        owned.id = new_id()
    else:
        if not attack.get("name"):
            raise ValidationError("Attack name is required", field="attacks.name")
        try:
            owned = Attack.from_dict({**attack, "id": new_id()})
        except ValueError as e:
            raise ValidationError(f"Invalid attack: {e}", field="attacks") from e

    updated = copy.deepcopy(digimon)
    updated.attacks.append(owned)
    slots = get_stage_config(updated.stage).attacks
    if len(updated.attacks) > slots:
        logger.warning(f"{digimon.name} has {len(updated.attacks)} attacks, stage allows {slots}")
    return _touch(updated)


def remove_attack(digimon: Digimon, attack_id: str) -> Digimon:
    """Remove an owned attack by id."""
    if digimon.get_attack(attack_id) is None:
        raise NotFoundError("attack", attack_id)
    updated = copy.deepcopy(digimon)
    updated.attacks = [a for a in updated.attacks if a.id != attack_id]
    return _touch(updated)


def apply_damage(digimon: Digimon, amount: int) -> Digimon:
    """Mark wound boxes, never beyond the Digimon's capacity."""
    if amount < 0:
        raise ValidationError("Damage cannot be negative", field="amount")
    updated = copy.deepcopy(digimon)
    updated.current_wounds = min(updated.derived_stats.wound_boxes, updated.current_wounds + amount)
    return _touch(updated)


def heal(digimon: Digimon, amount: int) -> Digimon:
    """Clear wound boxes, never below zero."""
    if amount < 0:
        raise ValidationError("Healing cannot be negative", field="amount")
    updated = copy.deepcopy(digimon)
    updated.current_wounds = max(0, updated.current_wounds - amount)
    return _touch(updated)


def set_stance(digimon: Digimon, stance: Stance) -> Digimon:
    try:
        stance = Stance(stance)
    except ValueError as e:
        raise ValidationError(f"Unknown stance: {stance}", field="stance") from e
    updated = copy.deepcopy(digimon)
    updated.current_stance = stance
    return _touch(updated)


def copy_digimon(digimon: Digimon) -> Digimon:
    """
    Duplicate a Digimon as a new record.

    The copy gets a fresh id, a " (Copy)" name suffix, fresh attack ids and
    no evolution links.
    """
    duplicate = copy.deepcopy(digimon)
    duplicate.id = new_id()
    duplicate.name = f"{digimon.name} (Copy)"
    duplicate.evolves_from_id = None
    duplicate.evolution_path_ids = []
    for attack in duplicate.attacks:
        attack.id = new_id()
    now = datetime.now()
    duplicate.created_at = now
    duplicate.updated_at = now
    return duplicate
