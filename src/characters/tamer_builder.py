"""
Tamer creation and editing.
"""

import copy
import logging
from datetime import datetime
from typing import Any

from src.characters.derived_stats import compute_tamer_derived, max_inspiration
from src.data_models import (
    Aspect,
    CampaignLevel,
    NotFoundError,
    Tamer,
    TamerAttributes,
    TamerSkills,
    Torment,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _parse_block(block_cls, data: Any, field_name: str):
    if isinstance(data, block_cls):
        return copy.deepcopy(data)
    if not isinstance(data, dict):
        raise ValidationError(f"{field_name} are required", field=field_name)
    try:
        block = block_cls.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {field_name}: {e}", field=field_name) from e
    for name, value in block.to_dict().items():
        if value < 0:
            raise ValidationError(f"{name} cannot be negative", field=f"{field_name}.{name}")
    return block


def refresh_tamer_derived(tamer: Tamer) -> Tamer:
    """Recompute cached derived stats and the inspiration cap in place."""
    tamer.derived_stats = compute_tamer_derived(tamer.attributes, tamer.skills)
    tamer.max_inspiration = max_inspiration(tamer.attributes)
    tamer.inspiration = min(tamer.inspiration, tamer.max_inspiration)
    return tamer


def create_tamer(data: dict[str, Any]) -> Tamer:
    """
    Create a Tamer from validated input.

    Required keys: name, attributes, skills. Optional keys: age,
    campaign_level, aspects, torments, special_orders, equipment, xp,
    partner_digimon_ids and notes.

    Raises:
        ValidationError: a required field is missing or malformed
    """
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Name is required", field="name")
    attributes = _parse_block(TamerAttributes, data.get("attributes"), "attributes")
    skills = _parse_block(TamerSkills, data.get("skills"), "skills")

    try:
        campaign_level = CampaignLevel(data.get("campaign_level", CampaignLevel.STANDARD))
        aspects = [Aspect.from_dict(a) for a in data.get("aspects", [])]
        torments = [Torment.from_dict(t) for t in data.get("torments", [])]
    except (KeyError, ValueError) as e:
        raise ValidationError(f"Invalid tamer data: {e}") from e

    tamer = Tamer(
        name=name,
        age=data.get("age", 0),
        campaign_level=campaign_level,
        attributes=attributes,
        skills=skills,
        aspects=aspects,
        torments=torments,
        special_orders=list(data.get("special_orders", [])),
        xp=data.get("xp", 0),
        equipment=list(data.get("equipment", [])),
        partner_digimon_ids=list(data.get("partner_digimon_ids", [])),
        notes=data.get("notes", ""),
    )
    refresh_tamer_derived(tamer)
    tamer.inspiration = tamer.max_inspiration

    logger.info(f"Created tamer {tamer.name} ({campaign_level.value} campaign)")
    return tamer


def update_tamer_stats(tamer: Tamer, attributes: Any = None, skills: Any = None) -> Tamer:
    """Replace attributes and/or skills and recompute derived stats."""
    updated = copy.deepcopy(tamer)
    if attributes is not None:
        updated.attributes = _parse_block(TamerAttributes, attributes, "attributes")
    if skills is not None:
        updated.skills = _parse_block(TamerSkills, skills, "skills")
    refresh_tamer_derived(updated)
    updated.current_wounds = min(updated.current_wounds, updated.derived_stats.wound_boxes)
    updated.updated_at = datetime.now()
    return updated


def use_aspect(tamer: Tamer, aspect_id: str) -> Tamer:
    """
    Spend one use of an aspect.

    Raises:
        NotFoundError: no such aspect
        ValidationError: the aspect has no uses left
    """
    updated = copy.deepcopy(tamer)
    for aspect in updated.aspects:
        if aspect.id == aspect_id:
            if aspect.uses_remaining <= 0:
                raise ValidationError(f"Aspect {aspect.name} has no uses remaining", field="aspect_id")
            aspect.uses_remaining -= 1
            updated.updated_at = datetime.now()
            return updated
    raise NotFoundError("aspect", aspect_id)


def mark_torment(tamer: Tamer, torment_id: str, boxes: int = 1) -> Tamer:
    """Mark progress on overcoming a torment, capped at its box count."""
    updated = copy.deepcopy(tamer)
    for torment in updated.torments:
        if torment.id == torment_id:
            torment.marked_boxes = min(torment.total_boxes, torment.marked_boxes + boxes)
            if torment.is_overcome:
                logger.info(f"{tamer.name} overcame torment {torment.name}")
            updated.updated_at = datetime.now()
            return updated
    raise NotFoundError("torment", torment_id)
