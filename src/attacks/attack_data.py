"""
Data structures for the Attack catalogue.

Templates describe canonical attacks. A Digimon never holds a template
directly; it owns an Attack copy it can rename and re-tag freely.
"""

from dataclasses import dataclass
from typing import Optional

from src.data_models import Attack, AttackRange, AttackType, Stage, new_id

# Stage value for templates usable at every stage
ANY_STAGE = "any"


@dataclass(frozen=True)
class AttackTemplate:
    """
    Catalogue definition of an attack.

    tags are granted by qualities (e.g. "Weapon II" needs Weapon at rank 2);
    effect names the attack-effect quality the attack relies on, if any.
    """

    id: str
    name: str
    range: AttackRange
    attack_type: AttackType
    stage: str
    description: str = ""
    tags: tuple[str, ...] = ()
    effect: Optional[str] = None
    digimon: Optional[str] = None

    def is_usable_at(self, stage: Stage) -> bool:
        return self.stage == ANY_STAGE or self.stage == Stage(stage).value

    def searchable_text(self) -> tuple[str, ...]:
        return (self.name, self.description, self.effect or "", self.digimon or "") + self.tags


def attack(
    id: str,
    name: str,
    range: str,
    stage: str,
    description: str,
    tags: tuple = (),
    effect: Optional[str] = None,
    digimon: Optional[str] = None,
    attack_type: str = "damage",
) -> AttackTemplate:
    """Build an AttackTemplate from catalogue literals."""
    if stage != ANY_STAGE:
        stage = Stage(stage).value
    return AttackTemplate(
        id=id,
        name=name,
        range=AttackRange(range),
        attack_type=AttackType(attack_type),
        stage=stage,
        description=description,
        tags=tuple(tags),
        effect=effect,
        digimon=digimon,
    )


def attack_from_template(template: AttackTemplate) -> Attack:
    """Create an owned Attack copy of a template with a fresh id."""
    return Attack(
        id=new_id(),
        name=template.name,
        range=template.range,
        attack_type=template.attack_type,
        tags=list(template.tags),
        effect=template.effect,
        description=template.description,
    )
