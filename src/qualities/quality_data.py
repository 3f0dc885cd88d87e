"""
Data structures for the Quality catalogue.

Qualities are the point-buy modifiers a Digimon is built from. Templates are
immutable and loaded once; prerequisite strings from the rulebook are parsed
into structured Prerequisite references at definition time.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import re

from src.data_models import STAGE_ORDER, Stage, compare_stages


class QualityType(str, Enum):
    """Cost class of a quality."""

    FREE = "free"
    NEGATIVE = "negative"
    PURCHASABLE = "purchasable"


class QualityTypeTag(str, Enum):
    """How a quality applies: [S]tatic, [T]rigger or [A]ttack."""

    STATIC = "static"
    TRIGGER = "trigger"
    ATTACK = "attack"


class QualityCategory(str, Enum):
    """Rulebook sections qualities are grouped under."""

    DATA_OPTIMIZATION = "data-optimization"
    DATA_SPECIALIZATION = "data-specialization"
    EXTRA_MOVEMENT = "extra-movement"
    OFFENSIVE = "offensive"
    COUNTERATTACK = "counterattack"
    STEALTH = "stealth"
    DEFENSIVE = "defensive"
    COMBAT_MONSTER = "combat-monster"
    BOOSTING = "boosting"
    UTILITY = "utility"
    SUPPORT = "support"
    ATTACK_EFFECTS = "attack-effects"
    ADVANCED = "advanced"
    SIGNATURE_MOVE = "signature-move"
    DIGIZOID = "digizoid"
    GAIN_FORCE = "gain-force"
    BURST_POWER = "burst-power"
    FREE = "free"
    NEGATIVE = "negative"


CATEGORY_NAMES: dict[QualityCategory, str] = {
    QualityCategory.DATA_OPTIMIZATION: "Data Optimization",
    QualityCategory.DATA_SPECIALIZATION: "Data Specialization",
    QualityCategory.EXTRA_MOVEMENT: "Extra Movement",
    QualityCategory.OFFENSIVE: "Offensive",
    QualityCategory.COUNTERATTACK: "Counterattack",
    QualityCategory.STEALTH: "Stealth",
    QualityCategory.DEFENSIVE: "Defensive",
    QualityCategory.COMBAT_MONSTER: "Combat Monster",
    QualityCategory.BOOSTING: "Boosting",
    QualityCategory.UTILITY: "Utility",
    QualityCategory.SUPPORT: "Support",
    QualityCategory.ATTACK_EFFECTS: "Attack Effects",
    QualityCategory.ADVANCED: "Advanced",
    QualityCategory.SIGNATURE_MOVE: "Signature Move",
    QualityCategory.DIGIZOID: "Digizoid",
    QualityCategory.GAIN_FORCE: "Gain Force",
    QualityCategory.BURST_POWER: "Burst Power",
    QualityCategory.FREE: "Free Qualities",
    QualityCategory.NEGATIVE: "Negative Qualities",
}


# "Speedy Rank 3", "Huge Power (Rank 1)", "Armor Piercing Rank X"
_RANKED_PREREQUISITE = re.compile(r"^(.+?)\s+\(?Rank\s+(\d+|X)\)?$", re.IGNORECASE)


@dataclass(frozen=True)
class Prerequisite:
    """
    A structured prerequisite: another quality, owned at min_rank or better.

    quality_ref is the referenced quality's name or id as written. The catalogue
    resolves it to an id at load time. A prerequisite written as a family of
    qualities ("Weapon or Armor Increasing Quality") lists the accepted ids in
    any_of and is met by owning any one of them. A reference that resolves to
    nothing can never be met.
    """

    quality_ref: str
    min_rank: int = 1
    quality_id: Optional[str] = None
    text: str = ""
    any_of: tuple[str, ...] = ()

    @property
    def is_resolved(self) -> bool:
        return self.quality_id is not None or bool(self.any_of)

    def accepted_ids(self) -> tuple[str, ...]:
        """Quality ids that satisfy this prerequisite."""
        if self.any_of:
            return self.any_of
        return (self.quality_id,) if self.quality_id else ()

    def __str__(self) -> str:
        return self.text or (
            self.quality_ref if self.min_rank <= 1 else f"{self.quality_ref} Rank {self.min_rank}"
        )


def any_of(text: str, *quality_ids: str) -> Prerequisite:
    """A prerequisite met by owning any one of `quality_ids`."""
    return Prerequisite(quality_ref=text, text=text, any_of=tuple(quality_ids))


def parse_prerequisite(text: str) -> Prerequisite:
    """
    Parse a rulebook prerequisite string into a Prerequisite.

    A trailing "Rank N" (optionally parenthesized) sets min_rank; "Rank X"
    means any rank. A bare name requires rank 1.
    """
    text = text.strip()
    match = _RANKED_PREREQUISITE.match(text)
    if match:
        rank = match.group(2)
        min_rank = 1 if rank.upper() == "X" else int(rank)
        return Prerequisite(quality_ref=match.group(1).strip(), min_rank=min_rank, text=text)
    return Prerequisite(quality_ref=text, min_rank=1, text=text)


@dataclass(frozen=True)
class QualityChoice:
    """
    A named sub-option of a quality (e.g. a Data Optimization archetype).

    prerequisites here are choice ids that must already be selected on some
    owned quality, e.g. Sniper requires the ranged-striker choice.
    """

    id: str
    name: str
    effect: str = ""
    dp_cost: Optional[int] = None  # None = parent's cost
    prerequisites: tuple[str, ...] = ()


@dataclass(frozen=True)
class QualityTemplate:
    """Catalogue definition of a quality. Immutable and process-wide."""

    id: str
    name: str
    quality_type: QualityType
    category: QualityCategory
    dp_cost: int
    max_ranks: int = 1
    type_tags: tuple[QualityTypeTag, ...] = (QualityTypeTag.STATIC,)
    prerequisites: tuple[Prerequisite, ...] = ()
    exclusive_with: frozenset[str] = frozenset()
    stage_requirement: Optional[Stage] = None
    max_ranks_by_stage: Optional[dict[Stage, int]] = field(default=None, hash=False)
    choices: tuple[QualityChoice, ...] = ()
    limited_tag: bool = False
    requires_gm_approval: bool = False
    description: str = ""
    effect: str = ""

    def get_choice(self, choice_id: str) -> Optional[QualityChoice]:
        for choice in self.choices:
            if choice.id == choice_id:
                return choice
        return None

    def cost_for(self, choice_id: Optional[str] = None) -> int:
        """DP cost of one rank, honouring a choice's cost override."""
        if choice_id:
            choice = self.get_choice(choice_id)
            if choice is not None and choice.dp_cost is not None:
                return choice.dp_cost
        return self.dp_cost

    def is_available_at_stage(self, stage: Stage) -> bool:
        """Check the stage gate."""
        if self.stage_requirement is None:
            return True
        return compare_stages(stage, self.stage_requirement) >= 0

    def max_ranks_at_stage(self, stage: Stage) -> int:
        """
        Effective rank cap at a stage.

        Walks stages in progression order up to and including `stage`; the
        last explicit entry wins. No entry at or below `stage` means cap 0.
        The result never exceeds max_ranks.
        """
        if self.max_ranks_by_stage is None:
            return self.max_ranks

        cap = 0
        for stage_key in STAGE_ORDER:
            if compare_stages(stage_key, stage) > 0:
                break
            if stage_key in self.max_ranks_by_stage:
                cap = self.max_ranks_by_stage[stage_key]
        return min(cap, self.max_ranks)

    def matches_ref(self, ref: str) -> bool:
        """Case-insensitive match of a reference against id or name."""
        lowered = ref.lower()
        return lowered == self.id.lower() or lowered == self.name.lower()


def quality(
    id: str,
    name: str,
    quality_type: QualityType,
    category: QualityCategory,
    dp_cost: int,
    max_ranks: int = 1,
    type_tags: tuple = ("static",),
    prerequisites: tuple = (),
    exclusive_with: tuple = (),
    stage_requirement: Optional[str] = None,
    max_ranks_by_stage: Optional[dict[str, int]] = None,
    choices: tuple = (),
    limited_tag: bool = False,
    requires_gm_approval: bool = False,
    description: str = "",
    effect: str = "",
) -> QualityTemplate:
    """Build a QualityTemplate from rulebook-style literals."""
    return QualityTemplate(
        id=id,
        name=name,
        quality_type=quality_type,
        category=category,
        dp_cost=dp_cost,
        max_ranks=max_ranks,
        type_tags=tuple(QualityTypeTag(t) for t in type_tags),
        prerequisites=tuple(
            p if isinstance(p, Prerequisite) else parse_prerequisite(p) for p in prerequisites
        ),
        exclusive_with=frozenset(exclusive_with),
        stage_requirement=Stage(stage_requirement) if stage_requirement else None,
        max_ranks_by_stage=(
            {Stage(k): v for k, v in max_ranks_by_stage.items()} if max_ranks_by_stage else None
        ),
        choices=tuple(choices),
        limited_tag=limited_tag,
        requires_gm_approval=requires_gm_approval,
        description=description,
        effect=effect,
    )
