"""
Shared data structures for the Digimon GM Assistant.

Tamers, Digimon, Encounters and Evolution Lines are plain records. The rules
engine consumes and produces them, and the storage layer persists them through
their to_dict/from_dict pairs. The Stage table and the error taxonomy live here
because every other module depends on them.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Optional
import random
import re
import uuid


def new_id() -> str:
    """Generate a fresh entity id."""
    return str(uuid.uuid4())


# =============================================================================
# ENUMERATIONS
# =============================================================================


class Stage(str, Enum):
    """Digimon progression stages, in progression order."""

    FRESH = "fresh"
    IN_TRAINING = "in-training"
    ROOKIE = "rookie"
    CHAMPION = "champion"
    ULTIMATE = "ultimate"
    MEGA = "mega"
    ULTRA = "ultra"


class DigimonAttribute(str, Enum):
    """Digimon attribute. Flavor only."""

    VACCINE = "vaccine"
    DATA = "data"
    VIRUS = "virus"
    FREE = "free"


class Stance(str, Enum):
    """Combat stances."""

    NEUTRAL = "neutral"
    DEFENSIVE = "defensive"
    OFFENSIVE = "offensive"
    SNIPER = "sniper"
    BRAVE = "brave"


class CampaignLevel(str, Enum):
    """Campaign power level chosen at tamer creation."""

    STANDARD = "standard"
    ENHANCED = "enhanced"
    EXTREME = "extreme"


class AttackRange(str, Enum):
    MELEE = "melee"
    RANGED = "ranged"


class AttackType(str, Enum):
    DAMAGE = "damage"
    SUPPORT = "support"


class EncounterPhase(str, Enum):
    """Encounter lifecycle phases. Strictly forward-moving."""

    SETUP = "setup"
    INITIATIVE = "initiative"
    COMBAT = "combat"
    ENDED = "ended"


class ParticipantType(str, Enum):
    TAMER = "tamer"
    DIGIMON = "digimon"


class EffectCategory(str, Enum):
    BUFF = "buff"
    DEBUFF = "debuff"
    STATUS = "status"


class HazardCategory(str, Enum):
    TERRAIN = "terrain"
    WEATHER = "weather"
    DIGITAL = "digital"
    TRAP = "trap"
    OTHER = "other"


class HazardSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


class RequirementType(str, Enum):
    """Kinds of gate on an evolution chain slot."""

    BATTLES = "battles"
    XP = "xp"
    BOND = "bond"
    ITEM = "item"
    SPECIAL = "special"  # GM adjudicated


class AspectType(str, Enum):
    MAJOR = "major"
    MINOR = "minor"


class TormentSeverity(str, Enum):
    MINOR = "minor"
    MAJOR = "major"
    TERRIBLE = "terrible"


# =============================================================================
# STAGE TABLE
# =============================================================================


@dataclass(frozen=True)
class StageConfig:
    """Immutable per-stage constants."""

    stage: Stage
    dp: int
    movement: int
    wound_bonus: int
    brains: int
    attacks: int
    stage_bonus: int


STAGE_ORDER: list[Stage] = [
    Stage.FRESH,
    Stage.IN_TRAINING,
    Stage.ROOKIE,
    Stage.CHAMPION,
    Stage.ULTIMATE,
    Stage.MEGA,
    Stage.ULTRA,
]

STAGE_CONFIG: dict[Stage, StageConfig] = {
    Stage.FRESH: StageConfig(Stage.FRESH, dp=5, movement=2, wound_bonus=0, brains=0, attacks=1, stage_bonus=0),
    Stage.IN_TRAINING: StageConfig(
        Stage.IN_TRAINING, dp=15, movement=4, wound_bonus=1, brains=1, attacks=2, stage_bonus=0
    ),
    Stage.ROOKIE: StageConfig(Stage.ROOKIE, dp=25, movement=6, wound_bonus=2, brains=3, attacks=2, stage_bonus=1),
    Stage.CHAMPION: StageConfig(
        Stage.CHAMPION, dp=40, movement=8, wound_bonus=5, brains=5, attacks=3, stage_bonus=2
    ),
    Stage.ULTIMATE: StageConfig(
        Stage.ULTIMATE, dp=55, movement=10, wound_bonus=7, brains=7, attacks=4, stage_bonus=3
    ),
    Stage.MEGA: StageConfig(Stage.MEGA, dp=70, movement=12, wound_bonus=10, brains=10, attacks=5, stage_bonus=4),
    Stage.ULTRA: StageConfig(Stage.ULTRA, dp=85, movement=14, wound_bonus=12, brains=12, attacks=6, stage_bonus=5),
}

# Maximum DP that may be recovered by taking negative qualities
NEGATIVE_QUALITY_LIMITS: dict[Stage, int] = {
    Stage.FRESH: 0,
    Stage.IN_TRAINING: 0,
    Stage.ROOKIE: 1,
    Stage.CHAMPION: 2,
    Stage.ULTIMATE: 3,
    Stage.MEGA: 4,
    Stage.ULTRA: 5,
}


def compare_stages(a: Stage, b: Stage) -> int:
    """
    Compare two stages by progression order.

    Returns:
        Negative if a precedes b, 0 if equal, positive if a follows b
    """
    return STAGE_ORDER.index(Stage(a)) - STAGE_ORDER.index(Stage(b))


def get_stage_config(stage: Stage) -> StageConfig:
    """Get the constants for a stage."""
    return STAGE_CONFIG[Stage(stage)]


def max_negative_dp(stage: Stage) -> int:
    """Get the negative-quality DP allowance for a stage."""
    return NEGATIVE_QUALITY_LIMITS.get(Stage(stage), 0)


# =============================================================================
# ERRORS
# =============================================================================


class GameRulesError(Exception):
    """Base class for all rules engine errors."""

    pass


class ValidationError(GameRulesError):
    """Malformed or missing required input."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(GameRulesError):
    """A referenced entity does not exist."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class RuleCode(str, Enum):
    """Machine-checkable codes for rule violations."""

    STAGE_GATE = "stage_gate"
    PREREQUISITE_UNMET = "prerequisite_unmet"
    RANK_CAP = "rank_cap"
    EXCLUSIVE_CONFLICT = "exclusive_conflict"
    UNKNOWN_CHOICE = "unknown_choice"
    CHOICE_PREREQUISITE_UNMET = "choice_prerequisite_unmet"
    NEGATIVE_LIMIT = "negative_limit"
    REQUIREMENT_UNMET = "requirement_unmet"
    ALREADY_MAX_STAGE = "already_max_stage"
    ALREADY_MIN_STAGE = "already_min_stage"


class RuleViolation(GameRulesError):
    """
    A build or progression rule was broken.

    Carries a code, a human-readable message and structured details such as
    the missing prerequisites or the numeric shortfall.
    """

    def __init__(self, code: RuleCode, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": self.details}


class StorageFailure(GameRulesError):
    """The storage layer could not complete a read or write."""

    pass


# =============================================================================
# DICE AND RANDOMIZATION
# =============================================================================


class DiceRoller:
    """
    Centralized randomization interface.
    All dice rolls go through this class for reproducibility and logging.

    Any object exposing randint(a, b) can stand in for the random source,
    either process-wide via set_rng() or per call via the rng argument.
    """

    _instance = None
    _seed: Optional[int] = None
    _rng: Any = random.Random()
    _roll_log: list = []

    _NOTATION = re.compile(r"^\s*(\d*)[dD](\d+)\s*([+-]\s*\d+)?\s*$")

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def set_seed(cls, seed: int) -> None:
        """Set random seed for reproducibility."""
        cls._seed = seed
        cls._rng = random.Random(seed)

    @classmethod
    def set_rng(cls, rng: Any) -> None:
        """Replace the process-wide random source."""
        cls._rng = rng

    @classmethod
    def get_seed(cls) -> Optional[int]:
        return cls._seed

    @classmethod
    def roll(cls, dice: str, reason: str = "", rng: Any = None) -> "DiceResult":
        """
        Roll dice using standard notation (e.g., '3d6', '1d6+2', '2d6-1').

        Args:
            dice: Dice notation string
            reason: Why this roll is being made (for logging)
            rng: Optional random source overriding the shared one

        Returns:
            DiceResult with individual rolls and total
        """
        match = cls._NOTATION.match(dice)
        if not match:
            raise ValidationError(f"Invalid dice notation: {dice}", field="dice")

        num_dice = int(match.group(1)) if match.group(1) else 1
        die_size = int(match.group(2))
        modifier = int(match.group(3).replace(" ", "")) if match.group(3) else 0

        source = rng if rng is not None else cls._rng
        rolls = [source.randint(1, die_size) for _ in range(num_dice)]
        total = sum(rolls) + modifier

        result = DiceResult(notation=dice, rolls=rolls, modifier=modifier, total=total, reason=reason)
        cls._roll_log.append(result)

        from src.observability.run_log import get_run_log

        get_run_log().log_roll(
            notation=dice, rolls=rolls, modifier=modifier, total=total, reason=reason
        )
        return result

    @classmethod
    def roll_d6(cls, num_dice: int = 1, reason: str = "", rng: Any = None) -> "DiceResult":
        """Convenience method for d6 rolls."""
        return cls.roll(f"{num_dice}d6", reason, rng=rng)

    @classmethod
    def get_roll_log(cls) -> list:
        """Get the complete roll log for the session."""
        return cls._roll_log.copy()

    @classmethod
    def clear_roll_log(cls) -> None:
        """Clear the roll log."""
        cls._roll_log = []


@dataclass
class DiceResult:
    """Result of a dice roll with full information."""

    notation: str
    rolls: list[int]
    modifier: int
    total: int
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        if self.modifier > 0:
            return f"{self.notation}: {self.rolls} + {self.modifier} = {self.total}"
        elif self.modifier < 0:
            return f"{self.notation}: {self.rolls} - {abs(self.modifier)} = {self.total}"
        return f"{self.notation}: {self.rolls} = {self.total}"


# =============================================================================
# STAT BLOCKS
# =============================================================================


class _IntBlock:
    """Mixin for flat dataclasses of integer stats."""

    def to_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        return cls(**{f.name: int(data.get(f.name, f.default)) for f in fields(cls)})


@dataclass
class BaseStats(_IntBlock):
    """The five GM-assigned Digimon stats."""

    accuracy: int = 0
    damage: int = 0
    dodge: int = 0
    armor: int = 0
    health: int = 0


@dataclass
class DerivedStats(_IntBlock):
    """
    Stats computed from BaseStats and Stage.

    Cached on the Digimon record; always recomputable, never the source of truth.
    """

    agility: int = 0
    body: int = 0
    wound_boxes: int = 0
    bit: int = 0  # effect duration
    ram: int = 0  # range / area / movement
    cpu: int = 0  # power / clash
    movement: int = 0


@dataclass
class TamerAttributes(_IntBlock):
    agility: int = 1
    body: int = 1
    charisma: int = 1
    intelligence: int = 1
    willpower: int = 1


@dataclass
class TamerSkills(_IntBlock):
    """Fifteen skills, three per attribute."""

    # Agility
    dodge: int = 0
    fight: int = 0
    stealth: int = 0
    # Body
    athletics: int = 0
    endurance: int = 0
    feats_of_strength: int = 0
    # Charisma
    manipulate: int = 0
    perform: int = 0
    persuasion: int = 0
    # Intelligence
    computer: int = 0
    survival: int = 0
    knowledge: int = 0
    # Willpower
    perception: int = 0
    decipher_intent: int = 0
    bravery: int = 0


@dataclass
class TamerDerivedStats(_IntBlock):
    wound_boxes: int = 2
    speed: int = 0
    accuracy_pool: int = 0
    dodge_pool: int = 0
    armor: int = 0
    damage: int = 0


# =============================================================================
# TAMERS
# =============================================================================

ASPECT_USES: dict[AspectType, int] = {AspectType.MAJOR: 1, AspectType.MINOR: 2}

TORMENT_BOX_COUNTS: dict[TormentSeverity, int] = {
    TormentSeverity.MINOR: 5,
    TormentSeverity.MAJOR: 7,
    TormentSeverity.TERRIBLE: 10,
}


@dataclass
class Aspect:
    name: str
    aspect_type: AspectType = AspectType.MINOR
    description: str = ""
    uses_remaining: Optional[int] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.aspect_type = AspectType(self.aspect_type)
        if self.uses_remaining is None:
            self.uses_remaining = ASPECT_USES[self.aspect_type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "aspect_type": self.aspect_type.value,
            "uses_remaining": self.uses_remaining,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Aspect":
        return cls(
            id=data.get("id") or new_id(),
            name=data["name"],
            description=data.get("description", ""),
            aspect_type=AspectType(data.get("aspect_type", "minor")),
            uses_remaining=data.get("uses_remaining"),
        )


@dataclass
class Torment:
    name: str
    severity: TormentSeverity = TormentSeverity.MINOR
    description: str = ""
    total_boxes: Optional[int] = None
    marked_boxes: int = 0
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        self.severity = TormentSeverity(self.severity)
        if self.total_boxes is None:
            self.total_boxes = TORMENT_BOX_COUNTS[self.severity]

    @property
    def is_overcome(self) -> bool:
        return self.marked_boxes >= self.total_boxes

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "severity": self.severity.value,
            "total_boxes": self.total_boxes,
            "marked_boxes": self.marked_boxes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Torment":
        return cls(
            id=data.get("id") or new_id(),
            name=data["name"],
            description=data.get("description", ""),
            severity=TormentSeverity(data.get("severity", "minor")),
            total_boxes=data.get("total_boxes"),
            marked_boxes=data.get("marked_boxes", 0),
        )


@dataclass
class Tamer:
    """A human partner character."""

    name: str
    attributes: TamerAttributes = field(default_factory=TamerAttributes)
    skills: TamerSkills = field(default_factory=TamerSkills)
    derived_stats: TamerDerivedStats = field(default_factory=TamerDerivedStats)
    age: int = 0
    campaign_level: CampaignLevel = CampaignLevel.STANDARD
    aspects: list[Aspect] = field(default_factory=list)
    torments: list[Torment] = field(default_factory=list)
    special_orders: list[str] = field(default_factory=list)
    inspiration: int = 1
    max_inspiration: int = 1
    xp: int = 0
    equipment: list[str] = field(default_factory=list)
    partner_digimon_ids: list[str] = field(default_factory=list)
    current_wounds: int = 0
    notes: str = ""
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "campaign_level": self.campaign_level.value,
            "attributes": self.attributes.to_dict(),
            "skills": self.skills.to_dict(),
            "derived_stats": self.derived_stats.to_dict(),
            "aspects": [a.to_dict() for a in self.aspects],
            "torments": [t.to_dict() for t in self.torments],
            "special_orders": list(self.special_orders),
            "inspiration": self.inspiration,
            "max_inspiration": self.max_inspiration,
            "xp": self.xp,
            "equipment": list(self.equipment),
            "partner_digimon_ids": list(self.partner_digimon_ids),
            "current_wounds": self.current_wounds,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Tamer":
        return cls(
            id=data["id"],
            name=data["name"],
            age=data.get("age", 0),
            campaign_level=CampaignLevel(data.get("campaign_level", "standard")),
            attributes=TamerAttributes.from_dict(data.get("attributes", {})),
            skills=TamerSkills.from_dict(data.get("skills", {})),
            derived_stats=TamerDerivedStats.from_dict(data.get("derived_stats", {})),
            aspects=[Aspect.from_dict(a) for a in data.get("aspects", [])],
            torments=[Torment.from_dict(t) for t in data.get("torments", [])],
            special_orders=data.get("special_orders", []),
            inspiration=data.get("inspiration", 1),
            max_inspiration=data.get("max_inspiration", 1),
            xp=data.get("xp", 0),
            equipment=data.get("equipment", []),
            partner_digimon_ids=data.get("partner_digimon_ids", []),
            current_wounds=data.get("current_wounds", 0),
            notes=data.get("notes", ""),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.now(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else datetime.now(),
        )


# =============================================================================
# DIGIMON
# =============================================================================


@dataclass
class OwnedQuality:
    """A quality on a Digimon: catalogue id, rank count and optional choice."""

    id: str
    name: str = ""
    ranks: int = 1
    choice_id: Optional[str] = None
    choice_name: Optional[str] = None
    dp_cost: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "ranks": self.ranks,
            "choice_id": self.choice_id,
            "choice_name": self.choice_name,
            "dp_cost": self.dp_cost,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OwnedQuality":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            ranks=data.get("ranks") or 1,
            choice_id=data.get("choice_id"),
            choice_name=data.get("choice_name"),
            dp_cost=data.get("dp_cost", 0),
        )


@dataclass
class Attack:
    """
    An attack owned by a Digimon.

    Always a copy, never a reference to a catalogue template, since the GM
    customizes tags and effects per creature.
    """

    name: str
    range: AttackRange = AttackRange.MELEE
    attack_type: AttackType = AttackType.DAMAGE
    tags: list[str] = field(default_factory=list)
    effect: Optional[str] = None
    description: str = ""
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "range": AttackRange(self.range).value,
            "attack_type": AttackType(self.attack_type).value,
            "tags": list(self.tags),
            "effect": self.effect,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Attack":
        return cls(
            id=data.get("id") or new_id(),
            name=data["name"],
            range=AttackRange(data.get("range", "melee")),
            attack_type=AttackType(data.get("attack_type", "damage")),
            tags=list(data.get("tags", [])),
            effect=data.get("effect"),
            description=data.get("description", ""),
        )


@dataclass
class Digimon:
    """
    A Digimon creature.

    evolves_from_id and evolution_path_ids form a tree across Digimon records
    and are kept mutually consistent by src.characters.evolution_links.
    """

    name: str
    species: str
    stage: Stage
    base_stats: BaseStats = field(default_factory=BaseStats)
    derived_stats: DerivedStats = field(default_factory=DerivedStats)
    attribute: DigimonAttribute = DigimonAttribute.DATA
    family: str = "unknown"
    digimon_type: str = ""
    attacks: list[Attack] = field(default_factory=list)
    qualities: list[OwnedQuality] = field(default_factory=list)
    data_optimization: Optional[str] = None
    base_dp: int = 0
    bonus_dp: int = 0
    current_wounds: int = 0
    current_stance: Stance = Stance.NEUTRAL
    evolution_path_ids: list[str] = field(default_factory=list)
    evolves_from_id: Optional[str] = None
    partner_id: Optional[str] = None
    is_enemy: bool = False
    notes: str = ""
    sprite_url: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def get_quality(self, quality_id: str) -> Optional[OwnedQuality]:
        """Get an owned quality by catalogue id."""
        for quality in self.qualities:
            if quality.id == quality_id:
                return quality
        return None

    def get_attack(self, attack_id: str) -> Optional[Attack]:
        for attack in self.attacks:
            if attack.id == attack_id:
                return attack
        return None

    @property
    def total_dp(self) -> int:
        return self.base_dp + self.bonus_dp

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "species": self.species,
            "stage": Stage(self.stage).value,
            "attribute": DigimonAttribute(self.attribute).value,
            "family": self.family,
            "digimon_type": self.digimon_type,
            "base_stats": self.base_stats.to_dict(),
            "derived_stats": self.derived_stats.to_dict(),
            "attacks": [a.to_dict() for a in self.attacks],
            "qualities": [q.to_dict() for q in self.qualities],
            "data_optimization": self.data_optimization,
            "base_dp": self.base_dp,
            "bonus_dp": self.bonus_dp,
            "current_wounds": self.current_wounds,
            "current_stance": Stance(self.current_stance).value,
            "evolution_path_ids": list(self.evolution_path_ids),
            "evolves_from_id": self.evolves_from_id,
            "partner_id": self.partner_id,
            "is_enemy": self.is_enemy,
            "notes": self.notes,
            "sprite_url": self.sprite_url,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Digimon":
        return cls(
            id=data["id"],
            name=data["name"],
            species=data["species"],
            stage=Stage(data["stage"]),
            attribute=DigimonAttribute(data.get("attribute", "data")),
            family=data.get("family", "unknown"),
            digimon_type=data.get("digimon_type", ""),
            base_stats=BaseStats.from_dict(data.get("base_stats", {})),
            derived_stats=DerivedStats.from_dict(data.get("derived_stats", {})),
            attacks=[Attack.from_dict(a) for a in data.get("attacks", [])],
            qualities=[OwnedQuality.from_dict(q) for q in data.get("qualities", [])],
            data_optimization=data.get("data_optimization"),
            base_dp=data.get("base_dp", 0),
            bonus_dp=data.get("bonus_dp", 0),
            current_wounds=data.get("current_wounds", 0),
            current_stance=Stance(data.get("current_stance", "neutral")),
            evolution_path_ids=list(data.get("evolution_path_ids", [])),
            evolves_from_id=data.get("evolves_from_id"),
            partner_id=data.get("partner_id"),
            is_enemy=data.get("is_enemy", False),
            notes=data.get("notes", ""),
            sprite_url=data.get("sprite_url"),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.now(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else datetime.now(),
        )


# =============================================================================
# ENCOUNTERS
# =============================================================================

SIMPLE_ACTIONS_PER_TURN = 2
COMPLEX_ACTIONS_PER_TURN = 1
DEFAULT_MAX_WOUNDS = 5


@dataclass
class ActionBudget:
    """Actions remaining this round. One complex action costs two simple."""

    simple: int = SIMPLE_ACTIONS_PER_TURN
    complex: int = COMPLEX_ACTIONS_PER_TURN

    def reset(self) -> None:
        self.simple = SIMPLE_ACTIONS_PER_TURN
        self.complex = COMPLEX_ACTIONS_PER_TURN

    def to_dict(self) -> dict[str, int]:
        return {"simple": self.simple, "complex": self.complex}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionBudget":
        return cls(
            simple=data.get("simple", SIMPLE_ACTIONS_PER_TURN),
            complex=data.get("complex", COMPLEX_ACTIONS_PER_TURN),
        )


@dataclass
class ActiveEffect:
    """A timed effect on a participant. Duration counts rounds remaining."""

    name: str
    duration: int
    category: EffectCategory = EffectCategory.STATUS
    source: str = ""
    description: str = ""
    id: str = field(default_factory=new_id)

    def tick(self) -> bool:
        """
        Age the effect by one round.

        Returns:
            True if the effect has expired, False otherwise
        """
        self.duration -= 1
        return self.duration <= 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": EffectCategory(self.category).value,
            "duration": self.duration,
            "source": self.source,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActiveEffect":
        return cls(
            id=data.get("id") or new_id(),
            name=data["name"],
            category=EffectCategory(data.get("category", "status")),
            duration=data["duration"],
            source=data.get("source", ""),
            description=data.get("description", ""),
        )


@dataclass
class CombatParticipant:
    """A Tamer or Digimon placed into an Encounter, with combat-only state."""

    participant_type: ParticipantType
    entity_id: str
    name: str = ""
    initiative: int = 0
    initiative_roll: int = 0
    actions_remaining: ActionBudget = field(default_factory=ActionBudget)
    current_stance: Stance = Stance.NEUTRAL
    active_effects: list[ActiveEffect] = field(default_factory=list)
    is_active: bool = False
    has_acted: bool = False
    current_wounds: int = 0
    max_wounds: int = DEFAULT_MAX_WOUNDS
    id: str = field(default_factory=new_id)

    def age_effects(self) -> list[ActiveEffect]:
        """
        Age every active effect by one round and drop the expired ones.

        Returns:
            The effects that expired
        """
        expired = [effect for effect in self.active_effects if effect.tick()]
        self.active_effects = [e for e in self.active_effects if e.duration > 0]
        return expired

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "participant_type": ParticipantType(self.participant_type).value,
            "entity_id": self.entity_id,
            "name": self.name,
            "initiative": self.initiative,
            "initiative_roll": self.initiative_roll,
            "actions_remaining": self.actions_remaining.to_dict(),
            "current_stance": Stance(self.current_stance).value,
            "active_effects": [e.to_dict() for e in self.active_effects],
            "is_active": self.is_active,
            "has_acted": self.has_acted,
            "current_wounds": self.current_wounds,
            "max_wounds": self.max_wounds,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CombatParticipant":
        return cls(
            id=data["id"],
            participant_type=ParticipantType(data["participant_type"]),
            entity_id=data["entity_id"],
            name=data.get("name", ""),
            initiative=data.get("initiative", 0),
            initiative_roll=data.get("initiative_roll", 0),
            actions_remaining=ActionBudget.from_dict(data.get("actions_remaining", {})),
            current_stance=Stance(data.get("current_stance", "neutral")),
            active_effects=[ActiveEffect.from_dict(e) for e in data.get("active_effects", [])],
            is_active=data.get("is_active", False),
            has_acted=data.get("has_acted", False),
            current_wounds=data.get("current_wounds", 0),
            max_wounds=data.get("max_wounds", DEFAULT_MAX_WOUNDS),
        )


@dataclass
class BattleLogEntry:
    """One append-only line of the battle log."""

    round: int
    actor_id: str
    actor_name: str
    action: str
    result: str = ""
    target: Optional[str] = None
    damage: Optional[int] = None
    effects: list[str] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "round": self.round,
            "actor_id": self.actor_id,
            "actor_name": self.actor_name,
            "action": self.action,
            "target": self.target,
            "result": self.result,
            "damage": self.damage,
            "effects": list(self.effects),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BattleLogEntry":
        return cls(
            id=data["id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            round=data.get("round", 0),
            actor_id=data.get("actor_id", ""),
            actor_name=data.get("actor_name", ""),
            action=data.get("action", ""),
            target=data.get("target"),
            result=data.get("result", ""),
            damage=data.get("damage"),
            effects=list(data.get("effects", [])),
        )

    def __str__(self) -> str:
        line = f"[Round {self.round}] {self.actor_name}: {self.action}"
        if self.target:
            line += f" -> {self.target}"
        if self.result:
            line += f" ({self.result})"
        if self.damage is not None:
            line += f" [{self.damage} dmg]"
        return line


@dataclass
class Hazard:
    """An environmental modifier on an Encounter. duration None = permanent."""

    name: str
    description: str = ""
    effect: str = ""
    affected_area: str = ""
    duration: Optional[int] = None
    id: str = field(default_factory=new_id)

    def tick(self) -> bool:
        """
        Reduce duration by 1 round.

        Returns:
            True if the hazard has expired, False otherwise
        """
        if self.duration is not None:
            self.duration -= 1
            return self.duration <= 0
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "effect": self.effect,
            "affected_area": self.affected_area,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Hazard":
        return cls(
            id=data.get("id") or new_id(),
            name=data["name"],
            description=data.get("description", ""),
            effect=data.get("effect", ""),
            affected_area=data.get("affected_area", ""),
            duration=data.get("duration"),
        )


@dataclass
class Encounter:
    """
    State of a combat encounter.

    turn_order is a permutation of participant ids sorted by initiative
    (descending, ties in insertion order); current_turn_index points into it.
    """

    name: str
    description: str = ""
    phase: EncounterPhase = EncounterPhase.SETUP
    round: int = 0
    participants: list[CombatParticipant] = field(default_factory=list)
    turn_order: list[str] = field(default_factory=list)
    current_turn_index: int = 0
    battle_log: list[BattleLogEntry] = field(default_factory=list)
    hazards: list[Hazard] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def get_participant(self, participant_id: str) -> Optional[CombatParticipant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def get_current_participant(self) -> Optional[CombatParticipant]:
        """Get the participant whose turn it is."""
        if not self.turn_order or not 0 <= self.current_turn_index < len(self.turn_order):
            return None
        return self.get_participant(self.turn_order[self.current_turn_index])

    def recompute_turn_order(self) -> None:
        """Rebuild turn order from scratch: initiative descending, stable on ties."""
        ordered = sorted(self.participants, key=lambda p: p.initiative, reverse=True)
        self.turn_order = [p.id for p in ordered]

    def get_hazard(self, hazard_id: str) -> Optional[Hazard]:
        for hazard in self.hazards:
            if hazard.id == hazard_id:
                return hazard
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "phase": EncounterPhase(self.phase).value,
            "round": self.round,
            "participants": [p.to_dict() for p in self.participants],
            "turn_order": list(self.turn_order),
            "current_turn_index": self.current_turn_index,
            "battle_log": [e.to_dict() for e in self.battle_log],
            "hazards": [h.to_dict() for h in self.hazards],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Encounter":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            phase=EncounterPhase(data.get("phase", "setup")),
            round=data.get("round", 0),
            participants=[CombatParticipant.from_dict(p) for p in data.get("participants", [])],
            turn_order=list(data.get("turn_order", [])),
            current_turn_index=data.get("current_turn_index", 0),
            battle_log=[BattleLogEntry.from_dict(e) for e in data.get("battle_log", [])],
            hazards=[Hazard.from_dict(h) for h in data.get("hazards", [])],
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.now(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else datetime.now(),
        )


# =============================================================================
# EVOLUTION LINES
# =============================================================================


@dataclass
class EvolutionRequirement:
    """Gate on reaching a chain slot."""

    requirement_type: RequirementType
    description: str = ""
    value: Optional[int] = None
    item_name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "requirement_type": RequirementType(self.requirement_type).value,
            "description": self.description,
            "value": self.value,
            "item_name": self.item_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvolutionRequirement":
        return cls(
            requirement_type=RequirementType(data["requirement_type"]),
            description=data.get("description", ""),
            value=data.get("value"),
            item_name=data.get("item_name"),
        )


@dataclass
class EvolutionChainEntry:
    stage: Stage
    species: str
    digimon_id: Optional[str] = None
    requirements: Optional[EvolutionRequirement] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": Stage(self.stage).value,
            "species": self.species,
            "digimon_id": self.digimon_id,
            "requirements": self.requirements.to_dict() if self.requirements else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvolutionChainEntry":
        requirements = data.get("requirements")
        return cls(
            stage=Stage(data["stage"]),
            species=data["species"],
            digimon_id=data.get("digimon_id"),
            requirements=EvolutionRequirement.from_dict(requirements) if requirements else None,
        )


@dataclass
class EvolutionProgress:
    battles_won: int = 0
    xp_earned: int = 0
    bond_level: int = 0
    items_collected: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "battles_won": self.battles_won,
            "xp_earned": self.xp_earned,
            "bond_level": self.bond_level,
            "items_collected": list(self.items_collected),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvolutionProgress":
        return cls(
            battles_won=data.get("battles_won", 0),
            xp_earned=data.get("xp_earned", 0),
            bond_level=data.get("bond_level", 0),
            items_collected=list(data.get("items_collected", [])),
        )


@dataclass
class EvolutionLine:
    """An ordered chain of stage slots with a cursor and progress counters."""

    name: str
    chain: list[EvolutionChainEntry] = field(default_factory=list)
    current_stage_index: int = 0
    evolution_progress: EvolutionProgress = field(default_factory=EvolutionProgress)
    description: str = ""
    partner_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "chain": [c.to_dict() for c in self.chain],
            "current_stage_index": self.current_stage_index,
            "evolution_progress": self.evolution_progress.to_dict(),
            "partner_id": self.partner_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvolutionLine":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            chain=[EvolutionChainEntry.from_dict(c) for c in data.get("chain", [])],
            current_stage_index=data.get("current_stage_index", 0),
            evolution_progress=EvolutionProgress.from_dict(data.get("evolution_progress", {})),
            partner_id=data.get("partner_id"),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.now(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else datetime.now(),
        )
