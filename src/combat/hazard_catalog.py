"""
Hazard catalogue.

Ready-made environmental hazards a GM can drop into an Encounter. Templates
are immutable; hazard_from_template makes the per-encounter copy.
"""

from dataclasses import dataclass
from typing import Optional

from src.data_models import Hazard, HazardCategory, HazardSeverity, new_id


@dataclass(frozen=True)
class HazardTemplate:
    """Catalogue definition of a hazard. duration None = permanent."""

    id: str
    name: str
    description: str
    effect: str
    affected_area: str
    duration: Optional[int]
    category: HazardCategory
    severity: HazardSeverity


def _hazard(id, name, description, effect, affected_area, duration, category, severity) -> HazardTemplate:
    return HazardTemplate(
        id=id,
        name=name,
        description=description,
        effect=effect,
        affected_area=affected_area,
        duration=duration,
        category=HazardCategory(category),
        severity=HazardSeverity(severity),
    )


HAZARD_CATALOG: list[HazardTemplate] = [
    # Terrain
    _hazard("lava-pool", "Lava Pool", "A pool of molten lava that burns anything that touches it.",
            "Any creature that enters or starts turn in this area takes 3 damage (ignores armor).",
            "10ft radius", None, "terrain", "severe"),
    _hazard("spike-pit", "Spike Pit", "A concealed pit filled with sharp spikes.",
            "Creature falling in takes 2 damage and is restrained until they use a complex action to escape.",
            "5ft square", None, "terrain", "moderate"),
    _hazard("quicksand", "Quicksand", "Treacherous sand that pulls creatures down.",
            "Movement through this area costs double. Ending turn here requires Agility check or become "
            "restrained.",
            "15ft radius", None, "terrain", "moderate"),
    _hazard("ice-floor", "Icy Surface", "A slippery frozen surface.",
            "Movement through this area requires Agility check or fall prone. Running causes automatic fall.",
            "Varies", None, "terrain", "minor"),
    _hazard("difficult-terrain", "Difficult Terrain", "Rough, uneven ground that slows movement.",
            "Movement through this area costs double.",
            "Varies", None, "terrain", "minor"),
    _hazard("cliff-edge", "Cliff Edge", "A dangerous drop-off.",
            "Creatures pushed over edge take fall damage based on height. Flying creatures unaffected.",
            "Edge", None, "terrain", "severe"),
    # Weather
    _hazard("sandstorm", "Sandstorm", "A violent storm of swirling sand.",
            "All ranged attacks have -2 accuracy. Visibility reduced to short range.",
            "Entire battlefield", 5, "weather", "moderate"),
    _hazard("heavy-rain", "Heavy Rain", "Torrential downpour that obscures vision.",
            "Fire attacks deal -2 damage. Visibility reduced. Ground becomes slippery.",
            "Entire battlefield", None, "weather", "minor"),
    _hazard("blizzard", "Blizzard", "A fierce snowstorm with biting cold.",
            "Non-ice Digimon take 1 damage at start of turn. Ice Digimon gain +1 to all stats.",
            "Entire battlefield", 4, "weather", "severe"),
    _hazard("intense-heat", "Intense Heat", "Sweltering temperatures that drain energy.",
            "Non-fire Digimon lose 1 simple action per turn. Fire Digimon gain +1 damage.",
            "Entire battlefield", None, "weather", "moderate"),
    _hazard("lightning-storm", "Lightning Storm", "Electrical storm with frequent lightning strikes.",
            "At end of each round, roll d6. On 1-2, random participant takes 2 electric damage.",
            "Entire battlefield", 3, "weather", "moderate"),
    # Digital
    _hazard("data-corruption", "Data Corruption Zone", "An area where digital data is unstable.",
            "Digimon in this area cannot use complex attacks. Healing effects are halved.",
            "20ft radius", None, "digital", "moderate"),
    _hazard("virus-field", "Virus Field", "A corrupted area that empowers virus-type Digimon.",
            "Virus Digimon gain +2 to damage. Vaccine Digimon take -2 to damage.",
            "Varies", None, "digital", "moderate"),
    _hazard("data-stream", "Data Stream", "A flowing stream of raw digital data.",
            "Creatures in stream are pushed 10ft in stream direction. Can ride stream for +20ft movement.",
            "Linear path", None, "digital", "minor"),
    _hazard("firewall", "Firewall", "A defensive barrier of digital fire.",
            "Blocks all ranged attacks that pass through. Entering deals 2 fire damage.",
            "Wall", 3, "digital", "moderate"),
    _hazard("null-zone", "Null Zone", "An area where digital abilities are suppressed.",
            "All attack modifiers are negated (set to 0). Qualities and special effects don't work.",
            "15ft radius", 2, "digital", "severe"),
    _hazard("evolution-accelerator", "Evolution Accelerator", "A zone of concentrated evolution energy.",
            "Digimon that spend a full round here can temporarily evolve one stage (lasts 3 rounds).",
            "10ft radius", None, "digital", "moderate"),
    # Traps
    _hazard("net-trap", "Net Trap", "A hidden net that springs up to ensnare victims.",
            "First creature to enter becomes restrained. Body check (TN 12) to escape.",
            "5ft square", 1, "trap", "minor"),
    _hazard("poison-dart", "Poison Dart Trap", "Concealed launchers that fire poisoned darts.",
            "When triggered, all in area take 1 damage and are poisoned (1 damage/round for 3 rounds).",
            "10ft cone", 1, "trap", "moderate"),
    _hazard("explosive-rune", "Explosive Rune", "A magical symbol that explodes when approached.",
            "First creature within 5ft triggers explosion: 3 damage to all within 10ft.",
            "10ft radius on trigger", 1, "trap", "severe"),
    _hazard("alarm", "Alarm Trap", "A concealed sensor that alerts enemies.",
            "When triggered, all enemies in encounter are alerted. Surprise is lost.",
            "5ft square", 1, "trap", "minor"),
    # Other
    _hazard("darkness", "Magical Darkness", "An area of impenetrable darkness.",
            "All attacks in or through this area have -3 accuracy. Only creatures with special senses can see.",
            "20ft radius", 4, "other", "moderate"),
    _hazard("anti-gravity", "Anti-Gravity Zone", "An area where gravity is reversed or negated.",
            "Non-flying creatures float. Melee attacks have -2 accuracy. Can move vertically.",
            "30ft cube", 3, "other", "moderate"),
    _hazard("healing-spring", "Healing Spring", "A spring of restorative water.",
            "Creature that spends simple action here heals 1 wound. Once per creature per encounter.",
            "5ft radius", None, "other", "minor"),
    _hazard("berserk-aura", "Berserk Aura", "An energy field that induces rage.",
            "Creatures in aura have +2 damage but -2 dodge. Must attack nearest target.",
            "15ft radius", None, "other", "moderate"),
]

_BY_ID: dict[str, HazardTemplate] = {h.id: h for h in HAZARD_CATALOG}


def get_hazard_template(hazard_id: str) -> Optional[HazardTemplate]:
    return _BY_ID.get(hazard_id)


def get_hazards_by_category(category: HazardCategory) -> list[HazardTemplate]:
    category = HazardCategory(category)
    return [h for h in HAZARD_CATALOG if h.category == category]


def get_hazards_by_severity(severity: HazardSeverity) -> list[HazardTemplate]:
    severity = HazardSeverity(severity)
    return [h for h in HAZARD_CATALOG if h.severity == severity]


def search_hazards(query: str) -> list[HazardTemplate]:
    """Case-insensitive search over name, description and effect."""
    needle = query.lower()
    return [
        h
        for h in HAZARD_CATALOG
        if needle in h.name.lower() or needle in h.description.lower() or needle in h.effect.lower()
    ]


def hazard_from_template(template: HazardTemplate, duration: Optional[int] = None) -> Hazard:
    """
    Create an encounter Hazard from a template.

    Args:
        template: The catalogue entry
        duration: Overrides the template's duration when given
    """
    return Hazard(
        id=new_id(),
        name=template.name,
        description=template.description,
        effect=template.effect,
        affected_area=template.affected_area,
        duration=template.duration if duration is None else duration,
    )
