"""
Digimon GM Assistant - Main Entry Point

A rules companion for Game Masters running the Digimon tabletop RPG.

This module provides the command-line entry point: catalogue browsing for
qualities, attacks and hazards, a derived-stat calculator, and a scripted
demo encounter that exercises the whole engine.
"""

import sys
from pathlib import Path

# Add the project root to the Python path for module discovery
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import argparse
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from src.data_models import (
    ActiveEffect,
    BaseStats,
    BattleLogEntry,
    DiceRoller,
    EffectCategory,
    GameRulesError,
    HazardCategory,
    HazardSeverity,
    Stage,
    StageConfig,
    get_stage_config,
)
from src.advancement import EvolutionManager
from src.attacks import get_attack_registry
from src.characters import compute_derived, create_digimon, create_tamer
from src.combat import (
    EncounterEngine,
    create_participant,
    get_hazard_template,
    get_hazards_by_category,
    get_hazards_by_severity,
    hazard_from_template,
    search_hazards,
    HAZARD_CATALOG,
)
from src.observability import get_run_log
from src.qualities import QualityCategory, QualityType, available_qualities, get_quality_manager
from src.storage import EntityKind, EntityStore


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class AssistantConfig:
    """Configuration for an assistant session."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    db_path: Union[Path, str] = ":memory:"

    # Dice
    seed: Optional[int] = None

    # Runtime options
    verbose: bool = False

    def __post_init__(self):
        """Ensure paths are Path objects."""
        if isinstance(self.data_dir, str):
            self.data_dir = Path(self.data_dir)
        if isinstance(self.db_path, str) and self.db_path != ":memory:":
            self.db_path = Path(self.db_path)

    def create_store(self) -> EntityStore:
        if isinstance(self.db_path, Path) and not self.db_path.is_absolute():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            return EntityStore(self.data_dir / self.db_path)
        return EntityStore(self.db_path)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_qualities(args: argparse.Namespace, config: AssistantConfig) -> int:
    """List catalogue qualities, optionally filtered."""
    manager = get_quality_manager()
    if args.search:
        templates = manager.search(args.search)
    elif args.stage:
        templates = available_qualities(Stage(args.stage), [])
    else:
        templates = manager.get_all()

    if args.type:
        templates = [q for q in templates if q.quality_type == QualityType(args.type)]
    if args.category:
        templates = [q for q in templates if q.category == QualityCategory(args.category)]

    for template in templates:
        cost = f"{template.dp_cost:+d} DP" if template.dp_cost else "free"
        print(f"{template.id:32} {template.name:32} {cost:>8}  max {template.max_ranks}")
    print(f"\n{len(templates)} qualities")
    return 0


def cmd_attacks(args: argparse.Namespace, config: AssistantConfig) -> int:
    """List catalogue attacks, or every known tag."""
    registry = get_attack_registry()
    if args.tags:
        for tag in registry.all_tags():
            print(tag)
        return 0

    if args.search:
        templates = registry.search(args.search)
    elif args.stage:
        templates = registry.for_stage(Stage(args.stage))
    else:
        templates = registry.get_all()

    for template in templates:
        tags = ", ".join(template.tags)
        print(f"{template.name:28} {template.range.value:7} {template.stage:12} {tags}")
    print(f"\n{len(templates)} attacks")
    return 0


def cmd_hazards(args: argparse.Namespace, config: AssistantConfig) -> int:
    """List catalogue hazards."""
    if args.search:
        templates = search_hazards(args.search)
    elif args.category:
        templates = get_hazards_by_category(HazardCategory(args.category))
    elif args.severity:
        templates = get_hazards_by_severity(HazardSeverity(args.severity))
    else:
        templates = list(HAZARD_CATALOG)

    for template in templates:
        duration = f"{template.duration} rounds" if template.duration else "permanent"
        print(f"{template.name:24} {template.category.value:8} {template.severity.value:9} {duration}")
        print(f"    {template.effect}")
    print(f"\n{len(templates)} hazards")
    return 0


def cmd_stats(args: argparse.Namespace, config: AssistantConfig) -> int:
    """Compute derived stats for a stat line at a stage."""
    stage = Stage(args.stage)
    base = BaseStats(
        accuracy=args.accuracy,
        damage=args.damage,
        dodge=args.dodge,
        armor=args.armor,
        health=args.health,
    )
    derived = compute_derived(base, stage)
    stage_config: StageConfig = get_stage_config(stage)

    print(f"Stage: {stage.value} ({stage_config.dp} DP, {stage_config.attacks} attacks)")
    for name, value in derived.to_dict().items():
        print(f"  {name:12} {value}")
    return 0


def run_demo(config: AssistantConfig) -> int:
    """
    Run a short scripted encounter against the configured store.

    Returns:
        Exit code
    """
    store = config.create_store()
    engine = EncounterEngine(store)
    evolutions = EvolutionManager(store)

    tamer = create_tamer({
        "name": "Tai",
        "attributes": {"agility": 3, "body": 3, "charisma": 2, "intelligence": 2, "willpower": 3},
        "skills": {"dodge": 2, "fight": 2, "athletics": 1, "perception": 1},
    })
    partner = create_digimon({
        "name": "Agumon",
        "species": "Agumon",
        "stage": "rookie",
        "attribute": "vaccine",
        "base_stats": {"accuracy": 4, "damage": 4, "dodge": 3, "armor": 3, "health": 4},
        "attacks": ["pepper-breath", "claw-attack"],
        "qualities": [{"id": "weapon"}],
        "partner_id": tamer.id,
    })
    enemy = create_digimon({
        "name": "Wild Goburimon",
        "species": "Goburimon",
        "stage": "rookie",
        "attribute": "virus",
        "base_stats": {"accuracy": 3, "damage": 3, "dodge": 2, "armor": 2, "health": 3},
        "attacks": ["basic-attack"],
        "is_enemy": True,
    })
    for entity in (tamer, partner, enemy):
        store.insert(entity)

    line = evolutions.create(
        "Agumon Line",
        [
            {"stage": "rookie", "species": "Agumon", "digimon_id": partner.id},
            {"stage": "champion", "species": "Greymon",
             "requirements": {"requirement_type": "battles", "value": 1, "description": "Win a battle"}},
        ],
        partner_id=tamer.id,
    )

    encounter = engine.create_encounter("Demo: Ambush in the Forest")
    for entity in (tamer, partner, enemy):
        engine.add_participant(encounter.id, create_participant(entity))
    encounter = engine.add_hazard(
        encounter.id, hazard_from_template(get_hazard_template("heavy-rain"), duration=2)
    )
    encounter = engine.start_combat(encounter.id)

    target = encounter.get_participant(encounter.turn_order[-1])
    engine.add_effect(
        encounter.id,
        target.id,
        ActiveEffect(name="Burn", duration=1, category=EffectCategory.DEBUFF, source="Pepper Breath"),
    )

    for _ in range(len(encounter.turn_order)):
        actor = engine.get_current_participant(encounter.id)
        damage = DiceRoller.roll("1d6", reason=f"{actor.name} attacks").total
        engine.append_battle_log_entry(
            encounter.id,
            BattleLogEntry(
                round=encounter.round,
                actor_id=actor.id,
                actor_name=actor.name,
                action="attack",
                result="hit",
                damage=damage,
            ),
        )
        engine.next_turn(encounter.id)
    engine.decrement_hazard_durations(encounter.id)
    encounter = engine.end_combat(encounter.id)

    print(f"\n{encounter.name} - ended after round {encounter.round - 1}")
    for entry in encounter.battle_log:
        print(f"  {entry}")

    evolutions.add_battles_won(line.id)
    print(f"\n{evolutions.can_evolve(line.id).reason}")
    line = evolutions.evolve(line.id)
    stage = line.chain[line.current_stage_index]
    print(f"{partner.name} evolved to {stage.species} ({stage.stage.value})")

    summary = get_run_log().get_summary()
    print(f"\nRun log: {summary}")
    print(f"Stored encounters: {store.count(EntityKind.ENCOUNTER)}")
    store.close()
    return 0


# =============================================================================
# ARGUMENTS
# =============================================================================

def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Digimon GM Assistant - rules companion for the Digimon tabletop RPG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src.main qualities --stage champion       # Qualities open at champion
  python -m src.main attacks --search fire            # Search attacks
  python -m src.main hazards --category weather       # Weather hazards
  python -m src.main stats --stage rookie --accuracy 5 --dodge 4
  python -m src.main --seed 42 demo                   # Reproducible demo encounter
        """
    )

    # General options
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("data"),
        help="Directory for assistant data (default: data)",
    )
    parser.add_argument(
        "--db",
        type=str,
        default=":memory:",
        help="SQLite database file, relative to --data-dir (default: in-memory)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the dice for reproducible rolls",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    stage_choices = [s.value for s in Stage]
    subparsers = parser.add_subparsers(dest="command", required=True)

    qualities = subparsers.add_parser("qualities", help="Browse the quality catalogue")
    qualities.add_argument("--type", choices=[t.value for t in QualityType])
    qualities.add_argument("--category", choices=[c.value for c in QualityCategory])
    qualities.add_argument("--stage", choices=stage_choices, help="Only qualities selectable at this stage")
    qualities.add_argument("--search", type=str)

    attacks = subparsers.add_parser("attacks", help="Browse the attack catalogue")
    attacks.add_argument("--stage", choices=stage_choices)
    attacks.add_argument("--search", type=str)
    attacks.add_argument("--tags", action="store_true", help="List every attack tag")

    hazards = subparsers.add_parser("hazards", help="Browse the hazard catalogue")
    hazards.add_argument("--category", choices=[c.value for c in HazardCategory])
    hazards.add_argument("--severity", choices=[s.value for s in HazardSeverity])
    hazards.add_argument("--search", type=str)

    stats = subparsers.add_parser("stats", help="Compute derived stats")
    stats.add_argument("--stage", choices=stage_choices, required=True)
    for stat in ("accuracy", "damage", "dodge", "armor", "health"):
        stats.add_argument(f"--{stat}", type=int, default=0)

    subparsers.add_parser("demo", help="Run a scripted demo encounter")

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> AssistantConfig:
    """Create AssistantConfig from parsed arguments."""
    return AssistantConfig(
        data_dir=args.data_dir,
        db_path=args.db,
        seed=args.seed,
        verbose=args.verbose,
    )


COMMANDS = {
    "qualities": cmd_qualities,
    "attacks": cmd_attacks,
    "hazards": cmd_hazards,
    "stats": cmd_stats,
    "demo": lambda args, config: run_demo(config),
}


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    config = create_config_from_args(args)

    if config.seed is not None:
        DiceRoller.set_seed(config.seed)
        get_run_log().set_seed(config.seed)

    try:
        return COMMANDS[args.command](args, config)
    except GameRulesError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
