"""
Character building for the Digimon GM Assistant.

This module provides:
- compute_derived / compute_tamer_derived: derived stat formulas
- Digimon builder: create and edit Digimon (qualities, attacks, stage, wounds)
- Tamer builder: create and edit Tamers
- Evolution links: keep evolves_from_id / evolution_path_ids consistent
"""

from src.characters.derived_stats import compute_derived, compute_tamer_derived, max_inspiration
from src.characters.digimon_builder import (
    add_attack,
    add_quality,
    apply_damage,
    change_stage,
    copy_digimon,
    create_digimon,
    heal,
    refresh_derived,
    remove_attack,
    remove_quality,
    set_base_stats,
    set_stance,
)
from src.characters.tamer_builder import (
    create_tamer,
    mark_torment,
    refresh_tamer_derived,
    update_tamer_stats,
    use_aspect,
)
from src.characters.evolution_links import (
    add_child,
    ancestors,
    descendants,
    evolution_tree,
    remove_child,
)

__all__ = [
    # Derived stats
    "compute_derived",
    "compute_tamer_derived",
    "max_inspiration",
    # Digimon
    "add_attack",
    "add_quality",
    "apply_damage",
    "change_stage",
    "copy_digimon",
    "create_digimon",
    "heal",
    "refresh_derived",
    "remove_attack",
    "remove_quality",
    "set_base_stats",
    "set_stance",
    # Tamers
    "create_tamer",
    "mark_torment",
    "refresh_tamer_derived",
    "update_tamer_stats",
    "use_aspect",
    # Evolution links
    "add_child",
    "ancestors",
    "descendants",
    "evolution_tree",
    "remove_child",
]
