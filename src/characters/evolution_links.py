"""
Evolution links between Digimon records.

A Digimon points at its pre-evolution through evolves_from_id and at its
possible evolutions through evolution_path_ids. The two sides are kept
consistent here with sequential read-then-write calls to the entity store.
Walks track visited ids so malformed data with a cycle still terminates.
"""

import logging
from typing import Any, Optional

from src.data_models import Digimon, NotFoundError, ValidationError
from src.storage.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)


def _load(store: EntityStore, digimon_id: str) -> Digimon:
    digimon = store.get(EntityKind.DIGIMON, digimon_id)
    if digimon is None:
        raise NotFoundError("digimon", digimon_id)
    return digimon


def ancestors(store: EntityStore, digimon_id: str) -> list[Digimon]:
    """Get the pre-evolution chain, nearest first."""
    chain: list[Digimon] = []
    visited = {digimon_id}
    current = store.get(EntityKind.DIGIMON, digimon_id)
    while current is not None and current.evolves_from_id:
        parent_id = current.evolves_from_id
        if parent_id in visited:
            logger.warning(f"Evolution cycle detected at {parent_id}")
            break
        visited.add(parent_id)
        current = store.get(EntityKind.DIGIMON, parent_id)
        if current is None:
            logger.warning(f"Dangling evolves_from_id {parent_id}")
            break
        chain.append(current)
    return chain


def descendants(store: EntityStore, digimon_id: str) -> list[Digimon]:
    """Get every evolution below a Digimon, depth-first in path order."""
    result: list[Digimon] = []
    visited = {digimon_id}
    root = store.get(EntityKind.DIGIMON, digimon_id)
    stack = list(reversed(root.evolution_path_ids)) if root else []
    while stack:
        child_id = stack.pop()
        if child_id in visited:
            logger.warning(f"Evolution cycle detected at {child_id}")
            continue
        visited.add(child_id)
        child = store.get(EntityKind.DIGIMON, child_id)
        if child is None:
            logger.warning(f"Dangling evolution path id {child_id}")
            continue
        result.append(child)
        stack.extend(reversed(child.evolution_path_ids))
    return result


def add_child(store: EntityStore, parent_id: str, child_id: str) -> tuple[Digimon, Digimon]:
    """
    Link `child_id` as an evolution of `parent_id`, updating both records.

    A child that already had another parent is detached from it first.

    Raises:
        NotFoundError: either Digimon does not exist
        ValidationError: the link would make a Digimon its own ancestor
    """
    if parent_id == child_id:
        raise ValidationError("A Digimon cannot evolve into itself", field="child_id")
    parent = _load(store, parent_id)
    child = _load(store, child_id)
    if child_id in {d.id for d in ancestors(store, parent_id)}:
        raise ValidationError(f"{child.name} is already an ancestor of {parent.name}", field="child_id")

    if child.evolves_from_id and child.evolves_from_id != parent_id:
        remove_child(store, child.evolves_from_id, child_id)
        child = _load(store, child_id)
        parent = _load(store, parent_id)

    if child_id not in parent.evolution_path_ids:
        parent.evolution_path_ids.append(child_id)
    child.evolves_from_id = parent_id
    store.save(parent)
    store.save(child)

    logger.info(f"Linked evolution {parent.name} -> {child.name}")
    return parent, child


def remove_child(store: EntityStore, parent_id: str, child_id: str) -> tuple[Optional[Digimon], Optional[Digimon]]:
    """
    Unlink an evolution, clearing both sides.

    Missing records are skipped so a dangling link can still be cleaned up.
    """
    parent = store.get(EntityKind.DIGIMON, parent_id)
    child = store.get(EntityKind.DIGIMON, child_id)

    if parent is not None and child_id in parent.evolution_path_ids:
        parent.evolution_path_ids = [i for i in parent.evolution_path_ids if i != child_id]
        store.save(parent)
    if child is not None and child.evolves_from_id == parent_id:
        child.evolves_from_id = None
        store.save(child)

    logger.info(f"Unlinked evolution {parent_id} -> {child_id}")
    return parent, child


def evolution_tree(store: EntityStore, digimon_id: str) -> dict[str, Any]:
    """
    Get the whole line around a Digimon.

    Returns:
        Dict with "ancestors" (root first), "digimon" and "descendants"
    """
    digimon = _load(store, digimon_id)
    return {
        "ancestors": list(reversed(ancestors(store, digimon_id))),
        "digimon": digimon,
        "descendants": descendants(store, digimon_id),
    }
