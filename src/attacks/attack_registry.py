"""
Attack Registry for the Digimon GM Assistant.

Provides in-memory lookup of canonical attack templates by id, stage, range
and type, plus case-insensitive search over names, descriptions, tags and
the Digimon that use them.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from src.attacks.attack_data import ANY_STAGE, AttackTemplate
from src.data_models import AttackRange, AttackType, Stage

logger = logging.getLogger(__name__)


@dataclass
class AttackLookupResult:
    """Result of an attack lookup operation."""

    attack: Optional[AttackTemplate] = None
    found: bool = False
    error: Optional[str] = None


class AttackRegistry:
    """
    In-memory registry of attack templates.

    Usage:
        registry = get_attack_registry()
        result = registry.lookup("pepper-breath")
        if result.found:
            attack = attack_from_template(result.attack)
    """

    def __init__(self, templates: Optional[Iterable[AttackTemplate]] = None):
        self._attacks: dict[str, AttackTemplate] = {}
        self._by_stage: dict[str, list[str]] = {}
        if templates is not None:
            for template in templates:
                self.register(template)

    @classmethod
    def create_default(cls) -> "AttackRegistry":
        """Create a registry loaded with the canonical catalogue."""
        from src.attacks.attack_catalog import ATTACK_CATALOG

        registry = cls(ATTACK_CATALOG)
        logger.info(f"Loaded {len(registry)} attack templates")
        return registry

    def register(self, template: AttackTemplate) -> None:
        if template.id in self._attacks:
            logger.warning(f"Duplicate attack id: {template.id}")
            self._by_stage[self._attacks[template.id].stage].remove(template.id)
        self._attacks[template.id] = template
        self._by_stage.setdefault(template.stage, []).append(template.id)

    def get(self, attack_id: str) -> Optional[AttackTemplate]:
        return self._attacks.get(attack_id)

    def lookup(self, attack_id: str) -> AttackLookupResult:
        """
        Look up an attack template by its ID.

        Returns:
            AttackLookupResult with the template if found
        """
        template = self._attacks.get(attack_id)
        if template:
            return AttackLookupResult(attack=template, found=True)
        return AttackLookupResult(found=False, error=f"Attack not found: {attack_id}")

    def get_all(self) -> list[AttackTemplate]:
        return list(self._attacks.values())

    def for_stage(self, stage: Stage) -> list[AttackTemplate]:
        """Get attacks for one stage, including those usable at any stage."""
        stage_value = Stage(stage).value
        ids = self._by_stage.get(stage_value, []) + self._by_stage.get(ANY_STAGE, [])
        return [self._attacks[i] for i in ids]

    def by_range(self, attack_range: AttackRange) -> list[AttackTemplate]:
        attack_range = AttackRange(attack_range)
        return [a for a in self._attacks.values() if a.range == attack_range]

    def by_type(self, attack_type: AttackType) -> list[AttackTemplate]:
        attack_type = AttackType(attack_type)
        return [a for a in self._attacks.values() if a.attack_type == attack_type]

    def all_tags(self) -> list[str]:
        """Get every tag used in the catalogue, sorted and de-duplicated."""
        tags = set()
        for template in self._attacks.values():
            tags.update(template.tags)
        return sorted(tags)

    def search(self, query: str, limit: Optional[int] = None) -> list[AttackTemplate]:
        """
        Search attacks by name, description, effect, tag or Digimon (case-insensitive).

        Args:
            query: Search string
            limit: Maximum number of results to return

        Returns:
            Matching templates in catalogue order
        """
        needle = query.lower()
        matches = []
        for template in self._attacks.values():
            if any(needle in text.lower() for text in template.searchable_text()):
                matches.append(template)
                if limit is not None and len(matches) >= limit:
                    break
        return matches

    def __len__(self) -> int:
        return len(self._attacks)

    def __contains__(self, attack_id: str) -> bool:
        return attack_id in self._attacks


# Module-level singleton for convenience
_default_registry: Optional[AttackRegistry] = None


def get_attack_registry() -> AttackRegistry:
    """Get the default AttackRegistry, loading the catalogue on first call."""
    global _default_registry
    if _default_registry is None:
        _default_registry = AttackRegistry.create_default()
    return _default_registry


def reset_attack_registry() -> None:
    """Reset the default registry singleton (useful for testing)."""
    global _default_registry
    _default_registry = None
