"""
Quality manager for the Digimon GM Assistant.

Central registry for all quality definitions. Loads the free, negative and
purchasable catalogues once, resolves prerequisite references to quality ids,
and symmetrizes mutual exclusion so that eligibility checks never depend on
which side of a pair declared it.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional

from src.data_models import Stage
from src.qualities.quality_data import (
    CATEGORY_NAMES,
    Prerequisite,
    QualityCategory,
    QualityTemplate,
    QualityType,
)

logger = logging.getLogger(__name__)


@dataclass
class QualityLookupResult:
    """Result of a quality lookup operation."""

    quality: Optional[QualityTemplate] = None
    found: bool = False
    error: Optional[str] = None


class QualityManager:
    """
    Central registry and manager for all quality definitions.

    Templates are immutable after load. Secondary indexes by type and
    category are built alongside the id index.
    """

    _instance: Optional["QualityManager"] = None
    _qualities: dict[str, QualityTemplate] = {}
    _by_type: dict[QualityType, list[str]] = {}
    _by_category: dict[QualityCategory, list[str]] = {}
    _exclusions: dict[str, frozenset[str]] = {}
    _initialized: bool = False

    def __new__(cls) -> "QualityManager":
        """Singleton pattern to ensure one global registry."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the manager (only runs once due to singleton)."""
        if not QualityManager._initialized:
            self._load_all_qualities()
            QualityManager._initialized = True

    def _load_all_qualities(self) -> None:
        """Load all quality definitions from their modules."""
        from src.qualities.free_qualities import FREE_QUALITIES
        from src.qualities.negative_qualities import NEGATIVE_QUALITIES
        from src.qualities.purchasable_qualities import PURCHASABLE_QUALITIES

        QualityManager._qualities = {}
        QualityManager._by_type = {}
        QualityManager._by_category = {}

        for template in FREE_QUALITIES + NEGATIVE_QUALITIES + PURCHASABLE_QUALITIES:
            self.register(template)

        self._resolve_prerequisites()
        self._build_exclusions()

        logger.info(
            f"Loaded {len(QualityManager._qualities)} qualities "
            f"({len(FREE_QUALITIES)} free, {len(NEGATIVE_QUALITIES)} negative, "
            f"{len(PURCHASABLE_QUALITIES)} purchasable)"
        )

    def register(self, template: QualityTemplate) -> None:
        """
        Register a quality definition.

        Args:
            template: The quality template to register
        """
        if template.id in QualityManager._qualities:
            logger.warning(f"Duplicate quality id {template.id}, replacing")
        else:
            QualityManager._by_type.setdefault(template.quality_type, []).append(template.id)
            QualityManager._by_category.setdefault(template.category, []).append(template.id)
        QualityManager._qualities[template.id] = template

    def _find_by_ref(self, ref: str) -> Optional[QualityTemplate]:
        for template in QualityManager._qualities.values():
            if template.matches_ref(ref):
                return template
        return None

    def _resolve_prerequisites(self) -> None:
        """Attach quality ids to prerequisites; drop any_of ids the catalogue lacks."""
        unresolved = 0
        for quality_id, template in list(QualityManager._qualities.items()):
            if not template.prerequisites:
                continue
            resolved: list[Prerequisite] = []
            for prereq in template.prerequisites:
                if prereq.any_of:
                    known = tuple(i for i in prereq.any_of if i in QualityManager._qualities)
                    for missing_id in set(prereq.any_of) - set(known):
                        logger.warning(f"{quality_id}: prerequisite '{prereq}' names unknown quality {missing_id}")
                    resolved.append(dataclasses.replace(prereq, any_of=known))
                    continue
                target = self._find_by_ref(prereq.quality_ref)
                if target is None:
                    unresolved += 1
                    logger.warning(f"{quality_id}: prerequisite '{prereq}' matches no quality")
                    resolved.append(prereq)
                else:
                    resolved.append(dataclasses.replace(prereq, quality_id=target.id))
            QualityManager._qualities[quality_id] = dataclasses.replace(
                template, prerequisites=tuple(resolved)
            )
        if unresolved:
            logger.warning(f"{unresolved} quality prerequisites match no catalogue quality")

    def _build_exclusions(self) -> None:
        """Build the symmetric exclusion adjacency from one-sided declarations."""
        adjacency: dict[str, set[str]] = {qid: set() for qid in QualityManager._qualities}
        for quality_id, template in QualityManager._qualities.items():
            for other in template.exclusive_with:
                if other not in adjacency:
                    logger.debug(f"{quality_id}: ignoring unknown exclusion '{other}'")
                    continue
                if other == quality_id:
                    continue
                adjacency[quality_id].add(other)
                adjacency[other].add(quality_id)
        QualityManager._exclusions = {qid: frozenset(ids) for qid, ids in adjacency.items()}

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get(self, quality_id: str) -> Optional[QualityTemplate]:
        """
        Get a quality definition by ID.

        Args:
            quality_id: The quality identifier (e.g., "weapon", "data-optimization")

        Returns:
            QualityTemplate or None if not found
        """
        return QualityManager._qualities.get(quality_id)

    def lookup(self, quality_ref: str) -> QualityLookupResult:
        """
        Look up a quality by id or display name (case-insensitive).

        Never raises; a miss is reported through the result.
        """
        template = self.get(quality_ref) or self._find_by_ref(quality_ref)
        if template:
            return QualityLookupResult(quality=template, found=True)
        return QualityLookupResult(found=False, error=f"Quality not found: {quality_ref}")

    def get_all(self) -> list[QualityTemplate]:
        """Get all registered quality definitions in catalogue order."""
        return list(QualityManager._qualities.values())

    def get_all_ids(self) -> list[str]:
        """Get all registered quality IDs."""
        return list(QualityManager._qualities.keys())

    def is_valid_quality(self, quality_id: str) -> bool:
        """Check if a quality ID is registered."""
        return quality_id in QualityManager._qualities

    def by_type(self, quality_type: QualityType) -> list[QualityTemplate]:
        """Get all qualities of one cost class."""
        ids = QualityManager._by_type.get(QualityType(quality_type), [])
        return [QualityManager._qualities[qid] for qid in ids]

    def by_category(self, category: QualityCategory) -> list[QualityTemplate]:
        """Get all qualities in one rulebook category."""
        ids = QualityManager._by_category.get(QualityCategory(category), [])
        return [QualityManager._qualities[qid] for qid in ids]

    def available_at_stage(self, stage: Stage) -> list[QualityTemplate]:
        """Get qualities whose stage gate is met at `stage`, ignoring ownership."""
        stage = Stage(stage)
        return [q for q in QualityManager._qualities.values() if q.is_available_at_stage(stage)]

    def search(self, query: str) -> list[QualityTemplate]:
        """
        Case-insensitive substring search over id, name, description and effect.

        Args:
            query: Search string

        Returns:
            Matching templates in catalogue order
        """
        needle = query.lower()
        matches = []
        for template in QualityManager._qualities.values():
            haystack = (template.id, template.name, template.description, template.effect)
            if any(needle in field_value.lower() for field_value in haystack):
                matches.append(template)
        return matches

    def get_categories(self) -> list[dict[str, str]]:
        """Get category ids and display names for categories that have qualities."""
        return [
            {"id": category.value, "name": CATEGORY_NAMES[category]}
            for category in QualityCategory
            if QualityManager._by_category.get(category)
        ]

    def exclusive_with(self, quality_id: str) -> frozenset[str]:
        """Get the ids that cannot be owned together with `quality_id` (both directions)."""
        return QualityManager._exclusions.get(quality_id, frozenset())

    def __len__(self) -> int:
        return len(QualityManager._qualities)

    def __contains__(self, quality_id: str) -> bool:
        return quality_id in QualityManager._qualities


# Global instance for convenience
def get_quality_manager() -> QualityManager:
    """Get the global QualityManager instance."""
    return QualityManager()
