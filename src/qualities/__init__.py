"""
Quality system for the Digimon GM Assistant.

This module provides:
- QualityTemplate / QualityChoice / Prerequisite: catalogue data structures
- QualityManager: central registry with type/category indexes and
  symmetric exclusion lookup
- Eligibility: which qualities a Digimon may take next, and acquisition
  checks that raise RuleViolation with a machine-checkable code
"""

from src.qualities.quality_data import (
    CATEGORY_NAMES,
    Prerequisite,
    QualityCategory,
    QualityChoice,
    QualityTemplate,
    QualityType,
    QualityTypeTag,
    parse_prerequisite,
)
from src.qualities.quality_manager import (
    QualityLookupResult,
    QualityManager,
    get_quality_manager,
)
from src.qualities.eligibility import (
    PrerequisiteCheck,
    acquire_quality,
    available_qualities,
    check_acquisition,
    effective_max_ranks,
    exclusive_conflicts,
    negative_dp_taken,
    prerequisites_met,
    quality_cost,
    total_dp_spent,
    validate_qualities,
)

__all__ = [
    # Data structures
    "CATEGORY_NAMES",
    "Prerequisite",
    "QualityCategory",
    "QualityChoice",
    "QualityTemplate",
    "QualityType",
    "QualityTypeTag",
    "parse_prerequisite",
    # Manager
    "QualityLookupResult",
    "QualityManager",
    "get_quality_manager",
    # Eligibility
    "PrerequisiteCheck",
    "acquire_quality",
    "available_qualities",
    "check_acquisition",
    "effective_max_ranks",
    "exclusive_conflicts",
    "negative_dp_taken",
    "prerequisites_met",
    "quality_cost",
    "total_dp_spent",
    "validate_qualities",
]
