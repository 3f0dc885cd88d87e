"""
Pytest fixtures for the Digimon GM Assistant test suite.

Provides reusable fixtures for dice, the run log, storage, and sample
Tamers, Digimon, encounters and evolution lines.
"""

import pytest

from src.advancement import EvolutionManager, create_evolution_line
from src.characters import create_digimon, create_tamer
from src.combat import EncounterEngine
from src.data_models import DiceRoller, EvolutionLine
from src.observability import reset_run_log
from src.storage import EntityStore
from tests.helpers import FixedRng


# =============================================================================
# DICE AND RUN LOG FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def clean_run_log():
    """Start every test with an empty run log."""
    log = reset_run_log()
    yield log
    log.resume()
    reset_run_log()


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    DiceRoller.clear_roll_log()
    DiceRoller.set_seed(42)
    yield DiceRoller()
    DiceRoller.clear_roll_log()


@pytest.fixture
def max_rng():
    """Random source that always rolls a 6 on a d6."""
    return FixedRng(6)


@pytest.fixture
def min_rng():
    """Random source that always rolls a 1."""
    return FixedRng(1)


# =============================================================================
# STORAGE FIXTURES
# =============================================================================


@pytest.fixture
def store():
    """In-memory entity store."""
    entity_store = EntityStore()
    yield entity_store
    entity_store.close()


@pytest.fixture
def engine(store):
    """Encounter engine over the in-memory store."""
    return EncounterEngine(store)


@pytest.fixture
def evolution_manager(store):
    """Evolution manager over the in-memory store."""
    return EvolutionManager(store)


# =============================================================================
# CHARACTER FIXTURES
# =============================================================================


@pytest.fixture
def tamer_data():
    return {
        "name": "Tai Kamiya",
        "age": 11,
        "attributes": {"agility": 3, "body": 3, "charisma": 2, "intelligence": 1, "willpower": 3},
        "skills": {"dodge": 2, "fight": 2, "endurance": 1, "survival": 1},
        "aspects": [{"name": "Born Leader", "aspect_type": "major"}],
        "torments": [{"name": "Fear of Failure", "severity": "minor"}],
    }


@pytest.fixture
def sample_tamer(tamer_data):
    return create_tamer(tamer_data)


@pytest.fixture
def digimon_data():
    return {
        "name": "Agumon",
        "species": "Agumon",
        "stage": "rookie",
        "attribute": "vaccine",
        "family": "Dragon's Roar",
        "base_stats": {"accuracy": 5, "damage": 4, "dodge": 4, "armor": 3, "health": 5},
    }


@pytest.fixture
def rookie(digimon_data):
    """A rookie with no qualities or attacks."""
    return create_digimon(digimon_data)


@pytest.fixture
def champion(digimon_data):
    """A champion with no qualities or attacks."""
    return create_digimon({**digimon_data, "name": "Greymon", "species": "Greymon", "stage": "champion"})


@pytest.fixture
def ultimate(digimon_data):
    """An ultimate with no qualities or attacks."""
    return create_digimon(
        {**digimon_data, "name": "MetalGreymon", "species": "MetalGreymon", "stage": "ultimate"}
    )


# =============================================================================
# EVOLUTION FIXTURES
# =============================================================================


@pytest.fixture
def agumon_line() -> EvolutionLine:
    """Agumon line with one requirement of each measurable kind."""
    return create_evolution_line(
        "Agumon Line",
        [
            {"stage": "in-training", "species": "Koromon"},
            {"stage": "rookie", "species": "Agumon"},
            {
                "stage": "champion",
                "species": "Greymon",
                "requirements": {"requirement_type": "battles", "value": 3, "description": "Win 3 battles"},
            },
            {
                "stage": "ultimate",
                "species": "MetalGreymon",
                "requirements": {"requirement_type": "xp", "value": 100},
            },
            {
                "stage": "mega",
                "species": "WarGreymon",
                "requirements": {"requirement_type": "bond", "value": 5},
            },
        ],
    )
