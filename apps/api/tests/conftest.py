"""
Pytest configuration and fixtures

Scoring is pure, so no database or network fixtures are needed.
"""
import pytest
import sys
import os

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.scoring_config import default_scoring_table, scoring_table_from_dict
from services.scoring_engine import ScoringEngine


# Small hand-written table used to check that engines accept any injected
# table, not only the built-in one.
FIXTURE_TABLE_DOC = {
    "age_brackets": [
        {"label": "under-30", "min_age": 0, "max_age": 29},
        {"label": "30-plus", "min_age": 30, "max_age": 120},
    ],
    "tests": [
        {"id": "vertical-jump", "category": "strength", "name": "Vertical Jump",
         "unit": "cm", "direction": "higher_is_better"},
        {"id": "t-test", "category": "agility", "name": "T-Test",
         "unit": "seconds", "direction": "lower_is_better"},
        {"id": "wall-sit", "category": "endurance", "name": "Wall Sit",
         "unit": "seconds", "direction": "higher_is_better"},
    ],
    "benchmarks": {
        "vertical-jump": {
            "male": {
                "under-30": {"excellent": 60, "good": 50, "average": 40, "poor": 30},
                "30-plus": {"excellent": 50, "good": 42, "average": 34, "poor": 25},
            },
        },
        "t-test": {
            "female": {
                "under-30": {"excellent": 10.0, "good": 11.0, "average": 12.0, "poor": 13.5},
            },
        },
    },
}


@pytest.fixture
def scoring_table():
    """Built-in catalog and benchmarks."""
    return default_scoring_table()


@pytest.fixture
def engine(scoring_table):
    return ScoringEngine(scoring_table)


@pytest.fixture
def fixture_table_doc():
    """Fresh copy of the fixture table document (safe to mutate)."""
    import copy
    return copy.deepcopy(FIXTURE_TABLE_DOC)


@pytest.fixture
def fixture_table(fixture_table_doc):
    return scoring_table_from_dict(fixture_table_doc)


@pytest.fixture
def fixture_engine(fixture_table):
    return ScoringEngine(fixture_table)

