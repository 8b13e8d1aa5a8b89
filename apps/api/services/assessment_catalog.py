"""
Test Catalog

Static registry of every assessment test the app knows about, grouped by
category. Used to populate the assessment form and to validate test ids
before results are scored or stored.

Direction (higher-is-better vs lower-is-better) is declared explicitly per
test. It is never guessed from the id.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from services.scoring_errors import ScoringConfigError, UnknownTestError


class TestCategory(str, Enum):
    """Assessment categories shown in the app."""
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    AGILITY = "agility"
    REFLEXES = "reflexes"


class Direction(str, Enum):
    """Which way a raw result gets better."""
    HIGHER_IS_BETTER = "higher_is_better"   # reps, kg, coordination score
    LOWER_IS_BETTER = "lower_is_better"     # times


@dataclass(frozen=True)
class TestDefinition:
    """One measurable test."""
    __test__ = False

    id: str
    category: TestCategory
    name: str
    unit: str
    direction: Direction

    @property
    def lower_is_better(self) -> bool:
        return self.direction == Direction.LOWER_IS_BETTER

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "category": self.category.value,
            "name": self.name,
            "unit": self.unit,
            "direction": self.direction.value,
        }


# Not a pytest test class
TestCategory.__test__ = False


# ============================================================================
# DEFAULT CATALOG
# ============================================================================
# Declaration order is display order.

DEFAULT_TEST_DEFINITIONS: Tuple[TestDefinition, ...] = (
    # Strength
    TestDefinition("push-ups-1min", TestCategory.STRENGTH, "Push-ups (1 min)", "reps", Direction.HIGHER_IS_BETTER),
    TestDefinition("grip-strength", TestCategory.STRENGTH, "Grip Strength", "kg", Direction.HIGHER_IS_BETTER),
    TestDefinition("bench-press", TestCategory.STRENGTH, "Bench Press", "kg", Direction.HIGHER_IS_BETTER),
    TestDefinition("deadlift", TestCategory.STRENGTH, "Deadlift", "kg", Direction.HIGHER_IS_BETTER),
    # Endurance
    TestDefinition("100m-sprint", TestCategory.ENDURANCE, "100m Sprint", "seconds", Direction.LOWER_IS_BETTER),
    TestDefinition("1km-run", TestCategory.ENDURANCE, "1km Run", "minutes", Direction.LOWER_IS_BETTER),
    TestDefinition("5km-run", TestCategory.ENDURANCE, "5km Run", "minutes", Direction.LOWER_IS_BETTER),
    # Held longer is better even though the unit is seconds
    TestDefinition("plank-hold", TestCategory.ENDURANCE, "Plank Hold", "seconds", Direction.HIGHER_IS_BETTER),
    # Agility
    TestDefinition("shuttle-run", TestCategory.AGILITY, "Shuttle Run", "seconds", Direction.LOWER_IS_BETTER),
    TestDefinition("ladder-drill", TestCategory.AGILITY, "Ladder Drill", "seconds", Direction.LOWER_IS_BETTER),
    TestDefinition("cone-drill", TestCategory.AGILITY, "Cone Drill", "seconds", Direction.LOWER_IS_BETTER),
    # Reflexes
    TestDefinition("reaction-time", TestCategory.REFLEXES, "Reaction Time", "ms", Direction.LOWER_IS_BETTER),
    TestDefinition("hand-eye-coordination", TestCategory.REFLEXES, "Hand-Eye Coordination", "score", Direction.HIGHER_IS_BETTER),
    TestDefinition("balance-test", TestCategory.REFLEXES, "Balance Test", "seconds", Direction.HIGHER_IS_BETTER),
)


class TestCatalog:
    """
    Immutable, ordered collection of test definitions.

    Built once at startup (from the defaults or a config file) and shared
    read-only afterwards.
    """
    __test__ = False

    def __init__(self, definitions: Iterable[TestDefinition]):
        by_id: Dict[str, TestDefinition] = {}
        for definition in definitions:
            if definition.id in by_id:
                raise ScoringConfigError(f"Duplicate test id in catalog: {definition.id}")
            by_id[definition.id] = definition
        self._by_id = by_id
        self._ordered: Tuple[TestDefinition, ...] = tuple(by_id.values())

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, test_id: object) -> bool:
        return test_id in self._by_id

    def __iter__(self):
        return iter(self._ordered)

    def find(self, test_id: str) -> Optional[TestDefinition]:
        """Return the definition for test_id, or None if the test is unknown."""
        return self._by_id.get(test_id)

    def get(self, test_id: str) -> TestDefinition:
        """Strict variant of find(). Raises UnknownTestError."""
        definition = self.find(test_id)
        if definition is None:
            raise UnknownTestError(test_id)
        return definition

    def list_by_category(self, category: TestCategory) -> List[TestDefinition]:
        """Tests in one category, in declaration order."""
        category = TestCategory(category)
        return [d for d in self._ordered if d.category == category]

    def grouped(self) -> Dict[str, List[TestDefinition]]:
        """All categories (including empty ones) mapped to their tests."""
        return {c.value: self.list_by_category(c) for c in TestCategory}


def parse_test_definition(data: Mapping) -> TestDefinition:
    """Build a TestDefinition from a config mapping."""
    if not isinstance(data, Mapping):
        raise ScoringConfigError(f"Test definition must be an object: {data!r}")
    try:
        return TestDefinition(
            id=str(data["id"]),
            category=TestCategory(data["category"]),
            name=str(data["name"]),
            unit=str(data["unit"]),
            direction=Direction(data["direction"]),
        )
    except KeyError as e:
        raise ScoringConfigError(f"Test definition missing field {e}: {data!r}") from e
    except ValueError as e:
        raise ScoringConfigError(f"Invalid test definition {data!r}: {e}") from e
