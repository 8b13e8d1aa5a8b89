"""
Benchmark Repository

Reference thresholds (excellent / good / average / poor) for each
test x gender x age bracket combination, plus the age-bracket partition used
to pick a row.

Rows are validated against the test's declared direction when the repository
is built: a row whose thresholds are out of order would silently break the
scoring curve.

Sources:
- Population norms from the assessment app's reference table (push-ups, 100m
  sprint, grip strength), ages 18-45.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from services.assessment_catalog import Direction, TestCatalog
from services.scoring_errors import ScoringConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgeBracket:
    """Inclusive age range used to select a benchmark row."""
    label: str
    min_age: int
    max_age: int

    def contains(self, age: float) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class BenchmarkRow:
    """The four reference points for one test/gender/age bracket."""
    excellent: float
    good: float
    average: float
    poor: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.excellent, self.good, self.average, self.poor)

    def validate(self, direction: Direction) -> None:
        """
        Check the thresholds are finite, non-negative and strictly ordered in
        the test's "better" direction.

        Raises ScoringConfigError.
        """
        values = self.as_tuple()
        for v in values:
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
                raise ScoringConfigError(f"Benchmark thresholds must be finite numbers: {values}")
            if v < 0:
                raise ScoringConfigError(f"Benchmark thresholds must be non-negative: {values}")

        if direction == Direction.HIGHER_IS_BETTER:
            ordered = self.excellent > self.good > self.average > self.poor
            expected = "excellent > good > average > poor"
        else:
            ordered = self.excellent < self.good < self.average < self.poor
            expected = "excellent < good < average < poor"
        if not ordered:
            raise ScoringConfigError(
                f"Benchmark thresholds {values} violate {expected} ({direction.value})"
            )

    def to_dict(self) -> Dict[str, float]:
        return {
            "excellent": self.excellent,
            "good": self.good,
            "average": self.average,
            "poor": self.poor,
        }


# ============================================================================
# AGE BRACKETS
# ============================================================================

DEFAULT_AGE_BRACKETS: Tuple[AgeBracket, ...] = (
    AgeBracket("18-25", 18, 25),
    AgeBracket("26-35", 26, 35),
    AgeBracket("36-45", 36, 45),
)


def validate_age_brackets(brackets: Sequence[AgeBracket]) -> None:
    """Brackets must be non-empty, ascending, contiguous and non-overlapping."""
    if not brackets:
        raise ScoringConfigError("At least one age bracket is required")

    labels = set()
    previous: Optional[AgeBracket] = None
    for bracket in brackets:
        if bracket.label in labels:
            raise ScoringConfigError(f"Duplicate age bracket label: {bracket.label}")
        labels.add(bracket.label)
        if bracket.min_age > bracket.max_age:
            raise ScoringConfigError(f"Age bracket {bracket.label} has min_age > max_age")
        if previous is not None and bracket.min_age != previous.max_age + 1:
            raise ScoringConfigError(
                f"Age brackets {previous.label} and {bracket.label} must be contiguous"
            )
        previous = bracket


def resolve_age_bracket(age: float, brackets: Sequence[AgeBracket] = DEFAULT_AGE_BRACKETS) -> AgeBracket:
    """
    Pick the bracket for an age.

    Everyone up to the first bracket's upper bound lands in the first bracket
    and everyone past the last bracket's lower bound lands in the last one,
    so the outermost brackets are open-ended (age 12 -> "18-25",
    age 90 -> "36-45").

    Fractional ages are compared against the upper bounds, so 25.5 belongs
    to the bracket after "18-25".
    """
    for bracket in brackets[:-1]:
        if age <= bracket.max_age:
            return bracket
    return brackets[-1]


# ============================================================================
# DEFAULT BENCHMARKS
# ============================================================================
# test id -> gender -> age bracket label -> (excellent, good, average, poor)

DEFAULT_BENCHMARKS: Dict[str, Dict[str, Dict[str, Tuple[float, float, float, float]]]] = {
    "push-ups-1min": {
        "male": {
            "18-25": (45, 35, 25, 15),
            "26-35": (40, 30, 20, 12),
            "36-45": (35, 25, 18, 10),
        },
        "female": {
            "18-25": (35, 25, 18, 10),
            "26-35": (30, 22, 15, 8),
            "36-45": (25, 18, 12, 6),
        },
    },
    "100m-sprint": {
        "male": {
            "18-25": (11.5, 12.5, 13.5, 15.0),
            "26-35": (12.0, 13.0, 14.0, 15.5),
            "36-45": (12.5, 13.5, 14.5, 16.0),
        },
        "female": {
            "18-25": (13.0, 14.0, 15.0, 17.0),
            "26-35": (13.5, 14.5, 15.5, 17.5),
            "36-45": (14.0, 15.0, 16.0, 18.0),
        },
    },
    "grip-strength": {
        "male": {
            "18-25": (50, 45, 40, 30),
            "26-35": (48, 43, 38, 28),
            "36-45": (45, 40, 35, 25),
        },
        "female": {
            "18-25": (35, 30, 25, 18),
            "26-35": (33, 28, 23, 16),
            "36-45": (30, 25, 20, 14),
        },
    },
}


class BenchmarkRepository:
    """
    Read-only benchmark lookup.

    Populated once from a nested mapping (test -> gender -> bracket -> row)
    and validated against the catalog and bracket set. lookup() never raises
    for unknown keys.
    """

    def __init__(
        self,
        rows: Mapping[str, Mapping[str, Mapping[str, BenchmarkRow]]],
        catalog: TestCatalog,
        age_brackets: Sequence[AgeBracket] = DEFAULT_AGE_BRACKETS,
    ):
        validate_age_brackets(age_brackets)
        bracket_labels = {b.label for b in age_brackets}

        table: Dict[Tuple[str, str, str], BenchmarkRow] = {}
        for test_id, by_gender in rows.items():
            definition = catalog.find(test_id)
            if definition is None:
                raise ScoringConfigError(f"Benchmarks defined for unknown test: {test_id}")
            for gender, by_bracket in by_gender.items():
                for label, row in by_bracket.items():
                    if label not in bracket_labels:
                        raise ScoringConfigError(
                            f"Benchmark for {test_id}/{gender} uses undefined age bracket {label}"
                        )
                    try:
                        row.validate(definition.direction)
                    except ScoringConfigError as e:
                        raise ScoringConfigError(f"{test_id}/{gender}/{label}: {e}") from e
                    key = (test_id, normalize_gender(gender), label)
                    if key in table:
                        raise ScoringConfigError(
                            f"Duplicate benchmark for {test_id}/{key[1]}/{label} "
                            f"(gender keys differ only in case or alias)"
                        )
                    table[key] = row

        self._rows = table
        self._age_brackets: Tuple[AgeBracket, ...] = tuple(age_brackets)
        logger.info(
            f"Benchmark repository loaded: {len(table)} rows across "
            f"{len({k[0] for k in table})} tests"
        )

    @property
    def age_brackets(self) -> Tuple[AgeBracket, ...]:
        return self._age_brackets

    def __len__(self) -> int:
        return len(self._rows)

    def lookup(self, test_id: str, gender: str, age_bracket: str) -> Optional[BenchmarkRow]:
        """Return the row for the combination, or None if there is none."""
        if not isinstance(test_id, str) or not isinstance(gender, str):
            return None
        return self._rows.get((test_id, normalize_gender(gender), age_bracket))

    def items(self) -> Tuple[Tuple[Tuple[str, str, str], BenchmarkRow], ...]:
        """((test_id, gender, bracket_label), row) pairs."""
        return tuple(self._rows.items())

    def benchmarked_tests(self) -> Tuple[str, ...]:
        """Test ids with at least one row, in first-seen order."""
        return tuple(dict.fromkeys(k[0] for k in self._rows))


_GENDER_ALIASES = {"m": "male", "f": "female"}


def normalize_gender(gender: str) -> str:
    """Case-insensitive gender key; "M"/"F" map to male/female."""
    key = gender.strip().lower()
    return _GENDER_ALIASES.get(key, key)


def rows_from_tuples(
    data: Mapping[str, Mapping[str, Mapping[str, Iterable[float]]]]
) -> Dict[str, Dict[str, Dict[str, BenchmarkRow]]]:
    """Convert the tuple-literal table format into BenchmarkRow objects."""
    return {
        test_id: {
            gender: {label: BenchmarkRow(*values) for label, values in by_bracket.items()}
            for gender, by_bracket in by_gender.items()
        }
        for test_id, by_gender in data.items()
    }
