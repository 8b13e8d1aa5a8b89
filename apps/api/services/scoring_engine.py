"""
Assessment Scoring Engine

Turns one raw test result into a normalized 0-100 score, a percentile and a
grade by comparing it with the benchmark row for the athlete's gender and
age bracket.

Scoring curve (piecewise linear, anchored on the benchmark thresholds):

    band               score range   tier percentile   grade
    at/past excellent  90 - 100      95                Excellent
    good..excellent    75 - 90       80                Good
    average..good      50 - 75       60                Average
    short of average   20 - 50       30                Needs Improvement

Each band is oriented by the test's direction, so a faster sprint and a
heavier grip both move the score up. The curve is continuous at every
threshold and monotone in the "better" direction.

When no benchmark row exists (unknown test, unsupported gender, or a test
without norms) the engine returns the neutral fallback 50 / 50 / Average
with benchmarked=False. It never raises for missing data.

Stateless: the engine only reads the immutable ScoringTable it was given,
so one instance can serve any number of concurrent requests.
"""
import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from numbers import Real
from typing import Dict, NamedTuple, Optional, Union

from services.assessment_catalog import Direction
from services.benchmark_repository import AgeBracket, BenchmarkRow, resolve_age_bracket
from services.scoring_config import ScoringTable, get_scoring_table
from services.scoring_errors import InvalidScoringInput

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]


class Grade(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    NEEDS_IMPROVEMENT = "Needs Improvement"


class PercentileMode(str, Enum):
    """How the percentile is derived from the benchmark band."""
    TIER = "tier"                  # fixed value per grade
    INTERPOLATED = "interpolated"  # moves across the band with the result


# Fixed percentile per grade. This is a four-point scale, not a population
# distribution.
TIER_PERCENTILES: Dict[Grade, int] = {
    Grade.EXCELLENT: 95,
    Grade.GOOD: 80,
    Grade.AVERAGE: 60,
    Grade.NEEDS_IMPROVEMENT: 30,
}

# (floor, ceiling) for interpolated percentiles. Each floor equals the tier
# value of its band so both modes agree exactly at the thresholds.
INTERPOLATED_PERCENTILE_RANGES: Dict[Grade, tuple] = {
    Grade.EXCELLENT: (95, 99),
    Grade.GOOD: (80, 95),
    Grade.AVERAGE: (60, 80),
    Grade.NEEDS_IMPROVEMENT: (1, 30),
}


@dataclass(frozen=True)
class ScoreResult:
    """Output of one scoring call."""
    score: int
    percentile: int
    grade: Grade
    benchmarked: bool = True  # False for the neutral fallback

    def to_dict(self) -> Dict[str, object]:
        return {
            "score": self.score,
            "percentile": self.percentile,
            "grade": self.grade.value,
            "benchmarked": self.benchmarked,
        }


NEUTRAL_FALLBACK = ScoreResult(score=50, percentile=50, grade=Grade.AVERAGE, benchmarked=False)


class _Band(NamedTuple):
    grade: Grade
    raw_score: float
    position: float  # 0.0 at the band's lower threshold, 1.0 at its upper


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounds up (82.5 -> 83)."""
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _higher_is_better_band(raw: float, row: BenchmarkRow) -> _Band:
    if raw >= row.excellent:
        pos = min(1.0, (raw - row.excellent) / row.excellent)
        return _Band(Grade.EXCELLENT, 90 + pos * 10, pos)
    if raw >= row.good:
        pos = (raw - row.good) / (row.excellent - row.good)
        return _Band(Grade.GOOD, 75 + pos * 15, pos)
    if raw >= row.average:
        pos = (raw - row.average) / (row.good - row.average)
        return _Band(Grade.AVERAGE, 50 + pos * 25, pos)
    pos = raw / row.average
    return _Band(Grade.NEEDS_IMPROVEMENT, max(20.0, pos * 50), pos)


def _lower_is_better_band(raw: float, row: BenchmarkRow) -> _Band:
    if raw <= row.excellent:
        # Two points per unit beaten, capped at 100 by the final clamp
        pos = min(1.0, (row.excellent - raw) / row.excellent) if row.excellent > 0 else 0.0
        return _Band(Grade.EXCELLENT, 90 + (row.excellent - raw) * 2, pos)
    if raw <= row.good:
        pos = (row.good - raw) / (row.good - row.excellent)
        return _Band(Grade.GOOD, 75 + pos * 15, pos)
    if raw <= row.average:
        pos = (row.average - raw) / (row.average - row.good)
        return _Band(Grade.AVERAGE, 50 + pos * 25, pos)
    overshoot = (raw - row.average) / row.average
    return _Band(Grade.NEEDS_IMPROVEMENT, max(20.0, 50 - overshoot * 30), max(0.0, 1 - overshoot))


def _require_number(value: object, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidScoringInput(f"{field} must be a number", field=field)
    number = float(value)
    if not math.isfinite(number):
        raise InvalidScoringInput(f"{field} must be finite", field=field)
    if number < 0:
        raise InvalidScoringInput(f"{field} must not be negative", field=field)
    return number


def _require_text(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise InvalidScoringInput(f"{field} must be a string", field=field)
    return value


class ScoringEngine:
    """
    Benchmark-based scorer.

    Usage:
        engine = ScoringEngine(default_scoring_table())
        result = engine.score("push-ups-1min", 45, age=22, gender="male")
    """

    def __init__(self, table: ScoringTable, percentile_mode: PercentileMode = PercentileMode.TIER):
        self.table = table
        self.percentile_mode = PercentileMode(percentile_mode)

    def age_bracket_for(self, age: Number) -> AgeBracket:
        """Bracket used for this age (outermost brackets are open-ended)."""
        return resolve_age_bracket(_require_number(age, "age"), self.table.age_brackets)

    def benchmark_for(self, test_id: str, age: Number, gender: str) -> Optional[BenchmarkRow]:
        """The row score() would use, or None when it would fall back."""
        bracket = self.age_bracket_for(age)
        return self.table.benchmarks.lookup(
            _require_text(test_id, "test_id"), _require_text(gender, "gender"), bracket.label
        )

    def score(self, test_id: str, result: Number, age: Number, gender: str) -> ScoreResult:
        """
        Score one raw result.

        Args:
            test_id: Catalog id, e.g. "push-ups-1min"
            result: Raw measurement in the test's unit
            age: Athlete age in years
            gender: "male" / "female" (case-insensitive, "M"/"F" accepted)

        Returns:
            ScoreResult. Unknown tests and missing benchmarks give
            NEUTRAL_FALLBACK.

        Raises:
            InvalidScoringInput: result or age is not a finite, non-negative
                number, or test_id/gender is not a string.
        """
        test_id = _require_text(test_id, "test_id")
        gender = _require_text(gender, "gender")
        raw = _require_number(result, "result")
        bracket = self.age_bracket_for(age)

        row = self.table.benchmarks.lookup(test_id, gender, bracket.label)
        definition = self.table.catalog.find(test_id)
        if row is None or definition is None:
            logger.debug(
                f"No benchmark for {test_id}/{gender}/{bracket.label}, using neutral fallback"
            )
            return NEUTRAL_FALLBACK

        if definition.direction == Direction.LOWER_IS_BETTER:
            band = _lower_is_better_band(raw, row)
        else:
            band = _higher_is_better_band(raw, row)

        return ScoreResult(
            score=round_half_up(_clamp(band.raw_score)),
            percentile=round_half_up(_clamp(self._percentile(band))),
            grade=band.grade,
        )

    def _percentile(self, band: _Band) -> float:
        if self.percentile_mode == PercentileMode.INTERPOLATED:
            floor, ceiling = INTERPOLATED_PERCENTILE_RANGES[band.grade]
            return floor + _clamp(band.position, 0.0, 1.0) * (ceiling - floor)
        return TIER_PERCENTILES[band.grade]


@lru_cache(maxsize=1)
def get_scoring_engine() -> ScoringEngine:
    """Process-wide engine built from the active table and settings."""
    from core.config import scoring_config
    return ScoringEngine(get_scoring_table(), PercentileMode(scoring_config.percentile_mode))


def calculate_score(test_id: str, result: Number, age: Number, gender: str) -> ScoreResult:
    """Score a result with the process-wide engine."""
    return get_scoring_engine().score(test_id, result, age, gender)
