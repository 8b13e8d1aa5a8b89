"""
Assessment Submission Service

What happens after an athlete submits a manually entered test result:
resolve the test in the catalog, score it, and build the record that the
datastore persists. Storage itself belongs to the caller.

Also ranks stored records for the leaderboard views and aggregates them
per player for the coach roster.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from services.benchmark_repository import normalize_gender
from services.scoring_engine import Grade, Number, ScoringEngine, round_half_up

logger = logging.getLogger(__name__)

# Used when the profile has no age/gender yet (onboarding only asks for
# height and weight).
DEFAULT_SUBJECT_AGE = 25
DEFAULT_SUBJECT_GENDER = "male"

LEADERBOARD_LIMIT = 50


@dataclass(frozen=True)
class AssessmentSubmission:
    test_id: str
    result: Number
    age: Optional[Number] = None
    gender: Optional[str] = None
    user_id: Optional[str] = None


@dataclass(frozen=True)
class AssessmentRecord:
    """Scored assessment, in the shape the datastore keeps it."""
    user_id: Optional[str]
    category: str
    test_type: str
    test_name: str
    result: float
    unit: str
    score: int
    percentile: int
    grade: Grade
    benchmarked: bool
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "category": self.category,
            "test_type": self.test_type,
            "test_name": self.test_name,
            "result": self.result,
            "unit": self.unit,
            "score": self.score,
            "percentile": self.percentile,
            "grade": self.grade.value,
            "benchmarked": self.benchmarked,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    record: AssessmentRecord


class AssessmentService:
    """
    Validates, scores and packages assessment submissions.

    Stateless; the clock is injectable for tests.
    """

    def __init__(self, engine: ScoringEngine, clock: Callable[[], datetime] = None):
        self.engine = engine
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def submit(self, submission: AssessmentSubmission) -> AssessmentRecord:
        """
        Score a submission and build its record.

        Raises:
            UnknownTestError: test_id is not in the catalog
            InvalidScoringInput: result/age rejected by the engine
        """
        definition = self.engine.table.catalog.get(submission.test_id)

        age = submission.age if submission.age is not None else DEFAULT_SUBJECT_AGE
        gender = submission.gender or DEFAULT_SUBJECT_GENDER
        scored = self.engine.score(definition.id, submission.result, age, gender)

        record = AssessmentRecord(
            user_id=submission.user_id,
            category=definition.category.value,
            test_type=definition.id,
            test_name=definition.name,
            result=float(submission.result),
            unit=definition.unit,
            score=scored.score,
            percentile=scored.percentile,
            grade=scored.grade,
            benchmarked=scored.benchmarked,
            created_at=self._clock(),
        )
        logger.info(
            f"Assessment scored: {definition.id} -> {scored.score} ({scored.grade.value})",
            extra={
                "extra_fields": {
                    "test_type": definition.id,
                    "gender": normalize_gender(gender),
                    "score": scored.score,
                    "benchmarked": scored.benchmarked,
                }
            }
        )
        return record


def rank_assessments(
    records: Iterable[AssessmentRecord],
    category: Optional[str] = None,
    test_type: Optional[str] = None,
    limit: int = LEADERBOARD_LIMIT,
) -> List[LeaderboardEntry]:
    """
    Leaderboard ordering: highest score first, earlier submission wins ties.

    category / test_type filter the records ("all" or None = no filter).
    Ranks are 1-based positions in the returned list.
    """
    selected = [
        r for r in records
        if (category in (None, "all") or r.category == category)
        and (test_type in (None, "all") or r.test_type == test_type)
    ]
    selected.sort(key=lambda r: (-r.score, r.created_at))
    return [
        LeaderboardEntry(rank=i, record=r)
        for i, r in enumerate(selected[:max(0, limit)], start=1)
    ]


# ============================================================================
# COACH ROSTER
# ============================================================================
# Bands for a player's average score. These are on the 0-100 score scale and
# are independent of the benchmark grades.

ROSTER_GRADES = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Average"),
)
TOP_PERFORMER_SCORE = 80
NEEDS_ATTENTION_SCORE = 60  # up to TOP_PERFORMER_SCORE


def roster_grade(avg_score: int) -> str:
    for floor, label in ROSTER_GRADES:
        if avg_score >= floor:
            return label
    return "Needs Improvement"


@dataclass(frozen=True)
class PlayerSummary:
    """One roster row on the coach dashboard."""
    user_id: str
    best_score: Optional[int]  # None until the first assessment
    assessments_count: int
    avg_score: int
    grade: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "best_score": self.best_score,
            "assessments_count": self.assessments_count,
            "avg_score": self.avg_score,
            "grade": self.grade,
        }


@dataclass(frozen=True)
class RosterOverview:
    total_players: int
    top_performers: int
    needs_attention: int
    team_average: int


def summarize_player(user_id: str, records: Iterable[AssessmentRecord]) -> PlayerSummary:
    """Best score, count and rounded average over a player's records."""
    scores = [r.score for r in records]
    avg = round_half_up(sum(scores) / len(scores)) if scores else 0
    return PlayerSummary(
        user_id=user_id,
        best_score=max(scores) if scores else None,
        assessments_count=len(scores),
        avg_score=avg,
        grade=roster_grade(avg),
    )


def rank_players(
    records: Iterable[AssessmentRecord],
    user_ids: Optional[Iterable[str]] = None,
    category: Optional[str] = None,
) -> List[PlayerSummary]:
    """
    Coach roster ordered by average score, highest first.

    user_ids lists roster members so players without assessments still
    appear (average 0). Records without a user_id, or outside category, are
    ignored. Ties keep roster order.
    """
    by_player: Dict[str, List[AssessmentRecord]] = {}
    for user_id in user_ids or ():
        by_player.setdefault(user_id, [])
    for r in records:
        if r.user_id is None:
            continue
        if category not in (None, "all") and r.category != category:
            continue
        by_player.setdefault(r.user_id, []).append(r)

    players = [summarize_player(user_id, recs) for user_id, recs in by_player.items()]
    players.sort(key=lambda p: -p.avg_score)
    return players


def roster_overview(players: Iterable[PlayerSummary]) -> RosterOverview:
    """Headline counts for the coach dashboard."""
    players = list(players)
    averages = [p.avg_score for p in players]
    return RosterOverview(
        total_players=len(players),
        top_performers=sum(1 for a in averages if a >= TOP_PERFORMER_SCORE),
        needs_attention=sum(1 for a in averages if NEEDS_ATTENTION_SCORE <= a < TOP_PERFORMER_SCORE),
        team_average=round_half_up(sum(averages) / len(averages)) if averages else 0,
    )
