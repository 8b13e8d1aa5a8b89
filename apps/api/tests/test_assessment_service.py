"""
Tests for assessment submission and leaderboard ranking
"""
import pytest
from datetime import datetime, timedelta, timezone

from services.assessment_service import (
    DEFAULT_SUBJECT_AGE,
    DEFAULT_SUBJECT_GENDER,
    AssessmentRecord,
    AssessmentService,
    AssessmentSubmission,
    PlayerSummary,
    rank_assessments,
    rank_players,
    roster_grade,
    roster_overview,
    summarize_player,
)
from services.scoring_engine import Grade
from services.scoring_errors import InvalidScoringInput, UnknownTestError

FIXED_NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def service(engine):
    return AssessmentService(engine, clock=lambda: FIXED_NOW)


def _record(score, test_type="push-ups-1min", category="strength", minutes=0, user_id="u1"):
    return AssessmentRecord(
        user_id=user_id,
        category=category,
        test_type=test_type,
        test_name=test_type,
        result=0.0,
        unit="reps",
        score=score,
        percentile=50,
        grade=Grade.AVERAGE,
        benchmarked=True,
        created_at=FIXED_NOW + timedelta(minutes=minutes),
    )


class TestSubmit:
    def test_scored_record(self, service):
        record = service.submit(AssessmentSubmission(
            test_id="grip-strength", result=20, age=40, gender="female", user_id="athlete-1",
        ))
        assert record.user_id == "athlete-1"
        assert record.category == "strength"
        assert record.test_type == "grip-strength"
        assert record.test_name == "Grip Strength"
        assert record.unit == "kg"
        assert record.result == 20.0
        assert (record.score, record.percentile, record.grade) == (50, 60, Grade.AVERAGE)
        assert record.benchmarked is True
        assert record.created_at == FIXED_NOW

    def test_missing_profile_uses_defaults(self, service, engine):
        """No age/gender on file: scored as a 25 year old male"""
        record = service.submit(AssessmentSubmission(test_id="push-ups-1min", result=45))
        expected = engine.score("push-ups-1min", 45, DEFAULT_SUBJECT_AGE, DEFAULT_SUBJECT_GENDER)
        assert record.score == expected.score == 90

    def test_test_without_benchmarks_still_recorded(self, service):
        record = service.submit(AssessmentSubmission(test_id="deadlift", result=140, age=30, gender="male"))
        assert record.score == 50
        assert record.benchmarked is False
        assert record.unit == "kg"

    def test_unknown_test_rejected(self, service):
        with pytest.raises(UnknownTestError):
            service.submit(AssessmentSubmission(test_id="javelin", result=40))

    def test_invalid_result_rejected(self, service):
        with pytest.raises(InvalidScoringInput):
            service.submit(AssessmentSubmission(test_id="100m-sprint", result=-12.0))

    def test_to_dict(self, service):
        data = service.submit(AssessmentSubmission(
            test_id="100m-sprint", result=12.5, age=22, gender="male",
        )).to_dict()
        assert data["grade"] == "Good"
        assert data["category"] == "endurance"
        assert data["created_at"] == "2024-03-01T09:30:00+00:00"

    def test_default_clock_is_utc(self, engine):
        record = AssessmentService(engine).submit(AssessmentSubmission(test_id="push-ups-1min", result=30))
        assert record.created_at.tzinfo is not None


class TestRanking:
    def test_highest_score_first(self):
        entries = rank_assessments([_record(60), _record(90), _record(75)])
        assert [e.record.score for e in entries] == [90, 75, 60]
        assert [e.rank for e in entries] == [1, 2, 3]

    def test_earlier_submission_wins_tie(self):
        late = _record(80, minutes=10, user_id="late")
        early = _record(80, minutes=1, user_id="early")
        entries = rank_assessments([late, early])
        assert [e.record.user_id for e in entries] == ["early", "late"]

    def test_filter_by_category(self):
        records = [
            _record(90, category="strength"),
            _record(70, test_type="100m-sprint", category="endurance"),
        ]
        entries = rank_assessments(records, category="endurance")
        assert [e.record.test_type for e in entries] == ["100m-sprint"]
        assert entries[0].rank == 1

    def test_all_means_no_filter(self):
        records = [_record(90), _record(70, category="endurance")]
        assert len(rank_assessments(records, category="all", test_type="all")) == 2

    def test_filter_by_test_type(self):
        records = [_record(90), _record(70, test_type="grip-strength")]
        entries = rank_assessments(records, test_type="grip-strength")
        assert [e.record.score for e in entries] == [70]

    def test_limit(self):
        records = [_record(s) for s in range(100)]
        entries = rank_assessments(records, limit=50)
        assert len(entries) == 50
        assert entries[0].record.score == 99
        assert entries[-1].rank == 50

    def test_empty(self):
        assert rank_assessments([]) == []


class TestPlayerSummary:
    def test_best_count_and_average(self):
        summary = summarize_player("u1", [_record(70), _record(85), _record(90)])
        assert summary == PlayerSummary(
            user_id="u1", best_score=90, assessments_count=3, avg_score=82, grade="Excellent",
        )

    def test_average_rounds_half_up(self):
        """(82 + 83) / 2 = 82.5 -> 83"""
        assert summarize_player("u1", [_record(82), _record(83)]).avg_score == 83

    def test_no_assessments(self):
        summary = summarize_player("u1", [])
        assert summary.best_score is None
        assert summary.assessments_count == 0
        assert summary.avg_score == 0
        assert summary.grade == "Needs Improvement"

    def test_to_dict(self):
        assert summarize_player("u1", [_record(64)]).to_dict() == {
            "user_id": "u1",
            "best_score": 64,
            "assessments_count": 1,
            "avg_score": 64,
            "grade": "Good",
        }

    @pytest.mark.parametrize("avg,expected", [
        (100, "Excellent"),
        (80, "Excellent"),
        (79, "Good"),
        (60, "Good"),
        (59, "Average"),
        (40, "Average"),
        (39, "Needs Improvement"),
        (0, "Needs Improvement"),
    ])
    def test_roster_grade_bands(self, avg, expected):
        assert roster_grade(avg) == expected


class TestRankPlayers:
    def test_ordered_by_average(self):
        records = [
            _record(50, user_id="a"), _record(90, user_id="a"),   # avg 70, best 90
            _record(85, user_id="b"),                             # avg 85
            _record(40, user_id="c"), _record(44, user_id="c"),   # avg 42
        ]
        players = rank_players(records)
        assert [p.user_id for p in players] == ["b", "a", "c"]
        assert [p.best_score for p in players] == [85, 90, 44]

    def test_roster_members_without_assessments(self):
        players = rank_players([_record(75, user_id="a")], user_ids=["z", "a"])
        assert [(p.user_id, p.avg_score, p.assessments_count) for p in players] == [
            ("a", 75, 1), ("z", 0, 0),
        ]

    def test_ties_keep_roster_order(self):
        records = [_record(60, user_id="b"), _record(60, user_id="a")]
        players = rank_players(records, user_ids=["a", "b"])
        assert [p.user_id for p in players] == ["a", "b"]

    def test_records_without_user_ignored(self):
        players = rank_players([_record(99, user_id=None), _record(50, user_id="a")])
        assert [p.user_id for p in players] == ["a"]

    def test_filter_by_category(self):
        records = [
            _record(90, user_id="a", category="strength"),
            _record(30, user_id="a", category="endurance"),
            _record(70, user_id="b", category="endurance"),
        ]
        players = rank_players(records, category="strength")
        assert [(p.user_id, p.avg_score) for p in players] == [("a", 90)]
        assert len(rank_players(records, category="all")) == 2

    def test_empty(self):
        assert rank_players([]) == []


class TestRosterOverview:
    def test_counts(self):
        players = [
            summarize_player("a", [_record(92)]),
            summarize_player("b", [_record(80)]),
            summarize_player("c", [_record(79)]),
            summarize_player("d", [_record(60)]),
            summarize_player("e", [_record(59)]),
            summarize_player("f", []),
        ]
        overview = roster_overview(players)
        assert overview.total_players == 6
        assert overview.top_performers == 2
        assert overview.needs_attention == 2
        assert overview.team_average == 62  # 370 / 6 = 61.67

    def test_empty_roster(self):
        overview = roster_overview([])
        assert (overview.total_players, overview.top_performers, overview.team_average) == (0, 0, 0)
