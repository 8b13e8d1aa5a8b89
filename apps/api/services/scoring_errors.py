"""
Scoring domain errors.

These carry no HTTP knowledge. Routers translate them into the API
exceptions in core.exceptions.

Missing benchmarks and unknown tests are NOT errors for the scoring engine
(it returns the neutral fallback). UnknownTestError is only raised by the
strict catalog accessors and the assessment service.
"""
from typing import Optional


class ScoringError(Exception):
    """Base class for scoring errors."""


class ScoringConfigError(ScoringError):
    """Benchmark table or test catalog configuration is invalid."""


class InvalidScoringInput(ScoringError, ValueError):
    """Engine input rejected before it reaches the scoring curve."""

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.field = field


class UnknownTestError(ScoringError, LookupError):
    """Test id is not present in the test catalog."""

    def __init__(self, test_id: str):
        super().__init__(f"Unknown test: {test_id}")
        self.test_id = test_id
