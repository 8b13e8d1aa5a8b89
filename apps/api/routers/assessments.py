"""
Assessment API Endpoints

Test catalog, benchmark lookup, scoring and assessment submission.

Scoring never fails on missing data: unknown tests or genders without
benchmarks get the neutral fallback (50 / 50 / Average, benchmarked=false).
Submission is stricter and rejects test ids that are not in the catalog.
"""
import logging

from fastapi import APIRouter, Depends, Query

from core.exceptions import NotFoundError, from_scoring_error
from schemas import (
    AssessmentRecordResponse,
    AssessmentSubmitRequest,
    BenchmarkLookupResponse,
    BenchmarkRowResponse,
    CatalogResponse,
    CatalogTestResponse,
    ScoreRequest,
    ScoreResponse,
)
from services.assessment_service import AssessmentService, AssessmentSubmission
from services.benchmark_repository import normalize_gender
from services.scoring_engine import ScoringEngine, get_scoring_engine
from services.scoring_errors import InvalidScoringInput, UnknownTestError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/assessments", tags=["assessments"])


@router.get("/tests", response_model=CatalogResponse)
def list_tests(engine: ScoringEngine = Depends(get_scoring_engine)):
    """All tests grouped by category, in display order."""
    grouped = engine.table.catalog.grouped()
    return CatalogResponse(
        categories={
            category: [CatalogTestResponse(**d.to_dict()) for d in tests]
            for category, tests in grouped.items()
        }
    )


@router.get("/tests/{test_id}", response_model=CatalogTestResponse)
def get_test(test_id: str, engine: ScoringEngine = Depends(get_scoring_engine)):
    definition = engine.table.catalog.find(test_id)
    if definition is None:
        raise NotFoundError("Test", test_id)
    return CatalogTestResponse(**definition.to_dict())


@router.get("/benchmarks/{test_id}", response_model=BenchmarkLookupResponse)
def get_benchmark(
    test_id: str,
    gender: str = Query(...),
    age: float = Query(...),
    engine: ScoringEngine = Depends(get_scoring_engine),
):
    """
    Benchmark row used for a test/gender/age.

    404 when the test is unknown or has no norms for that gender and bracket.
    """
    try:
        bracket = engine.age_bracket_for(age)
        row = engine.benchmark_for(test_id, age, gender)
    except InvalidScoringInput as e:
        raise from_scoring_error(e)

    if row is None:
        raise NotFoundError("Benchmark", f"{test_id}/{gender}/{bracket.label}")

    return BenchmarkLookupResponse(
        test_id=test_id,
        gender=normalize_gender(gender),
        age_bracket=bracket.label,
        benchmark=BenchmarkRowResponse(**row.to_dict()),
    )


@router.post("/score", response_model=ScoreResponse)
def score_result(request: ScoreRequest, engine: ScoringEngine = Depends(get_scoring_engine)):
    """Score one raw result against the benchmark table."""
    try:
        result = engine.score(request.test_id, request.result, request.age, request.gender)
        bracket = engine.age_bracket_for(request.age)
    except InvalidScoringInput as e:
        logger.warning(f"Rejected score request: {e.detail}")
        raise from_scoring_error(e)

    return ScoreResponse(
        test_id=request.test_id,
        age_bracket=bracket.label,
        **result.to_dict(),
    )


@router.post("/submit", response_model=AssessmentRecordResponse, status_code=201)
def submit_assessment(request: AssessmentSubmitRequest, engine: ScoringEngine = Depends(get_scoring_engine)):
    """
    Score a submission and return the record to be stored.

    Persistence is handled by the datastore client, not by this service.
    """
    service = AssessmentService(engine)
    try:
        record = service.submit(
            AssessmentSubmission(
                test_id=request.test_id,
                result=request.result,
                age=request.age,
                gender=request.gender,
                user_id=request.user_id,
            )
        )
    except (UnknownTestError, InvalidScoringInput) as e:
        logger.warning(f"Rejected assessment submission: {e}")
        raise from_scoring_error(e)

    return AssessmentRecordResponse(**record.to_dict())
