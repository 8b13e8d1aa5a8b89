from pydantic import BaseModel, Field, StrictFloat, StrictInt
from typing import Dict, List, Optional, Union
from datetime import datetime

# JSON true/false must not pass as 1/0
StrictNumber = Union[StrictInt, StrictFloat]


class CatalogTestResponse(BaseModel):
    id: str
    category: str
    name: str
    unit: str
    direction: str  # higher_is_better | lower_is_better


class CatalogResponse(BaseModel):
    """Catalog grouped by category, tests in display order."""
    categories: Dict[str, List[CatalogTestResponse]]


class BenchmarkRowResponse(BaseModel):
    excellent: float
    good: float
    average: float
    poor: float


class BenchmarkLookupResponse(BaseModel):
    test_id: str
    gender: str
    age_bracket: str
    benchmark: BenchmarkRowResponse


class ScoreRequest(BaseModel):
    """Raw result to score. Unknown test ids get the neutral fallback."""
    test_id: str
    result: StrictNumber
    age: StrictNumber
    gender: str


class ScoreResponse(BaseModel):
    test_id: str
    score: int
    percentile: int
    grade: str
    benchmarked: bool
    age_bracket: str


class AssessmentSubmitRequest(BaseModel):
    test_id: str
    result: StrictNumber
    age: Optional[StrictNumber] = None  # defaults to 25 when the profile has no age
    gender: Optional[str] = None  # defaults to "male" when the profile has no gender
    user_id: Optional[str] = None


class AssessmentRecordResponse(BaseModel):
    user_id: Optional[str] = None
    category: str
    test_type: str
    test_name: str
    result: float
    unit: str
    score: int
    percentile: int
    grade: str
    benchmarked: bool
    created_at: datetime


class BMIRequest(BaseModel):
    height_cm: float = Field(..., gt=0)
    weight_kg: float = Field(..., gt=0)


class BMIResponse(BaseModel):
    bmi: float
    category: str
    score: int  # 0-100, best at BMI 22


class VisionAnalyzerInfo(BaseModel):
    analysis_type: str
    display_name: str
    accepted_media: str
    max_upload_bytes: int
    available: bool


class VisionAnalysisResponse(BaseModel):
    analysis_type: str
    primary_metric: float
    primary_unit: str
    secondary_metrics: Dict[str, float]
    technique: str
    details: Dict[str, str] = {}
    recommendations: List[str] = []
