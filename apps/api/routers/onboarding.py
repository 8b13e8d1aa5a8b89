"""
Onboarding API Endpoints

New athletes enter height and weight once; BMI is derived from them and
shown on the onboarding screen.
"""
from decimal import Decimal

from fastapi import APIRouter

from core.exceptions import ValidationError
from schemas import BMIRequest, BMIResponse
from services.bmi_calculator import bmi_category, bmi_score, calculate_bmi

router = APIRouter(prefix="/v1/onboarding", tags=["onboarding"])


@router.post("/bmi", response_model=BMIResponse)
def compute_bmi(request: BMIRequest):
    """BMI (1 decimal), its display category and fitness score."""
    bmi = calculate_bmi(
        weight_kg=Decimal(str(request.weight_kg)),
        height_cm=Decimal(str(request.height_cm))
    )
    if bmi is None:
        raise ValidationError("BMI could not be calculated from the given height and weight")

    return BMIResponse(bmi=float(bmi), category=bmi_category(bmi), score=bmi_score(bmi))
