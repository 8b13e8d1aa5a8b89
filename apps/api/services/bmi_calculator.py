"""
BMI Calculation Service

Calculates BMI from the height and weight captured during onboarding.
BMI = weight_kg / (height_m)²

The onboarding screen shows the value alongside a WHO adult category, and
the dashboard shows a 0-100 BMI fitness score.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


# Upper bounds (exclusive) for each category; anything above the last is "Obese"
BMI_CATEGORIES = (
    (Decimal('18.5'), "Underweight"),
    (Decimal('25'), "Normal Weight"),
    (Decimal('30'), "Overweight"),
)


def calculate_bmi(weight_kg: Optional[Decimal], height_cm: Optional[Decimal]) -> Optional[Decimal]:
    """
    Calculate BMI from weight (kg) and height (cm).

    Formula: BMI = weight_kg / (height_m)²
    where height_m = height_cm / 100

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters

    Returns:
        BMI value (rounded to 1 decimal place) or None if inputs are missing
        or not positive

    Examples:
        >>> calculate_bmi(Decimal('70'), Decimal('175'))
        Decimal('22.9')
        >>> calculate_bmi(Decimal('70'), None)
        None
    """
    if weight_kg is None or height_cm is None:
        return None

    if weight_kg <= 0 or height_cm <= 0:
        return None

    height_m = float(height_cm) / 100.0
    bmi = float(weight_kg) / (height_m ** 2)

    return Decimal(str(round(bmi, 1)))


def bmi_category(bmi: Optional[Decimal]) -> Optional[str]:
    """
    Map a BMI value to its display category.

    <18.5 Underweight, <25 Normal Weight, <30 Overweight, otherwise Obese.
    """
    if bmi is None:
        return None
    for upper, label in BMI_CATEGORIES:
        if bmi < upper:
            return label
    return "Obese"


# BMI with the best fitness score
BMI_SCORE_TARGET = Decimal('22')


def bmi_score(bmi: Optional[Decimal]) -> Optional[int]:
    """
    0-100 fitness score for a BMI, peaking at 22.

    score = round((25 - |bmi - 22|) * 4), halves up, clamped to 0-100.

    Examples:
        >>> bmi_score(Decimal('22.0'))
        100
        >>> bmi_score(Decimal('22.9'))
        96
    """
    if bmi is None:
        return None
    raw = (Decimal('25') - abs(Decimal(str(bmi)) - BMI_SCORE_TARGET)) * 4
    score = int(raw.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    return max(0, min(100, score))
