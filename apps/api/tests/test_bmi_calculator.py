"""
Tests for BMI Calculation Service

BMI calculation, rounding, null handling and display categories.
"""
import pytest
from decimal import Decimal
from services.bmi_calculator import bmi_category, bmi_score, calculate_bmi


class TestBMICalculation:
    """Test BMI calculation from weight and height"""

    def test_standard_bmi_calculation(self):
        """Standard BMI calculation - 70kg, 175cm"""
        bmi = calculate_bmi(Decimal('70'), Decimal('175'))

        assert bmi is not None
        assert bmi == Decimal('22.9')  # 70 / (1.75)² = 22.857... rounded to 22.9

    def test_bmi_rounding(self):
        """Verify BMI is rounded to 1 decimal place"""
        bmi = calculate_bmi(Decimal('75'), Decimal('180'))

        # 75 / (1.80)² = 23.148... should round to 23.1
        assert bmi == Decimal('23.1')

    def test_rounding_down(self):
        """70 / (1.76)² = 22.598... rounds to 22.6"""
        assert calculate_bmi(Decimal('70'), Decimal('176')) == Decimal('22.6')

    def test_different_heights(self):
        """Same weight, taller person has lower BMI"""
        weight = Decimal('70')
        bmi_tall = calculate_bmi(weight, Decimal('190'))
        bmi_short = calculate_bmi(weight, Decimal('160'))

        assert bmi_tall < Decimal('25')
        assert bmi_short > Decimal('25')
        assert bmi_tall < bmi_short

    def test_different_weights(self):
        """Same height, heavier person has higher BMI"""
        height = Decimal('175')
        assert calculate_bmi(Decimal('60'), height) < calculate_bmi(Decimal('90'), height)

    def test_returns_decimal_with_one_place(self):
        bmi = calculate_bmi(Decimal('73.456789'), Decimal('178.123456'))
        assert isinstance(bmi, Decimal)
        assert len(str(bmi).split('.')[1]) == 1

    def test_extreme_heavy_weight(self):
        bmi = calculate_bmi(Decimal('200'), Decimal('180'))
        assert bmi > Decimal('50')


class TestBMINullHandling:
    """Test null/None input handling"""

    def test_none_weight(self):
        assert calculate_bmi(None, Decimal('175')) is None

    def test_none_height(self):
        assert calculate_bmi(Decimal('70'), None) is None

    def test_both_none(self):
        assert calculate_bmi(None, None) is None


class TestBMIInvalidInput:
    """Test invalid input handling"""

    @pytest.mark.parametrize("weight,height", [
        (Decimal('0'), Decimal('175')),
        (Decimal('70'), Decimal('0')),
        (Decimal('-10'), Decimal('175')),
        (Decimal('70'), Decimal('-10')),
        (Decimal('0'), Decimal('0')),
    ])
    def test_non_positive_inputs(self, weight, height):
        assert calculate_bmi(weight, height) is None


class TestBMICategory:
    """Display categories shown on the onboarding screen"""

    @pytest.mark.parametrize("bmi,expected", [
        (Decimal('16.0'), "Underweight"),
        (Decimal('18.4'), "Underweight"),
        (Decimal('18.5'), "Normal Weight"),
        (Decimal('22.9'), "Normal Weight"),
        (Decimal('24.9'), "Normal Weight"),
        (Decimal('25.0'), "Overweight"),
        (Decimal('29.9'), "Overweight"),
        (Decimal('30.0'), "Obese"),
        (Decimal('41.2'), "Obese"),
    ])
    def test_category_boundaries(self, bmi, expected):
        assert bmi_category(bmi) == expected

    def test_none_passes_through(self):
        assert bmi_category(None) is None

    def test_calculated_value_categorized(self):
        """70kg, 175cm -> 22.9 -> Normal Weight"""
        assert bmi_category(calculate_bmi(Decimal('70'), Decimal('175'))) == "Normal Weight"


class TestBMIScore:
    """Dashboard fitness score: 100 at BMI 22, 4 points off per unit away"""

    @pytest.mark.parametrize("bmi,expected", [
        (Decimal('22.0'), 100),
        (Decimal('22.9'), 96),    # 96.4
        (Decimal('21.1'), 96),
        (Decimal('18.5'), 86),
        (Decimal('29.1'), 72),    # 71.6
        (Decimal('22.125'), 100),  # 99.5 rounds up
        (Decimal('22.375'), 99),   # 98.5 rounds up
    ])
    def test_score(self, bmi, expected):
        assert bmi_score(bmi) == expected

    def test_symmetric_around_target(self):
        assert bmi_score(Decimal('19.0')) == bmi_score(Decimal('25.0')) == 88

    @pytest.mark.parametrize("bmi", [Decimal('47.0'), Decimal('50.0'), Decimal('60.0')])
    def test_clamped_at_zero(self, bmi):
        assert bmi_score(bmi) == 0

    def test_accepts_float(self):
        assert bmi_score(22.9) == 96

    def test_none_passes_through(self):
        assert bmi_score(None) is None

    def test_calculated_value_scored(self):
        """70kg, 175cm -> 22.9 -> 96"""
        assert bmi_score(calculate_bmi(Decimal('70'), Decimal('175'))) == 96
