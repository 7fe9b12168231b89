"""매크로 계산 헬퍼 테스트"""
from types import SimpleNamespace

import pytest

from nutrisync.utils.macros import (
    calculate_daily_totals,
    estimate_calories,
    macro_percentage,
    round_1,
    round_half_up,
    trend_row,
)


def _log(**values):
    defaults = {
        "servings": 1,
        "calories": 0,
        "protein_g": 0,
        "carbs_g": 0,
        "fat_g": 0,
        "fiber_g": None,
        "sugar_g": None,
        "sodium_mg": None,
    }
    defaults.update(values)
    return SimpleNamespace(**defaults)


@pytest.mark.parametrize(
    "value, expected",
    [(0.5, 1), (1.5, 2), (2.5, 3), (2.4, 2), (249.99, 250), (0, 0)],
)
def test_round_half_up(value, expected):
    """0.5는 항상 올림 (짝수 반올림 아님)"""
    assert round_half_up(value) == expected


def test_round_1():
    assert round_1(12.25) == 12.3
    assert round_1(12.24) == 12.2
    assert round_1(None) is None


def test_calculate_daily_totals_applies_servings():
    totals = calculate_daily_totals(
        [
            _log(calories=100, protein_g=10, servings=2, sodium_mg=100),
            _log(calories=50, protein_g=5, servings=1),
        ]
    )
    assert totals.calories == 250
    assert totals.protein_g == 25
    assert totals.sodium_mg == 200
    assert totals.fiber_g == 0


def test_estimate_calories_atwater():
    # 10*4 + 20*4 + 5*9 = 165
    assert estimate_calories(10, 20, 5) == 165


def test_macro_percentage_is_capped():
    assert macro_percentage(50, 100) == 0.5
    assert macro_percentage(150, 100) == 1.0
    assert macro_percentage(10, 0) == 0.0


def test_trend_row_rounding():
    row = trend_row("2024-03-01", 249.6, 30.25, 10.04, None)
    assert row == {
        "date": "2024-03-01",
        "calories": 250,
        "protein_g": 30.3,
        "carbs_g": 10.0,
        "fat_g": 0.0,
    }
