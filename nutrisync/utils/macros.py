"""매크로 영양소 계산 헬퍼"""
import math
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass
class MacroTotals:
    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0


def round_half_up(value: float) -> int:
    """0.5는 항상 올림 (round()의 banker's rounding 대신)"""
    return int(math.floor(float(value) + 0.5))


def round_1(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return round_half_up(float(value) * 10) / 10


def calculate_daily_totals(logs: Iterable) -> MacroTotals:
    """로그 목록의 합계 (servings 배수 적용, 선택 항목은 0으로 취급)"""
    totals = MacroTotals()
    for log in logs:
        servings = log.servings
        totals.calories += log.calories * servings
        totals.protein_g += log.protein_g * servings
        totals.carbs_g += log.carbs_g * servings
        totals.fat_g += log.fat_g * servings
        totals.fiber_g += (log.fiber_g or 0) * servings
        totals.sugar_g += (log.sugar_g or 0) * servings
        totals.sodium_mg += (log.sodium_mg or 0) * servings
    return totals


def estimate_calories(protein_g: float, carbs_g: float, fat_g: float) -> int:
    """Atwater 계수(4/4/9)로 칼로리 추정"""
    return round_half_up(protein_g * 4 + carbs_g * 4 + fat_g * 9)


def macro_percentage(current: float, target: float) -> float:
    """목표 대비 달성률, 0~1로 제한"""
    if target <= 0:
        return 0.0
    return min(current / target, 1.0)


def trend_row(day, calories, protein_g, carbs_g, fat_g) -> dict:
    """일별 집계 행 반올림: 칼로리는 정수, 그램 단위는 소수 첫째 자리"""
    return {
        "date": str(day),
        "calories": round_half_up(calories or 0),
        "protein_g": round_1(protein_g or 0),
        "carbs_g": round_1(carbs_g or 0),
        "fat_g": round_1(fat_g or 0),
    }
