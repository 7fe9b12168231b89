"""테스트 공용 값과 요청 페이로드"""
from typing import Any

OWNER_ID = "00000000-0000-0000-0000-000000000001"
OTHER_OWNER_ID = "00000000-0000-0000-0000-000000000002"
OWNER_HEADERS = {"X-Owner-Id": OWNER_ID}

LOG_ID_1 = "11111111-1111-4111-8111-111111111111"
LOG_ID_2 = "22222222-2222-4222-8222-222222222222"
LOG_ID_3 = "33333333-3333-4333-8333-333333333333"


def food_log_payload(log_id: str, **overrides: Any) -> dict:
    """동기화 요청용 음식 기록 한 건"""
    payload = {
        "id": log_id,
        "food_name": "Greek Yogurt",
        "meal_type": "breakfast",
        "source": "manual",
        "serving_size": "1 cup",
        "servings": 1,
        "calories": 150,
        "protein_g": 15,
        "carbs_g": 8,
        "fat_g": 4,
        "fiber_g": None,
        "sugar_g": 6,
        "sodium_mg": 60,
        "photo_url": None,
        "ai_confidence": None,
        "logged_at": "2024-03-01T08:00:00Z",
        "created_at": "2024-03-01T08:00:05Z",
        "updated_at": "2024-03-01T08:00:05Z",
    }
    payload.update(overrides)
    return payload


def health_metric_payload(metric_id: str, **overrides: Any) -> dict:
    payload = {
        "id": metric_id,
        "metric_type": "steps",
        "value": 8432,
        "recorded_at": "2024-03-01T20:00:00Z",
        "source": "health_connect",
        "created_at": "2024-03-01T20:00:01Z",
    }
    payload.update(overrides)
    return payload
