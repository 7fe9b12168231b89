from enum import Enum


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class FoodSource(str, Enum):
    LABEL_SCAN = "label_scan"
    BARCODE = "barcode"
    PHOTO_AI = "photo_ai"
    RESTAURANT = "restaurant"
    MANUAL = "manual"
    QUICK_LOG = "quick_log"


class HealthMetricType(str, Enum):
    STEPS = "steps"
    SLEEP_MINUTES = "sleep_minutes"
    HEART_RATE_RESTING = "heart_rate_resting"
    HEART_RATE_AVG = "heart_rate_avg"
    ACTIVE_MINUTES = "active_minutes"
    CALORIES_BURNED = "calories_burned"
    WEIGHT_KG = "weight_kg"
    BODY_FAT_PERCENT = "body_fat_percent"


class FitbitConnectionState(str, Enum):
    UNCONFIGURED = "unconfigured"
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


MEAL_TYPES = tuple(m.value for m in MealType)
FOOD_SOURCES = tuple(s.value for s in FoodSource)
HEALTH_METRIC_TYPES = tuple(t.value for t in HealthMetricType)
