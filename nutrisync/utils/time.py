"""UTC 시간 유틸리티

두 저장소 모두 naive UTC datetime을 저장한다.
"""
from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    """현재 UTC 시각 (naive)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """aware datetime은 UTC로 변환 후 tzinfo 제거, naive는 UTC로 간주"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """해당 UTC 날짜의 00:00:00.000 ~ 23:59:59.999 구간"""
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time(23, 59, 59, 999000))
    return start, end


def range_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """start_date 00:00:00.000 ~ end_date 23:59:59.999 구간"""
    return day_bounds(start_date)[0], day_bounds(end_date)[1]
