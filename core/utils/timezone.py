"""
타임존 유틸리티

내부 저장: UTC | 월간 집계 기준: 로컬(Asia/Dhaka, UTC+6) 원칙 준수를 위한 헬퍼 함수
"""

from datetime import datetime, timedelta, timezone

# 로컬 타임존 (UTC+6, 기준 통화 BDT 사용 지역)
LOCAL_TZ = timezone(timedelta(hours=6))


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def to_local(dt: datetime) -> datetime:
    """UTC datetime을 로컬 시간으로 변환

    naive datetime은 UTC로 간주.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(LOCAL_TZ)


def parse_ts(value: str) -> datetime:
    """DB에 저장된 ISO 문자열을 UTC datetime으로 변환

    SQLite datetime('now') 형식("YYYY-MM-DD HH:MM:SS")도 허용.
    """
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def start_of_month(ref: datetime | None = None) -> datetime:
    """로컬 기준 이번 달 1일 00:00을 UTC로 반환

    Example:
        >>> start_of_month(datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc))
        datetime(2026, 2, 28, 18, 0, tzinfo=timezone.utc)
    """
    local = to_local(ref or now_utc())
    first = local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return first.astimezone(timezone.utc)
