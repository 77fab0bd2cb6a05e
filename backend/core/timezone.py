"""UTC 타임존 유틸리티.

매물 생성/수정 시각은 모두 UTC 기준으로 기록합니다.
DB 컬럼은 naive datetime이므로 tzinfo 없는 UTC 값을 사용합니다.
"""
from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시각 반환 (naive)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
