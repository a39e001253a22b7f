"""
유틸리티 패키지

타임존 처리, 금액 변환 등 공통 유틸리티
"""

from core.utils.money import parse_decimal, quantize_amount, quantize_rate
from core.utils.timezone import (
    LOCAL_TZ,
    now_utc,
    parse_ts,
    start_of_month,
    to_local,
)

__all__ = [
    "LOCAL_TZ",
    "now_utc",
    "parse_ts",
    "start_of_month",
    "to_local",
    "parse_decimal",
    "quantize_amount",
    "quantize_rate",
]
