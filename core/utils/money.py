"""
금액 유틸리티

Decimal 변환 및 DB 정밀도(금액 2자리, 환율 6자리) 맞춤
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from core.constants import Precision
from core.errors import ValidationError


def parse_decimal(value: Any) -> Decimal | None:
    """임의 값을 Decimal로 변환

    float는 문자열을 거쳐 변환하여 이진 오차 전파 방지.

    Returns:
        변환된 Decimal (변환 불가, NaN/Infinity, 허용 범위 초과면 None)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    if not result.is_finite() or abs(result) >= Precision.MAX_MAGNITUDE:
        return None
    return result


def _quantize(value: Decimal, exp: Decimal) -> Decimal:
    try:
        return value.quantize(exp, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValidationError(f"Value out of range: {value}") from e


def quantize_amount(value: Decimal) -> Decimal:
    """원장 금액 정밀도(0.01)로 반올림

    Raises:
        ValidationError: 정밀도 내에 표현할 수 없는 크기
    """
    return _quantize(value, Precision.AMOUNT)


def quantize_rate(value: Decimal) -> Decimal:
    """환율 정밀도(0.000001)로 반올림"""
    return _quantize(value, Precision.FX_RATE)
