"""
원장 타입 정의

TransactionType, RefType 등 Ledger 시스템에서 사용하는 Enum 정의
"""

from enum import Enum


class TransactionType(str, Enum):
    """원장 거래 유형

    str을 상속하여 JSON 직렬화 가능.
    """

    OPENING_BALANCE = "opening_balance"  # 기초 잔액
    INCOME = "income"  # 수입
    EXPENSE = "expense"  # 지출 (이체 수수료 포함)
    TRANSFER_IN = "transfer_in"  # 이체 입금
    TRANSFER_OUT = "transfer_out"  # 이체 출금
    DEPOSIT = "deposit"  # 외부 입금
    WITHDRAWAL = "withdrawal"  # 외부 출금
    ADJUSTMENT = "adjustment"  # 잔고 조정


class RefType(str, Enum):
    """원장 항목을 발생시킨 비즈니스 이벤트 종류

    (ref_type, ref_id) 쌍으로 한 이벤트가 만든 항목들을 묶고 삭제.
    목록에 없는 ref_type도 저장 가능 (외부 모듈 확장용).
    """

    OPENING_BALANCE = "opening_balance"
    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER = "transfer"
    TRANSFER_FEE = "transfer_fee"
    SUBSCRIPTION = "subscription"
    INVESTMENT = "investment"
    INVESTMENT_PAYOUT = "investment_payout"
    MANUAL = "manual"


# 참조 삭제로 되돌릴 수 없는 ref_type (이체는 반대 방향 이체로만 정정)
PROTECTED_REF_TYPES: frozenset[str] = frozenset({
    RefType.TRANSFER.value,
    RefType.TRANSFER_FEE.value,
})
