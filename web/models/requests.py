"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
형식 오류(타입 불일치, 필수 필드 누락)는 core 호출 전에 422로 거부.
금액은 Decimal (JSON 숫자 또는 문자열 모두 허용).
"""

from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, Field


class AccountCreateRequest(BaseModel):
    """계정 생성 요청"""

    name: str = Field(..., description="계정 이름")
    account_type: str = Field(..., description="cash / mobile_wallet / bank_account / card / crypto / other")
    currency: str = Field(default="BDT", description="통화 코드")
    opening_balance: Decimal = Field(default=Decimal("0"), description="기초 잔액")
    payment_method_key: str | None = Field(default=None, description="연결 결제수단 키")
    status: str = Field(default="active", description="active / archived")
    color: str | None = Field(default=None, description="표시 색상")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "bKash",
                    "account_type": "mobile_wallet",
                    "currency": "BDT",
                    "opening_balance": "500.00",
                },
            ]
        }
    }


class AccountUpdateRequest(BaseModel):
    """계정 수정 요청 (지정한 필드만 변경)"""

    name: str | None = None
    account_type: str | None = None
    currency: str | None = None
    status: str | None = None
    payment_method_key: str | None = None
    color: str | None = None


class AccountImportRequest(BaseModel):
    """계정 일괄 import 요청

    CSV 파싱은 클라이언트 담당. 행은 dict 목록으로 전달.
    """

    rows: list[dict[str, Any]] = Field(..., description="계정 행 목록")


class JournalEntryCreateRequest(BaseModel):
    """원장 항목 기록 요청"""

    account_id: str
    tx_type: str = Field(..., description="opening_balance / income / expense / transfer_in / transfer_out / deposit / withdrawal / adjustment")
    amount: Decimal = Field(..., description="부호 있는 금액")
    currency: str | None = Field(default=None, description="생략 시 계정 통화")
    fx_rate: Decimal | None = Field(default=None, description="생략 시 1")
    ref_type: str | None = None
    ref_id: str | None = None
    note: str | None = None


class ReferenceEntryItem(BaseModel):
    """참조 교체 항목 (ref는 경로에서 지정)"""

    account_id: str
    tx_type: str
    amount: Decimal
    currency: str | None = None
    fx_rate: Decimal | None = None
    note: str | None = None


class ReferenceReplaceRequest(BaseModel):
    """참조 단위 교체 요청 (빈 목록이면 삭제만)"""

    entries: list[ReferenceEntryItem] = Field(default_factory=list)


class ExpenseSyncRequest(BaseModel):
    """지출/수입 원장 반영 요청"""

    payment_method_key: str | None = Field(default=None, description="연결 계정 조회 키")
    amount: Decimal = Field(..., description="금액 (> 0, 부호는 kind로 결정)")
    kind: Literal["expense", "income"] = "expense"
    details: str | None = None


class TransferCreateRequest(BaseModel):
    """이체 요청"""

    from_account_id: str
    to_account_id: str
    amount: Decimal = Field(..., description="이체 금액 (> 0)")
    currency: str | None = Field(default=None, description="생략 시 출금 계정 통화")
    fx_rate: Decimal | None = Field(default=None, description="생략 시 환율표에서 조회")
    fee: Decimal = Field(default=Decimal("0"), description="수수료 (>= 0)")
    note: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "from_account_id": "acc-wallet",
                    "to_account_id": "acc-bank",
                    "amount": "1000",
                    "fee": "15",
                },
            ]
        }
    }


class FinanceSettingsRequest(BaseModel):
    """재무 설정 생성/수정 요청"""

    base_currency: str | None = None
    allow_negative_balances: bool | None = None


class ExchangeRateCreateRequest(BaseModel):
    """환율 생성 요청 (from 1단위 = rate × to)"""

    from_currency: str
    to_currency: str
    rate: Decimal


class ExchangeRateUpsertRequest(BaseModel):
    """순서쌍 환율 저장 요청"""

    rate: Decimal


class ExchangeRateUpdateRequest(BaseModel):
    """ID 기준 환율 수정 요청"""

    from_currency: str | None = None
    to_currency: str | None = None
    rate: Decimal | None = None


class PaymentMethodCreateRequest(BaseModel):
    """결제수단 등록 요청"""

    key: str
    name: str


class InvestmentTxItem(BaseModel):
    """투자 거래 1건"""

    amount: Decimal
    currency: str
    direction: Literal["cost", "income"]
    project_id: str | None = None


class InvestmentPayoutItem(BaseModel):
    """투자 배당 1건"""

    amount: Decimal
    currency: str
    project_id: str | None = None


class InvestmentReportRequest(BaseModel):
    """투자 리포트 요청

    투자 모듈이 보유한 거래/배당 목록을 전달하면
    기준 통화 합계와 ROI를 계산.
    """

    base_currency: str | None = Field(default=None, description="생략 시 재무 설정 기준 통화")
    transactions: list[InvestmentTxItem] = Field(default_factory=list)
    payouts: list[InvestmentPayoutItem] = Field(default_factory=list)
