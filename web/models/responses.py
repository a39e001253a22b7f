"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 정밀도 손실 방지를 위해 문자열.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    environment: str = Field(..., description="실행 환경 (development/production)")
    version: str = Field(..., description="API 버전")
    timestamp: datetime = Field(..., description="응답 시간 (UTC)")


class AccountResponse(BaseModel):
    """계정 응답"""

    account_id: str
    name: str
    account_type: str
    currency: str
    opening_balance: str
    current_balance: str
    payment_method_key: str | None = None
    color: str | None = None
    status: str
    created_at: str | None = None
    updated_at: str | None = None


class AccountImportResponse(BaseModel):
    """계정 import 결과"""

    created: int
    accounts: list[AccountResponse]


class JournalEntryResponse(BaseModel):
    """원장 항목 응답"""

    entry_id: str
    account_id: str
    tx_type: str
    amount: str
    currency: str
    fx_rate: str
    amount_base: str
    ref_type: str | None = None
    ref_id: str | None = None
    note: str | None = None
    created_at: str


class ExpenseSyncResponse(BaseModel):
    """지출 원장 반영 결과 (연결 계정 없으면 entry=None)"""

    expense_id: str
    entry: JournalEntryResponse | None = None


class DeleteByReferenceResponse(BaseModel):
    """참조 단위 삭제 결과"""

    ref_type: str
    ref_id: str
    deleted: int


class RecomputeResponse(BaseModel):
    """전체 잔액 재계산 결과"""

    accounts: int
    balances: dict[str, str]


class TransferResponse(BaseModel):
    """이체 응답"""

    transfer_id: str
    from_account_id: str
    to_account_id: str
    amount: str
    currency: str
    fx_rate: str
    fee: str
    note: str | None = None
    created_at: str | None = None


class FinanceSettingsResponse(BaseModel):
    """재무 설정 응답"""

    settings_id: str
    base_currency: str
    allow_negative_balances: bool
    updated_at: str | None = None


class ExchangeRateResponse(BaseModel):
    """환율 응답"""

    rate_id: str
    from_currency: str
    to_currency: str
    rate: str
    updated_at: str | None = None


class ConversionResponse(BaseModel):
    """환산 결과

    convertible=false면 converted/rate는 None (1:1로 대체하지 않음).
    """

    amount: str
    from_currency: str
    to_currency: str
    convertible: bool
    converted: str | None = None
    rate: str | None = None


class PaymentMethodResponse(BaseModel):
    """결제수단 응답"""

    key: str
    name: str
    created_at: str | None = None


class AggregationResponse(BaseModel):
    """다중 통화 집계 결과

    is_complete=false면 total은 missing_rate_pairs 통화 항목이 빠진 값.
    """

    base_currency: str
    total: str
    missing_rate_pairs: list[str]
    excluded_amount: str
    excluded_count: int
    is_complete: bool


class OverviewResponse(BaseModel):
    """자금 현황 요약"""

    base_currency: str
    active_account_count: int
    total_balance: AggregationResponse
    month_transfer_volume: AggregationResponse
    month_transfer_count: int


class ReconcileItemResponse(BaseModel):
    """계정별 대사 결과"""

    account_id: str
    name: str
    currency: str
    status: str
    cached_balance: str
    journal_balance: str
    difference: str
    entry_count: int
    is_consistent: bool


class ReconcileResponse(BaseModel):
    """전체 대사 결과"""

    accounts: list[ReconcileItemResponse]
    inconsistent_count: int


class InvestmentSummaryResponse(BaseModel):
    """투자 요약 (전체 또는 프로젝트별)"""

    project_id: str | None = None
    invested: AggregationResponse
    returns: AggregationResponse
    payouts: AggregationResponse
    net_profit: str
    roi: str
    missing_rate_pairs: list[str]
    is_complete: bool


class InvestmentReportResponse(BaseModel):
    """투자 리포트"""

    base_currency: str
    portfolio: InvestmentSummaryResponse
    projects: list[InvestmentSummaryResponse]
