"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountImportRequest,
    AccountUpdateRequest,
    ExchangeRateCreateRequest,
    ExchangeRateUpdateRequest,
    ExchangeRateUpsertRequest,
    ExpenseSyncRequest,
    FinanceSettingsRequest,
    InvestmentReportRequest,
    JournalEntryCreateRequest,
    PaymentMethodCreateRequest,
    ReferenceEntryItem,
    ReferenceReplaceRequest,
    TransferCreateRequest,
)
from web.models.responses import (
    AccountImportResponse,
    AccountResponse,
    AggregationResponse,
    ConversionResponse,
    DeleteByReferenceResponse,
    ExchangeRateResponse,
    ExpenseSyncResponse,
    FinanceSettingsResponse,
    HealthResponse,
    InvestmentReportResponse,
    InvestmentSummaryResponse,
    JournalEntryResponse,
    OverviewResponse,
    PaymentMethodResponse,
    RecomputeResponse,
    ReconcileItemResponse,
    ReconcileResponse,
    TransferResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "AccountImportRequest",
    "AccountUpdateRequest",
    "ExchangeRateCreateRequest",
    "ExchangeRateUpdateRequest",
    "ExchangeRateUpsertRequest",
    "ExpenseSyncRequest",
    "FinanceSettingsRequest",
    "InvestmentReportRequest",
    "JournalEntryCreateRequest",
    "PaymentMethodCreateRequest",
    "ReferenceEntryItem",
    "ReferenceReplaceRequest",
    "TransferCreateRequest",
    # Responses
    "AccountImportResponse",
    "AccountResponse",
    "AggregationResponse",
    "ConversionResponse",
    "DeleteByReferenceResponse",
    "ExchangeRateResponse",
    "ExpenseSyncResponse",
    "FinanceSettingsResponse",
    "HealthResponse",
    "InvestmentReportResponse",
    "InvestmentSummaryResponse",
    "JournalEntryResponse",
    "OverviewResponse",
    "PaymentMethodResponse",
    "RecomputeResponse",
    "ReconcileItemResponse",
    "ReconcileResponse",
    "TransferResponse",
]
