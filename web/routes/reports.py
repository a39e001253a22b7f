"""
리포트 라우트

기준 통화 집계(총 잔액, 월간 이체량, 투자 ROI)와 잔액 대사 API.
집계 응답에는 항상 missing_rate_pairs / is_complete 포함.
"""

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from web.dependencies import finance_settings_store, get_app_settings, get_db
from web.models.requests import InvestmentReportRequest
from web.models.responses import (
    InvestmentReportResponse,
    OverviewResponse,
    ReconcileResponse,
)
from web.services.report_service import ReportService

router = APIRouter(prefix="/api/reports", tags=["Reports"])


def _service(db: SQLiteAdapter, settings: Settings) -> ReportService:
    return ReportService(db, finance_settings_store(db, settings))


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> OverviewResponse:
    """활성 계정 총 잔액 + 이번 달 이체량"""
    overview = await _service(db, settings).get_overview()
    return OverviewResponse(**overview)


@router.get("/reconcile", response_model=ReconcileResponse)
async def get_reconciliation(
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> ReconcileResponse:
    """계정별 캐시 잔액 vs 원장 합계 대사

    불일치는 POST /api/ledger/recompute로 복구.
    """
    result = await _service(db, settings).get_reconciliation()
    return ReconcileResponse(**result)


@router.post("/investments", response_model=InvestmentReportResponse)
async def get_investment_report(
    request: InvestmentReportRequest,
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> InvestmentReportResponse:
    """투자 합계 / ROI (전체 + 프로젝트별)"""
    report = await _service(db, settings).get_investment_report(
        transactions=[tx.model_dump() for tx in request.transactions],
        payouts=[p.model_dump() for p in request.payouts],
        base_currency=request.base_currency,
    )
    return InvestmentReportResponse(**report)
