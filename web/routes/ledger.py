"""
원장 API 라우트

원장 항목 조회/기록, 참조 단위 삭제, 잔액 재계산
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import LedgerError
from core.ledger.service import EntryDraft, LedgerService
from core.ledger.store import LedgerStore
from web.dependencies import get_db, get_db_write
from web.errors import to_http_exception
from web.models.requests import (
    ExpenseSyncRequest,
    JournalEntryCreateRequest,
    ReferenceReplaceRequest,
)
from web.models.responses import (
    DeleteByReferenceResponse,
    ExpenseSyncResponse,
    JournalEntryResponse,
    RecomputeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ledger", tags=["Ledger"])


@router.get("", response_model=list[JournalEntryResponse])
async def list_entries(
    account_id: str | None = Query(default=None),
    ref_type: str | None = Query(default=None),
    ref_id: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: SQLiteAdapter = Depends(get_db),
) -> list[JournalEntryResponse]:
    """원장 항목 목록 (최신순)"""
    entries = await LedgerStore(db).get_entries(
        account_id=account_id,
        ref_type=ref_type,
        ref_id=ref_id,
        limit=limit,
        offset=offset,
    )
    return [JournalEntryResponse(**e.to_dict()) for e in entries]


@router.post("", response_model=JournalEntryResponse, status_code=201)
async def post_entry(
    request: JournalEntryCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> JournalEntryResponse:
    """원장 항목 기록 (계정 없으면 404)"""
    try:
        entry = await LedgerService(db).post_journal_entry(
            account_id=request.account_id,
            tx_type=request.tx_type,
            amount=request.amount,
            currency=request.currency,
            fx_rate=request.fx_rate,
            ref_type=request.ref_type,
            ref_id=request.ref_id,
            note=request.note,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to post journal entry: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return JournalEntryResponse(**entry.to_dict())


@router.delete("/ref/{ref_type}/{ref_id}", response_model=DeleteByReferenceResponse)
async def delete_by_reference(
    ref_type: str = Path(..., description="참조 종류 (expense, subscription 등)"),
    ref_id: str = Path(..., description="참조 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> DeleteByReferenceResponse:
    """참조 단위 삭제 (이체 참조는 400)

    이미 삭제된 참조는 deleted=0으로 성공.
    """
    try:
        deleted = await LedgerStore(db).delete_by_reference(ref_type, ref_id)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return DeleteByReferenceResponse(ref_type=ref_type, ref_id=ref_id, deleted=deleted)


@router.put("/ref/{ref_type}/{ref_id}", response_model=list[JournalEntryResponse])
async def replace_by_reference(
    request: ReferenceReplaceRequest,
    ref_type: str = Path(..., description="참조 종류 (expense, subscription 등)"),
    ref_id: str = Path(..., description="참조 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> list[JournalEntryResponse]:
    """참조 단위 교체 (기존 항목 삭제 + 재기록, 이체 참조는 400)"""
    drafts = [EntryDraft(**item.model_dump()) for item in request.entries]
    try:
        entries = await LedgerService(db).replace_by_reference(ref_type, ref_id, drafts)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return [JournalEntryResponse(**e.to_dict()) for e in entries]


@router.put("/expenses/{expense_id}", response_model=ExpenseSyncResponse)
async def sync_expense(
    request: ExpenseSyncRequest,
    expense_id: str = Path(..., description="지출 기록 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> ExpenseSyncResponse:
    """지출/수입을 결제수단 연결 계정 원장에 반영

    연결된 활성 계정이 없으면 기존 항목만 삭제하고 entry=null.
    """
    try:
        entry = await LedgerService(db).sync_expense(
            expense_id=expense_id,
            payment_method_key=request.payment_method_key,
            amount=request.amount,
            kind=request.kind,
            details=request.details,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return ExpenseSyncResponse(
        expense_id=expense_id,
        entry=JournalEntryResponse(**entry.to_dict()) if entry else None,
    )


@router.post("/recompute", response_model=RecomputeResponse)
async def recompute_all(
    db: SQLiteAdapter = Depends(get_db_write),
) -> RecomputeResponse:
    """전체 계정 잔액 재계산 (대사 불일치 복구)"""
    balances = await LedgerStore(db).recompute_all_balances()
    return RecomputeResponse(
        accounts=len(balances),
        balances={account_id: str(balance) for account_id, balance in balances.items()},
    )
