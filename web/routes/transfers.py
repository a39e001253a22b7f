"""
이체 API 라우터

계정 간 이체 조회 및 실행.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.errors import LedgerError
from core.ledger.transfer import TransferProcessor
from web.dependencies import (
    finance_settings_store,
    get_app_settings,
    get_db,
    get_db_write,
)
from web.errors import to_http_exception
from web.models.requests import TransferCreateRequest
from web.models.responses import TransferResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transfers", tags=["Transfers"])


@router.get("", response_model=list[TransferResponse])
async def list_transfers(
    account_id: str | None = Query(default=None, description="출금/입금 계정 필터"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: SQLiteAdapter = Depends(get_db),
) -> list[TransferResponse]:
    """이체 목록 (최신순)"""
    transfers = await TransferProcessor(db).list_transfers(
        account_id=account_id,
        limit=limit,
        offset=offset,
    )
    return [TransferResponse(**t.to_dict()) for t in transfers]


@router.get("/{transfer_id}", response_model=TransferResponse)
async def get_transfer(
    transfer_id: str = Path(..., description="이체 ID"),
    db: SQLiteAdapter = Depends(get_db),
) -> TransferResponse:
    """이체 조회"""
    transfer = await TransferProcessor(db).get_transfer(transfer_id)
    if transfer is None:
        raise HTTPException(status_code=404, detail=f"Transfer not found: {transfer_id}")
    return TransferResponse(**transfer.to_dict())


@router.post("", response_model=TransferResponse, status_code=201)
async def create_transfer(
    request: TransferCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> TransferResponse:
    """이체 실행

    - 400: 형식 오류, 동일 계정, 비활성 계정, 잔액 부족
    - 404: 계정 없음
    - 422: 환율 생략 + 통화 간 환율 없음
    """
    processor = TransferProcessor(db, finance_settings_store(db, settings))
    try:
        transfer = await processor.create_transfer(
            from_account_id=request.from_account_id,
            to_account_id=request.to_account_id,
            amount=request.amount,
            currency=request.currency,
            fx_rate=request.fx_rate,
            fee=request.fee,
            note=request.note,
        )
    except LedgerError as e:
        logger.info(f"이체 거부: {e}")
        raise to_http_exception(e) from e
    except Exception as e:
        logger.error(f"Failed to create transfer: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return TransferResponse(**transfer.to_dict())
