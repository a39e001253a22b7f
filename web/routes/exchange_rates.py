"""
환율 라우트

통화 쌍 환율 CRUD 및 환산 API.
경로 순서 주의: /convert, /id/{rate_id}를 /{from}/{to}보다 먼저 등록.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.currency.resolver import normalize_currency
from core.errors import LedgerError
from core.storage.exchange_rate_store import ExchangeRateStore
from web.dependencies import get_db, get_db_write
from web.errors import to_http_exception
from web.models.requests import (
    ExchangeRateCreateRequest,
    ExchangeRateUpdateRequest,
    ExchangeRateUpsertRequest,
)
from web.models.responses import ConversionResponse, ExchangeRateResponse

router = APIRouter(prefix="/api/exchange-rates", tags=["Exchange Rates"])


@router.get("", response_model=list[ExchangeRateResponse])
async def list_rates(
    db: SQLiteAdapter = Depends(get_db),
) -> list[ExchangeRateResponse]:
    """환율 목록"""
    rates = await ExchangeRateStore(db).list_rates()
    return [ExchangeRateResponse(**r.to_dict()) for r in rates]


@router.get("/convert", response_model=ConversionResponse)
async def convert_amount(
    amount: Decimal = Query(..., description="환산할 금액"),
    from_currency: str = Query(..., alias="from"),
    to_currency: str = Query(..., alias="to"),
    db: SQLiteAdapter = Depends(get_db),
) -> ConversionResponse:
    """금액 환산 (직접 → 역환율, 없으면 convertible=false)"""
    table = await ExchangeRateStore(db).load_table()
    converted = table.convert(amount, from_currency, to_currency)
    rate = table.rate_between(from_currency, to_currency)

    return ConversionResponse(
        amount=str(amount),
        from_currency=normalize_currency(from_currency),
        to_currency=normalize_currency(to_currency),
        convertible=converted is not None,
        converted=str(converted) if converted is not None else None,
        rate=str(rate) if rate is not None else None,
    )


@router.post("", response_model=ExchangeRateResponse, status_code=201)
async def create_rate(
    request: ExchangeRateCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> ExchangeRateResponse:
    """환율 생성 (같은 순서쌍이 있으면 409)"""
    try:
        rate = await ExchangeRateStore(db).create_rate(
            request.from_currency,
            request.to_currency,
            request.rate,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return ExchangeRateResponse(**rate.to_dict())


@router.put("/id/{rate_id}", response_model=ExchangeRateResponse)
async def update_rate(
    request: ExchangeRateUpdateRequest,
    rate_id: str = Path(..., description="환율 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> ExchangeRateResponse:
    """ID로 환율 수정"""
    try:
        rate = await ExchangeRateStore(db).update_rate(
            rate_id,
            rate=request.rate,
            from_currency=request.from_currency,
            to_currency=request.to_currency,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return ExchangeRateResponse(**rate.to_dict())


@router.delete("/id/{rate_id}")
async def delete_rate(
    rate_id: str = Path(..., description="환율 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, str]:
    """ID로 환율 삭제"""
    try:
        await ExchangeRateStore(db).delete_rate(rate_id)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return {"message": f"Exchange rate deleted: {rate_id}"}


@router.get("/{from_currency}/{to_currency}", response_model=ExchangeRateResponse)
async def get_rate(
    from_currency: str = Path(..., description="원 통화"),
    to_currency: str = Path(..., description="대상 통화"),
    db: SQLiteAdapter = Depends(get_db),
) -> ExchangeRateResponse:
    """순서쌍 환율 조회 (역방향 탐색 없음)"""
    rate = await ExchangeRateStore(db).get_rate(from_currency, to_currency)
    if rate is None:
        raise HTTPException(
            status_code=404,
            detail=f"Exchange rate not found: {from_currency} → {to_currency}",
        )
    return ExchangeRateResponse(**rate.to_dict())


@router.put("/{from_currency}/{to_currency}", response_model=ExchangeRateResponse)
async def upsert_rate(
    request: ExchangeRateUpsertRequest,
    from_currency: str = Path(..., description="원 통화"),
    to_currency: str = Path(..., description="대상 통화"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> ExchangeRateResponse:
    """순서쌍 환율 저장 (없으면 생성, 있으면 갱신)"""
    try:
        rate = await ExchangeRateStore(db).upsert_rate(
            from_currency,
            to_currency,
            request.rate,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return ExchangeRateResponse(**rate.to_dict())
