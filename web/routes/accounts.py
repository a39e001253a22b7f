"""
계정 라우트

자금 계정 조회/생성/수정/삭제 및 일괄 import API
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import LedgerError
from core.storage.account_store import AccountStore
from web.dependencies import get_db, get_db_write
from web.errors import to_http_exception
from web.models.requests import (
    AccountCreateRequest,
    AccountImportRequest,
    AccountUpdateRequest,
)
from web.models.responses import AccountImportResponse, AccountResponse

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    status: str | None = Query(default=None, description="active / archived"),
    payment_method_key: str | None = Query(default=None, description="결제수단 연결 활성 계정만"),
    db: SQLiteAdapter = Depends(get_db),
) -> list[AccountResponse]:
    """계정 목록 (이름순)"""
    store = AccountStore(db)
    if payment_method_key:
        accounts = await store.list_by_payment_method(payment_method_key)
    else:
        accounts = await store.list_accounts(status=status)
    return [AccountResponse(**a.to_dict()) for a in accounts]


@router.post("/import", response_model=AccountImportResponse, status_code=201)
async def import_accounts(
    request: AccountImportRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> AccountImportResponse:
    """계정 일괄 import

    한 행이라도 오류가 있으면 아무것도 생성하지 않고
    400 + 행별 오류 목록 반환.
    """
    try:
        created = await AccountStore(db).import_accounts(request.rows)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return AccountImportResponse(
        created=len(created),
        accounts=[AccountResponse(**a.to_dict()) for a in created],
    )


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str = Path(..., description="계정 ID"),
    db: SQLiteAdapter = Depends(get_db),
) -> AccountResponse:
    """계정 조회"""
    account = await AccountStore(db).get_account(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail=f"Account not found: {account_id}")
    return AccountResponse(**account.to_dict())


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> AccountResponse:
    """계정 생성 (기초 잔액이 있으면 opening_balance 분개 기록)"""
    try:
        account = await AccountStore(db).create_account(
            name=request.name,
            account_type=request.account_type,
            currency=request.currency,
            opening_balance=request.opening_balance,
            payment_method_key=request.payment_method_key,
            status=request.status,
            color=request.color,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return AccountResponse(**account.to_dict())


@router.put("/{account_id}", response_model=AccountResponse)
async def update_account(
    request: AccountUpdateRequest,
    account_id: str = Path(..., description="계정 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> AccountResponse:
    """계정 속성 수정 (잔액은 수정 불가)"""
    try:
        account = await AccountStore(db).update_account(
            account_id,
            **request.model_dump(exclude_unset=True),
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return AccountResponse(**account.to_dict())


@router.delete("/{account_id}")
async def delete_account(
    account_id: str = Path(..., description="계정 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, str]:
    """계정 삭제 (원장/이체 기록이 있으면 400)"""
    try:
        await AccountStore(db).delete_account(account_id)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return {"message": f"Account deleted: {account_id}"}
