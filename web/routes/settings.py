"""
재무 설정 라우트

기준 통화, 음수 잔액 허용 여부 조회 및 변경 API
"""

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.errors import LedgerError
from web.dependencies import finance_settings_store, get_app_settings, get_db_write
from web.errors import to_http_exception
from web.models.requests import FinanceSettingsRequest
from web.models.responses import FinanceSettingsResponse

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("/finance", response_model=FinanceSettingsResponse)
async def get_finance_settings(
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> FinanceSettingsResponse:
    """재무 설정 조회 (없으면 기본값으로 생성)"""
    current = await finance_settings_store(db, settings).get()
    return FinanceSettingsResponse(**current.to_dict())


@router.post("/finance", response_model=FinanceSettingsResponse, status_code=201)
async def create_finance_settings(
    request: FinanceSettingsRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> FinanceSettingsResponse:
    """재무 설정 생성 (이미 있으면 409)"""
    try:
        created = await finance_settings_store(db, settings).create(
            base_currency=request.base_currency,
            allow_negative_balances=request.allow_negative_balances,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return FinanceSettingsResponse(**created.to_dict())


@router.put("/finance", response_model=FinanceSettingsResponse)
async def update_finance_settings(
    request: FinanceSettingsRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> FinanceSettingsResponse:
    """재무 설정 수정 (지정한 필드만)"""
    try:
        updated = await finance_settings_store(db, settings).update(
            base_currency=request.base_currency,
            allow_negative_balances=request.allow_negative_balances,
        )
    except LedgerError as e:
        raise to_http_exception(e) from e

    return FinanceSettingsResponse(**updated.to_dict())
