"""
결제수단 라우트

계정 import 검증에 쓰이는 결제수단 레지스트리
"""

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import LedgerError
from core.storage.payment_method_store import PaymentMethodStore
from web.dependencies import get_db, get_db_write
from web.errors import to_http_exception
from web.models.requests import PaymentMethodCreateRequest
from web.models.responses import PaymentMethodResponse

router = APIRouter(prefix="/api/payment-methods", tags=["Payment Methods"])


@router.get("", response_model=list[PaymentMethodResponse])
async def list_payment_methods(
    db: SQLiteAdapter = Depends(get_db),
) -> list[PaymentMethodResponse]:
    methods = await PaymentMethodStore(db).list_methods()
    return [PaymentMethodResponse(**m) for m in methods]


@router.post("", response_model=PaymentMethodResponse, status_code=201)
async def create_payment_method(
    request: PaymentMethodCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> PaymentMethodResponse:
    """결제수단 등록 (같은 key가 있으면 409)"""
    try:
        method = await PaymentMethodStore(db).create(request.key, request.name)
    except LedgerError as e:
        raise to_http_exception(e) from e

    return PaymentMethodResponse(**method)
