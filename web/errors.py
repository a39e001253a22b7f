"""
원장 예외 → HTTP 응답 변환

라우트에서 core 예외를 잡아 HTTPException으로 바꿀 때 사용.
"""

from fastapi import HTTPException

from core.errors import (
    AlreadyExistsError,
    ImportValidationError,
    LedgerError,
    NotFoundError,
    UnconvertibleError,
)


def to_http_exception(exc: LedgerError) -> HTTPException:
    """예외 종류별 상태 코드

    - NotFoundError: 404
    - AlreadyExistsError: 409
    - UnconvertibleError: 422
    - ImportValidationError: 400 (행별 오류 목록 포함)
    - 나머지 ValidationError / InvalidStateError: 400
    """
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, AlreadyExistsError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, UnconvertibleError):
        return HTTPException(
            status_code=422,
            detail={
                "message": str(exc),
                "missing_rate_pair": f"{exc.from_currency} → {exc.to_currency}",
            },
        )
    if isinstance(exc, ImportValidationError):
        return HTTPException(
            status_code=400,
            detail={"message": str(exc), "errors": exc.errors},
        )
    return HTTPException(status_code=400, detail=str(exc))
