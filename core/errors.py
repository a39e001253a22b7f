"""
원장 예외 정의

호출자가 오류 종류별로 처리할 수 있도록 타입을 구분.
- ValidationError: 입력 형식 오류 (상태 변경 전 검출)
- NotFoundError: 참조 대상 없음
- InvalidStateError: 비즈니스 규칙 위반
- UnconvertibleError: 환율 없음 (확정 금액이 필요한 작업에서만 발생)
"""


class LedgerError(Exception):
    """원장 예외 기본 클래스"""
    pass


class ValidationError(LedgerError):
    """입력 값 검증 실패"""
    pass


class ImportValidationError(ValidationError):
    """일괄 가져오기 검증 실패

    첫 오류에서 중단하지 않고 모든 행의 오류를 수집하여 전달.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"Import rejected: {len(self.errors)} invalid row(s)")


class NotFoundError(LedgerError):
    """참조 대상 없음 (계정, 환율, 이체 등)"""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class InvalidStateError(LedgerError):
    """비즈니스 규칙 위반 (동일 계정 이체, 비활성 계정 등)"""
    pass


class AlreadyExistsError(InvalidStateError):
    """이미 존재하는 리소스 재생성 시도"""
    pass


class UnconvertibleError(LedgerError):
    """통화 쌍에 사용할 수 있는 환율이 없음"""

    def __init__(self, from_currency: str, to_currency: str):
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(f"No exchange rate for {from_currency} → {to_currency}")
