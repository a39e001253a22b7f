"""
core/errors.py 테스트
"""

from core.errors import (
    AlreadyExistsError,
    ImportValidationError,
    InvalidStateError,
    LedgerError,
    NotFoundError,
    UnconvertibleError,
    ValidationError,
)


class TestErrors:
    def test_hierarchy(self) -> None:
        """모든 예외는 LedgerError 하위"""
        assert issubclass(ImportValidationError, ValidationError)
        assert issubclass(AlreadyExistsError, InvalidStateError)
        for exc in (ValidationError, NotFoundError, InvalidStateError, UnconvertibleError):
            assert issubclass(exc, LedgerError)

    def test_not_found_message(self) -> None:
        exc = NotFoundError("Account", "abc")
        assert str(exc) == "Account not found: abc"
        assert exc.kind == "Account"

    def test_unconvertible_message(self) -> None:
        exc = UnconvertibleError("EUR", "BDT")
        assert "EUR → BDT" in str(exc)

    def test_import_errors_collected(self) -> None:
        exc = ImportValidationError(["Row 1: Name is required", "Row 3: Currency is required"])
        assert len(exc.errors) == 2
        assert "2 invalid row(s)" in str(exc)
