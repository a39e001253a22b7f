"""
AccountStore - 자금 계정 저장소

계정 생성(기초 잔액 분개 포함), 조회, 수정, 삭제, 일괄 import.
current_balance는 직접 쓰지 않고 LedgerStore 재계산으로만 갱신.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.currency.resolver import normalize_currency
from core.domain.models import ACCOUNT_COLUMNS, Account
from core.errors import (
    ImportValidationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from core.ledger.entry_builder import JournalEntryBuilder
from core.ledger.store import LedgerStore
from core.storage.payment_method_store import PaymentMethodStore
from core.types import AccountStatus, AccountType
from core.utils.money import parse_decimal, quantize_amount
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)

ACCOUNT_TYPES = [t.value for t in AccountType]
ACCOUNT_STATUSES = [s.value for s in AccountStatus]


@dataclass
class AccountDraft:
    """검증을 통과한 계정 생성 입력"""

    name: str
    account_type: str
    currency: str
    opening_balance: Decimal
    status: str = AccountStatus.ACTIVE.value
    payment_method_key: str | None = None
    color: str | None = None


class AccountStore:
    """자금 계정 저장소

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    store = AccountStore(db)
    account = await store.create_account("Wallet", "cash", "BDT", Decimal("500"))
    assert account.current_balance == Decimal("500.00")
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.ledger = LedgerStore(db)
        self.payment_methods = PaymentMethodStore(db)

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get_account(self, account_id: str) -> Account | None:
        row = await self.db.fetchone(
            f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE account_id = ?",
            (account_id,),
        )
        return Account.from_row(row) if row else None

    async def require_account(self, account_id: str) -> Account:
        """계정 조회 (없으면 NotFoundError)"""
        account = await self.get_account(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    async def list_accounts(self, status: str | None = None) -> list[Account]:
        """계정 목록 (이름순)

        Args:
            status: 상태 필터 (active / archived)
        """
        if status:
            rows = await self.db.fetchall(
                f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE status = ? ORDER BY name",
                (status,),
            )
        else:
            rows = await self.db.fetchall(
                f"SELECT {ACCOUNT_COLUMNS} FROM account ORDER BY name"
            )
        return [Account.from_row(row) for row in rows]

    async def list_by_payment_method(self, payment_method_key: str) -> list[Account]:
        """결제수단에 연결된 활성 계정 (이름순)"""
        key = normalize_payment_key(payment_method_key)
        if key is None:
            return []
        rows = await self.db.fetchall(
            f"""
            SELECT {ACCOUNT_COLUMNS} FROM account
            WHERE payment_method_key = ? AND status = ?
            ORDER BY name
            """,
            (key, AccountStatus.ACTIVE.value),
        )
        return [Account.from_row(row) for row in rows]

    async def has_transfers(self, account_id: str) -> bool:
        row = await self.db.fetchone(
            """
            SELECT 1 FROM transfer
            WHERE from_account_id = ? OR to_account_id = ?
            LIMIT 1
            """,
            (account_id, account_id),
        )
        return row is not None

    # -------------------------------------------------------------------------
    # 쓰기
    # -------------------------------------------------------------------------

    async def create_account(
        self,
        name: str,
        account_type: str,
        currency: str,
        opening_balance: Decimal | str | int = Decimal("0"),
        payment_method_key: str | None = None,
        status: str = AccountStatus.ACTIVE.value,
        color: str | None = None,
    ) -> Account:
        """계정 생성

        기초 잔액이 0이 아니면 opening_balance 분개를 기록하고
        같은 트랜잭션에서 잔액 재계산.

        Raises:
            ValidationError: 입력 형식 오류 또는 미등록 결제수단
        """
        errors = _validate_fields(
            name, account_type, currency, opening_balance, status,
        )
        if errors:
            raise ValidationError("; ".join(errors))

        draft = _to_draft(
            name, account_type, currency, opening_balance,
            status, payment_method_key, color,
        )

        async with self.db.transaction():
            if draft.payment_method_key and not await self.payment_methods.exists(
                draft.payment_method_key
            ):
                raise ValidationError(
                    f"Unknown payment method key: {draft.payment_method_key}"
                )
            account = await self._insert(draft)

        logger.info(
            "계정 생성",
            extra={
                "account_id": account.account_id,
                "currency": account.currency,
                "opening_balance": str(account.opening_balance),
            },
        )
        return account

    async def import_accounts(self, rows: list[Mapping[str, Any]]) -> list[Account]:
        """계정 일괄 import

        모든 행을 먼저 검증하고, 하나라도 오류가 있으면 아무것도 쓰지 않음.
        오류 메시지는 1부터 시작하는 행 번호 포함 ("Row 2: ...").
        검증을 통과하면 전체를 한 트랜잭션으로 생성.

        행 키: name, account_type(또는 type), currency, opening_balance,
        payment_method_key, status, color

        Raises:
            ImportValidationError: 검증 실패 (모든 행 오류 포함)
        """
        if not rows:
            raise ImportValidationError(["No rows to import"])

        known_keys = await self.payment_methods.list_keys()
        errors: list[str] = []
        drafts: list[AccountDraft] = []

        for index, row in enumerate(rows, start=1):
            name = row.get("name")
            account_type = row.get("account_type", row.get("type"))
            currency = row.get("currency")
            opening_balance = row.get("opening_balance", "0")
            status = row.get("status") or AccountStatus.ACTIVE.value
            payment_method_key = normalize_payment_key(row.get("payment_method_key"))
            color = row.get("color") or None

            row_errors = _validate_fields(
                name, account_type, currency, opening_balance, status,
            )
            if payment_method_key and payment_method_key not in known_keys:
                row_errors.append(f"Unknown payment method key \"{payment_method_key}\"")

            if row_errors:
                errors.extend(f"Row {index}: {message}" for message in row_errors)
                continue

            drafts.append(_to_draft(
                name, account_type, currency, opening_balance,
                status, payment_method_key, color,
            ))

        if errors:
            logger.warning(
                "계정 import 거부",
                extra={"rows": len(rows), "errors": len(errors)},
            )
            raise ImportValidationError(errors)

        async with self.db.transaction():
            created = [await self._insert(draft) for draft in drafts]

        logger.info(f"계정 {len(created)}건 import 완료")
        return created

    async def update_account(
        self,
        account_id: str,
        name: str | None = None,
        account_type: str | None = None,
        currency: str | None = None,
        status: str | None = None,
        payment_method_key: str | None = None,
        color: str | None = None,
    ) -> Account:
        """계정 속성 수정 (지정한 필드만)

        잔액/기초 잔액은 수정 불가 (원장 기록으로만 변경).
        원장 항목이 있는 계정의 통화 변경은 거부.

        Raises:
            NotFoundError: 계정 없음
            ValidationError: 입력 형식 오류
            InvalidStateError: 원장 항목이 있는 계정의 통화 변경
        """
        async with self.db.transaction():
            account = await self.require_account(account_id)

            if name is not None:
                if not name.strip():
                    raise ValidationError("Account name must not be empty")
                account.name = name.strip()
            if account_type is not None:
                if account_type not in ACCOUNT_TYPES:
                    raise ValidationError(f"Invalid account type \"{account_type}\"")
                account.account_type = AccountType(account_type).value
            if currency is not None:
                new_currency = normalize_currency(currency)
                if not new_currency:
                    raise ValidationError("Currency must not be empty")
                if new_currency != account.currency and await self.ledger.has_entries(account_id):
                    raise InvalidStateError(
                        "Cannot change currency of an account with journal entries"
                    )
                account.currency = new_currency
            if status is not None:
                if status not in ACCOUNT_STATUSES:
                    raise ValidationError(f"Invalid status \"{status}\"")
                account.status = AccountStatus(status).value
            if payment_method_key is not None:
                key = normalize_payment_key(payment_method_key)
                if key and not await self.payment_methods.exists(key):
                    raise ValidationError(f"Unknown payment method key: {key}")
                account.payment_method_key = key
            if color is not None:
                account.color = color or None

            account.updated_at = now_utc().isoformat()
            await self.db.execute(
                """
                UPDATE account
                SET name = ?, account_type = ?, currency = ?, status = ?,
                    payment_method_key = ?, color = ?, updated_at = ?
                WHERE account_id = ?
                """,
                (
                    account.name,
                    account.account_type,
                    account.currency,
                    account.status,
                    account.payment_method_key,
                    account.color,
                    account.updated_at,
                    account_id,
                ),
            )

        logger.info("계정 수정", extra={"account_id": account_id})
        return account

    async def delete_account(self, account_id: str) -> None:
        """계정 삭제

        원장 항목이나 이체 기록이 있는 계정은 삭제 불가 (보관 처리 권장).

        Raises:
            NotFoundError: 계정 없음
            InvalidStateError: 관련 기록 존재
        """
        async with self.db.transaction():
            await self.require_account(account_id)
            if await self.ledger.has_entries(account_id) or await self.has_transfers(account_id):
                raise InvalidStateError(
                    "Cannot delete account with existing transactions. "
                    "Please delete all related transactions first."
                )
            await self.db.execute(
                "DELETE FROM account WHERE account_id = ?",
                (account_id,),
            )

        logger.info("계정 삭제", extra={"account_id": account_id})

    async def _insert(self, draft: AccountDraft) -> Account:
        """계정 INSERT + 기초 잔액 분개 (트랜잭션 내부 전용)"""
        now = now_utc().isoformat()
        account = Account(
            account_id=str(uuid4()),
            name=draft.name,
            account_type=draft.account_type,
            currency=draft.currency,
            opening_balance=draft.opening_balance,
            current_balance=Decimal("0.00"),
            status=draft.status,
            payment_method_key=draft.payment_method_key,
            color=draft.color,
            created_at=now,
            updated_at=now,
        )
        await self.db.execute(
            f"""
            INSERT INTO account ({ACCOUNT_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                account.account_id,
                account.name,
                account.account_type,
                account.currency,
                str(account.opening_balance),
                str(account.current_balance),
                account.payment_method_key,
                account.color,
                account.status,
                account.created_at,
                account.updated_at,
            ),
        )

        entry = JournalEntryBuilder.opening_balance(account)
        if entry is not None:
            await self.ledger.append(entry)
            account.current_balance = await self.ledger.sum_entries(account.account_id)

        return account


def _validate_fields(
    name: Any,
    account_type: Any,
    currency: Any,
    opening_balance: Any,
    status: Any,
) -> list[str]:
    """계정 필드 검증 (오류 메시지 목록, 없으면 빈 목록)"""
    errors: list[str] = []
    if not isinstance(name, str) or not name.strip():
        errors.append("Name is required")
    if account_type not in ACCOUNT_TYPES:
        errors.append(
            f"Invalid account type \"{account_type}\". "
            f"Must be one of: {', '.join(ACCOUNT_TYPES)}"
        )
    if not isinstance(currency, str) or not currency.strip():
        errors.append("Currency is required")
    if parse_decimal(opening_balance) is None:
        errors.append("Opening balance must be a valid number")
    if status not in ACCOUNT_STATUSES:
        errors.append(
            f"Invalid status \"{status}\". "
            f"Must be one of: {', '.join(ACCOUNT_STATUSES)}"
        )
    return errors


def _to_draft(
    name: str,
    account_type: str,
    currency: str,
    opening_balance: Any,
    status: str,
    payment_method_key: Any,
    color: str | None,
) -> AccountDraft:
    return AccountDraft(
        name=name.strip(),
        account_type=AccountType(account_type).value,
        currency=normalize_currency(currency),
        opening_balance=quantize_amount(parse_decimal(opening_balance)),
        status=AccountStatus(status).value,
        payment_method_key=normalize_payment_key(payment_method_key),
        color=color,
    )


def normalize_payment_key(value: Any) -> str | None:
    """결제수단 키 정규화 (JSON 숫자 키 허용, 빈 값은 None)"""
    if value is None:
        return None
    return str(value).strip() or None
