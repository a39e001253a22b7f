"""
원장 기록 서비스

외부 모듈(지출, 구독, 투자 등)이 원장 항목을 남길 때 사용하는 진입점.
LedgerStore와 달리 입력 검증과 계정 존재 확인을 수행.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from core.currency.resolver import normalize_currency
from core.errors import InvalidStateError, ValidationError
from core.ledger.entry_builder import JournalEntry, JournalEntryBuilder
from core.ledger.store import LedgerStore
from core.ledger.types import PROTECTED_REF_TYPES, RefType, TransactionType
from core.storage.account_store import AccountStore, normalize_payment_key
from core.utils.money import parse_decimal, quantize_amount, quantize_rate

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = [t.value for t in TransactionType]

# 지출 기록 종류 → 원장 거래 유형 (부호: expense -, income +)
EXPENSE_KINDS = {
    "expense": TransactionType.EXPENSE,
    "income": TransactionType.INCOME,
}


@dataclass
class EntryDraft:
    """참조 교체용 항목 입력 (currency/fx_rate 생략 시 계정 통화, 1)"""

    account_id: str
    tx_type: str
    amount: Decimal | str
    currency: str | None = None
    fx_rate: Decimal | str | None = None
    note: str | None = None


@dataclass
class _CheckedDraft:
    account_id: str
    tx_type: str
    amount: Decimal
    currency: str | None
    fx_rate: Decimal
    note: str | None


class LedgerService:
    """원장 기록 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.ledger = LedgerStore(db)
        self.accounts = AccountStore(db)

    async def post_journal_entry(
        self,
        account_id: str,
        tx_type: str,
        amount: Decimal | str,
        currency: str | None = None,
        fx_rate: Decimal | str | None = None,
        ref_type: str | None = None,
        ref_id: str | None = None,
        note: str | None = None,
    ) -> JournalEntry:
        """원장 항목 기록

        amount_base = amount × fx_rate. 통화를 생략하면 계정 통화.

        Raises:
            ValidationError: tx_type/금액/환율 형식 오류
            NotFoundError: 계정 없음
        """
        draft = _check_draft(EntryDraft(account_id, tx_type, amount, currency, fx_rate, note))

        if (ref_type is None) != (ref_id is None):
            raise ValidationError("ref_type and ref_id must be given together")

        async with self.db.transaction():
            entry = await self._build(draft, ref_type, ref_id)
            await self.ledger.append(entry)

        return entry

    async def delete_by_reference(self, ref_type: str, ref_id: str) -> int:
        """참조 단위 삭제 (LedgerStore 위임)"""
        return await self.ledger.delete_by_reference(ref_type, ref_id)

    async def replace_by_reference(
        self,
        ref_type: str,
        ref_id: str,
        drafts: list[EntryDraft],
    ) -> list[JournalEntry]:
        """참조 단위 교체

        기존 (ref_type, ref_id) 항목을 모두 지우고 drafts로 다시 기록.
        빈 목록이면 삭제만 수행. 영향받은 계정 잔액은 같은 트랜잭션에서 재계산.

        Raises:
            ValidationError: 참조 또는 항목 형식 오류
            InvalidStateError: 이체 참조
            NotFoundError: 계정 없음
        """
        if not ref_type or not ref_id:
            raise ValidationError("ref_type and ref_id are required")
        if ref_type in PROTECTED_REF_TYPES:
            raise InvalidStateError(f"Entries with ref_type '{ref_type}' cannot be replaced")

        checked = [_check_draft(draft) for draft in drafts]

        async with self.db.transaction():
            entries = [await self._build(draft, ref_type, ref_id) for draft in checked]
            return await self.ledger.replace_by_reference(ref_type, ref_id, entries)

    async def sync_expense(
        self,
        expense_id: str,
        payment_method_key: str | None,
        amount: Decimal | str,
        kind: str = "expense",
        details: str | None = None,
    ) -> JournalEntry | None:
        """지출/수입 기록을 결제수단 연결 계정 원장에 반영

        ref (expense, expense_id) 항목을 교체한다. 결제수단에 연결된
        활성 계정 중 이름순 첫 계정에 expense는 -amount, income은 +amount를
        계정 통화로 기록. 연결 계정이 없으면 기존 항목만 지우고 None 반환.

        Raises:
            ValidationError: kind 또는 금액 형식 오류
        """
        tx_type = EXPENSE_KINDS.get(kind)
        if tx_type is None:
            raise ValidationError(
                f"Invalid kind \"{kind}\". Must be one of: {', '.join(EXPENSE_KINDS)}"
            )
        value = parse_decimal(amount)
        if value is None or value <= 0:
            raise ValidationError(f"amount must be a positive number: {amount!r}")
        value = quantize_amount(value)
        signed = value if tx_type == TransactionType.INCOME else -value

        key = normalize_payment_key(payment_method_key)
        ref = RefType.EXPENSE.value

        async with self.db.transaction():
            linked = await self.accounts.list_by_payment_method(key) if key else []
            if not linked:
                await self.ledger.delete_by_reference(ref, expense_id)
                logger.debug(f"결제수단 연결 계정 없음: {key} (expense={expense_id})")
                return None

            account = linked[0]
            entry = JournalEntryBuilder.entry(
                account_id=account.account_id,
                tx_type=tx_type,
                amount=signed,
                currency=account.currency,
                ref_type=ref,
                ref_id=expense_id,
                note=f"{kind}: {details}" if details else kind,
            )
            await self.ledger.replace_by_reference(ref, expense_id, [entry])

        logger.info(
            "지출 원장 반영",
            extra={
                "expense_id": expense_id,
                "account_id": account.account_id,
                "amount": str(signed),
            },
        )
        return entry

    async def _build(
        self,
        draft: _CheckedDraft,
        ref_type: str | None,
        ref_id: str | None,
    ) -> JournalEntry:
        """계정 확인 후 항목 생성 (트랜잭션 내부 전용)"""
        account = await self.accounts.require_account(draft.account_id)
        return JournalEntryBuilder.entry(
            account_id=account.account_id,
            tx_type=draft.tx_type,
            amount=draft.amount,
            currency=normalize_currency(draft.currency) if draft.currency else account.currency,
            fx_rate=draft.fx_rate,
            ref_type=ref_type,
            ref_id=ref_id,
            note=draft.note,
        )


def _check_draft(draft: EntryDraft) -> _CheckedDraft:
    """형식 검증 (DB 접근 없음)"""
    if draft.tx_type not in TRANSACTION_TYPES:
        raise ValidationError(
            f"Invalid tx_type \"{draft.tx_type}\". Must be one of: {', '.join(TRANSACTION_TYPES)}"
        )

    value = parse_decimal(draft.amount)
    if value is None:
        raise ValidationError(f"Invalid amount: {draft.amount!r}")

    rate = Decimal("1") if draft.fx_rate is None else parse_decimal(draft.fx_rate)
    if rate is None or quantize_rate(rate) <= 0:
        raise ValidationError(f"fx_rate must be a positive number: {draft.fx_rate!r}")

    # amount_base 범위 확인
    quantize_amount(value * rate)

    return _CheckedDraft(
        account_id=draft.account_id,
        tx_type=draft.tx_type,
        amount=value,
        currency=draft.currency,
        fx_rate=rate,
        note=draft.note,
    )
