"""
이체 처리기

계정 간 이체를 2~3건의 원장 항목으로 기록.
이체 행, 원장 항목, 잔액 갱신 전체가 하나의 트랜잭션 (BEGIN IMMEDIATE).
어느 단계든 실패하면 전부 롤백.

분개:
1. 출금 계정: transfer_out, -A
2. 입금 계정: transfer_in, +A×R
3. 수수료 F > 0: 출금 계정 expense, -F (ref_type=transfer_fee)
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import uuid4

from core.currency.resolver import normalize_currency
from core.domain.models import TRANSFER_COLUMNS, Transfer
from core.errors import (
    InvalidStateError,
    NotFoundError,
    UnconvertibleError,
    ValidationError,
)
from core.ledger.entry_builder import JournalEntryBuilder
from core.ledger.store import LedgerStore
from core.storage.account_store import AccountStore
from core.storage.exchange_rate_store import ExchangeRateStore
from core.storage.finance_settings_store import FinanceSettingsStore
from core.utils.money import parse_decimal, quantize_amount, quantize_rate
from core.utils.timezone import now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.domain.models import Account

logger = logging.getLogger(__name__)


class TransferProcessor:
    """이체 처리기

    Args:
        db: SQLite 어댑터
        settings_store: 재무 설정 저장소 (음수 잔액 허용 여부 조회)

    사용 예시:
    ```python
    processor = TransferProcessor(db)
    transfer = await processor.create_transfer(
        from_account_id=wallet.account_id,
        to_account_id=bank.account_id,
        amount=Decimal("100"),
        fee=Decimal("5"),
    )
    ```
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        settings_store: FinanceSettingsStore | None = None,
    ):
        self.db = db
        self.ledger = LedgerStore(db)
        self.accounts = AccountStore(db)
        self.rates = ExchangeRateStore(db)
        self.settings = settings_store or FinanceSettingsStore(db)

    async def create_transfer(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: Decimal | str,
        currency: str | None = None,
        fx_rate: Decimal | str | None = None,
        fee: Decimal | str | None = None,
        note: str | None = None,
    ) -> Transfer:
        """이체 실행

        모든 전제 조건은 쓰기 전에 확인.

        Args:
            from_account_id: 출금 계정
            to_account_id: 입금 계정
            amount: 이체 금액 (> 0)
            currency: 이체 통화 (생략 시 출금 계정 통화)
            fx_rate: 환율 (생략 시 두 계정 통화로 조회, 같은 통화면 1)
            fee: 수수료 (>= 0, 출금 계정 부담)
            note: 메모

        Raises:
            ValidationError: 금액/수수료/환율 형식 오류
            InvalidStateError: 동일 계정, 비활성 계정, 잔액 부족
            NotFoundError: 계정 없음
            UnconvertibleError: 환율 생략 + 두 통화 간 환율 없음
        """
        value = _positive_amount(amount, "amount")
        fee_value = _fee_amount(fee)
        rate_value = _explicit_rate(fx_rate)

        if from_account_id == to_account_id:
            raise InvalidStateError("Cannot transfer to the same account")

        async with self.db.transaction():
            source = await self._active_account(from_account_id)
            target = await self._active_account(to_account_id)

            if rate_value is None:
                rate_value = await self._resolve_rate(source, target)

            # 입금액(A×R) 범위 확인
            quantize_amount(value * rate_value)

            await self._check_funds(source, value + fee_value)

            transfer = Transfer(
                transfer_id=str(uuid4()),
                from_account_id=source.account_id,
                to_account_id=target.account_id,
                amount=value,
                currency=normalize_currency(currency) if currency else source.currency,
                fx_rate=rate_value,
                fee=fee_value,
                note=note,
                created_at=now_utc().isoformat(),
            )
            await self.db.execute(
                f"INSERT INTO transfer ({TRANSFER_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    transfer.transfer_id,
                    transfer.from_account_id,
                    transfer.to_account_id,
                    str(transfer.amount),
                    transfer.currency,
                    str(transfer.fx_rate),
                    str(transfer.fee),
                    transfer.note,
                    transfer.created_at,
                ),
            )
            await self.ledger.append_many(JournalEntryBuilder.transfer_legs(transfer))

        logger.info(
            "이체 완료",
            extra={
                "transfer_id": transfer.transfer_id,
                "from": transfer.from_account_id,
                "to": transfer.to_account_id,
                "amount": str(transfer.amount),
                "fx_rate": str(transfer.fx_rate),
                "fee": str(transfer.fee),
            },
        )
        return transfer

    async def get_transfer(self, transfer_id: str) -> Transfer | None:
        row = await self.db.fetchone(
            f"SELECT {TRANSFER_COLUMNS} FROM transfer WHERE transfer_id = ?",
            (transfer_id,),
        )
        return Transfer.from_row(row) if row else None

    async def list_transfers(
        self,
        account_id: str | None = None,
        since: datetime | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transfer]:
        """이체 목록 (최신순)

        Args:
            account_id: 출금/입금 어느 쪽이든 해당 계정인 이체만
            since: 이 시각 이후 생성된 이체만 (UTC)
            limit: 조회 개수 제한 (None이면 전체)
            offset: 시작 위치
        """
        conditions: list[str] = []
        params: list[object] = []
        if account_id:
            conditions.append("(from_account_id = ? OR to_account_id = ?)")
            params.extend([account_id, account_id])
        if since is not None:
            conditions.append("created_at >= ?")
            params.append(since.isoformat())

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = await self.db.fetchall(
            f"""
            SELECT {TRANSFER_COLUMNS} FROM transfer
            {where}
            ORDER BY created_at DESC
            LIMIT ? OFFSET ?
            """,
            (*params, -1 if limit is None else limit, offset),
        )
        return [Transfer.from_row(row) for row in rows]

    # -------------------------------------------------------------------------
    # 전제 조건
    # -------------------------------------------------------------------------

    async def _active_account(self, account_id: str) -> Account:
        account = await self.accounts.get_account(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        if not account.is_active:
            raise InvalidStateError(f"Account is inactive: {account.name}")
        return account

    async def _resolve_rate(self, source: Account, target: Account) -> Decimal:
        """출금/입금 계정 통화 간 환율 (같은 통화면 1)"""
        if source.currency == target.currency:
            return Decimal("1")

        table = await self.rates.load_table()
        rate = table.rate_between(source.currency, target.currency)
        if rate is None:
            raise UnconvertibleError(source.currency, target.currency)

        rate = quantize_rate(rate)
        if rate <= 0:
            raise UnconvertibleError(source.currency, target.currency)
        return rate

    async def _check_funds(self, source: Account, total_debit: Decimal) -> None:
        """음수 잔액 비허용 시 출금 후 잔액 확인"""
        settings = await self.settings.get()
        if settings.allow_negative_balances:
            return

        balance = await self.ledger.sum_entries(source.account_id)
        if balance - total_debit < 0:
            raise InvalidStateError(
                f"Insufficient funds in {source.name}: "
                f"balance {balance}, required {total_debit}"
            )


def _positive_amount(value: Decimal | str, field: str) -> Decimal:
    parsed = parse_decimal(value)
    if parsed is None:
        raise ValidationError(f"Invalid {field}: {value!r}")
    parsed = quantize_amount(parsed)
    if parsed <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    return parsed


def _fee_amount(value: Decimal | str | None) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    parsed = parse_decimal(value)
    if parsed is None:
        raise ValidationError(f"Invalid fee: {value!r}")
    if parsed < 0:
        raise ValidationError("fee must not be negative")
    return quantize_amount(parsed)


def _explicit_rate(value: Decimal | str | None) -> Decimal | None:
    if value is None or value == "":
        return None
    parsed = parse_decimal(value)
    if parsed is None:
        raise ValidationError(f"Invalid fx_rate: {value!r}")
    parsed = quantize_rate(parsed)
    if parsed <= 0:
        raise ValidationError("fx_rate must be greater than 0")
    return parsed
