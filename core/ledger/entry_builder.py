"""
분개 생성기

비즈니스 이벤트(계정 개설, 이체, 수동 기록)를 원장 항목으로 변환.
금액은 0.01, 환율은 0.000001 정밀도로 맞춘 뒤 생성.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from core.ledger.types import RefType, TransactionType
from core.utils.money import quantize_amount, quantize_rate
from core.utils.timezone import now_utc, parse_ts

if TYPE_CHECKING:
    from core.domain.models import Account, Transfer

logger = logging.getLogger(__name__)


JOURNAL_ENTRY_COLUMNS = (
    "entry_id, account_id, tx_type, amount, currency, fx_rate, "
    "amount_base, ref_type, ref_id, note, created_at"
)


@dataclass
class JournalEntry:
    """원장 항목

    부호 있는 금액 1건. 생성 후 변경하지 않음.
    정정은 참조 단위 삭제 후 재기록.
    """

    account_id: str
    tx_type: str
    amount: Decimal
    currency: str
    fx_rate: Decimal = Decimal("1")
    amount_base: Decimal | None = None
    ref_type: str | None = None
    ref_id: str | None = None
    note: str | None = None
    entry_id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=now_utc)

    def __post_init__(self) -> None:
        if self.amount_base is None:
            self.amount_base = quantize_amount(self.amount * self.fx_rate)

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> JournalEntry:
        return cls(
            entry_id=row[0],
            account_id=row[1],
            tx_type=row[2],
            amount=Decimal(row[3]),
            currency=row[4],
            fx_rate=Decimal(row[5]),
            amount_base=Decimal(row[6]),
            ref_type=row[7],
            ref_id=row[8],
            note=row[9],
            created_at=parse_ts(row[10]),
        )

    def to_row(self) -> tuple[Any, ...]:
        """INSERT 파라미터 (JOURNAL_ENTRY_COLUMNS 순서)"""
        return (
            self.entry_id,
            self.account_id,
            self.tx_type,
            str(self.amount),
            self.currency,
            str(self.fx_rate),
            str(self.amount_base),
            self.ref_type,
            self.ref_id,
            self.note,
            self.created_at.isoformat(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "account_id": self.account_id,
            "tx_type": self.tx_type,
            "amount": str(self.amount),
            "currency": self.currency,
            "fx_rate": str(self.fx_rate),
            "amount_base": str(self.amount_base),
            "ref_type": self.ref_type,
            "ref_id": self.ref_id,
            "note": self.note,
            "created_at": self.created_at.isoformat(),
        }


class JournalEntryBuilder:
    """비즈니스 이벤트를 원장 항목으로 변환

    상태 없음. DB 접근 없이 항목 목록만 생성하고
    저장/잔액 재계산은 LedgerStore가 담당.
    """

    @staticmethod
    def entry(
        account_id: str,
        tx_type: TransactionType | str,
        amount: Decimal,
        currency: str,
        fx_rate: Decimal = Decimal("1"),
        ref_type: RefType | str | None = None,
        ref_id: str | None = None,
        note: str | None = None,
        amount_base: Decimal | None = None,
    ) -> JournalEntry:
        """단일 항목 생성

        amount_base 생략 시 amount × fx_rate.
        """
        amount = quantize_amount(amount)
        fx_rate = quantize_rate(fx_rate)
        base = amount * fx_rate if amount_base is None else amount_base
        return JournalEntry(
            account_id=account_id,
            tx_type=TransactionType(tx_type).value,
            amount=amount,
            currency=currency,
            fx_rate=fx_rate,
            amount_base=quantize_amount(base),
            ref_type=RefType(ref_type).value if isinstance(ref_type, RefType) else ref_type,
            ref_id=ref_id,
            note=note,
        )

    @classmethod
    def opening_balance(cls, account: Account) -> JournalEntry | None:
        """계정 개설 기초 잔액 항목

        기초 잔액이 0이면 항목을 만들지 않음.
        ref = (opening_balance, account_id)
        """
        if account.opening_balance == 0:
            return None

        return cls.entry(
            account_id=account.account_id,
            tx_type=TransactionType.OPENING_BALANCE,
            amount=account.opening_balance,
            currency=account.currency,
            ref_type=RefType.OPENING_BALANCE,
            ref_id=account.account_id,
            note="Opening balance",
        )

    @classmethod
    def transfer_legs(cls, transfer: Transfer) -> list[JournalEntry]:
        """이체 분개 (2~3건)

        1. 출금 계정: transfer_out, -A (amount_base = -A)
        2. 입금 계정: transfer_in, +A×R (amount_base = +A×R)
        3. 수수료 > 0: 출금 계정 expense, -F (ref_type=transfer_fee)

        모든 항목의 통화는 이체 통화 C, fx_rate는 이체 환율 R.
        """
        credited = transfer.amount * transfer.fx_rate
        legs = [
            cls.entry(
                account_id=transfer.from_account_id,
                tx_type=TransactionType.TRANSFER_OUT,
                amount=-transfer.amount,
                currency=transfer.currency,
                fx_rate=transfer.fx_rate,
                amount_base=-transfer.amount,
                ref_type=RefType.TRANSFER,
                ref_id=transfer.transfer_id,
                note=transfer.note,
            ),
            cls.entry(
                account_id=transfer.to_account_id,
                tx_type=TransactionType.TRANSFER_IN,
                amount=credited,
                currency=transfer.currency,
                fx_rate=transfer.fx_rate,
                amount_base=credited,
                ref_type=RefType.TRANSFER,
                ref_id=transfer.transfer_id,
                note=transfer.note,
            ),
        ]

        if transfer.fee > 0:
            legs.append(cls.entry(
                account_id=transfer.from_account_id,
                tx_type=TransactionType.EXPENSE,
                amount=-transfer.fee,
                currency=transfer.currency,
                fx_rate=transfer.fx_rate,
                amount_base=-transfer.fee,
                ref_type=RefType.TRANSFER_FEE,
                ref_id=transfer.transfer_id,
                note="Transfer fee",
            ))

        logger.debug(
            "이체 분개 생성",
            extra={"transfer_id": transfer.transfer_id, "legs": len(legs)},
        )
        return legs
