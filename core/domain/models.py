"""
도메인 모델

계정, 이체, 환율, 재무 설정 등 원장 주변 엔티티.
DB 행(tuple)과 상호 변환하는 from_row / to_dict 제공.
금액은 Decimal로 보관하고 to_dict()에서 문자열로 직렬화.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from core.types import AccountStatus


# SELECT 컬럼 순서 (from_row와 반드시 일치)
ACCOUNT_COLUMNS = (
    "account_id, name, account_type, currency, opening_balance, current_balance, "
    "payment_method_key, color, status, created_at, updated_at"
)
TRANSFER_COLUMNS = (
    "transfer_id, from_account_id, to_account_id, amount, currency, "
    "fx_rate, fee, note, created_at"
)
EXCHANGE_RATE_COLUMNS = "rate_id, from_currency, to_currency, rate, updated_at"
FINANCE_SETTINGS_COLUMNS = "settings_id, base_currency, allow_negative_balances, updated_at"


@dataclass
class Account:
    """자금 계정

    current_balance는 원장 합계의 캐시. LedgerStore만 갱신.
    """

    account_id: str
    name: str
    account_type: str
    currency: str
    opening_balance: Decimal
    current_balance: Decimal
    status: str = AccountStatus.ACTIVE.value
    payment_method_key: str | None = None
    color: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE.value

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> Account:
        return cls(
            account_id=row[0],
            name=row[1],
            account_type=row[2],
            currency=row[3],
            opening_balance=Decimal(row[4]),
            current_balance=Decimal(row[5]),
            payment_method_key=row[6],
            color=row[7],
            status=row[8],
            created_at=row[9],
            updated_at=row[10],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "name": self.name,
            "account_type": self.account_type,
            "currency": self.currency,
            "opening_balance": str(self.opening_balance),
            "current_balance": str(self.current_balance),
            "payment_method_key": self.payment_method_key,
            "color": self.color,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Transfer:
    """계정 간 이체 기록 (불변)"""

    transfer_id: str
    from_account_id: str
    to_account_id: str
    amount: Decimal
    currency: str
    fx_rate: Decimal
    fee: Decimal
    note: str | None = None
    created_at: str | None = None

    @property
    def credited_amount(self) -> Decimal:
        """도착 계정 입금액 (amount × fx_rate, 반올림 전)"""
        return self.amount * self.fx_rate

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> Transfer:
        return cls(
            transfer_id=row[0],
            from_account_id=row[1],
            to_account_id=row[2],
            amount=Decimal(row[3]),
            currency=row[4],
            fx_rate=Decimal(row[5]),
            fee=Decimal(row[6]),
            note=row[7],
            created_at=row[8],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transfer_id": self.transfer_id,
            "from_account_id": self.from_account_id,
            "to_account_id": self.to_account_id,
            "amount": str(self.amount),
            "currency": self.currency,
            "fx_rate": str(self.fx_rate),
            "fee": str(self.fee),
            "note": self.note,
            "created_at": self.created_at,
        }


@dataclass
class ExchangeRate:
    """환율 (from_currency 1단위 = rate × to_currency)"""

    rate_id: str
    from_currency: str
    to_currency: str
    rate: Decimal
    updated_at: str | None = None

    @property
    def pair(self) -> tuple[str, str]:
        return (self.from_currency, self.to_currency)

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> ExchangeRate:
        return cls(
            rate_id=row[0],
            from_currency=row[1],
            to_currency=row[2],
            rate=Decimal(row[3]),
            updated_at=row[4],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rate_id": self.rate_id,
            "from_currency": self.from_currency,
            "to_currency": self.to_currency,
            "rate": str(self.rate),
            "updated_at": self.updated_at,
        }


@dataclass
class FinanceSettings:
    """재무 설정 (싱글턴 행)"""

    settings_id: str
    base_currency: str
    allow_negative_balances: bool
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> FinanceSettings:
        return cls(
            settings_id=row[0],
            base_currency=row[1],
            allow_negative_balances=bool(row[2]),
            updated_at=row[3],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "settings_id": self.settings_id,
            "base_currency": self.base_currency,
            "allow_negative_balances": self.allow_negative_balances,
            "updated_at": self.updated_at,
        }
