"""
Report 서비스

계정 잔액·이체·투자 데이터를 기준 통화로 집계.
모든 집계는 core.currency.aggregate()를 사용하며
환산 불가 항목은 누락 환율 쌍으로 보고 (합계에서 제외).
"""

import logging
from datetime import datetime
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.currency import (
    InvestmentItem,
    MonetaryItem,
    aggregate,
    normalize_currency,
    summarize_by_project,
    summarize_investments,
)
from core.ledger.store import LedgerStore
from core.ledger.transfer import TransferProcessor
from core.storage.account_store import AccountStore
from core.storage.exchange_rate_store import ExchangeRateStore
from core.storage.finance_settings_store import FinanceSettingsStore
from core.types import AccountStatus
from core.utils.timezone import start_of_month

logger = logging.getLogger(__name__)


class ReportService:
    """Report 서비스

    읽기 전용. 재무 설정 행이 없으면 settings.yaml 기본 통화 사용
    (조회만으로 설정 행을 만들지 않음).

    Args:
        db: SQLite 어댑터 (읽기 전용 가능)
        settings_store: 기준 통화 조회용 재무 설정 저장소
    """

    def __init__(self, db: SQLiteAdapter, settings_store: FinanceSettingsStore):
        self.db = db
        self.settings_store = settings_store
        self.accounts = AccountStore(db)
        self.rates = ExchangeRateStore(db)
        self.ledger = LedgerStore(db)
        self.transfers = TransferProcessor(db, settings_store)

    async def get_base_currency(self) -> str:
        settings = await self.settings_store.find()
        if settings is None:
            return normalize_currency(self.settings_store.default_base_currency)
        return settings.base_currency

    async def get_overview(self, now: datetime | None = None) -> dict[str, Any]:
        """자금 현황

        - 활성 계정 잔액 합계
        - 이번 달(로컬 기준) 이체량
        """
        base_currency = await self.get_base_currency()
        table = await self.rates.load_table()

        accounts = await self.accounts.list_accounts(status=AccountStatus.ACTIVE.value)
        total_balance = aggregate(
            (MonetaryItem(a.current_balance, a.currency, a.name) for a in accounts),
            base_currency,
            table,
        )

        transfers = await self.transfers.list_transfers(since=start_of_month(now))
        volume = aggregate(
            (MonetaryItem(t.amount, t.currency) for t in transfers),
            base_currency,
            table,
        )

        if not total_balance.is_complete or not volume.is_complete:
            logger.warning(
                "집계에서 환산 불가 항목 제외",
                extra={
                    "missing_rate_pairs": sorted(
                        total_balance.missing_rate_pairs | volume.missing_rate_pairs
                    ),
                },
            )

        return {
            "base_currency": base_currency,
            "active_account_count": len(accounts),
            "total_balance": total_balance.to_dict(),
            "month_transfer_volume": volume.to_dict(),
            "month_transfer_count": len(transfers),
        }

    async def get_reconciliation(self) -> dict[str, Any]:
        """계정별 캐시 잔액 vs 원장 합계"""
        results = await self.ledger.reconcile()
        items = [
            {
                **item,
                "cached_balance": str(item["cached_balance"]),
                "journal_balance": str(item["journal_balance"]),
                "difference": str(item["difference"]),
            }
            for item in results
        ]
        inconsistent = sum(1 for item in results if not item["is_consistent"])
        if inconsistent:
            logger.warning(f"잔액 불일치 계정 {inconsistent}개 발견")
        return {"accounts": items, "inconsistent_count": inconsistent}

    async def get_investment_report(
        self,
        transactions: list[dict[str, Any]],
        payouts: list[dict[str, Any]],
        base_currency: str | None = None,
    ) -> dict[str, Any]:
        """투자 합계/ROI (전체 + 프로젝트별)

        Args:
            transactions: [{amount, currency, direction, project_id}]
            payouts: [{amount, currency, project_id}]
            base_currency: 생략 시 재무 설정 기준 통화
        """
        base = normalize_currency(base_currency) if base_currency else await self.get_base_currency()
        table = await self.rates.load_table()

        items = [
            InvestmentItem(
                amount=tx["amount"],
                currency=tx["currency"],
                direction=tx["direction"],
                project_id=tx.get("project_id"),
            )
            for tx in transactions
        ] + [
            InvestmentItem(
                amount=payout["amount"],
                currency=payout["currency"],
                project_id=payout.get("project_id"),
            )
            for payout in payouts
        ]

        portfolio = summarize_investments(items, base, table)
        projects = summarize_by_project(items, base, table)
        return {
            "base_currency": base,
            "portfolio": portfolio.to_dict(),
            "projects": [summary.to_dict() for summary in projects],
        }
