"""
다중 통화 집계기

서로 다른 통화의 금액을 기준 통화 합계로 집계.
환산 불가 항목은 합계에서 제외하고 누락 환율 쌍으로 보고 (예외 없음).

총 잔액, 월간 이체량, 투자 합계, ROI 모두 같은 aggregate()를 사용.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from core.currency.resolver import RateTable, format_pair, normalize_currency
from core.types import InvestmentDirection


@dataclass(frozen=True)
class MonetaryItem:
    """집계 대상 금액 1건"""

    amount: Decimal
    currency: str
    label: str | None = None


@dataclass
class AggregationResult:
    """집계 결과

    missing_rate_pairs가 비어 있지 않으면 total은 일부 항목이 빠진 값.
    화면에서는 반드시 누락 쌍을 함께 표시.
    """

    base_currency: str
    total: Decimal = Decimal("0")
    missing_rate_pairs: set[str] = field(default_factory=set)
    excluded_amount: Decimal = Decimal("0")
    excluded_count: int = 0
    included_count: int = 0

    @property
    def is_complete(self) -> bool:
        return not self.missing_rate_pairs

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_currency": self.base_currency,
            "total": str(self.total),
            "missing_rate_pairs": sorted(self.missing_rate_pairs),
            "excluded_amount": str(self.excluded_amount),
            "excluded_count": self.excluded_count,
            "is_complete": self.is_complete,
        }


def aggregate(
    items: Iterable[MonetaryItem],
    base_currency: str,
    table: RateTable,
) -> AggregationResult:
    """기준 통화 합계 계산

    항목별로
    - 기준 통화와 같으면 그대로 합산
    - 다르면 환산 후 합산
    - 환산 불가면 합산하지 않고 "FROM → TO"를 기록, 원금액을 excluded_amount에 누적

    excluded_amount는 원 통화 금액의 단순 합 (통화 혼합 가능, 참고용).
    """
    base = normalize_currency(base_currency)
    result = AggregationResult(base_currency=base)

    for item in items:
        converted = table.convert(item.amount, item.currency, base)
        if converted is None:
            result.missing_rate_pairs.add(format_pair(item.currency, base))
            result.excluded_amount += item.amount
            result.excluded_count += 1
            continue
        result.total += converted
        result.included_count += 1

    return result


# =============================================================================
# 투자 요약
# =============================================================================


@dataclass(frozen=True)
class InvestmentItem:
    """투자 거래 또는 배당(payout) 1건

    direction이 None이면 payout.
    """

    amount: Decimal
    currency: str
    direction: str | None = None
    project_id: str | None = None


@dataclass
class InvestmentSummary:
    """투자 요약 (기준 통화)"""

    invested: AggregationResult
    returns: AggregationResult
    payouts: AggregationResult
    project_id: str | None = None

    @property
    def net_profit(self) -> Decimal:
        return self.returns.total - self.invested.total

    @property
    def roi(self) -> Decimal:
        """ROI (%) = 순이익 / 투자금 × 100. 투자금이 0이면 0"""
        if self.invested.total <= 0:
            return Decimal("0")
        return self.net_profit / self.invested.total * 100

    @property
    def missing_rate_pairs(self) -> set[str]:
        return (
            self.invested.missing_rate_pairs
            | self.returns.missing_rate_pairs
            | self.payouts.missing_rate_pairs
        )

    @property
    def is_complete(self) -> bool:
        return not self.missing_rate_pairs

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "invested": self.invested.to_dict(),
            "returns": self.returns.to_dict(),
            "payouts": self.payouts.to_dict(),
            "net_profit": str(self.net_profit),
            "roi": str(self.roi.quantize(Decimal("0.01"))),
            "missing_rate_pairs": sorted(self.missing_rate_pairs),
            "is_complete": self.is_complete,
        }


def summarize_investments(
    items: list[InvestmentItem],
    base_currency: str,
    table: RateTable,
    project_id: str | None = None,
) -> InvestmentSummary:
    """투자금/수익/배당 합계와 ROI 계산

    project_id를 주면 해당 프로젝트 항목만 집계.
    """
    if project_id is not None:
        items = [item for item in items if item.project_id == project_id]

    def _collect(direction: str | None) -> list[MonetaryItem]:
        return [
            MonetaryItem(item.amount, item.currency)
            for item in items
            if item.direction == direction
        ]

    return InvestmentSummary(
        invested=aggregate(_collect(InvestmentDirection.COST.value), base_currency, table),
        returns=aggregate(_collect(InvestmentDirection.INCOME.value), base_currency, table),
        payouts=aggregate(_collect(None), base_currency, table),
        project_id=project_id,
    )


def summarize_by_project(
    items: list[InvestmentItem],
    base_currency: str,
    table: RateTable,
) -> list[InvestmentSummary]:
    """프로젝트별 투자 요약 (ROI 내림차순)"""
    project_ids = list(dict.fromkeys(
        item.project_id for item in items if item.project_id is not None
    ))
    summaries = [
        summarize_investments(items, base_currency, table, project_id=pid)
        for pid in project_ids
    ]
    return sorted(summaries, key=lambda s: s.roi, reverse=True)
