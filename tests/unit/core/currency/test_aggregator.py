"""
다중 통화 집계 및 투자 요약 테스트
"""

from decimal import Decimal

import pytest

from core.currency.aggregator import (
    InvestmentItem,
    MonetaryItem,
    aggregate,
    summarize_by_project,
    summarize_investments,
)
from core.currency.resolver import RateTable


@pytest.fixture
def table() -> RateTable:
    return RateTable.from_pairs([("USD", "BDT", Decimal("110"))])


class TestAggregate:
    """기준 통화 합계"""

    def test_base_currency_items_summed(self, table: RateTable) -> None:
        """기준 통화 항목은 그대로 합산"""
        result = aggregate(
            [MonetaryItem(Decimal("100"), "BDT"), MonetaryItem(Decimal("50.5"), "BDT")],
            "BDT",
            table,
        )
        assert result.total == Decimal("150.5")
        assert result.is_complete is True
        assert result.included_count == 2

    def test_converted_items(self, table: RateTable) -> None:
        """다른 통화는 환산 후 합산"""
        result = aggregate(
            [MonetaryItem(Decimal("100"), "BDT"), MonetaryItem(Decimal("2"), "USD")],
            "BDT",
            table,
        )
        assert result.total == Decimal("320")

    def test_unconvertible_excluded_and_reported(self) -> None:
        """USD 100 + EUR 200 → USD, EUR 환율 없음: 합계 100, 누락 쌍 1개"""
        result = aggregate(
            [MonetaryItem(Decimal("100"), "USD"), MonetaryItem(Decimal("200"), "EUR")],
            "USD",
            RateTable(),
        )
        assert result.total == Decimal("100")
        assert result.missing_rate_pairs == {"EUR → USD"}
        assert result.excluded_amount == Decimal("200")
        assert result.excluded_count == 1
        assert result.is_complete is False

    def test_missing_pairs_deduplicated(self) -> None:
        """같은 누락 쌍은 한 번만 보고"""
        result = aggregate(
            [MonetaryItem(Decimal("1"), "EUR"), MonetaryItem(Decimal("2"), "EUR")],
            "BDT",
            RateTable(),
        )
        assert result.missing_rate_pairs == {"EUR → BDT"}
        assert result.excluded_count == 2

    def test_empty(self, table: RateTable) -> None:
        """항목 없으면 0"""
        result = aggregate([], "bdt", table)
        assert result.total == Decimal("0")
        assert result.base_currency == "BDT"

    def test_to_dict(self) -> None:
        """누락 쌍은 정렬, 금액은 문자열"""
        result = aggregate(
            [MonetaryItem(Decimal("1"), "GBP"), MonetaryItem(Decimal("1"), "EUR")],
            "BDT",
            RateTable(),
        )
        data = result.to_dict()
        assert data["missing_rate_pairs"] == ["EUR → BDT", "GBP → BDT"]
        assert data["total"] == "0"
        assert data["is_complete"] is False


class TestInvestmentSummary:
    """투자금/수익/ROI"""

    def test_roi(self, table: RateTable) -> None:
        """투자 1000 BDT, 수익 1500 BDT → ROI 50%"""
        items = [
            InvestmentItem(Decimal("1000"), "BDT", "cost"),
            InvestmentItem(Decimal("1500"), "BDT", "income"),
        ]
        summary = summarize_investments(items, "BDT", table)
        assert summary.net_profit == Decimal("500")
        assert summary.roi == Decimal("50")
        assert summary.to_dict()["roi"] == "50.00"

    def test_roi_zero_when_nothing_invested(self, table: RateTable) -> None:
        """투자금 0이면 ROI 0"""
        items = [InvestmentItem(Decimal("100"), "BDT", "income")]
        summary = summarize_investments(items, "BDT", table)
        assert summary.roi == Decimal("0")

    def test_payouts_separate(self, table: RateTable) -> None:
        """direction 없는 항목은 payout"""
        items = [
            InvestmentItem(Decimal("10"), "USD"),
            InvestmentItem(Decimal("100"), "BDT", "cost"),
        ]
        summary = summarize_investments(items, "BDT", table)
        assert summary.payouts.total == Decimal("1100")
        assert summary.invested.total == Decimal("100")

    def test_missing_pairs_merged(self, table: RateTable) -> None:
        """세 집계의 누락 쌍 합집합"""
        items = [
            InvestmentItem(Decimal("10"), "EUR", "cost"),
            InvestmentItem(Decimal("10"), "GBP"),
        ]
        summary = summarize_investments(items, "BDT", table)
        assert summary.missing_rate_pairs == {"EUR → BDT", "GBP → BDT"}
        assert summary.is_complete is False

    def test_by_project_sorted_by_roi(self, table: RateTable) -> None:
        """프로젝트별 ROI 내림차순"""
        items = [
            InvestmentItem(Decimal("100"), "BDT", "cost", "p1"),
            InvestmentItem(Decimal("110"), "BDT", "income", "p1"),
            InvestmentItem(Decimal("100"), "BDT", "cost", "p2"),
            InvestmentItem(Decimal("300"), "BDT", "income", "p2"),
            InvestmentItem(Decimal("5"), "BDT", "cost"),
        ]
        summaries = summarize_by_project(items, "BDT", table)
        assert [s.project_id for s in summaries] == ["p2", "p1"]
        assert summaries[0].roi == Decimal("200")
