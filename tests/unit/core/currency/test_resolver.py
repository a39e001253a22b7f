"""
RateTable 환산 테스트

동일 통화 → 직접 환율 → 역환율 순서, 환산 불가 시 None
"""

from decimal import Decimal

import pytest

from core.currency.resolver import RateTable, format_pair, normalize_currency


@pytest.fixture
def table() -> RateTable:
    return RateTable.from_pairs([
        ("USD", "BDT", Decimal("110")),
        ("EUR", "USD", Decimal("1.08")),
    ])


class TestNormalize:
    """통화 코드 정규화"""

    def test_strip_and_upper(self) -> None:
        """공백 제거 + 대문자"""
        assert normalize_currency(" usd ") == "USD"

    def test_format_pair(self) -> None:
        """누락 환율 표시 형식"""
        assert format_pair("eur", "bdt") == "EUR → BDT"


class TestConvert:
    """금액 환산"""

    def test_identity(self, table: RateTable) -> None:
        """동일 통화는 환율표 없이 그대로"""
        assert table.convert(Decimal("42.5"), "JPY", "jpy") == Decimal("42.5")

    def test_direct_rate(self, table: RateTable) -> None:
        """직접 환율 곱셈"""
        assert table.convert(Decimal("10"), "USD", "BDT") == Decimal("1100")

    def test_inverse_rate(self, table: RateTable) -> None:
        """역환율 나눗셈"""
        assert table.convert(Decimal("220"), "BDT", "USD") == Decimal("2")

    def test_direct_preferred_over_inverse(self) -> None:
        """양방향 모두 있으면 직접 환율 사용"""
        table = RateTable.from_pairs([
            ("USD", "BDT", Decimal("110")),
            ("BDT", "USD", Decimal("0.01")),
        ])
        assert table.convert(Decimal("1"), "USD", "BDT") == Decimal("110")
        assert table.convert(Decimal("100"), "BDT", "USD") == Decimal("1.00")

    @pytest.mark.parametrize(
        "amount, src, dst",
        [("12.34", "USD", "BDT"), ("987.65", "BDT", "USD"), ("3.5", "EUR", "USD")],
    )
    def test_round_trip_symmetry(self, table: RateTable, amount: str, src: str, dst: str) -> None:
        """X → Y → X 환산은 원금액으로 복귀 (허용 오차 내)"""
        original = Decimal(amount)
        there = table.convert(original, src, dst)
        back = table.convert(there, dst, src)

        assert abs(back - original) < Decimal("0.000001")

    def test_no_multi_hop(self, table: RateTable) -> None:
        """EUR→USD, USD→BDT만 있으면 EUR→BDT는 환산 불가"""
        assert table.convert(Decimal("1"), "EUR", "BDT") is None

    def test_unknown_currency(self, table: RateTable) -> None:
        """환율 없는 통화는 1:1로 가정하지 않음"""
        assert table.convert(Decimal("5"), "GBP", "USD") is None

    def test_no_rounding(self) -> None:
        """환산 결과는 반올림하지 않음"""
        table = RateTable.from_pairs([("USD", "BDT", Decimal("3"))])
        result = table.convert(Decimal("1"), "BDT", "USD")
        assert result == Decimal("1") / Decimal("3")


class TestRateTable:
    """환율표 구성"""

    def test_non_positive_rates_ignored(self) -> None:
        """0 이하 환율은 무시"""
        table = RateTable.from_pairs([
            ("USD", "BDT", Decimal("0")),
            ("EUR", "BDT", Decimal("-1")),
        ])
        assert len(table) == 0
        assert table.rate_between("BDT", "USD") is None

    def test_rate_between(self, table: RateTable) -> None:
        assert table.rate_between("USD", "BDT") == Decimal("110")
        assert table.rate_between("BDT", "BDT") == Decimal("1")

    def test_can_convert(self, table: RateTable) -> None:
        assert table.can_convert("usd", "bdt") is True
        assert table.can_convert("EUR", "BDT") is False
