"""
통화 환산기

환율표(순서쌍 → 환율)로 금액을 다른 통화로 환산.
조회 순서: 동일 통화 → 직접 환율 → 역환율. 모두 없으면 None (환산 불가).
다단계 경로 탐색 없음, 1:1 기본값 없음, 환산 결과 반올림 없음.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable


def normalize_currency(code: str) -> str:
    """통화 코드 정규화 (공백 제거 + 대문자)"""
    return code.strip().upper()


def format_pair(from_currency: str, to_currency: str) -> str:
    """누락 환율 표시용 문자열 ("EUR → USD")"""
    return f"{normalize_currency(from_currency)} → {normalize_currency(to_currency)}"


@dataclass
class RateTable:
    """환율표 (읽기 전용 스냅샷)

    rates[(FROM, TO)] = FROM 1단위당 TO 수량.
    ExchangeRateStore.load_table()로 DB에서 생성하거나
    from_pairs()로 직접 구성.
    """

    rates: dict[tuple[str, str], Decimal] = field(default_factory=dict)

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[str, str, Decimal]],
    ) -> RateTable:
        """(from, to, rate) 목록으로 생성

        0 이하 환율은 무시 (역환율 계산 시 0 나눗셈 방지).
        """
        table: dict[tuple[str, str], Decimal] = {}
        for from_currency, to_currency, rate in pairs:
            if rate <= 0:
                continue
            table[(normalize_currency(from_currency), normalize_currency(to_currency))] = rate
        return cls(rates=table)

    def rate_between(self, from_currency: str, to_currency: str) -> Decimal | None:
        """두 통화 간 환율 (FROM 1단위당 TO 수량)

        Returns:
            환율 (동일 통화면 1, 환산 불가면 None)
        """
        return self.convert(Decimal("1"), from_currency, to_currency)

    def convert(
        self,
        amount: Decimal,
        from_currency: str,
        to_currency: str,
    ) -> Decimal | None:
        """금액 환산

        Args:
            amount: 환산할 금액
            from_currency: 원 통화
            to_currency: 대상 통화

        Returns:
            환산 금액 (반올림 없음). 직접/역환율 모두 없으면 None
        """
        src = normalize_currency(from_currency)
        dst = normalize_currency(to_currency)

        if src == dst:
            return amount

        direct = self.rates.get((src, dst))
        if direct is not None:
            return amount * direct

        inverse = self.rates.get((dst, src))
        if inverse is not None:
            return amount / inverse

        return None

    def can_convert(self, from_currency: str, to_currency: str) -> bool:
        return self.rate_between(from_currency, to_currency) is not None

    def __len__(self) -> int:
        return len(self.rates)
