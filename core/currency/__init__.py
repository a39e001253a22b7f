"""
통화 환산 및 다중 통화 집계

사용 예시:
```python
from core.currency import RateTable, MonetaryItem, aggregate

table = RateTable.from_pairs([("USD", "BDT", Decimal("110"))])
table.convert(Decimal("10"), "USD", "BDT")  # Decimal("1100")
table.convert(Decimal("10"), "EUR", "BDT")  # None (환산 불가)

result = aggregate(items, "BDT", table)
if not result.is_complete:
    print(result.missing_rate_pairs)
```
"""

from core.currency.aggregator import (
    AggregationResult,
    InvestmentItem,
    InvestmentSummary,
    MonetaryItem,
    aggregate,
    summarize_by_project,
    summarize_investments,
)
from core.currency.resolver import RateTable, format_pair, normalize_currency

__all__ = [
    "RateTable",
    "normalize_currency",
    "format_pair",
    "MonetaryItem",
    "AggregationResult",
    "aggregate",
    "InvestmentItem",
    "InvestmentSummary",
    "summarize_investments",
    "summarize_by_project",
]
