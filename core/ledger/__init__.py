"""
원장 (Ledger) 시스템

계정별 부호 있는 원장 항목을 기록하고, 잔액을 원장 합계로 유지.
이체는 2~3건의 항목을 한 트랜잭션으로 기록.

사용 예시:
```python
from core.ledger import LedgerStore, JournalEntryBuilder
from core.ledger.transfer import TransferProcessor

ledger_store = LedgerStore(db)

# 수동 기록
entry = JournalEntryBuilder.entry(account_id, "income", Decimal("100"), "BDT")
await ledger_store.append(entry)

# 참조 단위 삭제 (지출 삭제 등)
await ledger_store.delete_by_reference("expense", expense_id)

# 이체
processor = TransferProcessor(db)
transfer = await processor.create_transfer(from_id, to_id, Decimal("50"))
```
"""

from core.ledger.entry_builder import JournalEntry, JournalEntryBuilder
from core.ledger.store import LedgerStore
from core.ledger.types import PROTECTED_REF_TYPES, RefType, TransactionType

__all__ = [
    # 핵심 클래스
    "LedgerStore",
    "JournalEntryBuilder",
    "JournalEntry",
    # Enum
    "TransactionType",
    "RefType",
    # 상수
    "PROTECTED_REF_TYPES",
]
