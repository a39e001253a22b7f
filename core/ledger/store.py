"""
Ledger 저장소

원장 항목 저장/삭제/조회 및 계정 잔액 유지.
account.current_balance는 원장 합계의 캐시이며 이 클래스만 갱신.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.constants import Precision
from core.errors import InvalidStateError
from core.ledger.entry_builder import JOURNAL_ENTRY_COLUMNS, JournalEntry
from core.ledger.types import PROTECTED_REF_TYPES
from core.utils.timezone import now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class LedgerStore:
    """Ledger 저장소

    모든 변경은 transaction() 안에서 실행되며,
    잔액 재계산도 같은 트랜잭션에서 수행.
    잔액은 항상 해당 계정 원장 전체 합계로 다시 계산 (증감 갱신 없음).

    계정 존재 여부는 확인하지 않음 (호출자 책임).

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 쓰기
    # -------------------------------------------------------------------------

    async def append(self, entry: JournalEntry) -> JournalEntry:
        """원장 항목 저장 후 해당 계정 잔액 재계산

        Args:
            entry: 저장할 항목

        Returns:
            저장된 항목
        """
        async with self.db.transaction():
            await self._insert(entry)
            await self.recompute_balance(entry.account_id)

        logger.info(
            "원장 기록",
            extra={
                "entry_id": entry.entry_id,
                "account_id": entry.account_id,
                "tx_type": entry.tx_type,
                "amount": str(entry.amount),
            },
        )
        return entry

    async def append_many(self, entries: list[JournalEntry]) -> list[JournalEntry]:
        """여러 항목을 한 트랜잭션으로 저장

        관련 계정 잔액은 모든 항목 저장 후 계정별로 한 번씩 재계산.
        """
        async with self.db.transaction():
            for entry in entries:
                await self._insert(entry)
            for account_id in _distinct_accounts(entries):
                await self.recompute_balance(account_id)

        logger.debug(f"원장 {len(entries)}건 기록")
        return entries

    async def delete_by_reference(self, ref_type: str, ref_id: str) -> int:
        """참조 단위 삭제

        (ref_type, ref_id)가 일치하는 모든 항목을 삭제하고
        영향받은 계정 잔액을 재계산. 두 번째 호출은 0 반환.

        Returns:
            삭제된 항목 수

        Raises:
            InvalidStateError: 이체 참조 삭제 시도
        """
        if ref_type in PROTECTED_REF_TYPES:
            raise InvalidStateError(
                f"Entries with ref_type '{ref_type}' cannot be deleted; "
                "post an opposite transfer instead"
            )

        async with self.db.transaction():
            deleted = await self._delete_reference(ref_type, ref_id)

        if deleted:
            logger.info(
                "원장 참조 삭제",
                extra={"ref_type": ref_type, "ref_id": ref_id, "deleted": deleted},
            )
        return deleted

    async def replace_by_reference(
        self,
        ref_type: str,
        ref_id: str,
        entries: list[JournalEntry],
    ) -> list[JournalEntry]:
        """참조 단위 교체 (삭제 + 재기록을 한 트랜잭션으로)

        지출/구독 수정 시 기존 항목을 새 항목으로 바꿀 때 사용.
        새 항목의 ref는 (ref_type, ref_id)로 맞춤.
        """
        if ref_type in PROTECTED_REF_TYPES:
            raise InvalidStateError(
                f"Entries with ref_type '{ref_type}' cannot be replaced"
            )

        for entry in entries:
            entry.ref_type = ref_type
            entry.ref_id = ref_id

        async with self.db.transaction():
            await self._delete_reference(ref_type, ref_id)
            for entry in entries:
                await self._insert(entry)
            for account_id in _distinct_accounts(entries):
                await self.recompute_balance(account_id)

        logger.info(
            "원장 참조 교체",
            extra={"ref_type": ref_type, "ref_id": ref_id, "entries": len(entries)},
        )
        return entries

    async def recompute_balance(self, account_id: str) -> Decimal:
        """계정 잔액 재계산 (원장 전체 합계)

        Returns:
            새 잔액
        """
        async with self.db.transaction():
            balance = await self.sum_entries(account_id)
            await self.db.execute(
                """
                UPDATE account
                SET current_balance = ?, updated_at = ?
                WHERE account_id = ?
                """,
                (str(balance), now_utc().isoformat(), account_id),
            )

        logger.debug(f"잔액 재계산: {account_id} = {balance}")
        return balance

    async def recompute_all_balances(self) -> dict[str, Decimal]:
        """전체 계정 잔액 재계산 (대사/자가 복구)

        Returns:
            {account_id: 잔액}
        """
        results: dict[str, Decimal] = {}
        async with self.db.transaction():
            rows = await self.db.fetchall("SELECT account_id FROM account")
            for row in rows:
                results[row[0]] = await self.recompute_balance(row[0])

        logger.info(f"전체 잔액 재계산 완료: {len(results)}개 계정")
        return results

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def sum_entries(self, account_id: str) -> Decimal:
        """계정 원장 합계 (Decimal 정확 합산)"""
        rows = await self.db.fetchall(
            "SELECT amount FROM journal_entry WHERE account_id = ?",
            (account_id,),
        )
        return sum((Decimal(row[0]) for row in rows), Decimal("0.00"))

    async def has_entries(self, account_id: str) -> bool:
        """계정에 원장 항목이 있는지 여부"""
        row = await self.db.fetchone(
            "SELECT 1 FROM journal_entry WHERE account_id = ? LIMIT 1",
            (account_id,),
        )
        return row is not None

    async def get_entry(self, entry_id: str) -> JournalEntry | None:
        """원장 항목 단건 조회"""
        row = await self.db.fetchone(
            f"SELECT {JOURNAL_ENTRY_COLUMNS} FROM journal_entry WHERE entry_id = ?",
            (entry_id,),
        )
        return JournalEntry.from_row(row) if row else None

    async def get_entries(
        self,
        account_id: str | None = None,
        ref_type: str | None = None,
        ref_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[JournalEntry]:
        """원장 항목 조회 (최신순)

        Args:
            account_id: 계정 필터
            ref_type: 참조 종류 필터
            ref_id: 참조 ID 필터
            limit: 조회 개수 제한
            offset: 시작 위치
        """
        conditions: list[str] = []
        params: list[Any] = []
        if account_id:
            conditions.append("account_id = ?")
            params.append(account_id)
        if ref_type:
            conditions.append("ref_type = ?")
            params.append(ref_type)
        if ref_id:
            conditions.append("ref_id = ?")
            params.append(ref_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        rows = await self.db.fetchall(
            f"""
            SELECT {JOURNAL_ENTRY_COLUMNS}
            FROM journal_entry
            {where}
            ORDER BY created_at DESC, rowid DESC
            LIMIT ? OFFSET ?
            """,
            (*params, limit, offset),
        )
        return [JournalEntry.from_row(row) for row in rows]

    async def reconcile(self) -> list[dict[str, Any]]:
        """계정별 캐시 잔액 vs 원장 합계 대사

        v_account_reconciliation View로 계정 목록과 항목 수를 읽고,
        원장 합계는 Decimal로 다시 계산하여 비교.

        Returns:
            계정별 대사 결과 (difference, is_consistent 포함)
        """
        rows = await self.db.fetchall(
            """
            SELECT account_id, name, currency, status, cached_balance, entry_count
            FROM v_account_reconciliation
            """
        )

        results = []
        for row in rows:
            cached = Decimal(row[4])
            journal = await self.sum_entries(row[0])
            difference = cached - journal
            results.append({
                "account_id": row[0],
                "name": row[1],
                "currency": row[2],
                "status": row[3],
                "cached_balance": cached,
                "journal_balance": journal,
                "difference": difference,
                "entry_count": row[5],
                "is_consistent": abs(difference) < Precision.RECONCILE_TOLERANCE,
            })
        return results

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    async def _insert(self, entry: JournalEntry) -> None:
        await self.db.execute(
            f"""
            INSERT INTO journal_entry ({JOURNAL_ENTRY_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            entry.to_row(),
        )

    async def _delete_reference(self, ref_type: str, ref_id: str) -> int:
        """참조 항목 삭제 + 영향 계정 재계산 (트랜잭션 내부 전용)"""
        rows = await self.db.fetchall(
            """
            SELECT DISTINCT account_id FROM journal_entry
            WHERE ref_type = ? AND ref_id = ?
            """,
            (ref_type, ref_id),
        )
        if not rows:
            return 0

        cursor = await self.db.execute(
            "DELETE FROM journal_entry WHERE ref_type = ? AND ref_id = ?",
            (ref_type, ref_id),
        )
        for row in rows:
            await self.recompute_balance(row[0])
        return cursor.rowcount


def _distinct_accounts(entries: list[JournalEntry]) -> list[str]:
    """항목 순서를 유지한 계정 ID 중복 제거"""
    return list(dict.fromkeys(entry.account_id for entry in entries))
