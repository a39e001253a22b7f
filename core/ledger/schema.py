"""
원장 스키마 초기화

Web 시작 시 자동으로 계정/원장/이체/환율 테이블과 View 생성.
CREATE IF NOT EXISTS / DROP VIEW IF EXISTS 패턴으로 안전하게 동작.

금액·환율은 Decimal 문자열(TEXT)로 저장.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """원장 스키마 초기화 (테이블 + View)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).
    finance_settings 행은 만들지 않음 (최초 조회 시 지연 생성).

    Args:
        db: SQLiteAdapter 인스턴스
    """
    fresh = not await db.table_exists("journal_entry")

    await _create_ledger_tables(db)
    await _create_ledger_views(db)
    logger.info(f"원장 스키마 초기화 완료 (new_db={fresh})")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """원장 테이블 생성"""

    # payment_method 테이블 (계정 import 검증용 레지스트리)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS payment_method (
            key              TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # account 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS account (
            account_id          TEXT PRIMARY KEY,
            name                TEXT NOT NULL,
            account_type        TEXT NOT NULL,
            currency            TEXT NOT NULL,
            opening_balance     TEXT NOT NULL DEFAULT '0.00',
            current_balance     TEXT NOT NULL DEFAULT '0.00',
            payment_method_key  TEXT,
            color               TEXT,
            status              TEXT NOT NULL DEFAULT 'active',
            created_at          TEXT NOT NULL,
            updated_at          TEXT NOT NULL
        )
    """)

    # journal_entry 테이블 (계정 삭제 시 CASCADE)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journal_entry (
            entry_id         TEXT PRIMARY KEY,
            account_id       TEXT NOT NULL,
            tx_type          TEXT NOT NULL,
            amount           TEXT NOT NULL,
            currency         TEXT NOT NULL,
            fx_rate          TEXT NOT NULL DEFAULT '1',
            amount_base      TEXT NOT NULL,
            ref_type         TEXT,
            ref_id           TEXT,
            note             TEXT,
            created_at       TEXT NOT NULL,
            FOREIGN KEY (account_id) REFERENCES account(account_id) ON DELETE CASCADE
        )
    """)

    # transfer 테이블
    await db.execute("""
        CREATE TABLE IF NOT EXISTS transfer (
            transfer_id      TEXT PRIMARY KEY,
            from_account_id  TEXT NOT NULL,
            to_account_id    TEXT NOT NULL,
            amount           TEXT NOT NULL,
            currency         TEXT NOT NULL,
            fx_rate          TEXT NOT NULL DEFAULT '1',
            fee              TEXT NOT NULL DEFAULT '0.00',
            note             TEXT,
            created_at       TEXT NOT NULL,
            CHECK (from_account_id != to_account_id),
            FOREIGN KEY (from_account_id) REFERENCES account(account_id),
            FOREIGN KEY (to_account_id) REFERENCES account(account_id)
        )
    """)

    # exchange_rate 테이블 (순서쌍당 1행)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS exchange_rate (
            rate_id          TEXT PRIMARY KEY,
            from_currency    TEXT NOT NULL,
            to_currency      TEXT NOT NULL,
            rate             TEXT NOT NULL,
            updated_at       TEXT NOT NULL,
            UNIQUE(from_currency, to_currency)
        )
    """)

    # finance_settings 테이블 (싱글턴)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS finance_settings (
            settings_id              TEXT PRIMARY KEY,
            base_currency            TEXT NOT NULL,
            allow_negative_balances  INTEGER NOT NULL DEFAULT 1,
            updated_at               TEXT NOT NULL
        )
    """)

    # 인덱스 생성
    await db.execute("CREATE INDEX IF NOT EXISTS idx_account_status ON account(status)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journal_entry_account ON journal_entry(account_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journal_entry_ref ON journal_entry(ref_type, ref_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journal_entry_created ON journal_entry(created_at)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_transfer_from ON transfer(from_account_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_transfer_to ON transfer(to_account_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_transfer_created ON transfer(created_at)")

    await db.commit()
    logger.debug("원장 테이블 생성 완료")


async def _create_ledger_views(db: "SQLiteAdapter") -> None:
    """대사(reconciliation) 조회용 View 생성

    View는 항상 DROP 후 CREATE하여 스키마 변경 시에도 안전.
    journal_total_approx는 REAL 합계 (화면 표시용). 정확한 대사는 Decimal로 재계산.
    """
    await db.execute("DROP VIEW IF EXISTS v_account_reconciliation")
    await db.execute("""
        CREATE VIEW v_account_reconciliation AS
        SELECT
            a.account_id,
            a.name,
            a.currency,
            a.status,
            a.current_balance AS cached_balance,
            COUNT(je.entry_id) AS entry_count,
            TOTAL(CAST(je.amount AS REAL)) AS journal_total_approx
        FROM account a
        LEFT JOIN journal_entry je ON je.account_id = a.account_id
        GROUP BY a.account_id
        ORDER BY a.name
    """)

    await db.commit()
    logger.debug("원장 View 생성 완료")
