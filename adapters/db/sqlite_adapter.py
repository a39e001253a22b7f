"""
원장 DB 어댑터 (SQLite)

계정·원장·이체·환율을 단일 SQLite 파일에 보관.
API 서버와 관리 스크립트가 같은 파일을 열 수 있도록 WAL 저널 사용.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Sequence

import aiosqlite

from core.constants import Paths
from core.types import Environment

logger = logging.getLogger(__name__)

# 연결마다 적용하는 PRAGMA (순서 유지)
CONNECTION_PRAGMAS: tuple[str, ...] = (
    "journal_mode=WAL",
    "busy_timeout=30000",  # ms
    "foreign_keys=ON",  # 계정 삭제 시 원장 CASCADE
)

Params = Sequence[Any] | None


def get_db_path(environment: Environment | str) -> Path:
    """실행 환경별 원장 DB 파일 경로"""
    env = Environment(environment.lower()) if isinstance(environment, str) else environment
    return Paths.PROD_DB if env == Environment.PRODUCTION else Paths.DEV_DB


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """원장 DB 연결을 열고 CONNECTION_PRAGMAS 적용

    readonly=True면 URI mode=ro로 열어 쓰기 자체를 차단 (조회 API용).
    상위 디렉토리가 없으면 만든다.
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    target = f"file:{path}?mode=ro" if readonly else str(path)
    conn = await aiosqlite.connect(target, uri=readonly)

    for pragma in CONNECTION_PRAGMAS:
        await conn.execute(f"PRAGMA {pragma}")

    logger.debug(f"원장 DB 연결: {path} (readonly={readonly})")
    return conn


class SQLiteAdapter:
    """원장 DB 어댑터

    저장소 클래스(AccountStore, LedgerStore 등)가 공유하는 단일 연결.
    transaction()은 재진입 가능: 바깥 블록이 BEGIN IMMEDIATE로 쓰기 잠금을
    잡고, 안쪽 블록은 같은 트랜잭션에 합류한다. 블록 안의 commit()/rollback()은
    무시되므로 저장소 메서드를 묶어 하나의 원자적 쓰기로 만들 수 있다.

    ```python
    async with SQLiteAdapter(db_path) as db:
        async with db.transaction():
            await ledger.post_entry(...)      # 내부에서 transaction() 재사용
            await ledger.recompute_balance(...)
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None
        self._depth = 0

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """transaction() 블록 안에서 실행 중인지"""
        return self._depth > 0

    @property
    def connection(self) -> aiosqlite.Connection:
        """열린 연결 (미연결 시 RuntimeError)"""
        if self._conn is None:
            raise RuntimeError(f"Database not connected: {self.db_path}")
        return self._conn

    async def connect(self) -> None:
        if self._conn is None:
            self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        conn, self._conn = self._conn, None
        self._depth = 0
        if conn is not None:
            await conn.close()
            logger.debug(f"원장 DB 연결 종료: {self.db_path}")

    # -------------------------------------------------------------------------
    # 쿼리
    # -------------------------------------------------------------------------

    async def execute(self, sql: str, parameters: Params = None) -> aiosqlite.Cursor:
        return await self.connection.execute(sql, tuple(parameters or ()))

    async def fetchone(self, sql: str, parameters: Params = None) -> tuple[Any, ...] | None:
        async with self.connection.execute(sql, tuple(parameters or ())) as cursor:
            return await cursor.fetchone()

    async def fetchall(self, sql: str, parameters: Params = None) -> list[tuple[Any, ...]]:
        async with self.connection.execute(sql, tuple(parameters or ())) as cursor:
            return list(await cursor.fetchall())

    async def table_exists(self, table_name: str) -> bool:
        row = await self.fetchone(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table_name,),
        )
        return row is not None

    # -------------------------------------------------------------------------
    # 트랜잭션
    # -------------------------------------------------------------------------

    async def commit(self) -> None:
        """블록 밖에서만 커밋 (블록 안에서는 최상위 블록 종료 시 커밋)"""
        if self._conn is not None and not self.in_transaction:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn is not None and not self.in_transaction:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """원자적 쓰기 블록

        최상위 블록: BEGIN IMMEDIATE → 정상 종료 시 COMMIT, 예외 시 ROLLBACK 후 재발생.
        중첩 블록: 깊이만 증가, 예외는 그대로 최상위 블록까지 전파.
        """
        conn = self.connection
        outermost = self._depth == 0

        if outermost and not conn.in_transaction:
            await conn.execute("BEGIN IMMEDIATE")

        self._depth += 1
        try:
            yield conn
        except BaseException:  # CancelledError 포함
            if outermost:
                self._depth = 0
                await conn.rollback()
            raise
        else:
            if outermost:
                self._depth = 0
                await conn.commit()
        finally:
            if outermost:
                self._depth = 0
            else:
                self._depth -= 1

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
