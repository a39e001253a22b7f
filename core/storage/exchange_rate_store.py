"""
ExchangeRateStore - 환율 저장소

운영자가 입력한 통화 쌍별 환율 관리.
순서쌍 (from, to)당 1행 (UNIQUE). 역방향은 RateTable이 계산.
"""

import logging
from decimal import Decimal
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.currency.resolver import RateTable, normalize_currency
from core.domain.models import EXCHANGE_RATE_COLUMNS, ExchangeRate
from core.errors import AlreadyExistsError, NotFoundError, ValidationError
from core.utils.money import parse_decimal, quantize_rate
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


class ExchangeRateStore:
    """환율 저장소

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def get_rate(self, from_currency: str, to_currency: str) -> ExchangeRate | None:
        """순서쌍 환율 조회 (역방향 탐색 없음)"""
        row = await self.db.fetchone(
            f"""
            SELECT {EXCHANGE_RATE_COLUMNS} FROM exchange_rate
            WHERE from_currency = ? AND to_currency = ?
            """,
            (normalize_currency(from_currency), normalize_currency(to_currency)),
        )
        return ExchangeRate.from_row(row) if row else None

    async def get_by_id(self, rate_id: str) -> ExchangeRate | None:
        row = await self.db.fetchone(
            f"SELECT {EXCHANGE_RATE_COLUMNS} FROM exchange_rate WHERE rate_id = ?",
            (rate_id,),
        )
        return ExchangeRate.from_row(row) if row else None

    async def list_rates(self) -> list[ExchangeRate]:
        rows = await self.db.fetchall(
            f"""
            SELECT {EXCHANGE_RATE_COLUMNS} FROM exchange_rate
            ORDER BY from_currency, to_currency
            """
        )
        return [ExchangeRate.from_row(row) for row in rows]

    async def load_table(self) -> RateTable:
        """현재 환율 전체를 RateTable 스냅샷으로 로드"""
        rates = await self.list_rates()
        return RateTable.from_pairs(
            (rate.from_currency, rate.to_currency, rate.rate) for rate in rates
        )

    async def create_rate(
        self,
        from_currency: str,
        to_currency: str,
        rate: Decimal | str,
    ) -> ExchangeRate:
        """환율 생성

        Raises:
            ValidationError: 통화 코드/환율 형식 오류
            AlreadyExistsError: 같은 순서쌍이 이미 존재
        """
        src, dst, value = _validate(from_currency, to_currency, rate)

        async with self.db.transaction():
            if await self.get_rate(src, dst) is not None:
                raise AlreadyExistsError(f"Exchange rate already exists: {src} → {dst}")
            created = await self._insert(src, dst, value)

        logger.info("환율 생성", extra={"pair": f"{src}/{dst}", "rate": str(value)})
        return created

    async def upsert_rate(
        self,
        from_currency: str,
        to_currency: str,
        rate: Decimal | str,
    ) -> ExchangeRate:
        """환율 생성 또는 갱신 (순서쌍 기준)"""
        src, dst, value = _validate(from_currency, to_currency, rate)

        async with self.db.transaction():
            existing = await self.get_rate(src, dst)
            if existing is None:
                result = await self._insert(src, dst, value)
            else:
                result = await self._update(existing, src, dst, value)

        logger.info("환율 저장", extra={"pair": f"{src}/{dst}", "rate": str(value)})
        return result

    async def update_rate(
        self,
        rate_id: str,
        rate: Decimal | str | None = None,
        from_currency: str | None = None,
        to_currency: str | None = None,
    ) -> ExchangeRate:
        """ID로 환율 수정

        Raises:
            NotFoundError: 환율 없음
            AlreadyExistsError: 변경한 순서쌍이 다른 행과 충돌
        """
        async with self.db.transaction():
            existing = await self.get_by_id(rate_id)
            if existing is None:
                raise NotFoundError("Exchange rate", rate_id)

            src, dst, value = _validate(
                from_currency if from_currency is not None else existing.from_currency,
                to_currency if to_currency is not None else existing.to_currency,
                rate if rate is not None else existing.rate,
            )
            if (src, dst) != existing.pair:
                conflict = await self.get_rate(src, dst)
                if conflict is not None:
                    raise AlreadyExistsError(f"Exchange rate already exists: {src} → {dst}")

            result = await self._update(existing, src, dst, value)

        logger.info("환율 수정", extra={"rate_id": rate_id, "rate": str(value)})
        return result

    async def delete_rate(self, rate_id: str) -> None:
        """ID로 환율 삭제

        Raises:
            NotFoundError: 환율 없음
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                "DELETE FROM exchange_rate WHERE rate_id = ?",
                (rate_id,),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("Exchange rate", rate_id)

        logger.info("환율 삭제", extra={"rate_id": rate_id})

    async def _insert(self, src: str, dst: str, value: Decimal) -> ExchangeRate:
        created = ExchangeRate(
            rate_id=str(uuid4()),
            from_currency=src,
            to_currency=dst,
            rate=value,
            updated_at=now_utc().isoformat(),
        )
        await self.db.execute(
            f"INSERT INTO exchange_rate ({EXCHANGE_RATE_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            (created.rate_id, src, dst, str(value), created.updated_at),
        )
        return created

    async def _update(
        self,
        existing: ExchangeRate,
        src: str,
        dst: str,
        value: Decimal,
    ) -> ExchangeRate:
        existing.from_currency = src
        existing.to_currency = dst
        existing.rate = value
        existing.updated_at = now_utc().isoformat()
        await self.db.execute(
            """
            UPDATE exchange_rate
            SET from_currency = ?, to_currency = ?, rate = ?, updated_at = ?
            WHERE rate_id = ?
            """,
            (src, dst, str(value), existing.updated_at, existing.rate_id),
        )
        return existing


def _validate(
    from_currency: str,
    to_currency: str,
    rate: Decimal | str,
) -> tuple[str, str, Decimal]:
    """통화 코드 정규화 + 환율 검증 (6자리 반올림 후 > 0)"""
    src = normalize_currency(from_currency or "")
    dst = normalize_currency(to_currency or "")
    if not src or not dst:
        raise ValidationError("Currency codes must not be empty")
    if src == dst:
        raise ValidationError(f"Exchange rate requires two different currencies: {src}")

    value = parse_decimal(rate)
    if value is None:
        raise ValidationError(f"Invalid exchange rate: {rate!r}")
    value = quantize_rate(value)
    if value <= 0:
        raise ValidationError(f"Exchange rate must be positive: {rate}")
    return src, dst, value
