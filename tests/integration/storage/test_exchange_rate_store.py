"""ExchangeRateStore 통합 테스트"""

from decimal import Decimal

import pytest

from core.errors import AlreadyExistsError, NotFoundError, ValidationError
from core.storage.exchange_rate_store import ExchangeRateStore


class TestCreateRate:
    """환율 생성"""

    @pytest.mark.asyncio
    async def test_create_normalizes(self, rate_store: ExchangeRateStore) -> None:
        """통화 코드 대문자, 환율 6자리"""
        rate = await rate_store.create_rate("usd", "bdt", "109.12345678")

        assert rate.pair == ("USD", "BDT")
        assert rate.rate == Decimal("109.123457")

        fetched = await rate_store.get_rate("USD", "BDT")
        assert fetched is not None
        assert fetched.rate_id == rate.rate_id

    @pytest.mark.asyncio
    async def test_duplicate_pair(self, rate_store: ExchangeRateStore) -> None:
        await rate_store.create_rate("USD", "BDT", "110")

        with pytest.raises(AlreadyExistsError):
            await rate_store.create_rate("usd", "BDT", "111")

    @pytest.mark.asyncio
    async def test_inverse_pair_is_separate(self, rate_store: ExchangeRateStore) -> None:
        """역방향 순서쌍은 별도 행 (비대칭 허용)"""
        await rate_store.create_rate("USD", "BDT", "110")
        await rate_store.create_rate("BDT", "USD", "0.0091")

        assert len(await rate_store.list_rates()) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "from_currency, to_currency, rate",
        [
            ("USD", "USD", "1"),
            ("", "BDT", "1"),
            ("USD", "BDT", "0"),
            ("USD", "BDT", "-3"),
            ("USD", "BDT", "0.0000001"),
            ("USD", "BDT", "abc"),
        ],
    )
    async def test_invalid(
        self,
        rate_store: ExchangeRateStore,
        from_currency: str,
        to_currency: str,
        rate: str,
    ) -> None:
        with pytest.raises(ValidationError):
            await rate_store.create_rate(from_currency, to_currency, rate)


class TestUpdateRate:
    """환율 갱신/삭제"""

    @pytest.mark.asyncio
    async def test_upsert(self, rate_store: ExchangeRateStore) -> None:
        """없으면 생성, 있으면 같은 행 갱신"""
        first = await rate_store.upsert_rate("EUR", "BDT", "120")
        second = await rate_store.upsert_rate("EUR", "BDT", "121.5")

        assert first.rate_id == second.rate_id
        assert (await rate_store.get_rate("EUR", "BDT")).rate == Decimal("121.500000")

    @pytest.mark.asyncio
    async def test_update_by_id(self, rate_store: ExchangeRateStore) -> None:
        created = await rate_store.create_rate("USD", "BDT", "110")

        updated = await rate_store.update_rate(created.rate_id, rate="112")

        assert updated.rate == Decimal("112.000000")
        assert (await rate_store.get_by_id(created.rate_id)).rate == Decimal("112.000000")

    @pytest.mark.asyncio
    async def test_update_pair_conflict(self, rate_store: ExchangeRateStore) -> None:
        await rate_store.create_rate("USD", "BDT", "110")
        eur = await rate_store.create_rate("EUR", "BDT", "120")

        with pytest.raises(AlreadyExistsError):
            await rate_store.update_rate(eur.rate_id, from_currency="USD")

    @pytest.mark.asyncio
    async def test_update_missing(self, rate_store: ExchangeRateStore) -> None:
        with pytest.raises(NotFoundError):
            await rate_store.update_rate("missing", rate="1")

    @pytest.mark.asyncio
    async def test_delete(self, rate_store: ExchangeRateStore) -> None:
        created = await rate_store.create_rate("USD", "BDT", "110")

        await rate_store.delete_rate(created.rate_id)

        assert await rate_store.get_rate("USD", "BDT") is None
        with pytest.raises(NotFoundError):
            await rate_store.delete_rate(created.rate_id)


class TestLoadTable:
    """RateTable 스냅샷"""

    @pytest.mark.asyncio
    async def test_table_uses_inverse(self, rate_store: ExchangeRateStore) -> None:
        await rate_store.create_rate("USD", "BDT", "100")

        table = await rate_store.load_table()

        assert table.convert(Decimal("5"), "USD", "BDT") == Decimal("500.000000")
        assert table.convert(Decimal("500"), "BDT", "USD") == Decimal("5")
        assert table.convert(Decimal("1"), "EUR", "BDT") is None
