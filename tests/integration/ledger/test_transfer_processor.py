"""TransferProcessor 통합 테스트

분개 건수, 잔액 보존, 전제 조건 거부, 실패 시 전체 롤백
"""

from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.models import Account
from core.errors import (
    InvalidStateError,
    NotFoundError,
    UnconvertibleError,
    ValidationError,
)
from core.ledger.store import LedgerStore
from core.ledger.transfer import TransferProcessor
from core.storage.account_store import AccountStore
from core.storage.exchange_rate_store import ExchangeRateStore
from core.storage.finance_settings_store import FinanceSettingsStore


@pytest.fixture
def processor(db: SQLiteAdapter) -> TransferProcessor:
    return TransferProcessor(db)


async def _entry_count(db: SQLiteAdapter) -> int:
    row = await db.fetchone("SELECT COUNT(*) FROM journal_entry")
    return row[0]


async def _transfer_count(db: SQLiteAdapter) -> int:
    row = await db.fetchone("SELECT COUNT(*) FROM transfer")
    return row[0]


async def _balance(account_store: AccountStore, account_id: str) -> Decimal:
    return (await account_store.require_account(account_id)).current_balance


class TestTransferLegs:
    """이체 분개 건수와 잔액"""

    @pytest.mark.asyncio
    async def test_two_legs_without_fee(
        self,
        processor: TransferProcessor,
        ledger_store: LedgerStore,
        wallet: Account,
        bank: Account,
    ) -> None:
        transfer = await processor.create_transfer(
            wallet.account_id, bank.account_id, Decimal("100"),
        )

        legs = await ledger_store.get_entries(ref_type="transfer", ref_id=transfer.transfer_id)
        assert sorted(leg.tx_type for leg in legs) == ["transfer_in", "transfer_out"]
        assert await ledger_store.get_entries(
            ref_type="transfer_fee", ref_id=transfer.transfer_id,
        ) == []

    @pytest.mark.asyncio
    async def test_three_legs_with_fee(
        self,
        processor: TransferProcessor,
        ledger_store: LedgerStore,
        account_store: AccountStore,
        wallet: Account,
        bank: Account,
    ) -> None:
        """수수료 > 0이면 출금 계정에 expense 항목 추가, 출금액 = A + F"""
        transfer = await processor.create_transfer(
            wallet.account_id, bank.account_id, "100", fee="5",
        )

        fee_legs = await ledger_store.get_entries(
            ref_type="transfer_fee", ref_id=transfer.transfer_id,
        )
        assert len(fee_legs) == 1
        assert fee_legs[0].account_id == wallet.account_id
        assert fee_legs[0].tx_type == "expense"
        assert fee_legs[0].amount == Decimal("-5.00")

        assert await _balance(account_store, wallet.account_id) == Decimal("895.00")
        assert await _balance(account_store, bank.account_id) == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_conservation_same_currency(
        self,
        processor: TransferProcessor,
        account_store: AccountStore,
        wallet: Account,
        bank: Account,
    ) -> None:
        """fx_rate = 1, fee = 0이면 출금 감소분 = 입금 증가분"""
        await processor.create_transfer(wallet.account_id, bank.account_id, "250.25")

        source_drop = Decimal("1000.00") - await _balance(account_store, wallet.account_id)
        target_rise = await _balance(account_store, bank.account_id) - Decimal("0.00")
        assert source_drop == target_rise == Decimal("250.25")

    @pytest.mark.asyncio
    async def test_explicit_rate(
        self,
        processor: TransferProcessor,
        account_store: AccountStore,
        wallet: Account,
        usd_card: Account,
    ) -> None:
        """입금 계정은 A × R 증가"""
        transfer = await processor.create_transfer(
            usd_card.account_id, wallet.account_id, "10", fx_rate="110.5",
        )

        assert transfer.currency == "USD"
        assert transfer.fx_rate == Decimal("110.500000")
        assert await _balance(account_store, usd_card.account_id) == Decimal("190.00")
        assert await _balance(account_store, wallet.account_id) == Decimal("2105.00")

    @pytest.mark.asyncio
    async def test_implicit_rate_from_table(
        self,
        processor: TransferProcessor,
        rate_store: ExchangeRateStore,
        account_store: AccountStore,
        wallet: Account,
        usd_card: Account,
    ) -> None:
        """환율 생략 시 두 계정 통화로 환율표 조회"""
        await rate_store.create_rate("USD", "BDT", "110")

        transfer = await processor.create_transfer(
            usd_card.account_id, wallet.account_id, "2",
        )

        assert transfer.fx_rate == Decimal("110.000000")
        assert await _balance(account_store, wallet.account_id) == Decimal("1220.00")

    @pytest.mark.asyncio
    async def test_transfer_record(
        self,
        processor: TransferProcessor,
        wallet: Account,
        bank: Account,
    ) -> None:
        created = await processor.create_transfer(
            wallet.account_id, bank.account_id, "1", note="petty cash",
        )

        fetched = await processor.get_transfer(created.transfer_id)
        assert fetched is not None
        assert fetched.note == "petty cash"
        assert fetched.credited_amount == Decimal("1.00")

        listed = await processor.list_transfers(account_id=bank.account_id)
        assert [t.transfer_id for t in listed] == [created.transfer_id]
        assert await processor.get_transfer("missing") is None

    @pytest.mark.asyncio
    async def test_legs_store_transfer_rate(
        self,
        processor: TransferProcessor,
        ledger_store: LedgerStore,
        wallet: Account,
        usd_card: Account,
    ) -> None:
        """저장된 이체 항목에 이체 환율 기록"""
        transfer = await processor.create_transfer(
            usd_card.account_id, wallet.account_id, "10", fx_rate="110.5",
        )

        entries = await ledger_store.get_entries(ref_type="transfer", ref_id=transfer.transfer_id)
        by_type = {e.tx_type: e for e in entries}
        assert {e.fx_rate for e in entries} == {Decimal("110.500000")}
        assert by_type["transfer_out"].amount_base == Decimal("-10.00")
        assert by_type["transfer_in"].amount_base == Decimal("1105.00")


class TestRejectedTransfers:
    """전제 조건 위반 시 아무것도 기록하지 않음"""

    @pytest.mark.asyncio
    async def test_same_account(
        self,
        db: SQLiteAdapter,
        processor: TransferProcessor,
        wallet: Account,
    ) -> None:
        before = await _entry_count(db)

        with pytest.raises(InvalidStateError, match="same account"):
            await processor.create_transfer(
                wallet.account_id, wallet.account_id, "50", "USD", "1", "0",
            )

        assert await _entry_count(db) == before
        assert await _transfer_count(db) == 0

    @pytest.mark.asyncio
    async def test_archived_account(
        self,
        db: SQLiteAdapter,
        processor: TransferProcessor,
        account_store: AccountStore,
        wallet: Account,
        bank: Account,
    ) -> None:
        await account_store.update_account(bank.account_id, status="archived")
        before = await _entry_count(db)

        with pytest.raises(InvalidStateError, match="inactive"):
            await processor.create_transfer(wallet.account_id, bank.account_id, "50")

        assert await _entry_count(db) == before
        assert await _transfer_count(db) == 0

    @pytest.mark.asyncio
    async def test_unknown_account(
        self,
        processor: TransferProcessor,
        wallet: Account,
    ) -> None:
        with pytest.raises(NotFoundError):
            await processor.create_transfer(wallet.account_id, "missing", "1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "amount, fee, fx_rate",
        [("0", None, None), ("-5", None, None), ("abc", None, None),
         ("10", "-1", None), ("10", None, "0"),
         ("1e30", None, None), ("10", "1e30", None), ("10", None, "1e30")],
    )
    async def test_invalid_values(
        self,
        processor: TransferProcessor,
        wallet: Account,
        bank: Account,
        amount: str,
        fee: str | None,
        fx_rate: str | None,
    ) -> None:
        with pytest.raises(ValidationError):
            await processor.create_transfer(
                wallet.account_id, bank.account_id, amount, fee=fee, fx_rate=fx_rate,
            )

    @pytest.mark.asyncio
    async def test_credited_amount_out_of_range(
        self,
        db: SQLiteAdapter,
        processor: TransferProcessor,
        wallet: Account,
        bank: Account,
    ) -> None:
        """A × R가 금액 정밀도를 넘으면 쓰기 전에 거부"""
        before = await _entry_count(db)

        with pytest.raises(ValidationError):
            await processor.create_transfer(
                wallet.account_id, bank.account_id,
                "999999999999999", fx_rate="999999999999999",
            )

        assert await _entry_count(db) == before
        assert await _transfer_count(db) == 0

    @pytest.mark.asyncio
    async def test_missing_rate(
        self,
        db: SQLiteAdapter,
        processor: TransferProcessor,
        wallet: Account,
        usd_card: Account,
    ) -> None:
        """통화가 다르고 환율이 없으면 1:1로 가정하지 않고 거부"""
        before = await _entry_count(db)

        with pytest.raises(UnconvertibleError):
            await processor.create_transfer(wallet.account_id, usd_card.account_id, "100")

        assert await _entry_count(db) == before

    @pytest.mark.asyncio
    async def test_insufficient_funds(
        self,
        db: SQLiteAdapter,
        account_store: AccountStore,
        wallet: Account,
        bank: Account,
    ) -> None:
        """음수 잔액 비허용 시 A + F가 잔액을 넘으면 거부"""
        processor = TransferProcessor(
            db, FinanceSettingsStore(db, default_allow_negative_balances=False),
        )

        with pytest.raises(InvalidStateError, match="Insufficient funds"):
            await processor.create_transfer(
                wallet.account_id, bank.account_id, "999", fee="2",
            )

        await processor.create_transfer(wallet.account_id, bank.account_id, "998", fee="2")
        assert await _balance(account_store, wallet.account_id) == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_negative_allowed_by_default(
        self,
        processor: TransferProcessor,
        account_store: AccountStore,
        wallet: Account,
        bank: Account,
    ) -> None:
        await processor.create_transfer(bank.account_id, wallet.account_id, "30")

        assert await _balance(account_store, bank.account_id) == Decimal("-30.00")


class TestAtomicity:
    """분개 중간 실패 시 전체 롤백"""

    @pytest.mark.asyncio
    async def test_failed_leg_rolls_back_everything(
        self,
        db: SQLiteAdapter,
        processor: TransferProcessor,
        account_store: AccountStore,
        monkeypatch: pytest.MonkeyPatch,
        wallet: Account,
        bank: Account,
    ) -> None:
        original_insert = processor.ledger._insert
        calls = {"n": 0}

        async def failing_insert(entry):
            calls["n"] += 1
            if calls["n"] == 2:
                raise RuntimeError("disk full")
            await original_insert(entry)

        monkeypatch.setattr(processor.ledger, "_insert", failing_insert)
        before = await _entry_count(db)

        with pytest.raises(RuntimeError):
            await processor.create_transfer(
                wallet.account_id, bank.account_id, "100", fee="1",
            )

        assert calls["n"] == 2
        assert await _entry_count(db) == before
        assert await _transfer_count(db) == 0
        assert await _balance(account_store, wallet.account_id) == Decimal("1000.00")
        assert await _balance(account_store, bank.account_id) == Decimal("0.00")
