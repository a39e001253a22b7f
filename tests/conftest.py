"""
pytest 공통 fixture 정의

임시 SQLite DB(원장 스키마 적용)와 저장소 fixture
"""

import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.schema import init_ledger_schema
from core.ledger.store import LedgerStore
from core.storage.account_store import AccountStore
from core.storage.exchange_rate_store import ExchangeRateStore
from core.storage.finance_settings_store import FinanceSettingsStore


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """테스트 간 Settings 싱글턴 격리"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    content = """# 테스트용 settings.yaml
environment: production

web:
  host: 0.0.0.0
  port: 9000

finance:
  default_base_currency: usd
  default_allow_negative_balances: false
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(content, encoding="utf-8")
    return settings_path


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> SQLiteAdapter:
    """원장 스키마가 적용된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "test_ledger.db")
    await adapter.connect()
    await init_ledger_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def account_store(db: SQLiteAdapter) -> AccountStore:
    return AccountStore(db)


@pytest.fixture
def ledger_store(db: SQLiteAdapter) -> LedgerStore:
    return LedgerStore(db)


@pytest.fixture
def rate_store(db: SQLiteAdapter) -> ExchangeRateStore:
    return ExchangeRateStore(db)


@pytest.fixture
def settings_store(db: SQLiteAdapter) -> FinanceSettingsStore:
    return FinanceSettingsStore(db)


@pytest_asyncio.fixture
async def wallet(account_store: AccountStore):
    """BDT 현금 계정 (기초 잔액 1000)"""
    return await account_store.create_account(
        name="Wallet",
        account_type="cash",
        currency="BDT",
        opening_balance=Decimal("1000"),
    )


@pytest_asyncio.fixture
async def bank(account_store: AccountStore):
    """BDT 은행 계정 (기초 잔액 0)"""
    return await account_store.create_account(
        name="Bank",
        account_type="bank_account",
        currency="BDT",
    )


@pytest_asyncio.fixture
async def usd_card(account_store: AccountStore):
    """USD 카드 계정 (기초 잔액 200)"""
    return await account_store.create_account(
        name="USD Card",
        account_type="card",
        currency="USD",
        opening_balance=Decimal("200"),
    )
