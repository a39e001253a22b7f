"""
스토리지 모듈

계정, 환율, 재무 설정, 결제수단 저장소 제공.
원장 항목 저장소는 core.ledger.LedgerStore.
"""

from core.storage.account_store import AccountStore
from core.storage.exchange_rate_store import ExchangeRateStore
from core.storage.finance_settings_store import FinanceSettingsStore
from core.storage.payment_method_store import PaymentMethodStore

__all__ = [
    "AccountStore",
    "ExchangeRateStore",
    "FinanceSettingsStore",
    "PaymentMethodStore",
]
