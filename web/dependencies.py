"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
테스트에서는 app.dependency_overrides로 DB 세션을 교체.
"""

from typing import AsyncGenerator

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.storage.finance_settings_store import FinanceSettingsStore


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    목록/조회/리포트 API에서 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    원장 기록, 이체, 계정/환율/설정 변경 시 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


def finance_settings_store(db: SQLiteAdapter, settings: Settings) -> FinanceSettingsStore:
    """settings.yaml 기본값을 적용한 FinanceSettingsStore 생성"""
    return FinanceSettingsStore(
        db,
        default_base_currency=settings.default_base_currency,
        default_allow_negative_balances=settings.default_allow_negative_balances,
    )
