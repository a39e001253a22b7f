"""
FinanceSettingsStore - 재무 설정 저장소

finance_settings 테이블(싱글턴 행) 관리.
- base_currency: 집계 기준 통화
- allow_negative_balances: 이체로 음수 잔액 허용 여부

최초 조회 시 기본값으로 행을 생성 (지연 생성).
"""

import logging
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.currency.resolver import normalize_currency
from core.domain.models import FINANCE_SETTINGS_COLUMNS, FinanceSettings
from core.errors import AlreadyExistsError, ValidationError
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


class FinanceSettingsStore:
    """재무 설정 저장소

    Args:
        db: SQLiteAdapter 인스턴스
        default_base_currency: 지연 생성 시 기준 통화
        default_allow_negative_balances: 지연 생성 시 음수 잔액 허용 여부

    사용 예시:
    ```python
    store = FinanceSettingsStore(db)
    settings = await store.get()  # 없으면 기본값으로 생성
    await store.update(base_currency="USD")
    ```
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        default_base_currency: str = Defaults.BASE_CURRENCY,
        default_allow_negative_balances: bool = Defaults.ALLOW_NEGATIVE_BALANCES,
    ):
        self.db = db
        self.default_base_currency = default_base_currency
        self.default_allow_negative_balances = default_allow_negative_balances

    async def find(self) -> FinanceSettings | None:
        """설정 행 조회 (생성하지 않음)"""
        row = await self.db.fetchone(
            f"SELECT {FINANCE_SETTINGS_COLUMNS} FROM finance_settings LIMIT 1"
        )
        return FinanceSettings.from_row(row) if row else None

    async def get(self) -> FinanceSettings:
        """설정 조회 (없으면 기본값으로 생성)"""
        async with self.db.transaction():
            settings = await self.find()
            if settings is None:
                settings = await self._insert(
                    self.default_base_currency,
                    self.default_allow_negative_balances,
                )
                logger.info(
                    "재무 설정 기본값 생성",
                    extra={"base_currency": settings.base_currency},
                )
        return settings

    async def create(
        self,
        base_currency: str | None = None,
        allow_negative_balances: bool | None = None,
    ) -> FinanceSettings:
        """설정 생성

        Raises:
            AlreadyExistsError: 이미 설정 행이 존재
            ValidationError: 기준 통화가 비어 있음
        """
        async with self.db.transaction():
            if await self.find() is not None:
                raise AlreadyExistsError("Finance settings already exist")
            settings = await self._insert(
                base_currency if base_currency is not None else self.default_base_currency,
                (
                    allow_negative_balances
                    if allow_negative_balances is not None
                    else self.default_allow_negative_balances
                ),
            )

        logger.info("재무 설정 생성", extra={"base_currency": settings.base_currency})
        return settings

    async def update(
        self,
        base_currency: str | None = None,
        allow_negative_balances: bool | None = None,
    ) -> FinanceSettings:
        """설정 수정 (지정한 필드만)

        설정 행이 없으면 기본값으로 만든 뒤 수정.
        """
        async with self.db.transaction():
            current = await self.get()
            if base_currency is not None:
                current.base_currency = _validate_currency(base_currency)
            if allow_negative_balances is not None:
                current.allow_negative_balances = allow_negative_balances
            current.updated_at = now_utc().isoformat()

            await self.db.execute(
                """
                UPDATE finance_settings
                SET base_currency = ?, allow_negative_balances = ?, updated_at = ?
                WHERE settings_id = ?
                """,
                (
                    current.base_currency,
                    int(current.allow_negative_balances),
                    current.updated_at,
                    current.settings_id,
                ),
            )

        logger.info(
            "재무 설정 수정",
            extra={
                "base_currency": current.base_currency,
                "allow_negative_balances": current.allow_negative_balances,
            },
        )
        return current

    async def _insert(
        self,
        base_currency: str,
        allow_negative_balances: bool,
    ) -> FinanceSettings:
        settings = FinanceSettings(
            settings_id=str(uuid4()),
            base_currency=_validate_currency(base_currency),
            allow_negative_balances=allow_negative_balances,
            updated_at=now_utc().isoformat(),
        )
        await self.db.execute(
            f"INSERT INTO finance_settings ({FINANCE_SETTINGS_COLUMNS}) VALUES (?, ?, ?, ?)",
            (
                settings.settings_id,
                settings.base_currency,
                int(settings.allow_negative_balances),
                settings.updated_at,
            ),
        )
        return settings


def _validate_currency(code: str) -> str:
    normalized = normalize_currency(code)
    if not normalized:
        raise ValidationError("base_currency must not be empty")
    return normalized
