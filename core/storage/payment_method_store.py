"""
PaymentMethodStore - 결제수단 레지스트리

계정 생성/import 시 payment_method_key 검증용 최소 저장소.
"""

import logging

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import AlreadyExistsError, ValidationError

logger = logging.getLogger(__name__)


class PaymentMethodStore:
    """결제수단 저장소 (key → name)"""

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def exists(self, key: str) -> bool:
        row = await self.db.fetchone(
            "SELECT 1 FROM payment_method WHERE key = ?",
            (key,),
        )
        return row is not None

    async def list_keys(self) -> set[str]:
        rows = await self.db.fetchall("SELECT key FROM payment_method")
        return {row[0] for row in rows}

    async def list_methods(self) -> list[dict[str, str]]:
        rows = await self.db.fetchall(
            "SELECT key, name, created_at FROM payment_method ORDER BY name"
        )
        return [{"key": row[0], "name": row[1], "created_at": row[2]} for row in rows]

    async def create(self, key: str, name: str) -> dict[str, str]:
        """결제수단 등록

        Raises:
            ValidationError: key/name이 비어 있음
            AlreadyExistsError: 같은 key 존재
        """
        key = (key or "").strip()
        name = (name or "").strip()
        if not key or not name:
            raise ValidationError("Payment method key and name are required")

        async with self.db.transaction():
            if await self.exists(key):
                raise AlreadyExistsError(f"Payment method already exists: {key}")
            await self.db.execute(
                "INSERT INTO payment_method (key, name) VALUES (?, ?)",
                (key, name),
            )
            row = await self.db.fetchone(
                "SELECT key, name, created_at FROM payment_method WHERE key = ?",
                (key,),
            )

        logger.info("결제수단 등록", extra={"key": key})
        return {"key": row[0], "name": row[1], "created_at": row[2]}
