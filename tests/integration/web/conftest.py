"""
Web API 테스트 fixture

ASGITransport는 lifespan을 실행하지 않으므로
스키마가 적용된 테스트 DB를 의존성 override로 주입.
"""

from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings
from web.app import app
from web.dependencies import get_app_settings, get_db, get_db_write


@pytest_asyncio.fixture
async def client(db: SQLiteAdapter, tmp_path: Path) -> AsyncClient:
    """테스트 DB에 연결된 API 클라이언트 (settings.yaml 없음 = 기본값)"""

    async def override_db():
        yield db

    settings = get_settings(tmp_path / "missing-settings.yaml")

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_db_write] = override_db
    app.dependency_overrides[get_app_settings] = lambda: settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
