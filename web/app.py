"""
FundLedger API 애플리케이션

시작 시 원장 스키마를 보장하고 도메인별 라우터를 등록.
실행: python -m web
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logging import setup_logging

setup_logging("web")

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings
from core.ledger.schema import init_ledger_schema
from web.routes import (
    accounts,
    exchange_rates,
    health,
    ledger,
    payment_methods,
    reports,
    settings,
    transfers,
)

logger = logging.getLogger(__name__)

ROUTERS = (
    health.router,
    accounts.router,
    ledger.router,
    transfers.router,
    settings.router,
    exchange_rates.router,
    payment_methods.router,
    reports.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings = get_settings()

    async with SQLiteAdapter(app_settings.db_path) as db:
        await init_ledger_schema(db)

    logger.info(
        f"FundLedger 시작: env={app_settings.environment.value}, "
        f"db={app_settings.db_path}, base={app_settings.default_base_currency}"
    )
    yield
    logger.info("FundLedger 종료")


app = FastAPI(
    title="FundLedger API",
    description="다중 통화 원장 및 계정 잔액 API",
    version=health.API_VERSION,
    lifespan=lifespan,
)

# 로컬 대시보드용
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in ROUTERS:
    app.include_router(router)
