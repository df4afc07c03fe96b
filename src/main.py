"""
Check-In Service - Main Application

Gate staff scan or type tickets; each request is one resolve -> validate ->
commit attempt against PostgreSQL (or the in-memory store for local runs).
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.asyncpg_setting import (
    close_all_asyncpg_pools,
    warmup_asyncpg_pool,
)
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Check-In Service] Starting up...')

    tracing = TracingConfig(service_name='check-in-service')
    tracing.setup()
    Logger.base.info('📊 [Check-In Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Check-In Service] Dependency injection wired')

    use_postgres = settings.CHECK_IN_REPO_BACKEND == 'postgres'
    if use_postgres:
        tracing.instrument_asyncpg()
        # Fail fast: no pool means no gate can check anyone in
        await warmup_asyncpg_pool()
        Logger.base.info('🏊 [Check-In Service] Asyncpg pool warmed up')
    else:
        Logger.base.warning(
            '🧪 [Check-In Service] Using the unseeded in-memory check-in store (tests/demo only)'
        )

    Logger.base.info('✅ [Check-In Service] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Check-In Service] Shutting down...')

    if use_postgres:
        await close_all_asyncpg_pools()
        Logger.base.info('🏊 [Check-In Service] Asyncpg pools closed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Check-In Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
