"""
FastAPI app factory shared by the production entrypoint and the test app.

Routes:
    /api/check_in/*   scan, manual entry, event stats
    /health           liveness
    /health/ready     readiness: the check-in store answers a round trip
    /metrics          Prometheus exposition
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.database.asyncpg_setting import asyncpg_connection
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.check_in.driving_adapter.http_controller.check_in_controller import (
    router as check_in_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Gate check-in: scan, validate and admit ticket holders',
    service_name: str = 'check-in-service',
) -> FastAPI:
    """
    Args:
        lifespan: startup/shutdown context (pool warmup, DI wiring)
        title_suffix: appended to the OpenAPI title, e.g. " (Test)"
        service_name: tracer service name
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Instrument before routes are mounted
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    # Scanner UIs are served from their own origin
    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['GET', 'POST'],
        allow_headers=['Authorization', 'Content-Type'],
    )

    register_exception_handlers(app)
    app.include_router(check_in_router, prefix='/api/check_in', tags=['check_in'])
    _register_operational_endpoints(app)

    return app


def _register_operational_endpoints(app: FastAPI) -> None:
    @app.get('/health', tags=['ops'])
    async def health_check() -> dict[str, str]:
        return {
            'status': 'healthy',
            'service': settings.PROJECT_NAME,
            'store': settings.CHECK_IN_REPO_BACKEND,
        }

    @app.get('/health/ready', tags=['ops'])
    async def readiness_check() -> dict[str, str]:
        """503 (via InfrastructureError) while PostgreSQL is unreachable."""
        if settings.CHECK_IN_REPO_BACKEND == 'postgres':
            async with asyncpg_connection() as conn:
                await conn.fetchval('SELECT 1')
        return {'status': 'ready', 'store': settings.CHECK_IN_REPO_BACKEND}

    @app.get('/metrics', tags=['ops'])
    async def get_metrics() -> PlainTextResponse:
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
