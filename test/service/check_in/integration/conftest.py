"""
PostgreSQL fixtures for the check-in repository integration tests

- check_in_database (session): create the test database if missing, reset the
  public schema and migrate it to head with alembic
- clean_database: truncate every table before each test, close the test's
  asyncpg pool after it
- seeded_event: one user, one event, nothing booked yet

The database name comes from POSTGRES_DB, set to check_in_test_db in
test/conftest.py. Without a reachable server every test here is skipped.
"""

import asyncio
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
import asyncpg
import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from src.platform.config.core_setting import settings
from src.platform.database.asyncpg_setting import close_all_asyncpg_pools, get_asyncpg_pool
from test.service.check_in.helpers import EVENT_ID, NOW, USER_ID, BookingSeeder


PROJECT_ROOT = Path(__file__).resolve().parents[4]

EVENT_DATE = NOW - timedelta(hours=1)


# =============================================================================
# Database Setup and Cleanup
# =============================================================================
def _server_dsn() -> str:
    return (
        f'postgresql://{settings.POSTGRES_USER}:'
        f'{settings.POSTGRES_PASSWORD.get_secret_value()}@'
        f'{settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}/postgres'
    )


async def _server_reachable() -> bool:
    try:
        conn = await asyncpg.connect(_server_dsn(), timeout=5)
    except (OSError, asyncio.TimeoutError):
        return False
    await conn.close()
    return True


async def _create_and_reset_test_database() -> None:
    test_db = settings.POSTGRES_DB
    db_url = settings.DATABASE_URL_ASYNC

    # Create database if not exists
    postgres_url = db_url.replace(f'/{test_db}', '/postgres')
    engine = create_async_engine(postgres_url, isolation_level='AUTOCOMMIT')
    async with engine.begin() as conn:
        result = await conn.execute(
            text('SELECT 1 FROM pg_database WHERE datname = :name'), {'name': test_db}
        )
        if not result.fetchone():
            await conn.execute(text(f'CREATE DATABASE {test_db}'))
    await engine.dispose()

    # Reset schema; alembic rebuilds it
    reset_engine = create_async_engine(db_url)
    async with reset_engine.begin() as conn:
        await conn.execute(text('DROP SCHEMA public CASCADE'))
        await conn.execute(text('CREATE SCHEMA public'))
    await reset_engine.dispose()


def _migrate_to_head() -> None:
    # env.py runs its own event loop, so this must be called outside one
    alembic_cfg = Config(str(PROJECT_ROOT / 'alembic.ini'))
    alembic_cfg.set_main_option('script_location', str(PROJECT_ROOT / 'src/platform/alembic'))
    command.upgrade(alembic_cfg, 'head')


async def _truncate_all_tables() -> None:
    engine = create_async_engine(settings.DATABASE_URL_ASYNC)
    try:
        async with engine.begin() as conn:
            result = await conn.execute(
                text(
                    "SELECT tablename FROM pg_tables WHERE schemaname = 'public' "
                    "AND tablename != 'alembic_version'"
                )
            )
            tables = [f'"{row[0]}"' for row in result]
            if tables:
                await conn.execute(text(f'TRUNCATE {", ".join(tables)} RESTART IDENTITY CASCADE'))
    finally:
        await engine.dispose()


# =============================================================================
# Integration Test Fixtures
# =============================================================================
@pytest.fixture(scope='session')
def check_in_database() -> str:
    if not asyncio.run(_server_reachable()):
        pytest.skip(
            f'PostgreSQL not reachable at {settings.POSTGRES_SERVER}:{settings.POSTGRES_PORT}'
        )
    asyncio.run(_create_and_reset_test_database())
    _migrate_to_head()
    return settings.POSTGRES_DB


@pytest_asyncio.fixture
async def clean_database(check_in_database: str) -> AsyncGenerator[None, None]:
    await _truncate_all_tables()
    yield
    # Pools are keyed by event loop; each test runs on a fresh loop
    await close_all_asyncpg_pools()


@pytest_asyncio.fixture
async def seeded_event(clean_database: None) -> str:
    pool = await get_asyncpg_pool()
    async with pool.acquire() as conn:
        await conn.execute(
            'INSERT INTO app_user (id, name, email, department, roll_no) '
            'VALUES ($1, $2, $3, $4, $5)',
            USER_ID,
            'Asha Rao',
            'u1@campus.test',
            'Mechanical',
            'ME-21-042',
        )
        await conn.execute(
            'INSERT INTO event (id, title, event_date, status, venue, check_in_window_hours) '
            'VALUES ($1, $2, $3, $4, $5, $6)',
            EVENT_ID,
            'Robotics Workshop',
            EVENT_DATE,
            'published',
            'Hall A',
            None,
        )
    return EVENT_ID


@pytest.fixture
def insert_booking(seeded_event: str) -> BookingSeeder:
    async def _insert(
        *,
        booking_id: str,
        ticket_id: str,
        status: str = 'confirmed',
        checked_in_at: Optional[datetime] = None,
        checked_in_by: Optional[str] = None,
        check_in_method: Optional[str] = None,
    ) -> None:
        pool = await get_asyncpg_pool()
        async with pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO booking
                    (id, ticket_id, event_id, user_id, status, booked_at,
                     checked_in_at, checked_in_by, check_in_method)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                """,
                booking_id,
                ticket_id,
                seeded_event,
                USER_ID,
                status,
                EVENT_DATE - timedelta(days=3),
                checked_in_at,
                checked_in_by,
                check_in_method,
            )

    return _insert
