import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

import asyncpg
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import InfrastructureError
from src.platform.logging.loguru_io import Logger


# Global connection pools per event loop
asyncpg_pools: dict[int, asyncpg.Pool] = {}


async def _register_uuid_codec(conn: asyncpg.Connection) -> None:
    """Decode uuid columns (check_in_log.id) as uuid_utils.UUID."""
    await conn.set_type_codec(
        'uuid',
        encoder=lambda value: value.bytes,
        decoder=lambda value: UUID(bytes=value),
        schema='pg_catalog',
        format='binary',
    )


async def get_asyncpg_pool() -> asyncpg.Pool:
    current_loop = asyncio.get_running_loop()
    loop_id = id(current_loop)

    # Fast path: pool already exists for this loop
    if loop_id in asyncpg_pools:
        return asyncpg_pools[loop_id]

    # Slow path: first request on this loop (startup warmup in production)
    dsn = settings.DATABASE_URL_ASYNC.replace('postgresql+asyncpg://', 'postgresql://')

    pool = await asyncpg.create_pool(
        dsn,
        min_size=settings.ASYNCPG_POOL_MIN_SIZE,
        max_size=settings.ASYNCPG_POOL_MAX_SIZE,
        command_timeout=settings.ASYNCPG_POOL_COMMAND_TIMEOUT,
        max_inactive_connection_lifetime=settings.ASYNCPG_POOL_MAX_INACTIVE_LIFETIME,
        timeout=settings.ASYNCPG_POOL_TIMEOUT,
        max_queries=settings.ASYNCPG_POOL_MAX_QUERIES,
        init=_register_uuid_codec,
    )

    asyncpg_pools[loop_id] = pool
    Logger.base.info(
        f'🐘 [Pool] Created asyncpg pool (min={pool.get_min_size()}, max={pool.get_max_size()})'
    )
    return pool


@asynccontextmanager
async def asyncpg_connection() -> AsyncIterator[asyncpg.Connection]:
    """
    Acquire a pooled connection; driver, network and timeout failures surface
    as InfrastructureError.
    """
    try:
        async with (await get_asyncpg_pool()).acquire() as conn:
            yield conn
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
        raise InfrastructureError(f'PostgreSQL unavailable: {type(e).__name__}: {e}') from e


async def warmup_asyncpg_pool() -> int:
    """
    Acquire MIN_SIZE connections and release them, so the first scans of a
    gate session do not pay for connection setup.
    """
    pool = await get_asyncpg_pool()
    connections = []

    Logger.base.info(
        f'🔥 [Pool Warmup] Starting warmup (target={settings.ASYNCPG_POOL_MIN_SIZE})...'
    )
    try:
        for i in range(settings.ASYNCPG_POOL_MIN_SIZE):
            try:
                connections.append(await pool.acquire(timeout=5.0))
            except asyncio.TimeoutError:
                Logger.base.warning(f'   ⚠️  Pool warmup timeout at {i + 1} connections')
                break
    finally:
        for conn in connections:
            await pool.release(conn)

    Logger.base.info(
        f'✅ [Pool Warmup] Completed: {len(connections)} connections ready '
        f'(size={pool.get_size()}, idle={pool.get_idle_size()})'
    )
    return len(connections)


async def close_all_asyncpg_pools() -> None:
    """Close every loop's pool. Only call during application shutdown."""
    for loop_id, pool in list(asyncpg_pools.items()):
        try:
            await pool.close()
        except (asyncpg.InterfaceError, OSError) as e:
            Logger.base.warning(f'⚠️ [Pool] Error closing pool for loop {loop_id}: {e}')
    asyncpg_pools.clear()
