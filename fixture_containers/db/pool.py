"""
PostgreSQL connection pool for fixture containers.

Thin asyncpg wrapper used by tests to check that a fixture database accepts
connections.
"""

import asyncio
import logging

import asyncpg

from fixture_containers.runner.errors import FixtureContainerError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 30


class PoolConnectionError(FixtureContainerError):
    """Raised when a connection pool cannot be created."""
    pass


async def create_pool(url: str, max_size: int = DEFAULT_MAX_SIZE, timeout: float = 10.0) -> asyncpg.Pool:
    """
    Create an asyncpg pool for a fixture database.

    Args:
        url: postgres:// connection URL
        max_size: Maximum number of pooled connections
        timeout: Connection timeout in seconds

    Raises:
        PoolConnectionError: If the database cannot be reached
    """
    try:
        pool = await asyncpg.create_pool(url, min_size=1, max_size=max_size, timeout=timeout)
    except (asyncpg.PostgresError, asyncio.TimeoutError, OSError) as e:
        raise PoolConnectionError(f"Cannot create connection pool: {e}") from e

    logger.info(f"Connection pool created (max_size={max_size})")
    return pool
