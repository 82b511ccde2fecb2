"""
Shared Redis connection pool for cache services.

A single lazily created pool, so the geocode cache and anything added
later reuse connections instead of opening their own.
"""
import logging
from typing import Optional

from redis import ConnectionPool, Redis

from ..config import settings

logger = logging.getLogger(__name__)

# Module-level pool instance (singleton)
_pool: Optional[ConnectionPool] = None


def get_redis_pool() -> Optional[ConnectionPool]:
    """
    Get the shared Redis connection pool (singleton).

    Creates the pool on first call with settings from config.
    Returns None if Redis is unreachable.
    """
    global _pool

    if _pool is not None:
        return _pool

    try:
        _pool = ConnectionPool(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.cache_redis_db,
            max_connections=10,
            socket_connect_timeout=2,
            socket_timeout=2,
            decode_responses=True,
        )

        # Verify pool works by getting a test connection
        test_client = Redis(connection_pool=_pool)
        test_client.ping()

        logger.info(
            "Redis connection pool initialized: %s:%s/db%s",
            settings.redis_host,
            settings.redis_port,
            settings.cache_redis_db,
        )
        return _pool

    except Exception as e:
        logger.warning("Failed to create Redis connection pool: %s", e)
        _pool = None
        return None


def get_redis_client() -> Optional[Redis]:
    """
    Get a Redis client using the shared connection pool.

    Returns:
        Redis client if pool is available, None otherwise
    """
    pool = get_redis_pool()

    if pool is None:
        return None

    return Redis(connection_pool=pool)


def reset_pool() -> None:
    """Disconnect and forget the pool; the next call creates a fresh one."""
    global _pool

    if _pool is not None:
        try:
            _pool.disconnect()
            logger.info("Redis connection pool disconnected")
        except Exception as e:
            logger.warning("Error disconnecting pool: %s", e)
        finally:
            _pool = None
