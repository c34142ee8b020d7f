"""
Synchronous Redis client for the notifier threads.

One ConnectionPool per process, created on first use. It is sized for the
notifier thread pool plus the health check.
"""

from __future__ import annotations

import threading

import redis

from shared.config.settings import settings, REDIS_URL
from shared.config.logging import get_logger

logger = get_logger(__name__)

_pool: redis.ConnectionPool | None = None
_pool_lock = threading.Lock()


def _connection_pool() -> redis.ConnectionPool:
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = redis.ConnectionPool.from_url(
                REDIS_URL,
                max_connections=settings.notification_workers + 2,
                decode_responses=True,
                socket_connect_timeout=settings.redis_socket_timeout,
                socket_timeout=settings.redis_socket_timeout,
                health_check_interval=30,
            )
            logger.info("Redis pool created", max_connections=_pool.max_connections)
        return _pool


def get_redis_sync_client() -> redis.Redis:
    """Client bound to the shared pool; cheap to create per publish."""
    return redis.Redis(connection_pool=_connection_pool())


def check_redis_sync_health() -> bool:
    try:
        return bool(get_redis_sync_client().ping())
    except redis.RedisError as e:
        logger.warning("Redis ping failed", error=str(e))
        return False


def close_redis_sync_client() -> None:
    """Drop pooled connections. A later call to get_redis_sync_client reopens."""
    global _pool
    with _pool_lock:
        pool, _pool = _pool, None
    if pool is None:
        return
    try:
        pool.disconnect()
    except redis.RedisError as e:
        logger.warning("Redis pool did not close cleanly", error=str(e))
    else:
        logger.info("Redis pool closed")
