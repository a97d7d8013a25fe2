"""
Redis connections for the stores and the notification channels.

One synchronous pool per process backs the Generation Store, the Execution
Store and the publisher. WebSocket subscribers get their own asyncio client
because a pub/sub connection cannot be shared.

Configuration (environment):
    - REDIS_HOST (default "localhost")
    - REDIS_PORT (default 6379)
    - REDIS_DB (default 0)
    - REDIS_MAX_CONNECTIONS (default 10)
    - REDIS_TIMEOUT in seconds (default 5)
    - REDIS_RETRY_ATTEMPTS (default 3), first PING retried after 1s, 2s, 4s...

Notes:
    - Pool creation is guarded by a lock (API threadpool, Celery threads)
    - get_redis_client raises RedisError once every attempt failed
    - health_check never raises
"""

import logging
import os
import threading
import time
from typing import Any, Optional

import redis.asyncio as aioredis
from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

logger = logging.getLogger(__name__)

_redis_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _settings() -> dict[str, Any]:
    return {
        "host": os.getenv("REDIS_HOST", "localhost"),
        "port": int(os.getenv("REDIS_PORT", "6379")),
        "db": int(os.getenv("REDIS_DB", "0")),
        "max_connections": int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
        "timeout": int(os.getenv("REDIS_TIMEOUT", "5")),
    }


def _build_pool(settings: dict[str, Any]) -> ConnectionPool:
    logger.info(
        "Opening Redis pool %s:%s/%s (max_connections=%s, timeout=%ss)",
        settings["host"],
        settings["port"],
        settings["db"],
        settings["max_connections"],
        settings["timeout"],
    )
    return ConnectionPool(
        host=settings["host"],
        port=settings["port"],
        db=settings["db"],
        max_connections=settings["max_connections"],
        socket_timeout=settings["timeout"],
        socket_connect_timeout=settings["timeout"],
        socket_keepalive=True,
        decode_responses=True,
    )


def _ping_with_retry(client: Redis, attempts: int) -> None:
    error: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            client.ping()
            return
        except (ConnectionError, TimeoutError) as e:
            error = e
            if attempt == attempts:
                break
            delay = 2 ** (attempt - 1)
            logger.warning(
                f"Redis PING failed ({attempt}/{attempts}): {e}; retrying in {delay}s"
            )
            time.sleep(delay)

    logger.error(f"Redis unreachable after {attempts} attempts: {error}")
    raise RedisError(
        f"Failed to connect to Redis after {attempts} attempts. Last error: {error}"
    )


def get_redis_client(
    host: Optional[str] = None,
    port: Optional[int] = None,
    db: Optional[int] = None,
    max_connections: Optional[int] = None,
    timeout: Optional[int] = None,
) -> Redis:
    """
    Client bound to the process-wide pool.

    Arguments override the environment, and only matter for the call that
    creates the pool.

    Raises:
        RedisError: If PING keeps failing for REDIS_RETRY_ATTEMPTS attempts

    Examples:
        >>> client = get_redis_client()
        >>> client.incr("generation:next_id")
        1
    """
    global _redis_pool

    if _redis_pool is None:
        with _pool_lock:
            if _redis_pool is None:
                settings = _settings()
                overrides = {
                    "host": host,
                    "port": port,
                    "db": db,
                    "max_connections": max_connections,
                    "timeout": timeout,
                }
                settings.update({k: v for k, v in overrides.items() if v is not None})
                _redis_pool = _build_pool(settings)

    client = Redis(connection_pool=_redis_pool)
    _ping_with_retry(client, int(os.getenv("REDIS_RETRY_ATTEMPTS", "3")))
    return client


def get_async_redis_client() -> aioredis.Redis:
    """
    Build an asyncio Redis client for pub/sub subscribers.

    A new client per WebSocket connection; the caller closes it with
    ``await client.aclose()``.
    """
    settings = _settings()
    return aioredis.Redis(
        host=settings["host"],
        port=settings["port"],
        db=settings["db"],
        socket_connect_timeout=settings["timeout"],
        decode_responses=True,
    )


def health_check() -> bool:
    """True when Redis answers PING."""
    try:
        return bool(get_redis_client().ping())
    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
    except Exception as e:
        logger.error(f"Redis health check crashed: {e}", exc_info=True)
    return False


def close_connections() -> None:
    """Disconnect the pool on shutdown. Safe to call more than once."""
    global _redis_pool

    with _pool_lock:
        pool, _redis_pool = _redis_pool, None
    if pool is None:
        return
    try:
        pool.disconnect()
    except Exception as e:
        logger.error(f"Error while closing Redis pool: {e}")
    else:
        logger.info("Redis pool closed")
