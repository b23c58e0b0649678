"""
Shared Redis pool for the HVAC cache tiers.

HvacCacheStrategy keeps its redis and database tiers here, Celery cache tasks
open their own HvacCacheStrategy over the same pool, and GET /health reports
whether PING succeeds. The API lifespan calls close_connections() on shutdown.

Settings (env):
    REDIS_HOST=localhost, REDIS_PORT=6379, REDIS_DB=0, REDIS_PASSWORD,
    REDIS_MAX_CONNECTIONS=10, REDIS_TIMEOUT=5 (seconds),
    REDIS_RETRY_ATTEMPTS=3 (PING attempts, backoff 1s, 2s, 4s ...)

Responses are decoded to str: cache payloads are JSON or "gz:" + base64 text.

Examples:
    >>> redis = get_redis_client()
    >>> redis.setex("hvac:service-tickets:ticket:t-1:details", 900, "{}")
    >>> health_check()
    True
"""

import logging
import os
import threading
import time
from typing import Callable, Optional

from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

logger = logging.getLogger(__name__)

_redis_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _create_pool(host: str, port: int, db: int, max_connections: int, timeout: int) -> ConnectionPool:
    logger.info(
        f"Creating Redis pool for HVAC cache: {host}:{port}/{db}, "
        f"max_connections={max_connections}, timeout={timeout}s"
    )
    return ConnectionPool(
        host=host,
        port=port,
        db=db,
        password=os.getenv("REDIS_PASSWORD") or None,
        max_connections=max_connections,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
        socket_keepalive=True,
        decode_responses=True,
    )


def _shared_pool(
    host: Optional[str],
    port: Optional[int],
    db: Optional[int],
    max_connections: Optional[int],
    timeout: Optional[int],
) -> ConnectionPool:
    global _redis_pool

    if _redis_pool is None:
        with _pool_lock:
            if _redis_pool is None:
                _redis_pool = _create_pool(
                    host=host or os.getenv("REDIS_HOST", "localhost"),
                    port=port or int(os.getenv("REDIS_PORT", "6379")),
                    db=db if db is not None else int(os.getenv("REDIS_DB", "0")),
                    max_connections=max_connections or int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
                    timeout=timeout or int(os.getenv("REDIS_TIMEOUT", "5")),
                )
    return _redis_pool


def _ping_until_ready(client: Redis, attempts: int, sleep: Callable[[float], None]) -> None:
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            client.ping()
            logger.debug(f"Redis answered PING on attempt {attempt}")
            return
        except (ConnectionError, TimeoutError) as e:
            last_error = e
            if attempt == attempts:
                logger.error(f"Redis unreachable after {attempts} attempts: {e}")
                break
            delay = 2 ** (attempt - 1)
            logger.warning(f"Redis PING failed ({attempt}/{attempts}): {e}. Next try in {delay}s")
            sleep(delay)

    raise RedisError(f"Failed to connect to Redis after {attempts} attempts. Last error: {last_error}")


def get_redis_client(
    host: Optional[str] = None,
    port: Optional[int] = None,
    db: Optional[int] = None,
    max_connections: Optional[int] = None,
    timeout: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Redis:
    """
    Redis client on the shared pool, verified with PING.

    Arguments override the env settings, but only for the call that creates
    the pool; later calls reuse it as is.

    Raises:
        RedisError: If PING keeps failing for REDIS_RETRY_ATTEMPTS attempts
    """
    client = Redis(connection_pool=_shared_pool(host, port, db, max_connections, timeout))
    _ping_until_ready(client, int(os.getenv("REDIS_RETRY_ATTEMPTS", "3")), sleep)
    return client


def health_check() -> bool:
    """True when Redis answers PING. Never raises."""
    try:
        if get_redis_client().ping():
            return True
        logger.warning("Redis health check: PING returned False")
        return False
    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return False


def close_connections() -> None:
    """Disconnect the shared pool; the next get_redis_client() builds a new one."""
    global _redis_pool

    with _pool_lock:
        if _redis_pool is None:
            return

        logger.info("Closing Redis pool")
        try:
            _redis_pool.disconnect()
        except RedisError as e:
            logger.error(f"Error closing Redis pool: {e}")
        finally:
            _redis_pool = None
