"""
Tests for Redis Connection Pool Management.

Covers:
- Singleton connection pool
- Retry logic with exponential backoff
- Health check with PING
- Connection cleanup
- Configuration from environment
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError, RedisError, TimeoutError

import hvac_crm.infrastructure.persistence.redis.connection as conn_module
from hvac_crm.infrastructure.persistence.redis.connection import (
    close_connections,
    get_redis_client,
    health_check,
)

MODULE = "hvac_crm.infrastructure.persistence.redis.connection"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def pool_class():
    with patch(f"{MODULE}.ConnectionPool") as mock_pool_class:
        yield mock_pool_class


@pytest.fixture
def mock_client():
    with patch(f"{MODULE}.Redis") as redis_class:
        client = MagicMock()
        client.ping.return_value = True
        redis_class.return_value = client
        yield client


def no_sleep(seconds: float) -> None:
    pass


# ============================================================================
# HAPPY PATH TESTS - get_redis_client()
# ============================================================================


def test_get_redis_client_creates_pool_once(pool_class, mock_client):
    first = get_redis_client()
    second = get_redis_client()

    assert first is mock_client
    assert second is mock_client
    assert pool_class.call_count == 1


def test_get_redis_client_uses_default_config(pool_class, mock_client, monkeypatch):
    for name in ("REDIS_HOST", "REDIS_PORT", "REDIS_DB", "REDIS_MAX_CONNECTIONS", "REDIS_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    get_redis_client()

    call_kwargs = pool_class.call_args.kwargs
    assert call_kwargs["host"] == "localhost"
    assert call_kwargs["port"] == 6379
    assert call_kwargs["db"] == 0
    assert call_kwargs["max_connections"] == 10
    assert call_kwargs["socket_timeout"] == 5
    assert call_kwargs["decode_responses"] is True
    assert call_kwargs["socket_keepalive"] is True


def test_get_redis_client_reads_config_from_env(pool_class, mock_client, monkeypatch):
    monkeypatch.setenv("REDIS_HOST", "redis.fulmark.local")
    monkeypatch.setenv("REDIS_PORT", "6380")
    monkeypatch.setenv("REDIS_DB", "2")
    monkeypatch.setenv("REDIS_TIMEOUT", "10")

    get_redis_client()

    call_kwargs = pool_class.call_args.kwargs
    assert call_kwargs["host"] == "redis.fulmark.local"
    assert call_kwargs["port"] == 6380
    assert call_kwargs["db"] == 2
    assert call_kwargs["socket_timeout"] == 10


def test_explicit_arguments_override_env(pool_class, mock_client, monkeypatch):
    monkeypatch.setenv("REDIS_HOST", "ignored")

    get_redis_client(host="redis.test", port=6390, db=0, max_connections=20, timeout=1)

    call_kwargs = pool_class.call_args.kwargs
    assert call_kwargs["host"] == "redis.test"
    assert call_kwargs["max_connections"] == 20


def test_arguments_after_pool_creation_are_ignored(pool_class, mock_client):
    get_redis_client(host="redis.first")

    get_redis_client(host="redis.second")

    assert pool_class.call_count == 1
    assert pool_class.call_args.kwargs["host"] == "redis.first"


# ============================================================================
# RETRY LOGIC TESTS - get_redis_client()
# ============================================================================


def test_get_redis_client_retries_with_exponential_backoff(pool_class, mock_client, monkeypatch):
    # Arrange
    monkeypatch.setenv("REDIS_RETRY_ATTEMPTS", "4")
    mock_client.ping.side_effect = [
        ConnectionError("Connection refused"),
        TimeoutError("Timeout"),
        ConnectionError("Connection refused"),
        True,
    ]
    delays = []

    # Act
    client = get_redis_client(sleep=delays.append)

    # Assert
    assert client is mock_client
    assert delays == [1, 2, 4]


def test_get_redis_client_raises_after_max_retries(pool_class, mock_client, monkeypatch):
    monkeypatch.delenv("REDIS_RETRY_ATTEMPTS", raising=False)
    mock_client.ping.side_effect = ConnectionError("Connection refused")

    with pytest.raises(RedisError, match="Failed to connect to Redis after 3 attempts"):
        get_redis_client(sleep=no_sleep)

    assert mock_client.ping.call_count == 3


def test_get_redis_client_is_thread_safe(pool_class, mock_client):
    threads = [threading.Thread(target=get_redis_client) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert pool_class.call_count == 1


# ============================================================================
# health_check()
# ============================================================================


def test_health_check_returns_true_when_redis_healthy():
    with patch(f"{MODULE}.get_redis_client") as mock_get_client:
        mock_get_client.return_value.ping.return_value = True

        assert health_check() is True


def test_health_check_returns_false_when_ping_fails():
    with patch(f"{MODULE}.get_redis_client") as mock_get_client:
        mock_get_client.return_value.ping.return_value = False

        assert health_check() is False


def test_health_check_returns_false_on_redis_error():
    with patch(f"{MODULE}.get_redis_client", side_effect=RedisError("Cannot connect")):
        assert health_check() is False


# ============================================================================
# close_connections()
# ============================================================================


def test_close_connections_disconnects_and_resets_pool(pool_class, mock_client):
    get_redis_client()
    pool = conn_module._redis_pool

    close_connections()

    pool.disconnect.assert_called_once()
    assert conn_module._redis_pool is None


def test_close_connections_is_idempotent():
    close_connections()
    close_connections()

    assert conn_module._redis_pool is None


def test_close_connections_resets_pool_even_on_error(pool_class, mock_client):
    get_redis_client()
    conn_module._redis_pool.disconnect.side_effect = RedisError("already closed")

    close_connections()

    assert conn_module._redis_pool is None
