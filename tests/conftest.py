"""
Pytest Configuration and Shared Fixtures

Fixtures:
    - reset_global_state (autouse): Fresh config, Redis pool and API singletons per test
    - hvac_config: HvacConfig with test settings (no environment reads)
    - fixed_today / fixed_now: Stable dates for date-dependent rules

Architecture Notes:
    - Unit tests never reach real Redis, HVAC API or Weaviate:
      HTTP goes through httpx.MockTransport, Redis is a MagicMock
"""

import logging
from datetime import date, datetime

import pytest

import hvac_crm.infrastructure.persistence.redis.connection as redis_connection
from hvac_crm.infrastructure.config import HvacConfig, reset_config
from hvac_crm.infrastructure.config.hvac_config import (
    CacheSettings,
    HvacApiSettings,
    WeaviateSettings,
)

# Configure logger for tests
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================================
# GLOBAL STATE
# ============================================================================


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset config singleton and Redis pool before and after each test."""
    reset_config()
    redis_connection._redis_pool = None

    yield

    reset_config()
    redis_connection._redis_pool = None


# ============================================================================
# CONFIG / TIME FIXTURES
# ============================================================================


@pytest.fixture
def hvac_config() -> HvacConfig:
    """HvacConfig pointing at fake hosts with every feature enabled."""
    return HvacConfig(
        api=HvacApiSettings(
            url="http://hvac.test",
            api_key="test-key",
            version="v1",
            timeout_ms=5000,
        ),
        weaviate=WeaviateSettings(host="weaviate.test", port=8080),
        cache=CacheSettings(enabled=True, default_ttl=3600),
    )


@pytest.fixture
def fixed_today() -> date:
    return date(2026, 3, 2)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 30)
