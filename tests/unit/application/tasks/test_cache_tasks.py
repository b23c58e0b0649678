"""
Tests for Celery cache tasks.

Tasks are called directly (no broker); build_cache_components is patched
so no Redis or HVAC API is touched.
"""

from unittest.mock import MagicMock, patch

import pytest
from celery.schedules import crontab
from redis.exceptions import ConnectionError as RedisConnectionError

from hvac_crm.application.tasks import (
    celery_app,
    health_check,
    prefetch_workflow_task,
    warm_cache_for_peak_hours_task,
)
from hvac_crm.infrastructure.config import CacheSettings, HvacConfig
from hvac_crm.infrastructure.hvac_api import HvacApiServerError

MODULE = "hvac_crm.application.tasks.cache_tasks"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def components():
    strategy = MagicMock()
    loader = MagicMock()
    client = MagicMock()
    with patch(f"{MODULE}.build_cache_components", return_value=(strategy, loader, client)):
        yield strategy, loader, client


@pytest.fixture
def enabled_config(hvac_config):
    with patch(f"{MODULE}.get_config", return_value=hvac_config):
        yield hvac_config


# ============================================================================
# CONFIGURATION TESTS
# ============================================================================


@pytest.mark.parametrize("task", [warm_cache_for_peak_hours_task, prefetch_workflow_task])
def test_task_retry_config(task):
    assert task.max_retries == 3
    assert task.time_limit == 300
    assert task.soft_time_limit == 270
    assert task.retry_backoff is True
    assert task.retry_backoff_max == 600


def test_task_names():
    assert warm_cache_for_peak_hours_task.name == "warm_cache_for_peak_hours"
    assert prefetch_workflow_task.name == "prefetch_workflow"
    assert health_check.name == "health_check"


def test_beat_schedule_warms_cache_on_working_days():
    entry = celery_app.conf.beat_schedule["warm-cache-before-morning-dispatch"]

    assert entry["task"] == "warm_cache_for_peak_hours"
    assert entry["schedule"] == crontab(hour=6, minute=45, day_of_week="mon-fri")


def test_health_check_task():
    result = health_check()

    assert result["status"] == "ok"
    assert "timestamp" in result


# ============================================================================
# WARM CACHE TASK
# ============================================================================


def test_warm_cache_returns_workflow_counts(components, enabled_config):
    # Arrange
    strategy, loader, client = components
    strategy.warm_cache_for_peak_hours.return_value = {"morning-dispatch": 12, "emergency-response": 4}

    # Act
    result = warm_cache_for_peak_hours_task()

    # Assert
    assert result["status"] == "ok"
    assert result["workflows"] == {"morning-dispatch": 12, "emergency-response": 4}
    strategy.warm_cache_for_peak_hours.assert_called_once_with(loader)
    client.close.assert_called_once()


def test_warm_cache_skipped_when_cache_disabled(components):
    strategy, _, _ = components
    disabled = HvacConfig(cache=CacheSettings(enabled=False))

    with patch(f"{MODULE}.get_config", return_value=disabled):
        result = warm_cache_for_peak_hours_task()

    assert result["status"] == "skipped"
    strategy.warm_cache_for_peak_hours.assert_not_called()


def test_warm_cache_failure_is_raised_and_client_closed(components, enabled_config):
    strategy, _, client = components
    strategy.warm_cache_for_peak_hours.side_effect = RedisConnectionError("down")

    # Called directly, retry() re-raises original exception
    with pytest.raises(RedisConnectionError):
        warm_cache_for_peak_hours_task()

    client.close.assert_called_once()


# ============================================================================
# PREFETCH TASK
# ============================================================================


def test_prefetch_workflow(components):
    strategy, loader, _ = components
    strategy.prefetch_for_workflow.return_value = 7

    result = prefetch_workflow_task("equipment-maintenance", triggered_by="user-1")

    assert result["workflow"] == "equipment-maintenance"
    assert result["stored"] == 7
    strategy.prefetch_for_workflow.assert_called_once_with("equipment-maintenance", loader)


def test_prefetch_unknown_workflow_is_not_retried(components):
    strategy, _, client = components
    strategy.prefetch_for_workflow.side_effect = ValueError("Unknown workflow 'x'")

    with pytest.raises(ValueError):
        prefetch_workflow_task("x")

    client.close.assert_called_once()


def test_prefetch_api_failure_is_raised(components):
    strategy, _, _ = components
    strategy.prefetch_for_workflow.side_effect = HvacApiServerError("boom", status_code=502)

    with pytest.raises(HvacApiServerError):
        prefetch_workflow_task("morning-dispatch")
