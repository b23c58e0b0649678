"""
Celery Tasks for HVAC Cache Maintenance

Responsibility:
    - Warm cache before peak hours (morning dispatch, emergency response)
    - Prefetch cache for a single workflow on demand
    - Retry on Redis / HVAC API failures with exponential backoff

Architecture Notes:
    - Part of Application Layer (orchestration)
    - Thin orchestrator: HvacCacheStrategy decides what goes where,
      HvacPrefetchLoader fetches data from HVAC API
"""

import logging
from datetime import datetime
from typing import Optional

from celery import Task
from redis.exceptions import RedisError

from .celery_app import celery_app
from hvac_crm.application.services.prefetch_loader import HvacPrefetchLoader
from hvac_crm.infrastructure.cache import HvacCacheStrategy
from hvac_crm.infrastructure.config import get_config
from hvac_crm.infrastructure.hvac_api import HvacApiClient, HvacApiError

logger = logging.getLogger(__name__)


def build_cache_components() -> tuple[HvacCacheStrategy, HvacPrefetchLoader, HvacApiClient]:
    """Create strategy, loader and client for one task run."""
    config = get_config()
    client = HvacApiClient(config)
    strategy = HvacCacheStrategy(default_ttl=config.cache.default_ttl)
    return strategy, HvacPrefetchLoader(client), client


@celery_app.task(
    bind=True,
    name="warm_cache_for_peak_hours",
    max_retries=3,
    retry_backoff=True,
    retry_backoff_max=600,
    time_limit=300,
    soft_time_limit=270,
)
def warm_cache_for_peak_hours_task(self: Task) -> dict:
    """
    Prefetch morning-dispatch and emergency-response data.

    Returns:
        dict with status, entries stored per workflow and timestamp
    """
    if not get_config().cache.enabled:
        logger.info("HVAC cache disabled, skipping peak-hour warming")
        return {"status": "skipped", "workflows": {}, "timestamp": datetime.now().isoformat()}

    strategy, loader, client = build_cache_components()
    try:
        stored = strategy.warm_cache_for_peak_hours(loader)
    except (HvacApiError, RedisError) as exc:
        logger.warning(f"Cache warming failed (attempt {self.request.retries + 1}): {exc}")
        raise self.retry(exc=exc)
    finally:
        client.close()

    return {"status": "ok", "workflows": stored, "timestamp": datetime.now().isoformat()}


@celery_app.task(
    bind=True,
    name="prefetch_workflow",
    max_retries=3,
    retry_backoff=True,
    retry_backoff_max=600,
    time_limit=300,
    soft_time_limit=270,
)
def prefetch_workflow_task(self: Task, workflow: str, triggered_by: Optional[str] = None) -> dict:
    """
    Prefetch cache entries for one workflow.

    Args:
        workflow: morning-dispatch, equipment-maintenance or emergency-response
        triggered_by: Optional user/process id for logs

    Raises:
        ValueError: Unknown workflow (not retried)
    """
    strategy, loader, client = build_cache_components()
    try:
        stored = strategy.prefetch_for_workflow(workflow, loader)
    except (HvacApiError, RedisError) as exc:
        logger.warning(f"Prefetch of {workflow} failed (attempt {self.request.retries + 1}): {exc}")
        raise self.retry(exc=exc)
    finally:
        client.close()

    logger.info(f"Prefetch of {workflow} stored {stored} entries (triggered_by={triggered_by})")
    return {
        "status": "ok",
        "workflow": workflow,
        "stored": stored,
        "timestamp": datetime.now().isoformat(),
    }
