"""
Celery Tasks

Responsibility:
    Asynchronous cache maintenance for the HVAC CRM.

Contains:
    - celery_app.py - Celery configuration and health_check task
    - cache_tasks.py - Peak-hour cache warming and workflow prefetching

Does NOT contain:
    - Business logic (delegates to Application services and cache strategy)
"""

from .cache_tasks import prefetch_workflow_task, warm_cache_for_peak_hours_task
from .celery_app import celery_app, health_check

__all__ = [
    "celery_app",
    "health_check",
    "prefetch_workflow_task",
    "warm_cache_for_peak_hours_task",
]
