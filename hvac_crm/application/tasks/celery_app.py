"""
Celery application initialization.

Worker app for background cache maintenance (peak-hour warming, workflow
prefetching) and a health_check task for broker/backend verification.

Architecture Note:
- Part of Application Layer (orchestration)
- Uses environment variables for configuration
- No business logic - pure infrastructure setup
"""

import os
from datetime import datetime

from celery import Celery
from celery.schedules import crontab
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

celery_app = Celery(
    "hvac_crm",
    broker=os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0"),
    backend=os.environ.get("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
)

celery_app.conf.update(
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    result_expires=3600,  # Results expire after 1 hour
    timezone=os.environ.get("HVAC_TIMEZONE", "Europe/Warsaw"),
    beat_schedule={
        # Morning dispatch starts at 7:00 on working days
        "warm-cache-before-morning-dispatch": {
            "task": "warm_cache_for_peak_hours",
            "schedule": crontab(hour=6, minute=45, day_of_week="mon-fri"),
        },
    },
)

celery_app.autodiscover_tasks(["hvac_crm.application.tasks"], related_name="cache_tasks")


@celery_app.task(name="health_check")
def health_check() -> dict:
    """
    Simple health check task to verify Celery-Redis connection.

    Returns:
        dict: Status information with timestamp
            - status (str): "ok" if healthy
            - message (str): Human-readable status message
            - timestamp (str): ISO format timestamp
            - worker (str): Worker hostname that executed the task
    """
    return {
        "status": "ok",
        "message": "Celery worker is healthy",
        "timestamp": datetime.now().isoformat(),
        "worker": (
            celery_app.current_task.request.hostname
            if celery_app.current_task
            else "unknown"
        ),
    }
