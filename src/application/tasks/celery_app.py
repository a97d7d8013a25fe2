"""
Celery application initialization.

Queue for the Job Runner (process_generation) and the step driver
(process_app_execution).

Architecture Note:
- Part of Application Layer (orchestration)
- Uses environment variables for configuration (.env loaded by python-dotenv)
- No business logic - pure infrastructure setup
"""

import os
from datetime import datetime

from celery import Celery
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

celery_app = Celery(
    "genrelay",
    broker=os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0"),
    backend=os.environ.get("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
)

celery_app.conf.update(
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    result_expires=3600,  # Results expire after 1 hour
    task_serializer="json",
    accept_content=["json"],
)

# Registers process_generation and process_app_execution
celery_app.autodiscover_tasks(["src.application.tasks"], related_name="generation_tasks")


@celery_app.task(name="health_check")
def health_check() -> dict:
    """
    Simple health check task to verify Celery-Redis connection.

    Returns:
        dict: status, message, ISO timestamp and worker hostname

    Example:
        >>> health_check.delay().get(timeout=5)
        {'status': 'ok', 'message': 'Celery worker is healthy', ...}
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
