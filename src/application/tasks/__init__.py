"""
Celery Tasks

Responsibility:
    Asynchronous task definitions for generation jobs and app execution steps.

Contains:
    - celery_app.py - Celery configuration and health_check
    - dispatcher.py - JobDispatcherProtocol implementation (send_task by name)
    - generation_tasks.py - process_generation, process_app_execution

Does NOT contain:
    - Business logic (delegates to Application services)
"""

from .celery_app import celery_app, health_check
from .dispatcher import CeleryJobDispatcher
from .generation_tasks import process_app_execution, process_generation

__all__ = [
    "celery_app",
    "health_check",
    "CeleryJobDispatcher",
    "process_generation",
    "process_app_execution",
]
