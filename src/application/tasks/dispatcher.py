"""
Celery Job Dispatcher

Implements JobDispatcherProtocol by sending tasks by name, so services can
enqueue work without importing the task modules.
"""

import logging
from typing import Optional

from celery import Celery

from .celery_app import celery_app

logger = logging.getLogger(__name__)

PROCESS_GENERATION_TASK = "process_generation"
PROCESS_APP_EXECUTION_TASK = "process_app_execution"


class CeleryJobDispatcher:
    def __init__(self, app: Optional[Celery] = None) -> None:
        self.app = app or celery_app

    def dispatch_generation(self, generation_id: int) -> None:
        result = self.app.send_task(PROCESS_GENERATION_TASK, args=[generation_id])
        logger.info(f"Enqueued {PROCESS_GENERATION_TASK} for generation {generation_id} (task {result.id})")

    def dispatch_execution(self, execution_id: int, skip_approval: bool = False) -> None:
        result = self.app.send_task(
            PROCESS_APP_EXECUTION_TASK,
            args=[execution_id],
            kwargs={"skip_approval": skip_approval},
        )
        logger.info(
            f"Enqueued {PROCESS_APP_EXECUTION_TASK} for execution {execution_id} "
            f"(skip_approval={skip_approval}, task {result.id})"
        )
