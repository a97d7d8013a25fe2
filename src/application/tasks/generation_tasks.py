"""
Celery Tasks for Generations and App Executions

Background entry points of the Job Runner and the step driver.

Responsibility:
    - process_generation: run one generation through GenerationRunner
    - process_app_execution: run the next step of an app execution
    - Log each stage with timestamp and memory usage
    - Retry with exponential backoff on store (Redis) errors

Architecture Notes:
    - Part of Application Layer (orchestration)
    - Thin orchestrators: services come from the composition root
      (src.shared.container), all logic lives in application services
    - Provider failures are recorded on the generation and never re-raised;
      only store failures trigger a retry
    - A job for a record that is already terminal is a no-op
"""

import logging
import time

from celery import Task
from redis.exceptions import RedisError

from .celery_app import celery_app
from src.shared import container
from src.shared.utils import log_with_memory

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    name="process_generation",
    max_retries=3,
    retry_backoff=True,  # Enable exponential backoff
    retry_backoff_max=900,  # Max 900 seconds (15 minutes) between retries
    time_limit=300,  # 5 minutes hard limit
    soft_time_limit=270,  # Warning 30 seconds before timeout
)
def process_generation(self: Task, generation_id: int) -> dict:
    """
    Run one generation.

    Args:
        self: Celery task instance (bind=True)
        generation_id: Generation Store id

    Returns:
        dict: {"generation_id", "status", "processing_time"}; status is
        "missing" when the generation does not exist

    Raises:
        celery.exceptions.Retry: On RedisError, up to max_retries
    """
    start_time = time.time()
    log_with_memory(logger, "START", f"process_generation {generation_id}")

    try:
        runner = container.get_generation_runner()
        generation = runner.run(generation_id)
    except RedisError as exc:
        log_with_memory(logger, "ERROR", f"Store error for generation {generation_id}: {exc}")
        raise self.retry(exc=exc)

    processing_time = time.time() - start_time
    status = generation.status.value if generation is not None else "missing"
    log_with_memory(
        logger,
        "COMPLETE",
        f"generation {generation_id} -> {status} in {processing_time:.2f}s",
    )
    return {
        "generation_id": generation_id,
        "status": status,
        "processing_time": processing_time,
    }


@celery_app.task(
    bind=True,
    name="process_app_execution",
    max_retries=3,
    retry_backoff=True,
    retry_backoff_max=900,
    time_limit=300,
    soft_time_limit=270,
)
def process_app_execution(
    self: Task, execution_id: int, skip_approval: bool = False
) -> dict:
    """
    Run the next step of an app execution.

    Args:
        self: Celery task instance (bind=True)
        execution_id: Execution Store id
        skip_approval: True when resuming after the owner approved the step

    Returns:
        dict: {"execution_id", "status", "current_step"}

    Error Handling:
        - RedisError: retry with exponential backoff
        - Anything else: the execution is marked failed and the owner
          notified; the task itself succeeds
    """
    log_with_memory(
        logger,
        "START",
        f"process_app_execution {execution_id} (skip_approval={skip_approval})",
    )
    service = container.get_app_execution_service()

    try:
        execution = service.execute_next_step(execution_id, skip_approval=skip_approval)
    except RedisError as exc:
        log_with_memory(logger, "ERROR", f"Store error for execution {execution_id}: {exc}")
        raise self.retry(exc=exc)
    except Exception as exc:
        logger.error(f"Execution {execution_id} job crashed: {exc}", exc_info=True)
        execution = service.fail_execution(execution_id, str(exc) or exc.__class__.__name__)

    if execution is None:
        return {"execution_id": execution_id, "status": "missing", "current_step": None}

    log_with_memory(
        logger,
        "COMPLETE",
        f"execution {execution_id} -> {execution.status.value} "
        f"(step {execution.current_step})",
    )
    return {
        "execution_id": execution_id,
        "status": execution.status.value,
        "current_step": execution.current_step,
    }
