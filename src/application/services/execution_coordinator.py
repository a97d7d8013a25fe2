"""
Execution Coordinator

Responsibility:
    Reacts to a Generation status edge and keeps the linked AppExecution in
    step: a completed generation advances the execution, a failed one fails
    it and notifies the owner.

Architecture Notes:
    - Part of Application Layer (Services)
    - Called explicitly by the Job Runner after every generation status
      write (no storage hooks, no global service locator)
    - Collaborators injected through the constructor:
        * execution_repository: Execution Store (re-read on every trigger)
        * step_advancer: object with handle_step_completion(execution, generation)
        * notifier: CompletionNotifier

Failure policy:
    - Completed path: any error raised while advancing is logged with its
      traceback and swallowed. The generation is already persisted and must
      not be rolled back because the execution could not advance.
    - Failed path: store errors propagate; notification is best-effort
      (CompletionNotifier swallows publish errors).
    - A trigger for an execution that is already terminal is a no-op, so a
      duplicate failure neither rewrites the store nor re-notifies.
"""

import logging
from typing import Optional, Protocol

from src.application.services.completion_notifier import CompletionNotifier
from src.domain.generation.entities import AppExecution, Generation
from src.domain.generation.repositories import ExecutionRepositoryProtocol
from src.domain.generation.value_objects import GenerationStatus

logger = logging.getLogger(__name__)


class StepAdvancerProtocol(Protocol):
    def handle_step_completion(
        self, execution: AppExecution, generation: Generation
    ) -> None:
        ...


class ExecutionCoordinator:
    """
    Translates generation status changes into execution progress.

    Examples:
        >>> coordinator = ExecutionCoordinator(execution_repo, app_service, notifier)
        >>> previous = generation.mark_completed({"result": "https://x/0.png"})
        >>> generation_repo.save(generation)
        >>> coordinator.on_generation_status_changed(generation, previous)
    """

    def __init__(
        self,
        execution_repository: ExecutionRepositoryProtocol,
        step_advancer: StepAdvancerProtocol,
        notifier: CompletionNotifier,
    ):
        self.execution_repository = execution_repository
        self.step_advancer = step_advancer
        self.notifier = notifier

    def on_generation_status_changed(
        self, generation: Generation, previous_status: Optional[GenerationStatus]
    ) -> None:
        """
        Handle one generation status edge.

        Args:
            generation: Generation after the status write
            previous_status: Status before the write (None on first save)

        Raises:
            RedisError (or any store error): Failed path only, when the
                execution cannot be persisted
        """
        if previous_status == generation.status:
            return
        if generation.app_execution_id is None:
            return

        if generation.status == GenerationStatus.COMPLETED:
            self._on_completed(generation)
        elif generation.status == GenerationStatus.FAILED:
            self._on_failed(generation)

    def _on_completed(self, generation: Generation) -> None:
        try:
            execution = self.execution_repository.get(generation.app_execution_id)
            if execution is None:
                logger.warning(
                    f"Generation {generation.id} completed for missing execution "
                    f"{generation.app_execution_id}"
                )
                return
            if execution.is_terminal:
                logger.info(
                    f"Execution {execution.id} already {execution.status.value}; "
                    f"ignoring completion of generation {generation.id}"
                )
                return

            self.step_advancer.handle_step_completion(execution, generation)
        except Exception as e:
            logger.error(
                f"Failed to advance execution {generation.app_execution_id} "
                f"after generation {generation.id} completed: {e}",
                exc_info=True,
            )

    def _on_failed(self, generation: Generation) -> None:
        execution = self.execution_repository.get(generation.app_execution_id)
        if execution is None:
            logger.warning(
                f"Generation {generation.id} failed for missing execution "
                f"{generation.app_execution_id}"
            )
            return
        if execution.is_terminal:
            logger.info(
                f"Execution {execution.id} already {execution.status.value}; "
                f"ignoring failure of generation {generation.id}"
            )
            return

        message = execution.record_step_failure(
            execution.current_step,
            generation.output_data or {},
            generation.error_message,
            generation_id=generation.id,
        )
        execution.mark_failed(message)
        self.execution_repository.save(execution)

        logger.info(
            f"Execution {execution.id} failed at step {execution.current_step}: {message}"
        )
        self.notifier.notify_execution(execution)
