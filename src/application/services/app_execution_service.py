"""
App Execution Service

Responsibility:
    Drives a multi-step app execution: creates it, runs the step at
    current_step, advances after each completed step, pauses for approval
    and resumes once the owner approves.

Architecture Notes:
    - Part of Application Layer (Services)
    - Acts as the step advancer of the ExecutionCoordinator
      (handle_step_completion)
    - One step runs per process_app_execution job; the next job is enqueued
      only after the step's generation completes
    - Inputs for each step come from StepInputResolver (static config,
      user inputs, earlier step outputs)

Process Flow (execute_next_step):
    1. Re-read execution; stop if terminal
    2. No step at current_step -> COMPLETED, notify
    3. Step requires approval and not yet approved -> WAITING_APPROVAL, notify
    4. PROCESSING -> resolve inputs -> create linked generation -> enqueue it
    5. Any error in 4 -> FAILED with the error message, notify
"""

import logging
from typing import Any, Optional

from src.application.ports.job_dispatcher import JobDispatcherProtocol
from src.application.services.completion_notifier import CompletionNotifier
from src.application.services.generation_service import GenerationService
from src.domain.generation.entities import AppExecution, Generation
from src.domain.generation.repositories import (
    AppCatalogProtocol,
    ExecutionRepositoryProtocol,
)
from src.domain.generation.services import StepInputResolver
from src.domain.generation.value_objects import ExecutionStatus
from src.domain.shared.exceptions import (
    DomainException,
    ExecutionNotAwaitingApprovalError,
    ExecutionNotFoundError,
    ForbiddenResourceError,
)

logger = logging.getLogger(__name__)


class AppExecutionService:
    """
    Orchestrates app executions step by step.

    Examples:
        >>> service = AppExecutionService(
        ...     execution_repository, generation_service, catalog, notifier, dispatcher
        ... )
        >>> execution = service.start_app("portrait", user_id=5, inputs={"prompt": "cat"})
        >>> execution.status
        <ExecutionStatus.PENDING: 'pending'>
    """

    def __init__(
        self,
        execution_repository: ExecutionRepositoryProtocol,
        generation_service: GenerationService,
        catalog: AppCatalogProtocol,
        notifier: CompletionNotifier,
        dispatcher: JobDispatcherProtocol,
        input_resolver: Optional[StepInputResolver] = None,
    ):
        self.execution_repository = execution_repository
        self.generation_service = generation_service
        self.catalog = catalog
        self.notifier = notifier
        self.dispatcher = dispatcher
        self.input_resolver = input_resolver or StepInputResolver()

    # ========================================================================
    # START / APPROVE (API entry points)
    # ========================================================================

    def start_app(
        self, app_slug: str, user_id: int, inputs: Optional[dict[str, Any]] = None
    ) -> AppExecution:
        """
        Create a pending execution and enqueue its first step.

        Raises:
            AppNotFoundError: Unknown or inactive app
        """
        app = self.catalog.get_app(app_slug)
        execution = AppExecution(
            user_id=user_id,
            app_slug=app.slug,
            app_name=app.name,
            inputs=dict(inputs or {}),
        )
        self.execution_repository.save(execution)
        logger.info(
            f"Started app '{app.slug}' as execution {execution.id} for user {user_id}"
        )

        self.dispatcher.dispatch_execution(execution.id)
        return execution

    def approve_step(
        self,
        execution_id: int,
        user_id: int,
        extra_inputs: Optional[dict[str, Any]] = None,
    ) -> AppExecution:
        """
        Resume an execution paused before a step that requires approval.

        Raises:
            ExecutionNotFoundError: Unknown execution
            ForbiddenResourceError: Execution belongs to another user
            ExecutionNotAwaitingApprovalError: Execution is not paused
        """
        execution = self.execution_repository.get(execution_id)
        if execution is None:
            raise ExecutionNotFoundError(execution_id)
        if execution.user_id != user_id:
            raise ForbiddenResourceError("app execution", execution_id, user_id)
        if execution.status != ExecutionStatus.WAITING_APPROVAL:
            raise ExecutionNotAwaitingApprovalError(
                execution_id, execution.status.value
            )

        if extra_inputs:
            execution.inputs = {**execution.inputs, **extra_inputs}
        execution.mark_processing()
        self.execution_repository.save(execution)
        logger.info(
            f"Execution {execution_id} step {execution.current_step} approved; resuming"
        )

        self.notifier.notify_execution(execution)
        self.dispatcher.dispatch_execution(execution.id, skip_approval=True)
        return execution

    # ========================================================================
    # STEP EXECUTION (worker side)
    # ========================================================================

    def execute_next_step(
        self, execution_id: int, skip_approval: bool = False
    ) -> Optional[AppExecution]:
        """
        Run the step at current_step.

        Returns:
            The execution after this call, or None when it does not exist
        """
        execution = self.execution_repository.get(execution_id)
        if execution is None:
            logger.error(f"Execution {execution_id} not found")
            return None
        if execution.is_terminal:
            logger.info(
                f"Execution {execution_id} already {execution.status.value}; skipping"
            )
            return execution

        try:
            app = self.catalog.get_app(execution.app_slug)
        except DomainException as e:
            return self._fail(execution, e.message)

        step = app.step_at(execution.current_step)
        if step is None:
            logger.info(
                f"Execution {execution_id}: no step {execution.current_step}; completed"
            )
            execution.mark_completed()
            self.execution_repository.save(execution)
            self.notifier.notify_execution(execution)
            return execution

        if step.requires_approval and not skip_approval:
            logger.info(
                f"Execution {execution_id}: step {step.index} requires approval; pausing"
            )
            execution.mark_waiting_approval()
            self.execution_repository.save(execution)
            self.notifier.notify_execution(execution)
            return execution

        logger.info(
            f"Execution {execution_id}: running step {step.index} "
            f"'{step.name}' with model '{step.model_slug}'"
        )
        execution.mark_processing()
        self.execution_repository.save(execution)

        try:
            input_data = self.input_resolver.resolve(
                step, execution.inputs, execution.history
            )
            generation = self.generation_service.create_generation(
                user_id=execution.user_id,
                model_slug=step.model_slug,
                input_data=input_data,
                execution_id=execution.id,
                step_index=step.index,
                dispatch=False,
            )
            execution.add_generation(generation.id)
            self.execution_repository.save(execution)
        except DomainException as e:
            logger.error(f"Execution {execution_id} step {step.index} failed: {e}")
            return self._fail(execution, e.message)
        except Exception as e:
            logger.error(
                f"Execution {execution_id} step {step.index} failed: {e}", exc_info=True
            )
            return self._fail(execution, str(e) or e.__class__.__name__)

        self.dispatcher.dispatch_generation(generation.id)
        return execution

    def handle_step_completion(
        self, execution: AppExecution, generation: Generation
    ) -> None:
        """
        Record a completed step and enqueue the next one.

        A generation for a step other than current_step is stale (for
        example a redelivered job) and is ignored.
        """
        if generation.app_step_index != execution.current_step:
            logger.warning(
                f"Execution {execution.id}: generation {generation.id} is for step "
                f"{generation.app_step_index}, current step is "
                f"{execution.current_step}; ignoring"
            )
            return

        execution.record_step_output(
            execution.current_step, generation.output_data, generation.id
        )
        execution.advance_step()
        self.execution_repository.save(execution)
        logger.info(
            f"Execution {execution.id}: step {generation.app_step_index} done, "
            f"advancing to step {execution.current_step}"
        )

        self.dispatcher.dispatch_execution(execution.id)

    def fail_execution(self, execution_id: int, message: str) -> Optional[AppExecution]:
        """
        Fail an execution from outside the step flow (e.g. a crashed job).

        No-op when the execution is missing or already terminal.
        """
        execution = self.execution_repository.get(execution_id)
        if execution is None or execution.is_terminal:
            return execution
        return self._fail(execution, message)

    def _fail(self, execution: AppExecution, message: str) -> AppExecution:
        execution.record_step_failure(execution.current_step, {}, message)
        execution.mark_failed(message)
        self.execution_repository.save(execution)
        self.notifier.notify_execution(execution)
        return execution
