"""
Generation Use Cases

Responsibility:
    Async entry points used by the API Layer for the write endpoints.
    Each use case executes one command against an application service and
    converts the resulting entity into a result DTO.

Architecture Notes:
    - Part of Application Layer (Services)
    - Thin: no business rules here; validation lives in commands, services
      and the domain
    - Domain exceptions propagate to the API Layer exception handlers
"""

from src.application.commands.generation_commands import (
    ApproveStepCommand,
    CreateGenerationCommand,
    StartAppCommand,
)
from src.application.models import ExecutionResult, GenerationResult
from src.application.services.app_execution_service import AppExecutionService
from src.application.services.generation_service import GenerationService

# ============================================================================
# GENERATIONS
# ============================================================================


class CreateGenerationUseCase:
    """
    POST /api/models/{slug}/generate.

    Persists a pending generation, enqueues the Job Runner and returns
    immediately (202); the result arrives through a notification or by
    polling GET /api/generations/{id}.
    """

    def __init__(self, generation_service: GenerationService):
        self.generation_service = generation_service

    async def execute(self, command: CreateGenerationCommand) -> GenerationResult:
        generation = self.generation_service.create_generation(
            user_id=command.user_id,
            model_slug=command.model_slug,
            input_data=command.input_data,
        )
        return GenerationResult.from_entity(generation)


# ============================================================================
# APP EXECUTIONS
# ============================================================================


class StartAppUseCase:
    def __init__(self, app_execution_service: AppExecutionService):
        self.app_execution_service = app_execution_service

    async def execute(self, command: StartAppCommand) -> ExecutionResult:
        execution = self.app_execution_service.start_app(
            command.app_slug, command.user_id, command.inputs
        )
        return ExecutionResult.from_entity(execution)


class ApproveStepUseCase:
    def __init__(self, app_execution_service: AppExecutionService):
        self.app_execution_service = app_execution_service

    async def execute(self, command: ApproveStepCommand) -> ExecutionResult:
        execution = self.app_execution_service.approve_step(
            command.execution_id, command.user_id, command.inputs
        )
        return ExecutionResult.from_entity(execution)
