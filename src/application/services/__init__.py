"""
Application Services

Responsibility:
    Orchestration services that coordinate domain objects, stores, the job
    queue and the notification channel.

Contains:
    - GenerationService: create/list generations
    - GenerationRunner: Job Runner completion path
    - ExecutionCoordinator: generation status edge -> execution progress
    - AppExecutionService: multi-step execution driver (step advancer)
    - CompletionNotifier: completion events on user channels
    - Use cases: async API entry points

Does NOT contain:
    - Domain business logic (use Domain entities/services)
    - Direct infrastructure calls (use dependency injection)
"""

from src.application.services.app_execution_service import AppExecutionService
from src.application.services.completion_notifier import CompletionNotifier
from src.application.services.execution_coordinator import (
    ExecutionCoordinator,
    StepAdvancerProtocol,
)
from src.application.services.generation_runner import GenerationRunner
from src.application.services.generation_service import (
    GenerationPage,
    GenerationService,
)
from src.application.services.generation_use_cases import (
    ApproveStepUseCase,
    CreateGenerationUseCase,
    StartAppUseCase,
)

__all__ = [
    "AppExecutionService",
    "CompletionNotifier",
    "ExecutionCoordinator",
    "StepAdvancerProtocol",
    "GenerationRunner",
    "GenerationPage",
    "GenerationService",
    "CreateGenerationUseCase",
    "StartAppUseCase",
    "ApproveStepUseCase",
]
