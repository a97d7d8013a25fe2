"""
Generation Subdomain Module

Core business logic for AI generations and multi-step app executions.
Contains entities, value objects, events, services, and repository interfaces.

Exports:
    Entities:
        - Generation: One AI model invocation
        - AppExecution: One run of a multi-step app
        - AiModel, AppStep, AppDefinition: Catalog definitions

    Value Objects:
        - GenerationStatus, ExecutionStatus: Lifecycle statuses
        - StepResult: Outcome of one execution step

    Events:
        - GenerationCompletedEvent, AppExecutionCompletedEvent

    Services:
        - StepInputResolver: Step input resolution

    Repository Interfaces:
        - GenerationRepositoryProtocol, ExecutionRepositoryProtocol, AppCatalogProtocol

Usage:
    >>> from src.domain.generation import Generation, GenerationStatus
    >>> from src.domain.generation.entities import AppExecution
"""

# Entities
from .entities import (
    AiModel,
    AppDefinition,
    AppExecution,
    AppStep,
    Generation,
)

# Value Objects
from .value_objects import ExecutionStatus, GenerationStatus, StepResult

# Events
from .events import (
    AppExecutionCompletedEvent,
    GenerationCompletedEvent,
    user_channel,
)

# Services
from .services import StepInputResolver

# Repository Interfaces
from .repositories import (
    AppCatalogProtocol,
    ExecutionRepositoryProtocol,
    GenerationRepositoryProtocol,
)

__all__ = [
    "Generation",
    "AppExecution",
    "AiModel",
    "AppStep",
    "AppDefinition",
    "GenerationStatus",
    "ExecutionStatus",
    "StepResult",
    "GenerationCompletedEvent",
    "AppExecutionCompletedEvent",
    "user_channel",
    "StepInputResolver",
    "GenerationRepositoryProtocol",
    "ExecutionRepositoryProtocol",
    "AppCatalogProtocol",
]
