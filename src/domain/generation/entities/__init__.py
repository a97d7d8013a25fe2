"""
Generation Domain Entities.

Entities have identity and lifecycle - they are mutable objects tracked by ID.
Catalog definitions are immutable and looked up by slug.

Available Entities:
    - Generation: One AI model invocation
    - AppExecution: One run of a multi-step app
    - AiModel, AppStep, AppDefinition: Catalog definitions
"""

from src.domain.generation.entities.app_definition import (
    AiModel,
    AppDefinition,
    AppStep,
)
from src.domain.generation.entities.app_execution import (
    DEFAULT_EXECUTION_ERROR,
    AppExecution,
)
from src.domain.generation.entities.generation import (
    DEFAULT_GENERATION_ERROR,
    Generation,
)

__all__ = [
    "Generation",
    "AppExecution",
    "AiModel",
    "AppStep",
    "AppDefinition",
    "DEFAULT_GENERATION_ERROR",
    "DEFAULT_EXECUTION_ERROR",
]
