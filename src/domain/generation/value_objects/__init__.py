"""
Generation Value Objects.

Immutable objects describing lifecycle statuses and step outcomes.

Available Value Objects:
    - GenerationStatus: Generation lifecycle status (with transition rules)
    - ExecutionStatus: AppExecution lifecycle status
    - StepResult: Typed outcome of one execution step
"""

from src.domain.generation.value_objects.status import (
    ExecutionStatus,
    GenerationStatus,
)
from src.domain.generation.value_objects.step_result import StepResult

__all__ = [
    "GenerationStatus",
    "ExecutionStatus",
    "StepResult",
]
