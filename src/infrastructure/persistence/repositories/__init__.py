"""
Repository Implementations

Exports:
    - RedisGenerationRepository: Generation Store
    - RedisExecutionRepository: Execution Store
"""

from .execution_repository import RedisExecutionRepository
from .generation_repository import RedisGenerationRepository

__all__ = [
    "RedisGenerationRepository",
    "RedisExecutionRepository",
]
