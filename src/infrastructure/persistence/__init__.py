"""
Persistence Infrastructure Module

Data persistence implementations (Redis connection, repositories).

Exports:
    From repositories:
        - RedisGenerationRepository
        - RedisExecutionRepository
"""

from .repositories import RedisExecutionRepository, RedisGenerationRepository

__all__ = [
    "RedisGenerationRepository",
    "RedisExecutionRepository",
]
