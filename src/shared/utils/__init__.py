"""
Shared Utilities

Responsibility:
    Generic utility functions used across the application.

Contains:
    - log_with_memory: Stage logging stamped with timestamp and RSS memory
"""

from .memory_logging import log_with_memory

__all__ = ["log_with_memory"]
