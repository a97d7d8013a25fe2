"""
CQRS Commands (write operations).
"""

from src.application.commands.generation_commands import (
    ApproveStepCommand,
    CreateGenerationCommand,
    StartAppCommand,
)

__all__ = [
    "CreateGenerationCommand",
    "StartAppCommand",
    "ApproveStepCommand",
]
