"""
Lifecycle Status Value Objects

Status enums for Generation and AppExecution entities, together with the
transition rules each entity enforces.

Responsibility:
    - Single source of truth for status string values (stored in Redis, sent on the wire)
    - Allowed transition table for Generation
    - Terminal status detection for both entities

Architecture Notes:
    - Part of Generation subdomain (Domain Layer)
    - str-based enums so values serialize directly to JSON
    - Used by entities, application services, API schemas and notification events
"""

from enum import Enum


class GenerationStatus(str, Enum):
    """
    Status of a single generation job.

    Lifecycle:
        PENDING -> PROCESSING -> COMPLETED | FAILED

    A provider that answers synchronously, or a request rejected before a
    worker picked it up, may also move PENDING directly to a terminal status.
    Terminal statuses never change afterwards (no regression).

    Usage:
        >>> status = GenerationStatus.PROCESSING
        >>> status.can_transition_to(GenerationStatus.COMPLETED)
        True
        >>> GenerationStatus.COMPLETED.can_transition_to(GenerationStatus.PROCESSING)
        False
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True for COMPLETED and FAILED."""
        return self in (GenerationStatus.COMPLETED, GenerationStatus.FAILED)

    def can_transition_to(self, target: "GenerationStatus") -> bool:
        """Check whether moving from this status to target is allowed."""
        return target in _GENERATION_TRANSITIONS[self]


_GENERATION_TRANSITIONS: dict[GenerationStatus, frozenset[GenerationStatus]] = {
    GenerationStatus.PENDING: frozenset(
        {
            GenerationStatus.PROCESSING,
            GenerationStatus.COMPLETED,
            GenerationStatus.FAILED,
        }
    ),
    GenerationStatus.PROCESSING: frozenset(
        {GenerationStatus.COMPLETED, GenerationStatus.FAILED}
    ),
    GenerationStatus.COMPLETED: frozenset(),
    GenerationStatus.FAILED: frozenset(),
}


class ExecutionStatus(str, Enum):
    """
    Status of a multi-step app execution.

    Lifecycle:
        PENDING -> PROCESSING <-> WAITING_APPROVAL -> ... -> COMPLETED | FAILED

    WAITING_APPROVAL pauses the execution before a step flagged
    requires_approval; the owner resumes it through the approve endpoint.
    COMPLETED and FAILED are written exactly once.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    WAITING_APPROVAL = "waiting_approval"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True for COMPLETED and FAILED."""
        return self in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED)
