"""
Shared Domain Module

Shared domain concepts used across all subdomains.
Contains the domain exception hierarchy.
"""

from .exceptions import (
    AppNotFoundError,
    DomainException,
    ExecutionNotAwaitingApprovalError,
    ExecutionNotFoundError,
    ForbiddenResourceError,
    GenerationNotFoundError,
    InvalidGenerationInputError,
    InvalidStatusTransitionError,
    ModelNotFoundError,
    ProviderRequestError,
    UploadTooLargeError,
)

__all__ = [
    "DomainException",
    "InvalidStatusTransitionError",
    "InvalidGenerationInputError",
    "ModelNotFoundError",
    "AppNotFoundError",
    "GenerationNotFoundError",
    "ExecutionNotFoundError",
    "ForbiddenResourceError",
    "ExecutionNotAwaitingApprovalError",
    "UploadTooLargeError",
    "ProviderRequestError",
]
