"""
Domain Layer Exceptions

This module defines the exception hierarchy for the Domain Layer.
All domain-specific exceptions inherit from DomainException.

Responsibility:
    - Base exception class for domain errors
    - Type-safe error handling across layers
    - Clear separation from framework exceptions (FastAPI, Celery, Redis)

Architecture Notes:
    - Part of Shared Domain (used across all subdomains)
    - API Layer maps each subclass to an HTTP status code (see src/api/main.py)
    - Infrastructure Layer should not raise DomainException, except for
      ProviderRequestError which describes a failed provider call in domain terms
"""

from typing import Any, Optional


class DomainException(Exception):
    """
    Base exception for all domain layer errors.

    Usage:
        - Catch this in Application Layer to handle all domain errors
        - API Layer converts to appropriate HTTP status codes
        - Never raised for persistence failures (those stay RedisError)

    Examples:
        >>> raise DomainException("Business rule violation")

        >>> try:
        ...     generation.mark_processing()
        ... except DomainException as e:
        ...     logger.error(f"Domain error: {e}")
    """

    def __init__(self, message: str) -> None:
        """
        Initialize domain exception with error message.

        Args:
            message: Human-readable error description
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.__class__.__name__}: {self.message}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r})"


class InvalidStatusTransitionError(DomainException):
    """
    Raised when an entity is asked to move to a status it cannot reach.

    This exception is raised when:
    - A terminal Generation (completed/failed) is asked to change status
    - A Generation regresses (processing -> pending)
    - A terminal Execution is asked to become terminal again
    - A step result is written twice on the happy path

    Attributes:
        current_status: Status the entity is in
        requested_status: Status that was requested

    Examples:
        >>> raise InvalidStatusTransitionError(
        ...     "Generation 42 cannot move from completed to processing",
        ...     current_status="completed",
        ...     requested_status="processing",
        ... )
    """

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        requested_status: Optional[str] = None,
    ) -> None:
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(message)


class InvalidGenerationInputError(DomainException):
    """
    Raised when generation or app inputs fail validation.

    Examples:
        >>> raise InvalidGenerationInputError("Input payload must be a mapping")
        >>> raise InvalidGenerationInputError("Field 'prompt' is required", field_name="prompt")
    """

    def __init__(self, message: str, field_name: Optional[str] = None) -> None:
        self.field_name = field_name
        super().__init__(message)


class ModelNotFoundError(DomainException):
    """Raised when an AI model slug is unknown or the model is inactive."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"AI model '{slug}' not found or inactive")


class AppNotFoundError(DomainException):
    """Raised when an app slug is unknown or the app is inactive."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"App '{slug}' not found or inactive")


class GenerationNotFoundError(DomainException):
    """Raised when a generation id does not exist in the Generation Store."""

    def __init__(self, generation_id: int) -> None:
        self.generation_id = generation_id
        super().__init__(f"Generation {generation_id} not found")


class ExecutionNotFoundError(DomainException):
    """Raised when an execution id does not exist in the Execution Store."""

    def __init__(self, execution_id: int) -> None:
        self.execution_id = execution_id
        super().__init__(f"App execution {execution_id} not found")


class ForbiddenResourceError(DomainException):
    """
    Raised when a user touches a record (or channel) owned by another user.

    The API Layer always reports this as 403, never as a 5xx.

    Attributes:
        resource: Kind of resource ("generation", "execution", "channel")
        resource_id: Identifier of the resource
        user_id: Id of the requesting user
    """

    def __init__(self, resource: str, resource_id: Any, user_id: int) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} is not allowed to access {resource} {resource_id}"
        )


class ExecutionNotAwaitingApprovalError(DomainException):
    """Raised when approve is requested for an execution that is not paused."""

    def __init__(self, execution_id: int, status: str) -> None:
        self.execution_id = execution_id
        self.status = status
        super().__init__(
            f"App execution {execution_id} is not waiting for approval (status: {status})"
        )


class UploadTooLargeError(DomainException):
    """
    Raised when an uploaded input file exceeds the configured limit.

    Attributes:
        file_size_bytes: Actual file size in bytes
        max_size_bytes: Maximum allowed size in bytes

    Examples:
        >>> raise UploadTooLargeError(
        ...     "Upload too large",
        ...     file_size_bytes=15 * 1024 * 1024,
        ...     max_size_bytes=10 * 1024 * 1024,
        ... )
    """

    def __init__(
        self,
        message: str,
        file_size_bytes: Optional[int] = None,
        max_size_bytes: Optional[int] = None,
    ) -> None:
        self.file_size_bytes = file_size_bytes
        self.max_size_bytes = max_size_bytes

        if file_size_bytes and max_size_bytes:
            file_mb = file_size_bytes / (1024 * 1024)
            max_mb = max_size_bytes / (1024 * 1024)
            super().__init__(f"{message} (File: {file_mb:.2f}MB, Max: {max_mb:.2f}MB)")
        else:
            super().__init__(message)


class ProviderRequestError(DomainException):
    """
    Raised when the third-party AI provider rejects or fails a request.

    Captured at the job boundary: the Generation is marked failed with
    this message and the exception is never re-raised further up.

    Attributes:
        request_body: Payload that was sent to the provider
        response_body: Raw provider response text (if any)
        status_code: HTTP status code returned by the provider (if any)
    """

    def __init__(
        self,
        message: str,
        request_body: Optional[dict[str, Any]] = None,
        response_body: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.request_body = request_body or {}
        self.response_body = response_body
        self.status_code = status_code
        super().__init__(message)
