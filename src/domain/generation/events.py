"""
Completion Events

Notification events pushed to a user's private channel when a generation or
an app execution reaches a state the user should hear about.

Responsibility:
    - Define the event names and payload shapes sent to clients
    - Name the per-user channel ("user.<id>") the event is delivered on
    - Build the wire envelope {"event", "channel", "payload"}

Architecture Notes:
    - Pydantic models (validated, JSON-serializable)
    - Built by the CompletionNotifier, published by a NotificationPublisher
    - Payload keys are a client contract: do not rename
"""

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CHANNEL_PREFIX = "user"


def user_channel(user_id: int, prefix: str = DEFAULT_CHANNEL_PREFIX) -> str:
    """
    Private channel name for a user.

    Examples:
        >>> user_channel(42)
        'user.42'
    """
    return f"{prefix}.{int(user_id)}"


class CompletionEvent(BaseModel):
    """Base class: an event addressed to exactly one user."""

    event_name: ClassVar[str] = ""

    user_id: int = Field(..., description="Recipient (owner of the record)")

    def payload(self) -> dict[str, Any]:
        return self.model_dump(exclude={"user_id"})

    def envelope(self, prefix: str = DEFAULT_CHANNEL_PREFIX) -> dict[str, Any]:
        """
        Wire envelope published on the user's channel.

        Returns:
            {"event": "generation.completed", "channel": "user.5", "payload": {...}}
        """
        return {
            "event": self.event_name,
            "channel": user_channel(self.user_id, prefix),
            "payload": self.payload(),
        }


class GenerationCompletedEvent(CompletionEvent):
    """
    Sent when a standalone generation reaches a terminal status.

    Sent for failures too; clients read the status field.
    """

    model_config = ConfigDict(protected_namespaces=())

    event_name: ClassVar[str] = "generation.completed"

    generation_id: int
    status: str
    model_name: str = "Unknown"
    model_slug: str = ""
    thumbnail_url: Optional[str] = None
    result: Optional[str] = None


class AppExecutionCompletedEvent(CompletionEvent):
    """
    Sent when an app execution completes, fails or pauses for approval,
    and when an approved execution resumes.
    """

    event_name: ClassVar[str] = "app.execution.completed"

    execution_id: int
    status: str
    app_name: str = ""
    app_slug: str = ""
