"""
Generation Entity.

Core domain entity representing a single AI model invocation.
This entity has identity (integer id assigned by the Generation Store)
and lifecycle (pending -> processing -> completed | failed).

Every status mutator returns the status the entity had before the call,
so the caller can detect the edge and hand it to the ExecutionCoordinator.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from src.domain.generation.value_objects.status import GenerationStatus
from src.domain.shared.exceptions import InvalidStatusTransitionError

DEFAULT_GENERATION_ERROR = "Generation failed"


@dataclass
class Generation:
    """
    Mutable entity representing one generation job with lifecycle tracking.

    Attributes:
        user_id: Owning user (exclusive ownership)
        model_slug: Slug of the AI model that runs this generation
        model_name: Display name of the AI model (denormalised for notifications)
        input_data: Normalised input mapping (uploads already replaced by URLs)
        status: Current lifecycle status
        output_data: Opaque model-specific result payload (result URL, etc.)
        error_message: Failure description, only set when status is FAILED
        thumbnail_url: Optional preview image
        app_execution_id: Non-owning link to the AppExecution that spawned it
        app_step_index: Step index inside that execution
        duration: Provider round-trip time in seconds
        id: Store-assigned identity, None until first save
        created_at: Entity creation timestamp
        updated_at: Last modification timestamp

    Examples:
        >>> generation = Generation(user_id=5, model_slug="flux-dev", model_name="Flux Dev")
        >>> generation.status
        <GenerationStatus.PENDING: 'pending'>
        >>> generation.mark_processing()
        <GenerationStatus.PENDING: 'pending'>
        >>> generation.mark_completed({"result": "https://x/out.png"})
        <GenerationStatus.PROCESSING: 'processing'>
        >>> generation.result_url
        'https://x/out.png'
    """

    user_id: int
    model_slug: str
    model_name: str = ""
    input_data: dict[str, Any] = field(default_factory=dict)

    status: GenerationStatus = GenerationStatus.PENDING
    output_data: Optional[dict[str, Any]] = None
    error_message: Optional[str] = None
    thumbnail_url: Optional[str] = None

    app_execution_id: Optional[int] = None
    app_step_index: Optional[int] = None

    duration: Optional[float] = None

    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def belongs_to_execution(self) -> bool:
        return self.app_execution_id is not None

    @property
    def result_url(self) -> Optional[str]:
        """Result URL from the output payload, if the model produced one."""
        if not self.output_data:
            return None
        result = self.output_data.get("result")
        return result if isinstance(result, str) else None

    def link_to_execution(self, execution_id: int, step_index: int) -> None:
        """Attach the non-owning execution/step back-reference."""
        self.app_execution_id = execution_id
        self.app_step_index = step_index
        self.updated_at = datetime.now()

    def _transition(self, target: GenerationStatus) -> GenerationStatus:
        previous = self.status
        if not previous.can_transition_to(target):
            raise InvalidStatusTransitionError(
                f"Generation {self.id} cannot move from {previous.value} to {target.value}",
                current_status=previous.value,
                requested_status=target.value,
            )
        self.status = target
        self.updated_at = datetime.now()
        return previous

    def mark_processing(self) -> GenerationStatus:
        """
        Move PENDING -> PROCESSING.

        Returns:
            Previous status

        Raises:
            InvalidStatusTransitionError: If the generation is not pending
        """
        return self._transition(GenerationStatus.PROCESSING)

    def mark_completed(
        self,
        output: Optional[dict[str, Any]] = None,
        thumbnail_url: Optional[str] = None,
        duration: Optional[float] = None,
    ) -> GenerationStatus:
        """
        Move to COMPLETED and store the provider output.

        Args:
            output: Result payload from the provider
            thumbnail_url: Optional preview image URL
            duration: Provider round-trip time in seconds

        Returns:
            Previous status

        Raises:
            InvalidStatusTransitionError: If the generation is already terminal
        """
        previous = self._transition(GenerationStatus.COMPLETED)
        self.output_data = output or {}
        self.error_message = None
        if thumbnail_url:
            self.thumbnail_url = thumbnail_url
        if duration is not None:
            self.duration = duration
        return previous

    def mark_failed(
        self, error_message: Optional[str] = None, output: Optional[dict[str, Any]] = None
    ) -> GenerationStatus:
        """
        Move to FAILED with a human-readable message.

        An empty or missing message is replaced by DEFAULT_GENERATION_ERROR,
        so a failed generation always carries an error_message.

        Returns:
            Previous status

        Raises:
            InvalidStatusTransitionError: If the generation is already terminal
        """
        previous = self._transition(GenerationStatus.FAILED)
        self.error_message = error_message or DEFAULT_GENERATION_ERROR
        if output is not None:
            self.output_data = output
        return previous

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize entity to a JSON-serializable dictionary.

        Used by the Redis repository and by API responses.
        """
        return {
            "id": self.id,
            "user_id": self.user_id,
            "model_slug": self.model_slug,
            "model_name": self.model_name,
            "input_data": self.input_data,
            "status": self.status.value,
            "output_data": self.output_data,
            "error_message": self.error_message,
            "thumbnail_url": self.thumbnail_url,
            "app_execution_id": self.app_execution_id,
            "app_step_index": self.app_step_index,
            "duration": self.duration,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Generation":
        """
        Deserialize entity from dictionary (typically to_dict() output).

        Raises:
            KeyError: If 'user_id' or 'model_slug' is missing
            ValueError: If 'status' is not a valid GenerationStatus value
        """
        return cls(
            id=data.get("id"),
            user_id=int(data["user_id"]),
            model_slug=data["model_slug"],
            model_name=data.get("model_name") or "",
            input_data=data.get("input_data") or {},
            status=GenerationStatus(data.get("status", GenerationStatus.PENDING.value)),
            output_data=data.get("output_data"),
            error_message=data.get("error_message"),
            thumbnail_url=data.get("thumbnail_url"),
            app_execution_id=data.get("app_execution_id"),
            app_step_index=data.get("app_step_index"),
            duration=data.get("duration"),
            created_at=(
                datetime.fromisoformat(data["created_at"])
                if data.get("created_at")
                else datetime.now()
            ),
            updated_at=(
                datetime.fromisoformat(data["updated_at"])
                if data.get("updated_at")
                else datetime.now()
            ),
        )

    def __repr__(self) -> str:
        return (
            f"Generation(id={self.id}, user_id={self.user_id}, "
            f"model_slug={self.model_slug!r}, status={self.status.value})"
        )
