"""
AppExecution Entity.

Domain entity representing one run of a multi-step app: an ordered chain of
generations where each step may consume the outputs of earlier steps.

Invariants enforced here:
    - current_step only moves forward (advance_step is the only mutator)
    - COMPLETED / FAILED are written exactly once and never modified afterwards
    - history holds at most one StepResult per step index, ordered by index;
      a completed entry is written once, a failure may overwrite an entry
    - error_message is a top-level attribute, not a key inside history
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from src.domain.generation.value_objects.status import (
    ExecutionStatus,
    GenerationStatus,
)
from src.domain.generation.value_objects.step_result import StepResult
from src.domain.shared.exceptions import InvalidStatusTransitionError

DEFAULT_EXECUTION_ERROR = "App execution failed"


@dataclass
class AppExecution:
    """
    Mutable entity tracking a multi-step app run.

    Attributes:
        user_id: Owning user
        app_slug: Slug of the app definition being executed
        app_name: Display name of the app (denormalised for notifications)
        inputs: User inputs for the whole run (uploads replaced by URLs)
        status: Current lifecycle status
        current_step: Index of the step being executed (0-based, never decreases)
        history: Ordered StepResult records, one per finished step
        error_message: Execution-wide failure message (global banner)
        generation_ids: Generations spawned for this run, in creation order
        id: Store-assigned identity, None until first save
        created_at: Entity creation timestamp
        updated_at: Last modification timestamp

    Examples:
        >>> execution = AppExecution(user_id=5, app_slug="portrait", app_name="Portrait")
        >>> execution.record_step_output(0, {"result": "https://x/0.png"})
        >>> execution.advance_step()
        >>> execution.current_step
        1
        >>> execution.step_result(0).get("result")
        'https://x/0.png'
    """

    user_id: int
    app_slug: str
    app_name: str = ""
    inputs: dict[str, Any] = field(default_factory=dict)

    status: ExecutionStatus = ExecutionStatus.PENDING
    current_step: int = 0
    history: list[StepResult] = field(default_factory=list)
    error_message: Optional[str] = None
    generation_ids: list[int] = field(default_factory=list)

    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def step_result(self, step_index: int) -> Optional[StepResult]:
        """Return the recorded result for a step, or None."""
        for result in self.history:
            if result.step_index == step_index:
                return result
        return None

    def _put_step_result(self, result: StepResult) -> None:
        remaining = [r for r in self.history if r.step_index != result.step_index]
        remaining.append(result)
        self.history = sorted(remaining, key=lambda r: r.step_index)
        self.updated_at = datetime.now()

    def record_step_output(
        self,
        step_index: int,
        output: Optional[dict[str, Any]],
        generation_id: Optional[int] = None,
    ) -> None:
        """
        Record the completed output of a step.

        Raises:
            InvalidStatusTransitionError: If the execution is terminal, or the
                step already has a completed entry
        """
        self._ensure_not_terminal("record step output")
        existing = self.step_result(step_index)
        if existing is not None and not existing.failed:
            raise InvalidStatusTransitionError(
                f"Step {step_index} of execution {self.id} already has a recorded result",
                current_status=existing.status.value,
                requested_status=GenerationStatus.COMPLETED.value,
            )
        self._put_step_result(
            StepResult(
                step_index=step_index,
                status=GenerationStatus.COMPLETED,
                output=dict(output or {}),
                generation_id=generation_id,
            )
        )

    def record_step_failure(
        self,
        step_index: int,
        output: Optional[dict[str, Any]],
        error_message: Optional[str],
        generation_id: Optional[int] = None,
    ) -> str:
        """
        Merge failure details into a step entry and set the global banner.

        Any previous entry for the step is overwritten.

        Returns:
            The message actually recorded (defaulted when empty)
        """
        message = error_message or DEFAULT_EXECUTION_ERROR
        self._put_step_result(
            StepResult(
                step_index=step_index,
                status=GenerationStatus.FAILED,
                output=dict(output or {}),
                error_message=message,
                generation_id=generation_id,
            )
        )
        self.error_message = message
        return message

    def history_mapping(self) -> dict[str, Any]:
        """
        Legacy history view keyed by step index plus an "error_message" key.

        Returns:
            {"0": {...output, "status": ...}, "error_message": "..."} for API
            clients that still read the old shape
        """
        mapping: dict[str, Any] = {
            str(result.step_index): result.as_legacy_entry() for result in self.history
        }
        if self.error_message is not None:
            mapping["error_message"] = self.error_message
        return mapping

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _ensure_not_terminal(self, action: str) -> None:
        if self.is_terminal:
            raise InvalidStatusTransitionError(
                f"App execution {self.id} is {self.status.value}; cannot {action}",
                current_status=self.status.value,
            )

    def advance_step(self) -> int:
        """
        Move current_step forward by one.

        Returns:
            The new current_step
        """
        self._ensure_not_terminal("advance step")
        self.current_step += 1
        self.updated_at = datetime.now()
        return self.current_step

    def add_generation(self, generation_id: int) -> None:
        if generation_id not in self.generation_ids:
            self.generation_ids.append(generation_id)
            self.updated_at = datetime.now()

    def mark_processing(self) -> None:
        self._ensure_not_terminal("resume processing")
        self.status = ExecutionStatus.PROCESSING
        self.updated_at = datetime.now()

    def mark_waiting_approval(self) -> None:
        self._ensure_not_terminal("pause for approval")
        self.status = ExecutionStatus.WAITING_APPROVAL
        self.updated_at = datetime.now()

    def mark_completed(self) -> None:
        self._ensure_not_terminal("complete")
        self.status = ExecutionStatus.COMPLETED
        self.updated_at = datetime.now()

    def mark_failed(self, error_message: Optional[str] = None) -> None:
        """
        Set the terminal FAILED status.

        Keeps an error_message already recorded by record_step_failure
        unless a new one is given.
        """
        self._ensure_not_terminal("fail")
        self.status = ExecutionStatus.FAILED
        if error_message:
            self.error_message = error_message
        elif not self.error_message:
            self.error_message = DEFAULT_EXECUTION_ERROR
        self.updated_at = datetime.now()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "app_slug": self.app_slug,
            "app_name": self.app_name,
            "inputs": self.inputs,
            "status": self.status.value,
            "current_step": self.current_step,
            "history": [result.to_dict() for result in self.history],
            "error_message": self.error_message,
            "generation_ids": list(self.generation_ids),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppExecution":
        return cls(
            id=data.get("id"),
            user_id=int(data["user_id"]),
            app_slug=data["app_slug"],
            app_name=data.get("app_name") or "",
            inputs=data.get("inputs") or {},
            status=ExecutionStatus(data.get("status", ExecutionStatus.PENDING.value)),
            current_step=int(data.get("current_step", 0)),
            history=[StepResult.from_dict(item) for item in data.get("history") or []],
            error_message=data.get("error_message"),
            generation_ids=[int(g) for g in data.get("generation_ids") or []],
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
            f"AppExecution(id={self.id}, user_id={self.user_id}, app_slug={self.app_slug!r}, "
            f"status={self.status.value}, current_step={self.current_step})"
        )
