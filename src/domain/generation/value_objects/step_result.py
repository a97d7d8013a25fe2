"""
StepResult Value Object

Typed record of one step's outcome inside an AppExecution history.

Replaces the loosely keyed JSON history blob: every entry carries its step
index, a status, the generation output and an optional error message.
The execution-wide error banner lives on AppExecution.error_message, not
inside this record list.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from src.domain.generation.value_objects.status import GenerationStatus


@dataclass(frozen=True)
class StepResult:
    """
    Immutable outcome of a single execution step.

    Attributes:
        step_index: Position of the step in the app definition (0-based)
        status: COMPLETED or FAILED
        output: Output payload of the step's generation (model specific)
        error_message: Failure description, None for completed steps
        generation_id: Generation that produced this result (optional)

    Examples:
        >>> result = StepResult(
        ...     step_index=0,
        ...     status=GenerationStatus.COMPLETED,
        ...     output={"result": "https://x/out.png"},
        ... )
        >>> result.get("result")
        'https://x/out.png'
    """

    step_index: int
    status: GenerationStatus
    output: dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None
    generation_id: Optional[int] = None

    @property
    def failed(self) -> bool:
        return self.status == GenerationStatus.FAILED

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read a value from the step output.

        Dotted keys walk nested mappings: "meta.seed" reads
        output["meta"]["seed"]. Missing keys return default.
        """
        current: Any = self.output
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def as_legacy_entry(self) -> dict[str, Any]:
        """
        Flatten into the legacy history shape: output merged with status/error.

        Returns:
            Dictionary like {"result": "...", "status": "failed", "error_message": "..."}
        """
        entry = dict(self.output)
        entry["status"] = self.status.value
        if self.error_message is not None:
            entry["error_message"] = self.error_message
        return entry

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_index": self.step_index,
            "status": self.status.value,
            "output": self.output,
            "error_message": self.error_message,
            "generation_id": self.generation_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StepResult":
        return cls(
            step_index=int(data["step_index"]),
            status=GenerationStatus(data["status"]),
            output=data.get("output") or {},
            error_message=data.get("error_message"),
            generation_id=data.get("generation_id"),
        )
