"""
Shared Application Models

Responsibility:
    Result DTOs returned by use cases and query handlers.
    Prevents circular dependencies and code duplication.

Architecture Notes:
    - Part of Application Layer (Shared)
    - Used by Commands, Queries, and Services
    - Converted from domain entities with from_entity(); the API Layer
      returns them as-is (response_model)

Does NOT contain:
    - Business logic (belongs to Domain Layer)
    - HTTP-only models (ErrorResponse belongs to API Layer)
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from src.domain.generation.entities import AppExecution, Generation
from src.domain.generation.value_objects import StepResult


class GenerationResult(BaseModel):
    """
    Read model of a Generation.

    Used by the generate endpoint (202 body), generation detail and list.
    """

    model_config = ConfigDict(protected_namespaces=())

    id: int
    user_id: int
    model_slug: str
    model_name: str
    status: str
    input_data: dict[str, Any] = Field(default_factory=dict)
    output_data: Optional[dict[str, Any]] = None
    result_url: Optional[str] = None
    error_message: Optional[str] = None
    thumbnail_url: Optional[str] = None
    app_execution_id: Optional[int] = None
    app_step_index: Optional[int] = None
    duration: Optional[float] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, generation: Generation) -> "GenerationResult":
        data = generation.to_dict()
        data["result_url"] = generation.result_url
        return cls(**data)


class GenerationListResult(BaseModel):
    """One page of generations, newest first."""

    items: list[GenerationResult] = Field(default_factory=list)
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)
    total: int = Field(ge=0)

    @computed_field
    @property
    def has_more(self) -> bool:
        return self.page * self.per_page < self.total


class StepResultModel(BaseModel):
    step_index: int
    status: str
    output: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    generation_id: Optional[int] = None

    @classmethod
    def from_value_object(cls, result: StepResult) -> "StepResultModel":
        return cls(**result.to_dict())


class ExecutionResult(BaseModel):
    """
    Read model of an AppExecution.

    Attributes:
        history: Typed step results ordered by step index
        history_map: Legacy keyed view ({"0": {...}, "error_message": ...})
            for clients written against the old history blob
        error_message: Execution-wide failure banner
    """

    id: int
    user_id: int
    app_slug: str
    app_name: str
    status: str
    current_step: int
    inputs: dict[str, Any] = Field(default_factory=dict)
    history: list[StepResultModel] = Field(default_factory=list)
    history_map: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    generation_ids: list[int] = Field(default_factory=list)
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, execution: AppExecution) -> "ExecutionResult":
        data = execution.to_dict()
        data["history"] = [
            StepResultModel.from_value_object(result) for result in execution.history
        ]
        data["history_map"] = execution.history_mapping()
        return cls(**data)
