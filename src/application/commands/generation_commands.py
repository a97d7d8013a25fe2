"""
Generation Commands - CQRS Write Operations

Command objects for the write endpoints. Pure data holders validated by
pydantic; handled by the use cases in src.application.services.

Architecture Notes:
    - Part of Application Layer (Commands)
    - Built by the API Layer from the authenticated user + request body
    - input mappings are already normalised (uploads replaced by URLs)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CreateGenerationCommand(BaseModel):
    """
    Run one AI model for a user.

    Examples:
        >>> command = CreateGenerationCommand(
        ...     user_id=5, model_slug="flux-dev", input_data={"prompt": "a cat"}
        ... )
    """

    model_config = ConfigDict(protected_namespaces=())

    user_id: int = Field(ge=1, description="Authenticated user")
    model_slug: str = Field(min_length=1, description="Catalog slug of the model")
    input_data: dict[str, Any] = Field(default_factory=dict)


class StartAppCommand(BaseModel):
    """Start a multi-step app execution."""

    user_id: int = Field(ge=1)
    app_slug: str = Field(min_length=1)
    inputs: dict[str, Any] = Field(default_factory=dict)


class ApproveStepCommand(BaseModel):
    """
    Resume an execution paused for approval.

    inputs are merged over the execution inputs before the step runs.
    """

    user_id: int = Field(ge=1)
    execution_id: int = Field(ge=1)
    inputs: dict[str, Any] = Field(default_factory=dict)
