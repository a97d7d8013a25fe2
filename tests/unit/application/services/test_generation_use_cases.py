"""Tests for the async write use cases and their commands."""

import pytest
from pydantic import ValidationError

from src.application.commands import (
    ApproveStepCommand,
    CreateGenerationCommand,
    StartAppCommand,
)
from src.application.services import (
    ApproveStepUseCase,
    CreateGenerationUseCase,
    StartAppUseCase,
)
from src.domain.shared.exceptions import ExecutionNotAwaitingApprovalError


@pytest.mark.asyncio
async def test_create_generation_use_case(generation_service, dispatcher):
    use_case = CreateGenerationUseCase(generation_service)

    result = await use_case.execute(
        CreateGenerationCommand(user_id=5, model_slug="flux-dev", input_data={"prompt": "x"})
    )

    assert result.id == 1
    assert result.status == "pending"
    assert result.model_name == "Flux Dev"
    assert result.input_data == {"prompt": "x"}
    assert dispatcher.generations == [1]


@pytest.mark.asyncio
async def test_start_app_use_case(app_execution_service, dispatcher):
    use_case = StartAppUseCase(app_execution_service)

    result = await use_case.execute(
        StartAppCommand(user_id=5, app_slug="two-step", inputs={"prompt": "x"})
    )

    assert result.status == "pending"
    assert result.app_name == "Two Step"
    assert result.history == []
    assert dispatcher.executions == [(result.id, False)]


@pytest.mark.asyncio
async def test_approve_step_use_case_propagates_domain_errors(app_execution_service):
    execution = app_execution_service.start_app("two-step", 5, {})
    use_case = ApproveStepUseCase(app_execution_service)

    with pytest.raises(ExecutionNotAwaitingApprovalError):
        await use_case.execute(ApproveStepCommand(user_id=5, execution_id=execution.id))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"user_id": 0, "model_slug": "flux-dev"},
        {"user_id": 5, "model_slug": ""},
        {"user_id": 5, "model_slug": "flux-dev", "input_data": "prompt"},
    ],
)
def test_create_generation_command_validation(kwargs):
    with pytest.raises(ValidationError):
        CreateGenerationCommand(**kwargs)
