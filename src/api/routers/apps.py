"""
API Router for Multi-Step App Executions

Responsibility:
    HTTP interface for starting app executions, reading their progress and
    approving steps that paused for the user.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Writes go through StartAppUseCase / ApproveStepUseCase (202, queued)
    - Reads go through GetExecutionQueryHandler (ownership enforced there)

Contains:
    - POST /apps/{slug}/execute
    - GET /apps/executions/{execution_id}
    - POST /apps/executions/{execution_id}/approve
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Path, status

from src.api.dependencies import (
    get_approve_step_use_case,
    get_current_user_id,
    get_execution_query_handler,
    get_request_inputs,
    get_start_app_use_case,
)
from src.api.schemas.common import ErrorResponse
from src.application.commands import ApproveStepCommand, StartAppCommand
from src.application.models import ExecutionResult
from src.application.queries import GetExecutionQuery, GetExecutionQueryHandler
from src.application.services import ApproveStepUseCase, StartAppUseCase

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/apps",
    tags=["apps"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid X-User-Id"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


@router.post(
    "/{slug}/execute",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ExecutionResult,
    summary="Start an app execution",
    description=(
        "Creates the execution and queues its first step. Progress is "
        "pushed on the user's notification channel; GET the execution to "
        "reconcile."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "App unknown or inactive"},
        413: {"model": ErrorResponse, "description": "Uploaded file too large"},
    },
)
async def execute_app(
    slug: str = Path(..., description="App slug"),
    user_id: int = Depends(get_current_user_id),
    inputs: dict[str, Any] = Depends(get_request_inputs),
    use_case: StartAppUseCase = Depends(get_start_app_use_case),
) -> ExecutionResult:
    command = StartAppCommand(user_id=user_id, app_slug=slug, inputs=inputs)
    result = await use_case.execute(command)
    logger.info(f"App execution {result.id} started for user {user_id} (app={slug})")
    return result


@router.get(
    "/executions/{execution_id}",
    response_model=ExecutionResult,
    summary="Get an app execution with its step history",
    responses={
        403: {"model": ErrorResponse, "description": "Execution owned by another user"},
        404: {"model": ErrorResponse, "description": "Execution not found"},
    },
)
async def get_execution(
    execution_id: int = Path(..., ge=1),
    user_id: int = Depends(get_current_user_id),
    handler: GetExecutionQueryHandler = Depends(get_execution_query_handler),
) -> ExecutionResult:
    query = GetExecutionQuery(execution_id=execution_id, user_id=user_id)
    return await handler.handle(query)


@router.post(
    "/executions/{execution_id}/approve",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ExecutionResult,
    summary="Approve the paused step and resume the execution",
    responses={
        403: {"model": ErrorResponse, "description": "Execution owned by another user"},
        404: {"model": ErrorResponse, "description": "Execution not found"},
        409: {"model": ErrorResponse, "description": "Execution is not waiting for approval"},
    },
)
async def approve_step(
    execution_id: int = Path(..., ge=1),
    user_id: int = Depends(get_current_user_id),
    inputs: dict[str, Any] = Depends(get_request_inputs),
    use_case: ApproveStepUseCase = Depends(get_approve_step_use_case),
) -> ExecutionResult:
    command = ApproveStepCommand(
        user_id=user_id, execution_id=execution_id, inputs=inputs
    )
    return await use_case.execute(command)
