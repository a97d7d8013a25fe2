"""
API Router for Single-Model Generations

Responsibility:
    HTTP interface for creating generations and reading them back.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Write endpoint: CreateGenerationUseCase (returns 202, work is queued)
    - Read endpoints: GetGenerationQueryHandler, ListGenerationsQueryHandler
    - Clients poll GET /generations/{id} to reconcile missed notifications

Contains:
    - POST /models/{slug}/generate
    - GET /generations
    - GET /generations/{generation_id}
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Path, Query, status

from src.api.dependencies import (
    get_create_generation_use_case,
    get_current_user_id,
    get_generation_query_handler,
    get_list_generations_query_handler,
    get_request_inputs,
)
from src.api.schemas.common import ErrorResponse
from src.application.commands import CreateGenerationCommand
from src.application.models import GenerationListResult, GenerationResult
from src.application.queries import (
    GetGenerationQuery,
    GetGenerationQueryHandler,
    ListGenerationsQuery,
    ListGenerationsQueryHandler,
)
from src.application.services import CreateGenerationUseCase
from src.application.services.generation_service import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)

logger = logging.getLogger(__name__)


router = APIRouter(
    tags=["generations"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid X-User-Id"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


@router.post(
    "/models/{slug}/generate",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=GenerationResult,
    summary="Queue a generation with one AI model",
    description=(
        "Accepts a JSON object or a multipart form. Uploaded files are stored "
        "and replaced by their URLs before the job is queued. The result is "
        "pushed on the user's notification channel."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Model unknown or inactive"},
        413: {"model": ErrorResponse, "description": "Uploaded file too large"},
        422: {"model": ErrorResponse, "description": "Invalid inputs"},
    },
)
async def create_generation(
    slug: str = Path(..., description="AI model slug"),
    user_id: int = Depends(get_current_user_id),
    inputs: dict[str, Any] = Depends(get_request_inputs),
    use_case: CreateGenerationUseCase = Depends(get_create_generation_use_case),
) -> GenerationResult:
    command = CreateGenerationCommand(
        user_id=user_id, model_slug=slug, input_data=inputs
    )
    result = await use_case.execute(command)
    logger.info(f"Generation {result.id} queued for user {user_id} (model={slug})")
    return result


@router.get(
    "/generations",
    response_model=GenerationListResult,
    summary="List the caller's generations, newest first",
)
async def list_generations(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    user_id: int = Depends(get_current_user_id),
    handler: ListGenerationsQueryHandler = Depends(get_list_generations_query_handler),
) -> GenerationListResult:
    query = ListGenerationsQuery(user_id=user_id, page=page, per_page=per_page)
    return await handler.handle(query)


@router.get(
    "/generations/{generation_id}",
    response_model=GenerationResult,
    summary="Get one generation",
    responses={
        403: {"model": ErrorResponse, "description": "Generation owned by another user"},
        404: {"model": ErrorResponse, "description": "Generation not found"},
    },
)
async def get_generation(
    generation_id: int = Path(..., ge=1),
    user_id: int = Depends(get_current_user_id),
    handler: GetGenerationQueryHandler = Depends(get_generation_query_handler),
) -> GenerationResult:
    query = GetGenerationQuery(generation_id=generation_id, user_id=user_id)
    return await handler.handle(query)
