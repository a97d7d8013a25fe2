"""
API Dependencies

Request-scoped dependency providers shared by the routers.

Responsibility:
    - Resolve the calling user from the X-User-Id header
    - Build use cases and query handlers from the composition root

Architecture Notes:
    - Part of API Layer (Presentation)
    - Authentication proper is handled upstream (gateway); this layer only
      trusts the forwarded user id
    - Tests swap any provider with app.dependency_overrides
"""

import json
import logging
from typing import Any, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from src.application.queries import (
    GetExecutionQueryHandler,
    GetGenerationQueryHandler,
    ListGenerationsQueryHandler,
)
from src.application.services import (
    ApproveStepUseCase,
    CompletionNotifier,
    CreateGenerationUseCase,
    StartAppUseCase,
)
from src.domain.shared.exceptions import InvalidGenerationInputError
from src.infrastructure.broadcasting import RedisNotificationSubscriber
from src.infrastructure.file_storage import MediaStorageService
from src.shared import container

logger = logging.getLogger(__name__)


def parse_user_id(raw: Optional[str]) -> Optional[int]:
    """Positive integer user id, or None when missing or malformed."""
    if raw is None:
        return None
    try:
        user_id = int(raw.strip())
    except ValueError:
        return None
    return user_id if user_id > 0 else None


async def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> int:
    """
    Authenticated user id.

    Raises:
        HTTPException 401: Header missing or not a positive integer
    """
    user_id = parse_user_id(x_user_id)
    if user_id is None:
        logger.warning(f"Rejected request with X-User-Id={x_user_id!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid X-User-Id header",
        )
    return user_id


def get_media_storage() -> MediaStorageService:
    return container.get_media_storage()


def get_notifier() -> CompletionNotifier:
    return container.get_notifier()


def get_subscriber_factory():
    """Callable building a channel subscriber (async context manager + iterator)."""
    return RedisNotificationSubscriber


async def get_create_generation_use_case() -> CreateGenerationUseCase:
    return CreateGenerationUseCase(container.get_generation_service())


async def get_start_app_use_case() -> StartAppUseCase:
    return StartAppUseCase(container.get_app_execution_service())


async def get_approve_step_use_case() -> ApproveStepUseCase:
    return ApproveStepUseCase(container.get_app_execution_service())


async def get_generation_query_handler() -> GetGenerationQueryHandler:
    return GetGenerationQueryHandler(container.get_generation_repository())


async def get_list_generations_query_handler() -> ListGenerationsQueryHandler:
    return ListGenerationsQueryHandler(container.get_generation_service())


async def get_execution_query_handler() -> GetExecutionQueryHandler:
    return GetExecutionQueryHandler(container.get_execution_repository())


def _form_to_inputs(form) -> dict[str, Any]:
    # Repeated form keys ("images" twice) become lists
    inputs: dict[str, Any] = {}
    for key, value in form.multi_items():
        if key in inputs:
            current = inputs[key]
            inputs[key] = current + [value] if isinstance(current, list) else [current, value]
        else:
            inputs[key] = value
    return inputs


async def get_request_inputs(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    media_storage: MediaStorageService = Depends(get_media_storage),
) -> dict[str, Any]:
    """
    Input mapping of a write request, uploads already replaced by URLs.

    Accepts a JSON object body or a multipart/urlencoded form. An empty
    body means no inputs.

    Raises:
        InvalidGenerationInputError: Body is not a JSON object
        UploadTooLargeError: An uploaded file exceeds the size limit
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        inputs: Any = _form_to_inputs(form)
    else:
        body = await request.body()
        if not body.strip():
            return {}
        try:
            inputs = json.loads(body)
        except ValueError:
            raise InvalidGenerationInputError("Request body is not valid JSON")

    if not isinstance(inputs, dict):
        raise InvalidGenerationInputError("Inputs must be a JSON object")

    return await media_storage.normalize_inputs(user_id, inputs)
