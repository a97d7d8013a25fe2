"""
GetExecutionQuery - CQRS Read Query

Query object and handler for reading one app execution of the caller:
status, current step, typed history (plus the legacy keyed view) and the
error banner.

Architecture Notes:
    - Part of Application Layer (Queries)
    - Ownership enforced here: only the owner may read an execution,
      anyone else gets ForbiddenResourceError (HTTP 403)
"""

import logging

from pydantic import BaseModel, Field

from src.application.models import ExecutionResult
from src.domain.generation.repositories import ExecutionRepositoryProtocol
from src.domain.shared.exceptions import (
    ExecutionNotFoundError,
    ForbiddenResourceError,
)

logger = logging.getLogger(__name__)


class GetExecutionQuery(BaseModel):
    """
    Attributes:
        execution_id: Execution to read
        user_id: Authenticated caller
    """

    execution_id: int = Field(ge=1)
    user_id: int = Field(ge=1)


class GetExecutionQueryHandler:
    """
    Usage:
        handler = GetExecutionQueryHandler(execution_repository)
        result = await handler.handle(GetExecutionQuery(execution_id=7, user_id=5))
    """

    def __init__(self, execution_repository: ExecutionRepositoryProtocol):
        self.execution_repository = execution_repository

    async def handle(self, query: GetExecutionQuery) -> ExecutionResult:
        """
        Raises:
            ExecutionNotFoundError: No execution with this id
            ForbiddenResourceError: Execution belongs to another user
        """
        execution = self.execution_repository.get(query.execution_id)
        if execution is None:
            raise ExecutionNotFoundError(query.execution_id)
        if execution.user_id != query.user_id:
            logger.warning(
                f"User {query.user_id} denied access to execution {query.execution_id}"
            )
            raise ForbiddenResourceError(
                "app execution", query.execution_id, query.user_id
            )
        return ExecutionResult.from_entity(execution)
