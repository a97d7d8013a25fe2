"""
CQRS Queries (read operations).
"""

from src.application.queries.get_execution import (
    GetExecutionQuery,
    GetExecutionQueryHandler,
)
from src.application.queries.get_generation import (
    GetGenerationQuery,
    GetGenerationQueryHandler,
)
from src.application.queries.list_generations import (
    ListGenerationsQuery,
    ListGenerationsQueryHandler,
)

__all__ = [
    "GetExecutionQuery",
    "GetExecutionQueryHandler",
    "GetGenerationQuery",
    "GetGenerationQueryHandler",
    "ListGenerationsQuery",
    "ListGenerationsQueryHandler",
]
