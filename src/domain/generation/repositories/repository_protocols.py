"""
Generation Repository Interfaces

Repository pattern interfaces for the Generation Store, the Execution Store
and the read-only App Catalog.

Architecture Notes:
    - Protocol-based interfaces (structural typing)
    - Domain defines, Infrastructure implements (Redis, JSON catalog)
    - Synchronous: repositories are called from Celery workers and from
      FastAPI handlers alike
    - Write failures propagate to the caller (never swallowed here)
"""

from typing import Optional, Protocol

from src.domain.generation.entities import (
    AiModel,
    AppDefinition,
    AppExecution,
    Generation,
)


class GenerationRepositoryProtocol(Protocol):
    """
    Generation Store contract.

    save() assigns an integer id on first save and returns the entity.
    """

    def save(self, generation: Generation) -> Generation:
        ...

    def get(self, generation_id: int) -> Optional[Generation]:
        ...

    def list_for_user(
        self, user_id: int, offset: int = 0, limit: int = 20
    ) -> list[Generation]:
        """Generations of a user, newest first."""
        ...

    def count_for_user(self, user_id: int) -> int:
        ...


class ExecutionRepositoryProtocol(Protocol):
    """Execution Store contract."""

    def save(self, execution: AppExecution) -> AppExecution:
        ...

    def get(self, execution_id: int) -> Optional[AppExecution]:
        ...


class AppCatalogProtocol(Protocol):
    """
    Read-only catalog of models and apps.

    get_model()/get_app() raise ModelNotFoundError / AppNotFoundError for
    missing or inactive entries; find_*() return None instead.
    """

    def get_model(self, slug: str) -> AiModel:
        ...

    def find_model(self, slug: str) -> Optional[AiModel]:
        ...

    def get_app(self, slug: str) -> AppDefinition:
        ...

    def find_app(self, slug: str) -> Optional[AppDefinition]:
        ...
