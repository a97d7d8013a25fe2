"""
Generation Runner (Job Runner completion path)

Responsibility:
    Executes one generation end to end: marks it processing, calls the AI
    provider, writes the terminal status, then hands every status edge to
    the ExecutionCoordinator.

Architecture Notes:
    - Part of Application Layer (Services)
    - Invoked by the process_generation Celery task
    - The coordinator is called explicitly after each status write; the
      Generation Store has no hooks
    - Provider failures are captured into the record (status FAILED plus
      error_message) and never re-raised
    - Store write failures propagate so the Celery task can retry

Notification rules:
    - Standalone generation reaching a terminal status -> generation.completed
    - Generation linked to an execution -> no generation event; the
      execution notification covers it
"""

import logging
from typing import Optional

from src.application.ports.generation_provider import GenerationProviderProtocol
from src.application.services.completion_notifier import CompletionNotifier
from src.application.services.execution_coordinator import ExecutionCoordinator
from src.domain.generation.entities import Generation
from src.domain.generation.repositories import (
    AppCatalogProtocol,
    GenerationRepositoryProtocol,
)
from src.domain.generation.value_objects import GenerationStatus
from src.domain.shared.exceptions import DomainException, ProviderRequestError

logger = logging.getLogger(__name__)


class GenerationRunner:
    def __init__(
        self,
        generation_repository: GenerationRepositoryProtocol,
        provider: GenerationProviderProtocol,
        coordinator: ExecutionCoordinator,
        notifier: CompletionNotifier,
        catalog: AppCatalogProtocol,
    ):
        self.generation_repository = generation_repository
        self.provider = provider
        self.coordinator = coordinator
        self.notifier = notifier
        self.catalog = catalog

    def run(self, generation_id: int) -> Optional[Generation]:
        """
        Run a generation.

        Returns:
            The generation after its terminal write, the unchanged generation
            when it was already terminal, or None when it does not exist
        """
        generation = self.generation_repository.get(generation_id)
        if generation is None:
            logger.error(f"Generation {generation_id} not found")
            return None
        if generation.is_terminal:
            logger.info(
                f"Generation {generation_id} already {generation.status.value}; skipping"
            )
            if generation.belongs_to_execution:
                # A retry after a failed execution write; the coordinator
                # ignores executions that are already terminal or advanced
                self.coordinator.on_generation_status_changed(
                    generation, GenerationStatus.PROCESSING
                )
            return generation

        if generation.status == GenerationStatus.PENDING:
            previous = generation.mark_processing()
            self._write(generation, previous)

        try:
            model = self.catalog.get_model(generation.model_slug)
            result = self.provider.generate(model, generation.input_data)
        except ProviderRequestError as e:
            logger.error(
                f"Generation {generation_id} provider request failed "
                f"(status_code={e.status_code}): {e.message}"
            )
            previous = generation.mark_failed(e.message, output={"error": e.message})
        except DomainException as e:
            logger.error(f"Generation {generation_id} failed: {e}")
            previous = generation.mark_failed(e.message, output={"error": e.message})
        except Exception as e:
            logger.error(f"Generation {generation_id} failed: {e}", exc_info=True)
            message = str(e) or e.__class__.__name__
            previous = generation.mark_failed(message, output={"error": message})
        else:
            previous = generation.mark_completed(
                result.output,
                thumbnail_url=result.thumbnail_url,
                duration=result.duration,
            )
            logger.info(f"Generation {generation_id} completed")

        self._write(generation, previous)

        if not generation.belongs_to_execution:
            self.notifier.notify_generation(generation)
        return generation

    def _write(self, generation: Generation, previous: GenerationStatus) -> None:
        self.generation_repository.save(generation)
        self.coordinator.on_generation_status_changed(generation, previous)
