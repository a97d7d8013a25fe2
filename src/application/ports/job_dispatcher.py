"""
JobDispatcher Port

Contract for enqueueing background jobs. The Celery implementation lives in
src.application.tasks.dispatcher; tests inject a MagicMock.
"""

from typing import Protocol


class JobDispatcherProtocol(Protocol):
    def dispatch_generation(self, generation_id: int) -> None:
        """Enqueue the Job Runner for one generation."""
        ...

    def dispatch_execution(self, execution_id: int, skip_approval: bool = False) -> None:
        """Enqueue execution of the next step of an app execution."""
        ...
