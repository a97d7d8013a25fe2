"""
Completion Notifier

Responsibility:
    Turns a terminal (or paused) Generation / AppExecution into a completion
    event and publishes it on the owner's private channel.

Architecture Notes:
    - Part of Application Layer (Services)
    - Publisher injected (NotificationPublisherProtocol, Redis in production)
    - Catalog injected to resolve display names missing on the record
    - Best-effort: a publish failure is logged and swallowed, the store write
      that preceded it is never rolled back. Clients reconcile by polling
      the read endpoints.

Channel authorization:
    A subscriber may only listen on "<prefix>.<id>" where id equals its own
    numeric user id. Malformed channel names are refused.
"""

import logging
from typing import Optional

from src.application.ports.notification_publisher import (
    NotificationPublisherProtocol,
)
from src.domain.generation.entities import AppExecution, Generation
from src.domain.generation.events import (
    DEFAULT_CHANNEL_PREFIX,
    AppExecutionCompletedEvent,
    CompletionEvent,
    GenerationCompletedEvent,
    user_channel,
)
from src.domain.generation.repositories import AppCatalogProtocol

logger = logging.getLogger(__name__)


class CompletionNotifier:
    """
    Publishes generation.completed / app.execution.completed events.

    Examples:
        >>> notifier = CompletionNotifier(publisher, catalog)
        >>> notifier.notify_generation(generation)
        >>> # publisher.publish("user.5", {"event": "generation.completed", ...})
    """

    def __init__(
        self,
        publisher: NotificationPublisherProtocol,
        catalog: Optional[AppCatalogProtocol] = None,
        channel_prefix: str = DEFAULT_CHANNEL_PREFIX,
    ):
        self.publisher = publisher
        self.catalog = catalog
        self.channel_prefix = channel_prefix

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def notify_generation(self, generation: Generation) -> None:
        model_name = generation.model_name
        if not model_name and self.catalog is not None:
            model = self.catalog.find_model(generation.model_slug)
            model_name = model.name if model else ""

        event = GenerationCompletedEvent(
            user_id=generation.user_id,
            generation_id=generation.id,
            status=generation.status.value,
            model_name=model_name or "Unknown",
            model_slug=generation.model_slug,
            thumbnail_url=generation.thumbnail_url,
            result=generation.result_url,
        )
        self._publish(event)

    def notify_execution(self, execution: AppExecution) -> None:
        app_name = execution.app_name
        if not app_name and self.catalog is not None:
            app = self.catalog.find_app(execution.app_slug)
            app_name = app.name if app else ""

        event = AppExecutionCompletedEvent(
            user_id=execution.user_id,
            execution_id=execution.id,
            status=execution.status.value,
            app_name=app_name,
            app_slug=execution.app_slug,
        )
        self._publish(event)

    def _publish(self, event: CompletionEvent) -> None:
        envelope = event.envelope(self.channel_prefix)
        channel = envelope["channel"]
        try:
            self.publisher.publish(channel, envelope)
            logger.info(f"Published {event.event_name} on {channel}")
        except Exception as e:
            # Delivery is best-effort; the record is already persisted
            logger.warning(
                f"Failed to publish {event.event_name} on {channel}: {e}",
                exc_info=True,
            )

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    def channel_for_user(self, user_id: int) -> str:
        return user_channel(user_id, self.channel_prefix)

    def authorize_channel(self, channel: str, user_id: int) -> bool:
        """
        Check that user_id may subscribe to channel.

        Examples:
            >>> notifier.authorize_channel("user.5", 5)
            True
            >>> notifier.authorize_channel("user.6", 5)
            False
            >>> notifier.authorize_channel("user.abc", 5)
            False
        """
        prefix, _, suffix = channel.rpartition(".")
        if prefix != self.channel_prefix or not (suffix.isascii() and suffix.isdigit()):
            return False
        return int(suffix) == int(user_id)
