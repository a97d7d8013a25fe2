"""Tests for the composition root wiring."""

from unittest.mock import MagicMock, patch

from src.application.services import GenerationRunner
from src.shared import container


def test_runner_shares_cached_collaborators():
    with patch(
        "src.shared.container.RedisGenerationRepository", return_value=MagicMock()
    ), patch(
        "src.shared.container.RedisExecutionRepository", return_value=MagicMock()
    ), patch(
        "src.shared.container.RedisNotificationPublisher", return_value=MagicMock()
    ), patch(
        "src.shared.container.JsonAppCatalog.from_file", return_value=MagicMock()
    ):
        runner = container.get_generation_runner()

        assert isinstance(runner, GenerationRunner)
        assert container.get_generation_runner() is runner
        assert container.get_notifier() is container.get_notifier()

        container.reset()

        assert container.get_generation_runner() is not runner
