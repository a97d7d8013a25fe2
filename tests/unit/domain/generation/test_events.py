"""Tests for completion events and channel naming."""

from src.domain.generation.events import (
    AppExecutionCompletedEvent,
    GenerationCompletedEvent,
    user_channel,
)


def test_user_channel():
    assert user_channel(5) == "user.5"
    assert user_channel(5, prefix="tenant") == "tenant.5"


def test_generation_event_envelope():
    event = GenerationCompletedEvent(
        user_id=5,
        generation_id=42,
        status="completed",
        model_name="Flux Dev",
        model_slug="flux-dev",
        result="https://x/out.png",
    )

    assert event.envelope() == {
        "event": "generation.completed",
        "channel": "user.5",
        "payload": {
            "generation_id": 42,
            "status": "completed",
            "model_name": "Flux Dev",
            "model_slug": "flux-dev",
            "thumbnail_url": None,
            "result": "https://x/out.png",
        },
    }


def test_execution_event_payload_excludes_recipient():
    event = AppExecutionCompletedEvent(
        user_id=5, execution_id=3, status="failed", app_slug="two-step"
    )

    payload = event.payload()

    assert "user_id" not in payload
    assert payload["execution_id"] == 3
    assert payload["app_name"] == ""
    assert event.envelope()["event"] == "app.execution.completed"
