"""Tests for log_with_memory."""

import logging

from src.shared.utils import log_with_memory


def test_log_line_carries_memory_and_stage(caplog):
    logger = logging.getLogger("genrelay.test")

    with caplog.at_level(logging.INFO, logger="genrelay.test"):
        log_with_memory(logger, "PROVIDER_CALL", "generation 42")

    line = caplog.records[-1].getMessage()
    timestamp, memory, stage, message = line.split(" | ")
    assert "T" in timestamp
    assert memory.endswith("MB")
    assert stage == "PROVIDER_CALL"
    assert message == "generation 42"
