"""
Tests for RedisGenerationRepository and RedisExecutionRepository.

A small in-process stand-in for the redis-py calls the repositories make
(INCR, pipelined SET/ZADD, GET, ZREVRANGE, MGET, ZCARD).
"""

from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError

from src.domain.generation.entities import AppExecution, Generation
from src.domain.generation.value_objects import ExecutionStatus, GenerationStatus
from src.infrastructure.persistence.repositories import (
    RedisExecutionRepository,
    RedisGenerationRepository,
)


class FakePipeline:
    def __init__(self, redis):
        self.redis = redis
        self.ops = []

    def set(self, key, value):
        self.ops.append(("set", key, value))

    def zadd(self, key, mapping):
        self.ops.append(("zadd", key, mapping))

    def execute(self):
        for op, key, value in self.ops:
            getattr(self.redis, op)(key, value)
        self.ops = []


class FakeRedis:
    def __init__(self):
        self.strings = {}
        self.zsets = {}

    def incr(self, key):
        self.strings[key] = int(self.strings.get(key, 0)) + 1
        return self.strings[key]

    def pipeline(self):
        return FakePipeline(self)

    def set(self, key, value):
        self.strings[key] = value

    def get(self, key):
        return self.strings.get(key)

    def mget(self, keys):
        return [self.strings.get(key) for key in keys]

    def zadd(self, key, mapping):
        self.zsets.setdefault(key, {}).update(mapping)

    def zrevrange(self, key, start, end):
        members = sorted(self.zsets.get(key, {}).items(), key=lambda kv: -kv[1])
        return [member for member, _ in members][start : end + 1]

    def zcard(self, key):
        return len(self.zsets.get(key, {}))


@pytest.fixture
def fake_redis():
    return FakeRedis()


# ============================================================================
# GENERATION STORE
# ============================================================================


def test_save_assigns_incrementing_ids_and_indexes_user(fake_redis):
    repo = RedisGenerationRepository(fake_redis)

    first = repo.save(Generation(user_id=5, model_slug="flux-dev"))
    second = repo.save(Generation(user_id=5, model_slug="flux-dev"))

    assert (first.id, second.id) == (1, 2)
    assert fake_redis.zsets["user:5:generations"] == {"1": 1, "2": 2}
    assert "generation:1" in fake_redis.strings


def test_save_overwrites_existing_record(fake_redis):
    repo = RedisGenerationRepository(fake_redis)
    generation = repo.save(Generation(user_id=5, model_slug="flux-dev"))

    generation.mark_failed("Provider timeout")
    repo.save(generation)

    stored = repo.get(generation.id)
    assert stored.status == GenerationStatus.FAILED
    assert stored.error_message == "Provider timeout"
    assert repo.count_for_user(5) == 1


def test_get_missing_generation_returns_none(fake_redis):
    assert RedisGenerationRepository(fake_redis).get(42) is None


def test_list_for_user_is_newest_first_and_skips_dangling_ids(fake_redis):
    repo = RedisGenerationRepository(fake_redis)
    for _ in range(4):
        repo.save(Generation(user_id=5, model_slug="flux-dev"))
    repo.save(Generation(user_id=6, model_slug="flux-dev"))
    del fake_redis.strings["generation:3"]

    page = repo.list_for_user(5, offset=0, limit=3)

    assert [g.id for g in page] == [4, 2]
    assert repo.list_for_user(5, offset=0, limit=0) == []
    assert repo.list_for_user(99) == []


def test_store_errors_propagate():
    client = MagicMock()
    client.incr.side_effect = ConnectionError("redis down")
    repo = RedisGenerationRepository(client)

    with pytest.raises(ConnectionError):
        repo.save(Generation(user_id=5, model_slug="flux-dev"))


# ============================================================================
# EXECUTION STORE
# ============================================================================


def test_execution_round_trip_keeps_history(fake_redis):
    repo = RedisExecutionRepository(fake_redis)
    execution = AppExecution(user_id=5, app_slug="two-step", inputs={"prompt": "cat"})
    execution.record_step_output(0, {"result": "https://x/0.png"}, generation_id=1)
    execution.advance_step()

    repo.save(execution)
    stored = repo.get(execution.id)

    assert execution.id == 1
    assert fake_redis.zsets["user:5:executions"] == {"1": 1}
    assert stored.status == ExecutionStatus.PENDING
    assert stored.current_step == 1
    assert stored.step_result(0).get("result") == "https://x/0.png"
    assert stored.inputs == {"prompt": "cat"}
    assert repo.get(2) is None
