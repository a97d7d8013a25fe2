"""
Redis Execution Repository

Concrete implementation of ExecutionRepositoryProtocol (Execution Store).

Storage Strategy:
    - "execution:next_id"            INCR counter assigning integer ids
    - "execution:{id}"               JSON of AppExecution.to_dict()
    - "user:{user_id}:executions"    sorted set of ids (newest first)

RedisError propagates to the caller.
"""

import json
import logging
from typing import Optional

from redis import Redis

from src.domain.generation.entities import AppExecution
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)


class RedisExecutionRepository:
    ID_COUNTER_KEY = "execution:next_id"

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self.redis: Redis = redis_client or get_redis_client()

    @staticmethod
    def _get_key(execution_id: int) -> str:
        return f"execution:{execution_id}"

    @staticmethod
    def _get_user_index_key(user_id: int) -> str:
        return f"user:{user_id}:executions"

    def save(self, execution: AppExecution) -> AppExecution:
        """
        Insert or overwrite an execution; assigns execution.id on first save.

        Raises:
            RedisError: If Redis operation fails
        """
        if execution.id is None:
            execution.id = int(self.redis.incr(self.ID_COUNTER_KEY))

        pipe = self.redis.pipeline()
        pipe.set(self._get_key(execution.id), json.dumps(execution.to_dict()))
        pipe.zadd(
            self._get_user_index_key(execution.user_id),
            {str(execution.id): execution.id},
        )
        pipe.execute()

        logger.debug(
            f"Saved execution {execution.id} (status={execution.status.value}, "
            f"step={execution.current_step})"
        )
        return execution

    def get(self, execution_id: int) -> Optional[AppExecution]:
        raw = self.redis.get(self._get_key(execution_id))
        if raw is None:
            return None
        return AppExecution.from_dict(json.loads(raw))
