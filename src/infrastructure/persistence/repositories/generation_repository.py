"""
Redis Generation Repository

Concrete implementation of GenerationRepositoryProtocol (Generation Store).

Storage Strategy:
    - "generation:next_id"            INCR counter assigning integer ids
    - "generation:{id}"               JSON of Generation.to_dict()
    - "user:{user_id}:generations"    sorted set of ids scored by id, so
                                      ZREVRANGE lists newest first

Architecture Notes:
    - Infrastructure Layer (implements Domain interface)
    - Synchronous redis-py client from the shared connection pool
    - Record and index are written in one MULTI/EXEC pipeline
    - RedisError propagates to the caller; writes are never swallowed
"""

import json
import logging
from typing import Optional

from redis import Redis

from src.domain.generation.entities import Generation
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)


class RedisGenerationRepository:
    """
    Redis-backed Generation Store.

    Examples:
        >>> repo = RedisGenerationRepository()
        >>> generation = repo.save(Generation(user_id=5, model_slug="flux-dev"))
        >>> generation.id
        1
        >>> repo.get(1).model_slug
        'flux-dev'
    """

    ID_COUNTER_KEY = "generation:next_id"

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self.redis: Redis = redis_client or get_redis_client()

    @staticmethod
    def _get_key(generation_id: int) -> str:
        return f"generation:{generation_id}"

    @staticmethod
    def _get_user_index_key(user_id: int) -> str:
        return f"user:{user_id}:generations"

    def save(self, generation: Generation) -> Generation:
        """
        Insert or overwrite a generation.

        Assigns generation.id on first save.

        Raises:
            RedisError: If Redis operation fails
        """
        if generation.id is None:
            generation.id = int(self.redis.incr(self.ID_COUNTER_KEY))

        pipe = self.redis.pipeline()
        pipe.set(self._get_key(generation.id), json.dumps(generation.to_dict()))
        pipe.zadd(
            self._get_user_index_key(generation.user_id),
            {str(generation.id): generation.id},
        )
        pipe.execute()

        logger.debug(
            f"Saved generation {generation.id} (status={generation.status.value})"
        )
        return generation

    def get(self, generation_id: int) -> Optional[Generation]:
        raw = self.redis.get(self._get_key(generation_id))
        if raw is None:
            return None
        return Generation.from_dict(json.loads(raw))

    def list_for_user(
        self, user_id: int, offset: int = 0, limit: int = 20
    ) -> list[Generation]:
        """Generations of a user, newest first."""
        if limit <= 0:
            return []
        ids = self.redis.zrevrange(
            self._get_user_index_key(user_id), offset, offset + limit - 1
        )
        if not ids:
            return []

        raw_items = self.redis.mget([self._get_key(int(i)) for i in ids])
        generations = []
        for generation_id, raw in zip(ids, raw_items):
            if raw is None:
                logger.warning(
                    f"Generation {generation_id} indexed for user {user_id} but missing"
                )
                continue
            generations.append(Generation.from_dict(json.loads(raw)))
        return generations

    def count_for_user(self, user_id: int) -> int:
        return int(self.redis.zcard(self._get_user_index_key(user_id)))
