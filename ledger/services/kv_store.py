# -*- coding: utf-8 -*-
"""
KV Store Module (Redis)

JSON values with a TTL, used for review queue snapshots that a reviewer
resumes in a later request.
"""

import json
import logging
from typing import Any, Optional

from redis import Redis, RedisError

from ledger.config import KV_ENABLED, REDIS_URL

logger = logging.getLogger(__name__)


class KVStore:
    """
    JSON get/set/delete over Redis.

    Without a client (Redis disabled or unreachable at startup) reads
    return None and writes return False.
    """

    def __init__(self, client: Optional[Redis] = None):
        self.client = client or get_kv_client()

    def get(self, key: str) -> Optional[Any]:
        if not self.client:
            return None

        try:
            raw = self.client.get(key)
            return json.loads(raw) if raw else None
        except (RedisError, ValueError) as e:
            logger.error(f"KV read failed for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """
        Store ``value`` as JSON under ``key`` for ``ttl`` seconds.

        Returns:
            True when written
        """
        if not self.client:
            return False

        try:
            self.client.setex(key, ttl, json.dumps(value, ensure_ascii=False))
        except (RedisError, TypeError, ValueError) as e:
            logger.error(f"KV write failed for {key}: {e}")
            return False
        return True

    def delete(self, key: str) -> bool:
        if not self.client:
            return False

        try:
            self.client.delete(key)
        except RedisError as e:
            logger.error(f"KV delete failed for {key}: {e}")
            return False
        return True


def get_kv_client() -> Optional[Redis]:
    """Redis client for REDIS_URL, or None when no URL is configured."""
    if not KV_ENABLED:
        logger.debug("REDIS_URL not set, review snapshots disabled")
        return None

    try:
        return Redis.from_url(REDIS_URL, decode_responses=True)
    except (RedisError, ValueError) as e:
        logger.error(f"Invalid Redis configuration: {e}")
        return None
