# storefront/db/kv_store.py
from __future__ import annotations
from typing import Any, Dict, Optional
from redis.asyncio import Redis
from redis.exceptions import RedisError
import json, logging

from storefront.db.errors import StorageError
from storefront.utils.locks import WriteQueue

logger = logging.getLogger(__name__)

class KVStore:
    """
    Durable backend keeping each collection document as one JSON value
    in a redis-compatible key-value service, under '<prefix>_<collection>_db'.
    """

    kind = "remote-kv"
    durable = True

    def __init__(self, redis: Redis, prefix: str = "nugi"):
        self.redis = redis
        self.prefix = prefix
        self.write_queue = WriteQueue("remote-kv")

    def key(self, collection: str) -> str:
        return f"{self.prefix}_{collection}_db"

    def location(self, collection: str) -> str:
        return f"kv:{self.key(collection)}"

    async def load(self, collection: str) -> Optional[Dict[str, Any]]:
        key = self.key(collection)
        try:
            raw = await self.redis.get(key)
        except RedisError as e:
            raise StorageError(f"KV read failed for {key}: {e}") from e
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as e:
            raise StorageError(f"Corrupt KV document {key}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected document shape under {key}")
        return data

    async def save(self, collection: str, document: Dict[str, Any]) -> None:
        key = self.key(collection)
        try:
            await self.redis.set(key, json.dumps(document, ensure_ascii=False, separators=(",", ":")))
        except RedisError as e:
            logger.error("KV write failed key=%s err=%s", key, e)
            raise StorageError(f"KV write failed for {key}: {e}") from e
