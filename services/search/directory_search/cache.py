import hashlib
import json
import logging
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from .config import CACHE_ENABLED, CACHE_TTL_SECONDS, REDIS_DB, REDIS_HOST, REDIS_PORT

logger = logging.getLogger(__name__)


class ResultCache:
    """Redis cache for serialized search responses.

    Fail-open: search works without the cache, so Redis errors are logged
    and treated as a miss.
    """

    def __init__(self, client: Optional[Redis], ttl_seconds: int = CACHE_TTL_SECONDS, prefix: str = "search"):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    def key(self, scope: str, params: dict) -> str:
        body = json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
        digest = hashlib.sha1(body.encode("utf-8")).hexdigest()
        return f"{self.prefix}:{scope}:{digest}"

    def get(self, key: str) -> Optional[dict]:
        if self.client is None:
            return None
        try:
            cached = self.client.get(key)
        except RedisError as e:
            logger.warning("cache read failed for %s: %s", key, e)
            return None
        if not cached:
            return None
        try:
            return json.loads(cached)
        except ValueError:
            logger.warning("dropping unreadable cache entry %s", key)
            return None

    def set(self, key: str, value: dict) -> None:
        if self.client is None:
            return
        try:
            self.client.setex(key, self.ttl_seconds, json.dumps(value))
        except RedisError as e:
            logger.warning("cache write failed for %s: %s", key, e)

    def ping(self) -> bool:
        if self.client is None:
            return False
        try:
            return bool(self.client.ping())
        except RedisError:
            return False


def make_cache() -> ResultCache:
    if not CACHE_ENABLED:
        return ResultCache(None)
    client = Redis(host=REDIS_HOST, port=REDIS_PORT, db=REDIS_DB, decode_responses=True,
                   socket_timeout=0.5, socket_connect_timeout=0.5)
    return ResultCache(client)
