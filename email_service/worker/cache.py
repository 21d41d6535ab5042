import json
import logging
from typing import Any, Callable, Generic, Optional, TypeVar

import redis
from django.conf import settings

from .exceptions import CacheError

logger = logging.getLogger(__name__)

TEMPLATE_CACHE_PREFIX = "email_template:"
PROFILE_CACHE_PREFIX = "user_profile:"

V = TypeVar("V")


class RedisCacheStore:
    # JSON values in Redis with per-key expiry, shared by every worker instance

    def __init__(self, client=None, url: Optional[str] = None):
        self.client = client or redis.from_url(url or settings.REDIS_URL)

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.client.get(key)
        except redis.RedisError as e:
            raise CacheError(f"Cache read failed for {key}: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise CacheError(f"Cache entry for {key} is not valid JSON") from e

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            self.client.set(key, json.dumps(value), ex=ttl_seconds)
        except redis.RedisError as e:
            raise CacheError(f"Cache write failed for {key}: {e}") from e

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False


class CacheAsideResolver(Generic[V]):
    """Read-through lookup of one entity kind.

    A populated cache entry is returned as-is. On a miss the remote lookup is
    called exactly once; its result is cached for ``ttl`` seconds and
    returned. Remote errors propagate unchanged: there is no stale fallback
    and no retry here.
    """

    def __init__(
        self,
        cache,
        prefix: str,
        ttl: int,
        fetch: Callable[[str], dict],
        decode: Callable[[dict], V],
        encode: Callable[[V], dict],
        kind: str = "entity",
    ):
        self.cache = cache
        self.prefix = prefix
        self.ttl = ttl
        self.fetch = fetch
        self.decode = decode
        self.encode = encode
        self.kind = kind

    def cache_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def resolve(self, key: str) -> V:
        cache_key = self.cache_key(key)

        cached = self.cache.get(cache_key)
        if cached:
            logger.info(f"Cache hit for {self.kind}: {key}")
            return self.decode(cached)

        logger.info(f"Fetching {self.kind} from service: {key}")
        value = self.decode(self.fetch(key))
        self.cache.set(cache_key, self.encode(value), self.ttl)
        return value
