"""Redis backend implementation."""

from typing import Optional, List, Dict
from contextlib import asynccontextmanager

import redis.asyncio as redis
from redis.exceptions import RedisError

from newsbot.services.cache.backends.base import ICacheBackend
from newsbot.core.config import Settings
from newsbot.core.errors import StoreUnavailableError
from newsbot.core.logging import get_logger

logger = get_logger(__name__)


class RedisBackend(ICacheBackend):
    """Redis-backed key-value TTL store.

    The connection is acquired explicitly by ``connect()``; afterwards the
    client's connection pool reconnects on the next command if the link
    drops. Connection and command failures surface as
    ``StoreUnavailableError``.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        host: str = "localhost",
        port: int = 6379,
        username: Optional[str] = None,
        password: Optional[str] = None,
        connect_timeout: float = 15.0,
        socket_timeout: float = 5.0,
    ):
        """Initialize Redis backend.

        Args:
            redis_url: Redis connection URL; takes precedence over host/port.
            host: Redis host when no URL is given.
            port: Redis port when no URL is given.
            username: Optional ACL username.
            password: Optional password.
            connect_timeout: Bound on establishing a connection, in seconds.
            socket_timeout: Bound on a single command, in seconds.
        """
        self._redis_url = redis_url
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._connect_timeout = connect_timeout
        self._socket_timeout = socket_timeout
        self._client: Optional[redis.Redis] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisBackend":
        return cls(
            redis_url=settings.redis_url,
            host=settings.redis_host,
            port=settings.redis_port,
            username=settings.redis_username,
            password=settings.redis_password,
            connect_timeout=settings.redis_connect_timeout,
            socket_timeout=settings.redis_socket_timeout,
        )

    @property
    def enabled(self) -> bool:
        """Check if a client has been acquired."""
        return self._client is not None

    def _create_client(self) -> redis.Redis:
        options = {
            "encoding": "utf-8",
            "decode_responses": True,
            "socket_connect_timeout": self._connect_timeout,
            "socket_timeout": self._socket_timeout,
            "retry_on_timeout": True,
            "health_check_interval": 30,
        }
        if self._redis_url:
            return redis.from_url(self._redis_url, **options)
        return redis.Redis(
            host=self._host,
            port=self._port,
            username=self._username,
            password=self._password,
            **options,
        )

    async def connect(self) -> None:
        """Connect to Redis and verify the link with a PING."""
        if self._client is not None:
            return

        client = self._create_client()
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.error("Failed to connect to Redis: %s", e)
            await client.aclose()
            raise StoreUnavailableError(f"Redis connection failed: {e}", operation="connect") from e

        self._client = client
        logger.info("Connected to Redis")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Disconnected from Redis")

    @asynccontextmanager
    async def _command(self, operation: str, key: Optional[str] = None):
        """Yield the client, translating Redis failures into store errors."""
        if self._client is None:
            raise StoreUnavailableError("Redis client is not connected", operation=operation, key=key)

        try:
            yield self._client
        except (RedisError, OSError) as e:
            logger.error("Redis %s error for key %s: %s", operation.upper(), key, e)
            raise StoreUnavailableError(
                f"Redis {operation} failed: {e}", operation=operation, key=key
            ) from e

    async def ping(self) -> bool:
        async with self._command("ping") as client:
            return bool(await client.ping())

    async def get(self, key: str) -> Optional[str]:
        """Get a value from Redis."""
        async with self._command("get", key) as client:
            return await client.get(key)

    async def set(
        self,
        key: str,
        value: str,
        ttl: Optional[int] = None,
        only_if_absent: bool = False
    ) -> bool:
        """Set a value in Redis."""
        async with self._command("set", key) as client:
            result = await client.set(key, value, ex=ttl, nx=only_if_absent)
            return bool(result)

    async def delete(self, *keys: str) -> int:
        """Delete keys with a single DEL."""
        if not keys:
            return 0

        async with self._command("delete", keys[0] if len(keys) == 1 else None) as client:
            return int(await client.delete(*keys))

    async def exists(self, key: str) -> bool:
        """Check if a key exists in Redis."""
        async with self._command("exists", key) as client:
            return await client.exists(key) > 0

    async def ttl(self, key: str) -> int:
        async with self._command("ttl", key) as client:
            return int(await client.ttl(key))

    async def ttl_many(self, keys: List[str]) -> Dict[str, int]:
        """Fetch TTLs through one non-transactional pipeline."""
        if not keys:
            return {}

        async with self._command("ttl") as client:
            async with client.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.ttl(key)
                results = await pipe.execute()

        return {key: int(result) for key, result in zip(keys, results)}

    async def expire(self, key: str, ttl: int) -> bool:
        async with self._command("expire", key) as client:
            return bool(await client.expire(key, ttl))

    async def keys(self, pattern: str = "*") -> List[str]:
        async with self._command("keys") as client:
            return list(await client.keys(pattern))

    async def memory_usage(self) -> int:
        """Read ``used_memory`` from INFO memory."""
        async with self._command("info") as client:
            info = await client.info("memory")
        return int(info.get("used_memory", 0))
