"""Redis-backed store adapter.

Wraps a synchronous redis-py client. Connection and timeout errors are
translated to StoreUnavailableError so callers only have to handle one
exception type for an unreachable store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from experiment_playground.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (RedisConnectionError, RedisTimeoutError) as e:
        raise StoreUnavailableError(f"Redis {operation} failed: {e}") from e


class RedisStore:
    """Store adapter over a Redis server.

    Example:
        >>> store = RedisStore.from_url("redis://localhost:6379/0")
        >>> store.connected
        True

    Attributes:
        client: Underlying redis.Redis client (decode_responses=True).
    """

    def __init__(self, client: redis.Redis) -> None:
        """Initialize with an existing client.

        Args:
            client: redis.Redis instance created with decode_responses=True.
        """
        self.client = client
        self._available = True

    @classmethod
    def from_url(cls, url: str, socket_timeout: float = 5.0) -> RedisStore:
        """Create a store from a redis:// URL."""
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )
        return cls(client)

    @property
    def connected(self) -> bool:
        """False after a failed command until a PING succeeds again.

        While the last command succeeded this is a local flag with no
        round-trip.
        """
        if self._available:
            return True
        try:
            self._available = bool(self.client.ping())
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.debug("Redis ping failed: %s", e)
        return self._available

    def _call(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            with _translate_errors(operation):
                return fn()
        except StoreUnavailableError:
            self._available = False
            raise

    def set_if_absent(self, key: str, value: str | int) -> bool:
        return bool(self._call("SET NX", lambda: self.client.set(key, value, nx=True)))

    def get(self, key: str) -> str | None:
        return self._call("GET", lambda: self.client.get(key))

    def exists(self, key: str) -> bool:
        return self._call("EXISTS", lambda: self.client.exists(key)) > 0

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(self._call("DEL", lambda: self.client.delete(*keys)))

    def incr(self, key: str, amount: int = 1) -> int:
        return int(self._call("INCRBY", lambda: self.client.incrby(key, amount)))

    def add_member(self, key: str, member: str) -> bool:
        return self._call("SADD", lambda: self.client.sadd(key, member)) > 0

    def count_members(self, key: str) -> int:
        return int(self._call("SCARD", lambda: self.client.scard(key)))

    def close(self) -> None:
        """Close the underlying connection pool."""
        self.client.close()
