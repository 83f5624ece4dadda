"""Tests for the Redis store adapter.

The redis client is mocked; these tests check command mapping and
error translation, not Redis itself.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from experiment_playground.errors import StoreUnavailableError
from experiment_playground.store import RedisStore, StoreProtocol


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def redis_store(client: MagicMock) -> RedisStore:
    return RedisStore(client)


class TestRedisStoreCommands:
    """Store operations map onto Redis commands."""

    def test_is_store_protocol(self, redis_store: RedisStore) -> None:
        assert isinstance(redis_store, StoreProtocol)

    def test_set_if_absent_uses_set_nx(
        self, redis_store: RedisStore, client: MagicMock
    ) -> None:
        """set_if_absent is SET key value NX."""
        client.set.return_value = True
        assert redis_store.set_if_absent("k", 10) is True
        client.set.assert_called_once_with("k", 10, nx=True)

    def test_set_if_absent_existing_key(
        self, redis_store: RedisStore, client: MagicMock
    ) -> None:
        """redis-py returns None when NX prevented the write."""
        client.set.return_value = None
        assert redis_store.set_if_absent("k", 10) is False

    def test_exists_returns_bool(self, redis_store: RedisStore, client: MagicMock) -> None:
        client.exists.return_value = 1
        assert redis_store.exists("k") is True
        client.exists.return_value = 0
        assert redis_store.exists("k") is False

    def test_delete_no_keys_skips_call(
        self, redis_store: RedisStore, client: MagicMock
    ) -> None:
        assert redis_store.delete() == 0
        client.delete.assert_not_called()

    def test_delete_passes_all_keys(
        self, redis_store: RedisStore, client: MagicMock
    ) -> None:
        client.delete.return_value = 2
        assert redis_store.delete("a", "b") == 2
        client.delete.assert_called_once_with("a", "b")

    def test_incr_and_sets(self, redis_store: RedisStore, client: MagicMock) -> None:
        client.incrby.return_value = 3
        client.sadd.return_value = 1
        client.scard.return_value = 7
        assert redis_store.incr("n", 2) == 3
        assert redis_store.add_member("s", "u1") is True
        assert redis_store.count_members("s") == 7
        client.incrby.assert_called_once_with("n", 2)
        client.sadd.assert_called_once_with("s", "u1")


class TestRedisStoreConnectivity:
    """Connection failures are reported, not leaked."""

    def test_connected_without_round_trip(
        self, redis_store: RedisStore, client: MagicMock
    ) -> None:
        """A healthy store reports connected without sending PING."""
        client.get.return_value = "1"
        assert redis_store.connected is True
        redis_store.get("k")
        assert redis_store.connected is True
        client.ping.assert_not_called()

    @pytest.mark.parametrize("error", [RedisConnectionError, RedisTimeoutError])
    def test_disconnected_after_failed_command(
        self, redis_store: RedisStore, client: MagicMock, error: type[Exception]
    ) -> None:
        """After a failure, connected pings once per check and never raises."""
        client.get.side_effect = error("down")
        client.ping.side_effect = error("down")
        with pytest.raises(StoreUnavailableError):
            redis_store.get("k")

        assert redis_store.connected is False
        assert client.ping.call_count == 1

    def test_reconnects_when_ping_succeeds(
        self, redis_store: RedisStore, client: MagicMock
    ) -> None:
        client.get.side_effect = RedisConnectionError("down")
        with pytest.raises(StoreUnavailableError):
            redis_store.get("k")

        client.ping.return_value = True
        assert redis_store.connected is True
        client.ping.reset_mock()
        assert redis_store.connected is True
        client.ping.assert_not_called()

    @pytest.mark.parametrize("error", [RedisConnectionError, RedisTimeoutError])
    def test_operation_errors_translated(
        self, redis_store: RedisStore, client: MagicMock, error: type[Exception]
    ) -> None:
        """Redis connection errors become StoreUnavailableError."""
        client.get.side_effect = error("down")
        with pytest.raises(StoreUnavailableError, match="GET"):
            redis_store.get("k")

    def test_from_url_decodes_responses(self) -> None:
        """from_url builds a decoding client with the given timeout."""
        with patch("experiment_playground.store.redis_store.redis.Redis.from_url") as from_url:
            store = RedisStore.from_url("redis://example:6379/1", socket_timeout=2.0)

        assert store.client is from_url.return_value
        from_url.assert_called_once_with(
            "redis://example:6379/1",
            decode_responses=True,
            socket_connect_timeout=2.0,
            socket_timeout=2.0,
        )
