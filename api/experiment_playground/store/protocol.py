"""Store adapter protocol.

Defines the StoreProtocol interface that every key-value backend
must implement. Experiments only ever talk to the store through
these operations.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StoreProtocol(Protocol):
    """Protocol for the shared key-value store.

    All cross-process correctness comes from set_if_absent: the first
    writer wins and every later writer reads back the accepted value.

    Implementations raise StoreUnavailableError from any operation when
    the backend cannot be reached. ``connected`` never raises.

    Example:
        >>> store = MemoryStore()
        >>> store.set_if_absent("ns:exp:created_at", 1700000000)
        True
        >>> store.set_if_absent("ns:exp:created_at", 1800000000)
        False
        >>> store.get("ns:exp:created_at")
        '1700000000'
    """

    @property
    def connected(self) -> bool:
        """Whether the store is currently reachable."""
        ...

    def set_if_absent(self, key: str, value: str | int) -> bool:
        """Set key only if it does not exist.

        Returns:
            True if this call wrote the value.
        """
        ...

    def get(self, key: str) -> str | None:
        """Get the string value of key, or None if absent."""
        ...

    def exists(self, key: str) -> bool:
        """Check whether key exists."""
        ...

    def delete(self, *keys: str) -> int:
        """Delete keys.

        Returns:
            Number of keys that existed and were removed.
        """
        ...

    def incr(self, key: str, amount: int = 1) -> int:
        """Increment an integer counter, creating it at zero."""
        ...

    def add_member(self, key: str, member: str) -> bool:
        """Add member to the set stored at key.

        Returns:
            True if the member was not already present.
        """
        ...

    def count_members(self, key: str) -> int:
        """Number of members in the set stored at key."""
        ...
