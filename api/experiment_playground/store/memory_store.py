"""In-process store adapter.

Dict-backed implementation of StoreProtocol for tests, validation runs
and single-process use. Setting ``connected = False`` simulates an
outage: every operation then raises StoreUnavailableError.
"""

from __future__ import annotations

from experiment_playground.errors import StoreUnavailableError


class MemoryStore:
    """Store adapter keeping everything in a dict.

    Sets are stored as Python sets, everything else as strings, matching
    what a Redis client with decode_responses=True returns.
    """

    def __init__(self) -> None:
        self.connected = True
        self._data: dict[str, str | set[str]] = {}

    def _check(self) -> None:
        if not self.connected:
            raise StoreUnavailableError("Memory store is disconnected")

    def set_if_absent(self, key: str, value: str | int) -> bool:
        self._check()
        if key in self._data:
            return False
        self._data[key] = str(value)
        return True

    def get(self, key: str) -> str | None:
        self._check()
        value = self._data.get(key)
        if isinstance(value, set):
            raise TypeError(f"Key {key} holds a set, not a string")
        return value

    def exists(self, key: str) -> bool:
        self._check()
        return key in self._data

    def delete(self, *keys: str) -> int:
        self._check()
        removed = 0
        for key in keys:
            if self._data.pop(key, None) is not None:
                removed += 1
        return removed

    def incr(self, key: str, amount: int = 1) -> int:
        self._check()
        current = self._data.get(key, "0")
        if isinstance(current, set):
            raise TypeError(f"Key {key} holds a set, not a counter")
        value = int(current) + amount
        self._data[key] = str(value)
        return value

    def add_member(self, key: str, member: str) -> bool:
        self._check()
        members = self._data.setdefault(key, set())
        if not isinstance(members, set):
            raise TypeError(f"Key {key} does not hold a set")
        if member in members:
            return False
        members.add(member)
        return True

    def count_members(self, key: str) -> int:
        self._check()
        members = self._data.get(key)
        if members is None:
            return 0
        if not isinstance(members, set):
            raise TypeError(f"Key {key} does not hold a set")
        return len(members)

    def keys(self) -> list[str]:
        """All stored keys, sorted (debugging helper)."""
        return sorted(self._data)
