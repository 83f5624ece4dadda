"""Key-value store adapters.

Components:
    - StoreProtocol: Interface experiments use for persistence
    - RedisStore: Adapter over a shared Redis server
    - MemoryStore: Dict-backed adapter for tests and single-process use

Example:
    >>> from experiment_playground.store import MemoryStore
    >>> store = MemoryStore()
    >>> store.set_if_absent("playground:signup:created_at", 1700000000)
    True
"""

from experiment_playground.store.memory_store import MemoryStore
from experiment_playground.store.protocol import StoreProtocol
from experiment_playground.store.redis_store import RedisStore

__all__ = [
    "StoreProtocol",
    "RedisStore",
    "MemoryStore",
]
