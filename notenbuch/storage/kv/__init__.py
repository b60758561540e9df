__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    "join",
    "split",
]

from .memory import InMemoryKeyValueStore
from .redis import RedisKeyValueStore
from .store import join, KeyValueStore, split
