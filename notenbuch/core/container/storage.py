"""Storage container: the key-value store and its Redis client."""

from __future__ import annotations

import redis.asyncio as aioredis
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Provider, Resource, Singleton

from notenbuch.storage.kv import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore

from ..config.storage import RedisSettings, StorageSettings
from ..provider import LoggingProvider


def provide_redis_client(config: StorageSettings) -> aioredis.Redis | None:  # type: ignore[type-arg]
    """Create an async Redis client.

    Uses Unix socket if configured, otherwise TCP connection.
    Returns None unless the redis backend is selected.
    """
    if config.backend != "redis":
        return None
    redis = config.redis or RedisSettings()

    if redis.socket_path:
        return aioredis.Redis(
            unix_socket_path=str(redis.socket_path),
            db=redis.database,
            decode_responses=False,
        )

    return aioredis.Redis(
        host=redis.host,
        port=redis.port,
        db=redis.database,
        decode_responses=False,
    )


def provide_store(
    config: StorageSettings,
    client: aioredis.Redis | None,  # type: ignore[type-arg]
    logging: LoggingProvider,
) -> KeyValueStore:
    """Provide the key-value store implementation.

    Uses RedisKeyValueStore if Redis is configured, otherwise InMemoryKeyValueStore.
    """
    logger = logging.get_logger()
    if client is not None:
        key_prefix = (config.redis or RedisSettings()).key_prefix
        logger.info("using redis store", extra={"key_prefix": key_prefix})
        return RedisKeyValueStore(client, key_prefix=key_prefix)

    logger.warning("using in-memory store, nothing will be persisted")
    return InMemoryKeyValueStore()


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration()
    logging: Provider[LoggingProvider] = Resource()

    redis_client: Provider[aioredis.Redis | None] = Singleton(  # type: ignore[type-arg]
        provide_redis_client,
        config=config.as_(StorageSettings),
    )
    store: Provider[KeyValueStore] = Singleton(
        provide_store,
        config=config.as_(StorageSettings),
        client=redis_client,
        logging=logging,
    )
