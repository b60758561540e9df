"""Redis implementation of the key-value store."""

from __future__ import annotations

import contextlib
import logging
import re
import typing as t

import redis.asyncio as aioredis
from redis.exceptions import RedisError

import notenbuch.lib.json as json
from notenbuch.lib.json import JSONValue

from ..errors import StoreUnavailableError
from . import tree
from .store import SEPARATOR, split

logger = logging.getLogger(__name__)

_glob_special = re.compile(r"([*?\[\]\\])")


class RedisKeyValueStore(object):
    """Key-value store kept in Redis.

    Each written value is one JSON document under ``<prefix><path>``. The tree
    is reconstructed on read:
    - a read first looks for a document stored at an ancestor of the path and
      extracts the nested value from it
    - otherwise it returns the document stored at the path itself
    - otherwise it assembles all documents stored below the path

    Writes below an existing ancestor document rewrite that document, and a
    write at a path replaces every document stored below it. Like the remote
    tree store there is no locking across clients: the last write wins.
    """

    def __init__(
        self,
        client: aioredis.Redis,  # type: ignore[type-arg]
        key_prefix: str = "notenbuch:",
        scan_count: int = 500,
    ) -> None:
        """Initialize the Redis key-value store.

        Args:
            client: Async Redis client.
            key_prefix: Prefix for every key written by the store.
            scan_count: Batch size hint for SCAN when assembling subtrees.
        """
        self._client = client
        self._key_prefix = key_prefix
        self._scan_count = scan_count

    def _key(self, segments: t.Sequence[str]) -> str:
        return self._key_prefix + SEPARATOR.join(segments)

    @contextlib.asynccontextmanager
    async def _guard(self, operation: str, path: str) -> t.AsyncIterator[None]:
        try:
            yield
        except RedisError as e:
            logger.error(
                "key-value store operation failed",
                extra={"operation": operation, "path": path, "error": str(e)},
            )
            raise StoreUnavailableError(operation, path, e) from e

    async def _ancestor(self, segments: list[str]) -> tuple[int, JSONValue] | None:
        """Find the document stored closest to the root above `segments`.

        Returns:
            The number of segments of the ancestor path and its document, or
            None if no proper ancestor holds a document.
        """
        if len(segments) < 2:
            return None
        keys = [self._key(segments[:i]) for i in range(1, len(segments))]
        for i, raw in enumerate(await self._client.mget(keys)):
            if raw is not None:
                return i + 1, json.loads(raw)
        return None

    async def _descendant_keys(self, segments: list[str]) -> list[str]:
        pattern = _glob_special.sub(r"\\\1", self._key(segments)) + SEPARATOR + "*"
        keys: list[str] = []
        async for k in self._client.scan_iter(match=pattern, count=self._scan_count):
            keys.append(k.decode("utf-8") if isinstance(k, bytes) else str(k))
        return keys

    async def get(self, path: str) -> JSONValue:
        segments = split(path)
        async with self._guard("get", path):
            if found := await self._ancestor(segments):
                depth, doc = found
                return tree.lookup(doc, segments[depth:])

            raw = await self._client.get(self._key(segments))
            if raw is not None:
                return json.loads(raw)

            keys = await self._descendant_keys(segments)
            if not keys:
                return None
            assembled: tree.Tree = {}
            base = len(self._key(segments)) + len(SEPARATOR)
            for k, raw in zip(keys, await self._client.mget(keys)):
                if raw is not None:
                    tree.insert(assembled, k[base:].split(SEPARATOR), json.loads(raw))
            return assembled or None

    async def set(self, path: str, value: JSONValue) -> None:
        if tree.is_empty(value):
            await self.remove(path)
            return

        segments = split(path)
        async with self._guard("set", path):
            if found := await self._ancestor(segments):
                depth, raw = found
                doc = tree.as_tree(raw)
                tree.insert(doc, segments[depth:], value)
                await self._client.set(self._key(segments[:depth]), json.dumps(doc))
                return

            stale = await self._descendant_keys(segments)
            async with self._client.pipeline(transaction=True) as pipe:
                if stale:
                    pipe.delete(*stale)
                pipe.set(self._key(segments), json.dumps(value))
                await pipe.execute()

    async def remove(self, path: str) -> None:
        segments = split(path)
        async with self._guard("remove", path):
            if found := await self._ancestor(segments):
                depth, raw = found
                doc = tree.as_tree(raw)
                if tree.delete(doc, segments[depth:]):
                    key = self._key(segments[:depth])
                    if doc:
                        await self._client.set(key, json.dumps(doc))
                    else:
                        await self._client.delete(key)
                return

            keys = [self._key(segments), *await self._descendant_keys(segments)]
            await self._client.delete(*keys)
