"""Tests for notenbuch.storage.kv.RedisKeyValueStore against a fake client."""

from __future__ import annotations

import re
import typing as t

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from notenbuch.storage.errors import StoreUnavailableError
from notenbuch.storage.kv import RedisKeyValueStore


def _glob(pattern: str) -> re.Pattern[str]:
    parts = re.split(r"(\\.|\*|\?)", pattern)
    rx = ""
    for part in parts:
        if part == "*":
            rx += ".*"
        elif part == "?":
            rx += "."
        elif part.startswith("\\") and len(part) == 2:
            rx += re.escape(part[1])
        else:
            rx += re.escape(part)
    return re.compile(rx + r"\Z")


class FakePipeline(object):
    def __init__(self, client: FakeRedis) -> None:
        self.client = client
        self.ops: list[tuple[str, tuple[t.Any, ...]]] = []

    async def __aenter__(self) -> FakePipeline:
        return self

    async def __aexit__(self, *exc: t.Any) -> None:
        return None

    def set(self, key: str, value: str) -> None:
        self.ops.append(("set", (key, value)))

    def delete(self, *keys: str) -> None:
        self.ops.append(("delete", keys))

    async def execute(self) -> None:
        for op, args in self.ops:
            await getattr(self.client, op)(*args)


class FakeRedis(object):
    """Just the commands the store uses, over a dict of bytes values."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.down = False

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("connection refused")

    async def get(self, key: str) -> bytes | None:
        self._check()
        return self.data.get(key)

    async def mget(self, keys: list[str]) -> list[bytes | None]:
        self._check()
        return [self.data.get(k) for k in keys]

    async def set(self, key: str, value: str) -> None:
        self._check()
        self.data[key] = value.encode("utf-8")

    async def delete(self, *keys: str) -> None:
        self._check()
        for k in keys:
            self.data.pop(k, None)

    async def scan_iter(self, match: str, count: int) -> t.AsyncIterator[bytes]:
        self._check()
        rx = _glob(match)
        for k in list(self.data):
            if rx.match(k):
                yield k.encode("utf-8")

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)


@pytest.fixture
def client() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_store(client: FakeRedis) -> RedisKeyValueStore:
    return RedisKeyValueStore(client, key_prefix="nb:")  # type: ignore[arg-type]


class TestRedisKeyValueStore(object):
    """Tests for RedisKeyValueStore."""

    @pytest.mark.anyio
    async def test_documents_per_path(self, client: FakeRedis, redis_store: RedisKeyValueStore) -> None:
        """Each write is a JSON document under the prefixed path."""
        await redis_store.set("templates/Lesetest", {"name": "Lesetest", "schoolSubject": "Deutsch"})

        assert client.data == {"nb:templates/Lesetest": '{"name": "Lesetest", "schoolSubject": "Deutsch"}'.encode()}

    @pytest.mark.anyio
    async def test_parent_read_assembles_children(self, redis_store: RedisKeyValueStore) -> None:
        await redis_store.set("grades/Deutsch/T/Anna", {"grades": {"Lesen": "gut"}})
        await redis_store.set("grades/Deutsch/T/Ben", {"grades": {"Lesen": "sehr gut"}})

        assert await redis_store.get("grades/Deutsch/T") == {
            "Anna": {"grades": {"Lesen": "gut"}},
            "Ben": {"grades": {"Lesen": "sehr gut"}},
        }
        assert await redis_store.get("grades/Mathe") is None

    @pytest.mark.anyio
    async def test_child_read_from_ancestor_document(self, redis_store: RedisKeyValueStore) -> None:
        await redis_store.set("students", [{"name": "Anna", "Klasse": "1A"}])

        assert await redis_store.get("students/0/name") == "Anna"

    @pytest.mark.anyio
    async def test_write_below_ancestor_document(
        self, client: FakeRedis, redis_store: RedisKeyValueStore
    ) -> None:
        """A write below a stored document updates that document."""
        await redis_store.set("templates/T", {"name": "T", "schoolSubject": "Deutsch"})
        await redis_store.set("templates/T/totalPoints", 15)

        assert list(client.data) == ["nb:templates/T"]
        assert await redis_store.get("templates/T") == {"name": "T", "schoolSubject": "Deutsch", "totalPoints": 15}

    @pytest.mark.anyio
    async def test_set_replaces_descendants(self, client: FakeRedis, redis_store: RedisKeyValueStore) -> None:
        await redis_store.set("templates/A", {"name": "A"})
        await redis_store.set("templates", {"B": {"name": "B"}})

        assert list(client.data) == ["nb:templates"]
        assert await redis_store.get("templates") == {"B": {"name": "B"}}

    @pytest.mark.anyio
    async def test_remove(self, client: FakeRedis, redis_store: RedisKeyValueStore) -> None:
        await redis_store.set("templates/A", {"name": "A", "schoolSubject": "Deutsch"})
        await redis_store.set("templates/B", {"name": "B"})

        await redis_store.remove("templates/A/schoolSubject")
        await redis_store.remove("templates/B")

        assert await redis_store.get("templates") == {"A": {"name": "A"}}

    @pytest.mark.anyio
    async def test_empty_value_removes(self, client: FakeRedis, redis_store: RedisKeyValueStore) -> None:
        await redis_store.set("subjects", ["Deutsch"])
        await redis_store.set("subjects", [])

        assert client.data == {}

    @pytest.mark.anyio
    async def test_umlauts_are_kept(self, redis_store: RedisKeyValueStore) -> None:
        await redis_store.set("grades/Deutsch/T/Anna", {"grades": {"Lesen": "genügend"}})

        assert await redis_store.get("grades/Deutsch/T/Anna/grades/Lesen") == "genügend"

    @pytest.mark.anyio
    async def test_failure_is_store_unavailable(self, client: FakeRedis, redis_store: RedisKeyValueStore) -> None:
        """Redis errors surface as StoreUnavailableError."""
        client.down = True

        with pytest.raises(StoreUnavailableError) as exc_info:
            await redis_store.get("subjects")

        assert exc_info.value.operation == "get"
        assert exc_info.value.path == "subjects"
