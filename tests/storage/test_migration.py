"""Tests for notenbuch.storage.migration module."""

from __future__ import annotations

import typing as t

import pytest

from notenbuch.storage.errors import StoreUnavailableError
from notenbuch.storage.kv import InMemoryKeyValueStore
from notenbuch.storage.migration import migrate, MigrationOutcome


class TestMigrate(object):
    """Tests for migrate()."""

    @pytest.mark.anyio
    async def test_copies_and_normalizes(self) -> None:
        """Plain names are written as records with an empty class."""
        store = InMemoryKeyValueStore({"students_legacy": ["Anna", "Ben"]})

        result = await migrate(store=store)

        assert result.outcome is MigrationOutcome.Migrated
        assert result.count == 2
        assert await store.get("students") == [{"name": "Anna", "Klasse": ""}, {"name": "Ben", "Klasse": ""}]

    @pytest.mark.anyio
    async def test_keyed_mapping_source(self) -> None:
        """A keyed mapping of records migrates into a list."""
        store = InMemoryKeyValueStore({"students_legacy": {"x": {"name": "Anna", "class": "1A"}}})

        await migrate(store=store)

        assert await store.get("students") == [{"name": "Anna", "Klasse": "1A"}]

    @pytest.mark.anyio
    async def test_source_is_never_deleted(self) -> None:
        """The legacy roster stays where it was."""
        store = InMemoryKeyValueStore({"students_legacy": ["Anna"]})

        await migrate(store=store)

        assert await store.get("students_legacy") == ["Anna"]

    @pytest.mark.anyio
    async def test_twice_equals_once(self) -> None:
        """A second run changes nothing."""
        store = InMemoryKeyValueStore({"students_legacy": ["Anna", {"name": "Ben", "Klasse": "1B"}]})

        await migrate(store=store)
        once = store.dump()
        second = await migrate(store=store)

        assert second.outcome is MigrationOutcome.AlreadyMigrated
        assert store.dump() == once

    @pytest.mark.anyio
    async def test_existing_target_is_kept(self) -> None:
        """A current roster is never overwritten."""
        store = InMemoryKeyValueStore({"students_legacy": ["Anna"], "students": [{"name": "Zoe", "Klasse": "2A"}]})

        result = await migrate(store=store)

        assert result.outcome is MigrationOutcome.AlreadyMigrated
        assert await store.get("students") == [{"name": "Zoe", "Klasse": "2A"}]

    @pytest.mark.anyio
    async def test_missing_source(self, store: InMemoryKeyValueStore) -> None:
        """Without a legacy roster nothing is written."""
        result = await migrate(store=store)

        assert result.outcome is MigrationOutcome.NothingToMigrate
        assert store.dump() == {}

    @pytest.mark.anyio
    async def test_unreadable_source(self) -> None:
        """A legacy roster without a readable student writes nothing."""
        store = InMemoryKeyValueStore({"students_legacy": [{"Klasse": "1A"}]})

        result = await migrate(store=store)

        assert result.outcome is MigrationOutcome.NothingToMigrate
        assert await store.get("students") is None

    @pytest.mark.anyio
    async def test_store_failure_propagates(self, failing_store: t.Any) -> None:
        failing_store.fail = True

        with pytest.raises(StoreUnavailableError):
            await migrate(store=failing_store)
