"""In-memory implementation of the key-value store for testing."""

from __future__ import annotations

import copy
import typing as t

from notenbuch.lib.json import JSONValue

from . import tree
from .store import split


class InMemoryKeyValueStore(object):
    """In-memory key-value store for tests and local runs.

    Mirrors the behavior of the remote tree store:
    - values are copied in and out, so callers never share state with the store
    - writing None or an empty container deletes the node
    - nodes left without children disappear
    - writing below a list turns the list into an index-keyed mapping
    """

    def __init__(self, data: dict[str, JSONValue] | None = None) -> None:
        self._root: tree.Tree = copy.deepcopy(data) if data else {}

    async def get(self, path: str) -> JSONValue:
        return tree.lookup(self._root, split(path))

    async def set(self, path: str, value: JSONValue) -> None:
        if tree.is_empty(value):
            await self.remove(path)
            return
        tree.insert(self._root, split(path), value)

    async def remove(self, path: str) -> None:
        tree.delete(self._root, split(path))

    def dump(self) -> dict[str, t.Any]:
        """Snapshot of the whole tree."""
        return copy.deepcopy(self._root)
