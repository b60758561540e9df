"""Key-value store protocol and path helpers."""

from __future__ import annotations

import typing as t

from notenbuch.lib.json import JSONValue

from ..errors import ValidationError

SEPARATOR = "/"
FORBIDDEN = frozenset(".#$[]/")


def split(path: str) -> list[str]:
    """Split a store path into its segments.

    Raises:
        ValidationError: if the path is empty or a segment is empty or contains
            a character the store cannot hold in a key
    """
    segments = path.strip(SEPARATOR).split(SEPARATOR)
    for segment in segments:
        if not segment:
            raise ValidationError(f"Ungültiger Pfad: {path!r}")
    return segments


def join(*segments: str) -> str:
    """Join path segments, rejecting segments that would alter the hierarchy.

    Raises:
        ValidationError: if a segment is empty or contains one of ``. # $ [ ] /``
    """
    for segment in segments:
        if not segment or FORBIDDEN.intersection(segment):
            raise ValidationError(f"Ungültiger Schlüssel: {segment!r}")
    return SEPARATOR.join(segments)


class KeyValueStore(t.Protocol):
    """Protocol for the hierarchical, schemaless store.

    Every operation is an independent read or overwrite: there are no
    transactions and no version checks, so concurrent writers to the same
    path race and the last one wins.

    Implementations raise StoreUnavailableError when the backend fails.
    """

    async def get(self, path: str) -> JSONValue:
        """Read the value at `path`, including everything below it.

        Returns:
            The stored value, or None if nothing is stored there.
        """
        ...

    async def set(self, path: str, value: JSONValue) -> None:
        """Replace the value at `path` and everything below it."""
        ...

    async def remove(self, path: str) -> None:
        """Delete the value at `path` and everything below it."""
        ...
