from __future__ import annotations

import typing as t


class Sentinel(object):
    """Marker value; each subclass has exactly one instance, which is falsy."""

    _instances: t.ClassVar[dict[type, Sentinel]] = {}

    def __new__(cls) -> t.Self:
        if cls not in Sentinel._instances:
            Sentinel._instances[cls] = super().__new__(cls)
        return t.cast(t.Self, Sentinel._instances[cls])

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class NotReady(Sentinel):
    """Stands in for a container value that is only known after boot."""
